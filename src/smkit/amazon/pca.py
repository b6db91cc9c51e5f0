"""Principal component analysis."""
from typing import Optional

from .. import image_uris
from ..model import Model
from ..predictor import Predictor
from ..session import Session
from ..utils import pop_out_unused_kwarg
from ..vpc_utils import VPC_CONFIG_DEFAULT
from .amazon_estimator import AmazonAlgorithmEstimatorBase
from .common import RecordDeserializer, RecordSerializer
from .hyperparameter import Hyperparameter as hp  # noqa: N813
from .validation import gt, isin


class PCA(AmazonAlgorithmEstimatorBase):
    """An unsupervised machine learning algorithm to reduce feature dimensionality.

    As a result, number of features within a dataset is reduced but the dataset still retain as much
    information as possible.
    """

    repo_name = "pca"
    repo_version = "1"

    DEFAULT_MINI_BATCH_SIZE = 500

    num_components = hp("num_components", gt(0), "Value must be an integer greater than zero", int)
    algorithm_mode = hp(
        "algorithm_mode",
        isin("regular", "randomized"),
        'Value must be one of "regular" and "randomized"',
        str,
    )
    subtract_mean = hp(name="subtract_mean", validation_message="Value must be a boolean", data_type=bool)
    extra_components = hp(
        name="extra_components",
        validation_message="Value must be an integer greater than or equal to 0, or -1.",
        data_type=int,
    )

    def __init__(
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        num_components: Optional[int] = None,
        algorithm_mode: Optional[str] = None,
        subtract_mean: Optional[bool] = None,
        extra_components: Optional[int] = None,
        **kwargs,
    ):
        """A Principal Components Analysis (PCA) :class:`~smkit.amazon.AmazonAlgorithmEstimatorBase`.

        This Estimator may be fit via calls to :meth:`~smkit.amazon.AmazonAlgorithmEstimatorBase.fit`. It
        requires Amazon Record protobuf serialized data to be stored in S3; use
        :meth:`~smkit.amazon.AmazonAlgorithmEstimatorBase.record_set` to upload a 2-dimensional numpy array.

        After this Estimator is fit, model data is stored in S3. The model may be deployed to an Amazon
        SageMaker Endpoint by invoking ``deploy``, which returns a :class:`~smkit.amazon.pca.PCAPredictor` that
        can be used to project input vectors to the learned lower-dimensional representation.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            num_components (int): The number of principal components. Must be greater than zero.
            algorithm_mode (str): Mode for computing the principal components. One of 'regular' or
                'randomized'.
            subtract_mean (bool): Whether the data should be unbiased both during train and at inference.
            extra_components (int): As the value grows larger, the solution becomes more accurate but the
                runtime and memory consumption increase linearly. If this value is unset or set to -1, then a
                default value equal to the maximum of 10 and num_components will be used. Valid for randomized
                mode only.
            **kwargs: base class keyword argument values.
        """
        super().__init__(role, instance_count, instance_type, **kwargs)
        self.num_components = num_components
        self.algorithm_mode = algorithm_mode
        self.subtract_mean = subtract_mean
        self.extra_components = extra_components

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "PCAModel":
        """Return a :class:`~smkit.amazon.pca.PCAModel` referencing the latest s3 model data."""
        return PCAModel(
            self.model_data,
            self.role,
            sagemaker_session=self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
        """Set hyperparameters needed for training.

        ``mini_batch_size`` defaults to the records per instance, capped at ``DEFAULT_MINI_BATCH_SIZE``.
        """
        num_records = None
        if isinstance(records, list):
            for record in records:
                if record.channel == "train":
                    num_records = record.num_records
                    break
            if num_records is None:
                raise ValueError("Must provide train channel.")
        else:
            num_records = records.num_records

        # mini_batch_size is a required parameter
        default_mini_batch_size = min(self.DEFAULT_MINI_BATCH_SIZE, max(1, int(num_records / self.instance_count)))
        use_mini_batch_size = mini_batch_size or default_mini_batch_size

        super()._prepare_for_training(records=records, mini_batch_size=use_mini_batch_size, job_name=job_name)


class PCAPredictor(Predictor):
    """Transforms input vectors to lower-dimesional representations.

    The lower dimension vector result is stored in the ``projection`` key of the ``Record.label`` field.
    """

    def __init__(
        self,
        endpoint_name: str,
        sagemaker_session: Optional[Session] = None,
        serializer=RecordSerializer(),
        deserializer=RecordDeserializer(),
    ):
        super().__init__(endpoint_name, sagemaker_session, serializer=serializer, deserializer=deserializer)


class PCAModel(Model):
    """Reference PCA s3 model data."""

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            PCA.repo_name,
            sagemaker_session.boto_region_name,
            version=PCA.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, PCAPredictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=PCAPredictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
