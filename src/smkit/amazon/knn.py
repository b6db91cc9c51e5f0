"""k-nearest-neighbors classification and regression."""
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
from .validation import ge, isin


class KNN(AmazonAlgorithmEstimatorBase):
    """An index-based algorithm. It uses a non-parametric method for classification or regression.

    For classification problems, the algorithm queries the k points that are closest to the sample point and
    returns the most frequently used label of their class as the predicted label. For regression problems, the
    algorithm queries the k closest points to the sample point and returns the average of their feature values
    as the predicted value.
    """

    repo_name = "knn"
    repo_version = "1"

    k = hp("k", ge(1), "An integer greater than 0", int)
    sample_size = hp("sample_size", ge(1), "An integer greater than 0", int)
    predictor_type = hp(
        "predictor_type", isin("classifier", "regressor"), 'One of "classifier" or "regressor"', str
    )
    dimension_reduction_target = hp(
        "dimension_reduction_target",
        ge(1),
        "An integer greater than 0 and less than feature_dim",
        int,
    )
    dimension_reduction_type = hp("dimension_reduction_type", isin("sign", "fjlt"), 'One of "sign" or "fjlt"', str)
    index_metric = hp(
        "index_metric",
        isin("COSINE", "INNER_PRODUCT", "L2"),
        'One of "COSINE", "INNER_PRODUCT", "L2"',
        str,
    )
    index_type = hp(
        "index_type",
        isin("faiss.Flat", "faiss.IVFFlat", "faiss.IVFPQ"),
        'One of "faiss.Flat", "faiss.IVFFlat", "faiss.IVFPQ"',
        str,
    )
    faiss_index_ivf_nlists = hp("faiss_index_ivf_nlists", (), '"auto" or an integer greater than 0', str)
    faiss_index_pq_m = hp("faiss_index_pq_m", ge(1), "An integer greater than 0", int)

    def __init__(
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        k: Optional[int] = None,
        sample_size: Optional[int] = None,
        predictor_type: Optional[str] = None,
        dimension_reduction_type: Optional[str] = None,
        dimension_reduction_target: Optional[int] = None,
        index_type: Optional[str] = None,
        index_metric: Optional[str] = None,
        faiss_index_ivf_nlists: Optional[str] = None,
        faiss_index_pq_m: Optional[int] = None,
        **kwargs,
    ):
        """k-nearest neighbors (KNN) is :class:`Estimator` used for classification and regression.

        After this Estimator is fit, model data is stored in S3. The model may be deployed to an Amazon
        SageMaker Endpoint by invoking ``deploy``, which returns a :class:`~smkit.amazon.knn.KNNPredictor`.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            k (int): Required. Number of nearest neighbors.
            sample_size (int): Required. Number of data points to be sampled from the training data set.
            predictor_type (str): Required. Type of inference to use on the data's labels, allowed values are
                'classifier' and 'regressor'.
            dimension_reduction_type (str): Optional. Type of dimension reduction technique to use. Valid
                values: "sign", "fjlt"
            dimension_reduction_target (int): Optional. Target dimension to reduce to. Required when
                ``dimension_reduction_type`` is set.
            index_type (str): Optional. Type of index to use. Valid values are "faiss.Flat", "faiss.IVFFlat",
                "faiss.IVFPQ".
            index_metric (str): Optional. Distance metric to measure between points when finding nearest
                neighbors. Valid values are "COSINE", "INNER_PRODUCT", "L2"
            faiss_index_ivf_nlists (str): Optional. Number of centroids to construct in the index if
                ``index_type`` is "faiss.IVFFlat" or "faiss.IVFPQ".
            faiss_index_pq_m (int): Optional. Number of vector sub-components to construct in the index, if
                ``index_type`` is "faiss.IVFPQ".
            **kwargs: base class keyword argument values.

        Raises:
            ValueError: if ``dimension_reduction_type`` is set without ``dimension_reduction_target``.
        """
        super().__init__(role, instance_count, instance_type, **kwargs)
        self.k = k
        self.sample_size = sample_size
        self.predictor_type = predictor_type
        self.dimension_reduction_type = dimension_reduction_type
        self.dimension_reduction_target = dimension_reduction_target
        self.index_type = index_type
        self.index_metric = index_metric
        self.faiss_index_ivf_nlists = faiss_index_ivf_nlists
        self.faiss_index_pq_m = faiss_index_pq_m
        if dimension_reduction_type and not dimension_reduction_target:
            raise ValueError('"dimension_reduction_target" is required when "dimension_reduction_type" is set.')

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "KNNModel":
        """Return a :class:`~smkit.amazon.knn.KNNModel` referencing the latest s3 model data."""
        return KNNModel(
            self.model_data,
            self.role,
            sagemaker_session=self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )


class KNNPredictor(Predictor):
    """Performs classification or regression prediction from input vectors.

    ``predict()`` returns a list of :class:`~smkit.amazon.record_pb2.Record` objects, one for each row in the
    input ``ndarray``. The prediction is stored in the ``"predicted_label"`` key of the ``Record.label`` field.
    """

    def __init__(
        self,
        endpoint_name: str,
        sagemaker_session: Optional[Session] = None,
        serializer=RecordSerializer(),
        deserializer=RecordDeserializer(),
    ):
        super().__init__(endpoint_name, sagemaker_session, serializer=serializer, deserializer=deserializer)


class KNNModel(Model):
    """Reference S3 model data created by KNN estimator."""

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            KNN.repo_name,
            sagemaker_session.boto_region_name,
            version=KNN.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, KNNPredictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=KNNPredictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
