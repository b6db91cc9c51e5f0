"""Random Cut Forest anomaly detection."""
from typing import List, Optional

from .. import image_uris
from ..model import Model
from ..predictor import Predictor
from ..session import Session
from ..utils import pop_out_unused_kwarg
from ..vpc_utils import VPC_CONFIG_DEFAULT
from .amazon_estimator import AmazonAlgorithmEstimatorBase
from .common import RecordDeserializer, RecordSerializer
from .hyperparameter import Hyperparameter as hp  # noqa: N813
from .validation import ge, le


class RandomCutForest(AmazonAlgorithmEstimatorBase):
    """An unsupervised algorithm for detecting anomalous data points within a data set.

    These are observations which diverge from otherwise well-structured or patterned data. Anomalies can
    manifest as unexpected spikes in time series data, breaks in periodicity, or unclassifiable data points.
    """

    repo_name = "randomcutforest"
    repo_version = "1"

    MINI_BATCH_SIZE = 1000

    eval_metrics = hp(
        name="eval_metrics",
        validation_message='A comma separated list of "accuracy" or "precision_recall_fscore"',
        data_type=list,
    )

    num_trees = hp("num_trees", (ge(50), le(1000)), "An integer in [50, 1000]", int)
    num_samples_per_tree = hp("num_samples_per_tree", (ge(1), le(2048)), "An integer in [1, 2048]", int)
    feature_dim = hp("feature_dim", (ge(1), le(10000)), "An integer in [1, 10000]", int)

    def __init__(
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        num_samples_per_tree: Optional[int] = None,
        num_trees: Optional[int] = None,
        eval_metrics: Optional[List[str]] = None,
        **kwargs,
    ):
        """An `Estimator` class implementing a Random Cut Forest.

        Typically used for anomaly detection, this Estimator may be fit via calls to
        :meth:`~smkit.amazon.AmazonAlgorithmEstimatorBase.fit`. It requires Amazon Record protobuf serialized
        data to be stored in S3. The ``deploy`` call returns a
        :class:`~smkit.amazon.randomcutforest.RandomCutForestPredictor` which scores input vectors.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            num_samples_per_tree (int): Optional. The number of samples used to build each tree in the forest.
                The total number of samples drawn from the train dataset is num_trees * num_samples_per_tree.
            num_trees (int): Optional. The number of trees used in the forest.
            eval_metrics (list): Optional. JSON list of metrics types to be used for reporting the score for
                the model. Allowed values are "accuracy", "precision_recall_fscore": positive and negative
                precision, recall, and f1 scores. If test data is provided, the score shall be reported in terms
                of all requested metrics.
            **kwargs: base class keyword argument values.
        """
        super().__init__(role, instance_count, instance_type, **kwargs)
        self.num_samples_per_tree = num_samples_per_tree
        self.num_trees = num_trees
        self.eval_metrics = eval_metrics

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "RandomCutForestModel":
        """Return a :class:`~smkit.amazon.randomcutforest.RandomCutForestModel`."""
        return RandomCutForestModel(
            self.model_data,
            self.role,
            sagemaker_session=self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
        if mini_batch_size is None:
            mini_batch_size = self.MINI_BATCH_SIZE
        elif mini_batch_size != self.MINI_BATCH_SIZE:
            raise ValueError(f"Random Cut Forest uses a fixed mini_batch_size of {self.MINI_BATCH_SIZE}")

        super()._prepare_for_training(records, mini_batch_size=mini_batch_size, job_name=job_name)


class RandomCutForestPredictor(Predictor):
    """Assigns an anomaly score to each of the datapoints provided.

    The anomaly score is stored in the ``"score"`` key of the ``Record.label`` field.
    """

    def __init__(
        self,
        endpoint_name: str,
        sagemaker_session: Optional[Session] = None,
        serializer=RecordSerializer(),
        deserializer=RecordDeserializer(),
    ):
        super().__init__(endpoint_name, sagemaker_session, serializer=serializer, deserializer=deserializer)


class RandomCutForestModel(Model):
    """Reference RandomCutForest s3 model data."""

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            RandomCutForest.repo_name,
            sagemaker_session.boto_region_name,
            version=RandomCutForest.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, RandomCutForestPredictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=RandomCutForestPredictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
