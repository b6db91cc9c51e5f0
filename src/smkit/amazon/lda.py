"""Latent Dirichlet Allocation topic modelling."""
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
from .validation import gt


class LDA(AmazonAlgorithmEstimatorBase):
    """An unsupervised learning algorithm attempting to describe data as distinct categories.

    LDA is most commonly used to discover a user-specified number of topics shared by documents within a text
    corpus. Here each observation is a document, the features are the presence (or occurrence count) of each
    word, and the categories are the topics.
    """

    repo_name = "lda"
    repo_version = "1"

    num_topics = hp("num_topics", gt(0), "An integer greater than zero", int)
    alpha0 = hp("alpha0", gt(0), "A positive float", float)
    max_restarts = hp("max_restarts", gt(0), "An integer greater than zero", int)
    max_iterations = hp("max_iterations", gt(0), "An integer greater than zero", int)
    tol = hp("tol", gt(0), "A positive float", float)

    def __init__(
        self,
        role: str,
        instance_type: Optional[str] = None,
        num_topics: Optional[int] = None,
        alpha0: Optional[float] = None,
        max_restarts: Optional[int] = None,
        max_iterations: Optional[int] = None,
        tol: Optional[float] = None,
        **kwargs,
    ):
        """Latent Dirichlet Allocation (LDA) is :class:`Estimator` used for unsupervised learning.

        LDA only trains on a single instance: the instance count is fixed at 1.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            num_topics (int): The number of topics for LDA to find within the data.
            alpha0 (float): Optional. Initial guess for the concentration parameter
            max_restarts (int): Optional. The number of restarts to perform during the Alternating Least
                Squares (ALS) spectral decomposition phase of the algorithm.
            max_iterations (int): Optional. The maximum number of iterations to perform during the ALS phase
                of the algorithm.
            tol (float): Optional. Target error tolerance for the ALS phase of the algorithm.
            **kwargs: base class keyword argument values.

        Raises:
            ValueError: if ``instance_count`` is passed with a value other than 1.
        """
        # this algorithm only supports single instance training
        if kwargs.pop("instance_count", None) not in (None, 1):
            raise ValueError("LDA only supports single instance training.")
        super().__init__(role, 1, instance_type, **kwargs)
        self.num_topics = num_topics
        self.alpha0 = alpha0
        self.max_restarts = max_restarts
        self.max_iterations = max_iterations
        self.tol = tol

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "LDAModel":
        """Return a :class:`~smkit.amazon.lda.LDAModel` referencing the latest s3 model data."""
        return LDAModel(
            self.model_data,
            self.role,
            sagemaker_session=self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
        # mini_batch_size is required, prevent explicit calls with None
        if mini_batch_size is None:
            raise ValueError("mini_batch_size must be set")

        super()._prepare_for_training(records, mini_batch_size=mini_batch_size, job_name=job_name)


class LDAPredictor(Predictor):
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


class LDAModel(Model):
    """Reference LDA s3 model data."""

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            LDA.repo_name,
            sagemaker_session.boto_region_name,
            version=LDA.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, LDAPredictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=LDAPredictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
