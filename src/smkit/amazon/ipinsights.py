"""IP Insights: embeddings of entity and IPv4 address pairs."""
from typing import Optional

from .. import image_uris
from ..deserializers import JSONDeserializer
from ..model import Model
from ..predictor import Predictor
from ..serializers import CSVSerializer
from ..session import Session
from ..utils import pop_out_unused_kwarg
from ..vpc_utils import VPC_CONFIG_DEFAULT
from .amazon_estimator import AmazonAlgorithmEstimatorBase
from .hyperparameter import Hyperparameter as hp  # noqa: N813
from .validation import ge, le


class IPInsights(AmazonAlgorithmEstimatorBase):
    """An unsupervised learning algorithm that learns the usage patterns for IPv4 addresses.

    It is designed to capture associations between IPv4 addresses and various entities, such as user IDs or
    account numbers.
    """

    repo_name = "ipinsights"
    repo_version = "1"

    num_entity_vectors = hp("num_entity_vectors", (ge(1), le(250000000)), "An integer in [1, 250000000]", int)
    vector_dim = hp("vector_dim", (ge(4), le(4096)), "An integer in [4, 4096]", int)

    batch_metrics_publish_interval = hp(
        "batch_metrics_publish_interval", ge(1), "An integer greater than 0", int
    )
    epochs = hp("epochs", ge(1), "An integer greater than 0", int)
    learning_rate = hp("learning_rate", (ge(1e-6), le(10.0)), "A float in [1e-6, 10.0]", float)
    num_ip_encoder_layers = hp("num_ip_encoder_layers", (ge(0), le(100)), "An integer in [0, 100]", int)
    random_negative_sampling_rate = hp(
        "random_negative_sampling_rate", (ge(0), le(500)), "An integer in [0, 500]", int
    )
    shuffled_negative_sampling_rate = hp(
        "shuffled_negative_sampling_rate", (ge(0), le(500)), "An integer in [0, 500]", int
    )
    weight_decay = hp("weight_decay", (ge(0.0), le(10.0)), "A float in [0.0, 10.0]", float)

    def __init__(
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        num_entity_vectors: Optional[int] = None,
        vector_dim: Optional[int] = None,
        batch_metrics_publish_interval: Optional[int] = None,
        epochs: Optional[int] = None,
        learning_rate: Optional[float] = None,
        num_ip_encoder_layers: Optional[int] = None,
        random_negative_sampling_rate: Optional[int] = None,
        shuffled_negative_sampling_rate: Optional[int] = None,
        weight_decay: Optional[float] = None,
        **kwargs,
    ):
        """IP Insights is an unsupervised algorithm that learns usage patterns of IP addresses.

        This Estimator may be fit via calls to :meth:`~smkit.amazon.AmazonAlgorithmEstimatorBase.fit`. It
        requires CSV data to be stored in S3.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.p2.xlarge'.
            num_entity_vectors (int): Required. The number of embeddings to train for entities accessing online
                resources. We recommend 2x the total number of unique entity IDs.
            vector_dim (int): Required. The size of the embedding vectors for both entity and IP addresses.
            batch_metrics_publish_interval (int): Optional. The period at which to publish metrics (batches).
            epochs (int): Optional. Maximum number of passes over the training data.
            learning_rate (float): Optional. Learning rate for the optimizer.
            num_ip_encoder_layers (int): Optional. The number of fully-connected layers to encode IP address
                embedding.
            random_negative_sampling_rate (int): Optional. The ratio of random negative samples to draw during
                training. Random negative samples are randomly drawn IPv4 addresses.
            shuffled_negative_sampling_rate (int): Optional. The ratio of shuffled negative samples to draw
                during training. Shuffled negative samples are IP addresses picked from within a batch.
            weight_decay (float): Optional. Weight decay coefficient. Adds L2 regularization.
            **kwargs: base class keyword argument values.
        """
        super().__init__(role, instance_count, instance_type, **kwargs)
        self.num_entity_vectors = num_entity_vectors
        self.vector_dim = vector_dim
        self.batch_metrics_publish_interval = batch_metrics_publish_interval
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.num_ip_encoder_layers = num_ip_encoder_layers
        self.random_negative_sampling_rate = random_negative_sampling_rate
        self.shuffled_negative_sampling_rate = shuffled_negative_sampling_rate
        self.weight_decay = weight_decay

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "IPInsightsModel":
        """Create a model for the latest s3 model produced by this estimator."""
        return IPInsightsModel(
            self.model_data,
            self.role,
            sagemaker_session=self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
        if mini_batch_size is not None and (mini_batch_size < 1 or mini_batch_size > 500000):
            raise ValueError("mini_batch_size must be in [1, 500000]")
        super()._prepare_for_training(records, mini_batch_size=mini_batch_size, job_name=job_name)


class IPInsightsPredictor(Predictor):
    """Returns dot product of entity and IP address embeddings as a score for compatibility.

    The implementation of :meth:`~smkit.predictor.Predictor.predict` in this ``Predictor`` requires a
    numpy ``ndarray`` as input. The array should contain two columns. The first column should contain the
    entity ID. The second column should contain the IPv4 address in dot notation.
    """

    def __init__(
        self,
        endpoint_name: str,
        sagemaker_session: Optional[Session] = None,
        serializer=CSVSerializer(),
        deserializer=JSONDeserializer(),
    ):
        super().__init__(endpoint_name, sagemaker_session, serializer=serializer, deserializer=deserializer)


class IPInsightsModel(Model):
    """Creates model from S3 model data. Deploys it and returns :class:`IPInsightsPredictor`."""

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            IPInsights.repo_name,
            sagemaker_session.boto_region_name,
            version=IPInsights.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, IPInsightsPredictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=IPInsightsPredictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
