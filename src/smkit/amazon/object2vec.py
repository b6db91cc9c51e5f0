"""Object2Vec: embeddings of pairs of objects."""
from typing import List, Optional

from .. import image_uris
from ..model import Model
from ..predictor import Predictor
from ..session import Session
from ..utils import pop_out_unused_kwarg
from ..vpc_utils import VPC_CONFIG_DEFAULT
from .amazon_estimator import AmazonAlgorithmEstimatorBase
from .hyperparameter import Hyperparameter as hp  # noqa: N813
from .validation import ge, isin, le


def _list_check_subset(valid_super_list: List[str]):
    """Validate a comma-separated string whose items all belong to ``valid_super_list``."""
    valid_superset = set(valid_super_list)

    def validate(value):
        if not isinstance(value, str):
            return False

        val_list = [s.strip() for s in value.split(",")]
        return set(val_list).issubset(valid_superset)

    return validate


class Object2Vec(AmazonAlgorithmEstimatorBase):
    """A general-purpose neural embedding algorithm that is highly customizable.

    It can learn low-dimensional dense embeddings of high-dimensional objects. The embeddings are learned in a
    way that preserves the semantics of the relationship between pairs of objects in the original space in the
    embedding space.
    """

    repo_name = "object2vec"
    repo_version = "1"

    MINI_BATCH_SIZE = 32

    enc_dim = hp("enc_dim", (ge(4), le(10000)), "An integer in [4, 10000]", int)
    mini_batch_size = hp("mini_batch_size", (ge(1), le(10000)), "An integer in [1, 10000]", int)
    epochs = hp("epochs", (ge(1), le(100)), "An integer in [1, 100]", int)
    early_stopping_patience = hp("early_stopping_patience", (ge(1), le(5)), "An integer in [1, 5]", int)
    early_stopping_tolerance = hp(
        "early_stopping_tolerance", (ge(1e-06), le(0.1)), "A float in [1e-06, 0.1]", float
    )
    dropout = hp("dropout", (ge(0.0), le(1.0)), "A float in [0.0, 1.0]", float)
    weight_decay = hp("weight_decay", (ge(0.0), le(10000.0)), "A float in [0.0, 10000.0]", float)
    bucket_width = hp("bucket_width", (ge(0), le(100)), "An integer in [0, 100]", int)
    num_classes = hp("num_classes", (ge(2), le(30)), "An integer in [2, 30]", int)
    mlp_layers = hp("mlp_layers", (ge(1), le(10)), "An integer in [1, 10]", int)
    mlp_dim = hp("mlp_dim", (ge(2), le(10000)), "An integer in [2, 10000]", int)
    mlp_activation = hp("mlp_activation", isin("tanh", "relu", "linear"), 'One of "tanh", "relu", "linear"', str)
    output_layer = hp(
        "output_layer",
        isin("softmax", "mean_squared_error"),
        'One of "softmax", "mean_squared_error"',
        str,
    )
    optimizer = hp(
        "optimizer",
        isin("adagrad", "adam", "rmsprop", "sgd", "adadelta"),
        'One of "adagrad", "adam", "rmsprop", "sgd", "adadelta"',
        str,
    )
    learning_rate = hp("learning_rate", (ge(1e-06), le(1.0)), "A float in [1e-06, 1.0]", float)

    negative_sampling_rate = hp("negative_sampling_rate", (ge(0), le(100)), "An integer in [0, 100]", int)
    comparator_list = hp(
        "comparator_list",
        _list_check_subset(["hadamard", "concat", "abs_diff"]),
        'Comma-separated of hadamard, concat, abs_diff. E.g. "hadamard,abs_diff"',
        str,
    )
    tied_token_embedding_weight = hp("tied_token_embedding_weight", (), "Either True or False", bool)
    token_embedding_storage_type = hp(
        "token_embedding_storage_type",
        isin("dense", "row_sparse"),
        'One of "dense", "row_sparse"',
        str,
    )

    enc0_network = hp(
        "enc0_network",
        isin("hcnn", "bilstm", "pooled_embedding"),
        'One of "hcnn", "bilstm", "pooled_embedding"',
        str,
    )
    enc1_network = hp(
        "enc1_network",
        isin("hcnn", "bilstm", "pooled_embedding", "enc0"),
        'One of "hcnn", "bilstm", "pooled_embedding", "enc0"',
        str,
    )
    enc0_cnn_filter_width = hp("enc0_cnn_filter_width", (ge(1), le(9)), "An integer in [1, 9]", int)
    enc1_cnn_filter_width = hp("enc1_cnn_filter_width", (ge(1), le(9)), "An integer in [1, 9]", int)
    enc0_max_seq_len = hp("enc0_max_seq_len", (ge(1), le(5000)), "An integer in [1, 5000]", int)
    enc1_max_seq_len = hp("enc1_max_seq_len", (ge(1), le(5000)), "An integer in [1, 5000]", int)
    enc0_token_embedding_dim = hp("enc0_token_embedding_dim", (ge(2), le(1000)), "An integer in [2, 1000]", int)
    enc1_token_embedding_dim = hp("enc1_token_embedding_dim", (ge(2), le(1000)), "An integer in [2, 1000]", int)
    enc0_vocab_size = hp("enc0_vocab_size", (ge(2), le(3000000)), "An integer in [2, 3000000]", int)
    enc1_vocab_size = hp("enc1_vocab_size", (ge(2), le(3000000)), "An integer in [2, 3000000]", int)
    enc0_layers = hp("enc0_layers", (ge(1), le(4)), "An integer in [1, 4]", int)
    enc1_layers = hp("enc1_layers", (ge(1), le(4)), "An integer in [1, 4]", int)
    enc0_freeze_pretrained_embedding = hp("enc0_freeze_pretrained_embedding", (), "Either True or False", bool)
    enc1_freeze_pretrained_embedding = hp("enc1_freeze_pretrained_embedding", (), "Either True or False", bool)

    def __init__(
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        epochs: Optional[int] = None,
        enc0_max_seq_len: Optional[int] = None,
        enc0_vocab_size: Optional[int] = None,
        enc_dim: Optional[int] = None,
        mini_batch_size: Optional[int] = None,
        early_stopping_patience: Optional[int] = None,
        early_stopping_tolerance: Optional[float] = None,
        dropout: Optional[float] = None,
        weight_decay: Optional[float] = None,
        bucket_width: Optional[int] = None,
        num_classes: Optional[int] = None,
        mlp_layers: Optional[int] = None,
        mlp_dim: Optional[int] = None,
        mlp_activation: Optional[str] = None,
        output_layer: Optional[str] = None,
        optimizer: Optional[str] = None,
        learning_rate: Optional[float] = None,
        negative_sampling_rate: Optional[int] = None,
        comparator_list: Optional[str] = None,
        tied_token_embedding_weight: Optional[bool] = None,
        token_embedding_storage_type: Optional[str] = None,
        enc0_network: Optional[str] = None,
        enc1_network: Optional[str] = None,
        enc0_cnn_filter_width: Optional[int] = None,
        enc1_cnn_filter_width: Optional[int] = None,
        enc1_max_seq_len: Optional[int] = None,
        enc0_token_embedding_dim: Optional[int] = None,
        enc1_token_embedding_dim: Optional[int] = None,
        enc1_vocab_size: Optional[int] = None,
        enc0_layers: Optional[int] = None,
        enc1_layers: Optional[int] = None,
        enc0_freeze_pretrained_embedding: Optional[bool] = None,
        enc1_freeze_pretrained_embedding: Optional[bool] = None,
        **kwargs,
    ):
        """Object2Vec is :class:`Estimator` that learns embeddings of pairs of objects.

        This Estimator may be fit via calls to :meth:`~smkit.amazon.AmazonAlgorithmEstimatorBase.fit`. There is
        an utility :meth:`~smkit.amazon.AmazonAlgorithmEstimatorBase.record_set` that can be used to upload
        data to S3 and creates :class:`~smkit.amazon.RecordSet` to be passed to the ``fit`` call.

        After this Estimator is fit, model data is stored in S3. The model may be deployed to an Amazon
        SageMaker Endpoint by invoking ``deploy``, which returns a plain :class:`~smkit.predictor.Predictor`.

        Hyperparameter names and meanings follow the algorithm documentation:
        https://docs.aws.amazon.com/sagemaker/latest/dg/object2vec-hyperparameters.html.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            epochs (int): Total number of epochs for SGD training
            enc0_max_seq_len (int): Maximum sequence length
            enc0_vocab_size (int): Vocabulary size of tokens
            enc_dim (int): Optional. Dimension of the output of the embedding layer
            mini_batch_size (int): Optional. mini batch size for SGD training
            comparator_list (str): Optional. Customization of comparator operator
            **kwargs: base class keyword argument values. The remaining keyword arguments set the hyperparameter
                of the same name.
        """
        super().__init__(role, instance_count, instance_type, **kwargs)

        self.enc_dim = enc_dim
        self.mini_batch_size = mini_batch_size
        self.epochs = epochs
        self.early_stopping_patience = early_stopping_patience
        self.early_stopping_tolerance = early_stopping_tolerance
        self.dropout = dropout
        self.weight_decay = weight_decay
        self.bucket_width = bucket_width
        self.num_classes = num_classes
        self.mlp_layers = mlp_layers
        self.mlp_dim = mlp_dim
        self.mlp_activation = mlp_activation
        self.output_layer = output_layer
        self.optimizer = optimizer
        self.learning_rate = learning_rate

        self.negative_sampling_rate = negative_sampling_rate
        self.comparator_list = comparator_list
        self.tied_token_embedding_weight = tied_token_embedding_weight
        self.token_embedding_storage_type = token_embedding_storage_type

        self.enc0_network = enc0_network
        self.enc1_network = enc1_network
        self.enc0_cnn_filter_width = enc0_cnn_filter_width
        self.enc1_cnn_filter_width = enc1_cnn_filter_width
        self.enc0_max_seq_len = enc0_max_seq_len
        self.enc1_max_seq_len = enc1_max_seq_len
        self.enc0_token_embedding_dim = enc0_token_embedding_dim
        self.enc1_token_embedding_dim = enc1_token_embedding_dim
        self.enc0_vocab_size = enc0_vocab_size
        self.enc1_vocab_size = enc1_vocab_size
        self.enc0_layers = enc0_layers
        self.enc1_layers = enc1_layers
        self.enc0_freeze_pretrained_embedding = enc0_freeze_pretrained_embedding
        self.enc1_freeze_pretrained_embedding = enc1_freeze_pretrained_embedding

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "Object2VecModel":
        """Return a :class:`~smkit.amazon.object2vec.Object2VecModel` referencing the latest s3 model data."""
        return Object2VecModel(
            self.model_data,
            self.role,
            sagemaker_session=self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
        """Default the mini batch to the constructor's value, then to ``MINI_BATCH_SIZE``."""
        if mini_batch_size is None:
            mini_batch_size = self._hyperparameters.get("mini_batch_size") or self.MINI_BATCH_SIZE

        super()._prepare_for_training(records, mini_batch_size=mini_batch_size, job_name=job_name)


class Object2VecModel(Model):
    """Reference Object2Vec s3 model data.

    Calling :meth:`~smkit.model.Model.deploy` creates an Endpoint and returns a Predictor that returns
    the embeddings or predictions for pairs of objects.
    """

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            Object2Vec.repo_name,
            sagemaker_session.boto_region_name,
            version=Object2Vec.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, Predictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=Predictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
