"""Linear models for binary classification, multiclass classification and regression."""
import logging
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
from .validation import ge, gt, isin, le, lt

logger = logging.getLogger(__name__)


class LinearLearner(AmazonAlgorithmEstimatorBase):
    """A supervised learning algorithms used for solving classification or regression problems.

    For input, you give the model labeled examples (x, y). x is a high-dimensional vector and y is a numeric
    label. For binary classification problems, the label must be either 0 or 1. For multiclass classification
    problems, the labels must be from 0 to num_classes - 1. For regression problems, y is a real number. The
    algorithm learns a linear function, or, for classification problems, a linear threshold function, and maps
    a vector x to an approximation of the label y.
    """

    repo_name = "linear-learner"
    repo_version = "1"

    DEFAULT_MINI_BATCH_SIZE = 1000

    binary_classifier_model_selection_criteria = hp(
        "binary_classifier_model_selection_criteria",
        isin(
            "accuracy",
            "f1",
            "f_beta",
            "precision_at_target_recall",
            "recall_at_target_precision",
            "cross_entropy_loss",
            "loss_function",
        ),
        data_type=str,
    )
    target_recall = hp("target_recall", (gt(0), lt(1)), "A float in (0,1)", float)
    target_precision = hp("target_precision", (gt(0), lt(1)), "A float in (0,1)", float)
    positive_example_weight_mult = hp(
        "positive_example_weight_mult", (), "A float greater than 0 or 'auto' or 'balanced'", str
    )
    epochs = hp("epochs", gt(0), "An integer greater-than 0", int)
    predictor_type = hp(
        "predictor_type",
        isin("binary_classifier", "regressor", "multiclass_classifier"),
        'One of "binary_classifier" or "multiclass_classifier" or "regressor"',
        str,
    )
    use_bias = hp("use_bias", (), "Either True or False", bool)
    num_models = hp("num_models", gt(0), "An integer greater-than 0", int)
    num_calibration_samples = hp("num_calibration_samples", gt(0), "An integer greater-than 0", int)
    init_method = hp("init_method", isin("uniform", "normal"), 'One of "uniform" or "normal"', str)
    init_scale = hp("init_scale", gt(0), "A float greater-than 0", float)
    init_sigma = hp("init_sigma", gt(0), "A float greater-than 0", float)
    init_bias = hp("init_bias", (), "A number", float)
    optimizer = hp(
        "optimizer",
        isin("sgd", "adam", "rmsprop", "auto"),
        'One of "sgd", "adam", "rmsprop" or "auto',
        str,
    )
    loss = hp(
        "loss",
        isin(
            "logistic",
            "squared_loss",
            "absolute_loss",
            "hinge_loss",
            "eps_insensitive_squared_loss",
            "eps_insensitive_absolute_loss",
            "quantile_loss",
            "huber_loss",
            "softmax_loss",
            "auto",
        ),
        '"logistic", "squared_loss", "absolute_loss", "hinge_loss", "eps_insensitive_squared_loss", '
        '"eps_insensitive_absolute_loss", "quantile_loss", "huber_loss", "softmax_loss" or "auto"',
        str,
    )
    wd = hp("wd", ge(0), "A float greater-than or equal to 0", float)
    l1 = hp("l1", ge(0), "A float greater-than or equal to 0", float)
    momentum = hp("momentum", (ge(0), lt(1)), "A float in [0,1)", float)
    learning_rate = hp("learning_rate", gt(0), "A float greater-than 0", float)
    beta_1 = hp("beta_1", (ge(0), lt(1)), "A float in [0,1)", float)
    beta_2 = hp("beta_2", (ge(0), lt(1)), "A float in [0,1)", float)
    bias_lr_mult = hp("bias_lr_mult", gt(0), "A float greater-than 0", float)
    bias_wd_mult = hp("bias_wd_mult", ge(0), "A float greater-than or equal to 0", float)
    use_lr_scheduler = hp("use_lr_scheduler", (), "A boolean", bool)
    lr_scheduler_step = hp("lr_scheduler_step", gt(0), "An integer greater-than 0", int)
    lr_scheduler_factor = hp("lr_scheduler_factor", (gt(0), lt(1)), "A float in (0,1)", float)
    lr_scheduler_minimum_lr = hp("lr_scheduler_minimum_lr", gt(0), "A float greater-than 0", float)
    normalize_data = hp("normalize_data", (), "A boolean", bool)
    normalize_label = hp("normalize_label", (), "A boolean", bool)
    unbias_data = hp("unbias_data", (), "A boolean", bool)
    unbias_label = hp("unbias_label", (), "A boolean", bool)
    num_point_for_scaler = hp("num_point_for_scaler", gt(0), "An integer greater-than 0", int)
    margin = hp("margin", ge(0), "A float greater-than or equal to 0", float)
    quantile = hp("quantile", (gt(0), lt(1)), "A float in (0,1)", float)
    loss_insensitivity = hp("loss_insensitivity", gt(0), "A float greater-than 0", float)
    huber_delta = hp("huber_delta", ge(0), "A float greater-than or equal to 0", float)
    early_stopping_patience = hp("early_stopping_patience", gt(0), "An integer greater-than 0", int)
    early_stopping_tolerance = hp("early_stopping_tolerance", gt(0), "A float greater-than 0", float)
    num_classes = hp("num_classes", (gt(0), le(1000000)), "An integer in [1,1000000]", int)
    accuracy_top_k = hp("accuracy_top_k", (gt(0), le(1000000)), "An integer in [1,1000000]", int)
    f_beta = hp("f_beta", gt(0), "A float greater-than 0", float)
    balance_multiclass_weights = hp("balance_multiclass_weights", (), "A boolean", bool)

    def __init__(  # noqa: C901
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        predictor_type: Optional[str] = None,
        binary_classifier_model_selection_criteria: Optional[str] = None,
        target_recall: Optional[float] = None,
        target_precision: Optional[float] = None,
        positive_example_weight_mult: Optional[str] = None,
        epochs: Optional[int] = None,
        use_bias: Optional[bool] = None,
        num_models: Optional[int] = None,
        num_calibration_samples: Optional[int] = None,
        init_method: Optional[str] = None,
        init_scale: Optional[float] = None,
        init_sigma: Optional[float] = None,
        init_bias: Optional[float] = None,
        optimizer: Optional[str] = None,
        loss: Optional[str] = None,
        wd: Optional[float] = None,
        l1: Optional[float] = None,
        momentum: Optional[float] = None,
        learning_rate: Optional[float] = None,
        beta_1: Optional[float] = None,
        beta_2: Optional[float] = None,
        bias_lr_mult: Optional[float] = None,
        bias_wd_mult: Optional[float] = None,
        use_lr_scheduler: Optional[bool] = None,
        lr_scheduler_step: Optional[int] = None,
        lr_scheduler_factor: Optional[float] = None,
        lr_scheduler_minimum_lr: Optional[float] = None,
        normalize_data: Optional[bool] = None,
        normalize_label: Optional[bool] = None,
        unbias_data: Optional[bool] = None,
        unbias_label: Optional[bool] = None,
        num_point_for_scaler: Optional[int] = None,
        margin: Optional[float] = None,
        quantile: Optional[float] = None,
        loss_insensitivity: Optional[float] = None,
        huber_delta: Optional[float] = None,
        early_stopping_patience: Optional[int] = None,
        early_stopping_tolerance: Optional[float] = None,
        num_classes: Optional[int] = None,
        accuracy_top_k: Optional[int] = None,
        f_beta: Optional[float] = None,
        balance_multiclass_weights: Optional[bool] = None,
        **kwargs,
    ):
        """An :class:`Estimator` for binary classification and regression.

        Amazon SageMaker Linear Learner provides a solution for both classification and regression problems,
        allowing for exploring different training objectives simultaneously and choosing the best solution from
        a validation set. It allows the user to explore a large number of models and choose the best, which
        optimizes either continuous objectives such as mean square error, cross entropy loss, absolute error,
        etc., or discrete objectives suited for classification such as F1 measure, precision@recall, accuracy.

        Hyperparameter names and meanings follow the algorithm documentation:
        https://docs.aws.amazon.com/sagemaker/latest/dg/ll_hyperparameters.html.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            predictor_type (str): The type of predictor to learn. Either "binary_classifier" or
                "multiclass_classifier" or "regressor".
            num_classes (int): The number of classes for multiclass classification. Required when
                ``predictor_type`` is "multiclass_classifier", and must then be greater than 2.
            **kwargs: base class keyword argument values. The remaining keyword arguments set the hyperparameter
                of the same name.

        Raises:
            ValueError: if ``predictor_type`` is "multiclass_classifier" and ``num_classes`` is not greater
                than 2.
        """
        super().__init__(role, instance_count, instance_type, **kwargs)
        self.predictor_type = predictor_type
        self.binary_classifier_model_selection_criteria = binary_classifier_model_selection_criteria
        self.target_recall = target_recall
        self.target_precision = target_precision
        self.positive_example_weight_mult = positive_example_weight_mult
        self.epochs = epochs
        self.use_bias = use_bias
        self.num_models = num_models
        self.num_calibration_samples = num_calibration_samples
        self.init_method = init_method
        self.init_scale = init_scale
        self.init_sigma = init_sigma
        self.init_bias = init_bias
        self.optimizer = optimizer
        self.loss = loss
        self.wd = wd
        self.l1 = l1
        self.momentum = momentum
        self.learning_rate = learning_rate
        self.beta_1 = beta_1
        self.beta_2 = beta_2
        self.bias_lr_mult = bias_lr_mult
        self.bias_wd_mult = bias_wd_mult
        self.use_lr_scheduler = use_lr_scheduler
        self.lr_scheduler_step = lr_scheduler_step
        self.lr_scheduler_factor = lr_scheduler_factor
        self.lr_scheduler_minimum_lr = lr_scheduler_minimum_lr
        self.normalize_data = normalize_data
        self.normalize_label = normalize_label
        self.unbias_data = unbias_data
        self.unbias_label = unbias_label
        self.num_point_for_scaler = num_point_for_scaler
        self.margin = margin
        self.quantile = quantile
        self.loss_insensitivity = loss_insensitivity
        self.huber_delta = huber_delta
        self.early_stopping_patience = early_stopping_patience
        self.early_stopping_tolerance = early_stopping_tolerance
        self.num_classes = num_classes
        self.accuracy_top_k = accuracy_top_k
        self.f_beta = f_beta
        self.balance_multiclass_weights = balance_multiclass_weights

        if self.predictor_type == "multiclass_classifier" and (num_classes is None or int(num_classes) < 3):
            raise ValueError(
                "For predictor_type 'multiclass_classifier', 'num_classes' should be set to a value greater than 2."
            )

    def create_model(self, vpc_config_override=VPC_CONFIG_DEFAULT, **kwargs) -> "LinearLearnerModel":
        """Return a :class:`~smkit.amazon.linear_learner.LinearLearnerModel`.

        It references the latest s3 model data produced by this Estimator.

        Args:
            vpc_config_override (dict[str, list[str]]): Optional override for VpcConfig set on the model.
                Default: use subnets and security groups from this Estimator.
            **kwargs: Additional kwargs passed to the LinearLearnerModel constructor.
        """
        return LinearLearnerModel(
            self.model_data,
            self.role,
            self.sagemaker_session,
            vpc_config=self.get_vpc_config(vpc_config_override),
            **kwargs,
        )

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
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

        # mini_batch_size can't be greater than number of records or training job fails
        default_mini_batch_size = min(self.DEFAULT_MINI_BATCH_SIZE, max(1, int(num_records / self.instance_count)))
        mini_batch_size = mini_batch_size or default_mini_batch_size
        logger.debug("Training %s with mini_batch_size %d", type(self).__name__, mini_batch_size)
        super()._prepare_for_training(records, mini_batch_size=mini_batch_size, job_name=job_name)


class LinearLearnerPredictor(Predictor):
    """Performs binary-classification or regression prediction from input vectors.

    The prediction is stored in the ``"predicted_label"`` key of the ``Record.label`` field.
    """

    def __init__(
        self,
        endpoint_name: str,
        sagemaker_session: Optional[Session] = None,
        serializer=RecordSerializer(),
        deserializer=RecordDeserializer(),
    ):
        super().__init__(endpoint_name, sagemaker_session, serializer=serializer, deserializer=deserializer)


class LinearLearnerModel(Model):
    """Reference LinearLearner s3 model data."""

    def __init__(self, model_data: str, role: str, sagemaker_session: Optional[Session] = None, **kwargs):
        sagemaker_session = sagemaker_session or Session()
        image_uri = image_uris.retrieve(
            LinearLearner.repo_name,
            sagemaker_session.boto_region_name,
            version=LinearLearner.repo_version,
        )
        pop_out_unused_kwarg("predictor_cls", kwargs, LinearLearnerPredictor.__name__)
        pop_out_unused_kwarg("image_uri", kwargs, image_uri)
        super().__init__(
            image_uri,
            model_data,
            role,
            predictor_cls=LinearLearnerPredictor,
            sagemaker_session=sagemaker_session,
            **kwargs,
        )
