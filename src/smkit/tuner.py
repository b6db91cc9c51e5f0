"""Hyperparameter tuning jobs over one or more estimators."""
import importlib
import inspect
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Type

from .amazon.amazon_estimator import AmazonAlgorithmEstimatorBase, FileSystemRecordSet, RecordSet
from .amazon.hyperparameter import Hyperparameter as hp  # noqa: N813
from .analytics import HyperparameterTuningJobAnalytics
from .estimator import EstimatorBase
from .inputs import TrainingInput
from .job import _Job
from .parameter import CategoricalParameter, ContinuousParameter, IntegerParameter, ParameterRange
from .predictor import Predictor
from .session import Session
from .utils import base_from_name, base_name_from_image, name_from_base, to_string

AMAZON_ESTIMATOR_MODULE = "smkit.amazon"
AMAZON_ESTIMATOR_CLS_NAMES = {
    "factorization-machines": "FactorizationMachines",
    "ipinsights": "IPInsights",
    "kmeans": "KMeans",
    "knn": "KNN",
    "lda": "LDA",
    "linear-learner": "LinearLearner",
    "ntm": "NTM",
    "object2vec": "Object2Vec",
    "pca": "PCA",
    "randomcutforest": "RandomCutForest",
}
HYPERPARAMETER_TUNING_JOB_NAME = "HyperParameterTuningJobName"
PARENT_HYPERPARAMETER_TUNING_JOBS = "ParentHyperParameterTuningJobs"
WARM_START_TYPE = "WarmStartType"

logger = logging.getLogger(__name__)


class WarmStartTypes(Enum):
    """Warm Start Configuration type.

    There can be two types of warm start jobs:

    * IdenticalDataAndAlgorithm: Type of warm start that allows users to reuse training results from existing
      tuning jobs that have the same algorithm code and datasets.
    * TransferLearning: Type of warm start that allows users to reuse training results from existing tuning
      jobs that have similar algorithm code and datasets.
    """

    IDENTICAL_DATA_AND_ALGORITHM = "IdenticalDataAndAlgorithm"
    TRANSFER_LEARNING = "TransferLearning"


class WarmStartConfig(object):
    """Warm Start Configuration which defines the nature of the warm start.

    This warm start configuration is provided to the ``HyperparameterTuner``, with type and parents for warm
    start.

    Examples:
        >>> warm_start_config = WarmStartConfig(
        >>>                         warm_start_type=WarmStartTypes.TRANSFER_LEARNING, parents={"p1","p2"})
        >>> warm_start_config.type
        <WarmStartTypes.TRANSFER_LEARNING: 'TransferLearning'>
        >>> warm_start_config.parents
        {"p1","p2"}
    """

    def __init__(self, warm_start_type: WarmStartTypes, parents: Set[str]):
        """Creates a ``WarmStartConfig`` with provided ``WarmStartTypes`` and parents.

        Args:
            warm_start_type (smkit.tuner.WarmStartTypes): This should be one of the supported warm start types
                in WarmStartType.
            parents (set[str]): Set of parent tuning jobs which will be used to warm start the new tuning job.
        """
        if warm_start_type not in list(WarmStartTypes):
            raise ValueError(
                f"Invalid type: {warm_start_type}, valid warm start types are: {list(WarmStartTypes)}"
            )

        if not parents:
            raise ValueError(f"Invalid parents: {parents}, parents should not be None/empty")

        self.type = warm_start_type
        self.parents = set(parents)

    @classmethod
    def from_job_desc(cls, warm_start_config: Optional[Dict[str, Any]]) -> Optional["WarmStartConfig"]:
        """Creates a ``WarmStartConfig`` from the ``WarmStartConfig`` of a DescribeHyperParameterTuningJob response.

        Examples:
            >>> warm_start_config = WarmStartConfig.from_job_desc(warm_start_config={
            >>>    "WarmStartType":"TransferLearning",
            >>>    "ParentHyperParameterTuningJobs": [
            >>>        {'HyperParameterTuningJobName': "p1"},
            >>>        {'HyperParameterTuningJobName': "p2"},
            >>>    ]
            >>>})
            >>> warm_start_config.parents
            {"p1","p2"}

        Args:
            warm_start_config (dict): The expected format of the ``warm_start_config`` contains two first-class
                fields, "WarmStartType" and "ParentHyperParameterTuningJobs".

        Returns:
            smkit.tuner.WarmStartConfig: De-serialized instance of WarmStartConfig containing the type and
            parents provided as part of ``warm_start_config``, or None when the response has no warm start.
        """
        if (
            not warm_start_config
            or WARM_START_TYPE not in warm_start_config
            or PARENT_HYPERPARAMETER_TUNING_JOBS not in warm_start_config
        ):
            return None

        parents = [
            parent[HYPERPARAMETER_TUNING_JOB_NAME] for parent in warm_start_config[PARENT_HYPERPARAMETER_TUNING_JOBS]
        ]

        return cls(warm_start_type=WarmStartTypes(warm_start_config[WARM_START_TYPE]), parents=parents)

    def to_input_req(self) -> Dict[str, Any]:
        """Converts the ``self`` instance to the desired input request format.

        Returns:
            dict: Containing the "WarmStartType" and "ParentHyperParameterTuningJobs" as the first class fields.
        """
        return {
            WARM_START_TYPE: self.type.value,
            PARENT_HYPERPARAMETER_TUNING_JOBS: [
                {HYPERPARAMETER_TUNING_JOB_NAME: parent} for parent in sorted(self.parents)
            ],
        }


class HyperparameterTuner(object):
    """Defines interaction with Amazon SageMaker hyperparameter tuning jobs.

    It also supports deploying the resulting models.
    """

    TUNING_JOB_NAME_MAX_LENGTH = 32

    SAGEMAKER_ESTIMATOR_MODULE = "sagemaker_estimator_module"
    SAGEMAKER_ESTIMATOR_CLASS_NAME = "sagemaker_estimator_class_name"

    DEFAULT_ESTIMATOR_MODULE = "smkit.estimator"
    DEFAULT_ESTIMATOR_CLS_NAME = "Estimator"

    def __init__(
        self,
        estimator: EstimatorBase,
        objective_metric_name: str,
        hyperparameter_ranges: Dict[str, ParameterRange],
        metric_definitions: Optional[List[Dict[str, str]]] = None,
        strategy: str = "Bayesian",
        objective_type: str = "Maximize",
        max_jobs: int = 1,
        max_parallel_jobs: int = 1,
        tags: Optional[List[Dict[str, str]]] = None,
        base_tuning_job_name: Optional[str] = None,
        warm_start_config: Optional[WarmStartConfig] = None,
        early_stopping_type: str = "Off",
        estimator_name: Optional[str] = None,
    ):
        """Creates a ``HyperparameterTuner`` instance.

        It takes an estimator to obtain configuration information for training jobs that are created as the
        result of a hyperparameter tuning job.

        Args:
            estimator (smkit.estimator.EstimatorBase): An estimator object that has been initialized with the
                desired configuration. There does not need to be a training job associated with this instance.
            objective_metric_name (str): Name of the metric for evaluating training jobs.
            hyperparameter_ranges (dict[str, smkit.parameter.ParameterRange]): Dictionary of parameter ranges.
                These parameter ranges can be one of three types: Continuous, Integer, or Categorical. The keys
                of the dictionary are the names of the hyperparameter, and the values are the appropriate
                parameter range class to represent the range.
            metric_definitions (list[dict]): A list of dictionaries that defines the metric(s) used to evaluate
                the training jobs (default: None). Each dictionary contains two keys: 'Name' for the name of the
                metric, and 'Regex' for the regular expression used to extract the metric from the logs. This
                should be defined only for hyperparameter tuning jobs that don't use an Amazon algorithm.
            strategy (str): Strategy to be used for hyperparameter estimations (default: 'Bayesian').
            objective_type (str): The type of the objective metric for evaluating training jobs. This value can
                be either 'Minimize' or 'Maximize' (default: 'Maximize').
            max_jobs (int): Maximum total number of training jobs to start for the hyperparameter tuning job
                (default: 1).
            max_parallel_jobs (int): Maximum number of parallel training jobs to start (default: 1).
            tags (list[dict]): List of tags for labeling the tuning job (default: None).
            base_tuning_job_name (str): Prefix for the hyperparameter tuning job name when the
                :meth:`~smkit.tuner.HyperparameterTuner.fit` method launches. If not specified, a default job
                name is generated, based on the training image name and current timestamp.
            warm_start_config (smkit.tuner.WarmStartConfig): A ``WarmStartConfig`` object that has been
                initialized with the configuration defining the nature of warm start tuning job.
            early_stopping_type (str): Specifies whether early stopping is enabled for the job. Can be either
                'Auto' or 'Off' (default: 'Off'). If set to 'Off', early stopping will not be attempted. If set
                to 'Auto', early stopping of some training jobs may happen, but is not guaranteed to.
            estimator_name (str): A unique name to identify an estimator within the hyperparameter tuning job,
                when more than one estimator is used with the same tuning job (default: None).
        """
        if hyperparameter_ranges is None or len(hyperparameter_ranges) == 0:
            raise ValueError("Need to specify hyperparameter ranges")

        if estimator_name is not None:
            self.estimator = None
            self.objective_metric_name = None
            self._hyperparameter_ranges = None
            self.metric_definitions = None
            self.estimator_dict: Optional[Dict[str, EstimatorBase]] = {estimator_name: estimator}
            self.objective_metric_name_dict: Optional[Dict[str, str]] = {estimator_name: objective_metric_name}
            self._hyperparameter_ranges_dict: Optional[Dict[str, Dict[str, ParameterRange]]] = {
                estimator_name: hyperparameter_ranges
            }
            self.metric_definitions_dict: Optional[Dict[str, List[Dict[str, str]]]] = (
                {estimator_name: metric_definitions} if metric_definitions is not None else {}
            )
            self.static_hyperparameters = None
        else:
            self.estimator = estimator
            self.objective_metric_name = objective_metric_name
            self._hyperparameter_ranges = hyperparameter_ranges
            self.metric_definitions = metric_definitions
            self.estimator_dict = None
            self.objective_metric_name_dict = None
            self._hyperparameter_ranges_dict = None
            self.metric_definitions_dict = None
            self.static_hyperparameters_dict = None

        self._validate_parameter_ranges(estimator, hyperparameter_ranges)

        self.strategy = strategy
        self.objective_type = objective_type
        self.max_jobs = max_jobs
        self.max_parallel_jobs = max_parallel_jobs

        self.tags = tags
        self.base_tuning_job_name = base_tuning_job_name
        self._current_job_name: Optional[str] = None
        self.latest_tuning_job: Optional[_TuningJob] = None
        self.warm_start_config = warm_start_config
        self.early_stopping_type = early_stopping_type

    def _prepare_for_tuning(self, job_name: Optional[str] = None, include_cls_metadata=False):
        """Prepare the tuner instance for tuning (fit)."""
        self._prepare_job_name_for_tuning(job_name=job_name)
        self._prepare_static_hyperparameters_for_tuning(include_cls_metadata=include_cls_metadata)

    def _prepare_job_name_for_tuning(self, job_name: Optional[str] = None):
        """Set current job name before starting tuning."""
        if job_name is not None:
            self._current_job_name = job_name
        else:
            base_name = self.base_tuning_job_name
            if base_name is None:
                estimator = self.estimator or self.estimator_dict[sorted(self.estimator_dict.keys())[0]]
                base_name = base_name_from_image(estimator.training_image_uri())
            self._current_job_name = name_from_base(base_name, max_length=self.TUNING_JOB_NAME_MAX_LENGTH, short=True)

    def _prepare_static_hyperparameters_for_tuning(self, include_cls_metadata=False):
        """Prepare static hyperparameters for all estimators before tuning."""
        self.static_hyperparameters = None
        if self.estimator is not None:
            self.static_hyperparameters = self._prepare_static_hyperparameters(
                self.estimator, self._hyperparameter_ranges, include_cls_metadata
            )

        self.static_hyperparameters_dict = None
        if self.estimator_dict is not None:
            self.static_hyperparameters_dict = {
                estimator_name: self._prepare_static_hyperparameters(
                    estimator,
                    self._hyperparameter_ranges_dict[estimator_name],
                    include_cls_metadata.get(estimator_name, False)
                    if isinstance(include_cls_metadata, dict)
                    else include_cls_metadata,
                )
                for (estimator_name, estimator) in self.estimator_dict.items()
            }

    @classmethod
    def _prepare_static_hyperparameters(
        cls, estimator: EstimatorBase, hyperparameter_ranges: Dict[str, ParameterRange], include_cls_metadata: bool
    ) -> Dict[str, str]:
        """Prepare static hyperparameters for one estimator before tuning."""
        # Remove any hyperparameter that will be tuned
        static_hyperparameters = {str(k): to_string(v) for (k, v) in estimator.hyperparameters().items()}
        for hyperparameter_name in hyperparameter_ranges.keys():
            static_hyperparameters.pop(hyperparameter_name, None)

        # For attach() to know what estimator to use for non-1P algorithms
        # (1P algorithms don't accept extra hyperparameters)
        if include_cls_metadata and not isinstance(estimator, AmazonAlgorithmEstimatorBase):
            static_hyperparameters[cls.SAGEMAKER_ESTIMATOR_CLASS_NAME] = json.dumps(estimator.__class__.__name__)
            static_hyperparameters[cls.SAGEMAKER_ESTIMATOR_MODULE] = json.dumps(estimator.__module__)

        return static_hyperparameters

    def fit(
        self,
        inputs=None,
        job_name: Optional[str] = None,
        include_cls_metadata=False,
        estimator_kwargs: Optional[Dict[str, Dict[str, Any]]] = None,
        wait: bool = True,
        **kwargs,
    ):
        """Start a hyperparameter tuning job.

        Args:
            inputs: Information about the training data. Please refer to the ``fit()`` method of the associated
                estimator, as this can take any of the following forms:

                * (str) - The S3 location where training data is saved.
                * (dict[str, str] or dict[str, smkit.inputs.TrainingInput]) - If using multiple channels for
                  training data, you can specify a dict mapping channel names to strings or
                  :func:`~smkit.inputs.TrainingInput` objects.
                * (smkit.inputs.TrainingInput) - Channel configuration for S3 data sources that can provide
                  additional information about the training dataset.
                * (smkit.inputs.FileSystemInput) - channel configuration for a file system data source.
                * (smkit.amazon.RecordSet) - A collection of Amazon :class:~`Record` objects serialized and
                  stored in S3. For use with an estimator for an Amazon algorithm.
                * (smkit.amazon.FileSystemRecordSet) - Amazon SageMaker channel configuration for a file
                  system data source for Amazon algorithms.
                * (list[smkit.amazon.RecordSet]) - A list of record sets, where each instance is a different
                  channel of training data.

                For tuners created with :meth:`create`, a dict keyed by estimator name of any of the above.
            job_name (str): Tuning job name. If not specified, the tuner generates a default job name, based on
                the training image name and current timestamp.
            include_cls_metadata (bool or dict[str, bool]): Whether or not the hyperparameter tuning job should
                include information about the estimator class (default: False). This information is passed as
                a hyperparameter, so if the algorithm you are using cannot handle unknown hyperparameters, then
                set ``include_cls_metadata`` to ``False``. Tuners created via :meth:`create` accept a dict
                keyed by estimator name.
            estimator_kwargs (dict[str, dict]): Dictionary for other arguments needed for training. Should be
                used only for tuners created via the factory method create(). The keys are the estimator names
                for the estimator_dict argument of create() method.
            wait (bool): Whether the call should wait until the job completes (default: True).
            **kwargs: Other arguments needed for training. Please refer to the ``fit()`` method of the
                associated estimator to see what other arguments are needed.
        """
        if self.estimator is not None:
            self._fit_with_estimator(inputs, job_name, include_cls_metadata, **kwargs)
        else:
            self._fit_with_estimator_dict(inputs, job_name, include_cls_metadata, estimator_kwargs)

        if wait:
            self.latest_tuning_job.wait()

    def _fit_with_estimator(self, inputs, job_name, include_cls_metadata, **kwargs):
        """Start tuning for tuner instances that have the ``estimator`` field set."""
        self._prepare_estimator_for_tuning(self.estimator, inputs, job_name, **kwargs)
        self._prepare_for_tuning(job_name=job_name, include_cls_metadata=include_cls_metadata)
        self.latest_tuning_job = _TuningJob.start_new(self, inputs)

    def _fit_with_estimator_dict(self, inputs, job_name, include_cls_metadata, estimator_kwargs):
        """Start tuning for tuner instances that have the ``estimator_dict`` field set."""
        estimator_names = sorted(self.estimator_dict.keys())
        self._validate_dict_argument(name="inputs", value=inputs, allowed_keys=estimator_names)
        # A bool applies to every estimator.
        if not isinstance(include_cls_metadata, bool):
            self._validate_dict_argument(
                name="include_cls_metadata", value=include_cls_metadata, allowed_keys=estimator_names
            )
        self._validate_dict_argument(name="estimator_kwargs", value=estimator_kwargs, allowed_keys=estimator_names)

        for (estimator_name, estimator) in self.estimator_dict.items():
            ins = inputs.get(estimator_name, None) if inputs is not None else None
            args = estimator_kwargs.get(estimator_name, {}) if estimator_kwargs is not None else {}
            self._prepare_estimator_for_tuning(estimator, ins, job_name, **args)

        inc_cls_metadata = include_cls_metadata if include_cls_metadata is not None else {}
        self._prepare_for_tuning(job_name=job_name, include_cls_metadata=inc_cls_metadata)

        self.latest_tuning_job = _TuningJob.start_new(self, inputs)

    @classmethod
    def _prepare_estimator_for_tuning(cls, estimator: EstimatorBase, inputs, job_name: Optional[str], **kwargs):
        """Prepare one estimator before starting tuning."""
        if isinstance(inputs, (list, RecordSet, FileSystemRecordSet)):
            estimator._prepare_for_training(inputs, **kwargs)
        else:
            estimator._prepare_for_training(job_name=job_name)

    @classmethod
    def attach(
        cls,
        tuning_job_name: str,
        sagemaker_session: Optional[Session] = None,
        job_details: Optional[Dict[str, Any]] = None,
        estimator_cls=None,
    ) -> "HyperparameterTuner":
        """Attach to an existing hyperparameter tuning job.

        Create a HyperparameterTuner bound to an existing hyperparameter tuning job. After attaching, if there
        exists a best training job (or any other completed training job), that can be deployed to create an
        Amazon SageMaker Endpoint and return a ``Predictor``.

        The ``HyperparameterTuner`` instance could be created in one of the following two forms.

        * If the 'TrainingJobDefinition' field is present in tuning job description, the tuner will be created
          using the default constructor with a single estimator.
        * If the 'TrainingJobDefinitions' field (list) is present in tuning job description, the tuner will be
          created using the factory method ``create()`` with one or several estimators. Each estimator
          corresponds to one item in the 'TrainingJobDefinitions' field, while the estimator names would come
          from the 'DefinitionName' field of items in the 'TrainingJobDefinitions' field.

        Examples:
            >>> my_tuner.fit()
            >>> job_name = my_tuner.latest_tuning_job.name
            Later on:
            >>> attached_tuner = HyperparameterTuner.attach(job_name)
            >>> attached_tuner.deploy()

        Args:
            tuning_job_name (str): The name of the hyperparameter tuning job to attach to.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.
            job_details (dict): The response to a ``DescribeHyperParameterTuningJob`` call. If not specified,
                the ``HyperparameterTuner`` will perform one such call with the provided hyperparameter tuning
                job name.
            estimator_cls (str or dict[str, str]): The estimator class name associated with the training jobs,
                e.g. 'smkit.estimator.Estimator'. If not specified, the ``HyperparameterTuner`` will try to
                derive the correct estimator class from training job metadata, defaulting to
                :class:~`smkit.estimator.Estimator` if it is unable to determine a more specific class. For
                multi-estimator tuning jobs, a dict keyed by 'DefinitionName'.

        Returns:
            smkit.tuner.HyperparameterTuner: A ``HyperparameterTuner`` instance with the attached
            hyperparameter tuning job.
        """
        sagemaker_session = sagemaker_session or Session()

        if job_details is None:
            job_details = sagemaker_session.describe_tuning_job(tuning_job_name)

        if "TrainingJobDefinition" in job_details:
            tuner = cls._attach_with_training_details(sagemaker_session, estimator_cls, job_details)
        else:
            tuner = cls._attach_with_training_details_list(sagemaker_session, estimator_cls, job_details)

        tuner.latest_tuning_job = _TuningJob(sagemaker_session=sagemaker_session, job_name=tuning_job_name)
        tuner._current_job_name = tuning_job_name

        return tuner

    @classmethod
    def _attach_with_training_details(
        cls, sagemaker_session: Session, estimator_cls: Optional[str], job_details: Dict[str, Any]
    ) -> "HyperparameterTuner":
        """Create a HyperparameterTuner bound to a tuning job with the ``TrainingJobDefinition`` field set."""
        estimator = cls._prepare_estimator(
            estimator_cls=estimator_cls,
            training_details=job_details["TrainingJobDefinition"],
            parameter_ranges=job_details["HyperParameterTuningJobConfig"]["ParameterRanges"],
            sagemaker_session=sagemaker_session,
        )
        init_params = cls._prepare_init_params_from_job_description(job_details)

        return cls(estimator=estimator, **init_params)

    @classmethod
    def _attach_with_training_details_list(
        cls, sagemaker_session: Session, estimator_cls: Optional[Dict[str, str]], job_details: Dict[str, Any]
    ) -> "HyperparameterTuner":
        """Create a HyperparameterTuner bound to a tuning job with the ``TrainingJobDefinitions`` field set."""
        estimator_names = sorted(
            [training_details["DefinitionName"] for training_details in job_details["TrainingJobDefinitions"]]
        )
        cls._validate_dict_argument(name="estimator_cls", value=estimator_cls, allowed_keys=estimator_names)

        estimator_dict = {}
        objective_metric_name_dict = {}
        hyperparameter_ranges_dict = {}
        metric_definitions_dict = {}

        for training_details in job_details["TrainingJobDefinitions"]:
            estimator_name = training_details["DefinitionName"]

            estimator_dict[estimator_name] = cls._prepare_estimator(
                estimator_cls=estimator_cls.get(estimator_name) if estimator_cls else None,
                training_details=training_details,
                parameter_ranges=training_details["HyperParameterRanges"],
                sagemaker_session=sagemaker_session,
            )

            objective_metric_name_dict[estimator_name] = training_details["TuningObjective"]["MetricName"]
            hyperparameter_ranges_dict[estimator_name] = cls._prepare_parameter_ranges_from_job_description(
                training_details["HyperParameterRanges"]
            )

            metric_definitions = training_details["AlgorithmSpecification"].get("MetricDefinitions", None)
            if metric_definitions is not None:
                metric_definitions_dict[estimator_name] = metric_definitions

        init_params = cls._prepare_init_params_from_job_description(job_details)

        return HyperparameterTuner.create(
            estimator_dict=estimator_dict,
            objective_metric_name_dict=objective_metric_name_dict,
            hyperparameter_ranges_dict=hyperparameter_ranges_dict,
            metric_definitions_dict=metric_definitions_dict,
            **init_params,
        )

    def deploy(
        self,
        initial_instance_count: int,
        instance_type: str,
        serializer=None,
        deserializer=None,
        endpoint_name: Optional[str] = None,
        wait: bool = True,
        model_name: Optional[str] = None,
        kms_key: Optional[str] = None,
        data_capture_config=None,
        **kwargs,
    ) -> Predictor:
        """Deploy the best trained model to an Amazon SageMaker endpoint and return a ``Predictor``.

        Args:
            initial_instance_count (int): Minimum number of EC2 instances to deploy to an endpoint for
                prediction.
            instance_type (str): Type of EC2 instance to deploy to an endpoint for prediction, for example,
                'ml.c4.xlarge'.
            serializer (:class:`~smkit.serializers.BaseSerializer`): A serializer object, used to encode data
                for an inference endpoint (default: None). The default serializer is set by the
                ``predictor_cls``.
            deserializer (:class:`~smkit.deserializers.BaseDeserializer`): A deserializer object, used to
                decode data from an inference endpoint (default: None). The default deserializer is set by the
                ``predictor_cls``.
            endpoint_name (str): Name to use for creating an Amazon SageMaker endpoint. If not specified, the
                name of the best training job is used.
            wait (bool): Whether the call should wait until the deployment of model completes (default: True).
            model_name (str): Name to use for creating an Amazon SageMaker model. If not specified, the name of
                the best training job is used.
            kms_key (str): The ARN of the KMS key that is used to encrypt the data on the storage volume
                attached to the instance hosting the endpoint.
            data_capture_config (smkit.model_monitor.DataCaptureConfig): Specifies configuration related to
                Endpoint data capture for use with Amazon SageMaker Model Monitoring. Default: None.
            **kwargs: Other arguments needed for deployment. Please refer to the ``create_model()`` method of
                the associated estimator to see what other arguments are needed.

        Returns:
            smkit.predictor.Predictor: A predictor that provides a ``predict()`` method, which can be used to
            send requests to the Amazon SageMaker endpoint and obtain inferences.
        """
        best_training_job = self._get_best_training_job()
        best_estimator = self.best_estimator(best_training_job)

        return best_estimator.deploy(
            initial_instance_count=initial_instance_count,
            instance_type=instance_type,
            serializer=serializer,
            deserializer=deserializer,
            endpoint_name=endpoint_name or best_training_job["TrainingJobName"],
            wait=wait,
            model_name=model_name,
            kms_key=kms_key,
            data_capture_config=data_capture_config,
            **kwargs,
        )

    def stop_tuning_job(self):
        """Stop latest running hyperparameter tuning job."""
        self._ensure_last_tuning_job()
        self.latest_tuning_job.stop()

    def describe(self) -> Dict[str, Any]:
        """Returns a response from the DescribeHyperParameterTuningJob API call."""
        self._ensure_last_tuning_job()
        return self.sagemaker_session.describe_tuning_job(self._current_job_name)

    def wait(self):
        """Wait for latest hyperparameter tuning job to finish."""
        self._ensure_last_tuning_job()
        self.latest_tuning_job.wait()

    def best_estimator(self, best_training_job: Optional[Dict[str, str]] = None) -> EstimatorBase:
        """Return the estimator that has best training job attached.

        The trained model can then be deployed to an Amazon SageMaker endpoint and return a ``Predictor``.

        Args:
            best_training_job (dict): Dictionary containing "TrainingJobName" and "TrainingJobDefinitionName".

        Returns:
            smkit.estimator.EstimatorBase: The estimator that has the best training job attached.

        Raises:
            ValueError: If there is no best training job available for the hyperparameter tuning job.
        """
        if best_training_job is None:
            best_training_job = self._get_best_training_job()

        if self.estimator is not None:
            best_estimator = self.estimator
        else:
            best_estimator_name = best_training_job["TrainingJobDefinitionName"]
            best_estimator = self.estimator_dict[best_estimator_name]

        return best_estimator.attach(
            training_job_name=best_training_job["TrainingJobName"],
            sagemaker_session=self.sagemaker_session,
        )

    def best_training_job(self) -> str:
        """Return name of the best training job for the latest hyperparameter tuning job.

        Raises:
            ValueError: If there is no best training job available for the hyperparameter tuning job.
        """
        return self._get_best_training_job()["TrainingJobName"]

    def _get_best_training_job(self) -> Dict[str, Any]:
        self._ensure_last_tuning_job()

        tuning_job_describe_result = self.sagemaker_session.describe_tuning_job(self.latest_tuning_job.name)

        try:
            return tuning_job_describe_result["BestTrainingJob"]
        except KeyError:
            raise ValueError(f"Best training job not available for tuning job: {self.latest_tuning_job.name}")

    def delete_endpoint(self, endpoint_name: Optional[str] = None):
        """Delete an Amazon SageMaker endpoint.

        If an endpoint name is not specified, this defaults to looking for an endpoint that shares a name with
        the best training job for deletion.

        Args:
            endpoint_name (str): Name of the endpoint to delete
        """
        endpoint_name = endpoint_name or self.best_training_job()
        self.sagemaker_session.delete_endpoint(endpoint_name)

    def _ensure_last_tuning_job(self):
        if self.latest_tuning_job is None:
            raise ValueError("No tuning job available")

    @classmethod
    def _prepare_estimator(
        cls,
        estimator_cls: Optional[str],
        training_details: Dict[str, Any],
        parameter_ranges: Dict[str, List[Dict[str, Any]]],
        sagemaker_session: Session,
    ) -> EstimatorBase:
        """Attach an estimator from training job details."""
        estimator_cls = cls._prepare_estimator_cls(estimator_cls, training_details)
        return cls._prepare_estimator_from_job_description(
            estimator_cls, training_details, parameter_ranges, sagemaker_session
        )

    @classmethod
    def _prepare_estimator_cls(cls, estimator_cls: Optional[str], training_details: Dict[str, Any]) -> Type:
        # Check for customer-specified estimator first
        if estimator_cls is not None:
            module, cls_name = estimator_cls.rsplit(".", 1)
            return getattr(importlib.import_module(module), cls_name)

        # Then check for estimator class in hyperparameters
        hyperparameters = training_details["StaticHyperParameters"]
        if cls.SAGEMAKER_ESTIMATOR_CLASS_NAME in hyperparameters and cls.SAGEMAKER_ESTIMATOR_MODULE in hyperparameters:
            module = hyperparameters.get(cls.SAGEMAKER_ESTIMATOR_MODULE)
            cls_name = hyperparameters.get(cls.SAGEMAKER_ESTIMATOR_CLASS_NAME)
            return getattr(importlib.import_module(json.loads(module)), json.loads(cls_name))

        # Then try to derive the estimator from the image name for 1P algorithms
        image_uri = training_details["AlgorithmSpecification"].get("TrainingImage", "")
        algorithm = image_uri[image_uri.find("/") + 1 : image_uri.find(":")]
        if algorithm in AMAZON_ESTIMATOR_CLS_NAMES:
            cls_name = AMAZON_ESTIMATOR_CLS_NAMES[algorithm]
            return getattr(importlib.import_module(AMAZON_ESTIMATOR_MODULE), cls_name)

        # Default to the BYO estimator
        return getattr(importlib.import_module(cls.DEFAULT_ESTIMATOR_MODULE), cls.DEFAULT_ESTIMATOR_CLS_NAME)

    @classmethod
    def _prepare_estimator_from_job_description(
        cls,
        estimator_cls: Type,
        training_details: Dict[str, Any],
        parameter_ranges: Dict[str, List[Dict[str, Any]]],
        sagemaker_session: Session,
    ) -> EstimatorBase:
        training_details = dict(training_details)

        # Swap name for static hyperparameters to what an estimator would expect
        training_details["HyperParameters"] = dict(training_details.pop("StaticHyperParameters"))
        for key in (cls.SAGEMAKER_ESTIMATOR_CLASS_NAME, cls.SAGEMAKER_ESTIMATOR_MODULE):
            training_details["HyperParameters"].pop(key, None)

        # Remove hyperparameter reserved by SageMaker for tuning jobs
        training_details["HyperParameters"].pop("_tuning_objective_metric", None)

        # Add missing hyperparameters defined in the hyperparameter ranges,
        # as potentially required in the Amazon algorithm estimator's constructor
        if issubclass(estimator_cls, AmazonAlgorithmEstimatorBase):
            additional_hyperparameters = cls._extract_hyperparameters_from_parameter_ranges(parameter_ranges)
            training_details["HyperParameters"].update(additional_hyperparameters)

        # Add items expected by the estimator (but aren't needed otherwise)
        training_details["TrainingJobName"] = ""
        training_details["OutputDataConfig"] = dict(training_details["OutputDataConfig"])
        if "KmsKeyId" not in training_details["OutputDataConfig"]:
            training_details["OutputDataConfig"]["KmsKeyId"] = None

        estimator_init_params = estimator_cls._prepare_init_params_from_job_description(training_details)
        return estimator_cls(sagemaker_session=sagemaker_session, **estimator_init_params)

    @classmethod
    def _prepare_init_params_from_job_description(cls, job_details: Dict[str, Any]) -> Dict[str, Any]:
        tuning_config = job_details["HyperParameterTuningJobConfig"]

        params = {
            "strategy": tuning_config["Strategy"],
            "max_jobs": tuning_config["ResourceLimits"]["MaxNumberOfTrainingJobs"],
            "max_parallel_jobs": tuning_config["ResourceLimits"]["MaxParallelTrainingJobs"],
            "warm_start_config": WarmStartConfig.from_job_desc(job_details.get("WarmStartConfig", None)),
            "early_stopping_type": tuning_config["TrainingJobEarlyStoppingType"],
            "base_tuning_job_name": base_from_name(job_details["HyperParameterTuningJobName"]),
        }

        if "HyperParameterTuningJobObjective" in tuning_config:
            params["objective_metric_name"] = tuning_config["HyperParameterTuningJobObjective"]["MetricName"]
            params["objective_type"] = tuning_config["HyperParameterTuningJobObjective"]["Type"]

        if "ParameterRanges" in tuning_config:
            params["hyperparameter_ranges"] = cls._prepare_parameter_ranges_from_job_description(
                tuning_config["ParameterRanges"]
            )

        if "TrainingJobDefinition" in job_details:
            params["metric_definitions"] = job_details["TrainingJobDefinition"]["AlgorithmSpecification"].get(
                "MetricDefinitions"
            )

        if "TrainingJobDefinitions" in job_details:
            params["objective_type"] = job_details["TrainingJobDefinitions"][0]["TuningObjective"]["Type"]

        return params

    @classmethod
    def _prepare_parameter_ranges_from_job_description(
        cls, parameter_ranges: Dict[str, List[Dict[str, Any]]]
    ) -> Dict[str, ParameterRange]:
        ranges: Dict[str, ParameterRange] = {}

        for parameter in parameter_ranges.get("CategoricalParameterRanges", []):
            ranges[parameter["Name"]] = CategoricalParameter(parameter["Values"])

        for parameter in parameter_ranges.get("ContinuousParameterRanges", []):
            ranges[parameter["Name"]] = ContinuousParameter(
                float(parameter["MinValue"]),
                float(parameter["MaxValue"]),
                scaling_type=parameter.get("ScalingType", "Auto"),
            )

        for parameter in parameter_ranges.get("IntegerParameterRanges", []):
            ranges[parameter["Name"]] = IntegerParameter(
                int(parameter["MinValue"]),
                int(parameter["MaxValue"]),
                scaling_type=parameter.get("ScalingType", "Auto"),
            )

        return ranges

    @classmethod
    def _extract_hyperparameters_from_parameter_ranges(
        cls, parameter_ranges: Dict[str, List[Dict[str, Any]]]
    ) -> Dict[str, Any]:
        hyperparameters: Dict[str, Any] = {}

        for parameter in parameter_ranges.get("CategoricalParameterRanges", []):
            hyperparameters[parameter["Name"]] = parameter["Values"][0]

        for parameter in parameter_ranges.get("ContinuousParameterRanges", []):
            hyperparameters[parameter["Name"]] = float(parameter["MinValue"])

        for parameter in parameter_ranges.get("IntegerParameterRanges", []):
            hyperparameters[parameter["Name"]] = int(parameter["MinValue"])

        return hyperparameters

    def hyperparameter_ranges(self) -> Optional[Dict[str, List[Dict[str, Any]]]]:
        """Return the hyperparameter ranges in a dictionary.

        Dictionary to be used as part of a request for creating a hyperparameter tuning job.
        """
        if self._hyperparameter_ranges is None:
            return None

        return self._prepare_parameter_ranges_for_tuning(self._hyperparameter_ranges)

    def hyperparameter_ranges_dict(self) -> Optional[Dict[str, Dict[str, List[Dict[str, Any]]]]]:
        """Return a dictionary of hyperparameter ranges for all estimators in ``estimator_dict``."""
        if self._hyperparameter_ranges_dict is None:
            return None

        return {
            estimator_name: self._prepare_parameter_ranges_for_tuning(self._hyperparameter_ranges_dict[estimator_name])
            for estimator_name in sorted(self.estimator_dict.keys())
        }

    @classmethod
    def _prepare_parameter_ranges_for_tuning(
        cls, parameter_ranges: Dict[str, ParameterRange]
    ) -> Dict[str, List[Dict[str, Any]]]:
        processed_parameter_ranges = dict()
        for range_type in ParameterRange.__all_types__:
            hp_ranges = []
            for parameter_name, parameter in parameter_ranges.items():
                if parameter is not None and parameter.__name__ == range_type:
                    hp_ranges.append(parameter.as_tuning_range(parameter_name))
            processed_parameter_ranges[range_type + "ParameterRanges"] = hp_ranges
        return processed_parameter_ranges

    @property
    def sagemaker_session(self) -> Session:
        """Convenience method for accessing the :class:`~smkit.session.Session` of the tuner's estimator."""
        estimator = self.estimator
        if estimator is None:
            first_estimator_name = sorted(self.estimator_dict.keys())[0]
            estimator = self.estimator_dict[first_estimator_name]
        return estimator.sagemaker_session

    def analytics(self) -> HyperparameterTuningJobAnalytics:
        """An instance of HyperparameterTuningJobAnalytics for this latest tuning job of this tuner.

        Analytics object gives you access to tuning results summarized into a pandas dataframe.
        """
        self._ensure_last_tuning_job()
        return HyperparameterTuningJobAnalytics(self.latest_tuning_job.name, self.sagemaker_session)

    def _validate_parameter_ranges(self, estimator: EstimatorBase, hyperparameter_ranges: Dict[str, ParameterRange]):
        """Validate hyperparameter ranges against the ``Hyperparameter`` descriptors of an estimator."""
        for kls in inspect.getmro(estimator.__class__)[::-1]:
            for _, value in kls.__dict__.items():
                if isinstance(value, hp):
                    # The hyperparam names may not be the same as the class attribute that holds them, for
                    # instance: local_lloyd_init_method is called local_init_method.
                    parameter_range = hyperparameter_ranges.get(value.name)
                    if isinstance(parameter_range, ParameterRange):
                        self._validate_parameter_range(value, parameter_range)

    def _validate_parameter_range(self, value_hp: hp, parameter_range: ParameterRange):
        for (parameter_range_key, parameter_range_value) in parameter_range.__dict__.items():
            if parameter_range_key == "scaling_type":
                continue

            # Categorical ranges
            if isinstance(parameter_range_value, list):
                for categorical_value in parameter_range_value:
                    # Categorical values are kept as strings.
                    if value_hp.data_type in (int, float):
                        categorical_value = value_hp.data_type(categorical_value)
                    value_hp.validate(categorical_value)
            # Continuous, Integer ranges
            else:
                value_hp.validate(parameter_range_value)

    def transfer_learning_tuner(
        self, additional_parents: Optional[Set[str]] = None, estimator: Optional[EstimatorBase] = None
    ) -> "HyperparameterTuner":
        """Creates a new ``HyperparameterTuner`` that warm starts from this one with "TransferLearning".

        The request fields are copied from this tuner, and the parents of the warm start are the union of
        ``additional_parents`` and this tuner's latest tuning job.

        Examples:
            >>> parent_tuner = HyperparameterTuner.attach(tuning_job_name="parent-job-1")
            >>> transfer_learning_tuner = parent_tuner.transfer_learning_tuner(
            >>>                                             additional_parents={"parent-job-2"})
            Later On:
            >>> transfer_learning_tuner.fit(inputs={})

        Args:
            additional_parents (set{str}): Set of additional parents along with the self to be used in warm
                starting.
            estimator (smkit.estimator.EstimatorBase): An estimator object that has been initialized with the
                desired configuration. There does not need to be a training job associated with this instance.

        Returns:
            smkit.tuner.HyperparameterTuner: ``HyperparameterTuner`` instance which can be used to launch
            transfer learning tuning job.
        """
        return self._create_warm_start_tuner(
            additional_parents=additional_parents,
            warm_start_type=WarmStartTypes.TRANSFER_LEARNING,
            estimator=estimator,
        )

    def identical_dataset_and_algorithm_tuner(
        self, additional_parents: Optional[Set[str]] = None
    ) -> "HyperparameterTuner":
        """Creates a new ``HyperparameterTuner`` that warm starts from this one with "IdenticalDataAndAlgorithm".

        Examples:
            >>> parent_tuner = HyperparameterTuner.attach(tuning_job_name="parent-job-1")
            >>> identical_dataset_algo_tuner = parent_tuner.identical_dataset_and_algorithm_tuner(
            >>>                                                additional_parents={"parent-job-2"})

        Args:
            additional_parents (set{str}): Set of additional parents along with the self to be used in warm
                starting.

        Returns:
            smkit.tuner.HyperparameterTuner: HyperparameterTuner instance which can be used to launch identical
            dataset and algorithm tuning job.
        """
        return self._create_warm_start_tuner(
            additional_parents=additional_parents,
            warm_start_type=WarmStartTypes.IDENTICAL_DATA_AND_ALGORITHM,
        )

    def _create_warm_start_tuner(
        self,
        additional_parents: Optional[Set[str]],
        warm_start_type: WarmStartTypes,
        estimator: Optional[EstimatorBase] = None,
    ) -> "HyperparameterTuner":
        self._ensure_last_tuning_job()
        all_parents = {self.latest_tuning_job.name}
        if additional_parents:
            all_parents = all_parents.union(additional_parents)

        if self.estimator is not None:
            return HyperparameterTuner(
                estimator=estimator if estimator else self.estimator,
                objective_metric_name=self.objective_metric_name,
                hyperparameter_ranges=self._hyperparameter_ranges,
                metric_definitions=self.metric_definitions,
                strategy=self.strategy,
                objective_type=self.objective_type,
                max_jobs=self.max_jobs,
                max_parallel_jobs=self.max_parallel_jobs,
                warm_start_config=WarmStartConfig(warm_start_type=warm_start_type, parents=all_parents),
                early_stopping_type=self.early_stopping_type,
            )

        if len(self.estimator_dict) > 1:
            raise ValueError("Warm start is not supported currently for tuners with multiple estimators")

        if estimator is not None:
            estimator_name = list(self.estimator_dict.keys())[0]
            estimator_dict = {estimator_name: estimator}
        else:
            estimator_dict = self.estimator_dict

        return HyperparameterTuner.create(
            estimator_dict=estimator_dict,
            objective_metric_name_dict=self.objective_metric_name_dict,
            hyperparameter_ranges_dict=self._hyperparameter_ranges_dict,
            metric_definitions_dict=self.metric_definitions_dict,
            strategy=self.strategy,
            objective_type=self.objective_type,
            max_jobs=self.max_jobs,
            max_parallel_jobs=self.max_parallel_jobs,
            warm_start_config=WarmStartConfig(warm_start_type=warm_start_type, parents=all_parents),
            early_stopping_type=self.early_stopping_type,
        )

    @classmethod
    def create(
        cls,
        estimator_dict: Dict[str, EstimatorBase],
        objective_metric_name_dict: Dict[str, str],
        hyperparameter_ranges_dict: Dict[str, Dict[str, ParameterRange]],
        metric_definitions_dict: Optional[Dict[str, List[Dict[str, str]]]] = None,
        base_tuning_job_name: Optional[str] = None,
        strategy: str = "Bayesian",
        objective_type: str = "Maximize",
        max_jobs: int = 1,
        max_parallel_jobs: int = 1,
        tags: Optional[List[Dict[str, str]]] = None,
        warm_start_config: Optional[WarmStartConfig] = None,
        early_stopping_type: str = "Off",
    ) -> "HyperparameterTuner":
        """Factory method to create a ``HyperparameterTuner`` instance over one or more estimators.

        The estimators are provided through a dictionary (i.e. ``estimator_dict``) with unique estimator names
        as the keys. For individual estimators separate objective metric names and hyperparameter ranges should
        be provided in two dictionaries, i.e. ``objective_metric_name_dict`` and ``hyperparameter_ranges_dict``,
        with the same estimator names as the keys. Optional metrics definitions could also be provided for
        individual estimators via another dictionary ``metric_definitions_dict``.

        Args:
            estimator_dict (dict[str, smkit.estimator.EstimatorBase]): Dictionary of estimator instances that
                have been initialized with the desired configuration. The keys of the dictionary would be
                referred to as "estimator names".
            objective_metric_name_dict (dict[str, str]): Dictionary of names of the objective metric for
                evaluating training jobs, one entry for each estimator in ``estimator_dict``.
            hyperparameter_ranges_dict (dict[str, dict[str, smkit.parameter.ParameterRange]]): Dictionary of
                tunable hyperparameter ranges, one entry for each estimator in ``estimator_dict``.
            metric_definitions_dict (dict[str, list[dict]]): Dictionary of metric definitions. The keys are the
                same set or a subset of estimator names as in ``estimator_dict``.
            base_tuning_job_name (str): Prefix for the hyperparameter tuning job name when the
                :meth:`~smkit.tuner.HyperparameterTuner.fit` method launches.
            strategy (str): Strategy to be used for hyperparameter estimations (default: 'Bayesian').
            objective_type (str): The type of the objective metric for evaluating training jobs. This value can
                be either 'Minimize' or 'Maximize' (default: 'Maximize').
            max_jobs (int): Maximum total number of training jobs to start for the hyperparameter tuning job
                (default: 1).
            max_parallel_jobs (int): Maximum number of parallel training jobs to start (default: 1).
            tags (list[dict]): List of tags for labeling the tuning job (default: None).
            warm_start_config (smkit.tuner.WarmStartConfig): A ``WarmStartConfig`` object that has been
                initialized with the configuration defining the nature of warm start tuning job.
            early_stopping_type (str): Specifies whether early stopping is enabled for the job. Can be either
                'Auto' or 'Off' (default: 'Off').

        Returns:
            smkit.tuner.HyperparameterTuner: a new ``HyperparameterTuner`` object that can start a
            hyperparameter tuning job with one or more estimators.
        """
        cls._validate_create_tuner_inputs(
            estimator_dict, objective_metric_name_dict, hyperparameter_ranges_dict, metric_definitions_dict
        )

        estimator_names = sorted(estimator_dict.keys())
        first_estimator_name = estimator_names[0]

        metric_definitions = (
            metric_definitions_dict.get(first_estimator_name, None) if metric_definitions_dict is not None else None
        )

        tuner = HyperparameterTuner(
            base_tuning_job_name=base_tuning_job_name,
            estimator_name=first_estimator_name,
            estimator=estimator_dict[first_estimator_name],
            objective_metric_name=objective_metric_name_dict[first_estimator_name],
            hyperparameter_ranges=hyperparameter_ranges_dict[first_estimator_name],
            metric_definitions=metric_definitions,
            strategy=strategy,
            objective_type=objective_type,
            max_jobs=max_jobs,
            max_parallel_jobs=max_parallel_jobs,
            tags=tags,
            warm_start_config=warm_start_config,
            early_stopping_type=early_stopping_type,
        )

        for estimator_name in estimator_names[1:]:
            metric_definitions = (
                metric_definitions_dict.get(estimator_name, None) if metric_definitions_dict is not None else None
            )
            tuner._add_estimator(
                estimator_name=estimator_name,
                estimator=estimator_dict[estimator_name],
                objective_metric_name=objective_metric_name_dict[estimator_name],
                hyperparameter_ranges=hyperparameter_ranges_dict[estimator_name],
                metric_definitions=metric_definitions,
            )
        return tuner

    @classmethod
    def _validate_create_tuner_inputs(
        cls, estimator_dict, objective_metric_name_dict, hyperparameter_ranges_dict, metric_definitions_dict=None
    ):
        """Validate inputs for ``HyperparameterTuner.create()``."""
        cls._validate_estimator_dict(estimator_dict)

        estimator_names = sorted(estimator_dict.keys())

        cls._validate_dict_argument(
            name="objective_metric_name_dict",
            value=objective_metric_name_dict,
            allowed_keys=estimator_names,
            require_same_keys=True,
        )
        cls._validate_dict_argument(
            name="hyperparameter_ranges_dict",
            value=hyperparameter_ranges_dict,
            allowed_keys=estimator_names,
            require_same_keys=True,
        )
        cls._validate_dict_argument(
            name="metric_definitions_dict", value=metric_definitions_dict, allowed_keys=estimator_names
        )

    @classmethod
    def _validate_estimator_dict(cls, estimator_dict):
        if estimator_dict is None or len(estimator_dict) == 0:
            raise ValueError("At least one estimator should be provided")
        if None in estimator_dict.keys():
            raise ValueError("Estimator names cannot be None")

    @classmethod
    def _validate_dict_argument(cls, name: str, value, allowed_keys: List[str], require_same_keys: bool = False):
        """Check if an argument is an dictionary with correct key set."""
        if value is None:
            return

        if not isinstance(value, dict):
            raise ValueError(f"Argument '{name}' must be a dictionary using {allowed_keys} as keys")

        value_keys = sorted(value.keys())

        if require_same_keys:
            if value_keys != allowed_keys:
                raise ValueError(f"The keys of argument '{name}' must be the same as {allowed_keys}")
        else:
            if not set(value_keys).issubset(set(allowed_keys)):
                raise ValueError(f"The keys of argument '{name}' must be a subset of {allowed_keys}")

    def _add_estimator(
        self,
        estimator_name: str,
        estimator: EstimatorBase,
        objective_metric_name: str,
        hyperparameter_ranges: Dict[str, ParameterRange],
        metric_definitions: Optional[List[Dict[str, str]]] = None,
    ):
        """Add an estimator with its objective metric name, parameter ranges, and metric definitions."""
        self._validate_parameter_ranges(estimator, hyperparameter_ranges)
        self.estimator_dict[estimator_name] = estimator
        self.objective_metric_name_dict[estimator_name] = objective_metric_name
        self._hyperparameter_ranges_dict[estimator_name] = hyperparameter_ranges
        if metric_definitions is not None:
            self.metric_definitions_dict[estimator_name] = metric_definitions


class _TuningJob(_Job):
    @classmethod
    def start_new(cls, tuner: HyperparameterTuner, inputs) -> "_TuningJob":
        """Create a new Amazon SageMaker hyperparameter tuning job from the ``tuner`` and ``inputs``.

        Args:
            tuner (smkit.tuner.HyperparameterTuner): HyperparameterTuner object created by the user.
            inputs: Parameters used when called :meth:`~smkit.estimator.EstimatorBase.fit`.

        Returns:
            smkit.tuner._TuningJob: Constructed object that captures all information about the started job.
        """
        tuner_args = cls._get_tuner_args(tuner, inputs)
        tuner.sagemaker_session.create_tuning_job(**tuner_args)
        return cls(tuner.sagemaker_session, tuner._current_job_name)

    @classmethod
    def _get_tuner_args(cls, tuner: HyperparameterTuner, inputs) -> Dict[str, Any]:
        """Gets a dict of arguments for :meth:`~smkit.session.Session.create_tuning_job` from the tuner."""
        warm_start_config_req = None
        if tuner.warm_start_config:
            warm_start_config_req = tuner.warm_start_config.to_input_req()

        tuning_config: Dict[str, Any] = {
            "strategy": tuner.strategy,
            "max_jobs": tuner.max_jobs,
            "max_parallel_jobs": tuner.max_parallel_jobs,
            "early_stopping_type": tuner.early_stopping_type,
        }

        if tuner.objective_metric_name is not None:
            tuning_config["objective_type"] = tuner.objective_type
            tuning_config["objective_metric_name"] = tuner.objective_metric_name

        parameter_ranges = tuner.hyperparameter_ranges()
        if parameter_ranges is not None:
            tuning_config["parameter_ranges"] = parameter_ranges

        tuner_args: Dict[str, Any] = {
            "job_name": tuner._current_job_name,
            "tuning_config": tuning_config,
            "tags": tuner.tags,
            "warm_start_config": warm_start_config_req,
        }

        if tuner.estimator is not None:
            tuner_args["training_config"] = cls._prepare_training_config(
                inputs, tuner.estimator, tuner.static_hyperparameters, tuner.metric_definitions
            )

        if tuner.estimator_dict is not None:
            ranges_dict = tuner.hyperparameter_ranges_dict()
            tuner_args["training_config_list"] = [
                cls._prepare_training_config(
                    inputs.get(estimator_name, None) if inputs is not None else None,
                    tuner.estimator_dict[estimator_name],
                    tuner.static_hyperparameters_dict[estimator_name],
                    tuner.metric_definitions_dict.get(estimator_name, None),
                    estimator_name,
                    tuner.objective_type,
                    tuner.objective_metric_name_dict[estimator_name],
                    ranges_dict[estimator_name],
                )
                for estimator_name in sorted(tuner.estimator_dict.keys())
            ]

        return tuner_args

    @staticmethod
    def _prepare_training_config(
        inputs,
        estimator: EstimatorBase,
        static_hyperparameters: Dict[str, str],
        metric_definitions: Optional[List[Dict[str, str]]],
        estimator_name: Optional[str] = None,
        objective_type: Optional[str] = None,
        objective_metric_name: Optional[str] = None,
        parameter_ranges: Optional[Dict[str, List[Dict[str, Any]]]] = None,
    ) -> Dict[str, Any]:
        """Prepare training config for one estimator."""
        training_config = _Job._load_config(inputs, estimator)

        training_config["input_mode"] = estimator.input_mode
        training_config["metric_definitions"] = metric_definitions

        if isinstance(inputs, TrainingInput):
            if "InputMode" in inputs.config:
                logger.debug(
                    "Selecting TrainingInput's input_mode (%s) for TrainingInputMode.", inputs.config["InputMode"]
                )
                training_config["input_mode"] = inputs.config["InputMode"]

        algorithm_arn = getattr(estimator, "algorithm_arn", None)
        if algorithm_arn:
            training_config["algorithm_arn"] = algorithm_arn
        else:
            training_config["image_uri"] = estimator.training_image_uri()

        training_config["enable_network_isolation"] = estimator.enable_network_isolation()
        training_config["encrypt_inter_container_traffic"] = estimator.encrypt_inter_container_traffic

        training_config["use_spot_instances"] = estimator.use_spot_instances
        training_config["checkpoint_s3_uri"] = estimator.checkpoint_s3_uri
        training_config["checkpoint_local_path"] = estimator.checkpoint_local_path

        training_config["static_hyperparameters"] = static_hyperparameters

        if estimator_name is not None:
            training_config["estimator_name"] = estimator_name

        if objective_type is not None:
            training_config["objective_type"] = objective_type

        if objective_metric_name is not None:
            training_config["objective_metric_name"] = objective_metric_name

        if parameter_ranges is not None:
            training_config["parameter_ranges"] = parameter_ranges

        return training_config

    def wait(self):
        self.sagemaker_session.wait_for_tuning_job(self.name)

    def describe(self) -> Dict[str, Any]:
        return self.sagemaker_session.describe_tuning_job(self.name)

    def stop(self):
        self.sagemaker_session.stop_tuning_job(name=self.name)


def create_identical_dataset_and_algorithm_tuner(
    parent: str, additional_parents: Optional[Set[str]] = None, sagemaker_session: Optional[Session] = None
) -> HyperparameterTuner:
    """Creates a new "IdenticalDataAndAlgorithm" warm start tuner from the parent tuning job's name.

    Args:
        parent (str): Primary parent tuning job's name from which the Tuner and Estimator configuration has to be
            copied.
        additional_parents (set{str}): Set of additional parent tuning job's names along with the primary parent
            tuning job name to be used in warm starting the tuner.
        sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
            SageMaker APIs and any other AWS services needed.

    Returns:
        smkit.tuner.HyperparameterTuner: a new ``HyperparameterTuner`` object for the warm-started
        hyperparameter tuning job.
    """
    parent_tuner = HyperparameterTuner.attach(tuning_job_name=parent, sagemaker_session=sagemaker_session)
    return parent_tuner.identical_dataset_and_algorithm_tuner(additional_parents=additional_parents)


def create_transfer_learning_tuner(
    parent: str,
    additional_parents: Optional[Set[str]] = None,
    estimator: Optional[EstimatorBase] = None,
    sagemaker_session: Optional[Session] = None,
) -> HyperparameterTuner:
    """Creates a new "TransferLearning" warm start tuner from the parent tuning job's name.

    Args:
        parent (str): Primary parent tuning job's name from which the Tuner and Estimator configuration has to be
            copied.
        additional_parents (set{str}): Set of additional parent tuning job's names along with the primary parent
            tuning job name to be used in warm starting the tuner.
        estimator (smkit.estimator.EstimatorBase): An estimator object that has been initialized with the desired
            configuration. There does not need to be a training job associated with this instance.
        sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
            SageMaker APIs and any other AWS services needed.

    Returns:
        smkit.tuner.HyperparameterTuner: New instance of warm started HyperparameterTuner.
    """
    parent_tuner = HyperparameterTuner.attach(tuning_job_name=parent, sagemaker_session=sagemaker_session)
    return parent_tuner.transfer_learning_tuner(additional_parents=additional_parents, estimator=estimator)
