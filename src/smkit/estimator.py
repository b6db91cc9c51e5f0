"""Estimators: configure, launch, and follow SageMaker training jobs."""
import logging
from abc import ABCMeta, abstractmethod
from typing import Any, Dict, List, Optional, Union

from . import image_uris, vpc_utils
from .analytics import TrainingJobAnalytics
from .debugger import (
    DebuggerHookConfig,
    FrameworkProfile,
    ProfilerConfig,
    ProfilerRule,
    Rule,
    TensorBoardOutputConfig,
    get_default_profiler_rule,
)
from .debugger.utils import DEFAULT_RULE_EVALUATOR_IMAGE
from .inputs import FileSystemInput, TrainingInput
from .job import _Job
from .model import Model
from .predictor import Predictor
from .s3 import parse_s3_url, s3_path_join
from .session import Session
from .utils import base_from_name, base_name_from_image, name_from_base, to_string

logger = logging.getLogger(__name__)

# Regions where the debugger rule images, hence debugger rules and profiling, are available.
_DEBUGGER_FRAMEWORK = "debugger"


def _region_supports_debugger(region_name: str) -> bool:
    registries = image_uris.config_for_framework(_DEBUGGER_FRAMEWORK)["versions"]["latest"]["registries"]
    return region_name in registries


class EstimatorBase(object, metaclass=ABCMeta):
    """Handle end-to-end Amazon SageMaker training and deployment tasks.

    For introduction to model training and deployment, see
    http://docs.aws.amazon.com/sagemaker/latest/dg/how-it-works-training.html

    Subclasses must define a way to determine what image to use for training, what hyperparameters to use, and
    how to create an appropriate predictor instance.
    """

    def __init__(  # noqa: C901
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        volume_size: int = 30,
        volume_kms_key: Optional[str] = None,
        max_run: int = 24 * 60 * 60,
        input_mode: str = "File",
        output_path: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        base_job_name: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        subnets: Optional[List[str]] = None,
        security_group_ids: Optional[List[str]] = None,
        model_uri: Optional[str] = None,
        model_channel_name: str = "model",
        metric_definitions: Optional[List[Dict[str, str]]] = None,
        encrypt_inter_container_traffic: bool = False,
        use_spot_instances: bool = False,
        max_wait: Optional[int] = None,
        checkpoint_s3_uri: Optional[str] = None,
        checkpoint_local_path: Optional[str] = None,
        rules: Optional[List[Union[Rule, ProfilerRule]]] = None,
        debugger_hook_config: Optional[Union[DebuggerHookConfig, bool]] = None,
        tensorboard_output_config: Optional[TensorBoardOutputConfig] = None,
        enable_sagemaker_metrics: Optional[bool] = None,
        enable_network_isolation: bool = False,
        profiler_config: Optional[ProfilerConfig] = None,
        disable_profiler: bool = False,
        environment: Optional[Dict[str, str]] = None,
        max_retry_attempts: Optional[int] = None,
    ):
        """Initialize an ``EstimatorBase`` instance.

        Args:
            role (str): An AWS IAM role (either name or full ARN). The Amazon SageMaker training jobs and APIs
                that create Amazon SageMaker endpoints use this role to access training data and model
                artifacts. After the endpoint is created, the inference code might use the IAM role, if it needs
                to access an AWS resource.
            instance_count (int): Number of Amazon EC2 instances to use for training. Required.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'. Required.
            volume_size (int): Size in GB of the EBS volume to use for storing input data during training
                (default: 30). Must be large enough to store training data if File Mode is used.
            volume_kms_key (str): Optional. KMS key ID for encrypting EBS volume attached to the training
                instance (default: None).
            max_run (int): Timeout in seconds for training (default: 24 * 60 * 60). After this amount of time
                Amazon SageMaker terminates the job regardless of its current status.
            input_mode (str): The input mode that the algorithm supports (default: 'File'). Valid modes:
                'File', 'Pipe', 'FastFile'. This argument can be overriden on a per-channel basis using
                ``smkit.inputs.TrainingInput.input_mode``.
            output_path (str): S3 location for saving the training result (model artifacts and output files).
                If not specified, results are stored to a default bucket.
            output_kms_key (str): Optional. KMS key ID for encrypting the training output (default: None).
            base_job_name (str): Prefix for training job name when the :meth:`fit` method launches. If not
                specified, the estimator generates a default job name, based on the training image name and
                current timestamp.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, the estimator creates one
                using the default AWS configuration chain.
            tags (list[dict]): List of tags for labeling a training job.
            subnets (list[str]): List of subnet ids. If not specified training job will be created without VPC
                config.
            security_group_ids (list[str]): List of security group ids. If not specified training job will be
                created without VPC config.
            model_uri (str): URI where a pre-trained model is stored, either locally or in S3 (default: None).
                If specified, the estimator will create a channel pointing to the model so the training job can
                download it.
            model_channel_name (str): Name of the channel where 'model_uri' will be downloaded (default:
                'model').
            metric_definitions (list[dict]): A list of dictionaries that defines the metric(s) used to evaluate
                the training jobs. Each dictionary contains two keys: 'Name' for the name of the metric, and
                'Regex' for the regular expression used to extract the metric from the logs.
            encrypt_inter_container_traffic (bool): Specifies whether traffic between training containers is
                encrypted for the training job (default: ``False``).
            use_spot_instances (bool): Specifies whether to use SageMaker Managed Spot instances for training.
                If enabled then the ``max_wait`` arg should also be set.
            max_wait (int): Timeout in seconds waiting for spot training job (default: None). After this amount
                of time Amazon SageMaker will stop waiting for managed spot training job to complete.
            checkpoint_s3_uri (str): The S3 URI in which to persist checkpoints that the algorithm persists
                (if any) during training. (default: ``None``).
            checkpoint_local_path (str): The local path that the algorithm writes its checkpoints to.
                SageMaker will persist all files under this path to `checkpoint_s3_uri` continually during
                training. (default: ``None``).
            rules (list[Rule or ProfilerRule]): A list of debugger or profiler rules to evaluate during
                training.
            debugger_hook_config (DebuggerHookConfig or bool): Configuration for how debugging information is
                emitted with SageMaker Debugger. If not specified while debugger rules are given, a default one
                is created using the estimator's ``output_path``. To disable the hook, set this parameter to
                ``False``.
            tensorboard_output_config (TensorBoardOutputConfig): Configuration for customizing debugging
                visualization using TensorBoard (default: ``None``).
            enable_sagemaker_metrics (bool): Enables SageMaker Metrics Time Series. For more information see:
                https://docs.aws.amazon.com/sagemaker/latest/dg/API_AlgorithmSpecification.html
            enable_network_isolation (bool): Specifies whether container will run in network isolation mode
                (default: ``False``).
            profiler_config (ProfilerConfig): Configuration for how SageMaker Debugger collects monitoring and
                profiling information from your training job. If not specified, a default configuration is
                created using the estimator's ``output_path``, unless the region does not support SageMaker
                Debugger. To disable SageMaker Debugger monitoring and profiling, set ``disable_profiler`` to
                ``True``.
            disable_profiler (bool): Specifies whether Debugger monitoring and profiling will be disabled
                (default: ``False``).
            environment (dict[str, str]): Environment variables to be set for use during training job
                (default: ``None``).
            max_retry_attempts (int): The number of times to move a job to the STARTING status. You can specify
                between 1 and 30 attempts. If the value is greater than zero, the job is retried on
                ``InternalServerFailure`` the same number of attempts as the value.

        Raises:
            ValueError: if ``instance_count`` or ``instance_type`` is missing.
        """
        if instance_count is None or instance_type is None:
            raise ValueError("Both instance_count and instance_type are required.")

        self.role = role
        self.instance_count = instance_count
        self.instance_type = instance_type
        self.volume_size = volume_size
        self.volume_kms_key = volume_kms_key
        self.max_run = max_run
        self.input_mode = input_mode
        self.metric_definitions = metric_definitions
        self.model_uri = model_uri
        self.model_channel_name = model_channel_name
        self.tags = tags

        self.sagemaker_session = sagemaker_session or Session()

        self.base_job_name = base_job_name
        self._current_job_name: Optional[str] = None
        self.output_path = output_path
        self.output_kms_key = output_kms_key
        self.latest_training_job: Optional[_TrainingJob] = None
        self.jobs: List[_TrainingJob] = []
        self.deploy_instance_type: Optional[str] = None
        self._deployed_endpoint_name: Optional[str] = None

        # VPC configurations
        self.subnets = subnets
        self.security_group_ids = security_group_ids

        self.encrypt_inter_container_traffic = encrypt_inter_container_traffic
        self.use_spot_instances = use_spot_instances
        self.max_wait = max_wait
        self.checkpoint_s3_uri = checkpoint_s3_uri
        self.checkpoint_local_path = checkpoint_local_path

        self.rules = rules
        self.debugger_hook_config = debugger_hook_config
        self.tensorboard_output_config = tensorboard_output_config

        self.debugger_rule_configs: Optional[List[Dict[str, Any]]] = None
        self.collection_configs = None

        self.enable_sagemaker_metrics = enable_sagemaker_metrics
        self._enable_network_isolation = enable_network_isolation

        self.profiler_config = profiler_config
        self.disable_profiler = disable_profiler
        self.environment = environment
        self.max_retry_attempts = max_retry_attempts

        self.profiler_rule_configs: Optional[List[Dict[str, Any]]] = None
        self.profiler_rules: Optional[List[ProfilerRule]] = None
        self.debugger_rules: Optional[List[Rule]] = None

    @abstractmethod
    def training_image_uri(self) -> Optional[str]:
        """Return the Docker image to use for training.

        The :meth:`fit` method, which does the model training, calls this method to find the image to use for
        model training.
        """

    @abstractmethod
    def hyperparameters(self) -> Dict[str, Any]:
        """Return the hyperparameters as a dictionary to use for training.

        The :meth:`fit` method, which trains the model, calls this method to find the hyperparameters.
        """

    def enable_network_isolation(self) -> bool:
        """Return True if this Estimator will need network isolation to run."""
        return self._enable_network_isolation

    def prepare_workflow_for_training(self, job_name: Optional[str] = None):
        """Call _prepare_for_training. Used when setting up a workflow."""
        self._prepare_for_training(job_name=job_name)

    def _ensure_base_job_name(self):
        """Set ``self.base_job_name`` if it is not set already."""
        # honor supplied base_job_name or generate it
        if self.base_job_name is None:
            self.base_job_name = base_name_from_image(self.training_image_uri())

    def _get_or_create_name(self, name: Optional[str] = None) -> str:
        """Generate a name based on the base job name or training image if needed."""
        if name:
            return name

        self._ensure_base_job_name()
        return name_from_base(self.base_job_name)

    def _prepare_for_training(self, job_name: Optional[str] = None):
        """Set any values in the estimator that need to be set before training.

        Args:
            job_name (str): Name of the training job to be created. If not specified, one is generated, using
                the base name given to the constructor if applicable.
        """
        self._current_job_name = self._get_or_create_name(job_name)

        # if output_path was specified we use it otherwise initialize here.
        if self.output_path is None:
            self.output_path = f"s3://{self.sagemaker_session.default_bucket()}/"

        self._prepare_rules()
        self._prepare_debugger_for_training()
        self._prepare_profiler_for_training()

    def _prepare_rules(self):
        """Split ``self.rules`` into debugger rules and profiler rules."""
        self.debugger_rules = []
        self.profiler_rules = []
        if self.rules is not None:
            for rule in self.rules:
                if isinstance(rule, Rule):
                    self.debugger_rules.append(rule)
                elif isinstance(rule, ProfilerRule):
                    self.profiler_rules.append(rule)
                else:
                    raise RuntimeError(
                        "Rules list can only contain smkit.debugger.Rule and smkit.debugger.ProfilerRule"
                    )

    def _prepare_debugger_for_training(self):
        """Prepare debugger rules and debugger configs for training."""
        if self.debugger_rules and self.debugger_hook_config is None:
            self.debugger_hook_config = DebuggerHookConfig(s3_output_path=self.output_path)
        # If debugger_hook_config was provided without an S3 URI, default it for the customer.
        if self.debugger_hook_config and not self.debugger_hook_config.s3_output_path:
            self.debugger_hook_config.s3_output_path = self.output_path
        self.debugger_rule_configs = self._prepare_debugger_rules()
        self._prepare_collection_configs()

    def _prepare_debugger_rules(self) -> List[Dict[str, Any]]:
        """Set any necessary values in debugger rules, if they are provided."""
        debugger_rule_configs = []
        if self.debugger_rules:
            for rule in self.debugger_rules:
                self._set_default_rule_config(rule)
                self._set_source_s3_uri(rule)
                debugger_rule_configs.append(rule.to_debugger_rule_config_dict())
        return debugger_rule_configs

    def _prepare_collection_configs(self):
        """De-duplicate any collection configurations and save them in the debugger hook configuration."""
        # Create a set to de-duplicate CollectionConfigs.
        self.collection_configs = set()
        # Iterate through the debugger rules and add their respective CollectionConfigs to the set.
        if self.debugger_rules:
            for rule in self.debugger_rules:
                self.collection_configs.update(rule.collection_configs or [])
        # Add the CollectionConfigs from DebuggerHookConfig to the set.
        if self.debugger_hook_config:
            self.collection_configs.update(self.debugger_hook_config.collection_configs or [])
            if self.collection_configs:
                self.debugger_hook_config.collection_configs = sorted(
                    self.collection_configs, key=lambda c: c.name
                )

    def _prepare_profiler_for_training(self):
        """Set necessary values and do basic validations in profiler config and profiler rules.

        When the user explicitly sets ``rules`` to an empty list, the default profiler rule is ignored. The
        default profiler rule is only added when the user does not specify any rules.
        """
        if self.disable_profiler:
            if self.profiler_config:
                raise RuntimeError("profiler_config cannot be set when disable_profiler is True.")
            if self.profiler_rules:
                raise RuntimeError("ProfilerRule cannot be set when disable_profiler is True.")
        elif _region_supports_debugger(self.sagemaker_session.boto_region_name):
            if self.profiler_config is None:
                self.profiler_config = ProfilerConfig(s3_output_path=self.output_path)
            if self.rules is None or (self.rules and not self.profiler_rules):
                self.profiler_rules = [get_default_profiler_rule()]

        if self.profiler_config and not self.profiler_config.s3_output_path:
            self.profiler_config.s3_output_path = self.output_path

        self.profiler_rule_configs = self._prepare_profiler_rules()

    def _prepare_profiler_rules(self) -> List[Dict[str, Any]]:
        """Set any necessary values in profiler rules, if they are provided."""
        profiler_rule_configs = []
        if self.profiler_rules:
            for rule in self.profiler_rules:
                self._set_default_rule_config(rule)
                self._set_source_s3_uri(rule)
                profiler_rule_configs.append(rule.to_profiler_rule_config_dict())
        return profiler_rule_configs

    def _set_default_rule_config(self, rule: Union[Rule, ProfilerRule]):
        """Resolve the rule evaluator image and drop instance settings of built-in rules."""
        if rule.image_uri == DEFAULT_RULE_EVALUATOR_IMAGE:
            rule.image_uri = image_uris.retrieve(_DEBUGGER_FRAMEWORK, self.sagemaker_session.boto_region_name)
            rule.instance_type = None
            rule.volume_size_in_gb = None

    def _set_source_s3_uri(self, rule: Union[Rule, ProfilerRule]):
        """Upload a local custom rule source file and point the rule parameters at its S3 URI."""
        if rule.rule_parameters and "source_s3_uri" in rule.rule_parameters:
            source = rule.rule_parameters["source_s3_uri"]
            if not source.startswith("s3://"):
                bucket, key_prefix = parse_s3_url(
                    s3_path_join(self.output_path, self._current_job_name, "rule-source", rule.name)
                )
                rule.rule_parameters["source_s3_uri"] = self.sagemaker_session.upload_data(
                    path=source, bucket=bucket, key_prefix=key_prefix
                )

    def fit(
        self,
        inputs: Optional[Union[str, Dict[str, Any], TrainingInput, FileSystemInput, List[Any]]] = None,
        wait: bool = True,
        logs: Union[str, bool] = "All",
        job_name: Optional[str] = None,
        experiment_config: Optional[Dict[str, str]] = None,
    ):
        """Train a model using the input training dataset.

        The API calls the Amazon SageMaker CreateTrainingJob API to start model training. The API uses
        configuration you provided to create the estimator and the specified input training data to send the
        CreatingTrainingJob request to Amazon SageMaker.

        This is a synchronous operation. After the model training successfully completes, you can call the
        ``deploy()`` method to host the model using the Amazon SageMaker hosting services.

        Args:
            inputs (str or dict or smkit.inputs.TrainingInput or smkit.inputs.FileSystemInput): Information
                about the training data. This can be one of four types:

                * (str) the S3 location where training data is saved, or a file:// path in local mode.
                * (dict[str, str] or dict[str, smkit.inputs.TrainingInput] or
                  dict[str, smkit.inputs.FileSystemInput]) If using multiple channels for training data, you
                  can specify a dict mapping channel names to strings or :func:`~smkit.inputs.TrainingInput`
                  objects or :func:`~smkit.inputs.FileSystemInput` objects.
                * (smkit.inputs.TrainingInput) - channel configuration for S3 data sources that can provide
                  additional information as well as the path to the training dataset.
                * (smkit.inputs.FileSystemInput) - channel configuration for a file system data source that can
                  provide additional information as well as the path to the training dataset.

            wait (bool): Whether the call should wait until the job completes (default: True).
            logs ([str]): A list of strings specifying which logs to print. Acceptable strings are "All",
                "None", "Training", or "Rules". Only meaningful when wait is True.
            job_name (str): Training job name. If not specified, the estimator generates a default job name
                based on the training image name and current timestamp.
            experiment_config (dict[str, str]): Experiment management configuration. Dictionary contains three
                optional keys, 'ExperimentName', 'TrialName', and 'TrialComponentDisplayName'.
        """
        self._prepare_for_training(job_name=job_name)

        self.latest_training_job = _TrainingJob.start_new(self, inputs, experiment_config)
        self.jobs.append(self.latest_training_job)
        if wait:
            self.latest_training_job.wait(logs=logs)

    def wait(self, logs: Union[str, bool] = "All"):
        """Wait for this estimator's training job to complete.

        Args:
            logs ([str]): A list of strings specifying which logs to print. Acceptable strings are "All",
                "None", "Training", or "Rules".
        """
        self._ensure_latest_training_job()
        self.latest_training_job.wait(logs=logs)

    def logs(self):
        """Display the logs for Estimator's training job.

        If the output is a tty or a Jupyter cell, it will be color-coded based on which instance the log entry
        is from.
        """
        self._ensure_latest_training_job()
        self.sagemaker_session.logs_for_job(self.latest_training_job.name, wait=True)

    def describe(self) -> Dict[str, Any]:
        """Return the response from the DescribeTrainingJob API call."""
        self._ensure_latest_training_job()
        return self.latest_training_job.describe()

    def stop(self):
        """Stop the training job associated with this estimator."""
        self._ensure_latest_training_job()
        self.latest_training_job.stop()

    @classmethod
    def attach(
        cls,
        training_job_name: str,
        sagemaker_session: Optional[Session] = None,
        model_channel_name: str = "model",
    ):
        """Attach to an existing training job.

        Create an Estimator bound to an existing training job, each subclass is responsible to implement
        ``_prepare_init_params_from_job_description()`` as this method delegates the actual conversion of a
        training job description to the arguments that the class constructor expects. After attaching, if the
        training job has a Complete status, it can be ``deploy()`` ed to create a SageMaker Endpoint and return
        a ``Predictor``.

        If the training job is in progress, attach will block until the training job completes, but logs of
        the training job will not display. To see the logs content, please call ``logs()``

        Examples:
            >>> my_estimator.fit(wait=False)
            >>> training_job_name = my_estimator.latest_training_job.name
            Later on:
            >>> attached_estimator = Estimator.attach(training_job_name)
            >>> attached_estimator.logs()
            >>> attached_estimator.deploy()

        Args:
            training_job_name (str): The name of the training job to attach to.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, the estimator creates one
                using the default AWS configuration chain.
            model_channel_name (str): Name of the channel where pre-trained model data will be downloaded
                (default: 'model'). If no channel with the same name exists in the training job, this option
                will be ignored.

        Returns:
            Instance of the calling ``Estimator`` Class with the attached training job.
        """
        sagemaker_session = sagemaker_session or Session()

        job_details = sagemaker_session.sagemaker_client.describe_training_job(TrainingJobName=training_job_name)
        init_params = cls._prepare_init_params_from_job_description(job_details, model_channel_name)
        tags = sagemaker_session.list_tags(resource_arn=job_details["TrainingJobArn"])
        init_params.update(tags=tags)

        estimator = cls(sagemaker_session=sagemaker_session, **init_params)
        estimator.latest_training_job = _TrainingJob(
            sagemaker_session=sagemaker_session, job_name=training_job_name
        )
        estimator._current_job_name = estimator.latest_training_job.name
        estimator.latest_training_job.wait(logs="None")
        return estimator

    @classmethod
    def _prepare_init_params_from_job_description(  # noqa: C901
        cls, job_details: Dict[str, Any], model_channel_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """Convert the job description to init params that can be handled by the class constructor.

        Args:
            job_details: the returned job details from a describe_training_job API call.
            model_channel_name (str): Name of the channel where pre-trained model data will be downloaded.

        Returns:
            dictionary: The transformed init_params
        """
        init_params: Dict[str, Any] = dict()

        init_params["role"] = job_details["RoleArn"]
        init_params["instance_count"] = job_details["ResourceConfig"]["InstanceCount"]
        init_params["instance_type"] = job_details["ResourceConfig"]["InstanceType"]
        init_params["volume_size"] = job_details["ResourceConfig"]["VolumeSizeInGB"]
        init_params["max_run"] = job_details["StoppingCondition"]["MaxRuntimeInSeconds"]
        init_params["input_mode"] = job_details["AlgorithmSpecification"]["TrainingInputMode"]
        init_params["base_job_name"] = base_from_name(job_details["TrainingJobName"])
        init_params["output_path"] = job_details["OutputDataConfig"]["S3OutputPath"]
        init_params["output_kms_key"] = job_details["OutputDataConfig"].get("KmsKeyId")
        if "EnableNetworkIsolation" in job_details:
            init_params["enable_network_isolation"] = job_details["EnableNetworkIsolation"]

        has_hps = "HyperParameters" in job_details
        init_params["hyperparameters"] = job_details["HyperParameters"] if has_hps else {}

        if "AlgorithmName" in job_details["AlgorithmSpecification"]:
            init_params["algorithm_arn"] = job_details["AlgorithmSpecification"]["AlgorithmName"]
        elif "TrainingImage" in job_details["AlgorithmSpecification"]:
            init_params["image_uri"] = job_details["AlgorithmSpecification"]["TrainingImage"]
        else:
            raise RuntimeError(
                "Invalid AlgorithmSpecification. Either TrainingImage or AlgorithmName is expected. None was found."
            )

        if "MetricDefinitions" in job_details["AlgorithmSpecification"]:
            init_params["metric_definitions"] = job_details["AlgorithmSpecification"]["MetricDefinitions"]

        if "EnableInterContainerTrafficEncryption" in job_details:
            init_params["encrypt_inter_container_traffic"] = job_details["EnableInterContainerTrafficEncryption"]

        subnets, security_group_ids = vpc_utils.from_dict(job_details.get(vpc_utils.VPC_CONFIG_KEY))
        if subnets:
            init_params["subnets"] = subnets
        if security_group_ids:
            init_params["security_group_ids"] = security_group_ids

        if "InputDataConfig" in job_details and model_channel_name:
            for channel in job_details["InputDataConfig"]:
                if channel["ChannelName"] == model_channel_name:
                    init_params["model_channel_name"] = model_channel_name
                    init_params["model_uri"] = channel["DataSource"]["S3DataSource"]["S3Uri"]
                    break

        if job_details.get("EnableManagedSpotTraining", False):
            init_params["use_spot_instances"] = True
            max_wait = job_details.get("StoppingCondition", {}).get("MaxWaitTimeInSeconds")
            if max_wait:
                init_params["max_wait"] = max_wait

        if job_details.get("RetryStrategy", False):
            init_params["max_retry_attempts"] = job_details.get("RetryStrategy", {}).get("MaximumRetryAttempts")

        return init_params

    @property
    def model_data(self) -> str:
        """str: The model location in S3. Only set if Estimator has been ``fit()``."""
        if self.latest_training_job is not None:
            model_uri = self.sagemaker_session.sagemaker_client.describe_training_job(
                TrainingJobName=self.latest_training_job.name
            )["ModelArtifacts"]["S3ModelArtifacts"]
        else:
            logger.warning(
                "No finished training job found associated with this estimator. Please make sure "
                "this estimator is only used for building workflow config"
            )
            model_uri = s3_path_join(self.output_path, self._current_job_name, "output", "model.tar.gz")

        return model_uri

    @abstractmethod
    def create_model(self, **kwargs) -> Model:
        """Create a SageMaker ``Model`` object that can be deployed to an ``Endpoint``.

        Args:
            **kwargs: Keyword arguments used by the implemented method for creating the ``Model``.

        Returns:
            smkit.model.Model: A SageMaker ``Model`` object. See :func:`~smkit.model.Model` for full details.
        """

    def deploy(
        self,
        initial_instance_count: int,
        instance_type: str,
        serializer=None,
        deserializer=None,
        accelerator_type: Optional[str] = None,
        endpoint_name: Optional[str] = None,
        wait: bool = True,
        model_name: Optional[str] = None,
        kms_key: Optional[str] = None,
        data_capture_config=None,
        tags: Optional[List[Dict[str, str]]] = None,
        **kwargs,
    ) -> Optional[Predictor]:
        """Deploy the trained model to an Amazon SageMaker endpoint and return a ``Predictor``.

        More information:
        http://docs.aws.amazon.com/sagemaker/latest/dg/how-it-works-training.html

        Args:
            initial_instance_count (int): Minimum number of EC2 instances to deploy to an endpoint for
                prediction.
            instance_type (str): Type of EC2 instance to deploy to an endpoint for prediction, for example,
                'ml.c4.xlarge'.
            serializer (smkit.serializers.BaseSerializer): A serializer object, used to encode data for an
                inference endpoint (default: None). If ``serializer`` is not None, then ``serializer`` will
                override the default serializer.
            deserializer (smkit.deserializers.BaseDeserializer): A deserializer object, used to decode data
                from an inference endpoint (default: None).
            accelerator_type (str): Type of Elastic Inference accelerator to attach to an endpoint for model
                loading and inference, for example, 'ml.eia1.medium'.
            endpoint_name (str): Name to use for creating an Amazon SageMaker endpoint. If not specified, the
                name of the training job is used.
            wait (bool): Whether the call should wait until the deployment of model completes (default: True).
            model_name (str): Name to use for creating an Amazon SageMaker model. If not specified, the
                estimator generates a default job name based on the training image name and current timestamp.
            kms_key (str): The ARN of the KMS key that is used to encrypt the data on the storage volume
                attached to the instance hosting the endpoint.
            data_capture_config (smkit.model_monitor.DataCaptureConfig): Specifies configuration related to
                Endpoint data capture for use with Amazon SageMaker Model Monitoring. Default: None.
            tags (list[dict]): Optional. The list of tags to attach to this specific endpoint.
            **kwargs: Passed to invocation of ``create_model()``.

        Returns:
            smkit.predictor.Predictor: A predictor that provides a ``predict()`` method, which can be used to
                send requests to the Amazon SageMaker endpoint and obtain inferences.
        """
        self._ensure_latest_training_job()
        self._ensure_base_job_name()
        default_name = name_from_base(self.base_job_name)
        endpoint_name = endpoint_name or default_name
        model_name = model_name or default_name

        self.deploy_instance_type = instance_type
        model = self.create_model(**kwargs)
        model.name = model_name

        predictor = model.deploy(
            instance_type=instance_type,
            initial_instance_count=initial_instance_count,
            serializer=serializer,
            deserializer=deserializer,
            accelerator_type=accelerator_type,
            endpoint_name=endpoint_name,
            tags=tags or self.tags,
            wait=wait,
            kms_key=kms_key,
            data_capture_config=data_capture_config,
        )
        self._deployed_endpoint_name = endpoint_name
        return predictor

    def delete_endpoint(self):
        """Delete the endpoint created by the last :meth:`deploy` call."""
        if self._deployed_endpoint_name is None:
            raise ValueError("Estimator has not been deployed to an endpoint.")
        self.sagemaker_session.delete_endpoint(self._deployed_endpoint_name)

    @property
    def training_job_analytics(self) -> TrainingJobAnalytics:
        """Return a ``TrainingJobAnalytics`` object for the current training job."""
        if self._current_job_name is None:
            raise ValueError("Estimator is not associated with a TrainingJob")
        return TrainingJobAnalytics(self._current_job_name, sagemaker_session=self.sagemaker_session)

    def get_vpc_config(self, vpc_config_override=vpc_utils.VPC_CONFIG_DEFAULT) -> Optional[Dict[str, List[str]]]:
        """Returns VpcConfig dict either from this Estimator's subnets and security groups.

        Or else validate and return an optional override value.
        """
        if vpc_config_override is vpc_utils.VPC_CONFIG_DEFAULT:
            return vpc_utils.to_dict(self.subnets, self.security_group_ids)
        return vpc_utils.sanitize(vpc_config_override)

    def _ensure_latest_training_job(self, error_message: str = "Estimator is not associated with a training job"):
        if self.latest_training_job is None:
            raise ValueError(error_message)

    def enable_default_profiling(self):
        """Update training job to enable Debugger monitoring.

        This method enables Debugger monitoring with the default ``profiler_config`` parameter to collect
        system metrics and the default built-in ``profiler_report`` rule. Framework metrics won't be saved.
        To update training job to emit framework metrics, you can use :meth:`update_profiler` method and
        specify the framework metrics you want to enable.

        This method is callable when the training job is in progress while Debugger monitoring is disabled.
        """
        self._ensure_latest_training_job()

        training_job_details = self.latest_training_job.describe()

        if training_job_details.get("ProfilingStatus") == "Enabled":
            raise ValueError(
                "Debugger monitoring is already enabled. To update the profiler_config parameter "
                "and the Debugger profiling rules, please use the update_profiler function."
            )

        if "ProfilerConfig" in training_job_details and training_job_details["ProfilerConfig"].get("S3OutputPath"):
            self.profiler_config = ProfilerConfig(
                s3_output_path=training_job_details["ProfilerConfig"]["S3OutputPath"]
            )
        else:
            self.profiler_config = ProfilerConfig(s3_output_path=self.output_path)

        self.profiler_rules = [get_default_profiler_rule()]
        self.profiler_rule_configs = self._prepare_profiler_rules()

        _TrainingJob.update_profiler(self, self.profiler_rule_configs, self.profiler_config._to_request_dict())

    def disable_profiling(self):
        """Update the current training job in progress to disable profiling.

        Debugger stops collecting the system and framework metrics and turns off the Debugger built-in
        monitoring and profiling rules.
        """
        self._ensure_latest_training_job()

        training_job_details = self.latest_training_job.describe()

        if training_job_details.get("ProfilingStatus") == "Disabled":
            raise ValueError("Profiler is already disabled.")

        _TrainingJob.update_profiler(
            self, profiler_rule_configs=None, profiler_config=ProfilerConfig._to_profiler_disabled_request_dict()
        )

    def update_profiler(
        self,
        rules: Optional[List[ProfilerRule]] = None,
        system_monitor_interval_millis: Optional[int] = None,
        s3_output_path: Optional[str] = None,
        framework_profile_params: Optional[FrameworkProfile] = None,
        disable_framework_metrics: bool = False,
    ):
        """Update training jobs to enable profiling.

        This method updates the ``profiler_config`` parameter and initiates Debugger built-in rules for
        profiling.

        Args:
            rules (list[ProfilerRule]): A list of ProfilerRule objects to define rules for continuous analysis
                with SageMaker Debugger. Currently, you can only add new profiler rules during the training job.
            system_monitor_interval_millis (int): How often profiling system metrics are collected; Unit:
                Milliseconds (default: None)
            s3_output_path (str): The location in S3 to store the output. If profiler is enabled once,
                s3_output_path cannot be changed. (default: None)
            framework_profile_params (FrameworkProfile): A parameter object for framework metrics profiling.
            disable_framework_metrics (bool): Specify whether to disable all the framework metrics. This won't
                update system metrics and the Debugger built-in rules for monitoring.

        Raises:
            ValueError: if nothing is to be updated, or on conflicting arguments.
        """
        self._ensure_latest_training_job()

        if (
            not rules
            and not system_monitor_interval_millis
            and not s3_output_path
            and not framework_profile_params
            and not disable_framework_metrics
        ):
            raise ValueError("Please provide profiler config or profiler rule to be updated.")

        if disable_framework_metrics and framework_profile_params:
            raise ValueError("framework_profile_params cannot be set when disable_framework_metrics is True")

        profiler_rule_configs = None
        if rules:
            for rule in rules:
                if not isinstance(rule, ProfilerRule):
                    raise ValueError("Please provide ProfilerRule to be updated.")
            self.profiler_rules = rules
            profiler_rule_configs = self._prepare_profiler_rules()

        if disable_framework_metrics:
            empty_framework_profile_param = FrameworkProfile()
            empty_framework_profile_param.profiling_parameters = {}
            framework_profile_params = empty_framework_profile_param

        self.profiler_config = ProfilerConfig(
            s3_output_path=s3_output_path,
            system_monitor_interval_millis=system_monitor_interval_millis,
            framework_profile_params=framework_profile_params,
        )

        _TrainingJob.update_profiler(self, profiler_rule_configs, self.profiler_config._to_request_dict())

    def latest_job_debugger_artifacts_path(self) -> Optional[str]:
        """Gets the path to the DebuggerHookConfig output artifacts.

        Returns:
            str: An S3 path to the output artifacts.
        """
        self._ensure_latest_training_job(
            error_message="Cannot get the Debugger artifacts path. The Estimator is not associated with a training job."
        )
        if self.debugger_hook_config:
            return s3_path_join(self.debugger_hook_config.s3_output_path, self.latest_training_job.name, "debug-output")
        return None

    def latest_job_tensorboard_artifacts_path(self) -> Optional[str]:
        """Gets the path to the TensorBoardOutputConfig output artifacts.

        Returns:
            str: An S3 path to the output artifacts.
        """
        self._ensure_latest_training_job(
            error_message="Cannot get the TensorBoard artifacts path. The Estimator is not associated with a "
            "training job."
        )
        if self.tensorboard_output_config is not None:
            return s3_path_join(
                self.tensorboard_output_config.s3_output_path, self.latest_training_job.name, "tensorboard-output"
            )
        return None

    def latest_job_profiler_artifacts_path(self) -> Optional[str]:
        """Gets the path to the profiling output artifacts.

        Returns:
            str: An S3 path to the output artifacts.
        """
        self._ensure_latest_training_job(
            error_message="Cannot get the profiling output artifacts path. The Estimator is not associated with a "
            "training job."
        )
        if self.profiler_config is not None:
            return s3_path_join(self.profiler_config.s3_output_path, self.latest_training_job.name, "profiler-output")
        return None


class _TrainingJob(_Job):
    """A SageMaker training job created by an estimator."""

    @classmethod
    def start_new(cls, estimator: EstimatorBase, inputs, experiment_config: Optional[Dict[str, str]] = None):
        """Create a new Amazon SageMaker training job from the estimator.

        Args:
            estimator (smkit.estimator.EstimatorBase): Estimator object created by the user.
            inputs (str): Parameters used when called :meth:`~smkit.estimator.EstimatorBase.fit`.
            experiment_config (dict[str, str]): Experiment management configuration.

        Returns:
            smkit.estimator._TrainingJob: Constructed object that captures all information about the started
                training job.
        """
        train_args = cls._get_train_args(estimator, inputs, experiment_config)
        estimator.sagemaker_session.train(**train_args)

        return cls(estimator.sagemaker_session, estimator._current_job_name)

    @classmethod
    def _get_train_args(  # noqa: C901
        cls, estimator: EstimatorBase, inputs, experiment_config: Optional[Dict[str, str]]
    ) -> Dict[str, Any]:
        """Construct a dict of arguments for an Amazon SageMaker training job from the estimator."""
        config = _Job._load_config(inputs, estimator)

        current_hyperparameters = estimator.hyperparameters()
        hyperparameters = None
        if current_hyperparameters is not None:
            hyperparameters = {str(k): to_string(v) for (k, v) in current_hyperparameters.items()}

        train_args: Dict[str, Any] = config.copy()
        train_args["input_mode"] = estimator.input_mode
        train_args["job_name"] = estimator._current_job_name
        train_args["hyperparameters"] = hyperparameters
        train_args["tags"] = estimator.tags
        train_args["metric_definitions"] = estimator.metric_definitions
        train_args["experiment_config"] = experiment_config
        train_args["environment"] = estimator.environment

        if isinstance(inputs, TrainingInput) and "InputMode" in inputs.config:
            logger.debug("Selecting TrainingInput's input_mode (%s) for TrainingInputMode.", inputs.config["InputMode"])
            train_args["input_mode"] = inputs.config["InputMode"]

        if estimator.enable_network_isolation():
            train_args["enable_network_isolation"] = True

        if estimator.max_retry_attempts is not None:
            train_args["retry_strategy"] = {"MaximumRetryAttempts": estimator.max_retry_attempts}
        else:
            train_args["retry_strategy"] = None

        if estimator.encrypt_inter_container_traffic:
            train_args["encrypt_inter_container_traffic"] = True

        algorithm_arn = getattr(estimator, "algorithm_arn", None)
        if algorithm_arn:
            train_args["algorithm_arn"] = algorithm_arn
        else:
            train_args["image_uri"] = estimator.training_image_uri()

        if estimator.debugger_rule_configs:
            train_args["debugger_rule_configs"] = estimator.debugger_rule_configs

        if estimator.debugger_hook_config:
            train_args["debugger_hook_config"] = estimator.debugger_hook_config._to_request_dict()

        if estimator.tensorboard_output_config:
            train_args["tensorboard_output_config"] = estimator.tensorboard_output_config._to_request_dict()

        cls._add_spot_checkpoint_args(estimator, train_args)

        if estimator.enable_sagemaker_metrics is not None:
            train_args["enable_sagemaker_metrics"] = estimator.enable_sagemaker_metrics

        if estimator.profiler_rule_configs:
            train_args["profiler_rule_configs"] = estimator.profiler_rule_configs

        if estimator.profiler_config:
            train_args["profiler_config"] = estimator.profiler_config._to_request_dict()

        return train_args

    @classmethod
    def _add_spot_checkpoint_args(cls, estimator: EstimatorBase, train_args: Dict[str, Any]):
        if estimator.use_spot_instances:
            train_args["use_spot_instances"] = True

        if estimator.checkpoint_s3_uri:
            train_args["checkpoint_s3_uri"] = estimator.checkpoint_s3_uri

        if estimator.checkpoint_local_path:
            train_args["checkpoint_local_path"] = estimator.checkpoint_local_path

    @classmethod
    def update_profiler(
        cls,
        estimator: EstimatorBase,
        profiler_rule_configs: Optional[List[Dict[str, Any]]] = None,
        profiler_config: Optional[Dict[str, Any]] = None,
    ):
        """Update a running training job with new profiler settings."""
        estimator.sagemaker_session.update_training_job(
            estimator.latest_training_job.job_name,
            profiler_rule_configs=profiler_rule_configs,
            profiler_config=profiler_config,
        )

    def wait(self, logs: Union[str, bool] = "All"):
        """Wait for the training job to finish, optionally tailing its logs.

        Args:
            logs ([str]): A list of strings specifying which logs to print. Acceptable strings are "All",
                "None", "Training", or "Rules". ``True``/``False`` are accepted as "All"/"None".
        """
        # Map logs=True to All and logs=False to None.
        if logs is True:
            logs = "All"
        elif logs is False:
            logs = "None"

        if logs != "None":
            self.sagemaker_session.logs_for_job(self.job_name, wait=True, log_type=logs)
        else:
            self.sagemaker_session.wait_for_job(self.job_name)

    def describe(self) -> Dict[str, Any]:
        """Returns a response from the DescribeTrainingJob API call."""
        return self.sagemaker_session.describe_training_job(self.job_name)

    def stop(self):
        """Stops the training job."""
        self.sagemaker_session.stop_training_job(self.name)


class Estimator(EstimatorBase):
    """A generic Estimator to train using any supplied algorithm.

    This Estimator is for custom images that follow the SageMaker training container contract.
    """

    def __init__(
        self,
        image_uri: str,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        hyperparameters: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        """Initialize an ``Estimator`` instance.

        Args:
            image_uri (str): The container image to use for training.
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'.
            hyperparameters (dict): Dictionary containing the hyperparameters to initialize this estimator
                with.
            **kwargs: Additional kwargs passed to :class:`~smkit.estimator.EstimatorBase`.
        """
        self.image_uri = image_uri
        self._hyperparameters = hyperparameters.copy() if hyperparameters else {}
        super().__init__(role, instance_count, instance_type, **kwargs)

    def training_image_uri(self) -> str:
        """Returns the docker image to use for training.

        The fit() method, that does the model training, calls this method to find the image to use for model
        training.
        """
        return self.image_uri

    def set_hyperparameters(self, **kwargs):
        """Sets the hyperparameter dictionary to use for training.

        The hyperparameters are made accessible as a dict[str, str] to the training code on SageMaker. For
        convenience, this accepts other types for keys and values, but ``str()`` will be called to convert
        them before training.
        """
        for k, v in kwargs.items():
            self._hyperparameters[k] = v

    def hyperparameters(self) -> Dict[str, Any]:
        """Returns the hyperparameters as a dictionary to use for training.

        The fit() method, that does the model training, calls this method to find the hyperparameters you
        specified.
        """
        return self._hyperparameters

    def create_model(
        self,
        role: Optional[str] = None,
        image_uri: Optional[str] = None,
        predictor_cls=None,
        vpc_config_override=vpc_utils.VPC_CONFIG_DEFAULT,
        **kwargs,
    ) -> Model:
        """Create a model to deploy.

        The serializer, deserializer, content_type, and accept arguments are only used to define a default
        Predictor. They are ignored if an explicit predictor class is passed in. Other arguments are passed
        through to the Model class.

        Args:
            role (str): The ``ExecutionRoleArn`` IAM Role ARN for the ``Model``, which is also used during
                transform jobs. If not specified, the role from the Estimator will be used.
            image_uri (str): A Docker image URI to use for deploying the model. Defaults to the image used for
                training.
            predictor_cls (Predictor): The predictor class to use when deploying the model (default:
                :class:`~smkit.predictor.Predictor`).
            vpc_config_override (dict[str, list[str]]): Optional override for VpcConfig set on the model.
                Default: use subnets and security groups from this Estimator.

                * 'Subnets' (list[str]): List of subnet ids.
                * 'SecurityGroupIds' (list[str]): List of security group ids.

            **kwargs: Additional parameters passed to :class:`~smkit.model.Model`

        Returns:
            smkit.model.Model: A Model that can be deployed to an endpoint.
        """
        if "enable_network_isolation" not in kwargs:
            kwargs["enable_network_isolation"] = self.enable_network_isolation()

        return Model(
            image_uri or self.training_image_uri(),
            self.model_data,
            role or self.role,
            vpc_config=self.get_vpc_config(vpc_config_override),
            sagemaker_session=self.sagemaker_session,
            predictor_cls=predictor_cls or Predictor,
            **kwargs,
        )

    @classmethod
    def _prepare_init_params_from_job_description(
        cls, job_details: Dict[str, Any], model_channel_name: Optional[str] = None
    ) -> Dict[str, Any]:
        init_params = super()._prepare_init_params_from_job_description(job_details, model_channel_name)
        if "algorithm_arn" in init_params:
            raise ValueError(
                f"Training job {job_details['TrainingJobName']} was run with a Marketplace algorithm, "
                "which Estimator cannot attach to."
            )
        return init_params
