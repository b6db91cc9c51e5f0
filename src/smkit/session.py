"""The ``Session`` owns the boto3 clients and translates smkit objects into SageMaker API calls.

Each method turns already-validated arguments into a request dictionary for the boto3 SageMaker client and returns,
or polls for, the response. No other module talks to boto3 directly.
"""
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

import boto3
import s3fs
from botocore.exceptions import ClientError

from . import config as smconfig
from .exceptions import CapacityError, UnexpectedStatusException
from .logs import LogState, Position, describe_log_streams, multi_stream_iter
from .utils import paginate, secondary_training_status_changed, secondary_training_status_message

if TYPE_CHECKING:
    from mypy_boto3_sagemaker import SageMakerClient

logger = logging.getLogger(__name__)

_STATUS_CODE_TABLE = {
    "COMPLETED": "Completed",
    "INPROGRESS": "InProgress",
    "IN_PROGRESS": "InProgress",
    "FAILED": "Failed",
    "STOPPED": "Stopped",
    "STOPPING": "Stopping",
    "STARTING": "Starting",
    "PENDING": "Pending",
}

TRAINING_LOG_GROUP = "/aws/sagemaker/TrainingJobs"
PROCESSING_LOG_GROUP = "/aws/sagemaker/ProcessingJobs"


class Session(object):
    """Manage interactions with the Amazon SageMaker APIs and the other AWS services needed (S3, IAM, STS, logs).

    Sample usage:

    >>> from smkit.session import Session
    >>> sess = Session()
    >>> sess.default_bucket()
    'sagemaker-us-west-2-123456789012'
    """

    def __init__(
        self,
        boto_session: Optional[boto3.session.Session] = None,
        sagemaker_client: Optional["SageMakerClient"] = None,
        sagemaker_runtime_client: Optional[Any] = None,
        s3_fs: Optional[s3fs.S3FileSystem] = None,
        default_bucket: Optional[str] = None,
        client_config=None,
    ):
        """Initialize a SageMaker ``Session``.

        Args:
            boto_session (boto3.session.Session): The underlying boto3 session. Defaults to a new session with the
                region given by ``SMKIT_REGION`` (if set) or the default AWS configuration chain.
            sagemaker_client (optional): boto3 client for SageMaker. Defaults to one created from ``boto_session``.
            sagemaker_runtime_client (optional): boto3 client for the SageMaker runtime (endpoint invocations).
            s3_fs (s3fs.S3FileSystem, optional): file system used for all S3 object I/O.
            default_bucket (str, optional): Bucket for intermediate artifacts. Defaults to ``SMKIT_DEFAULT_BUCKET``
                or ``sagemaker-{region}-{account}``.
            client_config (botocore.config.Config, optional): Client configuration. Defaults to
                :func:`smkit.config.client_config`.
        """
        self.client_config = client_config or smconfig.client_config()
        self.boto_session = boto_session or boto3.session.Session(region_name=smconfig.region_override())
        self._region_name = self.boto_session.region_name
        if self._region_name is None:
            raise ValueError(
                "Must setup local AWS configuration with a region supported by SageMaker, or set SMKIT_REGION."
            )

        self.sagemaker_client = sagemaker_client or self.boto_session.client("sagemaker", config=self.client_config)
        self.sagemaker_runtime_client = sagemaker_runtime_client or self.boto_session.client(
            "runtime.sagemaker", config=self.client_config
        )
        self._fs = s3_fs
        self._default_bucket_name_override = default_bucket or smconfig.default_bucket_override()
        self._default_bucket: Optional[str] = None

    def __repr__(self):
        return f"Session(region_name='{self._region_name}')"

    @property
    def boto_region_name(self) -> str:
        return self._region_name

    @property
    def fs(self) -> s3fs.S3FileSystem:
        """File system for S3 object I/O, created lazily from the session credentials."""
        if self._fs is None:
            creds = self.boto_session.get_credentials()
            if creds is None:
                self._fs = s3fs.S3FileSystem(anon=False)
            else:
                frozen = creds.get_frozen_credentials()
                self._fs = s3fs.S3FileSystem(
                    key=frozen.access_key,
                    secret=frozen.secret_key,
                    token=frozen.token,
                    client_kwargs={"region_name": self._region_name},
                )
        return self._fs

    # region: S3
    def default_bucket(self) -> str:
        """Return the name of the default bucket, creating it when it does not exist yet.

        Returns:
            str: ``SMKIT_DEFAULT_BUCKET`` or the session's default bucket if given, else
                ``sagemaker-{region}-{AWS account ID}``.
        """
        if self._default_bucket:
            return self._default_bucket

        default_bucket = self._default_bucket_name_override
        if not default_bucket:
            account = self.account_id()
            default_bucket = f"sagemaker-{self._region_name}-{account}"

        self._create_s3_bucket_if_it_does_not_exist(bucket_name=default_bucket, region=self._region_name)
        self._default_bucket = default_bucket
        return self._default_bucket

    def account_id(self) -> str:
        """Return the AWS account ID of the session credentials."""
        sts = self.boto_session.client("sts", region_name=self._region_name)
        return sts.get_caller_identity()["Account"]

    def _create_s3_bucket_if_it_does_not_exist(self, bucket_name: str, region: str):
        s3 = self.boto_session.client("s3", region_name=region)
        try:
            s3.head_bucket(Bucket=bucket_name)
            return
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code not in ("404", "NoSuchBucket"):
                raise

        logger.info("Creating bucket %s in region %s", bucket_name, region)
        try:
            if region == "us-east-1":
                # 'us-east-1' cannot be specified because it is the default region:
                # https://github.com/boto/boto3/issues/125
                s3.create_bucket(Bucket=bucket_name)
            else:
                s3.create_bucket(Bucket=bucket_name, CreateBucketConfiguration={"LocationConstraint": region})
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code != "OperationAborted" or "conflicting conditional operation" not in str(e):
                raise

    def upload_data(
        self,
        path: str,
        bucket: Optional[str] = None,
        key_prefix: str = "data",
        extra_args: Optional[Dict[str, str]] = None,
    ) -> str:
        """Upload a local file or directory to S3.

        If a single file is specified, it is uploaded to ``s3://{bucket}/{key_prefix}/{filename}``. If a directory is
        specified, its tree is uploaded under ``s3://{bucket}/{key_prefix}/``.

        Args:
            path (str): Path (absolute or relative) of local file or directory to upload.
            bucket (str): Name of the S3 Bucket to upload to. Defaults to :meth:`default_bucket`.
            key_prefix (str): Optional S3 object key name prefix. Defaults to 'data'.
            extra_args (dict): Extra arguments for ``PutObject``, e.g., ``{"ServerSideEncryption": "aws:kms"}``.

        Returns:
            str: The S3 URI of the uploaded file(s).
        """
        files: List[Tuple[Path, str]] = []
        key_suffix = None
        local = Path(path)
        if local.is_dir():
            for f in sorted(p for p in local.rglob("*") if p.is_file()):
                s3_relative_prefix = f.parent.relative_to(local).as_posix()
                s3_relative_prefix = "" if s3_relative_prefix == "." else s3_relative_prefix + "/"
                s3_key = f"{key_prefix}/{s3_relative_prefix}{f.name}"
                files.append((f, s3_key))
        else:
            key_suffix = local.name
            files.append((local, f"{key_prefix}/{key_suffix}"))

        bucket = bucket or self.default_bucket()
        for local_path, s3_key in files:
            logger.debug("Uploading %s to s3://%s/%s", local_path, bucket, s3_key)
            self.fs.put_file(str(local_path), f"{bucket}/{s3_key}", **(extra_args or {}))

        s3_uri = f"s3://{bucket}/{key_prefix}"
        # If a specific file was used as input (instead of a directory), we return the full S3 key
        # of the uploaded object. This prevents unintentionally using other files under the same prefix
        # during training.
        if key_suffix:
            s3_uri = f"{s3_uri}/{key_suffix}"
        return s3_uri

    def upload_string_as_file_body(self, body: str, bucket: str, key: str, kms_key: Optional[str] = None) -> str:
        """Upload a string as an S3 object and return its S3 URI."""
        extra_args = {"ServerSideEncryption": "aws:kms", "SSEKMSKeyId": kms_key} if kms_key else {}
        self.fs.pipe_file(f"{bucket}/{key}", body.encode("utf-8"), **extra_args)
        return f"s3://{bucket}/{key}"

    def download_data(self, path: str, bucket: str, key_prefix: str = "") -> List[str]:
        """Download every S3 object under ``s3://{bucket}/{key_prefix}`` into the local directory ``path``."""
        keys = self.list_s3_files(bucket, key_prefix)
        downloaded = []
        for key in keys:
            tail = os.path.relpath(key, key_prefix) if key != key_prefix else os.path.basename(key)
            destination = Path(path) / tail
            destination.parent.mkdir(parents=True, exist_ok=True)
            self.fs.get_file(f"{bucket}/{key}", str(destination))
            downloaded.append(str(destination))
        return downloaded

    def read_s3_file(self, bucket: str, key_prefix: str) -> str:
        """Read a single S3 object and return its body decoded as UTF-8."""
        return self.fs.cat_file(f"{bucket}/{key_prefix}").decode("utf-8")

    def list_s3_files(self, bucket: str, key_prefix: str) -> List[str]:
        """List the keys of the S3 objects under ``key_prefix``."""
        paths = self.fs.find(f"{bucket}/{key_prefix}")
        return [p[len(bucket) + 1 :] for p in paths]

    # endregion: S3

    # region: training
    def train(  # noqa: C901
        self,
        input_mode: str,
        input_config: Optional[List[Dict[str, Any]]],
        role: str,
        job_name: str,
        output_config: Dict[str, Any],
        resource_config: Dict[str, Any],
        vpc_config: Optional[Dict[str, List[str]]],
        hyperparameters: Optional[Dict[str, str]],
        stop_condition: Dict[str, int],
        tags: Optional[List[Dict[str, str]]],
        metric_definitions: Optional[List[Dict[str, str]]],
        enable_network_isolation: bool = False,
        image_uri: Optional[str] = None,
        algorithm_arn: Optional[str] = None,
        encrypt_inter_container_traffic: bool = False,
        use_spot_instances: bool = False,
        checkpoint_s3_uri: Optional[str] = None,
        checkpoint_local_path: Optional[str] = None,
        experiment_config: Optional[Dict[str, str]] = None,
        debugger_rule_configs: Optional[List[Dict]] = None,
        debugger_hook_config: Optional[Dict] = None,
        tensorboard_output_config: Optional[Dict] = None,
        enable_sagemaker_metrics: Optional[bool] = None,
        profiler_rule_configs: Optional[List[Dict]] = None,
        profiler_config: Optional[Dict] = None,
        environment: Optional[Dict[str, str]] = None,
        retry_strategy: Optional[Dict[str, int]] = None,
    ) -> Dict[str, Any]:
        """Create an Amazon SageMaker training job.

        Args:
            input_mode (str): The input mode that the algorithm supports. Valid modes: 'File' or 'Pipe'.
            input_config (list): A list of Channel objects. Each channel is a named input source.
            role (str): An AWS IAM role ARN.
            job_name (str): Name of the training job being created.
            output_config (dict): The S3 URI where you want to store the training results and optional KMS key ID.
            resource_config (dict): Contains values for ResourceConfig: InstanceCount, InstanceType, VolumeSizeInGB.
            vpc_config (dict): Contains values for VpcConfig: Subnets and SecurityGroupIds.
            hyperparameters (dict): Hyperparameters for model training; keys and values must be strings.
            stop_condition (dict): Defines when training shall finish. Contains entries that can be understood by
                the service like ``MaxRuntimeInSeconds``.
            tags (list[dict]): List of tags for labeling a training job.
            metric_definitions (list[dict]): A list of dictionaries that defines the metric(s) used to evaluate the
                training jobs. Each dictionary contains two keys: 'Name' and 'Regex'.
            enable_network_isolation (bool): Whether to request for the training job to run with network isolation.
            image_uri (str): Docker image containing training code.
            algorithm_arn (str): Algorithm ARN from Marketplace.
            encrypt_inter_container_traffic (bool): Whether to encrypt inter-container traffic.
            use_spot_instances (bool): Whether to use spot instances for training.
            checkpoint_s3_uri (str): The S3 URI in which to persist checkpoints.
            checkpoint_local_path (str): The local path that the algorithm writes its checkpoints to.
            experiment_config (dict): Keys 'ExperimentName', 'TrialName', and 'TrialComponentDisplayName'.
            debugger_rule_configs (list[dict]): Debugger rule configurations.
            debugger_hook_config (dict): Debugger hook configuration.
            tensorboard_output_config (dict): TensorBoard output configuration.
            enable_sagemaker_metrics (bool): Whether to enable SageMaker Metrics Time Series.
            profiler_rule_configs (list[dict]): Profiler rule configurations.
            profiler_config (dict): Profiler configuration.
            environment (dict[str, str]): Environment variables to be set in the training container.
            retry_strategy (dict): ``{"MaximumRetryAttempts": n}``.

        Returns:
            dict: response of ``CreateTrainingJob``.
        """
        train_request = self._get_train_request(
            input_mode=input_mode,
            input_config=input_config,
            role=role,
            job_name=job_name,
            output_config=output_config,
            resource_config=resource_config,
            vpc_config=vpc_config,
            hyperparameters=hyperparameters,
            stop_condition=stop_condition,
            tags=tags,
            metric_definitions=metric_definitions,
            enable_network_isolation=enable_network_isolation,
            image_uri=image_uri,
            algorithm_arn=algorithm_arn,
            encrypt_inter_container_traffic=encrypt_inter_container_traffic,
            use_spot_instances=use_spot_instances,
            checkpoint_s3_uri=checkpoint_s3_uri,
            checkpoint_local_path=checkpoint_local_path,
            experiment_config=experiment_config,
            debugger_rule_configs=debugger_rule_configs,
            debugger_hook_config=debugger_hook_config,
            tensorboard_output_config=tensorboard_output_config,
            enable_sagemaker_metrics=enable_sagemaker_metrics,
            profiler_rule_configs=profiler_rule_configs,
            profiler_config=profiler_config,
            environment=environment,
            retry_strategy=retry_strategy,
        )
        logger.info("Creating training-job with name: %s", job_name)
        logger.debug("train request: %s", json.dumps(train_request, indent=4, default=str))
        return self.sagemaker_client.create_training_job(**train_request)

    def _get_train_request(  # noqa: C901
        self,
        input_mode,
        input_config,
        role,
        job_name,
        output_config,
        resource_config,
        vpc_config,
        hyperparameters,
        stop_condition,
        tags,
        metric_definitions,
        enable_network_isolation=False,
        image_uri=None,
        algorithm_arn=None,
        encrypt_inter_container_traffic=False,
        use_spot_instances=False,
        checkpoint_s3_uri=None,
        checkpoint_local_path=None,
        experiment_config=None,
        debugger_rule_configs=None,
        debugger_hook_config=None,
        tensorboard_output_config=None,
        enable_sagemaker_metrics=None,
        profiler_rule_configs=None,
        profiler_config=None,
        environment=None,
        retry_strategy=None,
    ) -> Dict[str, Any]:
        train_request: Dict[str, Any] = {
            "AlgorithmSpecification": {"TrainingInputMode": input_mode},
            "OutputDataConfig": output_config,
            "TrainingJobName": job_name,
            "StoppingCondition": stop_condition,
            "ResourceConfig": resource_config,
            "RoleArn": role,
        }

        if image_uri and algorithm_arn:
            raise ValueError("image_uri and algorithm_arn are mutually exclusive. Both were provided.")
        if image_uri is not None:
            train_request["AlgorithmSpecification"]["TrainingImage"] = image_uri
        elif algorithm_arn is not None:
            train_request["AlgorithmSpecification"]["AlgorithmName"] = algorithm_arn
        else:
            raise ValueError("Either image_uri or algorithm_arn is required. None was provided.")

        if metric_definitions is not None:
            train_request["AlgorithmSpecification"]["MetricDefinitions"] = metric_definitions

        if enable_sagemaker_metrics is not None:
            train_request["AlgorithmSpecification"]["EnableSageMakerMetricsTimeSeries"] = enable_sagemaker_metrics

        if input_config is not None:
            train_request["InputDataConfig"] = input_config

        if environment is not None:
            train_request["Environment"] = environment

        if hyperparameters and len(hyperparameters) > 0:
            train_request["HyperParameters"] = hyperparameters

        if tags is not None:
            train_request["Tags"] = tags

        if vpc_config is not None:
            train_request["VpcConfig"] = vpc_config

        if experiment_config and len(experiment_config) > 0:
            train_request["ExperimentConfig"] = experiment_config

        if enable_network_isolation:
            train_request["EnableNetworkIsolation"] = enable_network_isolation

        if encrypt_inter_container_traffic:
            train_request["EnableInterContainerTrafficEncryption"] = encrypt_inter_container_traffic

        if use_spot_instances:
            train_request["EnableManagedSpotTraining"] = use_spot_instances

        if checkpoint_s3_uri:
            checkpoint_config = {"S3Uri": checkpoint_s3_uri}
            if checkpoint_local_path:
                checkpoint_config["LocalPath"] = checkpoint_local_path
            train_request["CheckpointConfig"] = checkpoint_config

        if debugger_rule_configs is not None:
            train_request["DebugRuleConfigurations"] = debugger_rule_configs

        if debugger_hook_config is not None:
            train_request["DebugHookConfig"] = debugger_hook_config

        if tensorboard_output_config is not None:
            train_request["TensorBoardOutputConfig"] = tensorboard_output_config

        if profiler_rule_configs is not None:
            train_request["ProfilerRuleConfigurations"] = profiler_rule_configs

        if profiler_config is not None:
            train_request["ProfilerConfig"] = profiler_config

        if retry_strategy is not None:
            train_request["RetryStrategy"] = retry_strategy

        return train_request

    def update_training_job(
        self,
        job_name: str,
        profiler_rule_configs: Optional[List[Dict]] = None,
        profiler_config: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        """Update a running training job; only the profiler settings can be updated."""
        update_training_job_request: Dict[str, Any] = {"TrainingJobName": job_name}
        if profiler_rule_configs is not None:
            update_training_job_request["ProfilerRuleConfigurations"] = profiler_rule_configs
        if profiler_config is not None:
            update_training_job_request["ProfilerConfig"] = profiler_config

        logger.info("Updating training job with name %s", job_name)
        logger.debug("Update request: %s", json.dumps(update_training_job_request, indent=4))
        return self.sagemaker_client.update_training_job(**update_training_job_request)

    def describe_training_job(self, job_name: str) -> Dict[str, Any]:
        """Call ``DescribeTrainingJob`` for the given job name and return the response."""
        return self.sagemaker_client.describe_training_job(TrainingJobName=job_name)

    def stop_training_job(self, job_name: str):
        """Stop the training job with the given name."""
        logger.info("Stopping training job: %s", job_name)
        self.sagemaker_client.stop_training_job(TrainingJobName=job_name)

    def wait_for_job(self, job: str, poll: float = smconfig.JOB_POLL) -> Dict[str, Any]:
        """Wait for an Amazon SageMaker training job to complete.

        Raises:
            UnexpectedStatusException: If the training job fails.

        Returns:
            dict: Return value from the ``DescribeTrainingJob`` API.
        """
        desc = _wait_until_training_done(
            lambda last_desc: _train_done(self.sagemaker_client, job, last_desc), None, poll
        )
        self._check_job_status(job, desc, "TrainingJobStatus")
        return desc

    def logs_for_job(  # noqa: C901
        self, job_name: str, wait: bool = False, poll: float = smconfig.LOG_POLL, log_type: str = "All"
    ):
        """Display the logs for a given training job, optionally tailing them until the job is complete.

        If the output is a tty or a Jupyter cell, it will be color-coded based on which instance the log entry is
        from.

        Args:
            job_name (str): Name of the training job to display the logs for.
            wait (bool): Whether to keep looking for new log entries until the job completes.
            poll (int): The interval in seconds between polling for new log entries and job completion.
            log_type (str): One of "All", "Training", "Rules", or "None". "Rules" and "All" also print the
                debugger/profiler rule evaluation statuses once the job finishes.

        Raises:
            UnexpectedStatusException: If waiting and the training job fails.
        """
        description = self.sagemaker_client.describe_training_job(TrainingJobName=job_name)
        print(secondary_training_status_message(description, None), end="")
        instance_count, stream_names, positions, client, log_group, dot, color_wrap = _logs_init(
            self, description, job="Training"
        )

        state = _get_initial_job_state(description, "TrainingJobStatus", wait)

        last_describe_job_call = time.time()
        last_description = description
        last_debug_rule_statuses = None
        last_profiler_rule_statuses = None

        while True:
            if log_type in ("All", "Training"):
                _flush_log_streams(
                    stream_names, instance_count, client, log_group, job_name, positions, dot, color_wrap
                )
            if state == LogState.COMPLETE:
                break

            time.sleep(poll)

            if state == LogState.JOB_COMPLETE:
                state = LogState.COMPLETE
            elif time.time() - last_describe_job_call >= 30:
                description = self.sagemaker_client.describe_training_job(TrainingJobName=job_name)
                last_describe_job_call = time.time()

                if secondary_training_status_changed(description, last_description):
                    print()
                    print(secondary_training_status_message(description, last_description), end="")
                    last_description = description

                status = description["TrainingJobStatus"]

                if status in ("Completed", "Failed", "Stopped"):
                    print()
                    state = LogState.JOB_COMPLETE

                # Print prettified logs related to the status of SageMaker Debugger rules.
                if log_type in ("All", "Rules"):
                    debug_rule_statuses = description.get("DebugRuleEvaluationStatuses", {})
                    if debug_rule_statuses and debug_rule_statuses != last_debug_rule_statuses:
                        _print_rule_statuses("Debugger", debug_rule_statuses)
                        last_debug_rule_statuses = debug_rule_statuses

                    profiler_rule_statuses = description.get("ProfilerRuleEvaluationStatuses", {})
                    if profiler_rule_statuses and profiler_rule_statuses != last_profiler_rule_statuses:
                        _print_rule_statuses("Profiler", profiler_rule_statuses)
                        last_profiler_rule_statuses = profiler_rule_statuses

        if wait:
            self._check_job_status(job_name, description, "TrainingJobStatus")
            if dot:
                print()
            # Customers are not billed for hardware provisioning, so billable time is less than total time
            training_time = description.get("TrainingTimeInSeconds")
            billable_time = description.get("BillableTimeInSeconds")
            if training_time is not None:
                print("Training seconds:", training_time * instance_count)
            if billable_time is not None:
                print("Billable seconds:", billable_time * instance_count)
                if description.get("EnableManagedSpotTraining") and training_time:
                    saving = (1 - float(billable_time) / training_time) * 100
                    print("Managed Spot Training savings: {:.1f}%".format(saving))

    # endregion: training

    # region: tuning
    def create_tuning_job(
        self,
        job_name: str,
        tuning_config: Dict[str, Any],
        training_config: Optional[Dict[str, Any]] = None,
        training_config_list: Optional[List[Dict[str, Any]]] = None,
        warm_start_config: Optional[Dict[str, Any]] = None,
        tags: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """Create an Amazon SageMaker hyperparameter tuning job.

        Exactly one of ``training_config`` (single algorithm) and ``training_config_list`` (multiple algorithms)
        must be given.

        Args:
            job_name (str): Name of the tuning job being created.
            tuning_config (dict): Keyword arguments of :meth:`_map_tuning_config`.
            training_config (dict): Keyword arguments of :meth:`_map_training_config`.
            training_config_list (list[dict]): One ``training_config`` per training job definition.
            warm_start_config (dict): ``WarmStartConfig`` request of the tuning job.
            tags (list[dict]): List of tags for labeling the tuning job.
        """
        if training_config is None and training_config_list is None:
            raise ValueError("Either training_config or training_config_list should be provided.")
        if training_config is not None and training_config_list is not None:
            raise ValueError("Only one of training_config and training_config_list should be provided.")

        tune_request: Dict[str, Any] = {
            "HyperParameterTuningJobName": job_name,
            "HyperParameterTuningJobConfig": self._map_tuning_config(**tuning_config),
        }

        if training_config is not None:
            tune_request["TrainingJobDefinition"] = self._map_training_config(**training_config)

        if training_config_list is not None:
            tune_request["TrainingJobDefinitions"] = [
                self._map_training_config(**training_cfg) for training_cfg in training_config_list
            ]

        if warm_start_config is not None:
            tune_request["WarmStartConfig"] = warm_start_config

        if tags is not None:
            tune_request["Tags"] = tags

        logger.info("Creating hyperparameter tuning job with name: %s", job_name)
        logger.debug("tune request: %s", json.dumps(tune_request, indent=4, default=str))
        return self.sagemaker_client.create_hyper_parameter_tuning_job(**tune_request)

    @classmethod
    def _map_tuning_config(
        cls,
        strategy: str,
        max_jobs: int,
        max_parallel_jobs: int,
        early_stopping_type: str = "Off",
        objective_type: Optional[str] = None,
        objective_metric_name: Optional[str] = None,
        parameter_ranges: Optional[Dict[str, List[Dict]]] = None,
    ) -> Dict[str, Any]:
        """Construct the ``HyperParameterTuningJobConfig`` request."""
        tuning_config: Dict[str, Any] = {
            "Strategy": strategy,
            "ResourceLimits": {
                "MaxNumberOfTrainingJobs": max_jobs,
                "MaxParallelTrainingJobs": max_parallel_jobs,
            },
            "TrainingJobEarlyStoppingType": early_stopping_type,
        }

        tuning_objective = cls._map_tuning_objective(objective_type, objective_metric_name)
        if tuning_objective is not None:
            tuning_config["HyperParameterTuningJobObjective"] = tuning_objective

        if parameter_ranges is not None:
            tuning_config["ParameterRanges"] = parameter_ranges

        return tuning_config

    @classmethod
    def _map_tuning_objective(cls, objective_type, objective_metric_name) -> Optional[Dict[str, str]]:
        tuning_objective = None
        if objective_type is not None or objective_metric_name is not None:
            tuning_objective = {}
        if objective_type is not None:
            tuning_objective["Type"] = objective_type
        if objective_metric_name is not None:
            tuning_objective["MetricName"] = objective_metric_name
        return tuning_objective

    @classmethod
    def _map_training_config(  # noqa: C901
        cls,
        static_hyperparameters: Dict[str, str],
        input_mode: str,
        role: str,
        output_config: Dict[str, Any],
        resource_config: Dict[str, Any],
        stop_condition: Dict[str, int],
        input_config: Optional[List[Dict]] = None,
        metric_definitions: Optional[List[Dict[str, str]]] = None,
        image_uri: Optional[str] = None,
        algorithm_arn: Optional[str] = None,
        vpc_config: Optional[Dict[str, List[str]]] = None,
        enable_network_isolation: bool = False,
        encrypt_inter_container_traffic: bool = False,
        estimator_name: Optional[str] = None,
        objective_type: Optional[str] = None,
        objective_metric_name: Optional[str] = None,
        parameter_ranges: Optional[Dict[str, List[Dict]]] = None,
        use_spot_instances: bool = False,
        checkpoint_s3_uri: Optional[str] = None,
        checkpoint_local_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Construct one ``TrainingJobDefinition`` of a tuning job request."""
        training_job_definition: Dict[str, Any] = {
            "StaticHyperParameters": static_hyperparameters,
            "RoleArn": role,
            "OutputDataConfig": output_config,
            "ResourceConfig": resource_config,
            "StoppingCondition": stop_condition,
        }

        algorithm_spec: Dict[str, Any] = {"TrainingInputMode": input_mode}
        if metric_definitions is not None:
            algorithm_spec["MetricDefinitions"] = metric_definitions

        if algorithm_arn is not None:
            algorithm_spec["AlgorithmName"] = algorithm_arn
        else:
            algorithm_spec["TrainingImage"] = image_uri

        training_job_definition["AlgorithmSpecification"] = algorithm_spec

        if input_config is not None:
            training_job_definition["InputDataConfig"] = input_config

        if vpc_config is not None:
            training_job_definition["VpcConfig"] = vpc_config

        if enable_network_isolation:
            training_job_definition["EnableNetworkIsolation"] = True

        if encrypt_inter_container_traffic:
            training_job_definition["EnableInterContainerTrafficEncryption"] = True

        if use_spot_instances:
            training_job_definition["EnableManagedSpotTraining"] = True

        if checkpoint_s3_uri:
            checkpoint_config = {"S3Uri": checkpoint_s3_uri}
            if checkpoint_local_path:
                checkpoint_config["LocalPath"] = checkpoint_local_path
            training_job_definition["CheckpointConfig"] = checkpoint_config

        if estimator_name is not None:
            training_job_definition["DefinitionName"] = estimator_name

        tuning_objective = cls._map_tuning_objective(objective_type, objective_metric_name)
        if tuning_objective is not None:
            training_job_definition["TuningObjective"] = tuning_objective

        if parameter_ranges is not None:
            training_job_definition["HyperParameterRanges"] = parameter_ranges

        return training_job_definition

    def describe_tuning_job(self, job_name: str) -> Dict[str, Any]:
        """Call ``DescribeHyperParameterTuningJob`` for the given job name and return the response."""
        return self.sagemaker_client.describe_hyper_parameter_tuning_job(HyperParameterTuningJobName=job_name)

    def stop_tuning_job(self, name: str):
        """Stop the tuning job; a job that is already stopping or finished is logged, not raised."""
        try:
            logger.info("Stopping tuning job: %s", name)
            self.sagemaker_client.stop_hyper_parameter_tuning_job(HyperParameterTuningJobName=name)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            # allow to pass if the job already stopped
            if error_code == "ValidationException":
                logger.info("Tuning job: %s is already stopped or not running.", name)
            else:
                logger.error(
                    "Error occurred while attempting to stop tuning job: %s. Please try again.",
                    name,
                )
                raise

    def wait_for_tuning_job(self, job: str, poll: float = smconfig.JOB_POLL) -> Dict[str, Any]:
        """Wait for an Amazon SageMaker hyperparameter tuning job to complete.

        Raises:
            UnexpectedStatusException: If the hyperparameter tuning job fails.
        """
        desc = _wait_until(lambda: _tuning_job_status(self.sagemaker_client, job), poll)
        self._check_job_status(job, desc, "HyperParameterTuningJobStatus")
        return desc

    def list_training_jobs_for_tuning_job(self, job_name: str, **kwargs) -> List[Dict[str, Any]]:
        """Return the summaries of all training jobs launched by a tuning job."""
        return paginate(
            self.sagemaker_client.list_training_jobs_for_hyper_parameter_tuning_job,
            "TrainingJobSummaries",
            HyperParameterTuningJobName=job_name,
            MaxResults=100,
            **kwargs,
        )

    # endregion: tuning

    # region: processing
    def process(
        self,
        inputs: Optional[List[Dict]],
        output_config: Optional[Dict],
        job_name: str,
        resources: Dict[str, Any],
        stopping_condition: Optional[Dict[str, int]],
        app_specification: Dict[str, Any],
        environment: Optional[Dict[str, str]] = None,
        network_config: Optional[Dict] = None,
        role_arn: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        experiment_config: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Create an Amazon SageMaker processing job."""
        process_request: Dict[str, Any] = {
            "ProcessingJobName": job_name,
            "ProcessingResources": resources,
            "AppSpecification": app_specification,
            "RoleArn": role_arn,
        }

        if inputs:
            process_request["ProcessingInputs"] = inputs

        if output_config and output_config.get("Outputs"):
            process_request["ProcessingOutputConfig"] = output_config

        if environment is not None:
            process_request["Environment"] = environment

        if network_config is not None:
            process_request["NetworkConfig"] = network_config

        if stopping_condition is not None:
            process_request["StoppingCondition"] = stopping_condition

        if tags is not None:
            process_request["Tags"] = tags

        if experiment_config:
            process_request["ExperimentConfig"] = experiment_config

        logger.info("Creating processing-job with name %s", job_name)
        logger.debug("process request: %s", json.dumps(process_request, indent=4, default=str))
        return self.sagemaker_client.create_processing_job(**process_request)

    def describe_processing_job(self, job_name: str) -> Dict[str, Any]:
        """Call ``DescribeProcessingJob`` for the given job name and return the response."""
        return self.sagemaker_client.describe_processing_job(ProcessingJobName=job_name)

    def stop_processing_job(self, job_name: str):
        """Stop the processing job with the given name."""
        self.sagemaker_client.stop_processing_job(ProcessingJobName=job_name)

    def was_processing_job_successful(self, job_name: str) -> bool:
        """Return True if the processing job completed."""
        job_desc = self.sagemaker_client.describe_processing_job(ProcessingJobName=job_name)
        return job_desc["ProcessingJobStatus"] == "Completed"

    def wait_for_processing_job(self, job: str, poll: float = smconfig.JOB_POLL) -> Dict[str, Any]:
        """Wait for an Amazon SageMaker processing job to complete.

        Raises:
            UnexpectedStatusException: If the processing job fails.
        """
        desc = _wait_until(lambda: _processing_job_status(self.sagemaker_client, job), poll)
        self._check_job_status(job, desc, "ProcessingJobStatus")
        return desc

    def logs_for_processing_job(self, job_name: str, wait: bool = False, poll: float = smconfig.LOG_POLL):
        """Display the logs for a given processing job, optionally tailing them until the job is complete.

        Raises:
            UnexpectedStatusException: If waiting and the processing job fails.
        """
        description = self.sagemaker_client.describe_processing_job(ProcessingJobName=job_name)
        instance_count, stream_names, positions, client, log_group, dot, color_wrap = _logs_init(
            self, description, job="Processing"
        )

        state = _get_initial_job_state(description, "ProcessingJobStatus", wait)

        last_describe_job_call = time.time()
        while True:
            _flush_log_streams(stream_names, instance_count, client, log_group, job_name, positions, dot, color_wrap)
            if state == LogState.COMPLETE:
                break

            time.sleep(poll)

            if state == LogState.JOB_COMPLETE:
                state = LogState.COMPLETE
            elif time.time() - last_describe_job_call >= 30:
                description = self.sagemaker_client.describe_processing_job(ProcessingJobName=job_name)
                last_describe_job_call = time.time()

                status = description["ProcessingJobStatus"]

                if status in ("Completed", "Failed", "Stopped"):
                    print()
                    state = LogState.JOB_COMPLETE

        if wait:
            self._check_job_status(job_name, description, "ProcessingJobStatus")
            if dot:
                print()

    # endregion: processing

    # region: monitoring
    def create_monitoring_schedule(
        self,
        monitoring_schedule_name: str,
        schedule_expression: Optional[str],
        statistics_s3_uri: Optional[str],
        constraints_s3_uri: Optional[str],
        monitoring_inputs: List[Dict],
        monitoring_output_config: Dict,
        instance_count: int,
        instance_type: str,
        volume_size_in_gb: int,
        volume_kms_key: Optional[str] = None,
        image_uri: Optional[str] = None,
        entrypoint: Optional[List[str]] = None,
        arguments: Optional[List[str]] = None,
        record_preprocessor_source_uri: Optional[str] = None,
        post_analytics_processor_source_uri: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        environment: Optional[Dict[str, str]] = None,
        network_config: Optional[Dict] = None,
        role_arn: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """Create an Amazon SageMaker monitoring schedule with an embedded monitoring job definition.

        Args:
            monitoring_schedule_name (str): The name of the monitoring schedule.
            schedule_expression (str): The cron expression that dictates the monitoring execution schedule.
            statistics_s3_uri (str): The S3 uri of the statistics file to use.
            constraints_s3_uri (str): The S3 uri of the constraints file to use.
            monitoring_inputs (list[dict]): The monitoring inputs, e.g. ``[{"EndpointInput": {...}}]``.
            monitoring_output_config (dict): The config for the monitoring job output.
            instance_count (int): The number of instances to run.
            instance_type (str): The type of instance to run.
            volume_size_in_gb (int): Size of the volume in GB.
            volume_kms_key (str): KMS key to use when writing to disk.
            image_uri (str): The image uri to use for monitoring executions.
            entrypoint (str): The entrypoint to the monitoring execution image.
            arguments (str): The arguments to pass to the monitoring execution image.
            record_preprocessor_source_uri (str or None): The S3 uri that points to the script that pre-processes
                the dataset (only applicable to first-party images).
            post_analytics_processor_source_uri (str or None): The S3 uri that points to the script that
                post-processes the dataset (only applicable to first-party images).
            max_runtime_in_seconds (int): Specifies a limit to how long the processing job can run, in seconds.
            environment (dict): Environment variables to start the monitoring execution container with.
            network_config (dict): Specifies networking options, such as network traffic encryption between
                processing containers, whether to allow inbound and outbound network calls to and from processing
                containers, and VPC subnets and security groups to use for VPC-enabled processing jobs.
            role_arn (str): The Amazon Resource Name (ARN) of an IAM role that Amazon SageMaker can assume to
                perform tasks on your behalf.
            tags ([dict[str,str]]): A list of dictionaries containing key-value pairs.
        """
        monitoring_job_definition: Dict[str, Any] = {
            "MonitoringInputs": monitoring_inputs,
            "MonitoringResources": {
                "ClusterConfig": {
                    "InstanceCount": instance_count,
                    "InstanceType": instance_type,
                    "VolumeSizeInGB": volume_size_in_gb,
                }
            },
            "MonitoringAppSpecification": {"ImageUri": image_uri},
            "RoleArn": role_arn,
        }

        if statistics_s3_uri is not None or constraints_s3_uri is not None:
            monitoring_job_definition["BaselineConfig"] = {}
        if statistics_s3_uri is not None:
            monitoring_job_definition["BaselineConfig"]["StatisticsResource"] = {"S3Uri": statistics_s3_uri}
        if constraints_s3_uri is not None:
            monitoring_job_definition["BaselineConfig"]["ConstraintsResource"] = {"S3Uri": constraints_s3_uri}

        if monitoring_output_config is not None:
            monitoring_job_definition["MonitoringOutputConfig"] = monitoring_output_config

        if volume_kms_key is not None:
            monitoring_job_definition["MonitoringResources"]["ClusterConfig"]["VolumeKmsKeyId"] = volume_kms_key

        app_spec = monitoring_job_definition["MonitoringAppSpecification"]
        if entrypoint is not None:
            app_spec["ContainerEntrypoint"] = entrypoint
        if arguments is not None:
            app_spec["ContainerArguments"] = arguments
        if record_preprocessor_source_uri is not None:
            app_spec["RecordPreprocessorSourceUri"] = record_preprocessor_source_uri
        if post_analytics_processor_source_uri is not None:
            app_spec["PostAnalyticsProcessorSourceUri"] = post_analytics_processor_source_uri

        if max_runtime_in_seconds is not None:
            monitoring_job_definition["StoppingCondition"] = {"MaxRuntimeInSeconds": max_runtime_in_seconds}

        if environment is not None:
            monitoring_job_definition["Environment"] = environment

        if network_config is not None:
            monitoring_job_definition["NetworkConfig"] = network_config

        monitoring_schedule_request: Dict[str, Any] = {
            "MonitoringScheduleName": monitoring_schedule_name,
            "MonitoringScheduleConfig": {"MonitoringJobDefinition": monitoring_job_definition},
        }

        if schedule_expression is not None:
            monitoring_schedule_request["MonitoringScheduleConfig"]["ScheduleConfig"] = {
                "ScheduleExpression": schedule_expression
            }

        if tags is not None:
            monitoring_schedule_request["Tags"] = tags

        logger.info("Creating monitoring schedule name %s.", monitoring_schedule_name)
        logger.debug("monitoring schedule request: %s", json.dumps(monitoring_schedule_request, indent=4, default=str))
        return self.sagemaker_client.create_monitoring_schedule(**monitoring_schedule_request)

    def update_monitoring_schedule(  # noqa: C901
        self,
        monitoring_schedule_name: str,
        schedule_expression: Optional[str] = None,
        statistics_s3_uri: Optional[str] = None,
        constraints_s3_uri: Optional[str] = None,
        monitoring_inputs: Optional[List[Dict]] = None,
        monitoring_output_config: Optional[Dict] = None,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        volume_size_in_gb: Optional[int] = None,
        volume_kms_key: Optional[str] = None,
        image_uri: Optional[str] = None,
        entrypoint: Optional[List[str]] = None,
        arguments: Optional[List[str]] = None,
        record_preprocessor_source_uri: Optional[str] = None,
        post_analytics_processor_source_uri: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        environment: Optional[Dict[str, str]] = None,
        network_config: Optional[Dict] = None,
        role_arn: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Update an existing monitoring schedule; any argument left as ``None`` keeps its current value."""
        existing_desc = self.sagemaker_client.describe_monitoring_schedule(
            MonitoringScheduleName=monitoring_schedule_name
        )
        existing_config = existing_desc["MonitoringScheduleConfig"]
        existing_definition = existing_config["MonitoringJobDefinition"]

        existing_schedule_config = None
        if schedule_expression is None and existing_config.get("ScheduleConfig") is not None:
            existing_schedule_config = existing_config["ScheduleConfig"]["ScheduleExpression"]

        request_schedule_expression = schedule_expression or existing_schedule_config
        request_monitoring_inputs = monitoring_inputs or existing_definition["MonitoringInputs"]

        existing_cluster = existing_definition["MonitoringResources"]["ClusterConfig"]
        request_instance_count = instance_count or existing_cluster["InstanceCount"]
        request_instance_type = instance_type or existing_cluster["InstanceType"]
        request_volume_size_in_gb = volume_size_in_gb or existing_cluster["VolumeSizeInGB"]
        request_volume_kms_key = volume_kms_key or existing_cluster.get("VolumeKmsKeyId")

        existing_app_spec = existing_definition["MonitoringAppSpecification"]
        request_image_uri = image_uri or existing_app_spec["ImageUri"]
        request_role_arn = role_arn or existing_definition["RoleArn"]

        monitoring_job_definition: Dict[str, Any] = {
            "MonitoringInputs": request_monitoring_inputs,
            "MonitoringResources": {
                "ClusterConfig": {
                    "InstanceCount": request_instance_count,
                    "InstanceType": request_instance_type,
                    "VolumeSizeInGB": request_volume_size_in_gb,
                }
            },
            "MonitoringAppSpecification": {"ImageUri": request_image_uri},
            "RoleArn": request_role_arn,
        }

        existing_baseline = existing_definition.get("BaselineConfig", {})
        request_statistics = statistics_s3_uri or existing_baseline.get("StatisticsResource", {}).get("S3Uri")
        request_constraints = constraints_s3_uri or existing_baseline.get("ConstraintsResource", {}).get("S3Uri")
        if request_statistics is not None or request_constraints is not None:
            monitoring_job_definition["BaselineConfig"] = {}
        if request_statistics is not None:
            monitoring_job_definition["BaselineConfig"]["StatisticsResource"] = {"S3Uri": request_statistics}
        if request_constraints is not None:
            monitoring_job_definition["BaselineConfig"]["ConstraintsResource"] = {"S3Uri": request_constraints}

        request_output_config = monitoring_output_config or existing_definition.get("MonitoringOutputConfig")
        if request_output_config is not None:
            monitoring_job_definition["MonitoringOutputConfig"] = request_output_config

        if request_volume_kms_key is not None:
            monitoring_job_definition["MonitoringResources"]["ClusterConfig"]["VolumeKmsKeyId"] = request_volume_kms_key

        app_spec = monitoring_job_definition["MonitoringAppSpecification"]
        for key, value in (
            ("ContainerEntrypoint", entrypoint),
            ("ContainerArguments", arguments),
            ("RecordPreprocessorSourceUri", record_preprocessor_source_uri),
            ("PostAnalyticsProcessorSourceUri", post_analytics_processor_source_uri),
        ):
            request_value = value or existing_app_spec.get(key)
            if request_value is not None:
                app_spec[key] = request_value

        request_max_runtime = max_runtime_in_seconds or existing_definition.get("StoppingCondition", {}).get(
            "MaxRuntimeInSeconds"
        )
        if request_max_runtime is not None:
            monitoring_job_definition["StoppingCondition"] = {"MaxRuntimeInSeconds": request_max_runtime}

        request_environment = environment or existing_definition.get("Environment")
        if request_environment is not None:
            monitoring_job_definition["Environment"] = request_environment

        request_network_config = network_config or existing_definition.get("NetworkConfig")
        if request_network_config is not None:
            monitoring_job_definition["NetworkConfig"] = request_network_config

        monitoring_schedule_request: Dict[str, Any] = {
            "MonitoringScheduleName": monitoring_schedule_name,
            "MonitoringScheduleConfig": {"MonitoringJobDefinition": monitoring_job_definition},
        }

        if request_schedule_expression is not None:
            monitoring_schedule_request["MonitoringScheduleConfig"]["ScheduleConfig"] = {
                "ScheduleExpression": request_schedule_expression
            }

        logger.info("Updating monitoring schedule with name: %s .", monitoring_schedule_name)
        logger.debug("monitoring schedule request: %s", json.dumps(monitoring_schedule_request, indent=4, default=str))
        return self.sagemaker_client.update_monitoring_schedule(**monitoring_schedule_request)

    def start_monitoring_schedule(self, monitoring_schedule_name: str):
        """Start a monitoring schedule."""
        print(f"Starting Monitoring Schedule with name: {monitoring_schedule_name}")
        self.sagemaker_client.start_monitoring_schedule(MonitoringScheduleName=monitoring_schedule_name)

    def stop_monitoring_schedule(self, monitoring_schedule_name: str):
        """Stop a monitoring schedule."""
        print(f"Stopping Monitoring Schedule with name: {monitoring_schedule_name}")
        self.sagemaker_client.stop_monitoring_schedule(MonitoringScheduleName=monitoring_schedule_name)

    def delete_monitoring_schedule(self, monitoring_schedule_name: str):
        """Delete a monitoring schedule."""
        print(f"Deleting Monitoring Schedule with name: {monitoring_schedule_name}")
        self.sagemaker_client.delete_monitoring_schedule(MonitoringScheduleName=monitoring_schedule_name)

    def describe_monitoring_schedule(self, monitoring_schedule_name: str) -> Dict[str, Any]:
        """Call ``DescribeMonitoringSchedule`` and return the response."""
        return self.sagemaker_client.describe_monitoring_schedule(MonitoringScheduleName=monitoring_schedule_name)

    def list_monitoring_executions(
        self,
        monitoring_schedule_name: str,
        sort_by: str = "ScheduledTime",
        sort_order: str = "Descending",
        max_results: int = 100,
    ) -> Dict[str, Any]:
        """List the monitoring executions of a schedule, most recent first by default."""
        return self.sagemaker_client.list_monitoring_executions(
            MonitoringScheduleName=monitoring_schedule_name,
            SortBy=sort_by,
            SortOrder=sort_order,
            MaxResults=max_results,
        )

    def list_monitoring_schedules(
        self,
        endpoint_name: Optional[str] = None,
        sort_by: str = "CreationTime",
        sort_order: str = "Descending",
        max_results: int = 100,
    ) -> Dict[str, Any]:
        """List monitoring schedules, optionally only those attached to ``endpoint_name``."""
        if endpoint_name is not None:
            return self.sagemaker_client.list_monitoring_schedules(
                EndpointName=endpoint_name,
                SortBy=sort_by,
                SortOrder=sort_order,
                MaxResults=max_results,
            )
        return self.sagemaker_client.list_monitoring_schedules(
            SortBy=sort_by, SortOrder=sort_order, MaxResults=max_results
        )

    def create_monitoring_schedule_from_job_definition(
        self,
        monitoring_schedule_name: str,
        job_definition_name: str,
        monitoring_type: str,
        schedule_expression: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """Create a monitoring schedule that refers to an existing monitoring job definition."""
        monitoring_schedule_config: Dict[str, Any] = {
            "MonitoringJobDefinitionName": job_definition_name,
            "MonitoringType": monitoring_type,
        }
        if schedule_expression is not None:
            monitoring_schedule_config["ScheduleConfig"] = {"ScheduleExpression": schedule_expression}

        logger.info("Creating Monitoring Schedule with name: %s", monitoring_schedule_name)
        return self.sagemaker_client.create_monitoring_schedule(
            MonitoringScheduleName=monitoring_schedule_name,
            MonitoringScheduleConfig=monitoring_schedule_config,
            Tags=tags or [],
        )

    def update_monitoring_schedule_job_definition(
        self,
        monitoring_schedule_name: str,
        job_definition_name: str,
        monitoring_type: str,
        schedule_expression: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Point a monitoring schedule at another job definition, optionally changing its cron expression."""
        monitoring_schedule_config: Dict[str, Any] = {
            "MonitoringJobDefinitionName": job_definition_name,
            "MonitoringType": monitoring_type,
        }
        if schedule_expression is not None:
            monitoring_schedule_config["ScheduleConfig"] = {"ScheduleExpression": schedule_expression}

        logger.info("Updating monitoring schedule with name: %s", monitoring_schedule_name)
        return self.sagemaker_client.update_monitoring_schedule(
            MonitoringScheduleName=monitoring_schedule_name,
            MonitoringScheduleConfig=monitoring_schedule_config,
        )

    def create_data_quality_job_definition(self, **request) -> Dict[str, Any]:
        """Call ``CreateDataQualityJobDefinition`` with a request built by a monitor."""
        logger.info("Creating data quality job definition: %s", request.get("JobDefinitionName"))
        return self.sagemaker_client.create_data_quality_job_definition(**request)

    def describe_data_quality_job_definition(self, job_definition_name: str) -> Dict[str, Any]:
        return self.sagemaker_client.describe_data_quality_job_definition(JobDefinitionName=job_definition_name)

    def delete_data_quality_job_definition(self, job_definition_name: str):
        logger.info("Deleting data quality job definition: %s", job_definition_name)
        self.sagemaker_client.delete_data_quality_job_definition(JobDefinitionName=job_definition_name)

    def create_model_quality_job_definition(self, **request) -> Dict[str, Any]:
        """Call ``CreateModelQualityJobDefinition`` with a request built by a monitor."""
        logger.info("Creating model quality job definition: %s", request.get("JobDefinitionName"))
        return self.sagemaker_client.create_model_quality_job_definition(**request)

    def describe_model_quality_job_definition(self, job_definition_name: str) -> Dict[str, Any]:
        return self.sagemaker_client.describe_model_quality_job_definition(JobDefinitionName=job_definition_name)

    def delete_model_quality_job_definition(self, job_definition_name: str):
        logger.info("Deleting model quality job definition: %s", job_definition_name)
        self.sagemaker_client.delete_model_quality_job_definition(JobDefinitionName=job_definition_name)

    # endregion: monitoring

    # region: hosting
    def create_model(
        self,
        name: str,
        role: str,
        container_defs: Any,
        vpc_config: Optional[Dict[str, List[str]]] = None,
        enable_network_isolation: bool = False,
        primary_container: Optional[Dict] = None,
        tags: Optional[List[Dict[str, str]]] = None,
    ) -> str:
        """Create an Amazon SageMaker ``Model``.

        Args:
            name (str): Name of the Amazon SageMaker ``Model`` to create.
            role (str): An AWS IAM role (either name or full ARN).
            container_defs (list[dict[str, str]] or [dict[str, str]]): A single container definition or a list of
                container definitions which will be invoked sequentially while performing the prediction.
            vpc_config (dict[str, list[str]]): The VpcConfig set on the model (default: None).
            enable_network_isolation (bool): Whether the model requires network isolation or not.
            primary_container (str or dict[str, str]): Deprecated form of ``container_defs``; mutually exclusive.
            tags (list[dict]): Tags for the model.

        Returns:
            str: Name of the Amazon SageMaker ``Model`` created.
        """
        if container_defs and primary_container:
            raise ValueError("Both container_defs and primary_container can not be passed as input")

        if primary_container:
            container_defs = primary_container

        create_model_request: Dict[str, Any] = {"ModelName": name, "ExecutionRoleArn": self.expand_role(role)}
        if isinstance(container_defs, list):
            create_model_request["Containers"] = container_defs
        else:
            create_model_request["PrimaryContainer"] = container_defs

        if tags is not None:
            create_model_request["Tags"] = tags

        if vpc_config:
            create_model_request["VpcConfig"] = vpc_config

        if enable_network_isolation:
            create_model_request["EnableNetworkIsolation"] = True

        logger.info("Creating model with name: %s", name)
        logger.debug("CreateModel request: %s", json.dumps(create_model_request, indent=4, default=str))

        try:
            self.sagemaker_client.create_model(**create_model_request)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            message = e.response["Error"]["Message"]
            if error_code == "ValidationException" and "Cannot create already existing model" in message:
                logger.warning("Using already existing model: %s", name)
            else:
                raise

        return name

    def create_endpoint_config(
        self,
        name: str,
        model_name: str,
        initial_instance_count: int,
        instance_type: str,
        accelerator_type: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        kms_key: Optional[str] = None,
        data_capture_config_dict: Optional[Dict] = None,
    ) -> str:
        """Create an Amazon SageMaker endpoint configuration with a single production variant."""
        logger.info("Creating endpoint-config with name %s", name)

        request: Dict[str, Any] = {
            "EndpointConfigName": name,
            "ProductionVariants": [
                production_variant(
                    model_name,
                    instance_type,
                    initial_instance_count,
                    accelerator_type=accelerator_type,
                )
            ],
        }

        if tags is not None:
            request["Tags"] = tags

        if kms_key is not None:
            request["KmsKeyId"] = kms_key

        if data_capture_config_dict is not None:
            request["DataCaptureConfig"] = data_capture_config_dict

        self.sagemaker_client.create_endpoint_config(**request)
        return name

    def create_endpoint(
        self, endpoint_name: str, config_name: str, tags: Optional[List[Dict]] = None, wait: bool = True
    ) -> str:
        """Create an Amazon SageMaker ``Endpoint`` from an existing endpoint configuration."""
        logger.info("Creating endpoint with name %s", endpoint_name)

        tags = tags or []
        self.sagemaker_client.create_endpoint(EndpointName=endpoint_name, EndpointConfigName=config_name, Tags=tags)
        if wait:
            self.wait_for_endpoint(endpoint_name)
        return endpoint_name

    def update_endpoint(self, endpoint_name: str, endpoint_config_name: str, wait: bool = True) -> str:
        """Point an existing endpoint at a new endpoint configuration.

        Raises:
            ValueError: if the endpoint does not already exist.
        """
        if not _deployment_entity_exists(
            lambda: self.sagemaker_client.describe_endpoint(EndpointName=endpoint_name)
        ):
            raise ValueError(
                f"Endpoint with name '{endpoint_name}' does not exist; please use an existing endpoint name"
            )

        self.sagemaker_client.update_endpoint(EndpointName=endpoint_name, EndpointConfigName=endpoint_config_name)

        if wait:
            self.wait_for_endpoint(endpoint_name)
        return endpoint_name

    def endpoint_from_production_variants(
        self,
        name: str,
        production_variants: List[Dict[str, Any]],
        tags: Optional[List[Dict[str, str]]] = None,
        kms_key: Optional[str] = None,
        wait: bool = True,
        data_capture_config_dict: Optional[Dict] = None,
    ) -> str:
        """Create an endpoint config and an endpoint (both named ``name``) from production variants."""
        config_options: Dict[str, Any] = {"EndpointConfigName": name, "ProductionVariants": production_variants}
        tags = tags or []
        if tags:
            config_options["Tags"] = tags
        if kms_key:
            config_options["KmsKeyId"] = kms_key
        if data_capture_config_dict is not None:
            config_options["DataCaptureConfig"] = data_capture_config_dict

        logger.info("Creating endpoint-config with name %s", name)
        self.sagemaker_client.create_endpoint_config(**config_options)

        return self.create_endpoint(endpoint_name=name, config_name=name, tags=tags, wait=wait)

    def describe_endpoint(self, endpoint_name: str) -> Dict[str, Any]:
        """Call ``DescribeEndpoint`` and return the response."""
        return self.sagemaker_client.describe_endpoint(EndpointName=endpoint_name)

    def wait_for_endpoint(self, endpoint: str, poll: float = smconfig.ENDPOINT_POLL) -> Dict[str, Any]:
        """Wait for an Amazon SageMaker endpoint deployment to complete.

        Raises:
            UnexpectedStatusException: If the endpoint creation fails.
        """
        desc = _wait_until(lambda: _deploy_done(self.sagemaker_client, endpoint), poll)
        status = desc["EndpointStatus"]

        if status != "InService":
            reason = desc.get("FailureReason", None)
            message = f"Error hosting endpoint {endpoint}: {status}. Reason: {reason}."
            raise UnexpectedStatusException(message=message, allowed_statuses=["InService"], actual_status=status)
        return desc

    def delete_endpoint(self, endpoint_name: str):
        """Delete an Amazon SageMaker ``Endpoint``."""
        logger.info("Deleting endpoint with name: %s", endpoint_name)
        self.sagemaker_client.delete_endpoint(EndpointName=endpoint_name)

    def delete_endpoint_config(self, endpoint_config_name: str):
        """Delete an Amazon SageMaker endpoint configuration."""
        logger.info("Deleting endpoint configuration with name: %s", endpoint_config_name)
        self.sagemaker_client.delete_endpoint_config(EndpointConfigName=endpoint_config_name)

    def delete_model(self, model_name: str):
        """Delete an Amazon SageMaker Model."""
        logger.info("Deleting model with name: %s", model_name)
        self.sagemaker_client.delete_model(ModelName=model_name)

    def list_tags(self, resource_arn: str, max_results: int = 50) -> List[Dict[str, str]]:
        """Return all the tags of a SageMaker resource, following ``NextToken`` pagination."""
        return paginate(self.sagemaker_client.list_tags, "Tags", ResourceArn=resource_arn, MaxResults=max_results)

    # endregion: hosting

    # region: identity
    def expand_role(self, role: str) -> str:
        """Expand an IAM role name into an ARN; an ARN is returned unchanged."""
        if "/" in role:
            return role
        iam = self.boto_session.client("iam", region_name=self._region_name)
        return iam.get_role(RoleName=role)["Role"]["Arn"]

    def get_caller_identity_arn(self) -> str:
        """Return the ARN of the user or role whose credentials are used to call the API.

        An assumed-role ARN (``arn:aws:sts::...:assumed-role/Role/session``) is converted to the role ARN.
        """
        sts = self.boto_session.client("sts", region_name=self._region_name)
        assumed_role = sts.get_caller_identity()["Arn"]

        role = assumed_role.replace("arn:aws:sts::", "arn:aws:iam::").replace("assumed-role", "role")
        if ":role/" in role:
            role = "/".join(role.split("/")[:-1]) if role.count("/") > 1 else role
        return role

    def get_execution_role(self) -> str:
        """Resolve the SageMaker execution role, on or off a SageMaker notebook instance.

        Raises:
            ValueError: when no role can be resolved.
        """
        if Path(smconfig.NOTEBOOK_METADATA_FILE).is_file():
            # Likely on SageMaker notebook instance.
            arn = self.get_caller_identity_arn()
            if ":role/" in arn:
                return arn

        # Unlikely on SageMaker notebook instance.
        # cf - https://github.com/aws/sagemaker-python-sdk/issues/300
        iam = self.boto_session.client("iam", region_name=self._region_name)
        roles = paginate(iam.list_roles, "Roles", PathPrefix="/", MaxItems=999)
        for role in roles:
            if role["RoleName"].startswith("AmazonSageMaker-ExecutionRole-"):
                logger.debug("Resolved SageMaker IAM Role to: %s", role["Arn"])
                return role["Arn"]
        raise ValueError("Could not resolve what should be the SageMaker role to be used")

    # endregion: identity

    def _check_job_status(self, job: str, desc: Dict[str, Any], status_key_name: str):
        """Check to see if the job completed successfully.

        Raises:
            UnexpectedStatusException: If the job failed.
        """
        status = desc[status_key_name]
        # If the status is capital case, then convert it to Camel case
        status = _STATUS_CODE_TABLE.get(status, status)

        if status == "Stopped":
            logger.warning(
                "Job ended with status 'Stopped' rather than 'Completed'. "
                "This could mean the job timed out or stopped early for some other reason: "
                "Consider checking whether it completed as you expect."
            )
        elif status != "Completed":
            reason = desc.get("FailureReason", "(No reason provided)")
            job_type = status_key_name.replace("JobStatus", " job")
            message = f"Error for {job_type} {job}: {status}. Reason: {reason}"
            if "CapacityError" in str(reason):
                raise CapacityError(
                    message=message,
                    allowed_statuses=["Completed", "Stopped"],
                    actual_status=status,
                )
            raise UnexpectedStatusException(
                message=message,
                allowed_statuses=["Completed", "Stopped"],
                actual_status=status,
            )


def production_variant(
    model_name: str,
    instance_type: str,
    initial_instance_count: int = 1,
    variant_name: str = "AllTraffic",
    initial_weight: int = 1,
    accelerator_type: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a production variant description suitable for use in a ``ProductionVariant`` list."""
    production_variant_configuration: Dict[str, Any] = {
        "ModelName": model_name,
        "InstanceType": instance_type,
        "InitialInstanceCount": initial_instance_count,
        "VariantName": variant_name,
        "InitialVariantWeight": initial_weight,
    }

    if accelerator_type:
        production_variant_configuration["AcceleratorType"] = accelerator_type

    return production_variant_configuration


def get_execution_role(sagemaker_session: Optional[Session] = None) -> str:
    """Return the SageMaker execution role ARN for the current environment."""
    return (sagemaker_session or Session()).get_execution_role()


def _deployment_entity_exists(describe_fn: Callable[[], Any]) -> bool:
    try:
        describe_fn()
        return True
    except ClientError as ce:
        error_code = ce.response["Error"]["Code"]
        if not (error_code == "ValidationException" and "Could not find" in ce.response["Error"]["Message"]):
            raise ce
        return False


def _wait_until(callable_fn: Callable[[], Optional[Dict[str, Any]]], poll: float = 5) -> Dict[str, Any]:
    """Call ``callable_fn`` every ``poll`` seconds until it returns something other than None."""
    result = callable_fn()
    while result is None:
        time.sleep(poll)
        result = callable_fn()
    return result


def _wait_until_training_done(callable_fn, desc: Optional[Dict[str, Any]], poll: float = 5) -> Dict[str, Any]:
    job_desc, finished = callable_fn(desc)
    while not finished:
        time.sleep(poll)
        job_desc, finished = callable_fn(job_desc)
    return job_desc


def _train_done(sagemaker_client, job_name: str, last_desc: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], bool]:
    in_progress_statuses = ["InProgress", "Created"]

    desc = sagemaker_client.describe_training_job(TrainingJobName=job_name)
    status = desc["TrainingJobStatus"]

    if secondary_training_status_changed(desc, last_desc):
        print()
        print(secondary_training_status_message(desc, last_desc), end="")
    else:
        print(".", end="")
    sys.stdout.flush()

    if status in in_progress_statuses:
        return desc, False

    print()
    return desc, True


def _tuning_job_status(sagemaker_client, job_name: str) -> Optional[Dict[str, Any]]:
    desc = sagemaker_client.describe_hyper_parameter_tuning_job(HyperParameterTuningJobName=job_name)
    status = desc["HyperParameterTuningJobStatus"]

    print(".", end="")
    sys.stdout.flush()

    if status in ("InProgress", "Stopping"):
        return None

    print("")
    return desc


def _processing_job_status(sagemaker_client, job_name: str) -> Optional[Dict[str, Any]]:
    desc = sagemaker_client.describe_processing_job(ProcessingJobName=job_name)
    status = desc["ProcessingJobStatus"]

    print(".", end="")
    sys.stdout.flush()

    if status in ("InProgress", "Stopping", "Starting"):
        return None

    print("")
    return desc


def _deploy_done(sagemaker_client, endpoint_name: str) -> Optional[Dict[str, Any]]:
    desc = sagemaker_client.describe_endpoint(EndpointName=endpoint_name)
    status = desc["EndpointStatus"]

    print("-" if status in ("Creating", "Updating") else "!", end="")
    sys.stdout.flush()

    return None if status in ("Creating", "Updating") else desc


def _get_initial_job_state(description: Dict[str, Any], status_key: str, wait: bool) -> LogState:
    status = description[status_key]
    job_already_completed = status in ("Completed", "Failed", "Stopped")
    return LogState.TAILING if wait and not job_already_completed else LogState.COMPLETE


def _logs_init(sagemaker_session: Session, description: Dict[str, Any], job: str):
    if job == "Training":
        instance_count = description["ResourceConfig"]["InstanceCount"]
        log_group = TRAINING_LOG_GROUP
    else:
        instance_count = description["ProcessingResources"]["ClusterConfig"]["InstanceCount"]
        log_group = PROCESSING_LOG_GROUP

    stream_names: List[str] = []  # The list of log streams
    positions: Dict[str, Position] = {}  # The current position in each stream, map of stream name -> position

    # Increase retries allowed (from default of 4), as we don't want waiting for a training job
    # to be interrupted by a transient exception.
    client = sagemaker_session.boto_session.client("logs", config=smconfig.client_config())

    dot = [False]
    color_wrap = _ColorWrap()
    return instance_count, stream_names, positions, client, log_group, dot, color_wrap


def _flush_log_streams(stream_names, instance_count, client, log_group, job_name, positions, dot, color_wrap):
    if len(stream_names) < instance_count:
        new_streams = describe_log_streams(client, log_group, job_name, instance_count)
        stream_names[:] = new_streams
        positions.update([(s, Position(timestamp=0, skip=0)) for s in stream_names if s not in positions])

    if len(stream_names) > 0:
        if dot[0]:
            print("")
            dot[0] = False
        for idx, event in multi_stream_iter(client, log_group, stream_names, positions):
            color_wrap(idx, event["message"])
            ts, count = positions[stream_names[idx]]
            if event["timestamp"] == ts:
                positions[stream_names[idx]] = Position(timestamp=ts, skip=count + 1)
            else:
                positions[stream_names[idx]] = Position(timestamp=event["timestamp"], skip=1)
    else:
        dot[0] = True
        print(".", end="")
        sys.stdout.flush()


def _print_rule_statuses(kind: str, statuses: List[Dict[str, Any]]):
    print()
    print(f"********* {kind} Rule Status *********")
    print("*")
    for status in statuses:
        rule_log = f"* {status['RuleConfigurationName']:>18}: {status['RuleEvaluationStatus']}"
        print(rule_log)
    print("*")
    print("*" * 40)


class _ColorWrap(object):
    """A callable that prints text in a different color depending on the instance.

    Only colors when the output is a tty.
    """

    _stream_colors = [31, 32, 33, 34, 35, 36]

    def __init__(self, force: bool = False):
        self.colorize = force or sys.stdout.isatty()

    def __call__(self, index: int, s: str):
        if self.colorize:
            color = self._stream_colors[index % len(self._stream_colors)]
            print(f"\x1b[{color}m{s}\x1b[0m")
        else:
            print(s)
