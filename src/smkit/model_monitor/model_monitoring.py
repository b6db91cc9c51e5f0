"""Monitoring schedules and baselining jobs for SageMaker endpoints.

``ModelMonitor`` drives a bring-your-own-container monitor through schedules with an embedded job definition.
``DefaultModelMonitor`` (data quality) and ``ModelQualityMonitor`` use the SageMaker analyzer image and standalone
job definitions, which a schedule then refers to by name.
"""
import json
import logging
import os
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

from botocore.exceptions import ClientError

from .. import config as smconfig
from .. import image_uris
from ..exceptions import MissingFileError, UnexpectedStatusException
from ..network import NetworkConfig
from ..processing import ProcessingInput, ProcessingJob, ProcessingOutput, Processor
from ..s3 import S3Uploader, s3_path_join
from ..session import Session
from ..utils import name_from_base, retries
from .monitoring_files import ConstraintViolations, Constraints, Statistics

DEFAULT_REPOSITORY_NAME = "sagemaker-model-monitor-analyzer"

STATISTICS_JSON_DEFAULT_FILE_NAME = "statistics.json"
CONSTRAINTS_JSON_DEFAULT_FILE_NAME = "constraints.json"
CONSTRAINT_VIOLATIONS_JSON_DEFAULT_FILE_NAME = "constraint_violations.json"

_CONTAINER_BASE_PATH = "/opt/ml/processing"
_CONTAINER_INPUT_PATH = "input"
_CONTAINER_ENDPOINT_INPUT_PATH = "endpoint"
_BASELINE_DATASET_INPUT_NAME = "baseline_dataset_input"
_RECORD_PREPROCESSOR_SCRIPT_INPUT_NAME = "record_preprocessor_script_input"
_POST_ANALYTICS_PROCESSOR_SCRIPT_INPUT_NAME = "post_analytics_processor_script_input"
_CONTAINER_OUTPUT_PATH = "output"
_DEFAULT_OUTPUT_NAME = "monitoring_output"
_MODEL_MONITOR_S3_PATH = "model-monitor"
_BASELINING_S3_PATH = "baselining"
_MONITORING_S3_PATH = "monitoring"
_RESULTS_S3_PATH = "results"
_INPUT_S3_PATH = "input"

_SUGGESTION_JOB_BASE_NAME = "baseline-suggestion-job"
_MONITORING_SCHEDULE_BASE_NAME = "monitoring-schedule"

_DATASET_SOURCE_PATH_ENV_NAME = "dataset_source"
_DATASET_FORMAT_ENV_NAME = "dataset_format"
_OUTPUT_PATH_ENV_NAME = "output_path"
_RECORD_PREPROCESSOR_SCRIPT_ENV_NAME = "record_preprocessor_script"
_POST_ANALYTICS_PROCESSOR_SCRIPT_ENV_NAME = "post_analytics_processor_script"
_PUBLISH_CLOUDWATCH_METRICS_ENV_NAME = "publish_cloudwatch_metrics"
_ANALYSIS_TYPE_ENV_NAME = "analysis_type"
_PROBLEM_TYPE_ENV_NAME = "problem_type"
_GROUND_TRUTH_ATTRIBUTE_ENV_NAME = "ground_truth_attribute"
_INFERENCE_ATTRIBUTE_ENV_NAME = "inference_attribute"
_PROBABILITY_ATTRIBUTE_ENV_NAME = "probability_attribute"
_PROBABILITY_THRESHOLD_ATTRIBUTE_ENV_NAME = "probability_threshold_attribute"

_ALREADY_SCHEDULED_MESSAGE = (
    "It seems that this object was already used to create an Amazon Model Monitoring Schedule. To create another, "
    "first delete the existing one using my_monitor.delete_monitoring_schedule()."
)

logger = logging.getLogger(__name__)


class ModelMonitor(object):
    """Sets up Amazon SageMaker Monitoring Schedules and baseline suggestions.

    Use this class when you want to provide your own container image containing the code you'd like to run, in
    order to produce your own statistics and constraint validation files. For a more guided experience, consider
    using the :class:`DefaultModelMonitor` class instead.
    """

    def __init__(
        self,
        role: Optional[str] = None,
        image_uri: Optional[str] = None,
        instance_count: int = 1,
        instance_type: str = "ml.m5.xlarge",
        entrypoint: Optional[List[str]] = None,
        volume_size_in_gb: int = 30,
        volume_kms_key: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        base_job_name: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
        env: Optional[Dict[str, str]] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        network_config: Optional[NetworkConfig] = None,
    ):
        """Initializes a ``Monitor`` instance.

        The Monitor handles baselining datasets and creating Amazon SageMaker Monitoring Schedules to monitor
        SageMaker endpoints.

        Args:
            role (str): An AWS IAM role. The Amazon SageMaker jobs use this role.
            image_uri (str): The uri of the image to use for the jobs started by the Monitor.
            instance_count (int): The number of instances to run the jobs with.
            instance_type (str): Type of EC2 instance to use for the job, for example, 'ml.m5.xlarge'.
            entrypoint ([str]): The entrypoint for the job.
            volume_size_in_gb (int): Size in GB of the EBS volume to use for storing data during processing
                (default: 30).
            volume_kms_key (str): A KMS key for the job's volume.
            output_kms_key (str): The KMS key id for the job's outputs.
            max_runtime_in_seconds (int): Timeout in seconds. After this amount of time, Amazon SageMaker
                terminates the job regardless of its current status.
            base_job_name (str): Prefix for the job name. If not specified, a default name is generated based on
                the training image name and current timestamp.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.
            env (dict): Environment variables to be passed to the job.
            tags ([dict]): List of tags to be passed to the job.
            network_config (smkit.network.NetworkConfig): A NetworkConfig object that configures network
                isolation, encryption of inter-container traffic, security group IDs, and subnets.
        """
        self.role = role
        self.image_uri = image_uri
        self.instance_count = instance_count
        self.instance_type = instance_type
        self.entrypoint = entrypoint
        self.volume_size_in_gb = volume_size_in_gb
        self.volume_kms_key = volume_kms_key
        self.output_kms_key = output_kms_key
        self.max_runtime_in_seconds = max_runtime_in_seconds
        self.base_job_name = base_job_name
        self.sagemaker_session = sagemaker_session or Session()
        self.env = env
        self.tags = tags
        self.network_config = network_config

        self.baselining_jobs: List["BaseliningJob"] = []
        self.latest_baselining_job: Optional["BaseliningJob"] = None
        self.arguments: Optional[List[str]] = None
        self.latest_baselining_job_name: Optional[str] = None
        self.monitoring_schedule_name: Optional[str] = None
        self.job_definition_name: Optional[str] = None

    @property
    def monitoring_type(self) -> str:
        """Type of the monitoring job, as it appears in ``MonitoringType`` and in job definition keys."""
        raise TypeError(f"Subclass of {type(self).__name__} shall define this property")

    def run_baseline(
        self,
        baseline_inputs: List[ProcessingInput],
        output: Union[ProcessingOutput, str],
        arguments: Optional[List[str]] = None,
        wait: bool = True,
        logs: bool = True,
        job_name: Optional[str] = None,
    ):
        """Run a processing job meant to baseline your dataset.

        Args:
            baseline_inputs ([smkit.processing.ProcessingInput]): Input files for the processing job. These must
                be provided as ProcessingInput objects.
            output (smkit.processing.ProcessingOutput or str): Destination of the constraint_violations and
                statistics json files. A string is taken as the container path of the output.
            arguments ([str]): A list of string arguments to be passed to a processing job.
            wait (bool): Whether the call should wait until the job completes (default: True).
            logs (bool): Whether to show the logs produced by the job. Only meaningful when wait is True
                (default: True).
            job_name (str): Processing job name. If not specified, the processor generates a default job name,
                based on the image name and current timestamp.
        """
        self.latest_baselining_job_name = self._generate_baselining_job_name(job_name=job_name)
        self.arguments = arguments
        normalized_baseline_inputs = self._normalize_baseline_inputs(baseline_inputs=baseline_inputs)
        normalized_output = self._normalize_processing_output(output=output)

        baselining_processor = self._baselining_processor(self.env)
        baselining_processor.run(
            inputs=normalized_baseline_inputs,
            outputs=[normalized_output],
            arguments=self.arguments,
            wait=wait,
            logs=logs,
            job_name=self.latest_baselining_job_name,
        )

        self.latest_baselining_job = BaseliningJob.from_processing_job(
            processing_job=baselining_processor.latest_job
        )
        self.baselining_jobs.append(self.latest_baselining_job)

    def create_monitoring_schedule(
        self,
        endpoint_input: Union["EndpointInput", str],
        output: "MonitoringOutput",
        statistics: Optional[Union[Statistics, str]] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        monitor_schedule_name: Optional[str] = None,
        schedule_cron_expression: Optional[str] = None,
    ):
        """Creates a monitoring schedule to monitor an Amazon SageMaker Endpoint.

        If constraints and statistics are provided, or if they are able to be retrieved from a previous
        baselining job associated with this monitor, those will be used. If constraints and statistics cannot
        be automatically retrieved, baseline_inputs will be required in order to kick off a baselining job.

        Args:
            endpoint_input (str or smkit.model_monitor.EndpointInput): The endpoint to monitor. This can either
                be the endpoint name or an EndpointInput.
            output (smkit.model_monitor.MonitoringOutput): The output of the monitoring schedule.
            statistics (smkit.model_monitor.Statistics or str): If provided alongside constraints, these will be
                used for monitoring the endpoint. This can be a Statistics object or an S3 uri pointing to a
                statistics JSON file.
            constraints (smkit.model_monitor.Constraints or str): If provided alongside statistics, these will be
                used for monitoring the endpoint. This can be a Constraints object or an S3 uri pointing to a
                constraints JSON file.
            monitor_schedule_name (str): Schedule name. If not specified, the processor generates a default job
                name, based on the image name and current timestamp.
            schedule_cron_expression (str): The cron expression that dictates the frequency that this job runs
                at. See :class:`~smkit.model_monitor.CronExpressionGenerator` for valid expressions.

        Raises:
            ValueError: if this monitor already owns a schedule.
        """
        if self.monitoring_schedule_name is not None:
            logger.error(_ALREADY_SCHEDULED_MESSAGE)
            raise ValueError(_ALREADY_SCHEDULED_MESSAGE)

        self.monitoring_schedule_name = self._generate_monitoring_schedule_name(schedule_name=monitor_schedule_name)

        normalized_endpoint_input = self._normalize_endpoint_input(endpoint_input=endpoint_input)
        normalized_monitoring_output = self._normalize_monitoring_output_fields(output=output)

        statistics_object, constraints_object = self._get_baseline_files(
            statistics=statistics, constraints=constraints, sagemaker_session=self.sagemaker_session
        )
        statistics_s3_uri = statistics_object.file_s3_uri if statistics_object is not None else None
        constraints_s3_uri = constraints_object.file_s3_uri if constraints_object is not None else None

        monitoring_output_config: Dict[str, Any] = {
            "MonitoringOutputs": [normalized_monitoring_output._to_request_dict()]
        }
        if self.output_kms_key is not None:
            monitoring_output_config["KmsKeyId"] = self.output_kms_key

        network_config_dict = None
        if self.network_config is not None:
            network_config_dict = self.network_config._to_request_dict()
            self._validate_network_config(network_config_dict)

        self.sagemaker_session.create_monitoring_schedule(
            monitoring_schedule_name=self.monitoring_schedule_name,
            schedule_expression=schedule_cron_expression,
            statistics_s3_uri=statistics_s3_uri,
            constraints_s3_uri=constraints_s3_uri,
            monitoring_inputs=[normalized_endpoint_input._to_request_dict()],
            monitoring_output_config=monitoring_output_config,
            instance_count=self.instance_count,
            instance_type=self.instance_type,
            volume_size_in_gb=self.volume_size_in_gb,
            volume_kms_key=self.volume_kms_key,
            image_uri=self.image_uri,
            entrypoint=self.entrypoint,
            arguments=self.arguments,
            record_preprocessor_source_uri=None,
            post_analytics_processor_source_uri=None,
            max_runtime_in_seconds=self.max_runtime_in_seconds,
            environment=self.env,
            network_config=network_config_dict,
            role_arn=self.sagemaker_session.expand_role(self.role),
            tags=self.tags,
        )

    def update_monitoring_schedule(  # noqa: C901
        self,
        endpoint_input: Optional[Union["EndpointInput", str]] = None,
        output: Optional["MonitoringOutput"] = None,
        statistics: Optional[Union[Statistics, str]] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        schedule_cron_expression: Optional[str] = None,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        entrypoint: Optional[List[str]] = None,
        volume_size_in_gb: Optional[int] = None,
        volume_kms_key: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        arguments: Optional[List[str]] = None,
        max_runtime_in_seconds: Optional[int] = None,
        env: Optional[Dict[str, str]] = None,
        network_config: Optional[NetworkConfig] = None,
        role: Optional[str] = None,
        image_uri: Optional[str] = None,
    ):
        """Updates the existing monitoring schedule.

        Arguments left as ``None`` keep their current value. The call blocks until the schedule leaves the
        ``Pending`` status.
        """
        monitoring_inputs = None
        if endpoint_input is not None:
            monitoring_inputs = [self._normalize_endpoint_input(endpoint_input=endpoint_input)._to_request_dict()]

        monitoring_output_config: Optional[Dict[str, Any]] = None
        if output is not None:
            normalized_monitoring_output = self._normalize_monitoring_output_fields(output=output)
            monitoring_output_config = {"MonitoringOutputs": [normalized_monitoring_output._to_request_dict()]}

        statistics_object, constraints_object = self._get_baseline_files(
            statistics=statistics, constraints=constraints, sagemaker_session=self.sagemaker_session
        )
        statistics_s3_uri = statistics_object.file_s3_uri if statistics_object is not None else None
        constraints_s3_uri = constraints_object.file_s3_uri if constraints_object is not None else None

        if instance_type is not None:
            self.instance_type = instance_type
        if instance_count is not None:
            self.instance_count = instance_count
        if entrypoint is not None:
            self.entrypoint = entrypoint
        if volume_size_in_gb is not None:
            self.volume_size_in_gb = volume_size_in_gb
        if volume_kms_key is not None:
            self.volume_kms_key = volume_kms_key
        if output_kms_key is not None:
            self.output_kms_key = output_kms_key
            monitoring_output_config = monitoring_output_config or {}
            monitoring_output_config["KmsKeyId"] = self.output_kms_key
        if arguments is not None:
            self.arguments = arguments
        if max_runtime_in_seconds is not None:
            self.max_runtime_in_seconds = max_runtime_in_seconds
        if env is not None:
            self.env = env
        if network_config is not None:
            self.network_config = network_config
        if role is not None:
            self.role = role
        if image_uri is not None:
            self.image_uri = image_uri

        network_config_dict = None
        if self.network_config is not None:
            network_config_dict = self.network_config._to_request_dict()
            self._validate_network_config(network_config_dict)

        self.sagemaker_session.update_monitoring_schedule(
            monitoring_schedule_name=self.monitoring_schedule_name,
            schedule_expression=schedule_cron_expression,
            statistics_s3_uri=statistics_s3_uri,
            constraints_s3_uri=constraints_s3_uri,
            monitoring_inputs=monitoring_inputs,
            monitoring_output_config=monitoring_output_config,
            instance_count=instance_count,
            instance_type=instance_type,
            volume_size_in_gb=volume_size_in_gb,
            volume_kms_key=volume_kms_key,
            image_uri=image_uri,
            entrypoint=entrypoint,
            arguments=arguments,
            max_runtime_in_seconds=max_runtime_in_seconds,
            environment=env,
            network_config=network_config_dict,
            role_arn=self.sagemaker_session.expand_role(self.role),
        )

        self._wait_for_schedule_changes_to_apply()

    def start_monitoring_schedule(self):
        """Starts the monitoring schedule."""
        self.sagemaker_session.start_monitoring_schedule(monitoring_schedule_name=self.monitoring_schedule_name)
        self._wait_for_schedule_changes_to_apply()

    def stop_monitoring_schedule(self):
        """Stops the monitoring schedule."""
        self.sagemaker_session.stop_monitoring_schedule(monitoring_schedule_name=self.monitoring_schedule_name)
        self._wait_for_schedule_changes_to_apply()

    def delete_monitoring_schedule(self):
        """Deletes the monitoring schedule."""
        self.sagemaker_session.delete_monitoring_schedule(monitoring_schedule_name=self.monitoring_schedule_name)
        if self.job_definition_name is not None:
            # The job definition is locked by the schedule until the schedule is gone.
            try:
                self._wait_for_schedule_changes_to_apply()
            except ClientError as e:
                if e.response["Error"]["Code"] != "ResourceNotFound":
                    raise
        self.monitoring_schedule_name = None

    def baseline_statistics(self, file_name: str = STATISTICS_JSON_DEFAULT_FILE_NAME) -> Statistics:
        """Returns a Statistics object representing the statistics json file generated by the latest baselining job.

        Args:
            file_name (str): The name of the .json statistics file.
        """
        return self._require_baselining_job().baseline_statistics(file_name=file_name, kms_key=self.output_kms_key)

    def suggested_constraints(self, file_name: str = CONSTRAINTS_JSON_DEFAULT_FILE_NAME) -> Constraints:
        """Returns a Constraints object representing the constraints json file generated by the latest baselining job.

        Args:
            file_name (str): The name of the .json constraints file.
        """
        return self._require_baselining_job().suggested_constraints(file_name=file_name, kms_key=self.output_kms_key)

    def latest_monitoring_statistics(
        self, file_name: str = STATISTICS_JSON_DEFAULT_FILE_NAME
    ) -> Optional[Statistics]:
        """Returns the Statistics generated by the latest monitoring execution, or None without executions.

        Args:
            file_name (str): The name of the statistics file to be retrieved. Only override if generating a
                custom file name.
        """
        executions = self.list_executions()
        if len(executions) == 0:
            logger.warning(
                "No executions found for schedule. monitoring_schedule_name: %s", self.monitoring_schedule_name
            )
            return None

        latest_monitoring_execution = executions[-1]
        return latest_monitoring_execution.statistics(file_name=file_name)

    def latest_monitoring_constraint_violations(
        self, file_name: str = CONSTRAINT_VIOLATIONS_JSON_DEFAULT_FILE_NAME
    ) -> Optional[ConstraintViolations]:
        """Returns the ConstraintViolations generated by the latest monitoring execution, or None without executions.

        Args:
            file_name (str): The name of the constraint violations file to be retrieved. Only override if
                generating a custom file name.
        """
        executions = self.list_executions()
        if len(executions) == 0:
            logger.warning(
                "No executions found for schedule. monitoring_schedule_name: %s", self.monitoring_schedule_name
            )
            return None

        latest_monitoring_execution = executions[-1]
        return latest_monitoring_execution.constraint_violations(file_name=file_name)

    def describe_latest_baselining_job(self) -> Dict[str, Any]:
        """Describe the latest baselining job kicked off by the suggest workflow."""
        return self._require_baselining_job().describe()

    def describe_schedule(self) -> Dict[str, Any]:
        """Describes the schedule that this object represents.

        Returns:
            dict: A dictionary response with the monitoring schedule description.
        """
        return self.sagemaker_session.describe_monitoring_schedule(
            monitoring_schedule_name=self.monitoring_schedule_name
        )

    def list_executions(self) -> List["MonitoringExecution"]:
        """Get the list of the latest monitoring executions, oldest first.

        Statistics or violations can be called following this example:

        >>> my_executions = my_monitor.list_executions()
        >>> second_to_last_execution_statistics = my_executions[-2].statistics()
        >>> second_to_last_execution_violations = my_executions[-2].constraint_violations()

        Returns:
            [smkit.model_monitor.MonitoringExecution]: List of MonitoringExecutions in ascending order of
            "ScheduledTime".
        """
        monitoring_executions_dict = self.sagemaker_session.list_monitoring_executions(
            monitoring_schedule_name=self.monitoring_schedule_name
        )

        if len(monitoring_executions_dict.get("MonitoringExecutionSummaries", [])) == 0:
            logger.warning(
                "No executions found for schedule. monitoring_schedule_name: %s", self.monitoring_schedule_name
            )
            return []

        processing_job_arns = [
            execution_dict["ProcessingJobArn"]
            for execution_dict in monitoring_executions_dict["MonitoringExecutionSummaries"]
            if execution_dict.get("ProcessingJobArn") is not None
        ]
        monitoring_executions = [
            MonitoringExecution.from_processing_arn(
                sagemaker_session=self.sagemaker_session, processing_job_arn=processing_job_arn
            )
            for processing_job_arn in processing_job_arns
        ]
        monitoring_executions.reverse()

        return monitoring_executions

    @classmethod
    def attach(cls, monitor_schedule_name: str, sagemaker_session: Optional[Session] = None) -> "ModelMonitor":
        """Set this object's schedule name to point to the Amazon SageMaker Monitoring Schedule name provided.

        This allows subsequent describe_schedule or list_executions calls to point to the given schedule.

        Args:
            monitor_schedule_name (str): The name of the schedule to attach to.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.
        """
        sagemaker_session = sagemaker_session or Session()
        schedule_desc = sagemaker_session.describe_monitoring_schedule(monitoring_schedule_name=monitor_schedule_name)
        job_definition = schedule_desc["MonitoringScheduleConfig"]["MonitoringJobDefinition"]

        init_params = cls._init_params_from_embedded_definition(job_definition)
        init_params["image_uri"] = job_definition["MonitoringAppSpecification"]["ImageUri"]
        init_params["entrypoint"] = job_definition["MonitoringAppSpecification"].get("ContainerEntrypoint")
        init_params["tags"] = sagemaker_session.list_tags(resource_arn=schedule_desc["MonitoringScheduleArn"])

        attached_monitor = cls(sagemaker_session=sagemaker_session, **init_params)
        attached_monitor.monitoring_schedule_name = monitor_schedule_name
        return attached_monitor

    @staticmethod
    def _init_params_from_embedded_definition(job_definition: Dict[str, Any]) -> Dict[str, Any]:
        """Constructor arguments recovered from a schedule's embedded ``MonitoringJobDefinition``."""
        cluster_config = job_definition["MonitoringResources"]["ClusterConfig"]
        init_params: Dict[str, Any] = {
            "role": job_definition["RoleArn"],
            "instance_count": cluster_config["InstanceCount"],
            "instance_type": cluster_config["InstanceType"],
            "volume_size_in_gb": cluster_config["VolumeSizeInGB"],
            "volume_kms_key": cluster_config.get("VolumeKmsKeyId"),
            "output_kms_key": job_definition.get("MonitoringOutputConfig", {}).get("KmsKeyId"),
            "max_runtime_in_seconds": job_definition.get("StoppingCondition", {}).get("MaxRuntimeInSeconds"),
            "env": job_definition.get("Environment"),
            "network_config": _network_config_from_dict(job_definition.get("NetworkConfig")),
        }
        return init_params

    @classmethod
    def _attach(
        cls,
        sagemaker_session: Session,
        schedule_desc: Dict[str, Any],
        job_desc: Dict[str, Any],
        tags: List[Dict[str, str]],
    ) -> "ModelMonitor":
        """Attach a monitor of class ``cls`` to a schedule that refers to a standalone job definition.

        Args:
            sagemaker_session (smkit.session.Session): Session object.
            schedule_desc (dict): output of describe monitoring schedule API.
            job_desc (dict): output of describe job definition API.
            tags (list[dict]): the tags of the schedule.
        """
        monitoring_type = schedule_desc["MonitoringScheduleConfig"]["MonitoringType"]
        cluster_config = job_desc["JobResources"]["ClusterConfig"]

        attached_monitor = cls(
            role=job_desc["RoleArn"],
            instance_count=cluster_config["InstanceCount"],
            instance_type=cluster_config["InstanceType"],
            volume_size_in_gb=cluster_config["VolumeSizeInGB"],
            volume_kms_key=cluster_config.get("VolumeKmsKeyId"),
            output_kms_key=job_desc.get(f"{monitoring_type}JobOutputConfig", {}).get("KmsKeyId"),
            max_runtime_in_seconds=job_desc.get("StoppingCondition", {}).get("MaxRuntimeInSeconds"),
            sagemaker_session=sagemaker_session,
            env=job_desc.get(f"{monitoring_type}AppSpecification", {}).get("Environment"),
            tags=tags,
            network_config=_network_config_from_dict(job_desc.get("NetworkConfig")),
        )
        attached_monitor.monitoring_schedule_name = schedule_desc["MonitoringScheduleName"]
        attached_monitor.job_definition_name = schedule_desc["MonitoringScheduleConfig"][
            "MonitoringJobDefinitionName"
        ]
        return attached_monitor

    def _require_baselining_job(self) -> "BaseliningJob":
        if self.latest_baselining_job is None:
            raise ValueError("No suggestion jobs were kicked off.")
        return self.latest_baselining_job

    def _baselining_processor(self, env: Optional[Dict[str, str]]) -> Processor:
        return Processor(
            role=self.role,
            image_uri=self.image_uri,
            instance_count=self.instance_count,
            instance_type=self.instance_type,
            entrypoint=self.entrypoint,
            volume_size_in_gb=self.volume_size_in_gb,
            volume_kms_key=self.volume_kms_key,
            output_kms_key=self.output_kms_key,
            max_runtime_in_seconds=self.max_runtime_in_seconds,
            base_job_name=self.base_job_name,
            sagemaker_session=self.sagemaker_session,
            env=env,
            tags=self.tags,
            network_config=self.network_config,
        )

    def _generate_baselining_job_name(self, job_name: Optional[str] = None) -> str:
        if job_name is not None:
            return job_name
        return name_from_base(self.base_job_name or _SUGGESTION_JOB_BASE_NAME)

    def _generate_monitoring_schedule_name(self, schedule_name: Optional[str] = None) -> str:
        if schedule_name is not None:
            return schedule_name
        return name_from_base(self.base_job_name or _MONITORING_SCHEDULE_BASE_NAME)

    @staticmethod
    def _generate_env_map(
        env: Optional[Dict[str, str]],
        output_path: Optional[str] = None,
        enable_cloudwatch_metrics: Optional[bool] = None,
        record_preprocessor_script_container_path: Optional[str] = None,
        post_processor_script_container_path: Optional[str] = None,
        dataset_format: Optional[Dict[str, Any]] = None,
        dataset_source_container_path: Optional[str] = None,
        analysis_type: Optional[str] = None,
        problem_type: Optional[str] = None,
        inference_attribute: Optional[str] = None,
        probability_attribute: Optional[Union[str, int]] = None,
        ground_truth_attribute: Optional[str] = None,
        probability_threshold_attribute: Optional[float] = None,
    ) -> Dict[str, str]:
        """Generate the container environment of the analyzer image from first-class parameters.

        Parameters left as None are not set; ``env`` entries are kept unless overridden.
        """
        cloudwatch_env_map = {True: "Enabled", False: "Disabled"}

        env = dict(env or {})
        if output_path is not None:
            env[_OUTPUT_PATH_ENV_NAME] = output_path
        if enable_cloudwatch_metrics is not None:
            env[_PUBLISH_CLOUDWATCH_METRICS_ENV_NAME] = cloudwatch_env_map[enable_cloudwatch_metrics]
        if dataset_format is not None:
            env[_DATASET_FORMAT_ENV_NAME] = json.dumps(dataset_format)

        for key, value in (
            (_RECORD_PREPROCESSOR_SCRIPT_ENV_NAME, record_preprocessor_script_container_path),
            (_POST_ANALYTICS_PROCESSOR_SCRIPT_ENV_NAME, post_processor_script_container_path),
            (_DATASET_SOURCE_PATH_ENV_NAME, dataset_source_container_path),
            (_ANALYSIS_TYPE_ENV_NAME, analysis_type),
            (_PROBLEM_TYPE_ENV_NAME, problem_type),
            (_INFERENCE_ATTRIBUTE_ENV_NAME, inference_attribute),
            (_PROBABILITY_ATTRIBUTE_ENV_NAME, probability_attribute),
            (_GROUND_TRUTH_ATTRIBUTE_ENV_NAME, ground_truth_attribute),
            (_PROBABILITY_THRESHOLD_ATTRIBUTE_ENV_NAME, probability_threshold_attribute),
        ):
            if value is not None:
                env[key] = str(value)

        return env

    @staticmethod
    def _get_baseline_files(
        statistics: Optional[Union[Statistics, str]],
        constraints: Optional[Union[Constraints, str]],
        sagemaker_session: Optional[Session] = None,
    ) -> Tuple[Optional[Statistics], Optional[Constraints]]:
        """Load statistics and constraints given as S3 uris; file objects pass through unchanged."""
        if isinstance(statistics, str):
            statistics = Statistics.from_s3_uri(statistics, sagemaker_session=sagemaker_session)
        if isinstance(constraints, str):
            constraints = Constraints.from_s3_uri(constraints, sagemaker_session=sagemaker_session)
        return statistics, constraints

    @staticmethod
    def _normalize_endpoint_input(endpoint_input: Union["EndpointInput", str]) -> "EndpointInput":
        """An endpoint name becomes an EndpointInput that downloads captures to the default container path."""
        if isinstance(endpoint_input, str):
            endpoint_input = EndpointInput(
                endpoint_name=endpoint_input,
                destination=os.path.join(_CONTAINER_BASE_PATH, _CONTAINER_INPUT_PATH, _CONTAINER_ENDPOINT_INPUT_PATH),
            )
        return endpoint_input

    def _normalize_baseline_inputs(self, baseline_inputs: Optional[List[ProcessingInput]] = None):
        """Ensure that all the ProcessingInput objects have names and S3 uris."""
        normalized_inputs = []
        for count, file_input in enumerate(baseline_inputs or [], 1):
            if not isinstance(file_input, ProcessingInput):
                raise TypeError("Your inputs must be provided as ProcessingInput objects.")
            if file_input.input_name is None:
                file_input.input_name = f"input-{count}"
            if urlparse(file_input.source).scheme != "s3":
                s3_uri = s3_path_join(
                    "s3://",
                    self.sagemaker_session.default_bucket(),
                    self.latest_baselining_job_name,
                    file_input.input_name,
                )
                S3Uploader.upload(
                    local_path=file_input.source, desired_s3_uri=s3_uri, sagemaker_session=self.sagemaker_session
                )
                file_input.source = s3_uri
            normalized_inputs.append(file_input)
        return normalized_inputs

    def _normalize_baseline_output(self, output_s3_uri: Optional[str] = None) -> ProcessingOutput:
        s3_uri = output_s3_uri or s3_path_join(
            "s3://",
            self.sagemaker_session.default_bucket(),
            _MODEL_MONITOR_S3_PATH,
            _BASELINING_S3_PATH,
            self.latest_baselining_job_name,
            _RESULTS_S3_PATH,
        )
        return ProcessingOutput(
            source=os.path.join(_CONTAINER_BASE_PATH, _CONTAINER_OUTPUT_PATH),
            destination=s3_uri,
            output_name=_DEFAULT_OUTPUT_NAME,
        )

    def _normalize_processing_output(self, output: Union[ProcessingOutput, str]) -> ProcessingOutput:
        """A container path becomes a ProcessingOutput uploaded under the baselining job's prefix."""
        if isinstance(output, str):
            s3_uri = s3_path_join(
                "s3://", self.sagemaker_session.default_bucket(), self.latest_baselining_job_name, "output"
            )
            output = ProcessingOutput(source=output, destination=s3_uri, output_name=_DEFAULT_OUTPUT_NAME)
        return output

    def _normalize_monitoring_output(
        self, monitoring_schedule_name: Optional[str], output_s3_uri: Optional[str] = None
    ) -> "MonitoringOutput":
        s3_uri = output_s3_uri or s3_path_join(
            "s3://",
            self.sagemaker_session.default_bucket(),
            _MODEL_MONITOR_S3_PATH,
            _MONITORING_S3_PATH,
            monitoring_schedule_name,
            _RESULTS_S3_PATH,
        )
        return MonitoringOutput(source=os.path.join(_CONTAINER_BASE_PATH, _CONTAINER_OUTPUT_PATH), destination=s3_uri)

    def _normalize_monitoring_output_fields(self, output: "MonitoringOutput") -> "MonitoringOutput":
        if output.destination is None:
            output.destination = s3_path_join(
                "s3://", self.sagemaker_session.default_bucket(), self.monitoring_schedule_name, "output"
            )
        return output

    def _s3_uri_from_local_path(self, path: str) -> str:
        """If path is local, uploads to S3 and returns the S3 uri. Otherwise returns the S3 uri as-is."""
        if urlparse(path).scheme != "s3":
            s3_uri = s3_path_join(
                "s3://",
                self.sagemaker_session.default_bucket(),
                _MODEL_MONITOR_S3_PATH,
                _MONITORING_S3_PATH,
                self.monitoring_schedule_name,
                _INPUT_S3_PATH,
                str(uuid.uuid4()),
            )
            S3Uploader.upload(local_path=path, desired_s3_uri=s3_uri, sagemaker_session=self.sagemaker_session)
            path = s3_path_join(s3_uri, os.path.basename(path))
        return path

    def _upload_and_convert_to_processing_input(
        self, source: Optional[str], destination: str, name: str
    ) -> Optional[ProcessingInput]:
        """Turn a local path or S3 uri into a ProcessingInput, uploading local files under the baselining prefix."""
        if source is None:
            return None

        if urlparse(source).scheme != "s3":
            s3_uri = s3_path_join(
                "s3://",
                self.sagemaker_session.default_bucket(),
                _MODEL_MONITOR_S3_PATH,
                _BASELINING_S3_PATH,
                self.latest_baselining_job_name,
                _INPUT_S3_PATH,
                name,
            )
            S3Uploader.upload(local_path=source, desired_s3_uri=s3_uri, sagemaker_session=self.sagemaker_session)
            source = s3_uri

        return ProcessingInput(source=source, destination=destination, input_name=name)

    def _wait_for_schedule_changes_to_apply(self):
        """Wait for the schedule associated with this monitor to leave the 'Pending' state."""
        for _ in retries(
            max_retry_count=smconfig.SCHEDULE_STATUS_RETRIES,
            exception_message_prefix="Waiting for schedule to leave 'Pending' status",
            seconds_to_sleep=smconfig.SCHEDULE_STATUS_SLEEP,
        ):
            schedule_desc = self.describe_schedule()
            if schedule_desc["MonitoringScheduleStatus"] != "Pending":
                break

    def _validate_network_config(self, network_config_dict: Dict[str, Any]):
        """EnableInterContainerTrafficEncryption is not supported by monitoring jobs.

        Raises:
            ValueError: if the network config sets inter-container traffic encryption.
        """
        if "EnableInterContainerTrafficEncryption" in network_config_dict:
            message = (
                "EnableInterContainerTrafficEncryption is not supported in Model Monitor. Please ensure that "
                "encrypt_inter_container_traffic=None when creating your NetworkConfig object. Current "
                f"encrypt_inter_container_traffic value: {network_config_dict['EnableInterContainerTrafficEncryption']}"
            )
            logger.error(message)
            raise ValueError(message)

    def _create_monitoring_schedule_from_job_definition(
        self,
        monitor_schedule_name: str,
        job_definition_name: str,
        schedule_cron_expression: Optional[str] = None,
    ):
        self.sagemaker_session.create_monitoring_schedule_from_job_definition(
            monitoring_schedule_name=monitor_schedule_name,
            job_definition_name=job_definition_name,
            monitoring_type=self.monitoring_type,
            schedule_expression=schedule_cron_expression,
            tags=self.tags,
        )

    def _update_monitoring_schedule(self, job_definition_name: str, schedule_cron_expression: Optional[str] = None):
        """Point the existing schedule at ``job_definition_name`` and/or a new cron expression.

        Raises:
            ValueError: if this monitor has no schedule yet.
        """
        if self.job_definition_name is None or self.monitoring_schedule_name is None:
            message = "Nothing to update, please create a schedule first."
            logger.error(message)
            raise ValueError(message)

        self.sagemaker_session.update_monitoring_schedule_job_definition(
            monitoring_schedule_name=self.monitoring_schedule_name,
            job_definition_name=job_definition_name,
            monitoring_type=self.monitoring_type,
            schedule_expression=schedule_cron_expression,
        )
        self._wait_for_schedule_changes_to_apply()

    def _build_job_definition_request(
        self,
        monitoring_schedule_name: Optional[str],
        job_definition_name: str,
        existing_job_desc: Optional[Dict[str, Any]] = None,
        endpoint_input: Optional[Union["EndpointInput", str]] = None,
        record_preprocessor_script: Optional[str] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        statistics: Optional[Union[Statistics, str]] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        latest_baselining_job_name: Optional[str] = None,
        enable_cloudwatch_metrics: Optional[bool] = None,
        role: Optional[str] = None,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        volume_size_in_gb: Optional[int] = None,
        volume_kms_key: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        env: Optional[Dict[str, str]] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        network_config: Optional[NetworkConfig] = None,
    ) -> Dict[str, Any]:
        """Build the request of a ``Create<MonitoringType>JobDefinition`` call.

        When ``existing_job_desc`` is given, its sections are the starting point and only the arguments that are
        not None override them.
        """
        prefix = self.monitoring_type
        if existing_job_desc is not None:
            app_specification = dict(existing_job_desc[f"{prefix}AppSpecification"])
            baseline_config = dict(existing_job_desc.get(f"{prefix}BaselineConfig", {}))
            job_input = dict(existing_job_desc[f"{prefix}JobInput"])
            job_output = dict(existing_job_desc[f"{prefix}JobOutputConfig"])
            cluster_config = dict(existing_job_desc["JobResources"]["ClusterConfig"])
            if role is None:
                role = existing_job_desc["RoleArn"]
            existing_network_config = existing_job_desc.get("NetworkConfig")
            stop_condition = dict(existing_job_desc.get("StoppingCondition", {}))
        else:
            app_specification = {}
            baseline_config = {}
            job_input = {}
            job_output = {}
            cluster_config = {}
            existing_network_config = None
            stop_condition = {}

        # app specification
        app_specification["ImageUri"] = self.image_uri
        if record_preprocessor_script is not None:
            app_specification["RecordPreprocessorSourceUri"] = self._s3_uri_from_local_path(
                path=record_preprocessor_script
            )
        if post_analytics_processor_script is not None:
            app_specification["PostAnalyticsProcessorSourceUri"] = self._s3_uri_from_local_path(
                path=post_analytics_processor_script
            )
        normalized_env = self._generate_env_map(env=env, enable_cloudwatch_metrics=enable_cloudwatch_metrics)
        if normalized_env:
            app_specification["Environment"] = normalized_env

        # baseline config
        statistics_object, constraints_object = self._get_baseline_files(
            statistics=statistics, constraints=constraints, sagemaker_session=self.sagemaker_session
        )
        if constraints_object is not None:
            baseline_config["ConstraintsResource"] = {"S3Uri": constraints_object.file_s3_uri}
        if statistics_object is not None:
            baseline_config["StatisticsResource"] = {"S3Uri": statistics_object.file_s3_uri}
        # ConstraintsResource and BaseliningJobName can co-exist in BYOC case
        if latest_baselining_job_name is not None:
            baseline_config["BaseliningJobName"] = latest_baselining_job_name

        # job input
        if endpoint_input is not None:
            job_input.update(self._normalize_endpoint_input(endpoint_input=endpoint_input)._to_request_dict())

        # job output
        if output_s3_uri is not None:
            normalized_monitoring_output = self._normalize_monitoring_output(monitoring_schedule_name, output_s3_uri)
            job_output["MonitoringOutputs"] = [normalized_monitoring_output._to_request_dict()]
        if output_kms_key is not None:
            job_output["KmsKeyId"] = output_kms_key

        # cluster config
        if instance_count is not None:
            cluster_config["InstanceCount"] = instance_count
        if instance_type is not None:
            cluster_config["InstanceType"] = instance_type
        if volume_size_in_gb is not None:
            cluster_config["VolumeSizeInGB"] = volume_size_in_gb
        if volume_kms_key is not None:
            cluster_config["VolumeKmsKeyId"] = volume_kms_key

        # stop condition
        if max_runtime_in_seconds is not None:
            stop_condition["MaxRuntimeInSeconds"] = max_runtime_in_seconds

        request_dict: Dict[str, Any] = {
            "JobDefinitionName": job_definition_name,
            f"{prefix}AppSpecification": app_specification,
            f"{prefix}JobInput": job_input,
            f"{prefix}JobOutputConfig": job_output,
            "JobResources": {"ClusterConfig": cluster_config},
            "RoleArn": self.sagemaker_session.expand_role(role),
        }

        if baseline_config:
            request_dict[f"{prefix}BaselineConfig"] = baseline_config

        if network_config is not None:
            network_config_dict = network_config._to_request_dict()
            self._validate_network_config(network_config_dict)
            request_dict["NetworkConfig"] = network_config_dict
        elif existing_network_config is not None:
            request_dict["NetworkConfig"] = existing_network_config

        if stop_condition:
            request_dict["StoppingCondition"] = stop_condition

        if tags is not None:
            request_dict["Tags"] = tags

        return request_dict

    def __repr__(self):
        return f"<{type(self).__name__}: {self.monitoring_schedule_name}>"


class _JobDefinitionMonitor(ModelMonitor):
    """A monitor running the SageMaker analyzer image through standalone job definitions."""

    JOB_DEFINITION_BASE_NAME = "monitoring-job-definition"
    MONITORING_TYPE = ""

    def __init__(
        self,
        role: str,
        instance_count: int = 1,
        instance_type: str = "ml.m5.xlarge",
        volume_size_in_gb: int = 30,
        volume_kms_key: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        base_job_name: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
        env: Optional[Dict[str, str]] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        network_config: Optional[NetworkConfig] = None,
    ):
        session = sagemaker_session or Session()
        super().__init__(
            role=role,
            image_uri=self._get_default_image_uri(session.boto_region_name),
            instance_count=instance_count,
            instance_type=instance_type,
            volume_size_in_gb=volume_size_in_gb,
            volume_kms_key=volume_kms_key,
            output_kms_key=output_kms_key,
            max_runtime_in_seconds=max_runtime_in_seconds,
            base_job_name=base_job_name,
            sagemaker_session=session,
            env=env,
            tags=tags,
            network_config=network_config,
        )

    @property
    def monitoring_type(self) -> str:
        return self.MONITORING_TYPE

    @staticmethod
    def _get_default_image_uri(region: str) -> str:
        """Returns the model monitor analyzer image uri of ``region``."""
        return image_uris.retrieve(framework="model-monitor", region=region)

    def run_baseline(self, *args, **kwargs):
        """Not supported, use ``suggest_baseline`` instead.

        Raises:
            NotImplementedError: always.
        """
        raise NotImplementedError(
            f"`run_baseline()` is only allowed for ModelMonitor objects. Please use `suggest_baseline` for "
            f"{type(self).__name__} objects, instead."
        )

    def _create_job_definition(self, request_dict: Dict[str, Any]):
        raise NotImplementedError

    def _describe_job_definition(self, job_definition_name: str) -> Dict[str, Any]:
        raise NotImplementedError

    def _delete_job_definition(self, job_definition_name: str):
        raise NotImplementedError

    def _schedule_with_new_job_definition(self, request_dict: Dict[str, Any], monitor_schedule_name: str, **kwargs):
        """Create the job definition, then a schedule on it; the definition is dropped if scheduling fails."""
        new_job_definition_name = request_dict["JobDefinitionName"]
        self._create_job_definition(request_dict)
        try:
            self._create_monitoring_schedule_from_job_definition(
                monitor_schedule_name=monitor_schedule_name,
                job_definition_name=new_job_definition_name,
                **kwargs,
            )
        except Exception:
            logger.error("Failed to create monitoring schedule.")
            self._delete_job_definition_after_failure(new_job_definition_name)
            raise
        self.job_definition_name = new_job_definition_name
        self.monitoring_schedule_name = monitor_schedule_name

    def _update_with_new_job_definition(
        self, request_dict: Dict[str, Any], schedule_cron_expression: Optional[str], updated_attrs: Dict[str, Any]
    ):
        """Create a job definition from ``request_dict`` and point the schedule at it."""
        new_job_definition_name = request_dict["JobDefinitionName"]
        self._create_job_definition(request_dict)
        try:
            self._update_monitoring_schedule(new_job_definition_name, schedule_cron_expression)
        except Exception:
            logger.error("Failed to update monitoring schedule.")
            self._delete_job_definition_after_failure(new_job_definition_name)
            raise
        self.job_definition_name = new_job_definition_name
        for attr, value in updated_attrs.items():
            if value is not None:
                setattr(self, attr, value)

    def _delete_job_definition_after_failure(self, job_definition_name: str):
        try:
            self._delete_job_definition(job_definition_name)
        except ClientError:
            logger.error("Failed to delete job definition %s.", job_definition_name)
            raise

    def delete_monitoring_schedule(self):
        """Deletes the monitoring schedule and its job definition."""
        super().delete_monitoring_schedule()
        if self.job_definition_name is not None:
            logger.info("Deleting %s Job Definition with name: %s", self.monitoring_type, self.job_definition_name)
            self._delete_job_definition(self.job_definition_name)
            self.job_definition_name = None

    def latest_monitoring_statistics(
        self, file_name: str = STATISTICS_JSON_DEFAULT_FILE_NAME
    ) -> Optional[Statistics]:
        """Returns the Statistics of the latest monitoring execution, or None when it has produced none yet."""
        executions = self.list_executions()
        if len(executions) == 0:
            logger.warning(
                "No executions found for schedule. monitoring_schedule_name: %s", self.monitoring_schedule_name
            )
            return None

        latest_monitoring_execution = executions[-1]
        try:
            return latest_monitoring_execution.statistics(file_name=file_name)
        except UnexpectedStatusException as e:
            logger.warning(
                "Unable to retrieve statistics as job is in status '%s'. Latest statistics only available for "
                "completed executions.",
                e.actual_status,
            )
            return None

    def latest_monitoring_constraint_violations(
        self, file_name: str = CONSTRAINT_VIOLATIONS_JSON_DEFAULT_FILE_NAME
    ) -> Optional[ConstraintViolations]:
        """Returns the ConstraintViolations of the latest monitoring execution, or None when it has none yet."""
        executions = self.list_executions()
        if len(executions) == 0:
            logger.warning(
                "No executions found for schedule. monitoring_schedule_name: %s", self.monitoring_schedule_name
            )
            return None

        latest_monitoring_execution = executions[-1]
        try:
            return latest_monitoring_execution.constraint_violations(file_name=file_name)
        except UnexpectedStatusException as e:
            logger.warning(
                "Unable to retrieve constraint violations as job is in status '%s'. Latest violations only "
                "available for completed executions.",
                e.actual_status,
            )
            return None

    @classmethod
    def _attach_to_job_definition(cls, schedule_desc: Dict[str, Any], sagemaker_session: Session):
        monitoring_type = schedule_desc["MonitoringScheduleConfig"].get("MonitoringType")
        if monitoring_type != cls.MONITORING_TYPE:
            raise TypeError(f"{cls.__name__} can only attach to {cls.MONITORING_TYPE} monitoring schedule.")
        job_definition_name = schedule_desc["MonitoringScheduleConfig"]["MonitoringJobDefinitionName"]
        job_desc = cls._describe_job_definition_with(sagemaker_session, job_definition_name)
        tags = sagemaker_session.list_tags(resource_arn=schedule_desc["MonitoringScheduleArn"])
        return cls._attach(
            sagemaker_session=sagemaker_session, schedule_desc=schedule_desc, job_desc=job_desc, tags=tags
        )

    @staticmethod
    def _describe_job_definition_with(sagemaker_session: Session, job_definition_name: str) -> Dict[str, Any]:
        raise NotImplementedError


class DefaultModelMonitor(_JobDefinitionMonitor):
    """Sets up Amazon SageMaker Monitoring Schedules and baseline suggestions.

    Use this class when you want to utilize Amazon SageMaker Monitoring's plug-and-play solution that only
    requires your dataset and optional pre/postprocessing scripts. For a more customized experience, consider
    using the :class:`ModelMonitor` class instead.
    """

    JOB_DEFINITION_BASE_NAME = "data-quality-job-definition"
    MONITORING_TYPE = "DataQuality"

    def suggest_baseline(
        self,
        baseline_dataset: str,
        dataset_format: Dict[str, Any],
        record_preprocessor_script: Optional[str] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        wait: bool = True,
        logs: bool = True,
        job_name: Optional[str] = None,
    ) -> ProcessingJob:
        """Suggest baselines for use with Amazon SageMaker Model Monitoring Schedules.

        Args:
            baseline_dataset (str): The path to the baseline_dataset file. This can be a local path or an S3
                uri.
            dataset_format (dict): The format of the baseline_dataset, see
                :class:`~smkit.model_monitor.DatasetFormat`.
            record_preprocessor_script (str): The path to the record preprocessor script. This can be a local
                path or an S3 uri.
            post_analytics_processor_script (str): The path to the record post-analytics processor script. This
                can be a local path or an S3 uri.
            output_s3_uri (str): Desired S3 destination of the constraint_violations and statistics json files.
                Default: "s3://<default_session_bucket>/<job_name>/output"
            wait (bool): Whether the call should wait until the job completes (default: True).
            logs (bool): Whether to show the logs produced by the job. Only meaningful when wait is True
                (default: True).
            job_name (str): Processing job name. If not specified, the processor generates a default job name,
                based on the image name and current timestamp.

        Returns:
            smkit.processing.ProcessingJob: The ProcessingJob object representing the baselining job.
        """
        self.latest_baselining_job_name = self._generate_baselining_job_name(job_name=job_name)

        normalized_baseline_dataset_input = self._upload_and_convert_to_processing_input(
            source=baseline_dataset,
            destination=os.path.join(_CONTAINER_BASE_PATH, _CONTAINER_INPUT_PATH, _BASELINE_DATASET_INPUT_NAME),
            name=_BASELINE_DATASET_INPUT_NAME,
        )

        # Unlike other input, dataset must be a directory for the Monitoring image.
        baseline_dataset_container_path = normalized_baseline_dataset_input.destination

        normalized_record_preprocessor_script_input = self._upload_and_convert_to_processing_input(
            source=record_preprocessor_script,
            destination=os.path.join(
                _CONTAINER_BASE_PATH, _CONTAINER_INPUT_PATH, _RECORD_PREPROCESSOR_SCRIPT_INPUT_NAME
            ),
            name=_RECORD_PREPROCESSOR_SCRIPT_INPUT_NAME,
        )

        record_preprocessor_script_container_path = None
        if normalized_record_preprocessor_script_input is not None:
            record_preprocessor_script_container_path = os.path.join(
                normalized_record_preprocessor_script_input.destination,
                os.path.basename(record_preprocessor_script),
            )

        normalized_post_processor_script_input = self._upload_and_convert_to_processing_input(
            source=post_analytics_processor_script,
            destination=os.path.join(
                _CONTAINER_BASE_PATH, _CONTAINER_INPUT_PATH, _POST_ANALYTICS_PROCESSOR_SCRIPT_INPUT_NAME
            ),
            name=_POST_ANALYTICS_PROCESSOR_SCRIPT_INPUT_NAME,
        )

        post_processor_script_container_path = None
        if normalized_post_processor_script_input is not None:
            post_processor_script_container_path = os.path.join(
                normalized_post_processor_script_input.destination,
                os.path.basename(post_analytics_processor_script),
            )

        normalized_baseline_output = self._normalize_baseline_output(output_s3_uri=output_s3_uri)

        normalized_env = self._generate_env_map(
            env=self.env,
            dataset_format=dataset_format,
            output_path=normalized_baseline_output.source,
            enable_cloudwatch_metrics=False,  # Only supported for monitoring schedules
            dataset_source_container_path=baseline_dataset_container_path,
            record_preprocessor_script_container_path=record_preprocessor_script_container_path,
            post_processor_script_container_path=post_processor_script_container_path,
        )

        baselining_processor = self._baselining_processor(normalized_env)

        baseline_job_inputs_with_nones = [
            normalized_baseline_dataset_input,
            normalized_record_preprocessor_script_input,
            normalized_post_processor_script_input,
        ]
        baseline_job_inputs = [
            baseline_job_input for baseline_job_input in baseline_job_inputs_with_nones if baseline_job_input
        ]

        baselining_processor.run(
            inputs=baseline_job_inputs,
            outputs=[normalized_baseline_output],
            arguments=self.arguments,
            wait=wait,
            logs=logs,
            job_name=self.latest_baselining_job_name,
        )

        self.latest_baselining_job = BaseliningJob.from_processing_job(
            processing_job=baselining_processor.latest_job
        )
        self.baselining_jobs.append(self.latest_baselining_job)
        return baselining_processor.latest_job

    def create_monitoring_schedule(
        self,
        endpoint_input: Union["EndpointInput", str],
        record_preprocessor_script: Optional[str] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        statistics: Optional[Union[Statistics, str]] = None,
        monitor_schedule_name: Optional[str] = None,
        schedule_cron_expression: Optional[str] = None,
        enable_cloudwatch_metrics: bool = True,
    ):
        """Creates a monitoring schedule to monitor an Amazon SageMaker Endpoint.

        A data quality job definition is created first, then a schedule that runs it. If constraints and
        statistics are not provided, the latest baselining job of this monitor (if any) is referenced instead.

        Args:
            endpoint_input (str or smkit.model_monitor.EndpointInput): The endpoint to monitor.
            record_preprocessor_script (str): The path to the record preprocessor script. This can be a local
                path or an S3 uri.
            post_analytics_processor_script (str): The path to the record post-analytics processor script. This
                can be a local path or an S3 uri.
            output_s3_uri (str): Desired S3 destination of the constraint_violations and statistics json files.
            constraints (smkit.model_monitor.Constraints or str): Constraints object or S3 uri.
            statistics (smkit.model_monitor.Statistics or str): Statistics object or S3 uri.
            monitor_schedule_name (str): Schedule name. If not specified, one is generated.
            schedule_cron_expression (str): The cron expression that dictates the frequency that this job runs
                at. See :class:`~smkit.model_monitor.CronExpressionGenerator` for valid expressions.
            enable_cloudwatch_metrics (bool): Whether to publish cloudwatch metrics as part of the monitoring
                jobs.

        Raises:
            ValueError: if this monitor already owns a schedule.
        """
        if self.job_definition_name is not None or self.monitoring_schedule_name is not None:
            logger.error(_ALREADY_SCHEDULED_MESSAGE)
            raise ValueError(_ALREADY_SCHEDULED_MESSAGE)

        monitor_schedule_name = self._generate_monitoring_schedule_name(schedule_name=monitor_schedule_name)
        request_dict = self._build_job_definition_request(
            monitoring_schedule_name=monitor_schedule_name,
            job_definition_name=name_from_base(self.JOB_DEFINITION_BASE_NAME),
            latest_baselining_job_name=self.latest_baselining_job_name,
            endpoint_input=endpoint_input,
            record_preprocessor_script=record_preprocessor_script,
            post_analytics_processor_script=post_analytics_processor_script,
            output_s3_uri=self._normalize_monitoring_output(monitor_schedule_name, output_s3_uri).destination,
            constraints=constraints,
            statistics=statistics,
            enable_cloudwatch_metrics=enable_cloudwatch_metrics,
            role=self.role,
            instance_count=self.instance_count,
            instance_type=self.instance_type,
            volume_size_in_gb=self.volume_size_in_gb,
            volume_kms_key=self.volume_kms_key,
            output_kms_key=self.output_kms_key,
            max_runtime_in_seconds=self.max_runtime_in_seconds,
            env=self.env,
            tags=self.tags,
            network_config=self.network_config,
        )
        self._schedule_with_new_job_definition(
            request_dict, monitor_schedule_name, schedule_cron_expression=schedule_cron_expression
        )

    def update_monitoring_schedule(  # type: ignore[override]
        self,
        endpoint_input: Optional[Union["EndpointInput", str]] = None,
        record_preprocessor_script: Optional[str] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        statistics: Optional[Union[Statistics, str]] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        schedule_cron_expression: Optional[str] = None,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        volume_size_in_gb: Optional[int] = None,
        volume_kms_key: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        env: Optional[Dict[str, str]] = None,
        network_config: Optional[NetworkConfig] = None,
        enable_cloudwatch_metrics: Optional[bool] = None,
        role: Optional[str] = None,
    ):
        """Updates the existing monitoring schedule.

        Only the schedule expression changing is an in-place update; any other change creates a new data
        quality job definition from the current one and points the schedule at it.
        """
        if self.job_definition_name is None:
            raise ValueError("Nothing to update, please create a schedule first.")

        updates = {
            "endpoint_input": endpoint_input,
            "record_preprocessor_script": record_preprocessor_script,
            "post_analytics_processor_script": post_analytics_processor_script,
            "output_s3_uri": output_s3_uri,
            "statistics": statistics,
            "constraints": constraints,
            "enable_cloudwatch_metrics": enable_cloudwatch_metrics,
            "role": role,
            "instance_count": instance_count,
            "instance_type": instance_type,
            "volume_size_in_gb": volume_size_in_gb,
            "volume_kms_key": volume_kms_key,
            "output_kms_key": output_kms_key,
            "max_runtime_in_seconds": max_runtime_in_seconds,
            "env": env,
            "network_config": network_config,
        }
        if all(value is None for value in updates.values()):
            if schedule_cron_expression is not None:
                self._update_monitoring_schedule(self.job_definition_name, schedule_cron_expression)
            return

        job_desc = self._describe_job_definition(self.job_definition_name)
        request_dict = self._build_job_definition_request(
            monitoring_schedule_name=self.monitoring_schedule_name,
            job_definition_name=name_from_base(self.JOB_DEFINITION_BASE_NAME),
            existing_job_desc=job_desc,
            tags=self.tags,
            **updates,
        )
        self._update_with_new_job_definition(
            request_dict,
            schedule_cron_expression,
            updated_attrs={
                "role": role,
                "instance_count": instance_count,
                "instance_type": instance_type,
                "volume_size_in_gb": volume_size_in_gb,
                "volume_kms_key": volume_kms_key,
                "output_kms_key": output_kms_key,
                "max_runtime_in_seconds": max_runtime_in_seconds,
                "env": env,
                "network_config": network_config,
            },
        )

    @classmethod
    def attach(cls, monitor_schedule_name: str, sagemaker_session: Optional[Session] = None) -> "DefaultModelMonitor":
        """Attach to a data quality schedule, whether it refers to a job definition or embeds one.

        Raises:
            TypeError: if the schedule monitors something other than data quality.
        """
        sagemaker_session = sagemaker_session or Session()
        schedule_desc = sagemaker_session.describe_monitoring_schedule(monitoring_schedule_name=monitor_schedule_name)

        if schedule_desc["MonitoringScheduleConfig"].get("MonitoringJobDefinitionName") is not None:
            return cls._attach_to_job_definition(schedule_desc, sagemaker_session)

        job_definition = schedule_desc["MonitoringScheduleConfig"]["MonitoringJobDefinition"]
        init_params = cls._init_params_from_embedded_definition(job_definition)
        init_params["tags"] = sagemaker_session.list_tags(resource_arn=schedule_desc["MonitoringScheduleArn"])

        attached_monitor = cls(sagemaker_session=sagemaker_session, **init_params)
        attached_monitor.monitoring_schedule_name = monitor_schedule_name
        return attached_monitor

    def _create_job_definition(self, request_dict: Dict[str, Any]):
        self.sagemaker_session.create_data_quality_job_definition(**request_dict)

    def _describe_job_definition(self, job_definition_name: str) -> Dict[str, Any]:
        return self.sagemaker_session.describe_data_quality_job_definition(job_definition_name)

    def _delete_job_definition(self, job_definition_name: str):
        self.sagemaker_session.delete_data_quality_job_definition(job_definition_name)

    @staticmethod
    def _describe_job_definition_with(sagemaker_session: Session, job_definition_name: str) -> Dict[str, Any]:
        return sagemaker_session.describe_data_quality_job_definition(job_definition_name)


class ModelQualityMonitor(_JobDefinitionMonitor):
    """Amazon SageMaker model monitor to monitor quality metrics for an endpoint.

    Predictions captured from the endpoint are joined with ground truth labels uploaded to S3.
    """

    JOB_DEFINITION_BASE_NAME = "model-quality-job-definition"
    MONITORING_TYPE = "ModelQuality"

    def suggest_baseline(
        self,
        baseline_dataset: str,
        dataset_format: Dict[str, Any],
        problem_type: str,
        inference_attribute: Optional[str] = None,
        probability_attribute: Optional[Union[str, int]] = None,
        ground_truth_attribute: Optional[str] = None,
        probability_threshold_attribute: Optional[float] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        wait: bool = False,
        logs: bool = False,
        job_name: Optional[str] = None,
    ) -> ProcessingJob:
        """Suggest baselines for use with Amazon SageMaker Model Monitoring Schedules.

        Args:
            baseline_dataset (str): The path to the baseline_dataset file. This can be a local path or an S3
                uri.
            dataset_format (dict): The format of the baseline_dataset.
            problem_type (str): The type of problem of this model quality monitoring. Valid values are
                "Regression", "BinaryClassification", "MulticlassClassification".
            inference_attribute (str): Index or JSONpath to locate predicted label(s).
            probability_attribute (str or int): Index or JSONpath to locate probabilities.
            ground_truth_attribute (str): Index or JSONpath to locate actual label(s).
            probability_threshold_attribute (float): threshold to convert probabilities to binaries. Only used
                for BinaryClassification.
            post_analytics_processor_script (str): The path to the record post-analytics processor script. This
                can be a local path or an S3 uri.
            output_s3_uri (str): Desired S3 destination of the constraint_violations and statistics json files.
            wait (bool): Whether the call should wait until the job completes (default: False).
            logs (bool): Whether to show the logs produced by the job. Only meaningful when wait is True
                (default: False).
            job_name (str): Processing job name. If not specified, one is generated.

        Returns:
            smkit.processing.ProcessingJob: The ProcessingJob object representing the baselining job.
        """
        self.latest_baselining_job_name = self._generate_baselining_job_name(job_name=job_name)

        normalized_baseline_dataset_input = self._upload_and_convert_to_processing_input(
            source=baseline_dataset,
            destination=os.path.join(_CONTAINER_BASE_PATH, _CONTAINER_INPUT_PATH, _BASELINE_DATASET_INPUT_NAME),
            name=_BASELINE_DATASET_INPUT_NAME,
        )
        baseline_dataset_container_path = normalized_baseline_dataset_input.destination

        normalized_post_processor_script_input = self._upload_and_convert_to_processing_input(
            source=post_analytics_processor_script,
            destination=os.path.join(
                _CONTAINER_BASE_PATH, _CONTAINER_INPUT_PATH, _POST_ANALYTICS_PROCESSOR_SCRIPT_INPUT_NAME
            ),
            name=_POST_ANALYTICS_PROCESSOR_SCRIPT_INPUT_NAME,
        )
        post_processor_script_container_path = None
        if normalized_post_processor_script_input is not None:
            post_processor_script_container_path = os.path.join(
                normalized_post_processor_script_input.destination,
                os.path.basename(post_analytics_processor_script),
            )

        normalized_baseline_output = self._normalize_baseline_output(output_s3_uri=output_s3_uri)

        normalized_env = self._generate_env_map(
            env=self.env,
            dataset_format=dataset_format,
            output_path=normalized_baseline_output.source,
            enable_cloudwatch_metrics=False,  # Only supported for monitoring schedules
            dataset_source_container_path=baseline_dataset_container_path,
            post_processor_script_container_path=post_processor_script_container_path,
            analysis_type="MODEL_QUALITY",
            problem_type=problem_type,
            inference_attribute=inference_attribute,
            probability_attribute=probability_attribute,
            ground_truth_attribute=ground_truth_attribute,
            probability_threshold_attribute=probability_threshold_attribute,
        )

        baselining_processor = self._baselining_processor(normalized_env)
        baseline_job_inputs = [
            baseline_job_input
            for baseline_job_input in (normalized_baseline_dataset_input, normalized_post_processor_script_input)
            if baseline_job_input is not None
        ]

        baselining_processor.run(
            inputs=baseline_job_inputs,
            outputs=[normalized_baseline_output],
            arguments=self.arguments,
            wait=wait,
            logs=logs,
            job_name=self.latest_baselining_job_name,
        )

        self.latest_baselining_job = BaseliningJob.from_processing_job(
            processing_job=baselining_processor.latest_job
        )
        self.baselining_jobs.append(self.latest_baselining_job)
        return baselining_processor.latest_job

    def create_monitoring_schedule(
        self,
        endpoint_input: Union["EndpointInput", str],
        ground_truth_input: str,
        problem_type: str,
        record_preprocessor_script: Optional[str] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        monitor_schedule_name: Optional[str] = None,
        schedule_cron_expression: Optional[str] = None,
        enable_cloudwatch_metrics: bool = True,
    ):
        """Creates a monitoring schedule comparing endpoint predictions against ground truth labels.

        Args:
            endpoint_input (str or smkit.model_monitor.EndpointInput): The endpoint to monitor.
            ground_truth_input (str): S3 URI to ground truth dataset.
            problem_type (str): The type of problem of this model quality monitoring. Valid values are
                "Regression", "BinaryClassification", "MulticlassClassification".
            record_preprocessor_script (str): The path to the record preprocessor script.
            post_analytics_processor_script (str): The path to the record post-analytics processor script.
            output_s3_uri (str): S3 destination of the constraint_violations and analysis result.
            constraints (smkit.model_monitor.Constraints or str): Constraints object or S3 uri.
            monitor_schedule_name (str): Schedule name. If not specified, one is generated.
            schedule_cron_expression (str): The cron expression that dictates the frequency that this job runs.
            enable_cloudwatch_metrics (bool): Whether to publish cloudwatch metrics as part of the monitoring
                jobs.

        Raises:
            ValueError: if this monitor already owns a schedule.
        """
        if self.job_definition_name is not None or self.monitoring_schedule_name is not None:
            logger.error(_ALREADY_SCHEDULED_MESSAGE)
            raise ValueError(_ALREADY_SCHEDULED_MESSAGE)

        monitor_schedule_name = self._generate_monitoring_schedule_name(schedule_name=monitor_schedule_name)
        request_dict = self._build_model_quality_job_definition_request(
            monitoring_schedule_name=monitor_schedule_name,
            job_definition_name=name_from_base(self.JOB_DEFINITION_BASE_NAME),
            latest_baselining_job_name=self.latest_baselining_job_name,
            endpoint_input=endpoint_input,
            ground_truth_input=ground_truth_input,
            problem_type=problem_type,
            record_preprocessor_script=record_preprocessor_script,
            post_analytics_processor_script=post_analytics_processor_script,
            output_s3_uri=self._normalize_monitoring_output(monitor_schedule_name, output_s3_uri).destination,
            constraints=constraints,
            enable_cloudwatch_metrics=enable_cloudwatch_metrics,
            role=self.role,
            instance_count=self.instance_count,
            instance_type=self.instance_type,
            volume_size_in_gb=self.volume_size_in_gb,
            volume_kms_key=self.volume_kms_key,
            output_kms_key=self.output_kms_key,
            max_runtime_in_seconds=self.max_runtime_in_seconds,
            env=self.env,
            tags=self.tags,
            network_config=self.network_config,
        )
        self._schedule_with_new_job_definition(
            request_dict, monitor_schedule_name, schedule_cron_expression=schedule_cron_expression
        )

    def update_monitoring_schedule(  # type: ignore[override]
        self,
        endpoint_input: Optional[Union["EndpointInput", str]] = None,
        ground_truth_input: Optional[str] = None,
        problem_type: Optional[str] = None,
        record_preprocessor_script: Optional[str] = None,
        post_analytics_processor_script: Optional[str] = None,
        output_s3_uri: Optional[str] = None,
        constraints: Optional[Union[Constraints, str]] = None,
        schedule_cron_expression: Optional[str] = None,
        enable_cloudwatch_metrics: Optional[bool] = None,
        role: Optional[str] = None,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        volume_size_in_gb: Optional[int] = None,
        volume_kms_key: Optional[str] = None,
        output_kms_key: Optional[str] = None,
        max_runtime_in_seconds: Optional[int] = None,
        env: Optional[Dict[str, str]] = None,
        network_config: Optional[NetworkConfig] = None,
    ):
        """Updates the existing monitoring schedule, creating a new model quality job definition if needed."""
        if self.job_definition_name is None:
            raise ValueError("Nothing to update, please create a schedule first.")

        updates = {
            "endpoint_input": endpoint_input,
            "ground_truth_input": ground_truth_input,
            "problem_type": problem_type,
            "record_preprocessor_script": record_preprocessor_script,
            "post_analytics_processor_script": post_analytics_processor_script,
            "output_s3_uri": output_s3_uri,
            "constraints": constraints,
            "enable_cloudwatch_metrics": enable_cloudwatch_metrics,
            "role": role,
            "instance_count": instance_count,
            "instance_type": instance_type,
            "volume_size_in_gb": volume_size_in_gb,
            "volume_kms_key": volume_kms_key,
            "output_kms_key": output_kms_key,
            "max_runtime_in_seconds": max_runtime_in_seconds,
            "env": env,
            "network_config": network_config,
        }
        if all(value is None for value in updates.values()):
            if schedule_cron_expression is not None:
                self._update_monitoring_schedule(self.job_definition_name, schedule_cron_expression)
            return

        job_desc = self._describe_job_definition(self.job_definition_name)
        request_dict = self._build_model_quality_job_definition_request(
            monitoring_schedule_name=self.monitoring_schedule_name,
            job_definition_name=name_from_base(self.JOB_DEFINITION_BASE_NAME),
            existing_job_desc=job_desc,
            tags=self.tags,
            **updates,
        )
        self._update_with_new_job_definition(
            request_dict,
            schedule_cron_expression,
            updated_attrs={
                "role": role,
                "instance_count": instance_count,
                "instance_type": instance_type,
                "volume_size_in_gb": volume_size_in_gb,
                "volume_kms_key": volume_kms_key,
                "output_kms_key": output_kms_key,
                "max_runtime_in_seconds": max_runtime_in_seconds,
                "env": env,
                "network_config": network_config,
            },
        )

    @classmethod
    def attach(cls, monitor_schedule_name: str, sagemaker_session: Optional[Session] = None) -> "ModelQualityMonitor":
        """Attach to an existing model quality schedule.

        Raises:
            TypeError: if the schedule monitors something other than model quality.
        """
        sagemaker_session = sagemaker_session or Session()
        schedule_desc = sagemaker_session.describe_monitoring_schedule(monitoring_schedule_name=monitor_schedule_name)
        return cls._attach_to_job_definition(schedule_desc, sagemaker_session)

    def _build_model_quality_job_definition_request(
        self,
        ground_truth_input: Optional[str] = None,
        problem_type: Optional[str] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """Job definition request with the model quality additions: problem type and ground truth input."""
        request_dict = self._build_job_definition_request(**kwargs)
        if problem_type is not None:
            request_dict["ModelQualityAppSpecification"]["ProblemType"] = problem_type
        if ground_truth_input is not None:
            request_dict["ModelQualityJobInput"]["GroundTruthS3Input"] = {"S3Uri": ground_truth_input}
        return request_dict

    def _create_job_definition(self, request_dict: Dict[str, Any]):
        self.sagemaker_session.create_model_quality_job_definition(**request_dict)

    def _describe_job_definition(self, job_definition_name: str) -> Dict[str, Any]:
        return self.sagemaker_session.describe_model_quality_job_definition(job_definition_name)

    def _delete_job_definition(self, job_definition_name: str):
        self.sagemaker_session.delete_model_quality_job_definition(job_definition_name)

    @staticmethod
    def _describe_job_definition_with(sagemaker_session: Session, job_definition_name: str) -> Dict[str, Any]:
        return sagemaker_session.describe_model_quality_job_definition(job_definition_name)


def _network_config_from_dict(network_config_dict: Optional[Dict[str, Any]]) -> Optional[NetworkConfig]:
    if not network_config_dict:
        return None
    vpc_config = network_config_dict.get("VpcConfig") or {}
    return NetworkConfig(
        enable_network_isolation=network_config_dict.get("EnableNetworkIsolation", False),
        security_group_ids=vpc_config.get("SecurityGroupIds"),
        subnets=vpc_config.get("Subnets"),
    )


class _MonitoringFilesJob(ProcessingJob):
    """A processing job whose first output holds model monitoring JSON files."""

    def _output_s3_path(self) -> str:
        return self.outputs[0].destination

    def _load_file(self, file_cls, file_name: str, kms_key: Optional[str]):
        """Load ``file_name`` from the job output.

        Raises:
            UnexpectedStatusException: if the file is missing because the job did not complete.
            MissingFileError: if the file is missing although the job completed.
        """
        try:
            return file_cls.from_s3_uri(
                s3_path_join(self._output_s3_path(), file_name),
                kms_key=kms_key,
                sagemaker_session=self.sagemaker_session,
            )
        except MissingFileError as e:
            status = self.sagemaker_session.describe_processing_job(job_name=self.job_name)["ProcessingJobStatus"]
            if status != "Completed":
                raise UnexpectedStatusException(
                    message="The underlying job is not in 'Completed' state. You may only retrieve files for a job "
                    "that has completed successfully.",
                    allowed_statuses=["Completed"],
                    actual_status=status,
                ) from e
            raise


class BaseliningJob(_MonitoringFilesJob):
    """Provides functionality to retrieve baseline-specific files output from baselining job."""

    @classmethod
    def from_processing_job(cls, processing_job: ProcessingJob) -> "BaseliningJob":
        """Initializes a Baselining job from a processing job."""
        return cls(
            sagemaker_session=processing_job.sagemaker_session,
            job_name=processing_job.job_name,
            inputs=processing_job.inputs,
            outputs=processing_job.outputs,
            output_kms_key=processing_job.output_kms_key,
        )

    def baseline_statistics(
        self, file_name: str = STATISTICS_JSON_DEFAULT_FILE_NAME, kms_key: Optional[str] = None
    ) -> Statistics:
        """Returns a Statistics object representing the statistics json file generated by this baselining job.

        Args:
            file_name (str): The name of the json-formatted statistics file.
            kms_key (str): The kms key to use when retrieving the file.

        Raises:
            UnexpectedStatusException: This is thrown if the job is not in a 'Complete' state.
        """
        return self._load_file(Statistics, file_name, kms_key)

    def suggested_constraints(
        self, file_name: str = CONSTRAINTS_JSON_DEFAULT_FILE_NAME, kms_key: Optional[str] = None
    ) -> Constraints:
        """Returns a Constraints object representing the constraints json file generated by this baselining job.

        Args:
            file_name (str): The name of the json-formatted constraints file.
            kms_key (str): The kms key to use when retrieving the file.

        Raises:
            UnexpectedStatusException: This is thrown if the job is not in a 'Complete' state.
        """
        return self._load_file(Constraints, file_name, kms_key)


class MonitoringExecution(_MonitoringFilesJob):
    """Provides functionality to retrieve monitoring-specific files output from monitoring executions."""

    def __init__(
        self,
        sagemaker_session: Session,
        job_name: str,
        inputs: Optional[List[ProcessingInput]],
        output: ProcessingOutput,
        output_kms_key: Optional[str] = None,
    ):
        self.output = output
        super().__init__(
            sagemaker_session=sagemaker_session,
            job_name=job_name,
            inputs=inputs,
            outputs=[output],
            output_kms_key=output_kms_key,
        )

    @classmethod
    def from_processing_arn(cls, sagemaker_session: Session, processing_job_arn: str) -> "MonitoringExecution":
        """Initializes a MonitoringExecution from the ARN of the processing job a schedule started."""
        processing_job_name = processing_job_arn.split(":")[5][len("processing-job/") :]
        job_desc = sagemaker_session.describe_processing_job(job_name=processing_job_name)

        output_config = job_desc["ProcessingOutputConfig"]["Outputs"][0]
        return cls(
            sagemaker_session=sagemaker_session,
            job_name=processing_job_name,
            inputs=[
                ProcessingInput(
                    source=processing_input["S3Input"]["S3Uri"],
                    destination=processing_input["S3Input"]["LocalPath"],
                    input_name=processing_input["InputName"],
                    s3_data_type=processing_input["S3Input"].get("S3DataType"),
                    s3_input_mode=processing_input["S3Input"].get("S3InputMode"),
                    s3_data_distribution_type=processing_input["S3Input"].get("S3DataDistributionType"),
                    s3_compression_type=processing_input["S3Input"].get("S3CompressionType"),
                )
                for processing_input in job_desc.get("ProcessingInputs", [])
                if "S3Input" in processing_input
            ],
            output=ProcessingOutput(
                source=output_config["S3Output"]["LocalPath"],
                destination=output_config["S3Output"]["S3Uri"],
                output_name=output_config["OutputName"],
            ),
            output_kms_key=job_desc["ProcessingOutputConfig"].get("KmsKeyId"),
        )

    def statistics(
        self, file_name: str = STATISTICS_JSON_DEFAULT_FILE_NAME, kms_key: Optional[str] = None
    ) -> Statistics:
        """Returns a Statistics object representing the statistics json file generated by this execution.

        Raises:
            UnexpectedStatusException: This is thrown if the job is not in a 'Complete' state.
        """
        return self._load_file(Statistics, file_name, kms_key)

    def constraint_violations(
        self, file_name: str = CONSTRAINT_VIOLATIONS_JSON_DEFAULT_FILE_NAME, kms_key: Optional[str] = None
    ) -> ConstraintViolations:
        """Returns a ConstraintViolations object representing the violations json file generated by this execution.

        Raises:
            UnexpectedStatusException: This is thrown if the job is not in a 'Complete' state.
        """
        return self._load_file(ConstraintViolations, file_name, kms_key)


class EndpointInput(object):
    """Accepts parameters that specify an endpoint input for a monitoring job.

    It also provides a method to turn those parameters into a dictionary.
    """

    def __init__(
        self,
        endpoint_name: str,
        destination: str,
        s3_input_mode: str = "File",
        s3_data_distribution_type: str = "FullyReplicated",
        start_time_offset: Optional[str] = None,
        end_time_offset: Optional[str] = None,
        features_attribute: Optional[str] = None,
        inference_attribute: Optional[str] = None,
        probability_attribute: Optional[str] = None,
        probability_threshold_attribute: Optional[float] = None,
    ):
        """Initialize an ``EndpointInput`` instance.

        Args:
            endpoint_name (str): The name of the endpoint.
            destination (str): The destination of the input.
            s3_input_mode (str): The S3 input mode. Can be one of: "File", "Pipe". Default: "File".
            s3_data_distribution_type (str): The S3 Data Distribution Type. Can be one of: "FullyReplicated",
                "ShardedByS3Key".
            start_time_offset (str): Monitoring start time offset, e.g. "-PT1H".
            end_time_offset (str): Monitoring end time offset, e.g. "-PT0H".
            features_attribute (str): JSONpath to locate features in JSONlines dataset. Only used for
                ModelBiasMonitor and ModelExplainabilityMonitor.
            inference_attribute (str): Index or JSONpath to locate predicted label(s).
            probability_attribute (str): Index or JSONpath to locate probabilities.
            probability_threshold_attribute (float): threshold to convert probabilities to binaries.

        Raises:
            ValueError: on an unknown input mode or distribution type.
        """
        if s3_input_mode not in ("File", "Pipe"):
            raise ValueError(f"s3_input_mode must be one of 'File' or 'Pipe', got {s3_input_mode}")
        if s3_data_distribution_type not in ("FullyReplicated", "ShardedByS3Key"):
            raise ValueError(
                "s3_data_distribution_type must be one of 'FullyReplicated' or 'ShardedByS3Key', "
                f"got {s3_data_distribution_type}"
            )
        self.endpoint_name = endpoint_name
        self.destination = destination
        self.s3_input_mode = s3_input_mode
        self.s3_data_distribution_type = s3_data_distribution_type
        self.start_time_offset = start_time_offset
        self.end_time_offset = end_time_offset
        self.features_attribute = features_attribute
        self.inference_attribute = inference_attribute
        self.probability_attribute = probability_attribute
        self.probability_threshold_attribute = probability_threshold_attribute

    def _to_request_dict(self) -> Dict[str, Any]:
        """Generates a request dictionary using the parameters provided to the class."""
        endpoint_input: Dict[str, Any] = {
            "EndpointName": self.endpoint_name,
            "LocalPath": self.destination,
            "S3InputMode": self.s3_input_mode,
            "S3DataDistributionType": self.s3_data_distribution_type,
        }

        for key, value in (
            ("StartTimeOffset", self.start_time_offset),
            ("EndTimeOffset", self.end_time_offset),
            ("FeaturesAttribute", self.features_attribute),
            ("InferenceAttribute", self.inference_attribute),
            ("ProbabilityAttribute", self.probability_attribute),
            ("ProbabilityThresholdAttribute", self.probability_threshold_attribute),
        ):
            if value is not None:
                endpoint_input[key] = value

        return {"EndpointInput": endpoint_input}


class MonitoringOutput(object):
    """Accepts parameters that specify an S3 output for a monitoring job.

    It also provides a method to turn those parameters into a dictionary.
    """

    def __init__(self, source: str, destination: Optional[str] = None, s3_upload_mode: str = "Continuous"):
        """Initialize a ``MonitoringOutput`` instance.

        MonitoringOutput is an output that's used in conjunction with monitoring schedules.

        Args:
            source (str): The source for the output.
            destination (str): The destination of the output. Optional. Default:
                s3://<default-sagemaker-bucket>/<schedule_name>/output
            s3_upload_mode (str): The S3 upload mode.
        """
        self.source = source
        self.destination = destination
        self.s3_upload_mode = s3_upload_mode

    def _to_request_dict(self) -> Dict[str, Any]:
        """Generates a request dictionary using the parameters provided to the class."""
        return {
            "S3Output": {
                "S3Uri": self.destination,
                "LocalPath": self.source,
                "S3UploadMode": self.s3_upload_mode,
            }
        }
