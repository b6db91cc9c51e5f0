"""Processing jobs: run a container over S3 inputs and collect its outputs back into S3.

A ``Processor`` carries the container and compute settings, ``ProcessingInput``/``ProcessingOutput`` map S3
locations to paths inside the container, and ``ProcessingJob`` follows one started job.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .job import _Job
from .network import NetworkConfig
from .s3 import S3Uploader, s3_path_join
from .session import Session
from .utils import base_name_from_image, name_from_base

logger = logging.getLogger(__name__)


class Processor(object):
    """Handles Amazon SageMaker Processing tasks."""

    def __init__(
        self,
        role: str,
        image_uri: str,
        instance_count: int,
        instance_type: str,
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
        """Initializes a ``Processor`` instance.

        The ``Processor`` handles Amazon SageMaker Processing tasks.

        Args:
            role (str): An AWS IAM role name or ARN. Amazon SageMaker Processing uses this role to access AWS
                resources, such as data stored in Amazon S3.
            image_uri (str): The URI of the Docker image to use for the processing jobs.
            instance_count (int): The number of instances to run a processing job with.
            instance_type (str): The type of EC2 instance to use for processing, for example, 'ml.c4.xlarge'.
            entrypoint (list[str]): The entrypoint for the processing job (default: None). This is in the form
                of a list of strings that make a command.
            volume_size_in_gb (int): Size in GB of the EBS volume to use for storing data during processing
                (default: 30).
            volume_kms_key (str): A KMS key for the processing volume (default: None).
            output_kms_key (str): The KMS key ID for processing job outputs (default: None).
            max_runtime_in_seconds (int): Timeout in seconds (default: None). After this amount of time, Amazon
                SageMaker terminates the job, regardless of its current status. If `max_runtime_in_seconds` is
                not specified, the default value is 24 hours.
            base_job_name (str): Prefix for processing job name. If not specified, the processor generates a
                default job name, based on the processing image name and current timestamp.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker and any other AWS services needed. If not specified, the processor creates one using
                the default AWS configuration chain.
            env (dict[str, str]): Environment variables to be passed to the processing jobs (default: None).
            tags (list[dict]): List of tags to be passed to the processing job (default: None).
            network_config (smkit.network.NetworkConfig): A :class:`~smkit.network.NetworkConfig` object that
                configures network isolation, encryption of inter-container traffic, security group IDs, and
                subnets.
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

        self.jobs: List["ProcessingJob"] = []
        self.latest_job: Optional["ProcessingJob"] = None
        self._current_job_name: Optional[str] = None
        self.arguments: Optional[List[str]] = None

    def run(
        self,
        inputs: Optional[List["ProcessingInput"]] = None,
        outputs: Optional[List["ProcessingOutput"]] = None,
        arguments: Optional[List[str]] = None,
        wait: bool = True,
        logs: bool = True,
        job_name: Optional[str] = None,
        experiment_config: Optional[Dict[str, str]] = None,
    ):
        """Runs a processing job.

        Args:
            inputs (list[:class:`~smkit.processing.ProcessingInput`]): Input files for the processing job.
            outputs (list[:class:`~smkit.processing.ProcessingOutput`]): Outputs for the processing job.
            arguments (list[str]): A list of string arguments to be passed to a processing job (default: None).
            wait (bool): Whether the call should wait until the job completes (default: True).
            logs (bool): Whether to show the logs produced by the job. Only meaningful when ``wait`` is True
                (default: True).
            job_name (str): Processing job name. If not specified, the processor generates a default job name,
                based on the base job name and current timestamp.
            experiment_config (dict[str, str]): Experiment management configuration. Dictionary contains three
                optional keys: 'ExperimentName', 'TrialName', and 'TrialComponentDisplayName'.

        Raises:
            ValueError: if ``logs`` is True but ``wait`` is False.
        """
        if logs and not wait:
            raise ValueError(
                "Logs can only be shown if wait is set to True. Please either set wait to True or set logs to False."
            )

        self._current_job_name = self._generate_current_job_name(job_name=job_name)

        normalized_inputs = self._normalize_inputs(inputs)
        normalized_outputs = self._normalize_outputs(outputs)
        self.arguments = arguments

        self.latest_job = ProcessingJob.start_new(
            processor=self,
            inputs=normalized_inputs,
            outputs=normalized_outputs,
            experiment_config=experiment_config,
        )
        self.jobs.append(self.latest_job)
        if wait:
            self.latest_job.wait(logs=logs)

    def _generate_current_job_name(self, job_name: Optional[str] = None) -> str:
        if job_name is not None:
            return job_name
        # Honor supplied base_job_name or generate it.
        if self.base_job_name:
            base_name = self.base_job_name
        else:
            base_name = base_name_from_image(self.image_uri)

        return name_from_base(base_name)

    def _normalize_inputs(self, inputs: Optional[List["ProcessingInput"]] = None) -> List["ProcessingInput"]:
        """Ensure every input has a name and an S3 source, uploading local sources first."""
        normalized_inputs = []
        for count, file_input in enumerate(inputs or [], 1):
            if not isinstance(file_input, ProcessingInput):
                raise TypeError("Your inputs must be provided as ProcessingInput objects.")
            # Generate a name for the ProcessingInput if it doesn't have one.
            if file_input.input_name is None:
                file_input.input_name = f"input-{count}"
            # If the source is a local path, upload it to S3 and save the S3 uri in the ProcessingInput source.
            if urlparse(file_input.source).scheme != "s3":
                desired_s3_uri = s3_path_join(
                    "s3://",
                    self.sagemaker_session.default_bucket(),
                    self._current_job_name,
                    "input",
                    file_input.input_name,
                )
                file_input.source = S3Uploader.upload(
                    local_path=file_input.source,
                    desired_s3_uri=desired_s3_uri,
                    sagemaker_session=self.sagemaker_session,
                )
            normalized_inputs.append(file_input)
        return normalized_inputs

    def _normalize_outputs(self, outputs: Optional[List["ProcessingOutput"]] = None) -> List["ProcessingOutput"]:
        """Ensure every output has a name and an S3 destination."""
        normalized_outputs = []
        for count, output in enumerate(outputs or [], 1):
            if not isinstance(output, ProcessingOutput):
                raise TypeError("Your outputs must be provided as ProcessingOutput objects.")
            # Generate a name for the ProcessingOutput if it doesn't have one.
            if output.output_name is None:
                output.output_name = f"output-{count}"
            # If the output's destination is not an s3_uri, create one.
            if output.destination is None or urlparse(output.destination).scheme != "s3":
                output.destination = s3_path_join(
                    "s3://",
                    self.sagemaker_session.default_bucket(),
                    self._current_job_name,
                    "output",
                    output.output_name,
                )
            normalized_outputs.append(output)
        return normalized_outputs


class ProcessingJob(_Job):
    """Provides functionality to start, describe, and stop processing jobs."""

    def __init__(
        self,
        sagemaker_session: Session,
        job_name: str,
        inputs: Optional[List["ProcessingInput"]],
        outputs: Optional[List["ProcessingOutput"]],
        output_kms_key: Optional[str] = None,
    ):
        """Initializes a Processing job.

        Args:
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker and any other AWS services needed.
            job_name (str): Name of the Processing job.
            inputs (list[:class:`~smkit.processing.ProcessingInput`]): A list of :class:`~ProcessingInput`
                objects.
            outputs (list[:class:`~smkit.processing.ProcessingOutput`]): A list of :class:`~ProcessingOutput`
                objects.
            output_kms_key (str): The output KMS key associated with the job (default: None).
        """
        self.inputs = inputs
        self.outputs = outputs
        self.output_kms_key = output_kms_key
        super().__init__(sagemaker_session=sagemaker_session, job_name=job_name)

    @classmethod
    def start_new(
        cls,
        processor: Processor,
        inputs: List["ProcessingInput"],
        outputs: List["ProcessingOutput"],
        experiment_config: Optional[Dict[str, str]] = None,
    ) -> "ProcessingJob":
        """Starts a new processing job using the provided inputs and outputs.

        Args:
            processor (:class:`~smkit.processing.Processor`): The ``Processor`` instance that started the job.
            inputs (list[:class:`~smkit.processing.ProcessingInput`]): A list of normalized inputs.
            outputs (list[:class:`~smkit.processing.ProcessingOutput`]): A list of normalized outputs.
            experiment_config (dict[str, str]): Experiment management configuration.

        Returns:
            :class:`~smkit.processing.ProcessingJob`: The instance of ``ProcessingJob`` created using the
            ``Processor``.
        """
        process_args = cls._get_process_args(processor, inputs, outputs, experiment_config)
        processor.sagemaker_session.process(**process_args)
        return cls(processor.sagemaker_session, processor._current_job_name, inputs, outputs, processor.output_kms_key)

    @classmethod
    def _get_process_args(
        cls,
        processor: Processor,
        inputs: List["ProcessingInput"],
        outputs: List["ProcessingOutput"],
        experiment_config: Optional[Dict[str, str]],
    ) -> Dict[str, Any]:
        """Build the keyword arguments of :meth:`~smkit.session.Session.process`."""
        process_request_args: Dict[str, Any] = {}

        # Add arguments to the dictionary.
        process_request_args["inputs"] = [file_input._to_request_dict() for file_input in inputs]

        process_request_args["output_config"] = {"Outputs": [output._to_request_dict() for output in outputs]}
        if processor.output_kms_key is not None:
            process_request_args["output_config"]["KmsKeyId"] = processor.output_kms_key

        process_request_args["experiment_config"] = experiment_config
        process_request_args["job_name"] = processor._current_job_name

        process_request_args["resources"] = {
            "ClusterConfig": {
                "InstanceType": processor.instance_type,
                "InstanceCount": processor.instance_count,
                "VolumeSizeInGB": processor.volume_size_in_gb,
            }
        }

        if processor.volume_kms_key is not None:
            process_request_args["resources"]["ClusterConfig"]["VolumeKmsKeyId"] = processor.volume_kms_key

        if processor.max_runtime_in_seconds is not None:
            process_request_args["stopping_condition"] = {
                "MaxRuntimeInSeconds": processor.max_runtime_in_seconds
            }
        else:
            process_request_args["stopping_condition"] = None

        process_request_args["app_specification"] = {"ImageUri": processor.image_uri}
        if processor.arguments is not None:
            process_request_args["app_specification"]["ContainerArguments"] = processor.arguments
        if processor.entrypoint is not None:
            process_request_args["app_specification"]["ContainerEntrypoint"] = processor.entrypoint

        process_request_args["environment"] = processor.env

        if processor.network_config is not None:
            process_request_args["network_config"] = processor.network_config._to_request_dict()
        else:
            process_request_args["network_config"] = None

        process_request_args["role_arn"] = processor.sagemaker_session.expand_role(processor.role)

        process_request_args["tags"] = processor.tags

        return process_request_args

    @classmethod
    def from_processing_name(cls, sagemaker_session: Session, processing_job_name: str) -> "ProcessingJob":
        """Initializes a ``ProcessingJob`` from a processing job name.

        Args:
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker and any other AWS services needed.
            processing_job_name (str): Name of the processing job.

        Returns:
            :class:`~smkit.processing.ProcessingJob`: The instance of ``ProcessingJob`` created from the job
            name.
        """
        job_desc = sagemaker_session.describe_processing_job(job_name=processing_job_name)

        inputs = None
        if job_desc.get("ProcessingInputs"):
            inputs = [
                ProcessingInput(
                    source=processing_input["S3Input"]["S3Uri"],
                    destination=processing_input["S3Input"]["LocalPath"],
                    input_name=processing_input["InputName"],
                    s3_data_type=processing_input["S3Input"].get("S3DataType"),
                    s3_input_mode=processing_input["S3Input"].get("S3InputMode"),
                    s3_data_distribution_type=processing_input["S3Input"].get("S3DataDistributionType"),
                    s3_compression_type=processing_input["S3Input"].get("S3CompressionType"),
                )
                for processing_input in job_desc["ProcessingInputs"]
                if "S3Input" in processing_input
            ]

        outputs = None
        if job_desc.get("ProcessingOutputConfig") and job_desc["ProcessingOutputConfig"].get("Outputs"):
            outputs = [
                ProcessingOutput(
                    source=processing_output["S3Output"]["LocalPath"],
                    destination=processing_output["S3Output"]["S3Uri"],
                    output_name=processing_output["OutputName"],
                    s3_upload_mode=processing_output["S3Output"].get("S3UploadMode"),
                )
                for processing_output in job_desc["ProcessingOutputConfig"]["Outputs"]
                if "S3Output" in processing_output
            ]

        output_kms_key = None
        if job_desc.get("ProcessingOutputConfig"):
            output_kms_key = job_desc["ProcessingOutputConfig"].get("KmsKeyId")

        return cls(
            sagemaker_session=sagemaker_session,
            job_name=processing_job_name,
            inputs=inputs,
            outputs=outputs,
            output_kms_key=output_kms_key,
        )

    @classmethod
    def from_processing_arn(cls, sagemaker_session: Session, processing_job_arn: str) -> "ProcessingJob":
        """Initializes a ``ProcessingJob`` from a Processing ARN.

        Args:
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker and any other AWS services needed.
            processing_job_arn (str): ARN of the processing job, such as
                ``arn:aws:sagemaker:us-east-1:111122223333:processing-job/my-job``.

        Returns:
            :class:`~smkit.processing.ProcessingJob`: The instance of ``ProcessingJob`` created from the
            processing job's ARN.
        """
        processing_job_name = processing_job_arn.split(":")[5][len("processing-job/") :]
        return cls.from_processing_name(sagemaker_session=sagemaker_session, processing_job_name=processing_job_name)

    def wait(self, logs: bool = True):
        """Waits for the processing job to complete.

        Args:
            logs (bool): Whether to show the logs produced by the job (default: True).
        """
        if logs:
            self.sagemaker_session.logs_for_processing_job(self.job_name, wait=True)
        else:
            self.sagemaker_session.wait_for_processing_job(self.job_name)

    def describe(self) -> Dict[str, Any]:
        """Prints out a response from the DescribeProcessingJob API call."""
        return self.sagemaker_session.describe_processing_job(self.job_name)

    def stop(self):
        """Stops the processing job."""
        self.sagemaker_session.stop_processing_job(self.name)


class ProcessingInput(object):
    """Accepts parameters that specify an Amazon S3 input for a processing job.

    Also provides a method to turn those parameters into a dictionary.
    """

    def __init__(
        self,
        source: str,
        destination: str,
        input_name: Optional[str] = None,
        s3_data_type: str = "S3Prefix",
        s3_input_mode: str = "File",
        s3_data_distribution_type: str = "FullyReplicated",
        s3_compression_type: str = "None",
    ):
        """Initializes a ``ProcessingInput`` instance.

        Args:
            source (str): The source for the input. If a local path is provided, it will automatically be
                uploaded to S3 under: "s3://<default-bucket-name>/<job-name>/input/<input-name>".
            destination (str): The destination of the input.
            input_name (str): The name for the input. If a name is not provided, one will be generated (eg.
                "input-1").
            s3_data_type (str): Valid options are "ManifestFile" or "S3Prefix".
            s3_input_mode (str): Valid options are "Pipe" or "File".
            s3_data_distribution_type (str): Valid options are "FullyReplicated" or "ShardedByS3Key".
            s3_compression_type (str): Valid options are "None" or "Gzip".
        """
        self.source = source
        self.destination = destination
        self.input_name = input_name
        self.s3_data_type = s3_data_type
        self.s3_input_mode = s3_input_mode
        self.s3_data_distribution_type = s3_data_distribution_type
        self.s3_compression_type = s3_compression_type

    def _to_request_dict(self) -> Dict[str, Any]:
        """Generates a request dictionary using the parameters provided to the class."""
        s3_input_request: Dict[str, Any] = {
            "InputName": self.input_name,
            "S3Input": {
                "S3Uri": self.source,
                "LocalPath": self.destination,
                "S3DataType": self.s3_data_type,
                "S3InputMode": self.s3_input_mode,
                "S3DataDistributionType": self.s3_data_distribution_type,
            },
        }

        # Check the compression type, then add it to the dictionary.
        if self.s3_compression_type == "Gzip" and self.s3_input_mode != "Pipe":
            raise ValueError("Data can only be gzipped when the input mode is Pipe.")
        if self.s3_compression_type is not None:
            s3_input_request["S3Input"]["S3CompressionType"] = self.s3_compression_type

        # Return the request dictionary.
        return s3_input_request


class ProcessingOutput(object):
    """Accepts parameters that specify an Amazon S3 output for a processing job.

    It also provides a method to turn those parameters into a dictionary.
    """

    def __init__(
        self,
        source: str,
        destination: Optional[str] = None,
        output_name: Optional[str] = None,
        s3_upload_mode: str = "EndOfJob",
    ):
        """Initializes a ``ProcessingOutput`` instance.

        Args:
            source (str): The source for the output.
            destination (str): The destination of the output. If a destination is not provided, one will be
                generated: "s3://<default-bucket-name>/<job-name>/output/<output-name>".
            output_name (str): The name of the output. If a name is not provided, one will be generated (eg.
                "output-1").
            s3_upload_mode (str): Valid options are "EndOfJob" or "Continuous".
        """
        self.source = source
        self.destination = destination
        self.output_name = output_name
        self.s3_upload_mode = s3_upload_mode

    def _to_request_dict(self) -> Dict[str, Any]:
        """Generates a request dictionary using the parameters provided to the class."""
        return {
            "OutputName": self.output_name,
            "S3Output": {
                "S3Uri": self.destination,
                "LocalPath": self.source,
                "S3UploadMode": self.s3_upload_mode,
            },
        }
