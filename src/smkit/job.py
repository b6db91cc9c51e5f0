"""Request-building helpers shared by training jobs and tuning jobs."""
from abc import ABCMeta, abstractmethod
from typing import Any, Dict, List, Optional

from .inputs import FileSystemInput, TrainingInput


class _Job(object, metaclass=ABCMeta):
    """Handle creating, starting and waiting for Amazon SageMaker jobs to finish.

    Subclasses implement the job-type specific operations on top of the shared channel, output, resource, and
    stop-condition helpers below.
    """

    def __init__(self, sagemaker_session, job_name: str):
        self.sagemaker_session = sagemaker_session
        self.job_name = job_name

    @abstractmethod
    def start_new(self, estimator, inputs):
        """Create a new Amazon SageMaker job from the estimator."""

    @abstractmethod
    def wait(self):
        """Wait for the Amazon SageMaker job to finish."""

    @abstractmethod
    def describe(self):
        """Describe the job."""

    @abstractmethod
    def stop(self):
        """Stop the job."""

    @staticmethod
    def _load_config(inputs, estimator, expand_role: bool = True, validate_uri: bool = True) -> Dict[str, Any]:
        """Gather the request pieces common to training and tuning jobs from an estimator."""
        input_config = _Job._format_inputs_to_input_config(inputs, validate_uri)
        role = estimator.sagemaker_session.expand_role(estimator.role) if expand_role else estimator.role
        output_config = _Job._prepare_output_config(estimator.output_path, estimator.output_kms_key)
        resource_config = _Job._prepare_resource_config(
            estimator.instance_count,
            estimator.instance_type,
            estimator.volume_size,
            estimator.volume_kms_key,
        )
        stop_condition = _Job._prepare_stop_condition(estimator.max_run, estimator.max_wait)
        vpc_config = estimator.get_vpc_config()

        model_channel = _Job._prepare_channel(
            input_config,
            estimator.model_uri,
            estimator.model_channel_name,
            validate_uri,
            content_type="application/x-sagemaker-model",
            input_mode="File",
        )

        if model_channel:
            input_config = [] if input_config is None else input_config
            input_config.append(model_channel)

        return {
            "input_config": input_config,
            "role": role,
            "output_config": output_config,
            "resource_config": resource_config,
            "stop_condition": stop_condition,
            "vpc_config": vpc_config,
        }

    @staticmethod
    def _format_inputs_to_input_config(inputs, validate_uri: bool = True) -> Optional[List[Dict[str, Any]]]:
        """Convert the ``inputs`` accepted by ``fit()`` into a list of ``Channel`` requests.

        ``inputs`` may be an S3 URI string, a :class:`~smkit.inputs.TrainingInput`, a
        :class:`~smkit.inputs.FileSystemInput` (all used as the ``training`` channel), a ``RecordSet`` or
        ``FileSystemRecordSet``, a list of record sets, or a dict of channel name to any of the single-channel
        forms.
        """
        if inputs is None:
            return None

        # Deferred import due to circular dependency
        from .amazon.amazon_estimator import FileSystemRecordSet, RecordSet

        if isinstance(inputs, (RecordSet, FileSystemRecordSet)):
            inputs = inputs.data_channel()

        input_dict: Dict[str, Any] = {}
        if isinstance(inputs, str):
            input_dict["training"] = _Job._format_string_uri_input(inputs, validate_uri)
        elif isinstance(inputs, (TrainingInput, FileSystemInput)):
            input_dict["training"] = inputs
        elif isinstance(inputs, dict):
            for k, v in inputs.items():
                input_dict[k] = _Job._format_string_uri_input(v, validate_uri)
        elif isinstance(inputs, list):
            input_dict = _Job._format_record_set_list_input(inputs)
        else:
            msg = "Cannot format input {}. Expecting one of str, dict, TrainingInput or FileSystemInput"
            raise ValueError(msg.format(inputs))

        channels = [_Job._convert_input_to_channel(name, input) for name, input in input_dict.items()]
        return channels

    @staticmethod
    def _convert_input_to_channel(channel_name: str, channel_s3_input) -> Dict[str, Any]:
        channel_config = channel_s3_input.config.copy()
        channel_config["ChannelName"] = channel_name
        return channel_config

    @staticmethod
    def _format_string_uri_input(
        uri_input,
        validate_uri: bool = True,
        content_type: Optional[str] = None,
        input_mode: Optional[str] = None,
        compression: Optional[str] = None,
        target_attribute_name: Optional[str] = None,
    ):
        if isinstance(uri_input, str) and validate_uri and uri_input.startswith("s3://"):
            return TrainingInput(
                uri_input,
                content_type=content_type,
                input_mode=input_mode,
                compression=compression,
                target_attribute_name=target_attribute_name,
            )
        if isinstance(uri_input, str) and validate_uri and uri_input.startswith("file://"):
            raise ValueError(f"Local mode is not supported, cannot use {uri_input}")
        if isinstance(uri_input, str) and validate_uri:
            raise ValueError(f'URI input {uri_input} must be a valid S3 URI: must start with "s3://"')
        if isinstance(uri_input, str):
            return TrainingInput(
                uri_input,
                content_type=content_type,
                input_mode=input_mode,
                compression=compression,
                target_attribute_name=target_attribute_name,
            )
        if isinstance(uri_input, (TrainingInput, FileSystemInput)):
            return uri_input

        raise ValueError(f"Cannot format input {uri_input}. Expecting one of str, TrainingInput or FileSystemInput")

    @staticmethod
    def _prepare_channel(
        input_config: Optional[List[Dict[str, Any]]],
        channel_uri: Optional[str] = None,
        channel_name: Optional[str] = None,
        validate_uri: bool = True,
        content_type: Optional[str] = None,
        input_mode: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        if not channel_uri:
            return None
        if not channel_name:
            raise ValueError(f"Expected a channel name if a channel URI {channel_uri} is specified")

        if input_config:
            for existing_channel in input_config:
                if existing_channel["ChannelName"] == channel_name:
                    raise ValueError(f"Duplicate channel {channel_name} not allowed.")

        channel_input = _Job._format_string_uri_input(channel_uri, validate_uri, content_type, input_mode)
        return _Job._convert_input_to_channel(channel_name, channel_input)

    @staticmethod
    def _format_record_set_list_input(inputs: List[Any]) -> Dict[str, Any]:
        # Deferred import due to circular dependency
        from .amazon.amazon_estimator import FileSystemRecordSet, RecordSet

        input_dict: Dict[str, Any] = {}
        for record in inputs:
            if not isinstance(record, (RecordSet, FileSystemRecordSet)):
                raise ValueError("List compatible only with RecordSets or FileSystemRecordSets.")

            if record.channel in input_dict:
                raise ValueError("Duplicate channels not allowed.")

            if isinstance(record, RecordSet):
                input_dict[record.channel] = record.records_s3_input()
            else:
                input_dict[record.channel] = record.file_system_input

        return input_dict

    @staticmethod
    def _prepare_output_config(s3_path: str, kms_key_id: Optional[str]) -> Dict[str, str]:
        config = {"S3OutputPath": s3_path}
        if kms_key_id is not None:
            config["KmsKeyId"] = kms_key_id
        return config

    @staticmethod
    def _prepare_resource_config(
        instance_count: int, instance_type: str, volume_size: int, volume_kms_key: Optional[str]
    ) -> Dict[str, Any]:
        resource_config: Dict[str, Any] = {
            "InstanceCount": instance_count,
            "InstanceType": instance_type,
            "VolumeSizeInGB": volume_size,
        }
        if volume_kms_key is not None:
            resource_config["VolumeKmsKeyId"] = volume_kms_key
        return resource_config

    @staticmethod
    def _prepare_stop_condition(max_run: int, max_wait: Optional[int]) -> Dict[str, int]:
        if max_wait:
            return {"MaxRuntimeInSeconds": max_run, "MaxWaitTimeInSeconds": max_wait}
        return {"MaxRuntimeInSeconds": max_run}

    @property
    def name(self) -> str:
        return self.job_name
