"""Channel definitions for training jobs."""
from typing import Any, Dict, List, Optional

FILE_SYSTEM_TYPES = ["FSxLustre", "EFS"]
FILE_SYSTEM_ACCESS_MODES = ["ro", "rw"]


class TrainingInput(object):
    """An S3 data source of a training channel.

    ``config`` holds the ``Channel`` request structure, without the channel name.
    """

    def __init__(
        self,
        s3_data: str,
        distribution: Optional[str] = None,
        compression: Optional[str] = None,
        content_type: Optional[str] = None,
        record_wrapping: Optional[str] = None,
        s3_data_type: str = "S3Prefix",
        input_mode: Optional[str] = None,
        attribute_names: Optional[List[str]] = None,
        target_attribute_name: Optional[str] = None,
        shuffle_config: Optional[int] = None,
    ):
        """Create a definition for input data used by a SageMaker training job.

        Args:
            s3_data (str): Defines the location of S3 data to train on.
            distribution (str): Valid values: 'FullyReplicated', 'ShardedByS3Key' (default: 'FullyReplicated').
            compression (str): Valid values: 'Gzip', None (default: None).
            content_type (str): MIME type of the input data (default: None).
            record_wrapping (str): Valid values: 'RecordIO' (default: None).
            s3_data_type (str): Valid values: 'S3Prefix', 'ManifestFile', 'AugmentedManifestFile'.
            input_mode (str): Optional override for this channel's input mode ('File', 'Pipe', 'FastFile').
            attribute_names (list[str]): A list of one or more attribute names to use that are found in a
                specified AugmentedManifestFile.
            target_attribute_name (str): The name of the attribute will be predicted (classified) in a
                SageMaker AutoML job.
            shuffle_config (int): Seed of the shuffle applied to the S3 keys of the channel in Pipe mode.
        """
        self.config: Dict[str, Any] = {
            "DataSource": {"S3DataSource": {"S3DataType": s3_data_type, "S3Uri": s3_data}}
        }

        if not (target_attribute_name or distribution):
            distribution = "FullyReplicated"

        if distribution is not None:
            self.config["DataSource"]["S3DataSource"]["S3DataDistributionType"] = distribution

        if compression is not None:
            self.config["CompressionType"] = compression
        if content_type is not None:
            self.config["ContentType"] = content_type
        if record_wrapping is not None:
            self.config["RecordWrapperType"] = record_wrapping
        if input_mode is not None:
            self.config["InputMode"] = input_mode
        if attribute_names is not None:
            self.config["DataSource"]["S3DataSource"]["AttributeNames"] = attribute_names
        if target_attribute_name is not None:
            self.config["TargetAttributeName"] = target_attribute_name
        if shuffle_config is not None:
            self.config["ShuffleConfig"] = {"Seed": shuffle_config}


class FileSystemInput(object):
    """An EFS or FSx for Lustre data source of a training channel."""

    def __init__(
        self,
        file_system_id: str,
        file_system_type: str,
        directory_path: str,
        file_system_access_mode: str = "ro",
        content_type: Optional[str] = None,
    ):
        """Create a new file system input used by a SageMaker training job.

        Args:
            file_system_id (str): An Amazon file system ID starting with 'fs-'.
            file_system_type (str): The type of file system used for the input. Valid values: 'EFS', 'FSxLustre'.
            directory_path (str): Absolute or normalized path to the root directory (mount point) in the file
                system. Reference: https://docs.aws.amazon.com/efs/latest/ug/mounting-fs.html and
                https://docs.aws.amazon.com/fsx/latest/LustreGuide/mount-fs-auto-mount-onreboot.html
            file_system_access_mode (str): Permissions for read and write. Valid values: 'ro' or 'rw'.
                Defaults to 'ro'.
            content_type (str): MIME type of the input data.

        Raises:
            ValueError: on an unrecognized file system type or access mode.
        """
        if file_system_type not in FILE_SYSTEM_TYPES:
            raise ValueError(
                f"Unrecognized file system type: {file_system_type}. Valid values: {', '.join(FILE_SYSTEM_TYPES)}."
            )

        if file_system_access_mode not in FILE_SYSTEM_ACCESS_MODES:
            raise ValueError(
                f"Unrecognized file system access mode: {file_system_access_mode}. "
                f"Valid values: {', '.join(FILE_SYSTEM_ACCESS_MODES)}."
            )

        self.config: Dict[str, Any] = {
            "DataSource": {
                "FileSystemDataSource": {
                    "FileSystemId": file_system_id,
                    "FileSystemType": file_system_type,
                    "DirectoryPath": directory_path,
                    "FileSystemAccessMode": file_system_access_mode,
                }
            }
        }

        if content_type:
            self.config["ContentType"] = content_type
