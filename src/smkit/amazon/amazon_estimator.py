"""Base estimator of the first-party algorithms, trained on RecordIO-protobuf record sets."""
import io
import json
import logging
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .. import image_uris
from ..estimator import EstimatorBase, _TrainingJob
from ..inputs import FileSystemInput, TrainingInput
from ..s3 import parse_s3_url
from ..utils import sagemaker_timestamp
from . import validation
from .common import write_numpy_to_dense_tensor
from .hyperparameter import Hyperparameter as hp  # noqa: N813

logger = logging.getLogger(__name__)


class AmazonAlgorithmEstimatorBase(EstimatorBase):
    """Base class for Amazon first-party Estimator implementations.

    This class isn't intended to be instantiated directly.
    """

    feature_dim = hp("feature_dim", validation.gt(0), data_type=int)
    mini_batch_size = hp("mini_batch_size", validation.gt(0), data_type=int)
    repo_name: Optional[str] = None
    repo_version: Optional[str] = None

    def __init__(
        self,
        role: str,
        instance_count: Optional[int] = None,
        instance_type: Optional[str] = None,
        data_location: Optional[str] = None,
        enable_network_isolation: bool = False,
        **kwargs,
    ):
        """Initialize an AmazonAlgorithmEstimatorBase.

        Args:
            role (str): An AWS IAM role (either name or full ARN).
            instance_count (int): Number of Amazon EC2 instances to use for training. Required.
            instance_type (str): Type of EC2 instance to use for training, for example, 'ml.c4.xlarge'. Required.
            data_location (str or None): The s3 prefix to upload RecordSet objects to, expressed as an S3 url.
                For example "s3://example-bucket/some-key-prefix/". Objects will be saved in a unique
                sub-directory of the specified location. If None, a default data location will be used.
            enable_network_isolation (bool): Specifies whether container will run in network isolation mode.
                Network isolation mode restricts the container access to outside networks (such as the
                internet). Also known as internet-free mode (default: ``False``).
            **kwargs: Additional parameters passed to :class:`~smkit.estimator.EstimatorBase`.

        Raises:
            ValueError: If ``data_location`` is not in a valid S3 URL format.
        """
        super().__init__(
            role, instance_count, instance_type, enable_network_isolation=enable_network_isolation, **kwargs
        )

        data_location = data_location or f"s3://{self.sagemaker_session.default_bucket()}/sagemaker-record-sets/"
        self.data_location = data_location

    def training_image_uri(self) -> str:
        """The first-party algorithm image in the session's region."""
        return image_uris.retrieve(
            self.repo_name, self.sagemaker_session.boto_region_name, version=self.repo_version
        )

    def hyperparameters(self) -> Dict[str, str]:
        """Return all non-None hyperparameter values as strings, ready for the training request."""
        return hp.serialize_all(self)

    @property
    def data_location(self) -> str:
        """The S3 prefix record sets are uploaded under, always ending with ``/``."""
        return self._data_location

    @data_location.setter
    def data_location(self, data_location: str):
        if not data_location.startswith("s3://"):
            raise ValueError(f'Expecting an S3 URL beginning with "s3://". Got "{data_location}"')
        if data_location[-1] != "/":
            data_location = data_location + "/"
        self._data_location = data_location

    @classmethod
    def _prepare_init_params_from_job_description(
        cls, job_details: Dict[str, Any], model_channel_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """Convert the job description to init params that can be handled by the class constructor.

        Args:
            job_details: the returned job details from a describe_training_job API call.
            model_channel_name (str): Name of the channel where pre-trained model data will be downloaded.

        Returns:
            dictionary: The transformed init_params
        """
        init_params = super()._prepare_init_params_from_job_description(job_details, model_channel_name)

        # The hyperparam names may not be the same as the class attribute that holds them,
        # for instance: local_lloyd_init_method is called local_init_method. We need to map these
        # and pass the correct name to the constructor.
        # feature_dim and mini_batch_size are set by fit(), never by the constructor.
        for attribute, value in cls.__dict__.items():
            if attribute in ("feature_dim", "mini_batch_size"):
                continue
            if isinstance(value, hp) and value.name in init_params["hyperparameters"]:
                init_params[attribute] = init_params["hyperparameters"][value.name]

        del init_params["hyperparameters"]
        init_params.pop("image_uri", None)
        return init_params

    def prepare_workflow_for_training(
        self,
        records: Optional[Union["RecordSet", List["RecordSet"]]] = None,
        mini_batch_size: Optional[int] = None,
        job_name: Optional[str] = None,
    ):
        """Calls _prepare_for_training. Used when setting up a workflow."""
        self._prepare_for_training(records=records, mini_batch_size=mini_batch_size, job_name=job_name)

    def _prepare_for_training(self, records=None, mini_batch_size=None, job_name=None):
        """Set hyperparameters needed for training.

        Args:
            records (RecordSet): The records to train this ``Estimator`` on.
            mini_batch_size (int or None): The size of each mini-batch to use when training. If ``None``, a
                default value will be used.
            job_name (str): Name of the training job to be created. If not specified, one is generated, using
                the base name given to the constructor if applicable.

        Raises:
            ValueError: if a list of record sets has no ``train`` channel.
        """
        super()._prepare_for_training(job_name=job_name)

        feature_dim = None

        if isinstance(records, list):
            for record in records:
                if record.channel == "train":
                    feature_dim = record.feature_dim
                    break
            if feature_dim is None:
                raise ValueError("Must provide train channel.")
        elif records is not None:
            feature_dim = records.feature_dim

        self.feature_dim = feature_dim
        self.mini_batch_size = mini_batch_size

    def fit(
        self,
        records: Union["RecordSet", "FileSystemRecordSet", List[Union["RecordSet", "FileSystemRecordSet"]]],
        mini_batch_size: Optional[int] = None,
        wait: bool = True,
        logs: Union[str, bool] = True,
        job_name: Optional[str] = None,
        experiment_config: Optional[Dict[str, str]] = None,
    ):
        """Fit this Estimator on serialized Record objects, stored in S3.

        ``records`` should be an instance of :class:`~RecordSet`. This defines a collection of S3 data files
        to train this ``Estimator`` on.

        Training data is expected to be encoded as dense or sparse vectors in the "values" feature on each
        Record. If the data is labeled, the label is expected to be encoded as a list of scalas in the "values"
        feature of the Record label.

        More information on the Amazon Record format is available at:
        https://docs.aws.amazon.com/sagemaker/latest/dg/cdf-training.html

        See :meth:`~AmazonAlgorithmEstimatorBase.record_set` to construct a ``RecordSet`` object from
        :class:`~numpy.ndarray` arrays.

        Args:
            records (:class:`~RecordSet`): The records to train this ``Estimator`` on
            mini_batch_size (int or None): The size of each mini-batch to use when training. If ``None``, a
                default value will be used.
            wait (bool): Whether the call should wait until the job completes (default: True).
            logs (bool): Whether to show the logs produced by the job. Only meaningful when wait is True
                (default: True).
            job_name (str): Training job name. If not specified, the estimator generates a default job name,
                based on the training image name and current timestamp.
            experiment_config (dict[str, str]): Experiment management configuration. Dictionary contains three
                optional keys, 'ExperimentName', 'TrialName', and 'TrialComponentDisplayName'.
        """
        self._prepare_for_training(records, job_name=job_name, mini_batch_size=mini_batch_size)

        self.latest_training_job = _TrainingJob.start_new(self, records, experiment_config)
        self.jobs.append(self.latest_training_job)
        if wait:
            self.latest_training_job.wait(logs=logs)

    def record_set(
        self, train: np.ndarray, labels: Optional[np.ndarray] = None, channel: str = "train", encrypt: bool = False
    ) -> "RecordSet":
        """Build a :class:`~RecordSet` from a numpy :class:`~ndarray` matrix and label vector.

        For the 2D ``ndarray`` ``train``, each row is converted to a :class:`~Record` object. The vector is
        stored in the "values" entry of the ``features`` property of each Record. If ``labels`` is not None,
        each corresponding label is assigned to the "values" entry of the ``labels`` property of each Record.

        The collection of ``Record`` objects are protobuf serialized and uploaded to new S3 locations. A
        manifest file is generated containing the list of objects created and also stored in S3.

        The number of S3 objects created is controlled by the ``instance_count`` property on this Estimator.
        One S3 object is created per training instance.

        Args:
            train (numpy.ndarray): A 2D numpy array of training data.
            labels (numpy.ndarray): A 1D numpy array of labels. Its length must be equal to the number of rows
                in ``train``.
            channel (str): The SageMaker TrainingJob channel this RecordSet should be assigned to.
            encrypt (bool): Specifies whether the objects uploaded to S3 are encrypted on the server side using
                AES-256 (default: ``False``).

        Returns:
            RecordSet: A RecordSet referencing the encoded, uploading training and label data.
        """
        bucket, key_prefix = parse_s3_url(self.data_location)
        key_prefix = key_prefix + f"{type(self).__name__}-{sagemaker_timestamp()}/"
        key_prefix = key_prefix.lstrip("/")
        logger.debug("Uploading to bucket %s and key_prefix %s", bucket, key_prefix)
        manifest_s3_file = upload_numpy_to_s3_shards(
            self.instance_count, self.sagemaker_session.fs, bucket, key_prefix, train, labels, encrypt
        )
        logger.debug("Created manifest file %s", manifest_s3_file)
        return RecordSet(
            manifest_s3_file,
            num_records=train.shape[0],
            feature_dim=train.shape[1],
            channel=channel,
        )


class RecordSet(object):
    """Training data serialized as Amazon Records, stored in S3 and listed by a manifest or prefix."""

    def __init__(
        self,
        s3_data: str,
        num_records: int,
        feature_dim: int,
        s3_data_type: str = "ManifestFile",
        channel: str = "train",
    ):
        """A collection of Amazon :class:~`Record` objects serialized and stored in S3.

        Args:
            s3_data (str): The S3 location of the training data
            num_records (int): The number of records in the set.
            feature_dim (int): The dimensionality of "values" arrays in the Record features, and label (if each
                Record is labeled).
            s3_data_type (str): Valid values: 'S3Prefix', 'ManifestFile'. If 'S3Prefix', ``s3_data`` defines a
                prefix of s3 objects to train on. All objects with s3 keys beginning with ``s3_data`` will be
                used to train. If 'ManifestFile', then ``s3_data`` defines a single s3 manifest file, listing
                each s3 object to train on.
            channel (str): The SageMaker Training Job channel this RecordSet should be bound to
        """
        self.s3_data = s3_data
        self.feature_dim = feature_dim
        self.num_records = num_records
        self.s3_data_type = s3_data_type
        self.channel = channel

    def __repr__(self):
        """Return an unambiguous representation of this RecordSet"""
        return str((RecordSet, self.__dict__))

    def data_channel(self) -> Dict[str, TrainingInput]:
        """Returns a dictionary to represent the training data in a channel for use with ``fit()``."""
        return {self.channel: self.records_s3_input()}

    def records_s3_input(self) -> TrainingInput:
        """Return a TrainingInput to represent the training data"""
        return TrainingInput(self.s3_data, distribution="ShardedByS3Key", s3_data_type=self.s3_data_type)


class FileSystemRecordSet(object):
    """Amazon SageMaker channel configuration for a file system data source for Amazon algorithms."""

    def __init__(
        self,
        file_system_id: str,
        file_system_type: str,
        directory_path: str,
        num_records: int,
        feature_dim: int,
        file_system_access_mode: str = "ro",
        channel: str = "train",
    ):
        """Initialize a ``FileSystemRecordSet`` object.

        Args:
            file_system_id (str): An Amazon file system ID starting with 'fs-'.
            file_system_type (str): The type of file system used for the input. Valid values: 'EFS', 'FSxLustre'.
            directory_path (str): Absolute or normalized path to the root directory (mount point) in the file
                system. Reference: https://docs.aws.amazon.com/efs/latest/ug/mounting-fs.html and
                https://docs.aws.amazon.com/fsx/latest/LustreGuide/mount-fs-auto-mount-onreboot.html
            num_records (int): The number of records in the set.
            feature_dim (int): The dimensionality of "values" arrays in the Record features, and label (if each
                Record is labeled).
            file_system_access_mode (str): Permissions for read and write. Valid values: 'ro' or 'rw'. Defaults
                to 'ro'.
            channel (str): The SageMaker Training Job channel this RecordSet should be bound to
        """
        self.file_system_input = FileSystemInput(
            file_system_id, file_system_type, directory_path, file_system_access_mode
        )
        self.feature_dim = feature_dim
        self.num_records = num_records
        self.channel = channel

    def __repr__(self):
        """Return an unambiguous representation of this RecordSet"""
        return str((FileSystemRecordSet, self.__dict__))

    def data_channel(self) -> Dict[str, FileSystemInput]:
        """Return a dictionary to represent the training data in a channel for use with ``fit()``"""
        return {self.channel: self.file_system_input}


def _build_shards(num_shards: int, array: np.ndarray) -> List[np.ndarray]:
    if num_shards < 1:
        raise ValueError("num_shards must be >= 1")
    shard_size = int(array.shape[0] / num_shards)
    if shard_size == 0:
        raise ValueError("Array length is less than num shards")
    shards = [array[i * shard_size : i * shard_size + shard_size] for i in range(num_shards - 1)]
    shards.append(array[(num_shards - 1) * shard_size :])
    return shards


def upload_numpy_to_s3_shards(
    num_shards: int,
    fs,
    bucket: str,
    key_prefix: str,
    array: np.ndarray,
    labels: Optional[np.ndarray] = None,
    encrypt: bool = False,
) -> str:
    """Upload the training ``array`` and ``labels`` arrays to ``num_shards`` S3 objects.

    The objects are stored in "s3://``bucket``/``key_prefix``/" as ``matrix_{i}.pbr``, next to a manifest
    file ``.amazon.manifest`` listing them. On failure, the shards already uploaded are removed.

    Args:
        num_shards (int): Number of shards, usually the training instance count.
        fs (s3fs.S3FileSystem): File system to write the objects with.
        bucket (str): Destination bucket.
        key_prefix (str): Destination key prefix.
        array (numpy.ndarray): 2D training data.
        labels (numpy.ndarray): Optional labels, one per row of ``array``.
        encrypt (bool): Whether to request AES-256 server-side encryption.

    Returns:
        str: The S3 URI of the manifest file.
    """
    shards = _build_shards(num_shards, array)
    label_shards = None
    if labels is not None:
        label_shards = _build_shards(num_shards, labels)
    uploaded_files = []
    if key_prefix[-1] != "/":
        key_prefix = key_prefix + "/"
    extra_put_kw = {"ServerSideEncryption": "AES256"} if encrypt else {}
    try:
        for shard_index, shard in enumerate(shards):
            buffer = io.BytesIO()
            if label_shards is not None:
                write_numpy_to_dense_tensor(buffer, shard, label_shards[shard_index])
            else:
                write_numpy_to_dense_tensor(buffer, shard)
            shard_index_string = str(shard_index).zfill(len(str(len(shards))))
            file_name = f"matrix_{shard_index_string}.pbr"
            key = key_prefix + file_name
            logger.debug("Creating object %s in bucket %s", key, bucket)
            fs.pipe_file(f"{bucket}/{key}", buffer.getvalue(), **extra_put_kw)
            uploaded_files.append(file_name)
        manifest_key = key_prefix + ".amazon.manifest"
        manifest_str = json.dumps([{"prefix": f"s3://{bucket}/{key_prefix}"}] + uploaded_files)
        fs.pipe_file(f"{bucket}/{manifest_key}", manifest_str.encode("utf-8"), **extra_put_kw)
        return f"s3://{bucket}/{manifest_key}"
    except Exception:
        for file_name in uploaded_files:
            fs.rm(f"{bucket}/{key_prefix}{file_name}")
        raise
