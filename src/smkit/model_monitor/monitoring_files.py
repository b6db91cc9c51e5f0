"""Statistics, constraints, and constraint violations files written by model monitoring jobs."""
import json
import logging
import os
import uuid
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from ..exceptions import MissingFileError
from ..s3 import S3Downloader, S3Uploader, s3_path_join
from ..session import Session

NO_SUCH_KEY_CODE = "NoSuchKey"

logger = logging.getLogger(__name__)


def _read_monitoring_file(s3_uri: str, kind: str, sagemaker_session: Optional[Session]) -> Dict[str, Any]:
    """Load a JSON monitoring file, raising ``MissingFileError`` when the S3 object does not exist."""
    try:
        body = S3Downloader.read_file(s3_uri=s3_uri, sagemaker_session=sagemaker_session)
    except FileNotFoundError as e:
        raise MissingFileError(f"No {kind} file at {s3_uri}") from e
    except ClientError as e:
        if e.response["Error"]["Code"] not in (NO_SUCH_KEY_CODE, "404"):
            raise
        logger.error(
            "Could not retrieve %s file at location '%s'. To manually retrieve the %s object from a given uri, "
            "use '%s.from_s3_uri(my_s3_uri)'.",
            kind,
            s3_uri,
            kind,
            kind.title().replace(" ", ""),
        )
        raise MissingFileError(f"No {kind} file at {s3_uri}") from e
    return json.loads(body)


def _upload_monitoring_file(
    body: str, file_name: str, kms_key: Optional[str], sagemaker_session: Optional[Session]
) -> str:
    """Upload ``body`` under a unique ``monitoring/`` prefix of the default bucket."""
    sagemaker_session = sagemaker_session or Session()
    desired_s3_uri = s3_path_join(
        "s3://", sagemaker_session.default_bucket(), "monitoring", str(uuid.uuid4()), file_name
    )
    return S3Uploader.upload_string_as_file_body(
        body=body, desired_s3_uri=desired_s3_uri, kms_key=kms_key, sagemaker_session=sagemaker_session
    )


def _read_local_file(file_path: str) -> str:
    with open(file_path, "r") as f:
        return f.read()


class ModelMonitoringFile(object):
    """Represents a file with a body and an S3 uri."""

    def __init__(
        self,
        body_dict: Dict[str, Any],
        file_s3_uri: Optional[str],
        kms_key: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ):
        """Initializes a file with a body and an S3 uri.

        Args:
            body_dict (dict): The body of the file.
            file_s3_uri (str): The uri of the file.
            kms_key (str): The kms key to be used to encrypt the file in S3.
            sagemaker_session (smkit.session.Session): A SageMaker Session object, used for SageMaker
                interactions (default: None). If not specified, one is created using the default AWS
                configuration chain.
        """
        self.body_dict = body_dict
        self.file_s3_uri = file_s3_uri
        self.kms_key = kms_key
        self.session = sagemaker_session or Session()

    def save(self, new_save_location_s3_uri: Optional[str] = None) -> str:
        """Save the current instance's body to s3 using the instance's s3 path.

        The S3 path can be overridden by providing one. This also overrides the default save location for this
        object.

        Args:
            new_save_location_s3_uri (str): Optional. The S3 path to save the file to. If not provided, the
                file is saved in place in S3. If provided, the file's S3 path is permanently updated.

        Returns:
            str: The s3 location to which the file was saved.
        """
        if new_save_location_s3_uri is not None:
            self.file_s3_uri = new_save_location_s3_uri

        return S3Uploader.upload_string_as_file_body(
            body=json.dumps(self.body_dict),
            desired_s3_uri=self.file_s3_uri,
            kms_key=self.kms_key,
            sagemaker_session=self.session,
        )

    def __repr__(self):
        return f"<{type(self).__name__}: {self.file_s3_uri}>"


class Statistics(ModelMonitoringFile):
    """Represents the statistics JSON file used in Amazon SageMaker Model Monitoring."""

    def __init__(
        self,
        body_dict: Dict[str, Any],
        statistics_file_s3_uri: Optional[str],
        kms_key: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ):
        super().__init__(
            body_dict=body_dict,
            file_s3_uri=statistics_file_s3_uri,
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def from_s3_uri(
        cls, statistics_file_s3_uri: str, kms_key: Optional[str] = None, sagemaker_session: Optional[Session] = None
    ) -> "Statistics":
        """Generates a Statistics object from an s3 uri.

        Args:
            statistics_file_s3_uri (str): The uri of the statistics JSON file.
            kms_key (str): The kms key to be used to decrypt the file in S3.
            sagemaker_session (smkit.session.Session): A SageMaker Session object.

        Returns:
            smkit.model_monitor.Statistics: The instance of Statistics generated from the s3 uri.

        Raises:
            MissingFileError: if there is no statistics file at ``statistics_file_s3_uri``.
        """
        body_dict = _read_monitoring_file(statistics_file_s3_uri, "statistics", sagemaker_session)
        return cls(
            body_dict=body_dict,
            statistics_file_s3_uri=statistics_file_s3_uri,
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def from_string(
        cls,
        statistics_file_string: str,
        kms_key: Optional[str] = None,
        file_name: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> "Statistics":
        """Generates a Statistics object from a JSON string, uploading it to the default bucket first."""
        sagemaker_session = sagemaker_session or Session()
        s3_uri = _upload_monitoring_file(
            statistics_file_string, file_name or "statistics.json", kms_key, sagemaker_session
        )
        return cls.from_s3_uri(statistics_file_s3_uri=s3_uri, kms_key=kms_key, sagemaker_session=sagemaker_session)

    @classmethod
    def from_file_path(
        cls, statistics_file_path: str, kms_key: Optional[str] = None, sagemaker_session: Optional[Session] = None
    ) -> "Statistics":
        """Initializes a Statistics object from a file path."""
        return cls.from_string(
            statistics_file_string=_read_local_file(statistics_file_path),
            file_name=os.path.basename(statistics_file_path),
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )


class Constraints(ModelMonitoringFile):
    """Represents the constraints JSON file used in Amazon SageMaker Model Monitoring."""

    def __init__(
        self,
        body_dict: Dict[str, Any],
        constraints_file_s3_uri: Optional[str],
        kms_key: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ):
        super().__init__(
            body_dict=body_dict,
            file_s3_uri=constraints_file_s3_uri,
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def from_s3_uri(
        cls, constraints_file_s3_uri: str, kms_key: Optional[str] = None, sagemaker_session: Optional[Session] = None
    ) -> "Constraints":
        """Generates a Constraints object from an s3 uri.

        Raises:
            MissingFileError: if there is no constraints file at ``constraints_file_s3_uri``.
        """
        body_dict = _read_monitoring_file(constraints_file_s3_uri, "constraints", sagemaker_session)
        return cls(
            body_dict=body_dict,
            constraints_file_s3_uri=constraints_file_s3_uri,
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def from_string(
        cls,
        constraints_file_string: str,
        kms_key: Optional[str] = None,
        file_name: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> "Constraints":
        """Generates a Constraints object from a JSON string, uploading it to the default bucket first."""
        sagemaker_session = sagemaker_session or Session()
        s3_uri = _upload_monitoring_file(
            constraints_file_string, file_name or "constraints.json", kms_key, sagemaker_session
        )
        return cls.from_s3_uri(constraints_file_s3_uri=s3_uri, kms_key=kms_key, sagemaker_session=sagemaker_session)

    @classmethod
    def from_file_path(
        cls, constraints_file_path: str, kms_key: Optional[str] = None, sagemaker_session: Optional[Session] = None
    ) -> "Constraints":
        """Initializes a Constraints object from a file path."""
        return cls.from_string(
            constraints_file_string=_read_local_file(constraints_file_path),
            file_name=os.path.basename(constraints_file_path),
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    def set_monitoring(self, enable_monitoring: bool, feature_name: Optional[str] = None):
        """Sets the monitoring flags on this Constraints object.

        If feature-name is provided, modify the feature-level override. Else, modify the top-level monitoring
        flag.

        Args:
            enable_monitoring (bool): Whether to enable monitoring or not.
            feature_name (str): Sets the feature-level monitoring flag if provided. Otherwise, sets the
                file-level override.
        """
        flag = "Enabled" if enable_monitoring else "Disabled"
        if feature_name is None:
            self.body_dict.setdefault("monitoring_config", {})["evaluate_constraints"] = flag
        else:
            for feature in self.body_dict.get("features", []):
                if feature["name"] == feature_name:
                    string_constraints = feature.setdefault("string_constraints", {})
                    overrides = string_constraints.setdefault("monitoring_config_overrides", {})
                    overrides["evaluate_constraints"] = flag


class ConstraintViolations(ModelMonitoringFile):
    """Represents the constraint violations JSON file used in Amazon SageMaker Model Monitoring."""

    def __init__(
        self,
        body_dict: Dict[str, Any],
        constraint_violations_file_s3_uri: Optional[str],
        kms_key: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ):
        super().__init__(
            body_dict=body_dict,
            file_s3_uri=constraint_violations_file_s3_uri,
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def from_s3_uri(
        cls,
        constraint_violations_file_s3_uri: str,
        kms_key: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> "ConstraintViolations":
        """Generates a ConstraintViolations object from an s3 uri.

        Raises:
            MissingFileError: if there is no constraint violations file at the uri.
        """
        body_dict = _read_monitoring_file(constraint_violations_file_s3_uri, "constraint violations", sagemaker_session)
        return cls(
            body_dict=body_dict,
            constraint_violations_file_s3_uri=constraint_violations_file_s3_uri,
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def from_string(
        cls,
        constraint_violations_file_string: str,
        kms_key: Optional[str] = None,
        file_name: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> "ConstraintViolations":
        """Generates a ConstraintViolations object from a JSON string, uploading it to the default bucket first."""
        sagemaker_session = sagemaker_session or Session()
        s3_uri = _upload_monitoring_file(
            constraint_violations_file_string, file_name or "constraint_violations.json", kms_key, sagemaker_session
        )
        return cls.from_s3_uri(
            constraint_violations_file_s3_uri=s3_uri, kms_key=kms_key, sagemaker_session=sagemaker_session
        )

    @classmethod
    def from_file_path(
        cls,
        constraint_violations_file_path: str,
        kms_key: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> "ConstraintViolations":
        """Initializes a ConstraintViolations object from a file path."""
        return cls.from_string(
            constraint_violations_file_string=_read_local_file(constraint_violations_file_path),
            file_name=os.path.basename(constraint_violations_file_path),
            kms_key=kms_key,
            sagemaker_session=sagemaker_session,
        )
