"""Upload to and download from S3 through the session's ``s3fs`` file system."""
import logging
import os
from typing import TYPE_CHECKING, List, Optional, Tuple
from urllib.parse import urlparse

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)


def parse_s3_url(url: str) -> Tuple[str, str]:
    """Return the bucket and the key of an ``s3://`` URL.

    >>> parse_s3_url("s3://bucket/a/b.csv")
    ('bucket', 'a/b.csv')

    Raises:
        ValueError: if ``url`` is not an S3 URL.
    """
    parsed_url = urlparse(url)
    if parsed_url.scheme != "s3":
        raise ValueError(f"Expecting 's3' scheme, got: {parsed_url.scheme} in {url}.")
    return parsed_url.netloc, parsed_url.path.lstrip("/")


def s3_path_join(*args) -> str:
    """Join S3 path components with ``/``, like ``os.path.join`` but keeping the ``s3://`` scheme intact.

    Empty components are dropped, and duplicated slashes between components are collapsed.

    >>> s3_path_join("s3://bucket/", "prefix/", "file.csv")
    's3://bucket/prefix/file.csv'
    """
    parts = [str(arg) for arg in args if arg]
    if not parts:
        return ""
    scheme = ""
    if parts[0].startswith("s3://"):
        scheme = "s3://"
        parts[0] = parts[0][len(scheme) :]
    stripped = [p.strip("/") for p in parts]
    return scheme + "/".join(p for p in stripped if p)


class S3Uploader(object):
    """Upload local files, or strings, to S3."""

    @staticmethod
    def upload(
        local_path: str,
        desired_s3_uri: str,
        kms_key: Optional[str] = None,
        sagemaker_session: Optional["Session"] = None,
    ) -> str:
        """Upload a local file or directory to ``desired_s3_uri``.

        Args:
            local_path (str): Path (absolute or relative) of local file or directory to upload.
            desired_s3_uri (str): The desired S3 location to upload to. It is the prefix to which the local
                filename will be added.
            kms_key (str): The KMS key to use to encrypt the files.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with AWS.

        Returns:
            The S3 uri of the uploaded file(s).
        """
        sagemaker_session = sagemaker_session or _default_session()
        bucket, key_prefix = parse_s3_url(desired_s3_uri)
        extra_args = {"SSEKMSKeyId": kms_key, "ServerSideEncryption": "aws:kms"} if kms_key is not None else None
        return sagemaker_session.upload_data(
            path=local_path, bucket=bucket, key_prefix=key_prefix, extra_args=extra_args
        )

    @staticmethod
    def upload_string_as_file_body(
        body: str,
        desired_s3_uri: str,
        kms_key: Optional[str] = None,
        sagemaker_session: Optional["Session"] = None,
    ) -> str:
        """Write ``body`` as the S3 object ``desired_s3_uri`` and return its URI."""
        sagemaker_session = sagemaker_session or _default_session()
        bucket, key = parse_s3_url(desired_s3_uri)
        return sagemaker_session.upload_string_as_file_body(body=body, bucket=bucket, key=key, kms_key=kms_key)


class S3Downloader(object):
    """Download files, or read them into memory, from S3."""

    @staticmethod
    def download(s3_uri: str, local_path: str, sagemaker_session: Optional["Session"] = None) -> List[str]:
        """Download every file under ``s3_uri`` into ``local_path`` and return the local paths."""
        sagemaker_session = sagemaker_session or _default_session()
        bucket, key_prefix = parse_s3_url(s3_uri)
        logger.debug("Downloading %s to %s", s3_uri, local_path)
        return sagemaker_session.download_data(path=local_path, bucket=bucket, key_prefix=key_prefix)

    @staticmethod
    def read_file(s3_uri: str, sagemaker_session: Optional["Session"] = None) -> str:
        """Return the body of a single S3 object as a string."""
        sagemaker_session = sagemaker_session or _default_session()
        bucket, key_prefix = parse_s3_url(s3_uri)
        return sagemaker_session.read_s3_file(bucket=bucket, key_prefix=key_prefix)

    @staticmethod
    def list(s3_uri: str, sagemaker_session: Optional["Session"] = None) -> List[str]:
        """Return the S3 URIs of the objects under ``s3_uri``."""
        sagemaker_session = sagemaker_session or _default_session()
        bucket, key_prefix = parse_s3_url(s3_uri)
        file_keys = sagemaker_session.list_s3_files(bucket=bucket, key_prefix=key_prefix)
        return [os.path.join("s3://", bucket, file_key) for file_key in file_keys]


def _default_session() -> "Session":
    from .session import Session

    return Session()
