"""Library-wide defaults.

Values that users may want to change per environment are read from environment variables, everything else is a
module-level constant that callers can override before creating a :class:`~smkit.session.Session`.
"""
import os
from typing import Optional

from botocore.config import Config

# Environment variables
ENV_DEFAULT_BUCKET = "SMKIT_DEFAULT_BUCKET"
ENV_REGION = "SMKIT_REGION"

# Client settings
CONNECT_TIMEOUT = 5
READ_TIMEOUT = 60
MAX_ATTEMPTS = 20

# Polling intervals (seconds)
JOB_POLL = 5
ENDPOINT_POLL = 30
LOG_POLL = 10

# Monitoring schedules
SCHEDULE_STATUS_RETRIES = 20
SCHEDULE_STATUS_SLEEP = 3

# https://github.com/aws/sagemaker-python-sdk/blob/d8b3012c23fbccdcd1fda977ed9efa4507386a49/src/sagemaker/session.py#L45
NOTEBOOK_METADATA_FILE = "/opt/ml/metadata/resource-metadata.json"


def client_config(**kwargs) -> Config:
    """Return the botocore ``Config`` for SageMaker clients; kwargs override the defaults."""
    settings = dict(
        connect_timeout=CONNECT_TIMEOUT,
        read_timeout=READ_TIMEOUT,
        retries={"max_attempts": MAX_ATTEMPTS, "mode": "adaptive"},
    )
    settings.update(kwargs)
    return Config(**settings)


def default_bucket_override() -> Optional[str]:
    """Bucket configured through ``SMKIT_DEFAULT_BUCKET``, if any."""
    return os.environ.get(ENV_DEFAULT_BUCKET) or None


def region_override() -> Optional[str]:
    """Region configured through ``SMKIT_REGION``, if any."""
    return os.environ.get(ENV_REGION) or None
