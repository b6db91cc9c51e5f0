from unittest.mock import MagicMock

import pytest

from smkit.session import Session

REGION = "us-west-2"
BUCKET = "my-bucket"
ROLE = "SageMakerRole"
ROLE_ARN = f"arn:aws:iam::111122223333:role/{ROLE}"


@pytest.fixture
def sagemaker_session():
    """A mocked session: every AWS call is recorded, nothing leaves the process."""
    sess = MagicMock(name="sagemaker_session")
    sess.boto_region_name = REGION
    sess.default_bucket.return_value = BUCKET
    sess.expand_role.side_effect = lambda role: role if role is None or role.startswith("arn:") else ROLE_ARN
    sess.list_tags.return_value = []
    return sess


@pytest.fixture
def sagemaker_client():
    return MagicMock(name="sagemaker_client")


@pytest.fixture
def session(sagemaker_client):
    """A real Session wrapping mocked boto3 clients, to check the request dicts it builds."""
    boto_session = MagicMock(name="boto_session")
    boto_session.region_name = REGION
    return Session(
        boto_session=boto_session,
        sagemaker_client=sagemaker_client,
        sagemaker_runtime_client=MagicMock(name="sagemaker_runtime_client"),
        s3_fs=MagicMock(name="s3fs"),
        default_bucket=BUCKET,
    )
