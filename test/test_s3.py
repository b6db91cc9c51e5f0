import pytest

from conftest import BUCKET
from smkit.s3 import S3Downloader, S3Uploader, parse_s3_url, s3_path_join


def test_parse_s3_url():
    assert parse_s3_url("s3://bucket/a/b.csv") == ("bucket", "a/b.csv")
    assert parse_s3_url("s3://bucket") == ("bucket", "")


def test_parse_s3_url_rejects_other_schemes():
    with pytest.raises(ValueError, match="Expecting 's3' scheme"):
        parse_s3_url("https://bucket/a/b.csv")


@pytest.mark.parametrize(
    "args,expected",
    [
        (("s3://bucket/", "prefix/", "file.csv"), "s3://bucket/prefix/file.csv"),
        (("s3://bucket", "/prefix", None, "file.csv"), "s3://bucket/prefix/file.csv"),
        (("a/", "", "/b/"), "a/b"),
        ((), ""),
    ],
)
def test_s3_path_join(args, expected):
    assert s3_path_join(*args) == expected


def test_upload_with_kms_key(sagemaker_session):
    sagemaker_session.upload_data.return_value = f"s3://{BUCKET}/prefix/train.csv"

    uri = S3Uploader.upload("train.csv", f"s3://{BUCKET}/prefix", kms_key="key", sagemaker_session=sagemaker_session)

    assert uri == f"s3://{BUCKET}/prefix/train.csv"
    sagemaker_session.upload_data.assert_called_once_with(
        path="train.csv",
        bucket=BUCKET,
        key_prefix="prefix",
        extra_args={"SSEKMSKeyId": "key", "ServerSideEncryption": "aws:kms"},
    )


def test_upload_string_as_file_body(sagemaker_session):
    S3Uploader.upload_string_as_file_body('{"a": 1}', f"s3://{BUCKET}/x/y.json", sagemaker_session=sagemaker_session)
    sagemaker_session.upload_string_as_file_body.assert_called_once_with(
        body='{"a": 1}', bucket=BUCKET, key="x/y.json", kms_key=None
    )


def test_read_file(sagemaker_session):
    sagemaker_session.read_s3_file.return_value = "body"
    assert S3Downloader.read_file(f"s3://{BUCKET}/x/y.json", sagemaker_session=sagemaker_session) == "body"
    sagemaker_session.read_s3_file.assert_called_once_with(bucket=BUCKET, key_prefix="x/y.json")


def test_download(sagemaker_session, tmp_path):
    S3Downloader.download(f"s3://{BUCKET}/model", str(tmp_path), sagemaker_session=sagemaker_session)
    sagemaker_session.download_data.assert_called_once_with(path=str(tmp_path), bucket=BUCKET, key_prefix="model")


def test_list(sagemaker_session):
    sagemaker_session.list_s3_files.return_value = ["out/a.json", "out/b.json"]
    assert S3Downloader.list(f"s3://{BUCKET}/out", sagemaker_session=sagemaker_session) == [
        f"s3://{BUCKET}/out/a.json",
        f"s3://{BUCKET}/out/b.json",
    ]
