import pytest

from smkit import vpc_utils
from smkit.inputs import FileSystemInput, TrainingInput
from smkit.network import NetworkConfig


def test_training_input_defaults():
    assert TrainingInput("s3://bucket/train").config == {
        "DataSource": {
            "S3DataSource": {
                "S3DataType": "S3Prefix",
                "S3Uri": "s3://bucket/train",
                "S3DataDistributionType": "FullyReplicated",
            }
        }
    }


def test_training_input_all_options():
    config = TrainingInput(
        "s3://bucket/manifest",
        distribution="ShardedByS3Key",
        compression="Gzip",
        content_type="application/x-recordio-protobuf",
        record_wrapping="RecordIO",
        s3_data_type="AugmentedManifestFile",
        input_mode="Pipe",
        attribute_names=["source-ref", "label"],
        shuffle_config=42,
    ).config
    assert config["DataSource"]["S3DataSource"]["S3DataDistributionType"] == "ShardedByS3Key"
    assert config["DataSource"]["S3DataSource"]["AttributeNames"] == ["source-ref", "label"]
    assert config["CompressionType"] == "Gzip"
    assert config["RecordWrapperType"] == "RecordIO"
    assert config["InputMode"] == "Pipe"
    assert config["ShuffleConfig"] == {"Seed": 42}


def test_file_system_input():
    fs_input = FileSystemInput("fs-0123", "FSxLustre", "/fsx/data", content_type="text/csv")
    assert fs_input.config == {
        "DataSource": {
            "FileSystemDataSource": {
                "FileSystemId": "fs-0123",
                "FileSystemType": "FSxLustre",
                "DirectoryPath": "/fsx/data",
                "FileSystemAccessMode": "ro",
            }
        },
        "ContentType": "text/csv",
    }


@pytest.mark.parametrize(
    "fs_type,mode,match",
    [("NFS", "ro", "Unrecognized file system type"), ("EFS", "wo", "Unrecognized file system access mode")],
)
def test_file_system_input_invalid(fs_type, mode, match):
    with pytest.raises(ValueError, match=match):
        FileSystemInput("fs-0123", fs_type, "/mnt", file_system_access_mode=mode)


def test_vpc_to_from_dict():
    vpc = vpc_utils.to_dict(["subnet-1"], ["sg-1"])
    assert vpc == {"Subnets": ["subnet-1"], "SecurityGroupIds": ["sg-1"]}
    assert vpc_utils.from_dict(vpc) == (["subnet-1"], ["sg-1"])
    assert vpc_utils.to_dict(None, ["sg-1"]) is None
    assert vpc_utils.from_dict(None) == (None, None)


def test_vpc_sanitize_drops_unknown_keys():
    assert vpc_utils.sanitize({"Subnets": ["a"], "SecurityGroupIds": ["b"], "Foo": 1}) == {
        "Subnets": ["a"],
        "SecurityGroupIds": ["b"],
    }


@pytest.mark.parametrize(
    "vpc_config",
    [
        [],
        {},
        {"Subnets": ["a"]},
        {"Subnets": "a", "SecurityGroupIds": ["b"]},
        {"Subnets": [], "SecurityGroupIds": ["b"]},
    ],
)
def test_vpc_sanitize_invalid(vpc_config):
    with pytest.raises(ValueError):
        vpc_utils.sanitize(vpc_config)


def test_network_config_request_dict():
    assert NetworkConfig()._to_request_dict() == {"EnableNetworkIsolation": False}
    assert NetworkConfig(
        enable_network_isolation=True,
        security_group_ids=["sg-1"],
        subnets=["subnet-1"],
        encrypt_inter_container_traffic=True,
    )._to_request_dict() == {
        "EnableNetworkIsolation": True,
        "EnableInterContainerTrafficEncryption": True,
        "VpcConfig": {"SecurityGroupIds": ["sg-1"], "Subnets": ["subnet-1"]},
    }
