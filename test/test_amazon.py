import io
import json

import numpy as np
import pytest
from scipy.sparse import csr_matrix

from smkit.amazon import (
    FileSystemRecordSet,
    KMeans,
    KMeansModel,
    KMeansPredictor,
    LDA,
    LinearLearner,
    NTM,
    PCA,
    RandomCutForest,
    RecordDeserializer,
    RecordSerializer,
    RecordSet,
    read_records,
    read_recordio,
    upload_numpy_to_s3_shards,
    write_numpy_to_dense_tensor,
    write_spmatrix_to_sparse_tensor,
)
from smkit.amazon.amazon_estimator import _build_shards
from smkit.amazon.hyperparameter import Hyperparameter

from conftest import BUCKET, ROLE, ROLE_ARN

KMEANS_IMAGE = "174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1"


def _kmeans(sagemaker_session, **kwargs):
    return KMeans(ROLE, 1, "ml.c4.xlarge", sagemaker_session=sagemaker_session, **kwargs)


def _train_args(sagemaker_session):
    return sagemaker_session.train.call_args.kwargs


def test_hyperparameter_validation(sagemaker_session):
    with pytest.raises(ValueError, match="Invalid hyperparameter value 1 for k. Expecting: An integer greater-than 1"):
        _kmeans(sagemaker_session, k=1)
    with pytest.raises(ValueError, match="local_lloyd_tol"):
        _kmeans(sagemaker_session, k=2, tol=1.5)
    with pytest.raises(ValueError, match="init_method"):
        _kmeans(sagemaker_session, k=2, init_method="nearest")


def test_hyperparameter_conversion_and_serialization(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k="3", tol="0.5", eval_metrics=["msd", "ssd"])
    assert kmeans.k == 3
    assert kmeans.tol == 0.5
    assert kmeans.hyperparameters() == {
        "force_dense": "True",
        "k": "3",
        "local_lloyd_tol": "0.5",
        "eval_metrics": '["msd", "ssd"]',
    }

    kmeans.k = None
    assert "k" not in kmeans.hyperparameters()


def test_unset_hyperparameter(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=2)
    with pytest.raises(AttributeError):
        kmeans.feature_dim
    assert Hyperparameter.serialize_all(object()) == {}


def test_data_location(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=2)
    assert kmeans.data_location == f"s3://{BUCKET}/sagemaker-record-sets/"

    kmeans.data_location = "s3://bucket/records"
    assert kmeans.data_location == "s3://bucket/records/"

    with pytest.raises(ValueError, match="Expecting an S3 URL"):
        kmeans.data_location = "/tmp/records"


def test_fit_record_set(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=3)
    kmeans.fit(RecordSet("s3://bucket/manifest", num_records=100, feature_dim=4), wait=False)

    args = _train_args(sagemaker_session)
    assert args["job_name"].startswith("kmeans-")
    assert args["image_uri"] == KMEANS_IMAGE
    assert args["role"] == ROLE_ARN
    assert args["hyperparameters"] == {
        "force_dense": "True",
        "k": "3",
        "feature_dim": "4",
        "mini_batch_size": "5000",
    }
    assert args["input_config"] == [
        {
            "DataSource": {
                "S3DataSource": {
                    "S3DataType": "ManifestFile",
                    "S3Uri": "s3://bucket/manifest",
                    "S3DataDistributionType": "ShardedByS3Key",
                }
            },
            "ChannelName": "train",
        }
    ]


def test_fit_record_set_list(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=3)
    records = [
        RecordSet("s3://bucket/train", num_records=10, feature_dim=5, s3_data_type="S3Prefix"),
        FileSystemRecordSet("fs-0123", "EFS", "/data/test", num_records=5, feature_dim=5, channel="test"),
    ]
    kmeans.fit(records, mini_batch_size=2, wait=False)

    args = _train_args(sagemaker_session)
    assert args["hyperparameters"]["feature_dim"] == "5"
    assert args["hyperparameters"]["mini_batch_size"] == "2"
    channels = {c["ChannelName"]: c for c in args["input_config"]}
    assert channels["train"]["DataSource"]["S3DataSource"]["S3DataType"] == "S3Prefix"
    assert channels["test"]["DataSource"]["FileSystemDataSource"]["FileSystemId"] == "fs-0123"


def test_fit_requires_train_channel(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=3)
    with pytest.raises(ValueError, match="Must provide train channel"):
        kmeans.fit([RecordSet("s3://bucket/test", 10, 5, channel="test")], wait=False)


def test_fit_rejects_duplicate_channels(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=3)
    records = [RecordSet("s3://bucket/a", 10, 5), RecordSet("s3://bucket/b", 10, 5)]
    with pytest.raises(ValueError, match="Duplicate channels"):
        kmeans.fit(records, wait=False)


def test_linear_learner_default_mini_batch_size(sagemaker_session):
    learner = LinearLearner(
        ROLE, 2, "ml.c4.xlarge", predictor_type="binary_classifier", sagemaker_session=sagemaker_session
    )
    learner.fit(RecordSet("s3://bucket/manifest", num_records=100, feature_dim=4), wait=False)
    hyperparameters = _train_args(sagemaker_session)["hyperparameters"]
    assert hyperparameters["mini_batch_size"] == "50"
    assert hyperparameters["predictor_type"] == "binary_classifier"


def test_linear_learner_multiclass_requires_num_classes(sagemaker_session):
    with pytest.raises(ValueError, match="num_classes"):
        LinearLearner(
            ROLE, 1, "ml.c4.xlarge", predictor_type="multiclass_classifier", sagemaker_session=sagemaker_session
        )


def test_attach_maps_hyperparameter_names(sagemaker_session):
    job_name = "kmeans-2021-06-07-08-09-10-123"
    sagemaker_session.sagemaker_client.describe_training_job.return_value = {
        "TrainingJobName": job_name,
        "TrainingJobArn": f"arn:aws:sagemaker:us-west-2:111122223333:training-job/{job_name}",
        "RoleArn": ROLE_ARN,
        "ResourceConfig": {"InstanceCount": 1, "InstanceType": "ml.c4.xlarge", "VolumeSizeInGB": 30},
        "StoppingCondition": {"MaxRuntimeInSeconds": 86400},
        "AlgorithmSpecification": {"TrainingInputMode": "File", "TrainingImage": KMEANS_IMAGE},
        "OutputDataConfig": {"S3OutputPath": "s3://bucket/output"},
        "HyperParameters": {
            "k": "3",
            "local_lloyd_max_iter": "10",
            "force_dense": "True",
            "feature_dim": "4",
            "mini_batch_size": "500",
        },
    }

    kmeans = KMeans.attach(job_name, sagemaker_session=sagemaker_session)

    assert kmeans.k == 3
    assert kmeans.max_iterations == 10
    assert kmeans.base_job_name == "kmeans"
    assert kmeans.hyperparameters() == {"force_dense": "True", "k": "3", "local_lloyd_max_iter": "10"}


def _describe_job(sagemaker_session, job_name, image, hyperparameters):
    sagemaker_session.sagemaker_client.describe_training_job.return_value = {
        "TrainingJobName": job_name,
        "RoleArn": ROLE_ARN,
        "ResourceConfig": {"InstanceCount": 1, "InstanceType": "ml.c4.xlarge", "VolumeSizeInGB": 30},
        "StoppingCondition": {"MaxRuntimeInSeconds": 86400},
        "AlgorithmSpecification": {"TrainingInputMode": "File", "TrainingImage": image},
        "OutputDataConfig": {"S3OutputPath": "s3://bucket/output"},
        "HyperParameters": hyperparameters,
    }


def test_attach_keeps_bool_hyperparameters(sagemaker_session):
    pca = PCA(ROLE, 1, "ml.c4.xlarge", num_components=2, subtract_mean=False, sagemaker_session=sagemaker_session)
    _describe_job(
        sagemaker_session,
        "pca-2021-06-07-08-09-10-123",
        "174872318107.dkr.ecr.us-west-2.amazonaws.com/pca:1",
        pca.hyperparameters(),
    )

    attached = PCA.attach("pca-2021-06-07-08-09-10-123", sagemaker_session=sagemaker_session)

    assert attached.subtract_mean is False
    assert attached.hyperparameters() == {"num_components": "2", "subtract_mean": "False"}


def test_attach_keeps_list_hyperparameters(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=3, eval_metrics=["msd"])
    _describe_job(sagemaker_session, "kmeans-2021-06-07-08-09-10-123", KMEANS_IMAGE, kmeans.hyperparameters())

    attached = KMeans.attach("kmeans-2021-06-07-08-09-10-123", sagemaker_session=sagemaker_session)

    assert attached.eval_metrics == ["msd"]
    assert attached.hyperparameters() == kmeans.hyperparameters()


@pytest.mark.parametrize("value,expected", [("True", True), ("false", False), ("FALSE", False), (0, False), (1, True)])
def test_bool_hyperparameter_conversion(sagemaker_session, value, expected):
    ntm = NTM(ROLE, 1, "ml.c4.xlarge", num_topics=5, batch_norm=value, sagemaker_session=sagemaker_session)
    assert ntm.batch_norm is expected


@pytest.mark.parametrize("value", ["[10, 20]", [10, 20], (10, 20)])
def test_list_hyperparameter_conversion(sagemaker_session, value):
    ntm = NTM(ROLE, 1, "ml.c4.xlarge", num_topics=5, encoder_layers=value, sagemaker_session=sagemaker_session)
    assert ntm.encoder_layers == [10, 20]
    assert ntm.hyperparameters()["encoder_layers"] == "[10, 20]"


def test_comma_separated_list_hyperparameter(sagemaker_session):
    kmeans = _kmeans(sagemaker_session, k=3, eval_metrics="msd, ssd")
    assert kmeans.eval_metrics == ["msd", "ssd"]


def test_randomcutforest_fixed_mini_batch_size(sagemaker_session):
    rcf = RandomCutForest(ROLE, 1, "ml.c4.xlarge", num_trees=50, sagemaker_session=sagemaker_session)
    records = RecordSet("s3://bucket/manifest", num_records=100, feature_dim=4)

    with pytest.raises(ValueError, match="fixed mini_batch_size of 1000"):
        rcf.fit(records, mini_batch_size=500, wait=False)
    sagemaker_session.train.assert_not_called()

    rcf.fit(records, wait=False)
    hyperparameters = _train_args(sagemaker_session)["hyperparameters"]
    assert hyperparameters["mini_batch_size"] == "1000"
    assert hyperparameters["num_trees"] == "50"


def test_lda_requires_mini_batch_size(sagemaker_session):
    lda = LDA(ROLE, "ml.c4.xlarge", num_topics=3, sagemaker_session=sagemaker_session)
    records = RecordSet("s3://bucket/manifest", num_records=100, feature_dim=4)

    with pytest.raises(ValueError, match="mini_batch_size must be set"):
        lda.fit(records, wait=False)
    sagemaker_session.train.assert_not_called()

    lda.fit(records, mini_batch_size=20, wait=False)
    args = _train_args(sagemaker_session)
    assert args["hyperparameters"]["mini_batch_size"] == "20"
    assert args["hyperparameters"]["num_topics"] == "3"
    assert args["resource_config"]["InstanceCount"] == 1


def test_lda_single_instance(sagemaker_session):
    assert LDA(ROLE, "ml.c4.xlarge", num_topics=3, sagemaker_session=sagemaker_session).instance_count == 1
    with pytest.raises(ValueError, match="only supports single instance training"):
        LDA(ROLE, "ml.c4.xlarge", num_topics=3, instance_count=2, sagemaker_session=sagemaker_session)


def test_record_set_upload(sagemaker_session):
    kmeans = KMeans(ROLE, 2, "ml.c4.xlarge", k=2, sagemaker_session=sagemaker_session)
    train = np.arange(12, dtype=float).reshape(4, 3)

    record_set = kmeans.record_set(train, labels=np.array([0.0, 1.0, 0.0, 1.0]), channel="validation")

    assert record_set.num_records == 4
    assert record_set.feature_dim == 3
    assert record_set.channel == "validation"
    assert record_set.s3_data.startswith(f"s3://{BUCKET}/sagemaker-record-sets/KMeans-")
    assert record_set.s3_data.endswith("/.amazon.manifest")

    calls = sagemaker_session.fs.pipe_file.call_args_list
    assert len(calls) == 3
    assert calls[0].args[0].endswith("/matrix_0.pbr")
    assert calls[1].args[0].endswith("/matrix_1.pbr")
    manifest = json.loads(calls[2].args[1].decode("utf-8"))
    assert manifest[1:] == ["matrix_0.pbr", "matrix_1.pbr"]
    assert manifest[0]["prefix"].startswith(f"s3://{BUCKET}/sagemaker-record-sets/KMeans-")

    shard = read_records(io.BytesIO(calls[1].args[1]))
    assert [list(r.features["values"].float64_tensor.values) for r in shard] == [[6.0, 7.0, 8.0], [9.0, 10.0, 11.0]]
    assert [r.label["values"].float64_tensor.values[0] for r in shard] == [0.0, 1.0]


def test_upload_shards_encrypted(sagemaker_session):
    fs = sagemaker_session.fs
    manifest = upload_numpy_to_s3_shards(1, fs, "bucket", "prefix", np.ones((2, 2)), encrypt=True)
    assert manifest == "s3://bucket/prefix/.amazon.manifest"
    for call in fs.pipe_file.call_args_list:
        assert call.kwargs == {"ServerSideEncryption": "AES256"}


def test_upload_shards_cleans_up_on_failure(sagemaker_session):
    fs = sagemaker_session.fs
    fs.pipe_file.side_effect = [None, OSError("boom")]
    with pytest.raises(OSError, match="boom"):
        upload_numpy_to_s3_shards(2, fs, "bucket", "prefix/", np.ones((4, 2)))
    fs.rm.assert_called_once_with("bucket/prefix/matrix_0.pbr")


def test_build_shards():
    shards = _build_shards(3, np.arange(7))
    assert [list(s) for s in shards] == [[0, 1], [2, 3], [4, 5, 6]]
    with pytest.raises(ValueError, match="num_shards"):
        _build_shards(0, np.arange(7))
    with pytest.raises(ValueError, match="less than num shards"):
        _build_shards(8, np.arange(7))


def test_dense_tensor_records():
    buffer = io.BytesIO()
    write_numpy_to_dense_tensor(buffer, np.array([[1, 2], [3, 4]]), labels=np.array([0.5, 1.5], dtype="float32"))
    assert len(buffer.getvalue()) % 4 == 0

    buffer.seek(0)
    records = read_records(buffer)
    assert [list(r.features["values"].int32_tensor.values) for r in records] == [[1, 2], [3, 4]]
    assert [r.label["values"].float32_tensor.values[0] for r in records] == [0.5, 1.5]


def test_dense_tensor_invalid_input():
    with pytest.raises(ValueError, match="Matrix"):
        write_numpy_to_dense_tensor(io.BytesIO(), np.arange(3))
    with pytest.raises(ValueError, match="Labels must be a Vector"):
        write_numpy_to_dense_tensor(io.BytesIO(), np.ones((2, 2)), labels=np.ones((2, 2)))
    with pytest.raises(ValueError, match="Unsupported dtype"):
        write_numpy_to_dense_tensor(io.BytesIO(), np.array([["a", "b"]]))


def test_sparse_tensor_records():
    buffer = io.BytesIO()
    write_spmatrix_to_sparse_tensor(buffer, csr_matrix(np.array([[0.0, 1.0, 0.0], [2.0, 0.0, 3.0]])))
    buffer.seek(0)

    first, second = read_records(buffer)
    tensor = second.features["values"].float64_tensor
    assert list(tensor.values) == [2.0, 3.0]
    assert list(tensor.keys) == [0, 2]
    assert list(tensor.shape) == [3]
    assert list(first.features["values"].float64_tensor.keys) == [1]

    with pytest.raises(TypeError, match="sparse"):
        write_spmatrix_to_sparse_tensor(io.BytesIO(), np.ones((2, 2)))


def test_read_recordio_rejects_bad_magic():
    with pytest.raises(ValueError, match="magic number"):
        list(read_recordio(io.BytesIO(b"\x00\x00\x00\x00\x04\x00\x00\x00abcd")))


def test_record_serializer():
    serializer = RecordSerializer()
    assert serializer.CONTENT_TYPE == "application/x-recordio-protobuf"

    (record,) = read_records(serializer.serialize(np.array([1.0, 2.0])))
    assert list(record.features["values"].float64_tensor.values) == [1.0, 2.0]

    with pytest.raises(ValueError, match="3D"):
        serializer.serialize(np.ones((1, 2, 3)))


def test_record_deserializer_closes_stream():
    buffer = io.BytesIO()
    write_numpy_to_dense_tensor(buffer, np.array([[1.0]]))
    stream = io.BytesIO(buffer.getvalue())

    records = RecordDeserializer().deserialize(stream, "application/x-recordio-protobuf")

    assert len(records) == 1
    assert stream.closed


def test_kmeans_model(sagemaker_session):
    model = KMeansModel("s3://bucket/model.tar.gz", ROLE, sagemaker_session=sagemaker_session)
    assert model.image_uri == KMEANS_IMAGE
    assert model.predictor_cls is KMeansPredictor


def test_create_model_from_estimator(sagemaker_session):
    sagemaker_session.sagemaker_client.describe_training_job.return_value = {
        "ModelArtifacts": {"S3ModelArtifacts": "s3://bucket/output/model.tar.gz"}
    }
    kmeans = _kmeans(sagemaker_session, k=2, subnets=["subnet-1"], security_group_ids=["sg-1"])
    kmeans.fit(RecordSet("s3://bucket/manifest", 10, 2), wait=False)

    model = kmeans.create_model()

    assert isinstance(model, KMeansModel)
    assert model.model_data == "s3://bucket/output/model.tar.gz"
    assert model.vpc_config == {"Subnets": ["subnet-1"], "SecurityGroupIds": ["sg-1"]}
