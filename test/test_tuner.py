import pytest

from smkit.amazon import KMeans, RecordSet
from smkit.estimator import Estimator
from smkit.parameter import CategoricalParameter, ContinuousParameter, IntegerParameter
from smkit.tuner import HyperparameterTuner, WarmStartConfig, WarmStartTypes

from conftest import ROLE, ROLE_ARN

IMAGE = "111122223333.dkr.ecr.us-west-2.amazonaws.com/my-algo:latest"
TUNING_JOB_NAME = "my-algo-210607-0809"
METRIC_DEFINITIONS = [{"Name": "validation:loss", "Regex": "loss=(.*?);"}]


def _estimator(sagemaker_session, **kwargs):
    return Estimator(IMAGE, ROLE, 1, "ml.c5.xlarge", sagemaker_session=sagemaker_session, **kwargs)


def _tuner(sagemaker_session, **kwargs):
    estimator = _estimator(sagemaker_session, hyperparameters={"epochs": 10, "lr": 0.1})
    return HyperparameterTuner(
        estimator,
        "validation:loss",
        {
            "lr": ContinuousParameter(0.01, 0.2, scaling_type="Logarithmic"),
            "layers": IntegerParameter(1, 4),
            "optimizer": CategoricalParameter(["sgd", "adam"]),
        },
        metric_definitions=METRIC_DEFINITIONS,
        objective_type="Minimize",
        max_jobs=10,
        max_parallel_jobs=2,
        **kwargs,
    )


def _tuning_job_details():
    return {
        "HyperParameterTuningJobName": TUNING_JOB_NAME,
        "HyperParameterTuningJobConfig": {
            "Strategy": "Bayesian",
            "HyperParameterTuningJobObjective": {"Type": "Minimize", "MetricName": "validation:loss"},
            "ResourceLimits": {"MaxNumberOfTrainingJobs": 10, "MaxParallelTrainingJobs": 2},
            "ParameterRanges": {
                "ContinuousParameterRanges": [
                    {"Name": "lr", "MinValue": "0.01", "MaxValue": "0.2", "ScalingType": "Logarithmic"}
                ],
                "IntegerParameterRanges": [{"Name": "layers", "MinValue": "1", "MaxValue": "4"}],
                "CategoricalParameterRanges": [],
            },
            "TrainingJobEarlyStoppingType": "Auto",
        },
        "TrainingJobDefinition": {
            "StaticHyperParameters": {
                "epochs": "10",
                "sagemaker_estimator_class_name": '"Estimator"',
                "sagemaker_estimator_module": '"smkit.estimator"',
                "_tuning_objective_metric": "validation:loss",
            },
            "AlgorithmSpecification": {
                "TrainingImage": IMAGE,
                "TrainingInputMode": "File",
                "MetricDefinitions": METRIC_DEFINITIONS,
            },
            "RoleArn": ROLE_ARN,
            "OutputDataConfig": {"S3OutputPath": "s3://bucket/output"},
            "ResourceConfig": {"InstanceCount": 1, "InstanceType": "ml.c5.xlarge", "VolumeSizeInGB": 30},
            "StoppingCondition": {"MaxRuntimeInSeconds": 86400},
        },
        "WarmStartConfig": {
            "WarmStartType": "TransferLearning",
            "ParentHyperParameterTuningJobs": [{"HyperParameterTuningJobName": "parent-job"}],
        },
    }


def test_ranges_required(sagemaker_session):
    with pytest.raises(ValueError, match="hyperparameter ranges"):
        HyperparameterTuner(_estimator(sagemaker_session), "validation:loss", {})


def test_fit_request(sagemaker_session):
    tuner = _tuner(sagemaker_session, tags=[{"Key": "team", "Value": "ml"}])

    tuner.fit("s3://bucket/train", include_cls_metadata=True, wait=False)

    args = sagemaker_session.create_tuning_job.call_args.kwargs
    assert args["job_name"].startswith("my-algo-")
    assert len(args["job_name"]) <= HyperparameterTuner.TUNING_JOB_NAME_MAX_LENGTH
    assert args["tags"] == [{"Key": "team", "Value": "ml"}]
    assert args["warm_start_config"] is None
    assert args["tuning_config"] == {
        "strategy": "Bayesian",
        "max_jobs": 10,
        "max_parallel_jobs": 2,
        "early_stopping_type": "Off",
        "objective_type": "Minimize",
        "objective_metric_name": "validation:loss",
        "parameter_ranges": {
            "ContinuousParameterRanges": [
                {"Name": "lr", "MinValue": "0.01", "MaxValue": "0.2", "ScalingType": "Logarithmic"}
            ],
            "CategoricalParameterRanges": [{"Name": "optimizer", "Values": ["sgd", "adam"]}],
            "IntegerParameterRanges": [{"Name": "layers", "MinValue": "1", "MaxValue": "4", "ScalingType": "Auto"}],
        },
    }

    training_config = args["training_config"]
    assert training_config["image_uri"] == IMAGE
    assert training_config["role"] == ROLE_ARN
    assert training_config["input_mode"] == "File"
    assert training_config["metric_definitions"] == METRIC_DEFINITIONS
    assert training_config["static_hyperparameters"] == {
        "epochs": "10",
        "sagemaker_estimator_class_name": '"Estimator"',
        "sagemaker_estimator_module": '"smkit.estimator"',
    }
    assert training_config["input_config"][0]["DataSource"]["S3DataSource"]["S3Uri"] == "s3://bucket/train"
    assert training_config["use_spot_instances"] is False

    assert tuner.latest_tuning_job.name == args["job_name"]
    sagemaker_session.wait_for_tuning_job.assert_not_called()


def test_fit_waits(sagemaker_session):
    tuner = _tuner(sagemaker_session, base_tuning_job_name="nightly")
    tuner.fit("s3://bucket/train", job_name="nightly-1")
    sagemaker_session.wait_for_tuning_job.assert_called_once_with("nightly-1")


def test_fit_with_record_set(sagemaker_session):
    kmeans = KMeans(ROLE, 1, "ml.c4.xlarge", k=2, sagemaker_session=sagemaker_session)
    tuner = HyperparameterTuner(kmeans, "test:msd", {"k": IntegerParameter(2, 10)}, objective_type="Minimize")

    tuner.fit(RecordSet("s3://bucket/manifest", 100, 4), mini_batch_size=100, include_cls_metadata=True, wait=False)

    args = sagemaker_session.create_tuning_job.call_args.kwargs
    assert args["job_name"].startswith("kmeans-")
    assert args["training_config"]["static_hyperparameters"] == {
        "force_dense": "True",
        "feature_dim": "4",
        "mini_batch_size": "100",
    }
    assert args["training_config"]["input_config"][0]["ChannelName"] == "train"


def test_ranges_validated_against_algorithm_hyperparameters(sagemaker_session):
    kmeans = KMeans(ROLE, 1, "ml.c4.xlarge", sagemaker_session=sagemaker_session)
    with pytest.raises(ValueError, match="for k"):
        HyperparameterTuner(kmeans, "test:msd", {"k": IntegerParameter(1, 10)})
    with pytest.raises(ValueError, match="init_method"):
        HyperparameterTuner(kmeans, "test:msd", {"init_method": CategoricalParameter(["random", "nearest"])})


def test_create_with_multiple_estimators(sagemaker_session):
    tuner = HyperparameterTuner.create(
        estimator_dict={"est-b": _estimator(sagemaker_session), "est-a": _estimator(sagemaker_session)},
        objective_metric_name_dict={"est-a": "loss-a", "est-b": "loss-b"},
        hyperparameter_ranges_dict={
            "est-a": {"lr": ContinuousParameter(0.1, 0.2)},
            "est-b": {"layers": IntegerParameter(1, 2)},
        },
        metric_definitions_dict={"est-b": METRIC_DEFINITIONS},
        base_tuning_job_name="multi",
    )

    tuner.fit(inputs={"est-a": "s3://bucket/a", "est-b": "s3://bucket/b"}, wait=False)

    args = sagemaker_session.create_tuning_job.call_args.kwargs
    assert args["job_name"].startswith("multi-")
    assert "training_config" not in args
    assert "objective_metric_name" not in args["tuning_config"]
    first, second = args["training_config_list"]
    assert first["estimator_name"] == "est-a"
    assert first["objective_metric_name"] == "loss-a"
    assert first["metric_definitions"] is None
    assert first["parameter_ranges"]["ContinuousParameterRanges"][0]["Name"] == "lr"
    assert first["input_config"][0]["DataSource"]["S3DataSource"]["S3Uri"] == "s3://bucket/a"
    assert second["estimator_name"] == "est-b"
    assert second["metric_definitions"] == METRIC_DEFINITIONS
    assert second["parameter_ranges"]["IntegerParameterRanges"][0]["Name"] == "layers"


def test_create_validates_dict_keys(sagemaker_session):
    with pytest.raises(ValueError, match="At least one estimator"):
        HyperparameterTuner.create({}, {}, {})
    with pytest.raises(ValueError, match="objective_metric_name_dict"):
        HyperparameterTuner.create(
            estimator_dict={"est-a": _estimator(sagemaker_session)},
            objective_metric_name_dict={"est-b": "loss"},
            hyperparameter_ranges_dict={"est-a": {"lr": ContinuousParameter(0.1, 0.2)}},
        )


def test_attach(sagemaker_session):
    sagemaker_session.describe_tuning_job.return_value = _tuning_job_details()

    tuner = HyperparameterTuner.attach(TUNING_JOB_NAME, sagemaker_session=sagemaker_session)

    assert tuner.latest_tuning_job.name == TUNING_JOB_NAME
    assert tuner.base_tuning_job_name == "my-algo"
    assert tuner.objective_metric_name == "validation:loss"
    assert tuner.objective_type == "Minimize"
    assert tuner.max_jobs == 10
    assert tuner.max_parallel_jobs == 2
    assert tuner.early_stopping_type == "Auto"
    assert tuner.metric_definitions == METRIC_DEFINITIONS
    assert tuner.warm_start_config.type is WarmStartTypes.TRANSFER_LEARNING
    assert tuner.warm_start_config.parents == {"parent-job"}
    assert tuner.hyperparameter_ranges()["IntegerParameterRanges"] == [
        {"Name": "layers", "MinValue": "1", "MaxValue": "4", "ScalingType": "Auto"}
    ]
    assert isinstance(tuner.estimator, Estimator)
    assert tuner.estimator.image_uri == IMAGE
    assert tuner.estimator.hyperparameters() == {"epochs": "10"}


def test_attach_derives_amazon_estimator(sagemaker_session):
    details = _tuning_job_details()
    details["TrainingJobDefinition"]["StaticHyperParameters"] = {"force_dense": "True", "feature_dim": "4"}
    details["TrainingJobDefinition"]["AlgorithmSpecification"]["TrainingImage"] = (
        "174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1"
    )
    details["HyperParameterTuningJobConfig"]["ParameterRanges"] = {
        "IntegerParameterRanges": [{"Name": "k", "MinValue": "2", "MaxValue": "10"}]
    }

    tuner = HyperparameterTuner.attach(TUNING_JOB_NAME, sagemaker_session=sagemaker_session, job_details=details)

    assert isinstance(tuner.estimator, KMeans)
    assert tuner.estimator.k == 2
    sagemaker_session.describe_tuning_job.assert_not_called()


@pytest.mark.parametrize(
    "algorithm,static_hyperparameters,tuned,attribute,expected",
    [
        ("pca", {"subtract_mean": "False", "feature_dim": "4"}, "num_components", "subtract_mean", False),
        ("kmeans", {"force_dense": "True", "eval_metrics": '["msd", "ssd"]'}, "k", "eval_metrics", ["msd", "ssd"]),
    ],
)
def test_attach_parses_static_hyperparameters(
    sagemaker_session, algorithm, static_hyperparameters, tuned, attribute, expected
):
    details = _tuning_job_details()
    details["TrainingJobDefinition"]["StaticHyperParameters"] = static_hyperparameters
    details["TrainingJobDefinition"]["AlgorithmSpecification"]["TrainingImage"] = (
        f"174872318107.dkr.ecr.us-west-2.amazonaws.com/{algorithm}:1"
    )
    details["HyperParameterTuningJobConfig"]["ParameterRanges"] = {
        "IntegerParameterRanges": [{"Name": tuned, "MinValue": "2", "MaxValue": "10"}]
    }

    tuner = HyperparameterTuner.attach(TUNING_JOB_NAME, sagemaker_session=sagemaker_session, job_details=details)

    value = getattr(tuner.estimator, attribute)
    assert value == expected
    assert type(value) is type(expected)
    assert tuner.estimator.hyperparameters()[attribute] == static_hyperparameters[attribute]


def test_best_training_job(sagemaker_session):
    sagemaker_session.describe_tuning_job.return_value = _tuning_job_details()
    tuner = HyperparameterTuner.attach(TUNING_JOB_NAME, sagemaker_session=sagemaker_session)

    with pytest.raises(ValueError, match="Best training job not available"):
        tuner.best_training_job()

    sagemaker_session.describe_tuning_job.return_value = {"BestTrainingJob": {"TrainingJobName": "best-job"}}
    assert tuner.best_training_job() == "best-job"

    tuner.delete_endpoint()
    sagemaker_session.delete_endpoint.assert_called_once_with("best-job")


def test_methods_require_tuning_job(sagemaker_session):
    tuner = _tuner(sagemaker_session)
    for method in (tuner.stop_tuning_job, tuner.wait, tuner.describe, tuner.best_training_job):
        with pytest.raises(ValueError, match="No tuning job available"):
            method()


def test_stop_tuning_job(sagemaker_session):
    tuner = _tuner(sagemaker_session)
    tuner.fit("s3://bucket/train", job_name="my-tuning-job", wait=False)
    tuner.stop_tuning_job()
    sagemaker_session.stop_tuning_job.assert_called_once_with(name="my-tuning-job")


def test_warm_start_tuners(sagemaker_session):
    tuner = _tuner(sagemaker_session)
    tuner.fit("s3://bucket/train", job_name="parent-a", wait=False)

    transfer = tuner.transfer_learning_tuner(additional_parents={"parent-b"})
    assert transfer.warm_start_config.type is WarmStartTypes.TRANSFER_LEARNING
    assert transfer.warm_start_config.parents == {"parent-a", "parent-b"}
    assert transfer.estimator is tuner.estimator
    assert transfer.max_jobs == 10

    identical = tuner.identical_dataset_and_algorithm_tuner()
    assert identical.warm_start_config.to_input_req() == {
        "WarmStartType": "IdenticalDataAndAlgorithm",
        "ParentHyperParameterTuningJobs": [{"HyperParameterTuningJobName": "parent-a"}],
    }


def test_warm_start_config():
    config = WarmStartConfig(WarmStartTypes.TRANSFER_LEARNING, parents={"p2", "p1"})
    assert config.to_input_req() == {
        "WarmStartType": "TransferLearning",
        "ParentHyperParameterTuningJobs": [
            {"HyperParameterTuningJobName": "p1"},
            {"HyperParameterTuningJobName": "p2"},
        ],
    }
    assert WarmStartConfig.from_job_desc(config.to_input_req()).parents == {"p1", "p2"}
    assert WarmStartConfig.from_job_desc({"WarmStartType": "TransferLearning"}) is None

    with pytest.raises(ValueError, match="Invalid type"):
        WarmStartConfig("Other", parents={"p1"})
    with pytest.raises(ValueError, match="Invalid parents"):
        WarmStartConfig(WarmStartTypes.TRANSFER_LEARNING, parents=set())
