from unittest.mock import MagicMock

import pytest

from smkit.debugger import DebuggerHookConfig, ProfilerRule, Rule, TensorBoardOutputConfig, builtin_rule
from smkit.estimator import Estimator
from smkit.inputs import TrainingInput
from smkit.model_monitor import DataCaptureConfig
from smkit.predictor import Predictor

from conftest import BUCKET, ROLE, ROLE_ARN

IMAGE = "111122223333.dkr.ecr.us-west-2.amazonaws.com/my-algo:latest"
RULES_IMAGE = "895741380848.dkr.ecr.us-west-2.amazonaws.com/sagemaker-debugger-rules:latest"
JOB_NAME = "my-algo-2021-06-07-08-09-10-123"


def _estimator(sagemaker_session, **kwargs):
    kwargs.setdefault("instance_count", 1)
    kwargs.setdefault("instance_type", "ml.c5.xlarge")
    return Estimator(IMAGE, ROLE, sagemaker_session=sagemaker_session, **kwargs)


def _train_args(sagemaker_session):
    return sagemaker_session.train.call_args.kwargs


def test_instance_settings_required(sagemaker_session):
    with pytest.raises(ValueError, match="instance_count and instance_type"):
        Estimator(IMAGE, ROLE, instance_count=1, sagemaker_session=sagemaker_session)


def test_fit_request(sagemaker_session):
    estimator = _estimator(sagemaker_session, hyperparameters={"epochs": 10}, max_retry_attempts=2)
    estimator.set_hyperparameters(lr=0.1)
    estimator.fit("s3://bucket/train", wait=False, job_name="my-job")

    args = _train_args(sagemaker_session)
    assert args["job_name"] == "my-job"
    assert args["image_uri"] == IMAGE
    assert args["role"] == ROLE_ARN
    assert args["input_mode"] == "File"
    assert args["hyperparameters"] == {"epochs": "10", "lr": "0.1"}
    assert args["input_config"] == [
        {
            "DataSource": {
                "S3DataSource": {
                    "S3DataType": "S3Prefix",
                    "S3Uri": "s3://bucket/train",
                    "S3DataDistributionType": "FullyReplicated",
                }
            },
            "ChannelName": "training",
        }
    ]
    assert args["output_config"] == {"S3OutputPath": f"s3://{BUCKET}/"}
    assert args["resource_config"] == {"InstanceCount": 1, "InstanceType": "ml.c5.xlarge", "VolumeSizeInGB": 30}
    assert args["stop_condition"] == {"MaxRuntimeInSeconds": 86400}
    assert args["vpc_config"] is None
    assert args["retry_strategy"] == {"MaximumRetryAttempts": 2}
    assert estimator.latest_training_job.name == "my-job"
    sagemaker_session.logs_for_job.assert_not_called()


def test_fit_generates_job_name(sagemaker_session):
    estimator = _estimator(sagemaker_session)
    estimator.fit("s3://bucket/train", wait=False)
    assert estimator.latest_training_job.name.startswith("my-algo-")
    assert estimator.base_job_name == "my-algo"


def test_fit_channels_and_model_channel(sagemaker_session):
    estimator = _estimator(sagemaker_session, model_uri="s3://bucket/model.tar.gz")
    estimator.fit(
        {"train": "s3://bucket/train", "test": TrainingInput("s3://bucket/test", content_type="text/csv")},
        wait=False,
    )
    channels = {c["ChannelName"]: c for c in _train_args(sagemaker_session)["input_config"]}
    assert set(channels) == {"train", "test", "model"}
    assert channels["test"]["ContentType"] == "text/csv"
    assert channels["model"]["ContentType"] == "application/x-sagemaker-model"
    assert channels["model"]["InputMode"] == "File"


def test_fit_channel_input_mode_overrides_estimator(sagemaker_session):
    estimator = _estimator(sagemaker_session)
    estimator.fit(TrainingInput("s3://bucket/train", input_mode="Pipe"), wait=False)
    assert _train_args(sagemaker_session)["input_mode"] == "Pipe"


def test_fit_rejects_non_s3_uri(sagemaker_session):
    with pytest.raises(ValueError, match="must be a valid S3 URI"):
        _estimator(sagemaker_session).fit("/local/train", wait=False)
    with pytest.raises(ValueError, match="Local mode is not supported"):
        _estimator(sagemaker_session).fit("file:///local/train", wait=False)


def test_default_profiler(sagemaker_session):
    estimator = _estimator(sagemaker_session)
    estimator.fit("s3://bucket/train", wait=False)
    args = _train_args(sagemaker_session)
    assert args["profiler_config"] == {"S3OutputPath": f"s3://{BUCKET}/"}
    assert args["profiler_rule_configs"] == [
        {
            "RuleConfigurationName": "ProfilerReport",
            "RuleEvaluatorImage": RULES_IMAGE,
            "RuleParameters": {"rule_to_invoke": "ProfilerReport"},
        }
    ]
    assert "debugger_rule_configs" not in args
    assert "debugger_hook_config" not in args


def test_empty_rules_skip_default_profiler_rule(sagemaker_session):
    _estimator(sagemaker_session, rules=[]).fit("s3://bucket/train", wait=False)
    args = _train_args(sagemaker_session)
    assert "profiler_rule_configs" not in args
    assert args["profiler_config"] == {"S3OutputPath": f"s3://{BUCKET}/"}


def test_disable_profiler(sagemaker_session):
    _estimator(sagemaker_session, disable_profiler=True).fit("s3://bucket/train", wait=False)
    args = _train_args(sagemaker_session)
    assert "profiler_config" not in args
    assert "profiler_rule_configs" not in args


def test_disable_profiler_conflicts_with_profiler_rule(sagemaker_session):
    estimator = _estimator(
        sagemaker_session,
        disable_profiler=True,
        rules=[ProfilerRule.sagemaker(builtin_rule("CPUBottleneck"))],
    )
    with pytest.raises(RuntimeError, match="ProfilerRule cannot be set"):
        estimator.fit("s3://bucket/train", wait=False)


def test_debugger_rules(sagemaker_session):
    estimator = _estimator(
        sagemaker_session,
        output_path="s3://bucket/output",
        rules=[Rule.sagemaker(builtin_rule("VanishingGradient"))],
        tensorboard_output_config=TensorBoardOutputConfig("s3://bucket/tb"),
    )
    estimator.fit("s3://bucket/train", wait=False, job_name="job")
    args = _train_args(sagemaker_session)
    assert args["debugger_rule_configs"] == [
        {
            "RuleConfigurationName": "VanishingGradient",
            "RuleEvaluatorImage": RULES_IMAGE,
            "RuleParameters": {"rule_to_invoke": "VanishingGradient"},
        }
    ]
    assert args["debugger_hook_config"] == {"S3OutputPath": "s3://bucket/output"}
    assert args["tensorboard_output_config"] == {"S3OutputPath": "s3://bucket/tb"}
    # A debugger-only rule list still gets the default profiler rule.
    assert args["profiler_rule_configs"][0]["RuleConfigurationName"] == "ProfilerReport"

    assert estimator.latest_job_debugger_artifacts_path() == "s3://bucket/output/job/debug-output"
    assert estimator.latest_job_tensorboard_artifacts_path() == "s3://bucket/tb/job/tensorboard-output"
    assert estimator.latest_job_profiler_artifacts_path() == "s3://bucket/output/job/profiler-output"


def test_custom_rule_local_source_is_uploaded(sagemaker_session):
    sagemaker_session.upload_data.return_value = "s3://bucket/output/job/rule-source/MyRule/rule.py"
    rule = Rule.custom(
        name="MyRule",
        image_uri="111122223333.dkr.ecr.us-west-2.amazonaws.com/rules:latest",
        instance_type="ml.t3.medium",
        volume_size_in_gb=10,
        source="rule.py",
        rule_to_invoke="MyRule",
    )
    estimator = _estimator(sagemaker_session, output_path="s3://bucket/output", rules=[rule])
    estimator.fit("s3://bucket/train", wait=False, job_name="job")
    sagemaker_session.upload_data.assert_called_once_with(
        path="rule.py", bucket="bucket", key_prefix="output/job/rule-source/MyRule"
    )
    config = _train_args(sagemaker_session)["debugger_rule_configs"][0]
    assert config["RuleParameters"]["source_s3_uri"] == "s3://bucket/output/job/rule-source/MyRule/rule.py"
    assert config["InstanceType"] == "ml.t3.medium"


def test_debugger_hook_collections_are_merged(sagemaker_session):
    base_config = builtin_rule("WeightUpdateRatio")
    base_config["CollectionConfigurations"] = [{"CollectionName": "weights"}]
    estimator = _estimator(
        sagemaker_session,
        rules=[Rule.sagemaker(base_config)],
        debugger_hook_config=DebuggerHookConfig(),
    )
    estimator.fit("s3://bucket/train", wait=False)
    hook = _train_args(sagemaker_session)["debugger_hook_config"]
    assert hook == {"S3OutputPath": f"s3://{BUCKET}/", "CollectionConfigurations": [{"CollectionName": "weights"}]}


def test_spot_and_checkpoints(sagemaker_session):
    estimator = _estimator(
        sagemaker_session,
        use_spot_instances=True,
        max_wait=7200,
        max_run=3600,
        checkpoint_s3_uri="s3://bucket/checkpoints",
        checkpoint_local_path="/opt/ml/checkpoints",
    )
    estimator.fit("s3://bucket/train", wait=False)
    args = _train_args(sagemaker_session)
    assert args["use_spot_instances"] is True
    assert args["stop_condition"] == {"MaxRuntimeInSeconds": 3600, "MaxWaitTimeInSeconds": 7200}
    assert args["checkpoint_s3_uri"] == "s3://bucket/checkpoints"
    assert args["checkpoint_local_path"] == "/opt/ml/checkpoints"


def test_fit_waits_with_logs(sagemaker_session):
    _estimator(sagemaker_session).fit("s3://bucket/train", job_name="job")
    sagemaker_session.logs_for_job.assert_called_once_with("job", wait=True, log_type="All")


def test_fit_waits_without_logs(sagemaker_session):
    _estimator(sagemaker_session).fit("s3://bucket/train", job_name="job", logs=False)
    sagemaker_session.wait_for_job.assert_called_once_with("job")


def test_methods_require_training_job(sagemaker_session):
    estimator = _estimator(sagemaker_session)
    with pytest.raises(ValueError, match="not associated with a training job"):
        estimator.wait()
    with pytest.raises(ValueError):
        estimator.deploy(1, "ml.m5.large")
    with pytest.raises(ValueError, match="not been deployed"):
        estimator.delete_endpoint()


def _job_details(**overrides):
    details = {
        "TrainingJobName": JOB_NAME,
        "TrainingJobArn": f"arn:aws:sagemaker:us-west-2:111122223333:training-job/{JOB_NAME}",
        "RoleArn": ROLE_ARN,
        "ResourceConfig": {"InstanceCount": 2, "InstanceType": "ml.c5.xlarge", "VolumeSizeInGB": 50},
        "StoppingCondition": {"MaxRuntimeInSeconds": 3600, "MaxWaitTimeInSeconds": 7200},
        "AlgorithmSpecification": {"TrainingInputMode": "File", "TrainingImage": IMAGE},
        "OutputDataConfig": {"S3OutputPath": "s3://bucket/output"},
        "HyperParameters": {"epochs": "10"},
        "VpcConfig": {"Subnets": ["subnet-1"], "SecurityGroupIds": ["sg-1"]},
        "EnableManagedSpotTraining": True,
        "InputDataConfig": [
            {"ChannelName": "model", "DataSource": {"S3DataSource": {"S3Uri": "s3://bucket/model.tar.gz"}}}
        ],
        "ModelArtifacts": {"S3ModelArtifacts": "s3://bucket/output/job/output/model.tar.gz"},
        "TrainingJobStatus": "Completed",
    }
    details.update(overrides)
    return details


def test_attach(sagemaker_session):
    sagemaker_session.sagemaker_client.describe_training_job.return_value = _job_details()
    sagemaker_session.list_tags.return_value = [{"Key": "team", "Value": "ml"}]

    estimator = Estimator.attach(JOB_NAME, sagemaker_session=sagemaker_session)

    assert estimator.latest_training_job.name == JOB_NAME
    assert estimator.base_job_name == "my-algo"
    assert estimator.image_uri == IMAGE
    assert estimator.role == ROLE_ARN
    assert estimator.instance_count == 2
    assert estimator.volume_size == 50
    assert estimator.hyperparameters() == {"epochs": "10"}
    assert estimator.subnets == ["subnet-1"]
    assert estimator.security_group_ids == ["sg-1"]
    assert estimator.use_spot_instances is True
    assert estimator.max_wait == 7200
    assert estimator.model_uri == "s3://bucket/model.tar.gz"
    assert estimator.tags == [{"Key": "team", "Value": "ml"}]
    sagemaker_session.wait_for_job.assert_called_once_with(JOB_NAME)


def test_attach_marketplace_algorithm(sagemaker_session):
    sagemaker_session.sagemaker_client.describe_training_job.return_value = _job_details(
        AlgorithmSpecification={"TrainingInputMode": "File", "AlgorithmName": "arn:aws:sagemaker:algo"}
    )
    with pytest.raises(ValueError, match="Marketplace"):
        Estimator.attach(JOB_NAME, sagemaker_session=sagemaker_session)


def test_deploy(sagemaker_session):
    sagemaker_session.sagemaker_client.describe_training_job.return_value = _job_details()
    estimator = _estimator(sagemaker_session)
    estimator.fit("s3://bucket/train", wait=False)

    predictor = estimator.deploy(
        1,
        "ml.m5.large",
        endpoint_name="my-endpoint",
        data_capture_config=DataCaptureConfig(enable_capture=True, destination_s3_uri="s3://bucket/capture"),
    )

    assert isinstance(predictor, Predictor)
    assert predictor.endpoint_name == "my-endpoint"
    name, role, container = sagemaker_session.create_model.call_args.args
    assert name.startswith("my-algo-")
    assert role == ROLE
    assert container == {
        "Image": IMAGE,
        "Environment": {},
        "ModelDataUrl": "s3://bucket/output/job/output/model.tar.gz",
    }
    kwargs = sagemaker_session.endpoint_from_production_variants.call_args.kwargs
    assert kwargs["name"] == "my-endpoint"
    assert kwargs["production_variants"][0]["InstanceType"] == "ml.m5.large"
    assert kwargs["data_capture_config_dict"]["DestinationS3Uri"] == "s3://bucket/capture"

    estimator.delete_endpoint()
    sagemaker_session.delete_endpoint.assert_called_once_with("my-endpoint")


def test_vpc_config_override(sagemaker_session):
    estimator = _estimator(sagemaker_session, subnets=["subnet-1"], security_group_ids=["sg-1"])
    assert estimator.get_vpc_config() == {"Subnets": ["subnet-1"], "SecurityGroupIds": ["sg-1"]}
    assert estimator.get_vpc_config(None) is None
    with pytest.raises(ValueError):
        estimator.get_vpc_config({"Subnets": []})


def test_update_profiler(sagemaker_session):
    estimator = _estimator(sagemaker_session)
    estimator.fit("s3://bucket/train", wait=False, job_name="job")

    with pytest.raises(ValueError, match="Please provide profiler config"):
        estimator.update_profiler()

    estimator.update_profiler(system_monitor_interval_millis=1000)
    sagemaker_session.update_training_job.assert_called_once_with(
        "job",
        profiler_rule_configs=None,
        profiler_config={"ProfilingIntervalInMilliseconds": 1000},
    )


def test_disable_profiling(sagemaker_session):
    estimator = _estimator(sagemaker_session)
    estimator.fit("s3://bucket/train", wait=False, job_name="job")
    sagemaker_session.describe_training_job.return_value = {"ProfilingStatus": "Enabled"}

    estimator.disable_profiling()
    sagemaker_session.update_training_job.assert_called_once_with(
        "job", profiler_rule_configs=None, profiler_config={"DisableProfiler": True}
    )

    sagemaker_session.describe_training_job.return_value = {"ProfilingStatus": "Disabled"}
    with pytest.raises(ValueError, match="already disabled"):
        estimator.disable_profiling()


def test_training_job_analytics_requires_job(sagemaker_session):
    with pytest.raises(ValueError):
        _estimator(sagemaker_session).training_job_analytics


def test_model_data_without_job(sagemaker_session):
    estimator = _estimator(sagemaker_session, output_path="s3://bucket/output")
    estimator._current_job_name = "job"
    assert estimator.model_data == "s3://bucket/output/job/output/model.tar.gz"


def test_predictor_from_session_mock():
    # Predictor accepts any session-like object.
    predictor = Predictor("ep", sagemaker_session=MagicMock())
    assert predictor.content_type == "application/octet-stream"
    assert predictor.accept == ("*/*",)
