import pytest

from smkit.debugger import (
    CollectionConfig,
    DebuggerHookConfig,
    ProfilerRule,
    Rule,
    TensorBoardOutputConfig,
    builtin_rule,
    get_default_profiler_rule,
)
from smkit.debugger.utils import DEFAULT_RULE_EVALUATOR_IMAGE


def test_builtin_rule():
    assert builtin_rule("LossNotDecreasing", num_steps="10") == {
        "DebugRuleConfiguration": {
            "RuleConfigurationName": "LossNotDecreasing",
            "RuleParameters": {"rule_to_invoke": "LossNotDecreasing", "num_steps": "10"},
        }
    }


def test_sagemaker_rule_merges_parameters():
    rule = Rule.sagemaker(
        builtin_rule("VanishingGradient"),
        rule_parameters={"threshold": "0.0001"},
        other_trials_s3_input_paths=["s3://bucket/trial-a"],
    )
    assert rule.name == "VanishingGradient"
    assert rule.to_debugger_rule_config_dict() == {
        "RuleConfigurationName": "VanishingGradient",
        "RuleEvaluatorImage": DEFAULT_RULE_EVALUATOR_IMAGE,
        "RuleParameters": {
            "other_trial_0": "s3://bucket/trial-a",
            "rule_to_invoke": "VanishingGradient",
            "threshold": "0.0001",
        },
    }


def test_sagemaker_rule_rejects_rule_to_invoke():
    with pytest.raises(RuntimeError, match="rule_to_invoke"):
        Rule.sagemaker(builtin_rule("Overfit"), rule_parameters={"rule_to_invoke": "Other"})


def test_sagemaker_rule_collections_from_base_config():
    base_config = builtin_rule("WeightUpdateRatio")
    base_config["CollectionConfigurations"] = [
        {"CollectionName": "weights", "CollectionParameters": {"save_interval": "500"}}
    ]
    rule = Rule.sagemaker(base_config)
    assert rule.collection_configs == [CollectionConfig("weights", {"save_interval": "500"})]


def test_custom_rule():
    rule = Rule.custom(
        name="MyRule",
        image_uri="111122223333.dkr.ecr.us-west-2.amazonaws.com/rules:latest",
        instance_type="ml.t3.medium",
        volume_size_in_gb=30,
        source="s3://bucket/rules.py",
        rule_to_invoke="CustomGradientRule",
        s3_output_path="s3://bucket/output",
    )
    assert rule.to_debugger_rule_config_dict() == {
        "RuleConfigurationName": "MyRule",
        "RuleEvaluatorImage": "111122223333.dkr.ecr.us-west-2.amazonaws.com/rules:latest",
        "InstanceType": "ml.t3.medium",
        "VolumeSizeInGB": 30,
        "S3OutputPath": "s3://bucket/output",
        "RuleParameters": {"source_s3_uri": "s3://bucket/rules.py", "rule_to_invoke": "CustomGradientRule"},
    }
    assert rule.collection_configs == []


def test_custom_rule_requires_rule_to_invoke_with_source():
    with pytest.raises(ValueError, match="rule to invoke"):
        Rule.custom(
            name="MyRule",
            image_uri="image",
            instance_type="ml.t3.medium",
            volume_size_in_gb=30,
            source="s3://bucket/rules.py",
        )


def test_default_profiler_rule():
    rule = get_default_profiler_rule()
    assert isinstance(rule, ProfilerRule)
    assert rule.to_profiler_rule_config_dict() == {
        "RuleConfigurationName": "ProfilerReport",
        "RuleEvaluatorImage": DEFAULT_RULE_EVALUATOR_IMAGE,
        "RuleParameters": {"rule_to_invoke": "ProfilerReport"},
    }


def test_collection_config():
    assert CollectionConfig("losses")._to_request_dict() == {"CollectionName": "losses"}
    assert CollectionConfig("losses", {"save_interval": "10"})._to_request_dict() == {
        "CollectionName": "losses",
        "CollectionParameters": {"save_interval": "10"},
    }
    assert len({CollectionConfig("a"), CollectionConfig("a"), CollectionConfig("b")}) == 2
    with pytest.raises(TypeError):
        CollectionConfig("a") == "a"


def test_debugger_hook_config():
    config = DebuggerHookConfig(
        s3_output_path="s3://bucket/debug",
        container_local_output_path="/opt/ml/output/tensors",
        hook_parameters={"save_interval": "100"},
        collection_configs=[CollectionConfig("gradients")],
    )
    assert config._to_request_dict() == {
        "S3OutputPath": "s3://bucket/debug",
        "LocalPath": "/opt/ml/output/tensors",
        "HookParameters": {"save_interval": "100"},
        "CollectionConfigurations": [{"CollectionName": "gradients"}],
    }


def test_tensorboard_output_config():
    assert TensorBoardOutputConfig("s3://bucket/tb")._to_request_dict() == {"S3OutputPath": "s3://bucket/tb"}
    assert TensorBoardOutputConfig("s3://bucket/tb", "/opt/ml/tb")._to_request_dict() == {
        "S3OutputPath": "s3://bucket/tb",
        "LocalPath": "/opt/ml/tb",
    }


def test_framework_profile_defaults():
    from smkit.debugger import FrameworkProfile

    params = FrameworkProfile().profiling_parameters
    assert params["LocalPath"] == "/opt/ml/output/profiler"
    assert params["RotateMaxFileSizeInBytes"] == "10485760"
    assert params["RotateFileCloseIntervalInSeconds"] == "60"
    assert params["FileOpenFailThreshold"] == "50"
    assert params["DetailedProfilingConfig"] == '{"StartStep": 5, "NumSteps": 1}'
    assert params["DataloaderProfilingConfig"] == '{"StartStep": 5, "NumSteps": 1, "MetricsRegex": ".*"}'
    assert params["PythonProfilingConfig"] == (
        '{"StartStep": 5, "NumSteps": 1, "ProfilerName": "cprofile", "cProfileTimer": "default"}'
    )


def test_framework_profile_custom_configs_only():
    from smkit.debugger import DetailedProfilingConfig, FrameworkProfile

    params = FrameworkProfile(detailed_profiling_config=DetailedProfilingConfig(start_step=2, num_steps=3))
    assert params.profiling_parameters["DetailedProfilingConfig"] == '{"StartStep": 2, "NumSteps": 3}'
    assert "PythonProfilingConfig" not in params.profiling_parameters


def test_framework_profile_time_range_for_all_metrics():
    from smkit.debugger import FrameworkProfile

    params = FrameworkProfile(start_unix_time=1600000000, duration=60).profiling_parameters
    assert params["HorovodProfilingConfig"] == '{"StartTimeInSecSinceEpoch": 1600000000, "Duration": 60}'


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_step": -1},
        {"num_steps": 0},
        {"duration": -5},
        {"start_step": 1, "duration": 5},
    ],
)
def test_metrics_config_validation(kwargs):
    from smkit.debugger import HorovodProfilingConfig

    with pytest.raises(ValueError):
        HorovodProfilingConfig(**kwargs)


def test_python_profiling_config_pyinstrument_drops_timer():
    from smkit.debugger import PythonProfiler, PythonProfilingConfig

    config = PythonProfilingConfig(start_step=1, num_steps=2, python_profiler=PythonProfiler.PYINSTRUMENT)
    assert config.to_json_string() == '{"StartStep": 1, "NumSteps": 2, "ProfilerName": "pyinstrument"}'


def test_profiler_config():
    from smkit.debugger import FrameworkProfile, ProfilerConfig

    assert ProfilerConfig(s3_output_path="s3://bucket/prof", system_monitor_interval_millis=500)._to_request_dict() == {
        "S3OutputPath": "s3://bucket/prof",
        "ProfilingIntervalInMilliseconds": 500,
    }
    profile = FrameworkProfile(start_step=1, num_steps=1)
    request = ProfilerConfig(framework_profile_params=profile)._to_request_dict()
    assert request["ProfilingParameters"] is profile.profiling_parameters
    assert ProfilerConfig._to_profiler_disabled_request_dict() == {"DisableProfiler": True}
    with pytest.raises(ValueError):
        ProfilerConfig(framework_profile_params={"LocalPath": "/tmp"})
