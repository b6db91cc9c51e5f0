import json
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from smkit import config as smconfig
from smkit.exceptions import MissingFileError, UnexpectedStatusException
from smkit.model_monitor import (
    Constraints,
    CronExpressionGenerator,
    DatasetFormat,
    DefaultModelMonitor,
    EndpointInput,
    ModelMonitor,
    ModelQualityMonitor,
    MonitoringExecution,
    MonitoringOutput,
    Statistics,
)
from smkit.network import NetworkConfig

from conftest import ROLE, ROLE_ARN

ANALYZER_IMAGE = "159807026194.dkr.ecr.us-west-2.amazonaws.com/sagemaker-model-monitor-analyzer:latest"
SCHEDULE_ARN = "arn:aws:sagemaker:us-west-2:111122223333:monitoring-schedule/my-schedule"
ENDPOINT_INPUT = {
    "EndpointInput": {
        "EndpointName": "my-endpoint",
        "LocalPath": "/opt/ml/processing/input/endpoint",
        "S3InputMode": "File",
        "S3DataDistributionType": "FullyReplicated",
    }
}


def _no_such_key():
    return ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")


def _execution_desc(job_name, status="Completed"):
    return {
        "ProcessingJobName": job_name,
        "ProcessingJobStatus": status,
        "ProcessingOutputConfig": {
            "Outputs": [
                {
                    "OutputName": "monitoring_output",
                    "S3Output": {"S3Uri": f"s3://bucket/{job_name}", "LocalPath": "/opt/ml/processing/output"},
                }
            ]
        },
    }


def _processing_arn(job_name):
    return f"arn:aws:sagemaker:us-west-2:111122223333:processing-job/{job_name}"


@pytest.fixture
def data_quality_schedule(sagemaker_session):
    sagemaker_session.describe_monitoring_schedule.return_value = {
        "MonitoringScheduleName": "my-schedule",
        "MonitoringScheduleArn": SCHEDULE_ARN,
        "MonitoringScheduleStatus": "Scheduled",
        "MonitoringScheduleConfig": {"MonitoringType": "DataQuality", "MonitoringJobDefinitionName": "dq-def"},
    }
    sagemaker_session.describe_data_quality_job_definition.return_value = {
        "JobDefinitionName": "dq-def",
        "RoleArn": ROLE_ARN,
        "DataQualityAppSpecification": {"ImageUri": ANALYZER_IMAGE, "Environment": {"threshold": "0.2"}},
        "DataQualityJobInput": ENDPOINT_INPUT,
        "DataQualityJobOutputConfig": {"MonitoringOutputs": [], "KmsKeyId": "out-key"},
        "JobResources": {"ClusterConfig": {"InstanceCount": 2, "InstanceType": "ml.c5.xlarge", "VolumeSizeInGB": 50}},
        "StoppingCondition": {"MaxRuntimeInSeconds": 1800},
        "NetworkConfig": {
            "EnableNetworkIsolation": True,
            "VpcConfig": {"SecurityGroupIds": ["sg-1"], "Subnets": ["subnet-1"]},
        },
    }
    return sagemaker_session


def test_cron_expressions():
    assert CronExpressionGenerator.hourly() == "cron(0 * ? * * *)"
    assert CronExpressionGenerator.daily() == "cron(0 0 ? * * *)"
    assert CronExpressionGenerator.daily(hour=5) == "cron(0 5 ? * * *)"
    assert CronExpressionGenerator.daily_every_x_hours(6, starting_hour=2) == "cron(0 2/6 ? * * *)"


def test_dataset_formats():
    assert DatasetFormat.csv(header=False) == {"csv": {"header": False, "output_columns_position": "START"}}
    assert DatasetFormat.json() == {"json": {"lines": True}}
    assert DatasetFormat.sagemaker_capture_json() == {"sagemakerCaptureJson": {}}
    with pytest.raises(ValueError, match="output_columns_position"):
        DatasetFormat.csv(output_columns_position="MIDDLE")


def test_endpoint_input_and_monitoring_output():
    endpoint_input = EndpointInput(
        "my-endpoint",
        "/opt/ml/processing/input/endpoint",
        start_time_offset="-PT1H",
        end_time_offset="-PT0H",
        inference_attribute="0",
    )
    assert endpoint_input._to_request_dict()["EndpointInput"] == {
        **ENDPOINT_INPUT["EndpointInput"],
        "StartTimeOffset": "-PT1H",
        "EndTimeOffset": "-PT0H",
        "InferenceAttribute": "0",
    }
    with pytest.raises(ValueError, match="s3_input_mode"):
        EndpointInput("my-endpoint", "/opt/ml/input", s3_input_mode="Stream")

    assert MonitoringOutput("/opt/ml/processing/output", "s3://bucket/out")._to_request_dict() == {
        "S3Output": {"S3Uri": "s3://bucket/out", "LocalPath": "/opt/ml/processing/output", "S3UploadMode": "Continuous"}
    }


def test_statistics_from_s3_uri(sagemaker_session):
    sagemaker_session.read_s3_file.return_value = '{"version": 0.0, "features": []}'

    statistics = Statistics.from_s3_uri("s3://bucket/baseline/statistics.json", sagemaker_session=sagemaker_session)

    assert statistics.body_dict == {"version": 0.0, "features": []}
    assert statistics.file_s3_uri == "s3://bucket/baseline/statistics.json"
    sagemaker_session.read_s3_file.assert_called_once_with(bucket="bucket", key_prefix="baseline/statistics.json")


def test_missing_monitoring_file(sagemaker_session):
    sagemaker_session.read_s3_file.side_effect = _no_such_key()
    with pytest.raises(MissingFileError, match="No constraints file"):
        Constraints.from_s3_uri("s3://bucket/constraints.json", sagemaker_session=sagemaker_session)

    sagemaker_session.read_s3_file.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject"
    )
    with pytest.raises(ClientError):
        Constraints.from_s3_uri("s3://bucket/constraints.json", sagemaker_session=sagemaker_session)


def test_statistics_from_file_path(sagemaker_session, tmp_path):
    path = tmp_path / "stats.json"
    path.write_text('{"dataset": {"item_count": 10}}')
    sagemaker_session.upload_string_as_file_body.side_effect = lambda body, bucket, key, kms_key: f"s3://{bucket}/{key}"
    sagemaker_session.read_s3_file.return_value = path.read_text()

    statistics = Statistics.from_file_path(str(path), sagemaker_session=sagemaker_session)

    upload = sagemaker_session.upload_string_as_file_body.call_args.kwargs
    assert upload["body"] == '{"dataset": {"item_count": 10}}'
    assert upload["bucket"] == "my-bucket"
    assert upload["key"].startswith("monitoring/")
    assert upload["key"].endswith("/stats.json")
    assert statistics.file_s3_uri == f"s3://my-bucket/{upload['key']}"
    assert statistics.body_dict == {"dataset": {"item_count": 10}}


def test_constraints_set_monitoring_and_save(sagemaker_session):
    constraints = Constraints(
        {"features": [{"name": "age"}, {"name": "income"}]},
        "s3://bucket/constraints.json",
        sagemaker_session=sagemaker_session,
    )

    constraints.set_monitoring(False)
    constraints.set_monitoring(True, feature_name="age")

    assert constraints.body_dict["monitoring_config"] == {"evaluate_constraints": "Disabled"}
    assert constraints.body_dict["features"][0]["string_constraints"] == {
        "monitoring_config_overrides": {"evaluate_constraints": "Enabled"}
    }
    assert "string_constraints" not in constraints.body_dict["features"][1]

    constraints.save(new_save_location_s3_uri="s3://bucket/v2/constraints.json")
    sagemaker_session.upload_string_as_file_body.assert_called_once_with(
        body=json.dumps(constraints.body_dict), bucket="bucket", key="v2/constraints.json", kms_key=None
    )
    assert constraints.file_s3_uri == "s3://bucket/v2/constraints.json"


def test_create_byoc_monitoring_schedule(sagemaker_session):
    sagemaker_session.read_s3_file.return_value = '{"features": []}'
    monitor = ModelMonitor(
        role=ROLE, image_uri="my-monitor:1", output_kms_key="out-key", sagemaker_session=sagemaker_session
    )
    statistics = Statistics({}, "s3://bucket/statistics.json", sagemaker_session=sagemaker_session)

    monitor.create_monitoring_schedule(
        endpoint_input="my-endpoint",
        output=MonitoringOutput(source="/opt/ml/processing/output"),
        statistics=statistics,
        constraints="s3://bucket/constraints.json",
        monitor_schedule_name="my-schedule",
        schedule_cron_expression=CronExpressionGenerator.daily(3),
    )

    sagemaker_session.create_monitoring_schedule.assert_called_once_with(
        monitoring_schedule_name="my-schedule",
        schedule_expression="cron(0 3 ? * * *)",
        statistics_s3_uri="s3://bucket/statistics.json",
        constraints_s3_uri="s3://bucket/constraints.json",
        monitoring_inputs=[ENDPOINT_INPUT],
        monitoring_output_config={
            "MonitoringOutputs": [
                {
                    "S3Output": {
                        "S3Uri": "s3://my-bucket/my-schedule/output",
                        "LocalPath": "/opt/ml/processing/output",
                        "S3UploadMode": "Continuous",
                    }
                }
            ],
            "KmsKeyId": "out-key",
        },
        instance_count=1,
        instance_type="ml.m5.xlarge",
        volume_size_in_gb=30,
        volume_kms_key=None,
        image_uri="my-monitor:1",
        entrypoint=None,
        arguments=None,
        record_preprocessor_source_uri=None,
        post_analytics_processor_source_uri=None,
        max_runtime_in_seconds=None,
        environment=None,
        network_config=None,
        role_arn=ROLE_ARN,
        tags=None,
    )

    with pytest.raises(ValueError, match="already used"):
        monitor.create_monitoring_schedule("my-endpoint", MonitoringOutput(source="/opt/ml/processing/output"))


def test_monitoring_rejects_inter_container_encryption(sagemaker_session, caplog):
    monitor = ModelMonitor(
        role=ROLE,
        image_uri="my-monitor:1",
        sagemaker_session=sagemaker_session,
        network_config=NetworkConfig(encrypt_inter_container_traffic=True),
    )
    with pytest.raises(ValueError, match="EnableInterContainerTrafficEncryption"):
        monitor.create_monitoring_schedule("my-endpoint", MonitoringOutput(source="/opt/ml/processing/output"))
    sagemaker_session.create_monitoring_schedule.assert_not_called()
    rejections = [r for r in caplog.records if "EnableInterContainerTrafficEncryption" in r.getMessage()]
    assert [r.levelname for r in rejections] == ["ERROR"]


def test_list_executions_oldest_first(sagemaker_session):
    sagemaker_session.list_monitoring_executions.return_value = {
        "MonitoringExecutionSummaries": [
            {"ProcessingJobArn": _processing_arn("exec-2")},
            {"MonitoringExecutionStatus": "Failed"},
            {"ProcessingJobArn": _processing_arn("exec-1")},
        ]
    }
    sagemaker_session.describe_processing_job.side_effect = lambda job_name: _execution_desc(job_name)
    sagemaker_session.read_s3_file.return_value = '{"violations": []}'
    monitor = ModelMonitor(role=ROLE, image_uri="my-monitor:1", sagemaker_session=sagemaker_session)
    monitor.monitoring_schedule_name = "my-schedule"

    executions = monitor.list_executions()

    assert [e.job_name for e in executions] == ["exec-1", "exec-2"]
    sagemaker_session.list_monitoring_executions.assert_called_with(monitoring_schedule_name="my-schedule")

    violations = monitor.latest_monitoring_constraint_violations()
    assert violations.body_dict == {"violations": []}
    sagemaker_session.read_s3_file.assert_called_once_with(
        bucket="bucket", key_prefix="exec-2/constraint_violations.json"
    )


def test_no_executions(sagemaker_session):
    sagemaker_session.list_monitoring_executions.return_value = {"MonitoringExecutionSummaries": []}
    monitor = ModelMonitor(role=ROLE, image_uri="my-monitor:1", sagemaker_session=sagemaker_session)
    assert monitor.list_executions() == []
    assert monitor.latest_monitoring_statistics() is None


def test_execution_files_require_completed_job(sagemaker_session):
    sagemaker_session.describe_processing_job.return_value = _execution_desc("exec-1", status="InProgress")
    sagemaker_session.read_s3_file.side_effect = _no_such_key()
    execution = MonitoringExecution.from_processing_arn(sagemaker_session, _processing_arn("exec-1"))

    with pytest.raises(UnexpectedStatusException) as excinfo:
        execution.statistics()
    assert excinfo.value.actual_status == "InProgress"

    sagemaker_session.describe_processing_job.return_value = _execution_desc("exec-1")
    with pytest.raises(MissingFileError):
        execution.statistics()


def test_default_monitor_suggest_baseline(sagemaker_session):
    monitor = DefaultModelMonitor(role=ROLE, sagemaker_session=sagemaker_session)
    assert monitor.image_uri == ANALYZER_IMAGE

    monitor.suggest_baseline(
        baseline_dataset="s3://bucket/train.csv",
        dataset_format=DatasetFormat.csv(header=False),
        wait=False,
        logs=False,
        job_name="baseline-job",
    )

    args = sagemaker_session.process.call_args.kwargs
    assert args["job_name"] == "baseline-job"
    assert args["inputs"][0]["InputName"] == "baseline_dataset_input"
    assert args["inputs"][0]["S3Input"]["S3Uri"] == "s3://bucket/train.csv"
    assert args["inputs"][0]["S3Input"]["LocalPath"] == "/opt/ml/processing/input/baseline_dataset_input"
    assert args["output_config"]["Outputs"][0]["OutputName"] == "monitoring_output"
    assert args["output_config"]["Outputs"][0]["S3Output"]["S3Uri"] == (
        "s3://my-bucket/model-monitor/baselining/baseline-job/results"
    )
    assert args["app_specification"] == {"ImageUri": ANALYZER_IMAGE}
    assert args["environment"] == {
        "output_path": "/opt/ml/processing/output",
        "publish_cloudwatch_metrics": "Disabled",
        "dataset_format": json.dumps({"csv": {"header": False, "output_columns_position": "START"}}),
        "dataset_source": "/opt/ml/processing/input/baseline_dataset_input",
    }
    sagemaker_session.upload_data.assert_not_called()

    sagemaker_session.read_s3_file.return_value = '{"version": 0.0}'
    statistics = monitor.baseline_statistics()
    assert statistics.body_dict == {"version": 0.0}
    assert statistics.file_s3_uri == "s3://my-bucket/model-monitor/baselining/baseline-job/results/statistics.json"


def test_default_monitor_requires_baselining_job(sagemaker_session):
    monitor = DefaultModelMonitor(role=ROLE, sagemaker_session=sagemaker_session)
    with pytest.raises(ValueError, match="No suggestion jobs"):
        monitor.suggested_constraints()
    with pytest.raises(NotImplementedError, match="suggest_baseline"):
        monitor.run_baseline([], "/opt/ml/processing/output")


def test_default_monitor_create_monitoring_schedule(sagemaker_session):
    monitor = DefaultModelMonitor(role=ROLE, sagemaker_session=sagemaker_session)
    constraints = Constraints({}, "s3://bucket/constraints.json", sagemaker_session=sagemaker_session)

    monitor.create_monitoring_schedule(
        endpoint_input="my-endpoint",
        constraints=constraints,
        monitor_schedule_name="my-schedule",
        schedule_cron_expression=CronExpressionGenerator.hourly(),
    )

    request = dict(sagemaker_session.create_data_quality_job_definition.call_args.kwargs)
    job_definition_name = request.pop("JobDefinitionName")
    assert job_definition_name.startswith("data-quality-job-definition-")
    assert request == {
        "DataQualityAppSpecification": {
            "ImageUri": ANALYZER_IMAGE,
            "Environment": {"publish_cloudwatch_metrics": "Enabled"},
        },
        "DataQualityBaselineConfig": {"ConstraintsResource": {"S3Uri": "s3://bucket/constraints.json"}},
        "DataQualityJobInput": ENDPOINT_INPUT,
        "DataQualityJobOutputConfig": {
            "MonitoringOutputs": [
                {
                    "S3Output": {
                        "S3Uri": "s3://my-bucket/model-monitor/monitoring/my-schedule/results",
                        "LocalPath": "/opt/ml/processing/output",
                        "S3UploadMode": "Continuous",
                    }
                }
            ]
        },
        "JobResources": {"ClusterConfig": {"InstanceCount": 1, "InstanceType": "ml.m5.xlarge", "VolumeSizeInGB": 30}},
        "RoleArn": ROLE_ARN,
    }
    sagemaker_session.create_monitoring_schedule_from_job_definition.assert_called_once_with(
        monitoring_schedule_name="my-schedule",
        job_definition_name=job_definition_name,
        monitoring_type="DataQuality",
        schedule_expression="cron(0 * ? * * *)",
        tags=None,
    )
    assert monitor.job_definition_name == job_definition_name
    assert monitor.monitoring_schedule_name == "my-schedule"


def test_failed_schedule_drops_job_definition(sagemaker_session):
    sagemaker_session.create_monitoring_schedule_from_job_definition.side_effect = ClientError(
        {"Error": {"Code": "ValidationException", "Message": "bad"}}, "CreateMonitoringSchedule"
    )
    monitor = DefaultModelMonitor(role=ROLE, sagemaker_session=sagemaker_session)

    with pytest.raises(ClientError):
        monitor.create_monitoring_schedule("my-endpoint", monitor_schedule_name="my-schedule")

    job_definition_name = sagemaker_session.create_data_quality_job_definition.call_args.kwargs["JobDefinitionName"]
    sagemaker_session.delete_data_quality_job_definition.assert_called_once_with(job_definition_name)
    assert monitor.job_definition_name is None
    assert monitor.monitoring_schedule_name is None


def test_model_quality_create_monitoring_schedule(sagemaker_session):
    monitor = ModelQualityMonitor(role=ROLE, sagemaker_session=sagemaker_session)

    monitor.create_monitoring_schedule(
        endpoint_input=EndpointInput("my-endpoint", "/opt/ml/processing/input/endpoint", inference_attribute="0"),
        ground_truth_input="s3://bucket/ground-truth",
        problem_type="BinaryClassification",
        monitor_schedule_name="quality-schedule",
    )

    request = sagemaker_session.create_model_quality_job_definition.call_args.kwargs
    assert request["ModelQualityAppSpecification"]["ProblemType"] == "BinaryClassification"
    assert request["ModelQualityJobInput"]["GroundTruthS3Input"] == {"S3Uri": "s3://bucket/ground-truth"}
    assert request["ModelQualityJobInput"]["EndpointInput"]["InferenceAttribute"] == "0"
    assert sagemaker_session.create_monitoring_schedule_from_job_definition.call_args.kwargs["monitoring_type"] == (
        "ModelQuality"
    )


def test_attach_default_monitor(data_quality_schedule):
    monitor = DefaultModelMonitor.attach("my-schedule", sagemaker_session=data_quality_schedule)

    data_quality_schedule.describe_data_quality_job_definition.assert_called_once_with("dq-def")
    assert monitor.monitoring_schedule_name == "my-schedule"
    assert monitor.job_definition_name == "dq-def"
    assert monitor.role == ROLE_ARN
    assert monitor.image_uri == ANALYZER_IMAGE
    assert monitor.instance_count == 2
    assert monitor.instance_type == "ml.c5.xlarge"
    assert monitor.volume_size_in_gb == 50
    assert monitor.output_kms_key == "out-key"
    assert monitor.max_runtime_in_seconds == 1800
    assert monitor.env == {"threshold": "0.2"}
    assert monitor.network_config.subnets == ["subnet-1"]
    assert monitor.network_config.security_group_ids == ["sg-1"]


def test_attach_rejects_other_monitoring_type(data_quality_schedule):
    with pytest.raises(TypeError, match="ModelQuality"):
        ModelQualityMonitor.attach("my-schedule", sagemaker_session=data_quality_schedule)


def test_attach_embedded_definition(sagemaker_session):
    sagemaker_session.describe_monitoring_schedule.return_value = {
        "MonitoringScheduleArn": SCHEDULE_ARN,
        "MonitoringScheduleConfig": {
            "MonitoringJobDefinition": {
                "RoleArn": ROLE_ARN,
                "MonitoringResources": {
                    "ClusterConfig": {"InstanceCount": 1, "InstanceType": "ml.m5.large", "VolumeSizeInGB": 20}
                },
                "MonitoringAppSpecification": {"ImageUri": "my-monitor:1", "ContainerEntrypoint": ["python3"]},
                "Environment": {"mode": "strict"},
            }
        },
    }

    monitor = ModelMonitor.attach("my-schedule", sagemaker_session=sagemaker_session)

    assert monitor.image_uri == "my-monitor:1"
    assert monitor.entrypoint == ["python3"]
    assert monitor.instance_type == "ml.m5.large"
    assert monitor.env == {"mode": "strict"}
    assert monitor.network_config is None
    assert monitor.job_definition_name is None
    sagemaker_session.list_tags.assert_called_once_with(resource_arn=SCHEDULE_ARN)


def test_update_schedule_expression_only(data_quality_schedule):
    monitor = DefaultModelMonitor.attach("my-schedule", sagemaker_session=data_quality_schedule)

    monitor.update_monitoring_schedule(schedule_cron_expression=CronExpressionGenerator.hourly())

    data_quality_schedule.update_monitoring_schedule_job_definition.assert_called_once_with(
        monitoring_schedule_name="my-schedule",
        job_definition_name="dq-def",
        monitoring_type="DataQuality",
        schedule_expression="cron(0 * ? * * *)",
    )
    data_quality_schedule.create_data_quality_job_definition.assert_not_called()


def test_update_creates_new_job_definition(data_quality_schedule):
    monitor = DefaultModelMonitor.attach("my-schedule", sagemaker_session=data_quality_schedule)

    monitor.update_monitoring_schedule(instance_count=4)

    request = data_quality_schedule.create_data_quality_job_definition.call_args.kwargs
    assert request["JobResources"]["ClusterConfig"] == {
        "InstanceCount": 4,
        "InstanceType": "ml.c5.xlarge",
        "VolumeSizeInGB": 50,
    }
    assert request["DataQualityAppSpecification"]["Environment"] == {"threshold": "0.2"}
    assert request["DataQualityJobInput"] == ENDPOINT_INPUT
    assert request["NetworkConfig"]["EnableNetworkIsolation"] is True
    assert request["StoppingCondition"] == {"MaxRuntimeInSeconds": 1800}
    new_name = request["JobDefinitionName"]
    assert new_name != "dq-def"
    assert data_quality_schedule.update_monitoring_schedule_job_definition.call_args.kwargs["job_definition_name"] == (
        new_name
    )
    assert monitor.job_definition_name == new_name
    assert monitor.instance_count == 4


def test_update_without_schedule(sagemaker_session):
    monitor = DefaultModelMonitor(role=ROLE, sagemaker_session=sagemaker_session)
    with pytest.raises(ValueError, match="Nothing to update"):
        monitor.update_monitoring_schedule(instance_count=2)


def test_delete_monitoring_schedule(data_quality_schedule):
    monitor = DefaultModelMonitor.attach("my-schedule", sagemaker_session=data_quality_schedule)

    monitor.delete_monitoring_schedule()

    data_quality_schedule.delete_monitoring_schedule.assert_called_once_with(monitoring_schedule_name="my-schedule")
    data_quality_schedule.delete_data_quality_job_definition.assert_called_once_with("dq-def")
    assert monitor.monitoring_schedule_name is None
    assert monitor.job_definition_name is None


@patch("smkit.utils.time.sleep")
def test_schedule_changes_wait_while_pending(sleep, sagemaker_session):
    sagemaker_session.describe_monitoring_schedule.side_effect = [
        {"MonitoringScheduleStatus": "Pending"},
        {"MonitoringScheduleStatus": "Pending"},
        {"MonitoringScheduleStatus": "Scheduled"},
    ]
    monitor = ModelMonitor(role=ROLE, image_uri="my-monitor:1", sagemaker_session=sagemaker_session)
    monitor.monitoring_schedule_name = "my-schedule"

    monitor.start_monitoring_schedule()

    sagemaker_session.start_monitoring_schedule.assert_called_once_with(monitoring_schedule_name="my-schedule")
    assert sagemaker_session.describe_monitoring_schedule.call_count == 3
    assert sleep.call_count == 2
    sleep.assert_called_with(smconfig.SCHEDULE_STATUS_SLEEP)


@patch("smkit.utils.time.sleep")
def test_schedule_stuck_in_pending(sleep, sagemaker_session):
    sagemaker_session.describe_monitoring_schedule.return_value = {"MonitoringScheduleStatus": "Pending"}
    monitor = ModelMonitor(role=ROLE, image_uri="my-monitor:1", sagemaker_session=sagemaker_session)
    monitor.monitoring_schedule_name = "my-schedule"

    with pytest.raises(RuntimeError, match="maximum retry count of"):
        monitor.stop_monitoring_schedule()

    assert sagemaker_session.describe_monitoring_schedule.call_count == smconfig.SCHEDULE_STATUS_RETRIES
    assert sleep.call_count == smconfig.SCHEDULE_STATUS_RETRIES
