from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from smkit.exceptions import CapacityError, UnexpectedStatusException
from smkit.session import Session, production_variant

from conftest import BUCKET, REGION, ROLE_ARN

IMAGE = "174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1"


def _client_error(code, message="", operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def test_session_requires_region():
    boto_session = MagicMock()
    boto_session.region_name = None
    with pytest.raises(ValueError, match="region"):
        Session(boto_session=boto_session, sagemaker_client=MagicMock(), sagemaker_runtime_client=MagicMock())


def test_default_bucket_override(session):
    assert session.boto_region_name == REGION
    assert session.default_bucket() == BUCKET
    session.boto_session.client.return_value.head_bucket.assert_called_once_with(Bucket=BUCKET)


def test_default_bucket_from_account():
    boto_session = MagicMock()
    boto_session.region_name = REGION
    boto_session.client.return_value.get_caller_identity.return_value = {"Account": "111122223333"}
    boto_session.client.return_value.head_bucket.side_effect = _client_error("404")
    with patch.dict("os.environ", {}, clear=True):
        sess = Session(boto_session=boto_session, sagemaker_client=MagicMock(), sagemaker_runtime_client=MagicMock())
        assert sess.default_bucket() == "sagemaker-us-west-2-111122223333"
    boto_session.client.return_value.create_bucket.assert_called_once_with(
        Bucket="sagemaker-us-west-2-111122223333",
        CreateBucketConfiguration={"LocationConstraint": REGION},
    )


def test_upload_data_single_file(session, tmp_path):
    f = tmp_path / "train.csv"
    f.write_text("1,2,3\n")
    assert session.upload_data(str(f), key_prefix="data/kmeans") == f"s3://{BUCKET}/data/kmeans/train.csv"
    session.fs.put_file.assert_called_once_with(str(f), f"{BUCKET}/data/kmeans/train.csv")


def test_upload_data_directory(session, tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "a.csv").write_text("a")
    (tmp_path / "sub" / "b.csv").write_text("b")
    assert session.upload_data(str(tmp_path), bucket="other", key_prefix="input") == "s3://other/input"
    uploaded = sorted(c.args[1] for c in session.fs.put_file.call_args_list)
    assert uploaded == ["other/input/a.csv", "other/input/sub/b.csv"]


def test_train_request(session, sagemaker_client):
    session.train(
        input_mode="File",
        input_config=[{"ChannelName": "train"}],
        role=ROLE_ARN,
        job_name="kmeans-job",
        output_config={"S3OutputPath": "s3://bucket/output"},
        resource_config={"InstanceCount": 1, "InstanceType": "ml.c5.xlarge", "VolumeSizeInGB": 30},
        vpc_config=None,
        hyperparameters={"k": "10"},
        stop_condition={"MaxRuntimeInSeconds": 3600},
        tags=None,
        metric_definitions=None,
        image_uri=IMAGE,
        use_spot_instances=True,
        checkpoint_s3_uri="s3://bucket/checkpoints",
    )
    sagemaker_client.create_training_job.assert_called_once_with(
        AlgorithmSpecification={"TrainingInputMode": "File", "TrainingImage": IMAGE},
        OutputDataConfig={"S3OutputPath": "s3://bucket/output"},
        TrainingJobName="kmeans-job",
        StoppingCondition={"MaxRuntimeInSeconds": 3600},
        ResourceConfig={"InstanceCount": 1, "InstanceType": "ml.c5.xlarge", "VolumeSizeInGB": 30},
        RoleArn=ROLE_ARN,
        InputDataConfig=[{"ChannelName": "train"}],
        HyperParameters={"k": "10"},
        EnableManagedSpotTraining=True,
        CheckpointConfig={"S3Uri": "s3://bucket/checkpoints"},
    )


@pytest.mark.parametrize("image_uri,algorithm_arn", [(None, None), (IMAGE, "arn:aws:sagemaker:algo")])
def test_train_request_needs_exactly_one_algorithm_source(session, image_uri, algorithm_arn):
    with pytest.raises(ValueError):
        session._get_train_request(
            input_mode="File",
            input_config=None,
            role=ROLE_ARN,
            job_name="job",
            output_config={},
            resource_config={},
            vpc_config=None,
            hyperparameters=None,
            stop_condition={},
            tags=None,
            metric_definitions=None,
            image_uri=image_uri,
            algorithm_arn=algorithm_arn,
        )


def test_wait_for_job_failure(session, sagemaker_client):
    sagemaker_client.describe_training_job.return_value = {
        "TrainingJobStatus": "Failed",
        "FailureReason": "AlgorithmError: bad input",
    }
    with pytest.raises(UnexpectedStatusException) as e:
        session.wait_for_job("job", poll=0)
    assert e.value.actual_status == "Failed"
    assert e.value.allowed_statuses == ["Completed", "Stopped"]


def test_wait_for_job_capacity_error(session, sagemaker_client):
    sagemaker_client.describe_training_job.return_value = {
        "TrainingJobStatus": "Failed",
        "FailureReason": "CapacityError: Unable to provision requested ML compute capacity.",
    }
    with pytest.raises(CapacityError):
        session.wait_for_job("job", poll=0)


@patch("smkit.session.time.sleep")
def test_wait_for_job_polls_until_done(sleep, session, sagemaker_client):
    sagemaker_client.describe_training_job.side_effect = [
        {"TrainingJobStatus": "InProgress"},
        {"TrainingJobStatus": "Completed"},
    ]
    assert session.wait_for_job("job")["TrainingJobStatus"] == "Completed"
    assert sleep.call_count == 1


def _spot_job_description(training_time, billable_time):
    return {
        "TrainingJobStatus": "Stopped",
        "ResourceConfig": {"InstanceCount": 2},
        "TrainingTimeInSeconds": training_time,
        "BillableTimeInSeconds": billable_time,
        "EnableManagedSpotTraining": True,
    }


def test_logs_for_job_reports_spot_savings(session, sagemaker_client, capsys):
    sagemaker_client.describe_training_job.return_value = _spot_job_description(100, 40)
    session.boto_session.client.return_value.describe_log_streams.return_value = {"logStreams": []}

    session.logs_for_job("job", wait=True)

    out = capsys.readouterr().out
    assert "Training seconds: 200" in out
    assert "Billable seconds: 80" in out
    assert "Managed Spot Training savings: 60.0%" in out


def test_logs_for_job_spot_job_without_training_time(session, sagemaker_client, capsys):
    sagemaker_client.describe_training_job.return_value = _spot_job_description(0, 0)
    session.boto_session.client.return_value.describe_log_streams.return_value = {"logStreams": []}

    session.logs_for_job("job", wait=True)

    out = capsys.readouterr().out
    assert "Billable seconds: 0" in out
    assert "savings" not in out


def test_create_tuning_job_request(session, sagemaker_client):
    session.create_tuning_job(
        job_name="tune",
        tuning_config=dict(
            strategy="Bayesian",
            max_jobs=10,
            max_parallel_jobs=2,
            objective_type="Minimize",
            objective_metric_name="test:msd",
            parameter_ranges={"IntegerParameterRanges": [{"Name": "k", "MinValue": "2", "MaxValue": "10"}]},
        ),
        training_config=dict(
            static_hyperparameters={"feature_dim": "4"},
            input_mode="File",
            role=ROLE_ARN,
            output_config={"S3OutputPath": "s3://bucket/output"},
            resource_config={"InstanceCount": 1},
            stop_condition={"MaxRuntimeInSeconds": 60},
            image_uri=IMAGE,
        ),
    )
    request = sagemaker_client.create_hyper_parameter_tuning_job.call_args.kwargs
    assert request["HyperParameterTuningJobName"] == "tune"
    assert request["HyperParameterTuningJobConfig"] == {
        "Strategy": "Bayesian",
        "ResourceLimits": {"MaxNumberOfTrainingJobs": 10, "MaxParallelTrainingJobs": 2},
        "TrainingJobEarlyStoppingType": "Off",
        "HyperParameterTuningJobObjective": {"Type": "Minimize", "MetricName": "test:msd"},
        "ParameterRanges": {"IntegerParameterRanges": [{"Name": "k", "MinValue": "2", "MaxValue": "10"}]},
    }
    assert request["TrainingJobDefinition"]["AlgorithmSpecification"] == {
        "TrainingInputMode": "File",
        "TrainingImage": IMAGE,
    }
    assert request["TrainingJobDefinition"]["StaticHyperParameters"] == {"feature_dim": "4"}
    assert "TrainingJobDefinitions" not in request


def test_create_tuning_job_config_choice(session):
    with pytest.raises(ValueError, match="Either"):
        session.create_tuning_job("tune", tuning_config={})
    with pytest.raises(ValueError, match="Only one"):
        session.create_tuning_job("tune", tuning_config={}, training_config={}, training_config_list=[])


def test_stop_tuning_job_already_stopped(session, sagemaker_client):
    sagemaker_client.stop_hyper_parameter_tuning_job.side_effect = _client_error("ValidationException")
    session.stop_tuning_job("tune")

    sagemaker_client.stop_hyper_parameter_tuning_job.side_effect = _client_error("ThrottlingException")
    with pytest.raises(ClientError):
        session.stop_tuning_job("tune")


def test_list_training_jobs_for_tuning_job(session, sagemaker_client):
    sagemaker_client.list_training_jobs_for_hyper_parameter_tuning_job.side_effect = [
        {"TrainingJobSummaries": [{"TrainingJobName": "a"}], "NextToken": "t"},
        {"TrainingJobSummaries": [{"TrainingJobName": "b"}]},
    ]
    jobs = session.list_training_jobs_for_tuning_job("tune")
    assert [j["TrainingJobName"] for j in jobs] == ["a", "b"]


def test_process_request(session, sagemaker_client):
    session.process(
        inputs=[{"InputName": "input-1"}],
        output_config={"Outputs": []},
        job_name="proc",
        resources={"ClusterConfig": {"InstanceCount": 1}},
        stopping_condition=None,
        app_specification={"ImageUri": IMAGE},
        role_arn=ROLE_ARN,
    )
    sagemaker_client.create_processing_job.assert_called_once_with(
        ProcessingJobName="proc",
        ProcessingResources={"ClusterConfig": {"InstanceCount": 1}},
        AppSpecification={"ImageUri": IMAGE},
        RoleArn=ROLE_ARN,
        ProcessingInputs=[{"InputName": "input-1"}],
    )


def test_create_monitoring_schedule_request(session, sagemaker_client):
    session.create_monitoring_schedule(
        monitoring_schedule_name="schedule",
        schedule_expression="cron(0 * ? * * *)",
        statistics_s3_uri="s3://bucket/statistics.json",
        constraints_s3_uri=None,
        monitoring_inputs=[{"EndpointInput": {"EndpointName": "ep"}}],
        monitoring_output_config={"MonitoringOutputs": []},
        instance_count=1,
        instance_type="ml.m5.xlarge",
        volume_size_in_gb=30,
        image_uri=IMAGE,
        max_runtime_in_seconds=1800,
        role_arn=ROLE_ARN,
    )
    request = sagemaker_client.create_monitoring_schedule.call_args.kwargs
    assert request["MonitoringScheduleName"] == "schedule"
    config = request["MonitoringScheduleConfig"]
    assert config["ScheduleConfig"] == {"ScheduleExpression": "cron(0 * ? * * *)"}
    definition = config["MonitoringJobDefinition"]
    assert definition["BaselineConfig"] == {"StatisticsResource": {"S3Uri": "s3://bucket/statistics.json"}}
    assert definition["MonitoringResources"]["ClusterConfig"] == {
        "InstanceCount": 1,
        "InstanceType": "ml.m5.xlarge",
        "VolumeSizeInGB": 30,
    }
    assert definition["StoppingCondition"] == {"MaxRuntimeInSeconds": 1800}
    assert "Tags" not in request


def test_create_monitoring_schedule_from_job_definition(session, sagemaker_client):
    session.create_monitoring_schedule_from_job_definition(
        monitoring_schedule_name="schedule",
        job_definition_name="definition",
        monitoring_type="DataQuality",
        schedule_expression="cron(0 0 ? * * *)",
    )
    sagemaker_client.create_monitoring_schedule.assert_called_once_with(
        MonitoringScheduleName="schedule",
        MonitoringScheduleConfig={
            "MonitoringJobDefinitionName": "definition",
            "MonitoringType": "DataQuality",
            "ScheduleConfig": {"ScheduleExpression": "cron(0 0 ? * * *)"},
        },
        Tags=[],
    )


def test_create_model_and_existing_model(session, sagemaker_client):
    container = {"Image": IMAGE, "ModelDataUrl": "s3://bucket/model.tar.gz"}
    assert session.create_model("model", ROLE_ARN, container) == "model"
    sagemaker_client.create_model.assert_called_once_with(
        ModelName="model", ExecutionRoleArn=ROLE_ARN, PrimaryContainer=container
    )

    sagemaker_client.create_model.side_effect = _client_error(
        "ValidationException", "Cannot create already existing model"
    )
    assert session.create_model("model", ROLE_ARN, container) == "model"


def test_create_endpoint_config(session, sagemaker_client):
    session.create_endpoint_config("config", "model", 1, "ml.m5.large", data_capture_config_dict={"x": 1})
    sagemaker_client.create_endpoint_config.assert_called_once_with(
        EndpointConfigName="config",
        ProductionVariants=[production_variant("model", "ml.m5.large", 1)],
        DataCaptureConfig={"x": 1},
    )


def test_production_variant():
    assert production_variant("model", "ml.m5.large", accelerator_type="ml.eia1.medium") == {
        "ModelName": "model",
        "InstanceType": "ml.m5.large",
        "InitialInstanceCount": 1,
        "VariantName": "AllTraffic",
        "InitialVariantWeight": 1,
        "AcceleratorType": "ml.eia1.medium",
    }


def test_update_endpoint_missing(session, sagemaker_client):
    sagemaker_client.describe_endpoint.side_effect = _client_error("ValidationException", "Could not find endpoint")
    with pytest.raises(ValueError, match="does not exist"):
        session.update_endpoint("ep", "config")


def test_wait_for_endpoint_failure(session, sagemaker_client):
    sagemaker_client.describe_endpoint.return_value = {"EndpointStatus": "Failed", "FailureReason": "boom"}
    with pytest.raises(UnexpectedStatusException, match="boom"):
        session.wait_for_endpoint("ep", poll=0)


def test_list_tags_paginates(session, sagemaker_client):
    sagemaker_client.list_tags.side_effect = [
        {"Tags": [{"Key": "a", "Value": "1"}], "NextToken": "t"},
        {"Tags": [{"Key": "b", "Value": "2"}]},
    ]
    assert session.list_tags("arn") == [{"Key": "a", "Value": "1"}, {"Key": "b", "Value": "2"}]


def test_expand_role(session):
    assert session.expand_role(ROLE_ARN) == ROLE_ARN
    session.boto_session.client.return_value.get_role.return_value = {"Role": {"Arn": ROLE_ARN}}
    assert session.expand_role("SageMakerRole") == ROLE_ARN


def test_get_caller_identity_arn(session):
    session.boto_session.client.return_value.get_caller_identity.return_value = {
        "Arn": "arn:aws:sts::111122223333:assumed-role/SageMakerRole/SageMaker"
    }
    assert session.get_caller_identity_arn() == ROLE_ARN
