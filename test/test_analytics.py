import datetime
from unittest.mock import MagicMock

import pytest

from smkit.analytics import ExperimentAnalytics, HyperparameterTuningJobAnalytics, TrainingJobAnalytics

START = datetime.datetime(2021, 6, 7, 8, 0, 0, tzinfo=datetime.timezone.utc)
END = START + datetime.timedelta(minutes=30)


@pytest.fixture
def cloudwatch(sagemaker_session):
    client = MagicMock(name="cloudwatch")
    sagemaker_session.boto_session.client.return_value = client
    sagemaker_session.sagemaker_client.describe_training_job.return_value = {
        "TrainingStartTime": START,
        "TrainingEndTime": END,
        "AlgorithmSpecification": {"MetricDefinitions": [{"Name": "train:loss", "Regex": "loss=(.*?);"}]},
    }
    return client


def _summary(name, lr, value, status="Completed"):
    return {
        "TrainingJobName": name,
        "TrainingJobStatus": status,
        "TunedHyperParameters": {"lr": lr, "optimizer": "adam"},
        "FinalHyperParameterTuningJobObjectiveMetric": {"MetricName": "validation:loss", "Value": value},
        "TrainingStartTime": START,
        "TrainingEndTime": END,
    }


def test_tuning_job_dataframe(sagemaker_session):
    sagemaker_session.list_training_jobs_for_tuning_job.return_value = [
        _summary("job-1", "0.1", 0.25),
        _summary("job-2", "0.05", 0.5),
    ]
    analytics = HyperparameterTuningJobAnalytics("my-tuning-job", sagemaker_session)

    df = analytics.dataframe()

    assert list(df["TrainingJobName"]) == ["job-1", "job-2"]
    assert list(df["lr"]) == [0.1, 0.05]
    assert list(df["optimizer"]) == ["adam", "adam"]
    assert list(df["FinalObjectiveValue"]) == [0.25, 0.5]
    assert list(df["TrainingElapsedTimeSeconds"]) == [1800.0, 1800.0]
    assert "TrainingJobDefinitionName" not in df.columns
    sagemaker_session.list_training_jobs_for_tuning_job.assert_called_once_with("my-tuning-job")


def test_tuning_job_dataframe_is_cached(sagemaker_session):
    sagemaker_session.list_training_jobs_for_tuning_job.return_value = [_summary("job-1", "0.1", 0.25)]
    analytics = HyperparameterTuningJobAnalytics("my-tuning-job", sagemaker_session)

    analytics.dataframe()
    analytics.dataframe()
    assert sagemaker_session.list_training_jobs_for_tuning_job.call_count == 1

    analytics.dataframe(force_refresh=True)
    assert sagemaker_session.list_training_jobs_for_tuning_job.call_count == 2


def test_tuning_ranges(sagemaker_session):
    lr_range = {"Name": "lr", "MinValue": "0.01", "MaxValue": "0.2"}
    opt_range = {"Name": "optimizer", "Values": ["sgd", "adam"]}
    sagemaker_session.sagemaker_client.describe_hyper_parameter_tuning_job.return_value = {
        "TrainingJobDefinition": {},
        "HyperParameterTuningJobConfig": {
            "ParameterRanges": {"ContinuousParameterRanges": [lr_range], "CategoricalParameterRanges": [opt_range]}
        },
    }
    analytics = HyperparameterTuningJobAnalytics("my-tuning-job", sagemaker_session)
    assert analytics.tuning_ranges == {"lr": lr_range, "optimizer": opt_range}

    sagemaker_session.sagemaker_client.describe_hyper_parameter_tuning_job.return_value = {
        "TrainingJobDefinitions": [
            {"DefinitionName": "est-a", "HyperParameterRanges": {"ContinuousParameterRanges": [lr_range]}},
            {"DefinitionName": "est-b", "HyperParameterRanges": {"CategoricalParameterRanges": [opt_range]}},
        ]
    }
    assert analytics.description(force_refresh=True)["TrainingJobDefinitions"][0]["DefinitionName"] == "est-a"
    assert analytics.tuning_ranges == {"est-a": {"lr": lr_range}, "est-b": {"optimizer": opt_range}}


def test_training_job_metrics(sagemaker_session, cloudwatch):
    cloudwatch.get_metric_statistics.return_value = {
        "Datapoints": [
            {"Timestamp": START + datetime.timedelta(minutes=2), "Average": 0.5},
            {"Timestamp": START, "Average": 0.9},
        ]
    }
    analytics = TrainingJobAnalytics("my-job", sagemaker_session=sagemaker_session)

    df = analytics.dataframe()

    assert list(df["timestamp"]) == [0.0, 120.0]
    assert list(df["value"]) == [0.9, 0.5]
    assert list(df["metric_name"]) == ["train:loss", "train:loss"]
    cloudwatch.get_metric_statistics.assert_called_once_with(
        Namespace="/aws/sagemaker/TrainingJobs",
        MetricName="train:loss",
        Dimensions=[{"Name": "TrainingJobName", "Value": "my-job"}],
        StartTime=START,
        EndTime=END + datetime.timedelta(minutes=1),
        Period=60,
        Statistics=["Average"],
    )


def test_training_job_metrics_missing(sagemaker_session, cloudwatch):
    cloudwatch.get_metric_statistics.return_value = {"Datapoints": []}
    analytics = TrainingJobAnalytics("my-job", metric_names=["validation:acc"], sagemaker_session=sagemaker_session)
    assert analytics.dataframe().empty


def test_export_csv(sagemaker_session, tmp_path):
    sagemaker_session.list_training_jobs_for_tuning_job.return_value = [_summary("job-1", "0.1", 0.25)]
    analytics = HyperparameterTuningJobAnalytics("my-tuning-job", sagemaker_session)

    path = tmp_path / "results.csv"
    analytics.export_csv(str(path))

    assert "job-1" in path.read_text()


def test_experiment_analytics_requires_scope(sagemaker_session):
    with pytest.raises(ValueError, match="experiment_name or search_expression"):
        ExperimentAnalytics(sagemaker_session=sagemaker_session)


def test_experiment_analytics(sagemaker_session):
    search = sagemaker_session.sagemaker_client.search
    search.side_effect = [
        {
            "Results": [
                {
                    "TrialComponent": {
                        "TrialComponentName": "tc-1",
                        "DisplayName": "Training",
                        "Source": {"SourceArn": "arn:aws:sagemaker:us-west-2:111122223333:training-job/job-1"},
                        "Parameters": {"lr": {"NumberValue": 0.1}, "optimizer": {"StringValue": "adam"}},
                        "Metrics": [
                            {"MetricName": "loss", "Min": 0.1, "Max": 0.9, "Last": 0.2},
                            {"MetricName": "accuracy", "Max": 0.95},
                        ],
                        "InputArtifacts": {"train": {"MediaType": "text/csv", "Value": "s3://bucket/train"}},
                        "Parents": [{"TrialName": "trial-1", "ExperimentName": "my-experiment"}],
                    }
                }
            ],
            "NextToken": "page-2",
        },
        {"Results": [{"TrialComponent": {"TrialComponentName": "tc-2"}}]},
    ]
    analytics = ExperimentAnalytics(
        experiment_name="my-experiment",
        sort_by="CreationTime",
        sort_order="Ascending",
        metric_names=["loss"],
        parameter_names=["lr"],
        sagemaker_session=sagemaker_session,
    )

    df = analytics.dataframe()

    assert list(df["TrialComponentName"]) == ["tc-1", "tc-2"]
    row = df.iloc[0]
    assert row["DisplayName"] == "Training"
    assert row["SourceArn"].endswith("training-job/job-1")
    assert row["lr"] == 0.1
    assert row["loss - Min"] == 0.1
    assert row["loss - Last"] == 0.2
    assert row["train - Value"] == "s3://bucket/train"
    assert row["Trials"] == ["trial-1"]
    assert "optimizer" not in df.columns
    assert "accuracy - Max" not in df.columns

    first_call = search.call_args_list[0].kwargs
    assert first_call == {
        "Resource": "ExperimentTrialComponent",
        "SearchExpression": {
            "Filters": [{"Name": "Parents.ExperimentName", "Operator": "Equals", "Value": "my-experiment"}]
        },
        "SortBy": "CreationTime",
        "SortOrder": "Ascending",
    }
    assert search.call_args_list[1].kwargs["NextToken"] == "page-2"
