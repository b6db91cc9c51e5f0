import datetime
import json

import pandas as pd
import pytest

from smkit.__main__ import get_parser, main


def _run(argv, sagemaker_session):
    args = get_parser().parse_args(argv)
    main(vars(args), sagemaker_session=sagemaker_session)


def test_tuning_analytics(sagemaker_session, tmp_path):
    sagemaker_session.list_training_jobs_for_tuning_job.return_value = [
        {
            "TrainingJobName": f"job-{i}",
            "TrainingJobStatus": "Completed",
            "TunedHyperParameters": {"lr": lr},
            "FinalHyperParameterTuningJobObjectiveMetric": {"MetricName": "validation:loss", "Value": value},
        }
        for i, (lr, value) in enumerate([("0.1", 0.5), ("0.01", 0.25)])
    ]
    output_dir = tmp_path / "reports"

    _run(["tuning-analytics", "my-tuning-job", "--ascending", "--output-dir", str(output_dir)], sagemaker_session)

    df = pd.read_csv(output_dir / "my-tuning-job.csv")
    assert list(df["TrainingJobName"]) == ["job-1", "job-0"]
    assert list(df["lr"]) == [0.01, 0.1]


def test_training_metrics(sagemaker_session, tmp_path):
    start = datetime.datetime(2021, 6, 7, 8, 0, tzinfo=datetime.timezone.utc)
    sagemaker_session.sagemaker_client.describe_training_job.return_value = {
        "TrainingStartTime": start,
        "TrainingEndTime": start + datetime.timedelta(minutes=10),
        "AlgorithmSpecification": {},
    }
    cloudwatch = sagemaker_session.boto_session.client.return_value
    cloudwatch.get_metric_statistics.return_value = {"Datapoints": [{"Timestamp": start, "Average": 0.7}]}

    _run(["training-metrics", "my-job", "--metric", "train:loss", "--output-dir", str(tmp_path)], sagemaker_session)

    df = pd.read_csv(tmp_path / "my-job-metrics.csv")
    assert list(df["metric_name"]) == ["train:loss"]
    assert list(df["value"]) == [0.7]
    assert cloudwatch.get_metric_statistics.call_args.kwargs["MetricName"] == "train:loss"


def test_wait_training(sagemaker_session):
    sagemaker_session.wait_for_job.return_value = {"TrainingJobStatus": "Completed"}
    _run(["wait-training", "my-job"], sagemaker_session)
    sagemaker_session.wait_for_job.assert_called_once_with("my-job")
    sagemaker_session.logs_for_job.assert_not_called()


def test_wait_training_with_logs(sagemaker_session):
    sagemaker_session.describe_training_job.return_value = {"TrainingJobStatus": "Failed"}
    _run(["wait-training", "my-job", "--logs"], sagemaker_session)
    sagemaker_session.logs_for_job.assert_called_once_with("my-job", wait=True)
    sagemaker_session.describe_training_job.assert_called_once_with("my-job")


def test_describe_schedule(sagemaker_session, capsys):
    sagemaker_session.describe_monitoring_schedule.return_value = {
        "MonitoringScheduleName": "my-schedule",
        "MonitoringScheduleStatus": "Scheduled",
        "CreationTime": datetime.datetime(2021, 6, 7),
        "ResponseMetadata": {"HTTPStatusCode": 200},
    }

    _run(["describe-schedule", "my-schedule"], sagemaker_session)

    printed = json.loads(capsys.readouterr().out)
    assert printed == {
        "MonitoringScheduleName": "my-schedule",
        "MonitoringScheduleStatus": "Scheduled",
        "CreationTime": "2021-06-07 00:00:00",
    }


def test_command_required():
    with pytest.raises(SystemExit):
        get_parser().parse_args([])
