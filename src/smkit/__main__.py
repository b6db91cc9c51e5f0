"""Command-line helpers: ``python -m smkit <command> ...``."""
import argparse
import json
from pathlib import Path
from typing import Any, Callable, Dict

from loguru import logger

from .analytics import HyperparameterTuningJobAnalytics, TrainingJobAnalytics
from .session import Session


def _prepare_output_dir(args: Dict[str, Any]) -> Path:
    prefix: Path = args["output_dir"]
    if args["create_output_dir"]:
        prefix.mkdir(parents=True, exist_ok=True)
    return prefix


def tuning_analytics(args: Dict[str, Any], sagemaker_session: Session):
    """Save the training jobs of a tuning job, ranked by objective, to ``<output_dir>/<job>.csv``."""
    prefix = _prepare_output_dir(args)
    analytics = HyperparameterTuningJobAnalytics(args["job_name"], sagemaker_session=sagemaker_session)
    df = analytics.dataframe()
    if "FinalObjectiveValue" in df.columns:
        df = df.sort_values("FinalObjectiveValue", ascending=args["ascending"])

    output = prefix / f"{args['job_name']}.csv"
    df.to_csv(output, index=False)
    logger.info("Saved {} training jobs to {}", len(df), output)


def training_metrics(args: Dict[str, Any], sagemaker_session: Session):
    """Save the CloudWatch metrics of a training job to ``<output_dir>/<job>-metrics.csv``."""
    prefix = _prepare_output_dir(args)
    analytics = TrainingJobAnalytics(
        args["job_name"], metric_names=args["metric"], sagemaker_session=sagemaker_session
    )
    df = analytics.dataframe()

    output = prefix / f"{args['job_name']}-metrics.csv"
    df.to_csv(output, index=False)
    logger.info("Saved {} datapoints to {}", len(df), output)


def wait_training(args: Dict[str, Any], sagemaker_session: Session):
    """Block until a training job ends, optionally streaming its logs."""
    if args["logs"]:
        sagemaker_session.logs_for_job(args["job_name"], wait=True)
        desc = sagemaker_session.describe_training_job(args["job_name"])
    else:
        desc = sagemaker_session.wait_for_job(args["job_name"])
    logger.info("Training job {} ended with status {}", args["job_name"], desc["TrainingJobStatus"])


def describe_schedule(args: Dict[str, Any], sagemaker_session: Session):
    """Print the description of a monitoring schedule as json."""
    desc = sagemaker_session.describe_monitoring_schedule(args["schedule_name"])
    desc.pop("ResponseMetadata", None)
    logger.info("Schedule {} is {}", args["schedule_name"], desc.get("MonitoringScheduleStatus"))
    print(json.dumps(desc, indent=2, default=str))


def add_output_dir_args(parser: argparse.ArgumentParser):
    parser.add_argument("--output-dir", default="output", type=Path, help="Output directory")
    parser.add_argument(
        "--no-create-output-dir",
        dest="create_output_dir",
        action="store_false",
        default=True,
        help="Do not attempt to create OUTPUT_DIR",
    )


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m smkit")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("tuning-analytics", help="Export the training jobs of a tuning job as csv.")
    p.add_argument("job_name", help="Name of the hyperparameter tuning job.")
    p.add_argument("--ascending", action="store_true", help="Sort by ascending objective value.")
    add_output_dir_args(p)
    p.set_defaults(func=tuning_analytics)

    p = subparsers.add_parser("training-metrics", help="Export the CloudWatch metrics of a training job as csv.")
    p.add_argument("job_name", help="Name of the training job.")
    p.add_argument(
        "--metric", action="append", default=None, help="Metric name to export (repeatable; default: all)."
    )
    add_output_dir_args(p)
    p.set_defaults(func=training_metrics)

    p = subparsers.add_parser("wait-training", help="Wait until a training job ends.")
    p.add_argument("job_name", help="Name of the training job.")
    p.add_argument("--logs", action="store_true", help="Stream the CloudWatch logs of the job.")
    p.set_defaults(func=wait_training)

    p = subparsers.add_parser("describe-schedule", help="Describe a model monitoring schedule.")
    p.add_argument("schedule_name", help="Name of the monitoring schedule.")
    p.set_defaults(func=describe_schedule)

    return parser


def main(args: Dict[str, Any], sagemaker_session: Session = None):
    func: Callable[[Dict[str, Any], Session], None] = args.pop("func")
    logger.info("Running {}", args.pop("command"))
    func(args, sagemaker_session or Session())


if __name__ == "__main__":
    parser = get_parser()
    args = parser.parse_args()
    main(vars(args))
