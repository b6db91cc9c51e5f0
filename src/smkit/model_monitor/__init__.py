"""Endpoint data capture, baselining jobs and monitoring schedules."""
from .cron_expression_generator import CronExpressionGenerator  # noqa: F401
from .data_capture_config import DataCaptureConfig  # noqa: F401
from .dataset_format import DatasetFormat  # noqa: F401
from .model_monitoring import (  # noqa: F401
    BaseliningJob,
    DefaultModelMonitor,
    EndpointInput,
    ModelMonitor,
    ModelQualityMonitor,
    MonitoringExecution,
    MonitoringOutput,
)
from .monitoring_files import ConstraintViolations, Constraints, Statistics  # noqa: F401
