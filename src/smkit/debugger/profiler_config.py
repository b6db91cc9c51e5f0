"""``ProfilerConfig`` request of a training job."""
from typing import Any, Dict, Optional

from .framework_profile import FrameworkProfile


class ProfilerConfig(object):
    """Configuration for collecting system and framework metrics of SageMaker training jobs."""

    def __init__(
        self,
        s3_output_path: Optional[str] = None,
        system_monitor_interval_millis: Optional[int] = None,
        framework_profile_params: Optional[FrameworkProfile] = None,
    ):
        """Initialize a ``ProfilerConfig`` instance.

        Args:
            s3_output_path (str): The location in Amazon S3 to store the output. The default Debugger output
                path for profiling data is ``s3://<default_bucket>/<training-job-name>/profiler-output/``.
            system_monitor_interval_millis (int): The time interval in milliseconds to collect system metrics.
                Available values are 100, 200, 500, 1000 (1 second), 5000 (5 seconds), and 60000 (1 minute).
            framework_profile_params (FrameworkProfile): A parameter object for framework metrics profiling.

        Raises:
            ValueError: if ``framework_profile_params`` is not a ``FrameworkProfile``.
        """
        if framework_profile_params is not None and not isinstance(framework_profile_params, FrameworkProfile):
            raise ValueError("framework_profile_params must be of type FrameworkProfile if specified.")

        self.s3_output_path = s3_output_path
        self.system_monitor_interval_millis = system_monitor_interval_millis
        self.framework_profile_params = framework_profile_params

    def _to_request_dict(self) -> Dict[str, Any]:
        profiler_config_request: Dict[str, Any] = {}

        if self.s3_output_path is not None:
            profiler_config_request["S3OutputPath"] = self.s3_output_path

        if self.system_monitor_interval_millis is not None:
            profiler_config_request["ProfilingIntervalInMilliseconds"] = self.system_monitor_interval_millis

        if self.framework_profile_params is not None:
            profiler_config_request["ProfilingParameters"] = self.framework_profile_params.profiling_parameters

        return profiler_config_request

    @classmethod
    def _to_profiler_disabled_request_dict(cls) -> Dict[str, bool]:
        """Request dictionary for updating a training job to disable the profiler."""
        return {"DisableProfiler": True}
