"""Framework profiling parameters of a training job's ``ProfilerConfig``."""
from typing import Dict, Optional

from .metrics_config import (
    DataloaderProfilingConfig,
    DetailedProfilingConfig,
    HorovodProfilingConfig,
    MetricsConfigBase,
    PythonProfilingConfig,
    SMDataParallelProfilingConfig,
)
from .utils import (
    BASE_FOLDER_DEFAULT,
    CLOSE_FILE_INTERVAL_DEFAULT,
    FILE_OPEN_FAIL_THRESHOLD_DEFAULT,
    MAX_FILE_SIZE_DEFAULT,
    ErrorMessages,
)

ALL_METRIC_CONFIGS = [
    DetailedProfilingConfig,
    DataloaderProfilingConfig,
    PythonProfilingConfig,
    HorovodProfilingConfig,
    SMDataParallelProfilingConfig,
]


class FrameworkProfile(object):
    """Sets up the profiling configuration for framework metrics.

    Three mutually exclusive ways of choosing what is profiled:

    * one metrics config per metric (e.g. ``detailed_profiling_config=DetailedProfilingConfig(...)``); metrics
      without a config are not profiled,
    * one step or time range (``start_step``/``num_steps`` or ``start_unix_time``/``duration``) applied to all
      metrics,
    * nothing, which profiles all metrics over their default steps.
    """

    def __init__(
        self,
        local_path: str = BASE_FOLDER_DEFAULT,
        file_max_size: int = MAX_FILE_SIZE_DEFAULT,
        file_close_interval: float = CLOSE_FILE_INTERVAL_DEFAULT,
        file_open_fail_threshold: int = FILE_OPEN_FAIL_THRESHOLD_DEFAULT,
        detailed_profiling_config: Optional[DetailedProfilingConfig] = None,
        dataloader_profiling_config: Optional[DataloaderProfilingConfig] = None,
        python_profiling_config: Optional[PythonProfilingConfig] = None,
        horovod_profiling_config: Optional[HorovodProfilingConfig] = None,
        smdataparallel_profiling_config: Optional[SMDataParallelProfilingConfig] = None,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
    ):
        self.profiling_parameters: Dict[str, str] = {}
        self._process_trace_file_parameters(local_path, file_max_size, file_close_interval, file_open_fail_threshold)
        use_custom_metrics_configs = self._process_metrics_configs(
            detailed_profiling_config,
            dataloader_profiling_config,
            python_profiling_config,
            horovod_profiling_config,
            smdataparallel_profiling_config,
        )

        use_one_config_for_all_metrics = (
            self._process_range_fields(start_step, num_steps, start_unix_time, duration)
            if not use_custom_metrics_configs
            else False
        )

        if not use_custom_metrics_configs and not use_one_config_for_all_metrics:
            self._create_default_metrics_configs()

    def _process_trace_file_parameters(self, local_path, file_max_size, file_close_interval, file_open_fail_threshold):
        if not isinstance(local_path, str):
            raise ValueError(ErrorMessages.INVALID_LOCAL_PATH.value)
        if not isinstance(file_max_size, int) or file_max_size <= 0:
            raise ValueError(ErrorMessages.INVALID_FILE_MAX_SIZE.value)
        if not isinstance(file_close_interval, (float, int)) or file_close_interval <= 0:
            raise ValueError(ErrorMessages.INVALID_FILE_CLOSE_INTERVAL.value)
        if not isinstance(file_open_fail_threshold, int) or file_open_fail_threshold <= 0:
            raise ValueError(ErrorMessages.INVALID_FILE_OPEN_FAIL_THRESHOLD.value)

        self.profiling_parameters["LocalPath"] = local_path
        self.profiling_parameters["RotateMaxFileSizeInBytes"] = str(file_max_size)
        self.profiling_parameters["RotateFileCloseIntervalInSeconds"] = str(file_close_interval)
        self.profiling_parameters["FileOpenFailThreshold"] = str(file_open_fail_threshold)

    def _process_metrics_configs(self, *metrics_configs: Optional[MetricsConfigBase]) -> bool:
        configs = [config for config in metrics_configs if config is not None]
        if len(configs) == 0:
            return False

        for config in configs:
            self.profiling_parameters[config.name] = config.to_json_string()
        return True

    def _process_range_fields(self, start_step, num_steps, start_unix_time, duration) -> bool:
        if start_step is None and num_steps is None and start_unix_time is None and duration is None:
            return False

        for config_class in ALL_METRIC_CONFIGS:
            config = config_class(
                start_step=start_step,
                num_steps=num_steps,
                start_unix_time=start_unix_time,
                duration=duration,
            )
            self.profiling_parameters[config.name] = config.to_json_string()
        return True

    def _create_default_metrics_configs(self):
        for config_class in ALL_METRIC_CONFIGS:
            config = config_class(profile_default_steps=True)
            self.profiling_parameters[config.name] = config.to_json_string()
