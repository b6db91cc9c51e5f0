"""Step and time ranges, and the per-metric framework profiling configurations."""
import json
from typing import Any, Dict, Optional, Union

from .utils import (
    DATALOADER_PROFILING_CONFIG_NAME,
    DETAILED_PROFILING_CONFIG_NAME,
    DETAILED_PROFILING_START_STEP_DEFAULT,
    HOROVOD_PROFILING_CONFIG_NAME,
    PROFILING_NUM_STEPS_DEFAULT,
    PYTHON_PROFILING_CONFIG_NAME,
    SMDATAPARALLEL_PROFILING_CONFIG_NAME,
    START_STEP_DEFAULT,
    ErrorMessages,
    PythonProfiler,
    cProfileTimer,
    is_valid_regex,
)


class StepRange(object):
    """Profile a range of training steps."""

    def __init__(self, start_step: Optional[int], num_steps: Optional[int]):
        if start_step is None:
            start_step = START_STEP_DEFAULT
        elif num_steps is None:
            num_steps = PROFILING_NUM_STEPS_DEFAULT

        self.start_step = start_step
        self.num_steps = num_steps

    def to_json(self) -> Dict[str, Any]:
        return {"StartStep": self.start_step, "NumSteps": self.num_steps}


class TimeRange(object):
    """Profile a time window, starting at a UNIX time."""

    def __init__(self, start_unix_time: Optional[int], duration: Optional[float]):
        self.start_unix_time = start_unix_time
        self.duration = duration

    def to_json(self) -> Dict[str, Any]:
        time_range_json: Dict[str, Any] = {}
        if self.start_unix_time is not None:
            time_range_json["StartTimeInSecSinceEpoch"] = self.start_unix_time
        if self.duration is not None:
            time_range_json["Duration"] = self.duration
        return time_range_json


class MetricsConfigBase(object):
    """Base class of the metrics configurations, holding either a step range or a time range.

    Raises:
        ValueError: on negative steps or duration, or when both step and time fields are given.
    """

    def __init__(
        self,
        name: str,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
    ):
        self.name = name

        if start_step is not None and (not isinstance(start_step, int) or start_step < 0):
            raise ValueError(ErrorMessages.INVALID_START_STEP.value)
        if num_steps is not None and (not isinstance(num_steps, int) or num_steps <= 0):
            raise ValueError(ErrorMessages.INVALID_NUM_STEPS.value)
        if start_unix_time is not None and (not isinstance(start_unix_time, int) or start_unix_time < 0):
            raise ValueError(ErrorMessages.INVALID_START_UNIX_TIME.value)
        if duration is not None and (not isinstance(duration, (float, int)) or duration <= 0):
            raise ValueError(ErrorMessages.INVALID_DURATION.value)

        has_step_range = start_step is not None or num_steps is not None
        has_time_range = start_unix_time is not None or duration is not None
        if has_step_range and has_time_range:
            raise ValueError(ErrorMessages.FOUND_BOTH_STEP_AND_TIME_FIELDS.value)

        self.range: Union[StepRange, TimeRange] = (
            StepRange(start_step, num_steps) if has_step_range else TimeRange(start_unix_time, duration)
        )

    def _to_json(self) -> Dict[str, Any]:
        return self.range.to_json()

    def to_json_string(self) -> str:
        """The configuration as the JSON string expected in ``ProfilingParameters``."""
        return json.dumps(self._to_json())


def _default_step_range(profile_default_steps, start_step, num_steps, start_unix_time, duration):
    if not isinstance(profile_default_steps, bool):
        raise ValueError(ErrorMessages.INVALID_PROFILE_DEFAULT_STEPS.value)
    if profile_default_steps or all(v is None for v in (start_step, num_steps, start_unix_time, duration)):
        return DETAILED_PROFILING_START_STEP_DEFAULT, PROFILING_NUM_STEPS_DEFAULT
    return start_step, num_steps


class DetailedProfilingConfig(MetricsConfigBase):
    """The configuration for framework metrics to be collected for detailed profiling."""

    def __init__(
        self,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
        profile_default_steps: bool = False,
    ):
        start_step, num_steps = _default_step_range(
            profile_default_steps, start_step, num_steps, start_unix_time, duration
        )
        super().__init__(DETAILED_PROFILING_CONFIG_NAME, start_step, num_steps, start_unix_time, duration)


class DataloaderProfilingConfig(MetricsConfigBase):
    """The configuration for framework metrics to be collected for data loader profiling."""

    def __init__(
        self,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
        profile_default_steps: bool = False,
        metrics_regex: str = ".*",
    ):
        start_step, num_steps = _default_step_range(
            profile_default_steps, start_step, num_steps, start_unix_time, duration
        )
        super().__init__(DATALOADER_PROFILING_CONFIG_NAME, start_step, num_steps, start_unix_time, duration)

        if not is_valid_regex(metrics_regex):
            raise ValueError(ErrorMessages.INVALID_METRICS_REGEX.value)
        self.metrics_regex = metrics_regex

    def _to_json(self) -> Dict[str, Any]:
        dataloader_profiling_config = super()._to_json()
        dataloader_profiling_config["MetricsRegex"] = self.metrics_regex
        return dataloader_profiling_config


class PythonProfilingConfig(MetricsConfigBase):
    """The configuration for framework metrics to be collected for Python profiling."""

    def __init__(
        self,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
        profile_default_steps: bool = False,
        python_profiler: PythonProfiler = PythonProfiler.CPROFILE,
        cprofile_timer: cProfileTimer = cProfileTimer.TOTAL_TIME,
    ):
        """Choose a Python profiler: cProfile or Pyinstrument.

        Args:
            start_step (int): The step to start profiling. The default is step 5.
            num_steps (int): The number of steps to profile. The default is for 1 step.
            start_unix_time (int): The Unix time to start profiling.
            duration (float): The duration in seconds to profile.
            profile_default_steps (bool): Indicates whether the default configuration should be used. If set to
                ``True``, Python profiling is done at step 5 with cProfile and its default timer.
            python_profiler (PythonProfiler): The Python profiler to use to collect python profiling stats.
            cprofile_timer (cProfileTimer): The timer to be used by cProfile when collecting python profiling
                stats. Not used with Pyinstrument.
        """
        start_step, num_steps = _default_step_range(
            profile_default_steps, start_step, num_steps, start_unix_time, duration
        )
        if profile_default_steps:
            cprofile_timer = cProfileTimer.DEFAULT

        super().__init__(PYTHON_PROFILING_CONFIG_NAME, start_step, num_steps, start_unix_time, duration)

        if not isinstance(python_profiler, PythonProfiler):
            raise ValueError(ErrorMessages.INVALID_PYTHON_PROFILER.value)
        if not isinstance(cprofile_timer, cProfileTimer):
            raise ValueError(ErrorMessages.INVALID_CPROFILE_TIMER.value)

        self.python_profiler = python_profiler

        # The cprofile timer can only be used when the python profiler is cProfile.
        if python_profiler == PythonProfiler.PYINSTRUMENT:
            self.cprofile_timer = None
        else:
            self.cprofile_timer = cprofile_timer

    def _to_json(self) -> Dict[str, Any]:
        python_profiling_config = super()._to_json()
        python_profiling_config["ProfilerName"] = self.python_profiler.value
        if self.cprofile_timer is not None:
            python_profiling_config["cProfileTimer"] = self.cprofile_timer.value
        return python_profiling_config


class HorovodProfilingConfig(MetricsConfigBase):
    """The configuration for framework metrics from Horovod distributed training."""

    def __init__(
        self,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
        profile_default_steps: bool = False,
    ):
        start_step, num_steps = _default_step_range(
            profile_default_steps, start_step, num_steps, start_unix_time, duration
        )
        super().__init__(HOROVOD_PROFILING_CONFIG_NAME, start_step, num_steps, start_unix_time, duration)


class SMDataParallelProfilingConfig(MetricsConfigBase):
    """Configuration for framework metrics collected from a SageMaker Distributed training job."""

    def __init__(
        self,
        start_step: Optional[int] = None,
        num_steps: Optional[int] = None,
        start_unix_time: Optional[int] = None,
        duration: Optional[float] = None,
        profile_default_steps: bool = False,
    ):
        start_step, num_steps = _default_step_range(
            profile_default_steps, start_step, num_steps, start_unix_time, duration
        )
        super().__init__(SMDATAPARALLEL_PROFILING_CONFIG_NAME, start_step, num_steps, start_unix_time, duration)
