"""Constants, enums, and validation helpers of the debugger and profiler configuration."""
import re
from enum import Enum

BASE_FOLDER_DEFAULT = "/opt/ml/output/profiler"
MAX_FILE_SIZE_DEFAULT = 10485760  # 10MB
CLOSE_FILE_INTERVAL_DEFAULT = 60  # 60 seconds
FILE_OPEN_FAIL_THRESHOLD_DEFAULT = 50

START_STEP_DEFAULT = 0
PROFILING_NUM_STEPS_DEFAULT = 1
DETAILED_PROFILING_START_STEP_DEFAULT = 5

DETAILED_PROFILING_CONFIG_NAME = "DetailedProfilingConfig"
DATALOADER_PROFILING_CONFIG_NAME = "DataloaderProfilingConfig"
PYTHON_PROFILING_CONFIG_NAME = "PythonProfilingConfig"
HOROVOD_PROFILING_CONFIG_NAME = "HorovodProfilingConfig"
SMDATAPARALLEL_PROFILING_CONFIG_NAME = "SMDataparallelProfilingConfig"

DEFAULT_RULE_EVALUATOR_IMAGE = "DEFAULT_RULE_EVALUATOR_IMAGE"
PROFILER_REPORT_RULE = "ProfilerReport"


class ErrorMessages(Enum):
    """Messages raised when the arguments of a profiler configuration are invalid."""

    INVALID_LOCAL_PATH = "local_path must be a string!"
    INVALID_FILE_MAX_SIZE = "file_max_size must be an integer greater than 0!"
    INVALID_FILE_CLOSE_INTERVAL = "file_close_interval must be a float/integer greater than 0!"
    INVALID_FILE_OPEN_FAIL_THRESHOLD = "file_open_fail threshold must be an integer greater than 0!"
    INVALID_PROFILE_DEFAULT_STEPS = "profile_default_steps must be a boolean!"
    INVALID_START_STEP = "start_step must be integer greater or equal to 0!"
    INVALID_NUM_STEPS = "num_steps must be integer greater than 0!"
    INVALID_START_UNIX_TIME = "start_unix_time must be valid integer unix time!"
    INVALID_DURATION = "duration must be float greater than 0!"
    FOUND_BOTH_STEP_AND_TIME_FIELDS = "Both step and time fields cannot be specified in the metrics config!"
    INVALID_METRICS_REGEX = "metrics_regex is invalid!"
    INVALID_PYTHON_PROFILER = "python_profiler must be of type PythonProfiler!"
    INVALID_CPROFILE_TIMER = "cprofile_timer must be of type cProfileTimer"


class PythonProfiler(Enum):
    """Python profilers available to ``PythonProfilingConfig``."""

    CPROFILE = "cprofile"
    PYINSTRUMENT = "pyinstrument"


class cProfileTimer(Enum):  # noqa: N801
    """Timers available when cProfile is the Python profiler."""

    TOTAL_TIME = "total_time"
    CPU_TIME = "cpu_time"
    OFF_CPU_TIME = "off_cpu_time"
    DEFAULT = "default"


def is_valid_regex(regex: str) -> bool:
    try:
        re.compile(regex)
        return True
    except re.error:
        return False
