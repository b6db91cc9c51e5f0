"""Debugger rules, hook and TensorBoard configuration, and the profiler configuration of training jobs."""
from .debugger import (  # noqa: F401
    CollectionConfig,
    DebuggerHookConfig,
    ProfilerRule,
    Rule,
    TensorBoardOutputConfig,
    builtin_rule,
    get_default_profiler_rule,
)
from .framework_profile import FrameworkProfile  # noqa: F401
from .metrics_config import (  # noqa: F401
    DataloaderProfilingConfig,
    DetailedProfilingConfig,
    HorovodProfilingConfig,
    PythonProfilingConfig,
    SMDataParallelProfilingConfig,
    StepRange,
    TimeRange,
)
from .profiler_config import ProfilerConfig  # noqa: F401
from .utils import PythonProfiler, cProfileTimer  # noqa: F401
