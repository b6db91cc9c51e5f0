# noqa
__all__ = [
    "Session",
    "Estimator",
    "HyperparameterTuner",
    "Processor",
    "Model",
    "Predictor",
    "image_uris",
    "model_monitor",
    "lineage",
]

import pathlib
from importlib import metadata

from . import image_uris, lineage, model_monitor
from .estimator import Estimator
from .model import Model
from .predictor import Predictor
from .processing import Processor
from .session import Session
from .tuner import HyperparameterTuner

_pkg_dir: pathlib.Path = pathlib.Path(__file__).resolve().parent

try:
    # Loading installed module, so read the installed version
    __version__ = metadata.version(_pkg_dir.name)
except metadata.PackageNotFoundError:
    # Loading uninstalled module, so try to read version from ../../VERSION.
    with open(_pkg_dir / ".." / ".." / "VERSION", "r") as f:
        __version__ = f.readline().strip()
