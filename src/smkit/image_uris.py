"""Resolve the ECR image URIs of first-party algorithms, the model monitor analyzer and debugger rules."""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

ECR_URI_TEMPLATE = "{registry}.dkr.{hostname}/{repository}"
CONFIG_DIR = Path(__file__).parent / "image_uri_config"


@lru_cache(maxsize=None)
def config_for_framework(framework: str) -> Dict[str, Any]:
    """Load the JSON registry of ``framework`` bundled with smkit.

    Raises:
        ValueError: if no registry exists for ``framework``.
    """
    fname = CONFIG_DIR / f"{framework}.json"
    if not fname.is_file():
        available = sorted(p.stem for p in CONFIG_DIR.glob("*.json"))
        raise ValueError(f"Unsupported framework: {framework}. Supported framework(s): {', '.join(available)}.")
    with fname.open() as f:
        return json.load(f)


def retrieve(
    framework: str,
    region: str,
    version: Optional[str] = None,
    image_scope: Optional[str] = None,
) -> str:
    """Retrieve the ECR URI for the Docker image matching the given arguments.

    Args:
        framework (str): The name of the framework or algorithm, e.g., ``"kmeans"``, ``"model-monitor"``.
        region (str): The AWS region.
        version (str): The framework or algorithm version. Optional when only one version is available.
        image_scope (str): The image type, i.e. what it is used for. Valid values: "training", "inference",
            "monitoring", "debugger". Optional when the image serves a single scope, or training and inference
            alike.

    Returns:
        str: the ECR URI for the corresponding SageMaker Docker image.

    Raises:
        ValueError: If the combination of arguments specified is not supported.

    >>> retrieve("kmeans", "us-west-2")
    '174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1'
    """
    config = config_for_framework(framework)
    _validate_image_scope(image_scope, config["scope"], framework)

    version = _validate_version_and_set_if_needed(version, config, framework)
    version_config = config["versions"][version]

    registry = _registry_from_region(region, version_config["registries"])
    hostname = _hostname(region)
    tag = version_config.get("tag_prefix", version)
    repository = f"{version_config['repository']}:{tag}"
    return ECR_URI_TEMPLATE.format(registry=registry, hostname=hostname, repository=repository)


def _validate_image_scope(image_scope: Optional[str], available_scopes: List[str], framework: str):
    if image_scope is None:
        if len(available_scopes) > 1 and set(available_scopes) != {"training", "inference"}:
            raise ValueError(f"Image scope is required for {framework}. Supported: {', '.join(available_scopes)}.")
        return
    _validate_arg(image_scope, available_scopes, "image scope")


def _validate_version_and_set_if_needed(version: Optional[str], config: Dict[str, Any], framework: str) -> str:
    available_versions = list(config["versions"].keys())

    if len(available_versions) == 1 and version not in available_versions:
        if version is not None:
            logger.warning(
                "Defaulting to the only supported version of %s: %s. Ignoring version: %s.",
                framework,
                available_versions[0],
                version,
            )
        return available_versions[0]

    if version is None:
        raise ValueError(
            f"Unspecified version of {framework}. Supported version(s): {', '.join(available_versions)}."
        )
    _validate_arg(version, available_versions, f"{framework} version")
    return version


def _registry_from_region(region: str, registry_dict: Dict[str, str]) -> str:
    _validate_arg(region, registry_dict.keys(), "region")
    return registry_dict[region]


def _hostname(region: str) -> str:
    """ECR hostname of a region, in the partition the region belongs to."""
    if region.startswith("cn-"):
        return f"ecr.{region}.amazonaws.com.cn"
    return f"ecr.{region}.amazonaws.com"


def _validate_arg(arg, available_options, arg_name: str):
    if arg not in available_options:
        raise ValueError(
            f"Unsupported {arg_name}: {arg}. You may need to upgrade smkit. "
            f"Supported {arg_name}(s): {', '.join(available_options)}."
        )
