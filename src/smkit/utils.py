"""Naming, timestamp, and request-building helpers shared across smkit."""
import logging
import random
import re
import string
import time
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

ECR_URI_PATTERN = r"^(\d+)(\.)dkr(\.)ecr(\.)(.+)(\.)(.*)(/)(.*:.*)$"
MAX_NAME_LENGTH = 63

logger = logging.getLogger(__name__)


def name_from_base(base: str, max_length: int = MAX_NAME_LENGTH, short: bool = False) -> str:
    """Append a timestamp to the provided string.

    This function assures that the total length of the resulting string is not longer than the specified max length,
    trimming the input parameter if necessary.

    Args:
        base (str): String used as prefix to generate the unique name.
        max_length (int): Maximum length for the resulting string. Defaults to 63.
        short (bool): Whether or not to use a truncated timestamp. Defaults to False.

    Returns:
        str: Input parameter with appended timestamp.
    """
    timestamp = sagemaker_short_timestamp() if short else sagemaker_timestamp()
    trimmed_base = base[: max_length - len(timestamp) - 1]
    return f"{trimmed_base}-{timestamp}"


def unique_name_from_base(base: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Append a unix timestamp and 4 random characters to ``base``, trimming ``base`` to ``max_length``."""
    unique = "".join(random.choice(string.ascii_lowercase + string.digits) for _ in range(4))
    ts = str(int(time.time()))
    available_length = max_length - 2 - len(ts) - len(unique)
    trimmed = base[:available_length]
    return f"{trimmed}-{ts}-{unique}"


def base_name_from_image(image: str, default_base_name: Optional[str] = None) -> str:
    """Extract the base name of the image to use as the 'algorithm name' for the job.

    >>> base_name_from_image("123456789012.dkr.ecr.us-west-2.amazonaws.com/kmeans:1")
    'kmeans'
    """
    if not image:
        return default_base_name or "smkit"
    m = re.match("^(.+/)?([^:/]+)(:[^:]+)?$", image)
    base_name = m.group(2) if m else image
    return base_name


def base_from_name(name: str) -> str:
    """Extract the base name of a resource name generated by :func:`name_from_base`.

    >>> base_from_name("kmeans-2021-06-07-08-09-10-123")
    'kmeans'
    """
    m = re.match(r"^(.+)-(\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}-\d{3}|\d{6}-\d{4})", name)
    return m.group(1) if m else name


def sagemaker_timestamp() -> str:
    """Return a timestamp with millisecond precision, e.g., ``2021-06-07-08-09-10-123``."""
    moment = time.time()
    moment_ms = "{:03d}".format(int(moment * 1000) % 1000)
    return time.strftime("%Y-%m-%d-%H-%M-%S-{}".format(moment_ms), time.gmtime(moment))


def sagemaker_short_timestamp() -> str:
    """Return a timestamp that is relatively short in length, e.g., ``210607-0809``."""
    return time.strftime("%y%m%d-%H%M")


def build_dict(key: str, value: Any) -> Dict[str, Any]:
    """Return ``{key: value}`` if value is truthy, else an empty dict."""
    if value:
        return {key: value}
    return {}


def get_config_value(key_path: str, config: Optional[Dict[str, Any]]) -> Any:
    """Look up a dotted ``key_path`` (e.g. ``"local.region_name"``) in a nested dictionary."""
    if config is None:
        return None

    current_section: Any = config
    for key in key_path.split("."):
        if key in current_section:
            current_section = current_section[key]
        else:
            return None

    return current_section


def secondary_training_status_changed(current_job_description: Dict, prev_job_description: Optional[Dict]) -> bool:
    """Return True if training job's secondary status message has changed."""
    current_transitions = current_job_description.get("SecondaryStatusTransitions")
    if current_transitions is None or len(current_transitions) == 0:
        return False

    prev_transitions = (
        prev_job_description.get("SecondaryStatusTransitions") if prev_job_description is not None else None
    )

    last_message = prev_transitions[-1]["StatusMessage"] if prev_transitions else ""
    message = current_job_description["SecondaryStatusTransitions"][-1]["StatusMessage"]

    return message != last_message


def secondary_training_status_message(job_description: Dict, prev_description: Optional[Dict]) -> str:
    """Return a string with the secondary status transitions that happened since ``prev_description``.

    Each line reads ``<timestamp> <status> - <message>``.
    """
    transitions = job_description.get("SecondaryStatusTransitions")
    if transitions is None or len(transitions) == 0:
        return ""

    prev_transitions_num = 0
    if prev_description is not None and prev_description.get("SecondaryStatusTransitions") is not None:
        prev_transitions_num = len(prev_description["SecondaryStatusTransitions"])

    if prev_transitions_num == len(transitions):
        # Secondary status is not changed but the message changed.
        transitions_to_print = transitions[-1:]
    else:
        # Secondary status is changed we need to print all the entries.
        transitions_to_print = transitions[prev_transitions_num - len(transitions) :]

    last_modified: Any = job_description["LastModifiedTime"]
    if isinstance(last_modified, datetime):
        status_time = last_modified.strftime("%Y-%m-%d %H:%M:%S")
    else:
        status_time = time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime(last_modified))

    return "\n".join(
        f"{status_time} {transition['Status']} - {transition['StatusMessage']}" for transition in transitions_to_print
    )


def retries(max_retry_count: int, exception_message_prefix: str, seconds_to_sleep: float = 2) -> Iterator[int]:
    """Yield retry attempts, sleeping between them, and raise once ``max_retry_count`` is exhausted.

    >>> for _ in retries(10, "Waiting for the schedule"):
    ...     if ready():
    ...         break

    Raises:
        RuntimeError: when all retries are used up.
    """
    for i in range(max_retry_count):
        yield i
        time.sleep(seconds_to_sleep)

    raise RuntimeError(f"'{exception_message_prefix}' has reached the maximum retry count of {max_retry_count}")


def to_string(obj: Any) -> str:
    """Convert a hyperparameter value to the string form sent in API requests."""
    return str(obj)


def camel_to_snake(name: str) -> str:
    """``TrainingJobName`` -> ``training_job_name``."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def snake_to_camel(name: str) -> str:
    """``training_job_name`` -> ``TrainingJobName``."""
    return "".join(part.title() for part in name.split("_"))


def paginate(call: Callable[..., Dict[str, Any]], key: str, delay: float = 0, **params) -> List[Any]:
    """Collect ``response[key]`` over all pages of a ``NextToken``-paginated SageMaker call."""
    results: List[Any] = []
    while True:
        resp = call(**params)
        results.extend(resp.get(key, []))
        next_token = resp.get("NextToken", None)
        if next_token is None:
            break
        params["NextToken"] = next_token
        if delay:
            time.sleep(delay)
    return results


def pop_out_unused_kwarg(arg_name: str, kwargs: Dict[str, Any], override_val: Optional[str] = None):
    """Drop ``arg_name`` from ``kwargs`` when a model class sets it itself, logging the ignored value."""
    if arg_name in kwargs:
        logger.warning("Ignoring unnecessary %s = %s, using %s instead.", arg_name, kwargs[arg_name], override_val)
        kwargs.pop(arg_name)
