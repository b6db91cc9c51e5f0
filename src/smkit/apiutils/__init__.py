"""Active-record style wrappers over SageMaker API objects."""
from ._base_types import ApiObject, Record  # noqa: F401
