"""Hyperparameters of the first-party algorithms, as validated descriptors."""
import json
from typing import Any, Callable, Dict


def _to_bool(value: Any) -> bool:
    """Like ``bool``, but parses the ``"True"``/``"False"`` strings found in job descriptions."""
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return bool(value)


def _to_list(value: Any) -> list:
    """Like ``list``, but parses the json (or comma separated) strings found in job descriptions."""
    if isinstance(value, str):
        if value.lstrip().startswith("["):
            return json.loads(value)
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


_CONVERTERS: Dict[Any, Callable[[Any], Any]] = {bool: _to_bool, list: _to_list}


class Hyperparameter(object):
    """An algorithm hyperparameter with optional validation.

    Implemented as a python descriptor object: values assigned on an estimator instance are converted with
    ``data_type``, validated, and kept in the instance's ``_hyperparameters`` dict.
    """

    def __init__(
        self,
        name: str,
        validate: Any = lambda _: True,
        validation_message: str = "",
        data_type: Callable[[Any], Any] = str,
    ):
        """Initialize a ``Hyperparameter``.

        Args:
            name (str): The name of this hyperparameter.
            validate (callable[object]->[bool]): A validation function or list of validation functions. Each
                function validates an object and returns False if the object value is invalid for this
                hyperparameter.
            validation_message (str): A usage guide to display on validation failure.
            data_type (callable): Conversion applied to assigned values, e.g. ``int`` or ``float``.
        """
        self.validation = validate
        self.validation_message = validation_message
        self.name = name
        self.data_type = _CONVERTERS.get(data_type, data_type)
        try:
            iter(self.validation)
        except TypeError:
            self.validation = [self.validation]

    def validate(self, value):
        """Raise ``ValueError`` unless every validation function accepts ``value``; ``None`` is always valid."""
        if value is None:  # We allow assignment from None, but Nones are not sent to training.
            return

        for valid in self.validation:
            if not valid(value):
                error_message = f"Invalid hyperparameter value {value} for {self.name}"
                if self.validation_message:
                    error_message = error_message + ". Expecting: " + self.validation_message
                raise ValueError(error_message)

    def __get__(self, obj, objtype):
        if obj is None:
            return self
        if "_hyperparameters" not in dir(obj) or self.name not in obj._hyperparameters:
            raise AttributeError()
        return obj._hyperparameters[self.name]

    def __set__(self, obj, value):
        """Validate the supplied value and set this hyperparameter to value."""
        value = None if value is None else self.data_type(value)
        self.validate(value)
        if "_hyperparameters" not in dir(obj):
            obj._hyperparameters = dict()
        obj._hyperparameters[self.name] = value

    def __delete__(self, obj):
        """Delete this hyperparameter."""
        del obj._hyperparameters[self.name]

    @staticmethod
    def serialize_all(obj) -> Dict[str, str]:
        """Return all non-None ``hyperparameter`` values on ``obj`` as a ``dict[str,str].``"""
        if "_hyperparameters" not in dir(obj):
            return {}
        return {
            k: json.dumps(v) if isinstance(v, list) else str(v)
            for k, v in obj._hyperparameters.items()
            if v is not None
        }
