"""Hyperparameter ranges searched by tuning jobs."""
import json
from typing import Any, Dict, List, Union

SCALING_TYPES = ["Auto", "Linear", "Logarithmic", "ReverseLogarithmic"]


class ParameterRange(object):
    """Base class for representing parameter ranges.

    This is used to define what hyperparameters to tune for an Amazon SageMaker hyperparameter tuning job and to
    verify hyperparameters for Marketplace Algorithms.
    """

    __all_types__ = ("Continuous", "Categorical", "Integer")

    def __init__(self, min_value: Union[int, float], max_value: Union[int, float], scaling_type: str = "Auto"):
        """Initialize a parameter range.

        Args:
            min_value (float or int): The minimum value for the range.
            max_value (float or int): The maximum value for the range.
            scaling_type (str): The scale used for searching the range during tuning (default: 'Auto').
                Valid values: 'Auto', 'Linear', 'Logarithmic' and 'ReverseLogarithmic'.

        Raises:
            ValueError: for an unknown scaling type, or ``min_value`` above ``max_value``.
        """
        if scaling_type not in SCALING_TYPES:
            raise ValueError(f"Invalid scaling type {scaling_type}. Expecting one of: {', '.join(SCALING_TYPES)}")
        if min_value > max_value:
            raise ValueError(f"min_value {min_value} must not be greater than max_value {max_value}")
        self.min_value = min_value
        self.max_value = max_value
        self.scaling_type = scaling_type

    def is_valid(self, value) -> bool:
        """Determine if a value is valid within this ParameterRange."""
        return self.min_value <= value <= self.max_value

    @classmethod
    def cast_to_type(cls, value):
        return float(value)

    def as_tuning_range(self, name: str) -> Dict[str, str]:
        """Represent the parameter range as a dictionary.

        It is suitable for a request to create an Amazon SageMaker hyperparameter tuning job.

        Args:
            name (str): The name of the hyperparameter.

        Returns:
            dict[str, str]: A dictionary that contains the name and values of the hyperparameter.
        """
        return {
            "Name": name,
            "MinValue": str(self.min_value),
            "MaxValue": str(self.max_value),
            "ScalingType": self.scaling_type,
        }

    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __repr__(self):
        return (
            f"{type(self).__name__}(min_value={self.min_value}, max_value={self.max_value}, "
            f"scaling_type='{self.scaling_type}')"
        )


class ContinuousParameter(ParameterRange):
    """A class for representing hyperparameters that have a continuous range of possible values."""

    __name__ = "Continuous"

    @classmethod
    def cast_to_type(cls, value) -> float:
        return float(value)


class IntegerParameter(ParameterRange):
    """A class for hyperparameters that have an integer range of possible values."""

    __name__ = "Integer"

    @classmethod
    def cast_to_type(cls, value) -> int:
        return int(value)


class CategoricalParameter(ParameterRange):
    """A class for representing hyperparameters that have a discrete list of possible values."""

    __name__ = "Categorical"

    def __init__(self, values: Union[List[Any], Any]):  # pylint: disable=super-init-not-called
        """Initialize a ``CategoricalParameter``.

        Args:
            values (list or object): The possible values for the hyperparameter. This input will be converted
                into a list of strings.
        """
        if isinstance(values, list):
            self.values = [str(v) for v in values]
        else:
            self.values = [str(values)]

    def as_tuning_range(self, name: str) -> Dict[str, Any]:
        return {"Name": name, "Values": self.values}

    def as_json_range(self, name: str) -> Dict[str, Any]:
        """Represent the parameter range as a dictionary with JSON-encoded values.

        Frameworks that read hyperparameters as JSON need the tuned string values quoted.
        """
        return {"Name": name, "Values": [json.dumps(v) for v in self.values]}

    def is_valid(self, value) -> bool:
        return str(value) in self.values

    @classmethod
    def cast_to_type(cls, value) -> str:
        return str(value)

    def __repr__(self):
        return f"CategoricalParameter(values={self.values})"
