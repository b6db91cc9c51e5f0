import pytest

from smkit.parameter import CategoricalParameter, ContinuousParameter, IntegerParameter, ParameterRange


def test_continuous_parameter_tuning_range():
    assert ContinuousParameter(0.01, 0.2, scaling_type="Logarithmic").as_tuning_range("learning_rate") == {
        "Name": "learning_rate",
        "MinValue": "0.01",
        "MaxValue": "0.2",
        "ScalingType": "Logarithmic",
    }


def test_integer_parameter():
    p = IntegerParameter(1, 10)
    assert p.is_valid(1)
    assert p.is_valid(10)
    assert not p.is_valid(11)
    assert IntegerParameter.cast_to_type("5") == 5
    assert p.as_tuning_range("k")["ScalingType"] == "Auto"


def test_categorical_parameter():
    p = CategoricalParameter(["a", 1])
    assert p.values == ["a", "1"]
    assert p.is_valid(1)
    assert not p.is_valid("b")
    assert p.as_tuning_range("opt") == {"Name": "opt", "Values": ["a", "1"]}
    assert p.as_json_range("opt") == {"Name": "opt", "Values": ['"a"', '"1"']}
    assert CategoricalParameter("x").values == ["x"]


def test_invalid_scaling_type():
    with pytest.raises(ValueError, match="Invalid scaling type"):
        ContinuousParameter(0, 1, scaling_type="Exponential")


def test_min_greater_than_max():
    with pytest.raises(ValueError, match="must not be greater"):
        IntegerParameter(10, 1)


def test_parameter_range_equality():
    assert IntegerParameter(1, 2) == IntegerParameter(1, 2)
    assert IntegerParameter(1, 2) != ContinuousParameter(1, 2)
    assert ParameterRange.cast_to_type("0.5") == 0.5
