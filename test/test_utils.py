import re
from unittest.mock import MagicMock, patch

import pytest

from smkit import utils


def test_name_from_base():
    name = utils.name_from_base("kmeans")
    assert re.match(r"^kmeans-\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}-\d{3}$", name)


def test_name_from_base_trims_to_max_length():
    name = utils.name_from_base("x" * 100, max_length=63)
    assert len(name) == 63


def test_name_from_base_short():
    assert re.match(r"^pca-\d{6}-\d{4}$", utils.name_from_base("pca", short=True))


def test_unique_name_from_base():
    name = utils.unique_name_from_base("monitoring-schedule", max_length=30)
    assert re.match(r"^monitoring-sch-\d{10}-[a-z0-9]{4}$", name)
    assert len(name) == 30


def test_build_dict():
    assert utils.build_dict("KmsKeyId", "key") == {"KmsKeyId": "key"}
    assert utils.build_dict("KmsKeyId", None) == {}
    assert utils.build_dict("Tags", []) == {}


def test_get_config_value():
    config = {"local": {"region_name": "us-west-2", "container_root": None}}
    assert utils.get_config_value("local.region_name", config) == "us-west-2"
    assert utils.get_config_value("local.missing", config) is None
    assert utils.get_config_value("local", config) == {"region_name": "us-west-2", "container_root": None}
    assert utils.get_config_value("local.region_name", None) is None


def test_base_from_name_roundtrip():
    assert utils.base_from_name(utils.name_from_base("linear-learner")) == "linear-learner"
    assert utils.base_from_name(utils.name_from_base("knn", short=True)) == "knn"
    assert utils.base_from_name("no-timestamp-here") == "no-timestamp-here"


@pytest.mark.parametrize(
    "image,expected",
    [
        ("174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1", "kmeans"),
        ("174872318107.dkr.ecr.us-west-2.amazonaws.com/factorization-machines", "factorization-machines"),
        ("my-image:latest", "my-image"),
    ],
)
def test_base_name_from_image(image, expected):
    assert utils.base_name_from_image(image) == expected


def test_base_name_from_image_default():
    assert utils.base_name_from_image(None) == "smkit"
    assert utils.base_name_from_image("", default_base_name="algo") == "algo"


def test_camel_snake_case():
    assert utils.camel_to_snake("TrainingJobName") == "training_job_name"
    assert utils.camel_to_snake("ResourceARN") == "resource_arn"
    assert utils.snake_to_camel("training_job_name") == "TrainingJobName"


def test_secondary_training_status_message():
    prev = {"SecondaryStatusTransitions": [{"Status": "Starting", "StatusMessage": "Launching"}]}
    current = {
        "SecondaryStatusTransitions": [
            {"Status": "Starting", "StatusMessage": "Launching"},
            {"Status": "Downloading", "StatusMessage": "Downloading input data"},
        ],
        "LastModifiedTime": 0,
    }
    assert utils.secondary_training_status_changed(current, prev)
    assert utils.secondary_training_status_message(current, prev) == (
        "1970-01-01 00:00:00 Downloading - Downloading input data"
    )
    assert not utils.secondary_training_status_changed(prev, prev)


@patch("smkit.utils.time.sleep")
def test_retries_exhausted(sleep):
    with pytest.raises(RuntimeError, match="maximum retry count of 3"):
        for _ in utils.retries(3, "Waiting", seconds_to_sleep=5):
            pass
    assert sleep.call_count == 3
    sleep.assert_called_with(5)


@patch("smkit.utils.time.sleep")
def test_retries_break_early(sleep):
    attempts = 0
    for _ in utils.retries(5, "Waiting"):
        attempts += 1
        if attempts == 2:
            break
    assert attempts == 2
    assert sleep.call_count == 1


def test_paginate():
    call = MagicMock(
        side_effect=[
            {"Items": [1, 2], "NextToken": "t1"},
            {"Items": [3]},
        ]
    )
    assert utils.paginate(call, "Items", Foo="bar") == [1, 2, 3]
    assert call.call_args_list[1].kwargs == {"Foo": "bar", "NextToken": "t1"}


def test_pop_out_unused_kwarg():
    kwargs = {"image_uri": "foo", "role": "bar"}
    utils.pop_out_unused_kwarg("image_uri", kwargs, "baz")
    assert kwargs == {"role": "bar"}
