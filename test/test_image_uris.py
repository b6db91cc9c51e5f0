import pytest

from smkit import image_uris


def test_retrieve_algorithm():
    assert image_uris.retrieve("kmeans", "us-west-2") == "174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1"


def test_retrieve_algorithm_ignores_unknown_version():
    assert image_uris.retrieve("kmeans", "us-west-2", version="2") == (
        "174872318107.dkr.ecr.us-west-2.amazonaws.com/kmeans:1"
    )


def test_retrieve_model_monitor():
    assert image_uris.retrieve("model-monitor", "us-west-2") == (
        "159807026194.dkr.ecr.us-west-2.amazonaws.com/sagemaker-model-monitor-analyzer:latest"
    )


def test_retrieve_debugger_rules():
    uri = image_uris.retrieve("debugger", "us-west-2", image_scope="debugger")
    assert uri == "895741380848.dkr.ecr.us-west-2.amazonaws.com/sagemaker-debugger-rules:latest"


def test_unsupported_framework():
    with pytest.raises(ValueError, match="Unsupported framework: xgboost-nope"):
        image_uris.retrieve("xgboost-nope", "us-west-2")


def test_unsupported_region():
    with pytest.raises(ValueError, match="Unsupported region: mars-1"):
        image_uris.retrieve("kmeans", "mars-1")


def test_unsupported_scope():
    with pytest.raises(ValueError, match="Unsupported image scope: monitoring"):
        image_uris.retrieve("kmeans", "us-west-2", image_scope="monitoring")
