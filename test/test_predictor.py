import io

import pytest

from smkit.deserializers import JSONDeserializer
from smkit.model_monitor import DataCaptureConfig
from smkit.predictor import Predictor
from smkit.serializers import CSVSerializer, JSONSerializer

ENDPOINT = "my-endpoint"


@pytest.fixture
def predictor(sagemaker_session):
    sagemaker_session.describe_endpoint.return_value = {"EndpointConfigName": "my-endpoint-config"}
    sagemaker_session.sagemaker_client.describe_endpoint_config.return_value = {
        "ProductionVariants": [{"VariantName": "AllTraffic", "ModelName": "model-a"}],
        "KmsKeyId": "my-key",
    }
    return Predictor(ENDPOINT, sagemaker_session, serializer=JSONSerializer(), deserializer=JSONDeserializer())


def test_predict(predictor, sagemaker_session):
    runtime = sagemaker_session.sagemaker_runtime_client
    runtime.invoke_endpoint.return_value = {"Body": io.BytesIO(b'{"score": 0.5}'), "ContentType": "application/json"}

    result = predictor.predict([1, 2], target_model="model.tar.gz", target_variant="blue", inference_id="req-1")

    assert result == {"score": 0.5}
    runtime.invoke_endpoint.assert_called_once_with(
        EndpointName=ENDPOINT,
        ContentType="application/json",
        Accept="application/json",
        TargetModel="model.tar.gz",
        TargetVariant="blue",
        InferenceId="req-1",
        Body="[1, 2]",
    )


def test_request_args_keep_initial_args(sagemaker_session):
    predictor = Predictor(ENDPOINT, sagemaker_session, serializer=CSVSerializer())
    args = predictor._create_request_args([1, 2], initial_args={"ContentType": "text/plain", "CustomAttributes": "x"})
    assert args == {
        "EndpointName": ENDPOINT,
        "ContentType": "text/plain",
        "CustomAttributes": "x",
        "Accept": "*/*",
        "Body": "1,2",
    }


def test_update_data_capture_config(predictor, sagemaker_session):
    capture = DataCaptureConfig(enable_capture=True, sampling_percentage=50, destination_s3_uri="s3://bucket/capture")

    predictor.update_data_capture_config(capture)

    request = sagemaker_session.sagemaker_client.create_endpoint_config.call_args.kwargs
    assert request["EndpointConfigName"].startswith(f"{ENDPOINT}-")
    assert request["ProductionVariants"] == [{"VariantName": "AllTraffic", "ModelName": "model-a"}]
    assert request["KmsKeyId"] == "my-key"
    assert request["DataCaptureConfig"]["InitialSamplingPercentage"] == 50
    assert request["DataCaptureConfig"]["CaptureOptions"] == [{"CaptureMode": "Input"}, {"CaptureMode": "Output"}]
    sagemaker_session.update_endpoint.assert_called_once_with(ENDPOINT, request["EndpointConfigName"])


def test_disable_data_capture(predictor, sagemaker_session):
    predictor.update_data_capture_config(None)
    request = sagemaker_session.sagemaker_client.create_endpoint_config.call_args.kwargs
    assert "DataCaptureConfig" not in request


def test_delete_endpoint(predictor, sagemaker_session):
    predictor.delete_endpoint()
    sagemaker_session.delete_endpoint_config.assert_called_once_with("my-endpoint-config")
    sagemaker_session.delete_endpoint.assert_called_once_with(ENDPOINT)


def test_delete_endpoint_keep_config(predictor, sagemaker_session):
    predictor.delete_endpoint(delete_endpoint_config=False)
    sagemaker_session.delete_endpoint_config.assert_not_called()


def test_delete_model(predictor, sagemaker_session):
    predictor.delete_model()
    sagemaker_session.delete_model.assert_called_once_with("model-a")


def test_delete_model_reports_failures(predictor, sagemaker_session):
    sagemaker_session.sagemaker_client.describe_endpoint_config.return_value = {
        "ProductionVariants": [{"ModelName": "model-a"}, {"ModelName": "model-b"}]
    }
    sagemaker_session.delete_model.side_effect = [None, RuntimeError("throttled")]

    with pytest.raises(RuntimeError, match="Failed models: model-b"):
        predictor.delete_model()
    assert sagemaker_session.delete_model.call_count == 2


def test_data_capture_config_validation():
    with pytest.raises(ValueError, match="sampling_percentage"):
        DataCaptureConfig(enable_capture=True, sampling_percentage=120, destination_s3_uri="s3://bucket/capture")


def test_data_capture_config_default_destination(sagemaker_session):
    config = DataCaptureConfig(
        enable_capture=False, capture_options=["REQUEST"], kms_key_id="key", sagemaker_session=sagemaker_session
    )
    assert config._to_request_dict() == {
        "EnableCapture": False,
        "InitialSamplingPercentage": 20,
        "DestinationS3Uri": "s3://my-bucket/model-monitor/data-capture",
        "CaptureOptions": [{"CaptureMode": "Input"}],
        "KmsKeyId": "key",
        "CaptureContentTypeHeader": {"CsvContentTypes": ["text/csv"], "JsonContentTypes": ["application/json"]},
    }
