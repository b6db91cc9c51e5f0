"""Make real-time predictions against SageMaker endpoints."""
import logging
from typing import Any, Dict, List, Optional

from .deserializers import BaseDeserializer, BytesDeserializer
from .serializers import BaseSerializer, IdentitySerializer
from .session import Session
from .utils import name_from_base

logger = logging.getLogger(__name__)


class Predictor(object):
    """Make prediction requests to an Amazon SageMaker endpoint."""

    def __init__(
        self,
        endpoint_name: str,
        sagemaker_session: Optional[Session] = None,
        serializer: BaseSerializer = IdentitySerializer(),
        deserializer: BaseDeserializer = BytesDeserializer(),
    ):
        """Initialize a ``Predictor``.

        Behavior for serialization of input data and deserialization of result data can be configured through
        initializer arguments. If not specified, a sequence of bytes is expected and the API sends it in the
        request body without modifications. In response, the API returns the sequence of bytes from the
        prediction result without any modifications.

        Args:
            endpoint_name (str): Name of the Amazon SageMaker endpoint to which requests are sent.
            sagemaker_session (smkit.session.Session): A SageMaker Session object, used for SageMaker
                interactions (default: None). If not specified, one is created using the default AWS
                configuration chain.
            serializer (smkit.serializers.BaseSerializer): A serializer object, used to encode data for an
                inference endpoint (default: :class:`~smkit.serializers.IdentitySerializer`).
            deserializer (smkit.deserializers.BaseDeserializer): A deserializer object, used to decode data
                from an inference endpoint (default: :class:`~smkit.deserializers.BytesDeserializer`).
        """
        self.endpoint_name = endpoint_name
        self.sagemaker_session = sagemaker_session or Session()
        self.serializer = serializer
        self.deserializer = deserializer
        self._endpoint_config_name: Optional[str] = None
        self._model_names: Optional[List[str]] = None

    def predict(
        self,
        data: Any,
        initial_args: Optional[Dict[str, str]] = None,
        target_model: Optional[str] = None,
        target_variant: Optional[str] = None,
        inference_id: Optional[str] = None,
    ) -> Any:
        """Return the inference from the specified endpoint.

        Args:
            data (object): Input data for which you want the model to provide inference. If a serializer was
                specified when creating the Predictor, the result of the serializer is sent as input data.
                Otherwise the data must be sequence of bytes, and the predict method then sends the bytes in the
                request body as is.
            initial_args (dict[str,str]): Optional. Default arguments for boto3 ``invoke_endpoint`` call.
            target_model (str): S3 model artifact path to run an inference request on, in case of a multi model
                endpoint. Does not apply to endpoints hosting single model (Default: None)
            target_variant (str): The name of the production variant to run an inference request on (Default:
                None). Note that the ProductionVariant identifies the model you want to host and the resources
                you want to deploy for hosting it.
            inference_id (str): If you provide a value, it is added to the captured data when you enable data
                capture on the endpoint (Default: None).

        Returns:
            object: Inference for the given input. If a deserializer was specified when creating the Predictor,
                the result of the deserializer is returned. Otherwise the response returns the sequence of bytes
                as is.
        """
        request_args = self._create_request_args(data, initial_args, target_model, target_variant, inference_id)
        response = self.sagemaker_session.sagemaker_runtime_client.invoke_endpoint(**request_args)
        return self._handle_response(response)

    def _handle_response(self, response: Dict[str, Any]) -> Any:
        response_body = response["Body"]
        content_type = response.get("ContentType", "application/octet-stream")
        return self.deserializer.deserialize(response_body, content_type)

    def _create_request_args(
        self,
        data: Any,
        initial_args: Optional[Dict[str, str]] = None,
        target_model: Optional[str] = None,
        target_variant: Optional[str] = None,
        inference_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        args = dict(initial_args) if initial_args else {}

        if "EndpointName" not in args:
            args["EndpointName"] = self.endpoint_name

        if "ContentType" not in args:
            args["ContentType"] = self.content_type

        if "Accept" not in args:
            args["Accept"] = ", ".join(self.accept)

        if target_model:
            args["TargetModel"] = target_model

        if target_variant:
            args["TargetVariant"] = target_variant

        if inference_id:
            args["InferenceId"] = inference_id

        data = self.serializer.serialize(data)

        args["Body"] = data
        return args

    def update_data_capture_config(self, data_capture_config=None):
        """Updates the DataCaptureConfig for the Predictor's associated Amazon SageMaker Endpoint.

        The new endpoint config is a copy of the current one, with its data capture settings replaced, named
        ``{endpoint_name}-{timestamp}``.

        Args:
            data_capture_config (smkit.model_monitor.DataCaptureConfig): The DataCaptureConfig to update the
                predictor's endpoint to use. ``None`` disables data capture.
        """
        endpoint_desc = self.sagemaker_session.describe_endpoint(self.endpoint_name)
        current_config = self.sagemaker_session.sagemaker_client.describe_endpoint_config(
            EndpointConfigName=endpoint_desc["EndpointConfigName"]
        )

        new_config_name = name_from_base(base=self.endpoint_name)
        request: Dict[str, Any] = {
            "EndpointConfigName": new_config_name,
            "ProductionVariants": current_config["ProductionVariants"],
        }
        if current_config.get("KmsKeyId") is not None:
            request["KmsKeyId"] = current_config["KmsKeyId"]
        if current_config.get("Tags"):
            request["Tags"] = current_config["Tags"]

        # No DataCaptureConfig in the new endpoint config disables capture.
        if data_capture_config is not None:
            request["DataCaptureConfig"] = data_capture_config._to_request_dict()

        self.sagemaker_session.sagemaker_client.create_endpoint_config(**request)
        self.sagemaker_session.update_endpoint(self.endpoint_name, new_config_name)
        self._endpoint_config_name = new_config_name

    def _delete_endpoint_config(self):
        """Delete the Amazon SageMaker endpoint configuration backing this predictor."""
        self.sagemaker_session.delete_endpoint_config(self._get_endpoint_config_name())

    def delete_endpoint(self, delete_endpoint_config: bool = True):
        """Delete the Amazon SageMaker endpoint backing this predictor.

        Also delete the endpoint configuration attached to it if delete_endpoint_config is True.

        Args:
            delete_endpoint_config (bool, optional): Flag to indicate whether to delete endpoint configuration
                together with endpoint. Defaults to True. If True, both endpoint and endpoint configuration will
                be deleted. If False, only endpoint will be deleted.
        """
        if delete_endpoint_config:
            self._delete_endpoint_config()

        self.sagemaker_session.delete_endpoint(self.endpoint_name)

    def delete_model(self):
        """Deletes the Amazon SageMaker models backing this predictor."""
        request_failed = False
        failed_models = []
        for model_name in self._get_model_names():
            try:
                self.sagemaker_session.delete_model(model_name)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to delete model: %s", model_name)
                request_failed = True
                failed_models.append(model_name)

        if request_failed:
            raise RuntimeError(
                "One or more models cannot be deleted, please retry. \n"
                f"Failed models: {', '.join(failed_models)}"
            )

    def _get_endpoint_config_name(self) -> str:
        if self._endpoint_config_name is None:
            endpoint_desc = self.sagemaker_session.describe_endpoint(self.endpoint_name)
            self._endpoint_config_name = endpoint_desc["EndpointConfigName"]
        return self._endpoint_config_name

    def _get_model_names(self) -> List[str]:
        if self._model_names is None:
            endpoint_config = self.sagemaker_session.sagemaker_client.describe_endpoint_config(
                EndpointConfigName=self._get_endpoint_config_name()
            )
            production_variants = endpoint_config["ProductionVariants"]
            self._model_names = [d["ModelName"] for d in production_variants]
        return self._model_names

    @property
    def content_type(self) -> str:
        """The MIME type of the data sent to the inference endpoint."""
        return self.serializer.CONTENT_TYPE

    @property
    def accept(self):
        """The content type(s) that are expected from the inference endpoint."""
        return self.deserializer.ACCEPT
