"""SageMaker models: a container image plus model artifacts, deployable to an endpoint."""
import logging
from typing import Any, Dict, List, Optional

from .session import Session, production_variant
from .utils import base_name_from_image, name_from_base

logger = logging.getLogger(__name__)


def container_def(
    image_uri: str, model_data_url: Optional[str] = None, env: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Create a definition for executing a container as part of a SageMaker model.

    Args:
        image_uri (str): Docker image URI to run for this container.
        model_data_url (str): S3 URI of data required by this container, e.g. SageMaker training job model
            artifacts (default: None).
        env (dict[str, str]): Environment variables to set inside the container (default: None).

    Returns:
        dict[str, str]: A complete container definition object usable with the CreateModel API.
    """
    if env is None:
        env = {}
    c_def: Dict[str, Any] = {"Image": image_uri, "Environment": env}
    if model_data_url:
        c_def["ModelDataUrl"] = model_data_url
    return c_def


class Model(object):
    """A SageMaker ``Model`` that can be deployed to an ``Endpoint``."""

    def __init__(
        self,
        image_uri: str,
        model_data: Optional[str] = None,
        role: Optional[str] = None,
        predictor_cls=None,
        env: Optional[Dict[str, str]] = None,
        name: Optional[str] = None,
        vpc_config: Optional[Dict[str, List[str]]] = None,
        sagemaker_session: Optional[Session] = None,
        enable_network_isolation: bool = False,
    ):
        """Initialize an SageMaker ``Model``.

        Args:
            image_uri (str): A Docker image URI.
            model_data (str): The S3 location of a SageMaker model data ``.tar.gz`` file (default: None).
            role (str): An AWS IAM role (either name or full ARN). It can be null if this is being used to create
                a Model to pass to a ``PipelineModel`` which has its own Role field. (default: None)
            predictor_cls (callable[str, smkit.session.Session]): A function to call to create a predictor
                (default: None). If not None, ``deploy`` will return the result of invoking this function on the
                created endpoint name.
            env (dict[str, str]): Environment variables to run with ``image_uri`` when hosted in SageMaker
                (default: None).
            name (str): The model name. If None, a default model name will be selected on each ``deploy``.
            vpc_config (dict[str, list[str]]): The VpcConfig set on the model (default: None)

                * 'Subnets' (list[str]): List of subnet ids.
                * 'SecurityGroupIds' (list[str]): List of security group ids.

            sagemaker_session (smkit.session.Session): A SageMaker Session object, used for SageMaker
                interactions (default: None). If not specified, one is created using the default AWS
                configuration chain.
            enable_network_isolation (Boolean): Default False. If True, enables network isolation in the endpoint,
                isolating the model container. No inbound or outbound network calls can be made to or from the
                model container.
        """
        self.model_data = model_data
        self.image_uri = image_uri
        self.role = role
        self.predictor_cls = predictor_cls
        self.env = env or {}
        self.name = name
        self._base_name: Optional[str] = None
        self.vpc_config = vpc_config
        self.sagemaker_session = sagemaker_session
        self.endpoint_name: Optional[str] = None
        self._enable_network_isolation = enable_network_isolation

    def prepare_container_def(
        self, instance_type: Optional[str] = None, accelerator_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """Return a dict created by ``container_def()``.

        Subclasses can override this to provide custom container definitions for deployment to a specific
        instance type. Called by ``deploy()``.

        Args:
            instance_type (str): The EC2 instance type to deploy this Model to. For example, 'ml.p2.xlarge'.
            accelerator_type (str): The Elastic Inference accelerator type to deploy to the instance for loading
                and making inferences to the model. For example, 'ml.eia1.medium'.

        Returns:
            dict: A container definition object usable with the CreateModel API.
        """
        return container_def(self.image_uri, self.model_data, self.env)

    def enable_network_isolation(self) -> bool:
        """Whether to enable network isolation when creating this Model."""
        return self._enable_network_isolation

    def _init_sagemaker_session_if_does_not_exist(self):
        """Set ``self.sagemaker_session`` to a default ``Session`` if it is not set already."""
        if self.sagemaker_session:
            return
        self.sagemaker_session = Session()

    def create(
        self,
        instance_type: Optional[str] = None,
        accelerator_type: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
    ):
        """Create a SageMaker Model Entity.

        Args:
            instance_type (str): The EC2 instance type that this Model will be used for, this is only used to
                determine if the image needs GPU support or not.
            accelerator_type (str): Type of Elastic Inference accelerator to attach to an endpoint for model
                loading and inference, for example, 'ml.eia1.medium'.
            tags (list[dict]): Tags to add to the model.
        """
        self._create_sagemaker_model(instance_type, accelerator_type, tags)

    def _create_sagemaker_model(self, instance_type=None, accelerator_type=None, tags=None):
        container_def_ = self.prepare_container_def(instance_type, accelerator_type=accelerator_type)

        self._ensure_base_name_if_needed(container_def_["Image"])
        self._set_model_name_if_needed()
        self._init_sagemaker_session_if_does_not_exist()

        self.sagemaker_session.create_model(
            self.name,
            self.role,
            container_def_,
            vpc_config=self.vpc_config,
            enable_network_isolation=self.enable_network_isolation(),
            tags=tags,
        )

    def _ensure_base_name_if_needed(self, image_uri: str):
        """Create a base name from the image URI if there is no model name provided."""
        if self.name is None:
            self._base_name = self._base_name or base_name_from_image(image_uri)

    def _set_model_name_if_needed(self):
        """Generate a new model name if ``self._base_name`` is present."""
        if self._base_name:
            self.name = name_from_base(self._base_name)

    def deploy(
        self,
        initial_instance_count: int,
        instance_type: str,
        serializer=None,
        deserializer=None,
        accelerator_type: Optional[str] = None,
        endpoint_name: Optional[str] = None,
        tags: Optional[List[Dict[str, str]]] = None,
        kms_key: Optional[str] = None,
        wait: bool = True,
        data_capture_config=None,
    ):
        """Deploy this ``Model`` to an ``Endpoint`` and optionally return a ``Predictor``.

        Create a SageMaker ``Model`` and ``EndpointConfig``, and deploy an ``Endpoint`` from this ``Model``. If
        ``self.predictor_cls`` is not None, this method returns a the result of invoking ``self.predictor_cls``
        on the created endpoint name.

        Args:
            initial_instance_count (int): The initial number of instances to run in the ``Endpoint`` created from
                this ``Model``.
            instance_type (str): The EC2 instance type to deploy this Model to. For example, 'ml.p2.xlarge'.
            serializer (smkit.serializers.BaseSerializer): A serializer object, used to encode data for an
                inference endpoint (default: None). If ``serializer`` is not None, then ``serializer`` will
                override the default serializer of ``predictor_cls``.
            deserializer (smkit.deserializers.BaseDeserializer): A deserializer object, used to decode data from
                an inference endpoint (default: None).
            accelerator_type (str): Type of Elastic Inference accelerator to deploy this model for model loading
                and inference, for example, 'ml.eia1.medium'. If not specified, no Elastic Inference accelerator
                will be attached to the endpoint.
            endpoint_name (str): The name of the endpoint to create (default: None). If not specified, a unique
                endpoint name will be created.
            tags (list[dict[str, str]]): The list of tags to attach to this specific endpoint.
            kms_key (str): The ARN of the KMS key that is used to encrypt the data on the storage volume attached
                to the instance hosting the endpoint.
            wait (bool): Whether the call should wait until the deployment of this model completes (default:
                True).
            data_capture_config (smkit.model_monitor.DataCaptureConfig): Specifies configuration related to
                Endpoint data capture for use with Amazon SageMaker Model Monitoring. Default: None.

        Returns:
            callable[string, smkit.session.Session] or None: Invocation of ``self.predictor_cls`` on the created
                endpoint name, if ``self.predictor_cls`` is not None. Otherwise, return None.
        """
        self._init_sagemaker_session_if_does_not_exist()

        if self.role is None:
            raise ValueError("Role can not be null for deploying a model")

        self._create_sagemaker_model(instance_type, accelerator_type, tags)
        production_variant_ = production_variant(
            self.name, instance_type, initial_instance_count, accelerator_type=accelerator_type
        )

        if endpoint_name:
            self.endpoint_name = endpoint_name
        else:
            base_endpoint_name = self._base_name or base_name_from_image(self.image_uri)
            self.endpoint_name = name_from_base(base_endpoint_name)

        data_capture_config_dict = None
        if data_capture_config is not None:
            data_capture_config_dict = data_capture_config._to_request_dict()

        self.sagemaker_session.endpoint_from_production_variants(
            name=self.endpoint_name,
            production_variants=[production_variant_],
            tags=tags,
            kms_key=kms_key,
            wait=wait,
            data_capture_config_dict=data_capture_config_dict,
        )

        if self.predictor_cls:
            predictor = self.predictor_cls(self.endpoint_name, self.sagemaker_session)
            if serializer:
                predictor.serializer = serializer
            if deserializer:
                predictor.deserializer = deserializer
            return predictor
        return None

    def delete_model(self):
        """Delete an Amazon SageMaker Model.

        Raises:
            ValueError: if the model is not created yet.
        """
        if self.name is None:
            raise ValueError(
                "The SageMaker model must be created first before attempting to delete."
            )
        self._init_sagemaker_session_if_does_not_exist()
        self.sagemaker_session.delete_model(self.name)
