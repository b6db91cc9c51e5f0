from typing import Any, Callable, Dict, Iterator, List, Optional

from ..session import Session
from . import _boto_functions, _utils


class ApiObject(object):
    """A Python class representation of a boto API object.

    Converts boto dicts of 'UpperCamelCase' names to dicts into/from a Python object with standard python members.
    Clients invoke ``_to_boto`` on an instance of ApiObject to transform the ApiObject into a boto representation.
    Clients invoke ``_from_boto`` on a sub-class of ApiObject to instantiate an instance of that class from a boto
    representation.
    """

    # A map from boto 'UpperCamelCase' name to member name. If a boto name does not appear in this dict then it is
    # converted to lower_snake_case.
    _custom_boto_names: Dict[str, str] = {}

    # A map from name to an ApiObject subclass. Allows ApiObjects to contain ApiObject members.
    _custom_boto_types: _boto_functions.TypeMap = {}

    def __init__(self, **kwargs):
        """Init ApiObject."""
        self.__dict__.update(kwargs)

    @classmethod
    def _boto_ignore(cls) -> List[str]:
        """Response fields to ignore by default."""
        return ["ResponseMetadata"]

    @classmethod
    def _from_boto(cls, boto_dict: Dict[str, Any], **kwargs):
        """Construct an instance of this ApiObject from a boto response.

        Args:
            boto_dict (dict): A dictionary of a boto response.
            **kwargs: Arbitrary keyword arguments
        """
        boto_dict = {k: v for k, v in boto_dict.items() if k not in cls._boto_ignore()}
        custom_boto_names_to_member_names = {a: b for b, a in cls._custom_boto_names.items()}
        cls_kwargs = _boto_functions.from_boto(boto_dict, custom_boto_names_to_member_names, cls._custom_boto_types)
        cls_kwargs.update(kwargs)
        return cls(**cls_kwargs)

    @classmethod
    def _to_boto(cls, obj) -> Dict[str, Any]:
        """Convert an object to a boto representation.

        Args:
            obj (dict or ApiObject): The object to convert to boto.
        """
        if not isinstance(obj, dict):
            var_dict = vars(obj)
        else:
            var_dict = obj
        return _boto_functions.to_boto(var_dict, cls._custom_boto_names, cls._custom_boto_types)

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        return False

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(tuple(sorted(self.__dict__.items(), key=lambda kv: kv[0])))

    def __repr__(self):
        return "{}({})".format(
            type(self).__name__,
            ",".join(["{}={}".format(k, repr(v)) for k, v in vars(self).items()]),
        )


class Record(ApiObject):
    """A boto based Active Record class based on convention of CRUD operations."""

    # update / delete / load method names
    _boto_load_method: Optional[str] = None
    _boto_update_method: Optional[str] = None
    _boto_delete_method: Optional[str] = None

    # List of member names to convert to boto representations and pass to the update method.
    _boto_update_members: List[str] = []

    # List of member names to convert to boto representations and pass to the delete method.
    _boto_delete_members: List[str] = []

    def __init__(self, sagemaker_session: Optional[Session] = None, **kwargs):
        self.sagemaker_session = sagemaker_session
        super().__init__(**kwargs)

    @classmethod
    def _list(
        cls,
        boto_list_method: str,
        list_item_factory: Callable[[Dict[str, Any]], Any],
        boto_list_items_name: str,
        boto_next_token_name: str = "NextToken",
        sagemaker_session: Optional[Session] = None,
        **kwargs,
    ) -> Iterator[Any]:
        """Yield the items of a paginated ``List*`` call, following the next token across pages."""
        sagemaker_session = sagemaker_session or _utils.default_session()
        sagemaker_client = sagemaker_session.sagemaker_client
        list_method = getattr(sagemaker_client, boto_list_method)
        list_request_kwargs = _boto_functions.to_boto(kwargs, cls._custom_boto_names, cls._custom_boto_types)

        next_token = list_request_kwargs.pop(boto_next_token_name, None)
        while True:
            if next_token:
                list_request_kwargs[boto_next_token_name] = next_token
            list_response = list_method(**list_request_kwargs)
            list_items = list_response.get(boto_list_items_name, [])
            next_token = list_response.get(boto_next_token_name)
            for item in list_items:
                yield list_item_factory(item)
            if not next_token:
                break

    @classmethod
    def _construct(cls, boto_method_name: str, sagemaker_session: Optional[Session] = None, **kwargs):
        """Create and invoke a SageMaker API call request."""
        sagemaker_session = sagemaker_session or _utils.default_session()
        instance = cls(sagemaker_session, **kwargs)
        return instance._invoke_api(boto_method_name, kwargs)

    def with_boto(self, boto_dict: Dict[str, Any]):
        """Update this ApiObject with a boto response.

        Args:
            boto_dict (dict): A dictionary of a boto response.
        """
        custom_boto_names_to_member_names = {a: b for b, a in self._custom_boto_names.items()}
        boto_dict = {k: v for k, v in boto_dict.items() if k not in self._boto_ignore()}
        self.__dict__.update(
            **_boto_functions.from_boto(boto_dict, custom_boto_names_to_member_names, self._custom_boto_types)
        )
        return self

    def _invoke_api(self, boto_method: str, boto_method_members):
        """Invoke a SageMaker API with the members named in ``boto_method_members``, then update from the response."""
        api_values = {k: v for k, v in vars(self).items() if k in boto_method_members}
        api_kwargs = self._to_boto(api_values)
        api_method = getattr(self.sagemaker_session.sagemaker_client, boto_method)
        api_boto_response = api_method(**api_kwargs)
        return self.with_boto(api_boto_response)

    def _set_tags(self, resource_arn: Optional[str] = None, tags: Optional[List[Dict[str, str]]] = None):
        """Set tags on this ApiObject.

        Args:
            resource_arn (str): The arn of the Record
            tags (list[dict]): An array of Tag objects that set to Record

        Returns:
            A list of key, value pair objects. i.e. [{"key":"value"}]
        """
        tag_list = self.sagemaker_session.sagemaker_client.add_tags(ResourceArn=resource_arn, Tags=tags)["Tags"]
        return tag_list
