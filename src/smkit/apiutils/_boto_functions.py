"""Conversion between boto ``UpperCamelCase`` dicts and ``lower_snake_case`` members."""
from typing import Any, Dict, Tuple, Type

from ..utils import camel_to_snake, snake_to_camel

# member name -> (ApiObject subclass, is_collection)
TypeMap = Dict[str, Tuple[Type, bool]]


def from_boto(boto_dict: Dict[str, Any], boto_name_to_member_name: Dict[str, str], member_name_to_type: TypeMap):
    """Convert an UpperCamelCase boto response to a snake case representation.

    Args:
        boto_dict (dict[str, ?]): A boto response dictionary.
        boto_name_to_member_name (dict[str, str]): A map from boto name to snake_case name. If a given boto name
            is not in the map then a default mapping is applied.
        member_name_to_type (dict[str, (ApiObject, bool)]): A map from snake case name to a type description
            tuple. The first element of the tuple, a subclass of ApiObject, is the type of the mapped object.
            The second element indicates whether the mapped element is a collection or singleton.

    Returns:
        dict: Boto response in snake case.
    """
    from_boto_values = {}
    for boto_name, boto_value in boto_dict.items():
        member_name = boto_name_to_member_name.get(boto_name, camel_to_snake(boto_name))

        if member_name in member_name_to_type:
            api_type, is_collection = member_name_to_type[member_name]
            if is_collection:
                if isinstance(boto_value, dict):
                    member_value = {key: api_type._from_boto(value) for key, value in boto_value.items()}
                else:
                    member_value = [api_type._from_boto(item) for item in boto_value]
            else:
                member_value = api_type._from_boto(boto_value)
        else:
            # Simple values (numbers, strings, lists of strings) need no conversion.
            member_value = boto_value
        from_boto_values[member_name] = member_value
    return from_boto_values


def to_boto(member_vars: Dict[str, Any], member_name_to_boto_name: Dict[str, str], member_name_to_type: TypeMap):
    """Convert a dict of snake case names to values into a boto UpperCamelCase representation.

    Entries whose value is None are dropped: API operations take optional parameters that may not be null.

    Args:
        member_vars (dict[str, ?]): A map from snake case name to value.
        member_name_to_boto_name (dict[str, str]): A map from snake_case name to boto name.
        member_name_to_type (dict[str, (ApiObject, bool)]): A map from snake case name to a type description.

    Returns:
        dict: boto dict converted to UpperCamelCase.
    """
    to_boto_values = {}
    member_vars = {key: value for key, value in member_vars.items() if value is not None}

    for member_name, member_value in member_vars.items():
        boto_name = member_name_to_boto_name.get(member_name, snake_to_camel(member_name))
        api_type, is_api_collection_type = member_name_to_type.get(member_name, (None, None))
        if is_api_collection_type and isinstance(member_value, dict):
            boto_value = {key: api_type._to_boto(value) for key, value in member_value.items()}
        elif is_api_collection_type and isinstance(member_value, list):
            boto_value = [api_type._to_boto(value) for value in member_value]
        else:
            boto_value = api_type._to_boto(member_value) if api_type else member_value
        to_boto_values[boto_name] = boto_value
    return to_boto_values
