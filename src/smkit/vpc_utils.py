"""Conversion between ``(subnets, security_group_ids)`` and the ``VpcConfig`` request structure."""
from typing import Any, Dict, List, Optional, Tuple

SUBNETS_KEY = "Subnets"
SECURITY_GROUP_IDS_KEY = "SecurityGroupIds"
VPC_CONFIG_KEY = "VpcConfig"

# A global constant value for methods which can optionally override VpcConfig
# Using the default implies that VpcConfig should be reused from an existing Estimator or Training Job
VPC_CONFIG_DEFAULT = "VPC_CONFIG_DEFAULT"


def to_dict(subnets: Optional[List[str]], security_group_ids: Optional[List[str]]) -> Optional[Dict[str, List[str]]]:
    """Prepare a VpcConfig dict containing keys 'Subnets' and 'SecurityGroupIds'.

    Returns:
        A VpcConfig dict, or None if either argument is empty.
    """
    if subnets is None or security_group_ids is None:
        return None
    return {SUBNETS_KEY: subnets, SECURITY_GROUP_IDS_KEY: security_group_ids}


def from_dict(vpc_config: Optional[Dict[str, Any]], do_sanitize: bool = False) -> Tuple[Any, Any]:
    """Extract subnets and security group ids as lists from a VpcConfig dict.

    Args:
        vpc_config (dict): a VpcConfig dict containing 'Subnets' and 'SecurityGroupIds'.
        do_sanitize (bool): whether to sanitize the VpcConfig dict before extracting values.

    Returns:
        Tuple of lists as (subnets, security_group_ids). If vpc_config parameter is None, returns (None, None).
    """
    if do_sanitize:
        vpc_config = sanitize(vpc_config)
    if vpc_config is None:
        return None, None
    return vpc_config[SUBNETS_KEY], vpc_config[SECURITY_GROUP_IDS_KEY]


def sanitize(vpc_config: Optional[Dict[str, Any]]) -> Optional[Dict[str, List[str]]]:
    """Check that an instance of VpcConfig has the expected keys and values, removing unexpected keys.

    Raises:
        ValueError: if any expectations are violated.

    Returns:
        A valid VpcConfig dict containing only 'Subnets' and 'SecurityGroupIds', or None.
    """
    if vpc_config is None:
        return vpc_config
    if not isinstance(vpc_config, dict):
        raise ValueError(f"vpc_config is not a dict: {vpc_config}")
    if not vpc_config:
        raise ValueError(f"vpc_config is empty: {vpc_config}")

    subnets = vpc_config.get(SUBNETS_KEY)
    if subnets is None:
        raise ValueError(f"vpc_config is missing key: {SUBNETS_KEY}")
    if not isinstance(subnets, list):
        raise ValueError(f"vpc_config value for {SUBNETS_KEY} is not a list: {subnets}")
    if not subnets:
        raise ValueError(f"vpc_config value for {SUBNETS_KEY} is empty: {subnets}")

    security_group_ids = vpc_config.get(SECURITY_GROUP_IDS_KEY)
    if security_group_ids is None:
        raise ValueError(f"vpc_config is missing key: {SECURITY_GROUP_IDS_KEY}")
    if not isinstance(security_group_ids, list):
        raise ValueError(f"vpc_config value for {SECURITY_GROUP_IDS_KEY} is not a list: {security_group_ids}")
    if not security_group_ids:
        raise ValueError(f"vpc_config value for {SECURITY_GROUP_IDS_KEY} is empty: {security_group_ids}")

    return to_dict(subnets, security_group_ids)
