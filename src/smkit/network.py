"""Network settings of processing and monitoring jobs."""
from typing import Any, Dict, List, Optional


class NetworkConfig(object):
    """Network isolation, inter-container encryption, and VPC settings of a job."""

    def __init__(
        self,
        enable_network_isolation: bool = False,
        security_group_ids: Optional[List[str]] = None,
        subnets: Optional[List[str]] = None,
        encrypt_inter_container_traffic: Optional[bool] = None,
    ):
        self.enable_network_isolation = enable_network_isolation
        self.security_group_ids = security_group_ids
        self.subnets = subnets
        self.encrypt_inter_container_traffic = encrypt_inter_container_traffic

    def _to_request_dict(self) -> Dict[str, Any]:
        """Generate a request dictionary using the parameters provided to the class."""
        network_config_request: Dict[str, Any] = {"EnableNetworkIsolation": self.enable_network_isolation}

        if self.encrypt_inter_container_traffic is not None:
            network_config_request["EnableInterContainerTrafficEncryption"] = self.encrypt_inter_container_traffic

        if self.security_group_ids is not None or self.subnets is not None:
            network_config_request["VpcConfig"] = {}

        if self.security_group_ids is not None:
            network_config_request["VpcConfig"]["SecurityGroupIds"] = self.security_group_ids

        if self.subnets is not None:
            network_config_request["VpcConfig"]["Subnets"] = self.subnets

        return network_config_request

    def __repr__(self):
        return (
            f"NetworkConfig(enable_network_isolation={self.enable_network_isolation}, "
            f"security_group_ids={self.security_group_ids}, subnets={self.subnets}, "
            f"encrypt_inter_container_traffic={self.encrypt_inter_container_traffic})"
        )
