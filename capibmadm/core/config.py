# capibmadm/core/config.py

from dataclasses import dataclass

API_KEY_ENV = "IBMCLOUD_API_KEY"
AUTH_URL_ENV = "IBMCLOUD_AUTH_URL"

VPC_ENDPOINT_TEMPLATE = "https://{region}.iaas.cloud.ibm.com/v1"
VPC_API_VERSION = "2024-04-30"
KEY_LIST_PAGE_SIZE = 50


@dataclass
class GlobalOptions:
    """Options shared by every command of a single invocation."""
    vpc_region: str = ""
    debug: bool = False
