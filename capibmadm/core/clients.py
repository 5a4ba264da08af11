# capibmadm/core/clients.py
"""
Thin factories around the IBM Cloud SDKs used by capibmadm.

Nothing here talks to the network on import. Every function raises the SDK's
own exceptions (``ApiException``, ``ValueError``) so callers can decide how
to report them.
"""

import os
import logging

from ibm_cloud_sdk_core.authenticators import IAMAuthenticator
from ibm_platform_services import IamIdentityV1, ResourceManagerV2
from ibm_vpc import VpcV1

from capibmadm.core.config import API_KEY_ENV, AUTH_URL_ENV, VPC_API_VERSION, VPC_ENDPOINT_TEMPLATE

logger = logging.getLogger(__name__)


def get_api_key() -> str:
    return os.environ.get(API_KEY_ENV, "")


def get_iam_auth() -> IAMAuthenticator:
    """Builds an IAM authenticator from the API key in the environment."""
    api_key = get_api_key()
    if not api_key:
        raise ValueError(f"{API_KEY_ENV} is not set")

    auth_url = os.environ.get(AUTH_URL_ENV)
    if auth_url:
        logger.debug(f"Using IAM endpoint {auth_url}")
        return IAMAuthenticator(api_key, url=auth_url)
    return IAMAuthenticator(api_key)


def new_v1_client(region: str, authenticator: IAMAuthenticator = None) -> VpcV1:
    """Creates a VPC client pointed at the regional endpoint."""
    if not region:
        raise ValueError("VPC region is not set")

    client = VpcV1(version=VPC_API_VERSION, authenticator=authenticator or get_iam_auth())
    service_url = VPC_ENDPOINT_TEMPLATE.format(region=region)
    client.set_service_url(service_url)
    logger.debug(f"VPC client configured for {service_url}")
    return client


def get_account_id(authenticator: IAMAuthenticator) -> str:
    """Resolves the account owning the API key held by the authenticator."""
    identity = IamIdentityV1(authenticator=authenticator)
    details = identity.get_api_keys_details(iam_api_key=authenticator.token_manager.apikey).get_result()

    account_id = details.get("account_id")
    if not account_id:
        raise ValueError("unable to resolve the account ID for the configured API key")
    return account_id


def get_resource_group_id(name: str, account_id: str, authenticator: IAMAuthenticator = None) -> str:
    """Returns the ID of the first resource group called ``name`` in the account."""
    manager = ResourceManagerV2(authenticator=authenticator or get_iam_auth())
    result = manager.list_resource_groups(account_id=account_id, name=name).get_result()

    resources = result.get("resources") or []
    if resources:
        return resources[0]["id"]
    raise LookupError(f"could not retrieve resource group id for {name}")
