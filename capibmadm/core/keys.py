# capibmadm/core/keys.py
"""
Core VPC SSH key functions for capibmadm.

This module holds everything the ``vpc key`` commands do besides parsing
flags and printing. The CLI layer only formats what these functions return.

ARCHITECTURE:
=============
- All functions return JSON-serializable dictionaries
- Consistent error format: {"success": false, "stage": "...", "error": "message"}
- Remote calls run as an ordered list of steps that stops at the first failure
- Progress callbacks are separate from return values
"""

import sys
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from ibm_cloud_sdk_core import ApiException
from ibm_vpc.vpc_v1 import ResourceGroupIdentityById

from capibmadm.core.clients import get_account_id, get_iam_auth, get_resource_group_id, new_v1_client
from capibmadm.core.config import KEY_LIST_PAGE_SIZE

# Configure logging to go to stderr only, never stdout
logging.basicConfig(stream=sys.stderr, level=logging.INFO)
logger = logging.getLogger(__name__)

STAGE_CONFIGURATION = "configuration"
STAGE_IO = "io"
STAGE_FORMAT = "format"
STAGE_AUTH = "auth"
STAGE_LOOKUP = "lookup"
STAGE_REMOTE = "remote"

KEY_SOURCE_ERROR = (
    "the required flags either key-path of vpc key or the public-key "
    "within double quotation marks is not found"
)

# Errors the SDKs raise for expected failures. Anything else is a bug and is logged with a traceback.
_COLLABORATOR_ERRORS = (ApiException, ValueError, LookupError, OSError)

Step = Tuple[str, str, Callable[[], None]]


def _failure(stage: str, error: str) -> Dict[str, Any]:
    return {"success": False, "stage": stage, "error": error}


def _run_pipeline(steps: List[Step], report_progress: Callable[[str], None]) -> Optional[Dict[str, Any]]:
    """
    Runs each (stage, description, action) step in order.

    Returns None when every step succeeded, otherwise the failure result of the
    first step that raised. Later steps never run after a failure.
    """
    for stage, description, action in steps:
        report_progress(description)
        try:
            action()
        except _COLLABORATOR_ERRORS as e:
            logger.debug(f"Step '{description}' failed in stage {stage}: {e!r}")
            return _failure(stage, str(e))
    return None


def _progress_reporter(progress_callback: Optional[Callable]) -> Callable[[str], None]:
    def report_progress(message):
        if progress_callback:
            progress_callback(message)
        else:
            logger.debug(message)
    return report_progress


def check_key_source(public_key: str, key_path: str) -> Optional[str]:
    """Returns an error message unless exactly one of public_key/key_path is set."""
    if bool(public_key) == bool(key_path):
        return KEY_SOURCE_ERROR
    return None


def read_public_key_file(key_path: str) -> str:
    """
    Reads key material from a file.

    Every non-empty line overwrites the previous one, so a file holding several
    keys yields its last one. Bytes that are not valid UTF-8 are replaced
    rather than rejected, so a non-UTF-8 comment does not stop the upload.
    """
    public_key = ""
    with open(key_path, "rb") as key_file:
        for raw_line in key_file:
            line = raw_line.decode("utf-8", errors="replace").rstrip("\r\n")
            if line.strip():
                public_key = line
    return public_key


def validate_public_key(public_key: str) -> None:
    """Raises ValueError unless public_key is an OpenSSH authorized key line."""
    try:
        serialization.load_ssh_public_key(public_key.strip().encode("utf-8"))
    except UnsupportedAlgorithm as e:
        raise ValueError(str(e) or "unsupported key algorithm") from e


def resolve_public_key(public_key: str = "", key_path: str = "") -> Dict[str, Any]:
    """
    Works out the key material to upload and checks its format.

    Returns:
        {"success": True, "public_key": str, "source": "inline" | "file"}

    On error:
        {"success": False, "stage": "configuration" | "io" | "format", "error": str}
    """
    source_error = check_key_source(public_key, key_path)
    if source_error:
        return _failure(STAGE_CONFIGURATION, source_error)

    source = "inline"
    if key_path:
        try:
            public_key = read_public_key_file(key_path)
        except OSError as e:
            return _failure(STAGE_IO, f"unable to open file. {e}")
        source = "file"

    try:
        validate_public_key(public_key)
    except ValueError as e:
        return _failure(STAGE_FORMAT, f"the provided VPC key is invalid. {e}")

    return {"success": True, "public_key": public_key, "source": source}


def create_key(
    name: str,
    public_key: str,
    region: str,
    resource_group_name: str = "",
    progress_callback: Optional[Callable] = None
) -> Dict[str, Any]:
    """
    Registers an already validated SSH public key with the VPC service.

    Args:
        name: Name of the new key
        public_key: OpenSSH public key line
        region: VPC region the key is created in
        resource_group_name: Optional resource group to place the key in
        progress_callback: Optional function for progress updates

    Returns:
        Dict with structure:
        {
            "success": True,
            "name": str,
            "id": str,
            "key": dict
        }

    On error:
        {
            "success": False,
            "stage": "auth" | "lookup" | "remote",
            "error": "error message"
        }
    """
    report_progress = _progress_reporter(progress_callback)
    state: Dict[str, Any] = {}

    def build_client():
        state["client"] = new_v1_client(region)

    def resolve_account():
        state["account_id"] = get_account_id(get_iam_auth())

    def build_request():
        state["options"] = {"name": name, "public_key": public_key}

    def resolve_resource_group():
        resource_group_id = get_resource_group_id(resource_group_name, state["account_id"])
        state["options"]["resource_group"] = ResourceGroupIdentityById(id=resource_group_id)

    def send_request():
        state["key"] = state["client"].create_key(**state["options"]).get_result()

    steps: List[Step] = [
        (STAGE_AUTH, f"Creating VPC client for region {region}", build_client),
        (STAGE_AUTH, "Resolving account ID", resolve_account),
        (STAGE_CONFIGURATION, "Building key create request", build_request),
    ]
    if resource_group_name:
        steps.append((STAGE_LOOKUP, f"Resolving resource group '{resource_group_name}'", resolve_resource_group))
    steps.append((STAGE_REMOTE, f"Creating VPC key '{name}'", send_request))

    try:
        failure = _run_pipeline(steps, report_progress)
    except Exception as e:
        logger.exception("Unexpected error creating VPC key")
        return _failure(STAGE_REMOTE, f"Failed to create key: {str(e)}")
    if failure:
        return failure

    key = state["key"]
    logger.info(f"VPC Key created successfully, key-name={key['name']}")
    return {
        "success": True,
        "name": key["name"],
        "id": key.get("id"),
        "key": key
    }


def _iter_keys(client) -> List[Dict[str, Any]]:
    """Collects every key in the region, following the pagination links."""
    keys = []
    start = None
    while True:
        result = client.list_keys(start=start, limit=KEY_LIST_PAGE_SIZE).get_result()
        keys.extend(result.get("keys", []))

        next_href = (result.get("next") or {}).get("href")
        if not next_href:
            return keys
        start = parse_qs(urlparse(next_href).query).get("start", [None])[0]
        if not start:
            return keys


def _summarize_key(key: Dict[str, Any]) -> Dict[str, Any]:
    resource_group = key.get("resource_group") or {}
    return {
        "name": key.get("name"),
        "id": key.get("id"),
        "type": key.get("type"),
        "length": key.get("length"),
        "fingerprint": key.get("fingerprint"),
        "resource_group": resource_group.get("name") or resource_group.get("id"),
        "created_at": key.get("created_at")
    }


def list_keys(
    region: str,
    resource_group_name: str = "",
    progress_callback: Optional[Callable] = None
) -> Dict[str, Any]:
    """
    Lists the SSH keys of a VPC region.

    Returns:
        {"success": True, "keys": [{"name", "id", "type", "length",
        "fingerprint", "resource_group", "created_at"}], "total_count": int}

    On error:
        {"success": False, "stage": str, "error": str}
    """
    report_progress = _progress_reporter(progress_callback)
    state: Dict[str, Any] = {}

    def build_client():
        state["client"] = new_v1_client(region)

    def resolve_resource_group():
        account_id = get_account_id(get_iam_auth())
        state["resource_group_id"] = get_resource_group_id(resource_group_name, account_id)

    def fetch_keys():
        state["keys"] = _iter_keys(state["client"])

    steps: List[Step] = [(STAGE_AUTH, f"Creating VPC client for region {region}", build_client)]
    if resource_group_name:
        steps.append((STAGE_LOOKUP, f"Resolving resource group '{resource_group_name}'", resolve_resource_group))
    steps.append((STAGE_REMOTE, "Listing VPC keys", fetch_keys))

    try:
        failure = _run_pipeline(steps, report_progress)
    except Exception as e:
        logger.exception("Unexpected error listing VPC keys")
        return _failure(STAGE_REMOTE, f"Failed to list keys: {str(e)}")
    if failure:
        return failure

    keys = state["keys"]
    if resource_group_name:
        keys = [k for k in keys if (k.get("resource_group") or {}).get("id") == state["resource_group_id"]]

    summaries = [_summarize_key(k) for k in keys]
    report_progress(f"Found {len(summaries)} keys")
    return {
        "success": True,
        "keys": summaries,
        "total_count": len(summaries)
    }


def find_key(region: str, name: str, progress_callback: Optional[Callable] = None) -> Dict[str, Any]:
    """Looks a key up by name. Returns {"success": True, "key": summary} or a failure."""
    result = list_keys(region, progress_callback=progress_callback)
    if not result["success"]:
        return result

    for key in result["keys"]:
        if key["name"] == name:
            return {"success": True, "key": key}
    return _failure(STAGE_LOOKUP, f"key with name {name} not found")


def delete_key(region: str, key_id: str, name: str, progress_callback: Optional[Callable] = None) -> Dict[str, Any]:
    """
    Deletes a VPC key by ID. ``name`` is only used for messages.

    Returns {"success": True, "name": str, "id": str} or a failure result.
    """
    report_progress = _progress_reporter(progress_callback)
    state: Dict[str, Any] = {}

    def build_client():
        state["client"] = new_v1_client(region)

    def send_request():
        state["client"].delete_key(id=key_id)

    steps: List[Step] = [
        (STAGE_AUTH, f"Creating VPC client for region {region}", build_client),
        (STAGE_REMOTE, f"Deleting VPC key '{name}'", send_request),
    ]

    try:
        failure = _run_pipeline(steps, report_progress)
    except Exception as e:
        logger.exception("Unexpected error deleting VPC key")
        return _failure(STAGE_REMOTE, f"Failed to delete key: {str(e)}")
    if failure:
        return failure

    logger.info(f"VPC Key deleted successfully, key-name={name}")
    return {"success": True, "name": name, "id": key_id}
