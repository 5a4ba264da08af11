"""Builders for mocked VPC API responses."""

from unittest.mock import MagicMock


def key_page(keys, next_start=None):
    """Builds a mocked list_keys response page."""
    result = {"keys": keys}
    if next_start:
        result["next"] = {"href": f"https://us-south.iaas.cloud.ibm.com/v1/keys?limit=50&start={next_start}"}
    response = MagicMock()
    response.get_result.return_value = result
    return response


def remote_key(name, key_id, resource_group_id="rg-456", resource_group_name="default"):
    return {
        "name": name,
        "id": key_id,
        "type": "rsa",
        "length": 2048,
        "fingerprint": f"SHA256:{name}-fingerprint",
        "resource_group": {"id": resource_group_id, "name": resource_group_name},
        "created_at": "2026-10-01T10:00:00Z",
    }
