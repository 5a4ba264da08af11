"""Shared fixtures for capibmadm tests."""

from unittest.mock import MagicMock, patch

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, rsa
from typer.testing import CliRunner


def _openssh_line(private_key, comment: str) -> str:
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    )
    return f"{public_bytes.decode('ascii')} {comment}"


@pytest.fixture(scope="session")
def rsa_public_key():
    """A valid 'ssh-rsa AAAA... comment' line."""
    return _openssh_line(rsa.generate_private_key(public_exponent=65537, key_size=2048), "user@example")


@pytest.fixture(scope="session")
def ed25519_public_key():
    """A valid 'ssh-ed25519 AAAA... comment' line."""
    return _openssh_line(ed25519.Ed25519PrivateKey.generate(), "other@example")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def api_key_env(monkeypatch):
    monkeypatch.setenv("IBMCLOUD_API_KEY", "test-api-key")
    monkeypatch.delenv("IBMCLOUD_AUTH_URL", raising=False)


@pytest.fixture
def vpc_client():
    """Mock VpcV1 client returning a created key named after the request."""
    client = MagicMock()

    def _create_key(**kwargs):
        response = MagicMock()
        response.get_result.return_value = {"id": "r006-key-id", "name": kwargs["name"]}
        return response

    client.create_key.side_effect = _create_key
    return client


@pytest.fixture
def collaborators(vpc_client):
    """Patch every IBM Cloud collaborator where capibmadm.core.keys looks it up."""
    with patch("capibmadm.core.keys.new_v1_client", return_value=vpc_client) as new_client, \
            patch("capibmadm.core.keys.get_iam_auth", return_value=MagicMock(name="auth")) as iam_auth, \
            patch("capibmadm.core.keys.get_account_id", return_value="account-123") as account_id, \
            patch("capibmadm.core.keys.get_resource_group_id", return_value="rg-456") as resource_group_id:
        yield MagicMock(
            client=vpc_client,
            new_v1_client=new_client,
            get_iam_auth=iam_auth,
            get_account_id=account_id,
            get_resource_group_id=resource_group_id,
        )
