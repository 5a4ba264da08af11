"""Unit tests for the IBM Cloud client factories."""

from unittest.mock import MagicMock, patch

import pytest

from capibmadm.core.clients import get_account_id, get_iam_auth, get_resource_group_id, new_v1_client


class TestGetIamAuth:
    """Test suite for get_iam_auth()."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("IBMCLOUD_API_KEY", raising=False)

        with pytest.raises(ValueError, match="IBMCLOUD_API_KEY is not set"):
            get_iam_auth()

    def test_api_key_from_environment(self, api_key_env):
        with patch("capibmadm.core.clients.IAMAuthenticator") as authenticator:
            assert get_iam_auth() is authenticator.return_value

        authenticator.assert_called_once_with("test-api-key")

    def test_custom_auth_url(self, api_key_env, monkeypatch):
        monkeypatch.setenv("IBMCLOUD_AUTH_URL", "https://iam.test.cloud.ibm.com")

        with patch("capibmadm.core.clients.IAMAuthenticator") as authenticator:
            get_iam_auth()

        authenticator.assert_called_once_with("test-api-key", url="https://iam.test.cloud.ibm.com")

    def test_real_authenticator_holds_api_key(self, api_key_env):
        assert get_iam_auth().token_manager.apikey == "test-api-key"


class TestNewV1Client:
    """Test suite for new_v1_client()."""

    def test_regional_endpoint(self):
        authenticator = MagicMock()
        with patch("capibmadm.core.clients.VpcV1") as vpc_v1:
            client = new_v1_client("eu-de", authenticator=authenticator)

        assert client is vpc_v1.return_value
        assert vpc_v1.call_args.kwargs["authenticator"] is authenticator
        client.set_service_url.assert_called_once_with("https://eu-de.iaas.cloud.ibm.com/v1")

    def test_empty_region(self):
        with pytest.raises(ValueError, match="region"):
            new_v1_client("", authenticator=MagicMock())

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("IBMCLOUD_API_KEY", raising=False)

        with pytest.raises(ValueError, match="IBMCLOUD_API_KEY"):
            new_v1_client("us-south")


class TestGetAccountId:
    """Test suite for get_account_id()."""

    def test_account_id_from_api_key_details(self):
        authenticator = MagicMock()
        authenticator.token_manager.apikey = "test-api-key"

        with patch("capibmadm.core.clients.IamIdentityV1") as identity:
            identity.return_value.get_api_keys_details.return_value.get_result.return_value = {
                "account_id": "account-123"
            }
            assert get_account_id(authenticator) == "account-123"

        identity.return_value.get_api_keys_details.assert_called_once_with(iam_api_key="test-api-key")

    def test_missing_account_id(self):
        with patch("capibmadm.core.clients.IamIdentityV1") as identity:
            identity.return_value.get_api_keys_details.return_value.get_result.return_value = {}
            with pytest.raises(ValueError):
                get_account_id(MagicMock())


class TestGetResourceGroupId:
    """Test suite for get_resource_group_id()."""

    def test_first_match_is_returned(self):
        with patch("capibmadm.core.clients.ResourceManagerV2") as manager:
            manager.return_value.list_resource_groups.return_value.get_result.return_value = {
                "resources": [{"id": "rg-1", "name": "default"}, {"id": "rg-2", "name": "default"}]
            }
            assert get_resource_group_id("default", "account-123", authenticator=MagicMock()) == "rg-1"

        manager.return_value.list_resource_groups.assert_called_once_with(account_id="account-123", name="default")

    def test_unknown_resource_group(self):
        with patch("capibmadm.core.clients.ResourceManagerV2") as manager:
            manager.return_value.list_resource_groups.return_value.get_result.return_value = {"resources": []}
            with pytest.raises(LookupError, match="could not retrieve resource group id for missing"):
                get_resource_group_id("missing", "account-123", authenticator=MagicMock())
