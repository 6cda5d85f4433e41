"""Tests for VM deployment with size fallback and admin credentials."""

from unittest.mock import Mock

import pytest

from cloudinfra.cloud.resources import AdminCredentials, ResourceKind
from cloudinfra.errors import (
    CapacityError,
    CapacityExhausted,
    ConfigurationError,
    PrerequisiteMissing,
    ProviderError,
)
from cloudinfra.provisioning.credentials import (
    PASSWORD_ENV_VAR,
    CredentialProvider,
    EnvCredentialProvider,
    PromptCredentialProvider,
    StaticCredentialProvider,
    get_credential_provider,
    validate_admin_password,
)
from cloudinfra.provisioning.ensure import (
    ensure_network_interface,
    ensure_network_security_group,
    ensure_public_ip,
    ensure_resource_group,
    ensure_virtual_network,
)
from cloudinfra.provisioning.vm import VmSpec, create_with_fallback, deploy_vm

PASSWORD = "Str0ng!Passw0rd"


def capacity(size):
    return CapacityError(f"{size} unavailable", code="SkuNotAvailable")


@pytest.fixture
def provider():
    return StaticCredentialProvider(PASSWORD)


@pytest.fixture
def vm_configs(make_configs):
    return make_configs("--vm-size", "A", "--fallback-sizes", "B,C")


@pytest.fixture
def ready_api(api, vm_configs):
    """API with everything the VM step depends on already provisioned."""
    ensure_resource_group(api, vm_configs.resource_group)
    ensure_virtual_network(api, vm_configs.network)
    ensure_network_security_group(api, vm_configs.nsg)
    public_ip = ensure_public_ip(api, vm_configs.public_ip)
    ensure_network_interface(
        api, vm_configs.nic, vm_configs.network, vm_configs.nsg, public_ip
    )
    return api


class TestCreateWithFallback:
    def build_request(self, api, configs):
        nic = api.get_resource(configs.vm.nic_key)
        return VmSpec.build(
            configs.vm, nic, AdminCredentials("azureuser", PASSWORD)
        )

    def test_first_size_succeeds(self, ready_api, vm_configs):
        vm = create_with_fallback(
            ready_api, self.build_request(ready_api, vm_configs), ["A", "B", "C"]
        )

        assert vm.properties["vm_size"] == "A"
        assert ready_api.vm_attempts == ["A"]

    def test_falls_back_in_order(self, ready_api, vm_configs):
        ready_api.vm_errors["A"] = capacity("A")

        vm = create_with_fallback(
            ready_api, self.build_request(ready_api, vm_configs), ["A", "B", "C"]
        )

        assert vm.properties["vm_size"] == "B"
        assert ready_api.vm_attempts == ["A", "B"]

    def test_exhausted(self, ready_api, vm_configs):
        for size in "ABC":
            ready_api.vm_errors[size] = capacity(size)

        with pytest.raises(CapacityExhausted) as exc_info:
            create_with_fallback(
                ready_api, self.build_request(ready_api, vm_configs), ["A", "B", "C"]
            )

        assert exc_info.value.attempted_sizes == ["A", "B", "C"]
        assert ready_api.vm_attempts == ["A", "B", "C"]
        assert "A, B, C" in str(exc_info.value)

    def test_other_errors_fail_fast(self, ready_api, vm_configs):
        ready_api.vm_errors["A"] = ProviderError(
            "Image not found", code="InvalidParameter"
        )

        with pytest.raises(ProviderError) as exc_info:
            create_with_fallback(
                ready_api, self.build_request(ready_api, vm_configs), ["A", "B", "C"]
            )

        assert not isinstance(exc_info.value, CapacityError)
        assert ready_api.vm_attempts == ["A"]


class TestDeployVm:
    def test_creates_vm_with_fallback(self, ready_api, vm_configs, provider):
        ready_api.vm_errors["A"] = capacity("A")

        vm = deploy_vm(ready_api, vm_configs.vm, provider)

        assert vm.name == "CloudVM"
        assert vm.properties["vm_size"] == "B"
        assert vm.properties["admin_username"] == "azureuser"
        nic = ready_api.get_resource(vm_configs.vm.nic_key)
        assert vm.properties["nic_id"] == nic.id

    def test_missing_nic(self, api, vm_configs):
        ensure_resource_group(api, vm_configs.resource_group)
        credentials = Mock(spec=CredentialProvider)

        with pytest.raises(PrerequisiteMissing) as exc_info:
            deploy_vm(api, vm_configs.vm, credentials)

        assert exc_info.value.key == vm_configs.vm.nic_key
        assert api.vm_attempts == []
        credentials.get_credentials.assert_not_called()

    def test_existing_vm_is_skipped(self, ready_api, vm_configs, provider):
        deploy_vm(ready_api, vm_configs.vm, provider)
        credentials = Mock(spec=CredentialProvider)

        deploy_vm(ready_api, vm_configs.vm, credentials)

        assert ready_api.vm_attempts == ["A"]
        credentials.get_credentials.assert_not_called()

    def test_duplicate_sizes_tried_once(self, ready_api, make_configs, provider):
        configs = make_configs("--vm-size", "A", "--fallback-sizes", "A,B,A")
        ready_api.vm_errors["A"] = capacity("A")
        ready_api.vm_errors["B"] = capacity("B")

        with pytest.raises(CapacityExhausted) as exc_info:
            deploy_vm(ready_api, configs.vm, provider)

        assert exc_info.value.attempted_sizes == ["A", "B"]
        assert ready_api.vm_attempts == ["A", "B"]

    def test_no_fallback_sizes(self, ready_api, make_configs, provider):
        configs = make_configs("--vm-size", "A", "--fallback-sizes", "")
        ready_api.vm_errors["A"] = capacity("A")

        with pytest.raises(CapacityExhausted):
            deploy_vm(ready_api, configs.vm, provider)

        assert ready_api.vm_attempts == ["A"]
        assert ready_api.created(ResourceKind.VIRTUAL_MACHINE) == []


class TestCredentials:
    @pytest.mark.parametrize(
        "password", ["Str0ng!Passw0rd", "lowerUPPER1234", "abcdefgh12!!"]
    )
    def test_valid_passwords(self, password):
        assert validate_admin_password(password) == password

    @pytest.mark.parametrize(
        "password", ["Sh0rt!", "alllowercaseletters", "nouppercase123"]
    )
    def test_invalid_passwords(self, password):
        with pytest.raises(ConfigurationError):
            validate_admin_password(password)

    def test_env_provider(self, monkeypatch):
        monkeypatch.setenv(PASSWORD_ENV_VAR, PASSWORD)

        credentials = EnvCredentialProvider().get_credentials("azureuser")

        assert credentials == AdminCredentials("azureuser", PASSWORD)
        assert PASSWORD not in repr(credentials)

    def test_env_provider_unset(self, monkeypatch):
        monkeypatch.delenv(PASSWORD_ENV_VAR, raising=False)

        with pytest.raises(ConfigurationError):
            EnvCredentialProvider().get_credentials("azureuser")

    def test_prompt_mismatch(self, monkeypatch):
        answers = iter([PASSWORD, PASSWORD + "x"])
        monkeypatch.setattr(
            "cloudinfra.provisioning.credentials.getpass.getpass",
            lambda prompt: next(answers),
        )

        with pytest.raises(ConfigurationError, match="do not match"):
            PromptCredentialProvider().get_credentials("azureuser")

    def test_prompt_confirmed(self, monkeypatch):
        monkeypatch.setattr(
            "cloudinfra.provisioning.credentials.getpass.getpass",
            lambda prompt: PASSWORD,
        )

        credentials = PromptCredentialProvider().get_credentials("azureuser")

        assert credentials.password == PASSWORD

    def test_validate_before_use(self, monkeypatch):
        monkeypatch.setenv(PASSWORD_ENV_VAR, "weak")

        with pytest.raises(ConfigurationError):
            EnvCredentialProvider().validate()
        with pytest.raises(ConfigurationError):
            StaticCredentialProvider("weak").validate()

        monkeypatch.setenv(PASSWORD_ENV_VAR, PASSWORD)
        EnvCredentialProvider().validate()

    def test_prompt_is_not_validated_up_front(self, monkeypatch):
        def fail(prompt):
            pytest.fail("prompted before a VM was created")

        monkeypatch.setattr(
            "cloudinfra.provisioning.credentials.getpass.getpass", fail
        )

        PromptCredentialProvider().validate()

    def test_provider_selection(self, monkeypatch):
        monkeypatch.delenv(PASSWORD_ENV_VAR, raising=False)
        assert isinstance(get_credential_provider(), PromptCredentialProvider)

        monkeypatch.setenv(PASSWORD_ENV_VAR, PASSWORD)
        assert isinstance(get_credential_provider(), EnvCredentialProvider)
