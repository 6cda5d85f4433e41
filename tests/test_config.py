"""Tests for option parsing and configuration validation."""

import pytest

from conftest import parse

from cloudinfra.cloud.azure.defaults import normalize_location, validate_location
from cloudinfra.cloud.base_parser import create_base_parser
from cloudinfra.config import Configs, ImageReference
from cloudinfra.config.utils import (
    parse_size_list,
    validate_choice,
    validate_container_name,
    validate_port,
    validate_storage_account_name,
)
from cloudinfra.errors import ConfigurationError


class TestConfigs:
    def test_defaults(self):
        configs = Configs.from_args(parse())

        assert configs.resource_group.name == "CloudInfraRG"
        assert configs.resource_group.location == "eastus"
        assert configs.network.address_prefix == "10.0.0.0/16"
        assert configs.network.subnet_prefix == "10.0.0.0/24"
        assert configs.nsg.rules[0].name == "AllowRDP"
        assert configs.public_ip.sku == "Standard"
        assert configs.vm.candidate_sizes() == [
            "Standard_B2s",
            "Standard_B2ms",
            "Standard_D2s_v3",
            "Standard_DS1_v2",
        ]
        assert str(configs.vm.image) == (
            "MicrosoftWindowsServer:WindowsServer:2019-Datacenter:latest"
        )
        assert configs.storage.account_name == "cloudinfrastorage"
        assert configs.storage.public_access is None
        assert configs.blob.verify_checksum is False

    def test_every_step_shares_location(self):
        configs = Configs.from_args(parse("--region", "West Europe"))

        assert {
            configs.network.location,
            configs.nsg.location,
            configs.public_ip.location,
            configs.vm.location,
            configs.storage.location,
        } == {"westeurope"}

    def test_to_dict(self):
        data = Configs.from_args(parse()).to_dict()

        assert data["resourceGroup"]["name"] == "CloudInfraRG"
        assert data["vm"]["fallbackSizes"] == [
            "Standard_B2ms",
            "Standard_D2s_v3",
            "Standard_DS1_v2",
        ]

    def test_missing_subscription(self):
        args = parse()
        args.subscription_id = None

        with pytest.raises(ConfigurationError, match="subscription"):
            Configs.from_args(args)

    @pytest.mark.parametrize(
        "argv",
        [
            ["--resource-group", "  "],
            ["--location", "moon-north"],
            ["--subnet-prefix", "10.1.0.0/24"],
            ["--vnet-prefix", "10.0.0.1/16"],
            ["--rule-priority", "50"],
            ["--rule-protocol", "Sctp"],
            ["--rule-port", "70000"],
            ["--public-ip-allocation", "Dynamic"],
            ["--image", "MicrosoftWindowsServer:WindowsServer"],
            ["--storage-account", "Invalid_Name"],
            ["--container-name", "x"],
            ["--container-access", "public"],
            ["--log-file", ""],
        ],
    )
    def test_invalid_options(self, argv):
        with pytest.raises(ConfigurationError):
            Configs.from_args(parse(*argv))

    def test_dynamic_ip_with_basic_sku(self):
        configs = Configs.from_args(
            parse("--public-ip-allocation", "dynamic", "--public-ip-sku", "basic")
        )

        assert configs.public_ip.allocation_method == "Dynamic"
        assert configs.public_ip.sku == "Basic"

    @pytest.mark.parametrize("access", ["blob", "container"])
    def test_public_container_needs_public_account(self, access):
        with pytest.raises(ConfigurationError, match="allow-blob-public-access"):
            Configs.from_args(parse("--container-access", access))

    def test_public_container_on_public_account(self):
        configs = Configs.from_args(
            parse("--container-access", "container", "--allow-blob-public-access")
        )

        assert configs.storage.allow_blob_public_access is True
        assert configs.storage.public_access == "container"


class TestLocation:
    def test_normalize(self):
        assert normalize_location("East US 2") == "eastus2"

    def test_validate_known(self):
        assert validate_location("EastUS") == "eastus"

    def test_validate_unknown(self):
        with pytest.raises(ConfigurationError, match="Invalid Azure location"):
            validate_location("atlantis")


class TestValidators:
    @pytest.mark.parametrize("port", ["*", "22", "3389", "8000-8080"])
    def test_valid_ports(self, port):
        assert validate_port(port, "--rule-port") == port

    @pytest.mark.parametrize("port", ["0", "http", "9000-8000", "1-2-3"])
    def test_invalid_ports(self, port):
        with pytest.raises(ConfigurationError):
            validate_port(port, "--rule-port")

    def test_choice_is_canonicalised(self):
        assert validate_choice("tcp", ["Tcp", "Udp"], "--rule-protocol") == "Tcp"

    @pytest.mark.parametrize("name", ["abc", "cloudinfrastorage", "a1" * 12])
    def test_valid_storage_account_names(self, name):
        assert validate_storage_account_name(name) == name

    @pytest.mark.parametrize("name", ["ab", "Upper", "with-dash", "a" * 25])
    def test_invalid_storage_account_names(self, name):
        with pytest.raises(ConfigurationError):
            validate_storage_account_name(name)

    @pytest.mark.parametrize("name", ["cloudcontainer", "my-container-1"])
    def test_valid_container_names(self, name):
        assert validate_container_name(name) == name

    @pytest.mark.parametrize("name", ["-start", "double--dash", "UPPER"])
    def test_invalid_container_names(self, name):
        with pytest.raises(ConfigurationError):
            validate_container_name(name)

    def test_fallback_help_mentions_dedup(self):
        help_text = " ".join(create_base_parser("test").format_help().split())

        assert "tried only once" in help_text

    def test_parse_size_list(self):
        assert parse_size_list(" A, ,B ,") == ["A", "B"]
        assert parse_size_list(None) == []

    def test_image_reference(self):
        image = ImageReference.parse("Canonical:UbuntuServer:18.04-LTS:latest")

        assert image.to_dict() == {
            "publisher": "Canonical",
            "offer": "UbuntuServer",
            "sku": "18.04-LTS",
            "version": "latest",
        }
