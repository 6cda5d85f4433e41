"""Validation helpers for configuration values."""

import ipaddress
import re

from cloudinfra.errors import ConfigurationError

_STORAGE_ACCOUNT_RE = re.compile(r"^[a-z0-9]{3,24}$")
_CONTAINER_RE = re.compile(r"^(?!.*--)[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")


def require_non_empty(value: str | None, option: str) -> str:
    """Return the stripped value, or raise if it is missing or blank."""
    if value is None or not str(value).strip():
        raise ConfigurationError(f"Missing required parameter: {option}")
    return str(value).strip()


def validate_storage_account_name(name: str) -> str:
    """Storage account names are 3-24 lowercase letters and digits."""
    name = require_non_empty(name, "--storage-account")
    if not _STORAGE_ACCOUNT_RE.match(name):
        raise ConfigurationError(
            f"Invalid storage account name: {name}. "
            "Use 3-24 lowercase letters and digits only"
        )
    return name


def validate_container_name(name: str) -> str:
    """Container names are 3-63 lowercase letters, digits and single dashes."""
    name = require_non_empty(name, "--container-name")
    if not _CONTAINER_RE.match(name):
        raise ConfigurationError(
            f"Invalid container name: {name}. Use 3-63 lowercase letters, "
            "digits and single dashes, starting and ending with a letter "
            "or digit"
        )
    return name


def parse_address_prefix(
    prefix: str, option: str
) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    prefix = require_non_empty(prefix, option)
    try:
        return ipaddress.ip_network(prefix, strict=True)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid address prefix for {option}: {prefix} ({e})"
        ) from e


def validate_port(port: str, option: str) -> str:
    """Accept '*', a single port, or a 'low-high' range."""
    port = require_non_empty(port, option)
    if port == "*":
        return port
    bounds = port.split("-")
    try:
        numbers = [int(b) for b in bounds]
    except ValueError as e:
        raise ConfigurationError(f"Invalid port for {option}: {port}") from e
    if len(numbers) > 2 or not all(0 < n <= 65535 for n in numbers):
        raise ConfigurationError(f"Invalid port for {option}: {port}")
    if len(numbers) == 2 and numbers[0] > numbers[1]:
        raise ConfigurationError(f"Invalid port range for {option}: {port}")
    return port


def validate_choice(value: str, choices: list[str], option: str) -> str:
    """Match value against choices case-insensitively.

    Returns:
        The canonical spelling from `choices`
    """
    value = require_non_empty(value, option)
    for choice in choices:
        if choice.lower() == value.lower():
            return choice
    raise ConfigurationError(
        f"Invalid value for {option}: {value}. "
        f"Valid values are: {', '.join(choices)}"
    )


def parse_size_list(value: str | list[str] | None) -> list[str]:
    """Parse a comma-separated list of VM sizes, dropping blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [size.strip() for size in value if size and size.strip()]
