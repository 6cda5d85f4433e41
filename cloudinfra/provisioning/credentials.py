"""Sources for the VM's local administrator credentials."""

import getpass
import logging
import os
from abc import ABC, abstractmethod

from cloudinfra.cloud.resources import AdminCredentials
from cloudinfra.errors import ConfigurationError

logger = logging.getLogger(__name__)

PASSWORD_ENV_VAR = "CLOUDINFRA_ADMIN_PASSWORD"

MIN_PASSWORD_LENGTH = 12
MAX_PASSWORD_LENGTH = 123


def validate_admin_password(password: str) -> str:
    """Check a password against Azure's VM password rules.

    12-123 characters with at least three of: lowercase, uppercase,
    digit, special character.
    """
    if not MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH:
        raise ConfigurationError(
            f"Admin password must be {MIN_PASSWORD_LENGTH}-"
            f"{MAX_PASSWORD_LENGTH} characters long"
        )
    classes = [
        any(c.islower() for c in password),
        any(c.isupper() for c in password),
        any(c.isdigit() for c in password),
        any(not c.isalnum() for c in password),
    ]
    if sum(classes) < 3:
        raise ConfigurationError(
            "Admin password must contain three of: lowercase letter, "
            "uppercase letter, digit, special character"
        )
    return password


class CredentialProvider(ABC):
    """Supplies administrator credentials when a VM is about to be created."""

    @abstractmethod
    def get_credentials(self, username: str) -> AdminCredentials:
        raise NotImplementedError

    def validate(self) -> None:
        """Check a non-interactive password before any resource is created.

        Raises:
            ConfigurationError: If the password is missing or too weak
        """


class StaticCredentialProvider(CredentialProvider):
    def __init__(self, password: str):
        self._password = password

    def validate(self) -> None:
        validate_admin_password(self._password)

    def get_credentials(self, username: str) -> AdminCredentials:
        return AdminCredentials(username, validate_admin_password(self._password))


class EnvCredentialProvider(CredentialProvider):
    """Reads the password from an environment variable."""

    def __init__(self, env_var: str = PASSWORD_ENV_VAR):
        self.env_var = env_var

    def _password(self) -> str:
        password = os.environ.get(self.env_var)
        if not password:
            raise ConfigurationError(
                f"Environment variable {self.env_var} is not set"
            )
        return validate_admin_password(password)

    def validate(self) -> None:
        self._password()

    def get_credentials(self, username: str) -> AdminCredentials:
        return AdminCredentials(username, self._password())


class PromptCredentialProvider(CredentialProvider):
    """Asks for the password on the terminal, twice."""

    def get_credentials(self, username: str) -> AdminCredentials:
        password = getpass.getpass(f"Password for VM admin '{username}': ")
        confirmation = getpass.getpass("Confirm password: ")
        if password != confirmation:
            raise ConfigurationError("Passwords do not match")
        return AdminCredentials(username, validate_admin_password(password))


def get_credential_provider() -> CredentialProvider:
    """Use the environment variable when set, otherwise prompt."""
    if os.environ.get(PASSWORD_ENV_VAR):
        logger.debug(f"Using admin password from ${PASSWORD_ENV_VAR}")
        return EnvCredentialProvider()
    return PromptCredentialProvider()
