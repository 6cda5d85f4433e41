"""State handed to every step."""

from collections.abc import Callable
from dataclasses import dataclass

from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.config import Configs
from cloudinfra.provisioning.credentials import CredentialProvider


@dataclass
class StepContext:
    api: CloudApi
    configs: Configs
    credentials: CredentialProvider


@dataclass(frozen=True)
class Step:
    number: int
    name: str
    description: str
    run: Callable[[StepContext], None]
