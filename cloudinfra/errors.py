"""Exception types for cloudinfra.

Exception Hierarchy:
    CloudInfraError (base)
    ├── ConfigurationError - Missing or invalid input parameter
    ├── PrerequisiteMissing - A resource the step depends on does not exist
    ├── ProviderError - Any provider-side failure
    │   └── CapacityError - Requested size/SKU unavailable in the region
    ├── CapacityExhausted - Every fallback size hit a capacity error
    └── VerificationFailed - A post-condition check failed
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cloudinfra.cloud.resources import ResourceKey


class CloudInfraError(Exception):
    """Base exception for all cloudinfra errors.

    Attributes:
        message: Human-readable error description
        context: Additional context (resource names, paths, sizes)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(CloudInfraError, ValueError):
    """Raised for a missing or invalid input parameter.

    Always raised before any provider call is made.
    """


class PrerequisiteMissing(CloudInfraError):
    """Raised when a resource the current step depends on does not exist."""

    def __init__(self, key: "ResourceKey", hint: str | None = None):
        message = f"Required {key.kind.label} '{key.name}' does not exist"
        context: dict[str, Any] = {"resource_group": key.resource_group}
        if key.parent:
            context["parent"] = key.parent
        if hint:
            context["hint"] = hint
        super().__init__(message, context)
        self.key = key


class ProviderError(CloudInfraError):
    """Raised when the provider rejects or fails an operation.

    Attributes:
        code: Provider error code, when the provider supplied one
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context)
        self.code = code


class CapacityError(ProviderError):
    """Raised when the requested size is unavailable in the region."""


class CapacityExhausted(CloudInfraError):
    """Raised when the primary size and every fallback size were unavailable.

    Attributes:
        attempted_sizes: Sizes tried, in the order they were tried
    """

    def __init__(self, vm_name: str, location: str, attempted_sizes: list[str]):
        super().__init__(
            f"No capacity for VM '{vm_name}' in {location}",
            {"attempted_sizes": ", ".join(attempted_sizes)},
        )
        self.attempted_sizes = list(attempted_sizes)


class VerificationFailed(CloudInfraError):
    """Raised when a post-condition check fails after a reported success."""
