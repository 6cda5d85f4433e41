"""Step 2: virtual network and subnet."""

import logging

from cloudinfra.provisioning.ensure import ensure_virtual_network
from cloudinfra.steps.context import StepContext

logger = logging.getLogger(__name__)

NAME = "network"


def run(ctx: StepContext) -> None:
    network, subnet = ensure_virtual_network(ctx.api, ctx.configs.network)
    prefixes = ", ".join(network.properties.get("address_prefixes", []))
    logger.info(
        f"Virtual network {network.name} [{prefixes}] has subnet "
        f"{subnet.name} ({subnet.properties.get('address_prefix')})"
    )


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
