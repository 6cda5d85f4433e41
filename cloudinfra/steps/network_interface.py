"""Step 4: public IP and the network interface that binds everything."""

import logging

from cloudinfra.provisioning.ensure import (
    ensure_network_interface,
    ensure_public_ip,
)
from cloudinfra.steps.context import StepContext

logger = logging.getLogger(__name__)

NAME = "network-interface"


def run(ctx: StepContext) -> None:
    configs = ctx.configs
    public_ip = ensure_public_ip(ctx.api, configs.public_ip)
    logger.info(
        f"Public IP {public_ip.name}: "
        f"{public_ip.properties.get('ip_address') or 'not yet assigned'}"
    )
    ensure_network_interface(
        ctx.api, configs.nic, configs.network, configs.nsg, public_ip
    )


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
