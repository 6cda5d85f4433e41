"""Step 3: network security group with one inbound rule."""

import logging

from cloudinfra.provisioning.ensure import ensure_network_security_group
from cloudinfra.steps.context import StepContext

logger = logging.getLogger(__name__)

NAME = "security-group"


def run(ctx: StepContext) -> None:
    nsg = ensure_network_security_group(ctx.api, ctx.configs.nsg)
    rules = nsg.properties.get("security_rules", [])
    names = ", ".join(rule["name"] for rule in rules) or "none"
    logger.info(f"Network security group {nsg.name} rules: {names}")


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
