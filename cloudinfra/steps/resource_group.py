"""Step 1: resource group."""

from cloudinfra.provisioning.ensure import ensure_resource_group
from cloudinfra.steps.context import StepContext

NAME = "resource-group"


def run(ctx: StepContext) -> None:
    ensure_resource_group(ctx.api, ctx.configs.resource_group)


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
