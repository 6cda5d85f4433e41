"""Step 5: virtual machine, with size fallback."""

from cloudinfra.provisioning.vm import deploy_vm
from cloudinfra.steps.context import StepContext

NAME = "virtual-machine"


def run(ctx: StepContext) -> None:
    deploy_vm(ctx.api, ctx.configs.vm, ctx.credentials)


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
