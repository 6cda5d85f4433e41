"""Step 6: storage account and blob container."""

from cloudinfra.provisioning.ensure import (
    ensure_blob_container,
    ensure_storage_account,
)
from cloudinfra.steps.context import StepContext

NAME = "storage"


def run(ctx: StepContext) -> None:
    config = ctx.configs.storage
    ensure_storage_account(ctx.api, config)
    storage = ctx.api.get_storage_context(
        config.resource_group, config.account_name
    )
    ensure_blob_container(ctx.api, config, storage)


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
