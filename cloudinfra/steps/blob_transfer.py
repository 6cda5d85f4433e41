"""Step 7: upload a sample file and download it back."""

from cloudinfra.errors import PrerequisiteMissing
from cloudinfra.provisioning.blob import verify_blob_transfer
from cloudinfra.provisioning.ensure import require
from cloudinfra.steps.context import StepContext

NAME = "blob-transfer"


def run(ctx: StepContext) -> None:
    config = ctx.configs.storage
    require(ctx.api, config.key, hint="run the storage step first")
    storage = ctx.api.get_storage_context(
        config.resource_group, config.account_name
    )
    if ctx.api.get_blob_container(storage, config.container_name) is None:
        raise PrerequisiteMissing(
            config.container_key, hint="run the storage step first"
        )

    blob = ctx.configs.blob
    verify_blob_transfer(
        ctx.api,
        blob.sample_file,
        config.container_name,
        storage,
        download_prefix=blob.download_prefix,
        verify_checksum=blob.verify_checksum,
    )


def main(argv: list[str] | None = None) -> int:
    from cloudinfra.cli import run_cli

    return run_cli([NAME], argv)


if __name__ == "__main__":
    exit(main())
