"""Blob upload/download smoke test."""

import logging
from pathlib import Path

from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.cloud.resources import StorageContext
from cloudinfra.errors import VerificationFailed
from cloudinfra.utils.files import (
    derived_download_path,
    sha256_file,
    write_placeholder_file,
)

logger = logging.getLogger(__name__)


def verify_blob_transfer(
    api: CloudApi,
    local_path: Path,
    container: str,
    storage: StorageContext,
    download_prefix: str = "downloaded_",
    verify_checksum: bool = False,
) -> Path:
    """Upload a local file to a container and download it back.

    The blob is named after the file. The download lands next to the
    source as `<download_prefix><name>`. Only the existence of the
    downloaded file is checked unless `verify_checksum` is set.

    Args:
        api: Provider API
        local_path: File to upload; a placeholder is written if missing
        container: Target container name
        storage: Storage account context
        download_prefix: Prefix for the downloaded file's name
        verify_checksum: Also compare SHA-256 digests

    Returns:
        Path of the downloaded file

    Raises:
        ProviderError: If the upload or download fails
        VerificationFailed: If the download is missing or differs
    """
    local_path = Path(local_path)
    if not local_path.exists():
        write_placeholder_file(local_path)

    blob_name = local_path.name
    logger.info(
        f"Uploading {local_path} to {storage.account_name}/{container}/"
        f"{blob_name}"
    )
    api.upload_blob(storage, container, blob_name, local_path)

    destination = derived_download_path(local_path, download_prefix)
    logger.info(f"Downloading {blob_name} to {destination}")
    api.download_blob(storage, container, blob_name, destination)

    if not destination.exists():
        raise VerificationFailed(
            "Downloaded file not found after transfer",
            {"blob": blob_name, "path": str(destination)},
        )

    if verify_checksum:
        expected = sha256_file(local_path)
        actual = sha256_file(destination)
        if expected != actual:
            raise VerificationFailed(
                "Downloaded file does not match the uploaded file",
                {"expected_sha256": expected, "actual_sha256": actual},
            )
        logger.info(f"Checksum verified: {actual}")

    logger.info(f"Blob transfer verified: {destination}")
    return destination
