"""Local file helpers for the blob transfer smoke test."""

import datetime
import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def write_placeholder_file(path: Path) -> Path:
    """Create a small text file at `path`, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.datetime.now().isoformat(timespec="seconds")
    path.write_text(
        f"cloudinfra blob transfer sample, created {timestamp}\n",
        encoding="utf-8",
    )
    logger.info(f"Created sample file: {path}")
    return path


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def derived_download_path(source: Path, prefix: str) -> Path:
    """Path next to `source` whose name is `source`'s name with `prefix`."""
    return source.with_name(f"{prefix}{source.name}")
