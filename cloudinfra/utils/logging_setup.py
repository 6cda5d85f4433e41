"""Console and file logging for provisioning runs."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Azure SDK loggers that log every HTTP request at INFO
_SDK_LOGGERS = [
    "azure",
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
]

_HANDLER_NAMES = ("cloudinfra.console", "cloudinfra.file")


def setup_logging(
    log_file: str | Path | None = None, show_logs: bool = False
) -> logging.Logger:
    """Send log lines to the console and append them to `log_file`.

    Both outputs use the same `[timestamp] message` format. Calling this
    again replaces the handlers installed by the previous call.

    Args:
        log_file: File to append to, or None for console only
        show_logs: Log at DEBUG and let Azure SDK logs through

    Returns:
        The configured root logger
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() in _HANDLER_NAMES:
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.set_name("cloudinfra.console")
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.set_name("cloudinfra.file")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.setLevel(logging.DEBUG if show_logs else logging.INFO)
    sdk_level = logging.DEBUG if show_logs else logging.WARNING
    for name in _SDK_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)

    return root
