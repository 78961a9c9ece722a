"""Diagnostic log sink for the helper.

stdout belongs to the credential-helper protocol, so diagnostics go to a
file when debug is on and are discarded otherwise.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "git_credential_readonly"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(filename)s:%(lineno)d: %(message)s"


def configure_logging(debug: bool, log_file: Optional[Path], level: str = "DEBUG") -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    log.propagate = False

    if debug and log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.setLevel(getattr(logging, level.upper(), logging.DEBUG))
    else:
        handler = logging.NullHandler()
        log.setLevel(logging.CRITICAL + 1)
    log.addHandler(handler)
    return log
