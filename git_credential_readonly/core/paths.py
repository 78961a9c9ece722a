"""Home directory expansion for configured file paths."""

from __future__ import annotations

import os
from typing import Mapping, Optional


class HomeDirError(RuntimeError):
    """Raised when the user's home directory cannot be determined."""


def _registry_home() -> str:
    try:
        import pwd
    except ImportError as exc:
        raise HomeDirError("HOME is not set and no user registry is available") from exc

    try:
        home = pwd.getpwuid(os.getuid()).pw_dir
    except KeyError as exc:
        raise HomeDirError(f"cannot determine home directory for uid {os.getuid()}") from exc
    if not home:
        raise HomeDirError(f"user registry has no home directory for uid {os.getuid()}")
    return home


def expand_home_dir(path: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Replace a leading ``~`` with ``HOME``; an unset or empty ``HOME`` uses the user registry."""
    if not path.startswith("~"):
        return path

    environ = os.environ if env is None else env
    home = environ.get("HOME", "") or _registry_home()
    return home + path[1:]
