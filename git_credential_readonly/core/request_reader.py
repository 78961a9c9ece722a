"""Reader for the git credential-helper request stream.

git writes ``key=value`` lines to the helper's stdin and closes it. Unknown
keys are ignored so newer git versions can send extra attributes.
"""

from __future__ import annotations

from typing import BinaryIO
from urllib.parse import unquote, urlsplit

from git_credential_readonly.models.credential import REQUEST_KEYS, Credential


class ProtocolError(RuntimeError):
    """Raised when the request stream cannot be trusted."""


class UnexpectedEndOfInput(ProtocolError):
    """Raised when input ends inside a key or an unterminated value."""


def parse_request(data: str) -> Credential:
    fields: dict[str, str] = {}
    pos = 0
    while pos < len(data):
        # blank line at a key boundary terminates the request
        if data[pos] == "\n":
            break

        eq = data.find("=", pos)
        if eq < 0:
            raise UnexpectedEndOfInput(f"input ended inside a key at offset {pos}")
        key = data[pos:eq]

        nl = data.find("\n", eq + 1)
        if nl < 0:
            raise UnexpectedEndOfInput(f"value for key {key!r} is not newline-terminated")
        value = data[eq + 1 : nl]

        if key in REQUEST_KEYS:
            fields[key] = value
        pos = nl + 1

    return Credential(**fields)


def read_request(stream: BinaryIO) -> Credential:
    """Read a request from raw bytes; values keep any carriage returns they carry."""
    try:
        data = stream.read().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"request is not valid UTF-8: {exc}") from exc
    return parse_request(data)


def request_from_url(target: str) -> Credential:
    """Build a request from ``proto://[user@]host[/path]`` or ``host[/path]``."""
    raw = target.strip()
    if "://" not in raw:
        parts = urlsplit("//" + raw)
        protocol = ""
    else:
        parts = urlsplit(raw)
        protocol = parts.scheme

    userinfo, _, host = parts.netloc.rpartition("@")
    if not host:
        raise ValueError(f"no host in target: {target!r}")

    username = unquote(userinfo.partition(":")[0]) if userinfo else ""
    return Credential(
        protocol=protocol,
        host=host,
        username=username,
        path=unquote(parts.path.lstrip("/")),
    )
