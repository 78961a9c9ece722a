"""Sequential scan of the credential store file.

The store is only ever opened for reading. First matching line wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from git_credential_readonly.core.line_parser import DEFAULT_LINE_FORMAT, LineFormat, parse_store_line
from git_credential_readonly.core.matcher import CredentialMatcher
from git_credential_readonly.models.credential import Credential, StoredCredential


class StoreReadError(RuntimeError):
    """Raised when the store fails while being read."""


def decode_store_line(raw: bytes) -> Optional[str]:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


class StoreScanner:
    def __init__(
        self,
        store_path: Path,
        matcher: CredentialMatcher,
        log: logging.Logger,
        line_format: LineFormat = DEFAULT_LINE_FORMAT,
    ) -> None:
        self._store_path = store_path
        self._matcher = matcher
        self._log = log
        self._line_format = line_format

    @property
    def store_path(self) -> Path:
        return self._store_path

    def iter_credentials(self) -> Iterator[tuple[int, Optional[StoredCredential]]]:
        """Yield ``(line_number, record)`` pairs, record is None for malformed lines.

        Yields nothing when the store cannot be opened.
        """
        try:
            fp = self._store_path.open("rb")
        except OSError as exc:
            self._log.info("credential store unavailable: %s (%s)", self._store_path, exc.strerror or exc)
            return

        with fp:
            line_number = 0
            while True:
                try:
                    raw = fp.readline()
                except OSError as exc:
                    raise StoreReadError(f"failed reading {self._store_path}: {exc}") from exc
                if not raw:
                    return
                line_number += 1

                text = decode_store_line(raw)
                cred = parse_store_line(text, self._line_format) if text is not None else None
                yield line_number, cred

    def find(self, request: Credential) -> Optional[StoredCredential]:
        for line_number, cred in self.iter_credentials():
            if cred is None:
                self._log.warning("malformed credential line %d in %s", line_number, self._store_path)
                continue
            if self._matcher.matches(cred, request):
                self._log.debug("matched line %d: %s", line_number, cred.describe())
                return cred
        return None


def find_credential(
    request: Credential,
    store_path: Path,
    *,
    matcher: CredentialMatcher,
    log: logging.Logger,
    line_format: LineFormat = DEFAULT_LINE_FORMAT,
) -> Optional[StoredCredential]:
    scanner = StoreScanner(store_path, matcher=matcher, log=log, line_format=line_format)
    return scanner.find(request)
