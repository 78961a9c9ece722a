"""Match stored credentials against a request."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Optional

from git_credential_readonly.models.credential import Credential

PATH_POLICIES = ("owner", "exact")


class PathPolicyError(RuntimeError):
    """Raised for an unknown path matching policy."""


class PathMatchPolicy(ABC):
    """Decides whether a stored path satisfies a non-empty request path."""

    name: str

    @abstractmethod
    def matches(self, stored_path: str, request_path: str) -> bool:
        """Return True when the stored path covers the requested path."""


class ExactPathPolicy(PathMatchPolicy):
    name = "exact"

    def matches(self, stored_path: str, request_path: str) -> bool:
        return stored_path == request_path


class OwnerPathPolicy(PathMatchPolicy):
    """One stored entry per owner/organization covers all of its repositories.

    ``acme/widgets.git`` is compared as ``acme`` against the stored path with
    trailing slashes removed. A request path without an owner segment falls
    back to exact comparison.
    """

    name = "owner"

    def matches(self, stored_path: str, request_path: str) -> bool:
        owner, sep, _ = request_path.partition("/")
        if sep and owner:
            return owner.rstrip("/") == stored_path.rstrip("/")
        return stored_path == request_path


def create_path_policy(name: str) -> PathMatchPolicy:
    if name == "owner":
        return OwnerPathPolicy()
    if name == "exact":
        return ExactPathPolicy()
    raise PathPolicyError(f"unsupported path policy: {name} (supported: {', '.join(PATH_POLICIES)})")


class CredentialMatcher:
    def __init__(self, path_policy: PathMatchPolicy, log: logging.Logger) -> None:
        self._path_policy = path_policy
        self._log = log

    @property
    def path_policy(self) -> PathMatchPolicy:
        return self._path_policy

    def matches(self, stored: Optional[Credential], request: Optional[Credential]) -> bool:
        if stored is None or request is None:
            return False
        if stored.host != request.host:
            return False
        if request.protocol and stored.protocol != request.protocol:
            return False
        if request.username and stored.username != request.username:
            return False
        if request.path:
            result = self._path_policy.matches(stored.path, request.path)
            self._log.debug(
                "match path policy=%s request.path=%s stored.path=%s result=%s",
                self._path_policy.name,
                request.path,
                stored.path,
                result,
            )
            return result
        return True
