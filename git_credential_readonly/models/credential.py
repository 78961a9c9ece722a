"""Credential records shared by requests and store entries.

A request leaves any field empty to mean "unspecified". A stored entry must
name a host, a username and a password.
"""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

REQUEST_KEYS = ("protocol", "host", "path", "username", "password")


class Credential(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    protocol: str = ""
    username: str = ""
    password: str = ""
    host: str = ""
    path: str = ""

    def describe(self) -> str:
        masked = "***" if self.password else ""
        return (
            f"protocol={self.protocol!r} host={self.host!r} path={self.path!r} "
            f"username={self.username!r} password={masked!r}"
        )


class StoredCredential(Credential):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    host: str = Field(min_length=1)

    def to_store_line(self) -> str:
        line = (
            f"{self.protocol}://{quote(self.username, safe='')}:{quote(self.password, safe='')}"
            f"@{quote(self.host, safe='')}"
        )
        if self.path:
            line += "/" + quote(self.path, safe="/")
        return line
