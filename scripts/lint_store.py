#!/usr/bin/env python3
"""Report malformed lines in a git-credentials style store.

Only line numbers are printed; line contents may hold passwords.
"""

from __future__ import annotations

import argparse
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from git_credential_readonly.config.settings import DEFAULT_STORE_FILE  # noqa: E402
from git_credential_readonly.core.line_parser import LineFormat, parse_store_line  # noqa: E402
from git_credential_readonly.core.paths import expand_home_dir  # noqa: E402
from git_credential_readonly.core.store_scanner import decode_store_line  # noqa: E402


def find_malformed_lines(store_path: pathlib.Path, fmt: LineFormat) -> list[int]:
    bad: list[int] = []
    with store_path.open("rb") as fp:
        for number, raw in enumerate(fp, start=1):
            text = decode_store_line(raw)
            if text is None or parse_store_line(text, fmt) is None:
                bad.append(number)
    return bad


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check a credential store for malformed lines")
    parser.add_argument("--file", default=DEFAULT_STORE_FILE, help=f"store file (default: {DEFAULT_STORE_FILE})")
    parser.add_argument("--require-path", action="store_true", help="treat host-only entries as malformed")
    parser.add_argument("--no-decode", action="store_true", help="do not percent-decode fields")
    args = parser.parse_args(argv)

    store_path = pathlib.Path(expand_home_dir(args.file))
    fmt = LineFormat(decode_fields=not args.no_decode, require_path=args.require_path)
    try:
        bad = find_malformed_lines(store_path, fmt)
    except OSError as exc:
        print(f"cannot read {store_path}: {exc}", file=sys.stderr)
        return 2

    for number in bad:
        print(f"{store_path}:{number}: malformed credential line")
    if bad:
        return 1
    print(f"ok {store_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
