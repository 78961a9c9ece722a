"""git-credential-readonly entrypoint.

Serves ``get`` from a git-credentials style store and ignores ``store`` and
``erase``, so git can never modify the file through this helper.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys
from typing import Optional

from git_credential_readonly.audit.helper_log import configure_logging
from git_credential_readonly.config.settings import (
    ConfigLoadError,
    HelperConfig,
    default_config_path,
    load_config,
)
from git_credential_readonly.core.line_parser import LineFormat
from git_credential_readonly.core.matcher import PATH_POLICIES, CredentialMatcher, PathPolicyError, create_path_policy
from git_credential_readonly.core.paths import HomeDirError, expand_home_dir
from git_credential_readonly.core.request_reader import ProtocolError, read_request, request_from_url
from git_credential_readonly.core.store_scanner import StoreReadError, StoreScanner

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_FATAL = 2

ACTIONS = ("get", "store", "erase")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-credential-readonly",
        description="Read-only git credential helper backed by a git-credentials file",
    )
    parser.add_argument("--file", help="use given file instead of the default credential file")
    parser.add_argument("--config", help="helper config file (or set GIT_CREDENTIAL_READONLY_CONFIG)")
    parser.add_argument("--path-policy", choices=PATH_POLICIES, help="how request paths are matched")
    parser.add_argument("--debug", action="store_true", default=None, help="enable debug mode and write the log file")
    parser.add_argument("--log", help="log file path, used only when debug mode is enabled")
    parser.add_argument("action", choices=ACTIONS)
    parser.add_argument("target", nargs="?", help="lookup target URL for get (default: read request from stdin)")
    return parser


def _load_config(args: argparse.Namespace) -> HelperConfig:
    if args.config:
        return load_config(Path(expand_home_dir(args.config)), required=True)
    try:
        default_path = expand_home_dir(default_config_path(os.environ))
    except HomeDirError:
        # no home directory means no per-user config file
        return HelperConfig()
    return load_config(Path(default_path))


def _handle_get(args: argparse.Namespace, config: HelperConfig, log: logging.Logger) -> int:
    if args.target:
        request = request_from_url(args.target)
    else:
        request = read_request(sys.stdin.buffer)
    log.debug("get request: %s", request.describe())
    if not request.host:
        log.warning("request carries no host; nothing can match")

    matcher = CredentialMatcher(create_path_policy(args.path_policy or config.match.path_policy), log=log)
    scanner = StoreScanner(
        Path(expand_home_dir(args.file or config.store.file)),
        matcher=matcher,
        log=log,
        line_format=LineFormat(
            decode_fields=config.store.decode_fields,
            require_path=config.store.require_path,
        ),
    )
    credential = scanner.find(request)
    if credential is None:
        log.info("credential not found in %s", scanner.store_path)
        return EXIT_NOT_FOUND

    log.debug("get credential success: %s", credential.describe())
    sys.stdout.write(f"username={credential.username}\npassword={credential.password}\n")
    sys.stdout.flush()
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _load_config(args)
        debug = config.logging.debug if args.debug is None else args.debug
        log_file = Path(expand_home_dir(args.log or config.logging.file)) if debug else None
        log = configure_logging(debug=debug, log_file=log_file, level=config.logging.level)
    except (ConfigLoadError, HomeDirError, OSError) as exc:
        print(f"git-credential-readonly: {exc}", file=sys.stderr)
        return EXIT_FATAL

    log.info("helper begin |--------------------------------->")
    try:
        if args.action == "get":
            log.info("begin handle action=%s", args.action)
            return _handle_get(args, config, log)
        log.info("ignore action=%s", args.action)
        return EXIT_OK
    except ProtocolError as exc:
        log.error("get stdin failed: %s", exc)
        print(f"git-credential-readonly: invalid request: {exc}", file=sys.stderr)
        return EXIT_FATAL
    except (StoreReadError, HomeDirError, PathPolicyError, ValueError) as exc:
        log.error("get failed: %s", exc)
        print(f"git-credential-readonly: {exc}", file=sys.stderr)
        return EXIT_FATAL
    finally:
        log.info("helper end <---------------------------------|")


if __name__ == "__main__":
    raise SystemExit(main())
