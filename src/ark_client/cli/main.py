"""Command-line interface for ark."""

from __future__ import annotations

import argparse
import json
import re
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from ark_client.cli.config import CLIConfig, ConfigError, load_cli_config
from ark_client.cli.restore import CreateOptions, execute
from ark_client.client import ArkClient
from ark_client.errors import (
    ArgumentCountError,
    ArkError,
    MalformedEntryError,
    MalformedSelectorError,
    ServerRequestError,
    SubmissionError,
    UnsupportedOutputFormatError,
)
from ark_client.logging_utils import LOG, setup_logging
from ark_client.restore import API_VERSION

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_SUBMISSION_ERROR = 2

_SENSITIVE_FIELDS = (
    "token",
    "authorization",
    "password",
    "secret",
)


def _cli_version() -> str:
    try:
        return pkg_version("ark-client")
    except PackageNotFoundError:
        return "0.0.0+local"


def _build_parser() -> tuple[argparse.ArgumentParser, CreateOptions]:
    parser = argparse.ArgumentParser(prog="ark")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.ark/config.toml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show CLI version")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    restore = sub.add_parser("restore", help="Work with restores")
    restore_sub = restore.add_subparsers(dest="restore_command", required=True)
    create = restore_sub.add_parser(
        "create",
        help="Create a restore",
        usage="ark restore create BACKUP [flags]",
    )
    options = CreateOptions()
    options.bind_flags(create)

    return parser, options


def _sanitize_error_text(value: str) -> str:
    redacted = re.sub(r"(?i)(bearer\s+)(\S+)", r"\1[REDACTED]", value)
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    return redacted


def _print_error(stderr, message: str, *, code: int, redact: bool = True) -> int:
    if redact:
        message = _sanitize_error_text(message)
    print(f"An error occurred: {message}", file=stderr)
    return code


def _fold_extra_args(args: argparse.Namespace, extras: Sequence[str]) -> str | None:
    """Merge positionals argparse left over into ``args.args``.

    Returns an error message for anything that cannot be merged.
    """
    flags = [extra for extra in extras if extra.startswith("-")]
    if flags:
        return f"unknown flag: {flags[0]}"
    if not extras:
        return None
    if args.command == "restore" and args.restore_command == "create":
        args.args = [*args.args, *extras]
        return None
    return f"unexpected arguments: {' '.join(extras)}"


def _run_version(*, config: CLIConfig, as_json: bool, stdout) -> int:
    payload = {
        "cli": "ark",
        "client_version": _cli_version(),
        "api_version": API_VERSION,
        "server": config.server,
        "namespace": config.namespace,
    }
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print(f"ark {payload['client_version']}", file=stdout)
        print(f"api: {payload['api_version']}", file=stdout)
        print(f"server: {payload['server']}", file=stdout)
        print(f"namespace: {payload['namespace']}", file=stdout)
    return EXIT_SUCCESS


def _build_ark_client(*, config: CLIConfig) -> ArkClient:
    return ArkClient(
        base_url=config.server,
        token=config.token,
        timeout=config.timeout,
        verify_tls=config.verify_tls,
    )


def _run_restore_create(*, args, options: CreateOptions, config: CLIConfig, stdout, stderr) -> int:
    options.load_flags(args)
    options.namespace = config.namespace
    try:
        execute(options, args.args, lambda: _build_ark_client(config=config), stdout=stdout)
    except (ArgumentCountError, UnsupportedOutputFormatError) as exc:
        return _print_error(stderr, str(exc), code=EXIT_VALIDATION_ERROR)
    except ServerRequestError as exc:
        LOG.debug("restore rejected by server", exc_info=True)
        return _print_error(stderr, str(exc), code=EXIT_SUBMISSION_ERROR, redact=False)
    except SubmissionError as exc:
        LOG.debug("restore submission failed", exc_info=True)
        return _print_error(stderr, str(exc), code=EXIT_SUBMISSION_ERROR)
    except ArkError as exc:
        return _print_error(stderr, str(exc), code=EXIT_VALIDATION_ERROR)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None, *, stdout=sys.stdout, stderr=sys.stderr) -> int:
    parser, options = _build_parser()
    try:
        args, extras = parser.parse_known_args(argv)
    except (MalformedEntryError, MalformedSelectorError) as exc:
        return _print_error(stderr, str(exc), code=EXIT_VALIDATION_ERROR)

    extra_error = _fold_extra_args(args, extras)
    if extra_error is not None:
        return _print_error(stderr, extra_error, code=EXIT_VALIDATION_ERROR)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, f"config error: {exc}", code=EXIT_VALIDATION_ERROR)

    setup_logging(args.verbose, config.log_level, stream=stderr)

    if args.command == "version":
        return _run_version(config=config, as_json=args.json, stdout=stdout)

    if args.command == "restore":
        if args.restore_command == "create":
            return _run_restore_create(
                args=args,
                options=options,
                config=config,
                stdout=stdout,
                stderr=stderr,
            )

    print("unknown command", file=stderr)
    return EXIT_VALIDATION_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
