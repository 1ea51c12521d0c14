"""Command line interface for r2uploader."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .cli_progress import UploadProgressDisplay, render_configuration_summary
from .config import ENV_PREFIX, load_env_file, load_store_config, resolve_default_env_file
from .errors import UploaderError
from .models import HeadErrorPolicy, StoreConfig, UploadConfig
from .orchestrator import UploadOrchestrator
from .protocols import IObjectStore
from .services import S3StorageService

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default level is INFO so every per-file decision is printed.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if silent:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL")
        level = getattr(logging, (env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # boto internals are noisy below WARNING
    for name in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return "silent" if silent else logging.getLevelName(level)


async def _run_upload(
    storage: IObjectStore,
    config: UploadConfig,
    local_path: Path,
    remote_path: str,
    display: UploadProgressDisplay,
) -> int:
    orchestrator = UploadOrchestrator(storage, config)
    orchestrator.on("file_start", display.on_file_start)
    orchestrator.on("file_complete", display.on_file_complete)
    orchestrator.on("finish", display.on_finish)

    try:
        await orchestrator.run(local_path, remote_path, progress_callback=display.on_progress)
    except UploaderError as exc:
        display.on_error(exc)
        raise

    logger.info("complete")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="r2-uploader",
        description="Upload a file or directory to a Cloudflare R2 (S3-compatible) bucket.",
        epilog=(
            f"Credentials are read from {ENV_PREFIX}BUCKET, {ENV_PREFIX}ACCOUNT_ID, "
            f"{ENV_PREFIX}ACCESSKEY and {ENV_PREFIX}SECRETKEY."
        ),
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file (default: ./.env if present)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"r2-uploader {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")
    upload = subparsers.add_parser("upload", help="Upload a file or directory")
    upload.add_argument("local_path", type=Path, help="Local file or directory")
    upload.add_argument(
        "remote_path",
        help="Destination key (file) or key prefix (directory); leading '/' is ignored",
    )
    upload.add_argument(
        "--force",
        type=_parse_bool,
        nargs="?",
        const=True,
        default=True,
        metavar="BOOL",
        help=(
            "Overwrite without checking whether the key exists (default: true). "
            "Write it as --force=BOOL, or place it after LOCAL and REMOTE"
        ),
    )
    upload.add_argument(
        "--on-head-error",
        choices=[policy.value for policy in HeadErrorPolicy],
        default=HeadErrorPolicy.SKIP.value,
        help=(
            "What to do when an existence check fails for a reason other than "
            "not-found: skip the file (default) or abort"
        ),
    )
    upload.add_argument(
        "--timeout",
        type=float,
        default=UploadConfig().timeout,
        help="Wall-clock limit for the whole run, in seconds (default: 3600)",
    )
    return parser


def run_cli(
    argv: Optional[Sequence[str]] = None,
    storage_factory: Callable[[StoreConfig], IObjectStore] = S3StorageService.from_config,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or resolve_default_env_file()
    if used_env_file is not None:
        try:
            load_env_file(Path(used_env_file))
        except UploaderError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        store_config = load_store_config()
    except UploaderError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.timeout <= 0:
        print("ERROR: --timeout must be positive", file=sys.stderr)
        return 1

    config = UploadConfig(
        force=args.force,
        timeout=args.timeout,
        head_error_policy=HeadErrorPolicy(args.on_head_error),
    )

    local_path = Path(args.local_path).expanduser()
    if not args.silent:
        render_configuration_summary(
            {
                "Source": str(local_path),
                "Bucket": store_config.bucket,
                "Endpoint": store_config.endpoint_url,
                "Remote": args.remote_path.lstrip("/") or "(bucket root)",
                "Force": "yes" if config.force else "no",
                "On Head Error": config.head_error_policy.value,
                "Timeout": f"{config.timeout:g}s",
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    try:
        storage = storage_factory(store_config)
        return asyncio.run(
            _run_upload(
                storage,
                config,
                local_path,
                args.remote_path,
                UploadProgressDisplay(Console(quiet=True) if args.silent else None),
            )
        )
    except UploaderError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
