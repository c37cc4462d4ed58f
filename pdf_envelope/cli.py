"""Command-line interface: add a cover page, header and footer to a PDF file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from core.config.config_service import ConfigService
from core.logging.logic.console import configure_logging
from core.logging.logic.logger import RunLog

from .exceptions.errors import CommitError, EnvelopeError, StageError
from .logic.assembly_pipeline import EnvelopePipeline
from .logic.file_ops import RetryPolicy
from .logic.settings_repository import EnvelopeSettingsRepository
from .version import __version__

logger = logging.getLogger(__name__)


class _UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        raise _UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="pdf-envelope",
        description="CLI tool to add a cover page, header and footer to a PDF file.",
    )
    parser.add_argument("--inputFile", "-f", dest="input_file", required=True,
                        help="The PDF file to process.")
    parser.add_argument("--outputFile", "-o", dest="output_file",
                        help="The output PDF file path.")
    parser.add_argument("--overwrite-yes", "-y", dest="overwrite", action="store_true",
                        help="Overwrite the existing output file without confirmation.")
    parser.add_argument("--settings", "-s",
                        help="Settings JSON file (default: appsettings.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose progress logs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None, *, config: ConfigService | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        args = _build_parser().parse_args(argv)
    except _UsageError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    config = config or ConfigService()
    configure_logging(logging.DEBUG if args.verbose else config.logging.level.upper())

    input_file = Path(args.input_file).expanduser()
    if not input_file.is_file():
        logger.error("Input file does not exist: %s", input_file)
        return 1

    settings_path = Path(args.settings).expanduser() if args.settings else config.files.settings_json
    try:
        settings = EnvelopeSettingsRepository(settings_path).load()
    except EnvelopeError as exc:
        logger.error("Error: %s", exc)
        return 1

    run_log = RunLog(Path(config.logging.run_log_db)) if config.logging.run_log_db else None
    pipeline = EnvelopePipeline(
        settings,
        retry=RetryPolicy(
            attempts=config.io.retry_attempts,
            delay_seconds=config.io.retry_delay_seconds,
        ),
        compress=config.io.compress,
        run_log=run_log,
    )
    try:
        result = pipeline.run(
            input_file,
            Path(args.output_file).expanduser() if args.output_file else None,
            overwrite=args.overwrite,
        )
    except CommitError as exc:
        logger.error("Error: %s", exc)
        logger.info("Output file: %s", exc.temp_path)
        return 1
    except StageError as exc:
        logger.error("Error: %s", exc)
        if exc.kept_path is not None:
            logger.info("Intermediate file kept for inspection: %s", exc.kept_path)
        logger.info("Exiting...")
        return 1
    except EnvelopeError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        if run_log is not None:
            run_log.close()

    logger.info("Output file: %s", result.output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
