"""CLI entry point for pro-match."""

from __future__ import annotations

import sys
from pathlib import Path

from promatch.cli import build_parser, handle_criteria, handle_match, handle_tables
from promatch.config import DEFAULT_SETTINGS_PATH, Settings, load_settings
from promatch.errors import ActionableError
from promatch.logging import configure_file_logging, logger, set_level


def _settings_for(path: str | None) -> Settings:
    """Explicit paths must exist; the default path is optional."""
    if path is not None:
        return load_settings(path)
    if Path(DEFAULT_SETTINGS_PATH).exists():
        return load_settings(DEFAULT_SETTINGS_PATH)
    return Settings()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _settings_for(args.settings)
        set_level(settings.logging.level_number)
        if settings.logging.file_logging:
            configure_file_logging(settings.logging.log_dir, level=settings.logging.level_number)

        if args.command == "match":
            handle_match(args, settings)
        elif args.command == "criteria":
            handle_criteria(args, settings)
        elif args.command == "tables":
            handle_tables()
    except ActionableError as exc:
        logger.error("%s", exc.error)
        print(f"Error: {exc.error}", file=sys.stderr)
        if exc.suggestion:
            print(f"  Suggestion: {exc.suggestion}", file=sys.stderr)
        return 1
    except (KeyError, TypeError, ValueError) as exc:
        err = ActionableError.from_exception(exc, "pro-match", args.command)
        print(f"Error: {err.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
