"""Main module for procpipe."""

import logging
import sys
from pathlib import Path

from procpipe.cli import run as run_cli
from procpipe.config.paths import get_paths
from procpipe.config.settings import settings


def resolve_log_file(option: str | None = None) -> Path | None:
    """Resolve where logs go.

    ``option`` comes from the CLI: None defers to settings, an empty
    string (``--debug-log``) selects debug.log in the XDG state
    directory, and anything else is a path.
    """
    if option is None:
        return settings.log_file
    if option:
        return Path(option).expanduser()
    paths = get_paths()
    paths.ensure_global_dirs()
    return paths.debug_log


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure logging to the resolved log file, or stderr.

    ``level`` overrides the PROCPIPE_LOG_LEVEL env var and settings.
    """
    level_name = (level or settings.log_level).upper()
    log_path = resolve_log_file(log_file)

    handler: logging.Handler
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode="a")
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
    )
    logging.debug("procpipe starting, log level %s", level_name)


def main() -> None:
    """Main entry point for procpipe."""
    sys.exit(run_cli(configure_logging=setup_logging))


if __name__ == "__main__":
    main()
