"""treedrop - drag-and-drop reordering for hierarchical tables.

A NiceGUI tree table whose rows can be reordered or re-parented by
dragging a row handle onto another row, backed by a pure reorder
decision engine.
"""

import logging
import os
import subprocess
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"

_PACKAGE_DIR = Path(__file__).resolve().parent


def get_git_commit(repo_dir: Path = _PACKAGE_DIR) -> str | None:
    """Short commit hash of the checkout containing ``repo_dir``, if any."""
    try:
        result = subprocess.run(
            ["git", "-C", str(repo_dir), "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return result.stdout.strip() or None


def get_version_string() -> str:
    """Package version, with a ``+<commit>`` local segment in a git checkout."""
    commit = get_git_commit()
    return f"{__version__}+{commit}" if commit else __version__


def _setup_logging(log_dir: Path) -> None:
    """Configure logging to both console and rotating file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"treedrop.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main() -> None:
    """Entry point for the treedrop demo application."""
    from nicegui import ui

    from treedrop.config import get_settings

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    import treedrop.pages  # noqa: F401 - registers routes

    port = settings.app.port
    storage_secret = settings.app.storage_secret.get_secret_value()

    logging.info("treedrop v%s on http://0.0.0.0:%s", get_version_string(), port)

    reload = os.environ.get("TREEDROP_RELOAD", "1") != "0"
    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        title=settings.app.title,
        reload=reload,
        storage_secret=storage_secret,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
