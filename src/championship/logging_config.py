"""Logging setup for ingestion runs.

Console gets INFO+ in a short format; a per-run file under
``{data_dir}/logs/`` gets DEBUG+ including the probe-by-probe trace of
count discovery, which is too chatty for the terminal.
"""

import logging
from datetime import datetime
from pathlib import Path

CONSOLE_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"

# Third-party loggers that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    data_dir: str = "data",
    console_level: int = logging.INFO,
    run_label: str = "ingest",
) -> Path:
    """Attach console and file handlers to the root logger.

    Root handlers are cleared first, so repeated calls (tests, a CLI run
    followed by another) never duplicate output.

    Args:
        data_dir: Base data directory. ``logs/`` is created inside it.
        console_level: Minimum level for console output.
        run_label: Prefix of the log file name, e.g. ``"ingest"`` or
            ``"veto"``.

    Returns:
        Path to the log file for this run.
    """
    log_dir = Path(data_dir) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{run_label}-{datetime.now():%Y-%m-%d-%H%M%S}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
