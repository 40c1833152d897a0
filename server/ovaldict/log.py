from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "ovaldict.log"


def configure_logging(log_dir: str | None, debug: bool = False, quiet: bool = False) -> logging.Logger:
    """Console + file logging for the CLI and server.

    quiet drops the console handler; the log file under `log_dir` is always
    written when the directory exists or can be created.
    """

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    if not quiet:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        root.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        if not path.exists():
            try:
                os.makedirs(path, mode=0o700)
            except OSError as e:
                logging.getLogger(__name__).error("Failed to create log directory: %s", e)
        if path.is_dir():
            fh = logging.FileHandler(path / LOG_FILE_NAME, encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)

    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return root
