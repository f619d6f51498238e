import os
import sys
from pathlib import Path

import fncli

from . import config
from .core.errors import TallyError
from .lib import ansi
from .logging_setup import setup_logging


def run(args: list[str]) -> int:
    """Dispatch one command line (without the program name). Returns the exit code."""
    fncli.autodiscover(Path(__file__).parent, "tally")

    if not args:
        args = ["dashboard"]
    try:
        return fncli.dispatch(["tally", *args])
    except TallyError as e:
        sys.stderr.write(f"{e}\n")
        return 1


def main():
    setup_logging(log_dir=config.LOG_DIR, console_level=config.get_log_level())
    if os.environ.get("NO_COLOR") or not sys.stdout.isatty():
        ansi.use(ansi.PLAIN)
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
