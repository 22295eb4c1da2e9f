"""
Console and file logging for the EDGAR import job.

Console output is colour-coded with colorama: a banner when the job starts,
one status line per event, a progress line per CIK and a closing summary.
setup_verbose_logging() builds the job's logger, which mirrors records into
<log_dir>/funding.log.
"""

import datetime
import logging
import os
import sys
from typing import Optional, Sequence

from colorama import Fore, Style, init

init(autoreset=True)

RULE_WIDTH = 60


class C:
    """Colour shortcuts for import output."""
    HEADER = Fore.CYAN + Style.BRIGHT
    STEP = Fore.BLUE + Style.BRIGHT
    OK = Fore.GREEN + Style.BRIGHT
    WARN = Fore.YELLOW + Style.BRIGHT
    ERR = Fore.RED + Style.BRIGHT
    DIM = Style.DIM
    CIK = Fore.MAGENTA + Style.BRIGHT
    NAME = Fore.CYAN
    VALUE = Fore.GREEN
    RESET = Style.RESET_ALL


def _clock() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S")


def _line(color: str, tag: str, msg: str) -> None:
    stamp = f"{C.DIM}[{_clock()}]{C.RESET}"
    print(f"{stamp} {color}{tag}{msg}{C.RESET}" if color else f"{stamp} {tag}{msg}")


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

def header(title: str) -> None:
    """Banner printed once when a job starts."""
    rule = "=" * RULE_WIDTH
    print(f"\n{C.HEADER}{rule}\n  {title}\n{rule}{C.RESET}\n")


def step(msg: str) -> None:
    _line(C.STEP, ">> ", msg)


def info(msg: str) -> None:
    _line("", "", msg)


def ok(msg: str) -> None:
    _line(C.OK, "OK ", msg)


def warn(msg: str) -> None:
    _line(C.WARN, "WARN ", msg)


def progress(current: int, total: int, cik: int, msg: str) -> None:
    """One line per CIK, e.g. [3/10] CIK 0000320193: Apple Inc. | 5 income records"""
    _line("", f"{C.STEP}[{current}/{total}]{C.RESET} {C.CIK}CIK {cik:010d}{C.RESET}: ", msg)


def summary_table(title: str, rows: Sequence[tuple[str, str]]) -> None:
    """Closing label/value table, labels left-aligned to the longest one."""
    width = max((len(label) for label, _ in rows), default=0)
    print(f"\n{C.HEADER}{title}{C.RESET}")
    for label, value in rows:
        print(f"  {label.ljust(width)}  {C.VALUE}{value}{C.RESET}")
    print()


# ---------------------------------------------------------------------------
# Job logger
# ---------------------------------------------------------------------------

def setup_verbose_logging(
    name: str = "funding",
    level: int = logging.DEBUG,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Logger for a batch job: INFO and up to stdout, everything to funding.log.

    Handlers are attached once per logger name, so importing the job module
    again (API startup, tests) doesn't duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    log_dir = log_dir or os.path.join(os.path.dirname(os.path.dirname(__file__)), "logs")
    os.makedirs(log_dir, exist_ok=True)

    for handler, handler_level in (
        (logging.StreamHandler(sys.stdout), logging.INFO),
        (logging.FileHandler(os.path.join(log_dir, "funding.log")), logging.DEBUG),
    ):
        handler.setLevel(handler_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
