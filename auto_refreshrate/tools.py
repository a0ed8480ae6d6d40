import logging
from logging.handlers import RotatingFileHandler
import os
import sys

import psutil

from auto_refreshrate.globals import LOG_DIR, LOG_FILE


class ConditionalFormatter(logging.Formatter):
    """
    A custom formatter that applies different format strings based on record level.
    Shows file name and line number only for ERROR and CRITICAL levels.
    """

    def __init__(self) -> None:
        self.default_fmt = "%(asctime)s [%(levelname)s] [%(module)s] %(message)s"
        self.error_fmt = "%(asctime)s [%(levelname)s] [%(filename)s:%(lineno)d] %(message)s"

        super().__init__(fmt=self.default_fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record) -> str:
        original_fmt: str = self._style._fmt

        if record.levelno >= logging.ERROR:
            self._style._fmt = self.error_fmt
        else:
            self._style._fmt = self.default_fmt

        result: str = super().format(record)

        self._style._fmt = original_fmt

        return result


def setup_logger(verbose: bool = False, log_file: str = LOG_FILE) -> None:
    """Set up global logging: rotating log file plus stdout.

    Falls back to stdout only when the log directory cannot be created.
    """
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter("[%(levelname)s] [%(module)s] %(message)s"))
    handlers: list[logging.Handler] = [stream_handler]

    if create_log_dir(os.path.dirname(log_file)):
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024, # 10MB
            backupCount=1,
            encoding="utf-8"
        )
        file_handler.setFormatter(ConditionalFormatter())
        handlers.insert(0, file_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=handlers,
        force=True,
    )

def create_log_dir(log_dir: str = LOG_DIR) -> bool:
    try:
        os.makedirs(log_dir, mode=0o755, exist_ok=True)
        return True
    except OSError as e:
        print(f"Unable to create log directory {log_dir}: {e}", file=sys.stderr)
        return False

# check if program (argument) is running, ignoring this process
def is_running(program: str, argument: str) -> bool:
    own_pid = os.getpid()
    for proc in psutil.process_iter(["pid", "cmdline"]):
        try:
            if proc.info["pid"] == own_pid: continue
            cmdline = proc.info["cmdline"] or []
            # the process name is truncated by the kernel, match the command line instead
            if not any(os.path.basename(arg).startswith(program) for arg in cmdline[:2]): continue
            if any(argument == arg for arg in cmdline[1:]): return True
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return False
