from configparser import ConfigParser, Error as ConfigParserError
from auto_refreshrate.config.config_event_handler import ConfigEventHandler
from auto_refreshrate.globals import (
    APP_NAME,
    APPLY_TIMEOUT,
    INITIAL_DELAY,
    LOW_REFRESH_RATE,
    MAX_RETRIES,
    POLL_INTERVAL,
    POWER_SUPPLY_DIR,
    REFRESH_RATE_TOLERANCE,
    USER_CONFIG_DIR,
)
from auto_refreshrate.types import ApplyMethod
import logging
import os
import pyinotify
import sys

def find_config_file(args_config_file) -> str:
    """
    Find the config file to use.

    Look for a config file in the following priorization order:
    1. Command line argument
    2. User config file
    3. System config file

    :param args_config_file: Path to the config file provided as a command line argument
    :return: The path to the config file to use
    """
    user_config_file = os.path.join(USER_CONFIG_DIR, f"{APP_NAME}/{APP_NAME}.conf")
    system_config_file = f"/etc/{APP_NAME}.conf"

    if args_config_file is not None:                                # (1) Command line argument was specified
        # Check if the config file path points to a valid file
        if os.path.isfile(args_config_file): return args_config_file
        else:
            # Not a valid file
            print(f"Config file specified with '--config {args_config_file}' not found.")
            sys.exit(1)
    elif os.path.isfile(user_config_file): return user_config_file  # (2) User config file
    else: return system_config_file                                 # (3) System config file (default if nothing else is found)

class _Config:
    def __init__(self) -> None:
        self.path: str = ""
        self._config: ConfigParser = ConfigParser()
        self.watch_manager: pyinotify.WatchManager = pyinotify.WatchManager()
        self.config_handler = ConfigEventHandler(self)

        # check for file changes using threading
        self.notifier: pyinotify.ThreadedNotifier = pyinotify.ThreadedNotifier(self.watch_manager, self.config_handler)
        self.notifier.daemon = True

    def set_path(self, path: str) -> None:
        self.path = path
        mask = pyinotify.IN_CREATE | pyinotify.IN_DELETE | pyinotify.IN_MODIFY | pyinotify.IN_MOVED_FROM | pyinotify.IN_MOVED_TO
        if os.path.isdir(os.path.dirname(path)):
            self.watch_manager.add_watch(os.path.dirname(path), mask=mask)
        if os.path.isfile(path): self.update_config()

    def has_config(self) -> bool:
        return os.path.isfile(self.path)

    def update_config(self) -> None:
        # create new ConfigParser to prevent old data from remaining
        conf = ConfigParser(inline_comment_prefixes=("#", ";"))
        try: conf.read(self.path)
        except ConfigParserError as e:
            logging.error("failed to parse config file %s: %s", self.path, e)
            return
        self._config = conf
        logging.info("loaded settings from %s", self.path)

    def get_float(self, section: str, option: str, default: float, minimum: float = 0.0) -> float:
        """
        Read a float option, falling back to the default when it is missing,
        malformed or below the allowed minimum.
        """
        raw = self._config.get(section, option, fallback="").strip()
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            logging.warning("invalid value for [%s] %s: %r, using %s", section, option, raw, default)
            return default
        if value < minimum:
            logging.warning("[%s] %s must be >= %s, using %s", section, option, minimum, default)
            return default
        return value

    def get_str(self, section: str, option: str, default: str | None = None) -> str | None:
        value = self._config.get(section, option, fallback="").strip()
        return value or default

    # typed accessors for the options the daemon understands

    @property
    def poll_interval(self) -> float:
        return self.get_float("general", "poll_interval", POLL_INTERVAL, minimum=0.1)

    @property
    def initial_delay(self) -> float:
        return self.get_float("general", "initial_delay", INITIAL_DELAY)

    @property
    def apply_timeout(self) -> float:
        return self.get_float("general", "apply_timeout", APPLY_TIMEOUT, minimum=0.1)

    @property
    def max_retries(self) -> int:
        return int(self.get_float("general", "max_retries", MAX_RETRIES))

    @property
    def apply_method(self) -> ApplyMethod:
        raw = self.get_str("general", "apply_method", "temporary").lower()
        if raw == "persistent": return ApplyMethod.PERSISTENT
        if raw != "temporary":
            logging.warning("unknown apply_method %r, using temporary", raw)
        return ApplyMethod.TEMPORARY

    @property
    def connector(self) -> str | None:
        return self.get_str("display", "connector")

    @property
    def low_refresh_rate(self) -> float:
        return self.get_float("display", "low_refresh_rate", LOW_REFRESH_RATE, minimum=1.0)

    @property
    def refresh_rate_tolerance(self) -> float:
        return self.get_float("display", "refresh_rate_tolerance", REFRESH_RATE_TOLERANCE)

    @property
    def supply_dir(self) -> str:
        return self.get_str("power", "supply_dir", POWER_SUPPLY_DIR)

    @property
    def online_file(self) -> str | None:
        return self.get_str("power", "online_file")

    @property
    def status_file(self) -> str | None:
        return self.get_str("power", "status_file")

config = _Config()
