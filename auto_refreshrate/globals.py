from os import getenv, path

APP_NAME = "auto-refreshrate"
APP_VERSION = "0.3.0"
GITHUB = "https://github.com/auto-refreshrate/auto-refreshrate"

POWER_SUPPLY_DIR = "/sys/class/power_supply/"
BATTERY_CHARGING_STATUS = "charging"
BATTERY_FULL_STATUS = "full"

# seconds
POLL_INTERVAL = 2
INITIAL_DELAY = 2
APPLY_TIMEOUT = 10

# consecutive automatic retries of a failing mode change before waiting for the next power change
MAX_RETRIES = 3

LOW_REFRESH_RATE = 60.0
REFRESH_RATE_TOLERANCE = 1.0

USER_CONFIG_DIR = getenv("XDG_CONFIG_HOME", default=path.join(path.expanduser("~"), ".config"))
USER_STATE_DIR = getenv("XDG_STATE_HOME", default=path.join(path.expanduser("~"), ".local", "state"))
LOG_DIR = path.join(USER_STATE_DIR, APP_NAME)
LOG_FILE = path.join(LOG_DIR, "app.log")
