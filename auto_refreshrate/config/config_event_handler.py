import logging
from pyinotify import Event, ProcessEvent

class ConfigEventHandler(ProcessEvent):
    """Reloads the settings whenever the watched config file changes on disk."""

    def __init__(self, config) -> None:
        super().__init__()
        self.config = config

    # create, delete, modify and both move directions all land here
    def process_default(self, event: Event) -> None:
        # editors may save through a backup file ending in "~"
        if event.pathname.rstrip("~") != self.config.path: return
        logging.debug("config file event %s on %s", event.maskname, event.pathname)
        self.config.update_config()
