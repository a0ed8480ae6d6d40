import gi
gi.require_version("Gtk", "3.0")
gi.require_version("AppIndicator3", "0.1")
from gi.repository import AppIndicator3 as appindicator, GLib, Gtk

import logging
import signal
from typing import List

from auto_refreshrate.display.service import DisplayConfig
from auto_refreshrate.globals import APP_NAME
from auto_refreshrate.modules.controller import ModeController
from auto_refreshrate.modules.observer import EventObserver
from auto_refreshrate.types import PowerStates, StatusIcon, Tier


class TrayIndicator:
    """Status sink shown as an AppIndicator in the panel, with a menu for manual switching."""

    def __init__(self) -> None:
        self.controller: ModeController | None = None
        self.status: str = "Initializing..."
        self.power_state: PowerStates = PowerStates.UNKNOWN

        self.indicator = appindicator.Indicator.new(
            f"{APP_NAME}-tray", StatusIcon.DEFAULT.value, appindicator.IndicatorCategory.HARDWARE
        )
        self.indicator.set_status(appindicator.IndicatorStatus.ACTIVE)
        self.indicator.set_title(APP_NAME)
        self.indicator.set_menu(self.build_menu())

    def build_menu(self) -> Gtk.Menu:
        menu = Gtk.Menu()

        self.status_item = Gtk.MenuItem(label=f"Status: {self.status}")
        self.status_item.set_sensitive(False)
        menu.append(self.status_item)
        menu.append(Gtk.SeparatorMenuItem())

        high = Gtk.MenuItem(label="Set High Refresh Rate")
        high.connect("activate", self.on_request, Tier.HIGH)
        menu.append(high)

        low = Gtk.MenuItem(label="Set Low Refresh Rate")
        low.connect("activate", self.on_request, Tier.LOW)
        menu.append(low)
        menu.append(Gtk.SeparatorMenuItem())

        self.rates_item = Gtk.MenuItem(label="Available rates: Detecting...")
        self.rates_item.set_sensitive(False)
        menu.append(self.rates_item)

        self.info_item = Gtk.MenuItem(label="Power: Detecting... | Mode: Init")
        self.info_item.set_sensitive(False)
        menu.append(self.info_item)
        menu.append(Gtk.SeparatorMenuItem())

        _quit = Gtk.MenuItem(label="Quit")
        _quit.connect("activate", lambda _item: Gtk.main_quit())
        menu.append(_quit)

        menu.show_all()
        return menu

    def on_request(self, _item, tier: Tier) -> None:
        if self.controller is not None:
            self.controller.request_tier(tier)

    def _update_info(self) -> None:
        if self.power_state == PowerStates.UNKNOWN:
            power = "Detecting..."
        else:
            power = "Battery" if self.power_state == PowerStates.BATTERY else "AC Power"
        self.info_item.set_label(f"Power: {power} | Mode: {self.status}")

    # StatusSink

    def set_status(self, text: str, icon: StatusIcon) -> None:
        self.status = text
        self.status_item.set_label(f"Status: {text}")
        self.indicator.set_icon_full(icon.value, text)
        self._update_info()

    def set_available_rates(self, rates: List[int]) -> None:
        self.rates_item.set_label(f"Available rates: {', '.join(str(r) for r in rates)}Hz")

    def set_power_state(self, state: PowerStates) -> None:
        self.power_state = state
        self._update_info()


def main() -> None:
    tray = TrayIndicator()
    controller = ModeController(DisplayConfig(), tray, EventObserver())
    tray.controller = controller

    for signum in (signal.SIGINT, signal.SIGTERM):
        GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signum, Gtk.main_quit)

    controller.start()
    try:
        Gtk.main()
    finally:
        controller.stop()
        logging.info("tray stopped")


if __name__ == "__main__": main()
