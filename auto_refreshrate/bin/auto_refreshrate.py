#!/usr/bin/env python3
#
# auto-refreshrate - Power aware display refresh rate switcher for GNOME

import logging
import signal
import sys

import click

from auto_refreshrate.config.config import config as conf, find_config_file
from auto_refreshrate.dialogs import app_version, display_modes, head, power_info, python_info, system_info
from auto_refreshrate.globals import APP_NAME
from auto_refreshrate.modules.system_info import PowerSupply
from auto_refreshrate.prints import print_error, print_info
from auto_refreshrate.tools import is_running, setup_logger
from auto_refreshrate.types import StatusIcon, Tier, tier_for_power_state

@click.command()
@click.option("--daemon", is_flag=True, help="Switch the refresh rate automatically, reporting status to the log")
@click.option("--tray", is_flag=True, help="Switch the refresh rate automatically, with a tray indicator")
@click.option("--set", "set_tier", type=click.Choice([t.value for t in Tier]), help="Apply the high or low refresh rate once and exit")
@click.option("--list-modes", is_flag=True, help="List monitors and their display modes")
@click.option("--get-state", is_flag=True, help="Show the current power source")
@click.option("--config", is_flag=False, required=False, help="Use config file at defined path")
@click.option("--verbose", is_flag=True, help="Log debug messages")
@click.option("--debug", is_flag=True, help="Show debug info (include when submitting bugs)")
@click.option("--version", is_flag=True, help="Show currently installed version")
@click.pass_context
def main(ctx, daemon, tray, set_tier, list_modes, get_state, config, verbose, debug, version):
    # display info if config file is used
    config_path = find_config_file(config)
    conf.set_path(config_path)
    def config_info_dialog():
        if conf.has_config():
            print_info("Using settings defined in " + config_path + " file")

    if len(sys.argv) == 1:
        head()
        print("\nExample usage:\n" + APP_NAME + " --tray\n")
        click.echo(ctx.get_help())
    elif daemon or tray:
        single_instance_check("--daemon", "--tray")
        config_info_dialog()
        setup_logger(verbose)
        conf.notifier.start()
        try:
            if tray:
                from auto_refreshrate.gui.tray import main as tray_main
                tray_main()
            else:
                run_daemon()
        finally:
            conf.notifier.stop()
    elif set_tier:
        setup_logger(verbose)
        sys.exit(0 if apply_once(Tier(set_tier)) else 1)
    elif list_modes:
        setup_logger(verbose)
        list_display_modes()
    elif get_state:
        supply = PowerSupply(conf.supply_dir, conf.online_file, conf.status_file)
        print(f"{supply.read_state().value} ({tier_for_power_state(supply.poll()).value} refresh rate)")
    elif debug:
        config_info_dialog()
        head()
        system_info()
        python_info()
        power_info(PowerSupply(conf.supply_dir, conf.online_file, conf.status_file).power_info(), conf.supply_dir)
    elif version:
        app_version()


def single_instance_check(*modes:str) -> None:
    for mode in modes:
        if is_running(APP_NAME, mode):
            print_error(f"{APP_NAME} is already running in {mode.lstrip('-')} mode.")
            sys.exit(1)


def run_daemon() -> None:
    """Headless mode: status updates go to the log, runs until SIGINT/SIGTERM."""
    from dasbus.loop import EventLoop
    from gi.repository import GLib

    from auto_refreshrate.display.service import DisplayConfig
    from auto_refreshrate.modules.controller import ModeController
    from auto_refreshrate.modules.observer import EventObserver
    from auto_refreshrate.modules.status import LogStatusSink

    loop = EventLoop()
    controller = ModeController(DisplayConfig(), LogStatusSink(), EventObserver())

    def on_signal():
        logging.info("daemon interrupted, shutting down")
        loop.quit()
        return GLib.SOURCE_REMOVE

    for signum in (signal.SIGINT, signal.SIGTERM):
        GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signum, on_signal)

    logging.info("starting %s daemon", APP_NAME)
    controller.start()
    try:
        loop.run()
    finally:
        controller.stop()


def apply_once(tier:Tier) -> bool:
    """Apply ``tier`` and wait for the result; True on success."""
    from dasbus.loop import EventLoop

    from auto_refreshrate.display.service import DisplayConfig
    from auto_refreshrate.modules.controller import ModeController
    from auto_refreshrate.modules.status import LogStatusSink

    loop = EventLoop()

    class OneShotSink(LogStatusSink):
        def set_status(self, text:str, icon:StatusIcon) -> None:
            super().set_status(text, icon)
            if icon != StatusIcon.DEFAULT: loop.quit()

    sink = OneShotSink()
    controller = ModeController(DisplayConfig(), sink)
    controller.start()
    try:
        controller.request_tier(tier)
        # the request may already have failed without reaching the loop
        if controller.busy: loop.run()
    finally:
        controller.stop()
    return sink.icon != StatusIcon.ERROR


def list_display_modes() -> None:
    from dasbus.loop import EventLoop

    from auto_refreshrate.display.service import DisplayConfig

    display = DisplayConfig()
    loop = EventLoop()
    result = {}

    def on_state(state, error):
        result.update(state=state, error=error)
        loop.quit()

    def on_connected(error):
        if error is not None:
            result.update(state=None, error=error)
            loop.quit()
            return
        display.get_current_state(on_state)

    try:
        display.connect(on_connected)
        loop.run()
    finally:
        display.disconnect()

    if result.get("state") is None:
        print_error("Unable to read display state:", result.get("error"))
        sys.exit(1)
    state = result["state"]
    display_modes(state, state.target_monitor(conf.connector))


if __name__ == "__main__":
    main()
