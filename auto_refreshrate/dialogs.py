from importlib.metadata import PackageNotFoundError, version
import os
import platform as pl

import distro

from auto_refreshrate.display.state import DisplayState, Monitor
from auto_refreshrate.globals import APP_NAME, APP_VERSION, GITHUB, LOG_FILE
from auto_refreshrate.modules.selector import available_rates
from auto_refreshrate.modules.system_info import PowerInfo
from auto_refreshrate.prints import print_block, print_header, print_info_block, print_separator, print_table

def app_version() -> None: print(f'{APP_NAME} version:', APP_VERSION)

def head() -> None:
    print_block(
        APP_NAME,
        'Power aware display refresh rate switcher for GNOME',
        f'{APP_NAME} version: '+APP_VERSION,
        f'Github: {GITHUB}'
    )

def system_info() -> None:
    print_info_block(
        'System',
        'Linux distro: '+(distro.name(pretty=True) or 'Unknown'),
        'Linux kernel: '+pl.release(),
        'Architecture: '+pl.machine(),
        'Desktop: '+os.getenv('XDG_CURRENT_DESKTOP', 'Unknown'),
        'Session type: '+os.getenv('XDG_SESSION_TYPE', 'Unknown'),
        'Log file: '+LOG_FILE,
    )

def python_info() -> None:
    def pkg_version(pkg:str) -> str:
        try: return f'{pkg} package version: {version(pkg)}'
        except PackageNotFoundError: return f'{pkg} package version: not installed'
    print_info_block(
        'Python',
        'Python version: '+pl.python_version(),
        *map(pkg_version, ('click', 'dasbus', 'distro', 'psutil', 'PyGObject', 'pyinotify'))
    )

def power_info(info:PowerInfo, supply_dir:str) -> None:
    online = 'unreadable' if info.ac_online is None else ('1' if info.ac_online else '0')
    print_info_block(
        'Power',
        'Power supply directory: '+str(supply_dir),
        'AC online: '+online,
        'Battery status: '+(', '.join(info.battery_statuses) or 'unreadable'),
        'Power state: '+info.state.value,
    )

def display_modes(state:DisplayState, target:Monitor | None) -> None:
    for monitor in state.monitors:
        flags = [flag for flag, on in (('built-in', monitor.is_builtin), ('managed', monitor is target)) if on]
        title = f'{monitor.connector} {monitor.display_name}'.strip()
        print_header(title+(f' ({", ".join(flags)})' if flags else ''), color=12)
        print_table(
            [
                (mode.id, f'{mode.width}x{mode.height}', f'{mode.refresh_rate:.2f}',
                 ('current ' if mode.is_current else '')+('preferred' if mode.is_preferred else ''))
                for mode in monitor.modes
            ],
            header=('Mode', 'Resolution', 'Hz', ''),
        )
        print('\nAvailable rates:', ', '.join(map(str, available_rates(monitor.modes)))+'Hz')
        print_separator(12)
