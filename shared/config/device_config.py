"""
Device settings for multisense-reconfig.

Sensor address, simulation switch and simulated-sensor identity all come from
environment variables, with a project ``.env`` file loaded first.
Environment variables already set take precedence over the file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_ADDRESS = "10.66.171.21"
DEFAULT_FIRMWARE_VERSION = 0x0300
DEFAULT_IMAGER = "CMV2000_GREY"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    # Accept hex firmware versions such as "0x0202"
    return int(raw, 0)


@dataclass
class DeviceSettings:
    """Connection and simulation settings for one sensor.

    Environment variables:
        MULTISENSE_ADDRESS: sensor IPv4 address
        MULTISENSE_SIMULATE: use the in-memory simulated sensor
        MULTISENSE_FIRMWARE_VERSION: simulated firmware version (int or hex)
        MULTISENSE_IMAGER: simulated imager type name
        MULTISENSE_LOG_DIR: directory for rotating log files
    """

    address: str = DEFAULT_ADDRESS
    simulate: bool = True
    firmware_version: int = DEFAULT_FIRMWARE_VERSION
    imager: str = DEFAULT_IMAGER
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "DeviceSettings":
        load_dotenv(env_file if env_file is not None else PROJECT_ROOT / ".env")
        return cls(
            address=os.getenv("MULTISENSE_ADDRESS", DEFAULT_ADDRESS),
            simulate=_env_bool("MULTISENSE_SIMULATE", "true"),
            firmware_version=_env_int("MULTISENSE_FIRMWARE_VERSION", DEFAULT_FIRMWARE_VERSION),
            imager=os.getenv("MULTISENSE_IMAGER", DEFAULT_IMAGER),
            log_dir=os.getenv("MULTISENSE_LOG_DIR") or None,
        )
