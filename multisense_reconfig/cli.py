#!/usr/bin/env python3
"""
Apply a desired configuration to a MultiSense sensor once.

Usage:
  multisense-reconfig --simulate --desired desired.json
  multisense-reconfig --simulate --firmware 0x0202 --imager CMV4000_COLOR --desired desired.json

Prints the sensor's version information, runs one reconfigure cycle and
prints its result as JSON. Settings not given on the command line come
from MULTISENSE_* environment variables (see shared.config.device_config).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from multisense_reconfig.interface import ImagerType, SensorChannel, SimulatedSensor
from multisense_reconfig.reconfigure import ConfigReconciler
from shared.config.device_config import DeviceSettings
from shared.messages import DesiredCameraConfig
from shared.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_imager(value: str) -> int:
    """Imager type by name (``CMV2000_GREY``) or raw integer code."""
    try:
        return ImagerType[value.upper()]
    except KeyError:
        pass
    try:
        return int(value, 0)
    except ValueError:
        raise ValueError(f"unknown imager type: {value}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconfigure a MultiSense sensor")
    parser.add_argument("-a", "--address", help="Sensor IPv4 address")
    parser.add_argument("--simulate", action=argparse.BooleanOptionalAction, default=None,
                        help="Use the in-memory simulated sensor")
    parser.add_argument("--firmware", type=lambda v: int(v, 0),
                        help="Simulated firmware version, e.g. 0x0300")
    parser.add_argument("--imager", help="Simulated imager type, by name or integer code")
    parser.add_argument("--desired", type=Path, help="JSON file with the desired configuration")
    parser.add_argument("--log-dir", help="Directory for rotating log files")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def open_channel(settings: DeviceSettings) -> Optional[SensorChannel]:
    if settings.simulate:
        try:
            imager_type = parse_imager(settings.imager)
        except ValueError as e:
            logger.error("%s", e)
            return None
        return SimulatedSensor(
            firmware_version=settings.firmware_version,
            imager_type=imager_type,
        )
    logger.error("No network transport available for %s; use --simulate", settings.address)
    return None


def load_desired(path: Optional[Path]) -> DesiredCameraConfig:
    if path is None:
        return DesiredCameraConfig()
    return DesiredCameraConfig.model_validate_json(path.read_text())


def print_version_info(reconciler: ConfigReconciler) -> None:
    v = reconciler.version_info
    if v is None:
        return
    print(f"API build date      :  {v.api_build_date}")
    print(f"API version         :  0x{v.api_version:04x}")
    print(f"Firmware build date :  {v.sensor_firmware_build_date}")
    print(f"Firmware version    :  0x{v.sensor_firmware_version:04x}")
    print(f"Hardware version    :  0x{v.sensor_hardware_version:x}")
    print(f"Hardware magic      :  0x{v.sensor_hardware_magic:x}")
    print(f"FPGA DNA            :  0x{v.sensor_fpga_dna:x}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = DeviceSettings.from_env()
    if args.address:
        settings.address = args.address
    if args.simulate is not None:
        settings.simulate = args.simulate
    if args.firmware is not None:
        settings.firmware_version = args.firmware
    if args.imager is not None:
        settings.imager = args.imager
    if args.log_dir:
        settings.log_dir = args.log_dir

    setup_logging(component="reconfigure", log_dir=settings.log_dir, debug=args.debug)

    try:
        desired = load_desired(args.desired)
    except (OSError, ValidationError) as e:
        logger.error("Invalid desired configuration: %s", e)
        return 2

    channel = open_channel(settings)
    if channel is None:
        return 1

    reconciler = ConfigReconciler(
        channel,
        on_resolution_changed=lambda: logger.info("Resolution changed"),
    )
    print_version_info(reconciler)
    if not reconciler.enabled:
        return 1

    result = reconciler.reconcile(desired)
    print(json.dumps(result.summary, indent=2))
    return 1 if result.aborted else 0


if __name__ == "__main__":
    sys.exit(main())
