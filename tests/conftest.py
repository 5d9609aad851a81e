"""
Shared test fixtures for the multisense-reconfig test suite.

The simulated sensor stands in for the device boundary everywhere; tests
inject faults into it and inspect its ordered call log.
"""

from unittest.mock import MagicMock

import pytest

from multisense_reconfig.interface import (
    CapabilityMode,
    DataSource,
    ImageConfig,
    ImagerType,
    SimulatedSensor,
)
from multisense_reconfig.reconfigure import ConfigReconciler
from shared.messages import DesiredCameraConfig

LIVE_MODE = CapabilityMode(1024, 544, 128)
STREAMS = DataSource.LUMA_RECTIFIED_LEFT | DataSource.DISPARITY | DataSource.IMU

SUPPORTED_MODES = frozenset(
    {
        CapabilityMode(1024, 544, 128),
        CapabilityMode(1024, 544, 64),
        CapabilityMode(2048, 1088, 128),
        CapabilityMode(800, 544, 128),
    }
)


@pytest.fixture
def sensor():
    """Simulated SGM/IMU sensor at 1024x544x128 with three streams enabled."""
    return SimulatedSensor(
        firmware_version=0x0300,
        imager_type=ImagerType.CMV2000_GREY,
        modes=SUPPORTED_MODES,
        image_config=ImageConfig(width=1024, height=544, disparities=128),
        enabled_streams=STREAMS,
    )


@pytest.fixture
def resolution_hook():
    return MagicMock(name="on_resolution_changed")


@pytest.fixture
def failure_observer():
    return MagicMock(name="failure_observer")


@pytest.fixture
def reconciler(sensor, resolution_hook, failure_observer):
    r = ConfigReconciler(
        sensor,
        on_resolution_changed=resolution_hook,
        failure_observer=failure_observer,
    )
    # Identification queries are not part of any reconcile cycle
    sensor.calls.clear()
    return r


@pytest.fixture
def desired():
    """Desired config matching the simulated sensor's live resolution and IMU state."""
    return DesiredCameraConfig(resolution=str(LIVE_MODE))
