from .channel import SensorChannel, check_status
from .simulated_sensor import SimulatedSensor, default_modes
from .types import (
    IMU_SENSOR_NAMES,
    CapabilityMode,
    DataSource,
    DeviceInfo,
    Feature,
    ImageConfig,
    ImagerType,
    ImuSensorConfig,
    LightingConfig,
    Status,
    VersionInfo,
)

__all__ = [
    "SensorChannel",
    "SimulatedSensor",
    "check_status",
    "default_modes",
    "IMU_SENSOR_NAMES",
    "CapabilityMode",
    "DataSource",
    "DeviceInfo",
    "Feature",
    "ImageConfig",
    "ImagerType",
    "ImuSensorConfig",
    "LightingConfig",
    "Status",
    "VersionInfo",
]
