"""
Sensor data model shared by the device boundary and the reconciler.

Exposure times on the device are in microseconds; duty cycles are percent.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum, IntFlag

IMU_SENSOR_NAMES = ("accelerometer", "gyroscope", "magnetometer")


class Status(IntEnum):
    """Device reply status codes."""

    OK = 0
    TIMEOUT = -1
    ERROR = -2
    FAILED = -3
    UNSUPPORTED = -4
    UNKNOWN = -5
    EXCEPTION = -6


class ImagerType(IntEnum):
    CMV2000_GREY = 1
    CMV2000_COLOR = 2
    CMV4000_GREY = 3
    CMV4000_COLOR = 4


class DataSource(IntFlag):
    """Stream selection bitmask."""

    NONE = 0
    RAW_LEFT = 1 << 0
    RAW_RIGHT = 1 << 1
    LUMA_LEFT = 1 << 2
    LUMA_RIGHT = 1 << 3
    LUMA_RECTIFIED_LEFT = 1 << 4
    LUMA_RECTIFIED_RIGHT = 1 << 5
    CHROMA_LEFT = 1 << 6
    CHROMA_RIGHT = 1 << 7
    DISPARITY = 1 << 10
    LIDAR_SCAN = 1 << 24
    IMU = 1 << 25


class Feature(str, Enum):
    """Optional sensor features that may be reported unsupported."""
    LIGHTING = "lighting"
    MOTOR = "motor"


@dataclass(frozen=True)
class CapabilityMode:
    """One row of the sensor's supported-resolution table."""

    width: int
    height: int
    disparities: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}x{self.disparities}"


@dataclass
class ImageConfig:
    """Live or desired imager configuration."""

    width: int = 1024
    height: int = 544
    disparities: int = 128
    fps: float = 10.0
    gain: float = 1.0
    exposure_us: int = 25000
    auto_exposure: bool = True
    auto_exposure_max_us: int = 500000
    auto_exposure_decay: int = 7
    auto_exposure_thresh: float = 0.75
    white_balance_red: float = 1.0
    white_balance_blue: float = 1.0
    auto_white_balance: bool = True
    auto_white_balance_decay: int = 3
    auto_white_balance_thresh: float = 0.5

    @property
    def mode(self) -> CapabilityMode:
        return CapabilityMode(self.width, self.height, self.disparities)

    def set_resolution(self, mode: CapabilityMode) -> None:
        self.width = mode.width
        self.height = mode.height
        self.disparities = mode.disparities

    def copy(self) -> "ImageConfig":
        return replace(self)


@dataclass
class LightingConfig:
    """LED lighting configuration. ``duty_cycle`` is percent on-time."""

    flash: bool = False
    duty_cycle: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.duty_cycle <= 100.0:
            raise ValueError(f"Duty cycle must be within [0, 100], got {self.duty_cycle}")


@dataclass
class ImuSensorConfig:
    """Configuration of one IMU sensor, indexing into its rate/range tables."""

    name: str
    enabled: bool
    rate_table_index: int
    range_table_index: int

    def __post_init__(self):
        if self.name not in IMU_SENSOR_NAMES:
            raise ValueError(f"Unknown IMU sensor '{self.name}'")


@dataclass
class VersionInfo:
    api_version: int = 0x0300
    api_build_date: str = ""
    sensor_firmware_version: int = 0x0300
    sensor_firmware_build_date: str = ""
    sensor_hardware_version: int = 0
    sensor_hardware_magic: int = 0
    sensor_fpga_dna: int = 0


@dataclass
class DeviceInfo:
    name: str = "MultiSense"
    imager_type: int = ImagerType.CMV2000_GREY
    imager_width: int = 2048
    imager_height: int = 1088
    serial_number: str = ""
    extra: dict = field(default_factory=dict)
