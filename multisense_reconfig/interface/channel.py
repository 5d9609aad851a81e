"""
Sensor channel boundary.

A ``SensorChannel`` is a blocking request/response link to one sensor. Every
call blocks until the sensor replies or the transport gives up; timeouts and
retries belong to the transport, not to callers. Failed calls raise
``TransportFailure``, or ``UnsupportedFeature`` when the sensor declines.
"""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, List, Tuple

from multisense_reconfig.errors import TransportFailure, UnsupportedFeature
from multisense_reconfig.interface.types import (
    CapabilityMode,
    DataSource,
    DeviceInfo,
    ImageConfig,
    ImuSensorConfig,
    LightingConfig,
    Status,
    VersionInfo,
)


def check_status(status: Status, operation: str) -> None:
    """Raise the matching error for a non-OK device status."""
    if status == Status.OK:
        return
    if status == Status.UNSUPPORTED:
        raise UnsupportedFeature(f"{operation}: unsupported by sensor", operation, status)
    raise TransportFailure(f"{operation}: {Status(status).name}", operation, status)


class SensorChannel(ABC):
    """Abstract device boundary consumed by the reconciler."""

    @abstractmethod
    def get_version_info(self) -> VersionInfo:
        ...

    @abstractmethod
    def get_device_info(self) -> DeviceInfo:
        ...

    @abstractmethod
    def get_device_modes(self) -> FrozenSet[CapabilityMode]:
        """Return the supported resolution/disparity table."""

    @abstractmethod
    def get_image_config(self) -> ImageConfig:
        ...

    @abstractmethod
    def set_image_config(self, config: ImageConfig) -> None:
        ...

    @abstractmethod
    def get_enabled_streams(self) -> DataSource:
        ...

    @abstractmethod
    def stop_streams(self, streams: DataSource) -> None:
        ...

    @abstractmethod
    def start_streams(self, streams: DataSource) -> None:
        ...

    @abstractmethod
    def get_imu_config(self) -> Tuple[int, Dict[str, ImuSensorConfig]]:
        """Return ``(samples_per_message, {sensor name: config})``."""

    @abstractmethod
    def set_imu_config(
        self, persist: bool, samples_per_message: int, configs: List[ImuSensorConfig]
    ) -> None:
        """Write IMU settings. ``configs`` holds only changed sensors and may be empty."""

    @abstractmethod
    def set_lighting_config(self, config: LightingConfig) -> None:
        ...

    @abstractmethod
    def set_motor_speed(self, rpm: float) -> None:
        ...

    @abstractmethod
    def network_time_synchronization(self, enabled: bool) -> None:
        """Enable or disable host clock offset tracking. No reply is expected."""
