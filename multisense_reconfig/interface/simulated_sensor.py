"""
Simulated MultiSense sensor: in-memory implementation of SensorChannel.

Keeps image, stream, IMU, lighting and motor state in memory and records
every boundary call in order. Faults can be injected per operation, and
optional features can be declared unsupported.

Used for:
  - Offline development without a sensor on the network
  - Exercising the reconciler's ordering and failure handling in tests
"""

import copy
import logging
import threading
from collections import defaultdict, deque
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from multisense_reconfig.interface.channel import SensorChannel, check_status
from multisense_reconfig.interface.types import (
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

logger = logging.getLogger(__name__)

# Factory resolution tables per imager size
_CMV2000_MODES = frozenset(
    {
        CapabilityMode(2048, 1088, 0),
        CapabilityMode(2048, 1088, 64),
        CapabilityMode(2048, 1088, 128),
        CapabilityMode(1024, 544, 0),
        CapabilityMode(1024, 544, 64),
        CapabilityMode(1024, 544, 128),
        CapabilityMode(1024, 272, 128),
    }
)
_CMV4000_MODES = frozenset(
    {
        CapabilityMode(2048, 2048, 0),
        CapabilityMode(2048, 2048, 64),
        CapabilityMode(2048, 2048, 128),
        CapabilityMode(1024, 1024, 0),
        CapabilityMode(1024, 1024, 64),
        CapabilityMode(1024, 1024, 128),
    }
)

_DEFAULT_STREAMS = DataSource.LUMA_RECTIFIED_LEFT | DataSource.DISPARITY

_DEFAULT_IMU = {
    "accelerometer": ImuSensorConfig("accelerometer", True, 4, 0),
    "gyroscope": ImuSensorConfig("gyroscope", True, 4, 0),
    "magnetometer": ImuSensorConfig("magnetometer", True, 3, 0),
}


def default_modes(imager_type: int) -> FrozenSet[CapabilityMode]:
    """Factory resolution table for an imager type (empty for unknown imagers)."""
    if imager_type in (ImagerType.CMV2000_GREY, ImagerType.CMV2000_COLOR):
        return _CMV2000_MODES
    if imager_type in (ImagerType.CMV4000_GREY, ImagerType.CMV4000_COLOR):
        return _CMV4000_MODES
    return frozenset()


class SimulatedSensor(SensorChannel):
    """In-memory sensor implementing the SensorChannel boundary.

    Thread-safe: all state access is guarded by a lock.
    """

    def __init__(
        self,
        firmware_version: int = 0x0300,
        imager_type: int = ImagerType.CMV2000_GREY,
        modes: Optional[Iterable[CapabilityMode]] = None,
        image_config: Optional[ImageConfig] = None,
        enabled_streams: DataSource = _DEFAULT_STREAMS,
        imu_samples_per_message: int = 300,
        imu_configs: Optional[Dict[str, ImuSensorConfig]] = None,
        unsupported: Iterable[Feature] = (),
    ) -> None:
        self._lock = threading.Lock()

        self.version_info = VersionInfo(
            api_version=0x0300,
            api_build_date="simulated",
            sensor_firmware_version=firmware_version,
            sensor_firmware_build_date="simulated",
            sensor_hardware_version=0x0001,
            sensor_hardware_magic=0x0001,
            sensor_fpga_dna=0x0,
        )
        self.device_info = DeviceInfo(name="SimulatedMultiSense", imager_type=imager_type)
        self.modes = frozenset(modes) if modes is not None else default_modes(imager_type)

        self.image_config = image_config.copy() if image_config else ImageConfig()
        self.enabled_streams = enabled_streams
        self.imu_samples_per_message = imu_samples_per_message
        self.imu_configs = copy.deepcopy(imu_configs if imu_configs is not None else _DEFAULT_IMU)

        self.lighting: Optional[LightingConfig] = None
        self.motor_rpm: Optional[float] = None
        self.network_time_sync: Optional[bool] = None

        self._unsupported = set(unsupported)
        self._faults: Dict[str, deque] = defaultdict(deque)

        # Ordered record of (operation, argument) for every boundary call
        self.calls: List[Tuple[str, Any]] = []

    # ------------------------------------------------------------------
    # Fault injection
    # ------------------------------------------------------------------

    def fail(self, operation: str, status: Status = Status.FAILED, times: int = 1) -> None:
        """Make the next ``times`` calls to ``operation`` reply with ``status``."""
        with self._lock:
            self._faults[operation].extend([status] * times)

    def set_unsupported(self, feature: Feature) -> None:
        with self._lock:
            self._unsupported.add(feature)

    def call_count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]

    def _begin(self, operation: str, arg: Any = None, feature: Optional[Feature] = None) -> None:
        """Record a call and raise if a fault or unsupported feature applies."""
        self.calls.append((operation, arg))
        status = Status.OK
        if feature is not None and feature in self._unsupported:
            status = Status.UNSUPPORTED
        elif self._faults[operation]:
            status = self._faults[operation].popleft()
        if status != Status.OK:
            logger.debug("SimulatedSensor: %s -> %s", operation, Status(status).name)
        check_status(status, operation)

    # ------------------------------------------------------------------
    # SensorChannel
    # ------------------------------------------------------------------

    def get_version_info(self) -> VersionInfo:
        with self._lock:
            self._begin("get_version_info")
            return copy.copy(self.version_info)

    def get_device_info(self) -> DeviceInfo:
        with self._lock:
            self._begin("get_device_info")
            return copy.deepcopy(self.device_info)

    def get_device_modes(self) -> FrozenSet[CapabilityMode]:
        with self._lock:
            self._begin("get_device_modes")
            return self.modes

    def get_image_config(self) -> ImageConfig:
        with self._lock:
            self._begin("get_image_config")
            return self.image_config.copy()

    def set_image_config(self, config: ImageConfig) -> None:
        with self._lock:
            self._begin("set_image_config", config.copy())
            self.image_config = config.copy()

    def get_enabled_streams(self) -> DataSource:
        with self._lock:
            self._begin("get_enabled_streams")
            return self.enabled_streams

    def stop_streams(self, streams: DataSource) -> None:
        with self._lock:
            self._begin("stop_streams", streams)
            self.enabled_streams = DataSource(self.enabled_streams & ~int(streams))

    def start_streams(self, streams: DataSource) -> None:
        with self._lock:
            self._begin("start_streams", streams)
            self.enabled_streams = DataSource(self.enabled_streams | streams)

    def get_imu_config(self) -> Tuple[int, Dict[str, ImuSensorConfig]]:
        with self._lock:
            self._begin("get_imu_config")
            return self.imu_samples_per_message, copy.deepcopy(self.imu_configs)

    def set_imu_config(
        self, persist: bool, samples_per_message: int, configs: List[ImuSensorConfig]
    ) -> None:
        with self._lock:
            self._begin("set_imu_config", (persist, samples_per_message, copy.deepcopy(configs)))
            self.imu_samples_per_message = samples_per_message
            for c in configs:
                self.imu_configs[c.name] = copy.copy(c)

    def set_lighting_config(self, config: LightingConfig) -> None:
        with self._lock:
            self._begin("set_lighting_config", copy.copy(config), Feature.LIGHTING)
            self.lighting = copy.copy(config)

    def set_motor_speed(self, rpm: float) -> None:
        with self._lock:
            self._begin("set_motor_speed", rpm, Feature.MOTOR)
            self.motor_rpm = rpm

    def network_time_synchronization(self, enabled: bool) -> None:
        with self._lock:
            self._begin("network_time_synchronization", enabled)
            self.network_time_sync = enabled
