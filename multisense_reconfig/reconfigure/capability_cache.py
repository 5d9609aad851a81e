"""
Lazily fetched sensor capability tables.

Both tables are queried from the sensor on first use and then served from
memory. A failed query, or a sensor reporting an empty resolution table,
leaves the table uncached so the next call queries again.
"""

import copy
import logging
from typing import Dict, FrozenSet, Optional, Tuple

from multisense_reconfig.interface.channel import SensorChannel
from multisense_reconfig.interface.types import CapabilityMode, ImuSensorConfig

logger = logging.getLogger(__name__)


class DeviceCapabilityCache:
    """Fetch-or-use-cached access to the resolution table and IMU config."""

    def __init__(self, channel: SensorChannel):
        self._channel = channel
        self._modes: Optional[FrozenSet[CapabilityMode]] = None
        self._imu_samples_per_message: int = 0
        self._imu_configs: Optional[Dict[str, ImuSensorConfig]] = None

        # Device queries issued so far
        self.modes_query_count = 0
        self.imu_query_count = 0

    def resolution_modes(self) -> FrozenSet[CapabilityMode]:
        """Supported resolution modes. Raises TransportFailure if the query fails."""
        if not self._modes:
            self.modes_query_count += 1
            modes = frozenset(self._channel.get_device_modes())
            logger.debug("Fetched %d sensor resolution modes", len(modes))
            self._modes = modes
        return self._modes

    def imu_config(self) -> Tuple[int, Dict[str, ImuSensorConfig]]:
        """Cached ``(samples_per_message, configs)``; the dict is the live cache."""
        if self._imu_configs is None:
            self.imu_query_count += 1
            samples, configs = self._channel.get_imu_config()
            self._imu_samples_per_message = samples
            self._imu_configs = {name: copy.copy(c) for name, c in configs.items()}
        return self._imu_samples_per_message, self._imu_configs

    def set_imu_samples_per_message(self, samples: int) -> None:
        self._imu_samples_per_message = samples

    def invalidate_imu(self) -> None:
        """Drop the IMU cache so the next call re-queries the sensor."""
        self._imu_configs = None
        self._imu_samples_per_message = 0

    @property
    def has_modes(self) -> bool:
        return bool(self._modes)

    @property
    def has_imu_config(self) -> bool:
        return self._imu_configs is not None
