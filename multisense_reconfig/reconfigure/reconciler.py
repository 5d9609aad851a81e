"""
Sensor configuration reconciler.

Turns a desired configuration into the sequence of sensor commands that
brings the live sensor in line with it:

  1. read the live image config (failure ends the cycle)
  2. decide whether the resolution must change, validating the request
     against the sensor's resolution table
  3. for a resolution change, stop the enabled streams
  4. write frame rate, gain, exposure and white balance in one call
  5. notify the resolution observer and restart the stopped streams
  6. motor speed, lighting and network time sync, each independently
  7. IMU sensor settings, for variants that carry an IMU

Streams stopped in step 3 are always restarted in step 5 of the same cycle.
Lighting and motor writes stop for good once the sensor reports them
unsupported.
"""

import copy
import logging
import re
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from multisense_reconfig.errors import (
    FatalConfiguration,
    ReconfigureError,
    UnsupportedFeature,
    ValidationFailure,
)
from multisense_reconfig.interface.channel import SensorChannel
from multisense_reconfig.interface.types import (
    IMU_SENSOR_NAMES,
    CapabilityMode,
    DataSource,
    DeviceInfo,
    Feature,
    ImageConfig,
    LightingConfig,
    VersionInfo,
)
from multisense_reconfig.reconfigure.capability_cache import DeviceCapabilityCache
from multisense_reconfig.reconfigure.capability_flags import CapabilityFlags
from multisense_reconfig.reconfigure.variants import SelectedVariant, Variant, select_variant
from shared.messages import DesiredCameraConfig, FailureKind, ReconfigureFailureMessage

logger = logging.getLogger(__name__)

RADIANS_PER_SECOND_TO_RPM = 9.54929659643
SECONDS_TO_MICROSECONDS = 1e6

_RESOLUTION_RE = re.compile(r"\s*(-?\d+)x(-?\d+)x(-?\d+)")

_FAILURE_LOG_LEVELS = {
    FailureKind.TRANSPORT: logging.ERROR,
    FailureKind.VALIDATION: logging.ERROR,
    FailureKind.FATAL: logging.ERROR,
    FailureKind.UNSUPPORTED: logging.INFO,
}


class ReconcileState(str, Enum):
    IDLE = "idle"
    STREAMS_PAUSED_FOR_RESIZE = "streams_paused_for_resize"


@dataclass
class ReconcileResult:
    """Outcome of one reconcile cycle."""
    aborted: bool = False
    resolution_changed: bool = False
    streams_restarted: bool = False
    imu_written: bool = False
    failures: list[ReconfigureFailureMessage] = field(default_factory=list)
    state: ReconcileState = ReconcileState.IDLE

    @property
    def ok(self) -> bool:
        return not self.failures

    def failures_of(self, kind: FailureKind) -> list[ReconfigureFailureMessage]:
        return [f for f in self.failures if f.kind == kind]

    @property
    def summary(self) -> dict:
        return {
            "aborted": self.aborted,
            "resolution_changed": self.resolution_changed,
            "streams_restarted": self.streams_restarted,
            "imu_written": self.imu_written,
            "state": self.state.value,
            "failures": [f.model_dump(mode="json") for f in self.failures],
        }


def parse_resolution(text: str) -> CapabilityMode:
    """Parse a ``WIDTHxHEIGHTxDISPARITIES`` string.

    Raises:
        ValidationFailure: the string does not hold three integers.
    """
    m = _RESOLUTION_RE.match(text or "")
    if m is None:
        raise ValidationFailure(f"malformed resolution string: \"{text}\"", "parse_resolution")
    width, height, disparities = (int(g) for g in m.groups())
    return CapabilityMode(width, height, disparities)


class ConfigReconciler:
    """Applies desired configurations to one sensor.

    The configuration variant is chosen once, here in the constructor. If the
    sensor cannot be identified or has no matching variant the reconciler
    stays disabled and rejects every ``reconcile()`` call without touching
    the sensor.

    Args:
        channel: device boundary for the sensor
        on_resolution_changed: called with no arguments after a new
            resolution is written and before streams are restarted
        failure_observer: called with each ReconfigureFailureMessage
    """

    def __init__(
        self,
        channel: SensorChannel,
        on_resolution_changed: Optional[Callable[[], None]] = None,
        failure_observer: Optional[Callable[[ReconfigureFailureMessage], None]] = None,
    ):
        self._channel = channel
        self._on_resolution_changed = on_resolution_changed
        self._failure_observer = failure_observer
        self._lock = threading.Lock()

        self.capabilities = DeviceCapabilityCache(channel)
        self.flags = CapabilityFlags()
        self.state = ReconcileState.IDLE

        self.version_info: Optional[VersionInfo] = None
        self.device_info: Optional[DeviceInfo] = None
        self.selected: Optional[SelectedVariant] = None
        self.disabled_reason: Optional[str] = None

        try:
            self.version_info = channel.get_version_info()
        except ReconfigureError as e:
            self._disable(f"failed to query version info: {e}")
            return
        try:
            self.device_info = channel.get_device_info()
        except ReconfigureError as e:
            self._disable(f"failed to query device info: {e}")
            return

        try:
            self.selected = select_variant(
                self.version_info.sensor_firmware_version, self.device_info.imager_type
            )
        except FatalConfiguration as e:
            self._disable(str(e))
            return

        logger.info(
            "Reconfigure: firmware 0x%04x, using %s configuration",
            self.version_info.sensor_firmware_version,
            self.selected.schema_name,
        )

    def _disable(self, reason: str) -> None:
        self.disabled_reason = reason
        logger.error("Reconfigure: %s", reason)

    @property
    def enabled(self) -> bool:
        return self.selected is not None

    @property
    def variant(self) -> Optional[Variant]:
        return self.selected.variant if self.selected else None

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def reconcile(self, desired: DesiredCameraConfig) -> ReconcileResult:
        """Run one reconfigure cycle. Never raises for sensor-side failures."""
        result = ReconcileResult()
        if not self.enabled:
            self._report(
                result,
                FailureKind.FATAL,
                "reconcile",
                f"reconfigure disabled: {self.disabled_reason}",
                aborted=True,
            )
            return result

        with self._lock:
            self._configure_camera(desired, result)
            if result.aborted:
                return result

            # SGM stereo adds no tunable parameters beyond the IMU variant's
            if self.selected.variant.has_imu:
                self._configure_imu(desired, result)

            result.state = self.state
        return result

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def _configure_camera(self, desired: DesiredCameraConfig, result: ReconcileResult) -> None:
        """Apply imager, motor, lighting and time sync settings."""
        try:
            cfg = self._channel.get_image_config()
        except ReconfigureError as e:
            self._report_error(result, "get_image_config", e, "failed to query image config",
                               aborted=True)
            return

        target = self._resolution_change(cfg, desired.resolution, result)
        if result.aborted:
            return

        streams: Optional[DataSource] = None
        if target is not None:
            streams = self._pause_streams(result)
            if streams is None:
                return
            logger.warning(
                "Reconfigure: changing sensor resolution to %s, from %s: "
                "reconfiguration may take up to 30 seconds",
                target,
                cfg.mode,
            )
            cfg.set_resolution(target)

        try:
            written = self._apply_image_config(cfg, desired, result)
            result.resolution_changed = target is not None and written
        finally:
            if streams is not None:
                self._resume_streams(streams, result)

        self._apply_motor_speed(desired, result)
        self._apply_lighting(desired, result)
        self._apply_time_sync(desired, result)

    def _resolution_change(
        self, cfg: ImageConfig, resolution: str, result: ReconcileResult
    ) -> Optional[CapabilityMode]:
        """Return the mode to switch to, or None to keep the live resolution.

        A failed resolution table query marks the cycle aborted.
        """
        try:
            wanted = parse_resolution(resolution)
        except ValidationFailure as e:
            self._report_error(result, "parse_resolution", e, "resolution change rejected")
            return None

        if wanted == cfg.mode:
            return None

        try:
            modes = self.capabilities.resolution_modes()
        except ReconfigureError as e:
            self._report_error(result, "get_device_modes", e, "failed to query sensor modes",
                               aborted=True)
            return None

        if wanted not in modes:
            self._report(
                result,
                FailureKind.VALIDATION,
                "resolution",
                f"sensor does not support a resolution of: {wanted.width}x{wanted.height} "
                f"({wanted.disparities} disparities)",
            )
            return None
        return wanted

    def _pause_streams(self, result: ReconcileResult) -> Optional[DataSource]:
        """Stop every enabled stream. Returns the stopped set, or None on failure."""
        try:
            streams = self._channel.get_enabled_streams()
        except ReconfigureError as e:
            self._report_error(result, "get_enabled_streams", e, "failed to get enabled streams",
                               aborted=True)
            return None
        try:
            self._channel.stop_streams(streams)
        except ReconfigureError as e:
            self._report_error(result, "stop_streams", e,
                               "failed to stop streams for a resolution change", aborted=True)
            return None

        self.state = ReconcileState.STREAMS_PAUSED_FOR_RESIZE
        logger.debug("Reconfigure: paused streams %r for resolution change", streams)
        return streams

    def _resume_streams(self, streams: DataSource, result: ReconcileResult) -> None:
        try:
            if self._on_resolution_changed is not None:
                try:
                    self._on_resolution_changed()
                except Exception as e:
                    logger.error("Reconfigure: resolution change observer failed: %s", e)
            try:
                self._channel.start_streams(streams)
                result.streams_restarted = True
            except ReconfigureError as e:
                self._report_error(result, "start_streams", e,
                                   "failed to restart streams after a resolution change")
        finally:
            self.state = ReconcileState.IDLE

    def _apply_image_config(
        self, cfg: ImageConfig, desired: DesiredCameraConfig, result: ReconcileResult
    ) -> bool:
        """Copy desired imager settings into ``cfg`` and write it. Sensor enforces limits."""
        cfg.fps = desired.fps
        cfg.gain = desired.gain
        cfg.exposure_us = int(desired.exposure_time * SECONDS_TO_MICROSECONDS)
        cfg.auto_exposure = desired.auto_exposure
        cfg.auto_exposure_max_us = int(desired.auto_exposure_max_time * SECONDS_TO_MICROSECONDS)
        cfg.auto_exposure_decay = desired.auto_exposure_decay
        cfg.auto_exposure_thresh = desired.auto_exposure_thresh
        cfg.white_balance_red = desired.white_balance_red
        cfg.white_balance_blue = desired.white_balance_blue
        cfg.auto_white_balance = desired.auto_white_balance
        cfg.auto_white_balance_decay = desired.auto_white_balance_decay
        cfg.auto_white_balance_thresh = desired.auto_white_balance_thresh

        try:
            self._channel.set_image_config(cfg)
            return True
        except ReconfigureError as e:
            self._report_error(result, "set_image_config", e, "failed to set image config")
            return False

    def _apply_motor_speed(self, desired: DesiredCameraConfig, result: ReconcileResult) -> None:
        if not self.flags.motor_supported:
            return
        try:
            self._channel.set_motor_speed(RADIANS_PER_SECOND_TO_RPM * desired.motor_speed)
        except UnsupportedFeature as e:
            self.flags.mark_unsupported(Feature.MOTOR)
            self._report_error(result, "set_motor_speed", e, "motor not supported")
        except ReconfigureError as e:
            self._report_error(result, "set_motor_speed", e, "failed to set motor speed")

    def _apply_lighting(self, desired: DesiredCameraConfig, result: ReconcileResult) -> None:
        if not self.flags.lighting_supported:
            return

        if not desired.lighting:
            leds = LightingConfig(flash=False, duty_cycle=0.0)
        else:
            leds = LightingConfig(flash=desired.flash, duty_cycle=desired.led_duty_cycle * 100.0)

        try:
            self._channel.set_lighting_config(leds)
        except UnsupportedFeature as e:
            self.flags.mark_unsupported(Feature.LIGHTING)
            self._report_error(result, "set_lighting_config", e, "lighting not supported")
        except ReconfigureError as e:
            self._report_error(result, "set_lighting_config", e, "failed to set lighting config")

    def _apply_time_sync(self, desired: DesiredCameraConfig, result: ReconcileResult) -> None:
        # Enabled: timestamps in the host clock frame. Disabled: free-running sensor clock.
        try:
            self._channel.network_time_synchronization(desired.network_time_sync)
        except ReconfigureError as e:
            self._report_error(result, "network_time_synchronization", e,
                               "failed to set network time synchronization")

    # ------------------------------------------------------------------
    # IMU
    # ------------------------------------------------------------------

    def _configure_imu(self, desired: DesiredCameraConfig, result: ReconcileResult) -> None:
        """Write IMU sensor settings that differ from the cached sensor state."""
        try:
            samples, cached = self.capabilities.imu_config()
        except ReconfigureError as e:
            self._report_error(result, "get_imu_config", e, "failed to query IMU config")
            return

        wanted = {
            "accelerometer": (
                desired.accelerometer_enabled,
                desired.accelerometer_rate,
                desired.accelerometer_range,
            ),
            "gyroscope": (
                desired.gyroscope_enabled,
                desired.gyroscope_rate,
                desired.gyroscope_range,
            ),
            "magnetometer": (
                desired.magnetometer_enabled,
                desired.magnetometer_rate,
                desired.magnetometer_range,
            ),
        }

        changed = []
        for name in IMU_SENSOR_NAMES:
            entry = cached.get(name)
            if entry is None:
                continue
            enabled, rate, rng = wanted[name]
            if (entry.enabled, entry.rate_table_index, entry.range_table_index) != (enabled, rate, rng):
                entry.enabled = enabled
                entry.rate_table_index = rate
                entry.range_table_index = rng
                changed.append(copy.copy(entry))

        if not changed and samples == desired.imu_samples_per_message:
            return

        logger.warning(
            "Reconfigure: IMU configuration changes will take effect after all IMU "
            "consumers have disconnected."
        )
        self.capabilities.set_imu_samples_per_message(desired.imu_samples_per_message)

        try:
            self._channel.set_imu_config(False, desired.imu_samples_per_message, changed)
            result.imu_written = True
        except ReconfigureError as e:
            self._report_error(result, "set_imu_config", e, "failed to set IMU configuration")
            self.capabilities.invalidate_imu()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _report_error(
        self,
        result: ReconcileResult,
        operation: str,
        error: ReconfigureError,
        context: str,
        aborted: bool = False,
    ) -> None:
        if isinstance(error, UnsupportedFeature):
            kind = FailureKind.UNSUPPORTED
        elif isinstance(error, ValidationFailure):
            kind = FailureKind.VALIDATION
        elif isinstance(error, FatalConfiguration):
            kind = FailureKind.FATAL
        else:
            kind = FailureKind.TRANSPORT
        status = getattr(error.status, "name", None)
        self._report(result, kind, operation, f"{context}: {error}", status=status, aborted=aborted)

    def _report(
        self,
        result: ReconcileResult,
        kind: FailureKind,
        operation: str,
        message: str,
        status: Optional[str] = None,
        aborted: bool = False,
    ) -> None:
        failure = ReconfigureFailureMessage(
            kind=kind,
            operation=operation,
            message=message,
            status=status,
            aborted_cycle=aborted,
            timestamp=time.time(),
        )
        result.failures.append(failure)
        if aborted:
            result.aborted = True
        logger.log(_FAILURE_LOG_LEVELS[kind], "Reconfigure: %s", message)

        if self._failure_observer is not None:
            try:
                self._failure_observer(failure)
            except Exception as e:
                logger.error("Reconfigure: failure observer raised: %s", e)
