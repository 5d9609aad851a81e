"""Tests for the SimulatedSensor class and the channel status mapping."""

import pytest

from multisense_reconfig.errors import TransportFailure, UnsupportedFeature
from multisense_reconfig.interface import (
    CapabilityMode,
    DataSource,
    Feature,
    ImageConfig,
    ImagerType,
    ImuSensorConfig,
    LightingConfig,
    SimulatedSensor,
    Status,
    check_status,
    default_modes,
)


class TestCheckStatus:
    def test_ok(self):
        check_status(Status.OK, "noop")

    def test_unsupported(self):
        with pytest.raises(UnsupportedFeature) as exc:
            check_status(Status.UNSUPPORTED, "set_motor_speed")
        assert exc.value.operation == "set_motor_speed"
        assert exc.value.status == Status.UNSUPPORTED

    @pytest.mark.parametrize("status", [Status.TIMEOUT, Status.ERROR, Status.FAILED])
    def test_transport(self, status):
        with pytest.raises(TransportFailure, match=status.name):
            check_status(status, "get_image_config")


class TestSimulatedSensorBasic:
    def test_identity(self):
        sensor = SimulatedSensor(firmware_version=0x0202, imager_type=ImagerType.CMV4000_COLOR)
        assert sensor.get_version_info().sensor_firmware_version == 0x0202
        assert sensor.get_device_info().imager_type == ImagerType.CMV4000_COLOR

    def test_default_modes_follow_imager(self):
        sensor = SimulatedSensor(imager_type=ImagerType.CMV4000_GREY)
        assert CapabilityMode(2048, 2048, 128) in sensor.get_device_modes()
        assert default_modes(99) == frozenset()

    def test_image_config_round_trip_is_a_copy(self):
        sensor = SimulatedSensor(image_config=ImageConfig(width=2048, height=1088))
        cfg = sensor.get_image_config()
        cfg.fps = 29.0
        assert sensor.image_config.fps != 29.0
        sensor.set_image_config(cfg)
        assert sensor.image_config.fps == 29.0

    def test_stop_and_start_streams(self):
        both = DataSource.LUMA_LEFT | DataSource.DISPARITY
        sensor = SimulatedSensor(enabled_streams=both)
        sensor.stop_streams(DataSource.DISPARITY)
        assert sensor.get_enabled_streams() == DataSource.LUMA_LEFT
        sensor.start_streams(DataSource.DISPARITY)
        assert sensor.get_enabled_streams() == both

    def test_imu_write_updates_only_given_sensors(self):
        sensor = SimulatedSensor()
        sensor.set_imu_config(False, 120, [ImuSensorConfig("magnetometer", False, 1, 1)])
        samples, configs = sensor.get_imu_config()
        assert samples == 120
        assert configs["magnetometer"].enabled is False
        assert configs["accelerometer"].enabled is True

    def test_call_log_order(self):
        sensor = SimulatedSensor()
        sensor.get_image_config()
        sensor.set_motor_speed(10.0)
        sensor.network_time_synchronization(True)
        assert sensor.operations() == [
            "get_image_config",
            "set_motor_speed",
            "network_time_synchronization",
        ]
        assert sensor.calls[1] == ("set_motor_speed", 10.0)


class TestFaultInjection:
    def test_fail_next_call_only(self):
        sensor = SimulatedSensor()
        sensor.fail("get_image_config", Status.TIMEOUT)
        with pytest.raises(TransportFailure):
            sensor.get_image_config()
        sensor.get_image_config()

    def test_fail_multiple_times(self):
        sensor = SimulatedSensor()
        sensor.fail("start_streams", times=2)
        for _ in range(2):
            with pytest.raises(TransportFailure):
                sensor.start_streams(DataSource.IMU)
        sensor.start_streams(DataSource.IMU)
        assert sensor.call_count("start_streams") == 3

    def test_failed_write_leaves_state(self):
        sensor = SimulatedSensor()
        sensor.fail("set_lighting_config")
        with pytest.raises(TransportFailure):
            sensor.set_lighting_config(LightingConfig(flash=True, duty_cycle=50.0))
        assert sensor.lighting is None

    def test_unsupported_features(self):
        sensor = SimulatedSensor(unsupported=[Feature.MOTOR])
        with pytest.raises(UnsupportedFeature):
            sensor.set_motor_speed(1.0)
        sensor.set_lighting_config(LightingConfig())
        sensor.set_unsupported(Feature.LIGHTING)
        with pytest.raises(UnsupportedFeature):
            sensor.set_lighting_config(LightingConfig())


class TestDataModel:
    def test_lighting_duty_cycle_range(self):
        with pytest.raises(ValueError, match="Duty cycle"):
            LightingConfig(duty_cycle=120.0)

    def test_imu_sensor_name(self):
        with pytest.raises(ValueError, match="Unknown IMU sensor"):
            ImuSensorConfig("barometer", True, 0, 0)

    def test_capability_mode_str(self):
        assert str(CapabilityMode(1024, 544, 128)) == "1024x544x128"

    def test_image_config_resolution(self):
        cfg = ImageConfig()
        cfg.set_resolution(CapabilityMode(2048, 1088, 64))
        assert (cfg.width, cfg.height, cfg.disparities) == (2048, 1088, 64)
        assert cfg.mode == CapabilityMode(2048, 1088, 64)
