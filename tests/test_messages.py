"""Tests for the pydantic message schemas."""

import pytest
from pydantic import ValidationError

from shared.messages import DesiredCameraConfig, FailureKind, ReconfigureFailureMessage


class TestDesiredCameraConfig:
    def test_defaults(self):
        cfg = DesiredCameraConfig()
        assert cfg.resolution == "1024x544x128"
        assert cfg.network_time_sync is True
        assert cfg.imu_samples_per_message == 300

    def test_from_json(self):
        cfg = DesiredCameraConfig.model_validate_json(
            '{"resolution": "2048x1088x128", "fps": 15, "lighting": true, "led_duty_cycle": 0.25}'
        )
        assert cfg.fps == 15.0
        assert cfg.lighting is True
        assert cfg.led_duty_cycle == 0.25

    @pytest.mark.parametrize(
        "field, value",
        [("led_duty_cycle", 1.5), ("fps", 0.0), ("gain", 0.5), ("imu_samples_per_message", 0)],
    )
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            DesiredCameraConfig(**{field: value})

    @pytest.mark.parametrize(
        "field, value",
        [("led_duty_cycle", 1.5), ("fps", 0.0), ("gain", 0.5), ("imu_samples_per_message", 0)],
    )
    def test_out_of_range_assignment_rejected(self, field, value):
        cfg = DesiredCameraConfig()
        with pytest.raises(ValidationError):
            setattr(cfg, field, value)
        assert getattr(cfg, field) == DesiredCameraConfig().model_dump()[field]

    def test_resolution_not_validated_by_schema(self):
        assert DesiredCameraConfig(resolution="garbage").resolution == "garbage"


class TestFailureMessage:
    def test_json_dump(self):
        msg = ReconfigureFailureMessage(
            kind=FailureKind.UNSUPPORTED, operation="set_motor_speed", timestamp=1.0
        )
        data = msg.model_dump(mode="json")
        assert data["kind"] == "unsupported"
        assert data["aborted_cycle"] is False
        assert data["status"] is None
