"""Pydantic model for the desired sensor configuration delivered by the host."""

from pydantic import BaseModel, Field


class DesiredCameraConfig(BaseModel):
    """Desired camera, lighting, motor and IMU state for one reconfigure cycle.

    Times are in seconds, motor speed in rad/s and the LED duty cycle is a
    fraction. The resolution string is parsed at reconcile time so that a
    malformed value only rejects the resolution change.
    """

    resolution: str = Field(default="1024x544x128", description="WIDTHxHEIGHTxDISPARITIES")
    fps: float = Field(default=10.0, gt=0.0, le=30.0, description="Frames per second")
    gain: float = Field(default=1.0, ge=1.0, le=8.0, description="Imager gain")

    exposure_time: float = Field(default=0.025, ge=0.0, le=0.5, description="Manual exposure (s)")
    auto_exposure: bool = True
    auto_exposure_max_time: float = Field(default=0.5, ge=0.0, le=0.5, description="Auto exposure ceiling (s)")
    auto_exposure_decay: int = Field(default=7, ge=0, le=20)
    auto_exposure_thresh: float = Field(default=0.75, ge=0.0, le=1.0)

    white_balance_red: float = Field(default=1.0, ge=0.25, le=4.0)
    white_balance_blue: float = Field(default=1.0, ge=0.25, le=4.0)
    auto_white_balance: bool = True
    auto_white_balance_decay: int = Field(default=3, ge=0, le=20)
    auto_white_balance_thresh: float = Field(default=0.5, ge=0.0, le=1.0)

    motor_speed: float = Field(default=0.0, ge=0.0, le=5.2, description="Laser spindle speed (rad/s)")

    lighting: bool = False
    flash: bool = False
    led_duty_cycle: float = Field(default=0.0, ge=0.0, le=1.0, description="LED duty cycle (0-1)")

    network_time_sync: bool = True

    accelerometer_enabled: bool = True
    accelerometer_rate: int = Field(default=4, ge=0)
    accelerometer_range: int = Field(default=0, ge=0)
    gyroscope_enabled: bool = True
    gyroscope_rate: int = Field(default=4, ge=0)
    gyroscope_range: int = Field(default=0, ge=0)
    magnetometer_enabled: bool = True
    magnetometer_rate: int = Field(default=3, ge=0)
    magnetometer_range: int = Field(default=0, ge=0)
    imu_samples_per_message: int = Field(default=300, ge=1)

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "resolution": "2048x1088x128",
                "fps": 15.0,
                "gain": 2.0,
                "auto_exposure": False,
                "exposure_time": 0.01,
                "lighting": True,
                "flash": True,
                "led_duty_cycle": 0.4,
                "motor_speed": 1.57,
            }
        }
