"""Pydantic message schemas exchanged with the configuration host."""

from shared.messages.camera_config import DesiredCameraConfig
from shared.messages.failures import FailureKind, ReconfigureFailureMessage
