"""Sticky optional-feature support flags."""

import logging
from dataclasses import dataclass

from multisense_reconfig.interface.types import Feature

logger = logging.getLogger(__name__)


@dataclass
class CapabilityFlags:
    """Whether lighting and motor writes may still be attempted.

    Flags start True and only ever go to False, through ``mark_unsupported``.
    """

    lighting_supported: bool = True
    motor_supported: bool = True

    def is_supported(self, feature: Feature) -> bool:
        if feature is Feature.LIGHTING:
            return self.lighting_supported
        return self.motor_supported

    def mark_unsupported(self, feature: Feature) -> None:
        if not self.is_supported(feature):
            return
        logger.info("Sensor does not support %s; disabling it for this session", feature.value)
        if feature is Feature.LIGHTING:
            self.lighting_supported = False
        else:
            self.motor_supported = False
