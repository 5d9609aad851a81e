"""
Configuration variant selection.

The sensor's firmware version decides which configuration schema applies
(IMU support arrived after 0x0202, SGM stereo at 0x0300) and the imager type
decides the imager size. Selection happens once, when the reconciler is built.
"""

from dataclasses import dataclass
from enum import Enum

from multisense_reconfig.errors import FatalConfiguration
from multisense_reconfig.interface.types import ImagerType

# Firmware thresholds
LAST_STEREO_ONLY_FIRMWARE = 0x0202
FIRST_SGM_FIRMWARE = 0x0300


class Variant(str, Enum):
    STEREO_ONLY = "stereo"
    STEREO_PLUS_IMU = "stereo_imu"
    STEREO_IMU_SGM = "stereo_imu_sgm"

    @property
    def has_imu(self) -> bool:
        return self is not Variant.STEREO_ONLY


class ImagerSize(str, Enum):
    CMV2000 = "cmv2000"
    CMV4000 = "cmv4000"


_IMAGER_SIZES = {
    ImagerType.CMV2000_GREY: ImagerSize.CMV2000,
    ImagerType.CMV2000_COLOR: ImagerSize.CMV2000,
    ImagerType.CMV4000_GREY: ImagerSize.CMV4000,
    ImagerType.CMV4000_COLOR: ImagerSize.CMV4000,
}


@dataclass(frozen=True)
class SelectedVariant:
    variant: Variant
    imager_size: ImagerSize

    @property
    def schema_name(self) -> str:
        """Name of the matching configuration schema, e.g. ``sl_sgm_cmv2000_imu``."""
        names = {
            Variant.STEREO_ONLY: "sl_bm_{size}",
            Variant.STEREO_PLUS_IMU: "sl_bm_{size}_imu",
            Variant.STEREO_IMU_SGM: "sl_sgm_{size}_imu",
        }
        return names[self.variant].format(size=self.imager_size.value)


def select_variant(firmware_version: int, imager_type: int) -> SelectedVariant:
    """Pick the configuration variant for a firmware version and imager type.

    Raises:
        FatalConfiguration: the imager type has no configuration schema.
    """
    imager_size = _IMAGER_SIZES.get(imager_type)
    if imager_size is None:
        raise FatalConfiguration(
            f"unsupported imager type \"{imager_type}\" (firmware 0x{firmware_version:04x})",
            "select_variant",
        )

    if firmware_version <= LAST_STEREO_ONLY_FIRMWARE:
        variant = Variant.STEREO_ONLY
    elif firmware_version < FIRST_SGM_FIRMWARE:
        variant = Variant.STEREO_PLUS_IMU
    else:
        variant = Variant.STEREO_IMU_SGM
    return SelectedVariant(variant, imager_size)
