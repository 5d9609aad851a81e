"""Tests for configuration variant selection."""

import pytest

from multisense_reconfig.errors import FatalConfiguration
from multisense_reconfig.interface import ImagerType
from multisense_reconfig.reconfigure import ImagerSize, Variant, select_variant


class TestFirmwareRanges:
    @pytest.mark.parametrize(
        "firmware, expected",
        [
            (0x0100, Variant.STEREO_ONLY),
            (0x0150, Variant.STEREO_ONLY),
            (0x0202, Variant.STEREO_ONLY),
            (0x0203, Variant.STEREO_PLUS_IMU),
            (0x02FF, Variant.STEREO_PLUS_IMU),
            (0x0300, Variant.STEREO_IMU_SGM),
            (0x0305, Variant.STEREO_IMU_SGM),
        ],
    )
    def test_boundaries(self, firmware, expected):
        assert select_variant(firmware, ImagerType.CMV2000_GREY).variant is expected

    def test_imu_flag(self):
        assert Variant.STEREO_ONLY.has_imu is False
        assert Variant.STEREO_PLUS_IMU.has_imu is True
        assert Variant.STEREO_IMU_SGM.has_imu is True


class TestImagerTypes:
    def test_grey_and_color_share_size(self):
        grey = select_variant(0x0300, ImagerType.CMV4000_GREY)
        color = select_variant(0x0300, ImagerType.CMV4000_COLOR)
        assert grey == color
        assert grey.imager_size is ImagerSize.CMV4000

    def test_plain_int_imager_code(self):
        assert select_variant(0x0150, 1).imager_size is ImagerSize.CMV2000

    @pytest.mark.parametrize("firmware", [0x0150, 0x0200, 0x0250, 0x0305])
    def test_unknown_imager_is_fatal(self, firmware):
        with pytest.raises(FatalConfiguration, match="unsupported imager type"):
            select_variant(firmware, 42)


class TestExamples:
    def test_old_firmware_grey_cmv2000(self):
        selected = select_variant(0x0150, ImagerType.CMV2000_GREY)
        assert selected.variant is Variant.STEREO_ONLY
        assert selected.schema_name == "sl_bm_cmv2000"

    def test_sgm_firmware_color_cmv4000(self):
        selected = select_variant(0x0305, ImagerType.CMV4000_COLOR)
        assert selected.variant is Variant.STEREO_IMU_SGM
        assert selected.schema_name == "sl_sgm_cmv4000_imu"

    def test_imu_schema_name(self):
        assert select_variant(0x0250, ImagerType.CMV2000_COLOR).schema_name == "sl_bm_cmv2000_imu"
