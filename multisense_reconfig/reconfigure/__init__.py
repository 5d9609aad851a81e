"""
Reconfigure module for MultiSense sensors.

Selects the configuration variant for a sensor, caches its capability
tables and reconciles desired configurations against the live sensor.
"""

from multisense_reconfig.reconfigure.capability_cache import DeviceCapabilityCache
from multisense_reconfig.reconfigure.capability_flags import CapabilityFlags
from multisense_reconfig.reconfigure.reconciler import (
    RADIANS_PER_SECOND_TO_RPM,
    ConfigReconciler,
    ReconcileResult,
    ReconcileState,
    parse_resolution,
)
from multisense_reconfig.reconfigure.variants import (
    ImagerSize,
    SelectedVariant,
    Variant,
    select_variant,
)

__all__ = [
    "DeviceCapabilityCache",
    "CapabilityFlags",
    "ConfigReconciler",
    "ReconcileResult",
    "ReconcileState",
    "RADIANS_PER_SECOND_TO_RPM",
    "parse_resolution",
    "ImagerSize",
    "SelectedVariant",
    "Variant",
    "select_variant",
]
