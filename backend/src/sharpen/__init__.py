"""Robust Contrast Adaptive Sharpening (RCAS) numeric core."""

from sharpen.config import (
    EXTENDED_MAX_SHARPNESS,
    STANDARD_LIMIT,
    STANDARD_MAX_SHARPNESS,
    LumaMode,
    RCASConfig,
)
from sharpen.kernel import confidence_map, rcas_image, rcas_pixel
from sharpen.sampler import ArraySampler, BorderMode, NeighborSampler

__all__ = [
    "EXTENDED_MAX_SHARPNESS",
    "STANDARD_LIMIT",
    "STANDARD_MAX_SHARPNESS",
    "ArraySampler",
    "BorderMode",
    "LumaMode",
    "NeighborSampler",
    "RCASConfig",
    "confidence_map",
    "rcas_image",
    "rcas_pixel",
]
