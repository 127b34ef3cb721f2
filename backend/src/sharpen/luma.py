"""Luma proxy for noise detection. Not used by the sharpening math itself."""

import numpy as np

from sharpen.config import LumaMode

# (R, G, B) weights scaled so green is 1.0; results are in "twice-luma" units.
# Alternative perceptual weighting: (0.598, 1.174, 0.228)
LUMA_WEIGHTS = np.array([0.5, 1.0, 0.5])


def luma(rgb: np.ndarray, mode: LumaMode = LumaMode.WEIGHTED_DOT) -> np.ndarray:
    """Luma of one sample (3,) or a plane (..., 3). Extra channels are ignored."""
    rgb = np.asarray(rgb)
    if mode is LumaMode.GREEN_CHANNEL:
        return rgb[..., 1] * 2.0
    wr, wg, wb = LUMA_WEIGHTS.astype(np.result_type(rgb.dtype, np.float32), copy=False)
    # Elementwise so single samples and planes round identically
    return rgb[..., 0] * wr + rgb[..., 1] * wg + rgb[..., 2] * wb
