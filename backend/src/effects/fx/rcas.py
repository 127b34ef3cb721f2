"""RCAS Sharpen: robust contrast adaptive sharpening for uint8 frames."""

import numpy as np

from sharpen.config import (
    EXTENDED_MAX_SHARPNESS,
    STANDARD_LIMIT,
    LumaMode,
    RCASConfig,
)
from sharpen.kernel import rcas_image
from sharpen.sampler import BorderMode

EFFECT_ID = "fx.rcas"
EFFECT_NAME = "RCAS Sharpen"
EFFECT_CATEGORY = "enhance"

PARAMS: dict = {
    "sharpness": {
        "type": "float",
        "min": 0.0,
        "max": EXTENDED_MAX_SHARPNESS,
        "default": 1.0,
        "label": "Sharpness",
        "curve": "linear",
        "unit": "x",
        "description": "Lobe multiplier (above 1.0 needs extended mode)",
    },
    "limit": {
        "type": "float",
        "min": 0.0,
        "max": STANDARD_LIMIT,
        "default": STANDARD_LIMIT,
        "label": "Limit",
        "curve": "linear",
        "unit": "",
        "description": "Ceiling on the sharpening weight (extended mode only)",
    },
    "denoise": {
        "type": "bool",
        "default": True,
        "label": "Denoise",
        "description": "Attenuate sharpening where the neighborhood looks like noise",
    },
    "passthrough_alpha": {
        "type": "bool",
        "default": False,
        "label": "Pass Through Alpha",
        "description": "Copy source alpha unchanged (otherwise output is opaque)",
    },
    "luma_mode": {
        "type": "choice",
        "choices": [m.value for m in LumaMode],
        "default": LumaMode.WEIGHTED_DOT.value,
        "label": "Luma Mode",
    },
    "extended": {
        "type": "bool",
        "default": False,
        "label": "Extended Features",
        "description": "Unlock sharpness up to 1.3, adjustable limit and green-channel luma",
    },
    "border": {
        "type": "choice",
        "choices": [m.value for m in BorderMode],
        "default": BorderMode.CLAMP.value,
        "label": "Edge Handling",
    },
}


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """RCAS sharpen. Stateless."""
    config = RCASConfig.from_params(params)
    border = params.get("border", BorderMode.CLAMP.value)
    if border not in PARAMS["border"]["choices"]:
        border = BorderMode.CLAMP.value

    rgb = frame[:, :, :3].astype(np.float32) / 255.0
    sharpened = rcas_image(rgb, config, border)

    output = np.empty_like(frame)
    output[:, :, :3] = np.clip(np.rint(sharpened * 255.0), 0, 255).astype(np.uint8)
    if frame.shape[2] == 4:
        output[:, :, 3] = frame[:, :, 3] if config.passthrough_alpha else 255
    return output, None
