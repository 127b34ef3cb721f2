"""RCAS Confidence: grayscale view of the RCAS noise detector."""

import numpy as np

from sharpen.config import LumaMode, RCASConfig
from sharpen.kernel import confidence_map
from sharpen.sampler import BorderMode

EFFECT_ID = "debug.rcas_confidence"
EFFECT_NAME = "RCAS Confidence"
EFFECT_CATEGORY = "debug"

PARAMS: dict = {
    "luma_mode": {
        "type": "choice",
        "choices": [m.value for m in LumaMode],
        "default": LumaMode.WEIGHTED_DOT.value,
        "label": "Luma Mode",
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
    """Black = looks like noise (0.5), white = structure (1.0). Alpha preserved."""
    # Debug view shows every luma mode, so unlock it here
    config = RCASConfig.from_params(
        {
            "luma_mode": params.get("luma_mode", LumaMode.WEIGHTED_DOT.value),
            "extended": True,
        }
    )
    border = params.get("border", BorderMode.CLAMP.value)
    if border not in PARAMS["border"]["choices"]:
        border = BorderMode.CLAMP.value

    rgb = frame[:, :, :3].astype(np.float32) / 255.0
    conf = confidence_map(rgb, config, border)
    gray = np.clip(np.rint((conf - 0.5) * 2.0 * 255.0), 0, 255).astype(np.uint8)

    output = frame.copy()
    output[:, :, 0] = gray
    output[:, :, 1] = gray
    output[:, :, 2] = gray
    return output, None
