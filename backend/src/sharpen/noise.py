"""Noise detector: confidence that a 5-tap neighborhood is structure, not noise."""

import numpy as np


def _as_float(x) -> np.ndarray:
    x = np.asarray(x)
    if not np.issubdtype(x.dtype, np.floating):
        x = x.astype(np.float64)
    return x


def noise_confidence(bL, dL, eL, fL, hL) -> np.ndarray:
    """Return confidence in [0.5, 1.0] for each neighborhood.

    Compares the center's deviation from the ring average against the
    dynamic range of all five lumas. A center that spans the whole range
    on its own looks like noise (0.5); a center sitting on the ring
    average looks like structure (1.0).

    A zero range means all five lumas are equal, so the highpass is zero
    as well and the neighborhood is scored as structure.
    """
    bL, dL, eL, fL, hL = (_as_float(v) for v in (bL, dL, eL, fL, hL))

    ring_avg = (bL + dL + fL + hL) * 0.25
    highpass = ring_avg - eL
    lo = np.minimum(np.minimum(np.minimum(bL, dL), np.minimum(fL, hL)), eL)
    hi = np.maximum(np.maximum(np.maximum(bL, dL), np.maximum(fL, hL)), eL)
    span = np.asarray(hi - lo)

    normalized = np.divide(
        np.abs(highpass),
        span,
        out=np.zeros(span.shape, dtype=span.dtype),
        where=span != 0,
    )
    normalized = np.clip(normalized, 0.0, 1.0)
    return np.asarray(1.0 - 0.5 * normalized)[()]
