"""Contrast limiter and resolver.

The limiter solves for the strongest negative lobe that keeps the 5-tap
blend ``(lobe * (b + d + f + h) + e) / (4 * lobe + 1)`` inside [0, 1],
using the ring extrema in place of the center. The resolver applies the
(single, channel-shared) lobe to every color channel.

All functions broadcast: pass one sample of shape (3,) or planes of
shape (H, W, 3). Channel reductions run over the last axis.
"""

import numpy as np


def ring_extrema(b, d, f, h) -> tuple[np.ndarray, np.ndarray]:
    """Componentwise min and max of the four ring taps (center excluded)."""
    lo = np.minimum(np.minimum(b, d), np.minimum(f, h))
    hi = np.maximum(np.maximum(b, d), np.maximum(f, h))
    return lo, hi


def solve_lobe(b, d, f, h, *, limit: float, sharpness: float, confidence=None):
    """Return the lobe weight, always in [-limit * sharpness, 0].

    The clamp to ``limit`` happens before the sharpness scale, so extended
    sharpness above 1 lets ``|lobe|`` reach ``limit * sharpness``. With the
    extended ceiling of 1.3 that stays below 0.25, keeping ``4 * lobe + 1``
    positive.

    Zero denominators saturate so they never win the channel max:
    ``hitMin`` becomes +inf when the ring max is 0 and ``hitMax`` becomes
    -inf when the ring min is 1.
    """
    lo, hi = ring_extrema(b, d, f, h)
    lo = np.asarray(lo, dtype=np.result_type(lo, np.float32))
    hi = np.asarray(hi, dtype=lo.dtype)

    four_hi = 4.0 * hi
    hit_min = np.divide(lo, four_hi, out=np.full_like(lo, np.inf), where=four_hi != 0)
    hit_max_den = 4.0 * lo - 4.0
    hit_max = np.divide(
        1.0 - hi,
        hit_max_den,
        out=np.full_like(lo, -np.inf),
        where=hit_max_den != 0,
    )

    lobe_rgb = np.maximum(-hit_min, hit_max)
    lobe = np.clip(np.max(lobe_rgb, axis=-1), -limit, 0.0) * sharpness
    if confidence is not None:
        lobe = lobe * confidence
    return np.asarray(lobe)[()]


def resolve(e, b, d, f, h, lobe):
    """Blend the ring into the center with ``lobe``.

    Evaluated as ``e + lobe * (ring - 4e) / (4 * lobe + 1)``, which equals
    the plain weighted average and is exact on flat patches and at lobe 0.
    The reciprocal is a true divide; its rounding visibly shifts tonality.
    """
    e = np.asarray(e)
    e = e.astype(np.result_type(e, np.float32), copy=False)
    lobe = np.asarray(lobe, dtype=e.dtype)[..., np.newaxis]
    ring = (b + d) + (f + h)
    rcp = 1.0 / (4.0 * lobe + 1.0)
    return e + (lobe * (ring - 4.0 * e)) * rcp
