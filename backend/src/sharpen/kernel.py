"""RCAS kernel: per-pixel evaluation and the full-image sweep.

Control flow per pixel: sample 5 taps -> luma x5 -> noise confidence ->
lobe solve -> resolve. Pixels are independent, so the sweep evaluates all
of them at once on shifted views of a padded copy of the source.
"""

import logging

import numpy as np

from sharpen.config import RCASConfig
from sharpen.luma import luma
from sharpen.noise import noise_confidence
from sharpen.resolve import resolve, solve_lobe
from sharpen.sampler import (
    OFFSET_DOWN,
    OFFSET_LEFT,
    OFFSET_RIGHT,
    OFFSET_UP,
    ArraySampler,
    BorderMode,
    NeighborSampler,
    neighborhood,
)

logger = logging.getLogger(__name__)


def _check_image(image: np.ndarray) -> np.ndarray:
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3|4) image, got shape {image.shape}")
    if not np.issubdtype(image.dtype, np.floating):
        raise TypeError(
            f"Expected floating-point samples in [0, 1], got {image.dtype}"
        )
    return image


def _check_sample(sample, offset) -> np.ndarray:
    sample = np.asarray(sample)
    if sample.ndim != 1 or sample.shape[0] < 3:
        raise ValueError(
            f"Sampler returned shape {sample.shape} at offset {offset}, expected (3|4,)"
        )
    if not np.issubdtype(sample.dtype, np.floating):
        raise TypeError(
            f"Expected floating-point samples in [0, 1], got {sample.dtype} at offset {offset}"
        )
    return sample


def _sharpen_taps(b, d, e, f, h, config: RCASConfig):
    """Shared core for a single pixel (3,) or whole planes (H, W, 3)."""
    with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
        confidence = None
        if config.denoise:
            mode = config.luma_mode
            confidence = noise_confidence(
                luma(b, mode), luma(d, mode), luma(e, mode), luma(f, mode), luma(h, mode)
            )
        lobe = solve_lobe(
            b,
            d,
            f,
            h,
            limit=config.limit,
            sharpness=config.sharpness,
            confidence=confidence,
        )
        out = resolve(e, b, d, f, h, lobe)

        # Any non-finite tap: keep the unsharpened center
        finite = np.isfinite(b) & np.isfinite(d) & np.isfinite(e) & np.isfinite(f) & np.isfinite(h)
        finite = np.all(finite, axis=-1, keepdims=True)
        return np.where(finite, out, e).astype(out.dtype, copy=False)


def rcas_pixel(
    sampler: NeighborSampler,
    coord: tuple[int, int],
    config: RCASConfig | None = None,
) -> np.ndarray:
    """Sharpen the pixel at ``coord`` (x, y) using taps from ``sampler``.

    Returns RGB, or RGBA when ``config.passthrough_alpha`` is set and the
    center sample carries alpha. Samples must be floating point; integer
    samples raise ``TypeError`` instead of wrapping in the ring sum.
    """
    if config is None:
        config = RCASConfig()

    center = _check_sample(sampler.sample(coord, (0, 0)), (0, 0))
    taps = [
        _check_sample(sampler.sample(coord, off), off)[:3]
        for off in (OFFSET_UP, OFFSET_LEFT, OFFSET_RIGHT, OFFSET_DOWN)
    ]
    b, d, f, h = taps
    rgb = _sharpen_taps(b, d, center[:3], f, h, config)

    if config.passthrough_alpha and center.shape[-1] == 4:
        return np.concatenate([rgb, center[3:4].astype(rgb.dtype, copy=False)])
    return rgb


def rcas_image(
    image: np.ndarray,
    config: RCASConfig | None = None,
    border: BorderMode | str = BorderMode.CLAMP,
) -> np.ndarray:
    """Sharpen a float (H, W, 3|4) image into a new buffer of the same size.

    Alpha is carried over unchanged when ``config.passthrough_alpha`` is
    set and dropped otherwise. Output is not clamped: a hard single-pixel
    edge may overshoot [0, 1] and is left for the caller to tone-map.
    """
    image = _check_image(image)
    if config is None:
        config = RCASConfig()
    border = BorderMode(border)

    logger.debug(
        "RCAS sweep %dx%d dtype=%s border=%s sharpness=%.3f limit=%.4f denoise=%s",
        image.shape[1],
        image.shape[0],
        image.dtype,
        border.value,
        config.sharpness,
        config.limit,
        config.denoise,
    )

    taps = neighborhood(image[:, :, :3], border)
    rgb = _sharpen_taps(taps.b, taps.d, taps.e, taps.f, taps.h, config)

    if config.passthrough_alpha and image.shape[2] == 4:
        return np.concatenate([rgb, image[:, :, 3:4]], axis=2)
    return rgb


def confidence_map(
    image: np.ndarray,
    config: RCASConfig | None = None,
    border: BorderMode | str = BorderMode.CLAMP,
) -> np.ndarray:
    """Per-pixel noise confidence (H, W) in [0.5, 1.0], regardless of ``denoise``."""
    image = _check_image(image)
    if config is None:
        config = RCASConfig()
    mode = config.luma_mode
    taps = neighborhood(image[:, :, :3], border)
    with np.errstate(invalid="ignore", divide="ignore"):
        return noise_confidence(
            luma(taps.b, mode),
            luma(taps.d, mode),
            luma(taps.e, mode),
            luma(taps.f, mode),
            luma(taps.h, mode),
        )
