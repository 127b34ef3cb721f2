"""Effect container: wraps a pure effect function with mask + mix and crash isolation."""

import logging
import math

import numpy as np
import sentry_sdk

logger = logging.getLogger(__name__)


def _capture_with_context(e: Exception, effect_id: str, extra: dict):
    """Report to Sentry, tagged and fingerprinted per effect."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("effect_id", effect_id)
        scope.fingerprint = ["effect-crash", effect_id, type(e).__name__]
        scope.set_context("effect", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def _blend(dry: np.ndarray, wet: np.ndarray, weight) -> np.ndarray:
    out = dry.astype(np.float32) * (1.0 - weight) + wet.astype(np.float32) * weight
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


class EffectContainer:
    """Runs one effect: process -> validate -> mix -> mask.

    A failing effect never takes the frame down with it: the input frame
    is returned unchanged and the error is kept on ``last_error``.
    """

    def __init__(self, effect_fn, effect_id: str):
        self.effect_fn = effect_fn
        self.effect_id = effect_id
        self.last_error: Exception | None = None

    def _fail(self, e: Exception, what: str, frame_index: int, ctx: dict):
        self.last_error = e
        _capture_with_context(e, self.effect_id, ctx)
        logger.error(
            "Effect %s %s on frame %d: %s",
            self.effect_id,
            what,
            frame_index,
            type(e).__name__,
        )
        logger.debug("Effect %s error detail: %s", self.effect_id, e)

    def process(
        self,
        frame: np.ndarray,
        params: dict,
        state_in: dict | None,
        *,
        frame_index: int,
        resolution: tuple[int, int],
    ) -> tuple[np.ndarray, dict | None]:
        self.last_error = None

        # NaN/Inf params are dropped so the effect falls back to its default
        effect_params = {
            k: v
            for k, v in params.items()
            if not (isinstance(v, float) and (math.isnan(v) or math.isinf(v)))
        }
        mask = effect_params.pop("_mask", None)
        mix = max(0.0, min(1.0, float(effect_params.pop("_mix", 1.0))))

        # Keys only, never values
        ctx = {
            "frame_index": frame_index,
            "param_keys": list(effect_params.keys()),
            "resolution": resolution,
            "frame_shape": list(frame.shape),
        }

        try:
            wet, state_out = self.effect_fn(
                frame,
                effect_params,
                state_in,
                frame_index=frame_index,
                resolution=resolution,
            )
        except Exception as e:
            self._fail(e, "failed", frame_index, ctx)
            return frame.copy(), state_in

        try:
            if not isinstance(wet, np.ndarray):
                raise TypeError(f"Effect returned {type(wet).__name__}, expected ndarray")
            if wet.shape != frame.shape:
                raise ValueError(
                    f"Effect returned shape {wet.shape}, expected {frame.shape}"
                )
            if wet.dtype != np.uint8:
                wet = np.clip(wet, 0, 255).astype(np.uint8)
        except (TypeError, ValueError) as e:
            self._fail(e, "produced invalid output", frame_index, ctx)
            return frame.copy(), state_in

        try:
            output = wet if mix >= 1.0 else _blend(frame, wet, mix)
            if mask is not None:
                weight = np.asarray(mask, dtype=np.float32)[:, :, np.newaxis]
                output = _blend(frame, output, weight)
        except Exception as e:
            self._fail(e, "mix/mask failed", frame_index, ctx)
            return frame.copy(), state_in

        return output, state_out
