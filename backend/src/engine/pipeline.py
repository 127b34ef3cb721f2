"""Effect pipeline: applies a chain of effects to a frame."""

import logging
import time

import numpy as np
import sentry_sdk

from effects import registry
from engine.container import EffectContainer

logger = logging.getLogger(__name__)

MAX_CHAIN_DEPTH = 10

# Slow-effect warning threshold (milliseconds)
EFFECT_WARN_MS = 250


def apply_chain(
    frame: np.ndarray,
    chain: list[dict],
) -> tuple[np.ndarray, list[tuple[str, Exception]]]:
    """Apply an ordered chain of effects to a frame.

    Args:
        frame: Input frame (H, W, 3|4) uint8.
        chain: Effect instances, each
               {"effect_id": str, "params": dict, "enabled": bool, "mix": float}.

    Returns:
        Tuple of (output_frame, failures). ``failures`` lists
        (effect_id, error) for every effect whose container caught an
        error; those effects passed their input through unchanged.

    Raises:
        ValueError: If the chain exceeds MAX_CHAIN_DEPTH or names an unknown effect.
    """
    if len(chain) > MAX_CHAIN_DEPTH:
        raise ValueError(f"Chain depth {len(chain)} exceeds maximum {MAX_CHAIN_DEPTH}")

    resolution = (frame.shape[1], frame.shape[0])
    output = frame
    failures: list[tuple[str, Exception]] = []

    for position, instance in enumerate(chain):
        if not instance.get("enabled", True):
            continue

        effect_id = instance.get("effect_id")
        info = registry.get(effect_id)
        if info is None:
            raise ValueError(f"unknown effect: {effect_id}")

        sentry_sdk.add_breadcrumb(
            category="effect",
            message=f"Processing {effect_id}",
            data={"chain_position": position, "resolution": resolution},
        )

        params = dict(instance.get("params", {}))
        if "mix" in instance:
            params["_mix"] = instance["mix"]

        container = EffectContainer(info["fn"], effect_id)
        t0 = time.monotonic()
        output, _ = container.process(
            output,
            params,
            None,
            frame_index=0,
            resolution=resolution,
        )
        elapsed_ms = (time.monotonic() - t0) * 1000

        if container.last_error is not None:
            failures.append((effect_id, container.last_error))

        if elapsed_ms > EFFECT_WARN_MS:
            logger.warning(
                "Effect %s took %.0fms (>%dms) on %dx%d frame",
                effect_id,
                elapsed_ms,
                EFFECT_WARN_MS,
                resolution[0],
                resolution[1],
            )

    return output, failures
