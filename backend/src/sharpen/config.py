"""RCAS parameter block: immutable per sweep, clamped at construction."""

import logging
import math
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# Hard ceiling on the lobe magnitude in standard mode
STANDARD_LIMIT = 0.25 - 1.0 / 16.0

STANDARD_MAX_SHARPNESS = 1.0
EXTENDED_MAX_SHARPNESS = 1.3


class LumaMode(str, Enum):
    """Luma proxy used by the noise detector."""

    WEIGHTED_DOT = "weighted_dot"
    GREEN_CHANNEL = "green_channel"


def _finite_or(value, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _flag_or(value, default: bool, name: str) -> bool:
    """Parse an on/off param. Strings are matched by word, never by truthiness."""
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        logger.warning("Unknown %s value %r, using %s", name, value, default)
        return default
    return bool(value)


@dataclass(frozen=True)
class RCASConfig:
    """Filter parameters shared by every pixel of a sweep.

    Out-of-range values are pulled back to the boundary of the active mode
    so the lobe bound always holds. ``extended`` unlocks sharpness up to
    1.3, an adjustable ``limit`` and the green-channel luma.
    """

    sharpness: float = 1.0
    limit: float = STANDARD_LIMIT
    denoise: bool = True
    passthrough_alpha: bool = False
    luma_mode: LumaMode = LumaMode.WEIGHTED_DOT
    extended: bool = False

    def __post_init__(self):
        sharpness = _finite_or(self.sharpness, 1.0)
        clamped = max(0.0, min(self.max_sharpness, sharpness))
        if clamped != sharpness:
            logger.warning(
                "sharpness %.4f outside [0, %.2f], clamped to %.4f",
                sharpness,
                self.max_sharpness,
                clamped,
            )
        object.__setattr__(self, "sharpness", clamped)

        if self.extended:
            limit = _finite_or(self.limit, STANDARD_LIMIT)
            clamped_limit = max(0.0, min(STANDARD_LIMIT, limit))
            if clamped_limit != limit:
                logger.warning(
                    "limit %.4f outside [0, %.4f], clamped to %.4f",
                    limit,
                    STANDARD_LIMIT,
                    clamped_limit,
                )
        else:
            clamped_limit = STANDARD_LIMIT
        object.__setattr__(self, "limit", clamped_limit)

        mode = LumaMode(self.luma_mode)
        if mode is LumaMode.GREEN_CHANNEL and not self.extended:
            logger.warning("green_channel luma requires extended mode, using weighted_dot")
            mode = LumaMode.WEIGHTED_DOT
        object.__setattr__(self, "luma_mode", mode)
        object.__setattr__(self, "denoise", bool(self.denoise))
        object.__setattr__(self, "passthrough_alpha", bool(self.passthrough_alpha))
        object.__setattr__(self, "extended", bool(self.extended))

    @property
    def max_sharpness(self) -> float:
        return EXTENDED_MAX_SHARPNESS if self.extended else STANDARD_MAX_SHARPNESS

    @classmethod
    def from_params(cls, params: dict) -> "RCASConfig":
        """Build a config from an effect params dict. Unknown keys are ignored."""
        luma_mode = params.get("luma_mode", LumaMode.WEIGHTED_DOT.value)
        try:
            luma_mode = LumaMode(luma_mode)
        except ValueError:
            logger.warning("Unknown luma_mode %r, using weighted_dot", luma_mode)
            luma_mode = LumaMode.WEIGHTED_DOT
        return cls(
            sharpness=_finite_or(params.get("sharpness", 1.0), 1.0),
            limit=_finite_or(params.get("limit", STANDARD_LIMIT), STANDARD_LIMIT),
            denoise=_flag_or(params.get("denoise"), True, "denoise"),
            passthrough_alpha=_flag_or(
                params.get("passthrough_alpha"), False, "passthrough_alpha"
            ),
            luma_mode=luma_mode,
            extended=_flag_or(params.get("extended"), False, "extended"),
        )
