"""Tests for sharpen.config: clamping and mode gating of the parameter block."""

import dataclasses
import logging

import pytest

from sharpen.config import (
    EXTENDED_MAX_SHARPNESS,
    STANDARD_LIMIT,
    LumaMode,
    RCASConfig,
)

pytestmark = pytest.mark.smoke


def test_defaults():
    cfg = RCASConfig()
    assert cfg.sharpness == 1.0
    assert cfg.limit == pytest.approx(0.1875)
    assert cfg.denoise is True
    assert cfg.passthrough_alpha is False
    assert cfg.luma_mode is LumaMode.WEIGHTED_DOT
    assert cfg.extended is False


def test_standard_limit_constant():
    assert STANDARD_LIMIT == 0.25 - 1.0 / 16.0 == 0.1875


def test_frozen():
    cfg = RCASConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.sharpness = 0.5


def test_sharpness_clamped_in_standard_mode(caplog):
    with caplog.at_level(logging.WARNING, logger="sharpen.config"):
        cfg = RCASConfig(sharpness=1.25)
    assert cfg.sharpness == 1.0
    assert "clamped" in caplog.text


def test_sharpness_extended_range():
    assert RCASConfig(sharpness=1.25, extended=True).sharpness == 1.25
    assert RCASConfig(sharpness=5.0, extended=True).sharpness == EXTENDED_MAX_SHARPNESS


def test_negative_sharpness_clamped_to_zero():
    assert RCASConfig(sharpness=-0.5).sharpness == 0.0


def test_limit_fixed_in_standard_mode():
    assert RCASConfig(limit=0.05).limit == STANDARD_LIMIT


def test_limit_adjustable_in_extended_mode():
    assert RCASConfig(limit=0.05, extended=True).limit == 0.05
    assert RCASConfig(limit=0.9, extended=True).limit == STANDARD_LIMIT
    assert RCASConfig(limit=-1.0, extended=True).limit == 0.0


def test_green_channel_requires_extended():
    assert RCASConfig(luma_mode=LumaMode.GREEN_CHANNEL).luma_mode is LumaMode.WEIGHTED_DOT
    cfg = RCASConfig(luma_mode="green_channel", extended=True)
    assert cfg.luma_mode is LumaMode.GREEN_CHANNEL


def test_non_finite_values_fall_back_to_defaults():
    cfg = RCASConfig(sharpness=float("nan"), limit=float("inf"), extended=True)
    assert cfg.sharpness == 1.0
    assert cfg.limit == STANDARD_LIMIT


def test_from_params():
    cfg = RCASConfig.from_params(
        {
            "sharpness": 0.4,
            "limit": 0.1,
            "denoise": False,
            "passthrough_alpha": True,
            "luma_mode": "green_channel",
            "extended": True,
            "border": "wrap",
        }
    )
    assert cfg.sharpness == 0.4
    assert cfg.limit == 0.1
    assert cfg.denoise is False
    assert cfg.passthrough_alpha is True
    assert cfg.luma_mode is LumaMode.GREEN_CHANNEL


def test_from_params_empty_is_default():
    assert RCASConfig.from_params({}) == RCASConfig()


def test_from_params_bad_values():
    cfg = RCASConfig.from_params({"sharpness": "lots", "luma_mode": "rainbow"})
    assert cfg.sharpness == 1.0
    assert cfg.luma_mode is LumaMode.WEIGHTED_DOT


@pytest.mark.parametrize("text", ["false", "False", " no ", "0", "off"])
def test_from_params_false_strings_disable(text):
    cfg = RCASConfig.from_params(
        {"denoise": text, "passthrough_alpha": text, "extended": text}
    )
    assert cfg.denoise is False
    assert cfg.passthrough_alpha is False
    assert cfg.extended is False


@pytest.mark.parametrize("text", ["true", "TRUE", "yes", "1", "on"])
def test_from_params_true_strings_enable(text):
    cfg = RCASConfig.from_params(
        {"denoise": text, "passthrough_alpha": text, "extended": text}
    )
    assert cfg.denoise is True
    assert cfg.passthrough_alpha is True
    assert cfg.extended is True


def test_from_params_unknown_flag_string_uses_default(caplog):
    with caplog.at_level(logging.WARNING, logger="sharpen.config"):
        cfg = RCASConfig.from_params({"denoise": "maybe", "extended": "sure"})
    assert cfg.denoise is True
    assert cfg.extended is False
    assert "Unknown denoise value" in caplog.text


def test_from_params_none_flags_use_defaults():
    assert RCASConfig.from_params({"denoise": None, "extended": None}) == RCASConfig()
