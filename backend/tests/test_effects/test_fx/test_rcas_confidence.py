"""Tests for debug.rcas_confidence: noise detector view."""

import numpy as np
import pytest

from conftest import make_frame
from effects.fx.rcas_confidence import EFFECT_ID, apply

pytestmark = pytest.mark.smoke

KW = {"frame_index": 0, "resolution": (64, 64)}


def test_basic():
    frame = make_frame()
    result, state = apply(frame, {}, None, **KW)
    assert EFFECT_ID == "debug.rcas_confidence"
    assert result.shape == frame.shape
    assert result.dtype == np.uint8
    assert state is None
    np.testing.assert_array_equal(result[:, :, 0], result[:, :, 1])
    np.testing.assert_array_equal(result[:, :, 3], frame[:, :, 3])


def test_flat_is_white():
    frame = np.full((8, 8, 4), 90, dtype=np.uint8)
    result, _ = apply(frame, {}, None, **KW)
    assert np.all(result[:, :, :3] == 255)


def test_isolated_dot_is_black():
    frame = np.zeros((8, 8, 4), dtype=np.uint8)
    frame[4, 4, :3] = 255
    result, _ = apply(frame, {}, None, **KW)
    assert result[4, 4, 0] == 0


def test_green_channel_mode():
    frame = np.zeros((8, 8, 4), dtype=np.uint8)
    frame[4, 4, 0] = 255  # red only: invisible to green-channel luma
    weighted, _ = apply(frame, {"luma_mode": "weighted_dot"}, None, **KW)
    green, _ = apply(frame, {"luma_mode": "green_channel"}, None, **KW)
    assert weighted[4, 4, 0] == 0
    assert green[4, 4, 0] == 255
