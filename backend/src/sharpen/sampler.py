"""Neighbor sampling: the only place that touches image addressing."""

from enum import Enum
from typing import NamedTuple, Protocol

import numpy as np

# (dx, dy) offsets of the ring taps
OFFSET_UP = (0, -1)
OFFSET_LEFT = (-1, 0)
OFFSET_RIGHT = (1, 0)
OFFSET_DOWN = (0, 1)


class BorderMode(str, Enum):
    """How taps outside the image are resolved."""

    CLAMP = "clamp"
    WRAP = "wrap"
    REFLECT = "reflect"


_PAD_MODES = {
    BorderMode.CLAMP: "edge",
    BorderMode.WRAP: "wrap",
    BorderMode.REFLECT: "reflect",
}


class NeighborSampler(Protocol):
    def sample(self, coord: tuple[int, int], offset: tuple[int, int]) -> np.ndarray:
        """Return the color at ``coord + offset`` (x, y order)."""
        ...


def _resolve_index(i: int, n: int, border: BorderMode) -> int:
    if 0 <= i < n:
        return i
    if border is BorderMode.WRAP:
        return i % n
    if border is BorderMode.REFLECT and n > 1:
        period = 2 * (n - 1)
        i = i % period
        return period - i if i >= n else i
    return min(max(i, 0), n - 1)


class ArraySampler:
    """NeighborSampler over an (H, W, C) array with a border policy."""

    def __init__(self, image: np.ndarray, border: BorderMode | str = BorderMode.CLAMP):
        self.image = image
        self.border = BorderMode(border)

    def sample(self, coord: tuple[int, int], offset: tuple[int, int] = (0, 0)) -> np.ndarray:
        h, w = self.image.shape[:2]
        x = _resolve_index(coord[0] + offset[0], w, self.border)
        y = _resolve_index(coord[1] + offset[1], h, self.border)
        return self.image[y, x]


class Neighborhood(NamedTuple):
    """The five taps for every pixel, each shaped like the source image."""

    b: np.ndarray
    d: np.ndarray
    e: np.ndarray
    f: np.ndarray
    h: np.ndarray


def neighborhood(image: np.ndarray, border: BorderMode | str = BorderMode.CLAMP) -> Neighborhood:
    """Shifted views of ``image`` for a whole-image sweep.

    The source is padded by one pixel once; every tap is a view into that
    copy, so nothing written to the output can leak back into the taps.
    """
    pad = [(1, 1), (1, 1)] + [(0, 0)] * (image.ndim - 2)
    padded = np.pad(image, pad, mode=_PAD_MODES[BorderMode(border)])
    return Neighborhood(
        b=padded[:-2, 1:-1],
        d=padded[1:-1, :-2],
        e=padded[1:-1, 1:-1],
        f=padded[1:-1, 2:],
        h=padded[2:, 1:-1],
    )
