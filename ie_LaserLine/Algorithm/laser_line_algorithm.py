"""Shared types of the laser line algorithms: channel selection and the per-column result."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from pathlib import Path

import cv2
import numpy as np
import pandas as pd

from ie_LaserLine.Utility.ieErrors import ChannelException

INVALID_POINT = (-1.0, -1.0)


class LaserColor(enum.IntEnum):
    """Channel index of the laser colour in a BGR image."""

    BLUE = 0
    GREEN = 1
    RED = 2

    @classmethod
    def parse(cls, name: str | int | LaserColor) -> LaserColor:
        if isinstance(name, (int, LaserColor)):
            return cls(name)
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"unknown laser color: {name!r}") from None


def channel_from_bytes(
    frame_bytes: bytes,
    width: int,
    height: int,
    stride: int | None = None,
) -> np.ndarray:
    """
    Wrap a row-major Mono8 buffer as a 2D `(height, width)` uint8 array.

    Parameters:
        frame_bytes: Raw sample buffer, one byte per pixel.
        width, height: Image size in pixels.
        stride: Bytes per row. Defaults to `len(frame_bytes) // height`,
            which covers padded rows as delivered by most cameras.

    Returns:
        A read-only view of the buffer, padding columns cut off.
    """
    if width < 0 or height < 0:
        raise ChannelException(f"invalid image size {width}x{height}")
    if height == 0:
        return np.zeros((0, width), dtype=np.uint8)
    if stride is None:
        stride = len(frame_bytes) // height
    if stride < width:
        raise ChannelException(f"row stride {stride} is smaller than the image width {width}")
    if len(frame_bytes) < stride * height:
        raise ChannelException(
            f"buffer holds {len(frame_bytes)} bytes, expected {stride * height} for {width}x{height}"
        )
    data = np.frombuffer(frame_bytes, dtype=np.uint8, count=stride * height)
    return data.reshape((height, stride))[:, :width]


@dataclass(frozen=True, eq=False)
class LaserLine:
    """Subpixel laser line, one entry per image column.

    `points[c]` is `(c, row)` for a detected column and `INVALID_POINT`
    otherwise; `valid` flags the detected columns.
    """

    points: np.ndarray
    valid: np.ndarray
    weights: np.ndarray

    @property
    def width(self) -> int:
        return int(self.valid.shape[0])

    @property
    def rows(self) -> np.ndarray:
        return np.where(self.valid, self.points[:, 1], np.nan)

    def valid_points(self) -> np.ndarray:
        return self.points[self.valid]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "column": np.arange(self.width),
                "row": self.rows,
                "weight": self.weights,
                "valid": self.valid,
            }
        )


class LaserLineContext:
    """Image plus the colour of the laser projected into it."""

    def __init__(self, image: np.ndarray, laser_color: LaserColor | str = LaserColor.RED):
        self.image = image
        self.laser_color = LaserColor.parse(laser_color)

    @classmethod
    def from_path(cls, path: str | Path, laser_color: LaserColor | str = LaserColor.RED) -> LaserLineContext:
        img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if img is None:
            raise ChannelException(f"image could not be loaded: {path}")
        return cls(img, laser_color)

    def channel(self) -> np.ndarray:
        """Return the laser colour channel as a 2D array."""
        img = self.image
        if img.ndim == 2:
            return img
        if img.ndim == 3 and img.shape[2] == 1:
            return img[:, :, 0]
        if img.ndim == 3 and img.shape[2] in (3, 4):
            return img[:, :, int(self.laser_color)]
        raise ChannelException(f"unsupported image shape {img.shape}")


class LaserLineAlgorithm(abc.ABC):
    """Base of all algorithms extracting a laser line from an image."""

    @abc.abstractmethod
    def find_laser_line(self, context: LaserLineContext) -> tuple[bool, LaserLine]:
        """Return `(ok, line)` for the laser line visible in `context`."""
