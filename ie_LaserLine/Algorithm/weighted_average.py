"""Weighted average laser line extraction.

Every column is reduced to the intensity-weighted mean row of the first
bright run met while scanning top to bottom. Once a column has seen a
bright pixel followed by a dark one it is closed, later bright pixels in
that column are treated as reflections and ignored.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from ie_LaserLine.Algorithm.laser_line_algorithm import (
    INVALID_POINT,
    LaserLine,
    LaserLineAlgorithm,
    LaserLineContext,
)
from ie_LaserLine.Utility.configReader import configReader
from ie_LaserLine.Utility.ieErrors import ChannelException

log = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 220
THRESHOLD_DESCRIPTION = "Minimum intensity value for a valid laser point"


class ColumnState(enum.IntEnum):
    OPEN = 0
    CLOSED = 1


@dataclass
class IncWeightedAverage:
    """Incremental weighted mean of the row indices of one column."""

    mean: float = 0.0
    weights: float = 0.0
    state: ColumnState = ColumnState.OPEN

    @property
    def closed(self) -> bool:
        return self.state is ColumnState.CLOSED

    @property
    def valid(self) -> bool:
        return self.weights > 0

    def update(self, value: float, weight: float) -> None:
        # See http://www-uxsup.csx.cam.ac.uk/~fanf2/hermes/doc/antiforgery/stats.pdf
        self.weights += weight
        if self.weights > 0:
            self.mean += (weight / self.weights) * (value - self.mean)

    def observe(self, row: int, intensity: int, threshold: int) -> None:
        """Apply one sample of the column, rows must arrive in increasing order."""
        if intensity < threshold:
            if self.weights > 0:
                self.state = ColumnState.CLOSED
        elif self.state is ColumnState.OPEN:
            self.update(row, intensity)


class ColumnAccumulators:
    """One `IncWeightedAverage` per column, stored as flat arrays indexed by column."""

    def __init__(self, width: int):
        self.mean = np.zeros(width, dtype=np.float64)
        self.weights = np.zeros(width, dtype=np.float64)
        self.state = np.full(width, ColumnState.OPEN, dtype=np.uint8)

    @property
    def width(self) -> int:
        return int(self.mean.shape[0])

    def feed_row(self, row: int, intensities: np.ndarray, threshold: int) -> None:
        """Vectorised `IncWeightedAverage.observe` over all columns of one row."""
        intensities = intensities.astype(np.int64, copy=False)
        bright = intensities >= threshold
        self.state[~bright & (self.weights > 0)] = ColumnState.CLOSED
        upd = bright & (self.state == ColumnState.OPEN)
        if not upd.any():
            return

        w = intensities[upd].astype(np.float64)
        ws = self.weights[upd] + w
        mean = self.mean[upd]
        step = np.divide(w, ws, out=np.zeros_like(w), where=ws > 0)
        self.mean[upd] = mean + step * (row - mean)
        self.weights[upd] = ws

    def column(self, c: int) -> IncWeightedAverage:
        return IncWeightedAverage(
            mean=float(self.mean[c]),
            weights=float(self.weights[c]),
            state=ColumnState(int(self.state[c])),
        )

    @classmethod
    def concatenate(cls, parts: list[ColumnAccumulators]) -> ColumnAccumulators:
        merged = cls(0)
        if parts:
            merged.mean = np.concatenate([p.mean for p in parts])
            merged.weights = np.concatenate([p.weights for p in parts])
            merged.state = np.concatenate([p.state for p in parts])
        return merged


class WeightedAverage(LaserLineAlgorithm):
    """Weighted average laser line extraction."""

    def __init__(self, threshold: int = DEFAULT_THRESHOLD, workers: int = 1):
        self._threshold = int(threshold)
        self.workers = max(1, int(workers))

    @classmethod
    def from_config(cls, config: str | configReader) -> WeightedAverage:
        reader = config if isinstance(config, configReader) else configReader(config)
        return cls(
            threshold=reader.getInt("intensity_threshold", DEFAULT_THRESHOLD),
            workers=reader.getInt("workers", 1),
        )

    @property
    def intensity_threshold(self) -> int:
        return self._threshold

    @intensity_threshold.setter
    def intensity_threshold(self, value: int) -> None:
        self._threshold = int(value)

    def find_laser_line(self, context: LaserLineContext) -> tuple[bool, LaserLine]:
        return True, self.extract_points(context.channel())

    def extract_points(self, channel: np.ndarray) -> LaserLine:
        """
        Return the subpixel laser line of a single intensity channel.

        Parameters:
            channel: 2D `(height, width)` integer array, row-major.

        Returns:
            `LaserLine` with exactly `width` entries in column order.
        """
        channel = np.asarray(channel)
        if channel.ndim != 2:
            raise ChannelException(f"extract_points expects a 2D intensity array, got shape {channel.shape}")

        height, width = channel.shape
        threshold = self._threshold
        workers = min(self.workers, width)
        if workers > 1:
            acc = self._scan_parallel(channel, threshold, workers)
        else:
            acc = self._scan(channel, threshold)

        line = self._assemble(acc)
        log.debug(
            "weighted average on %dx%d (threshold=%d, workers=%d): %d valid columns",
            width, height, threshold, max(workers, 1), int(line.valid.sum()),
        )
        return line

    @staticmethod
    def _scan(channel: np.ndarray, threshold: int) -> ColumnAccumulators:
        acc = ColumnAccumulators(channel.shape[1])
        for r in range(channel.shape[0]):
            acc.feed_row(r, channel[r], threshold)
        return acc

    def _scan_parallel(self, channel: np.ndarray, threshold: int, workers: int) -> ColumnAccumulators:
        # Split by columns only, rows of a column have to be scanned in order.
        bounds = [(int(cols[0]), int(cols[-1]) + 1) for cols in np.array_split(np.arange(channel.shape[1]), workers)]
        log.debug("scanning column ranges %s", bounds)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            parts = list(pool.map(lambda b: self._scan(channel[:, b[0]:b[1]], threshold), bounds))
        return ColumnAccumulators.concatenate(parts)

    @staticmethod
    def _assemble(acc: ColumnAccumulators) -> LaserLine:
        valid = acc.weights > 0
        points = np.empty((acc.width, 2), dtype=np.float64)
        points[:] = INVALID_POINT
        points[valid, 0] = np.flatnonzero(valid)
        points[valid, 1] = acc.mean[valid]
        return LaserLine(points=points, valid=valid, weights=acc.weights.copy())
