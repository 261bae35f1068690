"""Subpixel laser line extraction from single channel intensity images."""

from ie_LaserLine.Algorithm.laser_line_algorithm import (
    INVALID_POINT,
    LaserColor,
    LaserLine,
    LaserLineAlgorithm,
    LaserLineContext,
    channel_from_bytes,
)
from ie_LaserLine.Algorithm.weighted_average import (
    DEFAULT_THRESHOLD,
    THRESHOLD_DESCRIPTION,
    ColumnAccumulators,
    ColumnState,
    IncWeightedAverage,
    WeightedAverage,
)
from ie_LaserLine.Utility.ieErrors import ChannelException, ConfigException, LaserLineException

__version__ = "0.1.0"
