import numpy as np
import pytest


def columns_to_channel(*columns):
    """Stack per-column intensity lists into a (height, width) uint8 channel."""
    return np.array(columns, dtype=np.uint8).T.copy()


@pytest.fixture
def scenario_channel():
    # width=3, height=5, threshold=100
    return columns_to_channel(
        [50, 50, 50, 50, 50],
        [50, 200, 200, 50, 50],
        [200, 50, 200, 50, 200],
    )
