from numpy.typing import NDArray
import numpy as np


class InvalidResolutionError(ValueError):
    """Raised when a grid is requested with fewer than two points."""

    pass


def linspace(start: float, end: float, num: int) -> NDArray:
    """
    Evenly spaced samples over the closed interval [start, end].

    Each sample is the previous one plus a fixed step, so rounding accumulates
    along the grid. The last sample is then set to `end`, so both endpoints
    are exact.

    Parameters
    ----------
    start : float
        First value of the grid.
    end : float
        Last value of the grid.
    num : int
        Number of samples. Must be at least 2.

    Returns
    -------
    NDArray
        Read-only array of length `num`.
    """
    if num < 2:
        raise InvalidResolutionError(f"Grid needs at least 2 points, got {num}")

    step = (end - start) / (num - 1)

    # add.accumulate is sequential, so grid[i] = grid[i - 1] + step.
    grid = np.cumsum(np.r_[float(start), np.full(num - 1, step)])
    grid[-1] = end

    grid.flags.writeable = False
    return grid
