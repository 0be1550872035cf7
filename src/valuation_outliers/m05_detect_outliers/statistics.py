"""
📐 Module: statistics.py

Summary statistics used by the z-score test.

Standard deviation is the population formula (ddof=0, divide by n). Downstream
reports and thresholds were tuned against that choice, so it is fixed rather than
an approximation of the sample statistic.
"""

import numpy as np

# Spread below this is treated as "no spread" and the z-score test is skipped.
MIN_STANDARD_DEVIATION = 1e-4


def calculate_statistics(values) -> tuple[float, float]:
    """
    Compute the mean and population standard deviation of a sequence of numbers.

    Args:
        values: Sequence of real numbers.

    Returns:
        tuple[float, float]: (mean, standard_deviation); (0.0, 0.0) when empty.
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0, 0.0
    mean = float(arr.mean())
    std = float(np.sqrt(((arr - mean) ** 2).sum() / arr.size))
    return mean, std


def zscore(value: float, mean: float, std: float) -> float:
    return (value - mean) / std
