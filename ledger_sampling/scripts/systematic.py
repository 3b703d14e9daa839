import numpy as np


def systematic_indices(
    population_size: int, sample_size: int, rng: np.random.Generator
) -> np.ndarray:
    """Select evenly spaced indices from one random start.

    Formula: index_i = (start + i x k) mod N, for i in [0, n)

    Where:
        - N = population size
        - n = min(sample size, N)
        - k = max(1, floor(N / n)) is the sampling interval
        - start is drawn uniformly from [0, k)

    Since start + (n - 1) x k < n x k <= N the indices never wrap, so they
    are always distinct.

    Args:
        population_size: Number of rows in the pool
        sample_size: Requested number of rows
        rng: Random generator

    Returns:
        Array of min(sample_size, population_size) distinct ascending indices
    """
    size = min(max(sample_size, 0), max(population_size, 0))
    if size == 0:
        return np.empty(0, dtype=int)

    interval = max(1, population_size // size)
    start = int(rng.integers(0, interval))

    return (start + np.arange(size) * interval) % population_size
