import numpy as np


def draw_random_indices(
    population_size: int, sample_size: int, rng: np.random.Generator
) -> np.ndarray:
    """Draw distinct indices uniformly without replacement.

    Every index in [0, population_size) has the same inclusion probability.
    The sample size is clamped to the population size.

    Args:
        population_size: Number of rows in the pool
        sample_size: Requested number of rows
        rng: Random generator

    Returns:
        Array of min(sample_size, population_size) distinct indices, in draw
        order
    """
    size = min(max(sample_size, 0), max(population_size, 0))
    if size == 0:
        return np.empty(0, dtype=int)

    return rng.choice(population_size, size=size, replace=False)
