import numpy as np

STEP = 1e-5


def central_difference(func, R, z, axis, step=STEP):
    """Second-order central difference of ``func(R, z)`` along ``axis`` (0 for R, 1 for z)."""
    if axis == 0:
        return (func(R + step, z) - func(R - step, z)) / (2 * step)
    return (func(R, z + step) - func(R, z - step)) / (2 * step)


def sample_points(n=25, seed=42):
    """Points away from the origin, spread over both signs of z."""
    rng = np.random.default_rng(seed)
    R = rng.uniform(0.3, 2.0, n)
    z = rng.uniform(-1.5, 1.5, n)
    z[np.abs(z) < 0.05] += 0.1
    return R, z
