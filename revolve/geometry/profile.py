"""Map a sampled canvas curve into the symmetric profile space used for revolution."""

import numpy as np

from revolve.config import PROFILE_EXTENT


def normalize_profile(curve: np.ndarray, width: float, height: float,
                      extent: float = PROFILE_EXTENT) -> np.ndarray:
    """Convert canvas pixel coordinates to [-extent, extent] on both axes.

    Canvas y grows downward, profile y grows upward, so y is flipped.
    Returns array of shape (N, 2).
    """
    curve = np.asarray(curve, dtype=float).reshape(-1, 2)
    if width <= 0 or height <= 0:
        raise ValueError(f"canvas frame must be positive, got {width}x{height}")
    span = 2.0 * extent
    x = curve[:, 0] / width * span - extent
    y = -(curve[:, 1] / height) * span + extent
    return np.column_stack([x, y])
