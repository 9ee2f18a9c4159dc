"""Invert filter: maps every value v to (max - v).

Integer images use the maximum of their dtype, floating-point images are
assumed to be normalized to [0, 1]. An alpha channel is left untouched.
"""

import numpy as np


def apply_filter(image):
    color = image[..., :3] if image.ndim == 3 and image.shape[2] == 4 else image
    if np.issubdtype(image.dtype, np.integer):
        color[...] = np.iinfo(image.dtype).max - color
    else:
        color[...] = 1.0 - color
