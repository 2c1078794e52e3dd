# Quickhull Package
# This file makes 'quickhull2d' a Python package.

# Key functionalities re-exported for easier access.
from .geometry_core import (
    EPSILON, DEFAULT_DTYPE, InvalidInputError, as_points_tensor,
    cross_product_2d, sidedness, approximate_distance
)
from .quickhull import prune_interior_points, quickhull_2d, compute, QuickHull2D

# Plotting pulls in matplotlib; import it from `quickhull2d.hull_plotting` directly.
