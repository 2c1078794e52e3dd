"""
Quickhull construction of the 2D convex hull.

The hull is built in two phases:
1. `prune_interior_points` discards points that lie strictly inside an
   axis-aligned rectangle inscribed in the quadrilateral of the four diagonal
   extremes (x + y and x - y). Such points cannot be hull vertices.
2. `quickhull_2d` seeds the hull with the leftmost and rightmost surviving
   points and repeatedly inserts, for each hull edge, the candidate furthest
   from it, splitting the remaining candidates between the two new edges.

All comparisons are strict floating-point comparisons: points collinear with a
hull edge are not hull vertices. Ties (equal extremes, equal distances) go to
the point that comes first in input order, so results are deterministic.
"""
import torch

from .geometry_core import (
    EPSILON, as_points_tensor, sidedness, approximate_distance,
    compute_polygon_area, compute_polygon_perimeter, points_in_convex_polygon
)


def prune_interior_points(points: torch.Tensor) -> torch.Tensor:
    """
    Finds the points that may lie on the convex hull.

    The four diagonal extremes are the points maximizing x + y (top right),
    minimizing x - y (top left), maximizing x - y (bottom right) and minimizing
    x + y (bottom left). The rectangle bounded by
    x in (max(bottom_left.x, top_left.x), min(top_right.x, bottom_right.x)) and
    y in (max(bottom_left.y, bottom_right.y), min(top_left.y, top_right.y))
    lies inside their quadrilateral, so any point strictly inside it is interior
    to the hull.

    Args:
        points (torch.Tensor): Tensor of shape (N, 2), N >= 1.

    Returns:
        torch.Tensor: Long tensor of the indices of the kept points, ascending,
                      so the relative input order is preserved. Always contains
                      the four diagonal extremes.
    """
    x, y = points[:, 0], points[:, 1]
    diag_sum = x + y
    diag_diff = x - y

    # argmax/argmin return the first occurrence, matching a strict-improvement scan.
    top_right = points[torch.argmax(diag_sum)]
    bottom_left = points[torch.argmin(diag_sum)]
    bottom_right = points[torch.argmax(diag_diff)]
    top_left = points[torch.argmin(diag_diff)]

    bound_top_y = torch.minimum(top_right[1], top_left[1])
    bound_bottom_y = torch.maximum(bottom_right[1], bottom_left[1])
    bound_left_x = torch.maximum(bottom_left[0], top_left[0])
    bound_right_x = torch.minimum(top_right[0], bottom_right[0])

    strictly_inside = (x > bound_left_x) & (x < bound_right_x) & \
                      (y > bound_bottom_y) & (y < bound_top_y)
    return torch.nonzero(~strictly_inside, as_tuple=True)[0]


def _extreme_pair(coords: torch.Tensor) -> tuple[int, int] | None:
    """
    Positions of the first minimum and first maximum along x.

    Falls back to y when every point shares the same x. Returns None when all
    points coincide.
    """
    for axis in (0, 1):
        i_min = torch.argmin(coords[:, axis]).item()
        i_max = torch.argmax(coords[:, axis]).item()
        if coords[i_min, axis] < coords[i_max, axis]:
            return i_min, i_max
    return None


def _hull_simplices(vertices: torch.Tensor) -> torch.Tensor:
    """Edges (index pairs) of the closed hull polygon through `vertices`."""
    n_vertices = vertices.shape[0]
    if n_vertices < 2:
        return torch.empty((0, 2), dtype=torch.long, device=vertices.device)
    if n_vertices == 2: # A line segment
        return vertices.unsqueeze(0)
    return torch.stack((vertices, torch.roll(vertices, -1)), dim=1)


def quickhull_2d(points) -> tuple[torch.Tensor, torch.Tensor]:
    """
    Computes the convex hull of 2D points using the Quickhull algorithm.

    Args:
        points (torch.Tensor | np.ndarray | Sequence[Sequence[float]]):
            N >= 1 points of shape (N, 2). Non-tensor inputs are converted with
            `as_points_tensor`.

    Returns:
        Tuple[torch.Tensor, torch.Tensor]:
            - hull_vertices_indices (torch.Tensor): Long tensor of shape (H,) of
              row indices into `points`, in the rotational order produced by the
              construction. Inputs with one or two points (after pruning) are
              returned as-is, in input order.
            - hull_simplices (torch.Tensor): Long tensor of shape (E, 2) of hull
              edges as index pairs. Empty for a single-vertex hull.

    Raises:
        InvalidInputError: If `points` is empty or not of shape (N, 2).
    """
    vertices = _quickhull_vertices(as_points_tensor(points))
    return vertices, _hull_simplices(vertices)


def _quickhull_vertices(points: torch.Tensor) -> torch.Tensor:
    """Ordered hull vertex indices of an already validated (N, 2) tensor."""
    device = points.device

    candidates = prune_interior_points(points)
    if candidates.numel() <= 2:
        return candidates.clone()

    extremes = _extreme_pair(points[candidates])
    if extremes is None: # Every candidate is the same coordinate.
        return candidates[:1].clone()

    i_min, i_max = extremes
    min_x, max_x = candidates[i_min].item(), candidates[i_max].item()
    keep = torch.ones(candidates.numel(), dtype=torch.bool, device=device)
    keep[i_min] = False
    keep[i_max] = False
    remaining = candidates[keep]

    remaining_coords = points[remaining]
    right = remaining[sidedness(points[min_x], points[max_x], remaining_coords)]
    left = remaining[sidedness(points[max_x], points[min_x], remaining_coords)]

    hull = [min_x, max_x]
    # Each entry is (a, b, candidates outward of a->b). Popping (a, furthest)
    # before (furthest, b) gives the same traversal as the recursive form; the
    # final order only depends on where each vertex is inserted, which is
    # always directly before b.
    pending = [(max_x, min_x, left), (min_x, max_x, right)]
    while pending:
        a, b, subset = pending.pop()
        if subset.numel() == 0:
            continue # a-b is already a hull edge.
        insert_at = hull.index(b)
        if subset.numel() == 1:
            hull.insert(insert_at, subset.item())
            continue

        distances = approximate_distance(points[a], points[b], points[subset])
        k = torch.argmax(distances).item()
        furthest = subset[k].item()
        hull.insert(insert_at, furthest)

        rest = torch.cat((subset[:k], subset[k + 1:]))
        rest_coords = points[rest]
        outer_left = sidedness(points[a], points[furthest], rest_coords)
        outer_right = ~outer_left & sidedness(points[furthest], points[b], rest_coords)
        # Points in neither set are inside triangle (a, furthest, b) and are dropped.
        pending.append((furthest, b, rest[outer_right]))
        pending.append((a, furthest, rest[outer_left]))

    return torch.tensor(hull, dtype=torch.long, device=device)


def compute(points) -> torch.Tensor:
    """
    Returns the hull boundary as coordinates.

    Args:
        points (torch.Tensor | np.ndarray | Sequence[Sequence[float]]): N >= 1 points.

    Returns:
        torch.Tensor: Tensor of shape (H, 2) of hull points, each one a row of
                      the input, in the order given by `quickhull_2d`.
    """
    points = as_points_tensor(points)
    return points[_quickhull_vertices(points)]


class QuickHull2D:
    """
    Convex hull of a 2D point set, built with `quickhull_2d`.

    Attributes:
        points (torch.Tensor): The input points, shape (N, 2).
        tol (float): Tolerance used by `contains` and the zero-area test.
        vertices (torch.Tensor): Long tensor (H,) of indices of the hull vertices,
                                 in traversal order.
        simplices (torch.Tensor): Long tensor (E, 2) of hull edges as index pairs.
    """
    def __init__(self, points, tol: float = EPSILON):
        """
        Initializes and computes the convex hull.

        Args:
            points (torch.Tensor | np.ndarray | Sequence[Sequence[float]]): N >= 1 points.
            tol (float, optional): Tolerance for containment queries. Defaults to `EPSILON`.

        Raises:
            InvalidInputError: If `points` is empty or not of shape (N, 2).
        """
        self.points = as_points_tensor(points)
        self.device = self.points.device
        self.dtype = self.points.dtype
        self.tol = tol
        self.vertices = _quickhull_vertices(self.points)
        self.simplices = _hull_simplices(self.vertices)

    @property
    def hull_points(self) -> torch.Tensor:
        """Coordinates of the hull vertices, shape (H, 2)."""
        return self.points[self.vertices]

    @property
    def area(self) -> float:
        """Area enclosed by the hull (0.0 for fewer than three vertices)."""
        return compute_polygon_area(self.hull_points)

    @property
    def perimeter(self) -> float:
        """Length of the hull boundary."""
        return compute_polygon_perimeter(self.hull_points)

    def contains(self, query) -> torch.Tensor:
        """
        Tests whether points lie inside or on the boundary of the hull.

        Args:
            query (torch.Tensor | Sequence): A point (2,) or points (K, 2).

        Returns:
            torch.Tensor: Boolean scalar or tensor of shape (K,).
        """
        if not isinstance(query, torch.Tensor):
            query = torch.tensor(query, dtype=self.dtype, device=self.device)
        return points_in_convex_polygon(query, self.hull_points, tol=self.tol)

    def __len__(self) -> int:
        return self.vertices.shape[0]

    def __repr__(self) -> str:
        return f"QuickHull2D(n_points={self.points.shape[0]}, n_vertices={len(self)})"
