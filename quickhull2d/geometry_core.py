"""
Core geometric primitives for planar point sets, implemented using PyTorch.

This module provides the building blocks shared by the hull construction and
the plotting helpers:
- Global constants (`EPSILON`, `DEFAULT_DTYPE`) used as defaults throughout the package.
- Input coercion and validation of point sets (`as_points_tensor`, `InvalidInputError`).
- The side and distance predicates used to partition candidate points
  (`cross_product_2d`, `sidedness`, `approximate_distance`).
- Area, perimeter and containment queries for ordered convex polygons.

Points are always the rows of an (N, 2) floating tensor, and a point is
identified by its row index rather than by its coordinate values.
"""
import torch
import numpy as np

EPSILON = 1e-7 # Global epsilon for tolerance-based checks (containment, zero area).
DEFAULT_DTYPE = torch.float64 # dtype for inputs that do not already carry a floating dtype.


class InvalidInputError(ValueError):
    """Raised when a point set is empty or does not have shape (N, 2)."""


def as_points_tensor(points, dtype: torch.dtype | None = None, device: torch.device | str | None = None) -> torch.Tensor:
    """
    Coerces `points` into an (N, 2) floating tensor.

    Tensors keep their dtype and device, and numpy floating arrays keep their
    dtype, unless `dtype`/`device` are given explicitly. Integer inputs and plain
    Python sequences are converted to `DEFAULT_DTYPE`.

    Args:
        points (torch.Tensor | np.ndarray | Sequence[Sequence[float]]): The point set.
        dtype (torch.dtype | None, optional): Floating dtype to convert to.
        device (torch.device | str | None, optional): Device to move the tensor to.

    Returns:
        torch.Tensor: Tensor of shape (N, 2).

    Raises:
        InvalidInputError: If the input cannot be converted, is empty, or is not (N, 2).
    """
    if isinstance(points, torch.Tensor):
        pts = points
    elif isinstance(points, np.ndarray):
        if not np.issubdtype(points.dtype, np.floating):
            points = points.astype(np.float64)
        pts = torch.from_numpy(np.ascontiguousarray(points))
    else:
        try:
            pts = torch.tensor(points, dtype=dtype or DEFAULT_DTYPE)
        except (TypeError, ValueError, RuntimeError) as e:
            raise InvalidInputError(f"Input points could not be converted to a tensor: {e}") from e

    if not pts.is_floating_point():
        pts = pts.to(DEFAULT_DTYPE)
    if dtype is not None or device is not None:
        pts = pts.to(device=device if device is not None else pts.device, dtype=dtype or pts.dtype)

    if pts.ndim != 2 or pts.shape[1] != 2:
        raise InvalidInputError(f"Input points must have shape (N, 2), got {tuple(pts.shape)}.")
    if pts.shape[0] == 0:
        raise InvalidInputError("Input points must contain at least one point.")
    return pts


def cross_product_2d(a: torch.Tensor, b: torch.Tensor, m: torch.Tensor) -> torch.Tensor:
    """
    Cross product of the directed line a->b with the vector a->m.

    Computed as `(b.y - a.y) * (m.x - a.x) - (b.x - a.x) * (m.y - a.y)`, which is
    positive for points to the right of a->b in a y-up frame.

    Args:
        a (torch.Tensor): Line start, shape (2,).
        b (torch.Tensor): Line end, shape (2,).
        m (torch.Tensor): Query point(s), shape (2,) or (K, 2).

    Returns:
        torch.Tensor: Scalar tensor, or shape (K,) for batched queries.
    """
    return (b[1] - a[1]) * (m[..., 0] - a[0]) - (b[0] - a[0]) * (m[..., 1] - a[1])


def sidedness(a: torch.Tensor, b: torch.Tensor, m: torch.Tensor) -> torch.Tensor:
    """
    True where `m` lies strictly on the outward side of the directed line a->b.

    Outward is `cross < 0`, i.e. to the left of a->b in a y-up frame, so a hull
    seeded with leftmost->rightmost is walked clockwise. Points exactly on the
    line are never outward, so collinear points are not candidates for
    extending a hull edge.
    """
    return cross_product_2d(a, b, m) < 0


def approximate_distance(a: torch.Tensor, b: torch.Tensor, m: torch.Tensor) -> torch.Tensor:
    """
    Unnormalized distance of `m` from the line through a and b.

    This is |cross| = true distance * |b - a|, so it only ranks points against
    the same line; it is not a Euclidean distance.
    """
    return torch.abs(cross_product_2d(a, b, m))


def _signed_polygon_area(polygon: torch.Tensor) -> torch.Tensor:
    # Shoelace formula; positive for counter-clockwise vertex order.
    x, y = polygon[:, 0], polygon[:, 1]
    return 0.5 * torch.sum(x * torch.roll(y, -1) - torch.roll(x, -1) * y)


def compute_polygon_area(polygon: torch.Tensor) -> float:
    """
    Computes the area of a simple polygon given its ordered vertices.

    Args:
        polygon (torch.Tensor): Tensor of shape (N, 2) of vertices in boundary
                                order (either orientation).

    Returns:
        float: The enclosed area. Returns 0.0 if N < 3 or the area is negligible.
    """
    if not (isinstance(polygon, torch.Tensor) and polygon.ndim == 2 and polygon.shape[1] == 2):
        raise InvalidInputError("Input polygon must be a PyTorch tensor of shape (N, 2).")
    if polygon.shape[0] < 3: return 0.0
    area_val = abs(_signed_polygon_area(polygon).item())
    return 0.0 if area_val < EPSILON**2 else area_val


def compute_polygon_perimeter(polygon: torch.Tensor) -> float:
    """
    Computes the length of the closed boundary through the ordered vertices.

    A two-vertex polygon is a segment traversed there and back, so its
    perimeter is twice the segment length; a single vertex has perimeter 0.
    """
    if not (isinstance(polygon, torch.Tensor) and polygon.ndim == 2 and polygon.shape[1] == 2):
        raise InvalidInputError("Input polygon must be a PyTorch tensor of shape (N, 2).")
    if polygon.shape[0] < 2: return 0.0
    edge_vectors = torch.roll(polygon, -1, dims=0) - polygon
    return torch.linalg.norm(edge_vectors, dim=1).sum().item()


def points_in_convex_polygon(query: torch.Tensor, polygon: torch.Tensor, tol: float = EPSILON) -> torch.Tensor:
    """
    Tests which query points lie in the closed region of a convex polygon.

    The polygon may be ordered clockwise or counter-clockwise. Degenerate
    polygons are handled as their geometry: one vertex is a point, two
    vertices are a segment.

    Args:
        query (torch.Tensor): Points to test, shape (K, 2) or (2,).
        polygon (torch.Tensor): Ordered convex polygon vertices, shape (H, 2), H >= 1.
        tol (float, optional): Distance tolerance for points on the boundary.
                               Defaults to `EPSILON`.

    Returns:
        torch.Tensor: Boolean tensor of shape (K,) (or a scalar for a single point).
    """
    if polygon.ndim != 2 or polygon.shape[1] != 2 or polygon.shape[0] == 0:
        raise InvalidInputError("Polygon must be a non-empty tensor of shape (H, 2).")
    single = query.ndim == 1
    q = query.unsqueeze(0) if single else query
    q = q.to(polygon.dtype)

    n_vertices = polygon.shape[0]
    if n_vertices == 1:
        inside = torch.linalg.norm(q - polygon[0], dim=1) <= tol
    elif n_vertices == 2 or abs(_signed_polygon_area(polygon).item()) < EPSILON**2:
        # Collinear vertices: test against the segment spanned by the two extreme ones.
        a = polygon[torch.argmax(torch.linalg.norm(polygon - polygon[0], dim=1))]
        b = polygon[torch.argmax(torch.linalg.norm(polygon - a, dim=1))]
        seg = b - a
        seg_len = torch.linalg.norm(seg)
        if seg_len <= tol:
            inside = torch.linalg.norm(q - a, dim=1) <= tol
        else:
            t = torch.matmul(q - a, seg) / (seg_len ** 2)
            off_line = torch.abs(cross_product_2d(a, b, q)) / seg_len
            margin = tol / seg_len
            inside = (off_line <= tol) & (t >= -margin) & (t <= 1 + margin)
    else:
        orientation = 1.0 if _signed_polygon_area(polygon).item() >= 0 else -1.0
        inside = torch.ones(q.shape[0], dtype=torch.bool, device=q.device)
        for i in range(n_vertices):
            a, b = polygon[i], polygon[(i + 1) % n_vertices]
            edge_len = torch.linalg.norm(b - a)
            if edge_len <= 0: continue # Coincident consecutive vertices contribute no edge.
            # For counter-clockwise order the interior has cross <= 0 against every edge.
            inside &= orientation * cross_product_2d(a, b, q) <= tol * edge_len
    return inside[0] if single else inside
