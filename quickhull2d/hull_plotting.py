import torch
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPolygon

# Project-specific imports
from .geometry_core import as_points_tensor
from .quickhull import quickhull_2d


def plot_convex_hull_2d(
    points,
    hull_vertices_indices: torch.Tensor | None = None,
    show_hull_vertices: bool = True,
    ax=None,
    title: str = "2D Convex Hull"
):
    """
    Plots a 2D point set together with its convex hull.

    Args:
        points (torch.Tensor | np.ndarray | Sequence[Sequence[float]]):
            Points of shape (N, 2).
        hull_vertices_indices (torch.Tensor | None, optional):
            Ordered indices of the hull vertices, as returned by `quickhull_2d`.
            If None, it will be computed. Defaults to None.
        show_hull_vertices (bool): Whether to highlight the hull vertices. Defaults to True.
        ax (matplotlib.axes.Axes | None, optional): Existing axes to plot on.
                                                   If None, a new figure and axes are created.
        title (str, optional): Title for the plot.

    Returns:
        matplotlib.axes.Axes | None: The axes drawn on, or None if there was nothing to plot.
    """
    if len(points) == 0:
        print("Warning: No points provided for convex hull plot.")
        return None
    points = as_points_tensor(points).detach().cpu()

    if hull_vertices_indices is None:
        hull_vertices_indices, _ = quickhull_2d(points)
    hull_np = points[hull_vertices_indices.cpu()].numpy()

    if ax is None:
        _, ax = plt.subplots()

    points_np = points.numpy()
    ax.plot(points_np[:, 0], points_np[:, 1], 'o', label='Input Points', color='blue', alpha=0.6)

    if hull_np.shape[0] >= 3:
        polygon = MplPolygon(hull_np, closed=True, edgecolor='black', fill=False, label='Convex Hull')
        ax.add_patch(polygon)
    elif hull_np.shape[0] == 2:
        print("Note: Hull is a line segment (fewer than 3 non-collinear points).")
        ax.plot(hull_np[:, 0], hull_np[:, 1], '-', color='black', label='Convex Hull')
    else:
        print("Note: Hull is a single point.")

    if show_hull_vertices:
        ax.plot(hull_np[:, 0], hull_np[:, 1], 's', color='red', markersize=6, label='Hull Vertices')

    ax.autoscale_view()
    ax.set_xlabel("X-axis")
    ax.set_ylabel("Y-axis")
    ax.set_title(title)
    ax.legend()
    ax.set_aspect('equal', adjustable='box')
    return ax
