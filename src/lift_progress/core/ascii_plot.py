"""
ASCII plotting for per-exercise weight progress.

Creates terminal-friendly plots of the average working weight of each
session over time.
"""

from .models import ProgressPoint


def create_weight_progress_plot(
    points: list[ProgressPoint],
    width: int = 60,
    height: int = 15,
    exercise_name: str = "",
) -> str:
    """
    Create an ASCII plot of average session weight over time.

    Args:
        points: Progress points, oldest first
        width: Plot width in characters, including the y-axis labels
        height: Plot height in lines, including title and x-axis
        exercise_name: Shown in the chart title

    Returns:
        ASCII art string
    """
    data = [(p.completed_at, p.avg_weight) for p in points if p.avg_weight > 0]
    if not data:
        return "No weighted sets recorded yet."

    plot_width = width - 8   # room for "123.4 ┤"
    plot_height = height - 3  # room for title and x-axis

    min_date, max_date = data[0][0], data[-1][0]
    date_range = (max_date - min_date).days or 1

    y_min = min(v for _, v in data)
    y_max = max(v for _, v in data)
    pad = max((y_max - y_min) * 0.1, 1.0)
    y_min, y_max = max(0.0, y_min - pad), y_max + pad
    y_range = y_max - y_min

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    prev: tuple[int, int] | None = None
    for when, value in data:
        x = int(((when - min_date).days / date_range) * (plot_width - 1))
        y = plot_height - 1 - int(((value - y_min) / y_range) * (plot_height - 1))

        # Horizontal connector from the previous point at its own height
        if prev is not None:
            px, py = prev
            for cx in range(px + 1, x):
                if grid[py][cx] == " ":
                    grid[py][cx] = "─"
        grid[y][x] = "●"
        prev = (x, y)

    title = f"{exercise_name} - average weight (kg)" if exercise_name else "Average weight (kg)"
    lines = [title.center(width).rstrip()]

    for row_idx, row in enumerate(grid):
        value = y_max - (row_idx / (plot_height - 1)) * y_range
        label = f"{value:6.1f} ┤" if row_idx % 3 == 0 or row_idx == plot_height - 1 else "       │"
        lines.append(label + "".join(row).rstrip())

    lines.append("       └" + "─" * plot_width)
    start_label = min_date.strftime("%d/%m")
    end_label = max_date.strftime("%d/%m")
    gap = max(1, plot_width - len(start_label) - len(end_label))
    lines.append("        " + start_label + " " * gap + end_label)

    return "\n".join(lines)
