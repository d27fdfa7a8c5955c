"""
Bounded text previews of matrices and vectors.

Large containers are elided: only the leading and trailing rows and
columns that fit the configured display limits are rendered, with '..'
marking the gap. Limits and precision come from pylinalg.core.config.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pylinalg.core.config import get_settings


def _format_value(value: Any, precision: int) -> str:
    if np.iscomplexobj(value):
        return f"{complex(value):.{precision}g}"
    return f"{float(value):.{precision}g}"


def _visible(count: int, limit: int) -> tuple[list[int], bool]:
    """Indices to render and whether a gap is elided."""
    if count <= limit:
        return list(range(count)), False
    head = (limit + 1) // 2
    tail = limit - head
    return list(range(head)) + list(range(count - tail, count)), True


def format_matrix(matrix: Any) -> str:
    """
    Render a header line followed by right-aligned, elided rows.

    Args:
        matrix: Any Matrix (read through its unchecked at())

    Returns:
        Multi-line preview string
    """
    settings = get_settings()
    rows, row_gap = _visible(matrix.row_count, settings.max_display_rows)
    columns, column_gap = _visible(matrix.column_count, settings.max_display_columns)
    head_columns = (settings.max_display_columns + 1) // 2

    cells = []
    for i in rows:
        line = [_format_value(matrix.at(i, j), settings.display_precision) for j in columns]
        if column_gap:
            line.insert(head_columns, "..")
        cells.append(line)
    if row_gap:
        cells.insert((settings.max_display_rows + 1) // 2, [".."] * len(cells[0]))

    widths = [max(len(line[k]) for line in cells) for k in range(len(cells[0]))]
    header = (
        f"{type(matrix).__name__} {matrix.row_count}x{matrix.column_count}-{matrix.ops.name}"
    )
    body = ["  ".join(cell.rjust(width) for cell, width in zip(line, widths)) for line in cells]
    return "\n".join([header] + body)


def format_vector(vector: Any) -> str:
    """Render a header line followed by one elided element per line."""
    settings = get_settings()
    indices, gap = _visible(vector.count, settings.max_display_rows)
    lines = [_format_value(vector.at(i), settings.display_precision) for i in indices]
    if gap:
        lines.insert((settings.max_display_rows + 1) // 2, "..")
    width = max(len(line) for line in lines)
    header = f"{type(vector).__name__} {vector.count}-{vector.ops.name}"
    return "\n".join([header] + [line.rjust(width) for line in lines])
