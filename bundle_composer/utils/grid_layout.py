import math

from ..errors import InvalidInput
from ..models import GridLayout

GRID_CELL_SIZE = 400

# image count -> (cols, rows). Three images go on a 2x2 grid, leaving the
# bottom-right cell empty.
_SMALL_GRIDS = {
    1: (1, 1),
    2: (2, 1),
    3: (2, 2),
    4: (2, 2),
    5: (3, 2),
    6: (3, 2),
    7: (3, 3),
    8: (3, 3),
    9: (3, 3),
}


def grid_shape(image_count: int) -> tuple[int, int]:
    """Return ``(cols, rows)`` for a number of images."""
    if isinstance(image_count, bool) or not isinstance(image_count, int):
        raise InvalidInput(f"Image count must be an integer, got {image_count!r}")
    if image_count <= 0:
        raise InvalidInput(f"Image count must be positive, got {image_count}")
    if image_count in _SMALL_GRIDS:
        return _SMALL_GRIDS[image_count]
    cols = math.ceil(math.sqrt(image_count))
    rows = math.ceil(image_count / cols)
    return cols, rows


def compute_layout(image_count: int, cell_size: int = GRID_CELL_SIZE) -> GridLayout:
    """Tile ``image_count`` square cells row-major onto a grid.

    Positions are the top-left pixel offset of each image, in input order:
    row 0 left to right, then row 1, and so on.
    """
    cols, rows = grid_shape(image_count)
    positions = tuple(
        ((i % cols) * cell_size, (i // cols) * cell_size)
        for i in range(image_count)
    )
    return GridLayout(
        rows=rows,
        cols=cols,
        cell_width=cell_size,
        cell_height=cell_size,
        positions=positions,
    )
