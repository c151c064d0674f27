"""
Unit tests for the grid layout planner.
"""
import pytest

from bundle_composer.errors import InvalidInput, ValidationError
from bundle_composer.utils.grid_layout import GRID_CELL_SIZE, compute_layout, grid_shape


@pytest.mark.unit
class TestGridShape:
    """Tests for the cols/rows table."""

    @pytest.mark.parametrize("count,expected", [
        (1, (1, 1)),
        (2, (2, 1)),
        (3, (2, 2)),
        (4, (2, 2)),
        (5, (3, 2)),
        (6, (3, 2)),
        (7, (3, 3)),
        (9, (3, 3)),
        (10, (4, 3)),
        (12, (4, 3)),
        (17, (5, 4)),
    ])
    def test_grid_shape(self, count, expected):
        assert grid_shape(count) == expected

    @pytest.mark.parametrize("count", [0, -1, -50])
    def test_non_positive_count_rejected(self, count):
        with pytest.raises(InvalidInput):
            compute_layout(count)

    def test_invalid_input_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            compute_layout(0)

    @pytest.mark.parametrize("count", [1.5, "3", None, True])
    def test_non_integer_count_rejected(self, count):
        with pytest.raises(InvalidInput):
            grid_shape(count)


@pytest.mark.unit
class TestComputeLayout:
    """Tests for the computed geometry."""

    @pytest.mark.parametrize("count", range(1, 13))
    def test_grid_holds_every_image(self, count):
        layout = compute_layout(count)

        assert layout.rows * layout.cols >= count
        assert len(layout.positions) == count
        assert len(set(layout.positions)) == count

    @pytest.mark.parametrize("count", range(1, 13))
    def test_positions_are_row_major_cells(self, count):
        layout = compute_layout(count)
        cells = [(c * GRID_CELL_SIZE, r * GRID_CELL_SIZE)
                 for r in range(layout.rows) for c in range(layout.cols)]

        assert list(layout.positions) == cells[:count]

    def test_three_images_fill_first_row_then_second(self):
        layout = compute_layout(3)

        assert layout.positions == ((0, 0), (400, 0), (0, 400))
        assert layout.canvas_width == 800
        assert layout.canvas_height == 800
        assert layout.descriptor == "2x2"

    def test_canvas_size_derived_from_cells(self):
        layout = compute_layout(5, cell_size=100)

        assert layout.cell_width == 100
        assert layout.cell_height == 100
        assert (layout.canvas_width, layout.canvas_height) == (300, 200)
        assert layout.positions[-1] == (100, 100)

    def test_same_count_gives_same_geometry(self):
        assert compute_layout(7) == compute_layout(7)
        assert compute_layout(7).to_dict() == compute_layout(7).to_dict()

    def test_to_dict_shape(self):
        assert compute_layout(2).to_dict() == {
            "rows": 1,
            "cols": 2,
            "cellWidth": 400,
            "cellHeight": 400,
            "canvasWidth": 800,
            "canvasHeight": 400,
        }
