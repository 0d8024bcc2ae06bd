"""Tests for synthetic fields and grid sampling."""

import numpy as np
import pytest

from isoline.domain import FIELD_NAMES, make_field, sample_grid


class TestMakeField:
    """Tests for make_field."""

    @pytest.mark.parametrize("alias,canonical", [
        ("gauss", "gaussian"),
        ("Peak", "gaussian"),
        ("pyramid", "cone"),
        (" step ", "step_x"),
        ("disc", "circle_step"),
        ("hyperbolic", "saddle"),
    ])
    def test_aliases(self, alias, canonical):
        """Aliases are case-insensitive and resolve to the canonical name."""
        assert make_field(alias).name == canonical

    def test_all_names_resolve(self):
        """Every advertised name builds a field."""
        for name in FIELD_NAMES:
            assert make_field(name).name == name

    def test_unknown(self):
        """Unknown names raise ValueError listing the options."""
        with pytest.raises(ValueError, match="Unknown field"):
            make_field("volcano")

    def test_extra_kwargs_ignored(self):
        """Parameters a field does not take are dropped."""
        field = make_field("step_x", x0=0.25, sigma=3.0, r=1.0)
        assert field.params == {"x0": 0.25}


class TestSampleGrid:
    """Tests for sample_grid."""

    def test_shape(self):
        """Grid dimensions follow width × height."""
        grid = sample_grid(make_field("cone"), 12, 7)
        assert (grid.width, grid.height) == (12, 7)
        assert grid.data.shape == (7, 12)

    def test_gaussian_peak_at_centre(self):
        """The maximum of a centred Gaussian sits on the centre sample."""
        grid = sample_grid(make_field("gaussian", A=2.0), 11, 11)
        assert grid.get(5, 5) == pytest.approx(2.0)
        assert grid.max() == pytest.approx(2.0)
        assert np.unravel_index(np.argmax(grid.data), grid.data.shape) == (5, 5)

    def test_step_x_columns(self):
        """Columns left of x0 are low, the rest high."""
        grid = sample_grid(make_field("step_x"), 10, 6)
        assert np.all(grid.data[:, :5] == 0.0)
        assert np.all(grid.data[:, 5:] == 1.0)

    def test_bounds(self):
        """Bounds shift the sampled domain."""
        grid = sample_grid(make_field("step_x", x0=0.0), 4, 2, bounds=(-1.0, 1.0, 0.0, 1.0))
        assert grid.data[0].tolist() == [0.0, 0.0, 1.0, 1.0]

    def test_invalid_size(self):
        """Non-positive sizes raise ValueError."""
        with pytest.raises(ValueError):
            sample_grid(make_field("cone"), 0, 4)
