"""Unit tests for the linear scale."""

import pytest

from domain.rendering.scale import map_linear


class TestMapLinear:
    def test_endpoints(self) -> None:
        assert map_linear(0, 0, 10, 50, 870) == 50
        assert map_linear(10, 0, 10, 50, 870) == 870

    def test_degenerate_domain_returns_midpoint(self) -> None:
        assert map_linear(7, 5, 5, 50, 870) == 460
        assert map_linear(1500, 1500, 1500, 385, 20) == 202.5

    def test_inverted_range(self) -> None:
        assert map_linear(1500, 1000, 2000, 385, 20) == pytest.approx(202.5)

    @pytest.mark.parametrize(("range_min", "range_max"), [(50, 870), (385, 20)])
    def test_monotonic(self, range_min: float, range_max: float) -> None:
        values = [map_linear(v, 0, 100, range_min, range_max) for v in range(0, 101, 5)]
        pairs = list(zip(values, values[1:]))

        if range_max > range_min:
            assert all(a < b for a, b in pairs)
        else:
            assert all(a > b for a, b in pairs)
