"""Unit tests for the rating graph renderer."""

import xml.etree.ElementTree as ET

import pytest

from domain.entities.profile import NormalizedProfile, Platform, RatingChange
from domain.rendering.graph import (
    build_rating_graph,
    dynamic_max_rating,
    render_rating_graph,
    visible_band_span,
    x_label_indices,
)
from domain.rendering.palette import RatingBand
from domain.rendering.scene import Circle, Path, Rect, SvgDocument, Text
from tests.factories import DAY, FIXED_NOW_TS, make_profile


def _of_type(document: SvgDocument, kind: type) -> list:
    return [p for p in document.iter_primitives() if isinstance(p, kind)]


def _history(*ratings: int) -> tuple[RatingChange, ...]:
    return tuple(
        RatingChange(FIXED_NOW_TS - (len(ratings) - i) * 30 * DAY, rating, f"Round {i}", i + 1)
        for i, rating in enumerate(ratings)
    )


class TestCeiling:
    @pytest.mark.parametrize(
        ("max_rating", "highest", "expected"),
        [(None, 1500, 3200), (3500, 3400, 3700), (3150, 3000, 3400), (1800, 3900, 4100)],
    )
    def test_rounded_with_headroom(self, max_rating: int | None, highest: int, expected: int) -> None:
        assert dynamic_max_rating(max_rating, highest) == expected


class TestXLabels:
    def test_spacing_rules(self) -> None:
        assert x_label_indices([0, 50, 150, 260, 300]) == [0, 2, 4]

    def test_first_and_last_always_labelled(self) -> None:
        assert x_label_indices([0, 10]) == [0, 1]
        assert x_label_indices([460]) == [0]
        assert x_label_indices([]) == []


class TestBandClipping:
    def test_band_below_floor_is_skipped(self) -> None:
        assert visible_band_span(RatingBand(None, 1200, "#CCCCCC"), 1500, 3200) is None

    def test_open_bands_clip_to_plot(self) -> None:
        assert visible_band_span(RatingBand(None, 1200, "#CCCCCC"), 1000, 3200) == (1000, 1200)
        assert visible_band_span(RatingBand(3000, None, "#FF0000"), 1000, 3200) == (3000, 3200)


class TestBuildRatingGraph:
    def test_empty_history_renders_placeholder(self) -> None:
        svg = render_rating_graph(make_profile(rating_history=()))

        assert "No rating history available for tourist" in svg
        assert 'width="900"' in svg and 'height="420"' in svg

    def test_single_point_has_marker_and_no_path(self) -> None:
        document = build_rating_graph(make_profile(rating_history=_history(1500)))

        assert _of_type(document, Path) == []
        markers = _of_type(document, Circle)
        assert len(markers) == 1
        assert markers[0].cx == 460

    def test_path_has_one_move_and_n_minus_one_lines(self) -> None:
        document = build_rating_graph(make_profile(rating_history=_history(1500, 1600, 1450, 1700)))
        paths = _of_type(document, Path)

        assert len(paths) == 1
        assert paths[0].d.count("M") == 1
        assert paths[0].d.count("L") == 3
        assert len(_of_type(document, Circle)) == 4

    def test_unsorted_history_is_sorted(self) -> None:
        ordered = _history(1500, 1600, 1700)
        document = build_rating_graph(make_profile(rating_history=tuple(reversed(ordered))))
        xs = [point[0] for point in _of_type(document, Path)[0].points]

        assert xs == sorted(xs)
        assert xs[0] == 50 and xs[-1] == 870

    def test_bands_and_y_labels_inside_visible_range(self) -> None:
        document = build_rating_graph(make_profile())
        stripe_fills = [r.fill for r in _of_type(document, Rect) if r.opacity == 0.1]
        y_labels = [t.plain_text for t in _of_type(document, Text) if t.anchor == "end"
                    and t.css_class == "axis-label"]

        assert stripe_fills == ["#FF8C00", "#FF0000"]
        assert y_labels == ["2500", "3000"]

    def test_marker_tooltip_and_colour(self) -> None:
        document = build_rating_graph(make_profile())
        first = _of_type(document, Circle)[0]

        assert first.title == "2500 — Sep 2023"
        assert first.fill == "#FF0000"

    def test_header_text(self) -> None:
        document = build_rating_graph(make_profile())
        texts = [t.plain_text for t in _of_type(document, Text)]

        assert "Contest rating: 3000 (max. 3200)" in texts
        assert "tourist" in texts

    def test_codechef_uses_its_own_bands(self) -> None:
        profile = make_profile(
            platform=Platform.CODECHEF,
            rank_label="4★",
            max_rating=1900,
            rating_history=_history(1500, 1700, 1900),
        )
        document = build_rating_graph(profile)
        fills = {r.fill for r in _of_type(document, Rect) if r.opacity == 0.1}

        assert "#1E7D22" in fills
        assert "#D0011B" in fills
        assert _of_type(document, Circle)[0].fill == "#684273"

    def test_output_is_well_formed_and_stable(self) -> None:
        profile = make_profile()
        first = render_rating_graph(profile)

        assert first == render_rating_graph(profile)
        root = ET.fromstring(first.split("\n", 1)[1])
        assert root.get("viewBox") == "0 0 900 420"

    def test_malformed_history_becomes_fallback(self) -> None:
        profile = NormalizedProfile(
            handle="tourist",
            rating_history=(RatingChange(FIXED_NOW_TS, -5),),
        )
        svg = render_rating_graph(profile)

        assert "Ratings must be positive integers" in svg
        assert 'width="900"' in svg
