"""Tests for the geometry mutation interface."""

import pytest

from canvascompose.errors import NotFound, ValidationError
from canvascompose.geometry import GeometryEditor, coerce_number


@pytest.fixture
def geometry(composition):
    return GeometryEditor(composition)


@pytest.fixture
def item(composition):
    return composition.add("image", "a.png", time_range=(2, 6))


class TestCoerceNumber:
    @pytest.mark.parametrize("raw,expected", [
        ("12.5", 12.5),
        (" 3 ", 3.0),
        (7, 7.0),
        (0.25, 0.25),
        ("-4", -4.0),
    ])
    def test_numeric_values(self, raw, expected):
        assert coerce_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "nan", "inf", None, True, [1]])
    def test_rejected_values(self, raw):
        with pytest.raises(ValidationError):
            coerce_number(raw, "width")


class TestMoveTo:
    def test_moves(self, composition, geometry, item):
        moved = geometry.move_to(item.id, 100, 80.5)
        assert moved.position == (100, 80.5)
        assert composition.get(item.id).position == (100, 80.5)

    def test_bad_value_keeps_position(self, composition, geometry, item):
        with pytest.raises(ValidationError):
            geometry.move_to(item.id, "left", 10)
        assert composition.get(item.id).position == item.position

    def test_unknown_id(self, geometry):
        with pytest.raises(NotFound):
            geometry.move_to("media-99", 0, 0)


class TestResizeTo:
    def test_resizes(self, geometry, item):
        assert geometry.resize_to(item.id, 640, 480).size == (640, 480)

    @pytest.mark.parametrize("width,height", [(0, 100), (-5, 100), (100, 0)])
    def test_non_positive_rejected(self, composition, geometry, item, width, height):
        with pytest.raises(ValidationError):
            geometry.resize_to(item.id, width, height)
        assert composition.get(item.id).size == (320, 240)


class TestSetTimeRange:
    @pytest.mark.parametrize("start,end", [(0, 0.1), (0, 10), (3.5, 4), (12, 30)])
    def test_valid_pairs_round_trip(self, composition, geometry, item, start, end):
        geometry.set_time_range(item.id, start, end)
        assert composition.get(item.id).time_range == (start, end)

    @pytest.mark.parametrize("start,end", [(5, 5), (5, 4), (0, -1)])
    def test_invalid_pairs_leave_range_unchanged(self, composition, geometry, item, start, end):
        with pytest.raises(ValidationError):
            geometry.set_time_range(item.id, start, end)
        assert composition.get(item.id).time_range == (2, 6)

    def test_negative_start_rejected(self, composition, geometry, item):
        with pytest.raises(ValidationError, match="start must be >= 0"):
            geometry.set_time_range(item.id, -1, 3)

    def test_moving_window_past_old_end(self, composition, geometry, item):
        # Both ends move at once; the old end (6) never blocks the new start.
        geometry.set_time_range(item.id, 8, 12)
        assert composition.get(item.id).time_range == (8, 12)


class TestSetField:
    def test_coerces_form_string(self, composition, geometry, item):
        geometry.set_field(item.id, "width", "400")
        assert composition.get(item.id).width == 400.0

    def test_position_fields(self, composition, geometry, item):
        geometry.set_field(item.id, "x", "15")
        geometry.set_field(item.id, "y", -3)
        assert composition.get(item.id).position == (15.0, -3.0)

    def test_start_time_alias_keeps_end(self, composition, geometry, item):
        geometry.set_field(item.id, "startTime", "2.5")
        assert composition.get(item.id).time_range == (2.5, 6)

    def test_end_time_snake_case_alias(self, composition, geometry, item):
        geometry.set_field(item.id, "end_time", 9)
        assert composition.get(item.id).time_range == (2, 9)

    def test_start_past_end_rejected(self, composition, geometry, item):
        with pytest.raises(ValidationError, match="must be > start"):
            geometry.set_field(item.id, "startTime", "7")
        assert composition.get(item.id).time_range == (2, 6)

    def test_end_before_start_rejected(self, composition, geometry, item):
        with pytest.raises(ValidationError):
            geometry.set_field(item.id, "endTime", "1")
        assert composition.get(item.id).time_range == (2, 6)

    def test_negative_height_rejected(self, composition, geometry, item):
        with pytest.raises(ValidationError):
            geometry.set_field(item.id, "height", "-1")
        assert composition.get(item.id).height == 240

    @pytest.mark.parametrize("raw", ["", "ten", True])
    def test_bad_raw_value_rejected(self, composition, geometry, item, raw):
        with pytest.raises(ValidationError):
            geometry.set_field(item.id, "x", raw)
        assert composition.get(item.id) == item

    @pytest.mark.parametrize("field", ["kind", "source", "opacity"])
    def test_unknown_field_rejected(self, geometry, item, field):
        with pytest.raises(ValidationError, match="unknown field"):
            geometry.set_field(item.id, field, "1")

    def test_unknown_id(self, geometry):
        with pytest.raises(NotFound):
            geometry.set_field("media-99", "startTime", "1")


class TestEndTimeLowerBound:
    def test_is_start_plus_step(self, geometry, item):
        assert geometry.end_time_lower_bound(item.id) == pytest.approx(2.1)

    def test_follows_start_edits(self, geometry, item):
        geometry.set_field(item.id, "startTime", "4")
        assert geometry.end_time_lower_bound(item.id) == pytest.approx(4.1)
