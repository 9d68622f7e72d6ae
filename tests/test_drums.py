"""Tests for the drum tab grid."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from songsheet.drums import (
    CLICK_CYCLE,
    DRUM_TAB_TEMPLATE,
    DrumGrid,
    DrumRow,
    describe_cell,
    instrument_name,
    next_cell_value,
    parse,
    serialize,
)
from songsheet.exceptions import DrumGridError


class TestParse:
    """Test reading drum tab text."""

    def test_template(self) -> None:
        rows = parse(DRUM_TAB_TEMPLATE)
        assert [(r.short_code, r.instrument) for r in rows] == [
            ("HH", "Hi-Hat"),
            ("SD", "Snare Drum"),
            ("BD", "Bass Drum"),
        ]
        assert rows[0].pattern == "x-x-x-x-x-x-x-x-"

    def test_padded_code_is_stripped(self) -> None:
        assert parse("HH |x-x-|")[0].short_code == "HH"

    def test_unknown_code_named_after_itself(self) -> None:
        assert parse("COW|o---|")[0].instrument == "COW"

    def test_custom_instruments(self) -> None:
        assert parse("CB|o---|", {"CB": "Cowbell"})[0].instrument == "Cowbell"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "no bars at all",
            "HH|x-x-",
            "|x-x-|",
            "   |x-x-|",
        ],
    )
    def test_malformed_lines_dropped(self, text: str) -> None:
        assert parse(text) == []

    def test_windows_line_endings(self) -> None:
        assert len(parse("HH|x---|\r\nSD|--o-|\r\n")) == 2


class TestSerialize:
    def test_codes_aligned(self) -> None:
        rows = [DrumRow("Hi-Hat", "HH", "x-x-"), DrumRow("Cowbell", "COW", "o---")]
        assert serialize(rows) == "HH |x-x-|\nCOW|o---|"

    def test_single_letter_codes_padded_to_two(self) -> None:
        assert serialize([DrumRow("Kick", "K", "o-")]) == "K |o-|"

    def test_empty(self) -> None:
        assert serialize([]) == ""


class TestCells:
    def test_cycle(self) -> None:
        assert [next_cell_value(c) for c in CLICK_CYCLE] == ["x", "o", "b", "X", "O", "#", "-"]

    def test_unknown_goes_to_empty(self) -> None:
        assert next_cell_value("g") == "-"

    def test_describe(self) -> None:
        assert describe_cell("o") == "Snare (stroke)"
        assert describe_cell("?") == "Unknown"

    def test_instrument_name_default(self) -> None:
        assert instrument_name("FT") == "Floor Tom"


class TestDrumGrid:
    """Test the editing model."""

    def test_column_count_minimum(self) -> None:
        assert DrumGrid.from_string("HH|x-x-|").column_count == 16

    def test_column_count_follows_longest(self) -> None:
        assert DrumGrid.from_string("HH|" + "x-" * 10 + "|").column_count == 20

    def test_cycle_cell(self) -> None:
        grid = DrumGrid.from_string(DRUM_TAB_TEMPLATE)
        assert grid.cycle_cell(1, 0) == "x"
        assert grid.rows[1].pattern.startswith("x---o")

    def test_cycle_pads_short_row(self) -> None:
        grid = DrumGrid.from_string("HH|x-|")
        assert grid.cycle_cell(0, 10) == "x"
        assert grid.rows[0].pattern == "x---------x-----"

    @pytest.mark.parametrize("row,column", [(-1, 0), (3, 0), (0, -1), (0, 16)])
    def test_cycle_outside_grid(self, row: int, column: int) -> None:
        grid = DrumGrid.from_string(DRUM_TAB_TEMPLATE)
        before = grid.to_string()
        assert grid.cycle_cell(row, column) is None
        assert grid.to_string() == before

    def test_add_instrument(self) -> None:
        grid = DrumGrid.from_string(DRUM_TAB_TEMPLATE)
        row = grid.add_instrument("Cowbell", "CB")
        assert row.pattern == "-" * 16
        assert grid.instruments == {"CB": "Cowbell"}
        assert grid.to_string().endswith("CB|----------------|")

    @pytest.mark.parametrize("name,code", [("", "CB"), ("Cowbell", ""), ("  ", "  "), ("Cowbell", "C|B")])
    def test_add_instrument_requires_name_and_code(self, name: str, code: str) -> None:
        grid = DrumGrid()
        with pytest.raises(DrumGridError):
            grid.add_instrument(name, code)

    def test_drum_grid_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            DrumGrid().add_instrument("", "")

    def test_custom_names_survive_reparse(self) -> None:
        grid = DrumGrid.from_string("HH|x---|")
        grid.add_instrument("Cowbell", "CB")
        again = DrumGrid.from_string(grid.to_string(), grid.instruments)
        assert again.rows[1].instrument == "Cowbell"


codes = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789", min_size=1, max_size=4)
patterns = st.text(alphabet="-xoXObg#d", min_size=1, max_size=32)


@given(st.lists(st.tuples(codes, patterns), max_size=8))
def test_parse_serialize_round_trip(pairs: list[tuple[str, str]]) -> None:
    rows = [DrumRow(instrument_name(code), code, pattern) for code, pattern in pairs]
    assert parse(serialize(rows)) == rows
