"""Tests for grid reference parsing and formatting."""

import dataclasses
import pickle

import pytest

from nrfa.geodesy.constants import AIRY_1830, BNG_ORIGIN, LETTER_INDEX, OSGB36_TO_WGS84
from nrfa.geodesy.errors import ParseError
from nrfa.geodesy.gridref import format_grid_reference, normalise, parse_grid_reference
from nrfa.geodesy.models import PlaneCoordinate

# ── Parsing ──────────────────────────────────────────────────────


class TestParse:
    def test_plynlimon(self):
        coord = parse_grid_reference("SN853872")
        assert coord.easting == 285300
        assert coord.northing == 287200
        assert coord.resolution == 100
        assert coord.projection == "BNG"

    @pytest.mark.parametrize(
        ("ref", "easting", "northing"),
        [
            ("SV", 0, 0),
            ("HP", 400000, 1200000),
            ("TQ3080", 530000, 180000),
            ("NT2573", 325000, 673000),
            ("TG", 600000, 300000),
            ("TR", 600000, 100000),
        ],
    )
    def test_square_origins(self, ref: str, easting: int, northing: int):
        coord = parse_grid_reference(ref)
        assert (coord.easting, coord.northing) == (easting, northing)

    def test_case_and_whitespace(self):
        assert parse_grid_reference(" sn 853 872 ") == parse_grid_reference("SN853872")

    def test_letters_only_is_100km(self):
        coord = parse_grid_reference("SN")
        assert coord.resolution == 100000
        assert (coord.easting, coord.northing) == (200000, 200000)

    def test_ten_digits_is_1m(self):
        coord = parse_grid_reference("SN8530087200")
        assert coord.resolution == 1
        assert (coord.easting, coord.northing) == (285300, 287200)

    @pytest.mark.parametrize(
        ("ref", "resolution"),
        [("SN", 100000), ("SN88", 10000), ("SN8587", 1000), ("SN853872", 100),
         ("SN85308720", 10), ("SN8530087200", 1)],
    )
    def test_resolution_from_digit_count(self, ref: str, resolution: int):
        assert parse_grid_reference(ref).resolution == resolution

    def test_more_digits_keep_leading_position(self):
        refs = ["SN88", "SN8587", "SN853872", "SN85318723", "SN8531287234"]
        coords = [parse_grid_reference(r) for r in refs]
        for coarse, fine in zip(coords, coords[1:]):
            assert fine.resolution < coarse.resolution
            assert fine.easting // coarse.resolution * coarse.resolution == coarse.easting
            assert fine.northing // coarse.resolution * coarse.resolution == coarse.northing


class TestParseErrors:
    @pytest.mark.parametrize(
        ("ref", "reason"),
        [
            ("SI123456", "invalid grid letter 'I'"),
            ("IN123456", "invalid grid letter 'I'"),
            ("SN85387", "odd number of digits"),
            ("SN123456789012", "too many digits"),
            ("SN85A872", "non-digit"),
            ("S", "two grid letters"),
            ("", "empty"),
            ("AA1234", "outside the National Grid"),
            ("ZZ1234", "outside the National Grid"),
            ("1234", "invalid grid letter '1'"),
        ],
    )
    def test_rejected(self, ref: str, reason: str):
        with pytest.raises(ParseError) as exc_info:
            parse_grid_reference(ref)
        assert exc_info.value.reference == ref
        assert reason in exc_info.value.reason

    def test_not_a_string(self):
        with pytest.raises(ParseError) as exc_info:
            parse_grid_reference(None)
        assert exc_info.value.reason == "not a string"

    def test_message_names_reference(self):
        with pytest.raises(ParseError, match="SN85387"):
            parse_grid_reference("SN85387")

    def test_picklable(self):
        err = pickle.loads(pickle.dumps(ParseError("SN85387", "odd number of digits (5)")))
        assert err.reference == "SN85387"
        assert "odd number" in str(err)


# ── Formatting ───────────────────────────────────────────────────


class TestFormat:
    @pytest.mark.parametrize(
        "ref",
        ["SV", "HP", "SN853872", "TQ3080", "NT2573", "TG51", "SN8530087200", "SO0000000000", "NZ9999"],
    )
    def test_round_trip(self, ref: str):
        assert format_grid_reference(parse_grid_reference(ref)) == ref

    def test_round_trip_normalises(self):
        assert format_grid_reference(parse_grid_reference(" sn 853 872")) == "SN853872"

    def test_coarser_resolution_truncates(self):
        coord = parse_grid_reference("SN853872")
        assert format_grid_reference(coord, 1000) == "SN8587"
        assert format_grid_reference(coord, 10000) == "SN88"
        assert format_grid_reference(coord, 100000) == "SN"

    def test_coarser_round_trip(self):
        coord = parse_grid_reference("SN853872")
        coarse = parse_grid_reference(format_grid_reference(coord, 1000))
        assert (coarse.easting, coarse.northing, coarse.resolution) == (285000, 287000, 1000)

    def test_finer_resolution_pads_zeros(self):
        coord = parse_grid_reference("SN853872")
        assert format_grid_reference(coord, 1) == "SN8530087200"

    @pytest.mark.parametrize(
        ("ref", "resolution"),
        [("SN853872", 100), ("SN853872", 10), ("SN853872", 1), ("SN", 1000), ("SN", 1), ("TQ3080", 10)],
    )
    def test_finer_resolution_parses_back_to_same_point(self, ref: str, resolution: int):
        coord = parse_grid_reference(ref)
        finer = parse_grid_reference(format_grid_reference(coord, resolution))
        assert finer == coord
        assert finer.resolution == resolution

    def test_equality_ignores_resolution(self):
        assert PlaneCoordinate(285300, 287200, 100) == PlaneCoordinate(285300, 287200, 1)
        assert PlaneCoordinate(285300, 287200) != PlaneCoordinate(285300, 287201)

    def test_corner_float_noise_snaps_to_corner_cell(self):
        coord = PlaneCoordinate(easting=285299.9999999991, northing=287199.9999999996)
        assert format_grid_reference(coord, 100) == "SN853872"
        assert format_grid_reference(coord, 1) == "SN8530087200"

    def test_fractional_metres(self):
        coord = PlaneCoordinate(easting=285399.9, northing=287299.99)
        assert format_grid_reference(coord, 100) == "SN853872"

    def test_square_boundary_belongs_to_next_square(self):
        coord = PlaneCoordinate(easting=300000, northing=300000)
        assert format_grid_reference(coord, 1000) == "SJ0000"

    @pytest.mark.parametrize("resolution", [0, 5, 50, 200000])
    def test_bad_resolution(self, resolution: int):
        with pytest.raises(ParseError, match="resolution"):
            format_grid_reference(PlaneCoordinate(285300, 287200), resolution)

    @pytest.mark.parametrize(
        ("easting", "northing"),
        [(-1, 100), (700000, 100), (100, 1300000), (float("nan"), 0)],
    )
    def test_outside_grid(self, easting: float, northing: float):
        with pytest.raises(ParseError):
            format_grid_reference(PlaneCoordinate(easting, northing), 1)


class TestNormalise:
    def test_strips_and_uppercases(self):
        assert normalise("  sn 853\t872 ") == "SN853872"


# ── Constant tables ──────────────────────────────────────────────


class TestConstants:
    def test_letter_index_is_read_only(self):
        with pytest.raises(TypeError):
            LETTER_INDEX["I"] = 8
        assert "I" not in LETTER_INDEX
        assert LETTER_INDEX["S"] == 17

    def test_tables_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            OSGB36_TO_WGS84.tx = 0.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            AIRY_1830.a = 6378137.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            BNG_ORIGIN.scale_factor = 1.0
