import pytest

from grib_inspector.models.values import Scalar
from grib_inspector.services.inventory_builder import InventoryBuilder, describe
from grib_inspector.utils.errors import FileError


def test_inventory_lines(decoder):
    lines = InventoryBuilder(decoder).build("sample.grib2").lines()
    assert lines[:4] == [
        "File: sample.grib2",
        "GRIB2",
        "Originating centre: kwbc",
        "Records: 3",
    ]
    assert lines[4] == "   1 : t      : " + f"{'Temperature (K)':<50}" + " : " + f"{'500 (Pa)':<20}" + " : isobaricInhPa"
    assert lines[5] == "   2 : cape   : " + f"{'157 (n/a)':<50}" + " : " + f"{'0-3000 (n/a)':<20}" + " : surface"
    assert lines[6].startswith("   3 : o3     : Ozone mass mixing ratio (kg kg**-1)")


def test_line_count_and_delimiters(decoder):
    lines = InventoryBuilder(decoder).build("sample.grib2").lines()
    assert len(lines) == 3 + 4
    for line in lines[4:]:
        assert line.count(" : ") == 4


def test_header_comes_from_first_message(decoder):
    # the last message is GRIB1 from ecmf
    header = InventoryBuilder(decoder).build("sample.grib2").header
    assert header.edition_number == "2"
    assert header.originating_centre == "kwbc"


def test_keys_flagged_missing_get_defaults(decoder):
    entry = InventoryBuilder(decoder).build("missing.grib2").entries[0]
    assert entry.units == "n/a"
    assert entry.level_units == "n/a"
    assert entry.type_of_level == "n/a"
    assert "Geopotential height (n/a)" in entry.format()


def test_name_falls_back_to_parameter_name():
    entry = describe({"name": Scalar("unknown"), "parameterName": Scalar("157")}, 1)
    assert entry.name == "157"
    entry = describe({"parameterName": Scalar("Total precipitation")}, 1)
    assert entry.name == "Total precipitation"


def test_nothing_captured_defaults_everything():
    entry = describe({}, 7)
    assert entry.format() == "   7 : n/a    : " + f"{'n/a (n/a)':<50}" + " : " + f"{'n/a (n/a)':<20}" + " : n/a"


def test_level_falls_back_to_levels():
    assert describe({"levels": Scalar("850")}, 1).level == "850"
    assert describe({"level": Scalar(0), "levels": Scalar("850")}, 1).level == "0"


def test_handles_released_and_file_closed(decoder, decoder_log):
    InventoryBuilder(decoder).build("sample.grib2")
    assert len(decoder_log.acquired) == 3
    assert decoder_log.all_released()
    assert decoder_log.all_closed()


def test_file_without_messages(decoder, decoder_log):
    with pytest.raises(FileError):
        InventoryBuilder(decoder).build("empty.grib2")
    assert decoder_log.acquired == []


def test_missing_file(decoder):
    with pytest.raises(FileError):
        InventoryBuilder(decoder).build("nope.grib2")
