import struct

import numpy as np
import pytest

from grib_inspector.services.grib_metadata_service import GribMetadataService
from grib_inspector.utils.errors import FileError, KeyExtractionError


class FakeMessage:
    """In-memory message: (key, value) pairs in decoder order"""

    def __init__(self, items, missing=(), failing=()):
        self.items = list(items)
        self.missing = set(missing)
        self.failing = set(failing)
        self.released = False


class FakeHandle:
    def __init__(self, path, messages):
        self.name = path
        self.messages = messages
        self.position = 0
        self.closed = False


class FakeDecoder:
    """Stands in for GribDecoder, recording every acquire and release"""

    def __init__(self, files, multi_field_support=False, log=None):
        self.files = files
        self.multi_field_support = multi_field_support
        self.log = log if log is not None else DecoderLog()

    def check_version(self):
        pass

    def open(self, path):
        if path not in self.files:
            raise FileError(path, "file does not exist")
        if not self.files[path]:
            raise FileError(path, "not a GRIB file")
        handle = FakeHandle(path, self.files[path])
        self.log.opened.append(handle)
        return handle

    def count(self, handle):
        return len(handle.messages)

    def read_next(self, handle):
        if handle.position >= len(handle.messages):
            return None
        message = handle.messages[handle.position]
        handle.position += 1
        message.released = False
        self.log.acquired.append(message)
        return message

    def release(self, message):
        message.released = True

    def close(self, handle):
        handle.closed = True

    def keys(self, message):
        return [key for key, _ in message.items]

    def _get(self, message, key):
        if key in message.failing:
            raise KeyExtractionError(key, cause=RuntimeError("Key/value not found"))
        for name, value in message.items:
            if name == key:
                return value
        raise KeyExtractionError(key, cause=RuntimeError("Key/value not found"))

    def get_scalar(self, message, key):
        return self._get(message, key)

    def get_array(self, message, key):
        return np.asarray(self._get(message, key))

    def get_values(self, message):
        return np.asarray(self._get(message, "values"))

    def size(self, message, key):
        value = self._get(message, key)
        if isinstance(value, str):
            return 1
        return int(np.size(value))

    def is_missing(self, message, key):
        return key in message.missing


class DecoderLog:
    def __init__(self):
        self.opened = []
        self.acquired = []

    def all_closed(self):
        return all(handle.closed for handle in self.opened)

    def all_released(self):
        return all(message.released for message in self.acquired)


def temperature_message():
    return FakeMessage([
        ("editionNumber", 2),
        ("centre", "kwbc"),
        ("name", "Temperature"),
        ("shortName", "t"),
        ("parameterName", "130"),
        ("units", "K"),
        ("typeOfLevel", "isobaricInhPa"),
        ("level", 500),
        ("unitsOfFirstFixedSurface", "Pa"),
        ("pl", [36, 40, 44]),
        ("bitmap", [1, 0, 1, 1]),
        ("latitudes", [10.0, 20.0]),
        ("values", [[1.0, 2.0], [3.0, 4.0]]),
        ("7777", "7777"),
    ])


def cape_message():
    return FakeMessage([
        ("editionNumber", 2),
        ("centre", "kwbc"),
        ("name", "unknown"),
        ("shortName", "cape"),
        ("ShortName", "CAPE"),
        ("parameterName", "157"),
        ("typeOfLevel", "surface"),
        ("levels", "0-3000"),
        ("values", [[100.0, 250.5], [0.0, 1200.0]]),
        ("7777", "7777"),
    ])


def ozone_message():
    return FakeMessage([
        ("editionNumber", 1),
        ("centre", "ecmf"),
        ("name", "Ozone mass mixing ratio"),
        ("shortName", "o3"),
        ("parameterName", "203"),
        ("units", "kg kg**-1"),
        ("typeOfLevel", "hybrid"),
        ("level", 60),
        ("unitsOfFirstFixedSurface", "Numeric"),
        ("values", [[0.1, 0.2, 0.3]]),
        ("7777", "7777"),
    ])


@pytest.fixture
def decoder_log():
    return DecoderLog()


@pytest.fixture
def grib_files():
    """Fresh in-memory GRIB files for each test"""
    return {
        "sample.grib2": [temperature_message(), cape_message(), ozone_message()],
        "boundary.grib2": [
            FakeMessage([("parameterName", "520"), ("7777", "7777")]),
            FakeMessage([("parameterName", "052"), ("7777", "7777")]),
            FakeMessage([("parameterName", "52"), ("7777", "7777")]),
            FakeMessage([("parameterName", 52), ("7777", "7777")]),
        ],
        "gappy.grib2": [
            FakeMessage([("shortName", "u"), ("parameterName", "33")]),
            FakeMessage([("shortName", "v")]),
            FakeMessage([("shortName", "u"), ("parameterName", "33")]),
        ],
        "broken.grib2": [
            FakeMessage([("shortName", "t"), ("parameterName", "11"), ("badKey", 1)], failing={"badKey"}),
        ],
        "missing.grib2": [
            FakeMessage([
                ("editionNumber", 1),
                ("centre", "rjtd"),
                ("name", "Geopotential height"),
                ("shortName", "gh"),
                ("units", "gpm"),
                ("level", 0),
                ("unitsOfFirstFixedSurface", "Pa"),
            ], missing={"units", "unitsOfFirstFixedSurface"}),
        ],
        "empty.grib2": [],
    }


@pytest.fixture
def decoder(grib_files, decoder_log):
    return FakeDecoder(grib_files, log=decoder_log)


@pytest.fixture
def service(grib_files, decoder_log):
    return GribMetadataService(lambda multi_field_support: FakeDecoder(grib_files, multi_field_support, decoder_log))


@pytest.fixture
def fake_decoder_cls():
    return FakeDecoder


def grib2_message(category, number, surface_type, surface_value, reference):
    """
    One GRIB2 message: centre kwbc, 2x2 regular lat/lon grid, simple packing
    with 0 bits per value, so every grid point equals `reference`.
    """
    section1 = struct.pack(">IBHHBBBHBBBBBBB", 21, 1, 7, 0, 2, 1, 1, 2024, 1, 1, 0, 0, 0, 0, 1)
    section3 = struct.pack(">IBBIBBH", 72, 3, 0, 4, 0, 0, 0) + struct.pack(
        ">BBIBIBIIIIIIIBIIIIB",
        6, 0, 0, 0, 0, 0, 0,         # earth shape
        2, 2,                        # Ni, Nj
        0, 0,                        # basic angle, subdivisions
        1000000, 0,                  # La1, Lo1 (microdegrees)
        48,                          # increments given
        0, 1000000,                  # La2, Lo2
        1000000, 1000000,            # Di, Dj
        0,                           # scanning mode
    )
    section4 = struct.pack(">IBHH", 34, 4, 0, 0) + struct.pack(
        ">BBBBBHBBIBBIBBI",
        category, number, 2, 0, 96, 0, 0, 1, 0,
        surface_type, 0, surface_value,
        255, 255, 0xFFFFFFFF,
    )
    section5 = struct.pack(">IBIH", 21, 5, 4, 0) + struct.pack(">fHHBB", reference, 0, 0, 0, 0)
    section6 = struct.pack(">IBB", 6, 6, 255)
    section7 = struct.pack(">IB", 5, 7)
    body = section1 + section3 + section4 + section5 + section6 + section7 + b"7777"
    return b"GRIB" + struct.pack(">HBBQ", 0, 0, 2, 16 + len(body)) + body


@pytest.fixture
def real_grib_path(tmp_path):
    """Three-message GRIB2 file: temperature at 500 hPa, surface CAPE, relative humidity at 850 hPa"""
    path = tmp_path / "sample.grib2"
    path.write_bytes(
        grib2_message(0, 0, 100, 50000, 273.15)
        + grib2_message(7, 6, 1, 0, 1200.0)
        + grib2_message(1, 1, 100, 85000, 50.0)
    )
    return str(path)


@pytest.fixture
def text_file_path(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello, not a GRIB file\n")
    return str(path)
