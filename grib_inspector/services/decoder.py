# grib_inspector/services/decoder.py
import os
import logging
from typing import Any, List, Optional

import numpy as np
import pygrib

from grib_inspector.config import MIN_PYGRIB_VERSION
from grib_inspector.utils.errors import FileError, KeyExtractionError, PreconditionError

logger = logging.getLogger(__name__)

# pygrib raises these for keys it cannot decode
DECODER_ERRORS = (RuntimeError, KeyError, ValueError, TypeError)


def _version_tuple(version: str) -> tuple:
    parts = []
    for part in version.split("."):
        digits = "".join(ch for ch in part if ch.isdigit())
        if not digits:
            break
        parts.append(int(digits))
    return tuple(parts)


class GribDecoder:
    """
    Thin adapter over pygrib exposing only what the extraction layer needs.

    Multi-field support is passed in explicitly and applied once, before a
    file is opened, so no caller relies on whatever another call left behind.
    """

    def __init__(self, multi_field_support: bool = False):
        self.multi_field_support = multi_field_support

    @staticmethod
    def check_version(minimum: tuple = MIN_PYGRIB_VERSION) -> None:
        version = getattr(pygrib, "__version__", "0")
        if _version_tuple(version) < tuple(minimum):
            required = ".".join(str(p) for p in minimum)
            raise PreconditionError(f"pygrib >= {required} is required, found {version}")

    def apply_multi_field_support(self) -> None:
        if self.multi_field_support:
            pygrib.multi_support_on()
        else:
            pygrib.multi_support_off()
        logger.debug(f"Multi-field support {'on' if self.multi_field_support else 'off'}")

    def open(self, path: str):
        if not os.path.exists(path):
            raise FileError(path, "file does not exist")
        if not os.path.isfile(path):
            raise FileError(path, "not a regular file")
        self.apply_multi_field_support()
        try:
            handle = pygrib.open(path)
        except (OSError, RuntimeError, ValueError) as e:
            raise FileError(path, f"cannot be opened as GRIB: {e}") from e
        try:
            message_count = self.count(handle)
        except FileError:
            handle.close()
            raise
        # pygrib opens any regular file; a file without messages is not GRIB
        if message_count == 0:
            handle.close()
            raise FileError(path, "not a GRIB file")
        logger.info(f"Opened GRIB file: {path}")
        return handle

    def count(self, handle) -> int:
        try:
            return int(handle.messages)
        except DECODER_ERRORS as e:
            raise FileError(getattr(handle, "name", "<grib>"), f"cannot count messages: {e}") from e

    def read_next(self, handle):
        """Next message in file order, or None once the file is exhausted"""
        try:
            return handle.readline()
        except DECODER_ERRORS as e:
            raise FileError(getattr(handle, "name", "<grib>"), f"corrupt message: {e}") from e

    def release(self, message) -> None:
        # pygrib frees the underlying handle when the message is collected
        pass

    def close(self, handle) -> None:
        handle.close()

    def keys(self, message) -> List[str]:
        """Key names in decoder iteration order"""
        try:
            return list(message.keys())
        except DECODER_ERRORS as e:
            raise KeyExtractionError("<keys>", getattr(message, "messagenumber", None), e) from e

    def _get(self, message, key: str) -> Any:
        try:
            return message[key]
        except DECODER_ERRORS as e:
            raise KeyExtractionError(key, getattr(message, "messagenumber", None), e) from e

    def get_scalar(self, message, key: str) -> Any:
        value = self._get(message, key)
        if isinstance(value, np.ndarray) and value.size == 1:
            return value.reshape(-1)[0]
        return value

    def get_array(self, message, key: str) -> np.ndarray:
        return np.asarray(self._get(message, key))

    def get_values(self, message) -> np.ndarray:
        """Field data shaped like the message's grid; bitmapped points stay masked"""
        try:
            values = message.values
            if isinstance(values, np.ma.MaskedArray):
                return values
            return np.asarray(values)
        except DECODER_ERRORS as e:
            raise KeyExtractionError("values", getattr(message, "messagenumber", None), e) from e

    def size(self, message, key: str) -> int:
        value = self._get(message, key)
        if isinstance(value, (str, bytes)):
            return 1
        return int(np.size(value))

    def is_missing(self, message, key: str) -> bool:
        try:
            return bool(message.is_missing(key))
        except DECODER_ERRORS as e:
            raise KeyExtractionError(key, getattr(message, "messagenumber", None), e) from e
