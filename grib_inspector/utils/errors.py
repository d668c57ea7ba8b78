"""Error kinds raised while inspecting GRIB files.

A parameter that matches no message is not an error; see
``ParameterLookupResult`` in ``grib_inspector.models.values``.
"""
from typing import Optional


class GribInspectorError(Exception):
    """Base class for every failure raised by grib_inspector"""


class PreconditionError(GribInspectorError):
    """Decoder version or call preconditions are not met. Raised before any file I/O."""


class ArgumentError(PreconditionError, ValueError):
    """A required argument is missing or has the wrong type"""


class FileError(GribInspectorError):
    """The path is not a readable GRIB file, or the decoder reports corruption"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class RangeError(GribInspectorError, IndexError):
    """A message index falls outside [1, message_count]"""

    def __init__(self, index: int, message_count: int):
        self.index = index
        self.message_count = message_count
        super().__init__(f"Message index {index} is outside the valid range [1, {message_count}]")


class KeyExtractionError(GribInspectorError):
    """The decoder refused to yield a value for a key"""

    def __init__(self, key: str, message_index: Optional[int] = None, cause: Optional[BaseException] = None):
        self.key = key
        self.message_index = message_index
        self.cause = cause
        super().__init__(key)

    def __str__(self) -> str:
        where = f" in message {self.message_index}" if self.message_index is not None else ""
        detail = f": {self.cause}" if self.cause is not None else ""
        return f"Could not read key '{self.key}'{where}{detail}"
