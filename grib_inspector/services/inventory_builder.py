# grib_inspector/services/inventory_builder.py
import logging
from typing import Dict, List, Optional

from grib_inspector.config import UNAVAILABLE
from grib_inspector.models.schemas import Inventory, InventoryEntry, InventoryHeader
from grib_inspector.models.values import Value
from grib_inspector.services.decoder import GribDecoder
from grib_inspector.services.record_extractor import read_value

logger = logging.getLogger(__name__)

# The only keys read for an inventory line
INVENTORY_KEYS = (
    "editionNumber",
    "centre",
    "name",
    "shortName",
    "parameterName",
    "units",
    "typeOfLevel",
    "pressureUnits",
    "level",
    "levels",
    "unitsOfFirstFixedSurface",
)


def _text(info: Dict[str, Value], key: str) -> Optional[str]:
    value = info.get(key)
    return None if value is None else str(value)


def describe(info: Dict[str, Value], index: int) -> InventoryEntry:
    """Apply the missing-value policy to the keys captured from one message"""
    name = _text(info, "name")
    if name is None or name == "unknown":
        name = _text(info, "parameterName")

    level = _text(info, "level")
    if level is None:
        level = _text(info, "levels")

    return InventoryEntry(
        index=index,
        short_name=_text(info, "shortName") or UNAVAILABLE,
        name=name or UNAVAILABLE,
        units=_text(info, "units") or UNAVAILABLE,
        level=level or UNAVAILABLE,
        level_units=_text(info, "unitsOfFirstFixedSurface") or UNAVAILABLE,
        type_of_level=_text(info, "typeOfLevel") or UNAVAILABLE,
    )


class InventoryBuilder:
    """One fixed-width descriptive line per message, below a file header"""

    def __init__(self, decoder: GribDecoder):
        self.decoder = decoder

    def capture(self, message) -> Dict[str, Value]:
        """Read the inventory keys a message carries. Keys flagged missing count as absent."""
        info: Dict[str, Value] = {}
        for key in self.decoder.keys(message):
            if key not in INVENTORY_KEYS or key in info:
                continue
            if self.decoder.is_missing(message, key):
                continue
            info[key] = read_value(self.decoder, message, key)
        return info

    def build(self, path: str) -> Inventory:
        entries: List[InventoryEntry] = []
        first_info: Optional[Dict[str, Value]] = None

        handle = self.decoder.open(path)
        try:
            message_count = self.decoder.count(handle)
            for index in range(1, message_count + 1):
                message = self.decoder.read_next(handle)
                if message is None:
                    break
                try:
                    info = self.capture(message)
                finally:
                    self.decoder.release(message)
                if first_info is None:
                    first_info = info
                entries.append(describe(info, index))
                logger.debug(f"Inventoried message {index}/{message_count}")
        finally:
            self.decoder.close(handle)

        first_info = first_info or {}
        header = InventoryHeader(
            file_path=path,
            edition_number=_text(first_info, "editionNumber") or UNAVAILABLE,
            originating_centre=_text(first_info, "centre") or UNAVAILABLE,
            message_count=message_count,
        )
        logger.info(f"Built inventory of {len(entries)} messages for {path}")
        return Inventory(header=header, entries=entries)
