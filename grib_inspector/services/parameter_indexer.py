# grib_inspector/services/parameter_indexer.py
import logging
from typing import List

from grib_inspector.config import DEFAULT_NAME_KEY, NAME_KEYS
from grib_inspector.models.values import ParameterName
from grib_inspector.services.decoder import GribDecoder
from grib_inspector.services.record_extractor import read_value
from grib_inspector.utils.errors import ArgumentError

logger = logging.getLogger(__name__)


class ParameterIndexer:
    """Collects the chosen name key of every message in a file"""

    def __init__(self, decoder: GribDecoder):
        self.decoder = decoder

    def index(self, path: str, name_key: str = DEFAULT_NAME_KEY) -> List[ParameterName]:
        """
        Scan `path` message by message for `name_key`.

        Key names are compared case-insensitively and the first matching key
        of a message wins. A message without the key contributes no entry, so
        each entry carries the index of the message it came from.
        """
        if name_key not in NAME_KEYS:
            raise ArgumentError(f"Unsupported name key '{name_key}'. Expecting one of {NAME_KEYS}")

        wanted = name_key.lower()
        names: List[ParameterName] = []
        handle = self.decoder.open(path)
        try:
            message_count = self.decoder.count(handle)
            for index in range(1, message_count + 1):
                message = self.decoder.read_next(handle)
                if message is None:
                    break
                try:
                    for key in self.decoder.keys(message):
                        if key.lower() == wanted:
                            names.append(ParameterName(index, read_value(self.decoder, message, key)))
                            break
                    else:
                        logger.debug(f"Message {index} has no '{name_key}' key")
                finally:
                    self.decoder.release(message)
        finally:
            self.decoder.close(handle)

        logger.info(f"Indexed {len(names)} of {message_count} messages by '{name_key}' in {path}")
        return names
