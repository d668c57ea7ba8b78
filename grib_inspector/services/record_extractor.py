# grib_inspector/services/record_extractor.py
import logging
from typing import Dict, List, Optional

from grib_inspector.models.values import Array, Record, Scalar, Value
from grib_inspector.services import key_filter
from grib_inspector.services.decoder import GribDecoder
from grib_inspector.utils.errors import FileError, KeyExtractionError

logger = logging.getLogger(__name__)

# Bulk field data; read with the grid's own dimensions
VALUES_KEY = "values"


def read_value(decoder: GribDecoder, message, key: str) -> Value:
    """Read one key, as an Array when the decoder reports more than one element"""
    if key == VALUES_KEY:
        return Array(decoder.get_values(message))
    if decoder.size(message, key) > 1:
        return Array(decoder.get_array(message, key))
    return Scalar(decoder.get_scalar(message, key))


class RecordExtractor:
    """Builds the ordered key/value record of a single message"""

    def __init__(self, decoder: GribDecoder):
        self.decoder = decoder

    def extract(self, message, as_structured: bool = False, message_index: Optional[int] = None) -> Record:
        """
        Extract every readable key of `message`.

        Args:
            message: Decoder message handle, owned by the caller.
            as_structured: Drop keys whose name repeats an earlier one
                case-insensitively; the first occurrence wins.
            message_index: 1-based position, used in log messages only.

        Returns:
            Record in decoder key order.

        Raises:
            KeyExtractionError: If the decoder fails on a key that is not excluded.
        """
        record: Record = {}
        seen = set()
        for key in self.decoder.keys(message):
            if key_filter.is_excluded(key):
                logger.debug(f"Skipping excluded key '{key}' (message {message_index})")
                continue
            if as_structured:
                folded = key.lower()
                if folded in seen:
                    logger.debug(f"Skipping duplicate key '{key}' (message {message_index})")
                    continue
                seen.add(folded)
            elif key in record:
                continue
            try:
                record[key] = read_value(self.decoder, message, key)
            except KeyExtractionError as e:
                if e.message_index is None:
                    e.message_index = message_index
                logger.error(f"Extraction of message {message_index} aborted at key '{key}': {e.cause}")
                raise
        return record

    def extract_from_file(self, path: str, indices: List[int], as_structured: bool = False) -> List[Record]:
        """
        Extract the records of the given 1-based message indices of `path`.

        Messages are visited once, in file order; records come back in the
        order of `indices`. Indices must already be validated by the caller.
        """
        wanted = set(indices)
        last = max(wanted) if wanted else 0
        found: Dict[int, Record] = {}

        handle = self.decoder.open(path)
        try:
            for index in range(1, last + 1):
                message = self.decoder.read_next(handle)
                if message is None:
                    raise FileError(path, f"message {index} could not be read")
                try:
                    if index in wanted:
                        found[index] = self.extract(message, as_structured=as_structured, message_index=index)
                finally:
                    self.decoder.release(message)
        finally:
            self.decoder.close(handle)

        return [found[index] for index in indices]
