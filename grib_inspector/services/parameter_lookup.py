# grib_inspector/services/parameter_lookup.py
import logging

from grib_inspector.config import DEFAULT_NAME_KEY
from grib_inspector.models.values import ParameterLookupResult
from grib_inspector.services.parameter_indexer import ParameterIndexer
from grib_inspector.services.record_extractor import RecordExtractor

logger = logging.getLogger(__name__)


class ParameterLookup:
    """Finds the full records of every message whose name key equals a parameter name"""

    def __init__(self, indexer: ParameterIndexer, extractor: RecordExtractor):
        self.indexer = indexer
        self.extractor = extractor

    def lookup(self, path: str, parameter_name: str, name_key: str = DEFAULT_NAME_KEY,
               structured: bool = False) -> ParameterLookupResult:
        """
        Match `parameter_name` against the name key of every message.

        Matching is exact string equality: "52" does not match "520" or "052".
        No match is a normal outcome and yields an empty result.
        """
        result = ParameterLookupResult(parameter_name=parameter_name, name_key=name_key)

        names = self.indexer.index(path, name_key)
        result.message_indices = [entry.message_index for entry in names if entry.text == parameter_name]

        if not result.message_indices:
            logger.info(f"Parameter '{parameter_name}' not found by '{name_key}' in {path}")
            return result

        result.records = self.extractor.extract_from_file(path, result.message_indices, as_structured=structured)
        logger.info(f"Parameter '{parameter_name}' found in message(s) {result.message_indices} of {path}")
        return result
