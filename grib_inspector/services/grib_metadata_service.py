# grib_inspector/services/grib_metadata_service.py
import logging
from typing import Callable, List, Optional

from grib_inspector.config import DEFAULT_NAME_KEY
from grib_inspector.models.schemas import Inventory
from grib_inspector.models.values import ParameterLookupResult, ParameterName, Record
from grib_inspector.services.decoder import GribDecoder
from grib_inspector.services.inventory_builder import InventoryBuilder
from grib_inspector.services.parameter_indexer import ParameterIndexer
from grib_inspector.services.parameter_lookup import ParameterLookup
from grib_inspector.services.record_extractor import RecordExtractor
from grib_inspector.utils.validation import (
    check_message_index, optional_record_count, require_index, require_name_key, require_text
)

logger = logging.getLogger(__name__)


class GribMetadataService:
    """
    Entry points for inspecting GRIB files.

    Every call builds a fresh decoder with its own multi-field setting, so
    calls never share state.
    """

    def __init__(self, decoder_factory: Callable[[bool], GribDecoder] = GribDecoder):
        self._decoder_factory = decoder_factory

    def _decoder(self, multi_field_support: bool) -> GribDecoder:
        decoder = self._decoder_factory(multi_field_support)
        decoder.check_version()
        return decoder

    def build_inventory(self, path: str, multi_field_support: bool = False) -> Inventory:
        """
        Build the inventory of a GRIB file.

        Args:
            path: GRIB file to read
            multi_field_support: Let a single message carry several fields

        Returns:
            Inventory containing:
            - header: file path, GRIB edition and originating centre of the first message, message count
            - entries: one descriptive entry per message
        """
        require_text(path, "path")
        decoder = self._decoder(multi_field_support)
        return InventoryBuilder(decoder).build(path)

    def inventory(self, path: str, multi_field_support: bool = False) -> List[str]:
        """Four header lines followed by one formatted line per message"""
        return self.build_inventory(path, multi_field_support).lines()

    def get_record(self, path: str, index: int = 1, record_count: Optional[int] = None,
                   structured: bool = False, multi_field_support: bool = False) -> Record:
        """
        Extract the full record of message `index` (1-based).

        `record_count` is the message count when the caller already knows it;
        otherwise the decoder is asked. Raises RangeError outside [1, count].
        """
        require_text(path, "path")
        require_index(index, "index")
        record_count = optional_record_count(record_count)
        decoder = self._decoder(multi_field_support)

        if record_count is None:
            handle = decoder.open(path)
            try:
                record_count = decoder.count(handle)
            finally:
                decoder.close(handle)
        check_message_index(index, record_count)

        logger.info(f"Extracting message {index} of {record_count} from {path}")
        return RecordExtractor(decoder).extract_from_file(path, [index], as_structured=structured)[0]

    def get_parameter_names(self, path: str, name_key: str = DEFAULT_NAME_KEY,
                            multi_field_support: bool = False) -> List[ParameterName]:
        """Name-key value of every message that carries `name_key`, in file order"""
        require_text(path, "path")
        require_name_key(name_key)
        decoder = self._decoder(multi_field_support)
        return ParameterIndexer(decoder).index(path, name_key)

    def get_parameter(self, path: str, parameter_name: str, name_key: str = DEFAULT_NAME_KEY,
                      structured: bool = False, multi_field_support: bool = False) -> ParameterLookupResult:
        """Records of every message whose `name_key` value is exactly `parameter_name`"""
        require_text(path, "path")
        require_text(parameter_name, "parameter_name")
        require_name_key(name_key)
        decoder = self._decoder(multi_field_support)
        lookup = ParameterLookup(ParameterIndexer(decoder), RecordExtractor(decoder))
        return lookup.lookup(path, parameter_name, name_key=name_key, structured=structured)


_default_service = GribMetadataService()


def inventory(path: str, multi_field_support: bool = False) -> List[str]:
    return _default_service.inventory(path, multi_field_support=multi_field_support)


def build_inventory(path: str, multi_field_support: bool = False) -> Inventory:
    return _default_service.build_inventory(path, multi_field_support=multi_field_support)


def get_record(path: str, index: int = 1, record_count: Optional[int] = None,
               structured: bool = False, multi_field_support: bool = False) -> Record:
    return _default_service.get_record(path, index=index, record_count=record_count,
                                       structured=structured, multi_field_support=multi_field_support)


def get_parameter_names(path: str, name_key: str = DEFAULT_NAME_KEY,
                        multi_field_support: bool = False) -> List[ParameterName]:
    return _default_service.get_parameter_names(path, name_key=name_key,
                                                multi_field_support=multi_field_support)


def get_parameter(path: str, parameter_name: str, **record_options) -> ParameterLookupResult:
    return _default_service.get_parameter(path, parameter_name, **record_options)
