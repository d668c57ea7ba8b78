from .services.grib_metadata_service import (
    GribMetadataService,
    build_inventory,
    get_parameter,
    get_parameter_names,
    get_record,
    inventory,
)
from .models.values import Array, ParameterLookupResult, ParameterName, Scalar, record_to_python
from .utils.errors import (
    ArgumentError,
    FileError,
    GribInspectorError,
    KeyExtractionError,
    PreconditionError,
    RangeError,
)

__version__ = "0.1.0"

__all__ = ["GribMetadataService",
           "inventory",
           "build_inventory",
           "get_record",
           "get_parameter_names",
           "get_parameter",
           "Scalar",
           "Array",
           "ParameterName",
           "ParameterLookupResult",
           "record_to_python",
           "GribInspectorError",
           "PreconditionError",
           "ArgumentError",
           "FileError",
           "RangeError",
           "KeyExtractionError",
           ]
