"""
Keys never read from a GRIB message.

The decoder faults, or returns meaningless data, for some keys on certain
GRIB2 section templates. Extraction skips them up front instead of catching
errors. When a new incompatibility turns up, add the key to the matching
group below.
"""
from typing import Dict, FrozenSet

# End-of-message marker exposed as a key by the decoder
END_OF_MESSAGE = "7777"

EXCLUDED_KEY_GROUPS: Dict[str, FrozenSet[str]] = {
    # Section 5 (data representation): packing internals
    "data_representation": frozenset({
        "codedValues",
        "packedValues",
        "groupWidths",
        "groupLengths",
        "firstOrderValues",
        "secondOrderValues",
        "secondaryBitmap",
        "secondaryBitmaps",
        "secondaryBitmapPrimary",
        "secondaryBitmapsSize",
        "runLengthPackingValues",
    }),
    # Section 6 (bit-map)
    "bit_map": frozenset({
        "bitmap",
        "bitMap",
    }),
    # Statistical processing time-range loops (product templates 4.8, 4.11, ...)
    "statistical_processing": frozenset({
        "lengthOfTimeRange",
        "indicatorOfUnitForTimeRange",
        "timeIncrement",
        "indicatorOfUnitForTimeIncrement",
        "typeOfTimeIncrement",
    }),
    # Derived forecasts (product templates 4.2, 4.12)
    "derived_forecast": frozenset({
        "derivedForecast",
        "numberOfForecastsInEnsemble",
    }),
    # Ensemble / EPS information
    "ensemble": frozenset({
        "isEps",
        "epsPoint",
        "epsContinous",
        "epsStatisticsPoint",
        "epsStatisticsContinous",
    }),
    # Computed by pygrib itself and listed by keys(), but not readable with message[key]
    "pygrib_computed": frozenset({
        "analDate",
        "validDate",
    }),
    # Coordinate arrays need the decoder's geo-iterator, which is not used here
    "geographic": frozenset({
        "latitudes",
        "longitudes",
        "distinctLatitudes",
        "distinctLongitudes",
        "latLonValues",
    }),
}

EXCLUDED_KEYS: FrozenSet[str] = frozenset().union(*EXCLUDED_KEY_GROUPS.values())


def is_excluded(key: str) -> bool:
    """True if `key` must not be extracted"""
    return key == END_OF_MESSAGE or key in EXCLUDED_KEYS
