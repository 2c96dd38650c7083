"""grib2parse - Decode the section structure of GRIB Edition 2 messages."""

__version__ = "0.1.0"

from grib2parse.config import GribConfig, CodeTable, load_config
from grib2parse.errors import (
    GribError,
    UnsupportedEditionError,
    MalformedSectionError,
    TruncatedBufferError,
    NoMessagesError,
)
from grib2parse.models import (
    Diagnostic,
    Indicator,
    Identification,
    GridDefinition,
    ProductDefinition,
    DataRepresentation,
    BitMap,
    Field,
    GribMessage,
    ScanResult,
    to_dict,
)
from grib2parse.numeric import (
    parse_scaled_value,
    parse_basic_angle,
    simple_packing_value,
)
from grib2parse.parser import scan, iter_messages
from grib2parse.reader import DecodeReport, read_data, read_file
from grib2parse.sections import SectionNumber, frame_section
from grib2parse.tables import CodeValue, lookup

__all__ = [
    "GribConfig",
    "CodeTable",
    "load_config",
    "GribError",
    "UnsupportedEditionError",
    "MalformedSectionError",
    "TruncatedBufferError",
    "NoMessagesError",
    "Diagnostic",
    "Indicator",
    "Identification",
    "GridDefinition",
    "ProductDefinition",
    "DataRepresentation",
    "BitMap",
    "Field",
    "GribMessage",
    "ScanResult",
    "to_dict",
    "parse_scaled_value",
    "parse_basic_angle",
    "simple_packing_value",
    "scan",
    "iter_messages",
    "DecodeReport",
    "read_data",
    "read_file",
    "SectionNumber",
    "frame_section",
    "CodeValue",
    "lookup",
]
