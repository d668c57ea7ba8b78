from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any, Dict

from grib_inspector.config import NAME_KEYS, DEFAULT_NAME_KEY, MULTI_FIELD_SUPPORT


class InventoryHeader(BaseModel):
    """File-level summary printed above the inventory lines"""
    file_path: str
    edition_number: str
    originating_centre: str
    message_count: int

    def lines(self) -> List[str]:
        return [
            f"File: {self.file_path}",
            f"GRIB{self.edition_number}",
            f"Originating centre: {self.originating_centre}",
            f"Records: {self.message_count}",
        ]


class InventoryEntry(BaseModel):
    """Descriptive keys of one message, after default substitution"""
    index: int
    short_name: str
    name: str
    units: str
    level: str
    level_units: str
    type_of_level: str

    def format(self) -> str:
        return " : ".join([
            f"{self.index:>4}",
            f"{self.short_name:<6}",
            f"{self.name + ' (' + self.units + ')':<50}",
            f"{self.level + ' (' + self.level_units + ')':<20}",
            self.type_of_level,
        ])


class Inventory(BaseModel):
    header: InventoryHeader
    entries: List[InventoryEntry]

    def lines(self) -> List[str]:
        return self.header.lines() + [entry.format() for entry in self.entries]


# Request / response schemas for the HTTP API
class FileRequest(BaseModel):
    """Model for requests that target a single GRIB file"""
    path: str
    multi_field_support: bool = MULTI_FIELD_SUPPORT

    class Config:
        json_schema_extra = {
            "example": {
                "path": "gribs/gfs.t12z.pgrb2.0p25.f000.grib2",
                "multi_field_support": False
            }
        }

    @field_validator('path')
    def validate_path(cls, v):
        if not v or not v.strip():
            raise ValueError("path must be a non-empty string")
        return v


class RecordRequest(FileRequest):
    index: int = 1
    record_count: Optional[int] = None
    structured: bool = False

    @field_validator('record_count')
    def validate_record_count(cls, v):
        if v is not None and v < 1:
            raise ValueError("record_count must be a positive integer")
        return v


class ParameterNamesRequest(FileRequest):
    name_key: str = DEFAULT_NAME_KEY

    @field_validator('name_key')
    def validate_name_key(cls, v):
        if v not in NAME_KEYS:
            raise ValueError(f"name_key must be one of {', '.join(NAME_KEYS)}")
        return v


class ParameterRequest(ParameterNamesRequest):
    parameter_name: str
    structured: bool = False

    @field_validator('parameter_name')
    def validate_parameter_name(cls, v):
        if not v:
            raise ValueError("parameter_name must be a non-empty string")
        return v


class InventoryResponse(BaseModel):
    header: InventoryHeader
    entries: List[InventoryEntry]
    lines: List[str]


class RecordResponse(BaseModel):
    path: str
    index: int
    record: Dict[str, Any]


class ParameterNameItem(BaseModel):
    message_index: int
    value: Any


class ParameterNamesResponse(BaseModel):
    path: str
    name_key: str
    names: List[ParameterNameItem]


class ParameterResponse(BaseModel):
    path: str
    parameter_name: str
    name_key: str
    found: bool
    message_indices: List[int] = Field(default_factory=list)
    records: List[Dict[str, Any]] = Field(default_factory=list)
