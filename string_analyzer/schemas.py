from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class AnalysisRecord(BaseModel):
    """Derived facts for one stored string. Serialised with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    string: str
    length: int
    is_palindrome: bool
    word_count: int
    unique_characters: int
    character_frequency: Dict[str, int]
    sha256: str


class StringListResponse(BaseModel):
    count: int
    data: List[AnalysisRecord]
    filters_applied: Optional[Dict[str, Any]] = None


class ParsedFilter(BaseModel):
    field: str
    operator: str
    value: Any


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: ParsedFilter


class NaturalLanguageResponse(BaseModel):
    count: int
    data: List[AnalysisRecord]
    interpreted_query: InterpretedQuery


class HealthResponse(BaseModel):
    status: str = Field("healthy", description="Service status")
    stored: int
