from fastapi import APIRouter, Depends, Query, Request, Response, status
from typing import Optional
import logging

from string_analyzer.exceptions import InvalidTypeError, ValidationError
from string_analyzer.filters import filter_records, parse_filter_params
from string_analyzer.nl_query import interpret
from string_analyzer.schemas import (
    AnalysisRecord,
    InterpretedQuery,
    NaturalLanguageResponse,
    ParsedFilter,
    StringListResponse,
)
from string_analyzer.store import StringStore, get_store
from string_analyzer.utils import analyze_string, is_well_formed

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/strings", response_model=AnalysisRecord, status_code=status.HTTP_201_CREATED)
async def create_string(request: Request, store: StringStore = Depends(get_store)):
    """
    Analyze and store a string.
    Body: {"value": <string>}
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict) or "value" not in payload:
        raise ValidationError("Missing 'value' field")

    value = payload["value"]
    if not isinstance(value, str):
        raise InvalidTypeError("'value' must be a string")
    if not is_well_formed(value):
        raise InvalidTypeError("'value' must be valid Unicode text")

    return store.insert(value, analyze_string(value))


@router.get("/strings", response_model=StringListResponse, response_model_exclude_none=True)
def list_strings(
    is_palindrome: Optional[str] = Query(None, alias="isPalindrome", description="true or false"),
    min_length: Optional[str] = Query(None, alias="minLength", description="Minimum length (inclusive)"),
    max_length: Optional[str] = Query(None, alias="maxLength", description="Maximum length (inclusive)"),
    word_count: Optional[str] = Query(None, alias="wordCount", description="Exact word count"),
    contains: Optional[str] = Query(None, description="Case-sensitive substring"),
    store: StringStore = Depends(get_store),
):
    """
    Get all strings, optionally filtered. Filters are combined with AND.
    """
    predicates = parse_filter_params({
        "isPalindrome": is_palindrome,
        "minLength": min_length,
        "maxLength": max_length,
        "wordCount": word_count,
        "contains": contains,
    })
    data = filter_records(store.list_all(), predicates.values())

    return StringListResponse(
        count=len(data),
        data=data,
        filters_applied={name: p.value for name, p in predicates.items()} or None,
    )


@router.get("/strings/query", response_model=NaturalLanguageResponse)
@router.get(
    "/strings/filter-by-natural-language",
    response_model=NaturalLanguageResponse,
    include_in_schema=False,
)
def filter_by_natural_language(
    q: Optional[str] = Query(None, description="e.g. 'strings longer than 5'"),
    store: StringStore = Depends(get_store),
):
    """
    Filter strings using a natural language query.
    """
    if not q:
        raise ValidationError("Missing query parameter 'q'")

    predicate = interpret(q)
    data = filter_records(store.list_all(), [predicate])

    return NaturalLanguageResponse(
        count=len(data),
        data=data,
        interpreted_query=InterpretedQuery(
            original=q,
            parsed_filters=ParsedFilter(**predicate.describe()),
        ),
    )


@router.get("/strings/{value:path}", response_model=AnalysisRecord)
def get_string(value: str, store: StringStore = Depends(get_store)):
    """
    Get the analysis for an exact string.
    The value may contain "/". `/strings/` (trailing slash) looks up the
    empty string rather than listing all strings.
    """
    return store.get(value)


@router.delete("/strings/{value:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(value: str, store: StringStore = Depends(get_store)):
    """
    Delete a string from the system. `/strings/` targets the empty string.
    """
    store.delete(value)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
