import logging
import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic.alias_generators import to_camel

from string_analyzer.exceptions import ValidationError
from string_analyzer.schemas import AnalysisRecord

logger = logging.getLogger(__name__)

Number = Union[int, float]

OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ge": operator.ge,
    "le": operator.le,
    "gt": operator.gt,
    "lt": operator.lt,
    "contains": lambda actual, expected: expected in actual,
    "icontains": lambda actual, expected: expected.lower() in actual.lower(),
}


@dataclass(frozen=True)
class Predicate:
    """A single constraint on one attribute of an AnalysisRecord."""

    field: str
    operator: str
    value: Any

    def __post_init__(self):
        if self.operator not in OPERATORS:
            raise ValueError(f"Unknown operator: {self.operator}")

    def matches(self, record: AnalysisRecord) -> bool:
        return OPERATORS[self.operator](getattr(record, self.field), self.value)

    def describe(self) -> Dict[str, Any]:
        return {
            "field": to_camel(self.field),
            "operator": self.operator,
            "value": self.value,
        }


def parse_bool(name: str, raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValidationError(f"{name} must be 'true' or 'false'")


def parse_number(name: str, raw: str) -> Number:
    """
    Parse a finite number; integral values come back as int.

    Empty text is rejected rather than read as 0: `?minLength=` carries no
    number, so it is reported as malformed instead of silently matching
    everything.
    """
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a number")
    return int(number) if number.is_integer() else number


# query parameter -> (record attribute, operator, value parser)
FILTER_PARAMS = {
    "isPalindrome": ("is_palindrome", "eq", parse_bool),
    "minLength": ("length", "ge", parse_number),
    "maxLength": ("length", "le", parse_number),
    "wordCount": ("word_count", "eq", parse_number),
    "contains": ("string", "contains", None),
}


def parse_filter_params(params: Mapping[str, Optional[str]]) -> Dict[str, Predicate]:
    """
    Turn raw query parameters into predicates keyed by parameter name.
    Absent (None) parameters impose no constraint; unknown names are ignored.
    """
    predicates = {}
    for name, (field, op, parser) in FILTER_PARAMS.items():
        raw = params.get(name)
        if raw is None:
            continue
        try:
            value = parser(name, raw) if parser else raw
        except ValidationError as e:
            logger.warning(f"Rejected filter {name}={raw!r}: {e.message}")
            raise
        predicates[name] = Predicate(field, op, value)
    return predicates


def filter_records(
    records: Iterable[AnalysisRecord], predicates: Iterable[Predicate]
) -> List[AnalysisRecord]:
    """Keep the records matching every predicate (logical AND)."""
    predicates = list(predicates)
    return [r for r in records if all(p.matches(r) for p in predicates)]
