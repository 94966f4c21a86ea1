"""
Natural-language filtering.

A query is checked against a fixed, ordered list of phrase templates and
the first one that matches is translated into a single Predicate.
Templates are never combined, so "palindromes longer than 3" only
filters on palindromes.

Examples:
- "find palindromes"              -> isPalindrome eq True
- "all single-word strings"       -> wordCount eq 1
- "strings longer than 10"        -> length gt 10
- "strings shorter than 4 chars"  -> length lt 4
- 'strings that contains "ab"'    -> string icontains "ab"
"""
import logging
import math
import re
from dataclasses import dataclass
from re import Match
from typing import Callable, List, Optional

from string_analyzer.exceptions import InvalidQueryNumberError, UninterpretableQueryError
from string_analyzer.filters import Predicate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Template:
    name: str
    test: Callable[[str], Optional[Match]]
    build: Callable[[Match], Predicate]


def _substring_test(*phrases: str) -> Callable[[str], Optional[Match]]:
    pattern = re.compile("|".join(re.escape(p) for p in phrases))
    return pattern.search


def _length_bound(op: str) -> Callable[[Match], Predicate]:
    def build(match: Match) -> Predicate:
        digits = match.group(1)
        if not math.isfinite(float(digits)):
            raise InvalidQueryNumberError("Invalid number in query")
        return Predicate("length", op, int(digits))
    return build


TEMPLATES: List[Template] = [
    Template(
        "palindrome",
        _substring_test("palind"),
        lambda m: Predicate("is_palindrome", "eq", True),
    ),
    Template(
        "single_word",
        _substring_test("single word", "single-word"),
        lambda m: Predicate("word_count", "eq", 1),
    ),
    Template(
        "longer_than",
        re.compile(r"longer than ([0-9]+)").search,
        _length_bound("gt"),
    ),
    Template(
        "shorter_than",
        re.compile(r"shorter than ([0-9]+)").search,
        _length_bound("lt"),
    ),
    Template(
        "contains",
        re.compile(r"contains [\"']?([a-z0-9\s\-_]+)[\"']?").search,
        lambda m: Predicate("string", "icontains", m.group(1)),
    ),
]


def interpret(query: str) -> Predicate:
    """
    Translate a free-text query into one predicate.

    Raises UninterpretableQueryError when no template matches and
    InvalidQueryNumberError when a length template captures a number
    that does not fit in a finite float.
    """
    lowered = query.lower()
    for template in TEMPLATES:
        match = template.test(lowered)
        if match is None:
            continue
        predicate = template.build(match)
        logger.info(f"Interpreted query {query!r} as {template.name}: {predicate.describe()}")
        return predicate

    logger.warning(f"Could not interpret query {query!r}")
    raise UninterpretableQueryError("Could not interpret query")
