import hashlib
import re
from collections import Counter
from typing import Dict

from string_analyzer.schemas import AnalysisRecord

NON_ALPHANUMERIC = re.compile(r"[^0-9a-zA-Z]")


def to_well_formed(text: str) -> str:
    """Replace lone surrogates with U+FFFD so the text always encodes as UTF-8"""
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def is_well_formed(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def compute_sha256(text: str) -> str:
    """Compute the lowercase hex SHA-256 of the UTF-8 bytes of a string"""
    return hashlib.sha256(to_well_formed(text).encode("utf-8")).hexdigest()


def is_palindrome(text: str) -> bool:
    """
    Check if the ASCII-alphanumeric projection of a string reads the same
    both ways (case-insensitive). Strings with no such characters are
    never palindromes.
    """
    cleaned = NON_ALPHANUMERIC.sub("", text).lower()
    return bool(cleaned) and cleaned == cleaned[::-1]


def count_words(text: str) -> int:
    """Count tokens separated by runs of whitespace"""
    return len(text.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character, in first-seen order"""
    return dict(Counter(text))


def analyze_string(value: str) -> AnalysisRecord:
    """Analyze a string and return all computed properties"""
    frequency = get_character_frequency(value)

    return AnalysisRecord(
        string=value,
        length=len(value),
        is_palindrome=is_palindrome(value),
        word_count=count_words(value),
        unique_characters=len(frequency),
        character_frequency=frequency,
        sha256=compute_sha256(value),
    )
