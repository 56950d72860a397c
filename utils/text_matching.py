"""Text normalization and answer matching helpers."""

import re
from typing import List, Sequence


def normalize_text(text: str) -> str:
    """
    Normalize text for comparison.
    
    - Convert to lowercase
    - Remove punctuation (except spaces and minus signs)
    - Collapse multiple spaces
    - Strip leading/trailing spaces
    """
    if not text:
        return ""
    
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def fold_case(text: str) -> str:
    """Trim and lowercase typed text, keeping every other character."""
    return (text or "").strip().lower()


def split_tokens(text: str) -> List[str]:
    """Split an answer like "red, blue green" into normalized tokens."""
    return [t for t in normalize_text(text.replace(',', ' ')).split(' ') if t]


def is_prefix(entered: Sequence, target: Sequence) -> bool:
    """Check whether `entered` is a (possibly complete) prefix of `target`."""
    if len(entered) > len(target):
        return False
    return list(target[:len(entered)]) == list(entered)


def parse_integer(text: str) -> int:
    """Parse a whole-number answer. Raises ValueError on anything else."""
    cleaned = text.strip().replace(' ', '')
    if not re.fullmatch(r'-?\d+', cleaned):
        raise ValueError(f"not a whole number: {text!r}")
    return int(cleaned)
