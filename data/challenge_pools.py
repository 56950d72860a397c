"""Word lists, colours and opponent names used to build challenges."""

from typing import List, Dict, Optional
import random

# Words grouped by difficulty tier
WORD_TIERS: Dict[str, List[str]] = {
    'common': [
        'the', 'and', 'for', 'are', 'but', 'not', 'you', 'all', 'can', 'had', 'her', 'was', 'one', 'our', 'out',
        'day', 'get', 'has', 'him', 'his', 'how', 'its', 'may', 'new', 'now', 'old', 'see', 'two', 'who', 'boy',
        'did', 'man', 'end', 'few', 'got', 'lot', 'own', 'say', 'she', 'too', 'use', 'way', 'work', 'life', 'only'
    ],
    'medium': [
        'about', 'after', 'again', 'before', 'being', 'below', 'could', 'doing', 'during', 'each', 'from',
        'further', 'having', 'here', 'itself', 'more', 'most', 'other', 'over', 'same', 'should', 'some', 'such',
        'than', 'that', 'their', 'them', 'these', 'they', 'this', 'those', 'through', 'under', 'until', 'very',
        'what', 'when', 'where', 'which', 'while', 'with', 'would', 'your', 'people', 'water', 'right', 'think'
    ],
    'hard': [
        'beautiful', 'important', 'interesting', 'different', 'possible', 'necessary', 'available', 'particular',
        'education', 'government', 'development', 'management', 'environment', 'experience', 'technology',
        'community', 'opportunity', 'performance', 'responsibility', 'understanding', 'international',
        'organization', 'information', 'application', 'relationship', 'achievement', 'establishment',
        'investigation', 'presentation', 'administration'
    ],
    'tech': [
        'algorithm', 'blockchain', 'cryptocurrency', 'database', 'framework', 'javascript', 'programming',
        'software', 'hardware', 'network', 'security', 'protocol', 'interface', 'deployment', 'repository',
        'container', 'server', 'frontend', 'backend', 'fullstack', 'debugging', 'testing', 'optimization',
        'integration', 'scalability'
    ],
}

# Colours for recall sequences
COLORS: List[str] = ['red', 'blue', 'green', 'yellow', 'purple', 'orange']

COLOR_EMOJI: Dict[str, str] = {
    'red': '🟥',
    'blue': '🟦',
    'green': '🟩',
    'yellow': '🟨',
    'purple': '🟪',
    'orange': '🟧',
}


def get_words_by_tier(tier: str, max_length: Optional[int] = None) -> List[str]:
    """Get the words of a tier, optionally limited to `max_length` characters."""
    words = WORD_TIERS.get(tier.lower(), [])
    if max_length is not None:
        words = [w for w in words if len(w) <= max_length]
    return words


def shortest_word_length() -> int:
    """Length of the shortest word in any tier."""
    return min(len(w) for words in WORD_TIERS.values() for w in words)


def get_random_word(tier: str, rng: random.Random, max_length: Optional[int] = None) -> str:
    """Get a random word from a tier.

    When nothing in the tier fits `max_length`, easier tiers are tried in turn.
    Raises ValueError if no word of that length exists at all.
    """
    tiers = list(WORD_TIERS)
    tier = tier.lower()
    easier = tiers[:tiers.index(tier) + 1] if tier in tiers else tiers[:1]
    for name in reversed(easier):
        words = get_words_by_tier(name, max_length)
        if words:
            return rng.choice(words)
    raise ValueError(f"no {tier} word fits in {max_length} characters")
