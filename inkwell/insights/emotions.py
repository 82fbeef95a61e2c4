from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

EMOTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "joy": ("happy", "joy", "joyful", "excited", "glad", "grateful", "delighted", "cheerful", "smile"),
    "sadness": ("sad", "down", "upset", "unhappy", "depressed", "tearful", "blue"),
    "anger": ("angry", "mad", "furious", "frustrated", "irritated", "annoyed"),
    "fear": ("afraid", "scared", "fearful", "anxious", "worried", "nervous", "terrified"),
    "surprise": ("surprised", "astonished", "amazed", "startled", "shocked"),
    "love": ("love", "loved", "loving", "cherish", "adore"),
    "calm": ("calm", "relaxed", "peaceful", "serene", "content"),
})


def detect_emotions(
    tokens: Iterable[str],
    vocabulary: Mapping[str, Tuple[str, ...]] = EMOTION_KEYWORDS,
) -> Dict[str, int]:
    """
    Counts keyword hits per emotion category.

    Tokens are matched exactly (case-insensitive). A token listed under several
    categories counts once for each of them. Categories without hits are omitted.
    """
    counts: Counter = Counter()
    for token in tokens:
        token = token.lower()
        for emotion, keywords in vocabulary.items():
            if token in keywords:
                counts[emotion] += 1
    return dict(counts)
