"""
Lexicon-based sentiment scoring.

Scores are additive in the AFINN style: every token found in the lexicon adds
its valence, a preceding negator flips the sign, and the comparative score is
the total divided by the number of tokens. Valences come from the VADER lexicon
that ships with nltk.
"""

import logging
import threading
from typing import Mapping, NamedTuple, Optional, Protocol

import nltk
from nltk.sentiment.vader import SentimentIntensityAnalyzer, VaderConstants

from inkwell.insights.text import tokenize

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 1
NEGATIVE_THRESHOLD = -1

NEGATORS = frozenset(VaderConstants.NEGATE)


class SentimentScore(NamedTuple):
    score: float
    comparative: float


class SentimentEngine(Protocol):
    def analyze(self, text: str) -> SentimentScore:
        ...


def load_vader_lexicon() -> Mapping[str, float]:
    """Loads the VADER lexicon, downloading it on first use."""
    try:
        nltk.data.find("sentiment/vader_lexicon.zip")
    except LookupError:
        logger.info("VADER lexicon not found locally, downloading")
        nltk.download("vader_lexicon", quiet=True)
    return dict(SentimentIntensityAnalyzer().lexicon)


def _is_negator(token: str) -> bool:
    return token in NEGATORS or token.endswith("n't")


class LexiconSentimentEngine:
    def __init__(self, lexicon: Optional[Mapping[str, float]] = None):
        self._lexicon = lexicon
        self._lock = threading.Lock()

    @property
    def lexicon(self) -> Mapping[str, float]:
        if self._lexicon is None:
            with self._lock:
                if self._lexicon is None:
                    self._lexicon = load_vader_lexicon()
        return self._lexicon

    def analyze(self, text: str) -> SentimentScore:
        tokens = tokenize(text)
        lexicon = self.lexicon
        score = 0.0
        for i, token in enumerate(tokens):
            valence = lexicon.get(token)
            if valence is None:
                continue
            if i > 0 and _is_negator(tokens[i - 1]):
                valence = -valence
            score += valence
        score = round(score, 3)
        comparative = round(score / len(tokens), 4) if tokens else 0.0
        return SentimentScore(score=score, comparative=comparative)


def label_for_score(score: float) -> str:
    if score > POSITIVE_THRESHOLD:
        return "positive"
    if score < NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


default_engine = LexiconSentimentEngine()
