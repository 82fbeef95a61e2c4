"""
Sentence segmentation and word tokenization for OCR text.

Pages are split on line breaks first and each line is then segmented with a
Punkt tokenizer seeded with common English abbreviations, so honorifics and
times do not end a sentence and no nltk model download is needed.
"""

import re
from typing import List

from nltk.tokenize import RegexpTokenizer
from nltk.tokenize.punkt import PunktParameters, PunktSentenceTokenizer

_LINE_BREAK = re.compile(r"\r?\n")

# Lowercase, without the final period ("p.m." is stored as "p.m").
ABBREVIATIONS = frozenset({
    "mr", "mrs", "ms", "dr", "prof", "rev", "st", "jr", "sr", "mt", "capt", "gen", "sgt",
    "a.m", "p.m", "e.g", "i.e", "etc", "vs", "approx", "appt", "dept",
    "jan", "feb", "apr", "jun", "jul", "aug", "sep", "sept", "oct", "nov", "dec",
    "tue", "tues", "thu", "thur", "thurs", "fri",
})


def _build_sentence_tokenizer() -> PunktSentenceTokenizer:
    params = PunktParameters()
    params.abbrev_types = set(ABBREVIATIONS)
    return PunktSentenceTokenizer(params)


_sentence_tokenizer = _build_sentence_tokenizer()
_word_tokenizer = RegexpTokenizer(r"\w+(?:['’]\w+)*")


def split_lines(text: str) -> List[str]:
    """Returns the raw lines of ``text``, blank ones included."""
    return _LINE_BREAK.split(text or "")


def split_sentences(text: str) -> List[str]:
    """
    Splits text into trimmed, non-empty sentences in reading order.

    Args:
        text (str): Raw page text.

    Returns:
        List[str]: Sentences; a line never spans two sentences.
    """
    sentences: List[str] = []
    for line in split_lines(text):
        line = line.strip()
        if not line:
            continue
        sentences.extend(s.strip() for s in _sentence_tokenizer.tokenize(line) if s.strip())
    return sentences


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens, punctuation dropped."""
    return [token.lower() for token in _word_tokenizer.tokenize(text or "")]
