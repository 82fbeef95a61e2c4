from typing import List, Set

from inkwell.insights.schemas import Goal
from inkwell.insights.text import split_sentences

GOAL_KEYWORDS = (
    "goal",
    "plan",
    "aim",
    "dream",
    "aspire",
    "aspiration",
    "target",
    "objective",
    "hope",
    "intend",
)

SHORT_TERM_MARKERS = (
    "today",
    "tonight",
    "tomorrow",
    "this week",
    "this weekend",
    "this month",
    "next week",
    "soon",
)

LONG_TERM_MARKERS = (
    "next year",
    "someday",
    "eventually",
    "future",
    "long term",
    "long-term",
    "years",
)


def determine_horizon(sentence: str) -> str:
    """Short-term markers win over long-term ones; unmarked goals are long term."""
    lower = sentence.lower()
    if any(marker in lower for marker in SHORT_TERM_MARKERS):
        return "short_term"
    if any(marker in lower for marker in LONG_TERM_MARKERS):
        return "long_term"
    return "long_term"


def is_goal_sentence(sentence: str) -> bool:
    lower = sentence.lower()
    return any(keyword in lower for keyword in GOAL_KEYWORDS)


def extract_goals(text: str) -> List[Goal]:
    goals: List[Goal] = []
    seen: Set[str] = set()
    for sentence in split_sentences(text):
        if not is_goal_sentence(sentence):
            continue
        description = sentence.strip()
        key = description.lower()
        if not description or key in seen:
            continue
        seen.add(key)
        goals.append(Goal(description=description, horizon=determine_horizon(description)))
    return goals
