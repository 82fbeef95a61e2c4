"""
Action-item extraction.

Two passes over the page: explicit list markers and labels line by line,
then cue phrases sentence by sentence. Within each pass the rules are tried in
order and the first match wins.
"""

import re
from typing import Callable, List, Optional, Sequence, Set, Tuple

from inkwell.insights.schemas import Task
from inkwell.insights.text import split_lines, split_sentences

DONE_MARKERS = frozenset({"x", "✓", "✔"})
IN_PROGRESS_MARKERS = frozenset({"/", "-", "~"})

COMPLETION_WORDS = re.compile(r"completed|finished|did|done", re.IGNORECASE)
PROGRESS_WORDS = re.compile(r"progress|working|started", re.IGNORECASE)

BULLET_LINE = re.compile(r"^(?:[-*]|\d+[.)])\s*(?:\[(.)\])?\s*(.+)$")
TODO_LABEL_LINE = re.compile(r"^(todo|task|remember|focus)[:\-]\s*(.+)$", re.IGNORECASE)
DONE_LABEL_LINE = re.compile(r"^(done|completed)[:\-]\s*(.+)$", re.IGNORECASE)

TODO_CUES = re.compile(r"(need to|have to|must|should|plan to|will)\s+", re.IGNORECASE)
DONE_CUES = re.compile(r"finished|completed|accomplished", re.IGNORECASE)


def infer_status(text: str) -> str:
    """Guesses a task's status from its own wording."""
    if COMPLETION_WORDS.search(text):
        return "done"
    if PROGRESS_WORDS.search(text):
        return "in-progress"
    return "todo"


def status_from_marker(marker: Optional[str], text: str) -> str:
    if marker:
        normalized = marker.lower()
        if normalized in DONE_MARKERS:
            return "done"
        if normalized in IN_PROGRESS_MARKERS:
            return "in-progress"
    return infer_status(text)


def _bullet_task(match: re.Match) -> Tuple[str, str]:
    marker, content = match.group(1), match.group(2)
    return content, status_from_marker(marker, content)


LineRule = Tuple[re.Pattern, Callable[[re.Match], Tuple[str, str]]]

LINE_RULES: Sequence[LineRule] = (
    (BULLET_LINE, _bullet_task),
    (TODO_LABEL_LINE, lambda m: (m.group(2), "todo")),
    (DONE_LABEL_LINE, lambda m: (m.group(2), "done")),
)

SENTENCE_RULES: Sequence[Tuple[re.Pattern, str]] = (
    (TODO_CUES, "todo"),
    (DONE_CUES, "done"),
)


class _TaskList:
    """Ordered task list that drops blank and case-insensitive duplicate descriptions."""

    def __init__(self):
        self.tasks: List[Task] = []
        self._seen: Set[str] = set()

    def add(self, description: str, status: str) -> None:
        description = description.strip()
        if not description:
            return
        key = description.lower()
        if key in self._seen:
            return
        self._seen.add(key)
        self.tasks.append(Task(description=description, status=status))


def _match_line(line: str) -> Optional[Tuple[str, str]]:
    for pattern, handler in LINE_RULES:
        match = pattern.match(line)
        if match:
            return handler(match)
    return None


def _match_sentence(sentence: str) -> Optional[str]:
    for pattern, status in SENTENCE_RULES:
        if pattern.search(sentence):
            return status
    return None


def extract_tasks(text: str) -> List[Task]:
    """
    Extracts action items from page text.

    Args:
        text (str): Raw OCR text, possibly empty.

    Returns:
        List[Task]: Line-marker tasks in line order, then sentence-cue tasks in
        sentence order, without case-insensitive duplicates.
    """
    found = _TaskList()

    for line in split_lines(text):
        line = line.strip()
        if not line:
            continue
        matched = _match_line(line)
        if matched:
            found.add(*matched)

    for sentence in split_sentences(text):
        status = _match_sentence(sentence)
        if status:
            found.add(sentence, status)

    return found.tasks
