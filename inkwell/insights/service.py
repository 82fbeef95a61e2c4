from typing import Optional

from inkwell.insights.emotions import detect_emotions
from inkwell.insights.goals import extract_goals
from inkwell.insights.schemas import InsightResult, SentimentResult
from inkwell.insights.sentiment import SentimentEngine, default_engine, label_for_score
from inkwell.insights.tasks import extract_tasks
from inkwell.insights.text import tokenize


def extract_insights(text: Optional[str], sentiment_engine: Optional[SentimentEngine] = None) -> InsightResult:
    """
    Derives sentiment, emotions, tasks and goals from one page of text.

    Args:
        text (Optional[str]): Raw OCR text; None is treated as empty.
        sentiment_engine (Optional[SentimentEngine]): Scorer to use, defaults to
            the lexicon engine.

    Returns:
        InsightResult: The combined analysis.
    """
    safe_text = text or ""
    engine = sentiment_engine or default_engine

    emotions = detect_emotions(tokenize(safe_text))
    tasks = extract_tasks(safe_text)
    goals = extract_goals(safe_text)

    scored = engine.analyze(safe_text)
    sentiment = SentimentResult(
        label=label_for_score(scored.score),
        score=scored.score,
        comparative=scored.comparative,
    )

    return InsightResult(sentiment=sentiment, emotions=emotions, tasks=tasks, goals=goals)
