"""
DrillEngine - timed question/answer sessions.
"""

from src.engine.base import (
    AnswerRecord,
    AnswerResult,
    CategoryStats,
    DrillHandler,
    EngineEvents,
    EngineState,
    Question,
    QuestionReady,
    RunningStats,
    SessionSummary,
    SessionView,
    Validation,
)
from src.engine.drill_engine import DrillEngine

__all__ = [
    "AnswerRecord",
    "AnswerResult",
    "CategoryStats",
    "DrillEngine",
    "DrillHandler",
    "EngineEvents",
    "EngineState",
    "Question",
    "QuestionReady",
    "RunningStats",
    "SessionSummary",
    "SessionView",
    "Validation",
]
