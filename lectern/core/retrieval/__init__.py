"""Query answering: retrieval planning and answer composition."""

from .answer_composer import AnswerComposer, build_chat_model
from .models import ComposedAnswer, RetrievedChunk, ScopeHints
from .query_planner import RetrievalQueryPlanner

__all__ = [
    "AnswerComposer",
    "ComposedAnswer",
    "RetrievalQueryPlanner",
    "RetrievedChunk",
    "ScopeHints",
    "build_chat_model",
]
