"""Language feedback generation for transcribed answers."""

from .rubric import DEFAULT_CATEGORIES, RubricConfig, build_messages
from .service import FeedbackService

__all__ = ["FeedbackService", "RubricConfig", "DEFAULT_CATEGORIES", "build_messages"]
