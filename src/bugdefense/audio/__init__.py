"""Audio feedback for BUG DEFENSE."""

from bugdefense.audio.engine import FeedbackSounds, get_feedback_sounds

__all__ = ["FeedbackSounds", "get_feedback_sounds"]
