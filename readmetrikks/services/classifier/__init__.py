"""Hit classification - humans, aggregators and bots."""
from .classifier import Hit, HitClassifier
from .constants import BOT_PATTERNS

__all__ = ["Hit", "HitClassifier", "BOT_PATTERNS"]
