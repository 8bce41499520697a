from star_catcher.config import GameConfig, load_config
from star_catcher.items import FallingItem, Feedback, FeedbackEvent, ItemKind
from star_catcher.session import GameSession, Status

__all__ = [
    "FallingItem",
    "Feedback",
    "FeedbackEvent",
    "GameConfig",
    "GameSession",
    "ItemKind",
    "Status",
    "load_config",
]
