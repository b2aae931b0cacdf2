from .club import Club
from .coach_profile import CoachProfile
from .marketplace_item import MarketplaceItem
from .message import Message
from .player_profile import PlayerProfile
from .tournament import Tournament
from .user import User
from .user_session import UserSession

__all__ = [
    "User",
    "UserSession",
    "PlayerProfile",
    "CoachProfile",
    "Tournament",
    "MarketplaceItem",
    "Club",
    "Message",
]
