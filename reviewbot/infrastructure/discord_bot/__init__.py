from .bot import ReviewBot
from .notifier import DiscordChannelNotifier, NotificationProvider

__all__ = ["DiscordChannelNotifier", "NotificationProvider", "ReviewBot"]
