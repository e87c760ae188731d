from .settings import (
    DiscordSettings,
    ReviewFlowSettings,
    Settings,
    WebSettings,
    get_settings,
)

__all__ = [
    "DiscordSettings",
    "ReviewFlowSettings",
    "Settings",
    "WebSettings",
    "get_settings",
]
