"""
Infrastructure initialization and bootstrap.

Singleton pattern for wiring stores, collaborators and the event router
from configuration.
"""

import logging
from typing import Optional

from agent.memory import (
    ConversationStateStore,
    LocationHistory,
    ProcessedEventCache,
)
from agent.router import EventRouter
from config import Config
from services.weather import WeatherInfoCache

from .config import InfraConfig, get_config

logger = logging.getLogger(__name__)


class BotBootstrap:
    """
    Bootstrap the bot based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["BotBootstrap"] = None

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        app_secret: Optional[str] = None,
        verify_token: Optional[str] = None,
        server_url: Optional[str] = None,
        default_username: Optional[str] = None,
    ):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.app_secret = Config.APP_SECRET if app_secret is None else app_secret
        self.verify_token = Config.VALIDATION_TOKEN if verify_token is None else verify_token
        self.server_url = Config.SERVER_URL if server_url is None else server_url
        self.default_username = (
            Config.DEFAULT_USERNAME if default_username is None else default_username
        )

        self.conversation = ConversationStateStore(
            profiles=self.config.create_store("profiles"),
            pending=self.config.create_store("pending_follow_up"),
            states=self.config.create_store("conversation_state"),
        )
        self.history = LocationHistory(
            self.config.create_store("location_history"),
            capacity=self.config.locations_backlog_limit,
        )
        self.weather = WeatherInfoCache(
            client=self.config.create_weather_client(),
            store=self.config.create_store(
                "weather_info",
                ttl_seconds=self.config.weather_cache_ttl_seconds,
            ),
        )
        self.processed = ProcessedEventCache(max_size=self.config.processed_cache_size)

        self.router = EventRouter(
            sender=self.config.create_sender(),
            profile_lookup=self.config.create_profile_lookup(),
            conversation=self.conversation,
            history=self.history,
            weather=self.weather,
            processed=self.processed,
            server_url=self.server_url,
            default_username=self.default_username,
            call_timeout=self.config.http_timeout_seconds,
        )

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "BotBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)
        """
        if cls._instance is None:
            cls._instance = cls(config)
            logger.info(f"Bootstrapped {cls._instance!r}")
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def __repr__(self) -> str:
        return (
            f"BotBootstrap(weather={self.config.weather_backend}, "
            f"send={self.config.send_backend}, "
            f"memory={self.config.memory_backend})"
        )


def get_bootstrap() -> BotBootstrap:
    """FastAPI dependency returning the process-wide bootstrap."""
    return BotBootstrap.get_instance()
