"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Stub backends need no credentials and no network.
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

from agent.memory import (
    InMemoryKeyedStore,
    KeyedStore,
    LOCATIONS_BACKLOG_LIMIT,
    SQLiteKeyedStore,
)
from services.weather import (
    DEFAULT_WEATHER_API_URL,
    DEFAULT_WEATHER_CACHE_TTL_SECONDS,
    HttpWeatherClient,
    StubWeatherClient,
    WeatherClient,
)
from transport.messenger import (
    DEFAULT_GRAPH_API_URL,
    GraphProfileLookup,
    MessageSender,
    MessengerSender,
    ProfileLookup,
    RecordingSender,
    StubProfileLookup,
)


WeatherBackendType = Literal["http", "stub"]
SendBackendType = Literal["graph", "stub"]
MemoryBackendType = Literal["memory", "sqlite"]


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "" or value.strip().lower() == "none":
        return None
    return float(value)


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Weather
    weather_backend: WeatherBackendType
    weather_api_url: str
    weather_cache_ttl_seconds: Optional[float]

    # Messenger platform
    send_backend: SendBackendType
    graph_api_url: str
    page_access_token: str

    # Outbound calls
    http_timeout_seconds: float

    # State
    memory_backend: MemoryBackendType
    sqlite_db_path: str
    locations_backlog_limit: int
    processed_cache_size: int

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Weather: http, cached for one day
        - Send API: graph
        - State: in-memory
        """
        return cls(
            weather_backend=os.getenv("WEATHER_BACKEND", "http"),  # type: ignore
            weather_api_url=os.getenv("WEATHER_API_URL", DEFAULT_WEATHER_API_URL),
            weather_cache_ttl_seconds=_optional_float(
                os.getenv("WEATHER_CACHE_TTL_SECONDS", str(DEFAULT_WEATHER_CACHE_TTL_SECONDS))
            ),
            send_backend=os.getenv("SEND_BACKEND", "graph"),  # type: ignore
            graph_api_url=os.getenv("GRAPH_API_URL", DEFAULT_GRAPH_API_URL),
            page_access_token=os.getenv("MESSENGER_PAGE_ACCESS_TOKEN", ""),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
            memory_backend=os.getenv("MEMORY_BACKEND", "memory"),  # type: ignore
            sqlite_db_path=os.getenv("SQLITE_DB_PATH", "./bot_state.db"),
            locations_backlog_limit=int(
                os.getenv("LOCATIONS_BACKLOG_LIMIT", str(LOCATIONS_BACKLOG_LIMIT))
            ),
            processed_cache_size=int(os.getenv("PROCESSED_CACHE_SIZE", "10000")),
        )

    def create_weather_client(self) -> WeatherClient:
        """Create weather backend instance based on configuration."""
        if self.weather_backend == "stub":
            return StubWeatherClient()
        return HttpWeatherClient(
            base_url=self.weather_api_url,
            timeout=self.http_timeout_seconds,
        )

    def create_sender(self) -> MessageSender:
        """Create Send API backend instance based on configuration."""
        if self.send_backend == "stub":
            return RecordingSender()
        return MessengerSender(
            page_access_token=self.page_access_token,
            graph_api_url=self.graph_api_url,
            timeout=self.http_timeout_seconds,
        )

    def create_profile_lookup(self) -> ProfileLookup:
        """Create profile backend instance based on configuration."""
        if self.send_backend == "stub":
            return StubProfileLookup()
        return GraphProfileLookup(
            page_access_token=self.page_access_token,
            graph_api_url=self.graph_api_url,
            timeout=self.http_timeout_seconds,
        )

    def create_store(self, namespace: str, ttl_seconds: Optional[float] = None) -> KeyedStore:
        """Create one keyed store based on configuration."""
        if self.memory_backend == "sqlite":
            return SQLiteKeyedStore(
                namespace=namespace,
                db_path=self.sqlite_db_path,
                ttl_seconds=ttl_seconds,
            )
        return InMemoryKeyedStore(ttl_seconds=ttl_seconds, name=namespace)


def get_config() -> InfraConfig:
    """Get infrastructure configuration."""
    return InfraConfig.from_env()
