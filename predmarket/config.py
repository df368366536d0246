"""Environment configuration, auth claims and channel names."""

from __future__ import annotations

import enum
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

SHOW_LOGS = True

_ENV_FIELDS = (
    ("jwt_secret", "JWT_SECRET"),
    ("secret_key", "SECRET_KEY"),
    ("redis_url", "REDIS_URL"),
    ("database_url", "DATABASE_URL"),
    ("google_client_id", "GOOGLE_CLIENT_ID"),
    ("nc_url", "NC_URL"),
    ("influxdb_url", "INFLUXDB_URL"),
    ("kafka_url", "KAFKA_URL"),
    ("websocket_url", "WS_SERVER_URL"),
)


@dataclass
class GoogleClaims:
    """Claims carried in a Google identity token."""

    sub: str
    email: str
    name: str
    picture: str
    exp: int


@dataclass(frozen=True)
class EnvVarConfig:
    """Settings every service reads from the environment."""

    jwt_secret: str
    secret_key: str
    redis_url: str
    database_url: str
    google_client_id: str
    nc_url: str
    influxdb_url: str
    kafka_url: str
    websocket_url: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EnvVarConfig:
        """Build the config, raising ValueError for the first missing variable.

        Without an explicit mapping a .env file is loaded into the process
        environment first.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        values = {}
        for attr, name in _ENV_FIELDS:
            try:
                values[attr] = environ[name]
            except KeyError:
                raise ValueError(f"{name} environment variable not set") from None
        return cls(**values)


class ChannelType(str, enum.Enum):
    """Publish/subscribe channels of the websocket service."""

    PRICE_UPDATE = "price_update"
    PRICE_POSTER = "price_poster"

    @classmethod
    def from_str(cls, s: str) -> ChannelType:
        """Parse a channel name the way a JSON string holding it would be read."""
        try:
            name = json.loads(f'"{s}"')
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid channel: {s!r}") from exc
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown channel: {s!r}") from None