from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "REGISTRY_MOCK_"


class ServerConfig(BaseModel):
    """
    Runtime configuration of the mock registry server.

    Defaults match the production registry API; every field can be
    overridden through a `REGISTRY_MOCK_<FIELD>` environment variable
    (see `load_config`).
    """

    api_prefix: str = Field(
        default="/api/v1",
        description="Path prefix for all registry API routes.",
    )
    default_per_page: int = Field(
        default=10,
        ge=1,
        description="Page size used by list endpoints when `per_page` is not given.",
    )
    max_per_page: int = Field(
        default=100,
        ge=1,
        description="Largest accepted `per_page` value.",
    )
    session_cookie: str = Field(
        default="cargo_session",
        description="Name of the cookie carrying the session id.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...).",
    )
    seed_file: Optional[Path] = Field(
        default=None,
        description="Optional JSON file used to populate the store on startup.",
    )


def load_config() -> ServerConfig:
    """
    Build a ServerConfig from defaults and REGISTRY_MOCK_* environment variables.
    """
    raw = {}
    for name in ServerConfig.model_fields:
        env_value = os.environ.get(ENV_PREFIX + name.upper())
        if env_value:
            raw[name] = env_value
    return ServerConfig(**raw)
