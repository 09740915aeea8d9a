#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the layout service client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from layoutslots.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_API_TIMEOUT,
    DEFAULT_PRODUCT_LIMIT,
    ENV_API_BASE_URL,
    ENV_API_TIMEOUT,
    ENV_API_TOKEN,
)
from layoutslots.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ClientOptions(CloneFrozenMixin):
    """Connection settings for :class:`~layoutslots.services.LayoutApiClient`.

    Parameters
    ----------
    api_base_url : str, default "http://localhost:4000"
        Base URL of the dashboard REST API
    token : str or None, default None
        Bearer token sent with every request
    timeout : float, default 30.0
        Request timeout in seconds
    product_limit : int, default 100
        Page size used when listing catalog products

    """

    api_base_url: str = field(
        default=DEFAULT_API_BASE_URL,
        metadata={"help": "Base URL of the layout REST API", "importance": "core"},
    )
    token: str | None = field(
        default=None,
        metadata={"help": "Bearer token for the layout REST API", "importance": "security"},
    )
    timeout: float = field(
        default=DEFAULT_API_TIMEOUT,
        metadata={"help": "Request timeout in seconds", "type": float, "importance": "advanced"},
    )
    product_limit: int = field(
        default=DEFAULT_PRODUCT_LIMIT,
        metadata={"help": "Page size for catalog product listing", "type": int, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.product_limit <= 0:
            raise ValueError(f"product_limit must be positive, got {self.product_limit}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "ClientOptions":
        """Build options from ``LAYOUTSLOTS_*`` environment variables.

        Explicit keyword overrides win over the environment; ``None``
        overrides are ignored so CLI flags that were not given fall through.

        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if env.get(ENV_API_BASE_URL):
            values["api_base_url"] = env[ENV_API_BASE_URL]
        if env.get(ENV_API_TOKEN):
            values["token"] = env[ENV_API_TOKEN]
        if env.get(ENV_API_TIMEOUT):
            values["timeout"] = float(env[ENV_API_TIMEOUT])
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
