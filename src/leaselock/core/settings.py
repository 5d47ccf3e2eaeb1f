"""Lock settings loader."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from leaselock.utils.env import get_bool_env, get_int_env


class LockSettings(BaseModel):
    redis_url: str = "redis://localhost:6379/0"
    cluster: bool = False
    key_prefix: str = ""
    lease_ms: int = Field(default=60_000, ge=1)
    acquire_timeout_ms: int = Field(default=10_000, ge=0)
    poll_interval_ms: int = Field(default=100, ge=1)

    @classmethod
    def from_file(cls, path: Path) -> "LockSettings":
        data = yaml.safe_load(path.read_text()) or {}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid lock settings: {exc}") from exc

    @classmethod
    def from_env(cls) -> "LockSettings":
        """Build settings from ``LEASELOCK_*`` variables, keeping defaults for unset ones."""
        data = {
            "redis_url": os.getenv("LEASELOCK_REDIS_URL") or os.getenv("REDIS_URL"),
            "cluster": get_bool_env("LEASELOCK_CLUSTER"),
            "key_prefix": os.getenv("LEASELOCK_KEY_PREFIX"),
            "lease_ms": get_int_env("LEASELOCK_LEASE_MS"),
            "acquire_timeout_ms": get_int_env("LEASELOCK_ACQUIRE_TIMEOUT_MS"),
            "poll_interval_ms": get_int_env("LEASELOCK_POLL_INTERVAL_MS"),
        }
        try:
            return cls.model_validate({k: v for k, v in data.items() if v is not None})
        except ValidationError as exc:
            raise ValueError(f"Invalid lock settings in environment: {exc}") from exc
