"""Client configuration for phoenixplay."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from phoenixplay._constants import DEFAULT_OPACITY, DEFAULT_REQUEST_TIMEOUT, DEFAULT_STEP_MINUTES
from phoenixplay.exceptions import PhoenixConfigError


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise PhoenixConfigError(f"{env_key} must be numeric, got {value!r}") from exc


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise PhoenixConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class PhoenixConfig:
    """Engine configuration.

    Parameters
    ----------
    tiles_api_url : str
        Base URL that relative dataset paths are resolved against.
    step_minutes : int
        Width of one time bucket in minutes. Shared by burn and actor
        datasets so both play back on the same timeline.
    default_opacity : float
        Opacity applied to burn layers after every dataset change.
    request_timeout : float
        Total timeout in seconds for one dataset fetch.
    burn_before_layer : str or None
        Surface layer id that burn layers are inserted beneath.
    actor_before_layer : str or None
        Surface layer id that actor layers are inserted beneath.
    """

    tiles_api_url: str = ""
    step_minutes: int = DEFAULT_STEP_MINUTES
    default_opacity: float = DEFAULT_OPACITY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    burn_before_layer: str | None = None
    actor_before_layer: str | None = None

    def __post_init__(self) -> None:
        if self.step_minutes <= 0:
            raise PhoenixConfigError(f"step_minutes must be positive, got {self.step_minutes}")
        if not 0.0 <= self.default_opacity <= 1.0:
            raise PhoenixConfigError(f"default_opacity must be within [0, 1], got {self.default_opacity}")
        if self.request_timeout <= 0:
            raise PhoenixConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    def resolve_url(self, path: str) -> str:
        """Return *path* as an absolute URL.

        Absolute URLs (anything with a scheme) are returned unchanged;
        anything else is joined onto ``tiles_api_url`` the same way the
        dataset catalogue references its files.
        """
        if "://" in path:
            return path
        if not self.tiles_api_url:
            raise PhoenixConfigError(f"Cannot resolve relative dataset path {path!r} without tiles_api_url")
        return f"{self.tiles_api_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> PhoenixConfig:
        """Create configuration from environment variables.

        Reads the optional ``PHOENIX_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        PhoenixConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "PHOENIX_TILES_API": "tiles_api_url",
            "PHOENIX_BURN_BEFORE_LAYER": "burn_before_layer",
            "PHOENIX_ACTOR_BEFORE_LAYER": "actor_before_layer",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        step_env = env.get("PHOENIX_STEP_MINUTES")
        if step_env is not None and "step_minutes" not in overrides:
            config_kwargs["step_minutes"] = _env_int("PHOENIX_STEP_MINUTES", step_env)

        opacity_env = env.get("PHOENIX_DEFAULT_OPACITY")
        if opacity_env is not None and "default_opacity" not in overrides:
            config_kwargs["default_opacity"] = _env_float("PHOENIX_DEFAULT_OPACITY", opacity_env)

        timeout_env = env.get("PHOENIX_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("PHOENIX_REQUEST_TIMEOUT", timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
