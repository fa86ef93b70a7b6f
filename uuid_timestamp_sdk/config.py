"""Runtime configuration models."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Final

from dotenv import load_dotenv

from uuid_timestamp_sdk.core.errors import ConfigError

# timezone() only accepts offsets strictly inside +-24h
MAX_UTC_OFFSET_MINUTES: Final[int] = 24 * 60 - 1


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def validate_utc_offset(minutes: int) -> int:
    if not -MAX_UTC_OFFSET_MINUTES <= minutes <= MAX_UTC_OFFSET_MINUTES:
        raise ConfigError(
            f"UTC offset {minutes} min outside "
            f"-{MAX_UTC_OFFSET_MINUTES}..{MAX_UTC_OFFSET_MINUTES}"
        )
    return minutes


def _validate_seconds(name: str, value: float) -> float:
    if value < 0:
        raise ConfigError(f"{name} cannot be negative: {value}")
    return value


@dataclass
class DisplayConfig:
    time_ago_enabled: bool = True
    use_local_time: bool = False
    utc_offset_minutes: int = 0

    def __post_init__(self) -> None:
        validate_utc_offset(self.utc_offset_minutes)

    def tzinfo(self) -> tzinfo:
        """Fixed offset used to render instants.

        The host local offset is sampled once, at call time.

        Raises:
            ConfigError: if ``utc_offset_minutes`` was set out of range
                after construction.
        """
        if self.use_local_time:
            local = datetime.now().astimezone().utcoffset() or timedelta(0)
            return timezone(local)
        validate_utc_offset(self.utc_offset_minutes)
        if self.utc_offset_minutes == 0:
            return timezone.utc
        return timezone(timedelta(minutes=self.utc_offset_minutes))


@dataclass
class TransientConfig:
    display_seconds: float = 5.0

    def __post_init__(self) -> None:
        _validate_seconds("display_seconds", self.display_seconds)


@dataclass
class RescanConfig:
    debounce_seconds: float = 0.25

    def __post_init__(self) -> None:
        _validate_seconds("debounce_seconds", self.debounce_seconds)


@dataclass
class RuntimeConfig:
    display: DisplayConfig = field(default_factory=DisplayConfig)
    transient: TransientConfig = field(default_factory=TransientConfig)
    rescan: RescanConfig = field(default_factory=RescanConfig)

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "RuntimeConfig":
        """Build a config from ``UUID_*`` environment variables.

        Values in ``env_file`` (when given) override the process environment.

        Raises:
            ConfigError: naming the variable that is malformed or out of range.
        """
        if env_file:
            load_dotenv(env_file, override=True)
        offset = _env_int("UUID_UTC_OFFSET_MINUTES", 0)
        try:
            validate_utc_offset(offset)
        except ConfigError as e:
            raise ConfigError(f"UUID_UTC_OFFSET_MINUTES: {e}") from e
        return cls(
            display=DisplayConfig(
                time_ago_enabled=_env_bool("UUID_TIME_AGO", True),
                use_local_time=_env_bool("UUID_USE_LOCAL_TIME", False),
                utc_offset_minutes=offset,
            ),
            transient=TransientConfig(
                display_seconds=_validate_seconds(
                    "UUID_TRANSIENT_SECONDS", _env_float("UUID_TRANSIENT_SECONDS", 5.0)
                ),
            ),
            rescan=RescanConfig(
                debounce_seconds=_validate_seconds(
                    "UUID_RESCAN_DEBOUNCE", _env_float("UUID_RESCAN_DEBOUNCE", 0.25)
                ),
            ),
        )
