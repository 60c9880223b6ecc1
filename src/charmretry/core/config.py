"""Configuration models for charmretry.

Pydantic v2 models for per-call-site retry budgets and logging. Retry
budgets can be declared inline or loaded from YAML, keyed by call-site name.

Example YAML:

    profiles:
      workload:
        max_attempts: 5
        base_delay: 2
      api:
        max_attempts: 3
        base_delay: 1
        strategy: linear
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from charmretry.core.backoff import (
    BackoffFn,
    constant_backoff,
    exponential_backoff,
    linear_backoff,
)
from charmretry.core.logging import get_logger
from charmretry.exceptions import RetryConfigError

_logger = get_logger("config")

RECOMMENDED_MAX_BLOCKING_SECONDS = 300.0
"""Upper bound on total backoff per call site. The agent processes no other
events while a retry sequence sleeps."""


def _load_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise RetryConfigError(f"Cannot read retry config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RetryConfigError(f"Cannot parse retry config {path}: {e}") from e


def _parse_yaml_string(yaml_str: str) -> Any:
    try:
        return yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise RetryConfigError(f"Cannot parse retry config: {e}") from e


class RetryConfig(BaseModel):
    """Retry budget for one call site.

    Immutable once built. At least one attempt is always made; a delay
    follows every transient failure except the last one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(ge=1, description="Total attempts, including the first")
    base_delay: float = Field(ge=0, description="Base delay between attempts (seconds)")
    multiplier: float = Field(
        default=2.0, ge=1, description="Growth factor for exponential backoff"
    )
    strategy: Literal["exponential", "linear", "constant"] = Field(
        default="exponential",
        description="Built-in backoff formula, ignored when backoff_fn is set",
    )
    max_delay: float | None = Field(
        default=None, ge=0, description="Optional cap on any single delay (seconds)"
    )
    backoff_fn: BackoffFn | None = Field(
        default=None,
        exclude=True,
        description="Custom attempt -> delay function overriding strategy",
    )

    @model_validator(mode="after")
    def _validate_budget(self) -> RetryConfig:
        if self.max_delay is not None and self.max_delay < self.base_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must not be less than "
                f"base_delay ({self.base_delay})"
            )
        total = self.worst_case_blocking_seconds()
        if total > RECOMMENDED_MAX_BLOCKING_SECONDS:
            _logger.warning(
                "retry_budget_exceeds_recommendation",
                max_attempts=self.max_attempts,
                worst_case_seconds=round(total, 2),
                recommended_seconds=RECOMMENDED_MAX_BLOCKING_SECONDS,
            )
        return self

    def backoff(self) -> BackoffFn:
        """Return the backoff function this config applies."""
        if self.backoff_fn is not None:
            return self.backoff_fn
        if self.strategy == "linear":
            return linear_backoff(self.base_delay, self.max_delay)
        if self.strategy == "constant":
            return constant_backoff(self.base_delay)
        return exponential_backoff(self.base_delay, self.multiplier, self.max_delay)

    def delay_for(self, attempt: int) -> float:
        """Delay to sleep after failed attempt number ``attempt`` (1-indexed).

        Raises:
            ValueError: If attempt < 1 or the backoff yields a negative delay.
        """
        delay = float(self.backoff()(attempt))
        if delay < 0:
            raise ValueError(f"backoff returned negative delay {delay} for attempt {attempt}")
        return delay

    def delay_schedule(self) -> list[float]:
        """Delays slept when every attempt fails: after attempts 1..max_attempts-1."""
        return [self.delay_for(attempt) for attempt in range(1, self.max_attempts)]

    def worst_case_blocking_seconds(self) -> float:
        """Total time spent sleeping when the whole budget is exhausted."""
        return sum(self.delay_schedule())

    @classmethod
    def from_yaml(cls, path: Path) -> RetryConfig:
        """Load a single retry config from a YAML file."""
        return cls.model_validate(_load_yaml(path))

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> RetryConfig:
        """Load a single retry config from a YAML string."""
        return cls.model_validate(_parse_yaml_string(yaml_str))


class RetryProfiles(BaseModel):
    """Named retry budgets, one per call site."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    profiles: dict[str, RetryConfig] = Field(
        default_factory=dict,
        description="Retry budget per call-site name",
    )

    def get(self, name: str) -> RetryConfig:
        """Return the profile for ``name``.

        Raises:
            KeyError: If no profile with that name exists.
        """
        try:
            return self.profiles[name]
        except KeyError:
            known = ", ".join(sorted(self.profiles)) or "none"
            raise KeyError(f"Unknown retry profile '{name}' (known: {known})") from None

    @classmethod
    def _from_raw(cls, raw: Any, bare_name: str) -> RetryProfiles:
        # A bare RetryConfig document becomes a single profile.
        if isinstance(raw, dict) and "profiles" not in raw and "max_attempts" in raw:
            return cls(profiles={bare_name: RetryConfig.model_validate(raw)})
        return cls.model_validate(raw or {})

    @classmethod
    def from_yaml(cls, path: Path) -> RetryProfiles:
        """Load retry profiles from a YAML file.

        A file holding a single retry config yields one profile named
        after the file stem.
        """
        return cls._from_raw(_load_yaml(path), path.stem)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> RetryProfiles:
        """Load retry profiles from a YAML string.

        A single retry config yields one profile named ``default``.
        """
        return cls._from_raw(_parse_yaml_string(yaml_str), "default")
