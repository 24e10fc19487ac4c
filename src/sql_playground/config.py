"""
Playground settings loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation.
Every setting can be overridden with a ``PLAYGROUND_``-prefixed environment
variable or a ``.env`` file. The settings object is built once at startup and
handed to each component; nothing reads the environment after that.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from sql_playground.models import QueryLimits


class PlaygroundSettings(BaseSettings):
    """SQL playground gateway configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PLAYGROUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ClickHouse HTTP interface
    clickhouse_url: str = Field(
        default="http://localhost:8123",
        description="Base URL of the ClickHouse HTTP interface",
    )
    clickhouse_user: str = Field(default="default")
    clickhouse_password: SecretStr = Field(default=SecretStr(""))
    clickhouse_database: str = Field(
        default="default",
        description="Database user queries run against",
    )

    # Execution limits
    max_rows_limit: int = Field(default=10_000, gt=0)
    timeout_seconds: int = Field(default=120, gt=0)
    max_query_bytes: int = Field(default=1_048_576, gt=0)
    result_overflow_mode: Literal["break", "throw"] = Field(
        default="break",
        description="What ClickHouse does when max_result_rows is exceeded",
    )

    # Audit trail
    audit_store: Literal["clickhouse", "jsonl", "memory"] = Field(default="clickhouse")
    audit_database: str = Field(default="clicksight")
    audit_table: str = Field(default="sql_playground_audit")
    audit_jsonl_path: str = Field(default="sql_playground_audit.jsonl")
    audit_timeout_seconds: float = Field(default=5.0, gt=0)

    # HTTP surface
    cors_allow_origins: list[str] = Field(
        default_factory=list,
        description="Browser origins allowed to call the API (JSON list); empty disables CORS",
    )
    trust_forwarded_for: bool = Field(
        default=False,
        description="Take client_ip from X-Forwarded-For; enable only behind a trusted proxy",
    )

    @property
    def default_limits(self) -> QueryLimits:
        return QueryLimits(max_rows=self.max_rows_limit, timeout_seconds=self.timeout_seconds)

    @property
    def clickhouse_auth(self) -> tuple[str, str] | None:
        """Basic auth credentials, only when both user and password are set."""
        password = self.clickhouse_password.get_secret_value()
        if self.clickhouse_user and password:
            return (self.clickhouse_user, password)
        return None


@lru_cache
def get_settings() -> PlaygroundSettings:
    """Return the process-wide settings, built on first use."""
    return PlaygroundSettings()
