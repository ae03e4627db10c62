"""Configuration management for loan-ledger."""

from dataclasses import dataclass, field
from pathlib import Path

from loan_ledger.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_LOG_FORMATS = {"standard", "json"}


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "loan_ledger"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class PolicyConfig:
    """Ledger policy switches.

    Both default to the permissive reference behaviour.
    """

    # Raise RateUnavailableError instead of falling back to zero interest.
    strict_rate_resolution: bool = False
    # Keep DEFAULTED/REJECTED loans from being auto-completed by a repayment.
    guard_terminal_status: bool = False


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class LedgerConfig:
    """Main configuration for loan-ledger."""

    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")
        if self.log_format not in _LOG_FORMATS:
            raise ConfigurationError(f"Unknown log format: {self.log_format}")

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=_parse_int("POSTGRES_PORT", os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "loan_ledger"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        policy = PolicyConfig(
            strict_rate_resolution=_parse_bool(
                "STRICT_RATE_RESOLUTION", os.getenv("STRICT_RATE_RESOLUTION", "false")
            ),
            guard_terminal_status=_parse_bool(
                "GUARD_TERMINAL_STATUS", os.getenv("GUARD_TERMINAL_STATUS", "false")
            ),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=_parse_bool("PRETTY_JSON", os.getenv("PRETTY_JSON", "false")),
        )

        seed = os.getenv("SEED")

        return cls(
            postgres=postgres,
            policy=policy,
            output=output,
            seed=_parse_int("SEED", seed) if seed else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
