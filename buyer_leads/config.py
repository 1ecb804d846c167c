"""Configuration management for buyer-leads."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from buyer_leads.exceptions import ConfigurationError


class ImportMode(str, Enum):
    """What to do with a batch that contains invalid rows."""

    ALL_OR_NOTHING = "all_or_nothing"
    PARTIAL = "partial"


@dataclass
class ImportConfig:
    """Bulk CSV import policy."""

    max_rows: int = 200
    max_upload_bytes: int = 10 * 1024 * 1024
    mode: ImportMode = ImportMode.ALL_OR_NOTHING
    require_status_column: bool = True
    multiline_fields: bool = True


@dataclass
class RateLimitRule:
    """Fixed window: at most ``max_requests`` per ``window_seconds``."""

    window_seconds: float
    max_requests: int


@dataclass
class RateLimitConfig:
    """Per-operation rate limits."""

    create: RateLimitRule = field(default_factory=lambda: RateLimitRule(15 * 60, 20))
    update: RateLimitRule = field(default_factory=lambda: RateLimitRule(15 * 60, 30))
    import_csv: RateLimitRule = field(default_factory=lambda: RateLimitRule(60 * 60, 5))


@dataclass
class CodecConfig:
    """Field codec behaviour."""

    lenient: bool = False  # pass unmapped tokens through unchanged


@dataclass
class ListConfig:
    """Buyer list pagination defaults."""

    default_limit: int = 10
    max_limit: int = 100


@dataclass
class BuyerLeadsConfig:
    """Main configuration for buyer-leads."""

    imports: ImportConfig = field(default_factory=ImportConfig)
    rate_limits: RateLimitConfig = field(default_factory=RateLimitConfig)
    codec: CodecConfig = field(default_factory=CodecConfig)
    listing: ListConfig = field(default_factory=ListConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "BuyerLeadsConfig":
        """Create config from environment variables."""
        import os

        try:
            imports = ImportConfig(
                max_rows=int(os.getenv("IMPORT_MAX_ROWS", "200")),
                max_upload_bytes=int(os.getenv("IMPORT_MAX_BYTES", str(10 * 1024 * 1024))),
                mode=ImportMode(os.getenv("IMPORT_MODE", ImportMode.ALL_OR_NOTHING.value).lower()),
                require_status_column=os.getenv("IMPORT_REQUIRE_STATUS", "true").lower() == "true",
                multiline_fields=os.getenv("IMPORT_MULTILINE", "true").lower() == "true",
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc

        if imports.max_rows < 1:
            raise ConfigurationError("IMPORT_MAX_ROWS must be at least 1")

        codec = CodecConfig(lenient=os.getenv("CODEC_LENIENT", "false").lower() == "true")

        return cls(
            imports=imports,
            codec=codec,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
