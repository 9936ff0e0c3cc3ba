"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PHPNAV__SECTION__KEY)
3. Repo YAML (<project>/.phpnav/config.yaml)
4. Global YAML (~/.config/phpnav/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PHPNAV__<SECTION>__<KEY>=<VALUE>

Examples:
    PHPNAV__LOGGING__LEVEL=DEBUG
    PHPNAV__DISCOVERY__AUTOLOAD_PATH=vendor/autoload.php
    PHPNAV__DISCOVERY__MAX_FILES=50000
    PHPNAV__MATCHING__KIND=subsequence
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
MatcherKind = Literal["head", "subsequence", "regex"]

# Source files, optionally followed by a legacy version digit (.php3, .php5, ...)
DEFAULT_FILE_PATTERN = r".+\.php[3-57]?$"


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PHPNAV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every skipped ancestor and scan error.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiscoveryConfig(BaseModel):
    """Class discovery configuration.

    Env vars:
        PHPNAV__DISCOVERY__AUTOLOAD_PATH: composer.json or vendor/autoload.php
        PHPNAV__DISCOVERY__FILE_PATTERN: Regex selecting source files
        PHPNAV__DISCOVERY__INCLUDE_DEV: Read autoload-dev sections
        PHPNAV__DISCOVERY__MAX_DEPTH: Directory nesting bound per mapping
        PHPNAV__DISCOVERY__MAX_FILES: Files visited per refresh
    """

    autoload_path: str | None = Field(
        default=None,
        description="Autoload source, relative to the project root. None auto-detects "
        "vendor/composer/autoload_*.php, then composer.json.",
    )
    file_pattern: str = Field(
        default=DEFAULT_FILE_PATTERN,
        description="Regex (case-insensitive) tested against each scanned file path.",
    )
    include_dev: bool = Field(
        default=True,
        description="Also read autoload-dev mappings from composer.json.",
    )
    max_depth: int = Field(
        default=64,
        description="Maximum directory nesting walked below a mapped directory.",
    )
    max_files: int = Field(
        default=200_000,
        description="Files visited per refresh before the scan stops. "
        "RISK: Too low silently drops classes from large vendor trees.",
    )

    @field_validator("file_pattern")
    @classmethod
    def validate_file_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid file pattern: {e}") from e
        return v

    @field_validator("max_depth", "max_files")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be at least 1, got {v}")
        return v


class MatchingConfig(BaseModel):
    """Name matching configuration.

    Env vars:
        PHPNAV__MATCHING__KIND: head, subsequence or regex
        PHPNAV__MATCHING__CASE_SENSITIVE: Case-sensitive matching
    """

    kind: MatcherKind = Field(
        default="head",
        description="Default matcher for class and member lookups.",
    )
    case_sensitive: bool = Field(
        default=False,
        description="Compare names case-sensitively.",
    )


class PhpNavConfig(BaseModel):
    """Root configuration for phpnav.

    All settings can be configured via:
    1. Environment variables: PHPNAV__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
