"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (DIRECTORIES_SOLR_ prefix)
  3. Default values

The host portal addresses configuration through flat property keys such as
``solr.indexer.document.enable``; ``Settings.get_property()`` resolves those
keys against the typed sections below.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from directories_solr.indexers.base.exceptions import ConfigurationError

PROPERTY_INDEXER_ENABLE = "solr.indexer.document.enable"
PROPERTY_DOCUMENT_MAX_CHARS = "directories-solr.indexer.document.characters.limit"
PROPERTY_NAME = "directories-solr.indexer.name"
PROPERTY_DESCRIPTION = "directories-solr.indexer.description"
PROPERTY_VERSION = "directories-solr.indexer.version"


class IndexerSettings(BaseModel):
    """Directory entity indexer configuration."""

    enabled: bool = Field(default=False, description="Whether the document indexer runs")
    characters_limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of characters extracted per document (None = unbounded)",
    )
    name: str = Field(default="DirectoriesSolrIndexer", description="Indexer name")
    description: str = Field(
        default="Solr indexer for directory entities",
        description="Human readable indexer description",
    )
    version: str = Field(default="1.0.0", description="Indexer version")

    @field_validator("characters_limit", mode="before")
    @classmethod
    def _parse_limit(cls, v: Any) -> Any:
        """Treat an empty string (unset env var / blank YAML value) as no limit."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SolrSettings(BaseModel):
    """Solr index writer configuration."""

    base_url: str = Field(default="http://localhost:8983/solr", description="Solr base URL")
    collection: str = Field(default="lutece", description="Target Solr collection/core")
    username: str | None = Field(default=None, description="Basic-auth username")
    password: str | None = Field(default=None, description="Basic-auth password")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    commit: bool = Field(default=True, description="Issue a hard commit with every batch write")
    unique_key: str = Field(default="uid", description="uniqueKey field of the collection schema")


class PortalSettings(BaseModel):
    """Host portal information used when building index documents."""

    base_url: str = Field(default="http://localhost:8080/lutece/", description="Portal base URL for item links")
    portal_path: str = Field(default="jsp/site/Portal.jsp", description="Front-office page, relative to base_url")
    webapp_name: str = Field(default="lutece", description="Site tag written to every document")

    @property
    def portal_url(self) -> str:
        """Absolute URL of the front-office page documents link to."""
        return self.base_url.rstrip("/") + "/" + self.portal_path.lstrip("/")


class SourceSettings(BaseModel):
    """CMS export API serving directory entities."""

    base_url: str = Field(default="", description="CMS REST API base URL")
    entities_path: str = Field(
        default="/rest/directories/entities",
        description="Path listing entities (binaries excluded)",
    )
    api_key: str | None = Field(default=None, description="Optional bearer token")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8090, description="Server port")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the
    DIRECTORIES_SOLR_ prefix. Nested settings use double underscores.

    Example:
        DIRECTORIES_SOLR_INDEXER__ENABLED=true
        DIRECTORIES_SOLR_INDEXER__CHARACTERS_LIMIT=100000
        DIRECTORIES_SOLR_SOLR__BASE_URL=http://solr:8983/solr
    """

    model_config = {
        "env_prefix": "DIRECTORIES_SOLR_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="directories-solr", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    indexer: IndexerSettings = Field(default_factory=IndexerSettings)
    solr: SolrSettings = Field(default_factory=SolrSettings)
    portal: PortalSettings = Field(default_factory=PortalSettings)
    source: SourceSettings = Field(default_factory=SourceSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def get_property(self, key: str) -> Any:
        """Look up a value by its portal property key.

        Args:
            key: A flat property key, e.g. ``"solr.indexer.document.enable"``.

        Returns:
            The typed value backing that key.

        Raises:
            ConfigurationError: If the key is unknown.
        """
        properties = {
            PROPERTY_INDEXER_ENABLE: self.indexer.enabled,
            PROPERTY_DOCUMENT_MAX_CHARS: self.indexer.characters_limit,
            PROPERTY_NAME: self.indexer.name,
            PROPERTY_DESCRIPTION: self.indexer.description,
            PROPERTY_VERSION: self.indexer.version,
        }
        if key not in properties:
            raise ConfigurationError(f"Unknown configuration property '{key}'")
        return properties[key]

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Sections missing from the file fall back to environment variables
        and then to defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
