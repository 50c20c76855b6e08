"""
VulnLens Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
Nothing is required: without an embedding endpoint the semantic detector
simply starts in keyword-only mode.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Rules ──
    rules_path: str = Field(
        default="resources/rules/vulnerability-rules.json",
        description="Rule file location; defaults are written here on first load",
    )
    max_nesting_depth: int = Field(
        default=4, description="Deepest allowed nesting of control structures"
    )

    # ── Semantic detection ──
    similarity_threshold: float = Field(
        default=0.85,
        description="Minimum cosine similarity for a semantic classification",
    )
    embedding_endpoint: str | None = Field(
        default=None,
        description="Base URL of an embedding server. Unset means keyword-only mode.",
    )
    embedding_timeout: float = Field(
        default=30.0, description="Embedding request timeout in seconds"
    )

    # ── Suggestions ──
    context_window_lines: int = Field(
        default=3,
        description="Lines of context fetched above and below an issue's line",
    )

    # ── Scanning ──
    workspace_root: str = Field(
        default=".",
        description="Only files under this directory can be read or patched over HTTP",
    )
    max_file_size_bytes: int = Field(
        default=500_000, description="Max source size to accept (bytes)"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # ── Audit ──
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "VULNLENS_",
    }


# Shared instance, imported by other modules
settings = Settings()
