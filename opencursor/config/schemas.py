"""Pydantic schemas for opencursor configuration.

This module defines the data models for:
- the cursor-acp provider entry written to opencode.json
- the optional installer settings file (YAML)
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Provider Entry (opencode.json)
# =============================================================================

PROVIDER_KEY = "cursor-acp"
PROVIDER_NPM = "@ai-sdk/openai-compatible"
PROVIDER_NAME = "Cursor Agent (ACP stdin)"
DEFAULT_BASE_URL = "http://127.0.0.1:32123/v1"

# Model id -> display name, as exposed by cursor-agent
DEFAULT_MODELS: dict[str, str] = {
    "auto": "Cursor Agent Auto",
    "composer-1": "Cursor Agent Composer 1",
    "deepseek-v3.2": "Cursor Agent DeepSeek V3.2",
    "gemini-3-flash": "Cursor Agent Gemini 3 Flash",
    "gemini-3-pro": "Cursor Agent Gemini 3 Pro",
    "gemini-3-pro-preview": "Cursor Agent Gemini 3 Pro Preview",
    "gpt-5": "Cursor Agent GPT-5 (alias → gpt-5.2)",
    "gpt-5-mini": "Cursor Agent GPT-5 Mini",
    "gpt-5-pro": "Cursor Agent GPT-5 Pro",
    "gpt-5.1": "Cursor Agent GPT-5.1",
    "gpt-5.1-codex": "Cursor Agent GPT-5.1 Codex",
    "gpt-5.1-codex-max-xhigh": "Cursor Agent GPT-5.1 Codex Max XHigh",
    "gpt-5.1-codex-mini-high": "Cursor Agent GPT-5.1 Codex Mini High",
    "gpt-5.1-high": "Cursor Agent GPT-5.1 High",
    "gpt-5.2": "Cursor Agent GPT-5.2",
    "gpt-5.2-codex": "Cursor Agent GPT-5.2 Codex",
    "gpt-5.2-high": "Cursor Agent GPT-5.2 High",
    "gpt-5.2-xhigh": "Cursor Agent GPT-5.2 XHigh",
    "grok-4": "Cursor Agent Grok 4",
    "grok-4-fast": "Cursor Agent Grok 4 Fast",
    "grok-code": "Cursor Agent Grok Code",
    "grok-code-fast": "Cursor Agent Grok Code Fast",
    "haiku-4.5": "Cursor Agent Claude 4.5 Haiku",
    "kimi-k2": "Cursor Agent Kimi K2",
    "opus-4.5": "Cursor Agent Claude 4.5 Opus",
    "opus-4.5-thinking": "Cursor Agent Claude 4.5 Opus Thinking",
    "sonnet-4.5": "Cursor Agent Claude 4.5 Sonnet",
    "sonnet-4.5-thinking": "Cursor Agent Claude 4.5 Sonnet Thinking",
}


class ModelEntry(BaseModel):
    """A model exposed through the provider."""

    name: str


class ProviderOptions(BaseModel):
    """Connection options for an OpenAI-compatible provider."""

    base_url: str = Field(alias="baseURL")

    model_config = {"populate_by_name": True}

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"baseURL must be an http(s) URL, got '{v}'")
        return v


class ProviderSpec(BaseModel):
    """Provider entry stored under ``provider.<key>`` in opencode.json."""

    npm: str
    name: str
    options: ProviderOptions
    models: dict[str, ModelEntry] = Field(default_factory=dict)

    def to_document(self) -> dict:
        """Serialize using the key names opencode.json expects."""
        return self.model_dump(by_alias=True)


def build_provider_spec(
    base_url: str = DEFAULT_BASE_URL,
    models: dict[str, str] | None = None,
) -> ProviderSpec:
    """Build the cursor-acp provider entry.

    Args:
        base_url: Endpoint of the local ACP proxy
        models: Model id to display name mapping (defaults to DEFAULT_MODELS)

    Returns:
        ProviderSpec ready to be written to the config
    """
    catalogue = DEFAULT_MODELS if models is None else models
    return ProviderSpec(
        npm=PROVIDER_NPM,
        name=PROVIDER_NAME,
        options=ProviderOptions(base_url=base_url),
        models={model_id: ModelEntry(name=name) for model_id, name in catalogue.items()},
    )


# =============================================================================
# Installer Settings (YAML)
# =============================================================================


class InstallerSettings(BaseModel):
    """Optional settings file overriding installer defaults.

    Every field is optional; unset fields fall back to the computed defaults.
    """

    host_dir: Path | None = None
    config_path: Path | None = None
    plugin_dir: Path | None = None
    project_dir: Path | None = None
    cache_dir: Path | None = None
    base_url: str | None = None
    models: dict[str, str] | None = None

    model_config = {"extra": "forbid"}


class InstallPaths(BaseModel):
    """Filesystem locations used by a run."""

    host_dir: Path
    config_path: Path
    plugin_dir: Path
    project_dir: Path
    cache_dir: Path

    @property
    def link_path(self) -> Path:
        """Location of the plugin symlink inside the host plugin directory."""
        return self.plugin_dir / f"{PROVIDER_KEY}.js"

    @property
    def artifact_path(self) -> Path:
        """Build output the plugin symlink points at."""
        return self.project_dir / "dist" / "index.js"

    @property
    def node_modules_dir(self) -> Path:
        """Host dependency directory."""
        return self.host_dir / "node_modules"

    @property
    def package_json_path(self) -> Path:
        """Host dependency manifest."""
        return self.host_dir / "package.json"
