"""Builder configuration model.

Config structure (.mvpb/config.yml):
    provider: anthropic
    providers:
      anthropic:
        model: claude-sonnet-4-20250514
        max_tokens: 16384
      replay:
        chunk_size: 32
    system_prompt: null   # null = built-in prompt
    verbose: false
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mvpb.application.prompts import SYSTEM_PROMPT


class BuilderConfig(BaseModel):
    """Top-level builder configuration."""

    model_config = ConfigDict(extra="forbid")

    provider: str = "anthropic"
    providers: dict[str, dict[str, Any]] = Field(default_factory=dict)
    system_prompt: str | None = None
    verbose: bool = False

    @field_validator("provider")
    @classmethod
    def _provider_non_empty(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("provider must be non-empty")
        return v2

    def provider_config(self, provider_key: str) -> dict[str, Any]:
        """Return a copy of the config block for one provider (empty if unset)."""
        return dict(self.providers.get(provider_key) or {})

    def resolved_system_prompt(self) -> str:
        return self.system_prompt or SYSTEM_PROMPT
