from __future__ import annotations

from pydantic import BaseModel, Field

from kota.types import CompiledCommand, LiteralCommand

DEFAULT_MODEL = "gpt-4o"
DEFAULT_API_BASE = "https://api.openai.com/v1"


class Settings(BaseModel):
    """Settings captured from the ``setup{...}`` call of the config script."""

    model: str = DEFAULT_MODEL
    api_key: str = ""
    api_base: str = DEFAULT_API_BASE
    temperature: float | None = 0.7

    enabled_tools: list[str] = Field(default_factory=list)
    disabled_tools: list[str] = Field(default_factory=list)

    commands: dict[str, LiteralCommand | CompiledCommand] = Field(default_factory=dict)

    def tool_allowed(self, name: str) -> bool:
        """Apply the enabled (allow-list, when non-empty) and disabled filters."""
        if self.enabled_tools and name not in self.enabled_tools:
            return False
        return name not in self.disabled_tools
