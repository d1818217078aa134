"""Model resolver config schema."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ResolverConfig(BaseModel):
    # Provider prefixes removed from incoming model ids, first match wins.
    strip_prefixes: List[str] = Field(default_factory=lambda: ["comfyui/"])
    case_insensitive: bool = False
    variant_suffix_fallback: bool = True

    model_config = ConfigDict(extra="forbid")
