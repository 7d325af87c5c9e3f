from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class DataSettings(BaseModel):
    snapshot_dir: Path = Path("./data")
    years: List[str] = Field(default_factory=list)

    @field_validator("snapshot_dir", mode="before")
    @classmethod
    def _expand_snapshot_dir(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("years", mode="before")
    @classmethod
    def _years_as_strings(cls, values: Optional[List[object]]) -> List[str]:
        return [str(v).strip() for v in values or []]


class MatchingSettings(BaseModel):
    min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    organization_min_confidence: float = Field(default=0.75, ge=0.0, le=1.0)
    min_key_length: int = Field(default=3, ge=1)
    max_contexts: int = Field(default=5, ge=0)


class Settings(BaseModel):
    data: DataSettings = DataSettings()
    matching: MatchingSettings = MatchingSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
