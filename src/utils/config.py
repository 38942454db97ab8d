"""Configuration management with YAML support and pydantic models."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator


class ScoringWeights(BaseModel):
    jaccard: float = Field(default=0.35, ge=0.0)
    lcs: float = Field(default=0.45, ge=0.0)
    word_order: float = Field(default=0.20, ge=0.0)

    @model_validator(mode="after")
    def _bounded(self) -> ScoringWeights:
        total = self.jaccard + self.lcs + self.word_order
        if total > 1.0 + 1e-6:
            raise ValueError(f"scoring weights must sum to at most 1.0 (got {total:.3f})")
        return self


class AlignmentConfig(BaseModel):
    weights: ScoringWeights = ScoringWeights()
    min_match_score: float = Field(default=0.15, ge=0.0, le=1.0)  # DP acceptance floor
    approximate_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    matched_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    max_span: int = Field(default=3, ge=1, le=3)
    max_line_chars: int = Field(default=200, ge=1)
    max_lookahead: int | None = Field(default=None, ge=1)  # None = global optimum

    @model_validator(mode="after")
    def _ordered_thresholds(self) -> AlignmentConfig:
        if self.approximate_threshold > self.matched_threshold:
            raise ValueError("approximate_threshold must not exceed matched_threshold")
        return self


class ReportConfig(BaseModel):
    format: Literal["json", "csv"] = "json"
    indent: int = Field(default=2, ge=0)


class AppConfig(BaseModel):
    alignment: AlignmentConfig = AlignmentConfig()
    report: ReportConfig = ReportConfig()


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        candidates = [Path("config.yaml"), Path("config.yml"), Path("paper-edit.yaml")]
        for c in candidates:
            if c.exists():
                path = c
                break
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return AppConfig(**data)
    return AppConfig()


def merge_cli_overrides(cfg: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    data = cfg.model_dump()
    for key, val in overrides.items():
        if val is None:
            continue
        parts = key.split(".")
        d = data
        for p in parts[:-1]:
            d = d.setdefault(p, {})
        d[parts[-1]] = val
    return AppConfig(**data)


DEFAULT_CONFIG_YAML = """\
# paper-edit configuration

alignment:
  weights:                   # must sum to at most 1.0
    jaccard: 0.35
    lcs: 0.45
    word_order: 0.20
  min_match_score: 0.15      # windows scoring below this are never assigned
  approximate_threshold: 0.3
  matched_threshold: 0.7
  max_span: 3                # max transcript segments per script line (1-3)
  max_line_chars: 200        # longer script lines are split on sentence ends
  max_lookahead: null        # null = globally optimal; N = only look N segments ahead

report:
  format: json               # json | csv
  indent: 2
"""
