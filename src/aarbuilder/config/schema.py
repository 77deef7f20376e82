"""Typed configuration schema and loader for the report generator."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, confloat, conint

CONFIG_ENV = "AARBUILDER_CONFIG"

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class PageSettings(BaseModel):
    """Page size and margins in points."""

    width: confloat(gt=0)
    height: confloat(gt=0)
    margin_top: confloat(ge=0)
    margin_right: confloat(ge=0)
    margin_bottom: confloat(ge=0)
    margin_left: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class FontSettings(BaseModel):
    """Base font faces (PDF standard font names) and size."""

    regular: str
    bold: str
    size: confloat(gt=0)
    line_height_factor: confloat(gt=0) = 1.17

    model_config = ConfigDict(extra="forbid")


class IndentSettings(BaseModel):
    """Outline indents measured from the left margin."""

    paragraph: confloat(ge=0)
    subparagraph: confloat(ge=0)
    subsubparagraph: confloat(ge=0)
    label_gap: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class LetterheadSettings(BaseModel):
    """Vertical placement and sizes of the centered letterhead."""

    top: confloat(ge=0)
    header_top: confloat(ge=0)
    service_size: confloat(gt=0)
    unit_size: confloat(gt=0)
    address_size: confloat(gt=0)
    service_step: confloat(ge=0)
    unit_step: confloat(ge=0)
    address_step: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class SenderBlockSettings(BaseModel):
    """Column of the ``IN REPLY REFER TO:`` block."""

    width: confloat(ge=0)
    caption_size: confloat(gt=0)
    caption_rise: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class ParagraphSettings(BaseModel):
    """Whether a numbered paragraph's intro runs on from its caption."""

    intro_style: Literal["inline", "block"]

    model_config = ConfigDict(extra="forbid")


class SignatureSettings(BaseModel):
    gap_lines: conint(ge=1)
    position: Literal["indent", "center"]
    indent: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class PageNumberSettings(BaseModel):
    offset: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class ValidationSettings(BaseModel):
    topic_title_max: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


class PreviewSettings(BaseModel):
    debounce_seconds: confloat(ge=0)

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    page: PageSettings
    font: FontSettings
    indent: IndentSettings
    letterhead: LetterheadSettings
    sender_block: SenderBlockSettings
    paragraph: ParagraphSettings
    signature: SignatureSettings
    page_number: PageNumberSettings
    validation: ValidationSettings
    preview: PreviewSettings

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    When ``path`` is ``None`` the file named by ``AARBUILDER_CONFIG`` in
    ``env`` (default :data:`os.environ`) is used, if set.
    """

    with (
        importlib_resources.files("aarbuilder.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    environ = env if env is not None else os.environ
    if path is None and environ.get(CONFIG_ENV):
        path = environ[CONFIG_ENV]

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    return ConfigModel.model_validate(merged)


__all__ = [
    "CONFIG_ENV",
    "ConfigModel",
    "PageSettings",
    "FontSettings",
    "IndentSettings",
    "LetterheadSettings",
    "SenderBlockSettings",
    "ParagraphSettings",
    "SignatureSettings",
    "PageNumberSettings",
    "ValidationSettings",
    "PreviewSettings",
    "deep_merge_dicts",
    "load_config",
]
