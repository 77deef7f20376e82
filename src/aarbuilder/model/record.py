"""Typed input record for a single after action report.

The record is the boundary between whatever collected the field values (a web
form, a YAML file, a saved draft) and the document pipeline.  It is parsed with
pydantic so that both the snake_case names used in Python and the camelCase
keys written by the browser form are accepted.  Empty strings for dates become
``None``; malformed dates raise :class:`pydantic.ValidationError` here rather
than later in the pipeline.

Rule checks such as required fields or the phone pattern are *not* enforced by
the model; see :mod:`aarbuilder.validate`.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

__all__ = ["Topic", "ReportRecord", "load_record"]


class Topic(BaseModel):
    """One lettered IMPROVE or SUSTAIN entry."""

    title: str = Field(default="", validation_alias=AliasChoices("title", "topic"))
    discussion: str = ""
    recommendation: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)


class ReportRecord(BaseModel):
    """All field values needed to render a report."""

    service: str = "USMC"
    unit_name: str = ""
    unit_address1: str = ""
    unit_address2: str = ""
    ssic: str = ""
    office_code: str = ""
    document_date: date | None = None
    from_rank: str = ""
    from_name: str = ""
    from_billet: str = ""
    to_title: str = ""
    event_name: str = ""
    event_start_date: date | None = None
    event_end_date: date | None = None
    improve_topics: tuple[Topic, ...] = ()
    sustain_topics: tuple[Topic, ...] = ()
    poc_rank: str = ""
    poc_name: str = ""
    poc_phone: str = ""
    poc_email: str = ""
    signature_name: str = ""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("document_date", "event_start_date", "event_end_date", mode="before")
    @classmethod
    def _blank_date_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "service",
        "unit_name",
        "unit_address1",
        "unit_address2",
        "ssic",
        "office_code",
        "from_rank",
        "from_name",
        "from_billet",
        "to_title",
        "event_name",
        "poc_rank",
        "poc_name",
        "poc_phone",
        "poc_email",
        "signature_name",
        mode="before",
    )
    @classmethod
    def _none_is_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("improve_topics", "sustain_topics", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value


def load_record(path: str | os.PathLike[str]) -> ReportRecord:
    """Load a :class:`ReportRecord` from a YAML or JSON file.

    Raises
    ------
    pydantic.ValidationError
        If the mapping contains values of the wrong type.
    ValueError
        If the document is not a mapping.
    """

    with Path(path).open("r", encoding="utf-8-sig") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"record file must contain a mapping: {path}")
    return ReportRecord.model_validate(data)
