"""Shared request/response plumbing for the JSON API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both camelCase (wire format) and snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
