"""Pydantic models for catalog API responses."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field, model_validator

from spritecache.config.defaults import DEFAULT_SPRITE_URL_TEMPLATE

_TRAILING_ID = re.compile(r"/(\d+)/?$")


class CatalogEntry(BaseModel):
    name: str
    url: str

    @property
    def id(self) -> int | None:
        """Numeric identifier taken from the last path segment of ``url``."""
        match = _TRAILING_ID.search(self.url)
        return int(match.group(1)) if match else None

    def image_url(self, template: str = DEFAULT_SPRITE_URL_TEMPLATE) -> str | None:
        item_id = self.id
        return template.format(id=item_id) if item_id is not None else None


class CatalogPage(BaseModel):
    count: int
    next: str | None = None
    previous: str | None = None
    results: list[CatalogEntry] = Field(default_factory=list)


class CatalogDetail(BaseModel):
    id: int
    name: str
    weight: int = 0
    height: int = 0
    types: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    moves: list[str] = Field(default_factory=list)
    sprite_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        """Accept the API's nested shape ({"type": {"name": ...}}, sprites)."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for field, inner in (("types", "type"), ("abilities", "ability"), ("moves", "move")):
            items = data.get(field) or []
            data[field] = [
                item[inner]["name"] if isinstance(item, dict) and inner in item else item
                for item in items
            ]
        sprites = data.pop("sprites", None)
        if "sprite_url" not in data and isinstance(sprites, dict):
            data["sprite_url"] = sprites.get("front_default")
        return data
