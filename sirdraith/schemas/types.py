from __future__ import annotations

from pydantic import BaseModel, Field
from pymongo import ASCENDING


class IndexSpec(BaseModel):
    key_pattern: list[tuple[str, int]]
    unique: bool = False
    expire_after_seconds: int | None = None
    name: str | None = None

    @classmethod
    def on(cls, field: str, **kwargs) -> "IndexSpec":
        """Single-field ascending index."""
        return cls(key_pattern=[(field, ASCENDING)], **kwargs)

    @property
    def index_name(self) -> str:
        # same naming rule the server applies when no name is given
        if self.name:
            return self.name
        return "_".join(f"{f}_{d}" for f, d in self.key_pattern)

    def options(self) -> dict:
        opts: dict = {}
        if self.unique:
            opts["unique"] = True
        if self.expire_after_seconds is not None:
            opts["expireAfterSeconds"] = self.expire_after_seconds
        if self.name:
            opts["name"] = self.name
        return opts


class CollectionSpec(BaseModel):
    name: str
    indexes: list[IndexSpec] = Field(default_factory=list)
