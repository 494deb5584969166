"""Domain models for vector-store queries and their outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Literal

from langchain_core.documents import Document
from pydantic import BaseModel

SearchMode = Literal["filtered", "fallback", "unfiltered"]


class MetadataFilter(BaseModel):
    """Declarative metadata filter for vector-store queries.

    Attributes
    ----------
    field:
        The metadata key to filter on (e.g. ``"source"``, ``"page"``).
    operator:
        Comparison operator — one of ``eq``, ``ne``, ``gt``, ``gte``,
        ``lt``, ``lte``, ``in``, ``nin``.
    value:
        The value (or list of values for ``in`` / ``nin``) to compare against.
    """

    field: str
    operator: str = "eq"
    value: Any = None

    @classmethod
    def equals(cls, field: str, value: Any) -> MetadataFilter:
        return cls(field=field, operator="eq", value=value)

    @classmethod
    def one_of(cls, field: str, values: list[Any]) -> MetadataFilter:
        return cls(field=field, operator="in", value=values)


@dataclass
class SearchOutcome:
    """Chunks returned by a search, tagged with the path that produced them.

    Attributes
    ----------
    documents:
        Retrieved chunks, nearest first.
    k:
        Number of results that were requested.
    mode:
        ``"filtered"`` when the filtered search succeeded, ``"fallback"``
        when it failed and the unfiltered search answered instead, and
        ``"unfiltered"`` when no filter was requested at all.
    """

    documents: list[Document] = dataclass_field(default_factory=list)
    k: int = 0
    mode: SearchMode = "unfiltered"

    @property
    def used_fallback(self) -> bool:
        return self.mode == "fallback"
