from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """Base for read-only projections fetched from the hospital backend."""
    model_config = ConfigDict(frozen=True)

    id: str


class Page(BaseModel):
    items: list = Field(default_factory=list)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)


class TableView(BaseModel):
    """Display-ready table: header labels plus rows of strings."""
    title: str
    columns: list[str]
    rows: list[list[str]] = Field(default_factory=list)


class TrendPoint(BaseModel):
    recorded_at: datetime
    value: Optional[float] = None
