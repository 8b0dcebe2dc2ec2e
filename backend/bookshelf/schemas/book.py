"""
Bookshelf Backend — Book Request/Response Schemas
===================================================
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class BookCreateRequest(BaseModel):
    # Optional for the same reason as the user requests: the controller
    # reports the first missing field with its own message.
    title: Optional[str] = Field(default=None, description="Book title")
    author: Optional[str] = Field(default=None, description="Author name")


class BookResponse(BaseModel):
    id: uuid.UUID = Field(description="Unique book identifier (UUID)")
    title: str
    author: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BookListResponse(BaseModel):
    """
    What:  One page of the book catalogue.
    How:   Offset/limit paging. `offset` and `limit` echo the values actually
           applied after defaults and caps, so a client can compute the next
           page as offset + limit without guessing.
    """
    books: List[BookResponse] = Field(description="Books on this page")
    offset: int = Field(description="Number of books skipped")
    limit: int = Field(description="Page size applied")
    total_count: int = Field(description="Total number of books")
