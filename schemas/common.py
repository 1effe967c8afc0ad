# schemas/common.py
"""
Shared pydantic building blocks: camelCase base model, money type and the
success envelopes every endpoint returns.
"""
from decimal import Decimal
from math import ceil
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Decimal in Python, plain JSON number on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
     """Base schema: camelCase on the wire, snake_case (or camelCase) accepted on input."""
     model_config = ConfigDict(
          alias_generator=to_camel,
          populate_by_name=True,
          from_attributes=True,
     )


class PaginationMeta(CamelModel):
     total: int
     page: int
     page_size: int
     pages: int
     has_next: bool
     has_prev: bool

     @classmethod
     def build(cls, total: int, page: int, page_size: int) -> "PaginationMeta":
          pages = ceil(total / page_size) if page_size else 0
          return cls(
               total=total,
               page=page,
               page_size=page_size,
               pages=pages,
               has_next=page < pages,
               has_prev=page > 1,
          )


class ApiResponse(CamelModel, Generic[T]):
     """Success envelope: {"success": true, "data": ..., "message": ...}."""
     success: bool = True
     data: Optional[T] = None
     message: Optional[str] = None


class PaginatedResponse(CamelModel, Generic[T]):
     """Success envelope for list endpoints, with a pagination block."""
     success: bool = True
     data: List[T]
     pagination: PaginationMeta
     message: Optional[str] = None


class MessageResponse(CamelModel):
     success: bool = True
     message: str
