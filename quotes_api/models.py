"""Pydantic schemas for quotes and the API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    author: str = "Unknown"


class PageResult(BaseModel):
    quotes: list[Quote]
    total: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatReply(BaseModel):
    """Outcome of one chat call, before it is shaped for HTTP."""

    message: str
    language: str
    direction: Literal["ltr", "rtl"]
    provider: str
    quote: Quote | None = None
    error: bool = False


class QuoteResponse(BaseModel):
    quote: Quote


class RandomQuoteResponse(BaseModel):
    quote: Quote
    timestamp: str


class ChatResponse(BaseModel):
    response: str
    language: str
    direction: str
    provider: str
    timestamp: str
    quote: Quote | None = None
    fallback: bool | None = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: list[str] | None = None
