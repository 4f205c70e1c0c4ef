from __future__ import annotations

from pydantic import BaseModel, Field

from schemas.content_generation import SEOMetadataData
from services.prompts import Language


class InshortRequest(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = Field(default="", max_length=200_000)
    language: Language = Language.english


class InshortData(BaseModel):
    title: str
    content: str
    read_time: int
    fallback: bool


class InshortDraftData(BaseModel):
    title: str
    slug: str
    content: str
    read_time: int
    language: Language
    seo: SEOMetadataData
    source_title: str
    fallback: bool


class InshortResponse(BaseModel):
    success: bool = True
    data: InshortData


class InshortSEOResponse(BaseModel):
    success: bool = True
    data: SEOMetadataData


class InshortDraftResponse(BaseModel):
    success: bool = True
    data: InshortDraftData
