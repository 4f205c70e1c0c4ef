from __future__ import annotations

from pydantic import BaseModel, Field

from services.prompts import Language


class TitleContentRequest(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = Field(default="", max_length=200_000)
    language: Language = Language.english


class GenerateFromContentRequest(BaseModel):
    content: str = Field(max_length=200_000)
    language: Language = Language.english


class RegenerateRequest(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = Field(default="", max_length=200_000)
    feedback: str = Field(default="", max_length=4000)
    language: Language = Language.english
    meta_title: str = Field(default="", max_length=500)
    meta_description: str = Field(default="", max_length=1000)


class TranslateRequest(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = Field(default="", max_length=200_000)
    target_language: Language = Language.hindi


class QuickReadData(BaseModel):
    title: str
    summary: str
    key_points: list[str]
    read_time: int
    fallback: bool


class SEOMetadataData(BaseModel):
    meta_title: str
    meta_description: str
    og_title: str
    og_description: str
    keywords: str
    fallback: bool


class SEOOnlyData(BaseModel):
    meta_title: str
    meta_description: str
    keywords: str
    fallback: bool


class TagsData(BaseModel):
    tags: list[str]
    fallback: bool


class GeneratedArticleData(BaseModel):
    title: str
    excerpt: str
    content: str
    meta_title: str
    meta_description: str
    keywords: str
    read_time: int
    quick_read: str
    tags: list[str]
    category_suggestion: str
    language: Language
    fallback: bool


class RegeneratedContentData(BaseModel):
    title: str
    content: str
    meta_title: str
    meta_description: str
    fallback: bool


class TranslatedContentData(BaseModel):
    title: str
    excerpt: str
    content: str
    meta_title: str
    meta_description: str
    keywords: str
    language: Language
    fallback: bool


class ArticleDraftData(BaseModel):
    title: str
    slug: str
    excerpt: str
    content: str
    meta_title: str
    meta_description: str
    keywords: str
    read_time: int
    language: Language
    status: str
    fallback: bool


class QuickReadResponse(BaseModel):
    success: bool = True
    data: QuickReadData


class SEOMetadataResponse(BaseModel):
    success: bool = True
    data: SEOMetadataData


class SEOOnlyResponse(BaseModel):
    success: bool = True
    data: SEOOnlyData


class TagsResponse(BaseModel):
    success: bool = True
    data: TagsData


class GeneratedArticleResponse(BaseModel):
    success: bool = True
    data: GeneratedArticleData


class RegeneratedContentResponse(BaseModel):
    success: bool = True
    data: RegeneratedContentData


class TranslatedContentResponse(BaseModel):
    success: bool = True
    data: TranslatedContentData


class ArticleDraftResponse(BaseModel):
    success: bool = True
    data: ArticleDraftData
