from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_draft_service, get_generator
from schemas.content_generation import (
    ArticleDraftData,
    ArticleDraftResponse,
    GeneratedArticleData,
    GeneratedArticleResponse,
    GenerateFromContentRequest,
    QuickReadData,
    QuickReadResponse,
    RegeneratedContentData,
    RegeneratedContentResponse,
    RegenerateRequest,
    SEOMetadataData,
    SEOMetadataResponse,
    SEOOnlyData,
    SEOOnlyResponse,
    TagsData,
    TagsResponse,
    TitleContentRequest,
    TranslatedContentData,
    TranslatedContentResponse,
    TranslateRequest,
)
from services.content_generator import ContentGeneratorService, ContentValidationError
from services.drafts import ArticleDraftService

router = APIRouter(prefix="/articles", tags=["articles"])


@router.post("/generate-from-content", response_model=GeneratedArticleResponse)
async def generate_from_content(
    payload: GenerateFromContentRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> GeneratedArticleResponse:
    try:
        article = await generator.generate_news_from_content(payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return GeneratedArticleResponse(data=GeneratedArticleData.model_validate(article.to_dict()))


@router.post("/generate-seo", response_model=SEOOnlyResponse)
async def generate_seo_only(
    payload: TitleContentRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> SEOOnlyResponse:
    try:
        seo = await generator.generate_seo_only(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SEOOnlyResponse(data=SEOOnlyData.model_validate(seo.to_dict()))


@router.post("/seo", response_model=SEOMetadataResponse)
async def generate_seo_metadata(
    payload: TitleContentRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> SEOMetadataResponse:
    try:
        seo = await generator.generate_seo_metadata(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SEOMetadataResponse(data=SEOMetadataData.model_validate(seo.to_dict()))


@router.post("/quick-read", response_model=QuickReadResponse)
async def generate_quick_read(
    payload: TitleContentRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> QuickReadResponse:
    try:
        quick_read = await generator.generate_quick_read(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return QuickReadResponse(data=QuickReadData.model_validate(quick_read.to_dict()))


@router.post("/tags", response_model=TagsResponse)
async def generate_tags(
    payload: TitleContentRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> TagsResponse:
    try:
        tags = await generator.generate_tags(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TagsResponse(data=TagsData.model_validate(tags.to_dict()))


@router.post("/regenerate-with-feedback", response_model=RegeneratedContentResponse)
async def regenerate_with_feedback(
    payload: RegenerateRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> RegeneratedContentResponse:
    try:
        regenerated = await generator.regenerate_with_feedback(
            payload.title,
            payload.content,
            payload.feedback,
            payload.language,
            meta_title=payload.meta_title,
            meta_description=payload.meta_description,
        )
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RegeneratedContentResponse(data=RegeneratedContentData.model_validate(regenerated.to_dict()))


@router.post("/translate", response_model=TranslatedContentResponse)
async def translate_content(
    payload: TranslateRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> TranslatedContentResponse:
    try:
        translated = await generator.translate_content(
            payload.title, payload.content, payload.target_language
        )
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TranslatedContentResponse(data=TranslatedContentData.model_validate(translated.to_dict()))


@router.post("/translate-draft", response_model=ArticleDraftResponse)
async def translate_draft(
    payload: TranslateRequest,
    drafts: ArticleDraftService = Depends(get_draft_service),
) -> ArticleDraftResponse:
    try:
        draft = await drafts.build_translated_article(
            payload.title, payload.content, payload.target_language
        )
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ArticleDraftResponse(data=ArticleDraftData.model_validate(draft.to_dict()))
