from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_draft_service, get_generator
from schemas.content_generation import SEOMetadataData
from schemas.inshorts import (
    InshortData,
    InshortDraftData,
    InshortDraftResponse,
    InshortRequest,
    InshortResponse,
    InshortSEOResponse,
)
from services.content_generator import ContentGeneratorService, ContentValidationError
from services.drafts import ArticleDraftService

router = APIRouter(prefix="/inshorts", tags=["inshorts"])


@router.post("/generate", response_model=InshortResponse)
async def generate_inshort(
    payload: InshortRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> InshortResponse:
    try:
        inshort = await generator.generate_inshort(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return InshortResponse(data=InshortData.model_validate(inshort.to_dict()))


@router.post("/seo", response_model=InshortSEOResponse)
async def generate_inshort_seo(
    payload: InshortRequest,
    generator: ContentGeneratorService = Depends(get_generator),
) -> InshortSEOResponse:
    try:
        seo = await generator.generate_inshort_seo(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return InshortSEOResponse(data=SEOMetadataData.model_validate(seo.to_dict()))


@router.post("/generate-draft", response_model=InshortDraftResponse)
async def generate_inshort_draft(
    payload: InshortRequest,
    drafts: ArticleDraftService = Depends(get_draft_service),
) -> InshortDraftResponse:
    try:
        draft = await drafts.build_inshort(payload.title, payload.content, payload.language)
    except ContentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return InshortDraftResponse(data=InshortDraftData.model_validate(draft.to_dict()))
