from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.schemas.analyze import AnalyzeRequest, AnalyzeResponse
from app.services.analysis_services import analyze_upload, analyze_url
from hookscope.video_pipeline import AnalysisPipeline

router = APIRouter(tags=["analysis"])


@lru_cache
def get_pipeline() -> AnalysisPipeline:
    return AnalysisPipeline()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest, pipeline: AnalysisPipeline = Depends(get_pipeline)):
    return await analyze_url(pipeline, request.url, request.key_owner)


@router.post("/analyze-upload", response_model=AnalyzeResponse)
async def analyze_uploaded_video(
    file: UploadFile = File(...),
    key_owner: Optional[str] = Form(default=None, alias="keyOwner"),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
):
    content = await file.read()
    return await analyze_upload(pipeline, file.filename or "upload.mp4", content, key_owner)
