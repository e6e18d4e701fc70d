import time
from typing import Optional

from fastapi.responses import JSONResponse
from loguru import logger

from hookscope.exceptions import (
    AcquisitionError,
    HookScopeException,
    PipelineTimeoutError,
    ProbeError,
    ValidationException,
)
from hookscope.video_pipeline import AnalysisPipeline, SourceReference

STATUS_BY_ERROR = (
    (ValidationException, 400),
    (AcquisitionError, 502),
    (ProbeError, 422),
    (PipelineTimeoutError, 504),
)


def status_for(error: Exception) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


def failure(error: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_for(error), content={"success": False, "error": str(error)})


async def analyze_source(pipeline: AnalysisPipeline, source: SourceReference, key_owner: Optional[str]):
    start = time.perf_counter()
    try:
        result = await pipeline.run(source, key_owner)
    except HookScopeException as e:
        logger.error(f"Analysis of {source.describe()} failed: {e}")
        return failure(e)
    except Exception as e:
        logger.exception(f"Unexpected error analyzing {source.describe()}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e) or "Analysis failed"})
    logger.info(f"Analyzed {source.describe()} in {time.perf_counter() - start:.1f}s")
    return {"success": True, "data": result.to_dict()}


async def analyze_url(pipeline: AnalysisPipeline, url: Optional[str], key_owner: Optional[str]):
    if not isinstance(url, str) or not url.strip():
        return failure(ValidationException("Invalid video URL"))
    return await analyze_source(pipeline, SourceReference.from_url(url), key_owner)


async def analyze_upload(pipeline: AnalysisPipeline, filename: str, content: bytes, key_owner: Optional[str]):
    if not content:
        return failure(ValidationException("Uploaded file is empty"))
    return await analyze_source(pipeline, SourceReference.from_upload(content, filename), key_owner)
