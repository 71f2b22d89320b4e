"""
Prediction routes
Validates uploads and forwards them to the selected model server
"""

import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import JSONResponse
import structlog

from inference_gateway.config import Settings
from inference_gateway.models.prediction import ErrorResponse, ModelType
from inference_gateway.utils.dependencies import get_app_settings, get_upstream_client
from inference_gateway.utils.uploads import FileTooLargeError, stored_uploads
from inference_gateway.utils.upstream_client import (
    ForwardRequest,
    UpstreamClient,
    UpstreamError,
    UpstreamRequestError,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

INVALID_MODEL_TYPE = "Invalid model type. Use 'apnea' or 'diabetes'"
NO_FILES = "Please upload both .hea and .dat files."
FILE_TOO_LARGE = "File too large"


def _error(status_code: int, error: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.content())


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


@router.post("/predict")
async def predict(
    model_type: Optional[str] = Query(
        None, alias="modelType", description="Model to run: apnea or diabetes"
    ),
    files: Optional[List[UploadFile]] = File(None, description="Record files to analyse"),
    settings: Settings = Depends(get_app_settings),
    client: UpstreamClient = Depends(get_upstream_client),
):
    """
    Forward uploaded record files to the apnea or diabetes model server.

    The upstream JSON body is returned unchanged with status 200. Failures
    are answered with ``{"success": false, "error": ...}``:

    - 400 for an unknown model type or a request without files
    - 413 when a file exceeds the per-file size limit
    - 503 when the model server refuses the connection
    - 504 when the model server does not answer in time
    - the model server's own status for non-2xx answers, with its body in ``details``
    - 500 for anything else
    """
    start = time.perf_counter()
    logger.info("Prediction request received", model_type=model_type)

    try:
        selected = ModelType(model_type)
    except ValueError:
        logger.warning("Invalid model type", model_type=model_type)
        return _error(400, ErrorResponse(error=INVALID_MODEL_TYPE))

    if not files:
        logger.warning("No files uploaded", model_type=selected.value)
        return _error(400, ErrorResponse(error=NO_FILES))

    url = settings.upstream_url(selected)

    try:
        async with stored_uploads(files, settings.upload_dir, settings.max_file_size_bytes) as stored:
            logger.info(
                "Files received",
                count=len(stored),
                files=[{"filename": f.filename, "size": f.size} for f in stored],
            )

            logger.info("Forwarding request", model_type=selected.value, url=url)
            result = await client.forward(
                ForwardRequest(model_type=selected, url=url, files=stored)
            )

    except FileTooLargeError as e:
        logger.warning(
            "Upload rejected",
            filename=e.filename,
            max_size_bytes=e.max_size_bytes,
            duration_ms=_elapsed_ms(start),
        )
        return _error(
            e.status_code,
            ErrorResponse(
                error=FILE_TOO_LARGE,
                details={"filename": e.filename, "max_size_bytes": e.max_size_bytes},
            ),
        )
    except UpstreamError as e:
        logger.error(
            "Prediction failed",
            model_type=selected.value,
            status_code=e.status_code,
            error=e.message,
            duration_ms=_elapsed_ms(start),
        )
        return _error(e.status_code, e.to_response())
    except Exception as e:
        logger.exception(
            "Unexpected prediction error",
            model_type=selected.value,
            duration_ms=_elapsed_ms(start),
        )
        failure = UpstreamRequestError(str(e))
        return _error(failure.status_code, failure.to_response())

    logger.info(
        "Prediction succeeded",
        model_type=selected.value,
        upstream_status=result.status_code,
        duration_ms=_elapsed_ms(start),
    )
    return JSONResponse(status_code=200, content=result.body)
