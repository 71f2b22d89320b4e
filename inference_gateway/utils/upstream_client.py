"""
Upstream Model Server HTTP Client
Forwards stored uploads to the apnea and diabetes inference services
"""

import errno
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx
import structlog

from inference_gateway.models.prediction import ErrorResponse, ModelType
from inference_gateway.utils.uploads import UploadedFile

logger = structlog.get_logger(__name__)

FILES_FIELD = "files"
DEFAULT_UPSTREAM_ERROR = "Model inference failed"


class UpstreamError(Exception):
    """Base class for failed forwards; carries the status to answer with"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.message, details=self.details)


class UpstreamUnavailableError(UpstreamError):
    """Upstream refused the connection"""

    status_code = 503


class UpstreamTimeoutError(UpstreamError):
    """Upstream did not answer within the timeout"""

    status_code = 504


class UpstreamResponseError(UpstreamError):
    """Upstream answered with a non-2xx status"""

    def __init__(self, status_code: int, body: Any):
        message = DEFAULT_UPSTREAM_ERROR
        if isinstance(body, dict) and body.get("error"):
            message = str(body["error"])
        super().__init__(message, status_code=status_code, details=body)
        self.body = body


class UpstreamRequestError(UpstreamError):
    """Any other failure while talking to the upstream"""

    def __init__(self, message: str):
        super().__init__(f"Server error: {message}")


@dataclass
class ForwardRequest:
    """Stored uploads addressed to one upstream prediction endpoint"""
    model_type: ModelType
    url: str
    files: List[UploadedFile] = field(default_factory=list)

    def multipart(self, stack: ExitStack) -> List[Tuple[str, Tuple[str, Any]]]:
        """httpx ``files=`` list; file handles are closed with ``stack``"""
        return [
            (FILES_FIELD, (uploaded.filename, stack.enter_context(open(uploaded.path, "rb"))))
            for uploaded in self.files
        ]


@dataclass
class ForwardResult:
    """Status and parsed body returned by the upstream"""
    status_code: int
    body: Any


def _exception_chain(exc: BaseException):
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.append(current.__cause__)
        pending.append(current.__context__)
        pending.extend(getattr(current, "exceptions", ()))


def is_connection_refused(exc: BaseException) -> bool:
    """True when ``exc`` was caused by the peer refusing the connection"""
    for current in _exception_chain(exc):
        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True
    return False


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamClient:
    """HTTP client for the upstream inference services"""

    def __init__(self, timeout: float = 30.0, headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout
        self.headers = dict(headers or {})

    async def forward(self, request: ForwardRequest) -> ForwardResult:
        """
        POST the stored files to the upstream and return its JSON answer.

        Raises an ``UpstreamError`` subclass for every failure so callers can
        answer with ``error.status_code`` and ``error.to_response()``.
        """
        log = logger.bind(model_type=request.model_type.value, url=request.url)

        try:
            with ExitStack() as stack:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.post(
                        request.url,
                        files=request.multipart(stack),
                        headers=self.headers,
                    )
                    response.raise_for_status()
                    return ForwardResult(status_code=response.status_code, body=response.json())

        except httpx.HTTPStatusError as e:
            log.error(
                "Upstream returned an error",
                status_code=e.response.status_code,
                body=e.response.text,
            )
            raise UpstreamResponseError(e.response.status_code, _response_body(e.response)) from e
        except httpx.TimeoutException as e:
            log.error("Upstream request timed out", timeout=self.timeout)
            raise UpstreamTimeoutError(
                "Request timeout. The model is taking too long to respond."
            ) from e
        except httpx.ConnectError as e:
            if is_connection_refused(e):
                log.error("Upstream refused connection", error=str(e))
                raise UpstreamUnavailableError(
                    "Model server is not running. Please check the notebook."
                ) from e
            log.exception("Failed to connect to upstream")
            raise UpstreamRequestError(str(e)) from e
        except (httpx.HTTPError, ValueError, OSError) as e:
            log.exception("Unexpected error calling upstream")
            raise UpstreamRequestError(str(e)) from e
