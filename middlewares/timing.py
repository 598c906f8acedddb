import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from config.settings import settings

logger = logging.getLogger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """응답 헤더에 X-Latency-Ms 추가 + 요청 1줄 로그 (느린 요청은 WARNING)"""

    def __init__(self, app, slow_request_ms: int = None):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms if slow_request_ms is not None else settings.SLOW_REQUEST_MS

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response.headers["X-Latency-Ms"] = str(elapsed_ms)

        line = f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
        if elapsed_ms >= self.slow_request_ms:
            logger.warning(f"느린 요청: {line}")
        else:
            logger.debug(line)
        return response
