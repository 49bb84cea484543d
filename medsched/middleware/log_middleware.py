import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from medsched.core.logger import logger

REQUEST_ID_HEADER = "X-Request-ID"

class LogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            f"[{request_id}] "
            f"Method: {request.method} | "
            f"Path: {request.url.path} | "
            f"Status: {response.status_code} | "
            f"Duration: {process_time:.4f}s"
        )

        return response
