import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        path = request.url.path
        method = request.method

        try:
            response = await call_next(request)
        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"[{request_id}] {method} {path} - ERROR",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": round(process_time * 1000, 2),
                    "error": str(exc)
                }
            )
            raise

        process_time = time.time() - start_time
        status_code = response.status_code
        # Filled in by the router once a route has matched.
        path_params = request.scope.get("path_params") or {}
        attempt_id = path_params.get("attempt_id")
        exam_id = path_params.get("exam_id")

        context = ""
        if attempt_id is not None:
            context += f" attempt={attempt_id}"
        if exam_id is not None:
            context += f" exam={exam_id}"

        log_level = logging.WARNING if status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {method} {path} - {status_code}{context}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "attempt_id": attempt_id,
                "exam_id": exam_id,
                "duration_ms": round(process_time * 1000, 2)
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response
