from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse
from shared.core.schemas import envelope
import json
from typing import Callable


class JsonResponseMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next: Callable):
        # Skip OpenAPI/Swagger endpoints
        if request.url.path.startswith("/openapi") or request.url.path.startswith("/docs") or request.url.path.startswith("/redoc"):
            return await call_next(request)

        response = await call_next(request)

        # Only wrap successful JSON responses
        if 200 <= response.status_code < 400 and "application/json" in response.headers.get("content-type", ""):
            body_bytes = b""
            async for chunk in response.body_iterator:
                body_bytes += chunk

            async def body_gen():
                yield body_bytes

            response.body_iterator = body_gen()

            try:
                data = json.loads(body_bytes.decode("utf-8"))
            except ValueError:
                return response  # non-JSON, return as-is

            # Skip if already wrapped
            if isinstance(data, dict) and "success" in data:
                return response

            wrapped = envelope(success=True, data=data)
            if isinstance(data, list):
                wrapped["count"] = len(data)

            return JSONResponse(
                content=wrapped,
                status_code=response.status_code,
                headers={k: v for k, v in response.headers.items()
                         if k.lower() != "content-length"}
            )

        return response
