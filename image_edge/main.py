import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.routes_health import router as health_router
from .api.images import router as images_router
from .core.config import settings
from .core.resize_metrics import record_resolution

logging.getLogger("image_edge").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(title="Image Edge", description="On-demand image resizing", version=__version__)

# Health routes first: the image route matches every path.
app.include_router(health_router)
app.include_router(images_router)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_as_text(request: Request, exc: StarletteHTTPException):
    """Methods the router never dispatches (TRACE, CONNECT, custom verbs) still get a plain-text 405."""
    if exc.status_code == 405:
        record_resolution("method_not_allowed")
        return PlainTextResponse("http method not allowed", status_code=405)
    return await http_exception_handler(request, exc)
