import logging
import uuid
from typing import Dict

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette import status

from recipe_discovery.app.api.routes import api_router
from recipe_discovery.app.core.config import get_settings

logger = logging.getLogger(__name__)


async def validation_exception_handler(request, exc: RequestValidationError):
    request_id = str(uuid.uuid4())
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    logger.info("Rejected request payload %s: %s", request_id, details)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "validation_error",
            "message": "Invalid request payload.",
            "details": details,
            "request_id": request_id,
        },
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.getLogger("recipe_discovery").setLevel(settings.log_level.upper())

    app = FastAPI(title="Recipe Discovery", version="0.1.0")
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; every recipe will come from the fallback generator")

    return app


app = create_app()
