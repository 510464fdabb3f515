import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from server.routes import create_router

logger = logging.getLogger(__name__)


def create_app(transcriber, summarizer, mailer) -> FastAPI:
    app = FastAPI(title="NoteRelay", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def missing_input_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content={"detail": "Missing data", "errors": errors},
            headers=config.CORS_HEADERS,
        )

    router = create_router(transcriber, summarizer, mailer)
    app.include_router(router)

    return app
