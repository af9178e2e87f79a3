"""Application factory for the userauth API."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from userauth.core.config import Settings, get_settings
from userauth.core.errors import AccountError
from userauth.db.create_tables import create_all
from userauth.routers import users as users_router
from userauth.services.account_service import AccountService

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})


def create_app(settings: Settings | None = None, service: AccountService | None = None) -> FastAPI:
    """Factory compatible with uvicorn (``uvicorn --factory userauth.app:create_app``)."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)
    if not settings.jwt_secret:
        logger.warning("JWT_SECRET is not set; logins will fail until it is configured.")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_all(settings.database_url)
        logger.info("userauth started (env=%s)", settings.app_env)
        yield

    app = FastAPI(title="userauth", lifespan=lifespan)
    app.state.settings = settings
    app.state.account_service = service or AccountService(settings)

    allowed_cors = {settings.base_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"})
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
            allow_headers=["*"],
        )

    _install_exception_handlers(app)
    app.include_router(users_router.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    os.makedirs(settings.avatars_dir, exist_ok=True)
    app.mount("/avatars", StaticFiles(directory=settings.avatars_dir), name="avatars")
    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
