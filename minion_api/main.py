from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minion.config import MinionSettings
from minion_api.api.routes import meta, operations
from minion_api.core.config import get_settings


def create_app(minion_settings: MinionSettings | None = None) -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, version=settings.version)
    app.state.minion_settings = minion_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"code": "validation_error", "message": "Invalid request", "details": exc.errors()},
        )

    app.include_router(meta.router)
    app.include_router(operations.router)

    @app.get("/")
    def index() -> dict[str, object]:
        return {
            "service": settings.app_name,
            "version": settings.version,
            "endpoints": {
                "health": "GET /api/health",
                "config": "GET /api/config",
                "extend_keys": "POST /api/extend-keys",
                "refresh_menus": "POST /api/refresh-menus",
            },
        }

    return app


app = create_app()
