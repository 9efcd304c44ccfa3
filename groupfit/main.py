from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from groupfit import __version__
from groupfit.api.router import api_router
from groupfit.config import settings
from groupfit.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging(level=settings.log_level, format_json=settings.log_json)

    app = FastAPI(
        title="groupfit",
        version=__version__,
        description="Per-group OLS fits with tidy coefficient tables and coefficient plots",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/health")
    def health():
        return {"ok": True, "version": __version__}

    return app


app = create_app()
