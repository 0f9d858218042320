"""HTTP server for the Skinny Studio orchestrator.

Builds the FastAPI app with the versioned ``/api/v1/`` routers and CORS, and
runs it under uvicorn.
"""

from __future__ import annotations

import logging

from skinnystudio.config import Settings

logger = logging.getLogger(__name__)

_BUILTIN_ORIGINS = ["http://localhost:3000"]


def create_api_app(settings: Settings | None = None):
    """Build the FastAPI application."""
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    from skinnystudio import __version__
    from skinnystudio.api.v1 import mount_v1_routers
    from skinnystudio.config import get_settings

    settings = settings or get_settings()

    app = FastAPI(
        title="Skinny Studio Orchestrator",
        description="Chat-to-generation orchestration: SSE chat, model catalog, cost estimates.",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    # --- CORS -----------------------------------------------------------
    origins = sorted(set(_BUILTIN_ORIGINS + list(settings.cors_allowed_origins)))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Whop-User-Id", "X-Whop-User-Token"],
    )

    # --- Mount all /api/v1/ routers -------------------------------------
    mount_v1_routers(app)

    return app


def run_api_server(
    host: str = "127.0.0.1",
    port: int = 8888,
    dev: bool = False,
) -> None:
    """Start the API server."""
    import uvicorn

    print("\n" + "=" * 50)
    print("SKINNY STUDIO ORCHESTRATOR")
    print("=" * 50)
    display_host = "localhost" if host in ("127.0.0.1", "0.0.0.0") else host
    print(f"\nAPI docs: http://{display_host}:{port}/api/v1/docs")
    if host == "0.0.0.0":
        print(f"   (listening on all interfaces, port {port})")
    print()

    if dev:
        import pathlib

        src_dir = str(pathlib.Path(__file__).resolve().parent.parent)
        uvicorn.run(
            "skinnystudio.api.serve:create_api_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            reload_dirs=[src_dir],
            reload_includes=["*.py"],
            log_level="debug",
        )
    else:
        app = create_api_app()
        uvicorn.run(app, host=host, port=port)
