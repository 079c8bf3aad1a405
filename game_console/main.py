"""
main.py — FastAPI Application Factory
======================================
Game Console API: oyun config'leri, auto-start scheduler ve manuel start/stop.

Kullanim:
    # Development mode (hot-reload ile)
    uvicorn game_console.main:app --reload

    # Veya direkt python ile
    python -m game_console.main

Factory pattern: testler kendi Settings ve GameRuntime'lari ile app kurar.
"""

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from game_console.config import Settings, get_settings
from game_console.engine import Engine
from game_console.errors import register_error_handlers
from game_console.runtime.protocol import GameRuntime


def create_app(settings: Settings | None = None, runtime: GameRuntime | None = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    )

    engine = Engine(settings, runtime=runtime)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        print(f"Starting {settings.APP_NAME} v{settings.VERSION}")
        print(f"Storage: {settings.DATA_PATH or 'in-memory'}")
        print(f"Runtime: {settings.RUNTIME_URL or 'local'}")
        await engine.startup()

        yield

        await engine.shutdown()
        print("Shutdown: scheduler stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Game configuration and auto-start scheduling for the chat-bot console",
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.engine = engine

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Timing middleware
    class TimingMiddleware:
        def __init__(self, app: ASGIApp):
            self.app = app

        async def __call__(self, scope: Scope, receive: Receive, send: Send):
            if scope["type"] != "http":
                await self.app(scope, receive, send)
                return
            start = time.time()

            async def send_with_timing(message):
                if message["type"] == "http.response.start":
                    raw_headers = list(message.get("headers", []))
                    raw_headers.append((b"x-process-time", f"{time.time() - start:.4f}s".encode()))
                    message["headers"] = raw_headers
                await send(message)

            await self.app(scope, receive, send_with_timing)

    app.add_middleware(TimingMiddleware)

    # Error handlers
    register_error_handlers(app)

    # System endpoints
    @app.get("/health", tags=["system"])
    def health():
        return {
            "status": "ok",
            "app": settings.APP_NAME,
            "version": settings.VERSION,
            "scheduler": "running" if engine.scheduler.running else "stopped",
            "storage": "file" if settings.DATA_PATH else "in-memory",
        }

    @app.get("/", tags=["system"])
    def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
        }

    # Domain routers
    from game_console.games.router import router as games_router
    from game_console.runtime.router import router as runtime_router
    from game_console.scheduling.router import router as scheduler_router

    app.include_router(games_router)
    app.include_router(runtime_router)
    app.include_router(scheduler_router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("game_console.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
