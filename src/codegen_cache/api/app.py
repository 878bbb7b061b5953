from typing import Any

from fastapi import FastAPI, Query

from codegen_cache.api.dependencies import AuthDep, HandlerDep, make_lifespan
from codegen_cache.config import Settings, configure_logging, settings
from codegen_cache.dto import CodeResponse, GenerateRequest, HealthCheckResponse, StatsResponse
from codegen_cache.protocols import EntryStore, GenerationProvider


def create_app(
    config: Settings | None = None,
    store: EntryStore | None = None,
    provider: GenerationProvider | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Settings to use. Defaults to the global settings.
        store: Entry store override (defaults to STORE_BACKEND).
        provider: Generation provider override (defaults to OpenAI).

    Returns:
        The configured FastAPI app
    """
    app = FastAPI(
        title="Codegen Cache API",
        description="Memoizes generated code per device name",
        version="0.1.0",
        lifespan=make_lifespan(config=config, store=store, provider=provider),
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Codegen Cache API",
            "version": "0.1.0",
            "endpoints": {
                "generate": "/generate",
                "code": "/code?device=<device_name>",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post("/generate", response_model=CodeResponse, dependencies=[AuthDep])
    async def generate(request: GenerateRequest, handler: HandlerDep) -> CodeResponse:
        """Return the stored output for a device, generating it on a miss or refresh."""
        return await handler.generate(request)

    @app.get("/code", response_model=CodeResponse, dependencies=[AuthDep])
    async def get_code(handler: HandlerDep, device: str = Query("")) -> CodeResponse:
        """Return the stored output for a device."""
        return await handler.get_code(device)

    @app.get("/stats", response_model=StatsResponse, dependencies=[AuthDep])
    async def get_stats(handler: HandlerDep) -> StatsResponse:
        """Get service statistics."""
        return await handler.get_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "codegen_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
