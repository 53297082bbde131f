import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gpustatus.config import settings, APP_VERSION
from gpustatus.services.docker_service import DockerService
from gpustatus.services.gpu_service import GPUService
from gpustatus.services.status_service import StatusCollector
from gpustatus.routers import status

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and teardown services."""
    app.state.settings = settings
    app.state.docker_service = DockerService(
        settings.DOCKER_SOCKET, timeout=settings.DOCKER_TIMEOUT
    )
    app.state.gpu_service = GPUService(
        binary=settings.NVIDIA_SMI_PATH,
        timeout=settings.NVIDIA_SMI_TIMEOUT,
        use_nsenter=settings.USE_NSENTER,
    )
    app.state.collector = StatusCollector(
        app.state.docker_service,
        app.state.gpu_service,
        interval=settings.SAMPLE_INTERVAL,
    )

    if settings.SAMPLER_ENABLED:
        logger.info("Sampling every %.1fs", settings.SAMPLE_INTERVAL)
        app.state.collector.start()

    yield
    await app.state.collector.stop()
    app.state.docker_service.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Container GPU Status",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.include_router(status.router, prefix="/api/status", tags=["status"])

    @app.get("/")
    async def index():
        return {"service": "gpustatus", "version": APP_VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gpustatus.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
