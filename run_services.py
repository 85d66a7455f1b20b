import asyncio
import logging
import uvicorn

from shared.core.config import settings

logger = logging.getLogger(__name__)

SERVICES = {
    "auth_service.app.main:app": settings.AUTH_SERVICE_PORT,
    "lab_service.app.main:app": settings.LAB_SERVICE_PORT,
}


def build_server(app_path: str, port: int) -> uvicorn.Server:
    config = uvicorn.Config(
        app_path,
        host=settings.SERVICE_HOST,
        port=port,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return uvicorn.Server(config)


async def start_servers():
    servers = [build_server(path, port) for path, port in SERVICES.items()]
    for path, port in SERVICES.items():
        logger.info("Starting %s on port %s", path, port)

    # auth and lab services share one event loop
    await asyncio.gather(*(server.serve() for server in servers))


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    try:
        asyncio.run(start_servers())
    except KeyboardInterrupt:
        print("\nShutting down servers...")
