import asyncio
import logging
import os

import uvicorn

logger = logging.getLogger(__name__)

# (ASGI app path, port env var, default port)
SERVICES = [
    ("auth_service.app.main:app", "AUTH_SERVICE_PORT", 8001),
    ("support_service.app.main:app", "SUPPORT_SERVICE_PORT", 8002),
]


def build_server(app_path: str, port: int) -> uvicorn.Server:
    config = uvicorn.Config(
        app_path,
        host=os.getenv("SERVICE_HOST", "0.0.0.0"),
        port=port,
        reload=os.getenv("SERVICE_RELOAD", "false").lower() == "true",
    )
    return uvicorn.Server(config)


async def start_servers():
    servers = [
        build_server(app_path, int(os.getenv(port_var, default_port)))
        for app_path, port_var, default_port in SERVICES
    ]
    # Both APIs share one event loop
    await asyncio.gather(*(server.serve() for server in servers))


if __name__ == "__main__":
    try:
        asyncio.run(start_servers())
    except KeyboardInterrupt:
        logger.info("Shutting down servers")
