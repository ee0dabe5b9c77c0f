import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from homeagent import __version__
from homeagent.api import api_router
from homeagent.core.agent import HomeAgent
from homeagent.core.config import AppConfig, ConfigManager
from homeagent.core.env_settings import env
from homeagent.core.exceptions import ConfigurationCreated, ConfigurationError
from homeagent.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: AppConfig, agent: Optional[HomeAgent] = None) -> FastAPI:
    agent = agent or HomeAgent(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await agent.start()
        yield
        await agent.stop()

    app = FastAPI(title=env.APP_NAME, description="Relay, sensor and smart switch bridge", lifespan=lifespan)
    app.state.agent = agent
    app.state.config = config

    # Exception handler
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error"},
        )

    # Register API routers
    app.include_router(api_router, prefix="/api")
    return app


async def serve() -> None:
    setup_logging(level=env.LOG_LEVEL)
    logger.info(f"Welcome to {env.APP_NAME} v{__version__}")
    config = await ConfigManager(env.config_path).load()
    setup_logging(debug=config.debug, level=env.LOG_LEVEL)

    app = create_app(config)
    server = uvicorn.Server(
        uvicorn.Config(app, host=env.API_HOST, port=env.API_PORT, log_config=None)
    )
    await server.serve()


def main() -> None:
    try:
        asyncio.run(serve())
    except ConfigurationCreated:
        sys.exit(0)
    except ConfigurationError as e:
        logger.critical(f"Program panic: {e}")
        sys.exit(1)


# If running as a script
if __name__ == "__main__":
    main()
