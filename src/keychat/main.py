import asyncio
import logging
from contextlib import asynccontextmanager

from dishka import make_async_container
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
import uvicorn

from keychat.config import Config, load_config
from keychat.core.db_manager import DatabaseManager
from keychat.providers.dishka_app import AdaptersProvider, GatewaysProvider, ServicesProvider

from keychat.services import AuthAPI, UserAPI, MessageAPI, register_error_handlers

logger = logging.getLogger("keychat")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Engine and schema are created on the serving loop
    await app.state.dishka_container.get(DatabaseManager)
    logger.info("Database ready")
    yield
    await app.state.dishka_container.close()
    logger.info("Container closed")

async def create_app(config: Config | None = None):
    container = make_async_container(
        AdaptersProvider(config),
        GatewaysProvider(),
        ServicesProvider(),
    )

    app = FastAPI(title="keychat", lifespan=lifespan)
    setup_dishka(container, app)
    register_error_handlers(app)

    auth_api = await container.get(AuthAPI)
    user_api = await container.get(UserAPI)
    message_api = await container.get(MessageAPI)

    app.include_router(auth_api.get_router())
    app.include_router(user_api.get_router())
    app.include_router(message_api.get_router())

    return app

def main():
    config = load_config(".env")
    logging.basicConfig(
        level=config.log.level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    app = asyncio.run(create_app(config))
    logger.info("listening on %s:%s", config.server.host, config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_level=config.log.level.lower())

if __name__ == "__main__":
    main()
