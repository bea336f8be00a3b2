import logging
from contextlib import asynccontextmanager

from dishka import make_async_container
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
import uvicorn

from messagely.config import Config, load_config
from messagely.core.db_manager import BaseDatabaseManager
from messagely.providers import AdaptersProvider, GatewaysProvider, ServicesProvider
from messagely.services import AuthAPI, UsersAPI, register_exception_handlers

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("messagely")
    logger.info("--- Lifespan: Startup ---")
    await app.state.dishka_container.get(BaseDatabaseManager)
    logger.info("Database operations completed.")
    yield
    logger.info("--- Lifespan: Shutdown ---")
    await app.state.dishka_container.close()

def create_app(config: Config | None = None) -> FastAPI:
    container = make_async_container(
        AdaptersProvider(config),
        ServicesProvider(),
        GatewaysProvider(),
    )

    app = FastAPI(title="Messagely", lifespan=lifespan)
    setup_dishka(container, app)

    logger = logging.getLogger("messagely")
    register_exception_handlers(app, logger)

    auth_api = AuthAPI(logger=logger)
    users_api = UsersAPI(logger=logger)

    app.include_router(auth_api.get_router())
    app.include_router(users_api.get_router())

    return app

def main():
    config = load_config(".env")
    logging.basicConfig(
        level=config.server.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    app = create_app(config)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_level=config.server.log_level.lower())

if __name__ == "__main__":
    main()
