from fastapi import FastAPI

from isucondition.app_factory import create_base_app
from isucondition.routers.groups import ALL_ROUTERS


def create_app() -> FastAPI:
    app = create_base_app()
    for router in ALL_ROUTERS:
        app.include_router(router)
    return app


app = create_app()
