import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.errors import register_exception_handlers
from .routers import geojson, locations
from .services.auth import SupabaseAuthClient
from .services.geocoding import GoogleGeocoder
from .services.postgres_store import PostgresLocationStore

logger = logging.getLogger(__name__)
logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = PostgresLocationStore(
        settings.database_url,
        table=settings.locations_table,
        max_size=settings.db_pool_max_size,
    )
    app.state.geocoder = GoogleGeocoder(
        settings.google_places_api_key,
        base_url=settings.geocoding_base,
        timeout=settings.geocoding_timeout_s,
    )
    app.state.auth_client = SupabaseAuthClient(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout=settings.auth_timeout_s,
    )
    logger.info("%s started (env=%s)", settings.app_name, settings.app_env)
    try:
        yield
    finally:
        app.state.store.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(geojson.router)
app.include_router(locations.router)

@app.get("/")
def root():
    return {"name": settings.app_name, "env": settings.app_env, "message": "OK"}


def main():
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
