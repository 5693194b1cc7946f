import asyncio
import logging

import uvicorn
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from location_api.config import CORS_HEADERS, HOST, LOG_FORMAT, LOG_LEVEL, PORT, SQLALCHEMY_DATABASE_URL
from location_api.models import LocationIn, LocationOut, SavedMessage
from location_api.store import LocationNotFound, LocationStore, StorageError

logger = logging.getLogger("LocationAPI")

LOCATION_PATH = "/api/location"
LAST_LOCATION_PATH = "/api/location/last"
API_PATHS = {LOCATION_PATH, LAST_LOCATION_PATH}


def _payload_error(e: ValidationError) -> str:
    return "; ".join(err["msg"] for err in e.errors())


def create_app(store: LocationStore) -> FastAPI:
    app = FastAPI(title="Location Logger")

    # === CORS: headers on every response, preflight on API paths short-circuits ===
    @app.middleware("http")
    async def enable_cors(request: Request, call_next):
        if request.method == "OPTIONS" and request.url.path in API_PATHS:
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    # === Handlers ===
    @app.post(LOCATION_PATH, status_code=201, response_model=SavedMessage)
    async def save_location(request: Request):
        body = await request.body()
        try:
            loc = LocationIn.model_validate_json(body)
        except ValidationError as e:
            raise HTTPException(400, f"Invalid request payload: {_payload_error(e)}")

        try:
            await asyncio.to_thread(store.insert, loc.latitude, loc.longitude)
        except StorageError as e:
            logger.error(f"Failed to save location: {e}")
            raise HTTPException(500, f"Failed to save location: {e}")

        logger.info(f"Received and saved location: Lat={loc.latitude:.6f}, Lon={loc.longitude:.6f}")
        return SavedMessage()

    @app.get(LAST_LOCATION_PATH, response_model=LocationOut)
    async def last_location():
        try:
            record = await asyncio.to_thread(store.fetch_latest)
        except LocationNotFound:
            raise HTTPException(404, "No locations found")
        except StorageError as e:
            logger.error(f"Failed to retrieve last location: {e}")
            raise HTTPException(500, f"Failed to retrieve last location: {e}")
        return LocationOut.from_record(record)

    @app.on_event("startup")
    async def _startup():
        # raising here aborts startup; the process never serves without a store
        store.initialize()

    @app.on_event("shutdown")
    async def _shutdown():
        store.close()

    return app


app = create_app(LocationStore(SQLALCHEMY_DATABASE_URL))


def run():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    logger.info(f"Location server starting on http://{HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
