# locations_api/core/deps.py
import logging

from fastapi import Depends, HTTPException, Request

from ..services.auth import AuthenticatedUser, AuthServiceError, SupabaseAuthClient
from ..services.geocoding import GoogleGeocoder
from ..services.store import LocationStore

logger = logging.getLogger(__name__)

# Collaborators are built once in the app lifespan and kept on app.state.

def get_store(request: Request) -> LocationStore:
    return request.app.state.store

def get_geocoder(request: Request) -> GoogleGeocoder:
    return request.app.state.geocoder

def get_auth_client(request: Request) -> SupabaseAuthClient:
    return request.app.state.auth_client

async def get_current_user(
    request: Request,
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> AuthenticatedUser:
    header = request.headers.get("authorization")
    if not header or not header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Authorization header required")

    token = header[len("Bearer "):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Authorization header required")

    try:
        user = await auth_client.get_user(token)
    except AuthServiceError as e:
        logger.warning("Auth provider error: %s", e)
        raise HTTPException(status_code=401, detail="Authentication failed")

    if user is None:
        logger.info("Rejected access token")
        raise HTTPException(status_code=401, detail="Invalid or expired token. Please log in again.")
    return user
