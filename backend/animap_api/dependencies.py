"""FastAPI dependencies for the Animap API."""
from fastapi import Depends, Request

from backend.resolver.identity_resolver import IdentityResolver
from backend.resolver.lookup import EpisodeLookupService

from .state import AppState


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_resolver(app_state: AppState = Depends(get_app_state)) -> IdentityResolver:
    """Return the identity resolver dependency."""
    return app_state.resolver


def get_lookup_service(app_state: AppState = Depends(get_app_state)) -> EpisodeLookupService:
    """Return the episode lookup service dependency."""
    return app_state.lookup_service
