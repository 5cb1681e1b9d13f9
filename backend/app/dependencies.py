from fastapi import Header, HTTPException, Request

from app.services.itinerary_cache import ItineraryResultCache


async def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity as forwarded by the upstream session gateway."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def get_itinerary_cache(request: Request) -> ItineraryResultCache:
    return request.app.state.itinerary_cache
