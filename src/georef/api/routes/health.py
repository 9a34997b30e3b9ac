"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_directions_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.directions_client import check_health as directions_health_check
    return directions_health_check


@router.get("/health/directions", status_code=status.HTTP_200_OK)
def health_directions() -> dict:
    """Check that the directions service is configured and answering."""
    from ...config import settings

    if not settings.google_maps_api_key:
        return {
            "service": "directions",
            "configured": False,
            "healthy": False,
            "message": "Set GEOREF_GOOGLE_MAPS_API_KEY to enable road routing; straight-line estimates are used meanwhile.",
        }
    try:
        healthy = _get_directions_health_check()()
        return {"service": "directions", "configured": True, "healthy": healthy}
    except Exception as e:
        return {"service": "directions", "configured": True, "healthy": False, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and patient table status."""
    from ...config import settings
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set GEOREF_SUPABASE_URL and GEOREF_SUPABASE_KEY environment variables.",
        }

    try:
        response = supabase.table(settings.patients_table).select("id", count="exact").limit(1).execute()
        return {
            "configured": True,
            "connected": True,
            "patients_count": response.count,
            "message": f"Database connected. Found {response.count} patients.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
