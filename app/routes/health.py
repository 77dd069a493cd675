"""
Health endpoints for deployment probes.

/health reports which backends the process is wired to; /health/db reads
one document from every collection the pages depend on.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from app.config.firebase import get_db
from app.core.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

REQUIRED_COLLECTIONS = ("users", "posts", "reminders", "ppas")


def _backends() -> dict:
    return {
        "database": "mock" if settings.USE_MOCK_DB else "firestore",
        "identity": "mock" if settings.USE_MOCK_AUTH else "firebase",
    }


@router.get("")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "backends": _backends(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db")
def database_health():
    """
    Probe each required collection with a single-document read.

    An empty collection still counts as reachable. Any failed read turns
    the whole check into a 503 naming the collections that failed.
    """
    try:
        db = get_db()
    except Exception as e:
        logger.error(f"Database unavailable: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database unavailable: {str(e)}",
        )

    collections = {}
    failed = []
    for name in REQUIRED_COLLECTIONS:
        try:
            docs = list(db.collection(name).limit(1).get())
            collections[name] = {"reachable": True, "empty": not docs}
        except Exception as e:
            logger.warning(f"Health read failed for {name}: {str(e)}")
            collections[name] = {"reachable": False, "error": str(e)}
            failed.append(name)

    if failed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Unreachable collections: {', '.join(failed)}",
        )

    return {
        "status": "healthy",
        "database": _backends()["database"],
        "connected": True,
        "collections": collections,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
