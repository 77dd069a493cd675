"""
PPA Service - directory search over Primary Place of Assignment records.

Records are read-only here; they are loaded out-of-band (scripts/seed_db.py).
"""

from app.config.firebase import get_db
from app.models.ppa import PPAResponse
from app.utils.firestore_helpers import prefix_filter, snapshot_to_dict, where_filter
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class PPAService:
    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def search(self, term: Optional[str] = None, state: Optional[str] = None) -> List[PPAResponse]:
        """
        Search PPAs by name prefix and/or exact state.

        Empty or missing filters are not applied; with neither, every record
        is returned. The result is complete: no pagination.
        """
        term = (term or "").strip()
        state = (state or "").strip()

        query = self.db.collection("ppas")
        if term:
            query = prefix_filter(query, "name", term)
        if state:
            query = where_filter(query, "state", "==", state)

        results = [PPAResponse(**snapshot_to_dict(doc)) for doc in query.stream()]
        logger.info(f"PPA search term={term!r} state={state!r}: {len(results)} result(s)")
        return results


# Global service instance
_ppa_service = None


def get_ppa_service() -> PPAService:
    """Get or create PPAService singleton."""
    global _ppa_service
    if _ppa_service is None:
        _ppa_service = PPAService()
    return _ppa_service
