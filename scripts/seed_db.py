"""
Seed script for the Corps Companion mock DB or Firestore.

PPA records are read-only for the API, so this script is how the directory
gets populated.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Force mock DB even if FIREBASE configured: python scripts/seed_db.py --apply --force-mock

Behavior:
  - Loads `db_seed.json` from the working directory (or --seed PATH).
  - Gets DB via `app.config.firebase.get_db()` which will return the mock DB or real Firestore depending on settings.
  - Writes each top-level collection/document to the DB.

NOTE: When applying to real Firestore, ensure `FIREBASE_CREDENTIALS_PATH` is set and `USE_MOCK_DB=false` in `.env`.
With --force-mock, set MOCK_DB_PATH so the seeded data outlives this process.
"""

import argparse
import json
import logging
import os
from typing import Any

from app.config.firebase import get_db
from app.core.settings import settings

logger = logging.getLogger("seed_db")


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_to_db(db: Any, seed: dict, apply: bool = False) -> int:
    """Write (or, without apply, only list) every seeded document. Returns the number written."""
    written = 0
    for collection, docs in seed.items():
        for doc_id, data in docs.items():
            logger.info(f"Preparing: {collection}/{doc_id}")
            if not apply:
                continue
            try:
                # Firestore client and MockFirestore share .collection(name).document(id).set(data)
                db.collection(collection).document(doc_id).set(data)
                written += 1
                logger.info(f"Wrote: {collection}/{doc_id}")
            except Exception as e:
                logger.error(f"Failed to write {collection}/{doc_id}: {e}")
    return written


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        logger.error(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)

    if args.force_mock:
        logger.info("Forcing mock DB usage for this run.")
        settings.USE_MOCK_DB = True

    db = get_db()

    written = write_to_db(db, seed, apply=args.apply)

    if args.apply:
        logger.info(f"Seeding completed: {written} document(s) written.")
    else:
        logger.info("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
