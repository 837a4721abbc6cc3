"""
Seed the default karaoke rooms.

Run ``python -m karaoke_service.seed`` (or ``karaoke-seed``) against the
configured ``DATABASE_URL``; rooms whose numbers already exist are skipped.
"""
import logging
from typing import List

from . import models
from .database import SessionLocal, create_tables
from .stores import RoomStore

logger = logging.getLogger(__name__)

DEFAULT_ROOMS = [
    ("101", 4),
    ("102", 4),
    ("201", 8),
    ("202", 8),
    ("301", 12),
    ("VIP", 20),
]


def seed_default_rooms(rooms: RoomStore) -> List[models.Room]:
    created = []
    for room_number, capacity in DEFAULT_ROOMS:
        if rooms.find_by_number(room_number) is not None:
            continue
        created.append(rooms.insert(room_number=room_number, capacity=capacity))
    logger.info("Seeded %d default rooms", len(created))
    return created


def main():
    logging.basicConfig(level=logging.INFO)
    create_tables()
    db = SessionLocal()
    try:
        created = seed_default_rooms(RoomStore(db))
    finally:
        db.close()
    print(f"Created {len(created)} rooms")


if __name__ == "__main__":
    main()
