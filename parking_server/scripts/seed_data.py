"""
Populate sample parking lots.

Run once against an empty database:

    python -m parking_server.scripts.seed_data
"""
import logging

from sqlalchemy.orm import Session

from ..models.parking import Parking

logger = logging.getLogger(__name__)

SAMPLE_PARKINGS = [
    {"name": "Mall A Parking", "location": "Jl. Merdeka No.10, Jakarta", "capacity": 50},
    {"name": "Campus B Parking", "location": "Jl. Sudirman No.20, Depok", "capacity": 100},
    {"name": "Office C Parking", "location": "Jl. Gatot Subroto No.30, Bandung", "capacity": 75},
]


def seed_sample_parkings(db: Session) -> int:
    """Insert the sample lots if no parking lot exists yet. Returns how many were added."""
    if db.query(Parking).count() > 0:
        logger.info("Parking lots already present, skipping sample data")
        return 0

    for data in SAMPLE_PARKINGS:
        db.add(Parking(**data))
    db.commit()

    logger.info(f"Seeded {len(SAMPLE_PARKINGS)} sample parking lots")
    return len(SAMPLE_PARKINGS)


if __name__ == "__main__":
    from ..db import Base, SessionLocal, engine

    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        seed_sample_parkings(session)
    finally:
        session.close()
