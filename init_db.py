"""
Database setup script
Creates all tables and inserts the default items and care items.
Usage: python init_db.py [--no-seed]
"""
import logging
import sys

from carecycle.database import Base, SessionLocal, engine
from carecycle import models  # noqa: F401
from carecycle.seed import seed_default_data

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def init_db(seed: bool = True):
    logger.info(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=engine, checkfirst=True)

    if not seed:
        return

    db = SessionLocal()
    try:
        created = seed_default_data(db)
        logger.info(f"Seed complete: {created['items']} item(s), {created['care_items']} care item(s) added")
    finally:
        db.close()


if __name__ == "__main__":
    try:
        init_db(seed="--no-seed" not in sys.argv[1:])
        logger.info("Database ready")
    except Exception as e:
        logger.error(f"Database setup failed: {e}")
        sys.exit(1)
