from datetime import date

from auth import sign_up
from database import init_db, SessionLocal, User
from logging_setup import configure_logging, get_logger
from normalizer import normalize_record
from store import TransactionStore

logger = get_logger("expense_tracker.seed")

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo1234"


def seed_users():
    configure_logging()
    init_db()
    db = SessionLocal()

    try:
        # Check if users exist
        if db.query(User).first():
            logger.info("Users already exist. Skipping seed.")
            return

        demo = sign_up(db, DEMO_EMAIL, DEMO_PASSWORD)
        sample = normalize_record({
            "amount": 850,
            "description": "Grocery shopping at BigBasket",
            "category": "Food",
            "date": date.today().replace(day=3),
            "type": "expense",
            "tags": ["essentials", "monthly"],
        })
        TransactionStore(db).insert(sample, demo.id)
        logger.info("Database initialized with demo user %s.", DEMO_EMAIL)
    finally:
        db.close()


if __name__ == "__main__":
    seed_users()
