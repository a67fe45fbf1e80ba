import logging

from ayu.config import settings
from ayu.database import SessionLocal
from ayu.models.user import User
from ayu.services.account_service import normalise_email
from ayu.services.auth_service import hash_password

logger = logging.getLogger(__name__)

DEMO_USER_NAME = "Ayu User"


def seed_demo_user(session, email: str, password: str) -> User:
    email = normalise_email(email)
    user = session.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(
        name=DEMO_USER_NAME,
        email=email,
        password_hash=hash_password(password),
        is_verified=True,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Seeded verified demo user %s", email)
    return user


def run_seed():
    if not settings.SEED_DEMO_USER_EMAIL or not settings.SEED_DEMO_USER_PASSWORD:
        logger.debug("Demo user seeding skipped; SEED_DEMO_USER_EMAIL/PASSWORD not set")
        return
    session = SessionLocal()
    try:
        seed_demo_user(session, settings.SEED_DEMO_USER_EMAIL, settings.SEED_DEMO_USER_PASSWORD)
    finally:
        session.close()


if __name__ == "__main__":
    run_seed()
