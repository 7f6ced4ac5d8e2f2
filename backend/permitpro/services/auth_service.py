import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from permitpro.config import settings
from permitpro.errors import ValidationError
from permitpro.models.user import User
from permitpro.utils.timestamps import utc_timestamp

logger = logging.getLogger("permitpro.auth")


def login_or_create(db: Session, email: str, password: str | None = None) -> User:
    """Return the user for ``email``, creating it on first login.

    The password is not checked: this login is a stub that trusts any
    credentials.
    """
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError("Email is required")

    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(
        email=email,
        name=settings.default_user_name,
        role=settings.default_user_role,
        created_at=utc_timestamp(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent first login with the same email won
        db.rollback()
        return db.query(User).filter(User.email == email).one()
    db.refresh(user)
    logger.info("Created user %s on first login", user.id)
    return user
