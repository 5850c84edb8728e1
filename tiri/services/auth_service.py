from sqlalchemy import select
from sqlalchemy.orm import Session

from tiri.core.errors import InvalidCredentials
from tiri.core.logger import logger
from tiri.core.security import verify_password
from tiri.models import User


def authenticate(db: Session, phone: str, password: str) -> User:
    """
    Look the user up by phone and check the password.

    Unknown phone and wrong password raise the same error so the response
    does not reveal which phones are registered.
    """
    user = db.execute(
        select(User).where(User.phone == phone)
    ).scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"LOGIN FAILED | phone={phone}")
        raise InvalidCredentials()

    logger.info(f"LOGIN SUCCESS | user_id={user.id} | studio_id={user.studio_id}")
    return user
