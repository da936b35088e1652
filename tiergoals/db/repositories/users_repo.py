from sqlalchemy.orm import Session

from tiergoals.db.models import User


def ensure_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if user:
        return user

    user = User(id=user_id)
    session.add(user)
    session.flush()
    return user
