# organic_store/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from organic_store.models.user import User


class UserRepository:
    """
    Data access for accounts. Emails are compared lower-cased.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        return session.exec(stmt).first()

    def email_taken(
        self,
        session: Session,
        email: str,
        exclude_id: uuid.UUID | None = None,
    ) -> bool:
        """True if another account already uses `email`."""
        user = self.get_by_email(session, email)
        return user is not None and user.id != exclude_id

    def add(self, session: Session, user: User) -> User:
        """Stage a new account in the caller's transaction (flush only)."""
        session.add(user)
        session.flush()
        return user

    def save(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
