from sqlalchemy.orm import Session
from app.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_auth_id(self, auth_user_id: str) -> User | None:
        """Get user by auth_user_id"""
        return self.db.query(User).filter(User.auth_user_id == auth_user_id).first()

    def get_by_email(self, email: str) -> User | None:
        """
        Get the account registered with an email address.

        Args:
            email: Lower-cased email address

        Returns:
            User object or None if no account uses this email
        """
        return self.db.query(User).filter(User.email == email).first()

    def get_by_ids(self, user_ids: list[int]) -> dict[int, User]:
        """Get users keyed by internal ID"""
        if not user_ids:
            return {}
        users = self.db.query(User).filter(User.id.in_(user_ids)).all()
        return {user.id: user for user in users}

    def create(self, user: User, commit: bool = True) -> User:
        """
        Create new user.

        With commit=False the row is only flushed so the caller can finish
        the surrounding unit of work before committing.
        """
        self.db.add(user)
        if commit:
            self.db.commit()
            self.db.refresh(user)
        else:
            self.db.flush()
        return user

    def update(self, user: User) -> User:
        """Update existing user"""
        self.db.commit()
        self.db.refresh(user)
        return user
