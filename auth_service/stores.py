from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import EmailAlreadyRegistered
from .models import User, RefreshToken, Roles


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        role: Roles = Roles.CUSTOMER,
    ) -> User:
        if self.get_by_email(email) is not None:
            raise EmailAlreadyRegistered()

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password_hash,
            role=role.value,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # A concurrent registration won the unique constraint on email
            self.db.rollback()
            raise EmailAlreadyRegistered() from exc
        self.db.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)


class RefreshTokenStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user: User, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(user_id=user.id, expires_at=expires_at)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def find(self, record_id: int, user_id: int) -> Optional[RefreshToken]:
        """Live record for this id owned by this user; None means the token is revoked."""
        return self.db.execute(
            select(RefreshToken).where(
                RefreshToken.id == record_id,
                RefreshToken.user_id == user_id,
            )
        ).scalar_one_or_none()

    def delete(self, record_id: int) -> bool:
        record = self.db.get(RefreshToken, record_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.commit()
        return True

    def count_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == user_id)
        ).scalar_one()
