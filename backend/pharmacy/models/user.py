"""User model."""

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pharmacy.db.base import Base
from pharmacy.schemas.user import UserRole


class UserModel(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.STAFF, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.username}>"
