from models.base_model import Base, BaseModel, SoftDeleteMixin
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship


class User(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "users"
    # stored lowercased, so equality is a case-insensitive match
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    avatar = Column(String(500), nullable=True)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    posts = relationship("Post", back_populates="author", passive_deletes=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
