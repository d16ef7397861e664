from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    CheckConstraint,
    Index,
    or_,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Post(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "posts"

    title = Column(String(255), nullable=False)
    # unique across removed posts too, a deleted post keeps its slug
    slug = Column(String(255), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    cover_image = Column(String(500), nullable=True)
    tags = Column(String(500), nullable=True)  # comma-separated
    published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    unlisted = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    read_time = Column(Integer, nullable=False, default=1)  # minutes

    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    author = relationship("User", back_populates="posts", lazy="joined")
    comments = relationship("Comment", back_populates="post", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_posts_view_count_nonnegative"),
        Index("ix_posts_published_created", "published", "created_at"),
    )

    @classmethod
    def published_query(cls, include_unlisted: bool = False):
        """Active published posts; unlisted ones only when asked for."""
        query = cls.active().filter(cls.published.is_(True))
        if not include_unlisted:
            query = query.filter(cls.unlisted.is_(False))
        return query

    @classmethod
    def visible_query(cls, user_id):
        """Active posts user_id may see: published ones plus their own drafts."""
        return cls.active().filter(or_(cls.published.is_(True), cls.author_id == user_id))

    def visible_to(self, user_id) -> bool:
        return self.is_active and (self.published or self.author_id == user_id)
