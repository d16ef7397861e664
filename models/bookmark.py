from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Bookmark(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "bookmarks"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User")
    post = relationship("Post", lazy="joined")

    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_bookmarks_user_post"),)
