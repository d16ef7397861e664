from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Like(SoftDeleteMixin, BaseModel, Base):
    """(user, post) pair; unliking tombstones the row and liking again restores it."""
    __tablename__ = "likes"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User")
    post = relationship("Post")

    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),)
