from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Comment(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "comments"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    # null for top-level comments
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    content = Column(Text, nullable=False)

    author = relationship("User", lazy="joined")
    post = relationship("Post", back_populates="comments")
    parent = relationship("Comment", remote_side="Comment.id", back_populates="replies")
    replies = relationship("Comment", back_populates="parent", order_by="Comment.created_at")

    @property
    def active_replies(self):
        return [reply for reply in self.replies if reply.is_active]
