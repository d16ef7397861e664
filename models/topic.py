from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin


class Topic(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "topics"

    name = Column(String(100), nullable=False, unique=True)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)

    followers = relationship("TopicFollow", back_populates="topic", passive_deletes=True)


class TopicFollow(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "topic_follows"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User")
    topic = relationship("Topic", back_populates="followers", lazy="joined")

    __table_args__ = (UniqueConstraint("user_id", "topic_id", name="uq_topic_follows_pair"),)
