from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

ROLES = ("client", "provider")
LOCATION_TYPES = ("house", "apartment", "studio", "rented_space", "mobile")
NOTIFICATION_TYPES = ("message", "review", "booking", "system")


def utcnow():
    """Naive UTC timestamp, matching what server_default=func.now() stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), unique=True, index=True, nullable=False)  # Clerk user id ("sub")
    username = Column(String(30), unique=True, index=True, nullable=False)
    username_changed_at = Column(DateTime, nullable=True)  # Last username change
    role = Column(String(20), default="client", nullable=False)  # client, provider
    is_admin = Column(Boolean, default=False, nullable=False)
    bio = Column(Text, nullable=True)
    instagram = Column(String(255), nullable=True)
    profile_image_url = Column(String(500), nullable=True)  # Object storage URL
    location = Column(String(500), nullable=True)  # Human readable address
    # house, apartment, studio, rented_space, mobile - providers only
    location_type = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    # Derived from reviews, only written by the review ledger
    rating = Column(Float, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)

    services = relationship("Service", back_populates="provider", order_by="Service.id")
    reviews_received = relationship(
        "Review",
        foreign_keys="Review.provider_id",
        back_populates="provider",
        order_by="Review.created_at.desc()",
    )
    reviews_written = relationship(
        "Review", foreign_keys="Review.client_id", back_populates="client"
    )

    __table_args__ = (
        CheckConstraint("role IN ('client', 'provider')", name="ck_profiles_role"),
    )


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(String(50), nullable=True)  # e.g. "50" or "50-100", not parsed
    duration = Column(Integer, nullable=True)  # Minutes

    provider = relationship("Profile", back_populates="services")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    display_name = Column(String(255), default="Anonymous", nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())

    provider = relationship(
        "Profile", foreign_keys=[provider_id], back_populates="reviews_received"
    )
    client = relationship("Profile", foreign_keys=[client_id], back_populates="reviews_written")

    __table_args__ = (
        UniqueConstraint("client_id", "provider_id", name="uq_reviews_client_provider"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())
    read = Column(Boolean, default=False, nullable=False)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # message, review, booking, system
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())


class PageVisit(Base):
    __tablename__ = "page_visits"

    id = Column(Integer, primary_key=True, index=True)
    visited_at = Column(DateTime, default=utcnow, server_default=func.now())
