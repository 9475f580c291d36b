"""Admin repository - Aggregate queries for the admin dashboard"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Message, PageVisit, Profile


class AdminRepository:
    """Repository for dashboard aggregates and the page-visit counter"""

    @staticmethod
    def count_profiles_by_role(db: Session) -> dict[str, int]:
        rows = db.query(Profile.role, func.count(Profile.id)).group_by(Profile.role).all()
        return {role: count for role, count in rows}

    @staticmethod
    def count_messages(db: Session) -> int:
        return db.query(func.count(Message.id)).scalar() or 0

    @staticmethod
    def count_providers_by_location_type(db: Session) -> list[tuple[str, int]]:
        """Providers grouped by location type, providers without one are skipped"""
        return (
            db.query(Profile.location_type, func.count(Profile.id))
            .filter(Profile.role == "provider", Profile.location_type.isnot(None))
            .group_by(Profile.location_type)
            .order_by(Profile.location_type)
            .all()
        )

    @staticmethod
    def record_page_visit(db: Session) -> PageVisit:
        visit = PageVisit()
        db.add(visit)
        db.commit()
        return visit

    @staticmethod
    def count_page_visits(db: Session) -> int:
        return db.query(func.count(PageVisit.id)).scalar() or 0
