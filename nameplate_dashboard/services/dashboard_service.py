# nameplate_dashboard/services/dashboard_service.py
from typing import Any, Dict, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.models.unverified_nameplate import UnverifiedNameplate
from nameplate_dashboard.models.user import User
from nameplate_dashboard.models.verified_nameplate import VerifiedNameplate


class DashboardService:
    """
    Dashboard counters.

    Officer counts per RMO come from one GROUP BY rather than one request per
    RMO.
    """

    def __init__(self, db: Session):
        self.db = db

    def officers_per_rmo(self, rmo: Optional[str] = None) -> Dict[str, int]:
        query = (
            self.db.query(User.rmo, func.count(User.id))
            .filter(User.role == UserRole.officer, User.is_active.is_(True), User.rmo.isnot(None))
        )
        if rmo:
            query = query.filter(User.rmo == rmo)
        return {code: count for code, count in query.group_by(User.rmo).order_by(User.rmo).all()}

    def nameplate_counts(self, *, rmo: Optional[str] = None, officer: Optional[str] = None) -> Dict[str, int]:
        verified_count = func.sum(case((UnverifiedNameplate.verified.is_(True), 1), else_=0))
        query = self.db.query(func.count(UnverifiedNameplate.id), verified_count)
        if rmo:
            query = query.filter(UnverifiedNameplate.rmo == rmo)
        if officer:
            query = query.filter(func.upper(UnverifiedNameplate.officer) == officer.upper())
        total, verified = query.one()
        verified = int(verified or 0)

        printed_query = self.db.query(func.count(VerifiedNameplate.id))
        if rmo:
            printed_query = printed_query.filter(VerifiedNameplate.rmo == rmo)
        if officer:
            printed_query = (
                printed_query
                .join(UnverifiedNameplate, UnverifiedNameplate.id == VerifiedNameplate.source_nameplate_id)
                .filter(func.upper(UnverifiedNameplate.officer) == officer.upper())
            )
        printed = printed_query.scalar()

        # verified but not yet copied to the print table
        awaiting_query = (
            self.db.query(func.count(UnverifiedNameplate.id))
            .outerjoin(VerifiedNameplate, VerifiedNameplate.source_nameplate_id == UnverifiedNameplate.id)
            .filter(UnverifiedNameplate.verified.is_(True), VerifiedNameplate.id.is_(None))
        )
        if rmo:
            awaiting_query = awaiting_query.filter(UnverifiedNameplate.rmo == rmo)
        if officer:
            awaiting_query = awaiting_query.filter(func.upper(UnverifiedNameplate.officer) == officer.upper())

        return {
            "total": total,
            "unverified": total - verified,
            "verified": verified,
            "awaitingPrint": awaiting_query.scalar(),
            "printed": printed,
        }

    def stats_for(self, identity: Dict[str, Any]) -> Dict[str, Any]:
        """Counters scoped to the caller: admin -> all, rmo -> own RMO, officer -> own records."""
        role = identity.get("role")
        rmo = None
        officer = None
        if role == UserRole.rmo.value:
            rmo = identity.get("rmo")
        elif role == UserRole.officer.value:
            rmo = identity.get("rmo")
            officer = identity.get("officerNumber")

        per_rmo = self.officers_per_rmo(rmo)
        stats: Dict[str, Any] = {
            "totalRmos": len(per_rmo) if rmo else self._count_rmos(),
            "totalOfficers": sum(per_rmo.values()),
            "officersPerRmo": per_rmo,
            "nameplates": self.nameplate_counts(rmo=rmo, officer=officer),
        }
        if role == UserRole.admin.value:
            stats["totalUsers"] = (
                self.db.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar()
            )
        return stats

    def _count_rmos(self) -> int:
        return (
            self.db.query(func.count(func.distinct(User.rmo)))
            .filter(User.rmo.isnot(None), User.rmo != "")
            .scalar()
        )
