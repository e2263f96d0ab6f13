# nameplate_dashboard/services/nameplate_service.py
from typing import Any, Dict, List, Optional, Set, Tuple
from uuid import uuid4
from datetime import datetime, timezone

from sqlalchemy import case, desc, func, update
from sqlalchemy.orm import Session

from nameplate_dashboard.errors import ConflictError, NameplateValidationError, NotFoundError
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.models.unverified_nameplate import UnverifiedNameplate
from nameplate_dashboard.models.verified_nameplate import VerifiedNameplate
from nameplate_dashboard.services.notification_service import NotificationService
from nameplate_dashboard.validation import check_nameplate_payload

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50

# payload key -> column, for everything that is copied verbatim
PAYLOAD_COLUMNS: Dict[str, str] = {
    "theme": "theme",
    "background": "background",
    "houseName": "house_name",
    "ownerName": "owner_name",
    "spouseName": "spouse_name",
    "address": "address",
    "textColor": "text_color",
    "houseNameColor": "house_name_color",
    "houseNameSize": "house_name_size",
    "ownerNameColor": "owner_name_color",
    "ownerNameSize": "owner_name_size",
    "addressColor": "address_color",
    "addressSize": "address_size",
    "rmo": "rmo",
    "officer": "officer",
    "lot": "lot",
    "officer_name": "officer_name",
    "email": "email",
    "designation": "designation",
}

# columns that accept either spelling from older clients
ALIASED_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "mobile_number": ("mobileNumber", "mobile_number"),
    "image_url": ("imageUrl", "image_url"),
}

SIZE_COLUMNS = {"house_name_size", "owner_name_size", "address_size"}


class NameplateService:
    """
    Service for the nameplate record lifecycle.

    Responsibilities:
    - Validate and persist editor submissions as unverified records
    - Filtered, paginated listings and lot grouping
    - Compare-and-swap verification
    """

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
    ):
        self.db = db
        self.notification_service = notification_service or NotificationService(db)

    # ======================================================
    # ✍️ Create
    # ======================================================

    def create_nameplate(self, payload: Dict[str, Any]) -> UnverifiedNameplate:
        """
        Persist a submission as an unverified nameplate.

        Every violation is collected before raising; nothing is written when
        any required field is missing. No dedup: two identical payloads create
        two records.

        :param payload: createNameplate JSON body
        :type payload: Dict[str, Any]
        """
        missing, errors = check_nameplate_payload(payload)
        if errors:
            message = f"Missing fields: {', '.join(missing)}" if missing else "; ".join(errors)
            raise NameplateValidationError(message, missing=missing, errors=errors)

        values: Dict[str, Any] = {}
        for key, column in PAYLOAD_COLUMNS.items():
            if payload.get(key) is not None:
                values[column] = payload[key]
        for column, keys in ALIASED_COLUMNS.items():
            for key in keys:
                if payload.get(key):
                    values[column] = payload[key]
                    break
        for column in SIZE_COLUMNS:
            if column in values:
                try:
                    values[column] = int(values[column])
                except (TypeError, ValueError) as exc:
                    raise NameplateValidationError(
                        f"{column} must be a number", errors=[f"{column} must be a number"]
                    ) from exc

        nameplate = UnverifiedNameplate(
            id=str(uuid4()),
            verified=False,
            **values,
        )
        self.db.add(nameplate)
        self.db.flush()

        logger.info(
            f"created nameplate={nameplate.id} rmo={nameplate.rmo} "
            f"officer={nameplate.officer} lot={nameplate.lot}"
        )
        return nameplate

    # ======================================================
    # 🔎 Queries
    # ======================================================

    def get(self, nameplate_id: str) -> UnverifiedNameplate:
        nameplate = self.db.get(UnverifiedNameplate, nameplate_id)
        if not nameplate:
            raise NotFoundError(f"Nameplate {nameplate_id} not found")
        return nameplate

    def list_nameplates(
        self,
        *,
        rmo: Optional[str] = None,
        officer: Optional[str] = None,
        lot: Optional[str] = None,
        verified: Optional[bool] = None,
        limit: Optional[int] = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Tuple[List[UnverifiedNameplate], int]:
        """
        Newest-first listing with optional filters.

        Returns ``(records, total)`` where ``total`` ignores pagination.
        ``limit=None`` returns every matching record.
        """
        query = self.db.query(UnverifiedNameplate)
        if rmo:
            query = query.filter(UnverifiedNameplate.rmo == rmo)
        if officer:
            query = query.filter(func.upper(UnverifiedNameplate.officer) == officer.upper())
        if lot:
            query = query.filter(UnverifiedNameplate.lot == lot)
        if verified is not None:
            query = query.filter(UnverifiedNameplate.verified == verified)

        total = query.count()

        query = query.order_by(desc(UnverifiedNameplate.created_at)).offset(max(offset, 0))
        if limit is not None:
            query = query.limit(max(limit, 0))
        return query.all(), total

    def printed_ids(self, nameplate_ids: List[str]) -> Set[str]:
        """Which of ``nameplate_ids`` already have a print copy."""
        if not nameplate_ids:
            return set()
        rows = (
            self.db.query(VerifiedNameplate.source_nameplate_id)
            .filter(VerifiedNameplate.source_nameplate_id.in_(nameplate_ids))
            .all()
        )
        return {row[0] for row in rows}

    def list_lots(self, *, rmo: str, officer: str) -> List[Dict[str, Any]]:
        """
        Lots of an officer, discovered by grouping nameplates on ``lot``.
        """
        verified_count = func.sum(case((UnverifiedNameplate.verified.is_(True), 1), else_=0))
        rows = (
            self.db.query(
                UnverifiedNameplate.lot,
                func.count(UnverifiedNameplate.id),
                verified_count,
                func.max(UnverifiedNameplate.created_at),
            )
            .filter(
                UnverifiedNameplate.rmo == rmo,
                func.upper(UnverifiedNameplate.officer) == officer.upper(),
            )
            .group_by(UnverifiedNameplate.lot)
            .order_by(UnverifiedNameplate.lot)
            .all()
        )
        return [
            {
                "lot": lot,
                "total": total,
                "verified": int(verified or 0),
                "unverified": total - int(verified or 0),
                "lastSubmittedAt": last.isoformat() if last else None,
            }
            for lot, total, verified, last in rows
        ]

    def officer_stats(self, officer: str) -> Dict[str, int]:
        """Unverified / verified / printed counts of one officer."""
        verified_count = func.sum(case((UnverifiedNameplate.verified.is_(True), 1), else_=0))
        total, verified = (
            self.db.query(func.count(UnverifiedNameplate.id), verified_count)
            .filter(func.upper(UnverifiedNameplate.officer) == officer.upper())
            .one()
        )
        printed = (
            self.db.query(func.count(VerifiedNameplate.id))
            .join(UnverifiedNameplate, UnverifiedNameplate.id == VerifiedNameplate.source_nameplate_id)
            .filter(func.upper(UnverifiedNameplate.officer) == officer.upper())
            .scalar()
        )
        verified = int(verified or 0)
        return {
            "total": total,
            "unverified": total - verified,
            "verified": verified,
            "printed": printed,
        }

    # ======================================================
    # ✅ Verify
    # ======================================================

    def verify(
        self,
        *,
        nameplate_id: str,
        rmo: str,
        officer: str,
        lot: str,
        operator_id: Optional[str] = None,
    ) -> UnverifiedNameplate:
        """
        Flip ``verified`` false -> true, only for a record that exists in the
        addressed ``(rmo, officer, lot)`` and is still unverified.

        The flip is a single conditional UPDATE, so two concurrent reviewers
        cannot both succeed.

        :raises NotFoundError: no such record in that lot
        :raises ConflictError: the record is already verified
        """
        now = datetime.now(timezone.utc)
        result = self.db.execute(
            update(UnverifiedNameplate)
            .where(
                UnverifiedNameplate.id == nameplate_id,
                UnverifiedNameplate.rmo == rmo,
                func.upper(UnverifiedNameplate.officer) == officer.upper(),
                UnverifiedNameplate.lot == lot,
                UnverifiedNameplate.verified.is_(False),
            )
            .values(verified=True, verified_at=now, verified_by=operator_id, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            existing = (
                self.db.query(UnverifiedNameplate)
                .filter(
                    UnverifiedNameplate.id == nameplate_id,
                    UnverifiedNameplate.rmo == rmo,
                    func.upper(UnverifiedNameplate.officer) == officer.upper(),
                    UnverifiedNameplate.lot == lot,
                )
                .first()
            )
            if existing is None:
                raise NotFoundError(f"Nameplate {nameplate_id} not found in lot {lot}")
            raise ConflictError(f"Nameplate {nameplate_id} is already verified")

        nameplate = self.get(nameplate_id)
        self.db.refresh(nameplate)
        self.notification_service.notify(
            message=f"Nameplate {nameplate.house_name} in lot {lot} verified",
            user_id=operator_id,
        )
        logger.info(f"verified nameplate={nameplate_id} lot={lot} by={operator_id}")
        return nameplate
