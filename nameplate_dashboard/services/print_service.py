# nameplate_dashboard/services/print_service.py
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from nameplate_dashboard.db.enums import NotificationType
from nameplate_dashboard.errors import ConflictError, NameplateValidationError, NotFoundError
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.models.unverified_nameplate import UnverifiedNameplate
from nameplate_dashboard.models.user import User
from nameplate_dashboard.models.verified_nameplate import VerifiedNameplate
from nameplate_dashboard.schemas.print_request import PrintRequest
from nameplate_dashboard.services.notification_service import NotificationService

logger = get_logger(__name__)


def _describe_validation_error(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{location}: {err.get('msg')}")
    return messages


class PrintService:
    """
    Send-to-print: copy a selected batch of nameplates into the verified
    (print-ready) table.

    The whole batch is checked before anything is added, and the caller commits
    once, so a batch either lands completely or not at all. Source records are
    never modified.
    """

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
    ):
        self.db = db
        self.notification_service = notification_service or NotificationService(db)

    def parse_request(self, body: Any) -> PrintRequest:
        if not isinstance(body, dict):
            raise NameplateValidationError("Missing required fields", missing=["rmo", "lot", "records"])
        missing = [key for key in ("rmo", "lot") if not body.get(key)]
        if not isinstance(body.get("records"), list):
            missing.append("records")
        if missing:
            raise NameplateValidationError("Missing required fields", missing=missing)
        try:
            return PrintRequest.model_validate(body)
        except ValidationError as exc:
            raise NameplateValidationError(
                "Invalid print records", errors=_describe_validation_error(exc)
            ) from exc

    def _officer_code(self, officer_id: str) -> str:
        """``officerId`` may be the officer's account id or their officer number."""
        user = self.db.get(User, officer_id)
        if user is not None and user.officer_number:
            return user.officer_number.upper()
        return officer_id.upper()

    def _check_sources(self, request: PrintRequest) -> None:
        source_ids = [record.id for record in request.records if record.id]
        if not source_ids:
            return

        if len(set(source_ids)) != len(source_ids):
            raise ConflictError("The same nameplate appears more than once in the batch")

        sources = {
            row.id: row
            for row in self.db.query(UnverifiedNameplate)
            .filter(UnverifiedNameplate.id.in_(source_ids))
            .all()
        }
        unknown = [sid for sid in source_ids if sid not in sources]
        if unknown:
            raise NotFoundError(f"Unknown nameplates: {', '.join(unknown)}")

        outside = [
            sid for sid in source_ids
            if sources[sid].rmo != request.rmo or sources[sid].lot != request.lot
        ]
        if request.officer_id:
            officer_code = self._officer_code(request.officer_id)
            outside += [
                sid for sid in source_ids
                if sid not in outside and (sources[sid].officer or "").upper() != officer_code
            ]
        if outside:
            raise ConflictError(
                f"Nameplates do not belong to lot {request.lot} of {request.rmo}: {', '.join(outside)}"
            )

        unverified = [sid for sid in source_ids if not sources[sid].verified]
        if unverified:
            raise ConflictError(f"Nameplates not verified yet: {', '.join(unverified)}")

        already = [
            row[0]
            for row in self.db.query(VerifiedNameplate.source_nameplate_id)
            .filter(VerifiedNameplate.source_nameplate_id.in_(source_ids))
            .all()
        ]
        if already:
            raise ConflictError(f"Nameplates already sent to print: {', '.join(already)}")

    def send_to_print(self, body: Any, *, operator_id: Optional[str] = None) -> List[VerifiedNameplate]:
        """
        Copy ``body["records"]`` into VerifiedNameplate under ``rmo``/``lot``.

        :param body: ``{rmo, officerId, lot, records[]}``
        :param operator_id: User sending the batch
        :raises NameplateValidationError: missing rmo/lot, records not a list, or a malformed record
        :raises NotFoundError: a record id does not exist
        :raises ConflictError: a record is outside the requested rmo/lot/officer,
            unverified, duplicated or already printed
        """
        request = self.parse_request(body)
        self._check_sources(request)

        rows = [
            VerifiedNameplate(
                id=str(uuid4()),
                source_nameplate_id=record.id,
                rmo=request.rmo,
                officer_id=request.officer_id,
                lot=request.lot,
                house_name=record.house_name,
                owner_name=record.owner_name,
                spouse_name=record.spouse_name,
                address=record.address,
                image_url=record.image_url,
                printed_by=operator_id,
            )
            for record in request.records
        ]
        self.db.add_all(rows)
        self.db.flush()

        self.notification_service.notify(
            message=f"{len(rows)} nameplates from lot {request.lot} ({request.rmo}) sent to print",
            type_=NotificationType.success,
            user_id=operator_id,
        )
        logger.info(f"print batch rmo={request.rmo} lot={request.lot} count={len(rows)} by={operator_id}")
        return rows

    # ======================================================
    # 🔎 Printed records
    # ======================================================

    def count_printed(self) -> int:
        return self.db.query(func.count(VerifiedNameplate.id)).scalar()

    def list_printed(self, *, rmo: Optional[str] = None, lot: Optional[str] = None) -> List[VerifiedNameplate]:
        query = self.db.query(VerifiedNameplate)
        if rmo:
            query = query.filter(VerifiedNameplate.rmo == rmo)
        if lot:
            query = query.filter(VerifiedNameplate.lot == lot)
        return query.order_by(desc(VerifiedNameplate.created_at)).all()

    def summarize_batch(self, rows: List[VerifiedNameplate]) -> Dict[str, Any]:
        return {"success": True, "message": "Records saved successfully", "count": len(rows)}
