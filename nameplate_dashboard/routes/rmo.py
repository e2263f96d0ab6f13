# nameplate_dashboard/routes/rmo.py
from flask import Blueprint, jsonify

from nameplate_dashboard.auth import can_access_rmo, current_identity, reviewer_required
from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import (
    KNOWN_ERRORS,
    error_response,
    parse_bool_arg,
    service_error_response,
)
from nameplate_dashboard.schemas.nameplate_dto import NameplateDTO
from nameplate_dashboard.schemas.user_dto import OfficerSummaryDTO, UserDTO
from nameplate_dashboard.services.nameplate_service import NameplateService
from nameplate_dashboard.services.user_service import UserService

rmo_bp = Blueprint('rmo', __name__, url_prefix='/api/rmo')
logger = get_logger(__name__)


def _forbidden():
    return error_response('You may only review your own RMO', 403)


@rmo_bp.route('')
@reviewer_required
def list_rmos():
    """RMO codes visible to the caller"""
    identity = current_identity()
    db = get_session()
    try:
        rmos = UserService(db).list_rmos()
        if identity.get('role') == UserRole.rmo.value:
            rmos = [code for code in rmos if code == identity.get('rmo')]
        return jsonify({'success': True, 'rmos': rmos})
    finally:
        db.close()


@rmo_bp.route('/<rmo>/officers')
@reviewer_required
def list_officers(rmo):
    if not can_access_rmo(current_identity(), rmo):
        return _forbidden()

    db = get_session()
    try:
        officers = UserService(db).list_officers(rmo)
        return jsonify({
            'success': True,
            'rmo': rmo,
            'officers': [
                OfficerSummaryDTO.from_orm_model(officer).model_dump(by_alias=True, mode='json')
                for officer in officers
            ],
        })
    finally:
        db.close()


@rmo_bp.route('/<rmo>/officers/<officer>')
@reviewer_required
def officer_details(rmo, officer):
    """Officer account plus the lots they have submitted"""
    if not can_access_rmo(current_identity(), rmo):
        return _forbidden()

    db = get_session()
    try:
        user = UserService(db).get_officer(rmo, officer)
        lots = NameplateService(db).list_lots(rmo=rmo, officer=officer)
        return jsonify({
            'success': True,
            'officer': UserDTO.from_orm_model(user).model_dump(by_alias=True, mode='json'),
            'lots': lots,
        })
    except KNOWN_ERRORS as e:
        return service_error_response(e)
    finally:
        db.close()


@rmo_bp.route('/<rmo>/officers/<officer>/lots')
@reviewer_required
def officer_lots(rmo, officer):
    if not can_access_rmo(current_identity(), rmo):
        return _forbidden()

    db = get_session()
    try:
        lots = NameplateService(db).list_lots(rmo=rmo, officer=officer)
        return jsonify({'success': True, 'lots': lots})
    finally:
        db.close()


@rmo_bp.route('/<rmo>/officers/<officer>/lots/<lot>')
@reviewer_required
def lot_nameplates(rmo, officer, lot):
    """Nameplates of one lot; unverified ones unless ?verified=true"""
    if not can_access_rmo(current_identity(), rmo):
        return _forbidden()

    verified = parse_bool_arg('verified')
    db = get_session()
    try:
        nameplate_service = NameplateService(db)
        records, total = nameplate_service.list_nameplates(
            rmo=rmo,
            officer=officer,
            lot=lot,
            verified=bool(verified),
            limit=None,
        )
        printed_ids = nameplate_service.printed_ids([record.id for record in records])
        return jsonify({
            'success': True,
            'count': total,
            'nameplates': [
                NameplateDTO.from_orm_model(record, printed=record.id in printed_ids)
                .model_dump(by_alias=True, mode='json')
                for record in records
            ],
        })
    finally:
        db.close()


@rmo_bp.route('/<rmo>/officers/<officer>/lots/<lot>/nameplates/<nameplate_id>/verify', methods=['PATCH'])
@reviewer_required
def verify_nameplate(rmo, officer, lot, nameplate_id):
    """Mark one nameplate of a lot as verified"""
    identity = current_identity()
    if not can_access_rmo(identity, rmo):
        return _forbidden()

    db = get_session()
    try:
        nameplate = NameplateService(db).verify(
            nameplate_id=nameplate_id,
            rmo=rmo,
            officer=officer,
            lot=lot,
            operator_id=identity.get('id'),
        )
        data = NameplateDTO.from_orm_model(nameplate).model_dump(by_alias=True, mode='json')
        db.commit()
        return jsonify({
            'success': True,
            'message': 'Nameplate verified',
            'data': data,
        })

    except KNOWN_ERRORS as e:
        db.rollback()
        return service_error_response(e)
    except Exception:
        db.rollback()
        logger.exception(f'verify failed nameplate={nameplate_id}')
        return error_response('Internal server error', 500)
    finally:
        db.close()
