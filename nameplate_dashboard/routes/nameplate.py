# nameplate_dashboard/routes/nameplate.py
from flask import Blueprint, jsonify, request

from nameplate_dashboard.auth import current_identity, login_required
from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import (
    KNOWN_ERRORS,
    error_response,
    parse_bool_arg,
    parse_int_arg,
    service_error_response,
)
from nameplate_dashboard.schemas.nameplate_dto import NameplateDTO
from nameplate_dashboard.services.nameplate_service import DEFAULT_PAGE_SIZE, NameplateService
from nameplate_dashboard.services.user_service import UserService

nameplate_bp = Blueprint('nameplate', __name__, url_prefix='/api')
logger = get_logger(__name__)


def _dump(nameplate, printed_ids=()):
    return NameplateDTO.from_orm_model(
        nameplate, printed=nameplate.id in printed_ids
    ).model_dump(by_alias=True, mode='json')


def _dump_all(db, records):
    printed_ids = NameplateService(db).printed_ids([record.id for record in records])
    return [_dump(record, printed_ids) for record in records]


def _scope_filters(identity, rmo, officer):
    """Officers only ever see their own records, RMOs only their RMO."""
    role = identity.get('role')
    if role == UserRole.officer.value:
        return identity.get('rmo'), identity.get('officerNumber')
    if role == UserRole.rmo.value:
        return identity.get('rmo'), officer
    return rmo, officer


def _owns_officer_code(identity, officer):
    if identity.get('role') != UserRole.officer.value:
        return True
    return (identity.get('officerNumber') or '').upper() == officer.upper()


def _hierarchy_conflict(identity, body, officer, lot):
    """
    Message when the body names a different officer, lot or RMO than the
    caller may submit under, else None.
    """
    body_officer = body.get('officer')
    if body_officer not in (None, '') and str(body_officer).upper() != officer.upper():
        return 'Body officer does not match the URL'
    body_lot = body.get('lot')
    if body_lot not in (None, '') and body_lot != lot:
        return 'Body lot does not match the URL'

    role = identity.get('role')
    if role == UserRole.admin.value:
        return None
    body_rmo = body.get('rmo')
    if body_rmo not in (None, '') and body_rmo != identity.get('rmo'):
        return 'You may only submit under your own RMO'
    return None


@nameplate_bp.route('/<officer>/lots/<lot>/createNameplate', methods=['POST'])
@login_required
def create_nameplate(officer, lot):
    """Save an editor submission as an unverified nameplate"""
    identity = current_identity()
    if not _owns_officer_code(identity, officer):
        return error_response('Officers may only submit under their own code', 403)

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error_response('Malformed JSON body', 500)

    conflict = _hierarchy_conflict(identity, body, officer, lot)
    if conflict:
        return error_response(conflict, 403)

    # the URL and the session own the hierarchy, the body only repeats it
    body['officer'] = officer
    body['lot'] = lot
    if identity.get('role') != UserRole.admin.value:
        body['rmo'] = identity.get('rmo')

    db = get_session()
    try:
        nameplate = NameplateService(db).create_nameplate(body)
        data = _dump(nameplate)
        db.commit()
        return jsonify({
            'success': True,
            'message': 'Unverified nameplate saved',
            'data': data,
        }), 201

    except KNOWN_ERRORS as e:
        db.rollback()
        return service_error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception('createNameplate failed')
        return error_response(str(e) or 'Internal server error', 500)
    finally:
        db.close()


@nameplate_bp.route('/unverify')
@login_required
def list_nameplates():
    """Filtered, paginated nameplate listing"""
    identity = current_identity()
    rmo, officer = _scope_filters(
        identity,
        request.args.get('rmo', '').strip() or None,
        request.args.get('officer', '').strip() or None,
    )
    lot = request.args.get('lot', '').strip() or None
    verified = parse_bool_arg('verified')
    limit = parse_int_arg('limit', DEFAULT_PAGE_SIZE)
    offset = parse_int_arg('offset', 0)

    db = get_session()
    try:
        records, total = NameplateService(db).list_nameplates(
            rmo=rmo,
            officer=officer,
            lot=lot,
            verified=verified,
            limit=limit,
            offset=offset,
        )
        return jsonify({
            'success': True,
            'count': total,
            'data': _dump_all(db, records),
            'pagination': {
                'total': total,
                'limit': limit,
                'offset': offset,
                'hasMore': offset + limit < total,
            },
        })
    except Exception as e:
        logger.exception('GET /api/unverify failed')
        return error_response(str(e) or 'Internal server error', 500)
    finally:
        db.close()


@nameplate_bp.route('/<officer>/lots')
@login_required
def officer_nameplates(officer):
    """Nameplates of one officer, optionally a single lot"""
    identity = current_identity()
    if not _owns_officer_code(identity, officer):
        return error_response('Insufficient permissions', 403)

    rmo = identity.get('rmo') if identity.get('role') == UserRole.rmo.value else None
    db = get_session()
    try:
        records, _ = NameplateService(db).list_nameplates(
            rmo=rmo,
            officer=officer,
            lot=request.args.get('lot', '').strip() or None,
            limit=None,
        )
        return jsonify({'success': True, 'nameplates': _dump_all(db, records)})
    finally:
        db.close()


@nameplate_bp.route('/<officer>/stats')
@login_required
def officer_stats(officer):
    """Unverified / verified / printed counts of one officer"""
    identity = current_identity()
    if not _owns_officer_code(identity, officer):
        return error_response('Insufficient permissions', 403)

    db = get_session()
    try:
        user = UserService(db).get_by_officer_number(officer)
        if not user:
            return error_response('Officer not found', 404)
        if identity.get('role') == UserRole.rmo.value and user.rmo != identity.get('rmo'):
            return error_response('Insufficient permissions', 403)
        return jsonify({'success': True, 'data': NameplateService(db).officer_stats(officer)})
    finally:
        db.close()
