# nameplate_dashboard/routes/admin.py
from flask import Blueprint, jsonify, request

from nameplate_dashboard.auth import admin_required, can_access_rmo, current_identity, reviewer_required
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import KNOWN_ERRORS, error_response, service_error_response
from nameplate_dashboard.schemas.nameplate_dto import PrintedNameplateDTO
from nameplate_dashboard.services.print_service import PrintService

admin_bp = Blueprint('admin', __name__, url_prefix='/api')
logger = get_logger(__name__)


@admin_bp.route('/admin/print', methods=['POST'])
@reviewer_required
def send_to_print():
    """
    Copy a batch of verified nameplates into the print table.

    Body: ``{rmo, officerId, lot, records: [...]}``. The batch is all or nothing.
    """
    identity = current_identity()
    body = request.get_json(silent=True)

    if isinstance(body, dict) and body.get('rmo') and not can_access_rmo(identity, body['rmo']):
        return error_response('You may only print for your own RMO', 403)

    db = get_session()
    try:
        print_service = PrintService(db)
        rows = print_service.send_to_print(body, operator_id=identity.get('id'))
        db.commit()
        return jsonify(print_service.summarize_batch(rows))

    except KNOWN_ERRORS as e:
        db.rollback()
        return service_error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception('print batch failed')
        return error_response(str(e) or 'Internal server error', 500)
    finally:
        db.close()


@admin_bp.route('/admin/nameplates')
@admin_required
def count_printed():
    """Number of print-ready records"""
    db = get_session()
    try:
        return jsonify({'success': True, 'count': PrintService(db).count_printed()})
    finally:
        db.close()


@admin_bp.route('/printNameplate')
@reviewer_required
def list_printed():
    identity = current_identity()
    rmo = request.args.get('rmo', '').strip() or None
    if rmo and not can_access_rmo(identity, rmo):
        return error_response('Insufficient permissions', 403)
    if rmo is None and identity.get('role') != 'admin':
        rmo = identity.get('rmo')

    db = get_session()
    try:
        rows = PrintService(db).list_printed(rmo=rmo, lot=request.args.get('lot', '').strip() or None)
        return jsonify({
            'success': True,
            'count': len(rows),
            'data': [PrintedNameplateDTO.from_orm_model(row).model_dump(by_alias=True, mode='json') for row in rows],
        })
    finally:
        db.close()
