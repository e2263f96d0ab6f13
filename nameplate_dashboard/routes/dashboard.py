# nameplate_dashboard/routes/dashboard.py
from flask import Blueprint, jsonify, request

from nameplate_dashboard.auth import current_identity, login_required
from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import error_response, parse_int_arg
from nameplate_dashboard.services.dashboard_service import DashboardService
from nameplate_dashboard.services.notification_service import NotificationService

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api')
logger = get_logger(__name__)


@dashboard_bp.route('/dashboard/stats')
@login_required
def stats():
    """Counters scoped to the caller's role"""
    db = get_session()
    try:
        return jsonify({'success': True, 'data': DashboardService(db).stats_for(current_identity())})
    finally:
        db.close()


@dashboard_bp.route('/notifications')
@login_required
def list_notifications():
    identity = current_identity()
    # admins read the whole feed, everyone else only their own
    user_id = None if identity.get('role') == UserRole.admin.value else identity.get('id')

    db = get_session()
    try:
        notifications = NotificationService(db).list_notifications(
            user_id=user_id,
            limit=parse_int_arg('limit', 100),
        )
        return jsonify({
            'success': True,
            'notifications': [
                {
                    'id': n.id,
                    'message': n.message,
                    'type': n.type.value,
                    'userId': n.user_id,
                    'createdAt': n.created_at.isoformat() if n.created_at else None,
                }
                for n in notifications
            ],
        })
    finally:
        db.close()


@dashboard_bp.route('/notifications', methods=['POST'])
@login_required
def create_notification():
    body = request.get_json(silent=True) or {}
    identity = current_identity()
    user_id = identity.get('id')
    if identity.get('role') == UserRole.admin.value and body.get('userId'):
        user_id = body['userId']

    db = get_session()
    try:
        notification = NotificationService(db).notify(
            message=(body.get('message') or '').strip(),
            type_=body.get('type') or 'info',
            user_id=user_id,
        )
        db.commit()
        return jsonify({'success': True, 'id': notification.id}), 201

    except ValueError as e:
        db.rollback()
        return error_response(str(e), 400)
    except Exception:
        db.rollback()
        logger.exception('notification create failed')
        return error_response('Internal server error', 500)
    finally:
        db.close()
