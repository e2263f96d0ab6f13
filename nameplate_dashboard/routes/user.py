# nameplate_dashboard/routes/user.py
from flask import Blueprint, jsonify

from nameplate_dashboard.auth import admin_required
from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import KNOWN_ERRORS, error_response, service_error_response
from nameplate_dashboard.schemas.user_dto import UserDTO
from nameplate_dashboard.services.user_service import UserService

user_bp = Blueprint('user', __name__, url_prefix='/api/users')
logger = get_logger(__name__)


def _parse_role(role):
    try:
        return UserRole(role.lower())
    except ValueError:
        return None


@user_bp.route('/role/<role>')
@admin_required
def list_by_role(role):
    """Accounts of one role (admin)"""
    user_role = _parse_role(role)
    if user_role is None:
        return error_response(f'Invalid role: {role}', 400)

    db = get_session()
    try:
        users = UserService(db).list_by_role(user_role)
        return jsonify({
            'success': True,
            'users': [UserDTO.from_orm_model(u).model_dump(by_alias=True, mode='json') for u in users],
        })
    finally:
        db.close()


@user_bp.route('/count/<role>')
@admin_required
def count_by_role(role):
    user_role = _parse_role(role)
    if user_role is None:
        return error_response(f'Invalid role: {role}', 400)

    db = get_session()
    try:
        return jsonify({'success': True, 'count': UserService(db).count_by_role(user_role)})
    finally:
        db.close()


@user_bp.route('/<user_id>')
@admin_required
def user_detail(user_id):
    db = get_session()
    try:
        user = UserService(db).get_user_by_id(user_id)
        if not user:
            return error_response('User not found', 404)
        return jsonify({'success': True, 'user': UserDTO.from_orm_model(user).model_dump(by_alias=True, mode='json')})
    finally:
        db.close()


@user_bp.route('/<user_id>/toggle-status', methods=['POST'])
@admin_required
def toggle_user_status(user_id):
    """Enable / disable an account"""
    db = get_session()
    try:
        user = UserService(db).toggle_active(user_id=user_id)
        db.commit()
        status = 'enabled' if user.is_active else 'disabled'
        return jsonify({'success': True, 'message': f'User {status}', 'isActive': user.is_active})

    except KNOWN_ERRORS as e:
        db.rollback()
        return service_error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception(f'toggle status failed user={user_id}')
        return error_response(f'Operation failed: {str(e)}', 500)
    finally:
        db.close()
