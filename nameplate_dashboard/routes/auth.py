# nameplate_dashboard/routes/auth.py
from flask import Blueprint, jsonify, redirect, request

from nameplate_dashboard.auth import (
    clear_token_cookie,
    create_token,
    current_identity,
    home_path,
    login_required,
    set_token_cookie,
)
from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import KNOWN_ERRORS, error_response, service_error_response
from nameplate_dashboard.schemas.user_dto import UserDTO
from nameplate_dashboard.services.notification_service import NotificationService
from nameplate_dashboard.services.user_service import UserService

auth_bp = Blueprint('auth', __name__, url_prefix='')
logger = get_logger(__name__)


@auth_bp.route('/')
def index():
    """Redirect to the caller's home page, or to login"""
    identity = current_identity()
    if identity:
        return redirect(home_path(identity))
    return redirect('/login')


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    """Log in and set the session cookie"""
    body = request.get_json(silent=True) or {}
    email = (body.get('email') or '').strip()
    password = body.get('password') or ''

    if not email or not password:
        return error_response('Email and password are required', 400)

    db = get_session()
    try:
        user_service = UserService(db)
        user = user_service.authenticate(email=email, password=password)
        db.commit()

        token = create_token(user)
        user_payload = UserDTO.from_orm_model(user).model_dump(by_alias=True, mode='json')
        response = jsonify({
            'success': True,
            'message': 'Login successful',
            'user': user_payload,
            'redirect': home_path({
                'role': user.role.value,
                'rmo': user.rmo,
                'officerNumber': user.officer_number,
            }),
            'token': token,
        })
        return set_token_cookie(response, token)

    except PermissionError as e:
        db.rollback()
        return error_response(str(e), 401)
    except KNOWN_ERRORS as e:
        db.rollback()
        return service_error_response(e)
    except Exception:
        db.rollback()
        logger.exception('login failed')
        return error_response('Internal server error. Please try again later.', 500)
    finally:
        db.close()


@auth_bp.route('/api/auth/logout', methods=['POST'])
def logout():
    """Clear the session cookie"""
    response = jsonify({'success': True, 'message': 'Logged out'})
    return clear_token_cookie(response)


@auth_bp.route('/api/auth/me')
@login_required
def me():
    """Current account, without password hash"""
    identity = current_identity()
    db = get_session()
    try:
        user = UserService(db).get_user_by_id(identity['id'])
        if not user:
            return error_response('User not found', 404)
        return jsonify({
            'success': True,
            'user': UserDTO.from_orm_model(user).model_dump(by_alias=True, mode='json'),
        })
    finally:
        db.close()


@auth_bp.route('/api/auth/register', methods=['POST'])
def register():
    """Register an account; officers get a generated officer number"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error_response('Request body must be a JSON object', 400)

    role_value = (body.get('role') or UserRole.officer.value).strip().lower()
    try:
        role = UserRole(role_value)
    except ValueError:
        return error_response(f'Invalid role: {role_value}', 400)

    # only an admin may create admin or RMO accounts
    if role != UserRole.officer:
        identity = current_identity()
        if not identity or identity.get('role') != UserRole.admin.value:
            return error_response('Insufficient permissions', 403)

    db = get_session()
    try:
        user_service = UserService(db)
        user = user_service.register_user(
            officer_name=body.get('officerName') or '',
            email=body.get('email') or '',
            password=body.get('password') or '',
            mobile_number=str(body.get('mobileNumber') or ''),
            rmo=body.get('rmo'),
            role=role,
            designation=body.get('designation'),
            area=body.get('area'),
            delivery_office=body.get('deliveryOffice'),
            address=body.get('address'),
        )
        NotificationService(db).notify(
            message=f"New {role.value} registered: {user.officer_name} ({user.officer_number or user.rmo or user.email})",
            user_id=user.id,
        )
        db.commit()
        return jsonify({
            'success': True,
            'user': UserDTO.from_orm_model(user).model_dump(by_alias=True, mode='json'),
        }), 201

    except KNOWN_ERRORS as e:
        db.rollback()
        return service_error_response(e)
    except Exception as e:
        db.rollback()
        logger.exception('registration failed')
        return error_response(f'Registration failed: {str(e)}', 500)
    finally:
        db.close()
