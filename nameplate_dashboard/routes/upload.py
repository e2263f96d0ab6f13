# nameplate_dashboard/routes/upload.py
from flask import Blueprint, current_app, jsonify, request

from nameplate_dashboard.auth import login_required
from nameplate_dashboard.errors import StorageError
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.routes.common import error_response, service_error_response

upload_bp = Blueprint('upload', __name__, url_prefix='/api')
logger = get_logger(__name__)


@upload_bp.route('/upload', methods=['POST'])
@login_required
def upload_image():
    """
    Store a rendered nameplate PNG and return its public URL.

    Multipart form: ``file`` (required) and ``identifier`` (optional, used in
    the object key).
    """
    storage = current_app.extensions.get('object_storage')
    if storage is None:
        return error_response('Image storage is not configured', 503)

    if 'file' not in request.files:
        return error_response('No file uploaded', 400)

    file = request.files['file']
    data = file.read()
    if not data:
        return error_response('Uploaded file is empty', 400)

    identifier = (request.form.get('identifier') or file.filename or 'nameplate').strip()
    content_type = file.mimetype or 'image/png'

    try:
        url = storage.upload_image(data, identifier=identifier, content_type=content_type)
    except StorageError as e:
        return service_error_response(e)

    return jsonify({'success': True, 'url': url})
