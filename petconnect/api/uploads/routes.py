# petconnect/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import Schema, fields, validate, ValidationError

from petconnect.services.storage_service import StorageNotConfiguredError

uploads_bp = Blueprint('uploads_bp', __name__)


class UploadUrlSchema(Schema):
    upload_type = fields.Str(required=True)
    filename = fields.Str(required=True, validate=validate.Length(min=1))
    content_type = fields.Str(required=True, validate=validate.Length(min=1))


class FilePathSchema(Schema):
    file_path = fields.Str(required=True, error_messages={"required": "file_path is required"})


@uploads_bp.route('/url', methods=['POST'])
@jwt_required()
def get_upload_url():
    """
    Issues a pre-signed PUT URL. The client uploads the file directly to storage,
    then calls /finalize with the returned file_path.
    """
    user_id = get_jwt_identity()
    storage_service = current_app.services['storage']
    try:
        data = UploadUrlSchema().load(request.get_json() or {})
        url_info = storage_service.generate_upload_url(
            user_id, data['upload_type'], data['filename'], data['content_type'])
        return jsonify(url_info), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except StorageNotConfiguredError as e:
        return jsonify({"error_code": "STORAGE_UNAVAILABLE", "message": str(e)}), 503
    except ValueError as e:
        logging.warning(f"upload url rejected: {e}")
        return jsonify({"error_code": "INVALID_UPLOAD_TYPE", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"upload url generation failed: {e}", exc_info=True)
        return jsonify({"error_code": "URL_GENERATION_FAILED", "message": "Failed to create upload URL"}), 500


@uploads_bp.route('/finalize', methods=['POST'])
@jwt_required()
def finalize_upload():
    """Publishes an uploaded file and returns its public URL."""
    storage_service = current_app.services['storage']
    try:
        data = FilePathSchema().load(request.get_json() or {})
        public_url = storage_service.make_public_and_get_url(data['file_path'])
        return jsonify({"public_url": public_url}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except StorageNotConfiguredError as e:
        return jsonify({"error_code": "STORAGE_UNAVAILABLE", "message": str(e)}), 503
    except FileNotFoundError as e:
        return jsonify({"error_code": "FILE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"upload finalize failed: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "Failed to process the file"}), 500
