# petconnect/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import PetCreateSchema, PetUpdateSchema, PetPostRefSchema, PetResponseSchema

pets_bp = Blueprint('pets_bp', __name__)


@pets_bp.route('/', methods=['GET'])
@jwt_required()
def list_pets():
    """All pets, or one owner's pets with ?user_id=."""
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.list_pets(request.args.get('user_id'))
        return jsonify(PetResponseSchema(many=True).dump(pets)), 200
    except Exception as e:
        logging.error(f"pet list failed: {e}", exc_info=True)
        return jsonify({"error_code": "PET_LIST_FAILED", "message": "Failed to fetch pets"}), 500


@pets_bp.route('/<string:pet_id>', methods=['GET'])
@jwt_required()
def get_pet(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.get_pet_populated(pet_id)
        if not pet:
            return jsonify({"error_code": "PET_NOT_FOUND", "message": "Pet not found"}), 404
        return jsonify(PetResponseSchema().dump(pet)), 200
    except Exception as e:
        logging.error(f"pet fetch failed (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PET_FETCH_FAILED", "message": "Failed to fetch pet"}), 500


@pets_bp.route('/', methods=['POST'])
@jwt_required()
def create_pet():
    pet_service = current_app.services['pets']
    user_id = get_jwt_identity()
    try:
        data = PetCreateSchema().load(request.get_json() or {})
        pet = pet_service.create_pet(user_id, data)
        return jsonify(PetResponseSchema().dump(pet)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"pet creation failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PET_CREATION_FAILED", "message": "Failed to create pet"}), 500


@pets_bp.route('/<string:pet_id>', methods=['PUT'])
@jwt_required()
def update_pet(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        data = PetUpdateSchema().load(request.get_json() or {})
        pet = pet_service.update_pet(pet_id, get_jwt_identity(), data)
        return jsonify(PetResponseSchema().dump(pet)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"pet update failed (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PET_UPDATE_FAILED", "message": "Failed to update pet"}), 500


@pets_bp.route('/<string:pet_id>', methods=['DELETE'])
@jwt_required()
def delete_pet(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        pet_service.delete_pet(pet_id, get_jwt_identity())
        return jsonify({"message": "Pet deleted successfully"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"pet deletion failed (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PET_DELETE_FAILED", "message": "Failed to delete pet"}), 500


@pets_bp.route('/<string:pet_id>/posts', methods=['POST'])
@jwt_required()
def add_pet_post(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        data = PetPostRefSchema().load(request.get_json() or {})
        pet = pet_service.add_post(pet_id, get_jwt_identity(), data['post_id'])
        return jsonify(PetResponseSchema().dump(pet)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"pet post link failed (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PET_UPDATE_FAILED", "message": "Failed to update pet"}), 500


@pets_bp.route('/<string:pet_id>/posts/<string:post_id>', methods=['DELETE'])
@jwt_required()
def remove_pet_post(pet_id: str, post_id: str):
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.remove_post(pet_id, get_jwt_identity(), post_id)
        return jsonify(PetResponseSchema().dump(pet)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"pet post unlink failed (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PET_UPDATE_FAILED", "message": "Failed to update pet"}), 500
