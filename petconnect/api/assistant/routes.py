# petconnect/api/assistant/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from petconnect.api.assistant.schemas import (
    AssistantChatSchema, RecommendationsSchema, BreedInfoQuerySchema, CareTipsQuerySchema
)

assistant_bp = Blueprint('assistant_bp', __name__)


@assistant_bp.route('/chat', methods=['POST'])
@jwt_required()
def chat():
    """
    Pet assistant. Answers with {"message", "source"}; source is "fallback"
    when the canned responses were used.
    """
    openai_service = current_app.services['openai']
    try:
        data = AssistantChatSchema().load(request.get_json() or {})
        return jsonify(openai_service.chat(data['message'], data['history'])), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"assistant chat failed: {e}", exc_info=True)
        return jsonify({"error_code": "ASSISTANT_FAILED", "message": "The assistant is unavailable"}), 500


@assistant_bp.route('/recommendations', methods=['POST'])
@jwt_required()
def recommendations():
    openai_service = current_app.services['openai']
    try:
        data = RecommendationsSchema().load(request.get_json() or {})
        answer = openai_service.get_recommendations(data['preferences'])
        return jsonify({"recommendations": answer['message'], "source": answer['source']}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"assistant recommendations failed: {e}", exc_info=True)
        return jsonify({"error_code": "ASSISTANT_FAILED", "message": "Failed to get pet recommendations"}), 500


@assistant_bp.route('/breed-info', methods=['GET'])
@jwt_required()
def breed_info():
    openai_service = current_app.services['openai']
    try:
        params = BreedInfoQuerySchema().load(request.args.to_dict())
        answer = openai_service.get_breed_info(params['breed'], params['animal'])
        return jsonify({"information": answer['message'], "source": answer['source']}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"assistant breed info failed: {e}", exc_info=True)
        return jsonify({"error_code": "ASSISTANT_FAILED", "message": "Failed to get breed information"}), 500


@assistant_bp.route('/pet-care', methods=['GET'])
@jwt_required()
def pet_care_tips():
    openai_service = current_app.services['openai']
    try:
        params = CareTipsQuerySchema().load(request.args.to_dict())
        answer = openai_service.get_care_tips(params['animal'], params['age'], params['query'])
        return jsonify({"tips": answer['message'], "source": answer['source']}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"assistant care tips failed: {e}", exc_info=True)
        return jsonify({"error_code": "ASSISTANT_FAILED", "message": "Failed to get pet care tips"}), 500
