# petconnect/api/assistant/schemas.py
from marshmallow import Schema, fields, validate


class ChatTurnSchema(Schema):
    role = fields.Str(required=True, validate=validate.OneOf(['user', 'assistant']))
    content = fields.Str(required=True)


class AssistantChatSchema(Schema):
    """POST /api/ai/chat"""
    message = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    history = fields.List(fields.Nested(ChatTurnSchema), load_default=list)


class PreferencesSchema(Schema):
    lifestyle = fields.Str(load_default='')
    experience = fields.Str(load_default='')
    home_type = fields.Str(load_default='')
    allergies = fields.Bool(load_default=False)


class RecommendationsSchema(Schema):
    preferences = fields.Nested(PreferencesSchema, required=True)


class BreedInfoQuerySchema(Schema):
    breed = fields.Str(required=True, validate=validate.Length(min=1))
    animal = fields.Str(required=True, validate=validate.Length(min=1))


class CareTipsQuerySchema(Schema):
    animal = fields.Str(required=True, validate=validate.Length(min=1))
    age = fields.Str(load_default=None)
    query = fields.Str(load_default=None)
