# petconnect/api/chats/schemas.py
from marshmallow import Schema, fields, validate

from petconnect.api.messages.schemas import ParticipantSchema, MessageResponseSchema


class ChatCreateSchema(Schema):
    """POST /api/chats: the other participant of the conversation."""
    participant_id = fields.Str(required=True, validate=validate.Length(min=1))


class LastMessageSchema(Schema):
    message_id = fields.Str()
    sender_id = fields.Str()
    receiver_id = fields.Str()
    content = fields.Str()
    is_read = fields.Bool()
    created_at = fields.DateTime()


class ChatResponseSchema(Schema):
    chat_id = fields.Str()
    participants = fields.List(fields.Nested(ParticipantSchema))
    last_message = fields.Nested(LastMessageSchema, allow_none=True)
    # the caller's own counter
    unread_count = fields.Int()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ChatDetailResponseSchema(ChatResponseSchema):
    messages = fields.List(fields.Nested(MessageResponseSchema))
