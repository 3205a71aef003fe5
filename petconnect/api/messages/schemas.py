# petconnect/api/messages/schemas.py
from marshmallow import Schema, fields, validate, pre_load

from petconnect.models.message import MAX_MESSAGE_LENGTH


class MessageContentSchema(Schema):
    """Message text is trimmed before the length check."""
    content = fields.Str(required=True, validate=validate.Length(
        min=1, max=MAX_MESSAGE_LENGTH,
        error=f"Message content must be between 1 and {MAX_MESSAGE_LENGTH} characters"))

    @pre_load
    def strip_content(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('content'), str):
            data = dict(data, content=data['content'].strip())
        return data


class MessageSendSchema(MessageContentSchema):
    """POST /api/messages/send"""
    receiver_id = fields.Str(required=True, validate=validate.Length(min=1))


class MarkReadSchema(Schema):
    sender_id = fields.Str(required=True, validate=validate.Length(min=1))


class ParticipantSchema(Schema):
    user_id = fields.Str()
    username = fields.Str(allow_none=True)
    profile_pic = fields.Str(allow_none=True)


class MessageResponseSchema(Schema):
    message_id = fields.Str()
    chat_id = fields.Str()
    sender_id = fields.Str()
    receiver_id = fields.Str()
    content = fields.Str()
    is_read = fields.Bool()
    is_deleted = fields.Bool()
    created_at = fields.DateTime()


class ConversationSchema(Schema):
    """One entry per person the user has exchanged messages with."""
    chat_id = fields.Str()
    participant = fields.Nested(ParticipantSchema, allow_none=True)
    last_message = fields.Nested(MessageResponseSchema, allow_none=True)
    unread_count = fields.Int()


class PaginationSchema(Schema):
    current_page = fields.Int()
    total_pages = fields.Int()
    total_messages = fields.Int()


class ThreadResponseSchema(Schema):
    messages = fields.List(fields.Nested(MessageResponseSchema))
    pagination = fields.Nested(PaginationSchema)
