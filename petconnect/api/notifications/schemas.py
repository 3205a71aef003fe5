# petconnect/api/notifications/schemas.py
from marshmallow import Schema, fields


class NotificationResponseSchema(Schema):
    notification_id = fields.Str()
    user_id = fields.Str()
    type = fields.Str()
    sender_id = fields.Str()
    sender_username = fields.Str(allow_none=True)
    sender_profile_pic = fields.Str(allow_none=True)
    post_id = fields.Str()
    post_image = fields.Str(allow_none=True)
    comment_id = fields.Str(allow_none=True)
    content = fields.Str(allow_none=True)
    read = fields.Bool()
    created_at = fields.DateTime()
