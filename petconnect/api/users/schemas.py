# petconnect/api/users/schemas.py
from marshmallow import Schema, fields, validate

from petconnect.api.auth.schemas import username_field_validators


class UserUpdateSchema(Schema):
    """PUT /api/users/<id>. Only the supplied fields are overwritten."""
    username = fields.Str(validate=username_field_validators)
    email = fields.Email(error_messages={"invalid": "Please enter a valid email"})
    profile_pic = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True, validate=validate.Length(max=500))


class SavedPostSchema(Schema):
    post_id = fields.Str(required=True, validate=validate.Length(min=1))


class UserPublicResponseSchema(Schema):
    """What other users may see."""
    user_id = fields.Str()
    username = fields.Str()
    profile_pic = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)
    pets = fields.List(fields.Raw())
    created_at = fields.DateTime()


class UserResponseSchema(UserPublicResponseSchema):
    """
    Full user view. pets and saved_posts hold ids, or documents once populated.
    """
    email = fields.Email()
    saved_posts = fields.List(fields.Raw())
    updated_at = fields.DateTime()
