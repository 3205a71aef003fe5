# petconnect/api/auth/schemas.py
import re
from marshmallow import Schema, fields, validate, validates, validates_schema, ValidationError

USERNAME_PATTERN = r'^[a-zA-Z0-9._]+$'

username_field_validators = [
    validate.Length(min=3, max=30, error="Username must be between 3 and 30 characters"),
    validate.Regexp(USERNAME_PATTERN, error="Username can only contain letters, numbers, periods and underscores")
]


class SignupSchema(Schema):
    """Validates the body of POST /api/auth/signup."""
    username = fields.Str(required=True, validate=username_field_validators)
    email = fields.Email(required=True, error_messages={"invalid": "Please enter a valid email"})
    password = fields.Str(required=True, load_only=True)
    confirm_password = fields.Str(required=True, load_only=True)

    @validates('password')
    def validate_password(self, value, **kwargs):
        if len(value) < 6:
            raise ValidationError("Password must be at least 6 characters")
        if not (re.search(r'[a-z]', value) and re.search(r'[A-Z]', value) and re.search(r'\d', value)):
            raise ValidationError("Password must contain at least one uppercase letter, one lowercase letter, and one number")

    @validates_schema
    def validate_confirmation(self, data, **kwargs):
        if data.get('password') != data.get('confirm_password'):
            raise ValidationError("Passwords must match", field_name='confirm_password')


class LoginSchema(Schema):
    """identifier is an email or a username."""
    identifier = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))


class AuthUserSchema(Schema):
    """User as returned with a token. The password hash is never dumped."""
    user_id = fields.Str()
    username = fields.Str()
    email = fields.Email()
    profile_pic = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)
    saved_posts = fields.List(fields.Str())
    pets = fields.List(fields.Str())
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
