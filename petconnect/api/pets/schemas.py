# petconnect/api/pets/schemas.py
from marshmallow import Schema, fields, validate


class PetCreateSchema(Schema):
    """POST /api/pets"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    species = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=100))
    age = fields.Int(allow_none=True, validate=validate.Range(min=0))
    image = fields.Str(allow_none=True)


class PetUpdateSchema(Schema):
    """PUT /api/pets/<pet_id>. Every field is optional; supplied ones are overwritten."""
    name = fields.Str(validate=validate.Length(min=1, max=50))
    species = fields.Str(validate=validate.Length(min=1, max=50))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=100))
    age = fields.Int(allow_none=True, validate=validate.Range(min=0))
    image = fields.Str(allow_none=True)


class PetPostRefSchema(Schema):
    post_id = fields.Str(required=True, validate=validate.Length(min=1))


class OwnerSchema(Schema):
    user_id = fields.Str()
    username = fields.Str()
    profile_pic = fields.Str(allow_none=True)


class PetResponseSchema(Schema):
    pet_id = fields.Str()
    user_id = fields.Str()
    name = fields.Str()
    species = fields.Str()
    breed = fields.Str(allow_none=True)
    age = fields.Int(allow_none=True)
    image = fields.Str(allow_none=True)
    # post ids, or post documents when populated
    posts = fields.List(fields.Raw())
    owner = fields.Nested(OwnerSchema, allow_none=True)
    created_at = fields.DateTime()
