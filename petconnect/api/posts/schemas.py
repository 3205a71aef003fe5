# petconnect/api/posts/schemas.py
from marshmallow import Schema, fields, validate, pre_load

from petconnect.models.post import MediaType

MEDIA_TYPES = [m.value for m in MediaType]

# --- nested ---

class CommentUserSchema(Schema):
    """Comment author, resolved from the users collection on every read."""
    user_id = fields.Str()
    username = fields.Str(allow_none=True)
    profile_pic = fields.Str(allow_none=True)

class PopulatedCommentSchema(Schema):
    comment_id = fields.Str()
    post_id = fields.Str()
    user_id = fields.Str()
    user = fields.Nested(CommentUserSchema, allow_none=True)
    content = fields.Str()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

class PostPetSchema(Schema):
    pet_id = fields.Str()
    name = fields.Str()
    species = fields.Str()
    breed = fields.Str(allow_none=True)
    image = fields.Str(allow_none=True)

# --- requests ---

class PostCreateSchema(Schema):
    """POST /api/posts"""
    caption = fields.Str(required=True, validate=validate.Length(max=2200))
    media = fields.Str(allow_none=True)
    media_type = fields.Str(load_default=MediaType.IMAGE.value, validate=validate.OneOf(MEDIA_TYPES))
    pet_id = fields.Str(allow_none=True)
    tags = fields.List(fields.Str(), load_default=list)

class PostUpdateSchema(Schema):
    """PUT /api/posts/<post_id>; supplied fields are overwritten."""
    caption = fields.Str(validate=validate.Length(max=2200))
    media = fields.Str(allow_none=True)
    media_type = fields.Str(validate=validate.OneOf(MEDIA_TYPES))
    tags = fields.List(fields.Str())

class CommentContentSchema(Schema):
    """Comment text is trimmed before the length check."""
    content = fields.Str(required=True, validate=validate.Length(min=1, max=1000))

    @pre_load
    def strip_content(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('content'), str):
            data = dict(data, content=data['content'].strip())
        return data

# --- responses ---

class PostResponseSchema(Schema):
    post_id = fields.Str()
    user_id = fields.Str()
    username = fields.Str()
    profile_pic = fields.Str(allow_none=True)
    pet_id = fields.Str(allow_none=True)
    pet_name = fields.Str(allow_none=True)
    media = fields.Str(allow_none=True)
    media_type = fields.Str()
    caption = fields.Str()
    tags = fields.List(fields.Str())
    likes = fields.List(fields.Str())
    comments = fields.List(fields.Str())
    comments_count = fields.Int()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    is_liked = fields.Bool(dump_default=False)

class PostDetailResponseSchema(PostResponseSchema):
    """Single post: comments are populated, the pet is embedded."""
    comments = fields.List(fields.Nested(PopulatedCommentSchema))
    pet = fields.Nested(PostPetSchema, allow_none=True)
