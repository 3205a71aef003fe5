# petconnect/api/comments/schemas.py
from marshmallow import fields, validate

from petconnect.api.posts.schemas import CommentContentSchema, PopulatedCommentSchema


class CommentCreateSchema(CommentContentSchema):
    """POST /api/comments"""
    post_id = fields.Str(required=True, validate=validate.Length(min=1))


CommentUpdateSchema = CommentContentSchema

CommentResponseSchema = PopulatedCommentSchema
