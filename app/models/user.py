from tortoise import fields

from .base import TimestampedModel


class User(TimestampedModel):
    """Document owner. Quota fields are recorded but not enforced."""

    email = fields.CharField(max_length=255, unique=True)
    full_name = fields.CharField(max_length=255, null=True)
    role = fields.CharField(max_length=50, default="user")
    storage_used_bytes = fields.BigIntField(default=0)
    storage_limit_bytes = fields.BigIntField(default=5 * 1024**3)

    class Meta:
        table = "users"
        table_description = "Users Table"
