from tortoise import fields

from ...common.models import TimestampMixin


class KeyValueEntry(TimestampMixin):
    """A named mapping, the persistent side of the credential store."""
    id = fields.IntField(primary_key=True)
    key = fields.CharField(max_length=100, unique=True, db_index=True)
    value = fields.JSONField(default=dict)

    def __str__(self):
        return self.key

    class Meta:
        table = "key_value_entries"
