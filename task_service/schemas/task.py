"""Task-related Marshmallow schemas."""

from datetime import datetime, timezone

from marshmallow import EXCLUDE, Schema, fields, validate

from task_service.extensions import ma


class UTCDateTime(fields.DateTime):
    """DateTime that treats naive values as UTC, so dumps always carry an offset."""

    def _serialize(self, value: datetime | None, attr, obj, **kwargs):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return super()._serialize(value, attr, obj, **kwargs)


class TaskSchema(ma.Schema):
    """Schema for task serialization."""

    id = fields.Str(dump_only=True)
    title = fields.Str()
    description = fields.Str()
    due_date = fields.Str()
    status = fields.Str()
    created_at = UTCDateTime(dump_only=True, format="iso")
    updated_at = UTCDateTime(dump_only=True, format="iso")


class TaskCreateSchema(Schema):
    """Schema for task creation validation.

    Server-assigned fields sent by the client (id, timestamps) are ignored.
    """

    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str()
    due_date = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    status = fields.Str(validate=validate.Length(max=64))


class TaskUpdateSchema(TaskCreateSchema):
    """Schema for full task update validation."""


class TaskStatusSchema(Schema):
    """Schema for status-only update validation."""

    class Meta:
        unknown = EXCLUDE

    status = fields.Str(required=True, validate=validate.Length(max=64))
