"""Base schemas with common configuration."""
from pydantic import BaseModel, ConfigDict, model_serializer
from datetime import datetime

from pitchside.utils.datetime_helpers import serialize_datetime_utc


class BaseSchema(BaseModel):
    """Base schema with common configuration for all API payloads.

    Field names are snake_case; the wire names used by the site's frontend
    (``vipMessage``, ``statsData``...) are declared as aliases.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )

    @model_serializer(mode="wrap")
    def serialize_model(self, handler):
        """Serialize model values with custom datetime handling."""

        def _convert(value):
            if isinstance(value, datetime):
                return serialize_datetime_utc(value)
            if isinstance(value, list):
                return [_convert(item) for item in value]
            if isinstance(value, dict):
                return {key: _convert(item) for key, item in value.items()}
            return value

        data = handler(self)
        return {key: _convert(value) for key, value in data.items()}


class SuccessResponse(BaseSchema):
    success: bool = True


class ErrorResponse(BaseSchema):
    error: str
