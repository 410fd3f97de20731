from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Incoming form and JSON payloads; text fields arrive trimmed"""

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)
