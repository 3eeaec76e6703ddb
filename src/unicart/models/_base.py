"""Base model for UniCart payloads and state records.

Every model inherits from :class:`UnicartBaseModel` which provides:

* ``alias_generator=to_camel`` so the backend's camelCase keys map
  automatically to snake_case fields, and ``by_alias`` dumps reproduce
  the storage layout the web client used.
* A ``model_validator(mode="before")`` that drops ``None`` and blank
  strings so the field default is used.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class UnicartBaseModel(BaseModel):
    """Base for UniCart models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * ``None`` / blank-string values → dropped so the default applies
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {
            key: value
            for key, value in values.items()
            if value is not None and not (isinstance(value, str) and not value.strip())
        }
