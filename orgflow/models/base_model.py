import logging
from uuid import uuid4, UUID
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from dateutil.parser import isoparse
from typing import Any, Dict, List, Union, get_type_hints, get_origin, get_args
from enum import Enum

logger = logging.getLogger(__name__)


def default_datetime():
    """
    Definition for default datetime
    """
    return datetime.now(timezone.utc)


def get_uuid_hex(_int=None):
    """
    Returns UUID in hex format. If _int is passed, it creates UUID with int base.
    """
    return uuid4().hex if _int is None else UUID(int=_int, version=4).hex


class ModelValidationError(Exception):
    """
    Exception raised when one or more validation errors occur in the model.

    Attributes:
        errors (list): A list of error messages returned from validation methods.
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        elif not isinstance(errors, list):
            raise ValueError("Errors should be a string or a list of strings")
        self.errors = errors
        super().__init__(self.format_errors())

    def format_errors(self):
        return "\n".join(self.errors)

    def __str__(self):
        return self.format_errors()


@dataclass(kw_only=True)
class BaseModel:
    """A base class for stored entities with an id and change timestamps."""

    entity_id: str = field(default_factory=get_uuid_hex,
                           metadata={'field_type': 'entity_id'})
    created_on: datetime = field(default_factory=default_datetime)
    changed_on: datetime = field(default_factory=default_datetime)

    @classmethod
    def table_name(cls) -> str:
        """Storage table for this model. Subclasses set ``__table__``."""
        return getattr(cls, '__table__')

    @classmethod
    def fields(cls) -> List[str]:
        """
        Get a list of field names for this model.

        Returns:
            List[str]: A list of field names.
        """
        return [f.name for f in fields(cls)]

    def _convert_value_for_dict(self, v, convert_datetime_to_iso_string: bool):
        if convert_datetime_to_iso_string and isinstance(v, datetime):
            return v.isoformat()
        if isinstance(v, UUID):
            return v.hex
        if isinstance(v, Enum):
            return v.value
        return v

    def as_dict(self, convert_datetime_to_iso_string: bool = False) -> Dict[str, Any]:
        """
        Convert this model to a dictionary.

        Args:
            convert_datetime_to_iso_string (bool, optional): Whether to convert datetime to ISO strings.

        Returns:
            Dict[str, Any]: A dictionary representation of this model.
        """
        return {
            name: self._convert_value_for_dict(getattr(self, name), convert_datetime_to_iso_string)
            for name in self.fields()
        }

    @classmethod
    def _convert_uuid_field(cls, v) -> Any:
        if not v:
            return v
        if isinstance(v, UUID):
            return v.hex
        try:
            return UUID(str(v)).hex
        except ValueError:
            logger.info("'%s' is not a valid UUID.", v)
            return v

    @classmethod
    def _try_convert(cls, v: str, expected_type) -> Any:
        if isinstance(expected_type, type) and issubclass(expected_type, Enum):
            try:
                return expected_type(v)
            except ValueError:
                return v
        if expected_type is datetime:
            try:
                return isoparse(v)
            except (ValueError, TypeError):
                return v
        return v

    @classmethod
    def _convert_string_value(cls, v, expected_type) -> Any:
        """Convert string values to enum or datetime types."""
        if not isinstance(v, str):
            return v
        if get_origin(expected_type) is Union:
            for arg in get_args(expected_type):
                if arg is type(None):
                    continue
                converted = cls._try_convert(v, arg)
                if converted is not v:
                    return converted
            return v
        return cls._try_convert(v, expected_type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """
        Load a model from a dict, ignoring keys that are not model fields.
        """
        model_fields = cls.fields()
        hints = get_type_hints(cls)
        clean_data = {}
        for k, v in data.items():
            if k not in model_fields:
                continue
            f = next(f for f in fields(cls) if f.name == k)
            if f.metadata.get('field_type') in ('entity_id', 'uuid'):
                clean_data[k] = cls._convert_uuid_field(v)
            elif v is not None and hints.get(k):
                clean_data[k] = cls._convert_string_value(v, hints[k])
            else:
                clean_data[k] = v
        return cls(**clean_data)

    def validate(self):
        """
        Call every ``validate_<field_name>`` method defined on the model and
        raise ``ModelValidationError`` with the collected messages.
        """
        errors = []
        for name in self.fields():
            validator = getattr(self, f"validate_{name}", None)
            if callable(validator):
                error = validator()
                if error:
                    errors.append(error)

        if errors:
            raise ModelValidationError(errors)

    def prepare_for_save(self):
        """
        Prepare this model for saving to the database.
        """
        if not self.entity_id:
            self.entity_id = get_uuid_hex()
        self.changed_on = default_datetime()
        self.validate()
