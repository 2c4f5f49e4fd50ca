"""
A single typed, versioned configuration setting stored in the
`configurations` collection.

`value` is stored untyped; `type` decides how it is validated before every
write and how it is projected for readers (`formatted_value`).

Key behaviors:
- `validate_value(candidate)`: collects every violated rule, never stops at the first.
- `value` setter: validates on assignment and raises ValidationError.
- `formatted_value`: read-time projection by type, never mutates `value`.
- `to_document()` / `from_document()`: MongoDB persistence (camelCase fields).
- `to_json()`: API representation, with `lastModifiedBy` optionally populated.
"""

from __future__ import annotations

import json
import math
import re
from collections import namedtuple
from datetime import datetime, timezone
from typing import Any

from edumanage.errors import ValidationError

CONFIG_TYPES = ('string', 'number', 'boolean', 'array', 'object', 'json')

CATEGORIES = (
    'system',
    'course',
    'user',
    'assignment',
    'attendance',
    'notification',
    'email',
    'file_upload',
    'security',
    'ui',
    'analytics',
)

VALIDATION_FIELDS = ('min', 'max', 'pattern', 'options', 'required')

ValidationResult = namedtuple('ValidationResult', ['is_valid', 'errors'])

_CURRENT = object()


def to_bool(value: Any) -> bool | None:
    """Boolean coercion for request fields; None when the value is not boolean-like."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
        return value.strip().lower() == 'true'
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    return None


def normalize_validation(validation: dict | None) -> dict:
    """
    Keep only the known rule fields, cast to the shape the checks expect:
    numeric bounds, a string pattern and a list of string options.
    `required` defaults to True.
    """
    rules = {}
    for field, raw in (validation or {}).items():
        if field not in VALIDATION_FIELDS or raw is None or field == 'required':
            continue
        if field in ('min', 'max'):
            bound = to_number(raw)
            if bound is not None:
                rules[field] = bound
        elif field == 'pattern':
            rules[field] = str(raw)
        else:
            rules[field] = [str(o) for o in raw] if isinstance(raw, list) else [str(raw)]
    required = to_bool((validation or {}).get('required', True))
    rules['required'] = True if required is None else required
    return rules


def to_number(value: Any) -> float | None:
    """Numeric coercion; None when the value is not a finite number."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _fmt(bound):
    # 100.0 -> 100 in messages
    if isinstance(bound, float) and bound.is_integer():
        return int(bound)
    return bound


def display_name(category: str) -> str:
    name = category.replace('_', ' ')
    return name[:1].upper() + name[1:]


class ConfigurationEntry:

    def __init__(
        self,
        key: str,
        value: Any,
        type: str = 'string',
        category: str = 'system',
        description: str = '',
        is_public: bool = False,
        is_editable: bool = True,
        validation: dict | None = None,
        default_value: Any = None,
        last_modified_by=None,
        tags: list[str] | None = None,
        version: int = 1,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        id=None,
    ):
        self.id = id
        self.key = key
        self.type = type
        self.category = category
        self.description = description
        self.is_public = is_public
        self.is_editable = is_editable
        self.validation = normalize_validation(validation)
        self.default_value = default_value
        self.last_modified_by = last_modified_by
        self.tags = list(tags or [])
        self.version = version
        self.created_at = created_at
        self.updated_at = updated_at
        # stored values are loaded as-is; they are re-checked before every persist
        self._value = value

    # === value ===

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self.check_value(value)
        self._value = value

    def assign_trusted(self, value: Any) -> None:
        """Assign without validation (reset to the stored default)."""
        self._value = value

    def validate_value(self, value: Any) -> ValidationResult:
        rules = self.validation
        errors = []

        if rules.get('required') and (value is None or value == ''):
            errors.append('This field is required')

        if self.type == 'number':
            number = to_number(value)
            if number is None:
                errors.append('Value must be a valid number')
            else:
                if 'min' in rules and number < rules['min']:
                    errors.append(f"Value must be at least {_fmt(rules['min'])}")
                if 'max' in rules and number > rules['max']:
                    errors.append(f"Value must be at most {_fmt(rules['max'])}")

        elif self.type == 'string':
            text = '' if value is None else str(value)
            if 'min' in rules and len(text) < rules['min']:
                errors.append(f"Value must be at least {_fmt(rules['min'])} characters")
            if 'max' in rules and len(text) > rules['max']:
                errors.append(f"Value must be at most {_fmt(rules['max'])} characters")
            if rules.get('pattern'):
                try:
                    matched = re.fullmatch(rules['pattern'], text) is not None
                except re.error:
                    matched = False
                if not matched:
                    errors.append('Value does not match required pattern')

        elif self.type == 'array' and rules.get('options'):
            if not isinstance(value, list):
                errors.append('Value must be an array')
            else:
                invalid = [str(v) for v in value if v not in rules['options']]
                if invalid:
                    errors.append(f"Invalid options: {', '.join(invalid)}")

        return ValidationResult(not errors, errors)

    def check_value(self, value: Any = _CURRENT) -> None:
        result = self.validate_value(self._value if value is _CURRENT else value)
        if not result.is_valid:
            raise ValidationError(result.errors, f"Validation failed: {', '.join(result.errors)}")

    @property
    def formatted_value(self) -> Any:
        value = self._value
        if self.type == 'json':
            if isinstance(value, str):
                try:
                    return json.loads(value)
                except ValueError:
                    return value
            return value
        if self.type == 'array':
            return value if isinstance(value, list) else []
        if self.type == 'number':
            number = to_number(value)
            if number is not None and number.is_integer() and not isinstance(value, float):
                return int(number)
            return number
        if self.type == 'boolean':
            return bool(value)
        if value is None:
            return ''
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return str(value)

    def touch(self, modifier_id) -> None:
        """Stamp a successful mutation: modifier, version bump, timestamp."""
        self.last_modified_by = modifier_id
        self.version += 1
        self.updated_at = datetime.now(timezone.utc)

    # === persistence ===

    def to_document(self) -> dict:
        doc = {
            "key": self.key,
            "value": self._value,
            "type": self.type,
            "category": self.category,
            "description": self.description,
            "isPublic": self.is_public,
            "isEditable": self.is_editable,
            "validation": self.validation,
            "defaultValue": self.default_value,
            "lastModifiedBy": self.last_modified_by,
            "tags": self.tags,
            "version": self.version,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> ConfigurationEntry:
        return cls(
            id=doc.get("_id"),
            key=doc["key"],
            value=doc.get("value"),
            type=doc.get("type", 'string'),
            category=doc.get("category", 'system'),
            description=doc.get("description", ''),
            is_public=doc.get("isPublic", False),
            is_editable=doc.get("isEditable", True),
            validation=doc.get("validation"),
            default_value=doc.get("defaultValue"),
            last_modified_by=doc.get("lastModifiedBy"),
            tags=doc.get("tags"),
            version=doc.get("version", 1),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    def to_json(self, modifier: dict | None = None) -> dict:
        data = self.to_document()
        data["_id"] = str(self.id) if self.id is not None else None
        data["formattedValue"] = self.formatted_value
        if modifier is not None:
            data["lastModifiedBy"] = modifier
        elif self.last_modified_by is not None:
            data["lastModifiedBy"] = str(self.last_modified_by)
        for field in ("createdAt", "updatedAt"):
            if isinstance(data[field], datetime):
                data[field] = data[field].isoformat()
        return data

    def __str__(self) -> str:
        return f"CONFIGURATION: key: {self.key}, type: {self.type}, version: {self.version}"
