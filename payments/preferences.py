"""
Typed, defaulted preferences for payment methods.

Each payment method variant declares the preferences it accepts. Values are
stored in the payment method's JSON column and coerced to their declared type
on the way in and on the way out.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional

from django.core.exceptions import ValidationError


PREFERENCE_TYPES = ('string', 'text', 'password', 'boolean', 'integer', 'decimal', 'array', 'hash')

FALSE_VALUES = re.compile(r'\A(f|false|0|off|no)?\Z', re.IGNORECASE)


@dataclass(frozen=True)
class Preference:
    """A single preference declaration: name, type and default value"""
    name: str
    type: str = 'string'
    default: Any = None

    def __post_init__(self):
        if self.type not in PREFERENCE_TYPES:
            raise ValueError(f"Unknown preference type: {self.type}")

    def convert(self, value):
        """
        Coerce a raw value to this preference's type.

        None always means "unset" and is kept as is.

        Raises:
            ValidationError: If the value cannot be coerced
        """
        if value is None:
            return None

        try:
            if self.type in ('string', 'text', 'password'):
                return str(value)
            if self.type == 'boolean':
                if isinstance(value, str):
                    return not FALSE_VALUES.match(value.strip())
                return bool(value)
            if self.type == 'integer':
                if isinstance(value, bool):
                    raise TypeError
                return int(value)
            if self.type == 'decimal':
                return Decimal(str(value))
            if self.type == 'array':
                if isinstance(value, (str, bytes, dict)):
                    raise TypeError
                return list(value)
            if self.type == 'hash':
                return dict(value)
        except (TypeError, ValueError, InvalidOperation):
            raise ValidationError(
                {'preferences': f"Invalid value for {self.type} preference '{self.name}': {value!r}"}
            )

    def serialize(self, value):
        """JSON-safe form of a converted value"""
        if isinstance(value, Decimal):
            return str(value)
        return value


class PreferenceStore:
    """
    Key-value view over a preference blob, restricted to declared keys.

    Reads fall back to declared defaults; writes to undeclared keys are
    rejected.
    """

    def __init__(self, declarations: Iterable[Preference], values: Optional[Dict[str, Any]] = None):
        self.declarations = {pref.name: pref for pref in declarations}
        self.values = values if values is not None else {}

    def __contains__(self, name):
        return name in self.declarations

    def declaration(self, name) -> Preference:
        try:
            return self.declarations[name]
        except KeyError:
            raise ValidationError({'preferences': f"Unknown preference: {name}"})

    def get(self, name):
        pref = self.declaration(name)
        if name in self.values:
            return pref.convert(self.values[name])
        return pref.default

    def set(self, name, value):
        pref = self.declaration(name)
        self.values[name] = pref.serialize(pref.convert(value))

    def update(self, values: Dict[str, Any]):
        for name, value in values.items():
            self.set(name, value)

    def normalized(self) -> Dict[str, Any]:
        """Stored values coerced to their declared types, JSON-safe"""
        return {name: self.declarations[name].serialize(self.get(name)) for name in self.values}

    def defaults(self) -> Dict[str, Any]:
        return {name: pref.serialize(pref.default) for name, pref in self.declarations.items()}

    def validate(self):
        """
        Check the stored blob against the declarations.

        Raises:
            ValidationError: On unknown keys or uncoercible values
        """
        if not isinstance(self.values, dict):
            raise ValidationError({'preferences': "Preferences must be a mapping"})

        unknown = sorted(set(self.values) - set(self.declarations))
        if unknown:
            raise ValidationError({'preferences': f"Unknown preferences: {', '.join(unknown)}"})

        for name, value in self.values.items():
            self.declarations[name].convert(value)

    def to_dict(self) -> Dict[str, Any]:
        """All declared preferences with their current (or default) values"""
        return {name: self.get(name) for name in self.declarations}
