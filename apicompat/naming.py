"""Casing conventions used by the naming rules."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NamingConventions:
    """Compiled casing patterns, built once and shared by every rule."""
    snake: re.Pattern = re.compile(r'^[a-z][a-z\d]*(?:_[a-z\d]+)*$')
    camel: re.Pattern = re.compile(r'^[a-z][a-z\d]*(?:[A-Z](?![A-Z])[a-z\d]*)*$')
    pascal: re.Pattern = re.compile(r'^(?:[A-Z](?![A-Z])[a-z\d]*)+$')
    kebab: re.Pattern = re.compile(r'^[a-z\d]+(?:-[a-z\d]+)*$')
    dot: re.Pattern = re.compile(r'^[a-z\d]+(?:\.[a-z\d]+)*$')
    operation_id_prefix: re.Pattern = re.compile(r'^(get|create|list|update|delete)[A-Z]+.*')

    def is_snake_case(self, name: str) -> bool:
        return isinstance(name, str) and bool(self.snake.match(name))

    def is_camel_case(self, name: str) -> bool:
        return isinstance(name, str) and bool(self.camel.match(name))

    def is_pascal_case(self, name: str) -> bool:
        return isinstance(name, str) and bool(self.pascal.match(name))

    def is_kebab_case(self, name: str) -> bool:
        return isinstance(name, str) and bool(self.kebab.match(name))

    def is_dot_case(self, name: str) -> bool:
        return isinstance(name, str) and bool(self.dot.match(name))

    def is_valid_dotted_name(self, name: str) -> bool:
        """Dot-separated snake case segments, e.g. `filter.created_at`."""
        if not isinstance(name, str):
            return False
        if name.startswith('.') or name.endswith('.'):
            return False
        return all(part and self.is_snake_case(part) for part in name.split('.'))

    def is_operation_id(self, value) -> bool:
        return (
            isinstance(value, str)
            and self.is_camel_case(value)
            and bool(self.operation_id_prefix.match(value))
        )


DEFAULT_NAMING = NamingConventions()
