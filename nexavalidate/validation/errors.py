"""
NexaValidate Errors
===================

Ordered bag of validation error messages per field.
"""

from __future__ import annotations

from typing import Dict, List


class Errors(dict):
    """
    Validation errors.

    Maps field names to their messages, in the order they failed.

    Example:
        errors = Errors()
        errors.add("name", "name min length is 7")

        errors.get("name")   # 'name min length is 7'
        errors.field("age")  # []
        str(errors)          # 'name:\\n name min length is 7'
    """

    def add(self, field: str, message: str) -> "Errors":
        """Add an error message for field."""
        self.setdefault(field, []).append(message)
        return self

    def get(self, field: str, default: str = "") -> str:  # type: ignore[override]
        """Get first error message of a field."""
        messages = super().get(field)
        return messages[0] if messages else default

    def field(self, field: str) -> List[str]:
        """Get all error messages of a field."""
        return list(super().get(field) or [])

    def one(self) -> str:
        """Get first error message overall."""
        for messages in self.values():
            if messages:
                return messages[0]
        return ""

    def empty(self) -> bool:
        return len(self) == 0

    def all(self) -> List[str]:
        """Get all error messages as flat list."""
        all_msgs: List[str] = []
        for messages in self.values():
            all_msgs.extend(messages)
        return all_msgs

    def to_dict(self) -> Dict[str, List[str]]:
        return {field: list(messages) for field, messages in self.items()}

    def string(self) -> str:
        """Summary with one block per field."""
        lines: List[str] = []
        for field, messages in self.items():
            lines.append(f"{field}:")
            lines.extend(f" {msg}" for msg in messages)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.string()
