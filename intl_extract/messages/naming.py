"""
Message name computation.

The runtime side of Intl looks messages up by the same names, so these
rules must not drift from it.
"""

from typing import Optional


def compute_message_name(name: Optional[str], text: Optional[str], meaning: Optional[str]) -> Optional[str]:
    """
    Name for a message with no explicit name.

    Examples:
        compute_message_name("greet", "Hi", None) -> "greet"
        compute_message_name(None, "Hi", None) -> "Hi"
        compute_message_name(None, "Hi", "salutation") -> "Hi_salutation"
    """
    if name:
        return name
    if meaning is None:
        return text
    return f"{text}_{meaning}"


def class_plus_method_name(class_name: Optional[str], outer_name: Optional[str]) -> Optional[str]:
    """<ClassName>_<methodName>, or None outside a class."""
    if class_name is None:
        return None
    return f"{class_name}_{outer_name}"
