"""Debug printing of messages in a protobuf text format like layout.

An order with one item prints as:

    order_id: 7
    customer_name: "Ada"
    item <
      item_id: 1
    >

The output is for humans. Strings are cut at 200 characters and anything
outside printable ASCII is escaped, so it does not parse back into a message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Set

from proto_printer.encoding import format_scalar, quote_bytes, sanitize_string
from proto_printer.identifiers import de_camel_case
from proto_printer.models import FieldDescriptor, FieldShape
from proto_printer.selector import infer_shape, is_message, printable_fields

INDENT = "  "

ERROR_PREFIX = "Error printing proto: "


class FieldAccessError(Exception):
    """Raised when a field value cannot be read while printing a message."""


@dataclass(frozen=True)
class PrintResult:
    """Outcome of printing a message: the text, or the error that stopped it."""

    text: str = ""
    error: Optional[FieldAccessError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return f"{ERROR_PREFIX}{self.error}"
        return self.text


def try_print_message(message: Any) -> PrintResult:
    """Render a message, reporting a field access failure as a result."""
    if message is None:
        return PrintResult()

    lines: List[str] = []
    try:
        _render_message(None, message, 0, lines, set())
    except FieldAccessError as e:
        return PrintResult(error=e)
    except RecursionError as e:
        error = FieldAccessError(f"message nesting too deep to print: {e}")
        error.__cause__ = e
        return PrintResult(error=error)
    return PrintResult(text="".join(lines))


def print_message(message: Any) -> str:
    """Render a message as text.

    Returns "" for None. If a field cannot be read the whole output is
    replaced by a single "Error printing proto: ..." line.
    """
    return str(try_print_message(message))


def _render(
    identifier: str,
    value: Any,
    depth: int,
    shape: Optional[FieldShape],
    out: List[str],
    active: Set[int],
) -> None:
    if value is None:
        # unset field, absent sub-message or absent bytes
        return

    if shape is None or (shape is FieldShape.MESSAGE and not is_message(value)):
        # declared message fields may still hold a plain value (imported enums)
        shape = infer_shape(value)

    if shape is FieldShape.MESSAGE:
        _render_message(identifier, value, depth, out, active)
        return

    if shape is FieldShape.STRING:
        text = f'"{sanitize_string(str(value))}"'
    elif shape is FieldShape.BYTES:
        text = quote_bytes(value)
    else:
        text = format_scalar(value)
    out.append(f"{INDENT * depth}{de_camel_case(identifier)}: {text}\n")


def _render_message(
    identifier: Optional[str],
    message: Any,
    depth: int,
    out: List[str],
    active: Set[int],
) -> None:
    """Render a message's fields; the root (identifier None) gets no header."""
    key = id(message)
    if key in active:
        raise FieldAccessError(
            f"cycle detected: {type(message).__name__} is already being printed "
            f"(reached again through field '{identifier}')"
        )
    active.add(key)

    indent = INDENT * depth
    child_depth = depth
    if identifier is not None:
        out.append(f"{indent}{de_camel_case(identifier)} <\n")
        child_depth += 1

    for fd in printable_fields(message):
        value = _read_field(fd, message)
        if _is_repeated(fd, value):
            for element in value:
                _render(fd.name, element, child_depth, fd.shape, out, active)
        else:
            _render(fd.name, value, child_depth, fd.shape, out, active)

    if identifier is not None:
        out.append(f"{indent}>\n")
    active.discard(key)


def _read_field(fd: FieldDescriptor, message: Any) -> Any:
    try:
        return fd.read(message)
    except (AttributeError, LookupError) as e:
        raise FieldAccessError(
            f"cannot read field '{fd.name}' of {type(message).__name__}: {e}"
        ) from e


def _is_repeated(fd: FieldDescriptor, value: Any) -> bool:
    """Byte sequences are leaves; only lists and tuples repeat undeclared."""
    if value is None:
        return False
    if fd.is_repeated:
        return True
    return fd.shape is None and isinstance(value, (list, tuple))
