"""Decide which fields of a message are printed, and in what order."""

from __future__ import annotations

import dataclasses
from collections.abc import Collection
from enum import Enum
from numbers import Number
from typing import Any, List, Sequence

from google.protobuf.message import Message as ProtobufMessage

from proto_printer import protobuf_adapter
from proto_printer.models import FieldDescriptor, FieldShape, Message, is_byte_sequence


def is_internal_name(name: str) -> bool:
    """Names beginning or ending with '_' are bookkeeping, not data."""
    return name.startswith("_") or name.endswith("_")


def is_message(value: Any) -> bool:
    """Declared messages, protobuf messages, dataclasses and plain objects.

    Plain objects count when they carry an instance __dict__ and are not
    a value type, a collection, a class or a callable.
    """
    if isinstance(value, (Message, ProtobufMessage)):
        return True
    if isinstance(value, type) or callable(value):
        return False
    if dataclasses.is_dataclass(value):
        return True
    if isinstance(value, (str, Number, Enum, Collection)) or is_byte_sequence(value):
        return False
    return hasattr(value, "__dict__")


def infer_shape(value: Any) -> FieldShape:
    """Pick a shape for a value whose field did not declare one."""
    if isinstance(value, str):
        return FieldShape.STRING
    if is_byte_sequence(value):
        return FieldShape.BYTES
    if is_message(value):
        return FieldShape.MESSAGE
    return FieldShape.SCALAR


def printable_fields(message: Any) -> List[FieldDescriptor]:
    """Return the printable fields of a message in declaration order.

    Declared ``FIELDS`` tables win; protobuf messages and dataclasses are
    described from their own field metadata. Any other object contributes
    its instance attributes, so class-level attributes, properties and
    methods never show up.
    """
    candidates: Sequence[FieldDescriptor]
    if isinstance(message, ProtobufMessage):
        candidates = protobuf_adapter.field_descriptors(message.DESCRIPTOR)
    elif isinstance(message, Message):
        candidates = type(message).FIELDS
    elif dataclasses.is_dataclass(message) and not isinstance(message, type):
        candidates = [FieldDescriptor(f.name) for f in dataclasses.fields(message)]
    else:
        attrs = getattr(message, "__dict__", {})
        candidates = [FieldDescriptor(name) for name in attrs]

    return [fd for fd in candidates if not is_internal_name(fd.name)]
