from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, List, Optional, Tuple


class FieldShape(Enum):
    SCALAR = auto()
    STRING = auto()
    BYTES = auto()
    MESSAGE = auto()


@dataclass(frozen=True)
class FieldDescriptor:
    """One printable field of a message type.

    ``shape`` may be None, in which case the renderer infers it from the
    value it reads. ``accessor`` defaults to reading the attribute ``name``.
    """

    name: str
    shape: Optional[FieldShape] = None
    is_repeated: bool = False
    accessor: Optional[Callable[[Any], Any]] = None

    def read(self, message: Any) -> Any:
        if self.accessor is not None:
            return self.accessor(message)
        return getattr(message, self.name)


class Message:
    """Base class for messages that declare their fields up front.

    Subclasses list their fields, in declaration order, in ``FIELDS``::

        class Point(Message):
            FIELDS = (
                FieldDescriptor("x", FieldShape.SCALAR),
                FieldDescriptor("y", FieldShape.SCALAR),
            )
    """

    FIELDS: Tuple[FieldDescriptor, ...] = ()

    def __init__(self, **kwargs: Any) -> None:
        for fd in self.FIELDS:
            default = [] if fd.is_repeated else None
            setattr(self, fd.name, kwargs.pop(fd.name, default))
        if kwargs:
            raise TypeError(
                f"{type(self).__name__} got unexpected field(s): {sorted(kwargs)}"
            )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(
            getattr(self, fd.name, None) == getattr(other, fd.name, None)
            for fd in self.FIELDS
        )

    def __repr__(self) -> str:
        parts = []
        for fd in self.FIELDS:
            parts.append(f"{fd.name}={getattr(self, fd.name, None)!r}")
        return f"{type(self).__name__}({', '.join(parts)})"


def is_byte_sequence(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


@dataclass
class FieldSchema:
    """A field of a message type read from a .proto file."""

    name: str
    type_name: str
    number: int
    shape: FieldShape
    is_repeated: bool = False


@dataclass
class EnumSchema:
    name: str
    values: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class MessageSchema:
    name: str
    fields: List[FieldSchema] = field(default_factory=list)
    source_file: str = ""


@dataclass
class SchemaFile:
    """Everything the code generator needs from one .proto file."""

    source_file: str
    package: Optional[str] = None
    messages: List[MessageSchema] = field(default_factory=list)
    enums: List[EnumSchema] = field(default_factory=list)
