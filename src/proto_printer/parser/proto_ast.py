"""AST node definitions for protobuf (.proto) files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ProtoField:
    """A field declaration: [repeated|optional] Type name = number [options];

    Map fields carry their key and value types; ``type_name`` is "map".
    """

    type_name: str
    field_name: str
    field_number: int
    is_repeated: bool = False
    key_type: Optional[str] = None
    value_type: Optional[str] = None

    @property
    def is_map(self) -> bool:
        return self.key_type is not None


@dataclass
class ProtoEnumValue:
    name: str
    number: int


@dataclass
class ProtoEnum:
    name: str
    values: List[ProtoEnumValue] = field(default_factory=list)


@dataclass
class ProtoMessage:
    """A message definition, possibly containing nested messages and enums."""

    name: str
    fields: List[ProtoField] = field(default_factory=list)
    nested_messages: List[ProtoMessage] = field(default_factory=list)
    enums: List[ProtoEnum] = field(default_factory=list)


@dataclass
class ProtoFile:
    """Top-level parsed representation of a .proto file."""

    package: Optional[str] = None
    messages: List[ProtoMessage] = field(default_factory=list)
    enums: List[ProtoEnum] = field(default_factory=list)
