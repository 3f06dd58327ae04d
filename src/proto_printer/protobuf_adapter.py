"""Describe ``google.protobuf`` generated messages with FieldDescriptors.

Descriptor tables are built once per message type from ``DESCRIPTOR.fields``
(declaration order) and cached by full name.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple, Type

from google.protobuf.descriptor import Descriptor
from google.protobuf.descriptor import FieldDescriptor as ProtoFieldDescriptor

from proto_printer.models import FieldDescriptor, FieldShape, Message

_SHAPES_BY_TYPE: Dict[int, FieldShape] = {
    ProtoFieldDescriptor.TYPE_STRING: FieldShape.STRING,
    ProtoFieldDescriptor.TYPE_BYTES: FieldShape.BYTES,
    ProtoFieldDescriptor.TYPE_MESSAGE: FieldShape.MESSAGE,
    ProtoFieldDescriptor.TYPE_GROUP: FieldShape.MESSAGE,
}

_DESCRIPTOR_CACHE: Dict[str, Tuple[FieldDescriptor, ...]] = {}
_MAP_ENTRY_CLASSES: Dict[str, Type[Message]] = {}


def field_descriptors(descriptor: Descriptor) -> Tuple[FieldDescriptor, ...]:
    """Return the printable field table for a protobuf message descriptor."""
    cached = _DESCRIPTOR_CACHE.get(descriptor.full_name)
    if cached is None:
        cached = tuple(_describe_field(fd) for fd in descriptor.fields)
        _DESCRIPTOR_CACHE[descriptor.full_name] = cached
    return cached


def shape_of(fd: ProtoFieldDescriptor) -> FieldShape:
    return _SHAPES_BY_TYPE.get(fd.type, FieldShape.SCALAR)


def is_repeated_field(fd: ProtoFieldDescriptor) -> bool:
    # Newer protobuf releases expose is_repeated and deprecate label.
    is_repeated = getattr(fd, "is_repeated", None)
    if is_repeated is None:
        return fd.label == ProtoFieldDescriptor.LABEL_REPEATED
    return bool(is_repeated)


def is_map_field(fd: ProtoFieldDescriptor) -> bool:
    entry = fd.message_type
    return entry is not None and entry.GetOptions().map_entry


def _describe_field(fd: ProtoFieldDescriptor) -> FieldDescriptor:
    if is_map_field(fd):
        return FieldDescriptor(
            fd.name,
            FieldShape.MESSAGE,
            is_repeated=True,
            accessor=_map_reader(fd),
        )
    if is_repeated_field(fd):
        return FieldDescriptor(
            fd.name,
            shape_of(fd),
            is_repeated=True,
            accessor=_repeated_reader(fd),
        )
    return FieldDescriptor(fd.name, shape_of(fd), accessor=_singular_reader(fd))


def _enum_label(fd: ProtoFieldDescriptor, value: Any) -> Any:
    """Show enum values by name when the number is a known value."""
    if fd.type != ProtoFieldDescriptor.TYPE_ENUM or fd.enum_type is None:
        return value
    enum_value = fd.enum_type.values_by_number.get(value)
    return enum_value.name if enum_value is not None else value


def _singular_reader(fd: ProtoFieldDescriptor) -> Callable[[Any], Any]:
    name = fd.name

    def read(message: Any) -> Any:
        try:
            present = message.HasField(name)
        except ValueError:
            # proto3 scalars without explicit presence are always set
            present = True
        if not present:
            return None
        return _enum_label(fd, getattr(message, name))

    return read


def _repeated_reader(fd: ProtoFieldDescriptor) -> Callable[[Any], List[Any]]:
    name = fd.name

    def read(message: Any) -> List[Any]:
        return [_enum_label(fd, v) for v in getattr(message, name)]

    return read


def _map_entry_class(fd: ProtoFieldDescriptor) -> Type[Message]:
    entry = fd.message_type
    cls = _MAP_ENTRY_CLASSES.get(entry.full_name)
    if cls is None:
        key_fd = entry.fields_by_name["key"]
        value_fd = entry.fields_by_name["value"]
        cls = type(
            entry.name,
            (Message,),
            {
                "FIELDS": (
                    FieldDescriptor("key", shape_of(key_fd)),
                    FieldDescriptor("value", shape_of(value_fd)),
                ),
            },
        )
        _MAP_ENTRY_CLASSES[entry.full_name] = cls
    return cls


def _map_reader(fd: ProtoFieldDescriptor) -> Callable[[Any], List[Message]]:
    name = fd.name
    value_fd = fd.message_type.fields_by_name["value"]

    def read(message: Any) -> List[Message]:
        entry_cls = _map_entry_class(fd)
        container = getattr(message, name)
        return [
            entry_cls(key=key, value=_enum_label(value_fd, container[key]))
            for key in sorted(container)
        ]

    return read
