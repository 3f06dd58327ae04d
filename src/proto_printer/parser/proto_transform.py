"""Transform proto AST nodes into MessageSchema/FieldSchema models."""

from __future__ import annotations

from typing import List, Set

from proto_printer.models import (
    EnumSchema,
    FieldSchema,
    FieldShape,
    MessageSchema,
    SchemaFile,
)

from .proto_ast import ProtoEnum, ProtoField, ProtoFile, ProtoMessage

# Proto scalar types. Any other type is a message, unless it names an enum.
PROTO_PRIMITIVES = {
    "int32", "sint32", "sfixed32", "uint32", "fixed32",
    "int64", "sint64", "sfixed64", "uint64", "fixed64",
    "float", "double", "bool", "string", "bytes",
}


def transform_proto(ast: ProtoFile, source_file: str) -> SchemaFile:
    """Transform a ProtoFile AST into a flat SchemaFile.

    Nested messages and enums are flattened: the parent message appears
    first, followed by its nested messages and the entry messages of its
    map fields.
    """
    enum_names = _collect_enum_names(ast)
    result = SchemaFile(source_file=source_file, package=ast.package)

    for enum_node in ast.enums:
        result.enums.append(_transform_enum(enum_node))
    for msg_node in ast.messages:
        _transform_message(msg_node, source_file, enum_names, result)
    return result


def field_shape(type_name: str, enum_names: Set[str]) -> FieldShape:
    if type_name == "string":
        return FieldShape.STRING
    if type_name == "bytes":
        return FieldShape.BYTES
    if type_name in PROTO_PRIMITIVES or _simple_name(type_name) in enum_names:
        return FieldShape.SCALAR
    return FieldShape.MESSAGE


def map_entry_name(field_name: str) -> str:
    """Name of the synthetic entry message for a map field: "user_ids" -> "UserIdsEntry"."""
    return "".join(p[:1].upper() + p[1:] for p in field_name.split("_")) + "Entry"


def _simple_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]


def _collect_enum_names(ast: ProtoFile) -> Set[str]:
    names = {e.name for e in ast.enums}
    stack: List[ProtoMessage] = list(ast.messages)
    while stack:
        node = stack.pop()
        names.update(e.name for e in node.enums)
        stack.extend(node.nested_messages)
    return names


def _transform_enum(node: ProtoEnum) -> EnumSchema:
    return EnumSchema(
        name=node.name,
        values=[(v.name, v.number) for v in node.values],
    )


def _transform_message(
    node: ProtoMessage,
    source_file: str,
    enum_names: Set[str],
    result: SchemaFile,
) -> None:
    msg = MessageSchema(name=node.name, source_file=source_file)
    result.messages.append(msg)

    entries: List[MessageSchema] = []
    for f in node.fields:
        if f.is_map:
            entry = _map_entry(f, source_file, enum_names)
            entries.append(entry)
            type_name = entry.name
        else:
            type_name = f.type_name
        msg.fields.append(
            FieldSchema(
                name=f.field_name,
                type_name=type_name,
                number=f.field_number,
                shape=field_shape(type_name, enum_names),
                is_repeated=f.is_repeated,
            )
        )

    for enum_node in node.enums:
        result.enums.append(_transform_enum(enum_node))
    for nested_node in node.nested_messages:
        _transform_message(nested_node, source_file, enum_names, result)
    result.messages.extend(entries)


def _map_entry(f: ProtoField, source_file: str, enum_names: Set[str]) -> MessageSchema:
    return MessageSchema(
        name=map_entry_name(f.field_name),
        fields=[
            FieldSchema("key", f.key_type, 1, field_shape(f.key_type, enum_names)),
            FieldSchema("value", f.value_type, 2, field_shape(f.value_type, enum_names)),
        ],
        source_file=source_file,
    )
