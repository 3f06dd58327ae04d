from __future__ import annotations

from pathlib import Path

from proto_printer.models import SchemaFile

from .proto_ast_parser import ProtoParser
from .proto_tokenizer import tokenize_proto
from .proto_transform import transform_proto


def parse_proto_text(text: str, source_file: str = "<string>") -> SchemaFile:
    """Parse .proto source text into a SchemaFile."""
    ast = ProtoParser(tokenize_proto(text)).parse()
    return transform_proto(ast, source_file)


def parse_proto_file(file_path: str) -> SchemaFile:
    """Parse a .proto file and extract all message and enum definitions."""
    text = Path(file_path).read_text(encoding="utf-8")
    return parse_proto_text(text, source_file=file_path)
