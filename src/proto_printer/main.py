from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path
from typing import List

from google.protobuf.message import DecodeError

from proto_printer.generator.message_generator import generate_modules
from proto_printer.models import SchemaFile
from proto_printer.parser.proto_ast_parser import ProtoParseError
from proto_printer.parser.proto_parser import parse_proto_file
from proto_printer.printer import try_print_message


def _find_files(working_path: str, extensions: List[str]) -> List[str]:
    """Recursively find files with given extensions under working_path."""
    results = []
    for ext in extensions:
        results.extend(str(p) for p in Path(working_path).rglob(f"*{ext}"))
    return sorted(results)


def run_generate(working_path: str, output_dir: str) -> None:
    """Parse every .proto under working_path and write message modules."""
    proto_files = _find_files(working_path, [".proto"])
    if not proto_files:
        print(f"No .proto files found under {working_path}")
        sys.exit(1)

    print(f"Found {len(proto_files)} proto file(s)")

    schemas: List[SchemaFile] = []
    for pf in proto_files:
        try:
            schema = parse_proto_file(pf)
        except ProtoParseError as e:
            print(f"FATAL: {pf}: {e}", file=sys.stderr)
            sys.exit(1)
        schemas.append(schema)
        print(f"  Parsed {pf}: {len(schema.messages)} message(s), {len(schema.enums)} enum(s)")

    for f in generate_modules(schemas, output_dir):
        print(f"  Generated: {f}")

    print("Done!")


def _load_message_class(target: str):
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise ValueError(f"expected 'module:ClassName', got {target!r}")
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


def run_dump(message_type: str, input_path: str) -> None:
    """Decode a binary protobuf message and print it as text."""
    try:
        message_cls = _load_message_class(message_type)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"FATAL: cannot load message type: {e}", file=sys.stderr)
        sys.exit(1)

    message = message_cls()
    try:
        message.ParseFromString(Path(input_path).read_bytes())
    except DecodeError as e:
        print(f"FATAL: {input_path} is not a valid {message_type}: {e}", file=sys.stderr)
        sys.exit(1)

    result = try_print_message(message)
    if not result.ok:
        print(f"FATAL: {result}", file=sys.stderr)
        sys.exit(1)
    sys.stdout.write(result.text)


def main():
    parser = argparse.ArgumentParser(
        description="Debug text printer for protobuf-style messages",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate",
        help="Generate Python message classes with field tables from .proto files",
    )
    generate.add_argument(
        "--working-path",
        required=True,
        help="Path to scan for .proto files",
    )
    generate.add_argument(
        "--output-dir",
        required=True,
        help="Directory to write the generated modules to",
    )

    dump = subparsers.add_parser(
        "dump",
        help="Print a binary-encoded protobuf message as text",
    )
    dump.add_argument(
        "--message-type",
        required=True,
        help="Generated protobuf class as module:ClassName",
    )
    dump.add_argument(
        "--input",
        required=True,
        help="File holding the binary-encoded message",
    )

    args = parser.parse_args()
    if args.command == "generate":
        run_generate(args.working_path, args.output_dir)
    else:
        run_dump(args.message_type, args.input)


if __name__ == "__main__":
    main()
