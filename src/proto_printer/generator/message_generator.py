from __future__ import annotations

import os
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader

from proto_printer.models import SchemaFile


def _get_template_env() -> Environment:
    template_dir = Path(__file__).parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def module_name_for(source_file: str) -> str:
    """orders.proto -> orders_messages"""
    return f"{Path(source_file).stem}_messages"


def generate_module(schema: SchemaFile) -> str:
    """Generate Python source declaring a Message subclass per proto message.

    Every class carries a FIELDS table in declaration order, so printing
    never has to discover fields at run time.
    """
    env = _get_template_env()
    template = env.get_template("message_module.py.j2")

    return template.render(
        source_file=Path(schema.source_file).name,
        package=schema.package,
        enums=schema.enums,
        messages=schema.messages,
    )


def generate_modules(schemas: List[SchemaFile], output_dir: str) -> List[str]:
    """Write one generated module per schema file.

    Returns list of generated file paths.
    """
    os.makedirs(output_dir, exist_ok=True)

    generated: List[str] = []
    for schema in schemas:
        source = generate_module(schema)
        file_path = os.path.join(output_dir, f"{module_name_for(schema.source_file)}.py")
        Path(file_path).write_text(source, encoding="utf-8")
        generated.append(file_path)

    return generated
