import importlib.util
import os
import shutil
import tempfile
from pathlib import Path

from proto_printer.generator.message_generator import (
    generate_module,
    generate_modules,
    module_name_for,
)
from proto_printer.parser.proto_parser import parse_proto_text
from proto_printer.printer import print_message

PROTO_CONTENT = """\
syntax = "proto3";

package order;

enum Status {
    STATUS_UNKNOWN = 0;
    STATUS_SHIPPED = 1;
}

message OrderInfo {
    int32 order_id = 1;
    string customer_name = 2;
    repeated OrderItem items = 3;
    bytes signature = 4;
    Status status = 5;
    repeated string tags = 6;
    map<string, int32> quantities = 7;

    message OrderItem {
        int32 item_id = 1;
        double price = 2;
    }
}

message Empty {}
"""


def _load_module(path: str):
    spec = importlib.util.spec_from_file_location("generated_messages", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestGenerateModule:
    def setup_method(self):
        self.schema = parse_proto_text(PROTO_CONTENT, source_file="protos/orders.proto")
        self.source = generate_module(self.schema)

    def test_header_names_source(self):
        assert "generated from orders.proto (package order)" in self.source
        assert "from proto_printer.models import FieldDescriptor, FieldShape, Message" in self.source

    def test_message_classes(self):
        assert "class OrderInfo(Message):" in self.source
        assert "class OrderItem(Message):" in self.source
        assert "class QuantitiesEntry(Message):" in self.source

    def test_field_table_in_declaration_order(self):
        expected = (
            "    FIELDS = (\n"
            '        FieldDescriptor("order_id", FieldShape.SCALAR),\n'
            '        FieldDescriptor("customer_name", FieldShape.STRING),\n'
            '        FieldDescriptor("items", FieldShape.MESSAGE, is_repeated=True),\n'
            '        FieldDescriptor("signature", FieldShape.BYTES),\n'
            '        FieldDescriptor("status", FieldShape.SCALAR),\n'
            '        FieldDescriptor("tags", FieldShape.STRING, is_repeated=True),\n'
            '        FieldDescriptor("quantities", FieldShape.MESSAGE, is_repeated=True),\n'
            "    )\n"
        )
        assert expected in self.source

    def test_empty_message(self):
        assert "class Empty(Message):\n    FIELDS = ()\n" in self.source

    def test_enum_class(self):
        assert "from enum import IntEnum" in self.source
        assert "class Status(IntEnum):\n    STATUS_UNKNOWN = 0\n    STATUS_SHIPPED = 1\n" in self.source

    def test_no_enum_import_without_enums(self):
        source = generate_module(parse_proto_text("message A { int32 x = 1; }"))
        assert "IntEnum" not in source


class TestGeneratedCodeRuns:
    def setup_method(self):
        self.work_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.work_dir)

    def test_generated_classes_print(self):
        schema = parse_proto_text(PROTO_CONTENT, source_file="orders.proto")
        paths = generate_modules([schema], self.work_dir)
        assert paths == [os.path.join(self.work_dir, "orders_messages.py")]

        module = _load_module(paths[0])
        order = module.OrderInfo(
            order_id=7,
            customer_name="Ada",
            items=[module.OrderItem(item_id=1, price=2.5)],
            status=module.Status.STATUS_SHIPPED,
            quantities=[module.QuantitiesEntry(key="pen", value=3)],
        )
        assert order.tags == []
        assert order.signature is None
        assert print_message(order) == (
            "order_id: 7\n"
            'customer_name: "Ada"\n'
            "items <\n"
            "  item_id: 1\n"
            "  price: 2.5\n"
            ">\n"
            "status: STATUS_SHIPPED\n"
            "quantities <\n"
            '  key: "pen"\n'
            "  value: 3\n"
            ">\n"
        )

    def test_module_name(self):
        assert module_name_for("a/b/orders.proto") == "orders_messages"

    def test_imported_enum_prints_as_number(self):
        proto = (
            'syntax = "proto3";\n'
            'import "common.proto";\n'
            "message Shipment {\n"
            "    int32 id = 1;\n"
            "    common.Status status = 2;\n"
            "}\n"
        )
        paths = generate_modules([parse_proto_text(proto, source_file="shipments.proto")], self.work_dir)
        module = _load_module(paths[0])
        assert '        FieldDescriptor("status", FieldShape.MESSAGE),\n' in Path(paths[0]).read_text()
        assert print_message(module.Shipment(id=1, status=2)) == "id: 1\nstatus: 2\n"
