from google.protobuf import descriptor_pb2, struct_pb2, timestamp_pb2, wrappers_pb2

from proto_printer.models import FieldShape
from proto_printer.printer import print_message
from proto_printer.protobuf_adapter import field_descriptors, is_map_field, is_repeated_field

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto


def _by_name(message_cls):
    return {fd.name: fd for fd in field_descriptors(message_cls.DESCRIPTOR)}


class TestFieldDescriptors:
    def test_declaration_order(self):
        names = [fd.name for fd in field_descriptors(descriptor_pb2.DescriptorProto.DESCRIPTOR)]
        assert names[:4] == ["name", "field", "extension", "nested_type"]

    def test_shapes(self):
        fields = _by_name(FieldDescriptorProto)
        assert fields["name"].shape is FieldShape.STRING
        assert fields["number"].shape is FieldShape.SCALAR
        assert fields["type"].shape is FieldShape.SCALAR
        assert fields["options"].shape is FieldShape.MESSAGE

    def test_repeated_flag(self):
        fields = _by_name(descriptor_pb2.DescriptorProto)
        assert fields["field"].is_repeated is True
        assert fields["name"].is_repeated is False

    def test_cached_per_type(self):
        first = field_descriptors(FieldDescriptorProto.DESCRIPTOR)
        second = field_descriptors(FieldDescriptorProto.DESCRIPTOR)
        assert first is second

    def test_map_detection(self):
        struct_fields = struct_pb2.Struct.DESCRIPTOR.fields_by_name
        assert is_map_field(struct_fields["fields"]) is True
        assert is_repeated_field(struct_fields["fields"]) is True
        message_fields = descriptor_pb2.DescriptorProto.DESCRIPTOR.fields_by_name
        assert is_map_field(message_fields["field"]) is False


class TestPrintProtobufMessages:
    def test_set_fields_in_declaration_order(self):
        message = FieldDescriptorProto(
            name="order_id",
            number=1,
            label=FieldDescriptorProto.LABEL_OPTIONAL,
            type=FieldDescriptorProto.TYPE_INT32,
        )
        assert print_message(message) == (
            'name: "order_id"\n'
            "number: 1\n"
            "label: LABEL_OPTIONAL\n"
            "type: TYPE_INT32\n"
        )

    def test_unset_optional_fields_skipped(self):
        assert print_message(FieldDescriptorProto(number=3)) == "number: 3\n"

    def test_empty_message(self):
        assert print_message(FieldDescriptorProto()) == ""

    def test_nested_repeated_messages(self):
        message = descriptor_pb2.DescriptorProto(
            name="Order",
            field=[
                FieldDescriptorProto(name="id", number=1),
                FieldDescriptorProto(name="customerName", number=2),
            ],
        )
        assert print_message(message) == (
            'name: "Order"\n'
            "field <\n"
            '  name: "id"\n'
            "  number: 1\n"
            ">\n"
            "field <\n"
            '  name: "customerName"\n'
            "  number: 2\n"
            ">\n"
        )

    def test_repeated_strings(self):
        message = descriptor_pb2.DescriptorProto(reserved_name=["a", "b"])
        assert print_message(message) == 'reserved_name: "a"\nreserved_name: "b"\n'

    def test_proto3_scalars_always_printed(self):
        assert print_message(timestamp_pb2.Timestamp(seconds=5)) == "seconds: 5\nnanos: 0\n"

    def test_bytes_field(self):
        message = wrappers_pb2.BytesValue(value=b'\t"A')
        assert print_message(message) == 'value: "\\011\\"A"\n'

    def test_bool_field(self):
        assert print_message(wrappers_pb2.BoolValue(value=True)) == "value: true\n"

    def test_map_entries_sorted_by_key(self):
        message = struct_pb2.Struct()
        message.update({"b": 1.5, "a": "x"})
        assert print_message(message) == (
            "fields <\n"
            '  key: "a"\n'
            "  value <\n"
            '    string_value: "x"\n'
            "  >\n"
            ">\n"
            "fields <\n"
            '  key: "b"\n'
            "  value <\n"
            "    number_value: 1.5\n"
            "  >\n"
            ">\n"
        )
