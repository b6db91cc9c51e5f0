"""Protobuf messages of the ``aialgs.data`` Record format read by the first-party algorithms.

The message classes are built at import time from a ``FileDescriptorProto`` equivalent to::

    syntax = "proto2";
    package aialgs.data;

    message Float32Tensor { repeated float values = 1 [packed = true];
                            repeated uint64 keys = 2 [packed = true];
                            repeated uint64 shape = 3 [packed = true]; }
    message Float64Tensor { repeated double values = 1 [packed = true]; ... }
    message Int32Tensor { repeated int32 values = 1 [packed = true]; ... }
    message Bytes { repeated bytes value = 1; optional string content_type = 2; }
    message Value { optional Float32Tensor float32_tensor = 2; optional Float64Tensor float64_tensor = 3;
                    optional Int32Tensor int32_tensor = 7; optional Bytes bytes = 9; }
    message Record { map<string, Value> features = 1; map<string, Value> label = 2;
                     optional string uid = 3; optional string metadata = 4; optional string configuration = 5; }
"""
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "aialgs.data"
_FDP = descriptor_pb2.FieldDescriptorProto


def _add_field(message, name, number, field_type, label=_FDP.LABEL_OPTIONAL, type_name=None, packed=False):
    field = message.field.add()
    field.name = name
    field.number = number
    field.type = field_type
    field.label = label
    if type_name is not None:
        field.type_name = type_name
    if packed:
        field.options.packed = True
    return field


def _add_tensor(file_proto, name, value_type):
    message = file_proto.message_type.add()
    message.name = name
    _add_field(message, "values", 1, value_type, _FDP.LABEL_REPEATED, packed=True)
    _add_field(message, "keys", 2, _FDP.TYPE_UINT64, _FDP.LABEL_REPEATED, packed=True)
    _add_field(message, "shape", 3, _FDP.TYPE_UINT64, _FDP.LABEL_REPEATED, packed=True)


def _add_map_field(message, name, number, entry_name, value_type_name):
    entry = message.nested_type.add()
    entry.name = entry_name
    entry.options.map_entry = True
    _add_field(entry, "key", 1, _FDP.TYPE_STRING)
    _add_field(entry, "value", 2, _FDP.TYPE_MESSAGE, type_name=value_type_name)
    _add_field(
        message,
        name,
        number,
        _FDP.TYPE_MESSAGE,
        _FDP.LABEL_REPEATED,
        type_name=f".{_PACKAGE}.{message.name}.{entry_name}",
    )


def _record_file_proto() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "aialgs/data/record.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    _add_tensor(file_proto, "Float32Tensor", _FDP.TYPE_FLOAT)
    _add_tensor(file_proto, "Float64Tensor", _FDP.TYPE_DOUBLE)
    _add_tensor(file_proto, "Int32Tensor", _FDP.TYPE_INT32)

    bytes_message = file_proto.message_type.add()
    bytes_message.name = "Bytes"
    _add_field(bytes_message, "value", 1, _FDP.TYPE_BYTES, _FDP.LABEL_REPEATED)
    _add_field(bytes_message, "content_type", 2, _FDP.TYPE_STRING)

    value = file_proto.message_type.add()
    value.name = "Value"
    _add_field(value, "float32_tensor", 2, _FDP.TYPE_MESSAGE, type_name=f".{_PACKAGE}.Float32Tensor")
    _add_field(value, "float64_tensor", 3, _FDP.TYPE_MESSAGE, type_name=f".{_PACKAGE}.Float64Tensor")
    _add_field(value, "int32_tensor", 7, _FDP.TYPE_MESSAGE, type_name=f".{_PACKAGE}.Int32Tensor")
    _add_field(value, "bytes", 9, _FDP.TYPE_MESSAGE, type_name=f".{_PACKAGE}.Bytes")

    record = file_proto.message_type.add()
    record.name = "Record"
    _add_map_field(record, "features", 1, "FeaturesEntry", f".{_PACKAGE}.Value")
    _add_map_field(record, "label", 2, "LabelEntry", f".{_PACKAGE}.Value")
    _add_field(record, "uid", 3, _FDP.TYPE_STRING)
    _add_field(record, "metadata", 4, _FDP.TYPE_STRING)
    _add_field(record, "configuration", 5, _FDP.TYPE_STRING)

    return file_proto


# Kept apart from the default descriptor pool.
_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_record_file_proto().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


Float32Tensor = _message_class("Float32Tensor")
Float64Tensor = _message_class("Float64Tensor")
Int32Tensor = _message_class("Int32Tensor")
Bytes = _message_class("Bytes")
Value = _message_class("Value")
Record = _message_class("Record")
