"""Trojan-Go administrative API messages.

The messages mirror ``api/service/api.proto`` from Trojan-Go. They are
assembled from a ``FileDescriptorProto`` at import time so the exporter does
not need a protoc build step; only the subset of the service used for
scraping is declared.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "trojan.api"
SERVICE_NAME = f"{PACKAGE}.TrojanServerService"
LIST_USERS_METHOD = f"/{SERVICE_NAME}/ListUsers"

_Field = descriptor_pb2.FieldDescriptorProto

# name -> ordered (field name, type, message type name or None); field
# numbers follow declaration order, matching api.proto.
_MESSAGES: dict[str, tuple[tuple[str, int, str | None], ...]] = {
    "Traffic": (
        ("upload_traffic", _Field.TYPE_UINT64, None),
        ("download_traffic", _Field.TYPE_UINT64, None),
    ),
    "Speed": (
        ("upload_speed", _Field.TYPE_UINT64, None),
        ("download_speed", _Field.TYPE_UINT64, None),
    ),
    "User": (
        ("password", _Field.TYPE_STRING, None),
        ("hash", _Field.TYPE_STRING, None),
    ),
    "UserStatus": (
        ("user", _Field.TYPE_MESSAGE, "User"),
        ("traffic_total", _Field.TYPE_MESSAGE, "Traffic"),
        ("speed_current", _Field.TYPE_MESSAGE, "Speed"),
        ("speed_limit", _Field.TYPE_MESSAGE, "Speed"),
        ("ip_current", _Field.TYPE_INT32, None),
        ("ip_limit", _Field.TYPE_INT32, None),
    ),
    "ListUsersRequest": (),
    "ListUsersResponse": (("status", _Field.TYPE_MESSAGE, "UserStatus"),),
}


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="trojan_go_exporter/api.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        for number, (field_name, field_type, type_name) in enumerate(fields, start=1):
            field = message.field.add(
                name=field_name,
                number=number,
                type=field_type,
                label=_Field.LABEL_OPTIONAL,
            )
            if type_name is not None:
                field.type_name = f".{PACKAGE}.{type_name}"

    service = file_proto.service.add(name=SERVICE_NAME.rsplit(".", 1)[1])
    service.method.add(
        name="ListUsers",
        input_type=f".{PACKAGE}.ListUsersRequest",
        output_type=f".{PACKAGE}.ListUsersResponse",
        server_streaming=True,
    )
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{PACKAGE}.{name}")
    )


Traffic = _message_class("Traffic")
Speed = _message_class("Speed")
User = _message_class("User")
UserStatus = _message_class("UserStatus")
ListUsersRequest = _message_class("ListUsersRequest")
ListUsersResponse = _message_class("ListUsersResponse")
