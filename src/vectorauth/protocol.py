"""Protobuf messages for the robot's ``UserAuthentication`` RPC.

Only the two messages the login exchange needs are described here, built
at import time from a :class:`~google.protobuf.descriptor_pb2.FileDescriptorProto`
that matches the robot's ``external_interface`` package:

.. code-block:: proto

    package Anki.Vector.external_interface;

    message ResponseStatus {
      enum StatusCode { UNKNOWN = 0; RESPONSE_RECEIVED = 1; REQUEST_PROCESSING = 2;
                        OK = 3; FORBIDDEN = 100; NOT_FOUND = 101;
                        ERROR_UPDATE_IN_PROGRESS = 102; }
      StatusCode code = 1;
    }

    message UserAuthenticationRequest {
      bytes user_session_id = 1;
      bytes client_name = 2;
    }

    message UserAuthenticationResponse {
      enum Code { UNAUTHORIZED = 0; AUTHORIZED = 1; }
      ResponseStatus status = 1;
      Code code = 2;
      bytes client_token_guid = 3;
    }
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "Anki.Vector.external_interface"
SERVICE = f"{PACKAGE}.ExternalInterface"
USER_AUTHENTICATION_METHOD = f"/{SERVICE}/UserAuthentication"

_Field = descriptor_pb2.FieldDescriptorProto

_STATUS_CODES = (
    ("UNKNOWN", 0),
    ("RESPONSE_RECEIVED", 1),
    ("REQUEST_PROCESSING", 2),
    ("OK", 3),
    ("FORBIDDEN", 100),
    ("NOT_FOUND", 101),
    ("ERROR_UPDATE_IN_PROGRESS", 102),
)


def _add_field(message, name, number, field_type, type_name=None):
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=_Field.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = type_name
    return field


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="vectorauth/user_authentication.proto",
        package=PACKAGE,
        syntax="proto3",
    )

    status = file_proto.message_type.add(name="ResponseStatus")
    status_code = status.enum_type.add(name="StatusCode")
    for name, number in _STATUS_CODES:
        status_code.value.add(name=name, number=number)
    _add_field(status, "code", 1, _Field.TYPE_ENUM, f".{PACKAGE}.ResponseStatus.StatusCode")

    request = file_proto.message_type.add(name="UserAuthenticationRequest")
    _add_field(request, "user_session_id", 1, _Field.TYPE_BYTES)
    _add_field(request, "client_name", 2, _Field.TYPE_BYTES)

    response = file_proto.message_type.add(name="UserAuthenticationResponse")
    code = response.enum_type.add(name="Code")
    code.value.add(name="UNAUTHORIZED", number=0)
    code.value.add(name="AUTHORIZED", number=1)
    _add_field(response, "status", 1, _Field.TYPE_MESSAGE, f".{PACKAGE}.ResponseStatus")
    _add_field(response, "code", 2, _Field.TYPE_ENUM, f".{PACKAGE}.UserAuthenticationResponse.Code")
    _add_field(response, "client_token_guid", 3, _Field.TYPE_BYTES)

    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())

ResponseStatus = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.ResponseStatus")
)
UserAuthenticationRequest = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.UserAuthenticationRequest")
)
UserAuthenticationResponse = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.UserAuthenticationResponse")
)

AUTHORIZED = (
    UserAuthenticationResponse.DESCRIPTOR.enum_types_by_name["Code"]
    .values_by_name["AUTHORIZED"].number
)
UNAUTHORIZED = (
    UserAuthenticationResponse.DESCRIPTOR.enum_types_by_name["Code"]
    .values_by_name["UNAUTHORIZED"].number
)
