from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator

import grpc

from trojan_go_exporter.core import api

ListUsersHandler = Callable[[object, grpc.ServicerContext], Iterator[object]]


def make_response(
    user_hash: str,
    upload: int,
    download: int,
    speed: tuple[int, int] | None = None,
):
    response = api.ListUsersResponse()
    response.status.user.hash = user_hash
    response.status.traffic_total.upload_traffic = upload
    response.status.traffic_total.download_traffic = download
    if speed is not None:
        response.status.speed_current.SetInParent()
        response.status.speed_current.upload_speed = speed[0]
        response.status.speed_current.download_speed = speed[1]
    return response


@dataclass
class TrojanGoServer:
    """In-process gRPC server speaking the ListUsers contract."""

    endpoint: str
    server: grpc.Server
    responses: list = field(default_factory=list)
    handler: ListUsersHandler | None = None

    def list_users(self, request, context):
        if self.handler is not None:
            yield from self.handler(request, context)
            return
        yield from self.responses

    def generic_handler(self) -> grpc.GenericRpcHandler:
        return grpc.method_handlers_generic_handler(
            api.SERVICE_NAME,
            {
                "ListUsers": grpc.unary_stream_rpc_method_handler(
                    self.list_users,
                    request_deserializer=api.ListUsersRequest.FromString,
                    response_serializer=api.ListUsersResponse.SerializeToString,
                )
            },
        )


class TrackedChannel:
    """Delegating channel wrapper that records when its scope is exited."""

    def __init__(self, channel: grpc.Channel, released: list[str], target: str):
        self._channel = channel
        self._released = released
        self._target = target

    def __getattr__(self, name):
        return getattr(self._channel, name)

    def __enter__(self):
        self._channel.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            return self._channel.__exit__(exc_type, exc_val, exc_tb)
        finally:
            self._released.append(self._target)
