import logging
import time

import grpc

from trojan_go_exporter.core.api import (
    LIST_USERS_METHOD,
    ListUsersRequest,
    ListUsersResponse,
)
from trojan_go_exporter.models.user_status import UserStatus

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """Base class for failures that abort a single scrape."""


class DialError(UpstreamError):
    def __init__(self, endpoint: str, timeout: float, cause: BaseException):
        super().__init__(
            f"failed to dial {endpoint}: channel not ready (deadline exceeded), "
            f"timeout: {timeout:g}s"
        )
        self.endpoint = endpoint
        self.timeout = timeout
        self.cause = cause


class StreamReceiveError(UpstreamError):
    def __init__(self, code: grpc.StatusCode | None, details: str | None):
        name = code.name if code is not None else "UNKNOWN"
        super().__init__(f"ListUsers stream failed: {name}: {details or ''}")
        self.code = code
        self.details = details


class TrojanGoClient:
    """One-shot client for the Trojan-Go ``TrojanServerService`` API.

    Every call opens its own insecure channel and closes it before returning.
    A single deadline of ``timeout`` seconds covers both the dial and the
    stream drain.
    """

    def __init__(self, endpoint: str, timeout: float):
        self.endpoint = endpoint
        self.timeout = timeout

    def list_users(self) -> list[UserStatus]:
        deadline = time.monotonic() + self.timeout
        with grpc.insecure_channel(self.endpoint) as channel:
            try:
                grpc.channel_ready_future(channel).result(timeout=self.timeout)
            except grpc.FutureTimeoutError as exc:
                raise DialError(self.endpoint, self.timeout, exc) from exc

            list_users = channel.unary_stream(
                LIST_USERS_METHOD,
                request_serializer=ListUsersRequest.SerializeToString,
                response_deserializer=ListUsersResponse.FromString,
            )
            remaining = max(deadline - time.monotonic(), 0.0)
            users: list[UserStatus] = []
            try:
                for response in list_users(ListUsersRequest(), timeout=remaining):
                    users.append(UserStatus.from_message(response))
            except grpc.RpcError as exc:
                if isinstance(exc, grpc.Call):
                    raise StreamReceiveError(exc.code(), exc.details()) from exc
                raise StreamReceiveError(None, str(exc)) from exc

        logger.debug("Received %d user records from %s", len(users), self.endpoint)
        return users
