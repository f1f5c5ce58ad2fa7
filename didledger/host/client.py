"""
gRPC client for invoking the identity contract through a host.
"""
import logging
from typing import Optional

import grpc

from ..exceptions import HostConnectionError, HostError, HostTimeoutError
from ..models import DIDRecord
from .wire import INVOKE_METHOD, build_request, decode_message, encode_message, parse_response

logger = logging.getLogger(__name__)


class ContractClient:
    """
    Client for a running contract host.

    Contract errors returned by the host are raised as the same typed
    exceptions the contract raises in-process (NotFoundError,
    AlreadyExistsError, ...). Transport failures raise HostError subclasses.
    """

    def __init__(self, address: str, timeout: float = 5.0):
        """
        Initialize the client.

        Args:
            address: host:port of the contract host
            timeout: Deadline for each invocation in seconds
        """
        self.address = address
        self.timeout = timeout
        self.channel = grpc.insecure_channel(address)
        self._invoke_rpc = self.channel.unary_unary(
            INVOKE_METHOD,
            request_serializer=encode_message,
            response_deserializer=decode_message,
        )

    def invoke(self, function: str, *args: str) -> Optional[DIDRecord]:
        """
        Invoke a contract function by name.

        Args:
            function: Operation name, e.g. "GetDID"
            *args: Operation arguments

        Returns:
            The returned record, or None

        Raises:
            DIDLedgerError: Typed error returned by the contract
            HostTimeoutError: If the deadline is exceeded
            HostConnectionError: If the host is unavailable
            HostError: For other transport errors
        """
        logger.debug(f"Invoking {function} on {self.address}")
        try:
            response = self._invoke_rpc(build_request(function, list(args)), timeout=self.timeout)
        except grpc.RpcError as e:
            if e.code() == grpc.StatusCode.DEADLINE_EXCEEDED:
                raise HostTimeoutError(f"{function} timed out after {self.timeout}s") from e
            elif e.code() == grpc.StatusCode.UNAVAILABLE:
                raise HostConnectionError(f"Contract host unavailable: {e.details()}") from e
            raise HostError(f"gRPC error during {function}: {e.code()} - {e.details()}") from e
        return parse_response(response)

    def create_did(self, did: str, name: str, credentials: str) -> None:
        self.invoke("CreateDID", did, name, credentials)

    def update_credentials(self, did: str, new_credentials: str) -> None:
        self.invoke("UpdateCredentials", did, new_credentials)

    def verify_did(self, did: str) -> None:
        self.invoke("VerifyDID", did)

    def revoke_did(self, did: str) -> None:
        self.invoke("RevokeDID", did)

    def get_did(self, did: str) -> DIDRecord:
        record = self.invoke("GetDID", did)
        if record is None:
            raise HostError(f"GetDID returned no record for {did}")
        return record

    def close(self) -> None:
        """Close the channel."""
        self.channel.close()

    def __enter__(self) -> "ContractClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
