"""
gRPC listener serving the identity contract.

Each invocation runs in exactly one ledger transaction: the transaction is
committed when the contract returns and aborted when it raises.
"""
import logging
from concurrent import futures
from typing import Any, Dict, Optional

import grpc

from ..contract import IdentityContract
from ..exceptions import DIDLedgerError, HostError
from ..ledger.base import Ledger
from .config import HostConfig
from .wire import (
    INVOKE_METHOD_NAME, SERVICE_NAME, encode_message, error_response,
    ok_response, parse_request
)

logger = logging.getLogger(__name__)


class ContractServer:
    """
    Host process shell for the identity contract.

    Usage is one initialization step followed by one blocking run step:

        server = ContractServer(IdentityContract(), MemoryLedger(), config)
        server.initialize()
        server.serve()
    """

    def __init__(
        self,
        contract: IdentityContract,
        ledger: Ledger,
        config: Optional[HostConfig] = None
    ):
        self.contract = contract
        self.ledger = ledger
        self.config = config or HostConfig()
        self.port: Optional[int] = None
        self._server: Optional[grpc.Server] = None

    def initialize(self) -> int:
        """
        Build the gRPC server and bind the listen address.

        Returns:
            The bound port

        Raises:
            HostError: If the address cannot be bound
        """
        server = grpc.server(futures.ThreadPoolExecutor(max_workers=self.config.max_workers))
        handler = grpc.method_handlers_generic_handler(
            SERVICE_NAME,
            {
                INVOKE_METHOD_NAME: grpc.unary_unary_rpc_method_handler(
                    self._invoke,
                    response_serializer=encode_message,
                )
            },
        )
        server.add_generic_rpc_handlers((handler,))

        try:
            port = server.add_insecure_port(self.config.listen_address)
        except RuntimeError as e:
            raise HostError(f"Failed to bind {self.config.listen_address}: {e}") from e
        if not port:
            raise HostError(f"Failed to bind {self.config.listen_address}")

        self._server = server
        self.port = port
        logger.info(
            f"Identity contract host initialized on {self.config.listen_address} "
            f"(port {port}, functions: {', '.join(self.contract.functions())})"
        )
        return port

    def start(self) -> None:
        """Start serving in background threads."""
        if self._server is None:
            raise HostError("Contract server not initialized")
        self._server.start()
        logger.info(f"Identity contract host listening on port {self.port}")

    def serve(self) -> None:
        """Start serving and block until the server terminates."""
        self.start()
        self._server.wait_for_termination()

    def stop(self, grace: Optional[float] = None) -> None:
        """
        Stop serving.

        Args:
            grace: Seconds to let in-flight invocations finish
        """
        if self._server is not None:
            self._server.stop(grace).wait()
            logger.info("Identity contract host stopped")

    def _invoke(self, request: bytes, context: Any) -> Dict[str, Any]:
        """Run one invocation in its own ledger transaction"""
        try:
            function, args = parse_request(request)
            with self.ledger.transaction() as tx:
                result = self.contract.invoke(tx, function, args)
        except DIDLedgerError as e:
            logger.info(f"Invocation failed with {e.code.value}: {e.message}")
            return error_response(e)
        return ok_response(result)
