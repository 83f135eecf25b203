"""Custom exception classes for create2-deployer library."""


class Create2Error(Exception):
    """Base exception for create2-deployer errors."""

    pass


class InvalidSaltError(Create2Error, ValueError):
    """Raised when a salt is malformed or does not fit in 32 bytes."""

    pass


class EncodingError(Create2Error, ValueError):
    """Raised when constructor arguments cannot be ABI-encoded."""

    pass


class InvalidInputLengthError(Create2Error, ValueError):
    """Raised when an address, salt or bytecode has the wrong length or is not valid hex."""

    pass


class ConfigurationError(Create2Error, ValueError):
    """Raised when required configuration (e.g. the deployer key) is missing."""

    pass


class RpcError(Create2Error, RuntimeError):
    """Raised when a JSON-RPC request fails or returns an error object."""

    pass


class TransactionTimeoutError(RpcError):
    """Raised when a transaction is not mined within the receipt timeout."""

    pass


class DeploymentFailedError(Create2Error, RuntimeError):
    """Raised when a deployment transaction is rejected or reverts on-chain."""

    pass


class EventNotFoundError(DeploymentFailedError):
    """Raised when the expected event is missing from the ABI or the receipt logs."""

    pass


class AddressMismatchError(Create2Error, AssertionError):
    """
    Raised when the address observed on-chain differs from the predicted one.

    This always indicates a bug in address derivation or an unexpected
    factory contract, and is never retried.
    """

    def __init__(self, predicted: str, actual: str, message: str = ""):
        self.predicted = predicted
        self.actual = actual
        super().__init__(
            message or f"Predicted address {predicted} does not match deployed address {actual}"
        )


class FactoryAddressMismatchError(AddressMismatchError):
    """Raised when the bootstrap deployment does not land at the configured factory address."""

    pass
