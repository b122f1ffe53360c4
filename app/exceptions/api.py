class ApiError(Exception):
    """
    Uniform failure raised by the API client and the sequential service.

    ``step`` is 0 for the initial call of a chain and ``k`` for the call
    built by the k-th request builder. It stays ``None`` outside a chain.
    """

    message: str = "API call failed."

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        cause: BaseException | None = None,
        step: int | None = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.status_code = status_code
        self.body = body
        self.cause = cause
        self.step = step
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.step is not None:
            parts.append(f"step={self.step}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.cause is not None:
            parts.append(f"cause={self.cause!r}")
        return " | ".join(parts)


class RequestFailedError(ApiError):
    message = "Request failed."


class UnsupportedMethodError(ApiError):
    message = "Unsupported HTTP method."


class SerializationError(ApiError):
    message = "Could not serialize or deserialize the body."


class ConversionError(SerializationError):
    message = "Could not convert the response body to the requested type."


class TransportError(ApiError):
    message = "HTTP communication error."


class ChainTimeoutError(TransportError):
    message = "Sequential call chain timed out."


class RequestBuildError(ApiError):
    message = "Could not build the next request."
