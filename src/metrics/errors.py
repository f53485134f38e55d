"""
Engine Result Translation

Maps an engine ``(success, code, message)`` triple onto the exception
taxonomy in ``src.core.exceptions.engine``.

The mapping is total: every non-success result produces an exception,
and unrecognized codes keep their raw code and message in
UnknownEngineCodeError instead of being read as success.
"""

from src.core.exceptions.engine import (
    EngineError,
    EngineIOError,
    InternalError,
    InvalidParamError,
    NotFoundError,
    NotSupportedError,
    PermissionDeniedError,
    UnknownEngineCodeError,
)
from src.core.interfaces.engine import EngineResult, ResultCode

CODE_TO_ERROR: dict[int, type[EngineError]] = {
    ResultCode.NOT_SUPPORTED: NotSupportedError,
    ResultCode.PERMISSION_DENIED: PermissionDeniedError,
    ResultCode.NOT_FOUND: NotFoundError,
    ResultCode.INVALID_PARAM: InvalidParamError,
    ResultCode.IO_ERROR: EngineIOError,
    ResultCode.INTERNAL: InternalError,
}


def result_to_error(result: EngineResult) -> EngineError | None:
    """
    Translate an engine result into an exception instance (or None).

    - success → None
    - known code → the matching sentinel class, with the engine message
      attached under ``details["engine_message"]`` when present
    - failure reported with code 0 → InternalError
    - any other code → UnknownEngineCodeError(code, message)
    """
    if result.success:
        return None

    if result.code == ResultCode.OK:
        return InternalError(details={"engine_message": result.message, "code": 0})

    error_class = CODE_TO_ERROR.get(result.code)
    if error_class is None:
        return UnknownEngineCodeError(result.code, result.message)

    details = {"engine_message": result.message} if result.message else None
    return error_class(details=details)


def raise_for_result(result: EngineResult) -> None:
    """Raise the translated error for a non-success result."""
    error = result_to_error(result)
    if error is not None:
        raise error
