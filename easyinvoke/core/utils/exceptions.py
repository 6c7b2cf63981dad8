#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception taxonomy for easyinvoke.

Three categories surface to callers:

- ``DescriptorError``: a descriptor could not be turned into an invoker
  (missing method, duplicate infrastructure role, unsupported signature).
- ``InvalidOperationError``: call-time validation failed before the operation
  was touched.
- The operation's own exception, unwrapped from ``TargetInvocationError``.

Author: easyinvoke maintainers
"""

from typing import Any, Dict, Optional


class EasyInvokeError(Exception):
    """
    Base class for all framework-raised errors.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {
            key: value for key, value in context.items() if value is not None
        }

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(
            "{0}={1!r}".format(key, value) for key, value in sorted(self.context.items())
        )
        return "{0} ({1})".format(self.message, details)


class DescriptorError(EasyInvokeError, ValueError):
    """
    Raised when an operation or method descriptor is unusable.
    """

    def __init__(
        self,
        message: str,
        operation_name: Optional[str] = None,
        method_name: Optional[str] = None,
        parameter_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            operation_name=operation_name,
            method_name=method_name,
            parameter_name=parameter_name,
        )
        self.operation_name = operation_name
        self.method_name = method_name
        self.parameter_name = parameter_name


class InvalidOperationError(EasyInvokeError):
    """
    Raised when a call is rejected before the underlying operation runs.
    """

    def __init__(
        self,
        message: str,
        operation_name: Optional[str] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            operation_name=operation_name,
            expected=expected,
            actual=actual,
        )
        self.operation_name = operation_name
        self.expected = expected
        self.actual = actual


class TargetInvocationError(EasyInvokeError):
    """
    Envelope around an exception raised by an invoked method body.

    Shims never let this envelope escape; they re-raise ``inner_exception``.
    """

    def __init__(self, inner_exception: BaseException, method_name: Optional[str] = None) -> None:
        super().__init__(
            "Method '{0}' raised {1}".format(
                method_name or "<unknown>", type(inner_exception).__name__
            ),
            method_name=method_name,
        )
        self.inner_exception = inner_exception
        self.method_name = method_name


class ExceptionTranslator:
    """
    Helpers for converting between envelopes and caller-facing errors.
    """

    @staticmethod
    def unwrap_invocation_error(exc: BaseException) -> BaseException:
        """
        Return the innermost operation exception carried by nested envelopes.

        The returned exception keeps its own ``__traceback__``, so
        ``raise inner.with_traceback(inner.__traceback__)`` preserves the frames
        of the failing operation.
        """
        current = exc
        while isinstance(current, TargetInvocationError):
            current = current.inner_exception
        return current

    @staticmethod
    def argument_count_mismatch(
        operation_name: Optional[str], expected: int, actual: int
    ) -> InvalidOperationError:
        return InvalidOperationError(
            "Invalid number of input parameters",
            operation_name=operation_name,
            expected=expected,
            actual=actual,
        )


__all__ = [
    "EasyInvokeError",
    "DescriptorError",
    "InvalidOperationError",
    "TargetInvocationError",
    "ExceptionTranslator",
]
