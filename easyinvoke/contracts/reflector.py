#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Reflection helpers that describe plain Python methods as operations.

Python has no by-reference parameters, so output parameters are modelled with
``Reference`` cells and annotation markers:

    class Calculator:
        def divide(self, a: int, b: int, remainder: Out[int]) -> int:
            remainder.value = a % b
            return a // b

        def begin_divide(self, a: int, b: int, callback: AsyncCallback, state: AsyncState):
            ...

        def end_divide(self, remainder: Out[int], result: AsyncResult) -> int:
            ...

Markers may be used bare (``Out``) or subscripted (``Out[int]``).

Author: easyinvoke maintainers
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from ..core.utils.exceptions import DescriptorError, TargetInvocationError
from .models import (
    MethodDescriptor,
    OperationDescriptor,
    ParameterDescriptor,
    ParameterDirection,
    ParameterRole,
)

T = TypeVar("T")


class ParameterFlowClassifier(ABC):
    """
    Answers, independently, whether a parameter flows into and out of a call.
    """

    @abstractmethod
    def flows_in(self, parameter: ParameterDescriptor) -> bool:
        """
        Return True if the caller supplies a value for this parameter.
        """

    @abstractmethod
    def flows_out(self, parameter: ParameterDescriptor) -> bool:
        """
        Return True if the call produces a value the caller should observe.
        """


class ServiceReflector(ParameterFlowClassifier):
    """
    Direction-based classifier: ``IN_OUT`` parameters flow both ways.
    """

    def flows_in(self, parameter: ParameterDescriptor) -> bool:
        return parameter.direction in (ParameterDirection.IN, ParameterDirection.IN_OUT)

    def flows_out(self, parameter: ParameterDescriptor) -> bool:
        return parameter.direction in (ParameterDirection.OUT, ParameterDirection.IN_OUT)


DEFAULT_CLASSIFIER = ServiceReflector()


class Reference(Generic[T]):
    """
    Mutable cell passed for ``Out``/``InOut`` parameters.
    """

    __slots__ = ("value",)

    def __init__(self, value: Optional[T] = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return "Reference({0!r})".format(self.value)


@dataclass(frozen=True)
class _MarkedAnnotation:
    marker: type
    inner: Any


class _ParameterMarker:
    direction: Optional[ParameterDirection] = None
    role: Optional[ParameterRole] = None

    def __class_getitem__(cls, item: Any) -> _MarkedAnnotation:
        return _MarkedAnnotation(cls, item)


class Out(_ParameterMarker):
    direction = ParameterDirection.OUT


class InOut(_ParameterMarker):
    direction = ParameterDirection.IN_OUT


class AsyncCallback(_ParameterMarker):
    role = ParameterRole.CALLBACK


class AsyncState(_ParameterMarker):
    role = ParameterRole.STATE


class AsyncResult(_ParameterMarker):
    role = ParameterRole.ASYNC_RESULT


def _marker_of(annotation: Any) -> Optional[type]:
    if isinstance(annotation, _MarkedAnnotation):
        return annotation.marker
    if inspect.isclass(annotation) and issubclass(annotation, _ParameterMarker):
        return annotation
    return None


def _describe_parameter(parameter: inspect.Parameter, position: int, method_name: str) -> ParameterDescriptor:
    if parameter.kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        raise DescriptorError(
            "Only positional parameters can be described, got {0}".format(parameter.kind.description),
            method_name=method_name,
            parameter_name=parameter.name,
        )

    marker = _marker_of(parameter.annotation)
    return ParameterDescriptor(
        name=parameter.name,
        position=position,
        direction=(marker.direction if marker is not None and marker.direction else ParameterDirection.IN),
        role=(marker.role if marker is not None and marker.role else ParameterRole.ARGUMENT),
    )


def reflect_method(func: Callable[..., Any], name: Optional[str] = None) -> MethodDescriptor:
    """
    Describe an unbound instance method.

    The first parameter receives the service instance and is not part of the
    descriptor. A ``-> None`` return annotation marks the method as returning
    no value.
    """
    method_name = name or getattr(func, "__name__", repr(func))
    try:
        signature = inspect.signature(func, eval_str=True)
    except (NameError, TypeError, ValueError) as exc:
        raise DescriptorError(
            "Cannot inspect signature: {0}".format(exc), method_name=method_name
        ) from exc

    declared = list(signature.parameters.values())
    if not declared:
        raise DescriptorError(
            "Method must accept the service instance as its first parameter",
            method_name=method_name,
        )

    parameters = tuple(
        _describe_parameter(parameter, position, method_name)
        for position, parameter in enumerate(declared[1:])
    )
    by_reference = tuple(
        p.position for p in parameters if p.direction is not ParameterDirection.IN
    )
    returns_value = signature.return_annotation not in (None, type(None))

    def invoker(target: Any, arguments: List[Any]) -> Any:
        call_args = list(arguments)
        for position in by_reference:
            call_args[position] = Reference(arguments[position])
        try:
            result = func(target, *call_args)
        except Exception as exc:
            raise TargetInvocationError(exc, method_name=method_name) from exc
        for position in by_reference:
            arguments[position] = call_args[position].value
        return result

    return MethodDescriptor(
        name=method_name,
        invoker=invoker,
        parameters=parameters,
        returns_value=returns_value,
    )


def _has_role(method: MethodDescriptor, *roles: ParameterRole) -> bool:
    return any(p.role in roles for p in method.parameters)


def describe_operation(
    method: Optional[Callable[..., Any]] = None,
    *,
    begin: Optional[Callable[..., Any]] = None,
    end: Optional[Callable[..., Any]] = None,
    name: Optional[str] = None,
) -> OperationDescriptor:
    """
    Build an ``OperationDescriptor`` from one method or a begin/end pair.

    Begin/end methods without role annotations follow the legacy convention:
    the begin method ends with ``(callback, state)`` and the end method ends
    with the async result.
    """
    if method is not None:
        if begin is not None or end is not None:
            raise DescriptorError(
                "Pass either a single method or a begin/end pair, not both",
                operation_name=name,
            )
        return OperationDescriptor.synchronous(reflect_method(method), name=name or "")

    if begin is None or end is None:
        raise DescriptorError(
            "Two-phase operations need both a begin and an end method",
            operation_name=name,
        )

    begin_method = reflect_method(begin)
    if not _has_role(begin_method, ParameterRole.CALLBACK, ParameterRole.STATE):
        begin_method = begin_method.with_roles([ParameterRole.CALLBACK, ParameterRole.STATE])

    end_method = reflect_method(end)
    if not _has_role(end_method, ParameterRole.ASYNC_RESULT):
        end_method = end_method.with_roles([ParameterRole.ASYNC_RESULT])

    operation_name = name
    if not operation_name:
        operation_name = begin_method.name
        if operation_name.lower().startswith("begin_"):
            operation_name = operation_name[len("begin_"):]
    return OperationDescriptor.two_phase(begin_method, end_method, name=operation_name)


__all__ = [
    "ParameterFlowClassifier",
    "ServiceReflector",
    "DEFAULT_CLASSIFIER",
    "Reference",
    "Out",
    "InOut",
    "AsyncCallback",
    "AsyncState",
    "AsyncResult",
    "reflect_method",
    "describe_operation",
]
