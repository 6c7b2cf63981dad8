#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Operation description models.

These are the only shapes the dispatcher needs from a contract-description
layer: a method is a list of parameters with a flow direction and a role, plus
a callable that performs the actual invocation over a full-width argument list.
Descriptors can be produced by ``easyinvoke.contracts.reflector`` or built by
hand.

Author: easyinvoke maintainers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..core.utils.exceptions import DescriptorError

MethodInvoker = Callable[[Any, List[Any]], Any]


class ParameterDirection(str, Enum):
    """
    Which way data flows through a parameter.
    """

    IN = "in"
    OUT = "out"
    IN_OUT = "in_out"


class ParameterRole(str, Enum):
    """
    Whether a parameter is caller-visible or two-phase plumbing.
    """

    ARGUMENT = "argument"
    CALLBACK = "callback"
    STATE = "state"
    ASYNC_RESULT = "async_result"

    @property
    def is_infrastructure(self) -> bool:
        return self is not ParameterRole.ARGUMENT


@dataclass(frozen=True)
class ParameterDescriptor:
    name: str
    position: int
    direction: ParameterDirection = ParameterDirection.IN
    role: ParameterRole = ParameterRole.ARGUMENT


@dataclass(frozen=True)
class MethodDescriptor:
    """
    One invocable method.

    ``invoker(target, arguments)`` receives a list with one slot per declared
    parameter. By-reference outputs are written back into that list. A failure
    of the method body may be delivered wrapped in ``TargetInvocationError``.
    """

    name: str
    invoker: MethodInvoker
    parameters: Tuple[ParameterDescriptor, ...] = field(default_factory=tuple)
    returns_value: bool = True

    def __post_init__(self) -> None:
        if not callable(self.invoker):
            raise DescriptorError("Method invoker must be callable", method_name=self.name)
        params = tuple(self.parameters)
        for index, param in enumerate(params):
            if param.position != index:
                raise DescriptorError(
                    "Parameter positions must be contiguous and in declaration order",
                    method_name=self.name,
                    parameter_name=param.name,
                )
        object.__setattr__(self, "parameters", params)

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    def invoke(self, target: Any, arguments: Optional[List[Any]]) -> Any:
        return self.invoker(target, arguments if arguments is not None else [])

    def with_roles(self, roles: Sequence[Optional[ParameterRole]]) -> "MethodDescriptor":
        """
        Return a copy with roles assigned to the trailing parameters.

        ``roles`` lines up with the last ``len(roles)`` parameters; ``None``
        entries keep the existing role.
        """
        if len(roles) > len(self.parameters):
            raise DescriptorError(
                "Method declares {0} parameters, cannot assign {1} trailing roles".format(
                    len(self.parameters), len(roles)
                ),
                method_name=self.name,
            )
        offset = len(self.parameters) - len(roles)
        updated = list(self.parameters)
        for index, role in enumerate(roles):
            if role is not None:
                param = updated[offset + index]
                updated[offset + index] = ParameterDescriptor(
                    name=param.name,
                    position=param.position,
                    direction=param.direction,
                    role=role,
                )
        return MethodDescriptor(
            name=self.name,
            invoker=self.invoker,
            parameters=tuple(updated),
            returns_value=self.returns_value,
        )


@dataclass(frozen=True)
class OperationDescriptor:
    """
    A resolved service operation.

    ``method`` is the sole method of a synchronous operation, or the begin
    method of a two-phase one; ``end_method`` is set only for the latter.
    """

    method: MethodDescriptor
    end_method: Optional[MethodDescriptor] = None
    name: str = ""

    def __post_init__(self) -> None:
        if self.method is None:
            raise DescriptorError("Operation method cannot be None", operation_name=self.name or None)
        if not self.name:
            object.__setattr__(self, "name", self.method.name)

    @property
    def is_two_phase(self) -> bool:
        return self.end_method is not None

    @classmethod
    def synchronous(cls, method: MethodDescriptor, name: str = "") -> "OperationDescriptor":
        return cls(method=method, name=name)

    @classmethod
    def two_phase(
        cls,
        begin_method: MethodDescriptor,
        end_method: MethodDescriptor,
        name: str = "",
    ) -> "OperationDescriptor":
        if begin_method is None:
            raise DescriptorError("Begin method cannot be None", operation_name=name or None)
        if end_method is None:
            raise DescriptorError("End method cannot be None", operation_name=name or begin_method.name)
        return cls(method=begin_method, end_method=end_method, name=name)
