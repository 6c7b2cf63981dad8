#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for describing plain Python methods as operations.

Author: easyinvoke maintainers
"""

from __future__ import annotations

import pytest

from easyinvoke.contracts import (
    AsyncCallback,
    AsyncResult,
    AsyncState,
    InOut,
    Out,
    ParameterDirection,
    ParameterRole,
    Reference,
    ServiceReflector,
    describe_operation,
    reflect_method,
)
from easyinvoke.contracts.models import ParameterDescriptor
from easyinvoke.core.utils.exceptions import DescriptorError, TargetInvocationError


class Inventory:
    def __init__(self):
        self.stock = {"apple": 3}

    def take(self, item: str, count: int, remaining: Out[int]) -> bool:
        available = self.stock.get(item, 0)
        if count > available:
            remaining.value = available
            return False
        self.stock[item] = available - count
        remaining.value = self.stock[item]
        return True

    def restock(self, item: str, level: InOut) -> None:
        level.value = level.value + self.stock.get(item, 0)

    def fail(self, reason: str) -> str:
        raise LookupError(reason)

    def begin_audit(self, on_done: AsyncCallback, item: str, token: AsyncState[dict]):
        on_done(item)

    def end_audit(self, handle: AsyncResult, count: Out[int]) -> str:
        count.value = self.stock.get(handle, 0)
        return handle

    def legacy_begin_count(self, item, callback, state):
        callback(item)

    def legacy_end_count(self, result) -> int:
        return self.stock.get(result, 0)

    def variadic(self, *items):
        return items


def test_reflect_method_reads_directions_and_return_annotation():
    method = reflect_method(Inventory.take)

    assert method.name == "take"
    assert [p.name for p in method.parameters] == ["item", "count", "remaining"]
    assert [p.direction for p in method.parameters] == [
        ParameterDirection.IN,
        ParameterDirection.IN,
        ParameterDirection.OUT,
    ]
    assert method.returns_value is True
    assert reflect_method(Inventory.restock).returns_value is False


def test_reflected_invoker_writes_references_back():
    method = reflect_method(Inventory.take)
    inventory = Inventory()
    arguments = ["apple", 2, None]

    assert method.invoke(inventory, arguments) is True
    assert arguments == ["apple", 2, 1]

    restock = reflect_method(Inventory.restock)
    arguments = ["apple", 10]
    restock.invoke(inventory, arguments)
    assert arguments == ["apple", 11]


def test_reflected_invoker_wraps_body_failures():
    method = reflect_method(Inventory.fail)

    with pytest.raises(TargetInvocationError) as info:
        method.invoke(Inventory(), ["gone"])

    assert isinstance(info.value.inner_exception, LookupError)
    assert info.value.method_name == "fail"


def test_role_annotations_anywhere_in_the_signature():
    operation = describe_operation(begin=Inventory.begin_audit, end=Inventory.end_audit)

    roles = [p.role for p in operation.method.parameters]
    assert roles == [ParameterRole.CALLBACK, ParameterRole.ARGUMENT, ParameterRole.STATE]
    assert operation.end_method.parameters[0].role is ParameterRole.ASYNC_RESULT
    assert operation.name == "audit"


def test_legacy_two_phase_convention_assigns_trailing_roles():
    operation = describe_operation(
        begin=Inventory.legacy_begin_count,
        end=Inventory.legacy_end_count,
        name="count",
    )

    assert [p.role for p in operation.method.parameters] == [
        ParameterRole.ARGUMENT,
        ParameterRole.CALLBACK,
        ParameterRole.STATE,
    ]
    assert [p.role for p in operation.end_method.parameters] == [ParameterRole.ASYNC_RESULT]
    assert operation.name == "count"
    assert operation.is_two_phase


def test_describe_operation_argument_errors():
    with pytest.raises(DescriptorError):
        describe_operation(Inventory.take, begin=Inventory.legacy_begin_count)
    with pytest.raises(DescriptorError):
        describe_operation(begin=Inventory.legacy_begin_count)
    with pytest.raises(DescriptorError):
        reflect_method(Inventory.variadic)
    with pytest.raises(DescriptorError):
        reflect_method(lambda: None)


def test_service_reflector_predicates_are_independent():
    reflector = ServiceReflector()
    in_out = ParameterDescriptor(name="x", position=0, direction=ParameterDirection.IN_OUT)
    out = ParameterDescriptor(name="y", position=1, direction=ParameterDirection.OUT)
    plain = ParameterDescriptor(name="z", position=2)

    assert reflector.flows_in(in_out) and reflector.flows_out(in_out)
    assert not reflector.flows_in(out) and reflector.flows_out(out)
    assert reflector.flows_in(plain) and not reflector.flows_out(plain)


def test_reference_cell():
    ref = Reference(5)
    ref.value += 1

    assert ref.value == 6
    assert repr(ref) == "Reference(6)"
    assert Reference().value is None
