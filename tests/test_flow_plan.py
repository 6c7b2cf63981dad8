#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for parameter flow classification and descriptor validation.

Author: easyinvoke maintainers
"""

import pytest

from easyinvoke.contracts import (
    MethodDescriptor,
    OperationDescriptor,
    ParameterDescriptor,
    ParameterDirection,
    ParameterFlowClassifier,
    ParameterRole,
)
from easyinvoke.core.utils.exceptions import DescriptorError
from easyinvoke.dispatcher import build_flow_plan

IN = ParameterDirection.IN
OUT = ParameterDirection.OUT
IN_OUT = ParameterDirection.IN_OUT


def _noop(target, arguments):
    return None


def _method(name, *specs, returns_value=True):
    parameters = []
    for position, spec in enumerate(specs):
        param_name, direction = spec[0], spec[1]
        role = spec[2] if len(spec) > 2 else ParameterRole.ARGUMENT
        parameters.append(
            ParameterDescriptor(name=param_name, position=position, direction=direction, role=role)
        )
    return MethodDescriptor(
        name=name,
        invoker=_noop,
        parameters=tuple(parameters),
        returns_value=returns_value,
    )


def test_in_out_parameter_lands_in_both_lists():
    method = _method("mixed", ("a", IN), ("b", OUT), ("c", IN_OUT), ("d", IN))

    plan = build_flow_plan(method)

    assert plan.parameter_count == 4
    assert plan.input_positions == (0, 2, 3)
    assert plan.output_positions == (1, 2)
    assert plan.input_count == 3
    assert plan.output_count == 2


def test_plan_is_stable_across_rebuilds():
    method = _method("mixed", ("a", IN), ("b", OUT), ("c", IN_OUT))

    assert build_flow_plan(method) == build_flow_plan(method)


def test_infrastructure_roles_are_excluded_wherever_declared():
    method = _method(
        "begin_scatter",
        ("callback", IN, ParameterRole.CALLBACK),
        ("a", IN),
        ("state", IN, ParameterRole.STATE),
        ("b", IN),
    )

    plan = build_flow_plan(method)

    assert plan.input_positions == (1, 3)
    assert plan.input_count == 2
    assert plan.callback_position == 0
    assert plan.state_position == 2
    assert plan.async_result_position is None


def test_async_result_role_is_not_an_output():
    method = _method(
        "end_op",
        ("remainder", OUT),
        ("result", IN, ParameterRole.ASYNC_RESULT),
    )

    plan = build_flow_plan(method)

    assert plan.output_positions == (0,)
    assert plan.input_positions == ()
    assert plan.async_result_position == 1


def test_duplicate_infrastructure_role_is_rejected():
    method = _method(
        "begin_bad",
        ("first", IN, ParameterRole.CALLBACK),
        ("second", IN, ParameterRole.CALLBACK),
    )

    with pytest.raises(DescriptorError) as info:
        build_flow_plan(method)

    assert info.value.parameter_name == "second"


def test_custom_classifier_is_consulted():
    class EverythingFlowsBothWays(ParameterFlowClassifier):
        def flows_in(self, parameter):
            return True

        def flows_out(self, parameter):
            return True

    method = _method("echo", ("a", IN), ("b", OUT))

    plan = build_flow_plan(method, EverythingFlowsBothWays())

    assert plan.input_positions == (0, 1)
    assert plan.output_positions == (0, 1)


def test_zero_parameter_method():
    plan = build_flow_plan(_method("ping", returns_value=False))

    assert plan.parameter_count == 0
    assert plan.input_count == 0
    assert plan.output_count == 0
    assert plan.returns_value is False


def test_method_descriptor_requires_contiguous_positions():
    with pytest.raises(DescriptorError):
        MethodDescriptor(
            name="gappy",
            invoker=_noop,
            parameters=(ParameterDescriptor(name="a", position=1),),
        )


def test_method_descriptor_requires_callable_invoker():
    with pytest.raises(DescriptorError):
        MethodDescriptor(name="broken", invoker="not callable")


def test_operation_descriptor_rejects_missing_methods():
    method = _method("op", ("a", IN))

    with pytest.raises(DescriptorError):
        OperationDescriptor(method=None)
    with pytest.raises(DescriptorError):
        OperationDescriptor.two_phase(method, None)
    with pytest.raises(DescriptorError):
        OperationDescriptor.two_phase(None, method)


def test_operation_descriptor_defaults_name_and_shape():
    begin = _method("begin_op", ("a", IN))
    end = _method("end_op")

    sync_op = OperationDescriptor.synchronous(begin)
    two_phase = OperationDescriptor.two_phase(begin, end, name="op")

    assert sync_op.name == "begin_op"
    assert sync_op.is_two_phase is False
    assert two_phase.name == "op"
    assert two_phase.is_two_phase is True


def test_with_roles_assigns_trailing_parameters():
    method = _method("begin_op", ("a", IN), ("cb", IN), ("st", IN))

    updated = method.with_roles([ParameterRole.CALLBACK, ParameterRole.STATE])

    assert [p.role for p in updated.parameters] == [
        ParameterRole.ARGUMENT,
        ParameterRole.CALLBACK,
        ParameterRole.STATE,
    ]
    assert method.parameters[1].role is ParameterRole.ARGUMENT

    with pytest.raises(DescriptorError):
        _method("short", ("a", IN)).with_roles([ParameterRole.CALLBACK, ParameterRole.STATE])
