## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from px2.types import DataType, Operation, OpCode, Stack, Value, nil, list_to_stack, stack_to_list, stack_depth
from px2.validating import get_stack_effect


def test_stack_construction_and_accessors():
    s1 = Stack(nil, 5)
    assert s1.head == 5
    assert s1.tail is nil

    s2 = s1.pushed(10, 20)
    assert s2.head == 20
    assert s2.tail.head == 10
    assert stack_to_list(s2) == [20, 10, 5]
    assert stack_depth(s2) == 3
    assert stack_depth(nil) == 0


def test_stack_nil_is_singleton():
    assert list_to_stack([]) is nil
    with pytest.raises(ValueError):
        Stack(None, None)
    with pytest.raises(TypeError):
        bool(nil)


def test_stack_repr():
    assert repr(nil) == "< nil >"
    assert repr(list_to_stack([2, 1])) == "< 1 2 >"


def test_value_tags_and_display():
    assert str(Value.from_int(-12)) == "-12"
    assert str(Value.from_bool(True)) == "true"
    assert str(Value.from_bool(False)) == "false"
    assert Value.of(True).type is DataType.BOOL
    assert Value.of(1).type is DataType.INT
    # Same payload under different tags are different values.
    assert Value.of(1) != Value.of(True)
    with pytest.raises(TypeError):
        Value.of(1.5)


def test_operation_display():
    assert str(Operation(OpCode.PUSH, Value.from_int(3))) == "push 3"
    assert str(Operation(OpCode.PUSH, Value.from_bool(False))) == "push false"
    assert [str(Operation(code)) for code in OpCode if code is not OpCode.PUSH] == [
        'add', 'sub', 'mul', 'div', 'dup', 'drop', 'over', 'rot', 'swap', 'println']


def test_stack_effects_declared_for_every_opcode():
    for code in OpCode:
        effect = get_stack_effect(code)
        assert effect['arity'] == len(effect['inputs'])
        assert effect['valency'] == len(effect['outputs'])
    assert get_stack_effect(OpCode.ADD)['inputs'] == [DataType.INT, DataType.INT]
    assert get_stack_effect(OpCode.ROTATE)['arity'] == 3
