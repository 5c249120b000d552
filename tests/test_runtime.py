## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io
from pathlib import Path

import pytest

from px2.errors import Px2FileError, Px2StackError
from px2.runtime import Runtime
from px2.types import Operation, OpCode, Value, nil


def test_runtime_execute_prints_to_output():
    out = io.StringIO()
    rt = Runtime(out=out)
    stack = rt.execute("3 4 + println 10 2 / println")
    assert stack is nil
    assert out.getvalue() == "7\n5\n"


def test_runtime_compile_error_produces_no_output():
    out = io.StringIO()
    rt = Runtime(out=out)
    with pytest.raises(Px2StackError):
        rt.execute("1 println 1 +")
    assert out.getvalue() == ""


def test_runtime_compile_then_run_separately():
    rt = Runtime(out=io.StringIO())
    program = rt.compile("1 2 3 rot drop drop drop")
    assert rt.run(program) is nil
    # Programs are plain data, running twice is fine.
    assert rt.run(program) is nil


def test_runtime_apply():
    rt = Runtime()
    stack = rt.to_stack([3, 4])

    # Test with both Operation object and string name
    for op in [rt.operation('add'), 'add']:
        result = rt.apply(op, stack)
        assert rt.from_stack(result) == [7]

    stack = rt.to_stack([5])
    stack = rt.apply('dup', stack)
    stack = rt.apply(rt.operation('mul'), stack)
    assert rt.from_stack(stack) == [25]


def test_runtime_do_step_manual_program():
    rt = Runtime()
    stack = rt.to_stack([])
    for op in [rt.constant(2), rt.constant(3), rt.operation('sub')]:
        stack = rt.do_step(op, stack)
    assert rt.from_stack(stack) == [-1]


def test_runtime_operation_builds_push():
    rt = Runtime()
    assert rt.operation('push', True) == Operation(OpCode.PUSH, Value.from_bool(True))
    assert rt.is_operation(rt.operation('println'))
    with pytest.raises(ValueError):
        rt.operation('jump')


def test_runtime_can_step_checks_values():
    rt = Runtime()
    ok, msg = rt.can_step(rt.operation('add'), rt.to_stack([1, 2]))
    assert ok, msg

    ok, msg = rt.can_step(rt.operation('add'), rt.to_stack([True, 2]))
    assert not ok
    assert msg == "expected integer on top of the stack to perform addition, found Bool"

    ok, msg = rt.can_step(rt.operation('rot'), rt.to_stack([1, 2]))
    assert not ok
    assert msg == "need 3 elements on the stack to perform rot but found 2"


def test_runtime_stack_conversion():
    rt = Runtime()
    stack = rt.to_stack([1, True, 3])
    assert stack.head == Value.from_int(1)
    assert rt.from_stack(stack) == [1, True, 3]
    assert rt.is_empty(rt.to_stack([]))


def test_load_source_file(tmp_path: Path):
    program = tmp_path / "prog.px2"
    program.write_text("1 println\n", encoding="utf-8")
    assert Runtime().load_source_file(program) == "1 println\n"


def test_load_source_file_rejects_extension(tmp_path: Path):
    program = tmp_path / "prog.txt"
    program.write_text("1 println\n", encoding="utf-8")
    with pytest.raises(Px2FileError, match="was not a '.px2' file"):
        Runtime().load_source_file(program)


def test_load_source_file_missing(tmp_path: Path):
    with pytest.raises(Px2FileError, match="does not exist"):
        Runtime().load_source_file(tmp_path / "missing.px2")


def test_load_source_file_unreadable(tmp_path: Path):
    program = tmp_path / "binary.px2"
    program.write_bytes(b"\xff\xfe\x00")
    with pytest.raises(Px2FileError, match="Error reading file"):
        Runtime().load_source_file(program)


def test_file_error_is_os_error(tmp_path: Path):
    with pytest.raises(OSError) as info:
        Runtime().load_source_file(tmp_path / "missing.px2")
    assert isinstance(info.value, Px2FileError)
    assert str(info.value) == f"Given file \"{tmp_path / 'missing.px2'}\" does not exist"
