"""Tests for stack push/pop."""

import jax.numpy as jnp
from chipvm import STACK_SIZE
from chipvm.state import create_stack
from chipvm.stack import push, pop


def test_push_then_pop():
    stack, overflow = push(create_stack(), jnp.uint16(0x234))
    assert not overflow
    assert stack.pointer == 1

    stack, address, underflow = pop(stack)
    assert not underflow
    assert address == 0x234
    assert stack.pointer == 0
    assert stack.data[0] == 0


def test_push_full_stack_overflows():
    stack = create_stack()
    for i in range(STACK_SIZE):
        stack, overflow = push(stack, jnp.uint16(0x200 + 2 * i))
        assert not overflow

    full_data = stack.data
    stack, overflow = push(stack, jnp.uint16(0xABC))

    assert overflow
    assert stack.pointer == STACK_SIZE
    assert jnp.array_equal(stack.data, full_data)


def test_pop_empty_stack_underflows():
    stack, _, underflow = pop(create_stack())
    assert underflow
    assert stack.pointer == 0


def test_pop_is_last_in_first_out():
    stack = create_stack()
    for address in (0x202, 0x304, 0x406):
        stack, _ = push(stack, jnp.uint16(address))

    popped = []
    for _ in range(3):
        stack, address, _ = pop(stack)
        popped.append(int(address))

    assert popped == [0x406, 0x304, 0x202]
