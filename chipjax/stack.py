"""CHIP-8 stack operations.

Depth is unchecked: the pointer wraps around the 16 slots, so a seventeenth
nested call overwrites the first return address.
"""

import jax.numpy as jnp
from chipjax.constants import STACK_SIZE
from chipjax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16))
    new_pointer = jnp.astype((stack.pointer + 1) % STACK_SIZE, jnp.uint8)
    return stack.replace(data=new_data, pointer=new_pointer)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = jnp.astype((stack.pointer + STACK_SIZE - 1) % STACK_SIZE, jnp.uint8)
    popped_address = stack.data[new_pointer]
    return stack.replace(pointer=new_pointer), popped_address
