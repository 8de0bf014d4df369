import time
import sys

import jax

from chipjax import create_state, load_program, run, display_to_text

# Draws every hex digit across the screen, then spins.
PROGRAM = bytes([
    0x60, 0x00,  # 0x200: V0 = 0        (digit)
    0x61, 0x00,  # 0x202: V1 = 0        (x)
    0x62, 0x02,  # 0x204: V2 = 2        (y)
    0xF0, 0x29,  # 0x206: I = glyph V0
    0xD1, 0x25,  # 0x208: draw at V1, V2
    0x70, 0x01,  # 0x20A: V0 += 1
    0x71, 0x05,  # 0x20C: V1 += 5
    0x30, 0x0C,  # 0x20E: skip if V0 == 12
    0x12, 0x06,  # 0x210: loop
    0x61, 0x00,  # 0x212: V1 = 0
    0x62, 0x0A,  # 0x214: V2 = 10
    0xF0, 0x29,  # 0x216: I = glyph V0
    0xD1, 0x25,  # 0x218: draw
    0x70, 0x01,  # 0x21A: V0 += 1
    0x71, 0x05,  # 0x21C: V1 += 5
    0x30, 0x10,  # 0x21E: skip if V0 == 16
    0x12, 0x16,  # 0x220: loop
    0x12, 0x22,  # 0x222: halt
])

if __name__ == "__main__":
    num_steps = int(sys.argv[1]) if len(sys.argv) > 1 else 10000

    state = load_program(create_state(jax.random.PRNGKey(0)), PROGRAM)

    start_compile = time.time()
    compiled = jax.block_until_ready(run.lower(state, num_steps).compile())
    end_compile = time.time()
    print("Compilation time (s):", end_compile - start_compile)

    start_exec = time.time()
    final_state, events = jax.block_until_ready(compiled(state))
    end_exec = time.time()
    print("Execution time (s):", end_exec - start_exec)
    print("Instructions per second:", num_steps / (end_exec - start_exec))

    print(display_to_text(final_state.display))
