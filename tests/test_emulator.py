"""Tests for fetch, cycles, timers and the key latch."""

import jax.numpy as jnp
import pytest
from chipvm import (
    fetch, cycle, run_cycles, tick_timers, set_key, load_program,
    PROGRAM_START, FAULT_NONE, FAULT_STACK_UNDERFLOW, FAULT_UNKNOWN_INSTRUCTION
)
from conftest import assemble, setup_program


def _with_timers(state, delay=0, sound=0):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


class TestFetch:

    def test_fetch_is_big_endian(self, fresh_state):
        state = setup_program(fresh_state, 0xA2F0)

        state, instruction = fetch(state)

        assert instruction == 0xA2F0
        assert state.opcode == 0xA2F0
        assert state.pc == PROGRAM_START + 2

    def test_fetch_masks_address(self, fresh_state):
        """Reading past the end of memory wraps to address 0."""
        state = fresh_state.replace(
            pc=jnp.asarray(0xFFF, dtype=jnp.uint16),
            memory=fresh_state.memory.at[0xFFF].set(0x12).at[0].set(0x34),
        )
        _, instruction = fetch(state)
        assert instruction == 0x1234


class TestCycle:

    def test_cycle_runs_one_instruction(self, fresh_state):
        state = setup_program(fresh_state, 0x6A07, 0x6B08)

        state = cycle(state)

        assert state.V[0xA] == 7
        assert state.V[0xB] == 0
        assert state.pc == PROGRAM_START + 2

    def test_taken_skip_advances_by_four(self, fresh_state):
        state = setup_program(fresh_state, 0x3000)
        state = cycle(state)
        assert state.pc == PROGRAM_START + 4

    def test_call_then_return_resumes_after_call(self, fresh_state):
        state = setup_program(fresh_state, 0x2300)
        state = setup_program(state, 0x00EE, address=0x300)

        state = cycle(state)
        assert state.pc == 0x300
        state = cycle(state)

        assert state.pc == PROGRAM_START + 2
        assert state.stack.pointer == 0

    def test_fault_keeps_previous_state(self, fresh_state):
        state = setup_program(fresh_state, 0x6105, 0x8128)
        state = _with_timers(state, delay=5)
        state = cycle(state)

        faulted = cycle(state)

        assert faulted.fault == FAULT_UNKNOWN_INSTRUCTION
        assert faulted.opcode == 0x8128
        assert faulted.pc == state.pc
        assert faulted.delay_timer == state.delay_timer
        assert faulted.V[1] == 5

    def test_faulted_state_is_frozen(self, fresh_state):
        state = setup_program(fresh_state, 0x00EE)
        state = cycle(state)
        assert state.fault == FAULT_STACK_UNDERFLOW

        again = cycle(state)
        assert again.pc == state.pc
        assert again.fault == FAULT_STACK_UNDERFLOW


class TestTimers:

    def test_timers_count_down_per_cycle(self, fresh_state):
        state = _with_timers(fresh_state, delay=3, sound=5)

        state = cycle(state)  # 0000 is a no-op

        assert state.delay_timer == 2
        assert state.sound_timer == 4

    def test_timers_stop_at_zero(self, fresh_state):
        state = tick_timers(fresh_state)
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert not state.beep

    def test_beep_on_last_sound_tick(self, fresh_state):
        state = _with_timers(fresh_state, sound=2)

        state = cycle(state)
        assert not state.beep
        assert state.sound_timer == 1

        state = cycle(state)
        assert state.beep
        assert state.sound_timer == 0

        state = cycle(state)
        assert not state.beep

    def test_timer_set_in_same_cycle_ticks(self, fresh_state):
        """FX15 then the end-of-cycle tick."""
        state = setup_program(fresh_state, 0x600A, 0xF015)
        state = cycle(cycle(state))
        assert state.delay_timer == 9


class TestKeyLatch:

    def test_wait_for_key_loops_without_key(self, fresh_state):
        state = setup_program(fresh_state, 0xF50A)

        for _ in range(5):
            state = cycle(state)
            assert state.pc == PROGRAM_START

    def test_wait_for_key_consumes_latch_once(self, fresh_state):
        state = setup_program(fresh_state, 0xF50A, 0xF60A)
        state = cycle(state)

        state = set_key(state, 0x7, True)
        state = cycle(state)
        assert state.V[5] == 0x7
        assert state.pc == PROGRAM_START + 2

        # The key stays held but is no longer latched
        for _ in range(3):
            state = cycle(state)
            assert state.pc == PROGRAM_START + 2
        assert state.keypad[0x7]

        state = set_key(state, 0x9, True)
        state = cycle(state)
        assert state.V[6] == 0x9
        assert state.pc == PROGRAM_START + 4

    def test_latch_cleared_every_cycle(self, fresh_state):
        state = set_key(fresh_state, 0x2, True)
        assert state.last_key == 0x2

        state = cycle(state)
        assert state.last_key == -1

    def test_release_does_not_latch(self, fresh_state):
        state = set_key(fresh_state, 0x2, False)
        assert state.last_key == -1

    @pytest.mark.parametrize("key", [-1, 16, 100])
    def test_set_key_out_of_range(self, fresh_state, key):
        with pytest.raises(ValueError):
            set_key(fresh_state, key, True)


class TestRunCycles:

    def test_run_cycles_matches_cycle(self, fresh_state):
        state = load_program(fresh_state, assemble(0x6001, 0x7001, 0x1202))

        stepped = state
        for _ in range(10):
            stepped = cycle(stepped)
        scanned = run_cycles(state, 10)

        assert scanned.pc == stepped.pc == PROGRAM_START + 4
        assert scanned.V[0] == 6
        assert stepped.V[0] == 6

    def test_run_cycles_stops_on_fault(self, fresh_state):
        state = load_program(fresh_state, assemble(0x6001, 0x00EE, 0x6002))
        state = _with_timers(state, delay=50)

        state = run_cycles(state, 20)

        assert state.fault == FAULT_STACK_UNDERFLOW
        assert state.pc == PROGRAM_START + 2
        assert state.V[0] == 1
        assert state.delay_timer == 49
