import pytest

from utilkit.arena import Arena, ArenaExhaustedError


def test_alloc_advances_offset_and_peak():
    arena = Arena(1024)
    first = arena.alloc(50)
    second = arena.alloc(100)
    assert len(first) == 50
    assert len(second) == 100
    assert arena.offset == 150
    assert arena.peak == 150
    assert arena.size == 1024


def test_allocations_are_writable_and_distinct():
    arena = Arena(64)
    first = arena.alloc(5)
    second = arena.alloc(5)
    first[:] = b"hello"
    second[:] = b"world"
    assert bytes(first) == b"hello"
    assert bytes(second) == b"world"


def test_save_and_restore():
    arena = Arena(1024)
    arena.alloc(150)
    checkpoint = arena.save()
    assert checkpoint == 150
    arena.alloc(40)
    assert arena.offset == 190
    arena.restore(checkpoint)
    assert arena.save() == 150
    assert arena.peak == 190
    again = arena.alloc(30)
    assert len(again) == 30
    assert arena.offset == 180


def test_restore_past_offset_raises():
    arena = Arena(100)
    arena.alloc(10)
    with pytest.raises(ValueError):
        arena.restore(20)


def test_alloc_zero_clears_reused_memory():
    arena = Arena(16)
    checkpoint = arena.save()
    dirty = arena.alloc(8)
    dirty[:] = b"\xff" * 8
    arena.restore(checkpoint)
    clean = arena.alloc_zero(8)
    assert bytes(clean) == bytes(8)


def test_exhaustion_raises():
    arena = Arena(10)
    arena.alloc(10)
    with pytest.raises(ArenaExhaustedError):
        arena.alloc(1)
    assert arena.offset == 10


def test_exhausted_error_is_memory_error():
    arena = Arena(4)
    with pytest.raises(MemoryError):
        arena.alloc(5)


def test_negative_alloc_raises():
    arena = Arena(4)
    with pytest.raises(ValueError):
        arena.alloc(-1)


def test_stats_reports_counters():
    arena = Arena(1024)
    arena.alloc(50)
    arena.alloc(100)
    assert arena.stats() == "[arena] size=1024 offset=150 peak=150"


def test_free_resets_and_blocks_allocation():
    arena = Arena(32)
    arena.alloc(8)
    arena.free()
    assert (arena.size, arena.offset, arena.peak) == (0, 0, 0)
    with pytest.raises(ArenaExhaustedError):
        arena.alloc(1)