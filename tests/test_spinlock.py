from rpsim.spinlock import SpinLock


def test_spinlock():
    spinlock = SpinLock()

    assert spinlock.state() == 0

    assert spinlock.claim(0) == 1
    assert spinlock.state() == 1

    assert spinlock.claim(0) == 0
    assert spinlock.state() == 1

    assert spinlock.claim(1) == 2
    assert spinlock.state() == 3

    spinlock.release(0)
    assert spinlock.state() == 2

    spinlock.release(1)
    assert spinlock.state() == 0


def test_lock_state():
    spinlock = SpinLock()
    assert spinlock.lock_state(5) == 0
    spinlock.claim(5)
    assert spinlock.lock_state(5) == 1 << 5
    assert spinlock.lock_state(4) == 0


def test_highest_lock():
    spinlock = SpinLock()
    assert spinlock.claim(31) == 1 << 31
    spinlock.release(31)
    assert spinlock.state() == 0