"""Per-target lock registry tests."""

import pytest

from app.services.lifecycle_errors import PersistenceFailure
from app.services.target_locks import TargetLockRegistry


def test_same_target_is_serialized_and_times_out() -> None:
    registry = TargetLockRegistry()

    with registry.hold("ACCOUNT:a1"):
        with pytest.raises(PersistenceFailure):
            with registry.hold("ACCOUNT:a1", timeout=0.01):
                pass
        with registry.hold("ACCOUNT:a2", timeout=0.01):
            assert registry.active_keys() == {"ACCOUNT:a1", "ACCOUNT:a2"}

    assert registry.active_keys() == set()


def test_lock_is_released_when_body_raises() -> None:
    registry = TargetLockRegistry()

    with pytest.raises(RuntimeError):
        with registry.hold("AGENT_APPLICATION:g1"):
            raise RuntimeError("boom")

    with registry.hold("AGENT_APPLICATION:g1", timeout=0.01):
        pass
    assert registry.active_keys() == set()
