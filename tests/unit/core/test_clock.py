"""Tests de l'horloge du domaine."""

from datetime import timedelta

from mediavault.core.clock import utc_now


def test_utc_now_carries_timezone() -> None:
    now = utc_now()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
