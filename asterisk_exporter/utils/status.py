"""Collector health status enumeration."""

from enum import IntEnum


class CollectorStatus(IntEnum):
    """Value reported by the collector error gauge."""

    SUCCESS = 0
    FAILURE = 1

    def to_label(self) -> str:
        """
        Convert status to a short human-readable label.

        Returns:
            str: "ok" or "error"
        """
        return {
            CollectorStatus.SUCCESS: "ok",
            CollectorStatus.FAILURE: "error",
        }[self]
