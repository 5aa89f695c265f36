"""Metric data structures for collectors."""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import time

from .errors import LabelArityError


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """
    Join metric name parts with underscores, skipping empty parts.

    Args:
        namespace: Exporter namespace (e.g., "asterisk")
        subsystem: Collector subsystem (e.g., "sip")
        name: Metric name (e.g., "current_peers")

    Returns:
        str: Fully-qualified metric name (e.g., "asterisk_sip_current_peers")
    """
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class MetricDescriptor:
    """Immutable schema of a gauge: name, help text and label names."""

    name: str
    help: str
    label_names: Tuple[str, ...] = ()

    def __post_init__(self):
        """Normalise label names to a tuple."""
        object.__setattr__(self, "label_names", tuple(self.label_names))


@dataclass(frozen=True)
class MetricSample:
    """One gauge value emitted during a scrape."""

    descriptor: MetricDescriptor
    value: float
    label_values: Tuple[str, ...] = ()
    timestamp: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        """Validate label arity and set timestamp if not provided."""
        label_values = tuple(self.label_values)
        if len(label_values) != len(self.descriptor.label_names):
            raise LabelArityError(
                f"{self.descriptor.name} expects {len(self.descriptor.label_names)} "
                f"label value(s) {list(self.descriptor.label_names)}, got {len(label_values)}"
            )
        object.__setattr__(self, "label_values", label_values)
        object.__setattr__(self, "value", float(self.value))
        if self.timestamp is None:
            object.__setattr__(self, "timestamp", time.time())

    @property
    def labels(self) -> dict:
        """Label name to value mapping."""
        return dict(zip(self.descriptor.label_names, self.label_values))


def gauge(descriptor: MetricDescriptor, value: float, label_values: Sequence[str] = ()) -> MetricSample:
    """
    Create a gauge sample for a descriptor.

    Args:
        descriptor: Metric schema
        value: Current gauge value
        label_values: Positional label values, one per descriptor label name

    Returns:
        MetricSample: Sample with current timestamp

    Raises:
        LabelArityError: If label count does not match the descriptor
    """
    return MetricSample(descriptor=descriptor, value=value, label_values=tuple(label_values))
