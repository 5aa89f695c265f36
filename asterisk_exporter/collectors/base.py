"""Base collector abstract class for all Asterisk collectors."""

from abc import ABC, abstractmethod
from typing import Any, List
import logging

from ..utils.errors import DataSourceUnavailable
from ..utils.metrics import MetricDescriptor, MetricSample, build_fq_name, gauge
from ..utils.status import CollectorStatus


def build_error_descriptor(namespace: str) -> MetricDescriptor:
    """
    Create the collector health descriptor shared by all collectors.

    Args:
        namespace: Exporter namespace

    Returns:
        MetricDescriptor: '<namespace>_collector_error' labelled by collector name
    """
    return MetricDescriptor(
        name=build_fq_name(namespace, "collector", "error"),
        help="Error occurred during collection",
        label_names=("collector",),
    )


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(self, data_source: Any, logger: logging.Logger, error_descriptor: MetricDescriptor):
        """
        Initialize base collector.

        Args:
            data_source: Provider of domain data for this collector
            logger: Logger instance
            error_descriptor: Shared collector health descriptor
        """
        self.data_source = data_source
        self.error_descriptor = error_descriptor
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    def name(self) -> str:
        """Stable unique collector name, used as the health metric label."""

    @abstractmethod
    def describe(self) -> List[MetricDescriptor]:
        """
        Return every descriptor owned by this collector.

        Returns:
            List[MetricDescriptor]: Descriptors in stable order

        Note:
            Must not touch the data source. The shared error descriptor is
            owned by the registry and is not included.
        """

    @abstractmethod
    def fetch(self) -> Any:
        """
        Obtain a fresh snapshot from the data source.

        Raises:
            DataSourceUnavailable: If any part of the snapshot cannot be obtained
        """

    @abstractmethod
    def build_samples(self, snapshot: Any) -> List[MetricSample]:
        """Convert a snapshot into domain samples."""

    def health_sample(self, status: CollectorStatus) -> MetricSample:
        """Collector health gauge labelled with this collector's name."""
        return gauge(self.error_descriptor, int(status), (self.name(),))

    def collect(self) -> List[MetricSample]:
        """
        Collect samples for one scrape.

        Returns:
            List[MetricSample]: The health sample followed by domain samples,
            or only the failing health sample when the data source is unavailable.
        """
        self.logger.debug(f"collecting {self.name()} metrics")

        try:
            snapshot = self.fetch()
        except DataSourceUnavailable as e:
            self.logger.error(
                f"{self.name()} collection failed: {e}",
                extra={"collector": self.name(), "error": str(e)}
            )
            return [self.health_sample(CollectorStatus.FAILURE)]

        self.logger.debug(f"{self.name()} metrics collected")

        samples = [self.health_sample(CollectorStatus.SUCCESS)]
        samples.extend(self.build_samples(snapshot))

        self.logger.debug(
            f"{self.name()} metrics built",
            extra={"collector": self.name(), "samples": len(samples)}
        )
        return samples
