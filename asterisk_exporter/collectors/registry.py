"""Collector registry bridging Asterisk collectors to prometheus_client."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List

from prometheus_client.core import GaugeMetricFamily, Metric

from ..config.models import ExporterConfig
from ..services.command_runner import CommandRunner
from ..services.sip_data_source import AsteriskSipDataSource
from ..utils.errors import DuplicateCollectorError
from ..utils.metrics import MetricDescriptor, MetricSample, gauge
from ..utils.status import CollectorStatus
from .base import BaseCollector, build_error_descriptor
from .sip_collector import SipCollector


def _family(descriptor: MetricDescriptor) -> GaugeMetricFamily:
    return GaugeMetricFamily(descriptor.name, descriptor.help, labels=list(descriptor.label_names))


class ExporterRegistry:
    """
    Holds the enabled collectors and the shared health descriptor.

    Implements the prometheus_client custom collector protocol
    (``describe``/``collect``) so it can be registered with a
    CollectorRegistry. Every scrape runs each collector once, in parallel.
    """

    def __init__(self, namespace: str, logger: logging.Logger):
        """
        Initialize registry.

        Args:
            namespace: Metric namespace for the shared health descriptor
            logger: Logger instance
        """
        self.error_descriptor = build_error_descriptor(namespace)
        self.logger = logger.getChild(self.__class__.__name__)
        self.collectors: List[BaseCollector] = []

    def add(self, collector: BaseCollector) -> None:
        """
        Register a collector.

        Raises:
            DuplicateCollectorError: If the collector name or one of its
                metric names is already registered
        """
        if any(existing.name() == collector.name() for existing in self.collectors):
            raise DuplicateCollectorError(f"Collector already registered: {collector.name()}")

        known = {descriptor.name for descriptor in self.descriptors()}
        clashes = [d.name for d in collector.describe() if d.name in known]
        if clashes:
            raise DuplicateCollectorError(f"Metric name(s) already registered: {', '.join(clashes)}")

        self.collectors.append(collector)
        self.logger.debug(f"Registered collector {collector.name()}")

    def descriptors(self) -> List[MetricDescriptor]:
        """Health descriptor followed by each collector's descriptors."""
        result = [self.error_descriptor]
        for collector in self.collectors:
            result.extend(collector.describe())
        return result

    def scrape(self) -> List[MetricSample]:
        """
        Run every collector once.

        Returns:
            List[MetricSample]: Samples of all collectors, grouped per
            collector in registration order
        """
        if not self.collectors:
            return []

        with ThreadPoolExecutor(max_workers=len(self.collectors)) as pool:
            futures = [(collector, pool.submit(collector.collect)) for collector in self.collectors]

        samples: List[MetricSample] = []
        for collector, future in futures:
            try:
                collected = future.result()
            except Exception as e:
                self.logger.error(
                    f"Collector {collector.name()} raised unexpectedly: {e}",
                    exc_info=True,
                    extra={"collector": collector.name(), "error": str(e)}
                )
                collected = [gauge(self.error_descriptor, int(CollectorStatus.FAILURE), (collector.name(),))]

            samples.extend(collected)
        return samples

    def describe(self) -> Iterable[Metric]:
        """Empty metric families, used by prometheus_client for registration."""
        return [_family(descriptor) for descriptor in self.descriptors()]

    def collect(self) -> Iterable[Metric]:
        """Metric families for one scrape, health family first."""
        families: Dict[MetricDescriptor, GaugeMetricFamily] = {
            self.error_descriptor: _family(self.error_descriptor)
        }

        for sample in self.scrape():
            family = families.get(sample.descriptor)
            if family is None:
                family = families[sample.descriptor] = _family(sample.descriptor)
            family.add_metric(list(sample.label_values), sample.value)

            if sample.descriptor == self.error_descriptor:
                status = CollectorStatus(int(sample.value))
                self.logger.debug(f"Collector {sample.label_values[0]} status: {status.to_label()}")

        return list(families.values())


def create_registry(config: ExporterConfig, logger: logging.Logger) -> ExporterRegistry:
    """
    Build the registry and every enabled collector from configuration.

    Args:
        config: Validated exporter configuration
        logger: Logger instance

    Returns:
        ExporterRegistry: Registry ready to be registered with prometheus_client
    """
    namespace = config.exporter.namespace
    registry = ExporterRegistry(namespace, logger)
    runner = CommandRunner(config.asterisk, logger)

    for name in config.exporter.collectors:
        if name == "sip":
            data_source = AsteriskSipDataSource(runner, logger)
            registry.add(SipCollector(namespace, data_source, logger, registry.error_descriptor))

    logger.info(f"Enabled collectors: {', '.join(c.name() for c in registry.collectors) or 'none'}")
    return registry
