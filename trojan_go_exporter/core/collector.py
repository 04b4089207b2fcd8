"""Prometheus collector that scrapes a Trojan-Go server on demand."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator

from prometheus_client import CollectorRegistry
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from trojan_go_exporter.core.metrics import (
    METRIC_DESCRIPTIONS,
    SCRAPES_TOTAL,
    MetricConstructionError,
    MetricDescriptor,
    synthesize_descriptor,
)
from trojan_go_exporter.core.upstream import TrojanGoClient, UpstreamError

logger = logging.getLogger(__name__)

_Families = dict[str, Metric]


class TrojanGoCollector(Collector):
    """Translate ``ListUsers`` records into gauges, one scrape at a time.

    The collector owns its registry; serving ``generate_latest(registry)``
    triggers exactly one ``collect`` call. Concurrent collects are serialized
    by a lock held across the whole upstream round trip.
    """

    def __init__(
        self,
        client: TrojanGoClient,
        descriptions: dict[str, MetricDescriptor] | None = None,
    ) -> None:
        self._client = client
        self._descriptions = dict(
            METRIC_DESCRIPTIONS if descriptions is None else descriptions
        )
        self._lock = threading.Lock()
        self._total_scrapes = 0
        self.registry = CollectorRegistry()
        self.registry.register(self)

    @property
    def total_scrapes(self) -> int:
        return self._total_scrapes

    def describe(self) -> Iterator[Metric]:
        for descriptor in self._descriptions.values():
            yield descriptor.new_family()
        yield SCRAPES_TOTAL.new_family()

    def collect(self) -> Iterator[Metric]:
        with self._lock:
            self._total_scrapes += 1
            families: _Families = {}
            try:
                self._scrape(families)
            except UpstreamError as exc:
                logger.warning("Scrape failed! %s", exc)
                families.clear()
            except Exception:
                logger.warning("Scrape failed with unexpected error", exc_info=True)
                families.clear()
            self._add(families, SCRAPES_TOTAL, self._total_scrapes)

        yield from families.values()

    def _scrape(self, families: _Families) -> None:
        start = time.perf_counter()
        users = self._client.list_users()

        for user in users:
            self._add_gauge(
                families, "upload_traffic_bytes_total", user.upload_traffic, user.hash
            )
            self._add_gauge(
                families,
                "download_traffic_bytes_total",
                user.download_traffic,
                user.hash,
            )
            speed = user.speed_current
            if speed is not None:
                self._add_gauge(families, "current_upload_speed", speed.upload, user.hash)
                self._add_gauge(
                    families, "current_download_speed", speed.download, user.hash
                )
            else:
                self._add_gauge(families, "current_upload_speed", 0, user.hash)
                self._add_gauge(families, "current_download_speed", 0, user.hash)

        self._add_gauge(
            families, "scrape_duration_seconds", time.perf_counter() - start
        )

    def _add_gauge(
        self, families: _Families, key: str, value: object, *label_values: str
    ) -> None:
        descriptor = self._descriptions.get(key)
        if descriptor is None:
            descriptor = synthesize_descriptor(key)
        self._add(families, descriptor, value, *label_values)

    @staticmethod
    def _add(
        families: _Families,
        descriptor: MetricDescriptor,
        value: object,
        *label_values: str,
    ) -> None:
        family = families.get(descriptor.name)
        if family is None:
            family = descriptor.new_family()
        try:
            descriptor.add_sample(family, value, label_values)
        except MetricConstructionError as exc:
            logger.debug("Dropping sample: %s", exc)
            return
        families.setdefault(descriptor.name, family)
