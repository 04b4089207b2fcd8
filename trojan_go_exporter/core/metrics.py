from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.metrics_core import Metric

NAMESPACE = "trojan_go"
TARGET_LABEL = "target"


class MetricConstructionError(ValueError):
    """Raised when a sample does not fit its metric descriptor."""


class MetricKind(str, Enum):
    GAUGE = "gauge"
    COUNTER = "counter"


def build_fq_name(name: str) -> str:
    return f"{NAMESPACE}_{name}"


@dataclass(slots=True, frozen=True)
class MetricDescriptor:
    name: str
    documentation: str
    labels: tuple[str, ...] = ()
    kind: MetricKind = MetricKind.GAUGE

    def new_family(self) -> Metric:
        if self.kind is MetricKind.COUNTER:
            return CounterMetricFamily(
                self.name, self.documentation, labels=self.labels
            )
        return GaugeMetricFamily(self.name, self.documentation, labels=self.labels)

    def add_sample(
        self, family: Metric, value: object, label_values: Sequence[str]
    ) -> None:
        if len(label_values) != len(self.labels):
            raise MetricConstructionError(
                f"{self.name}: expected {len(self.labels)} label values, "
                f"got {len(label_values)}"
            )
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise MetricConstructionError(
                f"{self.name}: value {value!r} is not numeric"
            ) from exc
        family.add_metric(list(label_values), number)


def synthesize_descriptor(key: str) -> MetricDescriptor:
    """Descriptor for a key missing from the table: raw key as name and help, no labels."""

    return MetricDescriptor(key, key)


SCRAPES_TOTAL = MetricDescriptor(
    build_fq_name("scrapes_total"),
    "Total number of scrapes performed",
    kind=MetricKind.COUNTER,
)

METRIC_DESCRIPTIONS: dict[str, MetricDescriptor] = {
    key: MetricDescriptor(build_fq_name(key), documentation, labels)
    for key, documentation, labels in (
        ("scrape_duration_seconds", "Scrape duration in seconds", ()),
        (
            "upload_traffic_bytes_total",
            "Number of transmitted bytes",
            (TARGET_LABEL,),
        ),
        (
            "download_traffic_bytes_total",
            "Number of received bytes",
            (TARGET_LABEL,),
        ),
        (
            "current_upload_speed",
            "Number of current upload speed bytes",
            (TARGET_LABEL,),
        ),
        (
            "current_download_speed",
            "Number of current download speed bytes",
            (TARGET_LABEL,),
        ),
    )
}
