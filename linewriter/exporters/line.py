from typing import List
import logging

from linewriter.collectors.base import Metric
from linewriter.connection import Connection
from linewriter.measurement import Measurement

class LineExporter:
    def __init__(self, connection: Connection):
        self.logger = logging.getLogger("linewriter.exporter.line")
        self.connection = connection

    def to_measurement(self, metric: Metric) -> Measurement:
        m = Measurement(metric.name, metric.precision)

        for k, v in metric.tags.items():
            m.tag(k, v)

        for k, v in metric.fields.items():
            m.field(k, v)

        if metric.timestamp is not None:
            m.timestamp(metric.timestamp)

        return m

    def export(self, metrics: List[Metric]) -> int:
        if not metrics:
            return 0

        accepted = 0
        for metric in metrics:
            try:
                m = self.to_measurement(metric)
            except (TypeError, ValueError) as e:
                self.logger.error(f"Skipping metric {metric.name}: {e}")
                continue

            if self.connection.enqueue(m):
                accepted += 1

        if accepted < len(metrics):
            self.logger.warning(f"Queued {accepted} of {len(metrics)} metrics")
        return accepted
