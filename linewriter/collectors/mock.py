import random
import time
from typing import List
from .base import BaseCollector, Metric

class MockCollector(BaseCollector):
    def __init__(self, hosts: List[str] = None):
        super().__init__("mock_collector")
        self.hosts = hosts or ["web-1", "web-2", "db-1"]

    def collect(self) -> List[Metric]:
        metrics = []
        now = time.time()

        for host in self.hosts:
            metrics.append(Metric(
                name="cpu",
                tags={"host": host, "region": random.choice(["eu", "us"])},
                fields={
                    "usage_user": random.uniform(0.0, 100.0),
                    "usage_system": random.uniform(0.0, 30.0),
                    "cores": random.randint(2, 16),
                },
                timestamp=int(now * 1000),
                precision="ms"
            ))

            # Memory is sampled coarsely, so it is written with second precision
            metrics.append(Metric(
                name="mem",
                tags={"host": host},
                fields={
                    "used_percent": random.uniform(10.0, 95.0),
                    "swapping": random.random() > 0.9,
                    "state": "ok" if random.random() > 0.1 else "degraded",
                },
                timestamp=int(now),
                precision="s"
            ))

        self.logger.info(f"Generated {len(metrics)} mock metrics")
        return metrics
