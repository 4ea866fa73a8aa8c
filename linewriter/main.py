import time
import logging
import signal
import sys

from linewriter.config import Config
from linewriter.connection import Connection
from linewriter.collectors.mock import MockCollector
from linewriter.exporters.line import LineExporter
from linewriter.transport import TransportInitError

logger = logging.getLogger("linewriter.main")

class WriterService:
    def __init__(self, connection: Connection = None):
        self.running = True
        self.collectors = []
        self.connection = connection or Connection.from_config(Config)
        self.exporter = LineExporter(self.connection)

        # Initialize Collectors
        if Config.MOCK_MODE:
            logger.info("Mock Mode enabled. Registering MockCollector.")
            self.collectors.append(MockCollector())

    def register_signal_handlers(self):
        signal.signal(signal.SIGINT, self.handle_exit)
        signal.signal(signal.SIGTERM, self.handle_exit)

    def handle_exit(self, signum, frame):
        logger.info("Received exit signal. Shutting down...")
        self.running = False

    def run_once(self) -> int:
        all_metrics = []

        for collector in self.collectors:
            try:
                metrics = collector.collect()
                all_metrics.extend(metrics)
                logger.debug(f"Collected {len(metrics)} metrics from {collector.name}")
            except Exception as e:
                logger.error(f"Error collecting from {collector.name}: {e}", exc_info=True)

        queued = self.exporter.export(all_metrics)
        if queued:
            logger.info(f"Queued {queued} metrics")
        return queued

    def run(self):
        self.register_signal_handlers()
        logger.info(f"Starting line writer. Poll Interval: {Config.POLL_INTERVAL_SECONDS}s, "
                    f"target: {Config.INFLUXDB_URL}")

        self.connection.start()
        try:
            while self.running:
                start_time = time.time()
                self.run_once()

                if Config.SINGLE_RUN:
                    logger.info("Single run mode enabled. Flushing and exiting.")
                    self.connection.flush()
                    self.running = False
                    break

                elapsed = time.time() - start_time
                sleep_time = max(0, Config.POLL_INTERVAL_SECONDS - elapsed)
                time.sleep(sleep_time)
        finally:
            self.connection.stop()

def main():
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        Config.validate()
        service = WriterService()
        service.run()
    except (ValueError, TransportInitError) as e:
        logger.error(f"Startup failed: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
