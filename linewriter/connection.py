import logging
import threading
from typing import Optional

from linewriter.buffer import DualBuffer
from linewriter.config import Config
from linewriter.encoder import build_write_url, iter_batches
from linewriter.measurement import DEFAULT_PRECISION, Measurement
from linewriter.transport import HttpTransport, Transport

# Granularity of the shutdown poll at the top of each worker pass
SHUTDOWN_POLL_SECONDS = 0.001


class Connection:
    """
    Buffers measurements and writes them to an InfluxDB ``/write`` endpoint
    from a single background worker.

    ``enqueue`` only appends to the active half of a dual buffer. Every flush
    interval the worker swaps the halves and drains the filled one, sending
    one request per run of consecutive points with the same precision.
    Delivery is best effort: a failed request is logged and its points are
    dropped.
    """

    def __init__(self, server_url: str, database: str = "", user: str = "", password: str = "",
                 transport: Optional[Transport] = None):
        self.logger = logging.getLogger("linewriter.connection")
        self.worker_logger = logging.getLogger("linewriter.worker")

        self.server_url = server_url
        self.database = database or ""
        self.user = user or ""
        self.password = password or ""

        self.default_precision = DEFAULT_PRECISION
        self.buffer_length = 5
        self.buffer_duration = 500
        self.flush_on_stop = False

        self._owns_transport = transport is None
        self.transport = transport if transport is not None else HttpTransport()
        self._skip_transport_init = False
        self._transport_ready = False

        self._buffer = DualBuffer()
        self._drain_lock = threading.Lock()
        # guards the stop signal against concurrent enqueue
        self._state_lock = threading.Lock()
        self._exit_signal = threading.Event()
        self._wake = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(cls, config=Config, transport: Optional[Transport] = None) -> "Connection":
        if transport is None:
            transport = HttpTransport(
                verify_ssl=config.INFLUXDB_VERIFY_SSL,
                timeout=config.INFLUXDB_TIMEOUT_SECONDS,
            )
            owns_transport = True
        else:
            owns_transport = False

        conn = cls(
            config.INFLUXDB_URL,
            config.INFLUXDB_DATABASE,
            config.INFLUXDB_USER,
            config.INFLUXDB_PASSWORD,
            transport=transport,
        )
        conn._owns_transport = owns_transport
        return (conn.set_default_precision(config.INFLUXDB_PRECISION)
                .set_buffer_length(config.FLUSH_LENGTH)
                .set_buffer_duration(config.FLUSH_INTERVAL_MS)
                .set_flush_on_stop(config.FLUSH_ON_STOP))

    def set_default_precision(self, precision: str) -> "Connection":
        self.default_precision = precision
        return self

    def set_buffer_length(self, measurements: int) -> "Connection":
        """Points in the active buffer that wake the worker early. 0 disables it."""
        self.buffer_length = measurements
        return self

    def set_buffer_duration(self, millis: int) -> "Connection":
        self.buffer_duration = millis
        return self

    def set_flush_on_stop(self, enabled: bool = True) -> "Connection":
        self.flush_on_stop = enabled
        return self

    def skip_transport_initialization(self) -> "Connection":
        self._skip_transport_init = True
        self.logger.info("Transport initialization will be skipped")
        return self

    @property
    def stopped(self) -> bool:
        return self._exit_signal.is_set()

    def pending(self) -> int:
        return self._buffer.pending()

    def start(self) -> "Connection":
        """
        Initializes the transport and starts the worker thread.

        Raises TransportInitError if the transport cannot be initialized; in
        that case no worker is started and nothing will ever be written.
        """
        if self._worker_thread is not None:
            raise RuntimeError("Worker already started")
        if self.stopped:
            raise RuntimeError("Connection has been stopped")

        self._ensure_transport()

        self.logger.info(f"Starting worker thread. Flush interval: {self.buffer_duration}ms, "
                         f"flush length: {self.buffer_length}")
        self._worker_thread = threading.Thread(target=self._worker, name="linewriter-worker", daemon=True)
        self._worker_thread.start()
        return self

    def stop(self, timeout: Optional[float] = None):
        """
        Signals the worker to stop and waits for it.

        The signal is one-shot; calling stop a second time raises RuntimeError.
        Buffered points are only written if flush_on_stop is set.
        """
        with self._state_lock:
            if self._exit_signal.is_set():
                raise RuntimeError("Stop has already been signalled")
            self._exit_signal.set()

        self.logger.info("Signalling worker thread to stop")
        self._wake.set()

        if self._worker_thread is not None:
            self._worker_thread.join(timeout)
            if self._worker_thread.is_alive():
                self.logger.warning("Worker thread did not stop within timeout")
        elif self.flush_on_stop:
            self._flush_safely()

        remaining = self.pending()
        if remaining:
            self.logger.warning(f"Discarding {remaining} buffered points on stop")

        if self._owns_transport:
            self.transport.close()

    def enqueue(self, measurement: Measurement) -> bool:
        """
        Copies ``measurement`` into the active buffer.

        Returns False (and drops the point) once stop has been signalled.
        """
        with self._state_lock:
            stopped = self._exit_signal.is_set()
            if not stopped:
                length = self._buffer.push(measurement.copy())
        if stopped:
            self.logger.warning(f"Connection stopped. Dropping measurement '{measurement.name}'")
            return False

        if self.buffer_length > 0 and length >= self.buffer_length:
            self._wake.set()
        return True

    def flush(self) -> int:
        """
        Swaps the buffers and drains the filled one synchronously.

        Returns the number of points the server accepted.
        """
        with self._drain_lock:
            self._ensure_transport()
            target = self._buffer.swap()
            if target is None:
                return 0
            return self._drain(target)

    def _ensure_transport(self):
        if self._transport_ready or self._skip_transport_init:
            return
        self.transport.initialize()
        self._transport_ready = True

    def _drain(self, target) -> int:
        written = 0
        try:
            for batch in iter_batches(target, self.default_precision):
                url = build_write_url(self.server_url, self.database, self.user, self.password, batch.precision)
                if self.worker_logger.isEnabledFor(logging.DEBUG):
                    self.worker_logger.debug(f"Sending {batch.count} points (precision={batch.precision}):\n{batch.body}")

                result = self.transport.send(url, batch.body.encode("utf-8"))
                if result.ok:
                    written += batch.count
                else:
                    self.worker_logger.error(f"Failed to write {batch.count} points: {result.reason}")
        finally:
            if target:
                self.worker_logger.error(f"Drain aborted. Dropping {len(target)} points")
                target.clear()
        return written

    def _flush_safely(self):
        try:
            self.flush()
        except Exception as e:
            self.worker_logger.error(f"Error flushing buffer: {e}", exc_info=True)

    def _worker(self):
        self.worker_logger.info("Worker started")
        while not self._exit_signal.wait(SHUTDOWN_POLL_SECONDS):
            self._wake.wait(self.buffer_duration / 1000.0)
            self._wake.clear()
            if self._exit_signal.is_set():
                break
            self._flush_safely()

        if self.flush_on_stop:
            self._flush_safely()
        self.worker_logger.info("Worker stopped")

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        if not self.stopped:
            self.stop()
        return False
