import logging
import threading
from typing import NamedTuple, Optional

import requests
import urllib3

logger = logging.getLogger("linewriter.transport")


class TransportInitError(Exception):
    pass


class SendResult(NamedTuple):
    ok: bool
    reason: Optional[str] = None
    status: Optional[int] = None


class Transport:
    def initialize(self):
        pass

    def send(self, url: str, body: bytes) -> SendResult:
        raise NotImplementedError

    def close(self):
        pass


class HttpTransport(Transport):
    """
    POSTs request bodies with a single shared ``requests.Session``.

    One instance can be handed to any number of connections. Each request is
    configured and issued under ``self.lock``, so only one is in flight at a
    time.
    """

    def __init__(self, verify_ssl: bool = False, timeout: float = 10.0):
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.lock = threading.Lock()
        self.session = None

    def initialize(self):
        with self.lock:
            if self.session is not None:
                return
            try:
                session = requests.Session()
                session.headers.update({"Content-Type": "text/plain; charset=utf-8"})
            except Exception as e:
                logger.error(f"Failed to initialize HTTP session: {e}")
                raise TransportInitError(str(e)) from e

            if not self.verify_ssl:
                # Suppress InsecureRequestWarning
                urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
                logger.info("SSL peer verification disabled by configuration")
            self.session = session
            logger.info("HTTP transport initialized")

    def send(self, url: str, body: bytes) -> SendResult:
        if isinstance(body, str):
            body = body.encode("utf-8")

        with self.lock:
            if self.session is None:
                return SendResult(False, "transport not initialized")
            try:
                resp = self.session.post(
                    url,
                    data=body,
                    verify=self.verify_ssl,
                    timeout=self.timeout,
                    allow_redirects=True,
                )
            except requests.RequestException as e:
                return SendResult(False, str(e))

        if 200 <= resp.status_code < 300:
            return SendResult(True, status=resp.status_code)
        return SendResult(False, f"HTTP {resp.status_code}: {resp.text.strip()}", resp.status_code)

    def close(self):
        with self.lock:
            if self.session is not None:
                self.session.close()
                self.session = None
