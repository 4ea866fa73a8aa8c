import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # General
    POLL_INTERVAL_SECONDS = int(os.getenv("POLL_INTERVAL_SECONDS", "5"))
    MOCK_MODE = os.getenv("MOCK_MODE", "true").lower() == "true"
    SINGLE_RUN = os.getenv("SINGLE_RUN", "false").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # InfluxDB
    INFLUXDB_URL = os.getenv("INFLUXDB_URL", "http://localhost:8086")
    INFLUXDB_DATABASE = os.getenv("INFLUXDB_DATABASE", "")
    INFLUXDB_USER = os.getenv("INFLUXDB_USER", "")
    INFLUXDB_PASSWORD = os.getenv("INFLUXDB_PASSWORD", "")
    INFLUXDB_PRECISION = os.getenv("INFLUXDB_PRECISION", "ms")
    INFLUXDB_VERIFY_SSL = os.getenv("INFLUXDB_VERIFY_SSL", "false").lower() == "true"
    INFLUXDB_TIMEOUT_SECONDS = float(os.getenv("INFLUXDB_TIMEOUT_SECONDS", "10"))

    # Buffering
    FLUSH_INTERVAL_MS = int(os.getenv("FLUSH_INTERVAL_MS", "500"))
    FLUSH_LENGTH = int(os.getenv("FLUSH_LENGTH", "5"))
    FLUSH_ON_STOP = os.getenv("FLUSH_ON_STOP", "false").lower() == "true"

    @classmethod
    def validate(cls):
        if not cls.INFLUXDB_URL:
            raise ValueError("INFLUXDB_URL must be set")
        if cls.FLUSH_INTERVAL_MS <= 0:
            raise ValueError(f"FLUSH_INTERVAL_MS must be positive, got {cls.FLUSH_INTERVAL_MS}")
        if cls.FLUSH_LENGTH < 0:
            raise ValueError(f"FLUSH_LENGTH must not be negative, got {cls.FLUSH_LENGTH}")
