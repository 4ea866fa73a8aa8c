from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
import logging

class Metric:
    def __init__(self, name: str, tags: Dict[str, str], fields: Dict[str, Any],
                 timestamp: Optional[int] = None, precision: Optional[str] = None):
        self.name = name
        self.tags = tags
        self.fields = fields
        self.timestamp = timestamp
        self.precision = precision

class BaseCollector(ABC):
    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"linewriter.collector.{name}")

    @abstractmethod
    def collect(self) -> List[Metric]:
        """
        Collect metrics and return a list of Metric objects.
        """
        pass
