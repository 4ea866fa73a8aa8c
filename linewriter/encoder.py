"""
Line protocol encoding and request grouping.

A drained queue is turned into one request per maximal run of consecutive
points sharing the same effective precision.
"""
import logging
from typing import Deque, Iterator, NamedTuple

from linewriter.measurement import Measurement

logger = logging.getLogger("linewriter.encoder")


class Batch(NamedTuple):
    precision: str
    body: str
    count: int


def _by_name(kv):
    return kv.name


def encode_line(m: Measurement) -> str:
    """
    Encodes one point as ``name[,tags] [fields][ timestamp]`` plus newline.

    Tags and fields are sorted by key here, not when they are added.
    """
    line = m.name
    if m.tags:
        line += "," + ",".join(str(kv) for kv in sorted(m.tags, key=_by_name))
    line += " "
    if m.fields:
        line += ",".join(str(kv) for kv in sorted(m.fields, key=_by_name))
    if m.has_timestamp:
        line += f" {m.ts}"
    return line + "\n"


def build_write_url(server_url: str, database: str, user: str, password: str, precision: str) -> str:
    params = []
    if database:
        params.append(f"db={database}")
    if user:
        params.append(f"u={user}")
    if password:
        params.append(f"p={password}")
    params.append(f"precision={precision}")
    return f"{server_url.rstrip('/')}/write?" + "&".join(params)


def iter_batches(queue: Deque[Measurement], default_precision: str) -> Iterator[Batch]:
    """
    Consumes ``queue`` from the front and yields one Batch per precision run.

    Points are removed from the queue as they are encoded, so whatever a
    caller does with a yielded batch, those points are gone from the queue.
    """
    while queue:
        precision = queue[0].effective_precision(default_precision)
        lines = []
        while queue and queue[0].effective_precision(default_precision) == precision:
            lines.append(encode_line(queue.popleft()))
        body = "".join(lines)
        logger.debug(f"Encoded {len(lines)} points with precision={precision}")
        yield Batch(precision, body, len(lines))
