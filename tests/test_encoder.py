import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from collections import deque
from linewriter.encoder import encode_line, build_write_url, iter_batches
from linewriter.measurement import Measurement

class TestEncodeLine(unittest.TestCase):
    def test_tags_sorted_by_key(self):
        m = Measurement("cpu").tag("b", "2").tag("a", "1").field("v", 1)
        self.assertEqual(encode_line(m), "cpu,a=1,b=2 v=1i\n")

    def test_fields_sorted_by_key(self):
        m = Measurement("cpu").field("z", True).field("a", "x")
        self.assertEqual(encode_line(m), 'cpu a="x",z=t\n')

    def test_sort_does_not_reorder_measurement(self):
        m = Measurement("cpu").tag("b", "2").tag("a", "1").field("v", 1)
        encode_line(m)
        self.assertEqual([kv.name for kv in m.tags], ["b", "a"])

    def test_timestamp(self):
        m = Measurement("cpu").field("v", 0.5).timestamp(1700000000000)
        self.assertEqual(encode_line(m), "cpu v=0.5 1700000000000\n")

    def test_no_fields(self):
        # Not rejected here; the server refuses such lines
        self.assertEqual(encode_line(Measurement("cpu")), "cpu \n")
        self.assertEqual(encode_line(Measurement("cpu").timestamp(7)), "cpu  7\n")

    def test_reserved_characters_not_escaped(self):
        m = Measurement("cpu load").tag("host", "a,b").field("v", 1)
        self.assertEqual(encode_line(m), "cpu load,host=a,b v=1i\n")

class TestBuildWriteUrl(unittest.TestCase):
    def test_all_parameters(self):
        url = build_write_url("http://influx:8086", "metrics", "bob", "secret", "ms")
        self.assertEqual(url, "http://influx:8086/write?db=metrics&u=bob&p=secret&precision=ms")

    def test_only_precision(self):
        self.assertEqual(build_write_url("http://influx:8086", "", "", "", "s"),
                         "http://influx:8086/write?precision=s")

    def test_password_without_user(self):
        self.assertEqual(build_write_url("http://h", "", "", "pw", "ms"),
                         "http://h/write?p=pw&precision=ms")

    def test_trailing_slash(self):
        self.assertEqual(build_write_url("http://h/", "db", "", "", "ms"),
                         "http://h/write?db=db&precision=ms")

class TestIterBatches(unittest.TestCase):
    def _point(self, name, precision=None):
        return Measurement(name, precision).field("v", 1)

    def test_contiguous_precision_runs(self):
        queue = deque([
            self._point("a", "ms"),
            self._point("b", "ms"),
            self._point("c", "s"),
            self._point("d", "ms"),
        ])
        batches = list(iter_batches(queue, "ms"))

        self.assertEqual([b.precision for b in batches], ["ms", "s", "ms"])
        self.assertEqual(batches[0].body, "a v=1i\nb v=1i\n")
        self.assertEqual(batches[1].body, "c v=1i\n")
        self.assertEqual(batches[2].body, "d v=1i\n")
        self.assertEqual([b.count for b in batches], [2, 1, 1])
        self.assertEqual(len(queue), 0)

    def test_override_matching_default_groups_together(self):
        queue = deque([self._point("a"), self._point("b", "ms"), self._point("c", "ns")])
        batches = list(iter_batches(queue, "ms"))
        self.assertEqual(len(batches), 1)
        self.assertEqual(batches[0].count, 3)

    def test_empty_queue(self):
        self.assertEqual(list(iter_batches(deque(), "ms")), [])

    def test_points_consumed_as_batches_are_yielded(self):
        queue = deque([self._point("a", "s"), self._point("b", "ms")])
        gen = iter_batches(queue, "ms")
        next(gen)
        self.assertEqual(len(queue), 1)

if __name__ == '__main__':
    unittest.main()
