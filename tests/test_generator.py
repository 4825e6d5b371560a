import threading
import time

import pytest

from snowmint.config import GeneratorSettings, Settings
from snowmint.errors import ClockMovedBackwardError, InvalidLocationError
from snowmint.generator import IdGenerator, current_millis
from snowmint.layout import decode_id, id_to_timestamp


@pytest.fixture
def generator():
    return IdGenerator(7, 7)


class TestNew:
    def test_creates_generator(self):
        g = IdGenerator(0, 0)
        assert g.next_id() > 0

    def test_upper_bounds_accepted(self):
        g = IdGenerator(31, 31)
        assert g.worker_id == 31
        assert g.datacenter_id == 31
        assert g.next_id() > 0

    @pytest.mark.parametrize(
        "worker_id, datacenter_id, field",
        [
            (32, 0, "worker_id"),
            (-1, 0, "worker_id"),
            (0, 32, "datacenter_id"),
            (0, -1, "datacenter_id"),
        ],
    )
    def test_rejects_out_of_range_location(self, worker_id, datacenter_id, field):
        with pytest.raises(InvalidLocationError) as exc_info:
            IdGenerator(worker_id, datacenter_id)
        assert exc_info.value.field == field
        assert exc_info.value.bound == 31
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("value", [True, 1.0, "1", None])
    def test_rejects_non_integer_location(self, value):
        with pytest.raises(InvalidLocationError):
            IdGenerator(value, 0)

    def test_from_settings(self):
        settings = Settings(generator=GeneratorSettings(worker_id=4, datacenter_id=9))
        g = IdGenerator.from_settings(settings)
        assert (g.worker_id, g.datacenter_id) == (4, 9)

    def test_from_settings_validates(self):
        settings = Settings(generator=GeneratorSettings(worker_id=40))
        with pytest.raises(InvalidLocationError):
            IdGenerator.from_settings(settings)


class TestNextId:
    def test_same_millisecond_increments_sequence(self, generator):
        generator._last_timestamp = 1450772535000
        generator._sequence = 2794
        generator._time_source = lambda: 1450772535000

        # 0000 10010110110100001110110001001100010111 | 00111 | 00111 | 101011101011
        assert generator.next_id() == 679215357097835243

    def test_clock_moved_backwards(self, generator):
        generator._last_timestamp = 1450772535000
        generator._sequence = 17
        generator._time_source = lambda: 1450772534000

        with pytest.raises(ClockMovedBackwardError) as exc_info:
            generator.next_id()

        assert exc_info.value.milliseconds == 1000
        assert generator._last_timestamp == 1450772535000
        assert generator._sequence == 17

    def test_waits_for_new_time_if_sequence_overflows(self, generator):
        generator._last_timestamp = 1450772534000
        generator._sequence = 4095
        calls = []

        def time_source():
            calls.append(None)
            if len(calls) <= 2:
                return 1450772534000
            return 1450772535000

        generator._time_source = time_source

        # 0000 10010110110100001110110001001100010111 | 00111 | 00111 | 000000000000
        assert generator.next_id() == 679215357097832448
        assert len(calls) == 3
        assert generator._sequence == 0
        assert generator._last_timestamp == 1450772535000

    def test_new_millisecond_resets_sequence(self, generator):
        generator._last_timestamp = 1450772534000
        generator._sequence = 1234
        generator._time_source = lambda: 1450772534001

        parts = decode_id(generator.next_id())
        assert parts.sequence == 0
        assert parts.timestamp == 1450772534001

    def test_packs_location(self):
        g = IdGenerator(5, 19, time_source=lambda: 1541883369255)
        parts = decode_id(g.next_id())
        assert parts.worker_id == 5
        assert parts.datacenter_id == 19
        assert parts.timestamp == 1541883369255

    def test_ids_increase_with_non_decreasing_clock(self):
        ticks = [1450772534000] * 3 + [1450772534001] * 2 + [1450772534005] * 4
        clock = iter(ticks)
        g = IdGenerator(1, 2, time_source=lambda: next(clock))

        ids = [g.next_id() for _ in ticks]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_converts_to_current_timestamp(self, generator):
        before = current_millis()
        id = generator.next_id()
        after = current_millis()
        assert before <= id_to_timestamp(id) <= after

    def test_iter_ids(self, generator):
        ids = list(generator.iter_ids(100))
        assert len(ids) == 100
        assert ids == sorted(set(ids))

    def test_unique_across_threads(self):
        g = IdGenerator(3, 3)
        results = [[] for _ in range(8)]

        def worker(out):
            for _ in range(2000):
                out.append(g.next_id())

        threads = [threading.Thread(target=worker, args=(out,)) for out in results]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        all_ids = [id for out in results for id in out]
        assert len(set(all_ids)) == len(all_ids)
        for out in results:
            assert out == sorted(out)

    def test_time_source_is_real_clock_by_default(self, generator):
        assert abs(generator._time_source() - time.time() * 1000) < 1000
