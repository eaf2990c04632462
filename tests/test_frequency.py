from __future__ import annotations

import io

import pytest

from huffkit.core.bitio import iter_file_symbols
from huffkit.core.frequency import count_frequencies, freq_to_used, used_to_freq


def test_count_exact_and_no_zero_entries() -> None:
    freq = count_frequencies(b"abracadabra")
    assert freq == {ord("a"): 5, ord("b"): 2, ord("r"): 2, ord("c"): 1, ord("d"): 1}
    assert all(f > 0 for f in freq.values())
    assert ord("z") not in freq


def test_count_empty() -> None:
    assert count_frequencies(b"") == {}
    assert count_frequencies(iter(())) == {}


def test_count_consumes_lazy_source() -> None:
    fp = io.BytesIO(bytes(range(256)) * 3)
    freq = count_frequencies(iter_file_symbols(fp, chunk_size=7))
    assert len(freq) == 256
    assert set(freq.values()) == {3}
    assert fp.read() == b""


def test_count_propagates_source_errors() -> None:
    def broken():
        yield 1
        yield 2
        raise OSError("disk gone")

    with pytest.raises(OSError, match="disk gone"):
        count_frequencies(broken())


def test_used_roundtrip_sorted() -> None:
    freq = {200: 1, 3: 9, 50: 2, 7: 0}
    used = freq_to_used(freq)
    assert used == [(3, 9), (50, 2), (200, 1)]
    assert used_to_freq(used) == {3: 9, 50: 2, 200: 1}


@pytest.mark.parametrize("used", [[(256, 1)], [(-1, 1)], [(4, 1), (4, 2)]])
def test_used_to_freq_rejects_bad_entries(used) -> None:
    with pytest.raises(ValueError):
        used_to_freq(used)
