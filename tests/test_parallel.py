import sys
from pathlib import Path

# Add project root to path so we can import milk_filter
sys.path.append(str(Path(__file__).parent.parent))

import threading
import pytest
from milk_filter.core.parallel import row_bands, run_row_bands

@pytest.mark.parametrize('height,workers', [(1, 4), (15, 8), (100, 3), (1000, 7), (257, None)])
def test_row_bands_cover_all_rows_once(height, workers):
    bands = row_bands(height, workers)
    rows = [y for start, stop in bands for y in range(start, stop)]
    assert rows == list(range(height))
    if workers is not None:
        assert len(bands) <= workers

def test_row_bands_empty():
    assert row_bands(0, 4) == []

def test_run_row_bands_visits_every_row():
    seen = []
    lock = threading.Lock()

    def visit(start, stop):
        with lock:
            seen.extend(range(start, stop))

    run_row_bands(visit, 500, max_workers=4)
    assert sorted(seen) == list(range(500))

def test_run_row_bands_propagates_errors():
    def fail(start, stop):
        if start > 0:
            raise RuntimeError("band failed")

    with pytest.raises(RuntimeError, match="band failed"):
        run_row_bands(fail, 500, max_workers=4)
