import io
import json
from datetime import datetime, timezone

import pytest

from ar5iv_util.latest_versions_from_snapshot import (
    gather_multi_version_ids,
    has_version_since,
    iter_json_values,
    main,
)

OLD_TWO_VERSIONS = {
    "id": "0704.0001",
    "versions": [
        {"version": "v1", "created": "Mon, 2 Apr 2007 19:18:42 GMT"},
        {"version": "v2", "created": "Tue, 24 Jul 2007 20:10:27 GMT"},
    ],
}
RECENT_TWO_VERSIONS = {
    "id": "2501.00001",
    "versions": [
        {"version": "v1", "created": "Wed, 1 Jan 2025 10:00:00 GMT"},
        {"version": "v2", "created": "Mon, 9 Jun 2025 10:00:00 GMT"},
    ],
}
RECENT_SINGLE = {
    "id": "2506.00001",
    "versions": [{"version": "v1", "created": "Mon, 9 Jun 2025 10:00:00 GMT"}],
}


def test_iter_json_values_concatenated():
    stream = io.StringIO('{"a": 1} {"b": [1, 2]}\n{"c": "x"}\n')
    assert list(iter_json_values(stream)) == [{"a": 1}, {"b": [1, 2]}, {"c": "x"}]


def test_iter_json_values_top_level_numbers():
    assert list(iter_json_values(io.StringIO("1 2 30"))) == [1, 2, 30]


def test_iter_json_values_across_chunks():
    records = [{"id": f"id{n}", "pad": "x" * 40} for n in range(5000)]
    text = "\n".join(json.dumps(record) for record in records)
    assert list(iter_json_values(io.StringIO(text))) == records


def test_iter_json_values_empty():
    assert list(iter_json_values(io.StringIO("  \n"))) == []


def test_iter_json_values_truncated_raises():
    values = iter_json_values(io.StringIO('{"a": 1} {"b":'))
    assert next(values) == {"a": 1}
    with pytest.raises(json.JSONDecodeError):
        next(values)


def test_has_version_since_explicit_dates():
    assert has_version_since(OLD_TWO_VERSIONS, datetime(2007, 5, 1, tzinfo=timezone.utc))
    assert not has_version_since(OLD_TWO_VERSIONS, datetime(2008, 1, 1, tzinfo=timezone.utc))


def test_has_version_since_default_last_update():
    assert not has_version_since(OLD_TWO_VERSIONS)
    assert has_version_since(RECENT_TWO_VERSIONS)


def test_single_version_is_skipped():
    assert not has_version_since(RECENT_SINGLE)


def test_invalid_date_raises():
    record = {"id": "x", "versions": [{"created": "not a date"}, {"created": "nor this"}]}
    with pytest.raises(ValueError):
        has_version_since(record)


def _write_snapshot(path):
    path.write_text(
        "\n".join(json.dumps(r) for r in (OLD_TWO_VERSIONS, RECENT_TWO_VERSIONS, RECENT_SINGLE)),
        encoding="utf-8",
    )


def test_gather_multi_version_ids(tmp_path):
    snapshot = tmp_path / "snapshot.json"
    _write_snapshot(snapshot)
    output = tmp_path / "ids.txt"
    assert gather_multi_version_ids(snapshot, output) == 1
    assert output.read_text(encoding="utf-8") == "2501.00001\n"


def test_gather_with_early_date(tmp_path):
    snapshot = tmp_path / "snapshot.json"
    _write_snapshot(snapshot)
    output = tmp_path / "ids.txt"
    since = datetime(2000, 1, 1, tzinfo=timezone.utc)
    assert gather_multi_version_ids(snapshot, output, since) == 2
    assert output.read_text(encoding="utf-8").splitlines() == ["0704.0001", "2501.00001"]


def test_main(tmp_path):
    snapshot = tmp_path / "snapshot.json"
    _write_snapshot(snapshot)
    output = tmp_path / "ids.txt"
    assert main([str(snapshot), str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "2501.00001\n"