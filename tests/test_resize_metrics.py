from image_edge.core.resize_metrics import (
    get_resolution_metrics,
    record_resolution,
    reset_resolution_metrics,
)


def test_metrics_count_known_kinds_only():
    reset_resolution_metrics()
    record_resolution("cache_hit")
    record_resolution("cache_hit")
    record_resolution("origin_fetch")
    record_resolution("no_such_kind")

    metrics = get_resolution_metrics()
    assert metrics["cache_hit"] == 2
    assert metrics["origin_fetch"] == 1
    assert "no_such_kind" not in metrics


def test_snapshot_is_a_copy():
    snapshot = get_resolution_metrics()
    snapshot["failed"] = 999
    assert get_resolution_metrics()["failed"] != 999
