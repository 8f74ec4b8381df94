from __future__ import annotations

import logging
from typing import Any

import pytest

from phoenixplay.exceptions import EmptyDatasetError
from phoenixplay.models.records import ActorStateRecord, BurnRecord
from phoenixplay.timeline.bucketizer import bucketize, sort_records
from phoenixplay.timeline.policy import AccumulationPolicy, bucket_count


def _burn(hours: float | None, tag: str) -> BurnRecord:
    return BurnRecord(
        source_time=hours,
        time_scale=60,
        feature={"type": "Feature", "properties": {"HOUR_BURNT": hours, "tag": tag}, "geometry": None},
    )


def _actor(entity: str, hours: float | None, activity: str = "home") -> ActorStateRecord:
    return ActorStateRecord(
        source_time=hours,
        time_scale=60,
        entity_id=entity,
        end_hr=hours,
        x=151.0,
        y=-33.0,
        activity=activity,
        raw={"id": entity, "end_hr": hours, "type": activity},
    )


def _tags(collection_features: list[dict[str, Any]]) -> list[str]:
    return [feature["properties"]["tag"] for feature in collection_features]


def _hour_cursor(hours: list[float | None], step: int) -> list[list[int]]:
    """Membership by position, with every comparison made in hours."""
    order = sorted(range(len(hours)), key=lambda pos: (hours[pos] is not None, hours[pos] or 0.0))
    known = [h for h in hours if h is not None]
    total = bucket_count(max(known) * 60 if known else None, step)
    result: list[list[int]] = []
    cursor = 0
    for i in range(total):
        threshold = (i * step) / 60
        members: list[int] = []
        while cursor < len(order):
            value = hours[order[cursor]]
            if value is not None and not value < threshold:
                break
            members.append(order[cursor])
            cursor += 1
        result.append(members)
    return result


class TestBucketCount:
    @pytest.mark.parametrize(
        ("max_key", "expected"),
        [(None, 0), (0.0, 0), (-5.0, 0), (1.0, 1), (10.0, 1), (10.5, 2), (120.0, 12)],
    )
    def test_ceil_of_max_over_step(self, max_key: float | None, expected: int) -> None:
        assert bucket_count(max_key, 10) == expected

    def test_rejects_non_positive_step(self) -> None:
        with pytest.raises(ValueError):
            bucket_count(10.0, 0)


class TestExclusive:
    def test_reference_cursor_membership(self) -> None:
        records = [_burn(2.0, "late"), _burn(0.5, "half"), _burn(None, "null"), _burn(1.0, "hour")]

        buckets = bucketize(records, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        assert len(buckets) == 12
        membership = {b.index: _tags(b.collection.features) for b in buckets if b.feature_count}
        # Each bucket consumes keys strictly below its own lower bound; the
        # record at the maximum key is never reached.
        assert membership == {0: ["null"], 4: ["half"], 7: ["hour"]}

    def test_bucket_bounds(self) -> None:
        buckets = bucketize([_burn(0.5, "a")], step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        assert [(b.index, b.lower_bound_minutes, b.upper_bound_minutes) for b in buckets] == [
            (0, 0, 10),
            (1, 10, 20),
            (2, 20, 30),
        ]

    def test_each_record_in_at_most_one_bucket(self) -> None:
        hours = [0.05, 0.1, 0.1, 0.33, None, 0.9, 1.25, 1.26, 2.0, 0.0]
        records = [_burn(h, f"r{pos}") for pos, h in enumerate(hours)]

        buckets = bucketize(records, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        seen = [tag for b in buckets for tag in _tags(b.collection.features)]
        assert len(seen) == len(set(seen))

    def test_matches_linear_scan(self) -> None:
        hours = [0.05, 0.1, 0.1, 0.33, None, 0.9, 1.25, 1.26, 2.0, 0.0, None, 0.5]
        records = [_burn(h, str(pos)) for pos, h in enumerate(hours)]

        buckets = bucketize(records, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        expected = _hour_cursor(hours, 10)
        assert [[int(tag) for tag in _tags(b.collection.features)] for b in buckets] == expected

    def test_boundary_value_is_compared_in_hours(self) -> None:
        # 8.166666666666666 h equals bucket 49's bound (490 / 60) but falls
        # just below 490 once converted to minutes.
        hours = [8.166666666666666, 9.0]
        records = [_burn(h, str(pos)) for pos, h in enumerate(hours)]

        buckets = bucketize(records, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        assert len(buckets) == 54
        membership = {b.index: _tags(b.collection.features) for b in buckets if b.feature_count}
        assert membership == {50: ["0"]}
        assert [[int(tag) for tag in _tags(b.collection.features)] for b in buckets] == _hour_cursor(hours, 10)

    def test_equal_keys_keep_input_order(self) -> None:
        records = [_burn(0.1, "first"), _burn(0.5, "later"), _burn(0.1, "second"), _burn(0.1, "third")]

        buckets = bucketize(records, step_minutes=5, policy=AccumulationPolicy.EXCLUSIVE)

        assert _tags(buckets[2].collection.features) == ["first", "second", "third"]

    def test_features_are_passed_through(self) -> None:
        record = _burn(0.05, "only")
        record.feature["properties"]["E_INTSTY"] = 42000

        buckets = bucketize([record, _burn(1.0, "end")], step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        assert buckets[1].collection.features == [record.feature]

    def test_input_order_does_not_matter(self) -> None:
        hours = [0.2, None, 1.0, 0.7, 0.35]
        forward = [_burn(h, str(h)) for h in hours]

        a = bucketize(forward, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)
        b = bucketize(list(reversed(forward)), step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        assert [_tags(x.collection.features) for x in a] == [_tags(x.collection.features) for x in b]


class TestCumulativeLatest:
    def _records(self) -> list[ActorStateRecord]:
        return [
            _actor("a", 0.0, "home"),
            _actor("b", 0.1, "work"),
            _actor("a", 0.25, "beach"),
            _actor("b", 0.5, "shops"),
            _actor("a", 0.75, "home"),
        ]

    @staticmethod
    def _snapshot(bucket_features: list[dict[str, Any]]) -> dict[str, tuple[float, str]]:
        return {
            f["properties"]["person"]: (f["properties"]["end_hr"], f["properties"]["type"]) for f in bucket_features
        }

    def test_snapshots(self) -> None:
        buckets = bucketize(self._records(), step_minutes=10, policy=AccumulationPolicy.CUMULATIVE_LATEST)

        assert len(buckets) == 5
        snapshots = [self._snapshot(b.collection.features) for b in buckets]
        assert snapshots == [
            {"a": (0.0, "home"), "b": (0.1, "work")},
            {"a": (0.0, "home"), "b": (0.1, "work")},
            {"a": (0.25, "beach"), "b": (0.1, "work")},
            {"a": (0.25, "beach"), "b": (0.1, "work")},
            {"a": (0.25, "beach"), "b": (0.5, "shops")},
        ]

    def test_every_snapshot_lists_each_entity_once(self) -> None:
        buckets = bucketize(self._records(), step_minutes=10, policy=AccumulationPolicy.CUMULATIVE_LATEST)

        for bucket in buckets:
            people = [f["properties"]["person"] for f in bucket.collection.features]
            assert sorted(people) == ["a", "b"]

    def test_later_snapshots_reflect_latest_consumed_state(self) -> None:
        records = self._records()
        buckets = bucketize(records, step_minutes=10, policy=AccumulationPolicy.CUMULATIVE_LATEST)

        for bucket in buckets:
            threshold = bucket.lower_bound_minutes
            for feature in bucket.collection.features:
                person = feature["properties"]["person"]
                history = [r for r in sort_records(records) if r.entity_id == person]
                consumed = [r for r in history if r.source_time is None or r.source_time < threshold / 60]
                expected = consumed[-1] if consumed else history[0]
                assert feature["properties"]["end_hr"] == expected.end_hr

    def test_boundary_value_is_compared_in_hours(self) -> None:
        records = [_actor("a", 0.0, "home"), _actor("a", 8.166666666666666, "work"), _actor("b", 9.0, "beach")]

        buckets = bucketize(records, step_minutes=10, policy=AccumulationPolicy.CUMULATIVE_LATEST)

        assert self._snapshot(buckets[49].collection.features)["a"] == (0.0, "home")
        assert self._snapshot(buckets[50].collection.features)["a"] == (8.166666666666666, "work")

    def test_actor_features_carry_display_properties(self) -> None:
        buckets = bucketize([_actor("7", 0.5, "beach")], step_minutes=10, policy=AccumulationPolicy.CUMULATIVE_LATEST)

        feature = buckets[0].collection.features[0]
        assert feature == {
            "type": "Feature",
            "properties": {"person": "7", "end_hr": 0.5, "type": "beach", "color": "#e55e5e"},
            "geometry": {"type": "Point", "coordinates": [151.0, -33.0]},
        }


class TestEdgeCases:
    def test_empty_input_raises(self) -> None:
        with pytest.raises(EmptyDatasetError) as exc_info:
            bucketize([], step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE, dataset="fire-1")
        assert exc_info.value.dataset == "fire-1"
        assert exc_info.value.stage == "bucketize"

    def test_all_null_keys_produce_no_buckets(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="phoenixplay.timeline.bucketizer"):
            buckets = bucketize(
                [_burn(None, "a"), _burn(None, "b")],
                step_minutes=10,
                policy=AccumulationPolicy.EXCLUSIVE,
            )
        assert buckets == []
        assert "spans no time" in caplog.text

    def test_rejects_non_positive_step(self) -> None:
        with pytest.raises(ValueError):
            bucketize([_burn(1.0, "a")], step_minutes=0, policy=AccumulationPolicy.EXCLUSIVE)

    def test_deterministic(self) -> None:
        records = [_burn(h, str(h)) for h in (0.4, None, 0.1, 0.9)]

        first = bucketize(records, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)
        second = bucketize(records, step_minutes=10, policy=AccumulationPolicy.EXCLUSIVE)

        assert first == second
