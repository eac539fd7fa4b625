"""Tests for duplicate removal across topic stores."""
import json

from improvement.dedupe import dedupe_topics

HASHING = "How does consistent hashing distribute keys across cache nodes?"
HASHING_AGAIN = "How does consistent hashing distribute keys across the cache nodes?"


class TestDedupeTopics:
    def test_keeps_older_question(self, store, write_topic, good_question_data):
        write_topic("system-design", [
            dict(good_question_data, id="sd-1", question=HASHING, lastUpdated="2024-01-01T00:00:00Z"),
            dict(good_question_data, id="sd-2", question=HASHING_AGAIN, lastUpdated="2023-01-01T00:00:00Z"),
        ])

        report = dedupe_topics(store)

        assert [(r.removed_id, r.kept_id) for r in report.removed] == [("sd-1", "sd-2")]
        assert report.removed[0].similarity == 0.9
        assert [q.id for q in store.load("system-design")] == ["sd-2"]

    def test_tie_keeps_second(self, store, write_topic, good_question_data):
        write_topic("system-design", [
            dict(good_question_data, id="sd-1", question=HASHING),
            dict(good_question_data, id="sd-2", question=HASHING_AGAIN),
        ])
        report = dedupe_topics(store)
        assert report.removed[0].removed_id == "sd-1"

    def test_at_most_one_removal_per_topic(self, store, write_topic, good_question_data):
        write_topic("system-design", [
            dict(good_question_data, id=f"sd-{i}", question=HASHING) for i in range(1, 4)
        ])

        report = dedupe_topics(store)

        assert len(report.removed) == 1
        assert len(store.load("system-design")) == 2
        assert report.total_remaining == 2

    def test_clean_topics_untouched(self, store, write_topic, good_question_data):
        path = write_topic("kubernetes", [dict(good_question_data, id="ku-1")])
        before = path.read_text()

        report = dedupe_topics(store)

        assert report.removed == []
        assert report.clean_topics == ["kubernetes"]
        assert report.to_output()["removed_ids"] == ""
        assert path.read_text() == before

    def test_index_rebuilt(self, store, write_topic, good_question_data):
        write_topic("system-design", [
            dict(good_question_data, id="sd-1", question=HASHING),
            dict(good_question_data, id="sd-2", question=HASHING_AGAIN),
        ])
        dedupe_topics(store)
        index = json.loads(store.index_path.read_text())
        assert [q["id"] for q in index["system-design"]] == ["sd-2"]
