"""
Brand profile ingestion tests.

Tests verify:
- Profile rows are built only for sections with content
- Topic rows get sanitized topic:: source keys
- Stale topic pruning is best-effort, upsert failures propagate
- A brand without an id is skipped
"""

from unittest.mock import MagicMock

import pytest

from lumora.brandbrain.ingestion import (
    IngestableBrand,
    build_brand_vector_entries,
    ingest_brand_profile,
    normalize_topic,
    sanitize_source_key,
)
from lumora.brandbrain.vector_store import BrandVectorStore


class RecordingStore:
    """In-memory stand-in for BrandVectorStore."""

    def __init__(self, prune_error=None):
        self.upserts = []
        self.pruned = []
        self.prune_error = prune_error

    def upsert(self, payload, embedding):
        self.upserts.append((payload, embedding))

    def prune_topics(self, brand_id, keep_keys):
        if self.prune_error:
            raise self.prune_error
        self.pruned.append((brand_id, list(keep_keys)))


def _embed(text):
    return [float(len(text))]


class TestSanitizeSourceKey:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Brewing Tips", "brewing-tips"),
            ("  Café & Co!! ", "caf-co"),
            ("a---b", "a-b"),
        ],
    )
    def test_slugifies(self, value, expected):
        assert sanitize_source_key(value, "fallback") == expected

    def test_fallback_when_nothing_left(self):
        assert sanitize_source_key("!!!", "topic-2") == "topic-2"


class TestNormalizeTopic:
    def test_accepts_camel_case_dict(self):
        topic = normalize_topic({"label": " Recipes ", "weight": 2, "minFrequency": 1, "maxFrequency": 4})

        assert topic.label == "Recipes"
        assert topic.min_frequency == 1
        assert topic.max_frequency == 4

    def test_accepts_objects(self):
        obj = MagicMock(label="Gear", weight=3, min_frequency=None, max_frequency=2, examples=["grinder"])
        topic = normalize_topic(obj)

        assert topic.label == "Gear"
        assert topic.examples == ["grinder"]


class TestBuildEntries:
    def test_full_brand_builds_three_profile_rows(self):
        brand = IngestableBrand(
            id="b-1",
            name="Northwind",
            mission="Approachable coffee",
            dos=["Show the roast"],
            proof_points=["Roasted weekly"],
        )

        entries, topic_keys = build_brand_vector_entries(brand, [])

        assert [e.source_key for e in entries] == [
            "profile::positioning",
            "profile::guardrails",
            "profile::proof",
        ]
        assert [e.type for e in entries] == ["positioning", "guardrails", "social-proof"]
        assert "Mission: Approachable coffee" in entries[0].content
        assert entries[1].content == "Do:\n- Show the roast"
        assert entries[0].metadata == {"name": "Northwind"}
        assert topic_keys == []

    def test_empty_sections_are_skipped(self):
        entries, _ = build_brand_vector_entries(IngestableBrand(id="b-1", name="Bare"), [])

        assert [e.source_key for e in entries] == ["profile::positioning"]
        assert entries[0].content == "Brand: Bare"

    def test_topic_rows(self):
        brand = IngestableBrand(id="b-1", name="Northwind")
        topics = [
            {"label": "Brewing Tips", "weight": 5, "examples": ["pour over"]},
            {"label": "   "},
            {"label": "???", "weight": 1},
        ]

        entries, topic_keys = build_brand_vector_entries(brand, topics)

        assert topic_keys == ["topic::brewing-tips", "topic::topic-1"]
        topic_entry = entries[1]
        assert topic_entry.type == "topic"
        assert topic_entry.content == "Topic: Brewing Tips\nWeight: 5\nExamples:\n- pour over"
        assert topic_entry.metadata["label"] == "Brewing Tips"


class TestIngestBrandProfile:
    def test_upserts_every_entry(self):
        store = RecordingStore()
        brand = IngestableBrand(id="b-1", name="Northwind", dos=["Smile"])

        count = ingest_brand_profile(brand, [{"label": "Recipes"}], store=store, embed=_embed)

        assert count == 3
        assert [p.source_key for p, _ in store.upserts] == [
            "profile::positioning",
            "profile::guardrails",
            "topic::recipes",
        ]
        assert store.pruned == [("b-1", ["topic::recipes"])]
        payload, embedding = store.upserts[0]
        assert embedding == [float(len(payload.content))]

    def test_prune_failure_is_tolerated(self):
        store = RecordingStore(prune_error=RuntimeError("postgrest down"))

        count = ingest_brand_profile(IngestableBrand(id="b-1", name="N"), [], store=store, embed=_embed)

        assert count == 1

    def test_upsert_failure_propagates(self):
        store = MagicMock(spec=BrandVectorStore)
        store.upsert.side_effect = RuntimeError("insert failed")

        with pytest.raises(RuntimeError, match="insert failed"):
            ingest_brand_profile(IngestableBrand(id="b-1", name="N"), [], store=store, embed=_embed)

    def test_brand_without_id_is_skipped(self):
        store = RecordingStore()

        assert ingest_brand_profile(IngestableBrand(id=None, name="N"), [], store=store, embed=_embed) == 0
        assert store.upserts == []

    @pytest.mark.django_db
    def test_accepts_model_instance(self, brand, topics):
        store = RecordingStore()

        count = ingest_brand_profile(brand, brand.topics.all(), store=store, embed=_embed)

        assert count == 6
        assert store.upserts[0][0].brand_id == str(brand.id)
        assert "Visuals: golden hour, steam, ceramic" in store.upserts[0][0].content


class TestBrandVectorStore:
    def test_upsert_uses_conflict_columns(self):
        supabase = MagicMock()
        store = BrandVectorStore(client=supabase)
        payload = build_brand_vector_entries(IngestableBrand(id="b-1", name="N"), [])[0][0]

        store.upsert(payload, [0.5])

        supabase.table.assert_called_with("brand_vectors")
        row = supabase.table.return_value.upsert.call_args.args[0]
        assert row["source_key"] == "profile::positioning"
        assert row["embedding"] == [0.5]
        assert supabase.table.return_value.upsert.call_args.kwargs["on_conflict"] == "brand_id,source_key"

    def test_prune_keeps_current_keys(self):
        supabase = MagicMock()
        store = BrandVectorStore(client=supabase)

        store.prune_topics("b-1", ["topic::a"])

        query = supabase.table.return_value.delete.return_value.eq.return_value.like.return_value
        supabase.table.return_value.delete.return_value.eq.assert_called_with("brand_id", "b-1")
        supabase.table.return_value.delete.return_value.eq.return_value.like.assert_called_with(
            "source_key", "topic::%"
        )
        query.not_.in_.assert_called_with("source_key", ["topic::a"])
        query.not_.in_.return_value.execute.assert_called_once()

    def test_prune_without_keys_drops_all_topics(self):
        supabase = MagicMock()
        store = BrandVectorStore(client=supabase)

        store.prune_topics("b-1", [])

        query = supabase.table.return_value.delete.return_value.eq.return_value.like.return_value
        query.execute.assert_called_once()
        query.not_.in_.assert_not_called()

    def test_match_calls_rpc(self):
        supabase = MagicMock()
        supabase.rpc.return_value.execute.return_value.data = [{"id": 1}]
        store = BrandVectorStore(client=supabase)

        rows = store.match("b-1", [0.1], limit=3)

        assert rows == [{"id": 1}]
        supabase.rpc.assert_called_with(
            "match_brand_vectors",
            {"brand_id": "b-1", "match_count": 3, "query_embedding": [0.1]},
        )
