"""Tests for the collection definitions."""

from definitions import ATTENDEES, COLLECTIONS, DB_NAME, EVENTS, RSVPS, USERS, soft_delete_index_name
from schemas import CollectionSpec, IndexSpec


class TestCollectionDefinitions:
    """Tests for the four declared collections."""

    def test_fixed_order(self):
        """Test collections are processed users, events, rsvps, attendees."""
        assert [spec.name for spec in COLLECTIONS] == ["users", "events", "rsvps", "attendees"]
        assert DB_NAME == "myapp"

    def test_validation_options(self):
        """Test every collection validates at moderate level with error action."""
        for spec in COLLECTIONS:
            assert spec.validation_level == "moderate"
            assert spec.validation_action == "error"
            assert spec.validator["$jsonSchema"]["bsonType"] == "object"
            assert spec.validator["$jsonSchema"]["additionalProperties"] is True

    def test_required_fields(self):
        """Test the required field lists."""
        assert USERS.required == ["email", "name", "passwordHash", "createdAt", "updatedAt"]
        assert "organizerId" in EVENTS.required
        assert "capacity" in EVENTS.required
        assert RSVPS.required == ["eventId", "userId", "status", "createdAt", "updatedAt"]
        assert ATTENDEES.required == ["eventId", "userId", "attendeeStatus", "createdAt", "updatedAt"]

    def test_enums(self):
        """Test enum fields list exactly the allowed literals."""
        assert USERS.json_schema["properties"]["status"]["enum"] == ["active", "disabled"]
        assert EVENTS.json_schema["properties"]["visibility"]["enum"] == ["public", "private", "unlisted"]
        assert EVENTS.json_schema["properties"]["status"]["enum"] == ["draft", "published", "cancelled"]
        assert RSVPS.json_schema["properties"]["status"]["enum"] == ["yes", "no", "maybe", "waitlist"]
        assert ATTENDEES.json_schema["properties"]["attendeeStatus"]["enum"] == [
            "confirmed",
            "waitlisted",
            "checked_in",
            "cancelled",
        ]

    def test_non_negative_integers(self):
        """Test capacity and guests are ints with a zero minimum."""
        for field in (EVENTS.json_schema["properties"]["capacity"], RSVPS.json_schema["properties"]["guests"]):
            assert field["bsonType"] == "int"
            assert field["minimum"] == 0

    def test_unique_indexes(self):
        """Test uniqueness is declared on email and on (eventId, userId)."""
        unique = {spec.name: [i for i in spec.indexes if i.unique] for spec in COLLECTIONS}

        assert [(i.name, i.keys) for i in unique["users"]] == [("uniq_email", [("email", 1)])]
        assert unique["events"] == []
        for name in ("rsvps", "attendees"):
            assert [(i.name, i.keys) for i in unique[name]] == [
                ("uniq_event_user", [("eventId", 1), ("userId", 1)])
            ]

    def test_index_names_unique_per_collection(self):
        """Test no collection declares the same index name twice."""
        for spec in COLLECTIONS:
            assert len(spec.index_names) == len(set(spec.index_names))

    def test_text_index(self):
        """Test the events text index covers title and description."""
        text = next(i for i in EVENTS.indexes if i.name == "text_title_description")

        assert text.keys == [("title", "text"), ("description", "text")]
        assert text.to_index_model().document["key"] == {"title": "text", "description": "text"}

    def test_soft_delete_index_name(self):
        """Test the soft-delete index name embeds the collection name."""
        assert soft_delete_index_name("rsvps") == "rsvps_isDeleted_idx"


class TestDefinitionModels:
    """Tests for the definition models."""

    def test_collection_without_validator(self):
        """Test a collection declared without a schema has no validator or required fields."""
        spec = CollectionSpec(name="plain")

        assert spec.validator is None
        assert spec.required == []
        assert spec.indexes == []

    def test_index_model_options(self):
        """Test the unique flag is only sent when set."""
        plain = IndexSpec(keys=[("createdAt", -1)], name="created_desc").to_index_model()
        unique = IndexSpec(keys=[("email", 1)], name="uniq_email", unique=True).to_index_model()

        assert plain.document == {"key": {"createdAt": -1}, "name": "created_desc"}
        assert unique.document["unique"] is True
