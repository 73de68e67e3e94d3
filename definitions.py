"""
Collection definitions for the event management database.

users, events, rsvps and attendees, each with a $jsonSchema validator and
its secondary indexes. organizerId, eventId and userId point at other
collections but nothing enforces those references.
"""

from typing import List

from schemas import CollectionSpec, IndexSpec

DB_NAME = "myapp"
SOFT_DELETE_FIELD = "isDeleted"

NUMBER = ["double", "decimal", "int", "long"]

USERS = CollectionSpec(
    name="users",
    json_schema={
        "bsonType": "object",
        "required": ["email", "name", "passwordHash", "createdAt", "updatedAt"],
        "additionalProperties": True,
        "properties": {
            "_id": {"bsonType": "objectId"},
            "email": {
                "bsonType": "string",
                "description": "User email (unique, lowercased)",
                "pattern": r"^[^\s@]+@[^\s@]+\.[^\s@]+$",
            },
            "name": {"bsonType": "string", "minLength": 1, "description": "Display name"},
            "passwordHash": {"bsonType": "string", "description": "BCrypt/Argon2 hash"},
            "avatarUrl": {"bsonType": ["string", "null"]},
            "roles": {
                "bsonType": "array",
                "items": {"bsonType": "string"},
                "description": "Roles like 'admin', 'organizer', 'user'",
            },
            "status": {"enum": ["active", "disabled"], "description": "Account status"},
            "createdAt": {"bsonType": "date"},
            "updatedAt": {"bsonType": "date"},
            "lastLoginAt": {"bsonType": ["date", "null"]},
        },
    },
    indexes=[
        IndexSpec(keys=[("email", 1)], name="uniq_email", unique=True),
        IndexSpec(keys=[("status", 1)], name="status_idx"),
        IndexSpec(keys=[("createdAt", -1)], name="users_createdAt_desc"),
    ],
)

EVENTS = CollectionSpec(
    name="events",
    json_schema={
        "bsonType": "object",
        "required": [
            "title",
            "description",
            "startTime",
            "endTime",
            "organizerId",
            "visibility",
            "capacity",
            "createdAt",
            "updatedAt",
        ],
        "additionalProperties": True,
        "properties": {
            "_id": {"bsonType": "objectId"},
            "title": {"bsonType": "string", "minLength": 1},
            "description": {"bsonType": "string"},
            "organizerId": {"bsonType": "objectId", "description": "Ref to users._id"},
            "location": {
                "bsonType": "object",
                "additionalProperties": True,
                "properties": {
                    "name": {"bsonType": "string"},
                    "address": {"bsonType": "string"},
                    "lat": {"bsonType": NUMBER},
                    "lng": {"bsonType": NUMBER},
                },
            },
            "startTime": {"bsonType": "date"},
            "endTime": {"bsonType": "date"},
            "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
            "visibility": {"enum": ["public", "private", "unlisted"]},
            "capacity": {"bsonType": "int", "minimum": 0},
            "status": {"enum": ["draft", "published", "cancelled"]},
            "coverImageUrl": {"bsonType": ["string", "null"]},
            "createdAt": {"bsonType": "date"},
            "updatedAt": {"bsonType": "date"},
        },
    },
    indexes=[
        IndexSpec(keys=[("organizerId", 1), ("startTime", -1)], name="organizer_startTime_idx"),
        IndexSpec(keys=[("startTime", 1)], name="startTime_asc"),
        IndexSpec(keys=[("endTime", 1)], name="endTime_asc"),
        IndexSpec(keys=[("visibility", 1), ("startTime", 1)], name="visibility_start_idx"),
        IndexSpec(keys=[("status", 1)], name="status_idx"),
        IndexSpec(keys=[("tags", 1)], name="tags_idx"),
        # full text search over title and description
        IndexSpec(keys=[("title", "text"), ("description", "text")], name="text_title_description"),
    ],
)

RSVPS = CollectionSpec(
    name="rsvps",
    json_schema={
        "bsonType": "object",
        "required": ["eventId", "userId", "status", "createdAt", "updatedAt"],
        "additionalProperties": True,
        "properties": {
            "_id": {"bsonType": "objectId"},
            "eventId": {"bsonType": "objectId", "description": "Ref to events._id"},
            "userId": {"bsonType": "objectId", "description": "Ref to users._id"},
            "status": {"enum": ["yes", "no", "maybe", "waitlist"]},
            "note": {"bsonType": ["string", "null"]},
            "guests": {"bsonType": "int", "minimum": 0, "description": "Number of extra guests"},
            "createdAt": {"bsonType": "date"},
            "updatedAt": {"bsonType": "date"},
        },
    },
    indexes=[
        IndexSpec(keys=[("eventId", 1), ("userId", 1)], name="uniq_event_user", unique=True),
        IndexSpec(keys=[("eventId", 1), ("status", 1)], name="event_status_idx"),
        IndexSpec(keys=[("userId", 1), ("updatedAt", -1)], name="user_recent_idx"),
        IndexSpec(keys=[("createdAt", -1)], name="rsvp_createdAt_desc"),
    ],
)

# Materialized attendee list per event, read without joining rsvps/users
ATTENDEES = CollectionSpec(
    name="attendees",
    json_schema={
        "bsonType": "object",
        "required": ["eventId", "userId", "attendeeStatus", "createdAt", "updatedAt"],
        "additionalProperties": True,
        "properties": {
            "_id": {"bsonType": "objectId"},
            "eventId": {"bsonType": "objectId", "description": "Ref to events._id"},
            "userId": {"bsonType": "objectId", "description": "Ref to users._id"},
            "attendeeStatus": {"enum": ["confirmed", "waitlisted", "checked_in", "cancelled"]},
            "checkInAt": {"bsonType": ["date", "null"]},
            # snapshot of the user at RSVP time
            "userName": {"bsonType": ["string", "null"]},
            "userEmail": {"bsonType": ["string", "null"]},
            "createdAt": {"bsonType": "date"},
            "updatedAt": {"bsonType": "date"},
        },
    },
    indexes=[
        IndexSpec(keys=[("eventId", 1), ("userId", 1)], name="uniq_event_user", unique=True),
        IndexSpec(keys=[("eventId", 1), ("attendeeStatus", 1)], name="event_attendeeStatus_idx"),
        IndexSpec(keys=[("eventId", 1), ("checkInAt", -1)], name="event_checkIn_desc"),
        IndexSpec(keys=[("userId", 1), ("updatedAt", -1)], name="user_attendance_recent_idx"),
    ],
)

COLLECTIONS: List[CollectionSpec] = [USERS, EVENTS, RSVPS, ATTENDEES]


def soft_delete_index_name(collection_name: str) -> str:
    return f"{collection_name}_{SOFT_DELETE_FIELD}_idx"
