"""
Database Schemas for the Event Management App

Pydantic models describing how each MongoDB collection is provisioned
(validator, validation options, named indexes) and what a provisioning run
reports back. The document shapes themselves live in `definitions.py`.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, computed_field
from pymongo import IndexModel


class IndexSpec(BaseModel):
    keys: List[Tuple[str, Union[int, str]]] = Field(..., description="Ordered (field, direction) pairs; direction 1, -1 or 'text'")
    name: str = Field(..., description="Stable index name, re-runs match on it")
    unique: bool = Field(False, description="Reject duplicate key values")

    def to_index_model(self) -> IndexModel:
        options = {"name": self.name}
        if self.unique:
            options["unique"] = True
        return IndexModel(self.keys, **options)


class CollectionSpec(BaseModel):
    name: str = Field(..., description="Collection name")
    json_schema: Optional[Dict[str, Any]] = Field(None, description="Body of the $jsonSchema validator")
    validation_level: Literal["off", "strict", "moderate"] = Field("moderate", description="Which writes get validated")
    validation_action: Literal["error", "warn"] = Field("error", description="Reject or only log invalid writes")
    indexes: List[IndexSpec] = Field(default_factory=list, description="Secondary indexes")

    @property
    def validator(self) -> Optional[Dict[str, Any]]:
        if self.json_schema is None:
            return None
        return {"$jsonSchema": self.json_schema}

    @property
    def required(self) -> List[str]:
        return list((self.json_schema or {}).get("required", []))

    @property
    def index_names(self) -> List[str]:
        return [index.name for index in self.indexes]


# --------- Provisioning results ---------
class CollectionAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class CollectionResult(BaseModel):
    name: str = Field(..., description="Collection name")
    action: CollectionAction = Field(..., description="What happened to the collection and its validator")
    reason: Optional[str] = Field(None, description="Database message when the validator update failed")
    indexes: List[str] = Field(default_factory=list, description="Index names reported by the index batch")
    soft_delete_index: bool = Field(False, description="Whether the optional soft-delete index is in place")


class ReconcileReport(BaseModel):
    results: List[CollectionResult] = Field(default_factory=list)

    def get(self, name: str) -> Optional[CollectionResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None

    def created(self) -> List[str]:
        return [r.name for r in self.results if r.action == CollectionAction.CREATED]

    def failed(self) -> List[CollectionResult]:
        return [r for r in self.results if r.action == CollectionAction.FAILED]


# --------- Inspection snapshot ---------
class CollectionState(BaseModel):
    name: str
    exists: bool = False
    has_validator: bool = False
    validator_matches: bool = Field(False, description="Validator, level and action equal the declared ones")
    validation_level: Optional[str] = None
    validation_action: Optional[str] = None
    indexes: List[str] = Field(default_factory=list, description="Index names present, _id_ excluded")
    missing_indexes: List[str] = Field(default_factory=list, description="Declared index names not present")

    @computed_field
    @property
    def ok(self) -> bool:
        return self.exists and self.validator_matches and not self.missing_indexes


class SchemaState(BaseModel):
    database: str
    collections: List[CollectionState] = Field(default_factory=list)

    @computed_field
    @property
    def ok(self) -> bool:
        return all(c.ok for c in self.collections)
