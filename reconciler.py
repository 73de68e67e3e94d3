"""
Idempotent schema reconciliation for the event management database.

Every step runs at most once per invocation with no retries. Two failures
are tolerated and reported: a rejected validator update on an existing
collection, and the optional soft-delete index. Everything else propagates
and stops the run, leaving whatever was already applied in place.
"""

import logging
from typing import Iterable, List, Optional

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError

from definitions import COLLECTIONS, SOFT_DELETE_FIELD, soft_delete_index_name
from schemas import (
    CollectionAction,
    CollectionResult,
    CollectionSpec,
    CollectionState,
    IndexSpec,
    ReconcileReport,
    SchemaState,
)

logger = logging.getLogger(__name__)


def ensure_collection(
    db: Database,
    name: str,
    validator: Optional[dict] = None,
    validation_level: str = "moderate",
    validation_action: str = "error",
) -> CollectionResult:
    """Create the collection, or patch the validator of an existing one.

    Only an OperationFailure from collMod is caught; it comes back as a
    FAILED result so the remaining collections still get provisioned.
    """
    if name not in db.list_collection_names():
        options = {}
        if validator is not None:
            options = {
                "validator": validator,
                "validationLevel": validation_level,
                "validationAction": validation_action,
            }
        db.create_collection(name, **options)
        logger.info("✓ Created collection: %s", name)
        return CollectionResult(name=name, action=CollectionAction.CREATED)

    if validator is None:
        logger.info("• Collection exists: %s", name)
        return CollectionResult(name=name, action=CollectionAction.SKIPPED)

    try:
        db.command(
            "collMod",
            name,
            validator=validator,
            validationLevel=validation_level,
            validationAction=validation_action,
        )
    except OperationFailure as e:
        logger.warning("! Could not update validator for %s: %s", name, e)
        return CollectionResult(name=name, action=CollectionAction.FAILED, reason=str(e))

    logger.info("✓ Updated validator for: %s", name)
    return CollectionResult(name=name, action=CollectionAction.UPDATED)


def ensure_indexes(collection: Collection, indexes: Iterable[IndexSpec]) -> List[str]:
    """Create all indexes in a single batch and return their names.

    Existing indexes with the same name and keys are left alone by the
    server. A failure (e.g. a unique index over duplicate data) is logged
    and re-raised.
    """
    models = [index.to_index_model() for index in indexes]
    if not models:
        return []
    try:
        names = collection.create_indexes(models)
    except PyMongoError as e:
        logger.error("✗ Could not create indexes for %s: %s", collection.name, e)
        raise
    logger.debug("Indexes in place for %s: %s", collection.name, ", ".join(names))
    return names


def ensure_soft_delete_index(collection: Collection) -> bool:
    """Best-effort {isDeleted: 1} index; never raises."""
    try:
        collection.create_index(
            [(SOFT_DELETE_FIELD, ASCENDING)],
            name=soft_delete_index_name(collection.name),
        )
    except PyMongoError as e:
        logger.debug("Skipped soft-delete index for %s: %s", collection.name, e)
        return False
    return True


def reconcile_collection(db: Database, spec: CollectionSpec) -> CollectionResult:
    result = ensure_collection(
        db,
        spec.name,
        validator=spec.validator,
        validation_level=spec.validation_level,
        validation_action=spec.validation_action,
    )
    result.indexes = ensure_indexes(db[spec.name], spec.indexes)
    return result


def reconcile(db: Database, specs: Iterable[CollectionSpec] = COLLECTIONS) -> ReconcileReport:
    """Bring every declared collection, validator and index into place.

    Collections are handled in the given order. The soft-delete index pass
    runs once all of them exist.
    """
    report = ReconcileReport()
    for spec in specs:
        report.results.append(reconcile_collection(db, spec))

    for result in report.results:
        result.soft_delete_index = ensure_soft_delete_index(db[result.name])

    failed = report.failed()
    if failed:
        logger.warning(
            "MongoDB initialization finished with %d validator update failure(s): %s",
            len(failed),
            ", ".join(r.name for r in failed),
        )
    else:
        logger.info("✓ MongoDB initialization complete.")
    return report


def validator_matches(spec: CollectionSpec, options: dict) -> bool:
    """Whether listCollections options carry exactly the declared validation."""
    if options.get("validator") != spec.validator:
        return False
    if spec.validator is None:
        return True
    return (
        options.get("validationLevel") == spec.validation_level
        and options.get("validationAction") == spec.validation_action
    )


def inspect_schema(db: Database, specs: Iterable[CollectionSpec] = COLLECTIONS) -> SchemaState:
    """Read-only snapshot of how far the database matches the definitions."""
    existing = {info["name"]: info.get("options", {}) for info in db.list_collections()}
    state = SchemaState(database=db.name)
    for spec in specs:
        if spec.name not in existing:
            state.collections.append(
                CollectionState(name=spec.name, missing_indexes=spec.index_names)
            )
            continue
        options = existing[spec.name]
        present = [name for name in db[spec.name].index_information() if name != "_id_"]
        state.collections.append(
            CollectionState(
                name=spec.name,
                exists=True,
                has_validator="validator" in options,
                validator_matches=validator_matches(spec, options),
                validation_level=options.get("validationLevel"),
                validation_action=options.get("validationAction"),
                indexes=present,
                missing_indexes=[n for n in spec.index_names if n not in present],
            )
        )
    return state
