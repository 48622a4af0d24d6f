"""MongoDB index management.

Each repository declares its indexes as IndexSpec entries; apply_indexes
creates them and repairs name/key conflicts left over from older schemas.
"""

from dataclasses import dataclass, field
from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = getLogger(__name__)


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: list[tuple[str, int]]
    options: dict = field(default_factory=dict)


def apply_indexes(collection: Collection, specs: list[IndexSpec]) -> bool:
    """Create every index in specs. Return True only if all of them exist afterwards."""
    ok = True
    for spec in specs:
        try:
            collection.create_index(spec.keys, name=spec.name, **spec.options)
        except PyMongoError as e:
            if "already exists" not in str(e) and "Conflict" not in str(e):
                logger.error("Index creation failed", extra={"index": spec.name, "error": str(e)})
                ok = False
                continue
            ok = _replace_conflicting(collection, spec) and ok
    return ok


def _replace_conflicting(collection: Collection, spec: IndexSpec) -> bool:
    """Drop an index that shares spec's name or keys (but not both) and recreate spec."""
    wanted = dict(spec.keys)

    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == spec.name
        same_keys = dict(idx_info.get('key', [])) == wanted
        if same_name != same_keys:
            logger.warning(f"Dropping conflicting index: {idx_name}")
            collection.drop_index(idx_name)
            collection.create_index(spec.keys, name=spec.name, **spec.options)
            logger.info(f"Recreated index: {spec.name}")
            return True

    logger.error(f"Failed to resolve index conflict for {spec.name}")
    return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
