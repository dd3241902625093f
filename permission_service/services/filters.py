"""
Filters select permission records without exposing MongoDB query syntax.

    store.get(by_pair("f1", "u1"))
    store.get_all(ByFileID("f1"))
    store.delete(And(ByUserID("u1"), ByRole("reader")))
"""

from dataclasses import dataclass
from typing import Any, Union

from bson import ObjectId

from permission_service.models.permission import (
    FILE_ID_FIELD,
    MONGO_OBJECT_ID_FIELD,
    ROLE_FIELD,
    USER_ID_FIELD,
)

Query = dict[str, Any]


@dataclass(frozen=True)
class ByID:
    id: str

    def to_query(self) -> Query:
        if not ObjectId.is_valid(self.id):
            # ids are always ObjectIds, so a malformed one matches nothing
            return {MONGO_OBJECT_ID_FIELD: {"$in": []}}
        return {MONGO_OBJECT_ID_FIELD: ObjectId(self.id)}


@dataclass(frozen=True)
class ByFileID:
    file_id: str

    def to_query(self) -> Query:
        return {FILE_ID_FIELD: self.file_id}


@dataclass(frozen=True)
class ByUserID:
    user_id: str

    def to_query(self) -> Query:
        return {USER_ID_FIELD: self.user_id}


@dataclass(frozen=True)
class ByRole:
    role: str

    def to_query(self) -> Query:
        return {ROLE_FIELD: self.role}


class And:
    """Matches records satisfying every inner filter. And() matches everything."""

    def __init__(self, *filters: "Filter"):
        self.filters = tuple(filters)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, And) and self.filters == other.filters

    def __hash__(self) -> int:
        return hash(self.filters)

    def __repr__(self) -> str:
        return f"And{self.filters!r}"

    def to_query(self) -> Query:
        if not self.filters:
            return {}
        if len(self.filters) == 1:
            return self.filters[0].to_query()
        return {"$and": [f.to_query() for f in self.filters]}


Filter = Union[ByID, ByFileID, ByUserID, ByRole, And]


def by_pair(file_id: str, user_id: str) -> And:
    return And(ByFileID(file_id), ByUserID(user_id))
