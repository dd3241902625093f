from typing import Any, Optional

from pydantic import BaseModel, Field

# default mongodb unique key
MONGO_OBJECT_ID_FIELD = "_id"

PERMISSION_COLLECTION_NAME = "permissions"

# BSON field names
FILE_ID_FIELD = "fileID"
USER_ID_FIELD = "userID"
ROLE_FIELD = "role"


class Permission(BaseModel):
    """
    A user's role on a file, as stored in the permissions collection.
    (file_id, user_id) is unique across the collection.
    """

    id: Optional[str] = None
    file_id: str = Field(alias=FILE_ID_FIELD)
    user_id: str = Field(alias=USER_ID_FIELD)
    role: str = Field(alias=ROLE_FIELD)

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Permission":
        data = {key: value for key, value in document.items() if key != MONGO_OBJECT_ID_FIELD}
        object_id = document.get(MONGO_OBJECT_ID_FIELD)
        data["id"] = str(object_id) if object_id is not None else None
        return cls.model_validate(data)
