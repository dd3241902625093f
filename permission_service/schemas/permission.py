from pydantic import BaseModel, Field

from permission_service.services.health import ServingStatus


class PermissionCreate(BaseModel):
    file_id: str = Field(alias="fileID")
    user_id: str = Field(alias="userID")
    role: str

    class Config:
        populate_by_name = True


class HealthRead(BaseModel):
    status: ServingStatus
