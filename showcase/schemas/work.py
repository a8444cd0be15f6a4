from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID


class FieldError(BaseModel):
    field: str
    msg: str


class WorkCreate(BaseModel):
    name: str
    roll: str
    email: str
    title: str
    description: str
    category: str
    file_url: str
    file_type: str
    timestamp: Optional[datetime] = None


class WorkResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: UUID = Field(
        validation_alias=AliasChoices("id", "_id"), serialization_alias="_id"
    )
    name: str
    roll: str
    email: str
    title: str
    description: str
    category: str
    file_url: str
    file_type: str
    timestamp: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("timestamp", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive values; stored times are always UTC
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str = "Work uploaded successfully"
    work: WorkResponse
    cloud_url: str


class WorkListResponse(BaseModel):
    success: bool = True
    count: int
    works: List[WorkResponse]


class WorkDetailResponse(BaseModel):
    success: bool = True
    work: WorkResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str
