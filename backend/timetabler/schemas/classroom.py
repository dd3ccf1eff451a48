from pydantic import BaseModel, Field

from timetabler.models.classroom import RoomType


class ClassroomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    room_type: RoomType = RoomType.lecture
    capacity: int = Field(default=60, ge=1, le=1000)


class ClassroomCreate(ClassroomBase):
    pass


class ClassroomUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    room_type: RoomType | None = None
    capacity: int | None = Field(default=None, ge=1, le=1000)


class ClassroomOut(ClassroomBase):
    id: str

    model_config = {"from_attributes": True}
