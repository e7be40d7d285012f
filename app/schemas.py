"""
Request payload schemas.

Routes validate incoming JSON with these models before calling the booking
services. Time fields stay strings here: parsing them is the job of the
time layer, which raises its own ParseError.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    """`identifier` is either the e-mail or the name of the user."""
    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class BookingCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_date: date = Field(..., alias='date')
    start_time: str = Field(..., alias='startTime')
    end_time: str = Field(..., alias='endTime')
    room: str = Field(..., min_length=1)


class BookingEditRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., ge=1)
    new_time: str = Field(..., alias='newTime')
    new_end_time: str = Field(..., alias='newEndTime')


class StatusUpdateRequest(BaseModel):
    """Status is checked by the booking service so the caller gets InvalidStatusError."""
    id: int = Field(..., ge=1)
    status: str


class RoomRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    capacity: int = Field(..., ge=1)
    amenities: List[str] = Field(default_factory=list)
    is_active: bool = True


class RoomUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=64)
    capacity: Optional[int] = Field(default=None, ge=1)
    amenities: Optional[List[str]] = None
    is_active: Optional[bool] = None
