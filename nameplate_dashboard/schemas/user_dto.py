from pydantic import Field
from typing import Optional
from datetime import datetime

from nameplate_dashboard.models.user import User
from nameplate_dashboard.schemas.base_dto import BaseDTO


class UserDTO(BaseDTO):
    """Public view of an account; never carries the password hash."""
    id: str
    officer_name: str = Field(serialization_alias="officerName")
    email: str
    mobile_number: str = Field(serialization_alias="mobileNumber")
    role: str
    rmo: Optional[str]
    officer_number: Optional[str] = Field(serialization_alias="officerNumber")
    designation: Optional[str]
    area: Optional[str]
    delivery_office: Optional[str] = Field(serialization_alias="deliveryOffice")
    address: Optional[str]
    profile_image: Optional[str] = Field(serialization_alias="profileImage")
    is_active: bool = Field(serialization_alias="isActive")
    login_count: int = Field(serialization_alias="loginCount")
    last_login: Optional[datetime] = Field(serialization_alias="lastLogin")
    created_at: Optional[datetime] = Field(serialization_alias="createdAt")

    @classmethod
    def from_orm_model(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id,
            officer_name=user.officer_name,
            email=user.email,
            mobile_number=user.mobile_number,
            role=user.role.value,
            rmo=user.rmo,
            officer_number=user.officer_number,
            designation=user.designation,
            area=user.area,
            delivery_office=user.delivery_office,
            address=user.address,
            profile_image=user.profile_image,
            is_active=user.is_active,
            login_count=user.login_count or 0,
            last_login=user.last_login,
            created_at=user.created_at,
        )


class OfficerSummaryDTO(BaseDTO):
    id: str
    officer_name: str = Field(serialization_alias="officerName")
    officer_number: Optional[str] = Field(serialization_alias="officerNumber")
    email: str
    is_active: bool = Field(serialization_alias="isActive")

    @classmethod
    def from_orm_model(cls, user: User) -> "OfficerSummaryDTO":
        return cls(
            id=user.id,
            officer_name=user.officer_name,
            officer_number=user.officer_number,
            email=user.email,
            is_active=user.is_active,
        )
