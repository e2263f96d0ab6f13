from pydantic import Field
from typing import Optional
from datetime import datetime

from nameplate_dashboard.db.enums import NameplateStage
from nameplate_dashboard.models.unverified_nameplate import UnverifiedNameplate
from nameplate_dashboard.models.verified_nameplate import VerifiedNameplate
from nameplate_dashboard.schemas.base_dto import BaseDTO


class NameplateDTO(BaseDTO):
    id: str
    theme: str
    background: str
    house_name: str = Field(serialization_alias="houseName")
    owner_name: str = Field(serialization_alias="ownerName")
    spouse_name: Optional[str] = Field(serialization_alias="spouseName")
    address: str
    text_color: str = Field(serialization_alias="textColor")
    house_name_color: Optional[str] = Field(serialization_alias="houseNameColor")
    house_name_size: Optional[int] = Field(serialization_alias="houseNameSize")
    owner_name_color: Optional[str] = Field(serialization_alias="ownerNameColor")
    owner_name_size: Optional[int] = Field(serialization_alias="ownerNameSize")
    address_color: Optional[str] = Field(serialization_alias="addressColor")
    address_size: Optional[int] = Field(serialization_alias="addressSize")

    rmo: str
    officer: str
    lot: str
    officer_name: str
    email: str
    mobile_number: str = Field(serialization_alias="mobileNumber")
    designation: str
    image_url: str = Field(serialization_alias="imageUrl")

    verified: bool
    verified_at: Optional[datetime] = Field(serialization_alias="verifiedAt")
    created_at: datetime = Field(serialization_alias="createdAt")

    # ===== derived =====
    stage: str

    @classmethod
    def from_orm_model(cls, nameplate: UnverifiedNameplate, printed: bool = False) -> "NameplateDTO":
        if printed:
            stage = NameplateStage.printed
        elif nameplate.verified:
            stage = NameplateStage.verified
        else:
            stage = NameplateStage.unverified
        return cls(
            id=nameplate.id,
            theme=nameplate.theme,
            background=nameplate.background,
            house_name=nameplate.house_name,
            owner_name=nameplate.owner_name,
            spouse_name=nameplate.spouse_name,
            address=nameplate.address,
            text_color=nameplate.text_color,
            house_name_color=nameplate.house_name_color,
            house_name_size=nameplate.house_name_size,
            owner_name_color=nameplate.owner_name_color,
            owner_name_size=nameplate.owner_name_size,
            address_color=nameplate.address_color,
            address_size=nameplate.address_size,
            rmo=nameplate.rmo,
            officer=nameplate.officer,
            lot=nameplate.lot,
            officer_name=nameplate.officer_name,
            email=nameplate.email,
            mobile_number=nameplate.mobile_number,
            designation=nameplate.designation,
            image_url=nameplate.image_url,
            verified=nameplate.verified,
            verified_at=nameplate.verified_at,
            created_at=nameplate.created_at,
            stage=stage.value,
        )


class PrintedNameplateDTO(BaseDTO):
    id: str
    source_nameplate_id: Optional[str] = Field(serialization_alias="sourceNameplateId")
    rmo: str
    officer_id: Optional[str] = Field(serialization_alias="officerId")
    lot: str
    house_name: str = Field(serialization_alias="houseName")
    owner_name: str = Field(serialization_alias="ownerName")
    spouse_name: Optional[str] = Field(serialization_alias="spouseName")
    address: Optional[str]
    image_url: Optional[str] = Field(serialization_alias="imageUrl")
    created_at: datetime = Field(serialization_alias="createdAt")
    stage: str = NameplateStage.printed.value

    @classmethod
    def from_orm_model(cls, row: VerifiedNameplate) -> "PrintedNameplateDTO":
        return cls(
            id=row.id,
            source_nameplate_id=row.source_nameplate_id,
            rmo=row.rmo,
            officer_id=row.officer_id,
            lot=row.lot,
            house_name=row.house_name,
            owner_name=row.owner_name,
            spouse_name=row.spouse_name,
            address=row.address,
            image_url=row.image_url,
            created_at=row.created_at,
        )
