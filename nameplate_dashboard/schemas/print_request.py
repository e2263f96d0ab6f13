from pydantic import BaseModel, Field
from typing import List, Optional


class PrintRecord(BaseModel):
    """One selected record in a send-to-print batch."""
    id: Optional[str] = None
    house_name: str = Field(alias="houseName", min_length=1)
    owner_name: str = Field(alias="ownerName", min_length=1)
    spouse_name: Optional[str] = Field(default=None, alias="spouseName")
    address: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class PrintRequest(BaseModel):
    rmo: str = Field(min_length=1)
    officer_id: Optional[str] = Field(default=None, alias="officerId")
    lot: str = Field(min_length=1)
    records: List[PrintRecord]
