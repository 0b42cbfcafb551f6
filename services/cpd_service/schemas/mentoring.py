import datetime as dt
import uuid
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field, model_validator
from services.cpd_service.models import DeliveryType, MentoringKind


class MentoringBase(CamelModel):
    session_type: MentoringKind
    date: dt.date
    duration: int = Field(60, gt=0, description="Minutes")
    provider_name: Optional[str] = None
    credential_level: Optional[str] = None
    delivery_type: DeliveryType = DeliveryType.INDIVIDUAL
    focus_area: Optional[str] = None
    notes: Optional[str] = None
    file_url: Optional[str] = None
    is_formal_supervision: bool = False


class MentoringCreate(MentoringBase):
    @model_validator(mode="after")
    def peer_only_for_supervision(self):
        if (
            self.session_type == MentoringKind.MENTORING
            and self.delivery_type == DeliveryType.PEER
        ):
            raise ValueError("Peer delivery is only available for supervision")
        return self


class MentoringUpdate(CamelModel):
    session_type: Optional[MentoringKind] = None
    date: Optional[dt.date] = None
    duration: Optional[int] = Field(default=None, gt=0)
    provider_name: Optional[str] = None
    credential_level: Optional[str] = None
    delivery_type: Optional[DeliveryType] = None
    focus_area: Optional[str] = None
    notes: Optional[str] = None
    file_url: Optional[str] = None
    is_formal_supervision: Optional[bool] = None


class MentoringResponse(MentoringBase):
    id: uuid.UUID
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None
