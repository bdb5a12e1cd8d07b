# washlab/models/staff.py
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel

class AttendanceAction(str, Enum):
    SIGN_IN = "sign_in"
    SIGN_OUT = "sign_out"

class StaffIdentity(BaseModel):
    """Result handed back by the identity verification port"""
    success: bool
    staff_id: Optional[str] = None
    staff_name: Optional[str] = None
    verified_at: Optional[datetime] = None
    method: str = "telegram"

class AttendanceRecord(BaseModel):
    staff_id: str
    staff_name: str
    branch_id: Optional[str] = None
    action: AttendanceAction
    timestamp: datetime
    verified_by: str = "telegram"
