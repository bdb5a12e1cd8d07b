# washlab/services/attendance_service.py
import logging
from datetime import datetime
from typing import List, Optional
import pytz
from ..database.database import ATTENDANCE_KEY
from ..errors import StaffVerificationError
from ..models.staff import AttendanceAction, AttendanceRecord, StaffIdentity

class AttendanceService:
    """Staff sign-in/sign-out log"""

    def __init__(self, db, branch_id: Optional[str] = None):
        self.db = db
        self.branch_id = branch_id
        self.logger = logging.getLogger(__name__)

    def history(self, staff_id: Optional[str] = None) -> List[AttendanceRecord]:
        records = [AttendanceRecord.model_validate(r) for r in self.db.read(ATTENDANCE_KEY)]
        if staff_id is not None:
            records = [r for r in records if r.staff_id == staff_id]
        return records

    def is_signed_in(self, staff_id: str) -> bool:
        """True when the staff member's last record is a sign-in"""
        records = self.history(staff_id)
        return bool(records) and records[-1].action == AttendanceAction.SIGN_IN

    def sign_in(self, identity: StaffIdentity) -> AttendanceRecord:
        return self._record(identity, AttendanceAction.SIGN_IN)

    def sign_out(self, identity: StaffIdentity) -> AttendanceRecord:
        return self._record(identity, AttendanceAction.SIGN_OUT)

    def _record(self, identity: StaffIdentity, action: AttendanceAction) -> AttendanceRecord:
        if not identity.success or not identity.staff_id:
            raise StaffVerificationError("Staff identity could not be verified")

        record = AttendanceRecord(
            staff_id=identity.staff_id,
            staff_name=identity.staff_name or identity.staff_id,
            branch_id=self.branch_id,
            action=action,
            timestamp=identity.verified_at or datetime.now(pytz.utc),
            verified_by=identity.method,
        )
        self.db.append(ATTENDANCE_KEY, record.model_dump(mode="json"))
        self.logger.info(f"{record.staff_name} {action.value} at {self.branch_id}")
        return record
