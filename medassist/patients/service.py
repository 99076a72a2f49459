"""
Patient record lookups used by the authentication flow.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from ..auth.models import User, UserRole
from .models import PatientRecord, PatientRecordStatus

# Set up logging
logger = logging.getLogger(__name__)

class PatientRecordStatusResolver:
    """
    Resolves the record status reported to a user after login or sign-up.
    """
    def __init__(self, db: Session):
        self.db = db

    def status_for(self, user: User) -> Optional[PatientRecordStatus]:
        """
        Get the status of the user's latest patient record.

        Args:
            user: Authenticated or freshly registered user

        Returns:
            None for accounts without the patient authority, NO_RECORD when the
            patient has not submitted anything yet, otherwise the latest record's status
        """
        if not user.has_authority(UserRole.PATIENT):
            return None

        record = (
            self.db.query(PatientRecord)
            .filter(PatientRecord.patient_id == user.id)
            .order_by(PatientRecord.id.desc())
            .first()
        )
        if record is None:
            return PatientRecordStatus.NO_RECORD
        return record.status
