"""
Patient Record Model - Tracks where a patient's assessment is in the care workflow.

The login and sign-up responses report the status of the patient's latest record.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base

class PatientRecordStatus(str, enum.Enum):
    """
    Enumeration for patient record states.

    States:
    - NO_RECORD: Patient has not submitted an assessment yet
    - ASSESSMENT_PENDING: Assessment submitted, waiting for a counselor
    - COUNSELOR_IN_PROGRESS: A counselor is reviewing the assessment
    - DOCTOR_IN_PROGRESS: The patient was referred to a doctor
    - CLOSED: The record has been closed
    """
    NO_RECORD = "NO_RECORD"
    ASSESSMENT_PENDING = "ASSESSMENT_PENDING"
    COUNSELOR_IN_PROGRESS = "COUNSELOR_IN_PROGRESS"
    DOCTOR_IN_PROGRESS = "DOCTOR_IN_PROGRESS"
    CLOSED = "CLOSED"


class PatientRecord(Base):
    """
    Patient Record Model

    Fields:
    - id: Primary key for the record
    - patient_id: Foreign key to the patient's User row
    - status: Current workflow status
    - created_at: When the record was created
    - updated_at: When the record was last updated
    """
    __tablename__ = "patient_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(Enum(PatientRecordStatus), default=PatientRecordStatus.ASSESSMENT_PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    patient = relationship("User")

    def __repr__(self):
        """String representation of the PatientRecord model"""
        return f"<PatientRecord(id={self.id}, patient_id={self.patient_id}, status={self.status})>"
