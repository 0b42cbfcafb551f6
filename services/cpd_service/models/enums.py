"""Enum definitions and fixed vocabularies for CPD records."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class CpdType(str, enum.Enum):
    WORKSHOP = "Workshop"
    COURSE = "Course"
    SUPERVISION = "Supervision"
    READING = "Reading"
    CONFERENCE = "Conference"
    WEBINAR = "Webinar"
    MENTORING = "Mentoring"
    OTHER = "Other"


class LearningMethod(str, enum.Enum):
    IN_PERSON = "In-Person"
    ONLINE = "Online"
    HYBRID = "Hybrid"
    SELF_STUDY = "Self-Study"
    GROUP_LEARNING = "Group Learning"
    ONE_ON_ONE = "One-on-One"
    OTHER = "Other"


class DocumentType(str, enum.Enum):
    CERTIFICATE = "Certificate"
    TRANSCRIPT = "Transcript"
    RECEIPT = "Receipt"
    ATTENDANCE_RECORD = "Attendance Record"
    READING_NOTES = "Reading Notes"
    REFLECTION_JOURNAL = "Reflection Journal"
    ASSESSMENT_RESULTS = "Assessment Results"
    OTHER = "Other"


class MentoringKind(str, enum.Enum):
    MENTORING = "mentoring"
    SUPERVISION = "supervision"


class DeliveryType(str, enum.Enum):
    INDIVIDUAL = "individual"
    GROUP = "group"
    PEER = "peer"


ICF_CORE_COMPETENCIES = (
    "Demonstrates Ethical Practice",
    "Embodies a Coaching Mindset",
    "Establishes and Maintains Agreements",
    "Cultivates Trust and Safety",
    "Maintains Presence",
    "Listens Actively",
    "Evokes Awareness",
    "Facilitates Client Growth",
)
