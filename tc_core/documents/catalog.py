# tc_core/documents/catalog.py
from tc_core.courses.models import CourseType

INITIAL = CourseType.INITIAL
REFRESHER = CourseType.REFRESHER

DEFAULT_DOCUMENT_TYPES = [
    {
        "name": "DiplomaCopy",
        "label": "Copy of diploma (min 10th grade)",
        "course_types": [INITIAL, REFRESHER],
    },
    {
        "name": "DriverLicense",
        "label": "Driver's license copy",
        "course_types": [INITIAL, REFRESHER],
    },
    {
        "name": "MedicalCertificateGeneral",
        "label": "Medical certificate (GP)",
        "course_types": [INITIAL],
    },
    {
        "name": "PsychiatricCertificate",
        "label": "Psychiatric certificate",
        "course_types": [INITIAL],
    },
    {
        "name": "PassportPhotos",
        "label": "Two passport-sized photos",
        "course_types": [INITIAL, REFRESHER],
    },
    {
        "name": "ExistingLicenseCopy",
        "label": "Existing valid license",
        "course_types": [REFRESHER],
    },
    {
        "name": "MedicalCertificateRefresher",
        "label": "Medical certificate (refresher)",
        "course_types": [REFRESHER],
    },
]
