# eteeap/utils/documents.py
from typing import Dict, Iterable, Optional

# Every document column an application can carry, in form order
DOCUMENT_KEYS = (
    "letter_of_intent",
    "resume",
    "picture",
    "application_form",
    "recommendation_letter",
    "school_credentials",
    "high_school_diploma",
    "transcript",
    "birth_certificate",
    "employment_certificate",
    "nbi_clearance",
    "marriage_certificate",
    "business_registration",
    "certificates",
)

# Documents without which an application counts as incomplete
REQUIRED_DOCUMENT_KEYS = ("letter_of_intent", "resume", "picture")

APPLICATION_STATUSES = {
    "pending": "Pending",
    "accepted": "Accepted",
    "rejected": "Rejected",
}

DOCUMENT_STATUSES = ("pending", "approved", "rejected")


def is_document_key(name: Optional[str]) -> bool:
    return name in DOCUMENT_KEYS


def normalize_application_status(value) -> Optional[str]:
    """Map any casing of pending/accepted/rejected to its stored form, else None."""
    if value is None:
        return None
    return APPLICATION_STATUSES.get(str(value).strip().lower())


def verified_flags(file_keys: Iterable[str]) -> Dict[str, int]:
    """
    Build `<key>_verified` flags for all known documents: 1 for each key
    present in `file_keys`, 0 otherwise.
    """
    flags = {f"{key}_verified": 0 for key in DOCUMENT_KEYS}
    for key in file_keys:
        flags[f"{key}_verified"] = 1
    return flags
