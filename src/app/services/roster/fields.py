"""Canonical trainee fields and the versioned header tables.

Everything the importer and exporter know about column naming lives here.
Bump ``HEADER_DICTIONARY_VERSION`` whenever an entry is added, removed or
retargeted; import behaviour for a file is fully determined by these tables
plus the file's own header line.
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType


class CanonicalFieldKey(str, Enum):
    """One slot in the trainee schema, independent of any file's column names."""

    ID = "id"
    UNIQUE_ID = "unique_id"
    NAME = "name"
    FIRST_NAME = "first_name"
    MIDDLE_NAME = "middle_name"
    LAST_NAME = "last_name"
    SSN = "ssn"
    EMAIL = "email"
    PHONE = "phone"
    MOBILE_NUMBER = "mobile_number"
    DATE_OF_BIRTH = "date_of_birth"
    AGE = "age"
    GENDER = "gender"
    LANGUAGE = "language"
    LICENSE_NUMBER = "license_number"
    LICENSE_TYPE = "license_type"
    STREET = "street"
    CITY = "city"
    STATE = "state"
    ZIP = "zip"
    COUNTRY = "country"
    HEIGHT = "height"
    HAIR = "hair"
    EYES = "eyes"
    COUNCIL_ID = "council_id"
    OCCUPATION_CRAFT = "occupation_craft"
    STATUS = "status"
    NOTES = "notes"
    PHOTO_URL = "photo_url"
    SIGNATURE_URL = "signature_url"
    MEDICAL_HISTORY = "medical_history"


F = CanonicalFieldKey

HEADER_DICTIONARY_VERSION = 3

# Assigned by persistence only; dropped on import even when a column maps to them.
IDENTITY_FIELDS: frozenset[CanonicalFieldKey] = frozenset({F.ID, F.UNIQUE_ID})

# Computed from date_of_birth; an incoming value is never trusted.
DERIVED_FIELDS: frozenset[CanonicalFieldKey] = frozenset({F.AGE})

DATE_FIELDS: frozenset[CanonicalFieldKey] = frozenset({F.DATE_OF_BIRTH})

NAME_FIELDS: tuple[CanonicalFieldKey, ...] = (F.NAME, F.FIRST_NAME, F.LAST_NAME)

# Fixed export order.  Each label maps back to its key through HEADER_DICTIONARY,
# which is what makes an exported file re-importable.
EXPORT_COLUMNS: tuple[tuple[str, CanonicalFieldKey], ...] = (
    ("Internal ID", F.ID),
    ("Unique ID", F.UNIQUE_ID),
    ("Name", F.NAME),
    ("First Name", F.FIRST_NAME),
    ("Middle Name", F.MIDDLE_NAME),
    ("Last Name", F.LAST_NAME),
    ("SSN", F.SSN),
    ("Email", F.EMAIL),
    ("Phone", F.PHONE),
    ("Mobile Number", F.MOBILE_NUMBER),
    ("Date of Birth", F.DATE_OF_BIRTH),
    ("Age", F.AGE),
    ("Gender", F.GENDER),
    ("Language", F.LANGUAGE),
    ("License Number", F.LICENSE_NUMBER),
    ("License Type", F.LICENSE_TYPE),
    ("Street", F.STREET),
    ("City", F.CITY),
    ("State", F.STATE),
    ("Zip", F.ZIP),
    ("Country", F.COUNTRY),
    ("Height", F.HEIGHT),
    ("Hair", F.HAIR),
    ("Eyes", F.EYES),
    ("Council ID", F.COUNCIL_ID),
    ("Occupation/Craft", F.OCCUPATION_CRAFT),
    ("Status", F.STATUS),
    ("Notes", F.NOTES),
    ("Photo URL", F.PHOTO_URL),
    ("Signature URL", F.SIGNATURE_URL),
    ("Medical History", F.MEDICAL_HISTORY),
)

EXPORT_HEADERS: tuple[str, ...] = tuple(label for label, _ in EXPORT_COLUMNS)

# Columns offered in the blank import template: everything a user may supply.
TEMPLATE_HEADERS: tuple[str, ...] = tuple(
    label
    for label, key in EXPORT_COLUMNS
    if key not in IDENTITY_FIELDS and key not in DERIVED_FIELDS
)

# Spellings seen in roster files from partner clinics and HR exports.
_ALIASES: dict[str, CanonicalFieldKey] = {
    "internal id": F.ID,
    "unique id": F.UNIQUE_ID,
    "full name": F.NAME,
    "trainee name": F.NAME,
    "first": F.FIRST_NAME,
    "given name": F.FIRST_NAME,
    "middle": F.MIDDLE_NAME,
    "middle initial": F.MIDDLE_NAME,
    "last": F.LAST_NAME,
    "surname": F.LAST_NAME,
    "family name": F.LAST_NAME,
    "ssn #": F.SSN,
    "social security number": F.SSN,
    "e-mail": F.EMAIL,
    "email address": F.EMAIL,
    "phone number": F.PHONE,
    "telephone": F.PHONE,
    "mobile": F.MOBILE_NUMBER,
    "cell": F.MOBILE_NUMBER,
    "cell phone": F.MOBILE_NUMBER,
    "dob": F.DATE_OF_BIRTH,
    "birth date": F.DATE_OF_BIRTH,
    "birthdate": F.DATE_OF_BIRTH,
    "sex": F.GENDER,
    "license #": F.LICENSE_NUMBER,
    "address": F.STREET,
    "street address": F.STREET,
    "zip code": F.ZIP,
    "postal code": F.ZIP,
    "occupation": F.OCCUPATION_CRAFT,
    "craft": F.OCCUPATION_CRAFT,
    "comments": F.NOTES,
}


def _build_header_dictionary() -> Mapping[str, CanonicalFieldKey]:
    table: dict[str, CanonicalFieldKey] = {}
    for key in CanonicalFieldKey:
        table[key.value] = key
        table[key.value.replace("_", " ")] = key
    for label, key in EXPORT_COLUMNS:
        table[label.lower()] = key
    table.update(_ALIASES)
    return MappingProxyType(table)


HEADER_DICTIONARY: Mapping[str, CanonicalFieldKey] = _build_header_dictionary()
