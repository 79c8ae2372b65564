"""Domain entities for StageCMS.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from stagecms.domain.entities.collection import Collection, CollectionField
from stagecms.domain.entities.collection_item_change import ChangeType, CollectionItemChange
from stagecms.domain.entities.field_constraints import (
    CONSTRAINT_TYPES,
    BoolConstraints,
    CheckboxConstraints,
    ColorConstraints,
    EmailConstraints,
    FieldConstraints,
    FieldOption,
    FieldType,
    FileConstraints,
    InputConstraints,
    InvalidConstraintError,
    LengthConstraints,
    NumberConstraints,
    OptionsConstraints,
    RadioConstraints,
    RangeConstraints,
    SelectConstraints,
    TextConstraints,
    parse_constraints,
    parse_decimal,
)
from stagecms.domain.entities.media import Media
from stagecms.domain.entities.user_context import UserContext

__all__ = [
    "BoolConstraints",
    "CONSTRAINT_TYPES",
    "ChangeType",
    "CheckboxConstraints",
    "Collection",
    "CollectionField",
    "CollectionItemChange",
    "ColorConstraints",
    "EmailConstraints",
    "FieldConstraints",
    "FieldOption",
    "FieldType",
    "FileConstraints",
    "InputConstraints",
    "InvalidConstraintError",
    "LengthConstraints",
    "Media",
    "NumberConstraints",
    "OptionsConstraints",
    "RadioConstraints",
    "RangeConstraints",
    "SelectConstraints",
    "TextConstraints",
    "UserContext",
    "parse_constraints",
    "parse_decimal",
]
