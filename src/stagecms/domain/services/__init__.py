"""Domain services for StageCMS.

Services contain business logic that doesn't naturally fit within a single entity.
"""

from stagecms.domain.services.document_values import to_document_value, unwrap_envelope
from stagecms.domain.services.field_definition_validator import (
    FieldDefinitionError,
    FieldDefinitionValidator,
)
from stagecms.domain.services.field_value_validator import (
    MISSING,
    FieldValueError,
    FieldValueValidator,
)
from stagecms.domain.services.media_reference_resolver import MediaLookup, MediaReferenceResolver
from stagecms.domain.services.slug_collision_resolver import SlugCollisionResolver
from stagecms.domain.services.slug_generator import SlugGenerator

__all__ = [
    "FieldDefinitionError",
    "FieldDefinitionValidator",
    "FieldValueError",
    "FieldValueValidator",
    "MISSING",
    "MediaLookup",
    "MediaReferenceResolver",
    "SlugCollisionResolver",
    "SlugGenerator",
    "to_document_value",
    "unwrap_envelope",
]
