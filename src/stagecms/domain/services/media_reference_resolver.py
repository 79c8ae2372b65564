"""Resolution of file field references to media records.

A file field stores a reference to an uploaded file: its media ID, its
public URL, its generated storage file name, or an object carrying one of
those. At read time the reference is swapped for the full media record.
Resolution is best-effort and never fails the read that triggered it.
"""

import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from stagecms.core.config import get_settings
from stagecms.core.logging import get_logger
from stagecms.core.side_effects import best_effort
from stagecms.domain.entities import Media

logger = get_logger(__name__)

# Keys checked, in order, for an identifier inside an object reference
IDENTIFIER_KEYS = ("_id", "id", "fileNameUrl", "url")

# Keys that make an object reference recognisable even when unresolved
REFERENCE_KEYS = frozenset({"_id", "id", "fileNameUrl", "url", "fileName"})

# Keys present on a reference that was already enriched
COMPLETE_REFERENCE_KEYS = frozenset(
    {"_id", "fileName", "fileNameUrl", "contentType", "fileSize", "url"}
)


class MediaLookup(Protocol):
    """Read access to media records, optionally restricted to one stage."""

    async def get_by_id(self, media_id: str, stage_id: str | None = None) -> Media | None: ...

    async def get_by_url(self, url: str, stage_id: str | None = None) -> Media | None: ...

    async def get_by_file_name_url(
        self, file_name_url: str, stage_id: str | None = None
    ) -> Media | None: ...


class MediaReferenceResolver:
    """Resolve file references against the media store."""

    def __init__(self, repository: MediaLookup, base_url: str | None = None) -> None:
        """Initialize the resolver.

        Args:
            repository: Read-only media lookups.
            base_url: Base URL joined with bare references for the last lookup
                strategy. Defaults to the configured upload base URL.
        """
        self.repository = repository
        self.base_url = (base_url or get_settings().file_upload_base_url).rstrip("/")

    @staticmethod
    def extract_identifier(value: Any) -> str | None:
        """Extract the lookup identifier from a stored reference.

        Args:
            value: A string reference or an object reference.

        Returns:
            The identifier, or None if the value carries none.

        Examples:
            >>> MediaReferenceResolver.extract_identifier("logo.png")
            'logo.png'
            >>> MediaReferenceResolver.extract_identifier({"_id": {"$oid": "abc"}})
            'abc'
        """
        if isinstance(value, str):
            return value.strip() or None
        if not isinstance(value, Mapping):
            return None

        for key in IDENTIFIER_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, Mapping):
                candidate = candidate.get("$oid")
            if candidate is None:
                continue
            candidate = str(candidate).strip()
            if candidate:
                return candidate
        return None

    @staticmethod
    def is_complete(value: Any) -> bool:
        """Check whether a reference already holds the full media record."""
        return isinstance(value, Mapping) and COMPLETE_REFERENCE_KEYS.issubset(value.keys())

    @staticmethod
    def is_recognizable(value: Any) -> bool:
        """Check whether an object reference carries any media key."""
        return isinstance(value, Mapping) and not REFERENCE_KEYS.isdisjoint(value.keys())

    @staticmethod
    def _looks_like_id(identifier: str) -> bool:
        try:
            uuid.UUID(identifier)
        except ValueError:
            return False
        return True

    async def find_media(self, identifier: str, stage_id: str | None = None) -> Media | None:
        """Look up media trying each strategy in order until one hits.

        1. By ID, when the identifier parses as an ID.
        2. By URL, when the identifier is an absolute URL.
        3. By generated storage file name.
        4. By URL built from the configured base URL and the identifier.

        Args:
            identifier: The extracted reference identifier.
            stage_id: Restrict matches to media of this stage.

        Returns:
            The media record, or None if no strategy matched.
        """
        if self._looks_like_id(identifier):
            media = await self.repository.get_by_id(identifier, stage_id=stage_id)
            if media is not None:
                return media

        if identifier.lower().startswith(("http://", "https://")):
            media = await self.repository.get_by_url(identifier, stage_id=stage_id)
            if media is not None:
                return media

        media = await self.repository.get_by_file_name_url(identifier, stage_id=stage_id)
        if media is not None:
            return media

        return await self.repository.get_by_url(
            f"{self.base_url}/{identifier.lstrip('/')}", stage_id=stage_id
        )

    async def resolve(
        self, value: Any, skip_complete: bool = False, stage_id: str | None = None
    ) -> Any:
        """Resolve one stored reference.

        Args:
            value: The stored field value.
            skip_complete: Return already-enriched references unchanged.
            stage_id: Restrict matches to media of this stage.

        Returns:
            The media record as a dict when found. Otherwise an empty string
            for unrecognisable objects, or the original value.
        """
        if skip_complete and self.is_complete(value):
            return value

        identifier = self.extract_identifier(value)
        media = None
        if identifier is not None:
            media = await best_effort(
                "media lookup",
                lambda: self.find_media(identifier, stage_id),
                identifier=identifier,
            )

        if media is not None:
            return media.to_reference()

        if isinstance(value, Mapping) and not self.is_recognizable(value):
            logger.debug("Discarding unrecognisable file reference", keys=sorted(value.keys()))
            return ""

        if identifier is not None:
            logger.debug("File reference did not match any media", identifier=identifier)
        return value

    async def enrich_document(
        self,
        document: dict[str, Any],
        file_slugs: Iterable[str],
        skip_complete: bool = False,
        stage_id: str | None = None,
    ) -> dict[str, Any]:
        """Resolve every file field of a document in place.

        Args:
            document: The item document.
            file_slugs: Slugs of the collection's file fields.
            skip_complete: Leave already-enriched references untouched.
            stage_id: Restrict matches to media of this stage.

        Returns:
            The same document, for chaining.
        """
        for slug in file_slugs:
            value = document.get(slug)
            if value is None or value == "":
                continue
            document[slug] = await self.resolve(value, skip_complete=skip_complete, stage_id=stage_id)
        return document
