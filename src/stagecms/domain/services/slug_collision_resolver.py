"""Collision resolution for collection slugs and backing-store names.

Both resolvers are pure with respect to storage: they receive async lookup
callables and never touch the database directly. Neither reserves the name
it returns, so two concurrent callers can compute the same candidate.
"""

import re
import string
from collections.abc import Awaitable, Callable

from stagecms.core.logging import get_logger

logger = get_logger(__name__)

# Returns the slug occupying (or highest in the family of) a candidate, or None when free
SlugOccupantLookup = Callable[[str], Awaitable[str | None]]

# Returns True when a backing-store name is already taken
NameExistsLookup = Callable[[str], Awaitable[bool]]

NUMBERED_SLUG_PATTERN = re.compile(r"^(.+)_(\d+)$")

# PostgreSQL truncates identifiers beyond 63 bytes
MAX_BACKING_STORE_NAME_LENGTH = 63


class SlugCollisionResolver:
    """Produce slugs and backing-store names unique within a stage."""

    @classmethod
    def next_counter(cls, occupant_slug: str, current: int) -> int:
        """Derive the next numeric suffix from an occupying slug.

        An occupant ending in ``_<digits>`` continues from that number; any
        other occupant continues from ``current``. The result always moves
        forward so probing terminates.
        """
        match = NUMBERED_SLUG_PATTERN.match(occupant_slug)
        derived = int(match.group(2)) + 1 if match else current + 1
        return max(derived, current + 1)

    @classmethod
    async def resolve_slug(cls, base_slug: str, find_occupant: SlugOccupantLookup) -> str:
        """Resolve a unique collection slug.

        Args:
            base_slug: The slug derived from the collection name.
            find_occupant: Lookup returning the occupying slug for a candidate,
                or None when the candidate is free.

        Returns:
            ``base_slug`` if free, otherwise ``{base_slug}_{n}``, lowercased.

        Examples:
            With ``posts``, ``posts_1`` and ``posts_3`` taken, ``posts``
            resolves to ``posts_4``.
        """
        occupant = await find_occupant(base_slug)
        if occupant is None:
            return base_slug.lower()

        counter = cls.next_counter(occupant, 0)
        candidate = f"{base_slug}_{counter}"
        while (occupant := await find_occupant(candidate)) is not None:
            counter = cls.next_counter(occupant, counter)
            candidate = f"{base_slug}_{counter}"

        logger.debug("Resolved slug collision", base_slug=base_slug, slug=candidate)
        return candidate.lower()

    @classmethod
    async def resolve_backing_store_name(
        cls, stage_key: str, collection_slug: str, name_exists: NameExistsLookup
    ) -> str:
        """Resolve a unique backing-store name within a stage.

        The base name is ``{stage_key}_{collection_slug}``. Collisions append
        a single letter ``a``..``z``, then numbers ``1, 2, 3...``. Names are
        cut to ``MAX_BACKING_STORE_NAME_LENGTH`` characters, suffix included,
        before the existence check.

        Args:
            stage_key: Key of the owning stage.
            collection_slug: The collection's resolved slug.
            name_exists: Lookup returning True when a name is taken.

        Returns:
            The unique, lowercased backing-store name.
        """
        base_name = f"{stage_key.lower()}_{collection_slug.lower()}"

        def fit(suffix: str) -> str:
            return base_name[: MAX_BACKING_STORE_NAME_LENGTH - len(suffix)] + suffix

        if not await name_exists(fit("")):
            return fit("")

        for letter in string.ascii_lowercase:
            candidate = fit(letter)
            if not await name_exists(candidate):
                return candidate

        counter = 1
        while await name_exists(fit(str(counter))):
            counter += 1
        return fit(str(counter))
