"""Slug generator service.

Generates identifier-safe slugs from display names of collections and
fields. Slugs are used as storage keys, so the transformation is ASCII-only
and never transliterates.
"""

import re


class SlugGenerator:
    """Generate lowercase, underscore-separated slugs.

    Slug rules:
    - Lowercase ASCII letters, digits and underscores only
    - Characters outside [a-z0-9], whitespace, hyphens and underscores are dropped
    - Runs of whitespace and hyphens become a single underscore
    - No leading, trailing or repeated underscores
    """

    _DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s_-]")
    _WHITESPACE = re.compile(r"\s+")
    _UNDERSCORES = re.compile(r"_+")

    @classmethod
    def generate(cls, text: str | None) -> str:
        """Generate a slug from text.

        Args:
            text: The text to convert (e.g. a collection or field name).

        Returns:
            The slug, or an empty string for empty or whitespace-only input.

        Examples:
            >>> SlugGenerator.generate("Blog Posts!! ")
            'blog_posts'
            >>> SlugGenerator.generate("Data de Publicação")
            'data_de_publicao'
            >>> SlugGenerator.generate("first-name")
            'first_name'
        """
        if not text or not text.strip():
            return ""

        slug = text.lower()
        slug = cls._DISALLOWED_CHARS.sub("", slug)
        slug = cls._WHITESPACE.sub("_", slug)
        slug = slug.replace("-", "_")
        slug = cls._UNDERSCORES.sub("_", slug)
        return slug.strip("_")
