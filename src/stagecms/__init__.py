"""StageCMS - stage-scoped headless CMS core.

Dynamic collection schemas, validated collection items, media reference
resolution and item change history.
"""

__version__ = "0.1.0"
