"""Infrastructure layer: persistence of collections, items, media and change history."""
