"""Loading of a collection on behalf of a caller."""

from stagecms.core.notifications import Notifications
from stagecms.infrastructure.persistence.models import CollectionModel
from stagecms.infrastructure.persistence.repositories import CollectionRepository


async def load_owned_collection(
    repository: CollectionRepository,
    collection_id: str | None,
    stage_id: str | None,
    notifications: Notifications,
    require_backing_store: bool = False,
) -> CollectionModel | None:
    """Load a collection that belongs to the given stage.

    Args:
        repository: Collection repository.
        collection_id: Requested collection ID.
        stage_id: The caller's stage.
        notifications: Accumulator for client errors.
        require_backing_store: Also fail when the backing store was never provisioned.

    Returns:
        The collection model, or None after recording the reason.

    Raises:
        SQLAlchemyError: If the lookup itself fails.
    """
    if not collection_id:
        notifications.add_client(
            "collection_id_required", "Collection ID is required", "collection_id"
        )
        return None

    model = await repository.get_by_id(collection_id)
    if model is None:
        notifications.add_client("collection_not_found", "Collection not found", "collection_id")
        return None

    if model.stage_id != stage_id:
        notifications.add_client(
            "collection_stage_mismatch",
            "The collection does not belong to the current stage",
            "collection_id",
        )
        return None

    if require_backing_store and not model.backing_store_name:
        notifications.add_client(
            "backing_store_missing",
            "The collection has no storage provisioned",
            "collection_id",
        )
        return None

    return model
