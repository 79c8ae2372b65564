"""Identity of the caller performing an operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserContext:
    """Authenticated user and the stage they are working in.

    Issued and validated by the authentication layer; the core only reads it.

    Attributes:
        user_id: ID of the authenticated user.
        email: User email.
        stage_id: ID of the active stage.
        stage_key: Short key of the active stage (e.g. 'dev'), used in backing-store names.
        stage_label: Display label of the active stage.
    """

    user_id: str | None = None
    email: str | None = None
    stage_id: str | None = None
    stage_key: str | None = None
    stage_label: str | None = None
