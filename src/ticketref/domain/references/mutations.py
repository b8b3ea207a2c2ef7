"""Validated payloads handed to the reconciler by the comment-persistence layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ticketref.domain.model import MutationKind

if TYPE_CHECKING:
    from ticketref.domain.model import Comment


def _none_to_empty(value: object) -> object:
    return "" if value is None else value


class MutationModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CommentMutation(MutationModel):
    """Text form of a comment mutation.

    ``old_text`` is empty for a creation and ``new_text`` is empty for a deletion.
    When ``comment_id`` is omitted every comment on the ticket counts as a sibling,
    which is only correct once the comment's own write is visible.
    """

    ticket_id: str = Field(min_length=1)
    comment_id: str | None = None
    old_text: str = ""
    new_text: str = ""

    _normalize_texts = field_validator("old_text", "new_text", mode="before")(_none_to_empty)

    @classmethod
    def created(cls, comment: Comment) -> CommentMutation:
        return cls(ticket_id=comment.ticket_id, comment_id=comment.id, new_text=comment.content)

    @classmethod
    def updated(cls, comment: Comment, previous_text: str) -> CommentMutation:
        return cls(
            ticket_id=comment.ticket_id,
            comment_id=comment.id,
            old_text=previous_text,
            new_text=comment.content,
        )

    @classmethod
    def deleted(cls, comment: Comment) -> CommentMutation:
        return cls(ticket_id=comment.ticket_id, comment_id=comment.id, old_text=comment.content)


class CommentEvent(MutationModel):
    """Identifier form of a comment mutation; texts are derived from the stored comment.

    ``deleted`` events must be raised while the comment row is still readable.
    """

    comment_id: str = Field(min_length=1)
    kind: MutationKind
    previous_text: str | None = None

    @model_validator(mode="after")
    def _check_previous_text(self) -> Self:
        if self.kind is MutationKind.UPDATED and self.previous_text is None:
            raise ValueError("updated events require previous_text")
        if self.kind is not MutationKind.UPDATED and self.previous_text is not None:
            raise ValueError(f"{self.kind} events do not take previous_text")
        return self

    def resolve(self, comment: Comment) -> CommentMutation:
        """Translate into the text form using the comment as currently stored."""

        match self.kind:
            case MutationKind.CREATED:
                return CommentMutation.created(comment)
            case MutationKind.UPDATED:
                return CommentMutation.updated(comment, self.previous_text or "")
            case MutationKind.DELETED:
                return CommentMutation.deleted(comment)


type ReconcileRequest = CommentMutation | CommentEvent
