"""Pydantic request bodies for the HTTP API."""

from uuid import UUID

from pydantic import BaseModel, Field

from color_profile.domain.sessions import PaymentOutcome


class PaymentNotification(BaseModel):
    """Payment outcome relayed by the payment glue."""

    outcome: PaymentOutcome
    reference: str | None = None


class SelfieSubmission(BaseModel):
    """Location of an uploaded selfie in the blob store."""

    image_location: str = Field(min_length=1)


class OwnerReassignment(BaseModel):
    """Move analyses from one owner to another."""

    from_user_id: UUID
    to_user_id: UUID
