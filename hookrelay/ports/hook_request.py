"""Hook request entity and its wire representation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["HookRequest"]


class HookRequest(BaseModel):
    """A single webhook delivery: where to POST, what to send, how often it failed.

    The entity is mutable: the publisher bumps ``retries`` in place on every
    failed attempt. Only one in-flight delivery per instance is supported.

    Attributes:
        retries: Failed attempts so far; starts at 0.
        url: Absolute HTTP(S) target.
        post_data: Request body sent verbatim.
        content_type: Content-Type header; the publisher falls back to
            ``application/json`` when empty.
        deliver_after: Carried through the queue but not enforced yet.
    """

    model_config = ConfigDict(populate_by_name=True)

    retries: int = Field(default=0, ge=0)
    url: str = Field(..., min_length=1)
    post_data: str = Field(default="", alias="postData")
    deliver_after: datetime | None = Field(default=None, alias="deliverAfter")
    content_type: str | None = Field(default=None, alias="contentType")

    def to_wire(self) -> str:
        """Serialize to the JSON string stored by durable queues."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_wire(cls, raw: str | bytes) -> "HookRequest":
        """Rebuild a fresh request from its wire string.

        Raises:
            ValueError: If ``raw`` is not a valid serialized request.
        """
        return cls.model_validate_json(raw)
