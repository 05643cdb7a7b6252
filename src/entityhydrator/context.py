"""
Request context consumed by the hydrator.

The context carries the request-scoped information that relation paths do
not imply: the language to translate into, the active channel, the currency
and the tax zone. The hydrator reads it once per call and never modifies it.
"""

from pydantic import BaseModel, ConfigDict, Field

from entityhydrator.entities.catalog import Channel
from entityhydrator.types import EntityId


class RequestContext(BaseModel):
    """
    Read-only request context.

    Attributes:
        channel: Active channel
        language_code: Requested language (None to use the defaults)
        currency_code: Active currency (None for the channel currency)
        tax_zone_id: Active tax zone (None for the channel default zone)

    Example:
        >>> ctx = RequestContext(
        ...     channel=Channel(id=1, code="default", default_tax_zone_id=1),
        ...     language_code="de",
        ... )
        >>> ctx.active_currency_code
        'USD'
    """

    model_config = ConfigDict(frozen=True)

    channel: Channel = Field(..., description="Active channel")
    language_code: str | None = Field(default=None, description="Requested language")
    currency_code: str | None = Field(default=None, description="Active currency")
    tax_zone_id: EntityId | None = Field(default=None, description="Active tax zone")

    @property
    def active_currency_code(self) -> str:
        return self.currency_code or self.channel.currency_code

    @property
    def active_tax_zone_id(self) -> EntityId | None:
        if self.tax_zone_id is not None:
            return self.tax_zone_id
        return self.channel.default_tax_zone_id
