"""Subscription handle state for the simulation data feed."""

from __future__ import annotations

import secrets
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from tsw6weather._constants import SUBSCRIPTION_ID_MAX, SUBSCRIPTION_ID_MIN


class SubscriptionState(StrEnum):
    UNREGISTERED = "unregistered"
    ACTIVE = "active"


def new_subscription_id() -> int:
    """Random 16-bit subscription id in ``[1, 65535]``."""
    return SUBSCRIPTION_ID_MIN + secrets.randbelow(SUBSCRIPTION_ID_MAX - SUBSCRIPTION_ID_MIN + 1)


class SubscriptionHandle(BaseModel):
    """Server-side registration of the player-info feed.

    Parameters
    ----------
    id : int
        16-bit id the simulation files the subscription under.  Chosen once,
        on the first registration attempt, and reused for retries.
    active : bool
        ``True`` once the simulation confirmed the registration.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    id: int = Field(default_factory=new_subscription_id, ge=SUBSCRIPTION_ID_MIN, le=SUBSCRIPTION_ID_MAX)
    active: bool = False

    def activated(self) -> SubscriptionHandle:
        return self.model_copy(update={"active": True})

    @property
    def state(self) -> SubscriptionState:
        return SubscriptionState.ACTIVE if self.active else SubscriptionState.UNREGISTERED
