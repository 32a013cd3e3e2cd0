"""Base model for payloads received from the simulation and the provider.

Every response model inherits from :class:`Tsw6BaseModel` which provides:

* frozen instances, so parsed payloads can be shared between tasks;
* ``extra="ignore"``, because both APIs add fields between releases;
* ``populate_by_name=True`` so tests can build models with snake_case names
  while the wire format keeps its own casing through aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Tsw6BaseModel(BaseModel):
    """Base for parsed API payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
