"""Record and change models exchanged with ExternalDNS."""

import logging
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

OWNER_LABEL = "owner"


class WireModel(BaseModel):
    """Base for models carried over the wire with camelCase field names."""

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _fold_key_case(cls, data):
        """
        Match wire keys case-insensitively, preferring an exact match.

        ExternalDNS decodes with Go's encoding/json, which accepts ``Create``
        for ``create``; unknown keys are dropped and logged.
        """
        if not isinstance(data, dict):
            return data

        known = {}
        for name, field in cls.model_fields.items():
            known[name] = name
            known.setdefault((field.alias or name).lower(), field.alias or name)
        exact = {key for key in data if key in known.values()}

        folded = {}
        for key, value in data.items():
            if key in exact:
                folded[key] = value
                continue

            wire = known.get(key.lower()) if isinstance(key, str) else None
            if wire is None:
                logger.debug("ignoring unknown field %r in %s", key, cls.__name__)
            elif wire in exact or wire in folded:
                logger.debug("ignoring duplicate field %r in %s", key, cls.__name__)
            else:
                folded[wire] = value

        return folded

    def to_wire(self) -> dict:
        """Return the JSON-compatible wire form, omitting unset values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProviderSpecificProperty(WireModel):
    """A provider-specific name/value pair attached to an endpoint."""

    name: StrictStr
    value: StrictStr


class Endpoint(WireModel):
    """A single DNS record as observed in, or intended for, the backend."""

    dns_name: StrictStr = Field(alias="dnsName", min_length=1)
    targets: list[StrictStr] = Field(default_factory=list)
    record_type: StrictStr = Field(alias="recordType", min_length=1)
    set_identifier: Optional[StrictStr] = Field(default=None, alias="setIdentifier")
    record_ttl: Optional[StrictInt] = Field(default=None, alias="recordTTL", ge=0)
    labels: dict[StrictStr, StrictStr] = Field(default_factory=dict)
    provider_specific: list[ProviderSpecificProperty] = Field(
        default_factory=list, alias="providerSpecific"
    )

    @field_validator("targets", "labels", "provider_specific", mode="before")
    @classmethod
    def _null_as_empty(cls, value, info):
        if value is None:
            return {} if info.field_name == "labels" else []

        return value

    @property
    def key(self) -> tuple[str, str, str]:
        """
        Storage identity: name, type and set identifier.

        The name is lowercased without its trailing dot and the type is
        uppercased, so spellings of the same record share one key.
        """
        return (
            self.dns_name.rstrip(".").lower(),
            self.record_type.upper(),
            self.set_identifier or "",
        )

    @property
    def owner(self) -> Optional[str]:
        """Owner recorded in the labels, if any."""
        return self.labels.get(OWNER_LABEL)

    def _comparable(self) -> tuple:
        return (
            self.dns_name,
            tuple(self.targets),
            self.record_type,
            self.set_identifier,
            self.record_ttl,
            tuple(sorted(self.labels.items())),
            tuple(sorted((p.name, p.value) for p in self.provider_specific)),
        )

    def __eq__(self, other):
        if not isinstance(other, Endpoint):
            return NotImplemented

        return self._comparable() == other._comparable()

    def __hash__(self):
        return hash(self._comparable())

    def __str__(self):
        ttl = "" if self.record_ttl is None else f" {self.record_ttl}"
        return f"{self.dns_name}{ttl} IN {self.record_type} {' '.join(self.targets)}"


class Changes(WireModel):
    """A batch of record changes; update lists are paired by position."""

    create: list[Endpoint] = Field(default_factory=list)
    update_old: list[Endpoint] = Field(default_factory=list, alias="updateOld")
    update_new: list[Endpoint] = Field(default_factory=list, alias="updateNew")
    delete: list[Endpoint] = Field(default_factory=list)

    @field_validator("create", "update_old", "update_new", "delete", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _paired_updates(self) -> "Changes":
        if len(self.update_old) != len(self.update_new):
            raise ValueError(
                f"updateOld has {len(self.update_old)} entries "
                f"but updateNew has {len(self.update_new)}"
            )

        return self

    def has_changes(self) -> bool:
        """Check if there are any changes to be applied."""
        return bool(self.create or self.update_old or self.delete)

    def updates(self) -> list[tuple[Endpoint, Endpoint]]:
        """Return the (old, new) update pairs."""
        return list(zip(self.update_old, self.update_new))


EndpointList = TypeAdapter(list[Endpoint])


def endpoints_to_wire(endpoints: list[Endpoint]) -> list[dict]:
    """Serialize a list of endpoints to their wire form."""
    return [endpoint.to_wire() for endpoint in endpoints]
