"""Typed parameter payloads for needs, bids, missions and messages.

A params object is the raw, type-specific description of a record before it
is bound to a topic.  Every concrete class declares its ``protocol`` and
``message_type``; together they identify the class on the wire so payloads
read back from the log can be turned into the right model again (see
:func:`params_from_payload`).
"""

from __future__ import annotations

import json
import uuid
from typing import Any
from typing import ClassVar
from typing import Dict
from typing import Optional
from typing import Tuple
from typing import Type

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

DEFAULT_PROTOCOL = "dav"

# (protocol, message_type) -> params class
_REGISTRY: Dict[Tuple[str, str], Type["BaseParams"]] = {}


class BaseParams(BaseModel):
    """Common behaviour for every params payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    protocol: ClassVar[str] = DEFAULT_PROTOCOL
    message_type: ClassVar[Optional[str]] = None

    ttl: Optional[int] = Field(default=None, description="Time to live in milliseconds")

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if cls.__dict__.get("message_type"):
            _REGISTRY[(cls.protocol, cls.message_type)] = cls

    def serialize(self) -> Dict[str, Any]:
        """Return the wire representation (camelCase keys)."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        data["ttl"] = self.ttl
        data["protocol"] = self.protocol
        data["type"] = self.message_type
        return data

    def __hash__(self) -> int:
        # Hash the wire form so params with JSON bodies (dicts, lists) stay
        # hashable; equal params serialize identically
        return hash(json.dumps(self.serialize(), sort_keys=True))

    @classmethod
    def deserialize(cls, payload: Dict[str, Any]) -> "BaseParams":
        """Build an instance from a wire dict produced by :meth:`serialize`."""
        payload_type = payload.get("type")
        if payload_type is not None and payload_type != cls.message_type:
            raise ValueError(f"{cls.__name__} cannot deserialize payload of type '{payload_type}'")
        return cls.model_validate(payload)


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    long: float


class Area(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    long: float
    radius: float


class NeedParams(BaseParams):
    """A request for service published to providers."""

    message_type: ClassVar[Optional[str]] = "need"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    location: Optional[Location] = None


class NeedFilterParams(BaseParams):
    """Area filter a provider registers to receive matching needs."""

    message_type: ClassVar[Optional[str]] = "need_filter"

    area: Area


class BidParams(BaseParams):
    message_type: ClassVar[Optional[str]] = "bid"

    vehicle_id: str
    price: str
    need_id: Optional[str] = None


class MissionParams(BaseParams):
    message_type: ClassVar[Optional[str]] = "mission"

    id: str
    needer_dav_id: str
    vehicle_id: str
    price: str


class MessageParams(BaseParams):
    message_type: ClassVar[Optional[str]] = "message"

    sender_id: str
    body: Optional[Dict[str, Any]] = None


def params_from_payload(payload: Dict[str, Any]) -> BaseParams:
    """Deserialize *payload* into the params class registered for its type."""

    protocol = payload.get("protocol", DEFAULT_PROTOCOL)
    message_type = payload.get("type")
    params_cls = _REGISTRY.get((protocol, message_type))
    if params_cls is None:
        raise ValueError(f"No params class registered for protocol '{protocol}' and type '{message_type}'")
    return params_cls.deserialize(payload)


__all__ = [
    "Area",
    "BaseParams",
    "BidParams",
    "Location",
    "MessageParams",
    "MissionParams",
    "NeedFilterParams",
    "NeedParams",
    "params_from_payload",
]
