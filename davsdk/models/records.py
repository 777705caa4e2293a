"""Domain records: a params payload bound to a topic (or record) id.

Records are plain frozen dataclasses.  Building one never touches the network;
two records compare equal when their class, ``id`` and ``params`` match –
the attached :class:`~davsdk.config.Config` is carried along but ignored for
equality.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Generic
from typing import TypeVar

from davsdk.config import Config
from davsdk.models.params import BaseParams
from davsdk.models.params import BidParams
from davsdk.models.params import MessageParams
from davsdk.models.params import MissionParams
from davsdk.models.params import NeedParams

P = TypeVar("P", bound=BaseParams)


@dataclass(frozen=True)
class DomainRecord(Generic[P]):
    id: str
    params: P
    config: Config = field(compare=False, repr=False)

    @property
    def topic_id(self) -> str:
        return self.id


@dataclass(frozen=True)
class Need(DomainRecord[NeedParams]):
    """A published need, keyed by the topic its bids arrive on."""


@dataclass(frozen=True)
class Bid(DomainRecord[BidParams]):
    pass


@dataclass(frozen=True)
class Mission(DomainRecord[MissionParams]):
    pass


@dataclass(frozen=True)
class Message(DomainRecord[MessageParams]):
    pass


__all__ = [
    "Bid",
    "DomainRecord",
    "Message",
    "Mission",
    "Need",
]
