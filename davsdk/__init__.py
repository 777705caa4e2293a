"""Topic resolution and record streaming for the DAV network."""

from davsdk.config import Config
from davsdk.config import get_config
from davsdk.exceptions import DavError
from davsdk.exceptions import RegistrationError
from davsdk.exceptions import StreamError
from davsdk.exceptions import TopicProvisioningError
from davsdk.identity import Identity
from davsdk.streams import RecordStream
from davsdk.streams import StreamSubscription

__all__ = [
    "Config",
    "DavError",
    "Identity",
    "RecordStream",
    "RegistrationError",
    "StreamError",
    "StreamSubscription",
    "TopicProvisioningError",
    "get_config",
]
