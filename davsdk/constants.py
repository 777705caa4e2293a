# ---------------------------------------------------------------------------
# Topic type tags and registrar operation names.
#
# Type tags are handed to ``LogClient.generate_topic_id`` when a topic has to
# be minted.  Operation names form the path segment of the registrar endpoint
# (``<seed>/<operation>/:<topic_id>``).
# ---------------------------------------------------------------------------

from typing import Final

# Type tags --------------------------------------------------------------
NEED_TOPIC: Final = "need"
NEEDS_TOPIC: Final = "needs"
MISSIONS_TOPIC: Final = "missions"
MESSAGES_TOPIC: Final = "messages"

# Registrar operations ---------------------------------------------------
PUBLISH_NEED: Final = "publishNeed"
NEEDS_FOR_TYPE: Final = "needsForType"

# Back-pressure bound for a single stream subscription
STREAM_QUEUE_SIZE: Final = 100
