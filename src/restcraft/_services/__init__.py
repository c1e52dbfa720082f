from ._requester import Requester
from ._transport import HttpxTransport, Transport

__all__ = ["HttpxTransport", "Requester", "Transport"]
