from oauth2_gateway.protocol.request import ProtocolRequest
from oauth2_gateway.protocol.response import ProtocolResponse

__all__ = ["ProtocolRequest", "ProtocolResponse"]
