from .hoster_resolver import HosterResolverPort
from .http_transport import HttpTransportPort
from .user_agent import UserAgentPort

__all__ = [
    "HosterResolverPort",
    "HttpTransportPort",
    "UserAgentPort",
]
