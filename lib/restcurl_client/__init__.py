from .client import RestClient
from .config_types import ClientConfig
from .errors import ApiError, AuthError, DecodeError, OptionsError, RequestFailed, RestClientError
from .options import Auth, RequestOptions

__all__ = [
    "RestClient",
    "ClientConfig",
    "Auth",
    "RequestOptions",
    "RestClientError",
    "OptionsError",
    "RequestFailed",
    "DecodeError",
    "ApiError",
    "AuthError",
]
