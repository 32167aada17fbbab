from .client import OCMClient
from .holder import OCMClientHolder
from .error import OCMError, AuthenticationError, NotFoundError, RequestError

__all__ = [
    "OCMClient",
    "OCMClientHolder",
    "OCMError",
    "AuthenticationError",
    "NotFoundError",
    "RequestError",
]
