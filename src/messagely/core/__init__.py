from .exceptions import (
    MessagelyError,
    ValidationError,
    InvalidCredentials,
    NotFoundError,
    ConflictError,
    StoreError,
)
from .gateways import UserDirectory
from .security import PasswordHash, TokenIssuer
