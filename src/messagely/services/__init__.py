from .routers import AuthAPI, UsersAPI
from .errors import register_exception_handlers
