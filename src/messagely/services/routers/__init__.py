from .auth_api import AuthAPI
from .users_api import UsersAPI
