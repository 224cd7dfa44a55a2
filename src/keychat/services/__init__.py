from .auth_api import AuthAPI
from .user_api import UserAPI
from .message_api import MessageAPI
from .error_handlers import register_error_handlers
