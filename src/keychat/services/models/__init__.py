from .auth_api_models import UserRegisterRequest, UserRegisterResponse, RequestContext
from .user_api_models import UserResponse
from .message_api_models import MessageSendRequest, ConversationMessage
