from pydantic import BaseModel

from messagely.core.dto import UserBasicDTO, UserDetailDTO, MessageFromDTO, MessageToDTO

class UsersResponse(BaseModel):
    users: list[UserBasicDTO]

class UserResponse(BaseModel):
    user: UserDetailDTO

class MessagesFromResponse(BaseModel):
    msgs: list[MessageFromDTO]

class MessagesToResponse(BaseModel):
    msgs: list[MessageToDTO]

class ErrorBody(BaseModel):
    message: str
    status: int

class ErrorResponse(BaseModel):
    error: ErrorBody

class HealthResponse(BaseModel):
    status: str
    timestamp: str
