from pydantic import BaseModel, ConfigDict
from datetime import datetime

class UserBasicDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    first_name: str
    last_name: str
    phone: str

class UserDetailDTO(UserBasicDTO):
    join_at: datetime
    last_login_at: datetime | None = None

class UserDTO(UserBasicDTO):
    # password is the stored hash, never returned over HTTP
    password: str
    join_at: datetime
    last_login_at: datetime | None = None

class MessageFromDTO(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: datetime | None = None
    to_user: UserBasicDTO

class MessageToDTO(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: datetime | None = None
    from_user: UserBasicDTO
