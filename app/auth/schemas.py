from pydantic import BaseModel


class UserCredentials(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    id: str
    username: str


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class TokenRefresh(BaseModel):
    token: str
    token_type: str = "bearer"


class MessageOut(BaseModel):
    message: str
