from pydantic import BaseModel


class LoginIn(BaseModel):
    username: str
    password: str


class TokenOut(BaseModel):
    token: str
    token_type: str = "bearer"


# Shared by /auth/me and the orders service's /whoami
class WhoAmIOut(BaseModel):
    identity: str
    role: str
