from pydantic import BaseModel


class UserOut(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True


class AuthResult(BaseModel):
    message: str
    user: UserOut
