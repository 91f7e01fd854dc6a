from sqlmodel import Field, SQLModel


class DoctorBase(SQLModel):
    email: str = Field(unique=True, index=True)
    full_name: str | None = None


class Doctor(DoctorBase, table=True):
    __tablename__ = "doctors"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str


class DoctorCreate(SQLModel):
    email: str
    password: str
    full_name: str | None = None


class DoctorPublic(SQLModel):
    id: int
    email: str
    full_name: str | None = None
