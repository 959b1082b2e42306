from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = ("nombre", "direccion", "telefono", "correo")


class Client(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(alias="nombre")
    address: str = Field(alias="direccion")
    phone: str = Field(alias="telefono")
    email: str = Field(alias="correo")

    @property
    def key(self) -> str:
        return self.name.casefold()

    def to_record(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
