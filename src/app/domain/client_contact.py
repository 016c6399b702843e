"""Cliente da imobiliária (CRM) no formato enviado aos webhooks de usuário."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ClientContact(BaseModel):
    """Dados de cliente sincronizados com os webhooks de gestão de usuários.

    Os aliases reproduzem o formato camelCase esperado pelos receptores.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: str | None = None
    address: str | None = None
    cpf_cnpj: str | None = Field(default=None, alias="cpfCnpj")
    asaas_customer_id: str | None = Field(default=None, alias="asaasCustomerId")
    payments: Any = None
    status: Literal["Active", "Inactive"] = "Active"
    notes: str | None = None
    creci: str | None = None
    cep: str | None = None
    cidade: str | None = None

    def to_webhook_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["ClientContact"]
