from __future__ import annotations

from dataclasses import dataclass

from comanda.domain.common.ids import CompanyId, UserId


@dataclass(frozen=True)
class Principal:
    company_id: CompanyId
    user_id: UserId
    role: str = "staff"
