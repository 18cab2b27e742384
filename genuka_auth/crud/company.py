from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from genuka_auth.crud.base import CRUDBase
from genuka_auth.models.company import Company
from genuka_auth.schemas.company import CompanyProfile
from genuka_auth.schemas.token import TokenGrant


class CRUDCompany(CRUDBase[Company]):
    def upsert_from_callback(
        self,
        db: Session,
        *,
        company_id: str,
        code: str,
        grant: TokenGrant,
        profile: CompanyProfile,
        now: Optional[datetime] = None,
    ) -> Company:
        data = {
            **profile.model_dump(),
            "access_token": grant.access_token,
            "token_expires_at": grant.expires_at(now),
            "authorization_code": code,
        }
        if grant.refresh_token:
            data["refresh_token"] = grant.refresh_token
        return self.upsert(db, company_id, data)

    def store_refreshed_tokens(
        self, db: Session, company: Company, grant: TokenGrant, now: Optional[datetime] = None
    ) -> Company:
        return self.update(db, company, {
            "access_token": grant.access_token,
            # Genuka nem sempre rotaciona o refresh token
            "refresh_token": grant.refresh_token or company.refresh_token,
            "token_expires_at": grant.expires_at(now),
        })


company_crud = CRUDCompany(Company)
