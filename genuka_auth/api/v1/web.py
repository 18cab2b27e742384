# genuka_auth/api/v1/web.py
from fastapi import APIRouter, Depends

from genuka_auth.api.deps import require_company
from genuka_auth.models.company import Company
from genuka_auth.schemas.company import CompanyOut

router = APIRouter()

@router.get("/")
def home(company: Company = Depends(require_company)):
    return {"company": CompanyOut.model_validate(company)}
