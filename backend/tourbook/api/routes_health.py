from fastapi import APIRouter, Depends

from tourbook.api import get_repository
from tourbook.storage.repository import Repository

router = APIRouter()


@router.get("/health")
def healthcheck(repository: Repository = Depends(get_repository)) -> dict:
    reachable = repository.ping()
    return {
        "status": "ok" if reachable else "degraded",
        "storage": repository.backend,
    }
