from fastapi import APIRouter

from sentimentbr.api.schemas.common import Health

# no prefix: both paths are declared explicitly
router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=Health)
def health_api():
    return Health()


@router.get("/health", response_model=Health)
def health_plain():
    return Health()
