# backend/health/router.py
from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    return {"message": "Server is Fine"}


@router.get("/health")
def health():
    # Keep this super simple and always unauthenticated
    return {"ok": True}
