from fastapi import APIRouter
from groupfit.routers import examples, fits

api_router = APIRouter()
api_router.include_router(fits.router, prefix="/fits", tags=["fits"])
api_router.include_router(examples.router, prefix="/examples", tags=["examples"])
