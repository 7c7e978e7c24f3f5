from fastapi import APIRouter
from gqlparams.routers.graphql import router as graphql_router

router = APIRouter(prefix="")
router.include_router(graphql_router)
