from logging import getLogger
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_offline import FastAPIOffline
from gqlparams.converters.errors import GraphQLParamError, SerializationFailure
from gqlparams.middleware.requestlogger import RequestLogger
from gqlparams.routers.application import router
from gqlparams.config.general import general

logger = getLogger(__name__)

app = FastAPIOffline(
    title=general.PROJECT_NAME,
    version=general.API_VERSION,
    root_path=general.MOUNT_PATH,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogger)


@app.exception_handler(GraphQLParamError)
async def graphql_param_error(request: Request, exc: GraphQLParamError):
    if isinstance(exc, SerializationFailure):
        logger.error("path=%s %s", request.url.path, exc, exc_info=exc)
        status_code = 500
    else:
        logger.info("path=%s rejected error=%s %s", request.url.path, exc.kind, exc)
        status_code = 400
    return JSONResponse(
        status_code=status_code, content={"detail": str(exc), "error": exc.kind}
    )


app.include_router(router)
