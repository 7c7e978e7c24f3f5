from fastapi import Request, APIRouter, HTTPException
from gqlparams.converters.query_string import (
    parse_query_string,
    to_get_arguments,
    to_query_string,
)
from gqlparams.converters.request_params import (
    arguments_to_graphql_request_params,
    body_to_graphql_request_params,
    content_type_charset,
    is_graphql_content_type,
    to_post_body_string,
)
from gqlparams.interfaces.schemas import EncodedGraphQLRequest, GraphQLRequestParams

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

router = APIRouter(prefix="/graphql")


@router.post("", response_model=GraphQLRequestParams)
async def graphql_post_params(request: Request):
    content_type = request.headers.get("content-type")
    charset = content_type_charset(content_type)
    body = await request.body()
    if is_graphql_content_type(content_type):
        return body_to_graphql_request_params(body, charset)
    if content_type and content_type.partition(";")[0].strip() == FORM_CONTENT_TYPE:
        # Form bodies are percent-encoded ASCII, latin-1 keeps every byte intact
        arguments = parse_query_string(body.decode("latin-1"))
        return arguments_to_graphql_request_params(arguments, charset)
    raise HTTPException(
        status_code=415, detail=f"Unsupported content type: {content_type}"
    )


@router.get("", response_model=GraphQLRequestParams)
async def graphql_get_params(request: Request):
    query_string = request.scope.get("query_string", b"").decode("latin-1")
    return arguments_to_graphql_request_params(parse_query_string(query_string))


@router.post("/encode", response_model=EncodedGraphQLRequest)
async def graphql_encode(params: GraphQLRequestParams):
    return EncodedGraphQLRequest(
        postBody=to_post_body_string(params),
        queryString=to_query_string(to_get_arguments(params)),
    )
