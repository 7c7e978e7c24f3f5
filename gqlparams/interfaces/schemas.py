from pydantic import BaseModel, ConfigDict


class GraphQLRequestParams(BaseModel):
    # Shape checks live in the converters, not here
    model_config = ConfigDict(frozen=True)

    operationName: str | None = None
    query: str
    variables: str | None = None


class Argument(BaseModel):
    name: str
    value: str | None = None
    metadata: str = "="


class HTTPArgument(Argument):
    # True when value is plain text, False when it is still percent-encoded
    always_encoded: bool = False


class EncodedGraphQLRequest(BaseModel):
    postBody: str
    queryString: str
