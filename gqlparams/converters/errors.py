from __future__ import annotations


class GraphQLParamError(ValueError):
    """Base class for GraphQL request parameter conversion failures."""

    kind: str = "graphql_param_error"
    message: str = "Invalid GraphQL request parameters."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidJson(GraphQLParamError):
    kind = "invalid_json"
    message = "Invalid json data"

    def __init__(self, reason: str):
        super().__init__(f"{self.message}: {reason}")


class InvalidQueryShape(GraphQLParamError):
    kind = "invalid_query_shape"
    message = "Not a valid GraphQL query."


class InvalidVariablesShape(GraphQLParamError):
    kind = "invalid_variables_shape"
    message = "Not a valid object node for GraphQL variables."


class InvalidFieldType(GraphQLParamError):
    kind = "invalid_field_type"
    message = "Not a string value node."


class NullFieldValue(InvalidFieldType):
    message = "Not a non-null value node."


class InvalidEncoding(GraphQLParamError):
    kind = "invalid_encoding"
    message = "Cannot decode GraphQL request parameter"

    def __init__(self, reason: str):
        super().__init__(f"{self.message}: {reason}")


class SerializationFailure(GraphQLParamError, RuntimeError):
    kind = "serialization_failure"
    message = "Cannot serialize JSON for POST body string"
