"""
(De)serialization of GraphQL request parameters.

A GraphQL request travels over HTTP either as a JSON POST body or as
URL-encoded query/form arguments. Everything here converts between those
wire forms and GraphQLRequestParams.
"""
from __future__ import annotations
from re import compile as re_compile
from codecs import lookup
from functools import singledispatch
from json import dumps, loads
from logging import getLogger
from math import isinf
from typing import Any, Callable, Iterable
from urllib.parse import unquote_plus
from gqlparams.config.encoding import encoding
from gqlparams.converters.errors import (
    InvalidEncoding,
    InvalidFieldType,
    InvalidJson,
    InvalidQueryShape,
    InvalidVariablesShape,
    NullFieldValue,
    SerializationFailure,
)
from gqlparams.interfaces.schemas import Argument, GraphQLRequestParams, HTTPArgument

logger = getLogger(__name__)

DiagnosticSink = Callable[[str], None]

GRAPHQL_CONTENT_TYPE = "application/json"
QUERY_PREFIXES = ("query", "mutation")
GRAPHQL_PARAM_NAMES = ("operationName", "query", "variables")
IGNORED_VARIABLES_MESSAGE = (
    "Ignoring the GraphQL query variables content due to the syntax error: %s"
)

WHITESPACES_PATTERN = re_compile(r"[ \t\n\x0b\f\r]+")
ILLEGAL_ESCAPE_PATTERN = re_compile(r"%(?![0-9A-Fa-f]{2})")


def trim_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard token '{name}'")


def _parse_float(text: str) -> float:
    value = float(text)
    if isinf(value):
        raise ValueError(f"Out of range float value '{text}'")
    return value


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _read_object(text: str) -> dict[str, Any]:
    try:
        data = loads(text, parse_constant=_reject_constant, parse_float=_parse_float)
    except RecursionError as e:
        raise ValueError("Maximum JSON nesting depth exceeded") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object but found {_json_type(data)}")
    return data


def _write(value: Any) -> str:
    return dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def _ignore_variables(error: Exception, on_error: DiagnosticSink | None) -> None:
    sink = on_error if on_error is not None else logger.error
    sink(IGNORED_VARIABLES_MESSAGE % error)


def _parse_content_type(content_type: str) -> tuple[str, dict[str, str]]:
    mime_type, *params = content_type.split(";")
    parameters: dict[str, str] = {}
    for param in params:
        name, sep, value = param.partition("=")
        if sep:
            parameters[name.strip().lower()] = value.strip().strip('"')
    return mime_type.strip(), parameters


def is_graphql_content_type(content_type: str | None) -> bool:
    """Return True if the Content-Type header value is the GraphQL content type (application/json)."""
    if not content_type or not content_type.strip():
        return False
    mime_type, parameters = _parse_content_type(content_type)
    charset = parameters.get("charset")
    if charset:
        try:
            lookup(charset)
        except (LookupError, ValueError):
            return False
    return mime_type == GRAPHQL_CONTENT_TYPE


def content_type_charset(content_type: str | None) -> str | None:
    if not content_type:
        return None
    _, parameters = _parse_content_type(content_type)
    return parameters.get("charset") or None


def to_post_body_string(
    params: GraphQLRequestParams, on_error: DiagnosticSink | None = None
) -> str:
    """
    Convert GraphQL request parameters to an HTTP POST body string.

    Variables that do not parse as a JSON object are reported to ``on_error``
    (the module logger by default) and left out of the body.
    Raises SerializationFailure if the assembled body cannot be written.
    """
    post_body: dict[str, Any] = {"operationName": trim_to_none(params.operationName)}

    if params.variables is not None and params.variables.strip():
        try:
            post_body["variables"] = _read_object(params.variables)
        except ValueError as e:
            _ignore_variables(e, on_error)

    post_body["query"] = params.query.strip()

    try:
        return _write(post_body)
    except (RecursionError, TypeError, ValueError) as e:
        raise SerializationFailure() from e


def query_to_get_param_value(query: str | None) -> str | None:
    if query is None:
        return None
    return WHITESPACES_PATTERN.sub(" ", query.strip())


def variables_to_get_param_value(
    variables: str | None, on_error: DiagnosticSink | None = None
) -> str | None:
    """Re-serialize a variables JSON object compactly, or return None if it is not one."""
    if variables is None or not variables.strip():
        return None
    try:
        return _write(_read_object(variables))
    except ValueError as e:
        _ignore_variables(e, on_error)
    return None


def _text_content(value: Any, nullable: bool) -> str | None:
    if value is None:
        if nullable:
            return None
        raise NullFieldValue()
    if isinstance(value, str):
        return value
    raise InvalidFieldType()


def body_to_graphql_request_params(
    post_data: bytes, content_encoding: str | None = None
) -> GraphQLRequestParams:
    """
    Parse a POST body into GraphQLRequestParams.

    Checks run in a fixed order and the first violation is raised:
    JSON syntax, operationName type, query presence/type/prefix, variables type.
    """
    text_encoding = encoding.resolve(content_encoding)

    try:
        data = _read_object(bytes(post_data).decode(text_encoding))
    except (LookupError, ValueError) as e:
        raise InvalidJson(str(e)) from e

    operation_name = None
    if "operationName" in data:
        operation_name = _text_content(data["operationName"], nullable=True)

    if "query" not in data:
        raise InvalidQueryShape()
    query = _text_content(data["query"], nullable=False)
    if not query.strip().startswith(QUERY_PREFIXES):
        raise InvalidQueryShape()

    variables = None
    variables_node = data.get("variables")
    if variables_node is not None:
        if not isinstance(variables_node, dict):
            raise InvalidVariablesShape()
        try:
            variables = _write(variables_node)
        except (RecursionError, ValueError) as e:
            raise InvalidJson(str(e)) from e

    return GraphQLRequestParams(
        operationName=operation_name, query=query, variables=variables
    )


def url_decode(value: str, text_encoding: str) -> str:
    match = ILLEGAL_ESCAPE_PATTERN.search(value)
    if match is not None:
        raise InvalidEncoding(
            f"Illegal hex characters in escape (%) pattern at index {match.start()}"
        )
    try:
        lookup(text_encoding)
        return unquote_plus(value, encoding=text_encoding, errors="strict")
    except (LookupError, ValueError) as e:
        raise InvalidEncoding(str(e)) from e


def arguments_to_graphql_request_params(
    arguments: Iterable[Argument], content_encoding: str | None = None
) -> GraphQLRequestParams:
    """
    Collect GraphQLRequestParams from decoded HTTP arguments.

    Entries are folded in order, so the last usable entry for a name wins.
    """
    text_encoding = encoding.resolve(content_encoding)

    operation_name = None
    query = None
    variables = None

    for argument in arguments:
        if not isinstance(argument, HTTPArgument) or argument.metadata != "=":
            continue
        value = trim_to_none(argument.value)
        if value is None or argument.name not in GRAPHQL_PARAM_NAMES:
            continue
        if not argument.always_encoded:
            value = url_decode(value, text_encoding)

        if argument.name == "operationName":
            operation_name = value
        elif argument.name == "query":
            query = value
        else:
            variables = value

    if not query or not query.startswith(QUERY_PREFIXES):
        raise InvalidQueryShape()

    if variables and not (variables.startswith("{") and variables.endswith("}")):
        raise InvalidVariablesShape()

    return GraphQLRequestParams(
        operationName=operation_name, query=query, variables=variables
    )


@singledispatch
def to_graphql_request_params(
    data: Iterable[Argument], content_encoding: str | None = None
) -> GraphQLRequestParams:
    return arguments_to_graphql_request_params(data, content_encoding)


@to_graphql_request_params.register(bytes)
@to_graphql_request_params.register(bytearray)
def _(data: bytes, content_encoding: str | None = None) -> GraphQLRequestParams:
    return body_to_graphql_request_params(data, content_encoding)
