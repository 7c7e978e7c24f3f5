from __future__ import annotations
from typing import Iterable
from urllib.parse import quote_plus, unquote_plus
from gqlparams.config.encoding import encoding
from gqlparams.converters.errors import InvalidEncoding
from gqlparams.converters.request_params import (
    DiagnosticSink,
    query_to_get_param_value,
    trim_to_none,
    variables_to_get_param_value,
)
from gqlparams.interfaces.schemas import Argument, GraphQLRequestParams, HTTPArgument


def to_get_arguments(
    params: GraphQLRequestParams, on_error: DiagnosticSink | None = None
) -> list[HTTPArgument]:
    arguments: list[HTTPArgument] = []

    operation_name = trim_to_none(params.operationName)
    if operation_name is not None:
        arguments.append(
            HTTPArgument(name="operationName", value=operation_name, always_encoded=True)
        )

    arguments.append(
        HTTPArgument(
            name="query",
            value=query_to_get_param_value(params.query),
            always_encoded=True,
        )
    )

    variables = variables_to_get_param_value(params.variables, on_error)
    if variables is not None:
        arguments.append(
            HTTPArgument(name="variables", value=variables, always_encoded=True)
        )

    return arguments


def to_query_string(
    arguments: Iterable[Argument], content_encoding: str | None = None
) -> str:
    text_encoding = encoding.resolve(content_encoding)
    pairs: list[str] = []
    try:
        for argument in arguments:
            if (
                not isinstance(argument, HTTPArgument)
                or argument.metadata != "="
                or argument.value is None
            ):
                continue
            value = (
                quote_plus(argument.value, encoding=text_encoding)
                if argument.always_encoded
                else argument.value
            )
            pairs.append(f"{quote_plus(argument.name, encoding=text_encoding)}={value}")
    except (LookupError, ValueError) as e:
        raise InvalidEncoding(str(e)) from e
    return "&".join(pairs)


def parse_query_string(query_string: str) -> list[HTTPArgument]:
    # Values stay percent-encoded; they are decoded once the encoding is known
    arguments: list[HTTPArgument] = []
    for pair in query_string.lstrip("?").split("&"):
        if not pair:
            continue
        name, metadata, value = pair.partition("=")
        arguments.append(
            HTTPArgument(
                name=unquote_plus(name),
                value=value,
                metadata=metadata,
                always_encoded=False,
            )
        )
    return arguments
