import pytest

from gqlparams.converters.errors import (
    InvalidEncoding,
    InvalidQueryShape,
    InvalidVariablesShape,
)
from gqlparams.converters.request_params import (
    arguments_to_graphql_request_params,
    to_graphql_request_params,
)
from gqlparams.interfaces.schemas import Argument, GraphQLRequestParams, HTTPArgument


def encoded(name, value, **kwargs):
    return HTTPArgument(name=name, value=value, always_encoded=False, **kwargs)


def plain(name, value, **kwargs):
    return HTTPArgument(name=name, value=value, always_encoded=True, **kwargs)


@pytest.mark.unit
class TestArgumentsToGraphQLRequestParams:
    def test_decodes_encoded_arguments(self):
        params = arguments_to_graphql_request_params(
            [
                encoded("operationName", "getUser"),
                encoded("query", "query+getUser+%7B+user+%7B+name+%7D+%7D"),
                encoded("variables", "%7B%22id%22%3A1%7D"),
            ],
            "UTF-8",
        )

        assert params == GraphQLRequestParams(
            operationName="getUser",
            query="query getUser { user { name } }",
            variables='{"id":1}',
        )

    def test_always_encoded_values_are_taken_verbatim(self):
        params = arguments_to_graphql_request_params(
            [plain("query", "query { a(x: \"100%\") }"), plain("variables", "{\"a\": \"b+c\"}")]
        )

        assert params.query == 'query { a(x: "100%") }'
        assert params.variables == '{"a": "b+c"}'

    def test_values_are_trimmed_before_decoding(self):
        params = arguments_to_graphql_request_params([encoded("query", "  mutation+%7B+a+%7D \n")])

        assert params.query == "mutation { a }"

    def test_decoded_query_is_not_trimmed(self):
        with pytest.raises(InvalidQueryShape):
            arguments_to_graphql_request_params([encoded("query", "%20query+%7B+a+%7D")])

    def test_last_entry_wins(self):
        params = arguments_to_graphql_request_params(
            [
                plain("operationName", "first"),
                plain("query", "query { first }"),
                plain("operationName", "second"),
                plain("query", "query { second }"),
            ]
        )

        assert params.operationName == "second"
        assert params.query == "query { second }"

    def test_skipped_entries_do_not_overwrite(self):
        params = arguments_to_graphql_request_params(
            [
                plain("query", "query { kept }"),
                plain("query", "   "),
                plain("query", None),
                plain("query", "query { wrong metadata }", metadata=""),
                Argument(name="query", value="query { not http }"),
            ]
        )

        assert params.query == "query { kept }"

    def test_other_names_are_ignored(self):
        params = arguments_to_graphql_request_params(
            [
                encoded("extensions", "%ZZ"),
                plain("Query", "query { case sensitive }"),
                plain("query", "query { a }"),
            ]
        )

        assert params == GraphQLRequestParams(query="query { a }")

    def test_encoding_from_content_encoding(self):
        params = arguments_to_graphql_request_params(
            [encoded("query", "query+%7B+greet%28name%3A+%22Zo%EB%22%29+%7D")], "ISO-8859-1"
        )

        assert params.query == 'query { greet(name: "Zoë") }'

    def test_default_encoding_without_content_encoding(self):
        params = arguments_to_graphql_request_params(
            [encoded("query", "query+%7B+greet%28name%3A+%22Zo%C3%AB%22%29+%7D")], None
        )

        assert params.query == 'query { greet(name: "Zoë") }'

    def test_brace_check_only_for_variables(self):
        params = arguments_to_graphql_request_params(
            [plain("query", "query { a }"), plain("variables", "{malformed}")]
        )

        assert params.variables == "{malformed}"


@pytest.mark.unit
class TestArgumentRejections:
    def test_missing_query(self):
        with pytest.raises(InvalidQueryShape, match="Not a valid GraphQL query."):
            arguments_to_graphql_request_params([plain("operationName", "op")])

    def test_empty_collection(self):
        with pytest.raises(InvalidQueryShape):
            arguments_to_graphql_request_params([])

    @pytest.mark.parametrize("query", ["{ a }", "Query { a }", "subscription { a }"])
    def test_query_prefix(self, query):
        with pytest.raises(InvalidQueryShape):
            arguments_to_graphql_request_params([plain("query", query)])

    @pytest.mark.parametrize("variables", ["[1]", "{\"a\": 1", "\"a\": 1}", "1"])
    def test_variables_braces(self, variables):
        with pytest.raises(
            InvalidVariablesShape, match="Not a valid object node for GraphQL variables."
        ):
            arguments_to_graphql_request_params(
                [plain("query", "query { a }"), plain("variables", variables)]
            )

    def test_query_checked_before_variables(self):
        with pytest.raises(InvalidQueryShape):
            arguments_to_graphql_request_params([plain("query", "{ a }"), plain("variables", "[]")])

    def test_illegal_escape(self):
        with pytest.raises(InvalidEncoding, match="Illegal hex characters"):
            arguments_to_graphql_request_params([encoded("query", "query+%7B+a+%ZZ")])

    def test_undecodable_escape(self):
        with pytest.raises(InvalidEncoding):
            arguments_to_graphql_request_params([encoded("query", "query+%FF")], "UTF-8")

    def test_unknown_encoding(self):
        with pytest.raises(InvalidEncoding):
            arguments_to_graphql_request_params([encoded("query", "query+a")], "no-such-charset")

    def test_malformed_encoding_name(self):
        with pytest.raises(InvalidEncoding):
            arguments_to_graphql_request_params([encoded("query", "query+a")], "a\x00b")


@pytest.mark.unit
class TestToGraphQLRequestParams:
    def test_bytes_use_body_path(self):
        params = to_graphql_request_params(b'{"query":"query { a }","variables":{"x":1}}')

        assert params.variables == '{"x":1}'

    def test_bytearray_uses_body_path(self):
        params = to_graphql_request_params(bytearray(b'{"query":"query { a }"}'), "UTF-8")

        assert params.query == "query { a }"

    def test_argument_iterables_use_argument_path(self):
        arguments = (arg for arg in [plain("query", "query { a }")])

        assert to_graphql_request_params(arguments).query == "query { a }"
