import pytest

from http_spec.model.operation import HttpOperationResponse
from http_spec.responses import (
    code_specificity,
    is_valid_response_code,
    response_code_matches,
    select_response,
)


def _responses(*codes: str) -> list[HttpOperationResponse]:
    return [HttpOperationResponse(code=code) for code in codes]


class TestResponseCodeGrammar:
    @pytest.mark.parametrize("code", ["200", "404", "2XX", "XXX", "20X", "default"])
    def test_valid(self, code):
        assert is_valid_response_code(code)

    @pytest.mark.parametrize("code", ["", "2xx", "600", "20", "2000", "DEFAULT", "abc"])
    def test_invalid(self, code):
        assert not is_valid_response_code(code)

    def test_matches(self):
        assert response_code_matches("2XX", 201)
        assert response_code_matches("201", 201)
        assert response_code_matches("default", 503)
        assert not response_code_matches("2XX", 404)
        assert not response_code_matches("2xx", 201)

    def test_specificity_order(self):
        codes = ["default", "XXX", "2XX", "20X", "201"]
        assert sorted(codes, key=code_specificity) == ["201", "20X", "2XX", "XXX", "default"]


class TestSelectResponse:
    def test_wildcard_beats_default(self):
        selected = select_response(_responses("200", "2XX", "default"), 201)
        assert selected.code == "2XX"

    def test_falls_back_to_default(self):
        selected = select_response(_responses("200", "default"), 201)
        assert selected.code == "default"

    def test_exact_beats_wildcard_regardless_of_order(self):
        selected = select_response(_responses("2XX", "200"), 200)
        assert selected.code == "200"

    def test_fewer_wildcards_win(self):
        selected = select_response(_responses("2XX", "20X"), 204)
        assert selected.code == "20X"

    def test_ties_keep_declaration_order(self):
        first, second = HttpOperationResponse(code="2XX", description="a"), HttpOperationResponse(
            code="2XX", description="b"
        )
        assert select_response([first, second], 200) is first

    def test_no_match(self):
        assert select_response(_responses("200", "2XX"), 404) is None

    def test_invalid_codes_never_match(self):
        assert select_response(_responses("2xx"), 200) is None
