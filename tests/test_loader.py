import json
from pathlib import Path

import pytest
import yaml

from http_spec.loader import (
    UnsupportedDocumentError,
    apply_style_defaults,
    detect_format,
    dump_document,
    load_document,
    read_document,
    read_raw,
    write_document,
)
from http_spec.model.examples import NodeExample
from http_spec.model.security import ApiKeySecurityScheme, OAuth2SecurityScheme
from http_spec.validation import InvalidDocumentError, ViolationKind, validate_document

FIXTURES = Path(__file__).parent / "fixtures"


class TestDetectFormat:
    def test_detect_by_suffix(self, tmp_path):
        assert detect_format(FIXTURES / "petstore.yaml") == "yaml"
        assert detect_format(tmp_path / "doc.json") == "json"
        assert detect_format(tmp_path / "doc.yml") == "yaml"

    def test_detect_by_content(self, tmp_path):
        f = tmp_path / "doc.txt"
        f.write_text('{"service": {"name": "x", "version": "1"}}')
        assert detect_format(f) == "json"
        f.write_text("service:\n  name: x\n")
        assert detect_format(f) == "yaml"


class TestReadDocument:
    def test_read_petstore(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        assert doc.service.name == "Swagger Petstore"
        assert [op.id for op in doc.operations] == ["list-pets", "create-pet", "show-pet"]
        assert validate_document(doc) == []

    def test_security_catalog(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        api_key, oauth = doc.service.security_schemes
        assert isinstance(api_key, ApiKeySecurityScheme)
        assert isinstance(oauth, OAuth2SecurityScheme)
        assert doc.service.security == [api_key]

    def test_three_state_security(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        list_pets, create_pet, show_pet = doc.operations
        assert list_pets.security is None
        assert create_pet.security[0][0].key == "petstore_auth"
        assert show_pet.security == []

    def test_examples_and_callbacks(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        content = doc.operations[0].responses[0].contents[0]
        assert isinstance(content.examples[0], NodeExample)
        assert content.examples[0].value[1]["name"] == "Rex"
        assert doc.operations[1].callbacks[0].callback_name == "onAdopted"

    def test_not_a_document(self, tmp_path):
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")
        with pytest.raises(UnsupportedDocumentError):
            read_raw(f)

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("service: [unclosed\n")
        with pytest.raises(UnsupportedDocumentError):
            read_raw(f)

    def test_construction_failure(self):
        with pytest.raises(InvalidDocumentError) as exc_info:
            load_document({"service": {"name": "x"}})
        assert exc_info.value.violations[0].kind == ViolationKind.MISSING_REQUIRED_FIELD
        assert exc_info.value.violations[0].location == "service.version"


class TestCanonicalForm:
    def test_roundtrip_is_lossless(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        again = load_document(dump_document(doc))
        assert again == doc

    def test_extensions_survive_unchanged(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        data = dump_document(doc)
        assert data["operations"][0]["extensions"] == {
            "x-rate-limit": {"limit": 100, "window": "60s"},
            "x-internal-notes": None,
        }

    def test_absent_security_stays_absent(self):
        data = dump_document(read_document(FIXTURES / "petstore.yaml"))
        assert "security" not in data["operations"][0]
        assert data["operations"][2]["security"] == []

    def test_camel_case_keys(self):
        data = dump_document(read_document(FIXTURES / "petstore.yaml"))
        assert data["service"]["termsOfService"] == "https://example.com/terms"
        assert data["service"]["securitySchemes"][0]["in"] == "header"
        assert data["operations"][1]["callbacks"][0]["callbackName"] == "onAdopted"
        assert data["operations"][0]["request"]["query"][1]["style"] == "pipeDelimited"

    def test_matches_source_mapping(self):
        raw = read_raw(FIXTURES / "petstore.yaml")
        data = dump_document(load_document(raw))
        assert data == raw

    @pytest.mark.parametrize("fmt, suffix", [("json", ".json"), ("yaml", ".yaml")])
    def test_write_then_read(self, tmp_path, fmt, suffix):
        doc = read_document(FIXTURES / "petstore.yaml")
        out = tmp_path / "nested" / f"petstore{suffix}"
        write_document(doc, out, fmt)
        assert read_document(out) == doc
        if fmt == "json":
            assert json.loads(out.read_text())["service"]["name"] == "Swagger Petstore"

    def test_unknown_write_format(self, tmp_path):
        doc = read_document(FIXTURES / "petstore.yaml")
        with pytest.raises(ValueError):
            write_document(doc, tmp_path / "doc.toml", "toml")


class TestStyleDefaults:
    RAW = {
        "service": {"name": "x", "version": "1"},
        "operations": [
            {
                "method": "get",
                "path": "/items/{id}",
                "request": {
                    "path": [{"name": "id"}],
                    "query": [{"name": "q"}, {"name": "tags", "style": "pipeDelimited"}],
                    "headers": [{"name": "X-Trace"}],
                    "cookie": [{"name": "session"}],
                    "body": {
                        "contents": [
                            {"mediaType": "multipart/form-data", "encodings": [{"property": "file"}]}
                        ]
                    },
                },
                "responses": [{"code": "200", "headers": [{"name": "X-Next"}]}],
            }
        ],
    }

    def test_fills_missing_styles(self):
        data = apply_style_defaults(self.RAW)
        request = data["operations"][0]["request"]
        assert request["path"][0]["style"] == "simple"
        assert request["query"][0]["style"] == "form"
        assert request["headers"][0]["style"] == "simple"
        assert request["cookie"][0]["style"] == "form"
        assert request["body"]["contents"][0]["encodings"][0]["style"] == "form"
        assert data["operations"][0]["responses"][0]["headers"][0]["style"] == "simple"

    def test_keeps_explicit_style_and_input(self):
        data = apply_style_defaults(self.RAW)
        assert data["operations"][0]["request"]["query"][1]["style"] == "pipeDelimited"
        assert "style" not in self.RAW["operations"][0]["request"]["query"][0]

    def test_filled_document_loads(self, tmp_path):
        f = tmp_path / "doc.yaml"
        f.write_text(yaml.safe_dump(self.RAW))
        with pytest.raises(InvalidDocumentError):
            read_document(f)
        doc = read_document(f, fill_style_defaults=True)
        assert validate_document(doc) == []
