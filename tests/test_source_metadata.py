import pytest

from integration_operator.framework.metadata import RuntimeCatalog, extract_all
from integration_operator.framework.models import SourceSpec


def _extract(*contents: str):
    sources = [SourceSpec(name=f"s{i}.groovy", content=c) for i, c in enumerate(contents)]
    return extract_all(RuntimeCatalog.default(), sources)


def test_http_consumer_requires_service():
    meta = _extract("from('undertow:http://0.0.0.0:8080/hello').to('log:info')")

    assert meta.requires_http_service is True
    assert meta.from_schemes == ("undertow",)
    assert meta.to_schemes == ("log",)
    assert meta.dependencies == ("camel:log", "camel:undertow")


def test_http_producer_does_not_require_service():
    meta = _extract("from('timer:tick').to('http://example.com')")

    assert meta.requires_http_service is False


def test_rest_dsl_requires_service():
    meta = _extract("rest('/api').get('/hello').to('direct:hello')")

    assert meta.requires_http_service is True
    assert "camel:rest" in meta.dependencies


def test_yaml_and_xml_sources_are_scanned():
    yaml_meta = _extract("- from: 'platform-http:/hello'\n  steps:\n    - to: 'log:info'\n")
    xml_meta = _extract('<routes><route><from uri="jetty:http://0.0.0.0/x"/><to uri="log:x"/></route></routes>')

    assert yaml_meta.requires_http_service is True
    assert xml_meta.requires_http_service is True


def test_any_source_can_require_service():
    meta = _extract("from('timer:tick').to('log:a')", "from('servlet:/x').to('log:b')")

    assert meta.requires_http_service is True


def test_custom_catalog_capabilities():
    catalog = RuntimeCatalog.from_dict({"grpc": {"artifact": "camel-grpc", "http": True}})

    meta = extract_all(catalog, [SourceSpec(name="g.groovy", content="from('grpc:svc').to('log:x')")])

    assert meta.requires_http_service is True
    assert meta.dependencies == ("camel:grpc",)


def test_yaml_nested_from_uri_is_read_as_consumer():
    meta = _extract('- from:\n    uri: "platform-http:/hello"\n    steps:\n      - to: "log:info"\n')

    assert meta.from_schemes == ("platform-http",)
    assert meta.to_schemes == ("log",)
    assert meta.requires_http_service is True


def test_yaml_nested_to_uri_is_read_as_producer():
    meta = _extract('- from:\n    uri: "timer:tick"\n    steps:\n      - to:\n          uri: "undertow:http://example.com"\n')

    assert meta.from_schemes == ("timer",)
    assert meta.to_schemes == ("undertow",)
    assert meta.requires_http_service is False


def test_xml_uri_need_not_be_first_attribute():
    meta = _extract('<routes><route><from id="in" uri="servlet:/x"/><to id="out" uri="log:x"/></route></routes>')

    assert meta.from_schemes == ("servlet",)
    assert meta.to_schemes == ("log",)
    assert meta.requires_http_service is True


def test_catalog_http_flag_is_parsed_strictly():
    catalog = RuntimeCatalog.from_dict({"grpc": {"http": "false"}, "ws": {"http": "yes"}})

    assert catalog.get("grpc").http is False
    assert catalog.get("ws").http is True
    with pytest.raises(ValueError, match=r"catalog\.grpc\.http"):
        RuntimeCatalog.from_dict({"grpc": {"http": "maybe"}})
