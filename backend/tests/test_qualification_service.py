"""
Tests for the Q-Net qualification store: XML parsing, sync fallbacks, search.
"""
import httpx
import pytest

from jobtalk.config import settings
from jobtalk.models.qualification_models import Qualification
from jobtalk.services import qualification_service
from jobtalk.services.exceptions import InvalidQuery
from jobtalk.services.qualification_service import (
    SEARCH_LIMIT,
    TEMP_QUALIFICATIONS,
    is_temporary,
    list_qualification_names,
    parse_qualification_xml,
    search_qualifications,
    sync_qualifications,
)


def qnet_xml(items, result_code="00", result_msg="NORMAL SERVICE."):
    body = "".join(
        f"<item><jmcd>{code}</jmcd><jmfldnm> {name} </jmfldnm><seriesnm>기사</seriesnm></item>"
        for code, name in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<response><header><resultCode>{result_code}</resultCode>"
        f"<resultMsg>{result_msg}</resultMsg></header>"
        f"<body><items>{body}</items></body></response>"
    )


@pytest.fixture
def qnet_key(monkeypatch):
    monkeypatch.setattr(settings, "qualification_api_key", "decoded-service-key")


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParseQualificationXml:
    def test_items_are_trimmed(self):
        result = parse_qualification_xml(qnet_xml([("1320", "정보처리기사")]))
        assert result == [Qualification(code="1320", name="정보처리기사")]

    def test_items_missing_fields_are_skipped(self):
        xml = qnet_xml([("1320", "정보처리기사")]).replace(
            "</items>", "<item><jmcd>9</jmcd></item></items>"
        )
        assert len(parse_qualification_xml(xml)) == 1

    def test_error_result_code_raises(self):
        with pytest.raises(ValueError, match="resultCode=30"):
            parse_qualification_xml(qnet_xml([], result_code="30", result_msg="SERVICE KEY IS NOT REGISTERED"))


class TestSyncQualifications:
    @pytest.mark.asyncio
    async def test_missing_key_loads_built_in_list(self, monkeypatch):
        monkeypatch.setattr(settings, "qualification_api_key", None)
        result = await sync_qualifications()

        assert result.is_temporary is True
        assert result.total_count == len(TEMP_QUALIFICATIONS)
        assert is_temporary()

    @pytest.mark.asyncio
    async def test_both_types_are_merged_and_deduplicated(self, qnet_key):
        seen = []

        def handler(request):
            qual_type = request.url.params["qualgbcd"]
            seen.append((qual_type, request.url.params["seriescd"], request.url.params["serviceKey"]))
            if qual_type == "T":
                return httpx.Response(200, text=qnet_xml([("1320", "정보처리기사"), ("2290", "정보보안기사")]))
            return httpx.Response(200, text=qnet_xml([("2290", "정보보안기사"), ("7910", "공인노무사")]))

        async with _client(handler) as client:
            result = await sync_qualifications(client=client)

        assert seen == [("T", "1", "decoded-service-key"), ("S", "1", "decoded-service-key")]
        assert result.is_temporary is False
        assert result.total_count == 3
        assert not is_temporary()
        assert list_qualification_names() == sorted(["정보처리기사", "정보보안기사", "공인노무사"])

    @pytest.mark.asyncio
    async def test_html_page_falls_back(self, qnet_key):
        def handler(request):
            return httpx.Response(200, text="<html><head><title>Unregistered key</title></head></html>")

        async with _client(handler) as client:
            result = await sync_qualifications(client=client)

        assert result.is_temporary is True
        assert result.total_count == len(TEMP_QUALIFICATIONS)

    @pytest.mark.asyncio
    async def test_http_error_falls_back(self, qnet_key):
        async with _client(lambda request: httpx.Response(500, text="down")) as client:
            result = await sync_qualifications(client=client)

        assert result.is_temporary is True

    @pytest.mark.asyncio
    async def test_one_type_with_error_code_is_skipped(self, qnet_key):
        def handler(request):
            if request.url.params["qualgbcd"] == "T":
                return httpx.Response(200, text=qnet_xml([], result_code="99", result_msg="UNKNOWN"))
            return httpx.Response(200, text=qnet_xml([("7910", "공인노무사")]))

        async with _client(handler) as client:
            result = await sync_qualifications(client=client)

        assert result.is_temporary is False
        assert result.total_count == 1

    @pytest.mark.asyncio
    async def test_empty_lists_fall_back(self, qnet_key):
        async with _client(lambda request: httpx.Response(200, text=qnet_xml([]))) as client:
            result = await sync_qualifications(client=client)

        assert result.is_temporary is True

    @pytest.mark.asyncio
    async def test_broken_xml_falls_back(self, qnet_key):
        async with _client(lambda request: httpx.Response(200, text="<response><header>")) as client:
            result = await sync_qualifications(client=client)

        assert result.is_temporary is True


class TestSearchQualifications:
    def test_short_keyword_rejected(self):
        with pytest.raises(InvalidQuery):
            search_qualifications("정")

    def test_blank_keyword_rejected(self):
        with pytest.raises(InvalidQuery):
            search_qualifications("   ")

    def test_substring_match_sorted(self):
        names = [q.name for q in search_qualifications("정보")]
        assert names == sorted(names)
        assert "정보처리기사" in names
        assert "정보보안기사" in names
        assert all("정보" in n for n in names)

    def test_case_insensitive(self):
        names = [q.name for q in search_qualifications("sql")]
        assert names == ["SQLD", "SQLP"]

    def test_result_limit(self, monkeypatch):
        many = [Qualification(code=str(i), name=f"자격증 {i:03d}") for i in range(40)]
        monkeypatch.setattr(qualification_service, "_store", many)

        result = search_qualifications("자격증")
        assert len(result) == SEARCH_LIMIT
        assert result[0].name == "자격증 000"
