"""
HTTP-level tests: response envelopes, error mapping and header key handling.
"""
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from jobtalk.config import settings
from jobtalk.main import app
from jobtalk.models.career_models import CatalogSearchResult, JobRecord
from jobtalk.prompts.roadmap_generator import INVALID_SENTINEL
from jobtalk.services.exceptions import LLMRequestFailed, UpstreamRequestFailed

OPENAI_HEADER = {"X-OpenAI-Key": "sk-header"}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", None)
    monkeypatch.setattr(settings, "groq_api_key", None)
    return TestClient(app)


class TestCareerRoutes:
    def test_jobs_without_filters_is_bad_request(self, client):
        resp = client.get("/api/career/jobs")
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert "required" in body["message"]

    def test_jobs_envelope(self, client):
        result = CatalogSearchResult(
            total_count=3,
            retrieved_count=3,
            unique_count=2,
            jobs=[JobRecord(name="간호사", code=375), JobRecord(name="조산사", code=376)],
        )
        mock = AsyncMock(return_value=result)
        with patch("jobtalk.api.career_routes.search_jobs", mock):
            resp = client.get("/api/career/jobs", params={"keyword": "간호", "themeCode": "7"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert (body["totalCount"], body["retrievedCount"], body["uniqueCount"]) == (3, 3, 2)
        assert body["data"]["jobs"][0] == {"name": "간호사", "code": 375}
        query = mock.await_args.args[0]
        assert query.keyword == "간호"
        assert query.theme_code == "7"

    def test_upstream_failure_keeps_status(self, client):
        error = UpstreamRequestFailed("Failed to load themes", status_code=401, detail="invalid apiKey")
        with patch("jobtalk.api.career_routes.get_themes", AsyncMock(side_effect=error)):
            resp = client.get("/api/career/themes")

        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Failed to load themes", "error": "invalid apiKey"}


class TestRoadmapRoutes:
    def test_roadmap_envelope(self, client, roadmap_json):
        with patch("jobtalk.services.roadmap_service.complete", AsyncMock(return_value=roadmap_json)):
            resp = client.post(
                "/api/chat/career/roadmap",
                json={"jobTitle": "백엔드 개발자", "interests": "클라우드"},
                headers=OPENAI_HEADER,
            )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["jobTitle"] == "백엔드 개발자"
        assert len(data["roadmap"]) == 50
        root = data["roadmap"][0]
        assert root["parent_id"] is None
        assert root["isOptional"] is False
        assert root["category"] == "job"

        fetched = client.get(f"/api/chat/career/roadmap/{data['roadmapId']}")
        assert fetched.status_code == 200
        assert fetched.json()["data"]["roadmap"] == data["roadmap"]

    def test_roadmap_failure_reports_last_reply(self, client):
        mock = AsyncMock(return_value=INVALID_SENTINEL)
        with patch("jobtalk.services.roadmap_service.complete", mock):
            resp = client.post(
                "/api/chat/career/roadmap",
                json={"job_title": "우주비행사"},
                headers=OPENAI_HEADER,
            )

        assert mock.await_count == 3
        assert mock.await_args.kwargs["api_key"] == "sk-header"
        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == INVALID_SENTINEL

    def test_blank_job_title_is_bad_request(self, client):
        mock = AsyncMock()
        with patch("jobtalk.services.roadmap_service.complete", mock):
            resp = client.post("/api/chat/career/roadmap", json={"jobTitle": "  "}, headers=OPENAI_HEADER)

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert "job_title cannot be empty" in body["message"]
        assert isinstance(body["error"], list)
        mock.assert_not_awaited()

    def test_unknown_workspace_is_not_found(self, client):
        mock = AsyncMock()
        with patch("jobtalk.services.roadmap_service.complete", mock):
            resp = client.post(
                "/api/chat/career/roadmap",
                json={"jobTitle": "교사", "workspaceUuid": "missing"},
                headers=OPENAI_HEADER,
            )

        assert resp.status_code == 404
        assert resp.json()["success"] is False
        mock.assert_not_awaited()

    def test_missing_key_is_bad_request(self, client):
        resp = client.post("/api/chat/career/roadmap", json={"job_title": "교사"})
        assert resp.status_code == 400
        assert "openai" in resp.json()["message"]

    def test_unknown_roadmap_is_not_found(self, client):
        resp = client.get("/api/chat/career/roadmap/missing")
        assert resp.status_code == 404
        assert resp.json()["success"] is False

    def test_node_detail_envelope(self, client):
        reply = '```json\n{"overview": "SQL 자격", "examInfo": {"organization": "K-DATA"}}\n```'
        with patch("jobtalk.services.roadmap_service.complete", AsyncMock(return_value=reply)):
            resp = client.post(
                "/api/chat/roadmap/node/detail",
                json={"workspace_uuid": "rm-9", "node_id": "12", "title": "SQLD"},
                headers=OPENAI_HEADER,
            )

        assert resp.status_code == 200
        detail = resp.json()["data"]["nodeDetail"]
        assert detail["overview"] == "SQL 자격"
        assert detail["examInfo"]["organization"] == "K-DATA"


class TestChatRoutes:
    def test_mentor_answer(self, client):
        mock = AsyncMock(return_value="좋은 질문입니다.")
        with patch("jobtalk.services.mentor_service.complete", mock):
            resp = client.post(
                "/api/chat/career/mentor",
                json={"message": "개발자 연봉은?", "history": [{"role": "user", "content": "안녕"}]},
                headers=OPENAI_HEADER,
            )

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "answer": "좋은 질문입니다."}

    def test_summary_fallback(self, client):
        mock = AsyncMock(side_effect=LLMRequestFailed("LLM request failed"))
        with patch("jobtalk.services.mentor_service.complete", mock):
            resp = client.post(
                "/api/chat/career/summary",
                json={"conversation": [{"role": "user", "content": "간호사 희망"}]},
                headers=OPENAI_HEADER,
            )

        assert resp.status_code == 200
        assert resp.json()["summary"] == "Conversation summary unavailable"


class TestQualificationRoutes:
    def test_search(self, client):
        resp = client.get("/api/qualification/search", params={"keyword": "정보처리"})
        assert resp.status_code == 200
        body = resp.json()
        names = [q["name"] for q in body["data"]["qualifications"]]
        assert body["totalCount"] == len(names) == 3
        assert names == sorted(names)

    def test_search_short_keyword(self, client):
        resp = client.get("/api/qualification/search", params={"keyword": "정"})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_all(self, client):
        body = client.get("/api/qualification/all").json()
        assert body["totalCount"] == len(body["data"]["qualifications"])
        assert body["data"]["qualifications"] == sorted(body["data"]["qualifications"])

    def test_sync_without_key_reports_temporary(self, client, monkeypatch):
        monkeypatch.setattr(settings, "qualification_api_key", None)
        body = client.post("/api/qualification/sync").json()
        assert body["isTemporary"] is True
        assert body["success"] is True


class TestWorkspaceRoutes:
    def test_create_and_list(self, client):
        created = client.post("/api/workspace")
        assert created.status_code == 201
        workspace = created.json()["data"]
        assert workspace["status"] == "waiting"
        assert "chats" not in workspace

        body = client.get("/api/workspace/all").json()
        assert body["totalCount"] == 1
        assert body["data"]["workspaces"][0]["uuid"] == workspace["uuid"]

    def test_unknown_workspace_is_not_found(self, client):
        resp = client.get("/api/workspace/missing")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Workspace 'missing' not found"}

    def test_chats_in_message_order(self, client):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        first = client.post(f"/api/workspace/{uuid}/chats", json={"role": "user", "content": "간호사가 궁금해요"})
        client.post(
            f"/api/workspace/{uuid}/chats",
            json={"role": "JobtalkAI", "content": "좋아요", "previousResponseId": "resp_1"},
        )

        assert first.status_code == 201
        body = client.get(f"/api/workspace/{uuid}/chats").json()
        assert body["totalCount"] == 2
        assert [c["messageIndex"] for c in body["data"]["chats"]] == [1, 2]
        assert body["data"]["chats"][1]["previousResponseId"] == "resp_1"
        assert client.get(f"/api/workspace/{uuid}").json()["data"]["status"] == "chatting"

    def test_blank_chat_is_bad_request(self, client):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        resp = client.post(f"/api/workspace/{uuid}/chats", json={"role": "user", "content": " "})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_topic_and_interest_rename(self, client):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]

        chat = client.put(f"/api/workspace/{uuid}/chat", json={"chatTopic": "개발자"}).json()["data"]
        assert chat["name"] == "개발자에 대해 상담 중 💬"
        assert chat["chatTopic"] == "개발자"

        interest = client.put(f"/api/workspace/{uuid}/interest", json={"interestCategory": "IT"}).json()["data"]
        assert interest["name"] == "IT 분야 탐색하기 💼"
        assert interest["interestCategory"] == "IT"

    def test_delete_waiting_workspace_is_bad_request(self, client):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        resp = client.delete(f"/api/workspace/{uuid}")
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_delete_returns_replacement(self, client):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        client.post(f"/api/workspace/{uuid}/chats", json={"role": "user", "content": "안녕하세요"})

        resp = client.delete(f"/api/workspace/{uuid}")

        assert resp.status_code == 200
        replacement = resp.json()["data"]
        assert replacement["uuid"] != uuid
        assert replacement["status"] == "waiting"
        assert client.get(f"/api/workspace/{uuid}").status_code == 404

    def test_generated_roadmap_lands_in_workspace(self, client, roadmap_json):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        assert client.get(f"/api/workspace/{uuid}/roadmap").status_code == 404

        with patch("jobtalk.services.roadmap_service.complete", AsyncMock(return_value=roadmap_json)):
            generated = client.post(
                "/api/chat/career/roadmap",
                json={"jobTitle": "간호사", "workspaceUuid": uuid},
                headers=OPENAI_HEADER,
            ).json()["data"]

        saved = client.get(f"/api/workspace/{uuid}/roadmap").json()["data"]
        assert saved["roadmapId"] == generated["roadmapId"]
        assert saved["jobTitle"] == "간호사"
        assert len(saved["roadmapData"]) == 50

        workspace = client.get(f"/api/workspace/{uuid}").json()["data"]
        assert workspace["status"] == "roadmap_generated"
        assert workspace["name"] == "간호사 로드맵 💼"
        assert workspace["roadmap"]["roadmapId"] == generated["roadmapId"]

        by_workspace = client.get(f"/api/chat/career/roadmap/{uuid}").json()["data"]
        assert by_workspace["roadmapId"] == generated["roadmapId"]

    def test_node_detail_by_workspace_uses_its_job(self, client, roadmap_nodes):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        saved = client.post(
            f"/api/workspace/{uuid}/roadmap",
            json={"jobTitle": "데이터 분석가", "roadmapData": roadmap_nodes},
        )
        assert saved.status_code == 200

        mock = AsyncMock(return_value='{"overview": "SQL 자격"}')
        with patch("jobtalk.services.roadmap_service.complete", mock):
            resp = client.post(
                "/api/chat/roadmap/node/detail",
                json={"workspace_uuid": uuid, "node_id": "12", "title": "SQLD"},
                headers=OPENAI_HEADER,
            )

        assert resp.status_code == 200
        user_prompt = mock.await_args.kwargs["messages"][1]["content"]
        assert "데이터 분석가" in user_prompt

    def test_invalid_client_roadmap_is_bad_request(self, client, roadmap_nodes):
        uuid = client.post("/api/workspace").json()["data"]["uuid"]
        resp = client.post(
            f"/api/workspace/{uuid}/roadmap",
            json={"jobTitle": "간호사", "roadmapData": roadmap_nodes[:3]},
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"] == "Invalid roadmap data"
        assert "nodes" in body["error"]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
