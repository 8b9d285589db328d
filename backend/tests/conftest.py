"""
Shared fixtures: catalog page builders, roadmap trees, cache isolation.
"""
import json
import math

import pytest

from jobtalk.services import qualification_service, roadmap_service, workspace_service


def build_catalog_pages(count, page_size):
    """CareerNet jobs.json pages for ``count`` jobs with codes 1..count."""
    pages = {}
    total_pages = math.ceil(count / page_size) if count else 1
    for page in range(1, total_pages + 1):
        first = (page - 1) * page_size + 1
        last = min(page * page_size, count)
        pages[page] = {
            "count": count,
            "pageSize": page_size,
            "pageIndex": page,
            "jobs": [{"job_nm": f"Job {code}", "job_cd": code} for code in range(first, last + 1)],
        }
    return pages


def build_roadmap_nodes(total=50, stages=5):
    """A valid roadmap tree: job root, ``stages`` stages, skills under the stages."""
    nodes = [{
        "id": 1, "title": "Backend Developer", "parent_id": None,
        "isOptional": False, "category": "job", "duration": "12 months",
    }]
    for stage_id in range(2, stages + 2):
        nodes.append({
            "id": stage_id, "title": f"Stage {stage_id}", "parent_id": 1,
            "isOptional": False, "category": "stage", "duration": "2 months",
        })
    for node_id in range(stages + 2, total + 1):
        nodes.append({
            "id": node_id, "title": f"Skill {node_id}",
            "parent_id": 2 + (node_id % stages),
            "isOptional": node_id % 4 == 0,
            "category": "certificate" if node_id % 7 == 0 else "skill",
            "duration": "3 weeks",
        })
    return nodes


@pytest.fixture
def roadmap_nodes():
    return build_roadmap_nodes()


@pytest.fixture
def roadmap_json(roadmap_nodes):
    return json.dumps(roadmap_nodes)


@pytest.fixture(autouse=True)
def isolate_caches(monkeypatch):
    """Each test starts with empty roadmap and workspace stores and the built-in qualification list."""
    roadmap_service._roadmap_cache.clear()
    roadmap_service._node_detail_cache.clear()
    monkeypatch.setattr(workspace_service, "_workspaces", {})
    monkeypatch.setattr(qualification_service, "_store", list(qualification_service.TEMP_QUALIFICATIONS))
    monkeypatch.setattr(qualification_service, "_store_is_temporary", True)
    yield
    roadmap_service._roadmap_cache.clear()
    roadmap_service._node_detail_cache.clear()
