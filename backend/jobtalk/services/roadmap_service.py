"""
Roadmap Service — generate and validate career roadmap trees via LLM.

Pipeline per attempt:
  1. Send the fixed roadmap prompt (fresh conversation every attempt)
  2. Strip an optional markdown fence from the reply
  3. Classify the reply: declined (sentinel), malformed, or accepted
  4. Return on the first accepted tree

Declined and malformed replies consume the same bounded attempt budget.
Node detail enrichment is a single call with a free-text fallback, no retry.
A roadmap can be looked up by its own id or by the workspace it belongs to.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

from pydantic import TypeAdapter, ValidationError

from jobtalk.config import settings
from jobtalk.models.roadmap_models import (
    NodeCategory,
    NodeDetail,
    RoadmapNode,
    RoadmapRequest,
    StoredRoadmap,
)
from jobtalk.prompts import node_detail, roadmap_generator
from jobtalk.services import workspace_service
from jobtalk.services.exceptions import InvalidQuery, RoadmapGenerationFailed
from jobtalk.services.llm_service import complete
from jobtalk.utils.text_cleanup import strip_code_fences

logger = logging.getLogger(__name__)

_NODE_LIST = TypeAdapter(list[RoadmapNode])

# In-memory caches, oldest entries evicted beyond settings.roadmap_cache_size
_roadmap_cache: dict[str, StoredRoadmap] = {}
_node_detail_cache: dict[tuple[str, str], NodeDetail] = {}


def _remember(cache: dict, key: Any, value: Any) -> None:
    cache.pop(key, None)
    cache[key] = value
    while len(cache) > settings.roadmap_cache_size:
        cache.pop(next(iter(cache)))


# ── Attempt Outcomes ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Declined:
    """The model answered with the sentinel instead of a roadmap."""

    raw_text: str


@dataclass(frozen=True)
class Malformed:
    """The reply was not a valid roadmap tree."""

    raw_text: str
    reason: str


@dataclass(frozen=True)
class Accepted:
    raw_text: str
    nodes: list[RoadmapNode]


AttemptOutcome = Union[Declined, Malformed, Accepted]


# ── Public API ───────────────────────────────────────────────────────────────


async def generate_roadmap(
    request: RoadmapRequest,
    *,
    provider: str,
    model_key: str,
    api_key: str,
    max_attempts: int | None = None,
) -> StoredRoadmap:
    """
    Ask the LLM for a roadmap until one validates or the budget runs out.

    Args:
        request: Target job plus optional interests/certificates context and
            the workspace the accepted roadmap is attached to
        provider: LLM provider key
        model_key: LLM model key
        api_key: API key for the provider
        max_attempts: Attempt budget (settings.roadmap_max_attempts by default)

    Raises:
        ValueError: max_attempts is below 1
        RoadmapGenerationFailed: every attempt was declined or malformed;
            carries the last raw reply.
    """
    if max_attempts is None:
        max_attempts = settings.roadmap_max_attempts
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")

    min_nodes = settings.roadmap_min_nodes
    max_nodes = settings.roadmap_max_nodes
    messages = build_roadmap_messages(request, min_nodes=min_nodes, max_nodes=max_nodes)

    last_raw: str | None = None
    for attempt in range(1, max_attempts + 1):
        logger.info(f"Roadmap attempt {attempt}/{max_attempts} for job_title={request.job_title!r}")
        raw = await complete(
            provider=provider,
            model_key=model_key,
            api_key=api_key,
            messages=messages,
            prompt_name="roadmap_generator",
        )
        last_raw = raw

        outcome = classify_attempt(raw, min_nodes=min_nodes, max_nodes=max_nodes)
        if isinstance(outcome, Accepted):
            stored = store_roadmap(request.job_title, outcome.nodes, workspace_uuid=request.workspace_uuid)
            logger.info(f"Roadmap accepted on attempt {attempt}: id={stored.id} nodes={len(stored.nodes)}")
            return stored

        if isinstance(outcome, Declined):
            logger.warning(f"Roadmap attempt {attempt} declined by model")
        else:
            logger.warning(f"Roadmap attempt {attempt} malformed: {outcome.reason}")

    raise RoadmapGenerationFailed(
        f"Roadmap generation failed after {max_attempts} attempts",
        last_raw_text=last_raw,
        attempts=max_attempts,
    )


def store_roadmap(
    job_title: str,
    nodes: list[RoadmapNode],
    *,
    workspace_uuid: str | None = None,
) -> StoredRoadmap:
    """Cache a roadmap under a new id and attach it to ``workspace_uuid`` if given."""
    stored = StoredRoadmap(
        id=str(uuid.uuid4()),
        job_title=job_title,
        nodes=nodes,
        created_at=datetime.now(timezone.utc),
    )
    _remember(_roadmap_cache, stored.id, stored)
    if workspace_uuid:
        workspace_service.attach_roadmap(workspace_uuid, stored)
    return stored


def save_client_roadmap(workspace_uuid: str, job_title: str, nodes: list[RoadmapNode]) -> StoredRoadmap:
    """
    Store a roadmap sent by the client into a workspace.

    Raises:
        InvalidQuery: the nodes do not form a valid roadmap tree
    """
    try:
        validate_roadmap_tree(
            nodes,
            min_nodes=settings.roadmap_min_nodes,
            max_nodes=settings.roadmap_max_nodes,
        )
    except ValueError as e:
        raise InvalidQuery("Invalid roadmap data", detail=str(e)) from e
    return store_roadmap(job_title, nodes, workspace_uuid=workspace_uuid)


def get_cached_roadmap(roadmap_id: str) -> StoredRoadmap | None:
    """Retrieve a roadmap by its own id or by the uuid of its workspace."""
    return _roadmap_cache.get(roadmap_id) or workspace_service.get_workspace_roadmap(roadmap_id)


async def generate_node_detail(
    *,
    roadmap_id: str,
    node_id: str,
    node_title: str,
    job_title: str | None,
    provider: str,
    model_key: str,
    api_key: str,
) -> NodeDetail:
    """
    Explain one roadmap node. Served from cache when already generated.

    ``roadmap_id`` may be a roadmap id or a workspace uuid. A reply that does
    not parse is wrapped as ``NodeDetail(overview=raw)`` and not cached, so a
    later request asks the model again.
    """
    stored = get_cached_roadmap(roadmap_id)
    cache_key = (stored.id if stored else roadmap_id, node_id)
    cached = _node_detail_cache.get(cache_key)
    if cached is not None:
        return cached

    if not job_title:
        job_title = stored.job_title if stored else node_title

    raw = await complete(
        provider=provider,
        model_key=model_key,
        api_key=api_key,
        messages=[
            {"role": "system", "content": node_detail.SYSTEM_PROMPT},
            {"role": "user", "content": node_detail.USER_PROMPT_TEMPLATE.format(
                job_title=job_title,
                node_title=node_title,
            )},
        ],
        prompt_name="node_detail",
        json_mode=True,
    )

    try:
        detail = NodeDetail.model_validate_json(strip_code_fences(raw))
    except ValidationError as e:
        logger.warning(f"Node detail for {cache_key} did not parse, using raw text: {e.error_count()} errors")
        return NodeDetail(overview=raw.strip())

    _remember(_node_detail_cache, cache_key, detail)
    return detail


# ── Prompt & Validation ──────────────────────────────────────────────────────


def build_roadmap_messages(
    request: RoadmapRequest,
    *,
    min_nodes: int,
    max_nodes: int,
) -> list[dict[str, str]]:
    """Deterministic prompt for one roadmap attempt."""
    return [
        {"role": "system", "content": roadmap_generator.SYSTEM_PROMPT},
        {"role": "user", "content": roadmap_generator.USER_PROMPT_TEMPLATE.format(
            job_title=request.job_title,
            interests=(request.interests or "").strip() or "Not specified",
            certificates=(request.certificates or "").strip() or "None",
            min_nodes=min_nodes,
            max_nodes=max_nodes,
            sentinel=roadmap_generator.INVALID_SENTINEL,
        )},
    ]


def classify_attempt(raw: str, *, min_nodes: int, max_nodes: int) -> AttemptOutcome:
    """Turn one raw LLM reply into a tagged attempt outcome."""
    cleaned = strip_code_fences(raw or "")

    if cleaned == roadmap_generator.INVALID_SENTINEL:
        return Declined(raw_text=raw)

    try:
        json.loads(cleaned)
    except json.JSONDecodeError as e:
        return Malformed(raw_text=raw, reason=f"invalid JSON: {e.msg}")

    try:
        nodes = _NODE_LIST.validate_json(cleaned)
    except ValidationError as e:
        return Malformed(raw_text=raw, reason=f"schema mismatch: {e.error_count()} errors")

    try:
        validate_roadmap_tree(nodes, min_nodes=min_nodes, max_nodes=max_nodes)
    except ValueError as e:
        return Malformed(raw_text=raw, reason=str(e))

    return Accepted(raw_text=raw, nodes=nodes)


def validate_roadmap_tree(nodes: list[RoadmapNode], *, min_nodes: int, max_nodes: int) -> None:
    """
    Enforce the roadmap tree shape.

    Node count within [min_nodes, max_nodes], unique ids, one root that is
    the only job node, every parent reference resolvable, no cycles.
    """
    if not min_nodes <= len(nodes) <= max_nodes:
        raise ValueError(f"Expected {min_nodes}-{max_nodes} nodes, got {len(nodes)}")

    by_id: dict[int, RoadmapNode] = {}
    for node in nodes:
        if node.id in by_id:
            raise ValueError(f"Duplicate node id {node.id}")
        by_id[node.id] = node

    roots = [node for node in nodes if node.parent_id is None]
    if len(roots) != 1:
        raise ValueError(f"Expected exactly one root node, got {len(roots)}")
    if roots[0].category != NodeCategory.JOB:
        raise ValueError(f"Root node {roots[0].id} must have category 'job'")
    extra_jobs = [node.id for node in nodes if node.category == NodeCategory.JOB and node is not roots[0]]
    if extra_jobs:
        raise ValueError(f"Only the root may have category 'job', also found {extra_jobs}")

    for node in nodes:
        if node.parent_id is not None and node.parent_id not in by_id:
            raise ValueError(f"Node {node.id} references missing parent {node.parent_id}")

    # Every chain must reach the root without revisiting a node.
    reaches_root: set[int] = {roots[0].id}
    for node in nodes:
        chain: list[int] = []
        current = node
        while current.id not in reaches_root:
            if current.id in chain:
                raise ValueError(f"Cycle detected through node {current.id}")
            chain.append(current.id)
            current = by_id[current.parent_id]
        reaches_root.update(chain)
