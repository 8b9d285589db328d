"""
Node Detail Prompt — explains one skill or certificate node of a roadmap.
"""

SYSTEM_PROMPT = """You are a career mentor explaining one step of a career roadmap.
Be concrete and practical. Prefer official and well-known learning resources.
Output valid JSON only."""

USER_PROMPT_TEMPLATE = """## Roadmap
Target job: {job_title}

## Node
{node_title}

Return JSON:
{{
  "overview": "what this skill or certificate is, 2-3 sentences",
  "importance": "why it matters for the target job",
  "applications": "where it is used on the job",
  "resources": [{{"url": "https://...", "title": "resource name", "type": "course | book | docs | video"}}],
  "examInfo": {{"organization": "issuing body, certificates only", "registrationUrl": "https://..."}}
}}
Omit "examInfo" when the node is not a certificate."""
