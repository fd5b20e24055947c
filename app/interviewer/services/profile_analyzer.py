from __future__ import annotations
from typing import Any, Optional

import structlog
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..errors import OracleMalformedOutput, OracleUnavailable
from ..interfaces import LLMClient, PromptFactory
from ..models import InterviewBlueprint, InterviewContext, LLMSettings
from ..utils.llm_json import find_object

logger = structlog.get_logger(__name__)

_BLUEPRINT_FIELDS = (
    "key_skills",
    "skill_gaps",
    "notable_projects",
    "focus_areas",
    "suggested_question_themes",
)
_MAX_ITEMS = 12


def extract_pdf_text(file_like) -> str:
    """Plain text of a resume PDF, or "" when nothing is extractable."""
    try:
        reader = PdfReader(file_like)
    except (PdfReadError, OSError, ValueError) as e:
        logger.info("pdf_unreadable", error=str(e))
        return ""
    parts = []
    for page in reader.pages:
        try:
            txt = page.extract_text() or ""
        except (PdfReadError, KeyError, ValueError):
            txt = ""
        if txt.strip():
            parts.append(txt)
    return "\n\n".join(parts).strip()


def fallback_blueprint() -> InterviewBlueprint:
    return InterviewBlueprint(
        key_skills=["Technical skills", "Problem-solving"],
        skill_gaps=["Experience gaps"],
        notable_projects=["Previous work"],
        focus_areas=["Technical depth", "Communication"],
        suggested_question_themes=["Projects", "Challenges"],
    )


def parse_blueprint(obj: Any) -> InterviewBlueprint:
    """
    All five fields must be lists. String items are trimmed and capped;
    non-string items are dropped.
    """
    if not isinstance(obj, dict):
        raise OracleMalformedOutput("blueprint reply is not a JSON object")
    values = {}
    for name in _BLUEPRINT_FIELDS:
        raw = obj.get(name)
        if not isinstance(raw, list):
            raise OracleMalformedOutput(f"blueprint field {name!r} is not a list")
        values[name] = [
            str(x).strip() for x in raw if isinstance(x, str) and x.strip()
        ][:_MAX_ITEMS]
    return InterviewBlueprint(**values)


def analyze_profile_llm(
    *,
    llm: LLMClient,
    prompts: PromptFactory,
    settings: LLMSettings,
    context: InterviewContext,
) -> tuple[InterviewBlueprint, bool, dict]:
    """
    LLM-driven profile analysis: compare resume against the job description.
    Returns: (blueprint, success, meta). On any failure the fallback blueprint
    is returned with success=False.
    """
    system = prompts.build_profile_system()
    user = prompts.profile_instruction(context=context)

    profile_settings = LLMSettings(
        model=settings.model, temperature=0.3, top_p=0.9, max_tokens=900
    )
    meta: dict = {"tokens_in": 0, "tokens_out": 0}
    try:
        out, meta = llm.chat(
            prompts.assemble(system=system, user_text=user), profile_settings
        )
        blueprint = parse_blueprint(find_object(out))
    except (OracleUnavailable, OracleMalformedOutput) as e:
        logger.warning("profile_analysis_fallback", error=str(e))
        return fallback_blueprint(), False, meta or {}
    except Exception as e:
        logger.warning("profile_analysis_fallback", error=repr(e), exc_info=True)
        return fallback_blueprint(), False, meta or {}

    logger.info(
        "profile_analyzed",
        key_skills=len(blueprint.key_skills),
        focus_areas=len(blueprint.focus_areas),
    )
    return blueprint, True, meta or {}
