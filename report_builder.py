from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from masks import MASKS, MASKS_BY_ID, WEIGHT_MATRIX, Mask, RadarPoint, WeightEntry, get_radar_profile
from report_parser import ParsedReport, parse_report
from scoring import ScoreReport, headline_scores, score_answers

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "解析报告内容失败，请检查数据格式。"
TEMPLATE_FOUND_DESCRIPTION = "报告生成成功。请阅读下方的详细解读。"
MISSING_TEMPLATE_DESCRIPTION = "你的主导面具是 {label}。"
MISSING_TEMPLATE_REPORT = "此处将显示 {name} 的完整深度解析报告..."
PREVIEW_DESCRIPTION = "【开发者预览模式】不做评分计算，直接展示对应的详情报告。"
PREVIEW_MISSING_REPORT = "(此面具暂无完整报告: {name})"
PREVIEW_HEADLINE_SCORES: Dict[str, int] = {"stress": 85, "social": 60, "resilience": 92}


@dataclass(frozen=True)
class ReportPayload:
    mask: Mask
    type_label: str
    description: str
    headline_scores: Dict[str, int]
    radar_data: List[RadarPoint]
    summary_quote: str
    full_report: str
    parsed: Optional[ParsedReport]
    parse_error: Optional[str] = None
    score_report: Optional[ScoreReport] = None

    @property
    def archetype(self) -> str:
        return self.mask.archetype

    @property
    def preview(self) -> bool:
        return self.score_report is None


def load_report_templates(path: Path) -> Dict[str, str]:
    """Read the narrative store; entries may be a string or a list of lines."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Report template store %s not found", path)
        return {}
    except json.JSONDecodeError as exc:
        logger.warning("Report template store %s is not valid JSON: %s", path, exc)
        return {}

    if not isinstance(raw, dict):
        logger.warning("Report template store %s must map mask ids to text", path)
        return {}

    templates: Dict[str, str] = {}
    for mask_id, entry in raw.items():
        if isinstance(entry, list):
            entry = "\n".join(str(line) for line in entry)
        if isinstance(entry, str):
            templates[str(mask_id)] = entry
    return templates


def safe_parse_report(text: str) -> Tuple[Optional[ParsedReport], Optional[str]]:
    try:
        return parse_report(text), None
    except Exception:
        logger.exception("Parsing failed; report text starts with %r", text[:500])
        return None, PARSE_ERROR_MESSAGE


def build_report(
    answers: Mapping[object, int],
    templates: Mapping[str, str],
    weights: Mapping[int, Sequence[WeightEntry]] = WEIGHT_MATRIX,
    categories: Sequence[Mask] = MASKS,
) -> ReportPayload:
    score_report = score_answers(answers, weights, categories)
    mask = score_report.dominant.category

    template = templates.get(mask.id)
    radar_data, summary_quote = get_radar_profile(mask.id)
    if template:
        description = TEMPLATE_FOUND_DESCRIPTION
        full_report = template
    else:
        description = MISSING_TEMPLATE_DESCRIPTION.format(label=mask.label)
        full_report = MISSING_TEMPLATE_REPORT.format(name=mask.name)

    parsed, parse_error = safe_parse_report(full_report)
    return ReportPayload(
        mask=mask,
        type_label=mask.label,
        description=description,
        headline_scores=headline_scores(score_report),
        radar_data=radar_data,
        summary_quote=summary_quote,
        full_report=full_report,
        parsed=parsed,
        parse_error=parse_error,
        score_report=score_report,
    )


def build_preview_report(mask_id: str, templates: Mapping[str, str]) -> ReportPayload:
    mask = MASKS_BY_ID[mask_id]
    template = templates.get(mask_id)
    radar_data, summary_quote = get_radar_profile(mask_id)
    full_report = template or PREVIEW_MISSING_REPORT.format(name=mask.name)

    parsed, parse_error = safe_parse_report(full_report)
    return ReportPayload(
        mask=mask,
        type_label=mask.name,
        description=PREVIEW_DESCRIPTION,
        headline_scores=dict(PREVIEW_HEADLINE_SCORES),
        radar_data=radar_data,
        summary_quote=summary_quote,
        full_report=full_report,
        parsed=parsed,
        parse_error=parse_error,
    )
