from __future__ import annotations

import logging
import os
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

from flask import Flask, abort, redirect, render_template, request, send_file, url_for
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from masks import ANSWER_OPTIONS, MASKS_BY_ID, QUESTIONS
from report_builder import ReportPayload, build_preview_report, build_report, load_report_templates
from scoring import SCALE_MAX, SCALE_MIN

BASE_DIR = Path(__file__).resolve().parent

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("MASKSPECTRUM_SECRET_KEY", "replace-this-with-a-random-value")
app.config["REPORT_TEMPLATES_PATH"] = Path(
    os.environ.get("MASKSPECTRUM_REPORT_TEMPLATES", BASE_DIR / "data" / "report_templates.json")
)

FONT_DIR = BASE_DIR / "fonts"
PDF_FONT_FAMILY = "NotoSansSC"
PDF_FONT_REGULAR_PATH = FONT_DIR / "NotoSansSC-Regular.ttf"
PDF_FONT_BOLD_PATH = FONT_DIR / "NotoSansSC-Bold.ttf"

REPORT_TEMPLATES: Dict[str, str] = load_report_templates(app.config["REPORT_TEMPLATES_PATH"])

COPY: Dict[str, Dict[str, str]] = {
    "site": {
        "tagline": "情绪面具测试",
        "footer": "© 2025 MaskSpectrum —— 看见你最常戴上的那张情绪面具。",
    },
    "quiz": {
        "page_title": "情绪面具测评",
        "hero_title": "你的主导情绪面具是什么？",
        "hero_description": "20 道题，5 级量表。完成后即可获得你的主导面具、潜在面具与完整的深度解读报告。",
        "submit_button": "生成我的报告",
    },
    "result": {
        "page_title": "你的主导情绪面具",
        "flavor_heading": "核心底色",
        "philosophy_heading": "面具的心声",
        "deep_dive_heading": "深度解析",
        "data_heading": "情绪光谱与心跳频率",
        "insight_heading": "核心洞察",
        "commentary_heading": "数据透视",
        "decision_heading": "决策与生活方式的影响",
        "growth_heading": "成长指南",
        "dimensions_heading": "多维生命解析",
        "career": "事业与财富",
        "relationships": "亲密关系",
        "health": "身体健康",
        "ranking_heading": "十二面具得分",
        "latent_label": "潜在面具",
        "significant_note": "主导面具得分达到显著水平。",
        "not_significant_note": "主导面具得分未达显著水平，你的情绪模式较为均衡。",
        "latent_conflict_note": "主导面具与潜在面具得分非常接近，两者可能在你身上交替出现。",
        "radar_value": "你的得分",
        "radar_average": "人群平均",
        "download_pdf": "下载 PDF",
        "start_over": "重新开始",
    },
    "errors": {
        "missing_questions": "请先回答所有题目（缺少: {missing}）。",
        "incomplete_pdf": "无法导出 PDF，因为答案不完整。",
    },
    "pdf": {
        "title": "MaskSpectrum 情绪面具报告",
        "mask": "主导面具",
        "latent": "潜在面具",
        "scores": "十二面具得分",
        "score_line": "{name}: {score:.2f}",
    },
}


@app.context_processor
def inject_copy():
    return {"copy": COPY}


def collect_answers(values: Mapping[str, str]) -> Tuple[Dict[int, int], List[int]]:
    """Read q1..q20 from form or query values; invalid entries count as missing."""
    answers: Dict[int, int] = {}
    missing: List[int] = []
    for question in QUESTIONS:
        raw_value = values.get(question.field_name)
        try:
            value = int(raw_value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            missing.append(question.id)
            continue
        if not SCALE_MIN <= value <= SCALE_MAX:
            missing.append(question.id)
            continue
        answers[question.id] = value
    return answers, missing


def answers_to_fields(answers: Mapping[int, int]) -> Dict[str, str]:
    return {f"q{question_id}": str(value) for question_id, value in answers.items()}


def render_report(payload: ReportPayload, answers: Mapping[int, int] | None = None):
    if payload.parse_error:
        app.logger.error("Report for mask %s could not be parsed", payload.mask.id)
    return render_template(
        "result.html",
        report=payload,
        parsed=payload.parsed,
        score_report=payload.score_report,
        answer_fields=answers_to_fields(answers or {}),
    )


@app.route("/", methods=["GET", "POST"])
def questionnaire():
    if request.method == "POST":
        answers, missing = collect_answers(request.form)
        if missing:
            error_message = COPY["errors"]["missing_questions"].format(
                missing=", ".join(str(q_id) for q_id in missing)
            )
            return render_template(
                "quiz.html",
                questions=QUESTIONS,
                options=ANSWER_OPTIONS,
                error=error_message,
                submitted={field: request.form.get(field) for field in request.form},
            )
        return redirect(url_for("results", **answers_to_fields(answers)))

    return render_template(
        "quiz.html",
        questions=QUESTIONS,
        options=ANSWER_OPTIONS,
        error=None,
        submitted={},
    )


@app.get("/results")
def results():
    answers, missing = collect_answers(request.args)
    if missing:
        return redirect(url_for("questionnaire"))

    payload = build_report(answers, REPORT_TEMPLATES)
    app.logger.info(
        "Scored answers: dominant=%s latent=%s significant=%s",
        payload.score_report.dominant.category.id,
        payload.score_report.latent.category.id,
        payload.score_report.is_significant,
    )
    return render_report(payload, answers)


@app.get("/preview/<mask_id>")
def preview(mask_id: str):
    if mask_id not in MASKS_BY_ID:
        abort(404)
    return render_report(build_preview_report(mask_id, REPORT_TEMPLATES))


def sanitize_for_pdf(text: str, unicode_font: bool = True) -> str:
    replacements = {
        "✨": "",
        "’": "'",
        "‘": "'",
        "–": "-",
        "—": "-",
        "…": "...",
        "️": "",
    }
    for src, dest in replacements.items():
        text = text.replace(src, dest)
    if not unicode_font:
        # Core fonts only cover Latin-1.
        text = text.encode("latin-1", "replace").decode("latin-1")
    return text


def generate_pdf_report(payload: ReportPayload) -> BytesIO:
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    base_text_color = (32, 37, 45)
    accent_color = (184, 158, 125)
    muted_color = (110, 116, 132)

    regular_family = "Helvetica"
    regular_style = ""
    bold_family = "Helvetica"
    bold_style = "B"
    unicode_font = False
    try:
        if PDF_FONT_REGULAR_PATH.exists():
            pdf.add_font(PDF_FONT_FAMILY, "", str(PDF_FONT_REGULAR_PATH))
            regular_family = PDF_FONT_FAMILY
            bold_family = PDF_FONT_FAMILY
            bold_style = ""
            unicode_font = True
        if unicode_font and PDF_FONT_BOLD_PATH.exists():
            pdf.add_font(PDF_FONT_FAMILY, "B", str(PDF_FONT_BOLD_PATH))
            bold_style = "B"
    except RuntimeError:
        regular_family = "Helvetica"
        bold_family = "Helvetica"
        bold_style = "B"
        unicode_font = False
    if not unicode_font:
        app.logger.warning("CJK font not found in %s; PDF text falls back to Latin-1", FONT_DIR)

    def clean(text: str) -> str:
        return sanitize_for_pdf(text, unicode_font)

    def heading(text: str) -> None:
        pdf.ln(3)
        pdf.set_font(bold_family, bold_style, 13)
        pdf.set_fill_color(244, 241, 235)
        pdf.cell(0, 9, clean(text), fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(2)
        pdf.set_font(regular_family, regular_style, 11)

    def paragraph(text: str) -> None:
        if text.strip():
            pdf.multi_cell(0, 6, clean(text), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(1)

    pdf_text = COPY["pdf"]
    result_text = COPY["result"]
    pdf.set_title(clean(pdf_text["title"]))
    pdf.set_author("MaskSpectrum")
    pdf.set_text_color(*base_text_color)

    pdf.set_font(bold_family, bold_style, 16)
    pdf.cell(0, 10, clean(pdf_text["title"]), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)

    pdf.set_font(regular_family, regular_style, 12)
    pdf.cell(0, 8, clean(f"{pdf_text['mask']}: {payload.type_label}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    score_report = payload.score_report
    if score_report is not None:
        latent = score_report.latent.category
        pdf.cell(0, 8, clean(f"{pdf_text['latent']}: {latent.label}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.set_font(bold_family, bold_style, 11)
    pdf.set_text_color(*accent_color)
    paragraph(payload.summary_quote)
    pdf.set_text_color(*base_text_color)
    pdf.set_font(regular_family, regular_style, 11)

    parsed = payload.parsed
    if parsed is not None:
        heading(result_text["flavor_heading"])
        paragraph(" / ".join(parsed.display_flavor_tags))

        if parsed.philosophy:
            heading(result_text["philosophy_heading"])
            paragraph(parsed.philosophy)

        deep_dive = parsed.deep_dive
        if deep_dive.title or deep_dive.intro or deep_dive.scene_content:
            heading(deep_dive.title or result_text["deep_dive_heading"])
            for line in deep_dive.intro:
                paragraph(line)
            if deep_dive.scene_content:
                pdf.set_text_color(*muted_color)
                paragraph(f"[{deep_dive.scene_title}] {deep_dive.scene_content.strip()}")
                pdf.set_text_color(*base_text_color)
            for line in deep_dive.outro:
                paragraph(line)

        if parsed.data_commentary:
            heading(result_text["commentary_heading"])
            paragraph(parsed.data_commentary)

        for title, items, fallback in (
            (result_text["decision_heading"], parsed.decision_items, parsed.decision_text),
            (result_text["growth_heading"], parsed.growth_items, parsed.growth_text),
        ):
            if not items and not fallback.strip():
                continue
            heading(title)
            if not items:
                paragraph(fallback)
            for item in items:
                pdf.set_font(bold_family, bold_style, 11)
                paragraph(item.title)
                pdf.set_font(regular_family, regular_style, 11)
                for line in item.body_lines:
                    paragraph(line)

        if parsed.life_dimensions is not None:
            heading(result_text["dimensions_heading"])
            for key in ("career", "relationships", "health"):
                content = getattr(parsed.life_dimensions, key)
                if content:
                    pdf.set_font(bold_family, bold_style, 11)
                    paragraph(result_text[key])
                    pdf.set_font(regular_family, regular_style, 11)
                    paragraph(content)

    if score_report is not None:
        heading(pdf_text["scores"])
        for item in score_report.all_scores:
            paragraph(pdf_text["score_line"].format(name=item.category.label, score=item.score))

    buffer = BytesIO()
    pdf.output(buffer)
    buffer.seek(0)
    return buffer


@app.post("/export/pdf")
def export_pdf():
    answers, missing = collect_answers(request.form)
    if missing:
        return (COPY["errors"]["incomplete_pdf"], 400)

    payload = build_report(answers, REPORT_TEMPLATES)
    pdf_buffer = generate_pdf_report(payload)
    pdf_buffer.seek(0)

    filename = f"MaskSpectrum_{payload.mask.id}.pdf"
    return send_file(
        pdf_buffer,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=filename,
    )


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5001)
