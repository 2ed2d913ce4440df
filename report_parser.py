"""Decompose a report narrative into the blocks the result page renders.

The narrative is organised in five top-level sections, each opened by a line
starting with a Chinese ordinal (一、 .. 五、). Section one carries the mask
philosophy and the deep-dive story, section two the data commentary, sections
three and four numbered advice items and section five the life dimensions.
Every parser here is total: missing markers or anchors produce empty values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

SECTION_ORDINALS: Tuple[str, ...] = ("一", "二", "三", "四", "五")
SECTION_MARKER_RE = re.compile(r"^([一二三四五])[、.．]")
LEADING_ORDINAL_RE = re.compile(r"^[一1][、.．]")
COLON_RE = re.compile(r"[:：]")
TAG_SEPARATOR_RE = re.compile(r"[,，、]")
ITEM_MARKER_RE = re.compile(r"^[0-9]+[、.．【]")
TITLE_PREFIX_RE = re.compile(r"✨|标题[:：]")

FLAVOR_KEYWORDS: Tuple[str, ...] = ("核心底色", "风味", "苦涩", "辛辣", "醇厚")
FLAVOR_PLACEHOLDER = "独特特质"

TITLE_GLYPH = "✨"
TITLE_PREFIXES: Tuple[str, ...] = ("标题：", "标题:")
SCENE_PREFIX = "场景代入"
SCENE_KEYWORD = "情境代入"
DEFAULT_SCENE_TITLE = "场景代入"
SCENE_EXIT_PREFIXES: Tuple[str, ...] = ("你不需要", "你不是", "你的")

COMMENTARY_MARKERS: Tuple[str, ...] = ("·数据解读", "Data Interpretation", "数据透视：")


@dataclass(frozen=True)
class DeepDive:
    title: str = ""
    intro: Tuple[str, ...] = ()
    scene_title: str = DEFAULT_SCENE_TITLE
    scene_content: str = ""
    outro: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Item:
    title: str
    body_lines: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LifeDimensions:
    career: str = ""
    relationships: str = ""
    health: str = ""


@dataclass(frozen=True)
class ParsedReport:
    flavor_tags: Tuple[str, ...] = ()
    philosophy: str = ""
    deep_dive: DeepDive = field(default_factory=DeepDive)
    data_commentary: str = ""
    decision_text: str = ""
    decision_items: Tuple[Item, ...] = ()
    growth_text: str = ""
    growth_items: Tuple[Item, ...] = ()
    life_dimensions: Optional[LifeDimensions] = None

    @property
    def display_flavor_tags(self) -> Tuple[str, ...]:
        return self.flavor_tags or (FLAVOR_PLACEHOLDER,)


class DeepDiveState(Enum):
    BEFORE_TITLE = "before_title"
    TITLED = "titled"
    IN_SCENE = "in_scene"
    AFTER_SCENE = "after_scene"


class ItemState(Enum):
    BEFORE_FIRST_ITEM = "before_first_item"
    IN_ITEM = "in_item"


def _after_first_colon(line: str) -> Optional[str]:
    parts = COLON_RE.split(line, maxsplit=1)
    if len(parts) < 2:
        return None
    return parts[1]


def _body_lines(block: str) -> List[str]:
    """Lines of a section block without its ordinal header line."""
    if not block:
        return []
    return block.split("\n")[1:]


def split_sections(text: str) -> Tuple[str, str, str, str, str]:
    lines = text.split("\n")
    starts = {}
    for index, line in enumerate(lines):
        match = SECTION_MARKER_RE.match(line.strip())
        if match and match.group(1) not in starts:
            starts[match.group(1)] = index

    boundaries = sorted(starts.values())
    blocks: List[str] = []
    for ordinal in SECTION_ORDINALS:
        start = starts.get(ordinal)
        if start is None:
            blocks.append("")
            continue
        following = [boundary for boundary in boundaries if boundary > start]
        end = following[0] if following else len(lines)
        blocks.append("\n".join(lines[start:end]))
    return tuple(blocks)  # type: ignore[return-value]


def parse_flavor_tags(text: str) -> Tuple[str, ...]:
    for line in text.split("\n"):
        if any(keyword in line for keyword in FLAVOR_KEYWORDS):
            remainder = _after_first_colon(line)
            if remainder is None:
                return ()
            return tuple(tag.strip() for tag in TAG_SEPARATOR_RE.split(remainder) if tag.strip())
    return ()


def parse_philosophy(title_line: str) -> str:
    remainder = _after_first_colon(title_line)
    if remainder is not None:
        return remainder.strip()
    return LEADING_ORDINAL_RE.sub("", title_line.strip()).strip()


def _is_title_line(line: str) -> bool:
    return TITLE_GLYPH in line or line.startswith(TITLE_PREFIXES)


def _is_scene_opener(line: str) -> bool:
    return line.startswith(SCENE_PREFIX) or SCENE_KEYWORD in line


def parse_deep_dive(block: str) -> Tuple[str, DeepDive]:
    """Return the philosophy quote and the deep-dive story of section one.

    Lines before the title line are not part of the story and are dropped.
    Scene text is collected until a line opens with one of the second-person
    transitions, which starts the closing paragraphs.
    """
    if not block.strip():
        return "", DeepDive()

    lines = block.split("\n")
    philosophy = parse_philosophy(lines[0])
    state = DeepDiveState.BEFORE_TITLE
    title = ""
    intro: List[str] = []
    scene: List[str] = []
    outro: List[str] = []

    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line:
            continue

        if _is_title_line(line):
            title = TITLE_PREFIX_RE.sub("", line).strip()
            if state is DeepDiveState.BEFORE_TITLE:
                state = DeepDiveState.TITLED
            continue

        if state is DeepDiveState.BEFORE_TITLE:
            continue

        if _is_scene_opener(line):
            state = DeepDiveState.IN_SCENE
            remainder = _after_first_colon(line)
            if remainder and remainder.strip():
                scene.append(remainder.strip())
            continue

        if state is DeepDiveState.IN_SCENE:
            if line.startswith(SCENE_EXIT_PREFIXES):
                state = DeepDiveState.AFTER_SCENE
                outro.append(line)
            else:
                scene.append(line)
        elif scene:
            outro.append(line)
        else:
            intro.append(line)

    # Every scene line keeps its trailing newline.
    return philosophy, DeepDive(
        title=title,
        intro=tuple(intro),
        scene_content="".join(line + "\n" for line in scene),
        outro=tuple(outro),
    )


def parse_data_commentary(block: str) -> str:
    lines = _body_lines(block)
    for index, line in enumerate(lines):
        if any(marker in line for marker in COMMENTARY_MARKERS):
            return "\n".join(lines[index:]).strip()
    return "\n".join(lines).strip()


def parse_items(block: str) -> Tuple[Item, ...]:
    items: List[Item] = []
    state = ItemState.BEFORE_FIRST_ITEM
    title = ""
    body: List[str] = []

    for raw_line in block.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        if ITEM_MARKER_RE.match(line):
            if state is ItemState.IN_ITEM:
                items.append(Item(title=title, body_lines=tuple(body)))
            state = ItemState.IN_ITEM
            title, body = line, []
        elif state is ItemState.IN_ITEM:
            body.append(line)

    if state is ItemState.IN_ITEM:
        items.append(Item(title=title, body_lines=tuple(body)))
    return tuple(items)


def _is_career_anchor(line: str) -> bool:
    return "事业" in line and ("深度解读" in line or bool(COLON_RE.search(line)))


def _is_relationship_anchor(line: str) -> bool:
    return "亲密关系" in line and bool(COLON_RE.search(line))


def _is_health_anchor(line: str) -> bool:
    return "身体健康" in line and bool(COLON_RE.search(line))


def _first_index(lines: Sequence[str], predicate) -> int:
    for index, line in enumerate(lines):
        if predicate(line):
            return index
    return -1


def parse_life_dimensions(block: str) -> LifeDimensions:
    lines = _body_lines(block)
    anchors = [
        _first_index(lines, _is_career_anchor),
        _first_index(lines, _is_relationship_anchor),
        _first_index(lines, _is_health_anchor),
    ]
    found = sorted(anchor for anchor in anchors if anchor > -1)

    def extract(start: int) -> str:
        if start == -1:
            return ""
        following = [anchor for anchor in found if anchor > start]
        end = following[0] if following else len(lines)
        return "\n".join(lines[start + 1 : end]).strip()

    career, relationships, health = (extract(anchor) for anchor in anchors)
    return LifeDimensions(career=career, relationships=relationships, health=health)


def parse_report(text: str) -> ParsedReport:
    first, second, third, fourth, fifth = split_sections(text)
    philosophy, deep_dive = parse_deep_dive(first)
    decision_text = "\n".join(_body_lines(third))
    growth_text = "\n".join(_body_lines(fourth))

    return ParsedReport(
        flavor_tags=parse_flavor_tags(text),
        philosophy=philosophy,
        deep_dive=deep_dive,
        data_commentary=parse_data_commentary(second),
        decision_text=decision_text,
        decision_items=parse_items(decision_text),
        growth_text=growth_text,
        growth_items=parse_items(growth_text),
        life_dimensions=parse_life_dimensions(fifth) if fifth else None,
    )
