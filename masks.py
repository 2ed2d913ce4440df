from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple


@dataclass(frozen=True)
class Mask:
    id: str  # Roman numeral token, "I" .. "XII"
    name: str
    archetype: str
    blend: str
    description: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.archetype})"


@dataclass(frozen=True)
class WeightEntry:
    category_id: str
    weight: float
    reverse: bool = False


@dataclass(frozen=True)
class Question:
    id: int
    prompt: str
    scale: str = "agreement"

    @property
    def field_name(self) -> str:
        return f"q{self.id}"


@dataclass(frozen=True)
class RadarPoint:
    label: str
    value: float
    average: float


MASKS: Tuple[Mask, ...] = (
    Mask("I", "鄙夷 (Contempt/Sneer)", "鸩羽", "[愤怒] + [厌恶]", "以冷漠和优越感将他人推开。通过建立心理高墙来防御世界。"),
    Mask("II", "愤世嫉俗 (Cynicism)", "山魈", "[期待] + [厌恶]", "预设世界的黑暗和失望。是一种防御性的、带有酸味的失望。"),
    Mask("III", "懊悔 (Remorse)", "伯奇", "[哀伤] + [厌恶] (向己)", "对过去行为的自我审判和惩罚。内心向内卷曲，极度自责。"),
    Mask("IV", "焦虑 (Anxiety/Tension)", "耳鼠", "[恐惧] + [期待]", "对未来的不确定性预演。体内能量极高，但全部用来内耗和担忧。"),
    Mask("V", "义愤 (Righteous Outrage)", "烛龙", "[愤怒] + [道德感]", "对违背道德或规则的现象产生的灼热怒火，相信自己站在正义的一方。"),
    Mask("VI", "钦佩 (Admiration)", "文鳐", "[快乐] + [信任]", "对他人卓越品质和成就发自内心的认可和尊重，是积极的社会联结。"),
    Mask("VII", "自豪 (Pride)", "夫诸", "[快乐] + [信心/掌控]", "基于个人努力和成就获得的满足感和自我肯定。健康的自信和自我价值感。"),
    Mask("VIII", "心流 (Flow)", "息壤", "[专注] + [快乐] + [惊讶]", "完全沉浸于某项挑战与技能匹配的任务中，时间和自我意识消失的极致体验。"),
    Mask("IX", "狂热 (Fanaticism)", "傒囊", "[期待] + [专注]", "极度的聚焦和执念。视野被单一目标占据，多巴胺过载，盲目扩张。"),
    Mask("X", "怀旧 (Nostalgia)", "望帝", "[快乐] + [哀伤]", "甜美与痛苦交织，渴望重塑过去美好的时光，是一种对时间的深情凝视。"),
    Mask("XI", "敬畏 (Awe)", "重明", "[恐惧] + [惊讶]", "面对宏大、超越性的存在时，自我缩小，同时感受到联结和恐惧。"),
    Mask("XII", "悲悯 (Compassion)", "姑获", "[哀伤] + [爱/信任]", "感同身受他人的痛苦，并将痛苦转化为温柔的承载和付出。"),
)

MASKS_BY_ID: Mapping[str, Mask] = MappingProxyType({mask.id: mask for mask in MASKS})


def _weights(*entries: Tuple[str, float, bool]) -> Tuple[WeightEntry, ...]:
    return tuple(WeightEntry(category_id, weight, reverse) for category_id, weight, reverse in entries)


# question id -> weight entries; "R" comments mark reverse-scored entries
WEIGHT_MATRIX: Mapping[int, Tuple[WeightEntry, ...]] = MappingProxyType(
    {
        1: _weights(("IV", 5, False), ("V", 3, False)),
        2: _weights(("VII", 5, False), ("IX", 4, False)),
        3: _weights(("IV", 4, False), ("III", 3, False)),
        4: _weights(("VII", 4, False), ("IX", 5, False)),
        5: _weights(("IV", 5, False), ("V", 5, False)),
        6: _weights(("I", 5, False), ("II", 4, False)),
        7: _weights(("II", 5, False), ("I", 3, False)),
        8: _weights(("III", 5, False), ("XII", 2, True)),  # R: 悲悯
        9: _weights(("XII", 5, False), ("II", 4, True)),  # R: 愤世嫉俗
        10: _weights(("V", 5, False), ("I", 4, False)),
        11: _weights(("XI", 5, False), ("VIII", 3, False)),
        12: _weights(("VIII", 5, False), ("XI", 3, False)),
        13: _weights(("X", 5, False), ("VIII", 2, True)),  # R: 心流
        14: _weights(("IX", 5, False), ("XI", 3, False)),
        15: _weights(("XI", 4, False), ("X", 3, False)),
        16: _weights(("IV", 5, False), ("VIII", 3, False)),
        17: _weights(("I", 5, False), ("V", 4, False)),
        18: _weights(("VII", 5, False), ("IX", 3, False)),
        19: _weights(("IX", 5, False), ("VII", 3, False)),
        20: _weights(("XII", 5, False), ("I", 3, True)),  # R: 鄙夷
    }
)

ANSWER_OPTIONS: Dict[str, List[Dict[str, object]]] = {
    "agreement": [
        {"value": 1, "label": "完全不符"},
        {"value": 2, "label": "不太符合"},
        {"value": 3, "label": "中立/不确定"},
        {"value": 4, "label": "比较符合"},
        {"value": 5, "label": "完全符合"},
    ],
    "frequency": [
        {"value": 1, "label": "从来没有"},
        {"value": 2, "label": "几乎没有"},
        {"value": 3, "label": "有时"},
        {"value": 4, "label": "大多数时候"},
        {"value": 5, "label": "总是"},
    ],
}

QUESTIONS: Tuple[Question, ...] = (
    # Block I: 情绪反应
    Question(1, "我经常感受到压力，需要很长时间才能平静下来。"),
    Question(2, "我通常是一个充满活力，愿意主动社交的人。"),
    Question(3, "即使遇到小麻烦，我也很容易烦躁或感到受伤。"),
    Question(4, "我能比大多数人更强烈地体验到快乐和兴奋。"),
    Question(5, "我发现我的情绪经常在一天内发生剧烈的起伏。"),
    # Block II: 归因与评判
    Question(6, "当看到别人的成功时，我更容易去分析他们的缺陷或运气。"),
    Question(7, "我深信人性本恶，人们在多数情况下只会为自己考虑。"),
    Question(8, "如果我搞砸了一件事情，我倾向于认为这是我性格中不可改变的缺陷造成的。"),
    Question(9, "当朋友遇到困难时，我能清晰地感受到他们的痛苦，并愿意付出时间去帮助他们。"),
    Question(10, "我认为世界上大多数问题都源于他人道德的缺失。"),
    # Block III: 体验频率
    Question(11, "我经常被科学、艺术或自然界中的宏大现象深深震撼。", scale="frequency"),
    Question(12, "当我专注于一项具有挑战性的任务时，我常常忘记时间的流逝。", scale="frequency"),
    Question(13, "我有时会沉溺于对过去美好时光的回忆和想象中。", scale="frequency"),
    Question(14, "我愿意为了达成一个长期的、宏伟的目标而牺牲短期的舒适。", scale="frequency"),
    Question(15, "我喜欢思考人生的意义和抽象的哲学问题。", scale="frequency"),
    # Block IV: 应对方式
    Question(16, "当我感到焦虑时，我倾向于立即制定详细的计划来对抗这种感觉。"),
    Question(17, "我很难对那些我感到失望的人保持礼貌或尊敬。"),
    Question(18, "当我的努力得到肯定时，我内心会涌起强烈的、光荣的成就感。"),
    Question(19, "我常常发现自己对某件事情怀有近乎偏执的信念和热情。"),
    Question(20, "我发现我能有效地接纳并处理别人的负面情绪，而不会被其拖垮。"),
)

RADAR_LABELS: Tuple[Tuple[str, float], ...] = (
    ("内部归因", 3.2),
    ("自我厌恶", 2.5),
    ("恢复时长", 3.8),
    ("焦虑指数", 3.0),
)

# mask id -> (radar values in RADAR_LABELS order, summary quote)
RADAR_PROFILES: Mapping[str, Tuple[Tuple[float, float, float, float], str]] = MappingProxyType(
    {
        "I": ((2.0, 4.5, 3.5, 2.5), "你的冷漠是防御羞耻的盔甲。通过向外投射鄙夷，你暂时逃避了内心深处那个害怕被看见的、脆弱的自己。"),
        "II": ((2.0, 3.5, 2.5, 3.0), "你不是真的憎恨世界，你只是憎恨世界不符合你的理想。你的愤世嫉俗是一种智力上的防御机制。"),
        "III": ((5.0, 4.8, 1.5, 4.2), "你的情感成本高昂。高神经质使你的情绪波动剧烈，而极端的内部归因又使你必须承担全部的恢复成本。"),
        "IV": ((2.5, 3.5, 2.0, 5.0), "你对未来的恐惧正在透支当下的能量。这种持续的警觉状态，让你不仅难以放松，更在无形中筑起了自我保护的围墙。"),
        "V": ((2.0, 1.5, 3.5, 4.5), "你的义愤，是你力量最清晰的信号。它赋予你惊人的勇气，但你的挑战在于，如何控制这股火焰，让它不焚烧自身。"),
        "VI": ((3.5, 2.0, 4.0, 2.0), "你的钦佩，是世界上最纯净的驱动力之一。这枚面具为你带来了温暖的人际关系，但你的挑战是，如何将这股信任感反射回自己身上。"),
        "VII": ((4.5, 1.5, 4.5, 3.5), "你将自我价值与成就深度绑定。这种强大的驱动力虽然让你不断攀登高峰，但也让你在面对失败时感到格外脆弱。"),
        "VIII": ((3.5, 1.5, 4.0, 2.0), "你的心流，是你的思维与环境的完美共振。然而，你的情感成本在于对环境的极度依赖：心流一旦被破坏，你可能会产生巨大的烦躁。"),
        "IX": ((4.0, 2.0, 3.0, 3.5), "你的狂热，是你信念最纯粹的表达。你的生命，就是一场为实现目标而进行的宏大献祭，但请小心不要燃烧了所有无辜的船员。"),
        "X": ((3.5, 3.0, 2.0, 3.0), "你的怀旧，是一种甜美而危险的锚定。你总是在绿色的灯光下等待过去重现，这阻碍了你全身心地投入到充满不确定性的当下。"),
        "XI": ((2.5, 1.0, 4.5, 2.5), "你的敬畏，是认知的扩展。它打破了以自我为中心的局限，让你看到自己与宇宙的宏大关联。你的挑战是如何将宏大落地为微小的行动。"),
        "XII": ((3.0, 2.0, 3.0, 3.5), "你的悲悯，是超越立场的理解。它赋予你无与伦比的道德勇气，但你的挑战是，在伸出援手时，如何保护好自己的光源。"),
    }
)

DEFAULT_RADAR_PROFILE: Tuple[Tuple[float, float, float, float], str] = (
    (3.5, 2.5, 3.8, 3.0),
    "你的情绪模式显示出独特的张力。在自我归因与外界环境之间，你正在寻找一种动态的平衡。",
)


def get_radar_profile(mask_id: str) -> Tuple[List[RadarPoint], str]:
    values, quote = RADAR_PROFILES.get(mask_id, DEFAULT_RADAR_PROFILE)
    points = [
        RadarPoint(label=label, value=value, average=average)
        for (label, average), value in zip(RADAR_LABELS, values)
    ]
    return points, quote
