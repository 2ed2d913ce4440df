from dataclasses import FrozenInstanceError

import pytest

from report_parser import (
    DEFAULT_SCENE_TITLE,
    Item,
    LifeDimensions,
    parse_data_commentary,
    parse_deep_dive,
    parse_flavor_tags,
    parse_items,
    parse_life_dimensions,
    parse_philosophy,
    parse_report,
    split_sections,
)


def test_split_sections_between_markers():
    blocks = split_sections("一、A\n二、B\n三、C\n四、D\n五、E")
    assert blocks == ("一、A", "二、B", "三、C", "四、D", "五、E")


def test_split_sections_missing_fifth_marker():
    blocks = split_sections("一、A\nx\n二、B\n三、C\n四、D\ny")
    assert blocks[0] == "一、A\nx"
    assert blocks[3] == "四、D\ny"
    assert blocks[4] == ""


def test_split_sections_ignores_ascii_digit_items():
    text = "一、A\n三、C\n1、first\n4、fourth\n  四．D\n5、tail"
    blocks = split_sections(text)
    assert blocks[1] == ""
    assert blocks[2] == "三、C\n1、first\n4、fourth"
    assert blocks[3] == "  四．D\n5、tail"
    assert blocks[4] == ""


def test_split_sections_uses_first_occurrence():
    blocks = split_sections("一、A\n二、B\n二、again\n三、C")
    assert blocks[1] == "二、B\n二、again"


def test_split_sections_empty_text():
    assert split_sections("") == ("", "", "", "", "")


def test_flavor_tags():
    text = "开场\n核心底色：苦涩、回甘, 深焙，  \n风味：无关"
    assert parse_flavor_tags(text) == ("苦涩", "回甘", "深焙")
    assert parse_flavor_tags("醇厚: 温暖、厚重") == ("温暖", "厚重")


def test_flavor_tags_missing():
    assert parse_flavor_tags("一、面具\n没有标签") == ()
    assert parse_flavor_tags("核心底色") == ()


def test_item_list():
    items = parse_items("1、Title A\nline1\nline2\n2、Title B\nline3")
    assert items == (
        Item(title="1、Title A", body_lines=("line1", "line2")),
        Item(title="2、Title B", body_lines=("line3",)),
    )


def test_item_list_marker_variants_and_blank_lines():
    items = parse_items("preface\n\n1.Alpha\n\n  body\n12【Beta】\n3．Gamma")
    assert [item.title for item in items] == ["1.Alpha", "12【Beta】", "3．Gamma"]
    assert items[0].body_lines == ("body",)
    assert items[1].body_lines == ()


def test_item_list_empty_block():
    assert parse_items("") == ()
    assert parse_items("no numbered lines here") == ()


def test_deep_dive_scene_and_outro():
    block = "一、面具的心声：quote\n✨ 标题：T\n场景代入：text1\ntext2\n你的旅程开始了"
    philosophy, deep_dive = parse_deep_dive(block)

    assert philosophy == "quote"
    assert deep_dive.title == "T"
    assert deep_dive.scene_content == "text1\ntext2\n"
    assert deep_dive.outro == ("你的旅程开始了",)
    assert deep_dive.intro == ()


def test_deep_dive_ignores_lines_before_title():
    block = "\n".join(
        [
            "一、面具的心声",
            "legend line",
            "标题：Heading",
            "intro one",
            "",
            "intro two",
            "场景代入",
            "scene line",
            "你不需要 closing",
            "after scene",
        ]
    )
    philosophy, deep_dive = parse_deep_dive(block)

    assert philosophy == "面具的心声"
    assert deep_dive.title == "Heading"
    assert deep_dive.intro == ("intro one", "intro two")
    assert deep_dive.scene_content == "scene line\n"
    assert deep_dive.outro == ("你不需要 closing", "after scene")


def test_deep_dive_situation_keyword_opens_scene():
    block = "一、x：y\n✨ T\n【情境代入】：周日晚上\n你想好了一切\n你不是机器"
    _, deep_dive = parse_deep_dive(block)
    assert deep_dive.scene_content == "周日晚上\n你想好了一切\n"
    assert deep_dive.outro == ("你不是机器",)


def test_deep_dive_without_title_collects_nothing():
    _, deep_dive = parse_deep_dive("一、a：b\n场景代入：text\n你的结尾")
    assert deep_dive.title == ""
    assert deep_dive.scene_content == ""
    assert deep_dive.intro == ()
    assert deep_dive.outro == ()


def test_deep_dive_defaults_for_empty_block():
    philosophy, deep_dive = parse_deep_dive("")
    assert philosophy == ""
    assert deep_dive.title == ""
    assert deep_dive.intro == ()
    assert deep_dive.scene_title == DEFAULT_SCENE_TITLE
    assert deep_dive.scene_content == ""
    assert deep_dive.outro == ()


def test_philosophy_strips_ordinal_without_colon():
    assert parse_philosophy("一、面具的心声") == "面具的心声"
    assert parse_philosophy("1.心声") == "心声"
    assert parse_philosophy("一、心声：a：b") == "a：b"


def test_data_commentary_starts_at_marker():
    block = "二、数据\nBlock I 5.0\n·数据解读：高\n第二行"
    assert parse_data_commentary(block) == "·数据解读：高\n第二行"
    assert parse_data_commentary("二、数据\n只有文字") == "只有文字"
    assert parse_data_commentary("") == ""


def test_life_dimensions_in_any_order():
    block = "五、多维\n身体健康：\nh1\n事业：\nc1\nc2\n亲密关系：\nr1"
    assert parse_life_dimensions(block) == LifeDimensions(
        career="c1\nc2", relationships="r1", health="h1"
    )


def test_life_dimensions_missing_anchor():
    block = "五、多维\n事业与财富深度解读\nc1\n身体健康:\nh1"
    dimensions = parse_life_dimensions(block)
    assert dimensions.career == "c1"
    assert dimensions.relationships == ""
    assert dimensions.health == "h1"
    assert parse_life_dimensions("") == LifeDimensions()


def test_parse_report_defaults_for_unstructured_text():
    parsed = parse_report("此处将显示完整报告...")
    assert parsed.flavor_tags == ()
    assert parsed.display_flavor_tags == ("独特特质",)
    assert parsed.philosophy == ""
    assert parsed.deep_dive.scene_title == DEFAULT_SCENE_TITLE
    assert parsed.data_commentary == ""
    assert parsed.decision_items == ()
    assert parsed.growth_items == ()
    assert parsed.life_dimensions is None


def test_parse_report_sections():
    text = "\n".join(
        [
            "风味：辛辣",
            "一、心声：quote",
            "✨ 标题：T",
            "intro",
            "二、数据",
            "数据透视：comment",
            "三、决策",
            "1、【a】",
            "a body",
            "4、【d】",
            "四、成长",
            "1、g",
            "g body",
            "五、多维",
            "事业：",
            "c",
        ]
    )
    parsed = parse_report(text)

    assert parsed.flavor_tags == ("辛辣",)
    assert parsed.philosophy == "quote"
    assert parsed.deep_dive.intro == ("intro",)
    assert parsed.data_commentary == "数据透视：comment"
    assert parsed.decision_text == "1、【a】\na body\n4、【d】"
    assert [item.title for item in parsed.decision_items] == ["1、【a】", "4、【d】"]
    assert parsed.growth_items == (Item(title="1、g", body_lines=("g body",)),)
    assert parsed.life_dimensions == LifeDimensions(career="c")


def test_parsed_report_cannot_be_changed():
    parsed = parse_report("一、a：b\n✨ T\nintro\n场景代入：scene\n你的结尾\n三、决策\n1、x")

    with pytest.raises(FrozenInstanceError):
        parsed.philosophy = "changed"
    with pytest.raises(FrozenInstanceError):
        parsed.deep_dive.title = "changed"
    with pytest.raises(AttributeError):
        parsed.deep_dive.intro.append("mutated")
    with pytest.raises(AttributeError):
        parsed.flavor_tags.append("x")
    with pytest.raises(AttributeError):
        parsed.decision_items.append(Item(title="2、y"))

    assert parsed.deep_dive.intro == ("intro",)
    assert parsed.deep_dive.scene_content == "scene\n"
    assert parsed.decision_items == (Item(title="1、x"),)
