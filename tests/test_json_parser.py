from autodamage.utils.json_parser import extract_json_object, strip_code_fences


def test_plain_object():
    assert extract_json_object('{"damages": [], "overallCondition": "Good"}') == {
        "damages": [],
        "overallCondition": "Good",
    }


def test_code_fenced_object():
    text = '```json\n{"damages": [], "overallCondition": "Fair"}\n```'
    assert extract_json_object(text)["overallCondition"] == "Fair"


def test_object_surrounded_by_prose():
    text = (
        "Here is my assessment of the vehicle:\n"
        '{"damages": [{"carPart": "door"}], "overallCondition": "Poor"}\n'
        "Let me know if you need anything else {or more detail}."
    )
    data = extract_json_object(text)

    assert data["overallCondition"] == "Poor"
    assert data["damages"] == [{"carPart": "door"}]


def test_skips_malformed_braces_before_the_object():
    text = 'Reasoning {not json} then {"overallCondition": "Good"}'
    assert extract_json_object(text) == {"overallCondition": "Good"}


def test_first_of_several_objects_wins():
    text = '{"overallCondition": "Good"} and later {"overallCondition": "Poor"}'
    assert extract_json_object(text) == {"overallCondition": "Good"}


def test_accept_skips_objects_that_fail_the_check():
    text = '{"note": 1} then {"damages": []}'

    assert extract_json_object(text, accept=lambda obj: "damages" in obj) == {"damages": []}
    assert extract_json_object('{"note": 1}', accept=lambda obj: "damages" in obj) is None


def test_no_object():
    assert extract_json_object("") is None
    assert extract_json_object("I cannot assess this image.") is None
    assert extract_json_object("[1, 2, 3]") is None
    assert extract_json_object('{"damages": [') is None


def test_strip_code_fences():
    assert strip_code_fences("```\n{}\n```") == "{}"
    assert strip_code_fences("  {}  ") == "{}"
    assert strip_code_fences(None) == ""
