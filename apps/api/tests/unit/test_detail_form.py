import pytest

from app.models.domain import JerseyType, SizeCategory, Sleeve
from app.services.detail_form import (
    DetailValidationError,
    field_name,
    render_schema,
    summarize_details,
    summarize_fields,
    validate_submission,
)


def test_render_schema_builds_one_group_per_jersey():
    groups = render_schema(3)

    assert [group.label for group in groups] == ["Jersey 1", "Jersey 2", "Jersey 3"]
    names = [field.name for field in groups[2].inputs]
    assert names == [
        "jersey_2_type",
        "jersey_2_name",
        "jersey_2_number",
        "jersey_2_size_category",
        "jersey_2_size",
        "jersey_2_sleeve",
        "jersey_2_shorts",
        "jersey_2_additional",
    ]


def test_render_schema_field_metadata():
    inputs = {field.key: field for field in render_schema(1)[0].inputs}

    assert inputs["type"].options == [t.value for t in JerseyType]
    assert inputs["size"].options == ["XS", "S", "M", "L", "XL", "2XL", "3XL", "4XL", "5XL"]
    assert inputs["number"].kind == "number"
    assert (inputs["number"].min, inputs["number"].max) == (1, 99)
    assert inputs["additional"].required is False
    assert all(field.required for key, field in inputs.items() if key != "additional")


def test_render_schema_serializes_camel_case():
    dumped = render_schema(1)[0].model_dump(by_alias=True)

    assert "inputs" in dumped
    assert dumped["inputs"][0]["name"] == "jersey_0_type"


def test_render_schema_rejects_non_positive_quantity():
    with pytest.raises(ValueError):
        render_schema(0)


def test_validate_submission_builds_details(jersey_fields):
    details = validate_submission(jersey_fields(2, jersey_1_additional="  Long socks "), 2)

    assert len(details) == 2
    assert details[0].number == 7
    assert details[1].name == "Player 2"
    assert details[1].additional_details == "Long socks"
    assert details[1].size_category == SizeCategory.ADULT


def test_validate_submission_reports_first_incomplete_jersey(jersey_fields):
    fields = jersey_fields(3, jersey_1_name="  ", jersey_2_sleeve="")

    with pytest.raises(DetailValidationError) as exc_info:
        validate_submission(fields, 3)

    err = exc_info.value
    assert err.index == 1
    assert err.missing_fields == ["name"]
    assert err.to_detail() == {
        "jerseyIndex": 1,
        "jersey": "Jersey 2",
        "missingFields": ["name"],
        "invalidFields": [],
        "message": "Please fill in all required fields for Jersey 2.",
    }


def test_validate_submission_treats_absent_fields_as_missing(jersey_fields):
    fields = jersey_fields(1)
    del fields["jersey_0_size"]

    with pytest.raises(DetailValidationError) as exc_info:
        validate_submission(fields, 1)

    assert exc_info.value.missing_fields == ["size"]


@pytest.mark.parametrize(
    ("overrides", "invalid"),
    [
        ({"jersey_0_number": "0"}, ["number"]),
        ({"jersey_0_number": "100"}, ["number"]),
        ({"jersey_0_number": "7.5"}, ["number"]),
        ({"jersey_0_type": "Referee Jersey"}, ["type"]),
        ({"jersey_0_size": "6XL"}, ["size"]),
        ({"jersey_0_size_category": "Senior"}, ["sizeCategory"]),
        ({"jersey_0_shorts": "Maybe"}, ["shorts"]),
    ],
)
def test_validate_submission_rejects_out_of_range_values(jersey_fields, overrides, invalid):
    with pytest.raises(DetailValidationError) as exc_info:
        validate_submission(jersey_fields(1, **overrides), 1)

    assert exc_info.value.invalid_fields == invalid
    assert exc_info.value.missing_fields == []


def test_validate_submission_ignores_fields_beyond_quantity(jersey_fields):
    fields = jersey_fields(1)
    fields[field_name(5, "type")] = "garbage"

    assert len(validate_submission(fields, 1)) == 1


def test_summarize_details_counts_non_empty_categories(jersey_fields):
    fields = jersey_fields(
        3,
        jersey_2_type="Keeper Jersey",
        jersey_2_sleeve="Long Sleeve",
        jersey_1_size_category="Kids",
    )
    details = validate_submission(fields, 3)

    summary = summarize_details(details)

    assert summary.types == {"Player Jersey": 2, "Keeper Jersey": 1}
    assert summary.size_categories == {"Adult": 2, "Kids": 1}
    assert summary.sleeves == {"Short Sleeve": 2, "Long Sleeve": 1}


def test_summarize_fields_shows_every_category_for_partial_form():
    summary = summarize_fields({"jersey_0_type": "Training Jersey", "jersey_1_sleeve": ""}, 2)

    assert summary.types == {
        "Player Jersey": 0,
        "Keeper Jersey": 0,
        "Official Jersey": 0,
        "Training Jersey": 1,
        "Warm-up Jersey": 0,
    }
    assert summary.sleeves == {Sleeve.SHORT.value: 0, Sleeve.LONG.value: 0}
    assert summary.model_dump(by_alias=True)["sizeCategories"] == {
        "Adult": 0,
        "Kids": 0,
        "Muslima": 0,
    }
