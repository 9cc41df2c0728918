# tests/application/services/test_field_validator.py
import pytest

from application.services.field_validator import FieldValidator
from domain.exceptions import UnknownStepError, WizardDefinitionError
from domain.steps import FieldRule, FieldSpec, StepDefinition, TransitionRule
from domain.wizard import WizardDefinition, WizardMeta

POSTCODE_MESSAGE = "Enter a real postcode, like E8 1EA."


@pytest.fixture
def validator(wizard):
    return FieldValidator(wizard)


def test_required_field_missing(validator) -> None:
    # Act
    result = validator.validate("step-1", {})

    # Assert
    assert result.valid is False
    assert result.errors == {"is_on_behalf": ["Select yes if you’re asking for help for someone else"]}


def test_required_field_present(validator) -> None:
    result = validator.validate("step-1", {"is_on_behalf": "false"})

    assert result.valid is True
    assert result.errors == {}
    assert result.cleaned == {"is_on_behalf": "false"}


def test_blank_postcode_reports_only_the_presence_message(validator) -> None:
    # Arrange
    raw = {"lookup_postcode": "   ", "gazetteer": "LOCAL"}

    # Act
    result = validator.validate("step-2", raw)

    # Assert: the format rule is skipped because its guard field is blank after trim
    assert result.errors == {"lookup_postcode": [POSTCODE_MESSAGE]}


def test_malformed_postcode_reports_format_message(validator) -> None:
    result = validator.validate("step-2", {"lookup_postcode": "not a postcode"})

    assert result.errors == {"lookup_postcode": [POSTCODE_MESSAGE]}
    assert result.first_error("lookup_postcode") == POSTCODE_MESSAGE


def test_valid_postcode_is_trimmed(validator) -> None:
    result = validator.validate("step-2", {"lookup_postcode": "  e8 1ea ", "gazetteer": "LOCAL"})

    assert result.valid is True
    assert result.cleaned["lookup_postcode"] == "e8 1ea"
    assert result.cleaned["gazetteer"] == "LOCAL"


def test_stacked_rules_all_reported(validator) -> None:
    # Arrange
    raw = {"dob_day": "ab", "dob_month": "", "dob_year": "1950"}

    # Act
    result = validator.validate("step-6", raw)

    # Assert
    assert result.errors == {
        "dob_day": ["Day of birth must be a number"],
        "dob_month": ["Enter a month of birth"],
    }


def test_every_field_error_reported(validator) -> None:
    result = validator.validate("step-5", {"first_name": " ", "last_name": ""})

    assert result.errors == {
        "first_name": ["Enter your first name."],
        "last_name": ["Enter your last name."],
    }


def test_escape_applied_to_cleaned_value(validator) -> None:
    result = validator.validate("step-7", {"contact_telephone_number": " <020 8356> ", "email": ""})

    assert result.valid is True
    assert result.cleaned["contact_telephone_number"] == "&lt;020 8356&gt;"


def test_names_are_trimmed_but_not_escaped(validator) -> None:
    result = validator.validate("step-5", {"first_name": " O'Brien ", "last_name": "Smith & Sons"})

    assert result.valid is True
    assert result.cleaned["first_name"] == "O'Brien"
    assert result.cleaned["last_name"] == "Smith & Sons"


def test_multi_select_with_one_choice(validator) -> None:
    result = validator.validate("step-3", {"what_coronavirus_help": ["accessing food"]})

    assert result.valid is True


def test_multi_select_with_blank_choices(validator) -> None:
    result = validator.validate("step-3", {"what_coronavirus_help": ["", " "]})

    assert result.errors == {"what_coronavirus_help": ["Select what you need help with."]}


def test_email_is_free_text(validator) -> None:
    base = {"contact_telephone_number": "020 8356 3000"}

    assert validator.validate("step-7", base).valid is True
    assert validator.validate("step-7", {**base, "email": "ada"}).valid is True
    assert validator.validate("step-1-3", {"on_behalf_email_address": "not an address"}).valid is True


def test_cleaned_only_holds_the_steps_fields(validator) -> None:
    result = validator.validate("step-5", {"first_name": "Ada", "last_name": "L", "is_on_behalf": "false"})

    assert "is_on_behalf" not in result.cleaned


def test_step_without_rules_is_always_valid(validator) -> None:
    assert validator.validate("step-8", {}).valid is True


def test_unknown_step(validator) -> None:
    with pytest.raises(UnknownStepError):
        validator.validate("step-99", {})


def test_unknown_check_name_is_a_definition_error() -> None:
    # Arrange
    wizard = WizardDefinition(
        meta=WizardMeta(id="t", name="t"),
        steps=[
            StepDefinition(
                id="a",
                template="a",
                fields=[FieldSpec("x")],
                rules=[FieldRule(field="x", message="m", check="is_prime")],
                transitions=[TransitionRule(when=None, complete=True)],
            )
        ],
    )

    # Act / Assert
    with pytest.raises(WizardDefinitionError, match="is_prime"):
        FieldValidator(wizard).validate("a", {"x": "7"})
