import pytest

from fiszki.client.edit_form import FlashcardEditForm, SourceTextValidation
from fiszki.models.flashcard import FlashcardProposalViewModel


@pytest.fixture
def proposal():
    return FlashcardProposalViewModel(
        id="proposal-1",
        front="What is photosynthesis?",
        back="Conversion of light into chemical energy",
        is_edited=False,
        source="ai-full",
        is_accepted=True,
    )


def test_form_is_seeded_from_proposal(proposal):
    form = FlashcardEditForm(proposal)

    assert form.front == proposal.front
    assert form.back == proposal.back
    assert form.errors == {}
    assert form.is_valid is True


def test_empty_front_is_required(proposal):
    form = FlashcardEditForm(proposal)
    form.front = ""
    form.validate_front()

    assert form.errors["front"] == "Przód fiszki jest wymagany"
    assert form.is_valid is False


def test_front_too_long(proposal):
    form = FlashcardEditForm(proposal)
    form.front = "x" * 201
    form.validate_front()

    assert form.errors["front"] == "Przód fiszki nie może przekraczać 200 znaków"
    assert form.is_valid is False


def test_back_errors_are_independent(proposal):
    form = FlashcardEditForm(proposal)
    form.back = "y" * 501
    form.validate_back()

    assert form.errors == {"back": "Tył fiszki nie może przekraczać 500 znaków"}

    form.back = ""
    form.validate_back()
    assert form.errors == {"back": "Tył fiszki jest wymagany"}


def test_fixing_fields_clears_errors(proposal):
    form = FlashcardEditForm(proposal)
    form.front = ""
    form.validate_front()
    form.front = "Valid front"
    form.back = "Valid back"
    form.validate_front()
    form.validate_back()

    assert form.errors == {}
    assert form.is_valid is True


def test_whitespace_only_field_is_invalid_but_not_flagged(proposal):
    form = FlashcardEditForm(proposal)
    form.front = "   "
    form.validate_front()

    assert "front" not in form.errors
    assert form.is_valid is False


def test_initialize_form_resets_state(proposal):
    form = FlashcardEditForm(proposal)
    form.front = ""
    form.validate_front()

    other = proposal.model_copy(update={"id": "proposal-2", "front": "Other", "back": "Card"})
    form.initialize_form(other)

    assert (form.front, form.back) == ("Other", "Card")
    assert form.errors == {}
    assert form.is_valid is True


def test_get_edited_proposal(proposal):
    form = FlashcardEditForm(proposal)
    form.front = "  Edited front  "
    form.back = "\tEdited back\n"

    edited = form.get_edited_proposal()

    assert edited.front == "Edited front"
    assert edited.back == "Edited back"
    assert edited.is_edited is True
    assert edited.source == "ai-edited"
    assert edited.id == proposal.id
    assert edited.is_accepted is True
    # the proposal passed in is left untouched
    assert proposal.source == "ai-full"
    assert proposal.is_edited is False


def test_source_text_validation():
    validation = SourceTextValidation()

    assert validation.validate_text("   ") is False
    assert validation.error_message == "Tekst jest wymagany"

    assert validation.validate_text("a" * 999) is False
    assert validation.error_message == "Tekst musi mieć co najmniej 1000 znaków (obecnie: 999)"

    assert validation.validate_text("a" * 10001) is False
    assert validation.error_message == "Tekst nie może przekraczać 10000 znaków (obecnie: 10001)"

    assert validation.validate_text("  " + "a" * 1000 + "  ") is True
    assert validation.character_count == 1000
    assert validation.error_message is None
