import pytest

from hanki.models import BatchOutcome, EnhanceSelection, GeneratedFields, Note
from hanki.utils import MediaPathGenerator, TextParser
from tests.fixtures.fakes import make_note_info
from tests.fixtures.sample_data import CARD_INFO


@pytest.mark.unit
def test_note_from_api():
    note = Note.from_api(make_note_info(7, "먹다", "to eat", tags=["verb"], Audio="[sound:a.mp3]"))

    assert note.note_id == 7
    assert note.front == "먹다"
    assert note.has_value("Audio")
    assert not note.has_value("Examples")
    assert not note.has_value("Missing")
    assert note.ordered_fields()[:2] == [("Front", "먹다"), ("Back", "to eat")]
    assert note.label(3) == "3. Front: 먹다 | Back: to eat"


@pytest.mark.unit
def test_selection_from_choices():
    selection = EnhanceSelection.from_choices(["examples", "leech", "unknown"])
    assert selection.keys == frozenset({"examples"})
    assert selection.add_review_tag
    assert EnhanceSelection.from_choices([]).is_empty


@pytest.mark.unit
def test_build_updates_uses_anki_field_names():
    generated = GeneratedFields.from_payload(CARD_INFO)
    updates = EnhanceSelection.from_choices(["relatedWordsRules", "irregularRules"]).build_updates(generated)
    assert updates == {"Related Words/Rules": "먹이다 (to feed)", "Irregular Rules": "Regular verb"}


@pytest.mark.unit
def test_build_updates_skips_values_not_generated():
    generated = GeneratedFields.from_payload({"type": "noun"})
    assert EnhanceSelection().build_updates(generated) == {"Type": "noun"}


@pytest.mark.unit
def test_batch_outcome_counts():
    outcome = BatchOutcome()
    first, second = Note(note_id=1), Note(note_id=2)
    outcome.record_success(first)
    outcome.record_failure(second, "boom")

    assert outcome.attempted == 2
    assert outcome.succeeded == 1
    assert [item.note for item in outcome.failures] == [second]


@pytest.mark.unit
def test_media_names():
    assert MediaPathGenerator.audio_filename(42, timestamp_ms=1700000000000) == "note_42_1700000000000.mp3"
    assert MediaPathGenerator.sound_tag("a.mp3") == "[sound:a.mp3]"


@pytest.mark.unit
def test_plain_text():
    assert TextParser.to_plain_text("밥을 <b>먹어요</b><br>I eat&nbsp;rice") == "밥을 먹어요\nI eat\xa0rice"
    assert TextParser.preview("a<br/>b", length=2) == "a "
