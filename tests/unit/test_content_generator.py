import asyncio
import json

import pytest

from hanki.config import AIConfig, Config, SpeechConfig
from hanki.exceptions import ConfigurationError, GenerationError
from hanki.models import WordPair
from hanki.services import ContentGenerator, OpenAIProvider
from hanki.services.content_generator import CARD_INFO_TOOL
from tests.fixtures.fakes import FakeAIProvider, FakeHTTPResponse, FakeHTTPSession, FakeSpeechProvider
from tests.fixtures.sample_data import CARD_INFO, SENTENCE

WORDS = [WordPair(korean=k, english=e) for k, e in [
    ("먹다", "to eat"), ("학교", "school"), ("빨리", "quickly"), ("물", "water"),
]]


def make_generator(responses, speech=None, config=None):
    config = config or Config(ai=AIConfig(api_key="k", base_url="http://ai.test/v1"))
    return ContentGenerator(config, ai_provider=FakeAIProvider(responses), speech_provider=speech or FakeSpeechProvider())


@pytest.mark.unit
def test_generate_fields_strips_identity_keys():
    payload = dict(CARD_INFO, front="X", back="Y", image="img.png", audio="[sound:a.mp3]")
    generator = make_generator({"generateKoreanCardInfo": payload})

    fields = asyncio.run(generator.generate_fields("먹다", "to eat"))

    assert fields.as_dict() == CARD_INFO
    for key in ("front", "back", "image", "audio"):
        assert key not in fields.as_dict()


@pytest.mark.unit
def test_generate_fields_drops_empty_values():
    generator = make_generator({"generateKoreanCardInfo": {"type": "noun", "conjugations": "  "}})
    fields = asyncio.run(generator.generate_fields("학교", "school"))
    assert fields.as_dict() == {"type": "noun"}


@pytest.mark.unit
def test_generate_fields_prompt_names_word_and_meaning(ai, generator):
    asyncio.run(generator.generate_fields("먹다", "to eat"))
    assert ai.calls[0]["tool"] == "generateKoreanCardInfo"
    assert '"먹다"' in ai.calls[0]["prompt"]
    assert '"to eat"' in ai.calls[0]["prompt"]


@pytest.mark.unit
def test_generate_fields_without_tool_call_fails():
    generator = make_generator({"generateKoreanCardInfo": None})
    with pytest.raises(GenerationError):
        asyncio.run(generator.generate_fields("먹다", "to eat"))


@pytest.mark.unit
def test_selection_drops_out_of_range_indices_and_keeps_order():
    generator = make_generator({"selectWords": {"selectedIndices": [5, 3, 0, 2, -1], "reason": "food"}})
    selected = asyncio.run(generator.select_combinable_words(WORDS))
    assert selected == [WORDS[3], WORDS[0], WORDS[2]]


@pytest.mark.unit
@pytest.mark.parametrize("response", [
    None,
    {"reason": "no indices"},
    {"selectedIndices": "0,1"},
    {"selectedIndices": [7, 9]},
])
def test_selection_without_usable_indices_fails(response):
    generator = make_generator({"selectWords": response})
    with pytest.raises(GenerationError):
        asyncio.run(generator.select_combinable_words(WORDS))


@pytest.mark.unit
def test_compose_sentence():
    generator = make_generator({"generateSentence": SENTENCE})
    sentence = asyncio.run(generator.compose_sentence(WORDS[:3]))
    assert sentence.korean == "학교에서 밥을 빨리 먹어요."
    assert sentence.grammar_notes.startswith("-에서")


@pytest.mark.unit
def test_compose_sentence_missing_field_fails():
    generator = make_generator({"generateSentence": {"korean": "물 주세요.", "english": "Water, please."}})
    with pytest.raises(GenerationError, match="missing required fields"):
        asyncio.run(generator.compose_sentence(WORDS))


@pytest.mark.unit
def test_speech_without_configuration_makes_no_request():
    speech = FakeSpeechProvider()
    config = Config(ai=AIConfig(api_key="k", base_url="u"), speech=SpeechConfig(api_key="e"))
    generator = make_generator({}, speech=speech, config=config)

    with pytest.raises(ConfigurationError) as excinfo:
        asyncio.run(generator.synthesize_speech("먹다"))

    assert speech.calls == []
    assert "ELEVEN_VOICE_ID" in str(excinfo.value)
    assert "ELEVEN_MODEL_ID" in str(excinfo.value)


@pytest.mark.unit
@pytest.mark.parametrize("stream", [True, False])
def test_speech_is_written_to_temp_file(config, stream):
    speech = FakeSpeechProvider(data=b"0123456789abcdef", stream=stream)
    generator = make_generator({}, speech=speech, config=config)

    path = asyncio.run(generator.synthesize_speech("먹다"))
    try:
        assert path.read_bytes() == b"0123456789abcdef"
        assert path.suffix == ".mp3"
    finally:
        path.unlink()
    assert speech.calls == [{"text": "먹다", "voice_id": "voice-1", "model_id": "model-1"}]


@pytest.mark.unit
def test_extract_arguments_decodes_tool_call():
    body = {"choices": [{"message": {"tool_calls": [
        {"function": {"name": "selectWords", "arguments": json.dumps({"selectedIndices": [1]})}}
    ]}}]}
    assert OpenAIProvider.extract_arguments(body) == {"selectedIndices": [1]}


@pytest.mark.unit
def test_extract_arguments_without_tool_call_is_none():
    body = {"choices": [{"message": {"content": "Sure! Here are some words."}}]}
    assert OpenAIProvider.extract_arguments(body) is None


@pytest.mark.unit
def test_extract_arguments_rejects_invalid_json():
    body = {"choices": [{"message": {"tool_calls": [{"function": {"arguments": "{not json"}}]}}]}
    with pytest.raises(GenerationError):
        OpenAIProvider.extract_arguments(body)


@pytest.mark.unit
def test_selection_keeps_service_order_of_valid_indices():
    generator = make_generator({"selectWords": {"selectedIndices": [5, 0, 2]}})
    assert asyncio.run(generator.select_combinable_words(WORDS)) == [WORDS[0], WORDS[2]]


def make_openai_provider(body, status=200):
    provider = OpenAIProvider(AIConfig(api_key="k", base_url="http://ai.test/v1/"))
    provider._session = FakeHTTPSession(FakeHTTPResponse(status, body))
    return provider


@pytest.mark.unit
def test_card_info_tool_requires_catalogue_keys():
    parameters = CARD_INFO_TOOL.to_tool()["function"]["parameters"]
    assert parameters["required"] == ["type"]
    assert "verb" in parameters["properties"]["type"]["enum"]


@pytest.mark.unit
def test_openai_request_forces_the_tool_call():
    body = json.dumps({"choices": [{"message": {"tool_calls": [
        {"function": {"name": "generateSentence", "arguments": json.dumps(SENTENCE)}}
    ]}}]})
    provider = make_openai_provider(body)
    generator = ContentGenerator(Config(ai=provider.config), ai_provider=provider, speech_provider=FakeSpeechProvider())

    sentence = asyncio.run(generator.compose_sentence(WORDS))

    post = provider._session.posts[0]
    assert post["url"] == "http://ai.test/v1/chat/completions"
    assert post["json"]["tool_choice"] == {"type": "function", "function": {"name": "generateSentence"}}
    assert sentence.english == SENTENCE["english"]


@pytest.mark.unit
def test_non_json_ai_body_is_a_generation_error():
    provider = make_openai_provider("<html>gateway hiccup</html>")
    generator = ContentGenerator(Config(ai=provider.config), ai_provider=provider, speech_provider=FakeSpeechProvider())

    with pytest.raises(GenerationError, match="invalid body"):
        asyncio.run(generator.compose_sentence(WORDS))


@pytest.mark.unit
def test_ai_http_error_is_a_generation_error():
    provider = make_openai_provider("rate limited", status=429)
    with pytest.raises(GenerationError, match="AI API error 429"):
        asyncio.run(provider.complete_structured("system", "prompt", CARD_INFO_TOOL))
