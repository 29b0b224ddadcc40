import pytest

from hanki.config import AIConfig, AnkiConnectConfig, Config, SpeechConfig
from hanki.services import AnkiConnectClient, ContentGenerator, NoteStore
from tests.fixtures.fakes import FakeAIProvider, FakeAnkiConnect, FakeSpeechProvider, make_note_info
from tests.fixtures.sample_data import CARD_INFO


@pytest.fixture
def config():
    return Config(
        anki=AnkiConnectConfig(timeout=0.5, retries=2, retry_delay=0),
        ai=AIConfig(api_key="test-key", base_url="http://ai.test/v1"),
        speech=SpeechConfig(api_key="eleven-key", voice_id="voice-1", model_id="model-1"),
    )


@pytest.fixture
def sample_notes():
    return [
        make_note_info(1001, "먹다", "to eat"),
        make_note_info(1002, "학교", "school", Examples="학교에 가요."),
        make_note_info(1003, "빨리", "quickly", tags=["adverb"]),
        make_note_info(2001, "안녕", "hello", deck="Greetings"),
    ]


@pytest.fixture
def anki(sample_notes):
    return FakeAnkiConnect(sample_notes)


@pytest.fixture
def client(config, anki):
    client = AnkiConnectClient(config.anki)
    anki.install(client)
    return client


@pytest.fixture
def store(client):
    return NoteStore(client)


@pytest.fixture
def ai():
    return FakeAIProvider({"generateKoreanCardInfo": CARD_INFO})


@pytest.fixture
def speech():
    return FakeSpeechProvider()


@pytest.fixture
def generator(config, ai, speech):
    return ContentGenerator(config, ai_provider=ai, speech_provider=speech)


class EventLog(list):
    """Collects progress payloads emitted by workflows."""

    def callback(self, payload):
        self.append(payload)

    def messages(self):
        return [payload["message"] for payload in self]


@pytest.fixture
def events():
    return EventLog()
