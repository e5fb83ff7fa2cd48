import pytest

from conftest import CLOUD_URL, LOCAL_URL, cloud_generated, local_generated, ok
from fivefan.backends import (
    CloudBackendClient, GenerationOptions, HistoryTurn, LocalBackendClient, recent_history,
)
from fivefan.config import CloudBackendConfig
from fivefan.errors import TransportError

LOCAL_GENERATE = f"{LOCAL_URL}/api/generate"
LOCAL_TAGS = f"{LOCAL_URL}/api/tags"
CLOUD_CHAT = f"{CLOUD_URL}/v1/chat/completions"
CLOUD_MODELS = f"{CLOUD_URL}/v1/models"

HISTORY = [
    {"from": "user", "text": "one"},
    {"from": "hear", "text": "two"},
    {"from": "user", "text": "three"},
    {"from": "hear", "text": "four"},
    {"role": "user", "content": "five"},
    {"role": "assistant", "content": "six"},
    {"from": "user", "text": "seven"},
]


@pytest.fixture
def local(local_settings, transport):
    return LocalBackendClient(local_settings, transport)


@pytest.fixture
def cloud(cloud_settings, transport):
    return CloudBackendClient(cloud_settings, transport)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

def test_recent_history_keeps_newest_in_order():
    turns = recent_history(HISTORY, 3)
    assert [t.text for t in turns] == ["five", "six", "seven"]


def test_recent_history_skips_unusable_items():
    turns = recent_history([None, {"from": "user"}, "text", HistoryTurn("user", "ok")], 5)
    assert turns == [HistoryTurn("user", "ok")]


def test_history_roles():
    assert HistoryTurn("hear", "x").role == "assistant"
    assert HistoryTurn("assistant", "x").role == "assistant"
    assert HistoryTurn("sam", "x").role == "user"
    assert HistoryTurn("system", "x").role == "system"
    assert HistoryTurn.coerce({"role": "system", "content": "be brief"}).role == "system"


# ---------------------------------------------------------------------------
# Local backend
# ---------------------------------------------------------------------------

def test_local_payload_shape(local, transport):
    transport.route(LOCAL_GENERATE, local_generated("  You are stronger than you know.  "))
    text = local.generate("persona", "I failed my exam", HISTORY, voice="inspyre")

    assert text == "You are stronger than you know."
    call = transport.calls_to(LOCAL_GENERATE)[0]
    assert call["method"] == "POST"
    assert call["timeout"] == 30.0
    body = call["body"]
    assert body["model"] == "llama3.2:3b"
    assert body["system"] == "persona"
    assert body["stream"] is False
    assert body["options"] == {"temperature": 0.7, "top_p": 0.9, "num_predict": 50}
    assert body["prompt"] == (
        "Recent conversation:\n"
        "user: five\n"
        "assistant: six\n"
        "user: seven\n"
        "\n"
        "User: I failed my exam\n"
        "\n"
        "Respond as inspyre:"
    )


def test_local_prompt_without_history(local, transport):
    transport.route(LOCAL_GENERATE, local_generated("ok"))
    local.generate("persona", "hello", voice="hear")
    assert transport.calls[0]["body"]["prompt"] == "User: hello\n\nRespond as hear:"


def test_local_options_override(local, transport):
    transport.route(LOCAL_GENERATE, local_generated("ok"))
    local.generate("p", "m", options=GenerationOptions(model="phi3", max_tokens=12,
                                                      temperature=0.0, top_p=0.5, timeout=2))
    call = transport.calls[0]
    assert call["timeout"] == 2
    assert call["body"]["model"] == "phi3"
    assert call["body"]["options"] == {"temperature": 0.0, "top_p": 0.5, "num_predict": 12}


@pytest.mark.parametrize("answer", [
    TransportError("timed out", timed_out=True),
    TransportError("connection refused"),
    ok({"error": "model not found"}, status=404),
    ok(None),
    ok({"done": True}),
    ok({"response": "   "}),
    ok({"response": 42}),
    ok(["not", "a", "dict"]),
])
def test_local_failures_return_none(local, transport, answer):
    transport.route(LOCAL_GENERATE, answer)
    assert local.generate("p", "m") is None


def test_local_probe_and_models(local, transport):
    transport.route(LOCAL_TAGS, ok({"models": [{"name": "llama3.2:3b"}, {"model": "phi3"}, {}]}))
    assert local.probe() is True
    assert local.list_models() == ["llama3.2:3b", "phi3"]
    assert transport.calls[0]["timeout"] == 5.0


def test_local_probe_down(local, transport):
    assert local.probe() is False
    assert local.list_models() == []


# ---------------------------------------------------------------------------
# Cloud backend
# ---------------------------------------------------------------------------

def test_cloud_payload_shape(cloud, transport):
    transport.route(CLOUD_CHAT, cloud_generated("Breathe. You've got this."))
    text = cloud.generate("persona", "big day tomorrow", HISTORY)

    assert text == "Breathe. You've got this."
    call = transport.calls_to(CLOUD_CHAT)[0]
    assert call["method"] == "POST"
    assert call["headers"] == {"Authorization": "Bearer sk-test"}
    assert call["timeout"] == 15.0
    body = call["body"]
    assert body["model"] == "llama-3.3-70b-versatile"
    assert body["max_tokens"] == 200
    assert body["temperature"] == 0.7
    assert body["stream"] is False
    assert body["messages"][0] == {"role": "system", "content": "persona"}
    assert [m["content"] for m in body["messages"][1:]] == [
        "two", "three", "four", "five", "six", "seven", "big day tomorrow",
    ]
    assert body["messages"][1]["role"] == "assistant"
    assert body["messages"][-1]["role"] == "user"


@pytest.mark.parametrize("answer", [
    TransportError("timed out", timed_out=True),
    ok({"error": {"message": "invalid api key"}}, status=401),
    ok({"choices": []}),
    ok({"choices": [{"message": {}}]}),
    ok({"choices": [{"message": {"content": ""}}]}),
    ok({"choices": "nope"}),
])
def test_cloud_failures_return_none(cloud, transport, answer):
    transport.route(CLOUD_CHAT, answer)
    assert cloud.generate("p", "m") is None


def test_cloud_unconfigured_makes_no_call(transport):
    cloud = CloudBackendClient(CloudBackendConfig(url=CLOUD_URL, api_key=""), transport)
    assert cloud.configured is False
    assert cloud.generate("p", "m") is None
    assert cloud.probe() is False
    assert cloud.list_models() == []
    assert transport.calls == []


def test_cloud_models_capped(cloud, transport):
    transport.route(CLOUD_MODELS, ok({"data": [{"id": f"m{i}"} for i in range(30)]}))
    models = cloud.list_models()
    assert len(models) == 20
    assert models[0] == "m0"
    assert transport.calls[0]["headers"] == {"Authorization": "Bearer sk-test"}


@pytest.mark.parametrize("url, name", [
    ("https://api.groq.com/openai", "Groq"),
    ("https://openrouter.ai/api", "OpenRouter"),
    ("https://api.together.xyz", "Together.ai"),
    ("https://api.openai.com", "OpenAI"),
    ("https://llm.example.org", "Unknown"),
])
def test_provider_name(url, name, transport):
    cloud = CloudBackendClient(CloudBackendConfig(url=url, api_key="k"), transport)
    assert cloud.provider_name() == name


# ---------------------------------------------------------------------------
# Self-test
# ---------------------------------------------------------------------------

def test_self_test_reports_hello(local, transport):
    transport.route(LOCAL_TAGS, ok({"models": [{"name": "llama3.2:3b"}]}))
    transport.route(LOCAL_GENERATE, local_generated("Hello there."))
    report = local.self_test()
    assert report.available is True
    assert report.model == "llama3.2:3b"
    assert report.response == "Hello there."
    assert transport.calls_to(LOCAL_GENERATE)[0]["body"]["options"]["num_predict"] == 30


def test_self_test_unreachable(local):
    report = local.self_test()
    assert report.configured is True
    assert report.available is False
    assert report.response is None


def test_cloud_keeps_explicit_chat_roles(cloud, transport):
    transport.route(CLOUD_CHAT, cloud_generated("ok"))
    cloud.generate("persona", "hi", [
        {"role": "system", "content": "Keep it under ten words."},
        {"role": "assistant", "content": "Hello."},
        {"role": "user", "content": "hey"},
    ])
    messages = transport.calls_to(CLOUD_CHAT)[0]["body"]["messages"]
    assert [m["role"] for m in messages] == ["system", "system", "assistant", "user", "user"]
