from types import SimpleNamespace

import pytest
from langchain_core.messages import HumanMessage

from askdata.config import Settings
from askdata.llm_service import LLMService, ModelCallError


class _StubChat:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)


@pytest.fixture()
def service():
    return LLMService(Settings(database_url="sqlite://", llm_api_key="test-key", llm_timeout=5))


def test_client_is_built_without_its_own_retries(service):
    assert service.client.max_retries == 0
    assert service.client.model_name == "gemini-2.0-flash"


def test_generate_sends_one_human_message(service):
    stub = _StubChat(content="  SQL: SELECT 1\nExplanation: x\nChart: bar \n")
    service.client = stub

    reply = service.generate("the prompt")

    assert reply == "SQL: SELECT 1\nExplanation: x\nChart: bar"
    assert len(stub.calls) == 1
    (message,) = stub.calls[0]
    assert isinstance(message, HumanMessage)
    assert message.content == "the prompt"


def test_generate_joins_content_parts(service):
    service.client = _StubChat(content=[{"type": "text", "text": "SQL: SELECT 1"}, "\nChart: bar"])

    assert service.generate("p") == "SQL: SELECT 1\nChart: bar"


def test_transport_errors_become_model_call_errors(service):
    service.client = _StubChat(error=ConnectionError("connection reset"))

    with pytest.raises(ModelCallError) as excinfo:
        service.generate("p")

    assert "connection reset" in str(excinfo.value)
