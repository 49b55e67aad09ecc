"""Unit tests for RequestComposer."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import pytest
from models.conversation import Turn
from models.request import ComposedRequest, MessagePart
from services.request_composer import EmptyInputError, RequestComposer

PREAMBLE = "You answer medical questions only."


@pytest.fixture
def composer():
    return RequestComposer(PREAMBLE)


class TestRequestComposer:
    """Test suite for RequestComposer."""

    def test_empty_history_yields_only_new_message(self, composer):
        """Test that an empty transcript produces a single user message."""
        request = composer.compose([], "What causes migraines?")

        assert request.contents == (MessagePart(role="user", text="What causes migraines?"),)
        assert request.system_instruction == PREAMBLE

    def test_history_roles_are_mapped(self, composer):
        """Test that user maps to 'user' and assistant maps to 'model'."""
        history = [
            Turn.assistant("Hello! I'm a medical information assistant."),
            Turn.user("Is aspirin a blood thinner?"),
            Turn.assistant("Aspirin has antiplatelet effects."),
        ]

        request = composer.compose(history, "What about ibuprofen?")

        assert [part.role for part in request.contents] == ["model", "user", "model", "user"]
        assert request.contents[-1].text == "What about ibuprofen?"
        assert request.contents[2].text == "Aspirin has antiplatelet effects."

    def test_error_turns_are_sent_as_model_turns(self, composer):
        history = [Turn.user("hi"), Turn.assistant("Sorry, there was an error: boom. Please try again.", error=True)]

        request = composer.compose(history, "hi again")

        assert request.contents[1].role == "model"
        assert len(request.contents) == 3

    def test_new_text_is_trimmed(self, composer):
        request = composer.compose([], "   fever and chills \n")
        assert request.contents[-1].text == "fever and chills"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_input_raises(self, composer, text):
        """Test that blank input is rejected before anything is built."""
        with pytest.raises(EmptyInputError):
            composer.compose([Turn.user("earlier")], text)

    def test_compose_is_idempotent(self, composer):
        """Test that composing twice from the same inputs gives equal requests."""
        history = (Turn.user("a"), Turn.assistant("b"))

        first = composer.compose(history, "c")
        second = composer.compose(history, "c")

        assert first == second
        assert first.to_payload() == second.to_payload()

    def test_payload_shape(self, composer):
        """Test the JSON body fragment sent to generateContent."""
        request = composer.compose([Turn.user("Hi")], "Tell me about sleep hygiene")

        assert request.to_payload() == {
            "contents": [
                {"role": "user", "parts": [{"text": "Hi"}]},
                {"role": "user", "parts": [{"text": "Tell me about sleep hygiene"}]},
            ],
            "systemInstruction": {"parts": [{"text": PREAMBLE}]},
        }

    def test_composed_request_is_immutable(self, composer):
        request = composer.compose([], "hello")
        assert isinstance(request, ComposedRequest)
        with pytest.raises(AttributeError):
            request.system_instruction = "changed"
