import os

from abc import ABC, abstractmethod

class OpenAIBaseClass(ABC):

    DEFAULT_LLM_MODEL = "llama-3.3-70b-versatile"
    ANALYSIS_MAX_OUTPUT_TOKENS = 1024
    CHAT_TEMPERATURE = 0.7

    @property
    def llm_model(self) -> str:
        return os.environ.get("LLM_MODEL") or self.DEFAULT_LLM_MODEL

    @abstractmethod
    async def trigger_async_chat_completion(
        self,
        messages: list,
        expects_json_response: bool,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> dict | str:
        """
        Invokes a chat completion asynchronously.

        Arguments:
        messages – the set of message prompts.
        expects_json_response – flag determining whether the completion should be parsed as a JSON object.
        max_tokens – the optional max tokens allowed for the response output.
        temperature – the optional sampling temperature.
        """
        pass

    @abstractmethod
    async def generate_chat_reply(
        self,
        system_prompt_template: str,
        context: str,
        conversation_history: str,
        query_input: str,
    ) -> str:
        """
        Generates a personalized conversational reply.

        Arguments:
        system_prompt_template – the system prompt, with `{context}` and `{conversation_history}` placeholders.
        context – the user's personality context paragraph.
        conversation_history – the flattened recent conversation.
        query_input – the user's current message.
        """
        pass
