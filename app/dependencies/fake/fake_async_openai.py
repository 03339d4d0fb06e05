from ..api.openai_base_class import OpenAIBaseClass

FAKE_ASSISTANT_RESPONSE = "This is my fake response"
FAKE_CONTEXT_PARAGRAPH = "This user is thoughtful and prefers calm, structured conversations."
FAKE_PERSONALITY_ANALYSIS = {
    "personalityAnalysis": {
        "personalityTraits": "Introspective and curious",
        "communicationStyle": "Direct but warm",
        "behavioralPatterns": "Plans ahead, avoids conflict",
    },
    "recommendedTherapist": {
        "typeOfTherapist": "Cognitive Behavioral Therapist",
        "therapeuticApproach": "CBT",
    },
}

class FakeAsyncOpenAI(OpenAIBaseClass):

    throws_exception = False
    returns_malformed_analysis = False

    def __init__(self):
        self.last_chat_invocation: dict | None = None

    async def trigger_async_chat_completion(
        self,
        messages: list,
        expects_json_response: bool,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> dict | str:
        if self.throws_exception:
            raise Exception("Fake exception")

        if expects_json_response:
            if self.returns_malformed_analysis:
                return {"personalityAnalysis": FAKE_PERSONALITY_ANALYSIS["personalityAnalysis"]}
            return dict(FAKE_PERSONALITY_ANALYSIS)

        return FAKE_CONTEXT_PARAGRAPH

    async def generate_chat_reply(
        self,
        system_prompt_template: str,
        context: str,
        conversation_history: str,
        query_input: str,
    ) -> str:
        if self.throws_exception:
            raise Exception("Fake exception")

        self.last_chat_invocation = {
            "system_prompt_template": system_prompt_template,
            "context": context,
            "conversation_history": conversation_history,
            "query_input": query_input,
        }
        return FAKE_ASSISTANT_RESPONSE
