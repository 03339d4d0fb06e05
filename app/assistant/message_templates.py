import json

from enum import Enum

from ..internal.schemas import ResponseLanguage

class PromptScenario(Enum):
    # keep sorted A-Z
    CHAT = "chat"
    PERSONALITY_ANALYSIS = "personality_analysis"
    PERSONALITY_CONTEXT = "personality_context"
    UNDEFINED = "undefined"

class PromptCrafter:

    NO_PREVIOUS_CONVERSATION = "No previous conversation"

    def get_system_message_for_scenario(self, scenario: PromptScenario, **kwargs) -> str:
        if scenario == PromptScenario.UNDEFINED:
            raise Exception("Received undefined prompt scenario for retrieving the system message")

        if scenario == PromptScenario.CHAT:
            response_language = kwargs.get('response_language', ResponseLanguage.ENGLISH)
            return self._create_chat_system_message(response_language=response_language)
        elif scenario == PromptScenario.PERSONALITY_CONTEXT:
            personality_analysis = kwargs.get('personality_analysis')
            recommended_therapist = kwargs.get('recommended_therapist')
            return self._create_personality_context_system_message(personality_analysis=personality_analysis,
                                                                   recommended_therapist=recommended_therapist)
        else:
            raise Exception("Untracked prompt scenario for retrieving the system message")

    def get_user_message_for_scenario(self, scenario: PromptScenario, **kwargs) -> str:
        if scenario == PromptScenario.UNDEFINED:
            raise Exception("Received undefined prompt scenario for retrieving the user message")

        if scenario == PromptScenario.PERSONALITY_ANALYSIS:
            answers = kwargs.get('answers')
            return self._create_personality_analysis_user_message(answers=answers)
        else:
            raise Exception("Untracked prompt scenario for retrieving the user message")

    def flatten_conversation_history(self, messages: list[dict]) -> str:
        """
        Renders role-tagged messages as `role: message` lines, one per message.
        """
        if len(messages or []) == 0:
            return self.NO_PREVIOUS_CONVERSATION
        return "\n".join([f"{message['role']}: {message['message']}" for message in messages])

    # Chat Prompt

    def _create_chat_system_message(self, response_language: ResponseLanguage) -> str:
        if response_language == ResponseLanguage.HINDI:
            language_instruction = "अपने उत्तर हिंदी में दें।"
        else:
            language_instruction = "Respond in English."

        return (
            "You are a helpful AI assistant personalized for this user. Here is important context about the user:\n"
            "{context}\n\n"
            "Previous conversation context (if any):\n"
            "{conversation_history}\n\n"
            "Please provide a response that:\n"
            "1. Takes into account the user's personality and preferences.\n"
            "2. Maintains consistency with previous conversations.\n"
            "3. Is helpful and relevant to the current query.\n"
            "4. Does not exceed 2-3 sentences.\n"
            "5. Builds the conversation as their therapist and makes them feel secure, instead of suggesting they reach out to a therapist.\n"
            "6. Never says things like \"Based on your preferences\" or \"According to the context\"; talk like a normal conversation.\n"
            f"7. {language_instruction}"
        )

    # Personality Prompts

    def _create_personality_context_system_message(self,
                                                   personality_analysis,
                                                   recommended_therapist) -> str:
        assert personality_analysis is not None, "Missing personality_analysis param for building system message"

        return (
            "You are a highly empathetic AI therapist with expertise in personalized therapy. "
            f"Your client has the following personality traits: {json.dumps(personality_analysis)}. "
            "Based on these traits, provide tailored therapeutic guidance and recommendations. "
            f"If required, suggest a therapist specializing in {json.dumps(recommended_therapist)}. "
            "Ensure your responses are supportive, understanding, and insightful."
        )

    def _create_personality_analysis_user_message(self, answers: list[dict]) -> str:
        assert len(answers or []) > 0, "Missing answers param for building user message"

        formatted_answers = "\n\n".join(
            [f"Question: {answer['question']}\nAnswer: {answer['answer']}" for answer in answers]
        )
        return (
            "As an expert psychologist, analyze the following personality assessment responses "
            "and provide a detailed analysis in the following JSON format:\n"
            "{\n"
            '  "personalityAnalysis": {\n'
            '    "personalityTraits": "A detailed description of the individual\'s personality traits",\n'
            '    "communicationStyle": "A detailed description of the individual\'s communication style",\n'
            '    "behavioralPatterns": "A detailed description of the individual\'s behavioral patterns"\n'
            "  },\n"
            '  "recommendedTherapist": {\n'
            '    "typeOfTherapist": "The specific type of therapist recommended",\n'
            '    "therapeuticApproach": "The therapeutic approach that would be most beneficial"\n'
            "  }\n"
            "}\n\n"
            f"Here are the responses:\n\n{formatted_answers}\n\n"
            "Please ensure that the analysis is constructive and empathetic."
        )
