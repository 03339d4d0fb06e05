import logging

from datetime import datetime, timezone
from fastapi import HTTPException, Request, status
from pydantic import BaseModel, Field

from .availability_manager import CamelCaseModel
from ..assistant.message_templates import PromptCrafter, PromptScenario
from ..dependencies.dependency_container import (
    MongoDbBaseClass,
    OpenAIBaseClass,
    dependency_container,
)
from ..internal.schemas import (
    CHAT_HISTORIES_COLLECTION_NAME,
    CHAT_HISTORY_CAP,
    CHAT_PROMPT_HISTORY_WINDOW,
    PERSONALITY_RESULTS_COLLECTION_NAME,
    WALLET_ADDRESS_KEY,
    ChatRole,
    ResponseLanguage,
)
from ..internal.utilities import general_utilities

class ChatPayload(CamelCaseModel):
    wallet_address: str | None = None
    user_message: str | None = None

class WalletAddressPayload(CamelCaseModel):
    wallet_address: str | None = None

class PersonalityAnswer(BaseModel):
    question: str
    answer: str = Field(..., min_length=1)

class PersonalityAnalysisPayload(BaseModel):
    data: list[PersonalityAnswer] = Field(..., min_length=1)

class PersonalityTestPayload(CamelCaseModel):
    wallet_address: str | None = None
    personality_analysis: dict | str | None = None
    recommended_therapist: dict | str | None = None

class AssistantManager:

    NO_PERSONALITY_TEST_CODE = "NO_PERSONALITY_TEST"

    def __init__(self):
        self.prompt_crafter = PromptCrafter()

    async def chat(
        self,
        request: Request,
        wallet_address: str,
        user_message: str,
    ) -> str:
        """
        Generates a personalized reply for the incoming message and appends both turns to the chat history.
        Returns the assistant's reply.

        Arguments:
        request – the upstream request object.
        wallet_address – the wallet identifying the user.
        user_message – the user's message.
        """
        personality_result = await self._retrieve_personality_result(request=request,
                                                                     wallet_address=wallet_address)
        if personality_result is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={
                    "error": "Please complete the personality test before starting a chat",
                    "code": self.NO_PERSONALITY_TEST_CODE,
                }
            )

        response_language = (
            ResponseLanguage.HINDI if general_utilities.is_hindi_text(user_message)
            else ResponseLanguage.ENGLISH
        )
        previous_messages = await self.retrieve_chat_history(request=request,
                                                             wallet_address=wallet_address)
        conversation_history = self.prompt_crafter.flatten_conversation_history(
            previous_messages[-CHAT_PROMPT_HISTORY_WINDOW:]
        )
        system_prompt_template = self.prompt_crafter.get_system_message_for_scenario(
            PromptScenario.CHAT,
            response_language=response_language
        )

        openai_client: OpenAIBaseClass = dependency_container.inject_openai_client()
        bot_response = await openai_client.generate_chat_reply(
            system_prompt_template=system_prompt_template,
            context=personality_result.get("contextParagraph") or "",
            conversation_history=conversation_history,
            query_input=user_message
        )

        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        await mongo_db_client.append_chat_messages(
            request=request,
            wallet_address=wallet_address,
            messages=[
                {"role": ChatRole.USER.value, "message": user_message},
                {"role": ChatRole.ASSISTANT.value, "message": bot_response},
            ],
            cap=CHAT_HISTORY_CAP
        )
        logging.info(f"[chat] Replied in {response_language.value}, history window: {len(previous_messages)}")
        return bot_response

    async def retrieve_chat_history(
        self,
        request: Request,
        wallet_address: str,
    ) -> list[dict]:
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        chat_history = await mongo_db_client.find_one(
            request=request,
            filters={WALLET_ADDRESS_KEY: wallet_address},
            collection_name=CHAT_HISTORIES_COLLECTION_NAME
        )
        if chat_history is None:
            return []
        return chat_history.get("messages", [])

    async def analyze_personality(
        self,
        answers: list[PersonalityAnswer],
    ) -> dict:
        user_prompt = self.prompt_crafter.get_user_message_for_scenario(
            PromptScenario.PERSONALITY_ANALYSIS,
            answers=[answer.model_dump() for answer in answers]
        )

        openai_client: OpenAIBaseClass = dependency_container.inject_openai_client()
        analysis = await openai_client.trigger_async_chat_completion(
            messages=[{"role": "user", "content": user_prompt}],
            expects_json_response=True,
            max_tokens=openai_client.ANALYSIS_MAX_OUTPUT_TOKENS,
            temperature=openai_client.CHAT_TEMPERATURE
        )

        if (not isinstance(analysis, dict)
            or not analysis.get("personalityAnalysis")
            or not analysis.get("recommendedTherapist")):
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail="Invalid analysis format")
        return {
            "personalityAnalysis": analysis["personalityAnalysis"],
            "recommendedTherapist": analysis["recommendedTherapist"],
        }

    async def save_personality_test(
        self,
        request: Request,
        wallet_address: str,
        personality_analysis: dict | str | None,
        recommended_therapist: dict | str | None,
    ) -> str:
        """
        Generates the context paragraph for a user's personality analysis and stores it.
        Returns the generated paragraph.

        Arguments:
        request – the upstream request object.
        wallet_address – the wallet identifying the user.
        personality_analysis – the analysis produced by the personality assessment.
        recommended_therapist – the recommended therapist type and approach.
        """
        system_prompt = self.prompt_crafter.get_system_message_for_scenario(
            PromptScenario.PERSONALITY_CONTEXT,
            personality_analysis=personality_analysis,
            recommended_therapist=recommended_therapist
        )

        openai_client: OpenAIBaseClass = dependency_container.inject_openai_client()
        context_paragraph = await openai_client.trigger_async_chat_completion(
            messages=[{"role": "system", "content": system_prompt}],
            expects_json_response=False
        )

        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        await mongo_db_client.upsert(
            request=request,
            filters={WALLET_ADDRESS_KEY: wallet_address},
            payload={
                "contextParagraph": context_paragraph,
                "createdAt": datetime.now(timezone.utc),
            },
            collection_name=PERSONALITY_RESULTS_COLLECTION_NAME
        )
        return context_paragraph

    async def fetch_context(
        self,
        request: Request,
        wallet_address: str,
    ) -> str | None:
        personality_result = await self._retrieve_personality_result(request=request,
                                                                     wallet_address=wallet_address)
        if personality_result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail="No context found for this wallet address")
        return personality_result.get("contextParagraph")

    # Private

    async def _retrieve_personality_result(
        self,
        request: Request,
        wallet_address: str,
    ) -> dict | None:
        mongo_db_client: MongoDbBaseClass = dependency_container.inject_mongo_db_client()
        return await mongo_db_client.find_one(
            request=request,
            filters={WALLET_ADDRESS_KEY: wallet_address},
            collection_name=PERSONALITY_RESULTS_COLLECTION_NAME
        )
