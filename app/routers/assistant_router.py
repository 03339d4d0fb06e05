from fastapi import (
    APIRouter,
    HTTPException,
    Query,
    Request,
    status
)

from ..internal.utilities import general_utilities
from ..managers.assistant_manager import (
    AssistantManager,
    ChatPayload,
    PersonalityAnalysisPayload,
    PersonalityTestPayload,
    WalletAddressPayload,
)

class AssistantRouter:

    CHAT_ENDPOINT = "/chat"
    CHAT_HISTORY_ENDPOINT = "/chat/history"
    ANALYZE_PERSONALITY_ENDPOINT = "/analyze-personality"
    PERSONALITY_TEST_ENDPOINT = "/personality-test"
    FETCH_CONTEXT_ENDPOINT = "/fetch-context"
    CHAT_ROUTER_TAG = "chat"
    PERSONALITY_ROUTER_TAG = "personality"

    def __init__(self):
        self._assistant_manager = AssistantManager()
        self.router = APIRouter()
        self._register_routes()

    def _register_routes(self):
        """
        Registers the set of routes that the class' router can access.
        """
        @self.router.post(self.CHAT_ENDPOINT, tags=[self.CHAT_ROUTER_TAG])
        async def send_chat_message(body: ChatPayload,
                                    request: Request):
            return await self._send_chat_message_internal(body=body,
                                                          request=request)

        @self.router.get(self.CHAT_HISTORY_ENDPOINT, tags=[self.CHAT_ROUTER_TAG])
        async def get_chat_history(request: Request,
                                   wallet_address: str = Query(None, alias="walletAddress")):
            return await self._get_chat_history_internal(request=request,
                                                         wallet_address=wallet_address)

        @self.router.post(self.ANALYZE_PERSONALITY_ENDPOINT, tags=[self.PERSONALITY_ROUTER_TAG])
        async def analyze_personality(body: PersonalityAnalysisPayload,
                                      request: Request):
            return await self._analyze_personality_internal(body=body,
                                                            request=request)

        @self.router.post(self.PERSONALITY_TEST_ENDPOINT,
                          tags=[self.PERSONALITY_ROUTER_TAG],
                          status_code=status.HTTP_201_CREATED)
        async def save_personality_test(body: PersonalityTestPayload,
                                        request: Request):
            return await self._save_personality_test_internal(body=body,
                                                              request=request)

        @self.router.post(self.FETCH_CONTEXT_ENDPOINT, tags=[self.PERSONALITY_ROUTER_TAG])
        async def fetch_context(body: WalletAddressPayload,
                                request: Request):
            return await self._fetch_context_internal(body=body,
                                                      request=request)

    async def _send_chat_message_internal(self,
                                          body: ChatPayload,
                                          request: Request):
        """
        Sends a user message to the personalized assistant.

        Arguments:
        body – the incoming request json body.
        request – the request object.
        """
        general_utilities.validate_wallet_address(request=request,
                                                  wallet_address=body.wallet_address,
                                                  missing_detail="Wallet address is required for personalized chat")
        if len((body.user_message or '').strip()) == 0:
            general_utilities.raise_http_exception(
                request=request,
                exception=HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                        detail="Please provide a message to continue the conversation"),
                fallback=status.HTTP_400_BAD_REQUEST,
                wallet_address=body.wallet_address
            )

        try:
            bot_response = await self._assistant_manager.chat(request=request,
                                                              wallet_address=body.wallet_address,
                                                              user_message=body.user_message)
            return {"botResponse": bot_response}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=body.wallet_address)

    async def _get_chat_history_internal(self,
                                         request: Request,
                                         wallet_address: str | None):
        general_utilities.validate_wallet_address(request=request,
                                                  wallet_address=wallet_address)

        try:
            messages = await self._assistant_manager.retrieve_chat_history(request=request,
                                                                           wallet_address=wallet_address)
            return {"messages": messages}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=wallet_address)

    async def _analyze_personality_internal(self,
                                            body: PersonalityAnalysisPayload,
                                            request: Request):
        """
        Analyzes a set of personality assessment answers.

        Arguments:
        body – the incoming request json body.
        request – the request object.
        """
        try:
            return await self._assistant_manager.analyze_personality(answers=body.data)
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR)

    async def _save_personality_test_internal(self,
                                              body: PersonalityTestPayload,
                                              request: Request):
        """
        Generates and stores the personalization context for a completed personality test.

        Arguments:
        body – the incoming request json body.
        request – the request object.
        """
        general_utilities.validate_wallet_address(request=request,
                                                  wallet_address=body.wallet_address)
        try:
            assert body.personality_analysis not in (None, "", {}), "Missing personalityAnalysis in payload"
        except AssertionError as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_400_BAD_REQUEST,
                                                   wallet_address=body.wallet_address)

        try:
            context_paragraph = await self._assistant_manager.save_personality_test(
                request=request,
                wallet_address=body.wallet_address,
                personality_analysis=body.personality_analysis,
                recommended_therapist=body.recommended_therapist
            )
            return {"message": "Result saved successfully!", "contextParagraph": context_paragraph}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=body.wallet_address)

    async def _fetch_context_internal(self,
                                      body: WalletAddressPayload,
                                      request: Request):
        general_utilities.validate_wallet_address(request=request,
                                                  wallet_address=body.wallet_address)

        try:
            context_paragraph = await self._assistant_manager.fetch_context(request=request,
                                                                            wallet_address=body.wallet_address)
            return {"contextParagraph": context_paragraph}
        except Exception as e:
            general_utilities.raise_http_exception(request=request,
                                                   exception=e,
                                                   fallback=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                                   wallet_address=body.wallet_address)
