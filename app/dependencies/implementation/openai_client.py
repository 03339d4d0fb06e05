import json
import logging
import os

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI

from ..api.openai_base_class import OpenAIBaseClass

class OpenAIClient(OpenAIBaseClass):

    async def trigger_async_chat_completion(
        self,
        messages: list,
        expects_json_response: bool,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> dict | str:
        try:
            openai_client = AsyncOpenAI(api_key=os.environ.get("OPENAI_API_KEY"),
                                        base_url=os.environ.get("OPENAI_BASE_URL"))
            response_format = "json_object" if expects_json_response else "text"
            completion_kwargs = {}
            if max_tokens is not None:
                completion_kwargs["max_tokens"] = max_tokens
            if temperature is not None:
                completion_kwargs["temperature"] = temperature

            response = await openai_client.chat.completions.create(
                model=self.llm_model,
                messages=messages,
                response_format={
                    "type": response_format
                },
                **completion_kwargs
            )

            response_message = response.choices[0].message
            assert getattr(response_message, "refusal", None) is None, response_message.refusal
            assert len(response_message.content or '') > 0, "No completion was generated"

            response_text = response_message.content.strip()
            logging.info(f"[trigger_async_chat_completion] Completion length: {len(response_text)}")
            return response_text if not expects_json_response else json.loads(response_text)
        except Exception as e:
            raise RuntimeError(e) from e

    async def generate_chat_reply(
        self,
        system_prompt_template: str,
        context: str,
        conversation_history: str,
        query_input: str,
    ) -> str:
        try:
            llm_client = ChatOpenAI(
                model=self.llm_model,
                temperature=self.CHAT_TEMPERATURE,
                api_key=os.environ.get("OPENAI_API_KEY"),
                base_url=os.environ.get("OPENAI_BASE_URL"),
            )
            prompt = ChatPromptTemplate.from_messages([
                ("system", system_prompt_template),
                ("human", "{question}"),
            ])
            chain = prompt | llm_client | StrOutputParser()

            bot_response = await chain.ainvoke({
                "context": context,
                "conversation_history": conversation_history,
                "question": query_input,
            })
            assert isinstance(bot_response, str), "Invalid response format received from AI model"
            return bot_response
        except Exception as e:
            raise RuntimeError(e) from e
