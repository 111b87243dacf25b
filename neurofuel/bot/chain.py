import asyncio
import json
from typing import Any, Dict, Optional

import openai
from langchain_core.prompts import ChatPromptTemplate, PromptTemplate
from langchain_openai import ChatOpenAI

from neurofuel.config import Settings
from neurofuel.errors import ProviderError
from neurofuel.log import get_logger
from .prompt import ADVICE_PROMPT, CHAT_SYSTEM_PROMPT, MEAL_PLAN_PARAMS_PROMPT

logger = get_logger("bot.chain")


# ---- MODEL ----
def build_llm(settings: Settings, temperature: float, max_tokens: Optional[int] = None) -> ChatOpenAI:
    extra = {"extra_body": {"gpt_id": settings.gpt_id}} if settings.gpt_id else {}
    return ChatOpenAI(
        model=settings.model,
        api_key=settings.openai_api_key,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=settings.request_timeout,
        max_retries=0,
        **extra
    )


# ---- PROMPTS ----
advice_prompt = PromptTemplate(
    input_variables=["user_profile", "protocol", "doctor_notes"],
    template=ADVICE_PROMPT,
)

chat_prompt = ChatPromptTemplate.from_messages([
    ("system", CHAT_SYSTEM_PROMPT),
    ("human", "{message}"),
])

meal_plan_prompt = ChatPromptTemplate.from_messages([
    ("system", MEAL_PLAN_PARAMS_PROMPT),
    ("human", "{message}"),
])


async def _complete(chain, inputs: Dict[str, Any], timeout: float) -> str:
    """Run one prompt | llm pipeline; every provider failure becomes ProviderError."""
    try:
        response = await asyncio.wait_for(chain.ainvoke(inputs), timeout=timeout)
    except asyncio.TimeoutError:
        raise ProviderError(f"completion timed out after {timeout}s", kind="TimeoutError")
    except openai.APIStatusError as e:
        raise ProviderError(str(e), status=e.status_code, kind=type(e).__name__) from e
    except openai.OpenAIError as e:
        raise ProviderError(str(e), kind=type(e).__name__) from e
    except (ValueError, TypeError, KeyError) as e:
        # raised by langchain_openai for a 200 body without usable choices
        raise ProviderError(str(e), kind="MalformedResponse") from e

    content = getattr(response, "content", None)
    if not isinstance(content, str):
        raise ProviderError("completion returned no text content", kind="MalformedResponse")
    return content


# ---- ENTRY FUNCS ----
async def run_advice(settings: Settings, user_profile: Any, protocol: Any, doctor_notes: Any) -> str:
    """Ask the model for advice in the fixed JSON schema; the text is returned unvalidated."""
    chain = advice_prompt | build_llm(settings, temperature=0.3)
    inputs = {
        "user_profile": json.dumps(user_profile if user_profile is not None else {}, indent=2, ensure_ascii=False),
        "protocol": "" if protocol is None else protocol,
        "doctor_notes": "" if doctor_notes is None else doctor_notes,
    }
    return await _complete(chain, inputs, settings.request_timeout)


async def run_chat(settings: Settings, message: str) -> str:
    chain = chat_prompt | build_llm(settings, temperature=0.7, max_tokens=500)
    content = await _complete(chain, {"message": message}, settings.request_timeout)
    logger.info(f"Chat response received ({len(content)} chars)")
    return content


async def run_meal_plan_params(settings: Settings, message: str) -> str:
    chain = meal_plan_prompt | build_llm(settings, temperature=0.1, max_tokens=200)
    return await _complete(chain, {"message": message}, settings.request_timeout)
