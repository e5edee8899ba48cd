from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from src.config import settings

# Hosted web search tool of the Responses API; citations come back as annotations
WEB_SEARCH_TOOL = {"type": "web_search_preview"}


def build_search_llm(api_key: str, model: str = None, timeout: float = None):
    llm = ChatOpenAI(
        model=model or settings.SEARCH_MODEL,
        temperature=0,               # deterministic extraction
        api_key=api_key,
        timeout=timeout or settings.AQI_TIER_TIMEOUT_SECONDS,
        max_retries=0,               # the resolver never retries a tier
        use_responses_api=True,
    )
    return llm.bind_tools([WEB_SEARCH_TOOL])


async def search_air_quality(latitude: float, longitude: float, api_key: str) -> AIMessage:
    prompt = """
You are an air-quality lookup assistant with live web search.

Find the most recent US AQI reported for the requested location and answer
on three lines exactly:
AQI: <integer>
City: <nearest city or station name>
Pollutant: <dominant pollutant code, e.g. PM2.5>
"""

    messages = [
        SystemMessage(content=prompt.strip()),
        HumanMessage(content=f"What is the current AQI at latitude {latitude}, longitude {longitude}?")
    ]
    llm = build_search_llm(api_key)
    return await llm.ainvoke(messages)
