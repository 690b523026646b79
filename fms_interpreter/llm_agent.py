# fms_interpreter/llm_agent.py   prompt + completion call, no parsing here

import json
import logging
from typing import Any, Dict, List

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import Runnable
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI

from .config import ConfigurationError, Settings

logger = logging.getLogger("fms_interpreter.llm")

SYSTEM_PROMPT = (
    "You are an expert strength & conditioning and movement professional.\n"
    "Interpret the Functional Movement Screen (FMS) JSON for personal trainers.\n\n"
    "Constraints:\n"
    "- Use ONLY the data provided.\n"
    "- Do NOT provide medical diagnoses or claim to treat disease.\n"
    "- Identify movement pattern issues, asymmetries, and training priorities.\n"
    "- Flag any pain or zero scores for potential clinical referral.\n"
    "- Stay strictly within fitness professional scope.\n\n"
    "Return ONLY valid JSON with exactly this structure:\n"
    "{\n"
    '  "summary": string,\n'
    '  "movement_dysfunctions": [\n'
    "    {\n"
    '      "pattern": string,\n'
    '      "findings": string[],\n'
    '      "implications": string[]\n'
    "    }\n"
    "  ],\n"
    '  "priority_issues": string[],\n'
    '  "training_recommendations": {\n'
    '    "phase_1_focus": string[],\n'
    '    "phase_2_focus": string[],\n'
    '    "specific_interventions": [\n'
    "      {\n"
    '        "goal": string,\n'
    '        "strategies": string[]\n'
    "      }\n"
    "    ],\n"
    '    "refer_out_flags": string[]\n'
    "  }\n"
    "}\n"
    "No extra keys. No text outside the JSON.\n"
)

JSON_RESPONSE_FORMAT = {"type": "json_object"}


def build_messages(report: Dict[str, Any]) -> List[BaseMessage]:
    """System instruction plus the pretty-printed report."""
    return [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(
            content="FMS report JSON:\n" + json.dumps(report, indent=2, ensure_ascii=False)
        ),
    ]


def _content_text(resp: Any) -> str:
    content = resp.content if hasattr(resp, "content") else resp
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text") or "")
        content = "".join(parts)
    return content if isinstance(content, str) else str(content)


def build_chat_model(settings: Settings) -> Runnable:
    """
    Create the chat model for the configured provider, bound to JSON output.
    Retries are disabled: a failed call fails the request.
    """
    provider = settings.LLM_PROVIDER
    model = settings.model
    api_key = settings.api_key
    if not api_key:
        raise ConfigurationError(f"API key for LLM provider {provider!r} is not set")

    if provider == "openai":
        llm = ChatOpenAI(
            api_key=api_key,
            model=model,
            temperature=settings.LLM_TEMPERATURE,
            max_retries=0,
        )
    elif provider == "groq":
        llm = ChatGroq(
            api_key=api_key,
            model=model,
            temperature=settings.LLM_TEMPERATURE,
            max_retries=0,
        )
    else:
        raise ConfigurationError(f"Unknown LLM provider: {provider!r}")

    logger.info("Using %s model %s", provider, model)
    return llm.bind(response_format=JSON_RESPONSE_FORMAT)


class InterpretationAgent:
    """Sends an FMS report to the chat model and returns its raw text."""

    def __init__(self, llm: Runnable) -> None:
        self.llm = llm

    @classmethod
    def from_settings(cls, settings: Settings) -> "InterpretationAgent":
        return cls(build_chat_model(settings))

    async def interpret(self, report: Dict[str, Any]) -> str:
        resp = await self.llm.ainvoke(build_messages(report))
        raw = _content_text(resp)
        # an empty completion normalizes like an empty object
        return raw or "{}"
