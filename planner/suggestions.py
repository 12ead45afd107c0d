import json
import logging
from typing import List, Sequence

import requests

from planner.constants import DEFAULT_GEMINI_MODEL

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
SUGGESTION_COUNT = 3

PROMPT_TEMPLATE = (
    "당신은 할 일 관리 비서입니다.\n"
    "날짜: {date}\n"
    "현재 카테고리: {category}\n"
    "이미 계획된 일: {existing}\n\n"
    "이 상황에 어울리는 새로운 할 일 {count}가지를 한국어로 추천해주세요.\n"
    '답변은 반드시 JSON 배열 형태여야 합니다. 예: ["운동하기", "책 읽기", "장보기"]'
)


def build_prompt(formatted_date: str, category_name: str, existing_texts: Sequence[str]) -> str:
    existing = ", ".join(text for text in existing_texts if text) or "없음"
    return PROMPT_TEMPLATE.format(
        date=formatted_date,
        category=category_name or "기본",
        existing=existing,
        count=SUGGESTION_COUNT,
    )


class SuggestionClient:
    """Candidate to-do texts from Gemini. Never raises; failures yield []."""

    def __init__(self, api_key: str = "", model: str = DEFAULT_GEMINI_MODEL, timeout: int = 20, session=None):
        self.api_key = api_key
        self.model = model or DEFAULT_GEMINI_MODEL
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _payload(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
        }

    def suggest(self, formatted_date: str, category_name: str, existing_texts: Sequence[str]) -> List[str]:
        if not self.api_key:
            logger.info("GEMINI_API_KEY not set; skipping suggestions")
            return []
        url = f"{GEMINI_BASE_URL}/models/{self.model}:generateContent"
        prompt = build_prompt(formatted_date, category_name, existing_texts)
        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=self._payload(prompt),
                timeout=self.timeout,
            )
            response.raise_for_status()
            text = response.json()["candidates"][0]["content"]["parts"][0]["text"]
            raw = json.loads(text or "[]")
        except requests.RequestException:
            logger.exception("Suggestion request failed")
            return []
        except (KeyError, IndexError, TypeError, ValueError):
            logger.exception("Suggestion response was not a JSON string array")
            return []
        if not isinstance(raw, list):
            logger.warning("Suggestion response was not a list: %r", raw)
            return []
        planned = {text.strip() for text in existing_texts if text}
        suggestions: List[str] = []
        for item in raw:
            if not isinstance(item, str):
                continue
            clean = item.strip()
            if clean and clean not in planned and clean not in suggestions:
                suggestions.append(clean)
        return suggestions
