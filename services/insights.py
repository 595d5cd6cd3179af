import json
import logging

import requests

from services.persistence import transaction_to_record

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = (
    "Unable to generate insights at the moment. Please check your connection."
)


def build_prompt(snapshot, facility_name):
    stats = snapshot["stats"].as_dict()
    transactions = [transaction_to_record(t) for t in snapshot["transactions"]]
    return (
        f"Analyze the following parking data for {facility_name}:\n"
        f"Stats: {json.dumps(stats)}\n"
        f"Recent Transactions: {json.dumps(transactions)}\n\n"
        "Provide a brief (max 100 words) summary of performance and one "
        "actionable tip for efficiency."
    )


class InsightsClient:
    """Text summarizer reached over the generateContent HTTP API."""

    def __init__(self, api_url, api_key, model, timeout=12, session=None):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls):
        from config import (
            INSIGHTS_API_KEY,
            INSIGHTS_API_URL,
            INSIGHTS_MODEL,
            INSIGHTS_TIMEOUT,
        )

        if not INSIGHTS_API_KEY:
            return None
        return cls(INSIGHTS_API_URL, INSIGHTS_API_KEY, INSIGHTS_MODEL, INSIGHTS_TIMEOUT)

    def summarize(self, prompt):
        r = self.session.post(
            f"{self.api_url}/{self.model}:generateContent",
            headers={"x-goog-api-key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"temperature": 0.7},
            },
            timeout=self.timeout,
        )
        r.raise_for_status()
        data = r.json()
        return data["candidates"][0]["content"]["parts"][0]["text"]


def get_parking_insights(service, client, facility_name, recent=10):
    """Summary text for the facility, or the fallback string on any failure."""
    if client is None:
        logger.info("Insights client not configured; returning fallback text.")
        return FALLBACK_INSIGHT

    prompt = build_prompt(service.snapshot(recent), facility_name)
    try:
        text = client.summarize(prompt)
    except (requests.RequestException, ValueError, KeyError, IndexError) as e:
        logger.error(f"Insight generation failed: {e}", exc_info=True)
        return FALLBACK_INSIGHT
    return text.strip() if isinstance(text, str) and text.strip() else FALLBACK_INSIGHT
