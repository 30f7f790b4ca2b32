"""
Amazon Bedrock runtime client for the history generator.
Credentials come from the default boto3 chain, or the AWS_PROFILE env var when set.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from . import config

logger = logging.getLogger(__name__)

TOOL_NAME = "record_history_data"


def get_client(region: str | None = None, profile: str | None = None) -> Any:
    """Return a bedrock-runtime client for the configured region / profile."""
    import boto3
    from botocore.config import Config

    region = region or config.AWS_REGION
    profile = profile if profile is not None else config.AWS_PROFILE
    session = boto3.Session(profile_name=profile) if profile else boto3.Session()
    cfg = Config(
        region_name=region,
        read_timeout=120,
        connect_timeout=10,
        retries={"max_attempts": 1, "mode": "standard"},
    )
    return session.client("bedrock-runtime", config=cfg)


def _extract_payload(response: dict[str, Any]) -> str:
    """Pull the JSON payload out of a Converse response (tool input first, then text)."""
    content = response.get("output", {}).get("message", {}).get("content", []) or []
    for block in content:
        tool_use = block.get("toolUse") if isinstance(block, dict) else None
        if tool_use and tool_use.get("name") == TOOL_NAME:
            return json.dumps(tool_use.get("input", {}))
    parts = [b["text"] for b in content if isinstance(b, dict) and "text" in b]
    text = "".join(parts).strip()
    if not text:
        raise ValueError(
            f"Empty model response (stopReason={response.get('stopReason')})"
        )
    return text


class BedrockGenerator:
    """Sends a prompt plus output schema to a Bedrock model, returns JSON text."""

    def __init__(
        self,
        client: Any = None,
        model_id: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> None:
        self._client = client
        self.model_id = model_id or config.BEDROCK_MODEL_ID
        self.max_tokens = max_tokens or config.BEDROCK_MAX_TOKENS
        self.temperature = config.BEDROCK_TEMPERATURE if temperature is None else temperature

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_client()
        return self._client

    def _converse(self, prompt: str, schema: dict[str, Any]) -> str:
        resp = self.client.converse(
            modelId=self.model_id,
            messages=[{"role": "user", "content": [{"text": prompt}]}],
            inferenceConfig={
                "maxTokens": self.max_tokens,
                "temperature": self.temperature,
            },
            toolConfig={
                "tools": [
                    {
                        "toolSpec": {
                            "name": TOOL_NAME,
                            "description": "Record the political entities for the requested year.",
                            "inputSchema": {"json": schema},
                        }
                    }
                ],
                "toolChoice": {"tool": {"name": TOOL_NAME}},
            },
        )
        usage = resp.get("usage") or {}
        logger.info(
            "Bedrock converse: model=%s stopReason=%s inputTokens=%s outputTokens=%s",
            self.model_id,
            resp.get("stopReason"),
            usage.get("inputTokens"),
            usage.get("outputTokens"),
        )
        return _extract_payload(resp)

    async def generate(self, prompt: str, schema: dict[str, Any]) -> str:
        """Run the blocking boto3 call off the event loop."""
        return await asyncio.to_thread(self._converse, prompt, schema)
