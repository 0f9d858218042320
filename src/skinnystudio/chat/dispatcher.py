# Generation dispatcher — hands a parsed directive to the generation endpoint.
# Created: 2026-02-14
# Updated: 2026-03-02: Images are collected with their purpose (most recent
#   attachment wins per purpose) and identity headers are forwarded verbatim.
# Updated: 2026-03-09: Always send noWait; long jobs come back as
#   {pending, generationId} and the client polls for completion.
# Updated: 2026-03-12: duration/resolution are only sent for video models.
#
# dispatch() never raises: every outcome, including network failures and
# non-JSON bodies, is reported as a GenerationStatus.

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from skinnystudio.chat.models import (
    IMAGE_PURPOSES,
    ChatMessage,
    GenerationResult,
    GenerationStatus,
    ImageWithPurpose,
)
from skinnystudio.orchestrator.directives import GenerationDirective
from skinnystudio.orchestrator.model_specs import get_model_spec

logger = logging.getLogger(__name__)

# Directive fields only video models accept.
VIDEO_ONLY_FIELDS = ("duration", "resolution")

# Inbound identity headers passed through to the generation endpoint.
FORWARDED_HEADERS = ("Authorization", "X-Whop-User-Id", "X-Whop-User-Token", "Cookie")


def collect_images(messages: Sequence[ChatMessage]) -> list[ImageWithPurpose]:
    """Pick the most recent usable user attachment for each purpose.

    Walks the history newest-first; an attachment without a purpose counts as
    ``reference``. Result is ordered reference, starting_frame, edit_target,
    last_frame.
    """
    chosen: dict[str, ImageWithPurpose] = {}
    for message in reversed(messages):
        if message.role != "user":
            continue
        for attachment in reversed(message.attachments):
            if attachment.type not in ("image", "reference") or not attachment.usable:
                continue
            purpose = attachment.purpose or "reference"
            if purpose in chosen:
                continue
            chosen[purpose] = ImageWithPurpose(
                url=attachment.url,
                base64=attachment.base64,
                mime_type=attachment.mime_type,
                purpose=purpose,
            )
    return [chosen[p] for p in IMAGE_PURPOSES if p in chosen]


def forward_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    lowered = {k.lower(): v for k, v in headers.items()}
    out: dict[str, str] = {}
    for name in FORWARDED_HEADERS:
        value = lowered.get(name.lower())
        if value:
            out[name] = value
    return out


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


class GenerationDispatcher:
    """POSTs generation requests and reconciles the three response shapes."""

    def __init__(
        self,
        generate_url: str,
        *,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.generate_url = generate_url
        self.timeout = timeout
        self._client = client

    def build_payload(
        self, directive: GenerationDirective, images: Sequence[ImageWithPurpose]
    ) -> dict[str, Any]:
        payload = directive.to_dict()
        spec = get_model_spec(directive.model)
        if spec is not None and not spec.is_video:
            for field in VIDEO_ONLY_FIELDS:
                payload.pop(field, None)
        if images:
            payload["images"] = [
                img.model_dump(by_alias=True, exclude_none=True) for img in images
            ]
        payload["noWait"] = True
        return payload

    async def dispatch(
        self,
        directive: GenerationDirective,
        messages: Sequence[ChatMessage],
        headers: Mapping[str, str] | None = None,
    ) -> GenerationStatus:
        images = collect_images(messages)
        payload = self.build_payload(directive, images)
        logger.info(
            "Dispatching generation: model=%s images=%s",
            directive.model,
            [img.purpose for img in images],
        )
        try:
            status_code, data = await self._post(payload, forward_headers(headers))
            return self.reconcile(directive, data, status_code=status_code)
        except Exception as exc:
            logger.exception("Generation dispatch failed")
            return self._error(directive, str(exc) or exc.__class__.__name__)

    async def _post(self, payload: dict[str, Any], headers: dict[str, str]) -> tuple[int, Any]:
        if self._client is not None:
            resp = await self._client.post(self.generate_url, json=payload, headers=headers)
            return resp.status_code, resp.json()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(self.generate_url, json=payload, headers=headers)
            return resp.status_code, resp.json()

    def reconcile(
        self, directive: GenerationDirective, data: Any, *, status_code: int = 200
    ) -> GenerationStatus:
        """Map a generation endpoint response onto one status event."""
        if not isinstance(data, dict):
            return self._error(directive, "Generation failed: unexpected response")

        ok = 200 <= status_code < 300
        image_url = data.get("imageUrl")
        if ok and data.get("success") and isinstance(image_url, str) and image_url:
            raw_urls = data.get("outputUrls")
            if not isinstance(raw_urls, list):
                raw_urls = []
            output_urls = [u for u in raw_urls if isinstance(u, str) and u]
            if image_url not in output_urls:
                output_urls.insert(0, image_url)
            return GenerationStatus(
                status="complete",
                model=directive.model,
                params=directive.params,
                result=GenerationResult(
                    image_url=image_url, output_urls=output_urls, prompt=directive.prompt
                ),
            )

        generation_id = data.get("generationId")
        if ok and data.get("pending") and generation_id:
            return GenerationStatus(
                status="generating",
                model=directive.model,
                params=directive.params,
                generation_id=str(generation_id),
            )

        error = data.get("error")
        if not isinstance(error, str) or not error:
            error = "Generation failed" if ok else f"Generation failed (HTTP {status_code})"
        code = data.get("code")
        return GenerationStatus(
            status="error",
            model=directive.model,
            params=directive.params,
            error=error,
            code=str(code) if code else None,
            required=_number(data.get("required")),
            available=_number(data.get("available")),
        )

    @staticmethod
    def _error(directive: GenerationDirective, message: str) -> GenerationStatus:
        return GenerationStatus(
            status="error", model=directive.model, params=directive.params, error=message
        )
