# Tests for the generation dispatcher.
# Created: 2026-02-14

import json

import httpx
import pytest

from skinnystudio.chat.dispatcher import GenerationDispatcher, collect_images, forward_headers
from skinnystudio.chat.models import ChatAttachment, ChatMessage
from skinnystudio.orchestrator.directives import GenerationDirective

URL = "http://studio.test/api/generate"
DIRECTIVE = GenerationDirective(model="flux-2-pro", prompt="a cat", params={"aspect_ratio": "1:1"})


def user(*attachments, content="msg"):
    return ChatMessage(role="user", content=content, attachments=list(attachments))


def dispatcher_for(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GenerationDispatcher(URL, client=client)


class TestCollectImages:
    def test_most_recent_wins_per_purpose(self):
        """The newest attachment for a purpose replaces older ones."""
        messages = [
            user(ChatAttachment(url="a", purpose="starting_frame")),
            ChatMessage(role="assistant", content="ok"),
            user(ChatAttachment(url="b", purpose="starting_frame")),
        ]
        images = collect_images(messages)
        assert [(i.url, i.purpose) for i in images] == [("b", "starting_frame")]

    def test_purpose_defaults_to_reference(self):
        """Attachments without a purpose are references."""
        images = collect_images([user(ChatAttachment(url="r"))])
        assert images[0].purpose == "reference"

    def test_slot_order_and_skips(self):
        """Images come out in slot order; empty and assistant attachments are skipped."""
        messages = [
            user(
                ChatAttachment(url="last", purpose="last_frame"),
                ChatAttachment(url="", name="empty", purpose="edit_target"),
            ),
            ChatMessage(
                role="assistant", attachments=[ChatAttachment(url="bot", purpose="edit_target")]
            ),
            user(
                ChatAttachment(base64="QUJD", mime_type="image/png", purpose="starting_frame"),
                ChatAttachment(url="ref", type="reference"),
            ),
        ]
        images = collect_images(messages)
        assert [i.purpose for i in images] == ["reference", "starting_frame", "last_frame"]
        assert images[1].base64 == "QUJD"
        assert images[1].mime_type == "image/png"

    def test_later_attachment_in_same_message_wins(self):
        """Within one message the later attachment wins."""
        images = collect_images([user(ChatAttachment(url="first"), ChatAttachment(url="second"))])
        assert images[0].url == "second"

    def test_no_images(self):
        """Text-only history yields no images."""
        assert collect_images([user(content="just text")]) == []


class TestForwardHeaders:
    def test_picks_identity_headers_case_insensitively(self):
        """Only identity headers are forwarded, matched case-insensitively."""
        headers = {
            "authorization": "Bearer t",
            "x-whop-user-id": "user_1",
            "X-Whop-User-Token": "tok",
            "cookie": "sid=1",
            "content-type": "application/json",
        }
        assert forward_headers(headers) == {
            "Authorization": "Bearer t",
            "X-Whop-User-Id": "user_1",
            "X-Whop-User-Token": "tok",
            "Cookie": "sid=1",
        }

    def test_none(self):
        """No inbound headers forwards nothing."""
        assert forward_headers(None) == {}


class TestBuildPayload:
    def test_payload(self):
        """Video directives carry duration, resolution, images and noWait."""
        dispatcher = GenerationDispatcher(URL)
        images = collect_images([user(ChatAttachment(url="https://img/1.png", purpose="edit_target"))])
        payload = dispatcher.build_payload(
            GenerationDirective(model="veo-3.1", prompt="waves", duration=8, resolution="720p"),
            images,
        )
        assert payload == {
            "model": "veo-3.1",
            "prompt": "waves",
            "params": {},
            "duration": 8,
            "resolution": "720p",
            "images": [{"url": "https://img/1.png", "purpose": "edit_target"}],
            "noWait": True,
        }

    def test_video_fields_dropped_for_image_models(self):
        """Image models never receive duration or resolution."""
        payload = GenerationDispatcher(URL).build_payload(
            GenerationDirective(model="flux-2-pro", prompt="a cat", duration=5, resolution="1080p"),
            [],
        )
        assert "duration" not in payload
        assert "resolution" not in payload

    def test_video_fields_kept_for_unknown_models(self):
        """Models outside the catalog keep whatever the directive set."""
        payload = GenerationDispatcher(URL).build_payload(
            GenerationDirective(model="new-model", prompt="x", duration=5, resolution="1080p"),
            [],
        )
        assert payload["duration"] == 5
        assert payload["resolution"] == "1080p"

    def test_no_images_key_when_empty(self):
        """The images key is omitted when there are none."""
        payload = GenerationDispatcher(URL).build_payload(DIRECTIVE, [])
        assert "images" not in payload
        assert payload["noWait"] is True


class TestDispatch:
    async def test_complete(self):
        """A success body becomes a complete status with all output URLs."""
        seen = {}

        def handler(request: httpx.Request):
            seen["body"] = json.loads(request.content)
            seen["headers"] = request.headers
            return httpx.Response(
                200,
                json={"success": True, "imageUrl": "https://cdn/1.png", "outputUrls": ["https://cdn/2.png"]},
            )

        messages = [
            user(ChatAttachment(url="a", purpose="starting_frame")),
            user(ChatAttachment(url="b", purpose="starting_frame")),
        ]
        status = await dispatcher_for(handler).dispatch(
            DIRECTIVE, messages, {"x-whop-user-id": "user_1", "cookie": "sid=1"}
        )

        assert status.status == "complete"
        assert status.result.image_url == "https://cdn/1.png"
        assert status.result.output_urls == ["https://cdn/1.png", "https://cdn/2.png"]
        assert status.result.prompt == "a cat"
        assert seen["body"]["images"] == [{"url": "b", "purpose": "starting_frame"}]
        assert seen["body"]["noWait"] is True
        assert seen["headers"]["x-whop-user-id"] == "user_1"
        assert seen["headers"]["cookie"] == "sid=1"

    async def test_pending(self):
        """A pending body becomes a generating status with its id."""
        def handler(request):
            return httpx.Response(202, json={"pending": True, "generationId": "g1"})

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        assert status.to_event() == {
            "generation": {
                "status": "generating",
                "model": "flux-2-pro",
                "params": {"aspect_ratio": "1:1"},
                "generationId": "g1",
            }
        }

    async def test_insufficient_balance(self):
        """Balance errors keep code, required and available."""
        def handler(request):
            return httpx.Response(
                402,
                json={
                    "error": "Insufficient balance",
                    "code": "INSUFFICIENT_BALANCE",
                    "required": 12,
                    "available": 3.5,
                },
            )

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        event = status.to_event()["generation"]
        assert event["status"] == "error"
        assert event["error"] == "Insufficient balance"
        assert event["code"] == "INSUFFICIENT_BALANCE"
        assert event["required"] == 12
        assert event["available"] == 3.5

    async def test_error_without_message(self):
        """Non-2xx without an error message reports the HTTP status."""
        def handler(request):
            return httpx.Response(500, json={})

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        assert status.status == "error"
        assert status.error == "Generation failed (HTTP 500)"

    async def test_success_flag_without_url_is_error(self):
        """success without an imageUrl is an error."""
        def handler(request):
            return httpx.Response(200, json={"success": True})

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        assert status.status == "error"
        assert status.error == "Generation failed"

    async def test_network_error_never_raises(self):
        """Transport failures come back as an error status."""
        def handler(request):
            raise httpx.ConnectError("connection refused")

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        assert status.status == "error"
        assert "connection refused" in status.error

    async def test_non_json_body(self):
        """A non-JSON body is an error status."""
        def handler(request):
            return httpx.Response(502, text="<html>Bad gateway</html>")

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        assert status.status == "error"
        assert status.error

    @pytest.mark.parametrize("body", [[1, 2], "ok", None])
    def test_reconcile_unexpected_shapes(self, body):
        """Bodies that are not objects are errors."""
        status = GenerationDispatcher(URL).reconcile(DIRECTIVE, body)
        assert status.status == "error"

    @pytest.mark.parametrize("output_urls", [5, True, "https://cdn/2.png", {"a": 1}])
    async def test_non_list_output_urls_never_raises(self, output_urls):
        """A non-list outputUrls is ignored and the image URL is kept."""
        def handler(request):
            return httpx.Response(
                200,
                json={"success": True, "imageUrl": "https://cdn/1.png", "outputUrls": output_urls},
            )

        status = await dispatcher_for(handler).dispatch(DIRECTIVE, [])
        assert status.status == "complete"
        assert status.result.output_urls == ["https://cdn/1.png"]
