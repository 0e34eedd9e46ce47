"""Tests for the attachment tools."""

import base64

import pytest

from mcp_google_chat.tools import attachments


def text_of(result):
    return result.content[0].text


class TestGetAttachment:
    """Tests for google_chat_get_attachment."""

    @pytest.mark.asyncio
    async def test_get(self, chat_api):
        attachment = {
            "name": "spaces/A/messages/B/attachments/C",
            "contentName": "report.pdf",
            "downloadUri": "https://chat.google.com/download/C",
        }
        chat_api.reply(json_body=attachment)

        result = await attachments.get_attachment("spaces/A/messages/B/attachments/C")

        assert chat_api.last_request.url.path == "/v1/spaces/A/messages/B/attachments/C"
        assert "- **Download URL**: https://chat.google.com/download/C" in text_of(result)
        assert result.structuredContent == attachment


class TestUploadAttachment:
    """Tests for google_chat_upload_attachment."""

    @pytest.mark.asyncio
    async def test_sends_metadata_with_decoded_length(self, chat_api):
        data_ref = {"resourceName": "spaces/A/attachments/R1", "attachmentUploadToken": "upload-token"}
        chat_api.reply(json_body={"attachmentDataRef": data_ref})
        content = base64.b64encode(b"hello world").decode()

        result = await attachments.upload_attachment("spaces/A", "hello.txt", "text/plain", content)

        assert chat_api.last_request.method == "POST"
        assert chat_api.last_request.url.path == "/v1/spaces/A/attachments:upload"
        assert chat_api.last_json == {"filename": "hello.txt", "contentType": "text/plain", "contentLength": 11}
        assert result.structuredContent == {
            "name": "spaces/A/attachments/R1",
            "contentName": "hello.txt",
            "contentType": "text/plain",
            "attachmentDataRef": data_ref,
        }
        assert text_of(result).startswith("Attachment uploaded successfully!\n\n## Attachment")

    @pytest.mark.asyncio
    async def test_invalid_base64_rejected_locally(self, chat_api):
        result = await attachments.upload_attachment("spaces/A", "hello.txt", "text/plain", "not base64!!")
        assert result.isError
        assert "base64" in text_of(result)
        assert chat_api.requests == []

    @pytest.mark.asyncio
    async def test_read_only(self, chat_api, read_only):
        content = base64.b64encode(b"x").decode()
        result = await attachments.upload_attachment("spaces/A", "x.txt", "text/plain", content)
        assert result.isError
        assert chat_api.requests == []
