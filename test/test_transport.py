# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_transport.py

"""
Tests for the HTTP transport.

These tests verify URL and header construction, cookie capture, and the
mapping of HTTP outcomes to results and errors.
"""

import asyncio

import httpx
import pytest

from fairos.errors import CouldNotConnectError, FairOSError
from fairos.transport import (
    COMPRESSION_HEADER,
    DEFAULT_URL,
    FairOSAPIError,
    Transport,
    _parse_session_cookie,
)

from conftest import BASE_URL


def make_transport(server):
    return Transport(BASE_URL, transport=httpx.MockTransport(server.handler))


class TestTransportInit:
    def test_default_url(self):
        assert Transport().base_url == DEFAULT_URL
        assert DEFAULT_URL == "http://localhost:9090/v1"

    def test_trailing_slash_stripped(self):
        assert Transport("http://host:9090/v1/").base_url == "http://host:9090/v1"

    def test_cookie_store(self):
        t = Transport()
        assert t.cookie("alice") is None
        t.set_cookie("alice", "abc")
        assert t.cookie("alice") == "abc"
        t.remove_cookie("alice")
        assert t.cookie("alice") is None
        # removing twice is harmless
        t.remove_cookie("alice")


class TestParseSessionCookie:
    def test_fairos_cookie(self):
        response = httpx.Response(
            200, headers={"Set-Cookie": "fairOS-dfs=abc123; Path=/; HttpOnly"}
        )
        assert _parse_session_cookie(response) == "abc123"

    def test_other_cookie_ignored(self):
        response = httpx.Response(200, headers={"Set-Cookie": "other=xyz; Path=/"})
        assert _parse_session_cookie(response) is None

    def test_no_cookie(self):
        assert _parse_session_cookie(httpx.Response(200)) is None

    def test_value_with_equals_sign(self):
        response = httpx.Response(200, headers={"Set-Cookie": "fairOS-dfs=a=b==; Path=/"})
        assert _parse_session_cookie(response) == "a=b=="


class TestRequests:
    def test_get_builds_url_and_query(self, server):
        server.add("GET", "/pod/present", json={"present": True})
        t = make_transport(server)

        data = asyncio.run(t.get("/pod/present", {"pod_name": "my pod"}, "abc"))

        assert data == {"present": True}
        request = server.last
        assert request.method == "GET"
        assert request.url.path == "/v1/pod/present"
        assert request.url.params["pod_name"] == "my pod"
        assert request.headers["cookie"] == "fairOS-dfs=abc"

    def test_get_without_cookie_sends_no_cookie_header(self, server):
        server.add("GET", "/user/present", json={"present": False})
        t = make_transport(server)
        asyncio.run(t.get("/user/present", {"user_name": "bob"}))
        assert "cookie" not in server.last.headers

    def test_post_returns_body_and_cookie(self, server):
        server.add(
            "POST", "/user/login",
            json={"message": "user logged-in successfully", "code": 200},
            headers={"Set-Cookie": "fairOS-dfs=sess1; Path=/"},
        )
        t = make_transport(server)

        data, cookie = asyncio.run(t.post("/user/login", {"user_name": "alice"}))

        assert data["code"] == 200
        assert cookie == "sess1"
        assert server.last_json() == {"user_name": "alice"}
        assert server.last.headers["content-type"] == "application/json"

    def test_shared_jar_not_reused(self, server):
        """A cookie set for one call must not ride along on later anonymous calls."""
        server.add("POST", "/user/login", headers={"Set-Cookie": "fairOS-dfs=sess1; Path=/"})
        server.add("GET", "/user/present", json={"present": True})
        t = make_transport(server)

        async def run():
            await t.post("/user/login", {"user_name": "alice"})
            await t.get("/user/present", {"user_name": "bob"})

        asyncio.run(run())
        assert "cookie" not in server.last.headers

    def test_concurrent_anonymous_call_gets_no_session(self):
        """An anonymous call overlapping a login must not pick up the new session."""
        async def slow_body():
            await asyncio.sleep(0.05)
            yield b'{"message": "user logged-in successfully", "code": 200}'

        seen = {}

        async def handler(request):
            seen[request.url.path] = request.headers.get("cookie")
            if request.url.path == "/v1/user/login":
                return httpx.Response(
                    200,
                    headers={
                        "Set-Cookie": "fairOS-dfs=sess-alice; Path=/",
                        "Content-Type": "application/json",
                    },
                    content=slow_body(),
                )
            return httpx.Response(200, json={"present": True})

        t = Transport(BASE_URL, transport=httpx.MockTransport(handler))

        async def anonymous():
            await asyncio.sleep(0.01)
            return await t.get("/user/present", {"user_name": "bob"})

        async def run():
            return await asyncio.gather(t.post("/user/login", {"user_name": "alice"}), anonymous())

        (data, cookie), present = asyncio.run(run())

        assert cookie == "sess-alice"
        assert data["code"] == 200
        assert present == {"present": True}
        assert seen["/v1/user/present"] is None
        assert len(t.session.cookies.jar) == 0

    def test_delete_sends_json_body(self, server):
        server.add("DELETE", "/pod/delete")
        t = make_transport(server)
        asyncio.run(t.delete("/pod/delete", {"pod_name": "p"}, "abc"))
        assert server.last.method == "DELETE"
        assert server.last_json() == {"pod_name": "p"}
        assert server.last.headers["cookie"] == "fairOS-dfs=abc"

    def test_empty_success_body(self, server):
        server.add("POST", "/user/logout", content=b"")
        t = make_transport(server)
        data, cookie = asyncio.run(t.post("/user/logout", cookie="abc"))
        assert data == {}
        assert cookie is None


class TestErrorMapping:
    def test_error_message_from_json(self, server):
        server.add("GET", "/pod/stat", status=400, json={"message": "pod stat: pod not open", "code": 400})
        t = make_transport(server)

        with pytest.raises(FairOSAPIError) as exc_info:
            asyncio.run(t.get("/pod/stat", {"pod_name": "p"}, "abc"))

        assert exc_info.value.message == "pod stat: pod not open"
        assert exc_info.value.status_code == 400
        assert exc_info.value.response == {"message": "pod stat: pod not open", "code": 400}

    def test_error_with_plain_text_body(self, server):
        server.add("GET", "/pod/stat", status=500, content=b"internal failure")
        t = make_transport(server)

        with pytest.raises(FairOSAPIError) as exc_info:
            asyncio.run(t.get("/pod/stat"))

        assert str(exc_info.value) == "internal failure"
        assert exc_info.value.status_code == 500

    def test_connection_failure(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        t = Transport(BASE_URL, transport=httpx.MockTransport(refuse))
        with pytest.raises(CouldNotConnectError):
            asyncio.run(t.get("/user/present", {"user_name": "x"}))

    def test_api_error_is_fairos_error(self):
        assert issubclass(FairOSAPIError, FairOSError)
        err = FairOSAPIError("bad", status_code=400, response={"code": 400})
        assert err.status_code == 400
        assert err.response == {"code": 400}


class TestMultipart:
    def test_upload_sends_form_and_compression_header(self, server):
        server.add("POST", "/file/upload", json={"Responses": [{"file_name": "a.txt"}]})
        t = make_transport(server)
        fields = [
            ("pod_name", "pod1"),
            ("files", ("a.txt", b"hello world", "text/plain")),
        ]

        data = asyncio.run(t.upload_multipart("/file/upload", fields, "abc", "gzip"))

        assert data["Responses"][0]["file_name"] == "a.txt"
        request = server.last
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
        assert request.headers[COMPRESSION_HEADER] == "gzip"
        assert b'name="pod_name"' in request.content
        assert b"pod1" in request.content
        assert b'filename="a.txt"' in request.content
        assert b"hello world" in request.content

    def test_upload_without_compression(self, server):
        server.add("POST", "/kv/loadcsv")
        t = make_transport(server)
        asyncio.run(t.upload_multipart("/kv/loadcsv", [("pod_name", "p")], "abc"))
        assert COMPRESSION_HEADER not in server.last.headers

    def test_download_returns_raw_bytes(self, server):
        server.add(
            "POST", "/file/download",
            content=b"\x00\x01binary",
            headers={"Content-Type": "application/octet-stream"},
        )
        t = make_transport(server)
        data = asyncio.run(
            t.download_multipart("/file/download", [("pod_name", "p"), ("file_path", "/x")], "abc")
        )
        assert data == b"\x00\x01binary"
