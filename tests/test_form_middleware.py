"""Tests for FormValidationMiddleware, error handlers, and accessors."""

from __future__ import annotations

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.responses import JSONResponse

from formlocale.forms import (
    FormField,
    FormValidationMiddleware,
    ValidatedForm,
    html_error_handler,
    json_error_handler,
    must_validated_form,
    validated_form,
)


class LoginForm(BaseModel):
    username: str = FormField(sanitize="trim", validate="required")
    password: str = FormField(validate="required,min=8")


class OtherForm(BaseModel):
    value: str = FormField()


def build_app(**middleware_kwargs) -> FastAPI:
    app = FastAPI()
    app.add_middleware(FormValidationMiddleware, form=LoginForm, **middleware_kwargs)

    @app.post("/login")
    async def login(form: LoginForm = ValidatedForm(LoginForm)):
        return {"username": form.username}

    @app.post("/raw")
    async def raw(request: Request):
        form = must_validated_form(request)
        return {"username": form.username, "same": validated_form(request) is form}

    @app.post("/wrong-type")
    async def wrong_type(form: OtherForm = ValidatedForm(OtherForm)):
        return {"value": form.value}

    return app


class TestDefaultHandler:
    def test_valid_request_reaches_endpoint(self):
        client = TestClient(build_app())
        resp = client.post("/login", data={"username": " ann ", "password": "hunter2hunter2"})
        assert resp.status_code == 200
        assert resp.json() == {"username": "ann"}

    def test_invalid_request_rejected(self):
        client = TestClient(build_app())
        resp = client.post("/login", data={"username": "ann", "password": "short"})
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "Validation failed",
            "details": {"password": ["Must be at least 8 characters long"]},
        }

    def test_json_body_in_auto_mode(self):
        client = TestClient(build_app())
        resp = client.post("/raw", json={"username": "bob", "password": "longenough"})
        assert resp.status_code == 200
        assert resp.json() == {"username": "bob", "same": True}

    def test_bad_json(self):
        client = TestClient(build_app(source="json"))
        resp = client.post("/login", content=b"{oops", headers={"content-type": "application/json"})
        assert resp.status_code == 400
        assert list(resp.json()["details"]) == ["_json"]

    def test_form_source_ignores_json(self):
        client = TestClient(build_app(source="form"))
        resp = client.post("/login", json={"username": "bob", "password": "longenough"})
        assert resp.status_code == 400
        assert set(resp.json()["details"]) == {"username", "password"}


class TestCustomHandlers:
    def test_json_handler(self):
        client = TestClient(build_app(error_handler=json_error_handler))
        resp = client.post("/login", data={"password": "short"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["status"] == "error"
        assert body["message"] == "Validation failed"
        assert {"field": "username", "error": "This field is required"} in body["errors"]
        assert {"field": "password", "error": "Must be at least 8 characters long"} in body["errors"]

    def test_html_handler_escapes(self):
        class ScriptForm(BaseModel):
            name: str = FormField(form="<b>name</b>", validate="required")

        app = FastAPI()
        app.add_middleware(
            FormValidationMiddleware, form=ScriptForm, error_handler=html_error_handler
        )

        @app.post("/")
        async def index():
            return {}

        resp = TestClient(app).post("/", data={})
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/html")
        assert "&lt;b&gt;name&lt;/b&gt;:" in resp.text
        assert "<b>name</b>" not in resp.text
        assert "Validation Error" in resp.text

    def test_async_handler(self):
        async def teapot(request, errors):
            return JSONResponse({"fields": sorted(errors)}, status_code=418)

        client = TestClient(build_app(error_handler=teapot))
        resp = client.post("/login", data={})
        assert resp.status_code == 418
        assert resp.json() == {"fields": ["password", "username"]}

    def test_handler_from_app_state(self):
        app = build_app()
        app.state.form_error_handler = json_error_handler
        resp = TestClient(app).post("/login", data={})
        assert resp.status_code == 422


class TestAccessors:
    def test_dependency_rejects_wrong_model(self):
        client = TestClient(build_app())
        resp = client.post("/wrong-type", data={"username": "ann", "password": "longenough"})
        assert resp.status_code == 500

    def test_missing_middleware(self):
        app = FastAPI()

        @app.get("/plain")
        async def plain(request: Request):
            with pytest.raises(RuntimeError):
                must_validated_form(request)
            return {"form": validated_form(request)}

        @app.get("/dep")
        async def dep(form: LoginForm = ValidatedForm()):
            return {}

        client = TestClient(app)
        assert client.get("/plain").json() == {"form": None}
        assert client.get("/dep").status_code == 500


class TestEndpointRereadsBody:
    @pytest.fixture
    def client(self):
        app = FastAPI()
        app.add_middleware(FormValidationMiddleware, form=LoginForm)

        @app.post("/echo")
        async def echo(request: Request):
            form = await request.form()
            upload = form.get("avatar")
            return {
                "username": form.get("username"),
                "avatar": upload.filename if upload is not None else None,
            }

        return TestClient(app)

    def test_urlencoded_form_still_readable(self, client):
        resp = client.post("/echo", data={"username": "x", "password": "longenough"})
        assert resp.status_code == 200
        assert resp.json() == {"username": "x", "avatar": None}

    def test_multipart_form_still_readable(self, client):
        resp = client.post(
            "/echo",
            data={"username": "x", "password": "longenough"},
            files={"avatar": ("me.png", b"\x89PNG", "image/png")},
        )
        assert resp.status_code == 200
        assert resp.json() == {"username": "x", "avatar": "me.png"}
