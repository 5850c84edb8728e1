from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from tiri.core.errors import NoSession, NotFound, payload_error_message, register_error_handlers
from tiri.db.init_db import init_db
from tiri.db.session import create_db_engine


class _Payload(BaseModel):
    name: str


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    def missing():
        raise NotFound("Event not found")

    @app.get("/no-session")
    def no_session():
        raise NoSession("token expired at 12:00")

    @app.get("/db-down")
    def db_down():
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    @app.post("/payload")
    def payload(body: _Payload):
        return {"name": body.name}

    return app


class TestErrorHandlers:
    def test_studio_errors_render_message(self):
        response = TestClient(_app()).get("/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_no_session_never_leaks_reason(self):
        response = TestClient(_app()).get("/no-session")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_store_failure_is_500(self):
        response = TestClient(_app()).get("/db-down")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_schema_failure_is_400(self):
        response = TestClient(_app()).post("/payload", json={"nope": 1})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request payload"}

    def test_payload_message_follows_route(self):
        assert payload_error_message("/api/auth/login") == "Invalid login payload"
        assert payload_error_message("/api/studio/guests") == "Invalid guest payload"
        assert payload_error_message("/api/studio/guests/g-1/check-in") == "Invalid guest payload"
        assert payload_error_message("/api/studio/guests/bulk") == "Invalid bulk guest payload"
        assert payload_error_message("/api/studio/settings/team/u-1") == "Invalid team member payload"
        assert payload_error_message("/api/studio/mediax") == "Invalid request payload"


def test_init_db_creates_every_table():
    engine = create_db_engine("sqlite://")
    init_db(engine)

    assert set(inspect(engine).get_table_names()) == {
        "studios", "users", "templates", "events", "guests", "media"
    }
