import pytest

from professional_search.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append((url, json, headers, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_search_text_success(patch_session):
    patch_session.response = DummyResponse(payload={"places": [{"id": "1"}]})
    body = {"textQuery": "fonoaudiologo infantil autismo", "minRating": 4, "maxResultCount": 5}

    payload = google_places.search_text(body, "key")

    assert payload["places"] == [{"id": "1"}]
    url, sent_body, headers, timeout = patch_session.calls[0]
    assert url.endswith("places:searchText")
    assert sent_body == body
    assert headers["X-Goog-Api-Key"] == "key"
    assert headers["X-Goog-FieldMask"] == google_places.FIELD_MASK
    assert "places.internationalPhoneNumber" in headers["X-Goog-FieldMask"]
    assert timeout == 10


def test_search_text_empty_payload(patch_session):
    patch_session.response = DummyResponse(payload=None)
    assert google_places.search_text({"textQuery": "x"}, "key") == {}


def test_search_text_error_status(patch_session, caplog):
    patch_session.response = DummyResponse(status_code=403, text="PERMISSION_DENIED")

    with caplog.at_level("ERROR"), pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.search_text({"textQuery": "x"}, "key")

    assert excinfo.value.status_code == 403
    assert "403" in str(excinfo.value)
    assert "status=403" in " ".join(caplog.messages)
