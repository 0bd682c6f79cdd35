import json

from civic_client.config.storage import LocalStore, Session, TOKEN_KEY, USER_KEY


def test_local_store_round_trip(tmp_path):
    store = LocalStore(str(tmp_path / "store.json"))
    assert store.get_item("token") is None

    store.set_item("token", "abc")
    store.set_item("theme", "dark")
    assert store.get_item("token") == "abc"

    store.remove_item("token")
    assert store.get_item("token") is None
    assert store.get_item("theme") == "dark"


def test_local_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    assert LocalStore(str(path)).get_item("user") is None


def test_session_from_store(tmp_path):
    store = LocalStore(str(tmp_path / "store.json"))
    store.set_item(USER_KEY, json.dumps({"id": 3, "name": "Meena", "role": "admin", "department": "Water", "email": "x@y"}))
    store.set_item(TOKEN_KEY, "secret")

    session = Session.from_store(store)

    assert session.user.name == "Meena"
    assert session.user.is_admin
    assert session.token == "secret"


def test_session_with_corrupt_user_blob(tmp_path):
    store = LocalStore(str(tmp_path / "store.json"))
    store.set_item(USER_KEY, "{broken")

    session = Session.from_store(store)

    assert session.user is None
    assert session.token is None


def test_user_stored_as_object_is_still_read(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"user": {"name": "Ravi", "role": "citizen"}}), encoding="utf-8")

    session = Session.from_store(LocalStore(str(path)))

    assert session.user.name == "Ravi"
    assert not session.user.is_admin
