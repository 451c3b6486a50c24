import os

from sqlalchemy import inspect

from signage.db import engine
from signage.services.storage import STORAGE_DIR


def upload(client, auth_headers, filename="slide.png", content_type="image/png", **params):
    return client.post(
        "/media/upload",
        params=params,
        files={"file": (filename, b"binary-content", content_type)},
        headers=auth_headers,
    )


def test_upload_media_detects_type_and_stores_file(client, auth_headers):
    response = upload(client, auth_headers, filename="intro.mp4", content_type="video/mp4")
    assert response.status_code == 200
    media = response.json()
    assert media["type"] == "video"
    assert media["name"] == "intro.mp4"
    assert media["url"] == f"/storage/{media['path']}"
    assert os.path.isfile(os.path.join(STORAGE_DIR, media["path"]))


def test_upload_rejects_bad_extension(client, auth_headers):
    response = upload(client, auth_headers, filename="notes.txt", content_type="image/png")
    assert response.status_code == 400


def test_items_append_in_order(client, auth_headers):
    playlist_id = client.post("/playlists", json={"name": "Menu"}, headers=auth_headers).json()["id"]
    first = upload(client, auth_headers, filename="a.png").json()
    second = upload(client, auth_headers, filename="b.png").json()

    added = client.post(f"/playlists/{playlist_id}/items", json={"media_id": first["id"]}, headers=auth_headers).json()
    assert added["sort_order"] == 1
    assert added["duration_sec"] == 10
    assert added["media_url"] == first["url"]
    added = client.post(
        f"/playlists/{playlist_id}/items",
        json={"media_id": second["id"], "duration": 4},
        headers=auth_headers,
    ).json()
    assert added["sort_order"] == 2
    assert added["duration_sec"] == 4

    playlist = client.get(f"/playlists/{playlist_id}", headers=auth_headers).json()
    assert [item["media_id"] for item in playlist["items"]] == [first["id"], second["id"]]


def test_reorder_item(client, auth_headers):
    playlist_id = client.post("/playlists", json={"name": "Menu"}, headers=auth_headers).json()["id"]
    media_ids = [upload(client, auth_headers, filename=f"{n}.png").json()["id"] for n in ("a", "b")]
    item_ids = [
        client.post(f"/playlists/{playlist_id}/items", json={"media_id": media_id}, headers=auth_headers).json()["id"]
        for media_id in media_ids
    ]
    client.put(f"/playlists/{playlist_id}/items/{item_ids[0]}", json={"sort_order": 5}, headers=auth_headers)

    playlist = client.get(f"/playlists/{playlist_id}", headers=auth_headers).json()
    assert [item["id"] for item in playlist["items"]] == [item_ids[1], item_ids[0]]


def test_non_positive_duration_is_rejected(client, auth_headers):
    playlist_id = client.post("/playlists", json={"name": "Menu"}, headers=auth_headers).json()["id"]
    media_id = upload(client, auth_headers).json()["id"]
    response = client.post(
        f"/playlists/{playlist_id}/items",
        json={"media_id": media_id, "duration": 0},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_add_item_with_unknown_media(client, auth_headers):
    playlist_id = client.post("/playlists", json={"name": "Menu"}, headers=auth_headers).json()["id"]
    response = client.post(f"/playlists/{playlist_id}/items", json={"media_id": "missing"}, headers=auth_headers)
    assert response.status_code == 404


def test_delete_playlist_clears_references(client, auth_headers, paired_screen):
    playlist_id = client.post("/playlists", json={"name": "Menu"}, headers=auth_headers).json()["id"]
    media_id = upload(client, auth_headers).json()["id"]
    client.post(f"/playlists/{playlist_id}/items", json={"media_id": media_id}, headers=auth_headers)
    client.put(f"/screens/{paired_screen['id']}/playlist", json={"playlist_id": playlist_id}, headers=auth_headers)
    client.post(
        "/schedules",
        json={
            "screen_id": paired_screen["id"],
            "playlist_id": playlist_id,
            "days": [1],
            "start_time": "09:00",
            "end_time": "10:00",
        },
        headers=auth_headers,
    )

    assert client.delete(f"/playlists/{playlist_id}", headers=auth_headers).json() == {"ok": True}
    assert client.get(f"/playlists/{playlist_id}", headers=auth_headers).status_code == 404
    assert client.get("/schedules", headers=auth_headers).json() == []
    assert client.get("/screens", headers=auth_headers).json()[0]["default_playlist_id"] is None


def test_delete_media_removes_file_and_items(client, auth_headers):
    playlist_id = client.post("/playlists", json={"name": "Menu"}, headers=auth_headers).json()["id"]
    media = upload(client, auth_headers).json()
    client.post(f"/playlists/{playlist_id}/items", json={"media_id": media["id"]}, headers=auth_headers)

    assert client.delete(f"/media/{media['id']}", headers=auth_headers).json() == {"ok": True}
    assert not os.path.exists(os.path.join(STORAGE_DIR, media["path"]))
    assert client.get(f"/playlists/{playlist_id}", headers=auth_headers).json()["items"] == []


def test_healthz(client):
    assert client.get("/healthz").json()["ok"] is True


def test_startup_schema_has_scheduling_columns(client):
    inspector = inspect(engine)
    assert {"group_id", "default_playlist_id", "owner_account"} <= {c["name"] for c in inspector.get_columns("screen")}
    assert {"priority", "group_id", "screen_id", "days"} <= {c["name"] for c in inspector.get_columns("schedule")}
