from helpers import add_words, count_rows, create_child, create_word_list, record_reading


def _upload(client, filename="Friendly.ttf", name="Friendly", data=b"\x00\x01font-bytes"):
    return client.post(
        "/api/fonts/upload",
        files={"fontFile": (filename, data, "font/ttf")},
        data={"fontName": name} if name is not None else {},
    )


def _stored_fonts(app_config):
    fonts_dir = app_config["storage"]["fonts_dir"]
    return list(fonts_dir.iterdir()) if fonts_dir.exists() else []


def test_default_fonts_listed_by_type_then_name(seeded_client):
    fonts = seeded_client.get("/api/fonts").json()

    assert len(fonts) == 10
    keys = [(font["font_type"], font["name"]) for font in fonts]
    assert keys == sorted(keys)
    assert {font["font_type"] for font in fonts} == {"system", "webfont"}
    assert all(font["file_path"] is None for font in fonts)


def test_upload_font_stores_file_and_registers_custom_font(client, app_config):
    response = _upload(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["fontPath"].startswith("/fonts/")
    assert body["fontPath"].endswith("-Friendly.ttf")
    stored = _stored_fonts(app_config)
    assert [path.name for path in stored] == [body["fontPath"].rsplit("/", 1)[1]]
    assert stored[0].read_bytes() == b"\x00\x01font-bytes"

    fonts = client.get("/api/fonts").json()
    assert fonts == [
        {
            "id": body["id"],
            "name": "Friendly",
            "font_family": "'Friendly'",
            "font_type": "custom",
            "file_path": body["fontPath"],
            "is_active": True,
            "created_at": fonts[0]["created_at"],
        }
    ]


def test_upload_rejects_unsupported_extension(client, app_config):
    response = _upload(client, filename="evil.exe")

    assert response.status_code == 400
    assert client.get("/api/fonts").json() == []
    assert _stored_fonts(app_config) == []


def test_upload_requires_font_name(client, app_config):
    response = _upload(client, name="  ")

    assert response.status_code == 400
    assert response.json()["message"] == "Font name is required"
    assert _stored_fonts(app_config) == []


def test_upload_accepts_all_font_extensions(client):
    for extension in ("ttf", "otf", "woff", "woff2", "WOFF2"):
        assert _upload(client, filename=f"face.{extension}").status_code == 200


def test_delete_custom_font_removes_file(client, app_config):
    font_id = _upload(client).json()["id"]

    response = client.delete(f"/api/fonts/{font_id}")

    assert response.json() == {"success": True}
    assert _stored_fonts(app_config) == []
    assert client.get("/api/fonts").json() == []


def test_delete_custom_font_removes_row_before_file(client, db, monkeypatch):
    font_id = _upload(client).json()["id"]
    storage = client.app.state.font_storage
    remove = storage.remove
    rows_at_removal = []

    def remove_and_count(public_path):
        rows_at_removal.append(count_rows(db, "fonts", "id = ?", (font_id,)))
        return remove(public_path)

    monkeypatch.setattr(storage, "remove", remove_and_count)

    client.delete(f"/api/fonts/{font_id}")

    assert rows_at_removal == [0]


def test_delete_custom_font_with_missing_file_succeeds(client, app_config):
    font_id = _upload(client).json()["id"]
    for path in _stored_fonts(app_config):
        path.unlink()

    response = client.delete(f"/api/fonts/{font_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_delete_missing_font_is_not_found(client):
    response = client.delete("/api/fonts/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Font not found"}


def test_delete_font_clears_reading_record_reference(client, db):
    child_id = create_child(client)
    word_id = add_words(client, create_word_list(client), ["あめ"])[0]
    font_id = client.post(
        "/api/fonts", json={"name": "Arial", "font_family": "Arial, sans-serif", "font_type": "system"}
    ).json()["id"]
    record_id = record_reading(client, child_id, word_id, font_id=font_id)

    client.delete(f"/api/fonts/{font_id}")

    with db.connect() as conn:
        row = conn.execute("SELECT font_id FROM reading_records WHERE id = ?", (record_id,)).fetchone()
    assert row is not None
    assert row["font_id"] is None


def test_create_font_rejects_custom_type(client):
    response = client.post(
        "/api/fonts", json={"name": "Mine", "font_family": "'Mine'", "font_type": "custom"}
    )

    assert response.status_code == 400


def test_inactive_fonts_are_hidden(client):
    font_id = client.post(
        "/api/fonts", json={"name": "Lexend", "font_family": "'Lexend', sans-serif", "font_type": "webfont"}
    ).json()["id"]

    assert client.patch(f"/api/fonts/{font_id}", json={"is_active": False}).json() == {"success": True}
    assert client.get("/api/fonts").json() == []
    assert client.patch("/api/fonts/999", json={"is_active": True}).status_code == 404
