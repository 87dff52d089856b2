"""Small API and document helpers shared by the tests."""
import io
import zipfile

from docx import Document


def create_child(client, name="Hana", **fields):
    response = client.post("/api/children", json={"name": name, **fields})
    assert response.status_code == 200, response.text
    return response.json()["id"]


def create_word_list(client, name="Set A", description=None):
    response = client.post("/api/word-lists", json={"name": name, "description": description})
    assert response.status_code == 200, response.text
    return response.json()["id"]


def add_words(client, word_list_id, words):
    response = client.post("/api/words/bulk", json={"word_list_id": word_list_id, "words": words})
    assert response.status_code == 200, response.text
    return response.json()["ids"]


def record_reading(client, child_id, word_id, could_read=True, **fields):
    payload = {"child_id": child_id, "word_id": word_id, "could_read": could_read, **fields}
    response = client.post("/api/reading-records", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["id"]


def count_rows(db, table, where="1 = 1", params=()):
    with db.connect() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table} WHERE {where}", params).fetchone()[0]


def pdf_bytes(text):
    """A one-page PDF showing ``text`` (ASCII) in Helvetica."""
    content = b"BT /F1 24 Tf 72 700 Td (" + text.encode("ascii") + b") Tj ET"
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792]"
        b" /Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)


def spreadsheet_labelled_docx_bytes():
    """A valid Word package whose main part is declared as a spreadsheet."""
    document = Document()
    document.add_paragraph("あめ")
    source = io.BytesIO()
    document.save(source)
    target = io.BytesIO()
    with zipfile.ZipFile(source) as original, zipfile.ZipFile(target, "w") as relabelled:
        for item in original.infolist():
            data = original.read(item.filename)
            if item.filename == "[Content_Types].xml":
                data = data.replace(
                    b"wordprocessingml.document.main+xml",
                    b"spreadsheetml.sheet.main+xml",
                )
            relabelled.writestr(item, data)
    return target.getvalue()
