from pathlib import Path

import pytest
from docx import Document

from helpers import pdf_bytes, spreadsheet_labelled_docx_bytes
from utils.extract import DocumentReadError, extract_words, read_document_text


def test_extract_words_drops_symbol_tokens_and_collapses_whitespace():
    assert extract_words("あめ\nかさ   いぬ\n***\nねこ") == ["あめ", "かさ", "いぬ", "ねこ"]


def test_extract_words_keeps_order_and_duplicates():
    assert extract_words("ねこ いぬ ねこ\r\nねこ") == ["ねこ", "いぬ", "ねこ", "ねこ"]


def test_extract_words_handles_scripts_and_ideographic_space():
    text = "漢字　カタカナ\tひらがな English 「」 。、 123"
    assert extract_words(text) == ["漢字", "カタカナ", "ひらがな", "English", "123"]


def test_extract_words_keeps_tokens_with_some_word_characters():
    assert extract_words("「あめ」 (x) ---") == ["「あめ」", "(x)"]


def test_extract_words_empty_text():
    assert extract_words("") == []
    assert extract_words(" \n\t ") == []


def test_read_document_text_docx(tmp_path: Path):
    document = Document()
    document.add_paragraph("あめ かさ")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "いぬ"
    table.rows[0].cells[1].text = "ねこ"
    path = tmp_path / "words.docx"
    document.save(str(path))

    text = read_document_text(path)

    assert extract_words(text) == ["あめ", "かさ", "いぬ", "ねこ"]


def test_read_document_text_rejects_unknown_extension(tmp_path: Path):
    path = tmp_path / "words.txt"
    path.write_text("あめ", encoding="utf-8")

    with pytest.raises(ValueError):
        read_document_text(path)


def test_read_document_text_wraps_corrupt_documents(tmp_path: Path):
    path = tmp_path / "broken.docx"
    path.write_bytes(b"garbage")

    with pytest.raises(DocumentReadError):
        read_document_text(path)


def test_read_document_text_pdf(tmp_path: Path):
    path = tmp_path / "words.pdf"
    path.write_bytes(pdf_bytes("apple banana"))

    text = read_document_text(path)

    assert extract_words(text) == ["apple", "banana"]


def test_read_document_text_wraps_corrupt_pdf(tmp_path: Path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf document")

    with pytest.raises(DocumentReadError):
        read_document_text(path)


def test_read_document_text_rejects_non_word_package(tmp_path: Path):
    path = tmp_path / "sheet.docx"
    path.write_bytes(spreadsheet_labelled_docx_bytes())

    with pytest.raises(DocumentReadError):
        read_document_text(path)
