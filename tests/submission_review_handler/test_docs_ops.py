from submission_review_handler import docs_ops
from submission_review_handler.submission_schema import Submission

IMG_ID = "1imgimgimgimgimgimgimgimgimg"


def _inserts(requests):
    return [r["insertText"] for r in requests if "insertText" in r]


def test_summary_requests_track_running_index():
    sub = Submission(
        submission_id="SUB00001",
        row_num=2,
        title="Kiln",
        fields={"Team": "Blue", "Empty": "", "Notes": "ok"},
    )
    requests = docs_ops.build_summary_requests(sub)

    inserts = _inserts(requests)
    assert [i["text"] for i in inserts] == [
        "SUB00001: Kiln\n",
        "Team: ",
        "Blue\n",
        "Notes: ",
        "ok\n",
    ]

    expected_index = 1
    for i in inserts:
        assert i["location"]["index"] == expected_index
        expected_index += len(i["text"])


def test_summary_requests_style_after_all_inserts():
    sub = Submission("SUB00001", 2, "Kiln", fields={"Team": "Blue"})
    requests = docs_ops.build_summary_requests(sub)

    kinds = [next(iter(r)) for r in requests]
    last_insert = max(i for i, k in enumerate(kinds) if k == "insertText")
    first_style = min(i for i, k in enumerate(kinds) if k.startswith("update"))
    assert last_insert < first_style

    heading = next(r for r in requests if "updateParagraphStyle" in r)
    assert heading["updateParagraphStyle"]["paragraphStyle"] == {
        "namedStyleType": "HEADING_1"
    }
    bold = [r["updateTextStyle"]["range"] for r in requests if "updateTextStyle" in r]
    # "SUB00001: Kiln\n" is 15 units long, so the "Team: " label spans 16..22
    assert bold == [{"startIndex": 16, "endIndex": 22}]


def test_summary_requests_count_utf16_units():
    sub = Submission("SUB00001", 2, "\U0001F525", fields={"Notes": "x"})
    inserts = _inserts(docs_ops.build_summary_requests(sub))
    # emoji is two UTF-16 code units
    assert inserts[1]["location"]["index"] == 1 + len("SUB00001: \n") + 2


def test_image_columns_become_inline_images():
    link = f"https://drive.google.com/open?id={IMG_ID}"
    sub = Submission(
        "SUB00002",
        3,
        "",
        fields={"Project Photos": f"{link}, {link}", "Notes": "after"},
    )
    requests = docs_ops.build_summary_requests(sub)

    images = [r["insertInlineImage"] for r in requests if "insertInlineImage" in r]
    assert len(images) == 2
    assert images[0]["uri"] == docs_ops.drive_image_uri(IMG_ID)
    # heading "SUB00002\n" (9) + "Project Photos\n" (15)
    assert images[0]["location"]["index"] == 25
    # image (1) + newline (1)
    assert images[1]["location"]["index"] == 27

    texts = [i["text"] for i in _inserts(requests)]
    assert link not in "".join(texts)
    assert texts[-2:] == ["Notes: ", "after\n"]


def test_image_column_without_drive_link_stays_text():
    url = "https://example.org/uploads/solar_kiln_prototype_front_view.jpg"
    sub = Submission(
        "SUB00003", 4, "", fields={"Photo": "none provided", "Screenshot": url}
    )
    requests = docs_ops.build_summary_requests(sub)
    assert not any("insertInlineImage" in r for r in requests)
    texts = [i["text"] for i in _inserts(requests)]
    assert "none provided\n" in texts
    assert f"{url}\n" in texts


def test_is_image_column():
    pattern = docs_ops.DEFAULT_IMAGE_PATTERN
    assert docs_ops.is_image_column("Upload Images", pattern)
    assert docs_ops.is_image_column("photo", pattern)
    assert not docs_ops.is_image_column("Photographer", pattern)
    assert not docs_ops.is_image_column("Photo", "")


def test_write_summary_document_sends_one_batch_update():
    calls = []

    class _Req:
        def execute(self):
            return {}

    class _Documents:
        def batchUpdate(self, **kwargs):
            calls.append(kwargs)
            return _Req()

    class _Docs:
        def documents(self):
            return _Documents()

    sub = Submission("SUB00001", 2, "Kiln", fields={"Team": "Blue"})
    docs_ops.write_summary_document(_Docs(), "doc1", sub)

    assert len(calls) == 1
    assert calls[0]["documentId"] == "doc1"
    assert calls[0]["body"]["requests"] == docs_ops.build_summary_requests(sub)


class _DocsGet:
    def __init__(self, doc):
        self.doc = doc
        self.calls = []

    def documents(self):
        return self

    def get(self, **kwargs):
        self.calls.append(kwargs)
        return self

    def execute(self):
        return self.doc


def _body(*elements):
    return {"body": {"content": [{"sectionBreak": {}}, {"paragraph": {"elements": list(elements)}}]}}


def test_document_is_empty_for_fresh_document():
    docs = _DocsGet(_body({"textRun": {"content": "\n"}}))
    assert docs_ops.document_is_empty(docs, "doc1") is True
    assert docs.calls == [{"documentId": "doc1"}]


def test_document_is_empty_false_with_text_or_image():
    assert not docs_ops.document_is_empty(
        _DocsGet(_body({"textRun": {"content": "SUB00001: Kiln\n"}})), "doc1"
    )
    assert not docs_ops.document_is_empty(
        _DocsGet(_body({"inlineObjectElement": {"inlineObjectId": "k1"}})), "doc1"
    )
