PNG_HEAD = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32
JPEG_HEAD = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32


def test_explicit_type_wins():
    from filedrop.content import resolve_type

    assert resolve_type("application/x-custom", "a.txt", PNG_HEAD) == "application/x-custom"


def test_extension_beats_sniffing():
    from filedrop.content import resolve_type

    assert resolve_type("", "notes.txt", PNG_HEAD) == "text/plain"
    assert resolve_type(None, "photo.png", JPEG_HEAD) == "image/png"


def test_sniffing_is_last_resort():
    from filedrop.content import resolve_type

    assert resolve_type("", "", PNG_HEAD) == "image/png"
    assert resolve_type("", "no-extension", JPEG_HEAD) == "image/jpeg"


def test_unknown_type_is_empty():
    from filedrop.content import resolve_type

    assert resolve_type("", "", b"") == ""
    assert resolve_type("", "README", b"hello there") == ""


def test_extension_for_static_table():
    from filedrop.content import extension_for

    assert extension_for("text/plain") == ".txt"
    assert extension_for("text/plain; charset=utf-8") == ".txt"
    assert extension_for("image/png") == ".png"
    assert extension_for("IMAGE/JPEG") == ".jpg"


def test_extension_for_falls_back_to_registry():
    from filedrop.content import extension_for

    assert extension_for("application/pdf") == ".pdf"


def test_extension_for_unknown():
    from filedrop.content import extension_for

    assert extension_for("") is None
    assert extension_for(None) is None
    assert extension_for("application/x-definitely-not-registered") is None
