from core.models import GeneratedImage, GenerationSettings, SourceImage
from services import gallery


def _entry(image_id: str, data: bytes = b"img", mime_type: str = "image/png") -> GeneratedImage:
    return GeneratedImage(
        id=image_id,
        data=data,
        mime_type=mime_type,
        settings=GenerationSettings(prompt="p"),
        timestamp=1,
        seed=1,
    )


def test_new_batches_go_first():
    gallery.add_images([_entry("a1"), _entry("a2")])
    gallery.add_images([_entry("b1"), _entry("b2")])
    assert [img.id for img in gallery.list_images()] == ["b1", "b2", "a1", "a2"]


def test_list_is_a_copy():
    gallery.add_images([_entry("a")])
    gallery.list_images().clear()
    assert len(gallery.list_images()) == 1


def test_get_and_delete():
    gallery.add_images([_entry("a"), _entry("b")])
    assert gallery.get_image("b").id == "b"
    assert gallery.delete_image("b") is True
    assert gallery.get_image("b") is None
    assert gallery.delete_image("b") is False
    assert [img.id for img in gallery.list_images()] == ["a"]


def test_clear_gallery():
    gallery.add_images([_entry("a"), _entry("b")])
    assert gallery.clear_gallery() == 2
    assert gallery.list_images() == []


def test_source_image_slot():
    assert gallery.get_source_image() is None
    assert gallery.clear_source_image() is False

    gallery.set_source_image(SourceImage(data=b"x", mime_type="image/jpeg", filename="x.jpg"))
    assert gallery.get_source_image().filename == "x.jpg"
    assert gallery.clear_source_image() is True
    assert gallery.get_source_image() is None


def test_use_as_input_keeps_png(png_bytes):
    gallery.add_images([_entry("a", data=png_bytes)])
    source = gallery.use_as_input("a")
    assert source.filename == "generated_input.png"
    assert source.mime_type == "image/png"
    assert source.data == png_bytes
    assert gallery.get_source_image() is source


def test_use_as_input_converts_to_png(jpeg_bytes):
    gallery.add_images([_entry("a", data=jpeg_bytes, mime_type="image/jpeg")])
    source = gallery.use_as_input("a")
    assert source.mime_type == "image/png"
    assert source.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_use_as_input_unknown_id():
    assert gallery.use_as_input("missing") is None
    assert gallery.get_source_image() is None


def test_generation_flag():
    assert gallery.try_begin_generation() is True
    assert gallery.is_generating() is True
    assert gallery.try_begin_generation() is False
    gallery.end_generation()
    assert gallery.is_generating() is False
