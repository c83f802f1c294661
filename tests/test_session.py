import dataclasses
import struct
import zlib

import pytest

from neuralpixel.constants import (
    DEFAULT_IMG_PATH,
    LIST_RESOLUTIONS,
    LIST_SAMPLES,
    LIST_SCHEDULES,
    LIST_STEPS,
    NEGATIVE_PROMPT,
    OPTIONAL_ITEMS,
    POSITIVE_PROMPT,
)
from neuralpixel.selection import default_settings
from neuralpixel.session import Session

MODEL = "model.safetensors"


def _chunk(kind, body):
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", zlib.crc32(kind + body))


def _png(text):
    return (
        b"\x89PNG\r\n\x1a\n"
        + _chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0))
        + _chunk(b"tEXt", b"parameters\x00" + text.encode("utf-8"))
        + _chunk(b"IDAT", zlib.compress(b"\x00\x00"))
        + _chunk(b"IEND", b"")
    )


@pytest.fixture
def session(tmp_path):
    s = Session(tmp_path)
    (tmp_path / "models" / "checkpoints" / MODEL).write_bytes(b"weights")
    return s


def test_new_session_uses_defaults(tmp_path):
    s = Session(tmp_path)
    assert s.positive == POSITIVE_PROMPT
    assert s.negative == NEGATIVE_PROMPT
    assert s.image_path == DEFAULT_IMG_PATH
    assert s.img2img_path is None
    assert s.settings == default_settings()


def test_generate_requires_model(tmp_path):
    s = Session(tmp_path)
    with pytest.raises(ValueError):
        s.generate()


def test_generate_builds_command_and_saves(session, tmp_path):
    session.settings.model_index = 1
    session.positive = "a red fox"
    args = session.generate()
    assert args[args.index("-m") + 1] == f"./models/checkpoints/{MODEL}"
    assert args[args.index("-p") + 1] == '"a red fox"'
    assert args[-1].endswith("IMG_1.png")
    assert "-W" in args
    again = Session(tmp_path)
    assert again.settings.model_index == 1
    assert again.positive == "a red fox"


def test_img2img_in_command(session, tmp_path):
    source = tmp_path / "source.png"
    source.write_bytes(b"img")
    session.settings.model_index = 1
    session.set_img2img(source)
    assert session.image_path == str(source)
    args = session.generate()
    assert args[args.index("-i") + 1] == str(source)
    assert "img2img" in args
    assert "-W" not in args


def test_missing_img2img_shows_example(session, tmp_path):
    session.set_img2img(tmp_path / "absent.png")
    assert session.image_path == DEFAULT_IMG_PATH
    assert session.img2img_path == str(tmp_path / "absent.png")


def test_clear_img2img(session, tmp_path):
    source = tmp_path / "source.png"
    source.write_bytes(b"img")
    session.set_img2img(source)
    session.clear_img2img()
    assert session.img2img_path is None
    assert session.image_path == DEFAULT_IMG_PATH


def test_reset_keeps_verbose_and_taesd(session):
    session.settings.cfg = 12.0
    session.settings.verbose = True
    session.settings.taesd = True
    session.positive = "changed"
    session.reset()
    assert session.settings == dataclasses.replace(default_settings(), verbose=True, taesd=True)
    assert session.positive == POSITIVE_PROMPT
    assert session.negative == NEGATIVE_PROMPT


def test_refresh_lists_files(session):
    options = session.refresh()
    assert options["model"] == [OPTIONAL_ITEMS, MODEL]
    assert options["lora"] == [OPTIONAL_ITEMS]
    assert set(options) >= {"vae", "cnet", "upscale", "clip_l", "clip_g", "t5xxl", "embedding"}


def test_load_png_info(session, tmp_path):
    text = (
        '"a cat"\nNegative prompt: "ugly"\nSteps: 20, CFG scale: 7.5, Guidance: 3.5, '
        f"Seed: 1234, Size: 512x768, Model: {MODEL}, RNG: cuda, Sampler: euler karras, Version: v1"
    )
    path = tmp_path / "info.png"
    path.write_bytes(_png(text))
    session.load_png_info(path)
    s = session.settings
    assert session.positive == "a cat"
    assert session.negative == "ugly"
    assert LIST_STEPS[s.steps_index] == "20"
    assert s.cfg == 7.5
    assert s.seed == 1234.0
    assert LIST_RESOLUTIONS[s.width_index] == "512"
    assert LIST_RESOLUTIONS[s.height_index] == "768"
    assert s.model_index == 1
    assert LIST_SAMPLES[s.sample_index] == "euler"
    assert LIST_SCHEDULES[s.schedule_index] == "karras"


def test_load_png_info_clamps_cfg(session, tmp_path):
    text = '"p"\nNegative prompt: "n"\nSteps: 20, CFG scale: 99, Guidance: 1, Seed: 5, Size: 64x64'
    path = tmp_path / "info.png"
    path.write_bytes(_png(text))
    session.load_png_info(path)
    assert session.settings.cfg == 30.0
    assert session.settings.seed == 5.0


def test_load_png_info_rejects_non_png(session, tmp_path):
    path = tmp_path / "bad.png"
    path.write_bytes(b"not a png")
    with pytest.raises(ValueError):
        session.load_png_info(path)