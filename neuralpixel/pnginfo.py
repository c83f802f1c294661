"""Reading generation parameters stored in the text chunks of a PNG file."""

from __future__ import annotations

import os
import re
import struct
import zlib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from neuralpixel.constants import (
    DEFAULT_CFG,
    DEFAULT_SAMPLE,
    DEFAULT_SCHEDULE,
    DEFAULT_SEED,
    LIST_RESOLUTIONS,
    LIST_SAMPLES,
    LIST_SCHEDULES,
    LIST_STEPS,
    MODELS_PATH,
    NEGATIVE_PROMPT,
    POSITIVE_PROMPT,
)
from neuralpixel.files import list_model_files
from neuralpixel.strutils import list_index

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_NEGATIVE_MARK = '"\nNegative prompt: "'
_STEPS_MARK = '"\nSteps: '
_CFG_MARK = ", CFG scale: "
_GUIDANCE_MARK = ", Guidance: "
_SEED_MARK = ", Seed: "
_SIZE_MARK = ", Size: "
_MODEL_MARK = ", Model: "
_RNG_MARK = ", RNG: "
_SAMPLER_MARK = ", Sampler: "
_VERSION_MARK = ", Version: "

_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PATTERN = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class PngParameters:
    """Settings recovered from an image; None where the text held nothing."""

    positive: str | None = None
    negative: str | None = None
    steps_index: int | None = None
    cfg: float | None = None
    seed: int | None = None
    width_index: int | None = None
    height_index: int | None = None
    model_index: int | None = None
    sample_index: int | None = None
    schedule_index: int | None = None


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _parse_text_chunk(kind: bytes, data: bytes) -> tuple[str, str] | None:
    key, sep, rest = data.partition(b"\x00")
    if not sep:
        return None
    keyword = key.decode("latin-1")
    if kind == b"tEXt":
        return keyword, _decode(rest)
    if kind == b"zTXt":
        if not rest or rest[0] != 0:
            return None
        try:
            return keyword, _decode(zlib.decompress(rest[1:]))
        except zlib.error:
            return None
    # iTXt
    if len(rest) < 2:
        return None
    compressed, method = rest[0], rest[1]
    _, sep1, rest = rest[2:].partition(b"\x00")
    _, sep2, body = rest.partition(b"\x00")
    if not (sep1 and sep2):
        return None
    if compressed:
        if method != 0:
            return None
        try:
            body = zlib.decompress(body)
        except zlib.error:
            return None
    return keyword, body.decode("utf-8", errors="replace")


def read_text_chunks(path: str | os.PathLike[str]) -> list[tuple[str, str]]:
    """Keyword and text of every text chunk before the image data."""
    data = Path(path).read_bytes()
    if not data.startswith(PNG_SIGNATURE):
        raise ValueError(f"{path} is not a PNG file")
    chunks: list[tuple[str, str]] = []
    offset = len(PNG_SIGNATURE)
    while True:
        if offset + 8 > len(data):
            raise ValueError("truncated PNG chunk header")
        length, kind = struct.unpack(">I4s", data[offset : offset + 8])
        body_end = offset + 8 + length
        if body_end + 4 > len(data):
            raise ValueError("truncated PNG chunk")
        body = data[offset + 8 : body_end]
        (crc,) = struct.unpack(">I", data[body_end : body_end + 4])
        if kind in (b"IDAT", b"IEND"):
            break
        if kind in (b"tEXt", b"zTXt", b"iTXt") and zlib.crc32(kind + body) == crc:
            parsed = _parse_text_chunk(kind, body)
            if parsed is not None:
                chunks.append(parsed)
        offset = body_end + 4
    return chunks


def _between(text: str, start: int, skip: int, end: int) -> str:
    return text[start + skip : end]


def parse_parameters(text: str, model_files: Sequence[str] | None = None) -> PngParameters:
    """Pick prompts and settings out of the joined PNG text."""
    result = PngParameters()
    pos_start = text.find('"')
    neg_start = text.find(_NEGATIVE_MARK)
    steps_start = text.find(_STEPS_MARK)
    cfg_start = text.find(_CFG_MARK)
    guidance_start = text.find(_GUIDANCE_MARK)
    seed_start = text.find(_SEED_MARK)
    size_start = text.find(_SIZE_MARK)
    model_start = text.find(_MODEL_MARK)
    rng_start = text.find(_RNG_MARK)
    sampler_start = text.find(_SAMPLER_MARK)
    version_start = text.find(_VERSION_MARK)

    if pos_start >= 0 and neg_start >= 0:
        prompt = _between(text, pos_start, 1, neg_start)
        result.positive = prompt if neg_start - pos_start - 1 > 0 else POSITIVE_PROMPT

    if neg_start >= 0 and steps_start >= 0:
        prompt = _between(text, neg_start, len(_NEGATIVE_MARK), steps_start)
        if steps_start - neg_start - len(_NEGATIVE_MARK) > 0:
            result.negative = prompt
        else:
            result.negative = NEGATIVE_PROMPT

    if steps_start >= 0 and cfg_start >= 0:
        steps = _between(text, steps_start, len(_STEPS_MARK), cfg_start)
        result.steps_index = list_index(LIST_STEPS, steps)

    if cfg_start >= 0 and guidance_start >= 0:
        match = _FLOAT_PATTERN.match(_between(text, cfg_start, len(_CFG_MARK), guidance_start))
        result.cfg = float(match.group(1)) if match else DEFAULT_CFG

    if seed_start >= 0 and size_start >= 0:
        match = _INT_PATTERN.match(_between(text, seed_start, len(_SEED_MARK), size_start))
        result.seed = int(match.group(1)) if match else int(DEFAULT_SEED)

    if size_start >= 0 and model_start >= 0:
        size = _between(text, size_start, len(_SIZE_MARK), model_start)
        width, sep, height = size.partition("x")
        if sep:
            result.width_index = list_index(LIST_RESOLUTIONS, width)
            result.height_index = list_index(LIST_RESOLUTIONS, height)

    if model_start >= 0 and rng_start >= 0:
        model = _between(text, model_start, len(_MODEL_MARK), rng_start)
        files = model_files if model_files is not None else list_model_files(MODELS_PATH)
        result.model_index = list_index(files, model)

    if version_start >= 0 and sampler_start >= 0:
        sampler_text = _between(text, sampler_start, len(_SAMPLER_MARK), version_start)
        tokens = sampler_text.split()
        if " " in sampler_text and len(tokens) >= 2:
            sampler = tokens[0][: sampler_text.index(" ")]
            result.sample_index = list_index(LIST_SAMPLES, sampler)
            result.schedule_index = list_index(LIST_SCHEDULES, tokens[1])
        else:
            result.sample_index = DEFAULT_SAMPLE
            result.schedule_index = DEFAULT_SCHEDULE

    return result


def read_png_parameters(
    path: str | os.PathLike[str], model_files: Sequence[str] | None = None
) -> PngParameters:
    """Read a PNG file and return the generation parameters found in it."""
    text = "".join(f"{key} {value}" for key, value in read_text_chunks(path))
    return parse_parameters(text, model_files)