"""Persistent prompts, last image path and generation settings."""

from __future__ import annotations

import dataclasses
import os
import re
from dataclasses import dataclass
from pathlib import Path

from neuralpixel.constants import (
    CACHE_DIR,
    CLIPS_PATH,
    CONTROLNET_PATH,
    DEFAULT_BATCH_SIZE,
    DEFAULT_CFG,
    DEFAULT_DENOISE,
    DEFAULT_IMG_PATH,
    DEFAULT_N_STEPS,
    DEFAULT_OPT_VRAM,
    DEFAULT_RP_UPSCALE,
    DEFAULT_SAMPLE,
    DEFAULT_SCHEDULE,
    DEFAULT_SEED,
    DEFAULT_SIZE,
    MODELS_PATH,
    NEGATIVE_PROMPT,
    OPTIONAL_ITEMS,
    POSITIVE_PROMPT,
    TEXT_ENCODERS_PATH,
    UPSCALES_PATH,
    VAES_PATH,
)
from neuralpixel.files import is_file_empty, list_model_files
from neuralpixel.strutils import format_decimal, list_index

POSITIVE_CACHE = "pp_cache"
NEGATIVE_CACHE = "np_cache"
IMAGE_CACHE = "img_cache"
SETTINGS_CACHE = "sd_cache"

_DEFAULT_FLAG = DEFAULT_OPT_VRAM == 1


@dataclass
class Settings:
    """Every option that drives a generation run."""

    model_index: int = 0
    vae_index: int = 0
    cnet_index: int = 0
    upscale_index: int = 0
    clip_l_index: int = 0
    clip_g_index: int = 0
    t5xxl_index: int = 0
    sample_index: int = DEFAULT_SAMPLE
    schedule_index: int = DEFAULT_SCHEDULE
    steps_index: int = DEFAULT_N_STEPS
    width_index: int = DEFAULT_SIZE
    height_index: int = DEFAULT_SIZE
    batch_index: int = DEFAULT_BATCH_SIZE
    cpu: bool = _DEFAULT_FLAG
    vae_tiling: bool = _DEFAULT_FLAG
    keep_clip_on_cpu: bool = _DEFAULT_FLAG
    keep_cnet_on_cpu: bool = _DEFAULT_FLAG
    keep_vae_on_cpu: bool = _DEFAULT_FLAG
    flash_attention: bool = _DEFAULT_FLAG
    taesd: bool = _DEFAULT_FLAG
    verbose: bool = _DEFAULT_FLAG
    cfg: float = DEFAULT_CFG
    denoise: float = DEFAULT_DENOISE
    seed: float = DEFAULT_SEED
    upscale_repeats: float = DEFAULT_RP_UPSCALE


@dataclass(frozen=True)
class ModelSelection:
    """File names chosen for each model slot; 'None' means unused."""

    model: str = OPTIONAL_ITEMS
    vae: str = OPTIONAL_ITEMS
    cnet: str = OPTIONAL_ITEMS
    upscale: str = OPTIONAL_ITEMS
    clip_l: str = OPTIONAL_ITEMS
    clip_g: str = OPTIONAL_ITEMS
    t5xxl: str = OPTIONAL_ITEMS


# (selection field, settings index field, directory) in cache order.
MODEL_SLOTS = (
    ("model", "model_index", MODELS_PATH),
    ("vae", "vae_index", VAES_PATH),
    ("cnet", "cnet_index", CONTROLNET_PATH),
    ("upscale", "upscale_index", UPSCALES_PATH),
    ("clip_l", "clip_l_index", CLIPS_PATH),
    ("clip_g", "clip_g_index", CLIPS_PATH),
    ("t5xxl", "t5xxl_index", TEXT_ENCODERS_PATH),
)
_INDEX_FIELDS = (
    "sample_index",
    "schedule_index",
    "steps_index",
    "width_index",
    "height_index",
    "batch_index",
)
_FLAG_FIELDS = (
    "cpu",
    "vae_tiling",
    "keep_clip_on_cpu",
    "keep_cnet_on_cpu",
    "keep_vae_on_cpu",
    "flash_attention",
    "taesd",
    "verbose",
)
_FLOAT_FIELDS = (("cfg", 1), ("denoise", 2), ("seed", 1), ("upscale_repeats", 1))

_INDEX_START = len(MODEL_SLOTS)
_FLAG_START = _INDEX_START + len(_INDEX_FIELDS)
_FLOAT_START = _FLAG_START + len(_FLAG_FIELDS)

_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PATTERN = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _leading_int(text: str) -> int | None:
    match = _INT_PATTERN.match(text)
    return int(match.group(1)) if match else None


def _leading_float(text: str) -> float:
    match = _FLOAT_PATTERN.match(text)
    return float(match.group(1)) if match else 0.0


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _settings_text(settings: Settings, selection: ModelSelection) -> str:
    lines = [getattr(selection, name) for name, _, _ in MODEL_SLOTS]
    lines += [str(getattr(settings, name)) for name in _INDEX_FIELDS]
    lines += ["1" if getattr(settings, name) else "0" for name in _FLAG_FIELDS]
    lines += [format_decimal(getattr(settings, name), places) for name, places in _FLOAT_FIELDS]
    return "".join(f"{line}\n" for line in lines)


_DEFAULT_CONTENTS = {
    POSITIVE_CACHE: POSITIVE_PROMPT,
    NEGATIVE_CACHE: NEGATIVE_PROMPT,
    IMAGE_CACHE: DEFAULT_IMG_PATH,
    SETTINGS_CACHE: _settings_text(Settings(), ModelSelection()),
}


class CacheStore:
    """The .cache directory that keeps state between runs."""

    def __init__(self, root: str | os.PathLike[str] = ".") -> None:
        self.root = Path(root)
        self.directory = self.root / CACHE_DIR

    def path(self, name: str) -> Path:
        """Location of the cache file ``name``."""
        return self.directory / name

    def _write(self, name: str, content: str) -> None:
        self.path(name).write_bytes(content.encode("utf-8"))

    def _read(self, name: str) -> str:
        path = self.path(name)
        if not path.exists() or is_file_empty(path):
            self.create(name)
        return path.read_bytes().decode("utf-8")

    def create(self, name: str) -> None:
        """Write the default contents of the cache file ``name``."""
        try:
            content = _DEFAULT_CONTENTS[name]
        except KeyError:
            raise ValueError(f"unknown cache file: {name!r}") from None
        self.directory.mkdir(parents=True, exist_ok=True)
        self._write(name, content)

    def load_positive_prompt(self) -> str:
        """The cached positive prompt, creating the default when missing."""
        return self._read(POSITIVE_CACHE)

    def load_negative_prompt(self) -> str:
        """The cached negative prompt, creating the default when missing."""
        return self._read(NEGATIVE_CACHE)

    def load_image_path(self) -> str:
        """Path of the last generated image, or the example image."""
        return self._read(IMAGE_CACHE).split("\n", 1)[0]

    def load_settings(self) -> Settings:
        """Read the cached settings, resolving model names to list positions."""
        lines = _lines(self._read(SETTINGS_CACHE))
        changes: dict[str, object] = {}
        for (_, index_field, folder), line in zip(MODEL_SLOTS, lines):
            changes[index_field] = list_index(list_model_files(self.root / folder), line)
        for field, line in zip(_INDEX_FIELDS, lines[_INDEX_START:]):
            number = _leading_int(line)
            if number is not None:
                changes[field] = number
        for field, line in zip(_FLAG_FIELDS, lines[_FLAG_START:]):
            number = _leading_int(line)
            if number is not None:
                changes[field] = number == 1
        for (field, _), line in zip(_FLOAT_FIELDS, lines[_FLOAT_START:]):
            changes[field] = _leading_float(line)
        return dataclasses.replace(Settings(), **changes)

    def save(
        self,
        settings: Settings,
        selection: ModelSelection,
        positive: str,
        negative: str,
        image_number: int,
    ) -> None:
        """Store prompts, the next image path and all settings."""
        self.directory.mkdir(parents=True, exist_ok=True)
        self._write(POSITIVE_CACHE, positive)
        self._write(NEGATIVE_CACHE, negative)
        self._write(IMAGE_CACHE, f"./outputs/IMG_{image_number}.png\n")
        self._write(SETTINGS_CACHE, _settings_text(settings, selection))