"""The state of one working session: prompts, options and the img2img source."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path

from neuralpixel.cache import MODEL_SLOTS, CacheStore
from neuralpixel.command import generate_command
from neuralpixel.constants import (
    DEFAULT_IMG_PATH,
    EMBEDDINGS_PATH,
    LORAS_PATH,
    MODELS_PATH,
)
from neuralpixel.files import list_model_files
from neuralpixel.pnginfo import PngParameters, read_png_parameters
from neuralpixel.selection import default_prompts, default_settings, generate_button_state

CFG_RANGE = (1.0, 30.0)
SEED_RANGE = (-1.0, 4294967295.0)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(max(float(value), low), high)


class Session:
    """Everything the user has chosen, loaded from and saved to the cache."""

    def __init__(self, root: str | os.PathLike[str] = ".") -> None:
        self.root = Path(root)
        self.cache = CacheStore(self.root)
        self.settings = self.cache.load_settings()
        self.positive = self.cache.load_positive_prompt()
        self.negative = self.cache.load_negative_prompt()
        self.image_path = self.cache.load_image_path()
        self.img2img_path: str | None = None

    def generate(self) -> list[str]:
        """Build the generator command and record the settings in the cache."""
        state = generate_button_state(self.settings.model_index)
        if not state.sensitive:
            raise ValueError(state.label)
        return generate_command(
            self.settings,
            self.positive,
            self.negative,
            self.img2img_path,
            self.cache,
            self.root,
        )

    def reset(self) -> None:
        """Restore default prompts and options; TAESD and verbosity are kept."""
        self.settings = dataclasses.replace(
            default_settings(),
            taesd=self.settings.taesd,
            verbose=self.settings.verbose,
        )
        self.positive, self.negative = default_prompts()

    def refresh(self) -> dict[str, list[str]]:
        """Re-read the model directories; the option lists for every slot."""
        options = {name: list_model_files(self.root / folder) for name, _, folder in MODEL_SLOTS}
        options["lora"] = list_model_files(self.root / LORAS_PATH)
        options["embedding"] = list_model_files(self.root / EMBEDDINGS_PATH)
        return options

    def load_png_info(self, path: str | os.PathLike[str]) -> PngParameters:
        """Apply the generation parameters stored in a PNG file."""
        params = read_png_parameters(path, list_model_files(self.root / MODELS_PATH))
        if params.positive is not None:
            self.positive = params.positive
        if params.negative is not None:
            self.negative = params.negative
        changes: dict[str, object] = {}
        for field in (
            "steps_index",
            "width_index",
            "height_index",
            "model_index",
            "sample_index",
            "schedule_index",
        ):
            value = getattr(params, field)
            if value is not None:
                changes[field] = value
        if params.cfg is not None:
            changes["cfg"] = _clamp(params.cfg, CFG_RANGE)
        if params.seed is not None:
            changes["seed"] = _clamp(params.seed, SEED_RANGE)
        self.settings = dataclasses.replace(self.settings, **changes)
        return params

    def set_img2img(self, path: str | os.PathLike[str]) -> None:
        """Use ``path`` as the source image and show it when it exists."""
        self.img2img_path = str(path)
        self.image_path = str(path) if Path(path).exists() else DEFAULT_IMG_PATH

    def clear_img2img(self) -> None:
        """Go back to plain text-to-image generation."""
        self.img2img_path = None
        self.image_path = DEFAULT_IMG_PATH