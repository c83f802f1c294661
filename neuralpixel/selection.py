"""Reacting to option choices: prompt insertion, button state and defaults."""

from __future__ import annotations

from dataclasses import dataclass

from neuralpixel.cache import Settings
from neuralpixel.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CFG,
    DEFAULT_DENOISE,
    DEFAULT_MODELS,
    DEFAULT_N_STEPS,
    DEFAULT_OPT_VRAM,
    DEFAULT_RP_UPSCALE,
    DEFAULT_SAMPLE,
    DEFAULT_SCHEDULE,
    DEFAULT_SEED,
    DEFAULT_SIZE,
    NEGATIVE_PROMPT,
    OPTIONAL_ITEMS,
    POSITIVE_PROMPT,
)
from neuralpixel.strutils import InsertKind, format_lora_embedding

GENERATE_LABEL = "Generate"
SELECT_MODEL_LABEL = "Select a model first."


@dataclass(frozen=True)
class ButtonState:
    """Label and clickability of the generate button."""

    label: str
    sensitive: bool


def insert_into_prompt(prompt: str, item: str, kind: InsertKind) -> str:
    """Add the snippet for ``item`` to ``prompt``.

    Embeddings are appended to the end, LoRAs are put at the start; the
    'None' entry leaves the prompt as it is.
    """
    if item == OPTIONAL_ITEMS:
        return prompt
    kind = InsertKind(kind)
    snippet = format_lora_embedding(item, kind)
    if kind is InsertKind.EMBEDDING:
        return prompt + snippet
    return snippet + prompt


def generate_button_state(model_index: int) -> ButtonState:
    """The generate button is only usable once a model other than 'None' is chosen."""
    if model_index == 0:
        return ButtonState(SELECT_MODEL_LABEL, False)
    return ButtonState(GENERATE_LABEL, True)


def default_settings() -> Settings:
    """A fresh set of options as restored by the reset action."""
    flag = DEFAULT_OPT_VRAM == 1
    return Settings(
        model_index=DEFAULT_MODELS,
        vae_index=DEFAULT_MODELS,
        cnet_index=DEFAULT_MODELS,
        upscale_index=DEFAULT_MODELS,
        clip_l_index=DEFAULT_MODELS,
        clip_g_index=DEFAULT_MODELS,
        t5xxl_index=DEFAULT_MODELS,
        sample_index=DEFAULT_SAMPLE,
        schedule_index=DEFAULT_SCHEDULE,
        steps_index=DEFAULT_N_STEPS,
        width_index=DEFAULT_SIZE,
        height_index=DEFAULT_SIZE,
        batch_index=DEFAULT_BATCH_SIZE,
        cpu=flag,
        vae_tiling=flag,
        keep_clip_on_cpu=flag,
        keep_cnet_on_cpu=flag,
        keep_vae_on_cpu=flag,
        flash_attention=flag,
        cfg=DEFAULT_CFG,
        denoise=DEFAULT_DENOISE,
        seed=DEFAULT_SEED,
        upscale_repeats=DEFAULT_RP_UPSCALE,
    )


def default_prompts() -> tuple[str, str]:
    """The default positive and negative prompts."""
    return POSITIVE_PROMPT, NEGATIVE_PROMPT