"""Building the command line for the image generator binary."""

from __future__ import annotations

import os
from pathlib import Path

from neuralpixel.cache import MODEL_SLOTS, CacheStore, ModelSelection, Settings
from neuralpixel.constants import (
    CLIPS_PATH,
    CONTROLNET_PATH,
    EMBEDDINGS_PATH,
    LIST_RESOLUTIONS,
    LIST_SAMPLES,
    LIST_SCHEDULES,
    LIST_STEPS,
    LORAS_PATH,
    MODELS_PATH,
    OPTIONAL_ITEMS,
    OUTPUTS_DIR_NAME,
    TEXT_ENCODERS_PATH,
    UPSCALES_PATH,
    VAES_PATH,
)
from neuralpixel.files import count_output_files, list_model_files
from neuralpixel.strutils import format_decimal

TAESD_PATH = ".models/TAESD/taesd_decoder.safetensors"


def _chosen(name: str | None) -> bool:
    return name is not None and name != OPTIONAL_ITEMS


def resolve_selection(settings: Settings, root: str | os.PathLike[str] = ".") -> ModelSelection:
    """Turn the model indices in ``settings`` into file names."""
    base = Path(root)
    names = {}
    for name, index_field, folder in MODEL_SLOTS:
        items = list_model_files(base / folder)
        index = getattr(settings, index_field)
        if not 0 <= index < len(items):
            raise IndexError(f"{index_field} {index} out of range for {folder}")
        names[name] = items[index]
    return ModelSelection(**names)


def build_command(
    settings: Settings,
    selection: ModelSelection,
    positive: str | None,
    negative: str | None,
    img2img_path: str | os.PathLike[str] | None = None,
    image_number: int = 1,
    windows: bool = False,
) -> list[str]:
    """Argument list for one generation run; the last item is the output path."""
    img2img = str(img2img_path) if img2img_path is not None else None
    use_img2img = _chosen(img2img)
    binary = "sd-cpu" if settings.cpu else "sd"
    args = [f"{os.getcwd()}\\{binary}" if windows else f"./{binary}"]

    if use_img2img:
        args += ["-M", "img2img", "-i", img2img]

    args += ["-m", f"{MODELS_PATH}{selection.model}"]
    args += ["--lora-model-dir", LORAS_PATH, "--embd-dir", EMBEDDINGS_PATH.rstrip("/")]

    if _chosen(selection.vae):
        args += ["--vae", f"{VAES_PATH}{selection.vae}"]
        if settings.keep_vae_on_cpu:
            args.append("--vae-on-cpu")

    if _chosen(selection.cnet):
        args += ["--control-net", f"{CONTROLNET_PATH}{selection.cnet}"]
        if settings.keep_cnet_on_cpu:
            args.append("--control-net-cpu")

    if _chosen(selection.upscale):
        args += [
            "--upscale-model",
            f"{UPSCALES_PATH}{selection.upscale}",
            "--upscale-repeats",
            format_decimal(settings.upscale_repeats, 0),
        ]

    if _chosen(selection.clip_l):
        args += ["--clip_l", f"{CLIPS_PATH}{selection.clip_l}"]
    if _chosen(selection.clip_g):
        args += ["--clip_g", f"{CLIPS_PATH}{selection.clip_g}"]
    if _chosen(selection.t5xxl):
        args += ["--t5xxl", f"{TEXT_ENCODERS_PATH}{selection.t5xxl}"]

    if settings.keep_clip_on_cpu and any(
        _chosen(name) for name in (selection.clip_l, selection.clip_g, selection.t5xxl)
    ):
        args.append("--clip-on-cpu")

    args += ["--strength", format_decimal(settings.denoise, 2)]

    if settings.taesd:
        args += ["--taesd", TAESD_PATH]

    args += ["--cfg-scale", format_decimal(settings.cfg, 1)]
    args += ["--sampling-method", LIST_SAMPLES[settings.sample_index]]
    args += ["--schedule", LIST_SCHEDULES[settings.schedule_index]]
    args += ["-s", format_decimal(settings.seed, 0)]
    args += ["--steps", LIST_STEPS[settings.steps_index]]
    args += ["-b", LIST_STEPS[settings.batch_index]]

    if not use_img2img:
        args += ["-W", LIST_RESOLUTIONS[settings.width_index]]
        args += ["-H", LIST_RESOLUTIONS[settings.height_index]]

    if settings.vae_tiling:
        args.append("--vae-tiling")
    if settings.flash_attention:
        args.append("--diffusion-fa")

    if positive is not None:
        args += ["-p", f'"{positive}"']
    if negative is not None:
        args += ["-n", f'"{negative}"']

    if windows:
        args += ["-o", f".\\outputs\\IMG_{image_number}.png"]
    else:
        args += ["-o", f"./outputs/IMG_{image_number}.png"]
    return args


def command_line(args: list[str]) -> str:
    """The arguments as one space-separated line, as shown in verbose mode."""
    return " ".join(args)


def generate_command(
    settings: Settings,
    positive: str,
    negative: str,
    img2img_path: str | os.PathLike[str] | None = None,
    cache: CacheStore | None = None,
    root: str | os.PathLike[str] = ".",
) -> list[str]:
    """Build the command for the current settings and record them in the cache."""
    base = Path(root)
    selection = resolve_selection(settings, base)
    image_number = count_output_files(base / OUTPUTS_DIR_NAME)
    args = build_command(
        settings,
        selection,
        positive,
        negative,
        img2img_path,
        image_number,
        windows=os.name == "nt",
    )
    store = cache if cache is not None else CacheStore(base)
    store.save(settings, selection, positive, negative, image_number)
    if settings.verbose:
        print(command_line(args))
    return args