# neuralpixel

Neural Pixel prepares stable-diffusion image generation runs from a working
directory of model files. It keeps the last prompts and settings in a small
cache, builds the argument list for the `sd` (or `sd-cpu`) generator binary,
and reads the generation parameters stored in the text chunks of a PNG file.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Working directory layout

```
models/
  checkpoints/  clips/  controlnet/  embeddings/  loras/
  text_encoders/  unet/  upscale_models/  vae/
outputs/
.cache/
```

When a model directory is listed and `models/` does not exist yet, `models/`,
all its subdirectories and `outputs/` are created. The `.cache/` directory is
created when the cache is first read or written.

Put checkpoints in `models/checkpoints/`, and any VAE, ControlNet, upscaler,
CLIP or T5 files in their own directories. Every list of choices starts with
`None`, followed by the files of that directory sorted by name without regard
to case. Output images are numbered from the count of files already in
`outputs/` plus one, as `./outputs/IMG_<n>.png`.

## Command line

```
neuralpixel --help
```

The global option `--root` sets the working directory (default `.`).

- `neuralpixel generate` loads the cached session, applies the options given
  and prints the generator command line. It also saves the prompts and
  settings back to the cache. Options: `--model NAME` (a file in
  `models/checkpoints/`), `--prompt`, `--negative`, `--img2img PATH`,
  `--png PATH` (take parameters from a PNG), `--seed`, `--cfg`, and `--reset`
  (start from the default prompts and options). It fails with
  "Select a model first." while no checkpoint is chosen.
- `neuralpixel files` lists the choices for every slot: model, vae, cnet,
  upscale, clip_l, clip_g, t5xxl, lora and embedding.
- `neuralpixel info PATH` prints the parameters found in a PNG file.

Errors are reported on standard error and the command exits with status 1.

## Library use

```python
from neuralpixel.session import Session

session = Session(".")
session.load_png_info("outputs/IMG_1.png")  # fill prompts and settings from a PNG
args = session.generate()                   # list of command-line arguments
```

`Session` also has `reset()`, `refresh()` (the option lists for every slot),
`set_img2img(path)` and `clear_img2img()`.

Other parts you can use on their own:

- `neuralpixel.command.build_command` turns `Settings`, a `ModelSelection` and the prompts into an argument list; `command_line` joins it into one line.
- `neuralpixel.pnginfo.read_png_parameters` returns a `PngParameters` with the prompts, steps, CFG scale, seed, size, model, sampler and scheduler.
- `neuralpixel.cache.CacheStore` reads and writes the files in `.cache/`.
- `neuralpixel.selection.insert_into_prompt` adds a LoRA (at the start) or embedding (at the end) to a prompt.
- `neuralpixel.progress.ProgressTracker` turns the generator's output lines into a label such as `Sampling... 45% 1/2`; `parse_load_error` picks out model files that failed to load.

## What it does not do

The package does not start the generator itself, and it has no graphical
window. `generate` only builds and prints the command line; running it and
feeding its output to `ProgressTracker` is up to the caller.