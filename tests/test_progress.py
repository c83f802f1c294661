import pytest

from neuralpixel.progress import (
    DECODING_LABEL,
    NewlineMode,
    ProgressTracker,
    parse_load_error,
)


def test_initial_state():
    tracker = ProgressTracker()
    assert tracker.newline is NewlineMode.LF
    assert (tracker.image, tracker.total) == (1, 1)
    assert tracker.label is None


def test_generating_image_switches_to_carriage_return():
    tracker = ProgressTracker()
    assert tracker.feed_stdout("[INFO] generating image: 2/3 - seed 42") is None
    assert (tracker.image, tracker.total) == (2, 3)
    assert tracker.newline is NewlineMode.CR


def test_sampling_progress_label():
    tracker = ProgressTracker()
    tracker.feed_stdout("[INFO] generating image: 1/2 - seed 7")
    label = tracker.feed_stdout("  |=========>     | 10/20 - 1.50s/it")
    assert label == "Sampling... 50% 1/2"
    assert tracker.label == label
    assert tracker.newline is NewlineMode.CR


def test_last_step_restores_line_feed():
    tracker = ProgressTracker()
    tracker.feed_stdout("generating image: 1/1 - seed 1")
    label = tracker.feed_stdout("|=====| 19/20 - 2.00it/s")
    assert label.endswith(" 1/1")
    assert tracker.newline is NewlineMode.LF


def test_sampling_completed_on_last_image():
    tracker = ProgressTracker()
    assert tracker.feed_stdout("[INFO] sampling completed, taking 3s") == DECODING_LABEL


def test_sampling_completed_before_last_image():
    tracker = ProgressTracker()
    tracker.feed_stdout("generating image: 1/2 - seed 3")
    assert tracker.feed_stdout("[INFO] sampling completed, taking 3s") is None
    assert tracker.label is None


@pytest.mark.parametrize("line", ["|==| 5/61 - 1.0s/it", "|==| 1/0 - 1.0s/it", "no bar here", "|== garbage"])
def test_lines_without_progress(line):
    tracker = ProgressTracker()
    assert tracker.feed_stdout(line) is None
    assert tracker.label is None


def test_parse_load_error():
    line = "[ERROR] stable-diffusion.cpp:123  - init model loader from file failed: './models/checkpoints/a.safetensors'"
    assert parse_load_error(line) == "Error loading: ./models/checkpoints/a.safetensors"


@pytest.mark.parametrize(
    "line",
    [
        "[INFO] loading model",
        " [ERROR] stable-diffusion.cpp:1  - init model loader from file failed: 'x'",
        "[ERROR] stable-diffusion.cpp:1  - init model loader from file failed: ''",
    ],
)
def test_parse_load_error_rejects(line):
    assert parse_load_error(line) is None