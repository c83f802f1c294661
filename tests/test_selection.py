import pytest

from neuralpixel.cache import Settings
from neuralpixel.constants import (
    DEFAULT_CFG,
    DEFAULT_DENOISE,
    DEFAULT_N_STEPS,
    DEFAULT_SAMPLE,
    DEFAULT_SCHEDULE,
    DEFAULT_SEED,
    DEFAULT_SIZE,
    NEGATIVE_PROMPT,
    POSITIVE_PROMPT,
)
from neuralpixel.selection import (
    ButtonState,
    default_prompts,
    default_settings,
    generate_button_state,
    insert_into_prompt,
)
from neuralpixel.strutils import InsertKind


def test_embedding_is_appended():
    result = insert_into_prompt("ugly", "bad_hands.pt", InsertKind.EMBEDDING)
    assert result == "ugly, (embedding:bad_hands)"


def test_lora_is_prepended():
    result = insert_into_prompt("a cat", "style.safetensors", InsertKind.LORA)
    assert result == "<lora:style:1> a cat"


@pytest.mark.parametrize("kind", [InsertKind.EMBEDDING, InsertKind.LORA])
def test_none_item_leaves_prompt(kind):
    assert insert_into_prompt("a cat", "None", kind) == "a cat"


def test_integer_kind_accepted():
    assert insert_into_prompt("x", "y.pt", 0) == insert_into_prompt("x", "y.pt", InsertKind.EMBEDDING)


def test_invalid_kind_raises():
    with pytest.raises(ValueError):
        insert_into_prompt("x", "y.pt", 5)


def test_button_disabled_without_model():
    state = generate_button_state(0)
    assert state == ButtonState("Select a model first.", False)


@pytest.mark.parametrize("index", [1, 2, 10])
def test_button_enabled_with_model(index):
    state = generate_button_state(index)
    assert state.label == "Generate"
    assert state.sensitive is True


def test_default_settings_values():
    settings = default_settings()
    assert settings.model_index == 0
    assert settings.sample_index == DEFAULT_SAMPLE
    assert settings.schedule_index == DEFAULT_SCHEDULE
    assert settings.steps_index == DEFAULT_N_STEPS
    assert settings.width_index == DEFAULT_SIZE
    assert settings.height_index == DEFAULT_SIZE
    assert settings.cfg == DEFAULT_CFG
    assert settings.denoise == DEFAULT_DENOISE
    assert settings.seed == DEFAULT_SEED
    assert settings.cpu is False


def test_default_settings_match_dataclass_defaults():
    assert default_settings() == Settings()


def test_default_settings_are_fresh():
    first = default_settings()
    first.cfg = 12.0
    assert default_settings().cfg == DEFAULT_CFG


def test_default_prompts():
    assert default_prompts() == (POSITIVE_PROMPT, NEGATIVE_PROMPT)