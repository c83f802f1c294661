"""Fixed paths, option lists, prompts and defaults used across the application."""

SD_FILES_PATH = "./models/"
MODELS_PATH = "./models/checkpoints/"
CLIPS_PATH = "./models/clips/"
CONTROLNET_PATH = "./models/controlnet/"
EMBEDDINGS_PATH = "./models/embeddings/"
LORAS_PATH = "./models/loras/"
TEXT_ENCODERS_PATH = "./models/text_encoders/"
UNET_PATH = "./models/unet/"
UPSCALES_PATH = "./models/upscale_models/"
VAES_PATH = "./models/vae/"
OUTPUTS_PATH = "./outputs/"
CACHE_DIR = ".cache"

MODELS_DIR_NAME = "models"
OUTPUTS_DIR_NAME = "outputs"
MODEL_SUBDIRS = (
    "checkpoints",
    "clips",
    "controlnet",
    "embeddings",
    "loras",
    "text_encoders",
    "unet",
    "upscale_models",
    "vae",
)

LIST_RESOLUTIONS = (
    "64", "128", "192", "256", "320", "384", "448", "512", "576", "640",
    "704", "768", "832", "896", "960", "1024", "1088", "1152", "1216", "1280",
)
LIST_STEPS = ("1", "2", "4", "8", "12", "16", "20", "24", "30", "36", "42", "50", "60")
LIST_SAMPLES = (
    "euler", "euler_a", "heun", "dpm2", "dpm++2s_a", "dpm++2m",
    "dpm++2mv2", "ipndm", "ipndm_v", "lcm",
)
LIST_SCHEDULES = ("discrete", "karras", "exponential", "ays", "gits")

POSITIVE_PROMPT = (
    "A photo of a redhead woman standing under neon lights at night, wearing an "
    "elegant white dress. The scene is set on a rainy city street with a glossy, "
    "wet floor reflecting vibrant neon signs in red, blue, and purple. Cinematic "
    "lighting, soft shadows, and intricate fabric texture. Photorealistic, ultra "
    "high resolution, bokeh background, 85mm lens, shallow depth of field."
)
NEGATIVE_PROMPT = (
    "(low quality, worst quality:1.5), extra fingers, mutated hands, ((poorly drawn "
    "hands)), ((poorly drawn face)), ((bad anatomy)), (((bad proportions))), ((extra "
    "limbs)), cloned face, (((disfigured))), out of frame, ugly, extra limbs, (bad "
    "anatomy), gross proportions, (malformed limbs), ((missing arms)), ((missing "
    "legs)), (((extra arms))), (((extra legs)))"
)
OPTIONAL_ITEMS = "None"
DEFAULT_IMG_PATH = "./resources/example.png"

DEFAULT_MODELS = 0
DEFAULT_SAMPLE = 5
DEFAULT_SCHEDULE = 1
DEFAULT_N_STEPS = 7
DEFAULT_SIZE = 7
DEFAULT_BATCH_SIZE = 0
DEFAULT_OPT_VRAM = 0
DEFAULT_CFG = 6.0
DEFAULT_DENOISE = 0.75
DEFAULT_SEED = -1.0
DEFAULT_RP_UPSCALE = 1.0

DROPDOWN_LABEL_LENGTH = 28