# Config
CONFIG_DIRNAME = ".mvpb"
CONFIG_FILENAME = "config.yml"

# Step seeded as active on the first user message
INITIAL_STEP_ID = "analyze"

# Message surfaced to the user when the transport fails mid-stream
GENERATION_ERROR_MESSAGE = "An error occurred during generation"

# Fallback language tag for unknown extensions
DEFAULT_LANGUAGE = "text"

# Replay defaults
DEFAULT_REPLAY_CHUNK_SIZE = 64
DEFAULT_TRANSCRIPT_ENCODING = "utf-8"

