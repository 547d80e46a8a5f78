"""
Cloud Code Constants

Backend hosts, required client-identity headers, model name mappings and the
model catalog exposed by the proxy.
"""

import json

# Cloud Code hosts
CLOUDCODE_ENDPOINT_DAILY = "https://daily-cloudcode-pa.sandbox.googleapis.com"
CLOUDCODE_ENDPOINT_AUTOPUSH = "https://autopush-cloudcode-pa.sandbox.googleapis.com"
CLOUDCODE_ENDPOINT_PROD = "https://cloudcode-pa.googleapis.com"

# Fallback order: daily -> autopush -> prod
CLOUDCODE_ENDPOINT_FALLBACKS = (
    CLOUDCODE_ENDPOINT_DAILY,
    CLOUDCODE_ENDPOINT_AUTOPUSH,
    CLOUDCODE_ENDPOINT_PROD,
)

LOAD_CODE_ASSIST_PATH = "/v1internal:loadCodeAssist"
GENERATE_CONTENT_PATH = "/v1internal:generateContent"

CLIENT_METADATA = {
    "ideType": "IDE_UNSPECIFIED",
    "platform": "PLATFORM_UNSPECIFIED",
    "pluginType": "GEMINI",
}

# Headers every Cloud Code call must carry
CLOUDCODE_HEADERS = {
    "User-Agent": "antigravity/1.11.5 darwin/arm64",
    "X-Goog-Api-Client": "google-cloud-sdk vscode_cloudshelleditor/0.1",
    "Client-Metadata": json.dumps(CLIENT_METADATA, separators=(",", ":")),
}

# Caller identity placed in every generateContent envelope
CLOUDCODE_USER_AGENT = "antigravity"

# Routing project used when discovery fails on every host
DEFAULT_PROJECT_ID = "rising-fact-p41fc"

# Frontend model name -> backend model name
MODEL_MAPPINGS = {
    "claude-3-opus-20240229": "claude-opus-4-5-thinking",
    "claude-3-5-opus-20240229": "claude-opus-4-5-thinking",
    "claude-3-5-sonnet-20241022": "claude-sonnet-4-5",
    "claude-3-5-sonnet-20240620": "claude-sonnet-4-5",
    "claude-3-sonnet-20240229": "claude-sonnet-4-5",
    "claude-sonnet-4-5": "claude-sonnet-4-5",
    "claude-sonnet-4-5-thinking": "claude-sonnet-4-5-thinking",
    "claude-opus-4-5-thinking": "claude-opus-4-5-thinking",
}

AVAILABLE_MODELS = [
    {
        "id": "claude-sonnet-4-5",
        "name": "Claude Sonnet 4.5 (Antigravity)",
        "description": "Claude Sonnet 4.5 via Antigravity Cloud Code",
        "context": 200000,
        "output": 64000,
    },
    {
        "id": "claude-sonnet-4-5-thinking",
        "name": "Claude Sonnet 4.5 Thinking (Antigravity)",
        "description": "Claude Sonnet 4.5 with extended thinking via Antigravity",
        "context": 200000,
        "output": 64000,
    },
    {
        "id": "claude-opus-4-5-thinking",
        "name": "Claude Opus 4.5 Thinking (Antigravity)",
        "description": "Claude Opus 4.5 with extended thinking via Antigravity",
        "context": 200000,
        "output": 64000,
    },
]
