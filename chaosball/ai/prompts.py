"""
Prompt Templates

System instructions, request bodies and JSON response schemas for the
four generative calls behind the broadcast.
"""

from typing import Any

from chaosball.core.models import GameState


# =============================================================================
# PROMPTS
# =============================================================================

PLAY_SYSTEM_TEMPLATE = """You are the engine for 'ChaosBall', an AI sports network.
Current Game: {home} vs {away}.
Score: {home_score} - {away_score}.
Period: {quarter}. Time: {time_remaining}.

Generate the next play. It can be normal sports action or slightly chaotic/absurd (robots, magic, unexpected events).
Update the odds based on the new game state.
Provide a visual prompt for an image generator that captures the scene.
"""

PLAY_USER_PROMPT = "Simulate the next play. Return JSON."

SETUP_PROMPT_TEMPLATE = (
    'Create two fictional sports teams and a venue based on the theme: "{theme}". Return JSON.'
)

ARENA_PROMPT_TEMPLATE = "Wide shot of futuristic sports arena, {venue}, crowds cheering, neon lights."

REPLAY_PROMPT_TEMPLATE = (
    "Cinematic highlight replay of sports action: {prompt}. High quality, dynamic camera angle."
)

INTRO_COMMENTARY_TEMPLATE = "We are live from {venue}! {home} taking on {away}."


def build_play_system_prompt(state: GameState) -> str:
    """Interpolate the current snapshot so the model continues the story."""
    return PLAY_SYSTEM_TEMPLATE.format(
        home=state.home_team.name,
        away=state.away_team.name,
        home_score=state.home_score,
        away_score=state.away_score,
        quarter=state.quarter,
        time_remaining=state.time_remaining,
    )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

_TEAM_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "color": {"type": "STRING"},
        "mascot": {"type": "STRING"},
    },
    "required": ["name", "color", "mascot"],
}

MATCH_SETUP_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "home": _TEAM_SCHEMA,
        "away": _TEAM_SCHEMA,
        "venue": {"type": "STRING"},
    },
    "required": ["home", "away", "venue"],
}

PLAY_UPDATE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "homeScoreDelta": {"type": "INTEGER", "description": "Points scored by home team this play"},
        "awayScoreDelta": {"type": "INTEGER", "description": "Points scored by away team this play"},
        "timeElapsedSeconds": {"type": "INTEGER", "description": "Seconds elapsed during this play"},
        "playDescription": {"type": "STRING", "description": "Short technical description of the play"},
        "commentary": {"type": "STRING", "description": "Exciting color commentary, slightly unhinged"},
        "visualPrompt": {
            "type": "STRING",
            "description": (
                "Detailed visual description for an image generator. Focus on the action, "
                "the arena, and the visual style (photorealistic, cinematic)."
            ),
        },
        "isBigPlay": {
            "type": "BOOLEAN",
            "description": "True if this was a major scoring event or spectacular crash",
        },
        "newOdds": {
            "type": "OBJECT",
            "properties": {
                "homeWin": {"type": "NUMBER"},
                "awayWin": {"type": "NUMBER"},
                "overUnder": {"type": "NUMBER"},
            },
            "required": ["homeWin", "awayWin", "overUnder"],
        },
    },
    "required": [
        "homeScoreDelta",
        "awayScoreDelta",
        "timeElapsedSeconds",
        "playDescription",
        "commentary",
        "visualPrompt",
        "isBigPlay",
        "newOdds",
    ],
}


# =============================================================================
# REQUEST BODIES
# =============================================================================

def build_json_request(
    user: str,
    schema: dict[str, Any],
    system: str | None = None,
) -> dict[str, Any]:
    """Body for a structured (JSON schema) generateContent call."""
    body: dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": user}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
    }
    if system:
        body["systemInstruction"] = {"parts": [{"text": system}]}
    return body


def build_image_request(prompt: str) -> dict[str, Any]:
    """Body for a keyframe generateContent call."""
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
    }


def build_speech_request(text: str, voice_name: str) -> dict[str, Any]:
    """Body for a text-to-speech generateContent call."""
    return {
        "contents": [{"parts": [{"text": text}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice_name}}
            },
        },
    }


def build_video_request(prompt: str) -> dict[str, Any]:
    """Body for a predictLongRunning replay job."""
    return {
        "instances": [{"prompt": REPLAY_PROMPT_TEMPLATE.format(prompt=prompt)}],
        "parameters": {
            "numberOfVideos": 1,
            "resolution": "720p",
            "aspectRatio": "16:9",
        },
    }
