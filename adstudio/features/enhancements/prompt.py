# adstudio/features/enhancements/prompt.py
SYSTEM = (
    "You are a creative director for short advertising videos. "
    "Return STRICT JSON only: one object with 'music' (string), 'subtitles' (array of strings) "
    "and 'voice_over_script' (string). No extra text, no comments, no markdown."
)

def build_enhancement_prompt(*, scene: str) -> str:
    return f"""
An advertising video was generated from this scene description:
"{scene.strip()}"

Suggest the finishing touches for it:
* **music**: one background music style that fits the mood (genre, tempo, instruments).
* **subtitles**: 3 to 5 short on-screen subtitle lines, in the order they should appear.
* **voice_over_script**: a 2-3 sentence voice-over script, under 60 words, ready to be read aloud.

**JSON SCHEMA:**
```json
{{"music": "...", "subtitles": ["...", "..."], "voice_over_script": "..."}}
```""".strip()
