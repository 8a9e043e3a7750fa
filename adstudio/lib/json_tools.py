import json
import re

def extract_json_block(text: str) -> str:
    """
    Best effort: strip markdown fences and return the outermost JSON object.
    Returns the input unchanged when nothing object-like is found, so the
    caller's validation reports the real problem.
    """
    s = (text or "").strip()
    if s.startswith("```"):
        s = re.sub(r"^```(?:json)?\s*", "", s, flags=re.IGNORECASE)
        s = re.sub(r"\s*```$", "", s)
    try:
        json.loads(s)
        return s
    except ValueError:
        pass
    m = re.search(r"\{.*\}", s, flags=re.DOTALL)
    return m.group(0) if m else s
